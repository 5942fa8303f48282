import json
import os
from datetime import timedelta
from urllib.parse import urlencode

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DEV_AUTH_BYPASS"] = "1"
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "test-bot-token")

import pytest

from lineup_app import create_app
from lineup_app.config import Config
from lineup_app.db import SessionLocal
from lineup_app.models import Game, Player, Rsvp
from lineup_app.schema import drop_schema
from lineup_app.utils import now_utc

ADMIN_ID = 1000
USER_ID = 2000


def init_header(tg_id: int, first_name: str = "Test") -> dict:
    user = json.dumps({"id": tg_id, "first_name": first_name}, separators=(",", ":"))
    return {"X-Telegram-InitData": urlencode({"user": user})}


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr(Config, "ADMIN_IDS", frozenset({ADMIN_ID}))
    monkeypatch.setattr(Config, "MIN_PLAYERS_FOR_TEAMS", 2)
    app = create_app()
    app.config["TESTING"] = True
    yield app
    SessionLocal.remove()
    drop_schema()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return init_header(ADMIN_ID, "Admin")


@pytest.fixture
def user_headers():
    return init_header(USER_ID, "Player")


@pytest.fixture
def db(app):
    session = SessionLocal()
    yield session
    SessionLocal.remove()


@pytest.fixture
def make_game(db):
    def _make(hours_from_now: float = 24, **fields) -> int:
        game = Game(starts_at=now_utc() + timedelta(hours=hours_from_now), **fields)
        db.add(game)
        db.commit()
        return game.id

    return _make


@pytest.fixture
def make_player(db):
    def _make(tg_id: int, **fields) -> int:
        db.add(Player(tg_id=tg_id, first_name=fields.pop("first_name", f"P{tg_id}"), **fields))
        db.commit()
        return tg_id

    return _make


@pytest.fixture
def make_rsvp(db):
    def _make(game_id: int, tg_id: int, status: str = "yes", **fields) -> None:
        db.add(Rsvp(game_id=game_id, tg_id=tg_id, status=status, **fields))
        db.commit()

    return _make
