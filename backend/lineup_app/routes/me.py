from flask import Blueprint, request

from ..auth import require_user
from ..db import get_db
from ..models import Player
from ..services.players import apply_profile, player_to_dict
from ..utils import ok

bp = Blueprint("me", __name__)


def _own_player(db, tg_id: int) -> Player:
    return db.query(Player).filter_by(tg_id=tg_id).one()


@bp.get("/me")
def get_me():
    user = require_user()
    player = _own_player(get_db(), user.tg_id)
    return ok({"player": player_to_dict(player, with_ratings=True), "is_admin": user.is_admin})


@bp.post("/me")
def update_me():
    user = require_user()
    db = get_db()
    data = request.get_json(silent=True) or {}
    player = _own_player(db, user.tg_id)
    apply_profile(player, data)
    db.commit()
    return ok({"player": player_to_dict(player, with_ratings=True)})
