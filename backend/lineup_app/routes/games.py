import logging

from flask import Blueprint, request

from ..auth import is_admin, require_user
from ..db import get_db
from ..models import Game
from ..services.assignments import SqlAssignmentStore
from ..services.games import apply_game_patch, game_to_dict, get_game, list_games, next_scheduled_game
from ..services.players import clean_url, public_row
from ..services.roster import game_roster
from ..utils import err, ok, parse_iso

bp = Blueprint("games", __name__)

logger = logging.getLogger(__name__)


@bp.get("/games")
def games_list():
    user = require_user()
    args = request.args
    result = list_games(
        get_db(),
        user.tg_id,
        scope=args.get("scope", "upcoming"),
        limit=args.get("limit", type=int),
        offset=args.get("offset", 0, type=int),
        date_from=args.get("from"),
        date_to=args.get("to"),
        search=(args.get("q") or "").strip() or None,
        days=args.get("days", type=int),
    )
    return ok(result)


@bp.get("/game")
def game_details():
    user = require_user()
    db = get_db()
    game_id = request.args.get("game_id", type=int)
    game = get_game(db, game_id) if game_id else next_scheduled_game(db)
    if game is None:
        return ok({"game": None, "rsvps": [], "teams": None})

    rsvps = game_roster(db, game.id, with_ratings=is_admin(user))
    teams = SqlAssignmentStore(db).load_assignment(game.id)
    if teams is not None and not is_admin(user):
        teams = {
            **teams,
            "teamA": [public_row(p) for p in teams["teamA"]],
            "teamB": [public_row(p) for p in teams["teamB"]],
            "meta": {"count": len(teams["teamA"]) + len(teams["teamB"])},
        }
    return ok({"game": game_to_dict(game), "rsvps": rsvps, "teams": teams})


@bp.post("/games")
def create_game():
    user = require_user()
    if not is_admin(user):
        return err("not_admin", 403)
    data = request.get_json(silent=True) or {}
    starts_at = parse_iso(data.get("starts_at"))
    if starts_at is None:
        return err("bad_starts_at", 400)
    video_url = clean_url(data.get("video_url"))
    if data.get("video_url") and video_url is None:
        return err("bad_video_url", 400)

    db = get_db()
    game = Game(
        starts_at=starts_at,
        location=str(data.get("location") or "").strip(),
        status="scheduled",
        video_url=video_url,
    )
    db.add(game)
    db.commit()
    logger.info("game %s created by %s", game.id, user.tg_id)
    return ok({"game": game_to_dict(game)})


@bp.patch("/games/<int:game_id>")
def patch_game(game_id: int):
    user = require_user()
    if not is_admin(user):
        return err("not_admin", 403)
    db = get_db()
    game = get_game(db, game_id)
    if game is None:
        return err("game_not_found", 404)
    error = apply_game_patch(game, request.get_json(silent=True) or {})
    if error:
        db.rollback()
        return err(error, 400)
    db.commit()
    return ok({"game": game_to_dict(game)})


@bp.post("/games/<int:game_id>/status")
def set_game_status(game_id: int):
    user = require_user()
    if not is_admin(user):
        return err("not_admin", 403)
    data = request.get_json(silent=True) or {}
    status = str(data.get("status") or "").strip()
    if status not in ("scheduled", "cancelled"):
        return err("bad_status", 400)
    db = get_db()
    game = get_game(db, game_id)
    if game is None:
        return err("game_not_found", 404)
    apply_game_patch(game, {"status": status})
    db.commit()
    return ok({"game": game_to_dict(game)})


@bp.delete("/games/<int:game_id>")
def delete_game(game_id: int):
    user = require_user()
    if not is_admin(user):
        return err("not_admin", 403)
    db = get_db()
    db.query(Game).filter_by(id=game_id).delete()
    db.commit()
    logger.info("game %s deleted by %s", game_id, user.tg_id)
    return ok()
