from flask import Blueprint, request

from ..auth import is_admin, require_user
from ..db import get_db
from ..models import RSVP_STATUSES
from ..services.games import get_game
from ..services.roster import set_rsvp, set_rsvp_for_future_games
from ..utils import err, now_utc, ok

bp = Blueprint("rsvp", __name__, url_prefix="/rsvp")


@bp.post("")
def rsvp():
    user = require_user()
    data = request.get_json(silent=True) or {}
    try:
        game_id = int(data.get("game_id") or 0)
    except (TypeError, ValueError):
        game_id = 0
    status = str(data.get("status") or "").strip()
    if not game_id:
        return err("no_game_id", 400)
    if status not in RSVP_STATUSES:
        return err("bad_status", 400)

    db = get_db()
    game = get_game(db, game_id)
    if game is None:
        return err("game_not_found", 404)
    if not is_admin(user) and game.starts_at < now_utc():
        return err("game_closed", 403)

    set_rsvp(db, game_id, user.tg_id, status)
    return ok()


@bp.post("/bulk")
def rsvp_bulk():
    user = require_user()
    data = request.get_json(silent=True) or {}
    status = str(data.get("status") or "").strip()
    if status not in RSVP_STATUSES:
        return err("bad_status", 400)
    updated = set_rsvp_for_future_games(get_db(), user.tg_id, status)
    return ok({"games": updated})
