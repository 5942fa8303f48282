import logging

from flask import Blueprint, request

from ..auth import is_admin, is_env_admin, require_user
from ..config import Config
from ..db import get_db
from ..models import RSVP_STATUSES, Player
from ..services.games import get_game
from ..services.players import apply_profile, create_guest, display_name, player_to_dict
from ..services.roster import set_rsvp
from ..utils import err, now_utc, ok

bp = Blueprint("admin", __name__, url_prefix="/admin")

logger = logging.getLogger(__name__)


def _require_admin():
    user = require_user()
    if not is_admin(user):
        return None
    return user


@bp.get("/players")
def list_players():
    user = _require_admin()
    if user is None:
        return err("not_admin", 403)
    rows = get_db().query(Player).all()
    rows.sort(key=lambda p: display_name(p).lower())
    players = []
    for row in rows:
        env_admin = is_env_admin(row.tg_id, Config.ADMIN_IDS)
        item = player_to_dict(row, with_ratings=True)
        item["is_admin"] = bool(row.is_admin) or env_admin
        item["is_env_admin"] = env_admin
        players.append(item)
    return ok({"players": players, "is_super_admin": user.is_super_admin})


@bp.patch("/players/<int(signed=True):tg_id>")
def patch_player(tg_id: int):
    user = _require_admin()
    if user is None:
        return err("not_admin", 403)
    db = get_db()
    player = db.query(Player).filter_by(tg_id=tg_id).one_or_none()
    if player is None:
        return err("not_found", 404)
    apply_profile(player, request.get_json(silent=True) or {}, admin_edit=True)
    db.commit()
    logger.info("player %s updated by %s", tg_id, user.tg_id)
    return ok({"player": player_to_dict(player, with_ratings=True)})


@bp.post("/players/<int(signed=True):tg_id>/admin")
def set_admin(tg_id: int):
    user = require_user()
    if not user.is_super_admin:
        return err("not_super_admin", 403)
    db = get_db()
    player = db.query(Player).filter_by(tg_id=tg_id).one_or_none()
    if player is None:
        return err("not_found", 404)
    data = request.get_json(silent=True) or {}
    player.is_admin = bool(data.get("is_admin"))
    player.updated_at = now_utc()
    db.commit()
    logger.info("admin flag of %s set to %s by %s", tg_id, player.is_admin, user.tg_id)
    return ok()


@bp.delete("/players/<int(signed=True):tg_id>")
def delete_player(tg_id: int):
    user = _require_admin()
    if user is None:
        return err("not_admin", 403)
    db = get_db()
    player = db.query(Player).filter_by(tg_id=tg_id).one_or_none()
    if player is None:
        return err("not_found", 404)
    if not player.is_guest:
        return err("not_guest", 400)
    db.query(Player).filter_by(tg_id=tg_id).delete()
    db.commit()
    return ok()


@bp.post("/guests")
def add_guest():
    user = _require_admin()
    if user is None:
        return err("not_admin", 403)
    data = request.get_json(silent=True) or {}
    db = get_db()
    game_id = data.get("game_id")
    if game_id:
        try:
            game_id = int(game_id)
        except (TypeError, ValueError):
            return err("bad_game_id", 400)
        if get_game(db, game_id) is None:
            return err("bad_game_id", 400)

    guest = create_guest(db, data, created_by=user.tg_id)
    db.commit()
    status = str(data.get("status") or "yes")
    if game_id and status in RSVP_STATUSES:
        set_rsvp(db, game_id, guest.tg_id, status)
    logger.info("guest %s created by %s", guest.tg_id, user.tg_id)
    return ok({"guest": player_to_dict(guest, with_ratings=True)})


@bp.post("/rsvp")
def admin_rsvp():
    user = _require_admin()
    if user is None:
        return err("not_admin", 403)
    data = request.get_json(silent=True) or {}
    try:
        game_id = int(data.get("game_id") or 0)
        tg_id = int(data.get("tg_id") or 0)
    except (TypeError, ValueError):
        return err("bad_params", 400)
    status = str(data.get("status") or "").strip()
    if not game_id or not tg_id:
        return err("bad_params", 400)
    if status not in RSVP_STATUSES:
        return err("bad_status", 400)

    db = get_db()
    if get_game(db, game_id) is None:
        return err("bad_game_id", 400)
    if db.query(Player).filter_by(tg_id=tg_id).one_or_none() is None:
        return err("bad_player_id", 400)
    set_rsvp(db, game_id, tg_id, status)
    return ok()
