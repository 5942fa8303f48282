from flask import Blueprint

from ..auth import is_admin, require_user
from ..db import get_db
from ..models import Player
from ..services.players import display_name, player_to_dict
from ..utils import ok

bp = Blueprint("players", __name__, url_prefix="/players")


@bp.get("")
def list_players():
    user = require_user()
    rows = get_db().query(Player).filter(Player.disabled.is_(False)).all()
    rows.sort(key=lambda p: display_name(p).lower())
    return ok({"players": [player_to_dict(p, with_ratings=is_admin(user)) for p in rows]})


@bp.get("/<int(signed=True):tg_id>")
def get_player(tg_id: int):
    user = require_user()
    player = get_db().query(Player).filter_by(tg_id=tg_id).one_or_none()
    if player is None:
        return ok({"player": None})
    return ok({"player": player_to_dict(player, with_ratings=is_admin(user))})
