import logging

from flask import Blueprint, request

from team_maker import Assignment, generate_for_game, move_player, swap_players
from team_maker.edits import TEAMS

from ..auth import is_admin, require_user
from ..config import Config
from ..db import get_db
from ..services.assignments import SqlAssignmentStore
from ..services.roster import SqlRosterGate
from ..utils import err, ok

bp = Blueprint("teams", __name__, url_prefix="/teams")

logger = logging.getLogger(__name__)


def _game_id(data: dict) -> int:
    try:
        return int(data.get("game_id") or 0)
    except (TypeError, ValueError):
        return 0


@bp.post("/generate")
def generate():
    user = require_user()
    if not is_admin(user):
        return err("not_admin", 403)
    data = request.get_json(silent=True) or {}
    game_id = _game_id(data)
    if not game_id:
        return err("no_game_id", 400)

    db = get_db()
    result = generate_for_game(
        SqlRosterGate(db),
        SqlAssignmentStore(db),
        game_id,
        min_players=Config.MIN_PLAYERS_FOR_TEAMS,
    )
    meta = result.assignment.meta
    if result.saved:
        logger.info("teams generated for game %s: %d players, diff %.2f", game_id, meta.count, meta.diff)
    else:
        logger.info("teams not generated for game %s: %s", game_id, result.note)
    return ok(result.to_dict())


@bp.post("/manual")
def manual_edit():
    user = require_user()
    if not is_admin(user):
        return err("not_admin", 403)
    data = request.get_json(silent=True) or {}
    game_id = _game_id(data)
    if not game_id:
        return err("no_game_id", 400)

    db = get_db()
    store = SqlAssignmentStore(db)
    stored = store.load_assignment(game_id)
    if stored is None:
        return err("no_teams", 400)
    current = Assignment.from_dict(stored)

    op = data.get("op")
    if op == "move":
        player_id = data.get("tg_id")
        from_team = data.get("from")
        if player_id is None or from_team not in TEAMS:
            return err("bad_args", 400)
        edited = move_player(current, player_id, from_team)
    elif op == "swap":
        a_id = data.get("a_id")
        b_id = data.get("b_id")
        if a_id is None or b_id is None:
            return err("bad_args", 400)
        edited = swap_players(current, a_id, b_id)
    else:
        return err("bad_op", 400)

    store.save_assignment(game_id, edited.team_a, edited.team_b, edited.meta.to_dict())
    logger.info("teams for game %s edited by %s: %s", game_id, user.tg_id, op)
    return ok(edited.to_dict())
