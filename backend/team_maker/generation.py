import logging
from typing import Any

from .balancer import balance
from .config import Config
from .ports import RosterGate, TeamAssignmentStore
from .types import Assignment, GenerationResult

logger = logging.getLogger(__name__)

NOT_ENOUGH_PLAYERS = "not_enough_players"


def generate_for_game(
    gate: RosterGate,
    store: TeamAssignmentStore,
    game_id: Any,
    min_players: int | None = None,
    cfg: Config = Config(),
) -> GenerationResult:
    threshold = cfg.min_players if min_players is None else min_players
    players = gate.eligible_players(game_id)
    if len(players) < threshold:
        logger.debug("game %s: %d eligible players, below %d", game_id, len(players), threshold)
        return GenerationResult(game_id=game_id, assignment=Assignment(), saved=False, note=NOT_ENOUGH_PLAYERS)

    assignment = balance(players, cfg)
    store.save_assignment(game_id, assignment.team_a, assignment.team_b, assignment.meta.to_dict())
    return GenerationResult(game_id=game_id, assignment=assignment, saved=True)
