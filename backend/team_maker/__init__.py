from .balancer import balance, rate_players
from .config import Config
from .edits import move_player, swap_players
from .errors import GameNotFound, PlayerNotInTeam, TeamMakerError
from .generation import NOT_ENOUGH_PLAYERS, generate_for_game
from .ports import RosterGate, TeamAssignmentStore
from .ratings import ATTRIBUTES, calc_rating
from .types import Assignment, BalanceMeta, GenerationResult

__all__ = [
    "ATTRIBUTES",
    "Assignment",
    "BalanceMeta",
    "Config",
    "GameNotFound",
    "GenerationResult",
    "NOT_ENOUGH_PLAYERS",
    "PlayerNotInTeam",
    "RosterGate",
    "TeamAssignmentStore",
    "TeamMakerError",
    "balance",
    "calc_rating",
    "generate_for_game",
    "move_player",
    "rate_players",
    "swap_players",
]
