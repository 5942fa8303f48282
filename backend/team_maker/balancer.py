import logging
from typing import Any, Iterable, List, Mapping

from .config import Config
from .ratings import calc_rating
from .types import Assignment, BalanceMeta, PlayerRow

logger = logging.getLogger(__name__)


def rate_players(players: Iterable[Mapping[str, Any]], cfg: Config = Config()) -> List[PlayerRow]:
    return [{**player, "rating": calc_rating(player, cfg)} for player in players]


def balance(players: Iterable[Mapping[str, Any]], cfg: Config = Config()) -> Assignment:
    """Split players into two teams with close rating sums.

    Greedy: players go in rating-descending order to whichever team currently
    has the smaller sum, team A on ties. Equal ratings keep their input order.
    Positions are not taken into account.
    """
    rated = rate_players(players, cfg)
    ordered = sorted(rated, key=lambda p: p["rating"], reverse=True)

    team_a: List[PlayerRow] = []
    team_b: List[PlayerRow] = []
    sum_a = 0.0
    sum_b = 0.0
    for player in ordered:
        if sum_a <= sum_b:
            team_a.append(player)
            sum_a += player["rating"]
        else:
            team_b.append(player)
            sum_b += player["rating"]

    meta = BalanceMeta(sum_a=sum_a, sum_b=sum_b, diff=abs(sum_a - sum_b), count=len(rated))
    logger.debug("balanced %d players: sumA=%.3f sumB=%.3f", meta.count, sum_a, sum_b)
    return Assignment(team_a=team_a, team_b=team_b, meta=meta)
