from typing import Any, List

from .config import Config
from .errors import PlayerNotInTeam
from .ratings import calc_rating
from .types import Assignment, BalanceMeta, PlayerRow
from .utils import player_key, to_finite_float

TEAMS = ("A", "B")


def ensure_rating(player: PlayerRow, cfg: Config = Config()) -> PlayerRow:
    rating = to_finite_float(player.get("rating"))
    if rating is None:
        rating = calc_rating(player, cfg)
    return {**player, "rating": rating}


def _index_of(team: List[PlayerRow], player_id: Any) -> int:
    target = str(player_id)
    for idx, player in enumerate(team):
        if player_key(player) == target:
            return idx
    return -1


def _rebuild(team_a: List[PlayerRow], team_b: List[PlayerRow], cfg: Config) -> Assignment:
    team_a = [ensure_rating(p, cfg) for p in team_a]
    team_b = [ensure_rating(p, cfg) for p in team_b]
    return Assignment(team_a=team_a, team_b=team_b, meta=BalanceMeta.from_teams(team_a, team_b))


def move_player(assignment: Assignment, player_id: Any, from_team: str, cfg: Config = Config()) -> Assignment:
    if from_team not in TEAMS:
        raise ValueError(f"unknown team {from_team!r}")
    team_a = list(assignment.team_a)
    team_b = list(assignment.team_b)
    src, dst = (team_a, team_b) if from_team == "A" else (team_b, team_a)

    idx = _index_of(src, player_id)
    if idx < 0:
        raise PlayerNotInTeam(player_id, from_team)
    dst.append(src.pop(idx))
    return _rebuild(team_a, team_b, cfg)


def swap_players(assignment: Assignment, a_id: Any, b_id: Any, cfg: Config = Config()) -> Assignment:
    """Exchange a player of team A with a player of team B, keeping their slots."""
    team_a = list(assignment.team_a)
    team_b = list(assignment.team_b)
    ia = _index_of(team_a, a_id)
    if ia < 0:
        raise PlayerNotInTeam(a_id, "A")
    ib = _index_of(team_b, b_id)
    if ib < 0:
        raise PlayerNotInTeam(b_id, "B")
    team_a[ia], team_b[ib] = team_b[ib], team_a[ia]
    return _rebuild(team_a, team_b, cfg)
