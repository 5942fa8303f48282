import logging
from datetime import timedelta

from sqlalchemy import case, func

from team_maker.errors import GameNotFound

from ..models import RSVP_STATUSES, Game, Player, Rsvp
from ..utils import now_utc
from .players import player_to_dict

logger = logging.getLogger(__name__)

_STATUS_ORDER = {"yes": 1, "maybe": 2, "no": 3}


class SqlRosterGate:
    """Eligible players for a game: RSVP ``yes`` and not disabled.

    Rows come back in RSVP order (then tg_id) so repeated generations see the
    same input order.
    """

    def __init__(self, db) -> None:
        self.db = db

    def eligible_players(self, game_id: int) -> list[dict]:
        if self.db.query(Game.id).filter_by(id=game_id).one_or_none() is None:
            raise GameNotFound(game_id)
        rows = (
            self.db.query(Player)
            .join(Rsvp, Rsvp.tg_id == Player.tg_id)
            .filter(Rsvp.game_id == game_id, Rsvp.status == "yes", Player.disabled.is_(False))
            .order_by(Rsvp.created_at.asc(), Player.tg_id.asc())
            .all()
        )
        return [player_to_dict(row, with_ratings=True) for row in rows]


def set_rsvp(db, game_id: int, tg_id: int, status: str, commit: bool = True) -> None:
    """Upsert one RSVP; ``maybe`` clears the row instead of storing it."""
    if status not in RSVP_STATUSES:
        raise ValueError(f"bad rsvp status {status!r}")
    rsvp = db.query(Rsvp).filter_by(game_id=game_id, tg_id=tg_id).one_or_none()
    if status == "maybe":
        if rsvp is not None:
            db.delete(rsvp)
    elif rsvp is None:
        db.add(Rsvp(game_id=game_id, tg_id=tg_id, status=status))
    else:
        rsvp.status = status
        rsvp.updated_at = now_utc()
    if commit:
        db.commit()


def set_rsvp_for_future_games(db, tg_id: int, status: str) -> int:
    games = (
        db.query(Game)
        .filter(Game.status == "scheduled", Game.starts_at >= now_utc())
        .order_by(Game.starts_at.asc())
        .all()
    )
    for game in games:
        set_rsvp(db, game.id, tg_id, status, commit=False)
    db.commit()
    logger.info("bulk rsvp %s for player %s on %d games", status, tg_id, len(games))
    return len(games)


def game_roster(db, game_id: int, with_ratings: bool = False) -> list[dict]:
    """All active players with their status for a game; no RSVP reads as ``maybe``."""
    status = func.coalesce(Rsvp.status, "maybe")
    rows = (
        db.query(Player, status)
        .outerjoin(Rsvp, (Rsvp.tg_id == Player.tg_id) & (Rsvp.game_id == game_id))
        .filter(Player.disabled.is_(False))
        .all()
    )
    roster = []
    for player, rsvp_status in rows:
        item = player_to_dict(player, with_ratings=with_ratings)
        item["status"] = rsvp_status
        roster.append(item)
    if with_ratings:
        roster.sort(key=lambda p: (_STATUS_ORDER.get(p["status"], 9), -p["skill"], p["name"].lower()))
    else:
        roster.sort(key=lambda p: (_STATUS_ORDER.get(p["status"], 9), p["name"].lower()))
    return roster


def rsvp_counts(db, game_ids: list[int]) -> dict[int, dict]:
    if not game_ids:
        return {}
    rows = (
        db.query(
            Rsvp.game_id,
            func.sum(case((Rsvp.status == "yes", 1), else_=0)),
            func.sum(case((Rsvp.status == "maybe", 1), else_=0)),
            func.sum(case((Rsvp.status == "no", 1), else_=0)),
        )
        .filter(Rsvp.game_id.in_(game_ids))
        .group_by(Rsvp.game_id)
        .all()
    )
    counts = {gid: {"yes_count": 0, "maybe_count": 0, "no_count": 0} for gid in game_ids}
    for gid, yes, maybe, no in rows:
        counts[gid] = {"yes_count": int(yes or 0), "maybe_count": int(maybe or 0), "no_count": int(no or 0)}
    return counts


def attendance(db, days: int) -> list[dict]:
    """Per-player RSVP totals over past, non-cancelled games; ``days=0`` means all time."""
    now = now_utc()
    query = (
        db.query(Player, Rsvp.status)
        .join(Rsvp, Rsvp.tg_id == Player.tg_id)
        .join(Game, Game.id == Rsvp.game_id)
        .filter(Game.status != "cancelled", Game.starts_at < now, Player.disabled.is_(False))
    )
    if days > 0:
        query = query.filter(Game.starts_at >= now - timedelta(days=days))

    stats: dict[int, dict] = {}
    for player, status in query.all():
        row = stats.get(player.tg_id)
        if row is None:
            row = {
                "tg_id": player.tg_id,
                "name": player_to_dict(player)["name"],
                "position": player.position,
                "jersey_number": player.jersey_number,
                "is_guest": player.is_guest,
                "yes": 0,
                "maybe": 0,
                "no": 0,
                "total": 0,
            }
            stats[player.tg_id] = row
        row[status] += 1
        row["total"] += 1
    return sorted(stats.values(), key=lambda r: (-r["yes"], -r["maybe"], -r["total"], r["name"]))
