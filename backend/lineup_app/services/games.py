from datetime import timedelta

from ..models import Game, Rsvp
from ..utils import isoformat, now_utc, parse_iso
from .players import clean_url
from .roster import rsvp_counts

SCOPES = ("upcoming", "past", "all")
PAST_AFTER = timedelta(hours=3)
NEXT_GAME_GRACE = timedelta(hours=6)


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def game_to_dict(game: Game) -> dict:
    return {
        "id": game.id,
        "starts_at": isoformat(game.starts_at),
        "location": game.location,
        "status": game.status,
        "video_url": game.video_url,
        "created_at": isoformat(game.created_at),
        "updated_at": isoformat(game.updated_at),
    }


def get_game(db, game_id: int) -> Game | None:
    return db.query(Game).filter_by(id=game_id).one_or_none()


def next_scheduled_game(db) -> Game | None:
    return (
        db.query(Game)
        .filter(Game.status == "scheduled", Game.starts_at >= now_utc() - NEXT_GAME_GRACE)
        .order_by(Game.starts_at.asc())
        .first()
    )


def list_games(
    db,
    tg_id: int,
    scope: str = "upcoming",
    limit: int | None = None,
    offset: int = 0,
    date_from: str | None = None,
    date_to: str | None = None,
    search: str | None = None,
    days: int | None = None,
) -> dict:
    if scope not in SCOPES:
        scope = "upcoming"
    default_limit = 10 if scope == "past" else 50
    limit = max(1, min(100, limit or default_limit))
    offset = max(0, offset)
    now = now_utc()

    query = db.query(Game)
    if scope == "past":
        query = query.filter(Game.starts_at < now - PAST_AFTER)
    elif scope == "upcoming":
        query = query.filter(Game.starts_at >= now - PAST_AFTER)
    start = parse_iso(date_from)
    if start is not None:
        query = query.filter(Game.starts_at >= start)
    end = parse_iso(date_to)
    if end is not None:
        query = query.filter(Game.starts_at < end + timedelta(days=1))
    if search:
        query = query.filter(Game.location.ilike(f"%{escape_like(search)}%", escape="\\"))
    if days and days > 0:
        query = query.filter(Game.starts_at >= now - timedelta(days=days))

    total = query.count()
    order = Game.starts_at.desc() if scope == "past" else Game.starts_at.asc()
    games = query.order_by(order).limit(limit).offset(offset).all()

    ids = [g.id for g in games]
    counts = rsvp_counts(db, ids)
    mine = {}
    if ids:
        mine = {
            r.game_id: r.status
            for r in db.query(Rsvp).filter(Rsvp.game_id.in_(ids), Rsvp.tg_id == tg_id).all()
        }
    items = [{**game_to_dict(g), **counts[g.id], "my_status": mine.get(g.id)} for g in games]
    return {"games": items, "total": total, "limit": limit, "offset": offset, "scope": scope}


def apply_game_patch(game: Game, data: dict) -> str | None:
    """Apply editable fields; returns an error code or None."""
    if data.get("starts_at"):
        starts_at = parse_iso(data["starts_at"])
        if starts_at is None:
            return "bad_starts_at"
        game.starts_at = starts_at
    if "location" in data:
        game.location = str(data.get("location") or "").strip()
    if data.get("status"):
        status = str(data["status"]).strip()
        if status not in ("scheduled", "cancelled"):
            return "bad_status"
        game.status = status
    if "video_url" in data:
        video_url = clean_url(data.get("video_url"))
        if data.get("video_url") and video_url is None:
            return "bad_video_url"
        game.video_url = video_url
    game.updated_at = now_utc()
    return None
