import logging
import math
from urllib.parse import urlparse

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from team_maker.ratings import ATTRIBUTES
from team_maker.utils import clamp, to_finite_float

from ..models import POSITIONS, Player
from ..utils import isoformat, now_utc

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = (
    "tg_id",
    "first_name",
    "last_name",
    "username",
    "display_name",
    "jersey_number",
    "position",
    "notes",
    "is_guest",
)
ADMIN_FIELDS = PUBLIC_FIELDS + ATTRIBUTES + ("disabled", "is_admin", "created_by")

DISPLAY_NAME_MAX = 40
GUEST_NAME_MAX = 60
NOTES_MAX = 500
GUEST_ID_ATTEMPTS = 3


def attribute_int(value, default: int = 5) -> int:
    number = to_finite_float(value)
    if number is None:
        return default
    return int(clamp(math.floor(number + 0.5), 1, 10))


def jersey(value) -> int | None:
    if value is None or value == "":
        return None
    number = to_finite_float(value)
    if number is None:
        return None
    number = int(number)
    if number < 0 or number > 99:
        return None
    return number


def clean_url(value) -> str | None:
    text = str(value or "").strip()
    if not text:
        return None
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return text


def clean_position(value) -> str:
    position = str(value or "F").strip().upper()
    return position if position in POSITIONS else "F"


def display_name(player: Player) -> str:
    for candidate in (player.display_name, player.first_name):
        if candidate and candidate.strip():
            return candidate.strip()
    if player.username and player.username.strip():
        return f"@{player.username.strip()}"
    return str(player.tg_id)


def player_to_dict(player: Player, with_ratings: bool = False) -> dict:
    fields = ADMIN_FIELDS if with_ratings else PUBLIC_FIELDS
    data = {name: getattr(player, name) for name in fields}
    data["name"] = display_name(player)
    if with_ratings:
        data["updated_at"] = isoformat(player.updated_at)
    return data


def public_row(row: dict) -> dict:
    """Strip a stored player row down to what non-admins may see."""
    data = {name: row.get(name) for name in PUBLIC_FIELDS}
    data["name"] = row.get("name") or str(row.get("tg_id"))
    return data


def apply_profile(player: Player, data: dict, admin_edit: bool = False) -> None:
    """Write a profile form onto a player row.

    The form is submitted whole, so absent attributes fall back to 5.
    Only admins may toggle ``disabled``.
    """
    name = str(data.get("display_name") or "").strip()[:DISPLAY_NAME_MAX]
    player.display_name = name or None
    player.jersey_number = jersey(data.get("jersey_number"))
    player.position = clean_position(data.get("position"))
    for attr in ATTRIBUTES:
        setattr(player, attr, attribute_int(data.get(attr)))
    player.notes = str(data.get("notes") or "")[:NOTES_MAX]
    if admin_edit:
        player.disabled = bool(data.get("disabled"))
    player.updated_at = now_utc()


def ensure_player(db, user_data: dict, admin_ids: frozenset[int]) -> Player:
    tg_id = int(user_data["id"])
    is_root_admin = tg_id in admin_ids
    player = db.query(Player).filter_by(tg_id=tg_id).one_or_none()
    if player is None:
        player = Player(tg_id=tg_id, is_admin=is_root_admin)
        db.add(player)
    player.first_name = user_data.get("first_name") or ""
    player.last_name = user_data.get("last_name") or ""
    player.username = user_data.get("username") or ""
    player.is_admin = bool(player.is_admin) or is_root_admin
    player.updated_at = now_utc()
    db.commit()
    return player


def next_guest_id(db) -> int:
    lowest = db.query(func.min(Player.tg_id)).scalar()
    if lowest is None or lowest >= 0:
        return -1
    return lowest - 1


def create_guest(db, data: dict, created_by: int) -> Player:
    """Insert a guest under the next free negative id.

    Concurrent inserts can claim the same id; the loser rolls back and retries.
    """
    name = str(data.get("display_name") or "").strip()[:GUEST_NAME_MAX] or "Гость"
    for attempt in range(1, GUEST_ID_ATTEMPTS + 1):
        guest_id = next_guest_id(db)
        guest = Player(
            tg_id=guest_id,
            display_name=name,
            is_guest=True,
            created_by=created_by,
            disabled=False,
            is_admin=False,
        )
        apply_profile(guest, {**data, "display_name": name})
        guest.display_name = name
        db.add(guest)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            if attempt == GUEST_ID_ATTEMPTS:
                raise
            logger.info("guest id %s already taken, retrying", guest_id)
            continue
        return guest
