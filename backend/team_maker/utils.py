import math
from typing import Any, Mapping


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def to_finite_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def player_key(player: Mapping[str, Any]) -> str | None:
    ident = player.get("tg_id", player.get("id"))
    return None if ident is None else str(ident)
