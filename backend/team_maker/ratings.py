from typing import Any, Mapping

from .config import Config
from .utils import clamp, to_finite_float

ATTRIBUTES = ("skill", "skating", "iq", "stamina", "passing", "shooting")

# Per-mille weights; they add up to 1000 so the rating stays on the 1..10 scale.
# Integer weights keep the sum exact for integer attributes.
WEIGHTS_PER_MILLE = {
    "skill": 350,
    "skating": 150,
    "iq": 150,
    "stamina": 100,
    "passing": 125,
    "shooting": 125,
}

_DEFAULT_CONFIG = Config()


def attribute_value(raw: Any, cfg: Config = _DEFAULT_CONFIG) -> float:
    value = to_finite_float(raw)
    if value is None:
        return cfg.attribute_default
    return clamp(value, cfg.attribute_min, cfg.attribute_max)


def player_attributes(player: Mapping[str, Any], cfg: Config = _DEFAULT_CONFIG) -> dict[str, float]:
    return {name: attribute_value(player.get(name), cfg) for name in ATTRIBUTES}


def calc_rating(player: Mapping[str, Any], cfg: Config = _DEFAULT_CONFIG) -> float:
    """Weighted rating of a player on the same 1..10 scale as the attributes.

    Missing, null and non-numeric attributes count as a league-average 5;
    out-of-range values are clamped into [1, 10] first.
    """
    attrs = player_attributes(player, cfg)
    total = sum(WEIGHTS_PER_MILLE[name] * attrs[name] for name in ATTRIBUTES)
    return total / 1000
