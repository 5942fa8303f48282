from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    attribute_default: float = 5.0
    attribute_min: float = 1.0
    attribute_max: float = 10.0

    min_players: int = 2
