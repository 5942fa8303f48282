from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PlayerRow = Dict[str, Any]


@dataclass(frozen=True)
class BalanceMeta:
    sum_a: float = 0.0
    sum_b: float = 0.0
    diff: float = 0.0
    count: int = 0

    @classmethod
    def from_teams(cls, team_a: List[PlayerRow], team_b: List[PlayerRow]) -> "BalanceMeta":
        sum_a = sum(p["rating"] for p in team_a)
        sum_b = sum(p["rating"] for p in team_b)
        return cls(sum_a=sum_a, sum_b=sum_b, diff=abs(sum_a - sum_b), count=len(team_a) + len(team_b))

    def to_dict(self) -> dict:
        return {"sumA": self.sum_a, "sumB": self.sum_b, "diff": self.diff, "count": self.count}


@dataclass(frozen=True)
class Assignment:
    team_a: List[PlayerRow] = field(default_factory=list)
    team_b: List[PlayerRow] = field(default_factory=list)
    meta: BalanceMeta = field(default_factory=BalanceMeta)

    @property
    def players(self) -> List[PlayerRow]:
        return self.team_a + self.team_b

    def to_dict(self) -> dict:
        return {
            "teamA": [dict(p) for p in self.team_a],
            "teamB": [dict(p) for p in self.team_b],
            "meta": self.meta.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Assignment":
        team_a = data.get("teamA", data.get("team_a")) or []
        team_b = data.get("teamB", data.get("team_b")) or []
        raw_meta = data.get("meta") or {}
        meta = BalanceMeta(
            sum_a=float(raw_meta.get("sumA", 0.0)),
            sum_b=float(raw_meta.get("sumB", 0.0)),
            diff=float(raw_meta.get("diff", 0.0)),
            count=int(raw_meta.get("count", len(team_a) + len(team_b))),
        )
        return cls(team_a=[dict(p) for p in team_a], team_b=[dict(p) for p in team_b], meta=meta)


@dataclass(frozen=True)
class GenerationResult:
    game_id: Any
    assignment: Assignment
    saved: bool
    note: Optional[str] = None

    def to_dict(self) -> dict:
        payload = self.assignment.to_dict()
        if self.note:
            payload["meta"]["note"] = self.note
        return payload
