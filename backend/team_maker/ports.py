from __future__ import annotations

from typing import Any, Protocol

from .types import PlayerRow


class RosterGate(Protocol):
    def eligible_players(self, game_id: Any) -> list[PlayerRow]: ...


class TeamAssignmentStore(Protocol):
    def save_assignment(
        self,
        game_id: Any,
        team_a: list[PlayerRow],
        team_b: list[PlayerRow],
        meta: dict,
    ) -> None: ...

    def load_assignment(self, game_id: Any) -> dict | None: ...
