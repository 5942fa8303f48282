import logging

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from ..models import TeamAssignment
from ..utils import isoformat, now_utc

logger = logging.getLogger(__name__)

_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


class SqlAssignmentStore:
    """One team assignment per game, replaced wholesale on every save."""

    def __init__(self, db) -> None:
        self.db = db

    def save_assignment(self, game_id: int, team_a: list, team_b: list, meta: dict) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"unsupported database dialect for team upsert: {dialect}")
        values = {
            "game_id": game_id,
            "team_a": list(team_a),
            "team_b": list(team_b),
            "meta": dict(meta),
            "generated_at": now_utc(),
        }
        stmt = insert(TeamAssignment).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[TeamAssignment.game_id],
            set_={
                "team_a": stmt.excluded.team_a,
                "team_b": stmt.excluded.team_b,
                "meta": stmt.excluded.meta,
                "generated_at": stmt.excluded.generated_at,
            },
        )
        self.db.execute(stmt)
        self.db.commit()
        logger.info("saved teams for game %s (%s players)", game_id, len(values["team_a"]) + len(values["team_b"]))

    def load_assignment(self, game_id: int) -> dict | None:
        row = self.db.query(TeamAssignment).filter_by(game_id=game_id).one_or_none()
        if row is None:
            return None
        return {
            "teamA": row.team_a or [],
            "teamB": row.team_b or [],
            "meta": row.meta or {},
            "generated_at": isoformat(row.generated_at),
        }
