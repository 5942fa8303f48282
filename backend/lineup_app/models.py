from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

from .utils import now_utc

Base = declarative_base()

JsonType = JSON().with_variant(JSONB(), "postgresql")

RSVP_STATUSES = ("yes", "maybe", "no")
GAME_STATUSES = ("scheduled", "cancelled")
POSITIONS = ("F", "D", "G")


class Game(Base):
    __tablename__ = "games"
    id = Column(Integer, primary_key=True)
    starts_at = Column(DateTime, nullable=False)
    location = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="scheduled")
    video_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)
    updated_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (
        Index("idx_games_starts_at", "starts_at"),
        Index("idx_games_status", "status"),
    )


class Player(Base):
    __tablename__ = "players"
    tg_id = Column(BigInteger, primary_key=True, autoincrement=False)
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    username = Column(String, nullable=False, default="")
    display_name = Column(String, nullable=True)
    jersey_number = Column(Integer, nullable=True)
    position = Column(String, nullable=False, default="F")
    skill = Column(Integer, nullable=False, default=5)
    skating = Column(Integer, nullable=False, default=5)
    iq = Column(Integer, nullable=False, default=5)
    stamina = Column(Integer, nullable=False, default=5)
    passing = Column(Integer, nullable=False, default=5)
    shooting = Column(Integer, nullable=False, default=5)
    notes = Column(Text, nullable=False, default="")
    disabled = Column(Boolean, nullable=False, default=False)
    is_guest = Column(Boolean, nullable=False, default=False)
    created_by = Column(BigInteger, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=now_utc, nullable=False)
    updated_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (Index("idx_players_disabled", "disabled"),)


class Rsvp(Base):
    __tablename__ = "rsvps"
    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True)
    tg_id = Column(BigInteger, ForeignKey("players.tg_id", ondelete="CASCADE"), primary_key=True)
    status = Column(String, nullable=False)
    created_at = Column(DateTime, default=now_utc, nullable=False)
    updated_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (CheckConstraint("status IN ('yes', 'maybe', 'no')", name="rsvps_status_check"),)


class TeamAssignment(Base):
    __tablename__ = "teams"
    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True)
    team_a = Column(JsonType, nullable=False, default=list)
    team_b = Column(JsonType, nullable=False, default=list)
    meta = Column(JsonType, nullable=False, default=dict)
    generated_at = Column(DateTime, default=now_utc, nullable=False)
