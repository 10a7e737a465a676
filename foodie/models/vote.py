"""Voting history model."""

from sqlalchemy import JSON, Column, Integer
from sqlalchemy.dialects.postgresql import JSONB

from foodie.db.base import Base
from foodie.models.columns import timestamp_type

JsonDocument = JSON().with_variant(JSONB(), "postgresql")


class VotingHistory(Base):
    """One voting session: participants plus the places voted on (opaque JSON)."""

    __tablename__ = "voting_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_ids = Column(JsonDocument, nullable=False)
    voted_places = Column(JsonDocument, nullable=False)
    vote_timestamp = Column(timestamp_type(), nullable=False)
