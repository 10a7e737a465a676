"""Review model."""

from sqlalchemy import Column, Float, String, Text

from foodie.db.base import Base
from foodie.models.columns import timestamp_type


class UserReview(Base):
    """At most one review per (user_id, place_id); updated in place."""

    __tablename__ = "user_reviews"

    user_id = Column(String(255), primary_key=True)
    place_id = Column(String(255), primary_key=True, index=True)
    rating = Column(Float, nullable=False)
    description = Column(Text)
    timestamp = Column(timestamp_type(), nullable=False)
