"""Bookmark model."""

from sqlalchemy import Column, String

from foodie.db.base import Base
from foodie.models.columns import timestamp_type


class UserFavouritePlace(Base):
    """A user's bookmarked place, unique per (user_id, place_id)."""

    __tablename__ = "user_favourite_places"

    user_id = Column(String(255), primary_key=True)
    place_id = Column(String(255), primary_key=True)
    created_at = Column(timestamp_type(), nullable=False)
