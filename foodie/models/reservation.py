"""Reservation model."""

from sqlalchemy import Column, Integer, String

from foodie.db.base import Base
from foodie.models.columns import timestamp_type


class UserReservation(Base):
    """Reservation of a place; a user may hold several for the same place."""

    __tablename__ = "user_reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    place_id = Column(String(255), nullable=False)
    reservation_timestamp = Column(timestamp_type(), nullable=False)
    reservation_pax = Column(Integer, nullable=False)
