"""Schemas for reservations."""

from datetime import datetime

from pydantic import BaseModel, Field


class Reservation(BaseModel):
    user_id: str
    place_id: str
    reservation_timestamp: datetime
    reservation_pax: int


class ReservationRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    place_id: str = Field(..., min_length=1)
    reservation_time: datetime = Field(..., description="Epoch seconds or ISO timestamp")
    reservation_pax: int = Field(..., ge=1)
