"""Schemas for user reviews."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RestaurantRating(BaseModel):
    user_id: str
    place_id: str
    rating: float
    description: Optional[str] = None
    timestamp: datetime


class ReviewRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    place_id: str = Field(..., min_length=1)
    rating: float = Field(..., ge=0, le=5)
    description: Optional[str] = Field(None, description="Free-text review")
