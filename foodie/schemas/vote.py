"""Schemas for voting history."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class VoteHistory(BaseModel):
    user_ids: list[str]
    # Shape is defined by the places API; stored as-is.
    voted_places: list[Any] = Field(default_factory=list)
    vote_timestamp: datetime


class VoteHistoryRequest(VoteHistory):
    user_ids: list[str] = Field(..., min_length=1)
