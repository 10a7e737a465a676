"""Schemas for bookmarks."""

from datetime import datetime

from pydantic import BaseModel, Field


class BookmarkRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    place_id: str = Field(..., min_length=1)


class Bookmark(BookmarkRequest):
    created_at: datetime
