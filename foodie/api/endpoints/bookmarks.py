"""Bookmark endpoints."""

from fastapi import APIRouter, Depends

from foodie.db.session import get_repository
from foodie.schemas.bookmark import Bookmark, BookmarkRequest
from foodie.schemas.restaurant import Restaurant
from foodie.services.repository import PlacesRepository

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post("")
def bookmark_restaurant(payload: BookmarkRequest, repo: PlacesRepository = Depends(get_repository)) -> dict[str, str]:
    repo.bookmark_place(payload.user_id, payload.place_id)
    return {"message": "Successfully bookmarked restaurant"}


@router.delete("/remove")
def remove_bookmark(user_id: str, place_id: str, repo: PlacesRepository = Depends(get_repository)) -> dict[str, str]:
    repo.remove_bookmark(user_id, place_id)
    return {"message": "Successfully removed bookmarked restaurant"}


@router.get("/restaurants", response_model=list[Restaurant])
def favourite_restaurants(user_id: str, repo: PlacesRepository = Depends(get_repository)) -> list[Restaurant]:
    return repo.get_bookmarked_restaurants(user_id)


@router.get("", response_model=list[Bookmark])
def list_bookmarks(user_id: str, repo: PlacesRepository = Depends(get_repository)) -> list[Bookmark]:
    return repo.list_bookmarks(user_id)
