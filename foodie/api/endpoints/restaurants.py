"""Cached restaurant lookup endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from foodie.db.session import get_repository
from foodie.schemas.restaurant import Restaurant
from foodie.services.repository import PlacesRepository

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("")
def get_restaurant(place_id: str, repo: PlacesRepository = Depends(get_repository)) -> dict:
    """Return a cached restaurant, or an empty object when unknown."""
    restaurant = repo.get_restaurant(place_id)
    return restaurant.model_dump() if restaurant else {}


@router.get("/search", response_model=list[Restaurant])
def search_restaurants(
    name: str = Query(..., min_length=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    repo: PlacesRepository = Depends(get_repository),
) -> list[Restaurant]:
    return repo.search_restaurants(name, limit)
