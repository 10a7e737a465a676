"""Review endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from foodie.db.session import get_repository
from foodie.schemas.review import RestaurantRating, ReviewRequest
from foodie.services.repository import PlacesRepository

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("")
def add_review(payload: ReviewRequest, repo: PlacesRepository = Depends(get_repository)) -> dict[str, str]:
    repo.add_user_review(payload.user_id, payload.place_id, payload.rating, payload.description)
    return {"message": "Successfully added review for the restaurant"}


@router.put("")
def update_review(payload: ReviewRequest, repo: PlacesRepository = Depends(get_repository)) -> dict[str, str]:
    updated = repo.update_user_review(payload.user_id, payload.place_id, payload.rating, payload.description)
    if not updated:
        raise HTTPException(status_code=404, detail="No review found for this restaurant")
    return {"message": "Successfully updated review for restaurant"}


@router.delete("")
def remove_review(user_id: str, place_id: str, repo: PlacesRepository = Depends(get_repository)) -> dict[str, str]:
    repo.remove_user_review(user_id, place_id)
    return {"message": "Successfully removed review for restaurant"}


@router.get("/user", response_model=list[RestaurantRating])
def user_reviews(user_id: str, repo: PlacesRepository = Depends(get_repository)) -> list[RestaurantRating]:
    return repo.get_user_reviews(user_id)


@router.get("/restaurant", response_model=list[RestaurantRating])
def restaurant_reviews(place_id: str, repo: PlacesRepository = Depends(get_repository)) -> list[RestaurantRating]:
    return repo.get_restaurant_reviews(place_id)
