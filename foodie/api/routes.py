"""Root API router."""

from fastapi import APIRouter

from foodie.api.endpoints import bookmarks, places, reservations, restaurants, reviews, votes

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "ok"}


router.include_router(places.router)
router.include_router(restaurants.router)
router.include_router(bookmarks.router)
router.include_router(reviews.router)
router.include_router(reservations.router)
router.include_router(votes.router)
