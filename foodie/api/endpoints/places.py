"""Places endpoints: nearby search with caching, photo and details proxies."""

import asyncio
from functools import partial
import threading

from fastapi import APIRouter, Depends, Query

from foodie.db.session import get_repository
from foodie.schemas.restaurant import PlacesSearchParams, Restaurant, RestaurantImage
from foodie.services.google_places import GooglePlacesClient, get_places_client
from foodie.services.places_normalizer import normalize_places
from foodie.services.repository import PlacesRepository

router = APIRouter(prefix="/places", tags=["places"])


async def _store_cancellable(repo: PlacesRepository, restaurants: list[Restaurant]) -> int:
    """Cache ``restaurants`` on a worker thread; stop retrying if the request is cancelled."""
    cancel = threading.Event()
    bound = repo.with_cancellation(cancel)
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, partial(bound.store_browsed_places, restaurants))
    except asyncio.CancelledError:
        cancel.set()
        raise


@router.get("", response_model=list[Restaurant])
async def search_nearby_places(
    params: PlacesSearchParams = Depends(),
    client: GooglePlacesClient = Depends(get_places_client),
    repo: PlacesRepository = Depends(get_repository),
) -> list[Restaurant]:
    """Proxy a nearby search and cache the normalized results."""
    payload = await client.nearby_search(
        location=params.location,
        radius=params.radius,
        place_type=params.type,
        minprice=params.minprice,
    )
    restaurants = normalize_places(payload)
    await _store_cancellable(repo, restaurants)
    return restaurants


@router.get("/photo", response_model=RestaurantImage)
async def get_place_photo(
    photo_reference: str = Query(..., min_length=1),
    client: GooglePlacesClient = Depends(get_places_client),
) -> RestaurantImage:
    """Resolve a photo reference to the image location it redirects to."""
    return RestaurantImage(image_url=await client.photo_url(photo_reference))


@router.get("/place-details")
async def get_place_details(
    place_id: str = Query(..., min_length=1),
    client: GooglePlacesClient = Depends(get_places_client),
) -> dict:
    """Pass the place details document through unchanged."""
    return await client.place_details(place_id)
