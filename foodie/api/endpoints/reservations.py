"""Reservation endpoints."""

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends

from foodie.db.session import get_repository
from foodie.schemas.reservation import Reservation, ReservationRequest
from foodie.services.repository import PlacesRepository

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post("")
def add_reservation(payload: ReservationRequest, repo: PlacesRepository = Depends(get_repository)) -> dict[str, str]:
    repo.add_reservation(
        payload.user_id,
        payload.place_id,
        payload.reservation_time,
        payload.reservation_pax,
    )
    return {"message": "Successfully added reservation for restaurant"}


@router.delete("")
def delete_reservation(
    user_id: str,
    place_id: str,
    reservation_time: Optional[datetime] = None,
    repo: PlacesRepository = Depends(get_repository),
) -> dict[str, Any]:
    removed = repo.remove_reservation(user_id, place_id, reservation_time)
    return {"message": "Successfully removed reservation", "removed": removed}


@router.get("", response_model=list[Reservation])
def valid_reservations(user_id: str, repo: PlacesRepository = Depends(get_repository)) -> list[Reservation]:
    """Upcoming reservations only."""
    return repo.get_valid_reservations(user_id)


@router.get("/list", response_model=list[Reservation])
def all_reservations(user_id: str, repo: PlacesRepository = Depends(get_repository)) -> list[Reservation]:
    return repo.get_all_reservations(user_id)
