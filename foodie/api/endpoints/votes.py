"""Voting history endpoints."""

from fastapi import APIRouter, Depends

from foodie.db.session import get_repository
from foodie.schemas.vote import VoteHistory, VoteHistoryRequest
from foodie.services.repository import PlacesRepository

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("")
def persist_vote_history(payload: VoteHistoryRequest, repo: PlacesRepository = Depends(get_repository)) -> dict[str, str]:
    repo.store_vote_history(payload.user_ids, payload.voted_places, payload.vote_timestamp)
    return {"message": "Successfully persisted voting history record"}


@router.get("", response_model=list[VoteHistory])
def retrieve_vote_history(user_id: str, repo: PlacesRepository = Depends(get_repository)) -> list[VoteHistory]:
    return repo.get_user_vote_history(user_id)
