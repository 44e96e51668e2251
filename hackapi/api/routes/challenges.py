from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from hackapi.api.deps import get_challenge_service, get_credentials
from hackapi.api.schemas import ChallengeOut
from hackapi.domain.exceptions import ChallengeAlreadyExists, ChallengeNotFound
from hackapi.domain.models.identity import Credentials
from hackapi.domain.services.challenge_service import ChallengeService

router = APIRouter(prefix="/challenges", tags=["challenges"])


class ChallengeCreateIn(BaseModel):
    name: str


@router.post("", response_model=ChallengeOut, status_code=201)
async def create_challenge(
    payload: ChallengeCreateIn,
    credentials: Credentials = Depends(get_credentials),
    service: ChallengeService = Depends(get_challenge_service),
):
    try:
        challenge = await service.create_challenge(payload.name)
    except ChallengeAlreadyExists as e:
        raise HTTPException(status_code=409, detail=e.detail)
    return ChallengeOut.model_validate(challenge)


@router.get("", response_model=List[ChallengeOut])
async def list_challenges(
    name: Optional[str] = Query(None, alias="filter[name]"),
    service: ChallengeService = Depends(get_challenge_service),
):
    challenges = await service.list_challenges(name)
    return [ChallengeOut.model_validate(c) for c in challenges]


@router.get("/{challenge_id}", response_model=ChallengeOut)
async def get_challenge(
    challenge_id: str,
    service: ChallengeService = Depends(get_challenge_service),
):
    try:
        challenge = await service.get_challenge(challenge_id)
    except ChallengeNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    return ChallengeOut.model_validate(challenge)
