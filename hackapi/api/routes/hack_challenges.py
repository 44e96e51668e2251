from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from hackapi.api.deps import get_credentials, get_hack_challenges_service
from hackapi.api.errors import to_http_exception
from hackapi.api.schemas import LinkedOut, RelationshipIn
from hackapi.domain.exceptions import DomainError
from hackapi.domain.models.identity import Credentials
from hackapi.domain.services.relationship_service import RelationshipService

router = APIRouter(prefix="/hacks/{hack_id}/challenges", tags=["hack challenges"])


def _challenge_ids(payload: RelationshipIn) -> List[str]:
    if any(identifier.type != "challenges" for identifier in payload.data):
        raise HTTPException(status_code=400, detail="Only challenges can be related to a hack")
    return payload.ids()


@router.get("", response_model=List[LinkedOut])
async def list_hack_challenges(
    hack_id: str,
    service: RelationshipService = Depends(get_hack_challenges_service),
):
    try:
        challenges = await service.list_children(hack_id)
    except DomainError as e:
        raise to_http_exception(e)
    return [LinkedOut(id=c.slug, name=c.name) for c in challenges]


@router.post("", status_code=204)
async def add_hack_challenges(
    hack_id: str,
    payload: RelationshipIn,
    credentials: Credentials = Depends(get_credentials),
    service: RelationshipService = Depends(get_hack_challenges_service),
):
    try:
        await service.add(hack_id, _challenge_ids(payload), credentials)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("", status_code=204)
async def delete_hack_challenges(
    hack_id: str,
    payload: RelationshipIn,
    credentials: Credentials = Depends(get_credentials),
    service: RelationshipService = Depends(get_hack_challenges_service),
):
    try:
        await service.remove(hack_id, _challenge_ids(payload), credentials)
    except DomainError as e:
        raise to_http_exception(e)
