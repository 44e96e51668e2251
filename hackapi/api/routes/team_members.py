from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from hackapi.api.deps import get_credentials, get_team_members_service
from hackapi.api.errors import to_http_exception
from hackapi.api.schemas import LinkedOut, RelationshipIn
from hackapi.domain.exceptions import DomainError
from hackapi.domain.models.identity import Credentials
from hackapi.domain.services.relationship_service import RelationshipService

router = APIRouter(prefix="/teams/{team_id}/members", tags=["team members"])


def _user_ids(payload: RelationshipIn) -> List[str]:
    if any(identifier.type != "users" for identifier in payload.data):
        raise HTTPException(status_code=400, detail="Only users can be members of a team")
    return payload.ids()


@router.get("", response_model=List[LinkedOut])
async def list_team_members(
    team_id: str,
    service: RelationshipService = Depends(get_team_members_service),
):
    try:
        members = await service.list_children(team_id)
    except DomainError as e:
        raise to_http_exception(e)
    return [LinkedOut(id=u.slug, name=u.name) for u in members]


@router.post("", status_code=204)
async def add_team_members(
    team_id: str,
    payload: RelationshipIn,
    credentials: Credentials = Depends(get_credentials),
    service: RelationshipService = Depends(get_team_members_service),
):
    try:
        await service.add(team_id, _user_ids(payload), credentials)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("", status_code=204)
async def delete_team_members(
    team_id: str,
    payload: RelationshipIn,
    credentials: Credentials = Depends(get_credentials),
    service: RelationshipService = Depends(get_team_members_service),
):
    try:
        await service.remove(team_id, _user_ids(payload), credentials)
    except DomainError as e:
        raise to_http_exception(e)
