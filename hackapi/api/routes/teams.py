from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from hackapi.api.deps import get_credentials, get_team_service
from hackapi.api.schemas import TeamOut
from hackapi.domain.exceptions import TeamAlreadyExists, TeamNotEmpty, TeamNotFound, UserAlreadyInTeam
from hackapi.domain.models.identity import Credentials
from hackapi.domain.services.team_service import TeamService

router = APIRouter(prefix="/teams", tags=["teams"])


class TeamCreateIn(BaseModel):
    name: str
    motto: Optional[str] = None
    members: List[str] = []


@router.post("", response_model=TeamOut, status_code=201)
async def create_team(
    payload: TeamCreateIn,
    credentials: Credentials = Depends(get_credentials),
    service: TeamService = Depends(get_team_service),
):
    try:
        team = await service.create_team(payload.name, payload.motto, payload.members, credentials)
    except TeamAlreadyExists as e:
        raise HTTPException(status_code=409, detail=e.detail)
    except UserAlreadyInTeam as e:
        raise HTTPException(status_code=400, detail=e.detail)
    return TeamOut.model_validate(team)


@router.get("", response_model=List[TeamOut])
async def list_teams(
    name: Optional[str] = Query(None, alias="filter[name]"),
    service: TeamService = Depends(get_team_service),
):
    teams = await service.list_teams(name)
    return [TeamOut.model_validate(t) for t in teams]


@router.get("/{team_id}", response_model=TeamOut)
async def get_team(
    team_id: str,
    service: TeamService = Depends(get_team_service),
):
    try:
        team = await service.get_team(team_id)
    except TeamNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    return TeamOut.model_validate(team)


@router.delete("/{team_id}", status_code=204)
async def delete_team(
    team_id: str,
    credentials: Credentials = Depends(get_credentials),
    service: TeamService = Depends(get_team_service),
):
    try:
        await service.delete_team(team_id)
    except TeamNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except TeamNotEmpty as e:
        raise HTTPException(status_code=400, detail=e.detail)
