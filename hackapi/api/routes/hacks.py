from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from hackapi.api.deps import get_credentials, get_hack_service
from hackapi.api.schemas import HackOut
from hackapi.domain.exceptions import BadRequest, Forbidden, HackAlreadyExists, HackNotFound
from hackapi.domain.models.identity import Credentials
from hackapi.domain.services.hack_service import HackService

router = APIRouter(prefix="/hacks", tags=["hacks"])


class HackCreateIn(BaseModel):
    name: str
    team: str


@router.post("", response_model=HackOut, status_code=201)
async def create_hack(
    payload: HackCreateIn,
    credentials: Credentials = Depends(get_credentials),
    service: HackService = Depends(get_hack_service),
):
    try:
        hack = await service.create_hack(payload.name, payload.team, credentials)
    except BadRequest as e:
        raise HTTPException(status_code=400, detail=e.detail)
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=e.detail)
    except HackAlreadyExists as e:
        raise HTTPException(status_code=409, detail=e.detail)
    return HackOut.model_validate(hack)


@router.get("", response_model=List[HackOut])
async def list_hacks(
    name: Optional[str] = Query(None, alias="filter[name]"),
    service: HackService = Depends(get_hack_service),
):
    hacks = await service.list_hacks(name)
    return [HackOut.model_validate(h) for h in hacks]


@router.get("/{hack_id}", response_model=HackOut)
async def get_hack(
    hack_id: str,
    service: HackService = Depends(get_hack_service),
):
    try:
        hack = await service.get_hack(hack_id)
    except HackNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    return HackOut.model_validate(hack)


@router.delete("/{hack_id}", status_code=204)
async def delete_hack(
    hack_id: str,
    credentials: Credentials = Depends(get_credentials),
    service: HackService = Depends(get_hack_service),
):
    try:
        await service.delete_hack(hack_id, credentials)
    except HackNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=e.detail)
