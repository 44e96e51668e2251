from fastapi import APIRouter, Depends, HTTPException

from hackapi.api.deps import get_user_service
from hackapi.api.schemas import TeamOut, UserWithTeamOut
from hackapi.domain.exceptions import UserNotFound
from hackapi.domain.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserWithTeamOut)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    try:
        user, team = await service.get_user(user_id)
    except UserNotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)

    return UserWithTeamOut(
        userid=user.userid,
        name=user.name,
        team=TeamOut.model_validate(team) if team else None,
    )
