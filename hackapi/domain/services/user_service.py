from typing import Optional, Tuple

from hackapi.domain.exceptions import UserNotFound
from hackapi.domain.models.hack import Team
from hackapi.domain.models.identity import User
from hackapi.domain.ports.repository import RepositoryPort


class UserService:
    def __init__(self, repository: RepositoryPort):
        self.repository = repository

    async def get_user(self, userid: str) -> Tuple[User, Optional[Team]]:
        user = await self.repository.get_user_by_userid(userid)
        if user is None:
            raise UserNotFound(userid)

        team = await self.repository.get_team_by_member(user.id)
        return user, team
