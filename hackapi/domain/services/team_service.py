from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from hackapi.domain.exceptions import TeamAlreadyExists, TeamNotEmpty, TeamNotFound, UserAlreadyInTeam
from hackapi.domain.models.hack import Team
from hackapi.domain.models.identity import Credentials
from hackapi.domain.models.link import Relation
from hackapi.domain.ports.notifier import NotifierPort
from hackapi.domain.ports.repository import DuplicateKeyError, RepositoryPort
from hackapi.domain.slug import slugify


class TeamService:
    def __init__(self, repository: RepositoryPort, notifier: NotifierPort):
        self.repository = repository
        self.notifier = notifier
        self.logger = logging.getLogger(__name__)

    async def create_team(
        self,
        name: str,
        motto: Optional[str],
        member_userids: List[str],
        actor: Credentials,
    ) -> Team:
        userids = list(member_userids)
        if actor.user.userid not in userids:
            userids.append(actor.user.userid)

        users = await self.repository.get_users_by_userids(userids)

        # a user belongs to at most one team
        taken = await self.repository.find_linked_parents(Relation.TEAM_MEMBERS, [u.id for u in users])
        if taken:
            raise UserAlreadyInTeam(t.slug for t in taken)

        team = Team(
            id=uuid4(),
            teamid=slugify(name),
            name=name,
            motto=motto or None,
            modified=datetime.utcnow(),
            members=users,
        )

        try:
            await self.repository.insert_team(team)
        except DuplicateKeyError:
            raise TeamAlreadyExists(name)

        await self.notifier.trigger("teams_add", {
            "teamid": team.teamid,
            "name": team.name,
            "motto": team.motto,
            "members": [{"userid": u.userid, "name": u.name} for u in users],
        }, self.logger)

        return team

    async def list_teams(self, name_filter: Optional[str] = None) -> List[Team]:
        return await self.repository.list_teams(name_filter)

    async def get_team(self, teamid: str) -> Team:
        team = await self.repository.get_team_by_teamid(teamid)
        if team is None:
            raise TeamNotFound(teamid)
        return team

    async def delete_team(self, teamid: str) -> None:
        team = await self.get_team(teamid)
        if team.members:
            raise TeamNotEmpty(teamid)
        await self.repository.delete_team(team.id)
