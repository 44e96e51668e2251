from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from hackapi.domain.exceptions import (
    BadRequest,
    Forbidden,
    HackAlreadyExists,
    HackNotFound,
)
from hackapi.domain.models.hack import Hack
from hackapi.domain.models.identity import Credentials
from hackapi.domain.ports.notifier import NotifierPort
from hackapi.domain.ports.repository import DuplicateKeyError, RepositoryPort
from hackapi.domain.slug import slugify


class HackService:
    def __init__(self, repository: RepositoryPort, notifier: NotifierPort):
        self.repository = repository
        self.notifier = notifier
        self.logger = logging.getLogger(__name__)

    async def create_hack(self, name: str, teamid: str, actor: Credentials) -> Hack:
        team = await self.repository.get_team_by_teamid(teamid)
        if team is None:
            raise BadRequest("Team does not exist")

        if not await self.repository.is_team_member(team.id, actor.user.id):
            raise Forbidden("Only team members can create a hack")

        hack = Hack(
            id=uuid4(),
            hackid=slugify(name),
            name=name,
            team_id=team.id,
            modified=datetime.utcnow(),
        )

        try:
            await self.repository.insert_hack(hack)
        except DuplicateKeyError:
            raise HackAlreadyExists(name)

        await self.notifier.trigger("hacks_add", {
            "hackid": hack.hackid,
            "name": hack.name,
            "team": {
                "teamid": team.teamid,
                "name": team.name,
                "motto": team.motto,
            },
        }, self.logger)

        return hack

    async def list_hacks(self, name_filter: Optional[str] = None) -> List[Hack]:
        return await self.repository.list_hacks(name_filter)

    async def get_hack(self, hackid: str) -> Hack:
        hack = await self.repository.get_hack_by_hackid(hackid)
        if hack is None:
            raise HackNotFound(hackid)
        return hack

    async def delete_hack(self, hackid: str, actor: Credentials) -> None:
        hack = await self.get_hack(hackid)

        if hack.team_id is None or not await self.repository.is_team_member(hack.team_id, actor.user.id):
            raise Forbidden("Only team members can delete a hack")

        await self.repository.delete_hack(hack.id)
