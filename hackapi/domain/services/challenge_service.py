import logging
from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from hackapi.domain.exceptions import ChallengeAlreadyExists, ChallengeNotFound
from hackapi.domain.models.hack import Challenge
from hackapi.domain.ports.notifier import NotifierPort
from hackapi.domain.ports.repository import DuplicateKeyError, RepositoryPort
from hackapi.domain.slug import slugify


class ChallengeService:
    def __init__(self, repository: RepositoryPort, notifier: NotifierPort):
        self.repository = repository
        self.notifier = notifier
        self.logger = logging.getLogger(__name__)

    async def create_challenge(self, name: str) -> Challenge:
        challenge = Challenge(
            id=uuid4(),
            challengeid=slugify(name),
            name=name,
            modified=datetime.utcnow(),
        )

        try:
            await self.repository.insert_challenge(challenge)
        except DuplicateKeyError:
            raise ChallengeAlreadyExists(name)

        await self.notifier.trigger("challenges_add", {
            "challengeid": challenge.challengeid,
            "name": challenge.name,
        }, self.logger)

        return challenge

    async def list_challenges(self, name_filter: Optional[str] = None) -> List[Challenge]:
        return await self.repository.list_challenges(name_filter)

    async def get_challenge(self, challengeid: str) -> Challenge:
        challenge = await self.repository.get_challenge_by_challengeid(challengeid)
        if challenge is None:
            raise ChallengeNotFound(challengeid)
        return challenge
