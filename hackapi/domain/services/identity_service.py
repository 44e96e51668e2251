from __future__ import annotations

import hmac
import logging
import re
from datetime import datetime
from typing import Optional
from uuid import uuid4

from hackapi.domain.models.identity import Attendee, Credentials, DirectoryProfile, User
from hackapi.domain.ports.directory import DirectoryLookupError, DirectoryPort
from hackapi.domain.ports.repository import DuplicateKeyError, RepositoryPort

SLACK_ID_PATTERN = re.compile(r"U[A-Z0-9]{8}")


class IdentityResolver:
    """
    Authenticates basic credentials into an attendee + user identity.

    The username is either an attendee's registration email or a Slack id.
    Users are created lazily the first time an attendee signs in; the unique
    index on `userid` turns a concurrent first sign-in into a re-fetch.
    """

    def __init__(self, repository: RepositoryPort, directory: DirectoryPort, password: str):
        self.repository = repository
        self.directory = directory
        self.password = password
        self.logger = logging.getLogger(__name__)

    async def authenticate(self, username: str, password: str) -> Optional[Credentials]:
        # no shared secret configured: nobody can sign in
        if not self.password:
            self.logger.warning("No attendee password is configured, rejecting sign-in")
            return None

        if not hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8")):
            return None

        if "@" in username:
            return await self._authenticate_by_email(username)
        return await self._authenticate_by_slack_id(username)

    async def _authenticate_by_email(self, email: str) -> Optional[Credentials]:
        self.logger.info(f'Finding attendee with email "{email}"...')
        attendee = await self.repository.get_attendee_by_attendeeid(email)

        if attendee is None:
            return None

        if not attendee.slackid:
            self.logger.warning(f'Attendee "{email}" has no Slack id')
            return None

        user = await self.find_or_create_user(attendee.slackid, None)

        if user is None:
            return None

        return Credentials.from_records(attendee, user)

    async def _authenticate_by_slack_id(self, slackid: str) -> Optional[Credentials]:
        if not SLACK_ID_PATTERN.fullmatch(slackid):
            self.logger.info(f'Invalid slackid: "{slackid}"')
            return None

        self.logger.info(f'Finding attendee with slackid "{slackid}"...')
        attendee = await self.repository.get_attendee_by_slackid(slackid)

        profile: Optional[DirectoryProfile] = None

        if attendee is None:
            self.logger.info(f'Looking up Slack API user for "{slackid}"...')
            try:
                profile = await self.directory.lookup(slackid)
            except DirectoryLookupError as e:
                self.logger.warning(str(e))
                return None

            self.logger.info(f'Found slackid "{slackid}" in Slack API with email "{profile.email}"')
            attendee = await self._attendee_for_profile(profile)

            if attendee is None:
                self.logger.warning(f'Attendee could not be found with email "{profile.email}"')
                return None

            self.logger.info(f'Found attendee for slackid "{slackid}" to be "{attendee.attendeeid}"')

        user = await self.find_or_create_user(slackid, profile)

        if user is None:
            return None

        return Credentials.from_records(attendee, user)

    async def _attendee_for_profile(self, profile: DirectoryProfile) -> Optional[Attendee]:
        if not profile.email:
            return None
        return await self.repository.get_attendee_by_attendeeid(profile.email)

    async def find_or_create_user(self, slackid: str, profile: Optional[DirectoryProfile]) -> Optional[User]:
        user = await self.repository.get_user_by_userid(slackid)
        if user is not None:
            return user

        if profile is None:
            try:
                profile = await self.directory.lookup(slackid)
            except DirectoryLookupError as e:
                self.logger.warning(str(e))
                return None

        user = User(
            id=uuid4(),
            userid=profile.id,
            name=profile.name,
            modified=datetime.utcnow(),
        )

        try:
            await self.repository.insert_user(user)
        except DuplicateKeyError:
            # another request created the user between our read and insert
            self.logger.info(f'User "{user.userid}" was created concurrently, re-fetching')
            existing = await self.repository.get_user_by_userid(user.userid)
            if existing is None:
                raise
            return existing

        self.logger.info(f'Created user "{user.userid}"')
        return user
