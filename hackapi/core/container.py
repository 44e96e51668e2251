from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from hackapi.core.settings import Settings
from hackapi.domain.ports.directory import DirectoryPort
from hackapi.domain.ports.notifier import NotifierPort
from hackapi.domain.ports.repository import RepositoryPort
from hackapi.domain.services.challenge_service import ChallengeService
from hackapi.domain.services.hack_service import HackService
from hackapi.domain.services.identity_service import IdentityResolver
from hackapi.domain.services.relationship_service import (
    HACK_CHALLENGES,
    TEAM_ENTRIES,
    TEAM_MEMBERS,
    RelationshipService,
)
from hackapi.domain.services.team_service import TeamService
from hackapi.domain.services.user_service import UserService

from hackapi.infrastructure.database import create_engine, create_session_factory
from hackapi.infrastructure.adapters.directory.slack_adapter import SlackDirectory
from hackapi.infrastructure.adapters.notifier.log_notifier import LogNotifier
from hackapi.infrastructure.adapters.notifier.pusher_notifier import PusherNotifier
from hackapi.infrastructure.adapters.repository.sqlalchemy_repository import SQLAlchemyRepository


def build_notifier(settings: Settings) -> NotifierPort:
    if settings.pusher_url:
        return PusherNotifier(
            settings.pusher_url,
            channel=settings.pusher_channel,
            timeout=settings.pusher_timeout,
        )
    return LogNotifier()


class Container:
    def __init__(
        self,
        settings: Settings,
        repo: Optional[RepositoryPort] = None,
        directory: Optional[DirectoryPort] = None,
        notifier: Optional[NotifierPort] = None,
    ):
        self.settings = settings

        self.engine: Optional[AsyncEngine] = None
        if repo is None:
            self.engine = create_engine(settings.database_url)
            repo = SQLAlchemyRepository(create_session_factory(self.engine))

        self.repo = repo
        self.directory = directory or SlackDirectory(settings.slack_api_token, settings.slack_api_url)
        self.notifier = notifier or build_notifier(settings)

        self.identity = IdentityResolver(self.repo, self.directory, settings.hackbot_password)

        self.teams = TeamService(self.repo, self.notifier)
        self.hacks = HackService(self.repo, self.notifier)
        self.challenges = ChallengeService(self.repo, self.notifier)
        self.users = UserService(self.repo)

        self.hack_challenges = RelationshipService(HACK_CHALLENGES, self.repo, self.notifier)
        self.team_entries = RelationshipService(TEAM_ENTRIES, self.repo, self.notifier)
        self.team_members = RelationshipService(TEAM_MEMBERS, self.repo, self.notifier)
