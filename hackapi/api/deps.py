from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from hackapi.core.container import Container
from hackapi.core.settings import Settings
from hackapi.domain.models.identity import Credentials
from hackapi.domain.services.challenge_service import ChallengeService
from hackapi.domain.services.hack_service import HackService
from hackapi.domain.services.identity_service import IdentityResolver
from hackapi.domain.services.relationship_service import RelationshipService
from hackapi.domain.services.team_service import TeamService
from hackapi.domain.services.user_service import UserService

basic = HTTPBasic(realm="Attendee access")


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_container() -> Container:
    return Container(get_settings())


def get_identity_resolver(container: Container = Depends(get_container)) -> IdentityResolver:
    return container.identity


async def get_credentials(
    basic_credentials: HTTPBasicCredentials = Depends(basic),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> Credentials:
    credentials = await resolver.authenticate(basic_credentials.username, basic_credentials.password)
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bad username or password",
            headers={"WWW-Authenticate": 'Basic realm="Attendee access"'},
        )
    return credentials


def get_team_service(container: Container = Depends(get_container)) -> TeamService:
    return container.teams


def get_hack_service(container: Container = Depends(get_container)) -> HackService:
    return container.hacks


def get_challenge_service(container: Container = Depends(get_container)) -> ChallengeService:
    return container.challenges


def get_user_service(container: Container = Depends(get_container)) -> UserService:
    return container.users


def get_hack_challenges_service(container: Container = Depends(get_container)) -> RelationshipService:
    return container.hack_challenges


def get_team_entries_service(container: Container = Depends(get_container)) -> RelationshipService:
    return container.team_entries


def get_team_members_service(container: Container = Depends(get_container)) -> RelationshipService:
    return container.team_members
