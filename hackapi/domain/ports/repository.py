from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from hackapi.domain.models.identity import User, Attendee
from hackapi.domain.models.hack import Team, Hack, Challenge
from hackapi.domain.models.link import Relation, LinkedEntity


class DuplicateKeyError(Exception):
    """An insert was rejected by a unique constraint."""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"Duplicate {entity} (key='{key}')")


class RepositoryPort(ABC):
    # =========================
    # Users
    # =========================

    @abstractmethod
    async def get_user_by_userid(self, userid: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_users_by_userids(self, userids: List[str]) -> List[User]:
        pass

    @abstractmethod
    async def insert_user(self, user: User) -> None:
        """Raises DuplicateKeyError when the handle is already taken."""
        pass

    # =========================
    # Attendees
    # =========================

    @abstractmethod
    async def get_attendee_by_attendeeid(self, attendeeid: str) -> Optional[Attendee]:
        pass

    @abstractmethod
    async def get_attendee_by_slackid(self, slackid: str) -> Optional[Attendee]:
        pass

    @abstractmethod
    async def insert_attendee(self, attendee: Attendee) -> None:
        pass

    # =========================
    # Teams
    # =========================

    @abstractmethod
    async def insert_team(self, team: Team) -> None:
        """Stores the team together with its member list."""
        pass

    @abstractmethod
    async def get_team_by_teamid(self, teamid: str) -> Optional[Team]:
        pass

    @abstractmethod
    async def get_team_by_member(self, user_id: UUID) -> Optional[Team]:
        pass

    @abstractmethod
    async def list_teams(self, name_filter: Optional[str] = None) -> List[Team]:
        pass

    @abstractmethod
    async def delete_team(self, team_id: UUID) -> None:
        pass

    @abstractmethod
    async def is_team_member(self, team_id: UUID, user_id: UUID) -> bool:
        pass

    # =========================
    # Hacks
    # =========================

    @abstractmethod
    async def insert_hack(self, hack: Hack) -> None:
        pass

    @abstractmethod
    async def get_hack_by_hackid(self, hackid: str) -> Optional[Hack]:
        pass

    @abstractmethod
    async def list_hacks(self, name_filter: Optional[str] = None) -> List[Hack]:
        pass

    @abstractmethod
    async def delete_hack(self, hack_id: UUID) -> None:
        pass

    # =========================
    # Challenges
    # =========================

    @abstractmethod
    async def insert_challenge(self, challenge: Challenge) -> None:
        pass

    @abstractmethod
    async def get_challenge_by_challengeid(self, challengeid: str) -> Optional[Challenge]:
        pass

    @abstractmethod
    async def list_challenges(self, name_filter: Optional[str] = None) -> List[Challenge]:
        pass

    # =========================
    # Relations (ordered reference lists)
    # =========================

    @abstractmethod
    async def get_parent(self, relation: Relation, slug: str) -> Optional[LinkedEntity]:
        pass

    @abstractmethod
    async def get_children(self, relation: Relation, parent_id: UUID) -> List[LinkedEntity]:
        """Children of a parent in stored order."""
        pass

    @abstractmethod
    async def find_children(self, relation: Relation, slugs: List[str]) -> List[LinkedEntity]:
        """Child records matching the slugs, in no particular order."""
        pass

    @abstractmethod
    async def find_linked_parents(self, relation: Relation, child_ids: List[UUID]) -> List[LinkedEntity]:
        """Every parent whose list references any of the children."""
        pass

    @abstractmethod
    async def set_children(self, relation: Relation, parent_id: UUID, child_ids: List[UUID]) -> None:
        """Replaces the parent's whole child list in one write."""
        pass
