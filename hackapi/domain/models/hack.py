from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from hackapi.domain.models.identity import User


@dataclass(frozen=True)
class Challenge:
    id: UUID
    challengeid: str
    name: str
    modified: Optional[datetime] = None


@dataclass(frozen=True)
class Hack:
    id: UUID
    hackid: str
    name: str
    team_id: Optional[UUID] = None
    modified: Optional[datetime] = None
    challenges: List[Challenge] = field(default_factory=list)


@dataclass(frozen=True)
class Team:
    id: UUID
    teamid: str
    name: str
    motto: Optional[str] = None
    modified: Optional[datetime] = None
    members: List[User] = field(default_factory=list)
    entries: List[Hack] = field(default_factory=list)
