from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    userid: str
    name: str


class ChallengeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    challengeid: str
    name: str
    modified: Optional[datetime] = None


class HackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    hackid: str
    name: str
    modified: Optional[datetime] = None
    challenges: List[ChallengeOut] = []


class TeamOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    teamid: str
    name: str
    motto: Optional[str] = None
    modified: Optional[datetime] = None
    members: List[UserOut] = []
    entries: List[HackOut] = []


class UserWithTeamOut(BaseModel):
    userid: str
    name: str
    team: Optional[TeamOut] = None


class LinkedOut(BaseModel):
    id: str
    name: str


class ResourceIdentifier(BaseModel):
    type: str
    id: str


class RelationshipIn(BaseModel):
    data: List[ResourceIdentifier]

    def ids(self) -> List[str]:
        return [identifier.id for identifier in self.data]
