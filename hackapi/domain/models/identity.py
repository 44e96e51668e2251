from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class User:
    id: UUID
    userid: str
    name: str
    modified: Optional[datetime] = None


@dataclass(frozen=True)
class Attendee:
    id: UUID
    attendeeid: str
    slackid: Optional[str] = None


@dataclass(frozen=True)
class DirectoryProfile:
    id: str
    name: str
    email: Optional[str] = None


@dataclass(frozen=True)
class AttendeeIdentity:
    id: UUID
    attendeeid: str


@dataclass(frozen=True)
class UserIdentity:
    id: UUID
    userid: str
    name: str


@dataclass(frozen=True)
class Credentials:
    attendee: AttendeeIdentity
    user: UserIdentity

    @classmethod
    def from_records(cls, attendee: Attendee, user: User) -> "Credentials":
        return cls(
            attendee=AttendeeIdentity(id=attendee.id, attendeeid=attendee.attendeeid),
            user=UserIdentity(id=user.id, userid=user.userid, name=user.name),
        )
