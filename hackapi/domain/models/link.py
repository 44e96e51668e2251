from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class Relation(str, Enum):
    """Ordered parent -> child reference lists the store keeps."""

    HACK_CHALLENGES = "hack_challenges"
    TEAM_ENTRIES = "team_entries"
    TEAM_MEMBERS = "team_members"


@dataclass(frozen=True)
class LinkedEntity:
    """Minimal view of either side of a relation: internal id, slug and name."""

    id: UUID
    slug: str
    name: str
