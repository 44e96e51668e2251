from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from hackapi.domain.exceptions import BadRequest, Forbidden, NotFound
from hackapi.domain.models.identity import Credentials
from hackapi.domain.models.link import LinkedEntity, Relation
from hackapi.domain.ports.notifier import NotifierPort
from hackapi.domain.ports.repository import RepositoryPort

Authorize = Callable[[RepositoryPort, LinkedEntity, Credentials], Awaitable[bool]]


async def is_member_of_team(repository: RepositoryPort, team: LinkedEntity, actor: Credentials) -> bool:
    return await repository.is_team_member(team.id, actor.user.id)


async def is_member_of_hack_team(repository: RepositoryPort, hack: LinkedEntity, actor: Credentials) -> bool:
    record = await repository.get_hack_by_hackid(hack.slug)
    if record is None or record.team_id is None:
        return False
    return await repository.is_team_member(record.team_id, actor.user.id)


@dataclass(frozen=True)
class Relationship:
    """Describes one parent -> children reference list and how it is guarded."""

    relation: Relation
    authorize: Authorize

    parent_key: str
    child_key: str
    payload_key: str

    add_event: str
    remove_event: str

    not_found: str
    forbidden: str
    already_linked: str
    unknown_children: str
    linked_elsewhere: str

    def payload(self, parent: LinkedEntity, child: LinkedEntity) -> Dict[str, object]:
        return {
            self.parent_key: parent.slug,
            "name": parent.name,
            self.payload_key: {
                self.child_key: child.slug,
                "name": child.name,
            },
        }


HACK_CHALLENGES = Relationship(
    relation=Relation.HACK_CHALLENGES,
    authorize=is_member_of_hack_team,
    parent_key="hackid",
    child_key="challengeid",
    payload_key="entry",
    add_event="hacks_update_challenges_add",
    remove_event="hacks_update_challenges_delete",
    not_found="Hack not found",
    forbidden="Only team members can change the challenges of a hack",
    already_linked="One or more challenges are already challenges of this hack",
    unknown_children="One or more of the specified challenges could not be found",
    linked_elsewhere="One or more of the specified challenges are already in a hack",
)

TEAM_ENTRIES = Relationship(
    relation=Relation.TEAM_ENTRIES,
    authorize=is_member_of_team,
    parent_key="teamid",
    child_key="hackid",
    payload_key="entry",
    add_event="teams_update_entries_add",
    remove_event="teams_update_entries_delete",
    not_found="Team not found",
    forbidden="Only team members can change the entries of a team",
    already_linked="One or more hacks are already entries of this team",
    unknown_children="One or more of the specified hacks could not be found",
    linked_elsewhere="One or more of the specified hacks are already in a team",
)

TEAM_MEMBERS = Relationship(
    relation=Relation.TEAM_MEMBERS,
    authorize=is_member_of_team,
    parent_key="teamid",
    child_key="userid",
    payload_key="member",
    add_event="teams_update_members_add",
    remove_event="teams_update_members_delete",
    not_found="Team not found",
    forbidden="Only team members can change the members of a team",
    already_linked="One or more users are already members of this team",
    unknown_children="One or more of the specified users could not be found",
    linked_elsewhere="One or more of the specified users are already in a team",
)


class RelationshipService:
    """
    Adds and removes children on a parent's ordered reference list.

    Every check runs over the whole batch before the single write, so a
    request either changes the list as asked or leaves it untouched. One
    event per changed child is emitted after the write.

    There is no transaction around read -> validate -> write: two concurrent
    adds of the same child to different parents can both pass the
    exclusivity check.
    """

    def __init__(self, relationship: Relationship, repository: RepositoryPort, notifier: NotifierPort):
        self.relationship = relationship
        self.repository = repository
        self.notifier = notifier
        self.logger = logging.getLogger(__name__)

    async def list_children(self, parent_slug: str) -> List[LinkedEntity]:
        parent = await self.repository.get_parent(self.relationship.relation, parent_slug)
        if parent is None:
            raise NotFound(self.relationship.not_found)
        return await self.repository.get_children(self.relationship.relation, parent.id)

    async def add(self, parent_slug: str, child_slugs: List[str], actor: Credentials) -> List[LinkedEntity]:
        rel = self.relationship
        parent, current = await self._load_authorized(parent_slug, actor)

        current_slugs = {child.slug for child in current}
        if any(slug in current_slugs for slug in child_slugs):
            raise BadRequest(rel.already_linked)

        found = await self.repository.find_children(rel.relation, child_slugs)
        if len(found) < len(child_slugs):
            raise BadRequest(rel.unknown_children)

        by_slug = {child.slug: child for child in found}
        children = [by_slug[slug] for slug in child_slugs]

        linked = await self.repository.find_linked_parents(rel.relation, [child.id for child in children])
        if linked:
            raise BadRequest(rel.linked_elsewhere)

        await self.repository.set_children(
            rel.relation,
            parent.id,
            [child.id for child in current] + [child.id for child in children],
        )

        for child in children:
            await self._emit(rel.add_event, parent, child)

        return children

    async def remove(self, parent_slug: str, child_slugs: List[str], actor: Credentials) -> List[LinkedEntity]:
        rel = self.relationship
        parent, current = await self._load_authorized(parent_slug, actor)

        requested = set(child_slugs)
        removed = [child for child in current if child.slug in requested]

        if len(removed) < len(child_slugs):
            raise BadRequest()

        remaining = [child for child in current if child.slug not in requested]
        await self.repository.set_children(rel.relation, parent.id, [child.id for child in remaining])

        for child in removed:
            await self._emit(rel.remove_event, parent, child)

        return removed

    async def _emit(self, event_name: str, parent: LinkedEntity, child: LinkedEntity) -> None:
        # the list is already written, a failed event must not fail the request
        try:
            await self.notifier.trigger(event_name, self.relationship.payload(parent, child), self.logger)
        except Exception:
            self.logger.exception(f"Failed to emit {event_name} for {parent.slug}/{child.slug}")

    async def _load_authorized(self, parent_slug: str, actor: Credentials):
        rel = self.relationship

        parent: Optional[LinkedEntity] = await self.repository.get_parent(rel.relation, parent_slug)
        if parent is None:
            raise NotFound(rel.not_found)

        if not await rel.authorize(self.repository, parent, actor):
            raise Forbidden(rel.forbidden)

        current = await self.repository.get_children(rel.relation, parent.id)
        return parent, current
