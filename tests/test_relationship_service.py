import asyncio

import pytest

from hackapi.domain.exceptions import BadRequest, Forbidden, NotFound
from hackapi.domain.models.link import Relation
from hackapi.domain.services.relationship_service import (
    HACK_CHALLENGES,
    TEAM_ENTRIES,
    TEAM_MEMBERS,
    RelationshipService,
)

from fakes import RecordingNotifier, add_challenge, add_hack, add_member, add_team


async def _hack_parent(repo, slug, actor):
    team = await add_team(repo, f"{slug}-team", [actor])
    return (await add_hack(repo, slug, team)).id


async def _team_parent(repo, slug, actor):
    return (await add_team(repo, slug, [actor])).id


async def _challenge_child(repo, slug):
    return (await add_challenge(repo, slug)).id


async def _hack_child(repo, slug):
    return (await add_hack(repo, slug)).id


ARRANGEMENTS = {
    "hack-challenges": (HACK_CHALLENGES, _hack_parent, _challenge_child),
    "team-entries": (TEAM_ENTRIES, _team_parent, _hack_child),
}


class World:
    """Parents and children for one relationship, all writable by `actor`."""

    def __init__(self, repo, notifier, relationship, make_parent, make_child):
        self.repo = repo
        self.notifier = notifier
        self.relationship = relationship
        self.make_parent = make_parent
        self.make_child = make_child
        self.service = RelationshipService(relationship, repo, notifier)
        self.actor = None
        self.parents = {}
        self.children = {}

    async def setup(self, parents, children, links=None):
        self.actor = await add_member(self.repo, "U0000ACTR", "actor")
        for slug in parents:
            self.parents[slug] = await self.make_parent(self.repo, slug, self.actor)
        for slug in children:
            self.children[slug] = await self.make_child(self.repo, slug)
        for parent, linked in (links or {}).items():
            await self.repo.set_children(
                self.relationship.relation, self.parents[parent], [self.children[c] for c in linked]
            )
        self.repo.writes = 0
        return self

    def slugs(self, parent):
        return self.repo.slugs(self.relationship.relation, self.parents[parent])

    def event_children(self):
        rel = self.relationship
        return [data[rel.payload_key][rel.child_key] for _, data in self.notifier.events]


@pytest.fixture(params=sorted(ARRANGEMENTS))
def world(request, repo, notifier):
    relationship, make_parent, make_child = ARRANGEMENTS[request.param]
    return World(repo, notifier, relationship, make_parent, make_child)


@pytest.mark.asyncio
async def test_add_appends_in_request_order(world):
    await world.setup(["p"], ["d", "e"])

    added = await world.service.add("p", ["d", "e"], world.actor)

    assert [c.slug for c in added] == ["d", "e"]
    assert world.slugs("p") == ["d", "e"]
    assert world.notifier.names() == [world.relationship.add_event] * 2
    assert world.event_children() == ["d", "e"]
    assert world.repo.writes == 1


@pytest.mark.asyncio
async def test_add_keeps_existing_children_first(world):
    await world.setup(["p"], ["a", "b", "c"], links={"p": ["b"]})

    await world.service.add("p", ["c", "a"], world.actor)

    assert world.slugs("p") == ["b", "c", "a"]
    assert world.event_children() == ["c", "a"]


@pytest.mark.asyncio
async def test_add_event_payload_names_parent_and_child(world):
    await world.setup(["p"], ["d"])

    await world.service.add("p", ["d"], world.actor)

    rel = world.relationship
    [(name, data)] = world.notifier.events
    assert name == rel.add_event
    assert data == {
        rel.parent_key: "p",
        "name": "P",
        "entry": {rel.child_key: "d", "name": "D"},
    }


@pytest.mark.asyncio
async def test_add_child_linked_to_other_parent_changes_nothing(world):
    await world.setup(["p", "q"], ["x", "y"], links={"q": ["y"]})

    with pytest.raises(BadRequest) as exc:
        await world.service.add("p", ["x", "y"], world.actor)

    assert exc.value.detail == world.relationship.linked_elsewhere
    assert world.slugs("p") == []
    assert world.slugs("q") == ["y"]
    assert world.notifier.events == []
    assert world.repo.writes == 0


@pytest.mark.asyncio
async def test_add_child_already_on_parent_is_rejected(world):
    await world.setup(["p"], ["a", "b"], links={"p": ["a"]})

    with pytest.raises(BadRequest) as exc:
        await world.service.add("p", ["b", "a"], world.actor)

    assert exc.value.detail == world.relationship.already_linked
    assert world.slugs("p") == ["a"]
    assert world.notifier.events == []


@pytest.mark.asyncio
async def test_add_unknown_child_is_rejected(world):
    await world.setup(["p"], ["a"])

    with pytest.raises(BadRequest) as exc:
        await world.service.add("p", ["a", "missing"], world.actor)

    assert exc.value.detail == world.relationship.unknown_children
    assert world.slugs("p") == []
    assert world.notifier.events == []


@pytest.mark.asyncio
async def test_add_duplicate_slug_in_request_is_rejected(world):
    await world.setup(["p"], ["a"])

    with pytest.raises(BadRequest):
        await world.service.add("p", ["a", "a"], world.actor)

    assert world.slugs("p") == []
    assert world.repo.writes == 0


@pytest.mark.asyncio
async def test_remove_emits_in_stored_order(world):
    await world.setup(["p"], ["a", "b", "c"], links={"p": ["a", "b", "c"]})

    removed = await world.service.remove("p", ["c", "a"], world.actor)

    assert [c.slug for c in removed] == ["a", "c"]
    assert world.slugs("p") == ["b"]
    assert world.notifier.names() == [world.relationship.remove_event] * 2
    assert world.event_children() == ["a", "c"]
    assert world.repo.writes == 1


@pytest.mark.asyncio
async def test_remove_with_one_unlinked_child_changes_nothing(world):
    await world.setup(["p"], ["a", "b", "c", "z"], links={"p": ["a", "b", "c"]})

    with pytest.raises(BadRequest):
        await world.service.remove("p", ["a", "z"], world.actor)

    assert world.slugs("p") == ["a", "b", "c"]
    assert world.notifier.events == []
    assert world.repo.writes == 0


@pytest.mark.asyncio
async def test_remove_twice_fails_the_second_time(world):
    await world.setup(["p"], ["a", "b"], links={"p": ["a", "b"]})

    await world.service.remove("p", ["a"], world.actor)
    with pytest.raises(BadRequest):
        await world.service.remove("p", ["a"], world.actor)

    assert world.slugs("p") == ["b"]
    assert len(world.notifier.events) == 1


@pytest.mark.asyncio
async def test_removed_child_can_join_another_parent(world):
    await world.setup(["p", "q"], ["a"], links={"p": ["a"]})

    await world.service.remove("p", ["a"], world.actor)
    await world.service.add("q", ["a"], world.actor)

    assert world.slugs("p") == []
    assert world.slugs("q") == ["a"]


@pytest.mark.asyncio
async def test_list_children_returns_stored_order(world):
    await world.setup(["p"], ["a", "b", "c"], links={"p": ["c", "a", "b"]})

    children = await world.service.list_children("p")

    assert [c.slug for c in children] == ["c", "a", "b"]
    assert [c.name for c in children] == ["C", "A", "B"]


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["add", "remove", "list_children"])
async def test_missing_parent_is_not_found(world, operation):
    await world.setup([], ["a"])
    call = getattr(world.service, operation)
    args = ("nope",) if operation == "list_children" else ("nope", ["a"], world.actor)

    with pytest.raises(NotFound) as exc:
        await call(*args)

    assert exc.value.detail == world.relationship.not_found


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["add", "remove"])
async def test_outsider_is_forbidden_before_children_are_checked(world, operation):
    await world.setup(["p"], ["a"])
    outsider = await add_member(world.repo, "U0000OUTS", "outsider")

    with pytest.raises(Forbidden) as exc:
        await getattr(world.service, operation)("p", ["missing"], outsider)

    assert exc.value.detail == world.relationship.forbidden
    assert world.repo.writes == 0


@pytest.mark.asyncio
async def test_concurrent_adds_of_one_child_to_two_parents_can_both_pass(world):
    await world.setup(["p", "q"], ["a"])

    await asyncio.gather(
        world.service.add("p", ["a"], world.actor),
        world.service.add("q", ["a"], world.actor),
    )

    # the exclusivity check and the write are not atomic
    assert world.slugs("p") == ["a"]
    assert world.slugs("q") == ["a"]
    assert len(world.notifier.events) == 2


@pytest.mark.asyncio
async def test_hack_without_owning_team_is_forbidden(repo, notifier):
    actor = await add_member(repo, "U0000ACTR", "actor")
    await add_hack(repo, "orphan")
    await add_challenge(repo, "c")
    service = RelationshipService(HACK_CHALLENGES, repo, notifier)

    with pytest.raises(Forbidden):
        await service.add("orphan", ["c"], actor)


@pytest.mark.asyncio
async def test_team_members_add_and_remove(repo, notifier):
    actor = await add_member(repo, "U0000ACTR", "actor")
    grace = await add_member(repo, "U0000GRCE", "grace")
    team = await add_team(repo, "crew", [actor])
    service = RelationshipService(TEAM_MEMBERS, repo, notifier)

    await service.add("crew", ["U0000GRCE"], actor)

    assert repo.slugs(Relation.TEAM_MEMBERS, team.id) == ["U0000ACTR", "U0000GRCE"]
    assert notifier.events == [(
        "teams_update_members_add",
        {"teamid": "crew", "name": "Crew", "member": {"userid": "U0000GRCE", "name": "grace"}},
    )]

    await service.remove("crew", ["U0000GRCE"], grace)

    assert repo.slugs(Relation.TEAM_MEMBERS, team.id) == ["U0000ACTR"]
    assert notifier.names()[-1] == "teams_update_members_delete"


@pytest.mark.asyncio
async def test_user_in_another_team_cannot_be_added(repo, notifier):
    actor = await add_member(repo, "U0000ACTR", "actor")
    grace = await add_member(repo, "U0000GRCE", "grace")
    crew = await add_team(repo, "crew", [actor])
    other = await add_team(repo, "other", [grace])
    service = RelationshipService(TEAM_MEMBERS, repo, notifier)

    with pytest.raises(BadRequest) as exc:
        await service.add("crew", ["U0000GRCE"], actor)

    assert exc.value.detail == TEAM_MEMBERS.linked_elsewhere
    assert repo.slugs(Relation.TEAM_MEMBERS, crew.id) == ["U0000ACTR"]
    assert repo.slugs(Relation.TEAM_MEMBERS, other.id) == ["U0000GRCE"]
    assert notifier.events == []


@pytest.mark.asyncio
async def test_failing_notifier_does_not_undo_or_fail_the_change(world):
    class FailingNotifier(RecordingNotifier):
        async def trigger(self, event_name, data, logger=None):
            await super().trigger(event_name, data, logger)
            raise RuntimeError("event sink down")

    await world.setup(["p"], ["a", "b"])
    notifier = FailingNotifier()
    service = RelationshipService(world.relationship, world.repo, notifier)

    await service.add("p", ["a", "b"], world.actor)
    assert world.slugs("p") == ["a", "b"]

    await service.remove("p", ["b"], world.actor)
    assert world.slugs("p") == ["a"]

    # every child still gets its event attempt
    assert notifier.names() == [world.relationship.add_event] * 2 + [world.relationship.remove_event]
