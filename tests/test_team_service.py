import pytest

from hackapi.domain.exceptions import TeamAlreadyExists, TeamNotEmpty, TeamNotFound, UserAlreadyInTeam
from hackapi.domain.models.link import Relation
from hackapi.domain.services.team_service import TeamService

from fakes import add_hack, add_member, add_team


@pytest.mark.asyncio
async def test_create_team_adds_actor_and_known_members(repo, notifier):
    actor = await add_member(repo, "U0000ACTR", "actor")
    await add_member(repo, "U0000GRCE", "grace")

    team = await TeamService(repo, notifier).create_team(
        "Night Owls", "Sleep is optional", ["U0000GRCE", "U0000NONE"], actor
    )

    assert team.teamid == "night-owls"
    assert repo.slugs(Relation.TEAM_MEMBERS, team.id) == ["U0000ACTR", "U0000GRCE"]
    assert notifier.events == [("teams_add", {
        "teamid": "night-owls",
        "name": "Night Owls",
        "motto": "Sleep is optional",
        "members": [
            {"userid": "U0000ACTR", "name": "actor"},
            {"userid": "U0000GRCE", "name": "grace"},
        ],
    })]


@pytest.mark.asyncio
async def test_create_team_with_taken_name_conflicts(repo, notifier):
    actor = await add_member(repo, "U0000ACTR", "actor")
    await add_team(repo, "night-owls")

    with pytest.raises(TeamAlreadyExists):
        await TeamService(repo, notifier).create_team("Night Owls", None, [], actor)

    assert notifier.events == []


@pytest.mark.asyncio
@pytest.mark.parametrize("listed", [["U0000GRCE"], []])
async def test_create_team_with_member_of_another_team_is_rejected(repo, notifier, listed):
    actor = await add_member(repo, "U0000ACTR", "actor")
    grace = await add_member(repo, "U0000GRCE", "grace")
    # either a listed member or the actor is already taken
    taken_by = grace if listed else actor
    await add_team(repo, "owls", [taken_by])

    with pytest.raises(UserAlreadyInTeam) as exc:
        await TeamService(repo, notifier).create_team("Larks", None, listed, actor)

    assert exc.value.teamids == ["owls"]
    assert [t.teamid for t in repo.teams.values()] == ["owls"]
    assert notifier.events == []


@pytest.mark.asyncio
async def test_list_teams_filters_by_name(repo, notifier):
    await add_team(repo, "zebras")
    await add_team(repo, "owls")
    await add_team(repo, "night-owls")

    service = TeamService(repo, notifier)

    assert [t.teamid for t in await service.list_teams()] == ["night-owls", "owls", "zebras"]
    assert [t.teamid for t in await service.list_teams("OWL")] == ["night-owls", "owls"]


@pytest.mark.asyncio
async def test_get_team_includes_members_and_entries(repo, notifier):
    actor = await add_member(repo, "U0000ACTR", "actor")
    team = await add_team(repo, "owls", [actor])
    hack = await add_hack(repo, "nest", team)
    await repo.set_children(Relation.TEAM_ENTRIES, team.id, [hack.id])

    found = await TeamService(repo, notifier).get_team("owls")

    assert [u.userid for u in found.members] == ["U0000ACTR"]
    assert [h.hackid for h in found.entries] == ["nest"]


@pytest.mark.asyncio
async def test_get_unknown_team_is_not_found(repo, notifier):
    with pytest.raises(TeamNotFound):
        await TeamService(repo, notifier).get_team("ghosts")


@pytest.mark.asyncio
async def test_delete_team_requires_no_members(repo, notifier):
    actor = await add_member(repo, "U0000ACTR", "actor")
    team = await add_team(repo, "owls", [actor])
    service = TeamService(repo, notifier)

    with pytest.raises(TeamNotEmpty):
        await service.delete_team("owls")

    await repo.set_children(Relation.TEAM_MEMBERS, team.id, [])
    await service.delete_team("owls")

    assert repo.teams == {}
    with pytest.raises(TeamNotFound):
        await service.delete_team("owls")
