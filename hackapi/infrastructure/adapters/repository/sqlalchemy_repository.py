from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import Table, delete, exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hackapi.domain.models.hack import Challenge, Hack, Team
from hackapi.domain.models.identity import Attendee, User
from hackapi.domain.models.link import LinkedEntity, Relation
from hackapi.domain.ports.repository import DuplicateKeyError, RepositoryPort
from hackapi.infrastructure.persistence.tables import (
    AttendeeTable,
    ChallengeTable,
    HackTable,
    TeamTable,
    UserTable,
    hack_challenges,
    team_entries,
    team_members,
)


@dataclass(frozen=True)
class _RelationTables:
    parent: Any
    parent_key: str
    child: Any
    child_key: str
    link: Table
    parent_fk: str
    child_fk: str


_RELATIONS: Dict[Relation, _RelationTables] = {
    Relation.HACK_CHALLENGES: _RelationTables(
        HackTable, "hackid", ChallengeTable, "challengeid", hack_challenges, "hack_id", "challenge_id"
    ),
    Relation.TEAM_ENTRIES: _RelationTables(
        TeamTable, "teamid", HackTable, "hackid", team_entries, "team_id", "hack_id"
    ),
    Relation.TEAM_MEMBERS: _RelationTables(
        TeamTable, "teamid", UserTable, "userid", team_members, "team_id", "user_id"
    ),
}


class SQLAlchemyRepository(RepositoryPort):
    """
    Store adapter over SQLAlchemy asyncio.

    Each call runs in its own session so that concurrent requests never
    share one; nothing spans more than a single call.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    # =========================
    # Users
    # =========================

    async def get_user_by_userid(self, userid: str) -> Optional[User]:
        async with self.session_factory() as session:
            row = (await session.execute(select(UserTable).filter_by(userid=userid))).scalars().first()
            return self._map_user(row) if row else None

    async def get_users_by_userids(self, userids: List[str]) -> List[User]:
        if not userids:
            return []
        async with self.session_factory() as session:
            rows = (await session.execute(select(UserTable).where(UserTable.userid.in_(userids)))).scalars().all()
        order = {userid: i for i, userid in enumerate(userids)}
        return [self._map_user(u) for u in sorted(rows, key=lambda u: order[u.userid])]

    async def insert_user(self, user: User) -> None:
        db_user = UserTable(id=user.id, userid=user.userid, name=user.name, modified=user.modified)
        await self._insert(db_user, "user", user.userid)

    # =========================
    # Attendees
    # =========================

    async def get_attendee_by_attendeeid(self, attendeeid: str) -> Optional[Attendee]:
        async with self.session_factory() as session:
            row = (await session.execute(select(AttendeeTable).filter_by(attendeeid=attendeeid))).scalars().first()
            return self._map_attendee(row) if row else None

    async def get_attendee_by_slackid(self, slackid: str) -> Optional[Attendee]:
        async with self.session_factory() as session:
            row = (await session.execute(select(AttendeeTable).filter_by(slackid=slackid))).scalars().first()
            return self._map_attendee(row) if row else None

    async def insert_attendee(self, attendee: Attendee) -> None:
        db_attendee = AttendeeTable(id=attendee.id, attendeeid=attendee.attendeeid, slackid=attendee.slackid)
        await self._insert(db_attendee, "attendee", attendee.attendeeid)

    # =========================
    # Teams
    # =========================

    async def insert_team(self, team: Team) -> None:
        async with self.session_factory() as session:
            session.add(
                TeamTable(
                    id=team.id,
                    teamid=team.teamid,
                    name=team.name,
                    motto=team.motto,
                    modified=team.modified,
                )
            )
            try:
                await session.flush()
            except IntegrityError:
                await session.rollback()
                raise DuplicateKeyError("team", team.teamid)

            if team.members:
                await session.execute(
                    team_members.insert(),
                    [
                        {"team_id": team.id, "user_id": u.id, "position": i}
                        for i, u in enumerate(team.members)
                    ],
                )
            await session.commit()

    async def get_team_by_teamid(self, teamid: str) -> Optional[Team]:
        async with self.session_factory() as session:
            row = (await session.execute(select(TeamTable).filter_by(teamid=teamid))).scalars().first()
            if not row:
                return None
            return await self._map_team(session, row)

    async def get_team_by_member(self, user_id: UUID) -> Optional[Team]:
        async with self.session_factory() as session:
            row = (
                await session.execute(
                    select(TeamTable)
                    .join(team_members, team_members.c.team_id == TeamTable.id)
                    .where(team_members.c.user_id == user_id)
                    .order_by(TeamTable.teamid)
                )
            ).scalars().first()
            if not row:
                return None
            return await self._map_team(session, row)

    async def list_teams(self, name_filter: Optional[str] = None) -> List[Team]:
        async with self.session_factory() as session:
            query = select(TeamTable).order_by(TeamTable.teamid)
            if name_filter:
                query = query.where(self._name_contains(TeamTable.name, name_filter))
            rows = (await session.execute(query)).scalars().all()
            return [await self._map_team(session, t) for t in rows]

    async def delete_team(self, team_id: UUID) -> None:
        async with self.session_factory() as session:
            await session.execute(delete(team_entries).where(team_entries.c.team_id == team_id))
            await session.execute(delete(team_members).where(team_members.c.team_id == team_id))
            # SQLite only honours ON DELETE SET NULL with foreign keys enabled
            await session.execute(update(HackTable).where(HackTable.team_id == team_id).values(team_id=None))
            await session.execute(delete(TeamTable).where(TeamTable.id == team_id))
            await session.commit()

    async def is_team_member(self, team_id: UUID, user_id: UUID) -> bool:
        async with self.session_factory() as session:
            query = select(
                exists().where(
                    team_members.c.team_id == team_id,
                    team_members.c.user_id == user_id,
                )
            )
            return bool((await session.execute(query)).scalar())

    # =========================
    # Hacks
    # =========================

    async def insert_hack(self, hack: Hack) -> None:
        db_hack = HackTable(
            id=hack.id,
            hackid=hack.hackid,
            name=hack.name,
            team_id=hack.team_id,
            modified=hack.modified,
        )
        await self._insert(db_hack, "hack", hack.hackid)

    async def get_hack_by_hackid(self, hackid: str) -> Optional[Hack]:
        async with self.session_factory() as session:
            row = (await session.execute(select(HackTable).filter_by(hackid=hackid))).scalars().first()
            if not row:
                return None
            return await self._map_hack(session, row)

    async def list_hacks(self, name_filter: Optional[str] = None) -> List[Hack]:
        async with self.session_factory() as session:
            query = select(HackTable).order_by(HackTable.hackid)
            if name_filter:
                query = query.where(self._name_contains(HackTable.name, name_filter))
            rows = (await session.execute(query)).scalars().all()
            return [await self._map_hack(session, h) for h in rows]

    async def delete_hack(self, hack_id: UUID) -> None:
        async with self.session_factory() as session:
            await session.execute(delete(hack_challenges).where(hack_challenges.c.hack_id == hack_id))
            await session.execute(delete(team_entries).where(team_entries.c.hack_id == hack_id))
            await session.execute(delete(HackTable).where(HackTable.id == hack_id))
            await session.commit()

    # =========================
    # Challenges
    # =========================

    async def insert_challenge(self, challenge: Challenge) -> None:
        db_challenge = ChallengeTable(
            id=challenge.id,
            challengeid=challenge.challengeid,
            name=challenge.name,
            modified=challenge.modified,
        )
        await self._insert(db_challenge, "challenge", challenge.challengeid)

    async def get_challenge_by_challengeid(self, challengeid: str) -> Optional[Challenge]:
        async with self.session_factory() as session:
            row = (await session.execute(select(ChallengeTable).filter_by(challengeid=challengeid))).scalars().first()
            return self._map_challenge(row) if row else None

    async def list_challenges(self, name_filter: Optional[str] = None) -> List[Challenge]:
        async with self.session_factory() as session:
            query = select(ChallengeTable).order_by(ChallengeTable.challengeid)
            if name_filter:
                query = query.where(self._name_contains(ChallengeTable.name, name_filter))
            rows = (await session.execute(query)).scalars().all()
            return [self._map_challenge(c) for c in rows]

    # =========================
    # Relations
    # =========================

    async def get_parent(self, relation: Relation, slug: str) -> Optional[LinkedEntity]:
        spec = _RELATIONS[relation]
        async with self.session_factory() as session:
            row = (
                await session.execute(
                    select(spec.parent).where(getattr(spec.parent, spec.parent_key) == slug)
                )
            ).scalars().first()
            return self._map_linked(row, spec.parent_key) if row else None

    async def get_children(self, relation: Relation, parent_id: UUID) -> List[LinkedEntity]:
        spec = _RELATIONS[relation]
        async with self.session_factory() as session:
            rows = await self._children(session, spec, parent_id)
            return [self._map_linked(r, spec.child_key) for r in rows]

    async def find_children(self, relation: Relation, slugs: List[str]) -> List[LinkedEntity]:
        if not slugs:
            return []
        spec = _RELATIONS[relation]
        async with self.session_factory() as session:
            rows = (
                await session.execute(
                    select(spec.child).where(getattr(spec.child, spec.child_key).in_(slugs))
                )
            ).scalars().all()
            return [self._map_linked(r, spec.child_key) for r in rows]

    async def find_linked_parents(self, relation: Relation, child_ids: List[UUID]) -> List[LinkedEntity]:
        if not child_ids:
            return []
        spec = _RELATIONS[relation]
        async with self.session_factory() as session:
            rows = (
                await session.execute(
                    select(spec.parent)
                    .join(spec.link, spec.link.c[spec.parent_fk] == spec.parent.id)
                    .where(spec.link.c[spec.child_fk].in_(child_ids))
                    .distinct()
                )
            ).scalars().all()
            return [self._map_linked(r, spec.parent_key) for r in rows]

    async def set_children(self, relation: Relation, parent_id: UUID, child_ids: List[UUID]) -> None:
        spec = _RELATIONS[relation]
        async with self.session_factory() as session:
            await session.execute(delete(spec.link).where(spec.link.c[spec.parent_fk] == parent_id))
            if child_ids:
                await session.execute(
                    spec.link.insert(),
                    [
                        {spec.parent_fk: parent_id, spec.child_fk: child_id, "position": i}
                        for i, child_id in enumerate(child_ids)
                    ],
                )
            await session.execute(
                update(spec.parent)
                .where(spec.parent.id == parent_id)
                .values(modified=datetime.utcnow())
            )
            await session.commit()

    # =========================
    # Private helpers / mappers
    # =========================

    async def _insert(self, row: Any, entity: str, key: str) -> None:
        async with self.session_factory() as session:
            session.add(row)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise DuplicateKeyError(entity, key)

    async def _children(self, session: AsyncSession, spec: _RelationTables, parent_id: UUID) -> List[Any]:
        result = await session.execute(
            select(spec.child)
            .join(spec.link, spec.link.c[spec.child_fk] == spec.child.id)
            .where(spec.link.c[spec.parent_fk] == parent_id)
            .order_by(spec.link.c.position)
        )
        return list(result.scalars().all())

    async def _map_team(self, session: AsyncSession, t: TeamTable) -> Team:
        members = await self._children(session, _RELATIONS[Relation.TEAM_MEMBERS], t.id)
        entries = await self._children(session, _RELATIONS[Relation.TEAM_ENTRIES], t.id)
        return Team(
            id=t.id,
            teamid=t.teamid,
            name=t.name,
            motto=t.motto,
            modified=t.modified,
            members=[self._map_user(u) for u in members],
            entries=[await self._map_hack(session, h) for h in entries],
        )

    async def _map_hack(self, session: AsyncSession, h: HackTable) -> Hack:
        challenges = await self._children(session, _RELATIONS[Relation.HACK_CHALLENGES], h.id)
        return Hack(
            id=h.id,
            hackid=h.hackid,
            name=h.name,
            team_id=h.team_id,
            modified=h.modified,
            challenges=[self._map_challenge(c) for c in challenges],
        )

    @staticmethod
    def _name_contains(column: Any, name_filter: str):
        return column.icontains(name_filter, autoescape=True)

    @staticmethod
    def _map_linked(row: Any, key: str) -> LinkedEntity:
        return LinkedEntity(id=row.id, slug=getattr(row, key), name=row.name)

    @staticmethod
    def _map_user(u: UserTable) -> User:
        return User(id=u.id, userid=u.userid, name=u.name, modified=u.modified)

    @staticmethod
    def _map_attendee(a: AttendeeTable) -> Attendee:
        return Attendee(id=a.id, attendeeid=a.attendeeid, slackid=a.slackid)

    @staticmethod
    def _map_challenge(c: ChallengeTable) -> Challenge:
        return Challenge(id=c.id, challengeid=c.challengeid, name=c.name, modified=c.modified)
