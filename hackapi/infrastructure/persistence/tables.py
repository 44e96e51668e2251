from sqlalchemy import Column, DateTime, ForeignKey, Integer, Table, Text, Uuid
from sqlalchemy.orm import declarative_base
import uuid
from datetime import datetime

Base = declarative_base()

# Ordered reference lists. `position` keeps insertion order; there is no
# unique index on the child column, exclusivity is checked by the services.

team_members = Table(
    "team_members",
    Base.metadata,
    Column("team_id", Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("position", Integer, nullable=False),
)

team_entries = Table(
    "team_entries",
    Base.metadata,
    Column("team_id", Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("hack_id", Uuid(as_uuid=True), ForeignKey("hacks.id", ondelete="CASCADE"), primary_key=True),
    Column("position", Integer, nullable=False),
)

hack_challenges = Table(
    "hack_challenges",
    Base.metadata,
    Column("hack_id", Uuid(as_uuid=True), ForeignKey("hacks.id", ondelete="CASCADE"), primary_key=True),
    Column("challenge_id", Uuid(as_uuid=True), ForeignKey("challenges.id", ondelete="CASCADE"), primary_key=True),
    Column("position", Integer, nullable=False),
)

# --- MAIN TABLES ---

class UserTable(Base):
    __tablename__ = "users"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    userid = Column(Text, unique=True, nullable=False)
    name = Column(Text, nullable=False)
    modified = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class AttendeeTable(Base):
    __tablename__ = "attendees"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    attendeeid = Column(Text, unique=True, nullable=False)
    slackid = Column(Text, unique=True, nullable=True)

class TeamTable(Base):
    __tablename__ = "teams"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    teamid = Column(Text, unique=True, nullable=False)
    name = Column(Text, unique=True, nullable=False)
    motto = Column(Text, nullable=True)
    modified = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class HackTable(Base):
    __tablename__ = "hacks"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    hackid = Column(Text, unique=True, nullable=False)
    name = Column(Text, unique=True, nullable=False)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    modified = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class ChallengeTable(Base):
    __tablename__ = "challenges"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    challengeid = Column(Text, unique=True, nullable=False)
    name = Column(Text, unique=True, nullable=False)
    modified = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
