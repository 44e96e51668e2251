from .base import DomainError, NotFound, Forbidden, Conflict, BadRequest

from .team import (
    TeamNotFound,
    TeamAlreadyExists,
    TeamNotEmpty,
    UserAlreadyInTeam,
)

from .hack import (
    HackNotFound,
    HackAlreadyExists,
    ChallengeNotFound,
    ChallengeAlreadyExists,
)

from .user import UserNotFound

__all__ = [
    "DomainError",
    "NotFound",
    "Forbidden",
    "Conflict",
    "BadRequest",
    "TeamNotFound",
    "TeamAlreadyExists",
    "TeamNotEmpty",
    "UserAlreadyInTeam",
    "HackNotFound",
    "HackAlreadyExists",
    "ChallengeNotFound",
    "ChallengeAlreadyExists",
    "UserNotFound",
]
