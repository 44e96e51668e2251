from __future__ import annotations

from hackapi.domain.exceptions.base import Conflict, NotFound


class HackNotFound(NotFound):
    def __init__(self, hackid: str):
        self.hackid = hackid
        super().__init__("Hack not found")


class HackAlreadyExists(Conflict):
    def __init__(self, name: str):
        self.name = name
        super().__init__("Hack already exists")


class ChallengeNotFound(NotFound):
    def __init__(self, challengeid: str):
        self.challengeid = challengeid
        super().__init__("Challenge not found")


class ChallengeAlreadyExists(Conflict):
    def __init__(self, name: str):
        self.name = name
        super().__init__("Challenge already exists")
