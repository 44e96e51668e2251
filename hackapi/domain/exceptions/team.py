from hackapi.domain.exceptions.base import BadRequest, Conflict, NotFound


class TeamNotFound(NotFound):
    def __init__(self, teamid: str):
        self.teamid = teamid
        super().__init__("Team not found")


class TeamAlreadyExists(Conflict):
    def __init__(self, name: str):
        self.name = name
        super().__init__("Team already exists")


class TeamNotEmpty(BadRequest):
    def __init__(self, teamid: str):
        self.teamid = teamid
        super().__init__("Only empty teams can be deleted")


class UserAlreadyInTeam(BadRequest):
    def __init__(self, teamids):
        self.teamids = list(teamids)
        super().__init__("One or more of the specified users are already in a team")
