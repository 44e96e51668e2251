from hackapi.domain.exceptions.base import NotFound


class UserNotFound(NotFound):
    """Raised when no user exists for an external-directory handle."""

    def __init__(self, userid: str):
        self.userid = userid
        super().__init__("User not found")
