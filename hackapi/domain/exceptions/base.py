from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base class for errors a request handler maps onto a response code."""

    kind = "internal"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(detail or self.kind)


class NotFound(DomainError):
    kind = "not_found"


class Forbidden(DomainError):
    kind = "forbidden"


class Conflict(DomainError):
    kind = "conflict"


class BadRequest(DomainError):
    kind = "bad_request"
