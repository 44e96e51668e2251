from fastapi import HTTPException

from hackapi.domain.exceptions import BadRequest, Conflict, DomainError, Forbidden, NotFound

_STATUS_CODES = {
    BadRequest: 400,
    Forbidden: 403,
    NotFound: 404,
    Conflict: 409,
}


def to_http_exception(e: DomainError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(e, error_type):
            return HTTPException(status_code=status_code, detail=e.detail)
    return HTTPException(status_code=500, detail=e.detail)
