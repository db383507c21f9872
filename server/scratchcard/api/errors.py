from fastapi import HTTPException

from ..engine.errors import (
    AuthorizationError,
    CardNotFound,
    InsufficientResourceError,
    LotteryError,
    StateConflictError,
    ValidationError,
)


def to_http(exc: LotteryError) -> HTTPException:
    if isinstance(exc, CardNotFound):
        return HTTPException(404, str(exc))
    if isinstance(exc, AuthorizationError):
        return HTTPException(403, str(exc))
    if isinstance(exc, StateConflictError):
        return HTTPException(409, str(exc))
    if isinstance(exc, (ValidationError, InsufficientResourceError)):
        return HTTPException(422, str(exc))
    return HTTPException(400, str(exc))
