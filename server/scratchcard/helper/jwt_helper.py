import logging

from fastapi import Request, HTTPException

from ..crypto.jwt_handler import JWTHandler
from .config import settings

jwt_handler = JWTHandler(settings.JWT_SECRET, settings.JWT_ISSUER)

logger = logging.getLogger(__name__)


class AuthError(HTTPException):
    def __init__(self, detail: str = "Unauthorized", status_code: int = 401):
        super().__init__(status_code=status_code, detail=detail)


def user_from_token(jwt_value: str) -> int:
    try:
        jwt_inner = jwt_handler.decode(jwt_value)
    except Exception:
        logger.error("Failed to decode JWT", exc_info=True)
        raise AuthError("Invalid token")
    user_id = jwt_inner.get("user_id")
    if user_id is None or isinstance(user_id, bool) or not isinstance(user_id, int):
        logger.warning("JWT without a usable user_id: %r", jwt_inner)
        raise AuthError("Invalid token")
    return user_id


async def get_user(
    request: Request,
) -> int:
    if not request.cookies.get("login"):
        if request.headers.get("X-API-KEY"):
            jwt_value = request.headers["X-API-KEY"]
        else:
            raise AuthError("Not logged in")
    else:
        jwt_value = request.cookies["login"]
    return user_from_token(jwt_value)
