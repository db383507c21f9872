import logging

from fastapi import FastAPI, HTTPException, Request, Response

from ..helper.config import settings
from ..helper.jwt_helper import jwt_handler

auth_app = FastAPI()

logger = logging.getLogger(__name__)


def set_login_cookie(resp: Response, user_id: int) -> None:
    resp.set_cookie(
        "login",
        jwt_handler.create_user(user_id, ttl=settings.JWT_TTL_SECONDS),
        max_age=int(settings.JWT_TTL_SECONDS),
        httponly=True,
        path="/",
    )


@auth_app.post("/dev/login/{user_id:int}")
async def dev_login(user_id: int, response: Response):
    """
    Log in as any account id without an identity provider.

    Only served when DEV_LOGIN=1; production deployments hand out tokens signed
    with the same JWT_SECRET from their own login service.
    """
    if not settings.DEV_LOGIN:
        raise HTTPException(404, "Not Found")
    if user_id < 0:
        raise HTTPException(422, "Account id must be unsigned")
    logger.warning("Dev login issued for account %s", user_id)
    set_login_cookie(response, user_id)
    return {"status": "ok", "user_id": user_id}


@auth_app.get("/logout")
async def logout(response: Response):
    response.delete_cookie("login", path="/")
    return {"status": "ok"}


@auth_app.get("/status")
async def login_status(request: Request):
    data = request.cookies.get("login")
    if not data:
        return {"status": "error", "reason": "Not logged in"}
    if jwt_handler.verify(data):
        return {"status": "ok"}
    return {"status": "error", "reason": "Invalid token"}
