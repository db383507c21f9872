import logging
import sys
from contextlib import asynccontextmanager
from collections.abc import Callable, Awaitable

from fastapi import FastAPI, Request, Response

from .api.account import acc_app
from .api.auth import auth_app
from .api.admin import admin_app
from .api.card import card_app
from .helper.config import settings
from .helper.db_helper import init_pool, close_pool

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_pool(app)
    yield
    await close_pool(app)


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.mount("/auth", auth_app)
app.mount("/account", acc_app)
app.mount("/card", card_app)
app.mount("/admin", admin_app)


@app.middleware("http")
async def attach_parent(request: Request, call_next: Callable[[Request], Awaitable[Response]]):
    request.state.parent = app
    response = await call_next(request)
    return response


@app.get("/health")
async def health():
    return {"status": "ok"}
