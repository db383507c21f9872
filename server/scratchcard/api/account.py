from typing import Annotated

from typing_extensions import TypedDict

from fastapi import FastAPI, APIRouter, Depends, HTTPException, status

from ..database.account import (
    AccountNotExistError,
    account_exists,
    create_account,
    get_account_by_id,
)
from ..database.transact import list_account_transactions
from ..helper.config import settings
from ..helper.db_helper import DB, get_tx_conn
from ..helper.jwt_helper import get_user
from ..schema.db import Account, Transaction

acc_app = FastAPI()

public_router = APIRouter()
protected_router = APIRouter(dependencies=[Depends(get_user)])


class ProfileData(TypedDict):
    balance: dict[str, int]
    transactions: list[Transaction]


@protected_router.post("/create", status_code=status.HTTP_201_CREATED)
async def handle_create_account(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
) -> Account:
    if await account_exists(conn, user_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Account {user_id} already exists.",
        )
    return await create_account(
        conn,
        user_id,
        grant_asset=settings.DEFAULT_ASSET,
        grant=settings.STARTING_GRANT,
        system_account=settings.SYSTEM_ACCOUNT_ID,
    )


@protected_router.get("/profile/@me")
async def get_profile(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
) -> ProfileData:
    try:
        account = await get_account_by_id(conn, user_id)
    except AccountNotExistError:
        raise HTTPException(404, "Account doesn't exist")
    transactions = await list_account_transactions(conn, user_id, limit=10)
    return {"balance": account.balance, "transactions": transactions}


@public_router.get("/get/{account_id:int}")
async def get_account(
    conn: Annotated[DB, Depends(get_tx_conn)],
    account_id: int,
) -> Account:
    try:
        return await get_account_by_id(conn, account_id)
    except AccountNotExistError:
        raise HTTPException(404, "Account doesn't exist")


acc_app.include_router(protected_router)
acc_app.include_router(public_router)
