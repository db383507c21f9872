from ..helper.db_helper import DB
from ..schema.db import Account
from .coin import get_account_balance, get_or_create_coin
from .transact import raw_force_transact


class AccountNotExistError(ValueError): ...


async def account_exists(conn: DB, account_id: int) -> bool:
    row = await (
        await conn.execute("SELECT COUNT(*) FROM account WHERE id = ?", (account_id,))
    ).fetchone()
    return row[0] != 0


async def get_account_by_id(conn: DB, account_id: int) -> Account:
    """
    Fetch a single account with its balances.
    Raises AccountNotExistError if the account does not exist.
    """
    if not await account_exists(conn, account_id):
        raise AccountNotExistError(f"Account {account_id} not found")
    return Account(id=account_id, balance=await get_account_balance(conn, account_id))


async def force_create_account(conn: DB, account_id: int | None = None) -> int:
    if account_id is None:
        row = await (
            await conn.execute("INSERT INTO account DEFAULT VALUES RETURNING id")
        ).fetchone()
    else:
        row = await (
            await conn.execute(
                "INSERT INTO account(id) VALUES (?) ON CONFLICT(id) DO NOTHING RETURNING id",
                (account_id,),
            )
        ).fetchone()
        if row is None:
            return account_id
    return int(row[0])


async def create_account(
    conn: DB,
    account_id: int,
    *,
    grant_asset: str,
    grant: int,
    system_account: int = 0,
) -> Account:
    if await account_exists(conn, account_id):
        raise ValueError(f"Account {account_id} already exists")
    _ = await force_create_account(conn, account_id)
    if grant > 0:
        coin = await get_or_create_coin(conn, grant_asset)
        _ = await raw_force_transact(
            conn,
            system_account,
            account_id,
            coin.id,
            grant,
            f"Account creation account:{account_id}",
            kind="grant",
        )
    return await get_account_by_id(conn, account_id)
