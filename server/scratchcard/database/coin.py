from ..helper.db_helper import DB
from ..schema.db import Coin


async def get_coin(conn: DB, unique_name: str) -> Coin | None:
    row = await (
        await conn.execute(
            "SELECT id, unique_name, read_name FROM coin WHERE unique_name = ?",
            (unique_name,),
        )
    ).fetchone()
    if row is None:
        return None
    return Coin(int(row[0]), str(row[1]), str(row[2]))


async def get_or_create_coin(
    conn: DB, unique_name: str, read_name: str | None = None
) -> Coin:
    coin = await get_coin(conn, unique_name)
    if coin is not None:
        return coin
    row = await (
        await conn.execute(
            "INSERT INTO coin(unique_name, read_name) VALUES (?, ?) RETURNING id",
            (unique_name, read_name or unique_name.upper()),
        )
    ).fetchone()
    return Coin(int(row[0]), unique_name, read_name or unique_name.upper())


async def get_account_coin_balance(conn: DB, account_id: int, coin_id: int) -> int:
    row = await (
        await conn.execute(
            "SELECT COALESCE((SELECT amount FROM user_coin WHERE account_id = ? AND coin_id = ?), 0)",
            (account_id, coin_id),
        )
    ).fetchone()
    return int(row[0]) if row else 0


async def get_account_asset_balance(conn: DB, account_id: int, unique_name: str) -> int:
    coin = await get_coin(conn, unique_name)
    if coin is None:
        return 0
    return await get_account_coin_balance(conn, account_id, coin.id)


async def get_account_balance(conn: DB, account_id: int) -> dict[str, int]:
    cur = await conn.execute(
        """
        SELECT c.unique_name, uc.amount
        FROM user_coin uc
        JOIN coin c ON c.id = uc.coin_id
        WHERE uc.account_id = ?
        ORDER BY c.id
        """,
        (account_id,),
    )
    return {str(name): int(amount) for name, amount in await cur.fetchall()}
