import json

from ..crypto.hashing import GENESIS_HASH, chain_hash, sha3_512_hex
from ..helper.db_helper import DB
from ..schema.db import Transaction, TransactKind


class InsufficientBalanceError(ValueError): ...


_TRANSACTION_COLUMNS = """
            u.id,
            u.src,
            u.dst,
            u.coin_id,
            c.unique_name,
            c.read_name,
            u.amount,
            u.kind,
            u.reason,
            u.inner_hash,
            u.create_dt,
            u.transact_data,
            tc.tx
"""


def _row_to_transaction(row) -> Transaction:
    (
        uid,
        src,
        dst,
        coin_id,
        coin_unique,
        coin_read,
        amount,
        kind,
        reason,
        inner_hash,
        create_dt,
        transact_data,
        tx,
    ) = row
    return Transaction(
        id=uid,
        src=src,
        dst=dst,
        coin_id=coin_id,
        coin_unique_name=coin_unique,
        coin_read_name=coin_read,
        amount=amount,
        kind=kind,
        reason=reason,
        inner_hash=inner_hash,
        create_dt=create_dt,
        transact_data=transact_data,
        tx=tx,
    )


async def _upsert_balance(conn: DB, account: int, coin: int, delta: int) -> None:
    _ = await conn.execute(
        (
            "INSERT INTO user_coin(amount, account_id, coin_id) VALUES (?, ?, ?) "
            "ON CONFLICT (account_id, coin_id) DO UPDATE SET amount = amount + ? "
            "WHERE account_id = ? AND coin_id = ?"
        ),
        (delta, account, coin, delta, account, coin),
    )


async def raw_force_transact(
    conn: DB,
    src: int,
    dst: int,
    coin: int,
    amount: int,
    reason: str = "No reason provided - Force transaction",
    kind: TransactKind = "none",
    inner_hash: str = "",
) -> tuple[int, str]:
    if amount <= 0:
        raise ValueError("amount must be > 0")

    # Update balances (dst gains, src loses)
    await _upsert_balance(conn, dst, coin, amount)
    await _upsert_balance(conn, src, coin, -amount)

    transact_data = json.dumps(
        {
            "src": src,
            "dst": dst,
            "coin_id": coin,
            "amount": amount,
            "kind": kind,
            "reason": reason,
            "inner_hash": inner_hash,
        },
        sort_keys=True,
    )
    transact_row = await conn.execute(
        (
            "INSERT INTO uni_transact (src, dst, coin_id, amount, kind, reason, inner_hash, transact_data) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?) RETURNING id"
        ),
        (src, dst, coin, amount, kind, reason, inner_hash, transact_data),
    )
    row = await transact_row.fetchone()
    transact_id: int = row[0]

    # Build chain hash by combining previous tx hash with this self-hash
    last_tx = await conn.execute(
        'SELECT tx FROM transact_chain ORDER BY "order" DESC LIMIT 1'
    )
    last_row = await last_tx.fetchone()
    last_tx_hash: str = last_row[0] if last_row else GENESIS_HASH

    new_tx = chain_hash(last_tx_hash, sha3_512_hex(transact_data))
    _ = await conn.execute(
        "INSERT INTO transact_chain(tx, transact_id) VALUES (?, ?)",
        (new_tx, transact_id),
    )
    return transact_id, transact_data


async def transact(
    conn: DB,
    src: int,
    dst: int,
    coin: int,
    amount: int,
    reason: str = "No reason provided - transaction",
    kind: TransactKind = "none",
    inner_hash: str = "",
) -> tuple[int, str]:
    sufficient = await (
        await conn.execute(
            (
                "SELECT CASE WHEN COALESCE((SELECT amount FROM user_coin WHERE account_id = ? AND coin_id = ?), 0) >= ? "
                "THEN 1 ELSE 0 END AS sufficient;"
            ),
            (src, coin, amount),
        )
    ).fetchone()
    if sufficient[0] == 0:
        raise InsufficientBalanceError("Insufficient balance")

    return await raw_force_transact(
        conn, src, dst, coin, amount, reason, kind, inner_hash
    )


async def list_account_transactions(
    conn: DB,
    account_id: int,
    limit: int = 100,
    offset: int = 0,
) -> list[Transaction]:
    cur = await conn.execute(
        f"""
        SELECT {_TRANSACTION_COLUMNS}
        FROM uni_transact u
        LEFT JOIN coin c ON c.id = u.coin_id
        LEFT JOIN transact_chain tc ON tc.transact_id = u.id
        WHERE u.src = ? OR u.dst = ?
        ORDER BY u.id DESC
        LIMIT ? OFFSET ?
        """,
        (account_id, account_id, limit, offset),
    )
    return [_row_to_transaction(row) for row in await cur.fetchall()]


async def get_transaction_by_uni_id(conn: DB, uni_id: int) -> Transaction | None:
    cur = await conn.execute(
        f"""
        SELECT {_TRANSACTION_COLUMNS}
        FROM uni_transact u
        LEFT JOIN coin c ON c.id = u.coin_id
        LEFT JOIN transact_chain tc ON tc.transact_id = u.id
        WHERE u.id = ?
        """,
        (uni_id,),
    )
    row = await cur.fetchone()
    if not row:
        return None
    return _row_to_transaction(row)


async def get_transaction_by_tx(conn: DB, tx: str) -> Transaction | None:
    cur = await conn.execute(
        f"""
        SELECT {_TRANSACTION_COLUMNS}
        FROM transact_chain tc
        INNER JOIN uni_transact u ON u.id = tc.transact_id
        LEFT JOIN coin c ON c.id = u.coin_id
        WHERE tc.tx = ?
        """,
        (tx,),
    )
    row = await cur.fetchone()
    if not row:
        return None
    return _row_to_transaction(row)


async def verify_chain(conn: DB) -> bool:
    """Recompute every link of the transaction hash chain."""
    cur = await conn.execute(
        """
        SELECT tc.tx, u.transact_data
        FROM transact_chain tc
        INNER JOIN uni_transact u ON u.id = tc.transact_id
        ORDER BY tc."order" ASC
        """
    )
    previous = GENESIS_HASH
    for tx, transact_data in await cur.fetchall():
        if chain_hash(previous, sha3_512_hex(transact_data)) != tx:
            return False
        previous = tx
    return True
