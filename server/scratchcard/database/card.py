import json
import secrets

from ..helper.db_helper import DB
from ..schema.db import CardRecord


async def mint_card_token(conn: DB, owner: int) -> str:
    card_id = secrets.token_hex(32)
    _ = await conn.execute(
        "INSERT INTO card_token(card_id, owner) VALUES (?, ?)",
        (card_id, owner),
    )
    return card_id


async def get_card_owner(conn: DB, card_id: str) -> int | None:
    row = await (
        await conn.execute(
            "SELECT owner FROM card_token WHERE card_id = ? AND burned = 0",
            (card_id,),
        )
    ).fetchone()
    if row is None or row[0] is None:
        return None
    return int(row[0])


async def set_card_owner(conn: DB, card_id: str, owner: int) -> None:
    cur = await conn.execute(
        "UPDATE card_token SET owner = ? WHERE card_id = ? AND burned = 0 RETURNING card_id",
        (owner, card_id),
    )
    if await cur.fetchone() is None:
        raise ValueError(f"Card token '{card_id}' not found")


async def burn_card_token(conn: DB, card_id: str) -> None:
    cur = await conn.execute(
        "UPDATE card_token SET burned = 1, owner = NULL WHERE card_id = ? AND burned = 0 RETURNING card_id",
        (card_id,),
    )
    if await cur.fetchone() is None:
        raise ValueError(f"Card token '{card_id}' not found or already burned")


async def insert_card(
    conn: DB,
    card_id: str,
    *,
    scratched: bool,
    usd_amount: int,
    payout_asset: str,
    payout_amount: int,
    cells: list[list[int]],
) -> None:
    _ = await conn.execute(
        """
        INSERT INTO card(card_id, scratched, usd_amount, payout_asset, payout_amount, cells)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            card_id,
            int(scratched),
            usd_amount,
            payout_asset,
            payout_amount,
            json.dumps(cells),
        ),
    )


def _row_to_card(row) -> CardRecord:
    card_id, owner, burned, scratched, usd_amount, payout_asset, payout_amount, cells = row
    return CardRecord(
        card_id=str(card_id),
        owner=None if owner is None else int(owner),
        burned=bool(burned),
        scratched=bool(scratched),
        usd_amount=int(usd_amount),
        payout_asset=str(payout_asset),
        payout_amount=int(payout_amount),
        cells=json.loads(cells),
    )


_CARD_SELECT = """
    SELECT c.card_id, t.owner, t.burned, c.scratched, c.usd_amount,
           c.payout_asset, c.payout_amount, c.cells
    FROM card c
    INNER JOIN card_token t ON t.card_id = c.card_id
"""


async def get_card(conn: DB, card_id: str) -> CardRecord | None:
    row = await (
        await conn.execute(f"{_CARD_SELECT} WHERE c.card_id = ?", (card_id,))
    ).fetchone()
    if row is None:
        return None
    return _row_to_card(row)


async def list_holder_cards(
    conn: DB, owner: int, *, include_scratched: bool = True, limit: int = 100
) -> list[CardRecord]:
    query = f"{_CARD_SELECT} WHERE t.owner = ? AND t.burned = 0"
    if not include_scratched:
        query += " AND c.scratched = 0"
    query += " ORDER BY t.create_dt DESC, c.card_id LIMIT ?"
    cur = await conn.execute(query, (owner, limit))
    return [_row_to_card(row) for row in await cur.fetchall()]


async def mark_card_scratched(conn: DB, card_id: str) -> None:
    # Guarded update: only the first caller flips the flag.
    cur = await conn.execute(
        """
        UPDATE card SET scratched = 1, scratch_dt = CURRENT_TIMESTAMP
        WHERE card_id = ? AND scratched = 0
        RETURNING card_id
        """,
        (card_id,),
    )
    if await cur.fetchone() is None:
        raise ValueError(f"Card '{card_id}' is missing or already scratched")


async def record_card_event(
    conn: DB,
    kind: str,
    owner: int,
    card_id: str,
    usd_amount: int,
    payout_asset: str,
    payout_amount: int,
) -> int:
    row = await (
        await conn.execute(
            """
            INSERT INTO card_event(kind, owner, card_id, usd_amount, payout_asset, payout_amount)
            VALUES (?, ?, ?, ?, ?, ?) RETURNING id
            """,
            (kind, owner, card_id, usd_amount, payout_asset, payout_amount),
        )
    ).fetchone()
    return int(row[0])


async def list_card_events(conn: DB, card_id: str) -> list[tuple[str, int]]:
    cur = await conn.execute(
        "SELECT kind, owner FROM card_event WHERE card_id = ? ORDER BY id",
        (card_id,),
    )
    return [(str(kind), int(owner)) for kind, owner in await cur.fetchall()]
