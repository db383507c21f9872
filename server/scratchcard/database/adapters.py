"""
Engine collaborators backed by a single asqlite connection.

All four adapters share the connection they are built with, so one scratch or
purchase lands in whatever transaction the caller opened on it.
"""

import logging

from ..crypto.hashing import sha3_512_hex
from ..engine.admin import AdminConfigStore
from ..engine.events import LotteryEvent
from ..engine.game import ScratchCardGame
from ..engine.randomness import Randomness, SecretsRandomness
from ..engine.state import CardSummary, GameState
from ..helper.db_helper import DB
from .card import (
    burn_card_token,
    get_card,
    get_card_owner,
    insert_card,
    mark_card_scratched,
    mint_card_token,
    record_card_event,
    set_card_owner,
)
from .coin import get_account_asset_balance, get_or_create_coin
from .game import load_game_state, save_game_state
from .transact import transact

logger = logging.getLogger(__name__)


class SqliteLedger:
    def __init__(self, conn: DB):
        self.conn = conn

    async def balance(self, holder: int, asset: str) -> int:
        return await get_account_asset_balance(self.conn, holder, asset)

    async def balance_at_least(self, holder: int, asset: str, amount: int) -> bool:
        return await self.balance(holder, asset) >= amount

    async def transfer(
        self, src: int, dst: int, asset: str, amount: int, reason: str
    ) -> None:
        coin = await get_or_create_coin(self.conn, asset)
        _ = await transact(
            self.conn,
            src,
            dst,
            coin.id,
            amount,
            reason=reason,
            kind="game",
            inner_hash=sha3_512_hex(reason),
        )


class SqliteCardRegistry:
    def __init__(self, conn: DB):
        self.conn = conn

    async def mint(self, owner: int) -> str:
        return await mint_card_token(self.conn, owner)

    async def owner_of(self, card_id: str) -> int | None:
        return await get_card_owner(self.conn, card_id)

    async def is_owner(self, holder: int, card_id: str) -> bool:
        return await self.owner_of(card_id) == holder

    async def transfer_ownership(self, card_id: str, new_owner: int) -> None:
        await set_card_owner(self.conn, card_id, new_owner)

    async def burn(self, card_id: str) -> None:
        await burn_card_token(self.conn, card_id)


class SqliteGameStore:
    def __init__(self, conn: DB):
        self.conn = conn

    async def load_state(self) -> GameState:
        return await load_game_state(self.conn)

    async def save_state(self, state: GameState) -> None:
        await save_game_state(self.conn, state)

    async def put_card(self, card_id: str, summary: CardSummary) -> None:
        await insert_card(
            self.conn,
            card_id,
            scratched=summary.scratched,
            usd_amount=summary.usd_amount,
            payout_asset=summary.payout_asset,
            payout_amount=summary.payout_amount,
            cells=[list(row) for row in summary.cells],
        )

    async def get_card(self, card_id: str) -> CardSummary | None:
        record = await get_card(self.conn, card_id)
        if record is None:
            return None
        return CardSummary(
            scratched=record.scratched,
            usd_amount=record.usd_amount,
            payout_asset=record.payout_asset,
            payout_amount=record.payout_amount,
            cells=tuple(tuple(row) for row in record.cells),
        )

    async def mark_scratched(self, card_id: str) -> None:
        await mark_card_scratched(self.conn, card_id)


class SqliteEventSink:
    def __init__(self, conn: DB):
        self.conn = conn

    async def emit(self, event: LotteryEvent) -> None:
        event_id = await record_card_event(
            self.conn,
            event.kind,
            event.owner,
            event.card,
            event.usd_amount,
            event.payout_asset,
            event.payout_amount,
        )
        logger.info(
            "event #%d %s owner=%s card=%s usd=%d payout=%d %s",
            event_id,
            event.kind,
            event.owner,
            event.card,
            event.usd_amount,
            event.payout_amount,
            event.payout_asset,
        )


def open_game(conn: DB, randomness: Randomness | None = None) -> ScratchCardGame:
    return ScratchCardGame(
        ledger=SqliteLedger(conn),
        registry=SqliteCardRegistry(conn),
        store=SqliteGameStore(conn),
        randomness=randomness or SecretsRandomness(),
        events=SqliteEventSink(conn),
    )


def open_admin(conn: DB) -> AdminConfigStore:
    return AdminConfigStore(store=SqliteGameStore(conn), ledger=SqliteLedger(conn))
