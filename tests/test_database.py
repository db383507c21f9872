from __future__ import annotations

from contextlib import asynccontextmanager

import asqlite
import pytest
from conftest import SeededRandomness, run

from scratchcard.database.account import create_account
from scratchcard.database.adapters import SqliteCardRegistry, SqliteLedger, open_admin, open_game
from scratchcard.database.card import list_card_events, list_holder_cards, mark_card_scratched
from scratchcard.database.coin import get_account_balance, get_or_create_coin
from scratchcard.database.game import default_game_state, load_game_state
from scratchcard.database.transact import (
    InsufficientBalanceError,
    get_transaction_by_tx,
    get_transaction_by_uni_id,
    list_account_transactions,
    transact,
    verify_chain,
)
from scratchcard.engine import AlreadyScratched, NotOwner, Ratio
from scratchcard.helper.config import Settings
from scratchcard.helper.db_helper import init_schema


class _Config(Settings):
    ADMIN_ACCOUNT_ID = 1
    TREASURY_ACCOUNT_ID = 2
    TREASURY_FLOAT = 1_000_000
    DEFAULT_ASSET = "usd"
    CARD_COST = 10
    PRIZE_ODDS = (30000, 15000, 8000)
    PRIZE_PAYOUTS = (50, 100, 200)
    SECONDARY_ODDS = (20000,)
    SECONDARY_ASSETS = ("gamba",)
    SECONDARY_RATE_NUMERATORS = (3,)
    SECONDARY_RATE_DENOMINATORS = (2,)


CONFIG = _Config()
PLAYER = 100


@asynccontextmanager
async def open_db(tmp_path):
    async with asqlite.connect(str(tmp_path / "scratch.db")) as conn:
        _ = await conn.execute("PRAGMA foreign_keys=ON;")
        await init_schema(conn, CONFIG)
        yield conn


def test_bootstrap_creates_default_state(tmp_path) -> None:
    async def scenario():
        async with open_db(tmp_path) as conn:
            state = await load_game_state(conn)
            assert state == default_game_state(CONFIG)
            assert state.rates["gamba"] == Ratio(3, 2)
            treasury = await get_account_balance(conn, CONFIG.TREASURY_ACCOUNT_ID)
            assert treasury == {"usd": 1_000_000, "gamba": 1_000_000}

            # A second boot keeps the existing state and float.
            await init_schema(conn, CONFIG)
            assert await get_account_balance(conn, CONFIG.TREASURY_ACCOUNT_ID) == treasury

    run(scenario())


def test_buy_and_scratch_through_sqlite(tmp_path) -> None:
    async def scenario():
        async with open_db(tmp_path) as conn:
            account = await create_account(conn, PLAYER, grant_asset="usd", grant=1_000)
            assert account.balance == {"usd": 1_000}

            game = open_game(conn, SeededRandomness(7))
            cards = await game.buy(PLAYER, 3)
            await conn.commit()

            balance = await get_account_balance(conn, PLAYER)
            assert balance["usd"] == 1_000 - 30
            assert len(await list_holder_cards(conn, PLAYER)) == 3

            for card in cards:
                stored = await game.get_card(card.card_id)
                assert stored == card.summary
                await game.scratch(PLAYER, card.card_id)
                with pytest.raises(AlreadyScratched):
                    await game.scratch(PLAYER, card.card_id)
                assert await list_card_events(conn, card.card_id) == [
                    ("purchased", PLAYER),
                    ("scratched", PLAYER),
                ]
            await conn.commit()

            paid: dict[str, int] = {}
            for card in cards:
                asset = card.summary.payout_asset
                paid[asset] = paid.get(asset, 0) + card.summary.payout_amount
            final = await get_account_balance(conn, PLAYER)
            assert final.get("usd", 0) == 970 + paid.get("usd", 0)
            assert final.get("gamba", 0) == paid.get("gamba", 0)
            assert await list_holder_cards(conn, PLAYER, include_scratched=False) == []
            assert await verify_chain(conn)

    run(scenario())


def test_admin_changes_persist(tmp_path) -> None:
    async def scenario():
        async with open_db(tmp_path) as conn:
            admin = open_admin(conn)
            await admin.set_secondary_prizes_and_rates(
                CONFIG.ADMIN_ACCOUNT_ID, [5_000, 2_000], ["gem", "gamba"], [7, 1], [2, 3]
            )
            await admin.set_odds(CONFIG.ADMIN_ACCOUNT_ID, [12_345], [77])
            await conn.commit()

            state = await load_game_state(conn)
            assert state.prize_table.values == [77]
            assert state.secondary_table.values == ["gamba", "gem"]
            assert dict(state.rates) == {"gem": Ratio(7, 2), "gamba": Ratio(1, 3)}

    run(scenario())


def test_card_transfer_and_burn(tmp_path) -> None:
    async def scenario():
        async with open_db(tmp_path) as conn:
            await create_account(conn, PLAYER, grant_asset="usd", grant=100)
            await create_account(conn, PLAYER + 1, grant_asset="usd", grant=0)
            game = open_game(conn, SeededRandomness(3))
            (card,) = await game.buy(PLAYER, 1)

            await game.transfer_card(PLAYER, card.card_id, PLAYER + 1)
            with pytest.raises(NotOwner):
                await game.scratch(PLAYER, card.card_id)

            registry = SqliteCardRegistry(conn)
            assert await registry.owner_of(card.card_id) == PLAYER + 1
            await registry.burn(card.card_id)
            assert await registry.owner_of(card.card_id) is None
            assert not await registry.is_owner(PLAYER + 1, card.card_id)
            with pytest.raises(ValueError):
                await registry.burn(card.card_id)

    run(scenario())


def test_scratch_flag_flips_once(tmp_path) -> None:
    async def scenario():
        async with open_db(tmp_path) as conn:
            await create_account(conn, PLAYER, grant_asset="usd", grant=100)
            (card,) = await open_game(conn, SeededRandomness(5)).buy(PLAYER, 1)
            await mark_card_scratched(conn, card.card_id)
            with pytest.raises(ValueError):
                await mark_card_scratched(conn, card.card_id)

    run(scenario())


def test_ledger_transfers_are_chained(tmp_path) -> None:
    async def scenario():
        async with open_db(tmp_path) as conn:
            await create_account(conn, PLAYER, grant_asset="usd", grant=50)
            coin = await get_or_create_coin(conn, "usd")

            with pytest.raises(InsufficientBalanceError):
                await transact(conn, PLAYER, CONFIG.TREASURY_ACCOUNT_ID, coin.id, 51)

            tid, _ = await transact(
                conn, PLAYER, CONFIG.TREASURY_ACCOUNT_ID, coin.id, 20, reason="test"
            )
            tx = await get_transaction_by_uni_id(conn, tid)
            assert tx is not None
            assert (tx.src, tx.dst, tx.amount, tx.coin_unique_name) == (
                PLAYER,
                CONFIG.TREASURY_ACCOUNT_ID,
                20,
                "usd",
            )
            assert await get_transaction_by_tx(conn, tx.tx) == tx
            history = await list_account_transactions(conn, PLAYER)
            assert [t.id for t in history][0] == tid
            assert await SqliteLedger(conn).balance(PLAYER, "usd") == 30
            assert await verify_chain(conn)

    run(scenario())
