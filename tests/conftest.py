from __future__ import annotations

import asyncio
import itertools
import os
import random
from collections.abc import Iterable

import pytest

from scratchcard.engine import (
    AdminConfigStore,
    CardSummary,
    GameState,
    LotteryEvent,
    OddsTable,
    Ratio,
    ScratchCardGame,
)

# Settings read JWT_SECRET at import time and refuse to start without it.
os.environ.setdefault("JWT_SECRET", "scratchcard-test-secret-0123456789abcdef")

ADMIN = 1
TREASURY = 2
BUYER = 10
OTHER = 11
USD = "usd"
BONUS = "gamba"
CARD_COST = 10


def run(coro):
    return asyncio.run(coro)


class ScriptedRandomness:
    """Hands out a fixed sequence of rolls and records every request."""

    def __init__(self, rolls: Iterable[int]):
        self._rolls = iter(rolls)
        self.calls: list[int] = []

    def draw(self, upper: int) -> int:
        self.calls.append(upper)
        roll = next(self._rolls, None)
        assert roll is not None, "scripted randomness exhausted"
        assert 0 <= roll < upper
        return roll


class SeededRandomness:
    def __init__(self, seed: int):
        self._rng = random.Random(seed)
        self.calls = 0

    def draw(self, upper: int) -> int:
        self.calls += 1
        return self._rng.randrange(upper)


class InMemoryLedger:
    def __init__(self):
        self.balances: dict[tuple[int, str], int] = {}
        self.transfers: list[tuple[int, int, str, int]] = []

    def fund(self, holder: int, asset: str, amount: int) -> None:
        self.balances[(holder, asset)] = self.balances.get((holder, asset), 0) + amount

    async def balance(self, holder: int, asset: str) -> int:
        return self.balances.get((holder, asset), 0)

    async def balance_at_least(self, holder: int, asset: str, amount: int) -> bool:
        return await self.balance(holder, asset) >= amount

    async def transfer(self, src: int, dst: int, asset: str, amount: int, reason: str) -> None:
        assert self.balances.get((src, asset), 0) >= amount, "ledger overdraft"
        self.balances[(src, asset)] -= amount
        self.fund(dst, asset, amount)
        self.transfers.append((src, dst, asset, amount))


class InMemoryRegistry:
    def __init__(self):
        self.owners: dict[str, int | None] = {}
        self._ids = itertools.count(1)

    async def mint(self, owner: int) -> str:
        card_id = f"card-{next(self._ids)}"
        self.owners[card_id] = owner
        return card_id

    async def owner_of(self, card_id: str) -> int | None:
        return self.owners.get(card_id)

    async def is_owner(self, holder: int, card_id: str) -> bool:
        return self.owners.get(card_id) == holder

    async def transfer_ownership(self, card_id: str, new_owner: int) -> None:
        assert card_id in self.owners
        self.owners[card_id] = new_owner

    async def burn(self, card_id: str) -> None:
        self.owners[card_id] = None


class InMemoryStore:
    def __init__(self, state: GameState):
        self.state = state
        self.cards: dict[str, CardSummary] = {}
        self.loads = 0

    async def load_state(self) -> GameState:
        self.loads += 1
        return self.state

    async def save_state(self, state: GameState) -> None:
        self.state = state

    async def put_card(self, card_id: str, summary: CardSummary) -> None:
        self.cards[card_id] = summary

    async def get_card(self, card_id: str) -> CardSummary | None:
        return self.cards.get(card_id)

    async def mark_scratched(self, card_id: str) -> None:
        summary = self.cards[card_id]
        assert not summary.scratched
        self.cards[card_id] = CardSummary(
            True,
            summary.usd_amount,
            summary.payout_asset,
            summary.payout_amount,
            summary.cells,
        )


class RecordingSink:
    def __init__(self):
        self.events: list[LotteryEvent] = []

    async def emit(self, event: LotteryEvent) -> None:
        self.events.append(event)


def make_state(**changes) -> GameState:
    state = GameState(
        admin=ADMIN,
        treasury=TREASURY,
        default_asset=USD,
        card_cost=CARD_COST,
        prize_table=OddsTable.build([30000, 15000, 8000], [50, 100, 200]),
        secondary_table=OddsTable.build([20000], [BONUS]),
        rates={BONUS: Ratio(3, 2)},
    )
    return state.with_changes(**changes) if changes else state


class Harness:
    def __init__(self, randomness, state: GameState | None = None):
        self.ledger = InMemoryLedger()
        self.registry = InMemoryRegistry()
        self.store = InMemoryStore(state or make_state())
        self.sink = RecordingSink()
        self.randomness = randomness
        self.game = ScratchCardGame(
            self.ledger, self.registry, self.store, randomness, self.sink
        )
        self.admin = AdminConfigStore(self.store, self.ledger)


@pytest.fixture
def harness() -> Harness:
    h = Harness(SeededRandomness(2024))
    h.ledger.fund(TREASURY, USD, 10_000_000)
    h.ledger.fund(TREASURY, BONUS, 10_000_000)
    h.ledger.fund(BUYER, USD, 1_000)
    return h
