import logging
from dataclasses import replace

from .collaborators import CardRegistry, EventSink, GameStore, Ledger
from .errors import (
    AlreadyScratched,
    CardNotFound,
    InsufficientFunds,
    InsufficientTreasuryBalance,
    NotOwner,
    ZeroCards,
)
from .events import Purchased, Scratched
from .grid import GridGenerator
from .odds import WeightedSelector
from .payout import PayoutResolver
from .randomness import Randomness
from .state import Card, CardSummary, GameState

logger = logging.getLogger(__name__)


class ScratchCardGame:
    """
    Card lifecycle: buy mints cards with their outcome already decided,
    scratch pays that outcome out exactly once.

    Every operation validates and draws before its first write, so a failure
    leaves the collaborators untouched even without host rollback.
    """

    def __init__(
        self,
        ledger: Ledger,
        registry: CardRegistry,
        store: GameStore,
        randomness: Randomness,
        events: EventSink,
    ):
        self.ledger = ledger
        self.registry = registry
        self.store = store
        self.events = events
        self._selector = WeightedSelector(randomness)
        self._grids = GridGenerator(self._selector)

    async def game_state(self) -> GameState:
        return await self.store.load_state()

    async def buy(self, buyer: int, num_cards: int) -> list[Card]:
        if num_cards <= 0:
            raise ZeroCards("Must buy at least one card")

        state = await self.store.load_state()
        cost = num_cards * state.card_cost
        if not await self.ledger.balance_at_least(buyer, state.default_asset, cost):
            raise InsufficientFunds(
                f"Holder {buyer} cannot pay {cost} {state.default_asset} for {num_cards} cards"
            )

        resolver = PayoutResolver(self._selector, state.default_asset)
        summaries: list[CardSummary] = []
        for _ in range(num_cards):
            cells, win = self._grids.generate(state.prize_table)
            payout = resolver.resolve(win, state.secondary_table, state.rates)
            summaries.append(
                CardSummary(
                    scratched=False,
                    usd_amount=payout.usd_amount,
                    payout_asset=payout.asset,
                    payout_amount=payout.amount,
                    cells=cells,
                )
            )

        if cost > 0:
            await self.ledger.transfer(
                buyer,
                state.treasury,
                state.default_asset,
                cost,
                f"Scratch card purchase x{num_cards}",
            )

        cards: list[Card] = []
        for summary in summaries:
            card_id = await self.registry.mint(state.treasury)
            await self.store.put_card(card_id, summary)
            await self.registry.transfer_ownership(card_id, buyer)
            await self.events.emit(
                Purchased(
                    owner=buyer,
                    card=card_id,
                    usd_amount=summary.usd_amount,
                    payout_asset=summary.payout_asset,
                    payout_amount=summary.payout_amount,
                )
            )
            cards.append(Card(card_id, buyer, summary))

        logger.info("Holder %s bought %d cards for %d", buyer, num_cards, cost)
        return cards

    async def get_card(self, card_id: str) -> CardSummary:
        summary = await self.store.get_card(card_id)
        if summary is None:
            raise CardNotFound(f"Card {card_id} not found")
        return summary

    async def scratch(self, caller: int, card_id: str) -> CardSummary:
        summary = await self.get_card(card_id)
        if not await self.registry.is_owner(caller, card_id):
            raise NotOwner(f"Holder {caller} does not own card {card_id}")
        if summary.scratched:
            raise AlreadyScratched(f"Card {card_id} has already been scratched")

        state = await self.store.load_state()
        if summary.payout_amount > 0 and not await self.ledger.balance_at_least(
            state.treasury, summary.payout_asset, summary.payout_amount
        ):
            raise InsufficientTreasuryBalance(
                f"Treasury cannot pay {summary.payout_amount} {summary.payout_asset}"
            )

        # Flag first: a re-entrant scratch must already see the card as settled.
        await self.store.mark_scratched(card_id)
        if summary.payout_amount > 0:
            await self.ledger.transfer(
                state.treasury,
                caller,
                summary.payout_asset,
                summary.payout_amount,
                f"Scratch card payout {card_id}",
            )
        await self.events.emit(
            Scratched(
                owner=caller,
                card=card_id,
                usd_amount=summary.usd_amount,
                payout_asset=summary.payout_asset,
                payout_amount=summary.payout_amount,
            )
        )
        logger.info(
            "Holder %s scratched %s for %d %s",
            caller,
            card_id,
            summary.payout_amount,
            summary.payout_asset,
        )
        return replace(summary, scratched=True)

    async def transfer_card(self, caller: int, card_id: str, new_owner: int) -> None:
        await self.get_card(card_id)
        if not await self.registry.is_owner(caller, card_id):
            raise NotOwner(f"Holder {caller} does not own card {card_id}")
        await self.registry.transfer_ownership(card_id, new_owner)
        logger.info("Card %s moved from %s to %s", card_id, caller, new_owner)
