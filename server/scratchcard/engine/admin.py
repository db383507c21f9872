import logging
from collections.abc import Sequence

from .collaborators import GameStore, Ledger
from .errors import (
    InsufficientTreasuryBalance,
    InvalidDenominator,
    LengthMismatch,
    MismatchedAssets,
    NegativePayout,
    Unauthorized,
    ZeroAmount,
)
from .odds import OddsTable
from .ratio import Ratio
from .state import GameState

logger = logging.getLogger(__name__)


def build_rates(
    assets: Sequence[str], numerators: Sequence[int], denominators: Sequence[int]
) -> dict[str, Ratio]:
    if not len(assets) == len(numerators) == len(denominators):
        raise LengthMismatch(
            f"Got {len(assets)} assets, {len(numerators)} numerators, {len(denominators)} denominators"
        )
    rates: dict[str, Ratio] = {}
    for asset, num, den in zip(assets, numerators, denominators):
        if den == 0:
            raise InvalidDenominator(f"Conversion rate for {asset} has a 0 denominator")
        rates[asset] = Ratio(num, den)
    return rates


class AdminConfigStore:
    """Authorised mutations of the GameState. Changes only affect future purchases."""

    def __init__(self, store: GameStore, ledger: Ledger):
        self.store = store
        self.ledger = ledger

    async def _authorize(self, caller: int) -> GameState:
        state = await self.store.load_state()
        if caller != state.admin:
            raise Unauthorized(f"Holder {caller} is not the game admin")
        return state

    async def set_odds(
        self, caller: int, odds: Sequence[int], payouts: Sequence[int]
    ) -> GameState:
        state = await self._authorize(caller)
        table = OddsTable.build(odds, payouts)
        if any(p < 0 for p in payouts):
            raise NegativePayout(f"Prize payouts must be unsigned, got {list(payouts)}")
        new_state = state.with_changes(prize_table=table)
        await self.store.save_state(new_state)
        logger.info("Admin %s replaced prize table: %s", caller, list(zip(odds, payouts)))
        return new_state

    async def set_secondary_prizes(
        self, caller: int, odds: Sequence[int], assets: Sequence[str]
    ) -> GameState:
        state = await self._authorize(caller)
        table = OddsTable.build(odds, assets)
        missing = {a for a in assets if a != state.default_asset} - set(state.rates)
        if missing:
            raise MismatchedAssets(f"No conversion rate for {sorted(missing)}")
        new_state = state.with_changes(secondary_table=table)
        await self.store.save_state(new_state)
        logger.info("Admin %s replaced secondary prizes: %s", caller, list(zip(odds, assets)))
        return new_state

    async def set_conversion_rates(
        self,
        caller: int,
        assets: Sequence[str],
        numerators: Sequence[int],
        denominators: Sequence[int],
    ) -> GameState:
        state = await self._authorize(caller)
        rates = build_rates(assets, numerators, denominators)
        if set(rates) != state.secondary_assets():
            raise MismatchedAssets(
                f"Rates for {sorted(rates)} do not match secondary prizes {sorted(state.secondary_assets())}"
            )
        new_state = state.with_changes(rates=rates)
        await self.store.save_state(new_state)
        logger.info("Admin %s replaced conversion rates for %s", caller, sorted(rates))
        return new_state

    async def set_secondary_prizes_and_rates(
        self,
        caller: int,
        odds: Sequence[int],
        assets: Sequence[str],
        numerators: Sequence[int],
        denominators: Sequence[int],
    ) -> GameState:
        state = await self._authorize(caller)
        table = OddsTable.build(odds, assets)
        rates = build_rates(assets, numerators, denominators)
        # The default asset never converts.
        rates.pop(state.default_asset, None)
        new_state = state.with_changes(secondary_table=table, rates=rates)
        await self.store.save_state(new_state)
        logger.info("Admin %s replaced secondary prizes and rates", caller)
        return new_state

    async def set_admin(self, caller: int, new_admin: int) -> GameState:
        state = await self._authorize(caller)
        new_state = state.with_changes(admin=new_admin)
        await self.store.save_state(new_state)
        logger.info("Admin moved from %s to %s", caller, new_admin)
        return new_state

    async def set_card_cost(self, caller: int, cost: int) -> GameState:
        state = await self._authorize(caller)
        if cost <= 0:
            raise ZeroAmount("Card cost must be > 0")
        new_state = state.with_changes(card_cost=cost)
        await self.store.save_state(new_state)
        logger.info("Admin %s set card cost to %d", caller, cost)
        return new_state

    async def withdraw(
        self, caller: int, asset: str, destination: int, amount: int
    ) -> None:
        state = await self._authorize(caller)
        if amount <= 0:
            raise ZeroAmount("Withdraw amount must be > 0")
        if not await self.ledger.balance_at_least(state.treasury, asset, amount):
            raise InsufficientTreasuryBalance(
                f"Treasury holds less than {amount} {asset}"
            )
        await self.ledger.transfer(
            state.treasury, destination, asset, amount, "Treasury withdrawal"
        )
        logger.info("Admin %s withdrew %d %s to %s", caller, amount, asset, destination)
