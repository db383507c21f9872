from collections.abc import Mapping
from dataclasses import dataclass

from .errors import MissingConversionRate
from .odds import OddsTable, WeightedSelector
from .ratio import Ratio


@dataclass(frozen=True)
class Payout:
    asset: str
    amount: int
    usd_amount: int


class PayoutResolver:
    """
    Decide which asset a card pays out in.

    One draw over the secondary table: a miss (or the default asset itself)
    settles in the default asset at face value, any other asset is converted
    through its registered Ratio.
    """

    def __init__(self, selector: WeightedSelector, default_asset: str):
        self._selector = selector
        self.default_asset = default_asset

    def resolve(
        self,
        win_usd_amount: int,
        secondary_table: OddsTable[str],
        rates: Mapping[str, Ratio],
    ) -> Payout:
        asset = self._selector.draw(secondary_table)
        if asset is None or asset == self.default_asset:
            return Payout(self.default_asset, win_usd_amount, win_usd_amount)
        rate = rates.get(asset)
        if rate is None:
            raise MissingConversionRate(f"No conversion rate registered for {asset}")
        return Payout(asset, rate.multiply(win_usd_amount), win_usd_amount)
