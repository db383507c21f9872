from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from .grid import Grid
from .odds import OddsTable
from .ratio import Ratio


@dataclass(frozen=True)
class GameState:
    """
    Singleton configuration every purchase reads from.

    Frozen: admin operations build a replacement and hand it to the store in
    one piece, so a purchase always sees either the old or the new tables.
    """

    admin: int
    treasury: int
    default_asset: str
    card_cost: int
    prize_table: OddsTable[int] = OddsTable()
    secondary_table: OddsTable[str] = OddsTable()
    rates: Mapping[str, Ratio] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    def with_changes(self, **changes) -> "GameState":
        return replace(self, **changes)

    def secondary_assets(self) -> set[str]:
        return {a for a in self.secondary_table.values if a != self.default_asset}


@dataclass(frozen=True)
class CardSummary:
    scratched: bool
    usd_amount: int
    payout_asset: str
    payout_amount: int
    cells: Grid


@dataclass(frozen=True)
class Card:
    card_id: str
    owner: int
    summary: CardSummary
