from typing import Protocol

from .events import LotteryEvent
from .state import CardSummary, GameState


class Ledger(Protocol):
    async def balance(self, holder: int, asset: str) -> int: ...

    async def balance_at_least(self, holder: int, asset: str, amount: int) -> bool: ...

    async def transfer(
        self, src: int, dst: int, asset: str, amount: int, reason: str
    ) -> None: ...


class CardRegistry(Protocol):
    async def mint(self, owner: int) -> str: ...

    async def owner_of(self, card_id: str) -> int | None: ...

    async def is_owner(self, holder: int, card_id: str) -> bool: ...

    async def transfer_ownership(self, card_id: str, new_owner: int) -> None: ...

    async def burn(self, card_id: str) -> None: ...


class GameStore(Protocol):
    async def load_state(self) -> GameState: ...

    async def save_state(self, state: GameState) -> None: ...

    async def put_card(self, card_id: str, summary: CardSummary) -> None: ...

    async def get_card(self, card_id: str) -> CardSummary | None: ...

    async def mark_scratched(self, card_id: str) -> None: ...


class EventSink(Protocol):
    async def emit(self, event: LotteryEvent) -> None: ...
