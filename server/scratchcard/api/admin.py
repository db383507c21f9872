from dataclasses import dataclass, field
from typing import Annotated

from fastapi import FastAPI, APIRouter, Depends, HTTPException

from ..database.account import account_exists
from ..database.adapters import SqliteLedger, open_admin
from ..database.game import load_game_state
from ..engine.errors import LotteryError
from ..engine.state import GameState
from ..helper.db_helper import DB, get_tx_conn
from ..helper.jwt_helper import get_user
from .errors import to_http

admin_app = FastAPI()

public_router = APIRouter()
protected_router = APIRouter(dependencies=[Depends(get_user)])


@dataclass
class OddsReq:
    odds: list[int]
    payouts: list[int]


@dataclass
class SecondaryReq:
    odds: list[int]
    assets: list[str]


@dataclass
class RatesReq:
    assets: list[str]
    numerators: list[int]
    denominators: list[int]


@dataclass
class SecondaryAndRatesReq:
    odds: list[int]
    assets: list[str]
    numerators: list[int]
    denominators: list[int]


@dataclass
class AdminReq:
    new_admin: int


@dataclass
class CardCostReq:
    card_cost: int


@dataclass
class WithdrawReq:
    asset: str
    destination: int
    amount: int


@dataclass
class ConfigResp:
    admin: int
    treasury: int
    default_asset: str
    card_cost: int
    prize_odds: list[int]
    prize_payouts: list[int]
    secondary_odds: list[int]
    secondary_assets: list[str]
    rates: dict[str, list[int]] = field(default_factory=dict)
    treasury_balance: dict[str, int] = field(default_factory=dict)


def _config_resp(state: GameState, treasury_balance: dict[str, int]) -> ConfigResp:
    return ConfigResp(
        admin=state.admin,
        treasury=state.treasury,
        default_asset=state.default_asset,
        card_cost=state.card_cost,
        prize_odds=state.prize_table.thresholds,
        prize_payouts=state.prize_table.values,
        secondary_odds=state.secondary_table.thresholds,
        secondary_assets=state.secondary_table.values,
        rates={a: [r.numerator, r.denominator] for a, r in state.rates.items()},
        treasury_balance=treasury_balance,
    )


async def _treasury_balance(conn: DB, state: GameState) -> dict[str, int]:
    ledger = SqliteLedger(conn)
    assets = dict.fromkeys([state.default_asset, *state.secondary_table.values])
    return {a: await ledger.balance(state.treasury, a) for a in assets}


async def _respond(conn: DB, state: GameState) -> ConfigResp:
    return _config_resp(state, await _treasury_balance(conn, state))


@public_router.get("/config")
async def get_config(conn: Annotated[DB, Depends(get_tx_conn)]) -> ConfigResp:
    state = await load_game_state(conn)
    return await _respond(conn, state)


@protected_router.post("/odds")
async def set_odds(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    req: OddsReq,
) -> ConfigResp:
    try:
        state = await open_admin(conn).set_odds(user_id, req.odds, req.payouts)
    except LotteryError as e:
        raise to_http(e)
    return await _respond(conn, state)


@protected_router.post("/secondary")
async def set_secondary_prizes(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    req: SecondaryReq,
) -> ConfigResp:
    try:
        state = await open_admin(conn).set_secondary_prizes(
            user_id, req.odds, req.assets
        )
    except LotteryError as e:
        raise to_http(e)
    return await _respond(conn, state)


@protected_router.post("/rates")
async def set_conversion_rates(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    req: RatesReq,
) -> ConfigResp:
    try:
        state = await open_admin(conn).set_conversion_rates(
            user_id, req.assets, req.numerators, req.denominators
        )
    except LotteryError as e:
        raise to_http(e)
    return await _respond(conn, state)


@protected_router.post("/secondary_and_rates")
async def set_secondary_prizes_and_rates(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    req: SecondaryAndRatesReq,
) -> ConfigResp:
    try:
        state = await open_admin(conn).set_secondary_prizes_and_rates(
            user_id, req.odds, req.assets, req.numerators, req.denominators
        )
    except LotteryError as e:
        raise to_http(e)
    return await _respond(conn, state)


@protected_router.post("/admin")
async def set_admin(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    req: AdminReq,
) -> ConfigResp:
    try:
        state = await open_admin(conn).set_admin(user_id, req.new_admin)
    except LotteryError as e:
        raise to_http(e)
    return await _respond(conn, state)


@protected_router.post("/card_cost")
async def set_card_cost(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    req: CardCostReq,
) -> ConfigResp:
    try:
        state = await open_admin(conn).set_card_cost(user_id, req.card_cost)
    except LotteryError as e:
        raise to_http(e)
    return await _respond(conn, state)


@protected_router.post("/withdraw")
async def withdraw(
    conn: Annotated[DB, Depends(get_tx_conn)],
    user_id: Annotated[int, Depends(get_user)],
    req: WithdrawReq,
) -> ConfigResp:
    if not await account_exists(conn, req.destination):
        raise HTTPException(404, "Destination account not found")
    admin = open_admin(conn)
    try:
        await admin.withdraw(user_id, req.asset, req.destination, req.amount)
    except LotteryError as e:
        raise to_http(e)
    return await _respond(conn, await load_game_state(conn))


admin_app.include_router(protected_router)
admin_app.include_router(public_router)
