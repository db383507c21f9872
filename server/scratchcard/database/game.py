import logging

from ..engine.admin import build_rates
from ..engine.odds import OddsTable
from ..engine.ratio import Ratio
from ..engine.state import GameState
from ..helper.config import Settings
from ..helper.db_helper import DB
from .account import force_create_account
from .coin import get_or_create_coin
from .transact import raw_force_transact

logger = logging.getLogger(__name__)


class GameNotInitialisedError(RuntimeError): ...


async def game_state_exists(conn: DB) -> bool:
    row = await (
        await conn.execute("SELECT COUNT(*) FROM game_config WHERE id = 1")
    ).fetchone()
    return row[0] != 0


async def _load_table(conn: DB, table_name: str) -> list[tuple[int, str]]:
    cur = await conn.execute(
        "SELECT threshold, value FROM odds_entry WHERE table_name = ? ORDER BY threshold ASC",
        (table_name,),
    )
    return [(int(threshold), str(value)) for threshold, value in await cur.fetchall()]


async def load_game_state(conn: DB) -> GameState:
    row = await (
        await conn.execute(
            "SELECT admin, treasury, default_asset, card_cost FROM game_config WHERE id = 1"
        )
    ).fetchone()
    if row is None:
        raise GameNotInitialisedError("Game configuration has not been created")
    admin, treasury, default_asset, card_cost = row

    prize_rows = await _load_table(conn, "prize")
    secondary_rows = await _load_table(conn, "secondary")
    cur = await conn.execute("SELECT asset, numerator, denominator FROM conversion_rate")
    rates = {
        str(asset): Ratio(int(num), int(den))
        for asset, num, den in await cur.fetchall()
    }
    return GameState(
        admin=int(admin),
        treasury=int(treasury),
        default_asset=str(default_asset),
        card_cost=int(card_cost),
        prize_table=OddsTable.build(
            [t for t, _ in prize_rows], [int(v) for _, v in prize_rows]
        ),
        secondary_table=OddsTable.build(
            [t for t, _ in secondary_rows], [v for _, v in secondary_rows]
        ),
        rates=rates,
    )


async def save_game_state(conn: DB, state: GameState) -> None:
    """Replace the stored configuration wholesale; callers run this inside one transaction."""
    _ = await conn.execute(
        """
        INSERT INTO game_config(id, admin, treasury, default_asset, card_cost)
        VALUES (1, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            admin = excluded.admin,
            treasury = excluded.treasury,
            default_asset = excluded.default_asset,
            card_cost = excluded.card_cost
        """,
        (state.admin, state.treasury, state.default_asset, state.card_cost),
    )
    _ = await conn.execute("DELETE FROM odds_entry")
    for entry in state.prize_table:
        _ = await conn.execute(
            "INSERT INTO odds_entry(table_name, threshold, value) VALUES ('prize', ?, ?)",
            (entry.threshold, str(entry.value)),
        )
    for entry in state.secondary_table:
        _ = await conn.execute(
            "INSERT INTO odds_entry(table_name, threshold, value) VALUES ('secondary', ?, ?)",
            (entry.threshold, entry.value),
        )
    _ = await conn.execute("DELETE FROM conversion_rate")
    for asset, rate in state.rates.items():
        _ = await conn.execute(
            "INSERT INTO conversion_rate(asset, numerator, denominator) VALUES (?, ?, ?)",
            (asset, rate.numerator, rate.denominator),
        )


def default_game_state(config: Settings) -> GameState:
    return GameState(
        admin=config.ADMIN_ACCOUNT_ID,
        treasury=config.TREASURY_ACCOUNT_ID,
        default_asset=config.DEFAULT_ASSET,
        card_cost=config.CARD_COST,
        prize_table=OddsTable.build(config.PRIZE_ODDS, config.PRIZE_PAYOUTS),
        secondary_table=OddsTable.build(config.SECONDARY_ODDS, config.SECONDARY_ASSETS),
        rates=build_rates(
            config.SECONDARY_ASSETS,
            config.SECONDARY_RATE_NUMERATORS,
            config.SECONDARY_RATE_DENOMINATORS,
        ),
    )


async def ensure_game_state(conn: DB, config: Settings) -> None:
    """Create the system, admin and treasury accounts plus the default tables on first boot."""
    if await game_state_exists(conn):
        return
    state = default_game_state(config)
    for account_id in (config.SYSTEM_ACCOUNT_ID, state.admin, state.treasury):
        _ = await force_create_account(conn, account_id)
    await save_game_state(conn, state)
    for asset in dict.fromkeys([state.default_asset, *state.secondary_table.values]):
        coin = await get_or_create_coin(conn, asset)
        if config.TREASURY_FLOAT > 0:
            _ = await raw_force_transact(
                conn,
                config.SYSTEM_ACCOUNT_ID,
                state.treasury,
                coin.id,
                config.TREASURY_FLOAT,
                f"Treasury float {asset}",
                kind="grant",
            )
    logger.info(
        "Created game state: admin=%s treasury=%s cost=%d %s",
        state.admin,
        state.treasury,
        state.card_cost,
        state.default_asset,
    )
