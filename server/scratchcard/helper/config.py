import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()  # pyright: ignore[reportUnusedCallResult]


def _int_list(raw: str) -> tuple[int, ...]:
    return tuple(int(v) for v in raw.split(",") if v.strip())


def _str_list(raw: str) -> tuple[str, ...]:
    return tuple(v.strip() for v in raw.split(",") if v.strip())


class Settings:
    APP_NAME = os.getenv("APP_NAME", "scratchcard")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DB_PATH = Path(os.getenv("SCRATCH_DB_PATH", "data/scratchcard.db"))
    DB_POOL_SIZE = int(os.getenv("SCRATCH_DB_POOL_SIZE", "8"))

    JWT_SECRET = os.environ["JWT_SECRET"]
    JWT_ISSUER = os.getenv("JWT_ISSUER", "scratchcard")
    JWT_TTL_SECONDS = float(os.getenv("JWT_TTL_SECONDS", "86400"))
    # Lets /auth/dev/login mint a cookie for any account id. Local use only.
    DEV_LOGIN = os.getenv("DEV_LOGIN", "0") == "1"

    # Account 0 is the system issuer; it funds grants and the treasury float.
    SYSTEM_ACCOUNT_ID = 0
    ADMIN_ACCOUNT_ID = int(os.getenv("ADMIN_ACCOUNT_ID", "1"))
    TREASURY_ACCOUNT_ID = int(os.getenv("TREASURY_ACCOUNT_ID", "2"))
    TREASURY_FLOAT = int(os.getenv("TREASURY_FLOAT", "1000000"))
    STARTING_GRANT = int(os.getenv("STARTING_GRANT", "1000"))

    DEFAULT_ASSET = os.getenv("DEFAULT_ASSET", "usd")
    CARD_COST = int(os.getenv("CARD_COST", "10"))

    PRIZE_ODDS = _int_list(os.getenv("PRIZE_ODDS", "30000,15000,8000,3000,1000,200"))
    PRIZE_PAYOUTS = _int_list(os.getenv("PRIZE_PAYOUTS", "50,100,200,1000,5000,100000"))

    SECONDARY_ODDS = _int_list(os.getenv("SECONDARY_ODDS", "10000"))
    SECONDARY_ASSETS = _str_list(os.getenv("SECONDARY_ASSETS", "gamba"))
    SECONDARY_RATE_NUMERATORS = _int_list(os.getenv("SECONDARY_RATE_NUMERATORS", "3"))
    SECONDARY_RATE_DENOMINATORS = _int_list(os.getenv("SECONDARY_RATE_DENOMINATORS", "2"))


settings = Settings()
