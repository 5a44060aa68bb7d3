"""Shared settings read from the environment; per-env modules build on these."""
import os


def db_config_from_env(*, default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "timeclock_db"),
    }


def pay_rates_from_env() -> dict:
    """Optional rate overrides, e.g. PAY_NIGHT_ALLOWANCE_PER_HOUR=60."""

    keys = {
        "PAY_OVERTIME_TIER1_MULTIPLIER": "overtime_tier1_multiplier",
        "PAY_OVERTIME_TIER2_MULTIPLIER": "overtime_tier2_multiplier",
        "PAY_HOLIDAY_MULTIPLIER": "holiday_multiplier",
        "PAY_NIGHT_ALLOWANCE_PER_HOUR": "night_allowance_per_hour",
        "PAY_NIGHT_START": "night_start",
        "PAY_NIGHT_END": "night_end",
        "PAY_DEFAULT_HOURLY_RATE": "default_hourly_rate",
    }
    return {field: os.environ[env] for env, field in keys.items() if os.getenv(env)}


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_STORE_ID = int(os.getenv("DEFAULT_STORE_ID", "1"))
NIGHT_MINUTES_METHOD = os.getenv("NIGHT_MINUTES_METHOD", "interval")
