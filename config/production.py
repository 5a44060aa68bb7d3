import os

from config.config import DEFAULT_STORE_ID, LOG_LEVEL, NIGHT_MINUTES_METHOD, db_config_from_env, pay_rates_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()
PAY_RATES = pay_rates_from_env()

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

__all__ = [
    "SECRET_KEY", "DB_CONFIG", "PAY_RATES", "DEBUG", "AUTO_INIT_DB",
    "LOG_LEVEL", "DEFAULT_STORE_ID", "NIGHT_MINUTES_METHOD",
]
