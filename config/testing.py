import os

from config.config import DEFAULT_STORE_ID, NIGHT_MINUTES_METHOD, db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="timeclock")
PAY_RATES = {}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

__all__ = [
    "SECRET_KEY", "DB_CONFIG", "PAY_RATES", "DEBUG", "TESTING", "AUTO_INIT_DB",
    "LOG_LEVEL", "DEFAULT_STORE_ID", "NIGHT_MINUTES_METHOD",
]
