from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .database.bootstrap import apply_schema
from .payroll.controller import register as register_payroll

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(format=LOG_FORMAT, level=getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    container = build_container(
        db_config=db_config,
        pay_rates=getattr(settings, "PAY_RATES", None),
        night_minutes=getattr(settings, "NIGHT_MINUTES_METHOD", "interval"),
    )

    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(container.conn, db_config["database"])

    register_attendance(
        app,
        container.attendance_service,
        default_store_id=int(getattr(settings, "DEFAULT_STORE_ID", 1)),
    )
    register_payroll(app, container.payroll_service)

    return app
