from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .core.constants import DEFAULT_SHIFT_PROFILE
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    proxy_hops = int(getattr(settings, "PROXY_FIX_HOPS", 0) or 0)
    if proxy_hops > 0:
        # Only trust X-Forwarded-For from this many reverse proxies.
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxy_hops)
    db_config = getattr(settings, "DB_CONFIG")

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        shift_profile=getattr(settings, "SHIFT_PROFILE", DEFAULT_SHIFT_PROFILE),
        overtime_policy=getattr(settings, "OVERTIME_POLICY", None),
        standard_hours=getattr(settings, "STANDARD_HOURS", None),
    )
    logger.info("shift profile=%s overtime=%s", container.default_policy.name, container.default_policy.overtime_policy.value)

    register_attendance(app, container)
    return app
