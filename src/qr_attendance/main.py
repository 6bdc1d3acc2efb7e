from __future__ import annotations

import importlib
import logging
import sys
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .analytics.controller import register as register_analytics
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .ledger.controller import register as register_ledger
from .redemption.controller import register as register_redemption
from .sessions.controller import register as register_sessions
from .settings import get_settings_module

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_LIFETIME_MINUTES"] = int(getattr(settings, "SESSION_LIFETIME_MINUTES", 15))

    if container is None:
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
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config)
            logger.info("demo roster seeded")

        container = build_container(db_config=db_config)

    app.extensions["qr_attendance"] = container

    register_sessions(app, container)
    register_redemption(app, container)
    register_ledger(app, container)
    register_analytics(app, container)

    return app
