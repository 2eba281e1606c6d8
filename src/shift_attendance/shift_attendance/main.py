from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .attendance.controller import register as register_attendance
from .clock.controller import register as register_clock
from .common.logging_utils import setup_json_logging
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .schedules.controller import register as register_schedules

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None, settings: object = None) -> Flask:
    load_dotenv(override=False)
    settings = settings or load_settings()

    setup_json_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema_ready", extra={"tables": len(list_tables(db_config))})
        container = build_container(db_config=db_config, settings=settings)

    logger.info(
        "app_created",
        extra={"settings": getattr(settings, "__name__", get_settings_module()), "timezone": str(container.tz)},
    )

    register_error_handlers(app)
    register_clock(app, container)
    register_schedules(app, container)
    register_attendance(app, container)

    return app
