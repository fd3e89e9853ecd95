from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .common.logging_utils import setup_logging
from .container import Container, build_container
from .core.constants import GRACE_MINUTES, SHIFT_LOCK_TIMEOUT_SECONDS
from .database.bootstrap import apply_schema, list_tables
from .shifts.controller import register as register_shifts

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    logger.info(
        "Starting homestay staff service",
        extra={
            "settings": settings_module,
            "db": f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
        },
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready", extra={"tables": len(list_tables(db_config))})

        container = build_container(
            db_config=db_config,
            grace_minutes=int(getattr(settings, "GRACE_MINUTES", GRACE_MINUTES)),
            timezone=getattr(settings, "ATTENDANCE_TIMEZONE", None),
            lock_timeout=int(getattr(settings, "SHIFT_LOCK_TIMEOUT_SECONDS", SHIFT_LOCK_TIMEOUT_SECONDS)),
        )

    register_error_handlers(app)
    register_shifts(app, container)
    register_attendance(app, container)

    return app
