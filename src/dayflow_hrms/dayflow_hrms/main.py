from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_error_handlers
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .attendance.controller import register as register_attendance
from .employees.controller import register as register_employees
from .leaves.controller import register as register_leaves
from .salary.controller import register as register_salary

logger = logging.getLogger(__name__)


def create_app(container=None) -> Flask:
    """Build the Flask app.

    `container` may be injected (tests); otherwise one is built from settings.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        container = build_container(db_config=db_config)
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(container.conn, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(container.conn)))

    register_error_handlers(app)
    register_salary(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_employees(app, container)

    return app
