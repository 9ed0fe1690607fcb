from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, ensure_demo_data, list_tables

from .container import Container, build_container
from .accounts.controller import register as register_accounts
from .employees.controller import register as register_employees
from .payroll.controller import register as register_payroll
from .projects.controller import register as register_projects
from .core.constants import DEFAULT_SESSION_DAYS

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Passing ``container`` skips all database setup (used with in-memory repositories).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)
        container = build_container(db_config=db_config)

    register_accounts(app, container)
    register_employees(app, container)
    register_payroll(app, container)
    register_projects(app, container)

    return app
