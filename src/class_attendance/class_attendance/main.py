from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .class_sessions.controller import register as register_class_sessions
from .subjects.controller import register as register_subjects
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the API. Passing ``container`` skips database bootstrap entirely."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO),
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
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            # seed.sql references the demo accounts by username
            ensure_demo_accounts(db_config)
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            admin_username=getattr(settings, "ADMIN_USERNAME", None),
            admin_password=getattr(settings, "ADMIN_PASSWORD", None),
        )

    register_users(app, container)
    register_subjects(app, container)
    register_class_sessions(app, container)
    register_attendance(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app
