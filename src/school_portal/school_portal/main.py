from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .access import guard
from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .database.connection import DatabaseConnection, DBConfig
from .reminders.scheduler import start_scheduler
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def load_settings(settings_module: Optional[str] = None) -> Any:
    return importlib.import_module(settings_module or get_settings_module())


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def _prepare_mysql(settings: Any) -> None:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(settings.DB_CONFIG))
    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(conn)
        logger.info("Schema ready (tables=%d)", len(list_tables(conn)))
    if getattr(settings, "AUTO_SEED_DB", False):
        ensure_demo_users(conn)
        logger.info("Demo accounts ready")


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings = load_settings(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = settings.SECRET_KEY
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", 7)))

    if container is None:
        if str(getattr(settings, "STORAGE_BACKEND", "firestore")).lower() == "mysql":
            _prepare_mysql(settings)
        container = build_container(settings)
        start_scheduler(container.reminder_job, settings)

    app.extensions["school_portal"] = container

    guard.register(app, container.auth_service)
    register_users(app, container)
    register_attendance(app, container)

    @app.errorhandler(404)
    def not_found(_):
        return jsonify({"success": False, "message": "Halaman tidak ditemukan"}), 404

    logger.info("App created with settings=%s", settings.__name__)
    return app
