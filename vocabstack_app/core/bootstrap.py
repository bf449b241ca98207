"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import logging

from flask import Flask
from sqlalchemy import inspect

from .error_handlers import SchemaMismatchError
from .error_handlers import register_error_handlers as _register_error_handlers
from .extensions import db
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure application logging if no handlers are present."""

    if app.config.get("LOG_TO_FILE"):
        setup_logging(
            app,
            log_level=app.config.get("LOG_LEVEL", "INFO"),
            log_dir=app.config.get("LOG_DIR"),
            json_format=bool(app.config.get("LOG_JSON")),
            max_bytes=app.config.get("LOG_MAX_BYTES", 10 * 1024 * 1024),
            backup_count=app.config.get("LOG_BACKUP_COUNT", 5),
        )

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))
    if app.logger.handlers:
        return

    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    app.logger.addHandler(handler)
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)


def register_error_handlers(app: Flask) -> None:
    """Render engine errors as JSON for any blueprint a host application adds."""

    _register_error_handlers(app)


def register_modules(app: Flask) -> None:
    """Run the setup hook of every engine module."""

    register_default_modules(app)


def verify_schema(app: Flask) -> None:
    """Compare mapped tables with the live database and fail fast on drift."""

    inspector = inspect(db.engine)
    existing_tables = set(inspector.get_table_names())
    missing: dict[str, list] = {}

    for table in db.metadata.sorted_tables:
        if table.name not in existing_tables:
            missing[table.name] = [column.name for column in table.columns]
            continue
        live_columns = {column["name"] for column in inspector.get_columns(table.name)}
        absent = [column.name for column in table.columns if column.name not in live_columns]
        if absent:
            missing[table.name] = absent

    if missing:
        app.logger.error("Schema check failed: %s", missing)
        raise SchemaMismatchError(missing)
    app.logger.info("Schema check passed for %d tables.", len(existing_tables))


def initialize_database(app: Flask) -> None:
    """Create missing tables and verify the existing ones match the models."""

    from .. import models  # noqa: F401  (core entities must be mapped)

    db.create_all()

    if app.config.get("SCHEMA_CHECK_ON_STARTUP", True):
        verify_schema(app)
