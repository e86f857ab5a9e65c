"""Logging for the supply-chain domain.

Every record goes to stdout and to one rotating file under ``LOG_DIR``.
structlog renders records as JSON outside development. Request handlers bind
the acting caller so each line carries its role and tenant.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

# Deployment environment -> default level; LOG_LEVEL always wins
DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

QUIET_LOGGERS = ("asyncio", "sqlalchemy.engine", "uvicorn.access")


def current_environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", DEFAULT_LEVELS.get(current_environment(), "INFO")).upper()


def _handlers(level: str, log_dir: str, log_file_prefix: str) -> list[logging.Handler]:
    directory = Path(os.getenv("LOG_DIR", log_dir))
    directory.mkdir(parents=True, exist_ok=True)

    handlers = [
        logging.StreamHandler(sys.stdout),
        logging.handlers.RotatingFileHandler(
            filename=directory / f"{log_file_prefix}.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        ),
    ]
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def configure_logging(level: str | None = None, log_dir: str = "logs", log_file_prefix: str = "supplychain") -> None:
    """Route stdlib logging to stdout and a rotating file, then layer structlog on top."""
    log_level = (level or get_log_level()).upper()

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = _handlers(log_level, log_dir, log_file_prefix)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer = (
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
        )
        if current_environment() == "development"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_caller(role: str, tenant_id: str | None) -> None:
    """Attach the acting caller to every log line emitted for the current request."""
    structlog.contextvars.bind_contextvars(caller_role=role, tenant_id=tenant_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
