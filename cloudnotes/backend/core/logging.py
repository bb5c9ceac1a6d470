"""
Centralized Logging Configuration.

All modules log through structlog configured here. Settings come from
config/settings/logging.yaml; entry scripts may override level and format.

Structured fields in every JSON log record:
    timestamp   - ISO 8601 UTC timestamp
    level       - Log level
    logger      - Module path (e.g., cloudnotes.backend.services.note)
    event       - Log message
    func_name   - Function that emitted the log
    lineno      - Line number in source file
    request_id  - Request correlation ID (bound by RequestContextMiddleware)
    owner_id    - Owner the request acts as (bound after authentication)
    source      - Origin context for non-HTTP logs (cli, shell, internal)

Usage:
    from cloudnotes.backend.core.logging import get_logger, setup_logging

    setup_logging()                                # from logging.yaml
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note_id})

    log_with_source(logger, "cli", "debug", "API request", path="/api/notes")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import Processor

from cloudnotes.backend.core.config import find_project_root, load_yaml_config

VALID_SOURCES = frozenset({"web", "cli", "shell", "internal", "unknown"})

_logging_config: dict[str, Any] | None = None


def _get_logging_config() -> dict[str, Any]:
    """Load and cache config/settings/logging.yaml."""
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Arguments override the corresponding logging.yaml values.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        format_type: "json" or "console".
        enable_console: Write records to stdout.
        enable_file_logging: Write JSON records to the rotating file handler.
    """
    config = _get_logging_config()
    handlers_config = config["handlers"]

    effective_level = level if level is not None else config["level"]
    effective_format = format_type if format_type is not None else config["format"]
    console_enabled = (
        enable_console if enable_console is not None
        else handlers_config["console"]["enabled"]
    )
    file_enabled = (
        enable_file_logging if enable_file_logging is not None
        else handlers_config["file"]["enabled"]
    )

    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )
    if effective_format == "console":
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
            foreign_pre_chain=shared_processors,
        )
    else:
        console_formatter = json_formatter

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, effective_level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if file_enabled:
        file_config = handlers_config["file"]
        log_path = find_project_root() / file_config["path"]
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config["max_bytes"],
            backupCount=file_config["backup_count"],
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Return a structlog logger bound to `name` (typically __name__)."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message with an explicit source.

    Used outside HTTP request context, e.g. by the terminal client.

    Raises:
        AttributeError: If level is not a valid log level
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
