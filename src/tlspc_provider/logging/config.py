"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

# Log file configuration
LOG_DIR = Path.home() / ".local" / "state" / "tlspc"
LOG_FILE = LOG_DIR / "tlspc.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
RETENTION_DAYS = 30

# Event keys whose values must never reach a log sink
SENSITIVE_KEYS = frozenset({"api_key", "apikey", "tppl-api-key", "oci_registry_token", "token"})
REDACTED = "***"

# Marker attribute so repeated configuration replaces our handlers instead of stacking them
_HANDLER_MARK = "_tlspc_handler"


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Replace values of sensitive keys in the event dict."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _cleanup_old_logs() -> None:
    """Delete rotated log files older than RETENTION_DAYS."""
    if not LOG_DIR.exists():
        return
    cutoff = datetime.now() - timedelta(days=RETENTION_DAYS)
    for log_file in LOG_DIR.glob(f"{LOG_FILE.name}*"):
        try:
            if datetime.fromtimestamp(log_file.stat().st_mtime) < cutoff:
                log_file.unlink()
        except OSError:
            continue  # file vanished or is not ours to remove


def _mark(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_MARK, True)
    return handler


def _remove_installed_handlers(root_logger: logging.Logger) -> None:
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()


def _file_handler() -> logging.Handler:
    """Build the rotating JSON file handler, creating the log directory."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    _cleanup_old_logs()

    handler = RotatingFileHandler(
        LOG_FILE,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        )
    )
    return _mark(handler)


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
    log_to_file: bool = True,
) -> None:
    """Configure structured logging for the provider.

    Console output goes to stderr so command output on stdout stays
    machine readable. File logs are stored at ~/.local/state/tlspc/tlspc.log
    with rotation (10MB max, 5 backups) and 30 day retention.

    Args:
        verbose: Enable verbose (INFO level) output.
        debug: Enable debug mode (DEBUG level).
        json_output: Render console logs as JSON.
        log_to_file: Also write JSON logs to the rotating log file.
    """
    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    shared_processors = _shared_processors()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
        )
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # handlers filter
    _remove_installed_handlers(root_logger)
    root_logger.addHandler(_mark(console_handler))

    if log_to_file:
        root_logger.addHandler(_file_handler())


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a logger with optional initial context bound.

    Args:
        name: Logger name. If None, structlog picks the caller's module.
        **initial_context: Context variables to bind to the logger.

    Returns:
        A bound structlog logger.
    """
    logger: structlog.BoundLogger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
