"""
Core Logger Module

Centralized logging configuration for idforge with optional Logfire integration.
"""

import logging
import logging.config
import sys
from contextvars import ContextVar, Token
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from idforge.core.config import settings


def _get_setting(name: str, default: Any) -> Any:
    """Get a setting with a default fallback."""
    return getattr(settings, name, default)


@lru_cache(maxsize=1)
def _get_logfire_module() -> Any:
    """Get cached logfire module or None if not available."""
    try:
        import logfire as _lf

        return _lf
    except ImportError:
        return None


def _sanitize_attributes(attrs: Dict[str, Any]) -> Dict[str, Any]:
    """Make record attributes safe for structured logging and redact sensitive keys."""
    safe: Dict[str, Any] = {}
    redact_keywords = ("password", "secret", "token", "api_key", "apikey")
    for k, v in attrs.items():
        lk = k.lower()
        if any(word in lk for word in redact_keywords):
            safe[k] = "<redacted>"
            continue
        try:
            if isinstance(v, (str, int, float, bool)) or v is None:
                safe[k] = v
            else:
                safe[k] = repr(v)
        except (TypeError, ValueError, AttributeError):
            safe[k] = "<unserializable>"
    return safe


_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
    }
)


# Bound by RequestIDMiddleware for the duration of a request
_request_id_context: ContextVar[str] = ContextVar("request_id", default="-")


def set_request_id(request_id: str) -> Token:
    """Attach a request ID to records logged in the current context."""
    return _request_id_context.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id_context.reset(token)


def get_request_id() -> str:
    return _request_id_context.get()


class RequestIdFilter(logging.Filter):
    """Stamp each record with the current request ID ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


class LogfireHandler(logging.Handler):
    """
    Forward records to Logfire, falling back to a stream handler when
    Logfire is unavailable or rejects the record.
    """

    def __init__(
        self,
        level: int = logging.NOTSET,
        fallback: Optional[logging.Handler] = None,
        logfire_instance: Any = None,
    ) -> None:
        super().__init__(level=level)
        self.fallback = fallback or logging.StreamHandler(sys.stderr)
        self.logfire_instance = logfire_instance

    def emit(self, record: logging.LogRecord) -> None:
        logfire = self.logfire_instance or _get_logfire_module()
        if logfire is None:
            self.fallback.emit(record)
            return

        try:
            raw_attrs = {
                k: v
                for k, v in record.__dict__.items()
                if k not in _RESERVED_RECORD_KEYS
            }
            attributes = _sanitize_attributes(raw_attrs)
            attributes["code.filepath"] = record.pathname
            attributes["code.lineno"] = record.lineno
            attributes["code.function"] = record.funcName

            try:
                msg = record.getMessage()
            except (TypeError, ValueError, AttributeError):
                msg = str(record.msg)

            logfire.log(
                level=record.levelname.lower(),
                msg_template=msg,
                attributes=attributes,
                exc_info=record.exc_info,
            )

        except (AttributeError, TypeError, ValueError):
            self.fallback.emit(record)


def get_logging_config() -> Dict[str, Any]:
    """
    Generate base logging configuration (console + file).
    Logfire handler must be added separately via setup_logfire_handler().

    Returns:
        Dict: Base logging configuration dictionary
    """

    log_level = (_get_setting("log_level", "info") or "info").upper()

    logs_dir = Path(_get_setting("log__dir", "logs"))
    logs_dir.mkdir(exist_ok=True)

    file_path = _get_setting("log__file_path", None)
    if file_path is None:
        file_path = str(logs_dir / "idforge.log")

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "simple",
            "filters": ["request_id"],
            "stream": sys.stdout,
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": _get_setting("log__file_level", "INFO"),
            "formatter": "detailed",
            "filters": ["request_id"],
            "filename": file_path,
            "maxBytes": int(_get_setting("log__file_max_bytes", 10 * 1024 * 1024)),
            "backupCount": int(_get_setting("log__file_backup_count", 3)),
            "encoding": "utf-8",
        },
    }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - "
                    "[%(request_id)s] %(message)s"
                ),
                "datefmt": "%H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - "
                    "%(module)s:%(lineno)d - [%(request_id)s] %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "filters": {"request_id": {"()": RequestIdFilter}},
        "handlers": handlers,
        "loggers": {
            "idforge": {
                "level": log_level,
                "handlers": ["console", "file"],
                "propagate": False,
            },
            # Third-party library loggers
            "uvicorn.access": {"level": "WARNING", "propagate": True},
            "watchfiles.main": {"level": "WARNING", "propagate": True},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }

    return config


def setup_logfire_handler() -> None:
    """
    Set up Logfire handler after logfire.configure() has been called.

    Must be called after logging.config.dictConfig(), otherwise the handler
    is dropped. Idempotent.
    """
    if not _get_setting("logfire__enabled", False):
        return

    app_logger = logging.getLogger("idforge")

    if any(isinstance(h, LogfireHandler) for h in app_logger.handlers):
        return

    logfire = _get_logfire_module()
    if logfire is None:
        print("⚠️  Logfire not available, using standard logging only")
        return

    fallback_handler = logging.StreamHandler(sys.stderr)
    fallback_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    logfire_handler = LogfireHandler(
        level=_get_setting("log_level", "INFO").upper(),
        fallback=fallback_handler,
        logfire_instance=logfire,
    )
    logfire_handler.addFilter(RequestIdFilter())
    app_logger.addHandler(logfire_handler)

    logging.getLogger("idforge.logfire").info(
        "Logfire logging handler configured successfully"
    )


@lru_cache(maxsize=1)
def setup_logging() -> None:
    """
    Set up base logging configuration (console + file handlers).
    This function should be called once during application startup.
    """

    config = get_logging_config()
    logging.config.dictConfig(config)

    logger = logging.getLogger("idforge.startup")
    logger.info(
        "Logging system initialized - Environment: %s, Level: %s, Logfire: %s",
        _get_setting("environment", "development"),
        _get_setting("log_level", "info"),
        _get_setting("logfire__enabled", False),
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with automatic 'idforge' prefix.

    Args:
        name: Logger name, typically __name__ of the calling module.
              Will be prefixed with 'idforge.' if not already present.

    Returns:
        Logger: Configured logger instance with idforge prefix

    Example:
        logger = get_logger(__name__)
        logger.info("This is an info message")
    """

    setup_logging()

    if not name.startswith("idforge"):
        name = f"idforge.{name}"

    return logging.getLogger(name)
