"""
Logging setup for the NoteVault backend.

Console output is JSON in production and colored in debug mode; everything
also goes to rotating files under ``settings.log_dir``. Note content and
encryption keys must never end up in a log record.
"""
import json
import logging
import logging.config
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..config import get_settings

# LogRecord attributes that are not user supplied ``extra`` fields
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        extra = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}
        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        # work on a copy, other handlers share the record
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, "")
        record.levelname = f"{color}{self.BOLD}{record.levelname}{self.RESET}"
        record.name = f"\033[90m{record.name}{self.RESET}"
        return super().format(record)


def get_log_level(level_str: Optional[str] = None) -> int:
    """Get log level from string or settings."""
    level_str = level_str or get_settings().log_level
    level = logging.getLevelName(level_str.upper())
    return level if isinstance(level, int) else logging.INFO


def build_logging_config(log_dir: Path) -> dict:
    settings = get_settings()
    app_handlers = ["console", "file", "error_file"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JSONFormatter},
            "colored": {
                "()": ColoredFormatter,
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "file": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)-30s | %(funcName)-20s:%(lineno)-4d | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "colored" if settings.debug else "json",
                "stream": sys.stdout,
                "level": get_log_level(),
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(log_dir / "notevault.log"),
                "maxBytes": 10_000_000,  # 10MB
                "backupCount": 5,
                "formatter": "file",
                "level": "DEBUG",
            },
            "error_file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": str(log_dir / "error.log"),
                "maxBytes": 10_000_000,  # 10MB
                "backupCount": 5,
                "formatter": "json",
                "level": "ERROR",
            },
        },
        "loggers": {
            "": {"handlers": ["console", "file"], "level": "INFO"},
            # modules log under their import path, installed or from the source tree
            "notevault": {"handlers": app_handlers, "level": "DEBUG", "propagate": False},
            "src.notevault": {"handlers": app_handlers, "level": "DEBUG", "propagate": False},
            "uvicorn": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "sqlalchemy": {"handlers": ["file"], "level": "WARNING", "propagate": False},
            "alembic": {"handlers": ["console", "file"], "level": "INFO", "propagate": False},
        },
    }


def setup_logging() -> None:
    """Configure logging for the whole process."""
    settings = get_settings()

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(log_dir))

    get_logger("logging").info(
        "Logging system initialized",
        extra={
            "log_level": settings.log_level,
            "debug": settings.debug,
            "environment": settings.environment,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the notevault namespace."""
    return logging.getLogger(f"notevault.{name}")


class LoggingMiddleware:
    """ASGI middleware logging each HTTP request and its response."""

    def __init__(self, app, logger_name: str = "http"):
        self.app = app
        self.logger = get_logger(logger_name)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        request_id = uuid.uuid4().hex[:12]
        client = scope.get("client")

        self.logger.info(
            "HTTP Request",
            extra={
                "request_id": request_id,
                "method": scope["method"],
                "path": scope["path"],
                "query_string": scope.get("query_string", b"").decode("latin-1"),
                "client_ip": client[0] if client else "unknown",
            },
        )

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                self.logger.info(
                    "HTTP Response",
                    extra={
                        "request_id": request_id,
                        "status_code": message.get("status", 0),
                        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                        "method": scope["method"],
                        "path": scope["path"],
                    },
                )
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            self.logger.error(
                "HTTP Request Failed",
                extra={
                    "request_id": request_id,
                    "method": scope["method"],
                    "path": scope["path"],
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "exception_type": type(exc).__name__,
                },
            )
            raise
