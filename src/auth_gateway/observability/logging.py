"""Logging configuration using Loguru.

JSON lines in deployed environments, colorized text locally. Request-scoped
fields (request id, authenticated scheme and subject) live in a ContextVar and
are attached to every record emitted while the request is in flight.
Standard library logging from uvicorn, httpx and asyncpg is routed through
Loguru so the whole process shares one format.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING

import orjson
from loguru import logger


if TYPE_CHECKING:
    from typing import Any


_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# Extra fields that must never reach a sink, whatever a caller binds.
_SECRET_FIELDS = frozenset(
    {"password", "token", "access_token", "api_key", "authorization", "code"}
)

_QUIET_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "asyncio",
    "asyncpg",
)


class InterceptHandler(logging.Handler):
    """Forward standard library log records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _patch_record(record: dict[str, Any]) -> None:
    """Merge the request context into ``extra`` and drop secret fields."""
    extra = record["extra"]
    for key, value in _log_context.get().items():
        extra.setdefault(key, value)
    for key in _SECRET_FIELDS.intersection(extra):
        del extra[key]


def _format_json(record: dict[str, Any]) -> str:
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["extra"].get("name", record["name"]),
        "function": record["function"],
        "line": record["line"],
        **{k: v for k, v in record["extra"].items() if k != "name"},
    }

    exc = record["exception"]
    if exc:
        payload["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    # Loguru treats the returned string as a template, so braces are escaped.
    line = orjson.dumps(payload, default=str).decode()
    return line.replace("{", "{{").replace("}", "}}") + "\n"


def _format_text(record: dict[str, Any]) -> str:
    fields = {k: v for k, v in record["extra"].items() if k != "name"}
    suffix = ""
    if fields:
        rendered = " ".join(f"{k}={v}" for k, v in fields.items())
        suffix = " | " + rendered.replace("{", "{{").replace("}", "}}")

    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        f"<level>{{message}}</level>{suffix}\n"
    )
    if record["exception"]:
        fmt += "{exception}\n"
    return fmt


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    *,
    is_development: bool = False,
) -> None:
    """Configure Loguru sinks and intercept standard library logging.

    Args:
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: ``"json"`` or ``"text"``. Development always uses text.
        is_development: Use colorized text output with diagnostics.
    """
    logger.remove()
    logger.configure(patcher=_patch_record, extra={"name": "auth_gateway"})

    use_json = log_format == "json" and not is_development
    logger.add(
        sys.stdout,
        format=_format_json if use_json else _format_text,
        level=log_level.upper(),
        colorize=not use_json,
        backtrace=True,
        diagnose=not use_json,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Return the shared logger bound to a module name."""
    return logger.bind(name=name)


def bind_context(**kwargs: Any) -> None:
    """Attach fields to every log record in the current async context.

    Example:
        bind_context(request_id="abc-123", auth_scheme="basic")
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def clear_context() -> None:
    """Reset the request-scoped logging context."""
    _log_context.set({})


def unbind_context(*keys: str) -> None:
    """Remove specific fields from the logging context."""
    current = _log_context.get().copy()
    for key in keys:
        current.pop(key, None)
    _log_context.set(current)


def get_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


__all__ = [
    "bind_context",
    "clear_context",
    "get_context",
    "get_logger",
    "logger",
    "setup_logging",
    "unbind_context",
]
