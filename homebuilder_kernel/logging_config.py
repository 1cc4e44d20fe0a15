"""
homebuilder_kernel.logging_config -- JSON-lines logging for analytics runs.

Responsibility:
    Every record under the ``homebuilder`` logger namespace is rendered as a
    single JSON object.  Records emitted during ``compute_analytics`` carry
    the project and computation ids bound by the orchestrator, including
    records emitted on extractor worker threads (the orchestrator copies
    the context into each worker).

Record layout:
    ts, level, logger, message          always present
    correlation_id, project_id,
    computation_id                      when bound in ``LogContext``
    <extra keys>                        from ``extra={...}``
    exc_type, exc_message, exc_code,
    exc_<attr>, exc_cause, traceback    when ``exc_info`` is set

Values that JSON cannot encode directly: Decimal -> str (no float
rounding of money), datetime -> ISO 8601, Enum -> value, dataclasses
(``Sourced``, ``PersistenceOutcome``) -> dict.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

__all__ = [
    "LOGGER_NAMESPACE",
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

LOGGER_NAMESPACE = "homebuilder"


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class LogContext:
    """Per-computation log fields held in ``contextvars``.

    Known fields: ``correlation_id`` (set by whoever triggers the run),
    ``project_id`` and ``computation_id`` (bound by the orchestrator).
    """

    _vars: dict[str, ContextVar[str | None]] = {
        name: ContextVar(f"homebuilder_{name}", default=None)
        for name in ("correlation_id", "project_id", "computation_id")
    }

    @classmethod
    def _var(cls, name: str) -> ContextVar[str | None]:
        try:
            return cls._vars[name]
        except KeyError:
            raise TypeError(f"Unknown log context field: {name}") from None

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set the given fields; None values leave a field untouched."""
        for name, value in fields.items():
            var = cls._var(name)
            if value is not None:
                var.set(value)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return {
            name: value
            for name, var in cls._vars.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in cls._vars.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[None]:
        """Set fields for the duration of the block, then restore them."""
        tokens = []
        try:
            for name, value in fields.items():
                var = cls._var(name)
                if value is not None:
                    tokens.append((var, var.set(value)))
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else on a record came from extra=
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return str(value)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default)

    @staticmethod
    def _exception_fields(exc: BaseException) -> dict[str, Any]:
        """Type, message, error code and the structured attributes of ``exc``.

        ``HomebuilderError`` subclasses keep their context (project_id,
        stage, reason) as instance attributes; each becomes ``exc_<name>``.
        ``exc_cause`` names the chained exception, e.g. the error an
        extractor raised underneath a ``ComputationError``.
        """
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        for name, value in vars(exc).items():
            if not name.startswith("_"):
                fields[f"exc_{name}"] = value
        if exc.__cause__ is not None:
            fields["exc_cause"] = type(exc.__cause__).__name__
        return fields


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_setup_lock = threading.Lock()
_handler: logging.Handler | None = None


def get_logger(name: str) -> logging.Logger:
    """``get_logger("engines.budget")`` -> logger ``homebuilder.engines.budget``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Install the JSON handler on the ``homebuilder`` logger.

    Only the first call has any effect until ``reset_logging()``.  Records
    do not propagate to the root logger.
    """
    global _handler
    with _setup_lock:
        if _handler is not None:
            return
        _handler = handler or logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(StructuredFormatter())
        namespace = logging.getLogger(LOGGER_NAMESPACE)
        namespace.setLevel(level)
        namespace.propagate = False
        namespace.addHandler(_handler)


def reset_logging() -> None:
    """Remove every handler from the ``homebuilder`` logger (tests only)."""
    global _handler
    with _setup_lock:
        _handler = None
        namespace = logging.getLogger(LOGGER_NAMESPACE)
        namespace.handlers.clear()
        namespace.setLevel(logging.WARNING)
