"""
Structured JSON logging for the club kernel.

Every record is one JSON object per line: ``ts``, ``level``, ``logger``,
``message``, the run-scoped fields bound in ``LogContext`` (``run_id`` for
a billing run, ``member_id`` for the member being priced) and whatever the
caller passed in ``extra``.  Records logged with ``exc_info`` also carry the
exception type, message, ``code`` and the structured attributes of
``ClubKernelError`` subclasses.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from enum import Enum
from typing import Any, Iterator

_LOGGER_PREFIX = "club_kernel"

# ---------------------------------------------------------------------------
# Run-scoped context
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS = ("run_id", "member_id")


class LogContext:
    """Run-scoped log fields, held in contextvars so threads and tasks don't mix."""

    _vars: dict[str, ContextVar[str | None]] = {
        name: ContextVar(f"club_log_{name}", default=None) for name in _CONTEXT_FIELDS
    }

    @classmethod
    def set(cls, *, run_id: str | None = None, member_id: str | None = None) -> None:
        """Set context fields. None leaves a field unchanged."""
        for name, value in (("run_id", run_id), ("member_id", member_id)):
            if value is not None:
                cls._vars[name].set(value)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        """Fields currently bound, omitting unset ones."""
        return {
            name: var.get() for name, var in cls._vars.items() if var.get() is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in cls._vars.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, *, run_id: str | None = None, member_id: str | None = None) -> Iterator[None]:
        """
        Bind fields for the duration of a ``with`` block, restoring the
        previous values on exit.  None values are not bound.
        """
        tokens = [
            (cls._vars[name], cls._vars[name].set(value))
            for name, value in (("run_id", run_id), ("member_id", member_id))
            if value is not None
        ]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    """Serialize dates and enums in ``extra`` payloads; anything else as str."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())

        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            if hasattr(exc, "code"):
                payload["exc_code"] = exc.code
            # ClubKernelError subclasses keep their structured fields as attributes
            for k, v in vars(exc).items():
                if not k.startswith("_") and k not in ("args", "code"):
                    payload[f"exc_{k}"] = v
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger under the club_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the club_kernel logger.

    Only the first call has any effect; later calls return immediately so
    the CLI and the test suite can both call it unconditionally.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger(_LOGGER_PREFIX)
    root.setLevel(level)
    root.propagate = False

    h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())
    root.addHandler(h)


def reset_logging() -> None:
    """Drop the handler and level installed by ``configure_logging``. Tests only."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_LOGGER_PREFIX)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
