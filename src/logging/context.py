# src/logging/context.py — v1
"""Contextual logging support: attach book_id and operation to log records.

Context variables follow asyncio tasks, so concurrent readers of different
books keep separate contexts.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

_book_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "book_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    book_id: str | None = None
    operation: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(book_id=_book_id.get(), operation=_operation.get())


@contextmanager
def book_context(book_id: str, operation: str) -> Iterator[None]:
    """Bind book_id/operation for the duration of a block."""
    book_token = _book_id.set(book_id)
    op_token = _operation.set(operation)
    try:
        yield
    finally:
        _operation.reset(op_token)
        _book_id.reset(book_token)


def clear_context() -> None:
    """Reset all context variables."""
    _book_id.set(None)
    _operation.set(None)
