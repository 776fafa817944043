"""Lightweight correlation ID utilities for structured logging.

Provides a per-operation correlation identifier via a ContextVar so that the
log records emitted while handling one rule, log or verification request can
be tied together, including records written by the stores underneath.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(request_id: str) -> None:
    """Set the current request correlation id in a context variable."""

    _request_id_var.set(request_id)


def get_request_id() -> str:
    """Return the current request correlation id, or empty string."""

    return _request_id_var.get()


@contextmanager
def request_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for the duration of a block.

    Reuses the enclosing id when one is already set, otherwise binds
    ``request_id`` or a fresh UUID. The previous value is restored on exit.
    """
    current = _request_id_var.get()
    req_id = current or request_id or str(uuid.uuid4())
    token = _request_id_var.set(req_id)
    try:
        yield req_id
    finally:
        _request_id_var.reset(token)
