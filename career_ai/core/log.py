"""
Logging setup - one root configuration shared by every module.

Format: time [level] [request_id] module:line - message

Usage:
    import logging
    logger = logging.getLogger(__name__)

The request id lives in a ContextVar; the HTTP middleware in main.py sets it
for each request, so every log line of a request carries the same id.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Optional

_request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

_FMT = "%(asctime)s [%(levelname)-5s] [%(request_id)s] %(name)s:%(lineno)d - %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_HANDLER_MARKER = "_is_career_ai_handler"


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def set_request_id(request_id: Optional[str] = None):
    """Bind a request id to the current context. Returns the reset token."""
    value = str(request_id or "").strip()[:32] or new_request_id()
    return _request_id_var.set(value)


def reset_request_id(token) -> None:
    _request_id_var.reset(token)


def get_request_id() -> str:
    return _request_id_var.get()


class RequestIdFilter(logging.Filter):
    """Injects the current request id into every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_var.get()
        return True


def setup_logging(level: str = "INFO") -> None:
    """Attach the app handler to the root logger (idempotent, safe under --reload)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if any(getattr(h, _HANDLER_MARKER, False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FMT, datefmt=_DATE_FMT))
    handler.addFilter(RequestIdFilter())
    setattr(handler, _HANDLER_MARKER, True)
    root.addHandler(handler)
