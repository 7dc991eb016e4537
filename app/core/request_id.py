"""Request ID generation and management."""

import uuid
from contextvars import ContextVar
from typing import Optional

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def generate_request_id(incoming: Optional[str] = None) -> str:
    """Reuse a sane incoming request ID, otherwise create one."""
    if incoming and len(incoming) <= 128 and incoming.isprintable():
        return incoming
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get("")


def set_request_id(request_id: str) -> None:
    """Set request ID in context."""
    request_id_var.set(request_id)
