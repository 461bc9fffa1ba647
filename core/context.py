"""
Context management utilities for per-request correlation ids.
"""

from contextvars import ContextVar
from typing import Optional

# Context variable to hold the id of the request currently being served
# Using contextvars ensures thread-safety and async compatibility
_current_request_id: ContextVar[Optional[str]] = ContextVar("current_request_id", default=None)


def set_current_request_id(request_id: str):
    """
    Sets the request id for the current execution context.
    """
    _current_request_id.set(request_id)


def get_current_request_id() -> Optional[str]:
    """
    Retrieves the request id from the current execution context.
    Returns None outside of a request (tasks, management commands).
    """
    return _current_request_id.get()


def reset_current_request_id():
    """
    Resets the context variable to None.
    """
    _current_request_id.set(None)
