"""
Context-aware logging utilities.
Provides the requested group id for all log messages within a request.
"""

import contextvars
import logging
from typing import Optional

# Context variable to store the group of the current request
current_group_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'current_group_id', default=None
)


def set_group_context(group_id: str) -> contextvars.Token:
    """Set group id in current context. Returns a token for reset_group_context."""
    return current_group_id.set(group_id)


def get_group_context() -> Optional[str]:
    return current_group_id.get()


def reset_group_context(token: contextvars.Token) -> None:
    current_group_id.reset(token)


class GroupContextFilter(logging.Filter):
    """
    Logging filter that adds the group id from context to log records.

    The API has no users or sessions: a request is identified only by the
    group it asks about, and the fallback cache is keyed by the same id, so
    tagging lines with it ties fetch, fallback and error logs of one answer
    together.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        group_id = get_group_context()
        record.group_id = f"group_{group_id} | " if group_id is not None else ""
        return True
