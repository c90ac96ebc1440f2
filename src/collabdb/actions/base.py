"""Shared helpers for action functions."""

from __future__ import annotations

import logging
from typing import Any

from collabdb.errors import ActionError
from collabdb.query import QueryResult

logger = logging.getLogger(__name__)

ROLES = ("college", "corporate")


def unwrap(result: QueryResult, context: str) -> Any:
    """Return result.data, or raise ActionError prefixed with context."""
    if result.error is not None:
        message = f"{context}: {result.error.message}"
        logger.error(message)
        raise ActionError(message)
    return result.data


def check_role(role: str) -> str:
    if role not in ROLES:
        raise ValueError(f"Unknown signing role: {role!r} (expected one of {', '.join(ROLES)})")
    return role
