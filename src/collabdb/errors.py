"""Exception types raised inside collabdb."""

from __future__ import annotations


class CollabDBError(Exception):
    """Base class for collabdb errors."""


class UnknownTableError(CollabDBError, LookupError):
    """Raised when a table name is not part of the store."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown table: {name}")
        self.name = name


class CardinalityError(CollabDBError, ValueError):
    """Raised when single()/maybe_single() constraints are violated."""


class BackendError(CollabDBError):
    """Raised by QueryResult.raise_for_error() for an error envelope."""


class ActionError(BackendError):
    """Raised by action functions when a backend call fails."""
