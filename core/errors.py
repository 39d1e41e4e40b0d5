# core/errors.py

"""
Exception types raised inside the roster store.

These never cross the public `Roster` API as exceptions: the store catches them and folds
them into a `Response` (mutators) or a `None` / `False` return (lookups and checks).
Model validators and storage backends raise them so the store can tell the failure
kinds apart.
"""

from __future__ import annotations

from core.response import ErrorCode


class RosterError(Exception):
    """Base class for every error raised by the roster store."""


class ValidationError(RosterError, ValueError):
    """
    A record failed a field rule or a cross-record invariant.

    Attributes:
        code (ErrorCode): The machine-readable error identifier reported to the caller.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_FAILED):
        super().__init__(message)
        self.code = code


class NotFoundError(RosterError, LookupError):
    """An operation targeted an id that is not in the cache."""


class PersistenceError(RosterError):
    """A storage backend (engine or snapshot) failed to read or write."""
