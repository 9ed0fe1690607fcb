from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` maps a field name to its message when the failing field is known.
    """

    def __init__(self, message: str, *, errors: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.errors = dict(errors or {})


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class UnauthorizedError(DomainError):
    """Raised when an operation runs without an acting account."""


class NotFoundError(DomainError):
    """Raised when a target is missing or owned by another account."""


class ConflictError(DomainError):
    """Raised when a uniqueness rule would be violated."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
