"""
Errors - Exception channel of the governance engine.

Verdicts are not errors: a bad proposal is a normal `rejected` verdict.
Exceptions are reserved for:
- InvalidCount: negative / NaN / non-integral set counts at the ledger boundary
- ConfigurationMissing: methodology cannot be loaded
- MalformedProposal: validator input missing required identifiers
- CollaboratorFailure: generative call failed, ledger untouched, retryable
"""

from __future__ import annotations

from typing import Any, Optional


class GovernorError(Exception):
    """Base class for engine errors."""

    retryable = False


class InvalidCount(GovernorError, ValueError):
    """Raised when a set count cannot be recorded."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class ConfigurationMissing(GovernorError):
    """Raised when a methodology configuration cannot be loaded."""

    def __init__(self, message: str, methodology_id: Optional[str] = None):
        super().__init__(message)
        self.methodology_id = methodology_id


class MalformedProposal(GovernorError, ValueError):
    """Raised when a proposal is missing required identifiers."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class CollaboratorFailure(GovernorError):
    """Raised when the generative collaborator fails. Safe to retry."""

    retryable = True

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


__all__ = [
    "GovernorError",
    "InvalidCount",
    "ConfigurationMissing",
    "MalformedProposal",
    "CollaboratorFailure",
]
