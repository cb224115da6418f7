"""Exception types that cross module boundaries.

Selector misses, injection failures and extraction ambiguity are not
exceptions: they come back as False / None / counts.
"""
from __future__ import annotations


class AutoApplyError(Exception):
    """Base class for autoapply errors."""


class ProfileUnavailableError(AutoApplyError):
    """No profile record could be obtained for a fill pass."""


class DocumentError(AutoApplyError):
    """The document backend could not perform a DOM operation."""


class ApiError(AutoApplyError):
    """The backend API answered with an error status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
