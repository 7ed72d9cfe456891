"""Errors that abort a diary run."""

from typing import Any, Optional


class LezecError(Exception):
    """Base class for diary scraper errors."""

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(LezecError):
    """Raised when settings are missing or invalid (e.g. no credentials)."""


class AuthenticationError(LezecError):
    """Raised when the login response carries no session cookies."""


class FetchError(LezecError):
    """Raised when the diary listing cannot be fetched or decoded."""
