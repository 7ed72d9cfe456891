"""
Core layer - stable foundation for the diary scraper.

Components:
- models: Climb, RouteDetail dataclasses
- http_client: Session-carrying HTTP client
- normalizer: Page decoding, grade and title splitting
- retry: Retry/pacing policy for route requests
- exceptions: Errors that abort a run
"""

from .models import Climb, RouteDetail
from .http_client import HttpClient, Session
from .normalizer import (
    decode_page,
    clean_text,
    is_diary_date,
    parse_grade,
    parse_title,
    parse_attempts,
)
from .retry import RetryPolicy
from .exceptions import (
    LezecError,
    ConfigurationError,
    AuthenticationError,
    FetchError,
)

__all__ = [
    "Climb",
    "RouteDetail",
    "HttpClient",
    "Session",
    "decode_page",
    "clean_text",
    "is_diary_date",
    "parse_grade",
    "parse_title",
    "parse_attempts",
    "RetryPolicy",
    "LezecError",
    "ConfigurationError",
    "AuthenticationError",
    "FetchError",
]
