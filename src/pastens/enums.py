"""
Enumeration types for pastens.

These enums provide type-safe constants for search phases, lookup
error codes, and logging levels throughout the system.
"""

from enum import Enum


class SearchPhase(Enum):
    """Which variant of the search state is active."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


class LookupStatus(Enum):
    """Outcome of a single history API request."""

    FOUND = "found"
    ERROR = "error"


class LookupErrorCode(Enum):
    """Error codes for history API lookups."""

    RATE_LIMITED = "rate_limited"
    LOOKUP_FAILED = "lookup_failed"
    PARSE_ERROR = "parse_error"
    TRANSPORT_FAILURE = "transport_failure"
    TIMEOUT = "timeout"


class SearchSource(Enum):
    """Where a search was initiated from."""

    INPUT = "input"
    HISTORY = "history"
    LEADERBOARD = "leaderboard"
    ROUTE = "route"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
