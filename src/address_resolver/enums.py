"""
Enumeration types for the address resolver.

These enums provide type-safe constants for resolution states, gate verdicts,
error codes, and logging levels.
"""

from enum import Enum


class ResolutionState(Enum):
    """Externally observable state of a recipient input."""

    IDLE = "idle"
    SEARCHING = "searching"
    RESOLVED_TRUSTED = "resolved_trusted"
    RESOLVED_UNTRUSTED = "resolved_untrusted"
    FORMAT_ERROR = "format_error"
    NOT_FOUND = "not_found"


class TrustVerdict(Enum):
    """Outcome of the confirmation gate."""

    TRUSTED = "trusted"
    UNTRUSTED = "untrusted"


class LookupErrorCode(Enum):
    """Error codes for name service lookups."""

    NETWORK_ERROR = "network_error"
    TLS_ERROR = "tls_error"
    TIMEOUT = "timeout"
    PARSE_ERROR = "parse_error"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    API_ERROR = "api_error"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
