"""
Exception classes for the address resolver.

All exceptions inherit from AddressResolverError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class AddressResolverError(Exception):
    """Base exception for all address resolver errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(AddressResolverError):
    """Raised when policy constants or collaborators are misconfigured."""

    pass


class NetworkError(AddressResolverError):
    """Raised when the name service cannot be reached or answers with a transport failure."""

    pass


class ProtocolError(AddressResolverError):
    """Raised when the name service answers with an error envelope or malformed data."""

    pass
