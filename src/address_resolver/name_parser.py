"""
Name syntax parsing for recipient input.

Decides whether a recipient string is shaped like a name service domain
(`<label>.<suffix>`, e.g. `alice.sats`) or should be treated as a raw
on-chain address. Parsing is pure and never raises; absence of domain
syntax is a normal outcome.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .exceptions import ConfigurationError
from .i18n import join_with_and


SUFFIX_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")
WHITESPACE_PATTERN = re.compile(r"\s")


@dataclass(frozen=True)
class ParsedName:
    """A domain-shaped input split at its last dot."""

    label: str
    suffix: str

    @property
    def full_name(self) -> str:
        return f"{self.label}.{self.suffix}"


def parse_name(text: object) -> Optional[ParsedName]:
    """
    Split a recipient string into label and suffix.

    The input is lower-cased and split at its last dot. The label must be
    non-empty, free of whitespace and without empty dotted segments; the
    suffix must start with a letter and contain only letters, digits and
    hyphens.

    Args:
        text: Raw recipient input

    Returns:
        ParsedName if the input is domain-shaped, None otherwise
    """
    if not isinstance(text, str) or "." not in text:
        return None

    label, _, suffix = text.lower().rpartition(".")

    if not label or WHITESPACE_PATTERN.search(label):
        return None

    # every dotted segment of the label must be non-empty
    if any(not segment for segment in label.split(".")):
        return None

    if not SUFFIX_PATTERN.match(suffix):
        return None

    return ParsedName(label=label, suffix=suffix)


def normalize_suffixes(suffixes: Iterable[str]) -> tuple[str, ...]:
    """Lower-case, strip leading dots and de-duplicate, keeping order."""
    seen: list[str] = []
    for suffix in suffixes:
        normalized = str(suffix).strip().lstrip(".").lower()
        if normalized and normalized not in seen:
            seen.append(normalized)
    return tuple(seen)


def describe_supported_suffixes(
    suffixes: Iterable[str],
    language: Optional[str] = None,
) -> str:
    """
    Render suffixes for display, e.g. `.sats, .unisat and .x`.

    Args:
        suffixes: Supported suffixes with or without leading dots
        language: Language for the final conjunction

    Returns:
        Human-readable list of dotted suffixes
    """
    return join_with_and(
        (f".{suffix}" for suffix in normalize_suffixes(suffixes)),
        language,
    )


class NameParser:
    """
    Parses recipient input against a configured set of supported suffixes.

    Domain shape is recognized for any suffix; membership in the supported
    set is reported separately so callers can reject unsupported names
    without mistaking them for raw addresses.
    """

    def __init__(self, supported_suffixes: Iterable[str]) -> None:
        """
        Initialize parser with supported suffixes.

        Args:
            supported_suffixes: Suffixes served by the name service (e.g. ['sats', 'unisat'])

        Raises:
            ConfigurationError: If no usable suffix is given
        """
        supported_suffixes = list(supported_suffixes)
        self._suffixes = normalize_suffixes(supported_suffixes)
        if not self._suffixes:
            raise ConfigurationError(
                code="no_supported_suffixes",
                message="At least one supported name suffix must be configured",
                details={"supported_suffixes": supported_suffixes},
            )

    @property
    def supported_suffixes(self) -> tuple[str, ...]:
        return self._suffixes

    def parse(self, text: object) -> Optional[ParsedName]:
        return parse_name(text)

    def is_supported(self, suffix: str) -> bool:
        return suffix.lower() in self._suffixes

    def describe_supported(self, language: Optional[str] = None) -> str:
        return describe_supported_suffixes(self._suffixes, language)
