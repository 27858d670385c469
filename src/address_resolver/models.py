"""
Data models for the address resolver.

This module defines the lookup record produced by the name service, the
resolved target handed to callers, and the read-only snapshot of the
controller's UI-facing state.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .enums import LookupErrorCode, ResolutionState
from .exceptions import ProtocolError


@dataclass(frozen=True)
class ResolutionRecord:
    """
    Result of a successful domain lookup.

    The inscription backing the name is kept as returned by the service so
    callers can display it; only the owner address and confirmation count
    take part in resolution.
    """

    owner_address: str
    confirmations: int
    inscription: dict = field(default_factory=dict, compare=False)

    @property
    def inscription_id(self) -> Optional[str]:
        return self.inscription.get("inscriptionId")

    @property
    def inscription_number(self) -> Optional[int]:
        return self.inscription.get("inscriptionNumber")

    @classmethod
    def from_inscription(cls, data: Any) -> "ResolutionRecord":
        """
        Build a record from an inscription object returned by the name service.

        Args:
            data: Decoded JSON object describing the inscription

        Returns:
            ResolutionRecord with owner address and confirmation count

        Raises:
            ProtocolError: If the object lacks a usable confirmation count
                or owner address
        """
        if not isinstance(data, dict):
            raise ProtocolError(
                code=LookupErrorCode.PARSE_ERROR.value,
                message="Unexpected inscription payload",
                details={"payload_type": type(data).__name__},
            )

        confirmations = data.get("utxoConfirmation", 0)
        # bool is an int subclass
        if isinstance(confirmations, bool) or not isinstance(confirmations, int):
            raise ProtocolError(
                code=LookupErrorCode.PARSE_ERROR.value,
                message="Invalid confirmation count in inscription",
                details={"utxoConfirmation": confirmations},
            )

        owner_address = data.get("address")
        if owner_address is None or owner_address == "":
            raise ProtocolError(
                code=LookupErrorCode.PARSE_ERROR.value,
                message="Missing owner address in inscription",
                details={"inscriptionId": data.get("inscriptionId")},
            )
        if not isinstance(owner_address, str):
            raise ProtocolError(
                code=LookupErrorCode.PARSE_ERROR.value,
                message="Invalid owner address in inscription",
                details={"address": owner_address},
            )

        return cls(
            owner_address=owner_address,
            confirmations=max(confirmations, 0),
            inscription=dict(data),
        )


@dataclass(frozen=True)
class ResolvedTarget:
    """The recipient handed to the caller. Replaced wholesale, never patched."""

    address: str = ""
    source_domain: str = ""  # matched suffix, empty for raw addresses
    meta: Optional[ResolutionRecord] = None
    name: str = ""  # domain as typed, empty for raw addresses

    @property
    def is_empty(self) -> bool:
        return not self.address


EMPTY_TARGET = ResolvedTarget()


@dataclass(frozen=True)
class ResolutionSnapshot:
    """Read-only view of everything a view layer needs to render the input."""

    state: ResolutionState
    generation: int
    input_text: str
    searching: bool
    format_error: str
    not_found_error: str
    warning: str
    notice: str
    resolved_record: Optional[ResolutionRecord]
    resolved_name: str
    target: ResolvedTarget

    @property
    def parse_error(self) -> str:
        """Lookup-related message shown under the input (not found or unconfirmed)."""
        return self.not_found_error or self.warning
