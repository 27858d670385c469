"""
Confirmation Gate for resolved domain names.

A name whose backing inscription was transferred or inscribed only a few
blocks ago may still be reorganized away from its current holder. The gate
only trusts a lookup result once the inscription's UTXO has collected the
configured number of confirmations.
"""

from dataclasses import dataclass
from typing import Optional

from .enums import TrustVerdict
from .exceptions import ConfigurationError
from .i18n import get_message
from .models import ResolutionRecord


@dataclass(frozen=True)
class GateResult:
    """Verdict of the gate and the message shown for untrusted records."""

    verdict: TrustVerdict
    message: str = ""

    @property
    def trusted(self) -> bool:
        return self.verdict == TrustVerdict.TRUSTED


class ConfirmationGate:
    """
    Minimum-confirmation safety gate.

    A record is TRUSTED only when `confirmations >= safe_confirmations`.
    Anything below the threshold is UNTRUSTED and carries a progress message
    such as "(1/3)" asking the user to wait.
    """

    def __init__(self, safe_confirmations: int, language: Optional[str] = None) -> None:
        """
        Initialize the gate.

        Args:
            safe_confirmations: Minimum confirmations before a name is trusted
            language: Language of the waiting message

        Raises:
            ConfigurationError: If the threshold is not a non-negative integer
        """
        if (
            isinstance(safe_confirmations, bool)
            or not isinstance(safe_confirmations, int)
            or safe_confirmations < 0
        ):
            raise ConfigurationError(
                code="invalid_safe_confirmations",
                message="Safe confirmation threshold must be a non-negative integer",
                details={"safe_confirmations": safe_confirmations},
            )
        self._safe_confirmations = safe_confirmations
        self._language = language

    @property
    def safe_confirmations(self) -> int:
        return self._safe_confirmations

    def evaluate(self, record: ResolutionRecord) -> GateResult:
        if record.confirmations >= self._safe_confirmations:
            return GateResult(verdict=TrustVerdict.TRUSTED)

        return GateResult(
            verdict=TrustVerdict.UNTRUSTED,
            message=get_message(
                "input.unconfirmed",
                self._language,
                confirmations=record.confirmations,
                required=self._safe_confirmations,
            ),
        )
