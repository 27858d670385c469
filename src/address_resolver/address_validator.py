"""
Address syntax validation glue.

Chain-specific address rules live outside this package; the validator wraps
an externally supplied checker so the controller can treat it as a plain,
exception-free predicate.
"""

import importlib
from typing import Callable, Optional

from .audit_logger import AuditLogger
from .exceptions import ConfigurationError


AddressChecker = Callable[[str], bool]


class AddressValidator:
    """
    Exception-free wrapper around a chain-specific address checker.

    Any exception raised by the checker is logged and reported as an
    invalid address.
    """

    def __init__(
        self,
        checker: Optional[AddressChecker],
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the validator.

        Args:
            checker: Predicate returning True for valid addresses; None rejects everything
            logger: Optional audit logger
        """
        self._checker = checker
        self._logger = logger

    @property
    def has_checker(self) -> bool:
        return self._checker is not None

    def is_valid(self, address: object) -> bool:
        if not isinstance(address, str) or not address:
            return False

        if self._checker is None:
            return False

        try:
            return bool(self._checker(address))
        except Exception as e:
            if self._logger:
                self._logger.log_error(
                    "AddressValidator",
                    "Address checker raised, treating input as invalid",
                    error=e,
                )
            return False


def load_address_checker(path: str) -> AddressChecker:
    """
    Import an address checker from a "package.module:function" path.

    Args:
        path: Import path of the checker; "package.module.function" is also accepted

    Returns:
        The checker callable

    Raises:
        ConfigurationError: If the path is malformed, cannot be imported or is not callable
    """
    if ":" in path:
        module_path, _, attr_path = path.partition(":")
    else:
        module_path, _, attr_path = path.rpartition(".")

    if not module_path or not attr_path:
        raise ConfigurationError(
            code="invalid_checker_path",
            message=f"Address checker path must look like 'package.module:function': {path}",
            details={"path": path},
        )

    try:
        target = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigurationError(
            code="checker_import_failed",
            message=f"Cannot import address checker module '{module_path}': {e}",
            details={"path": path},
        ) from e

    for attr in attr_path.split("."):
        target = getattr(target, attr, None)
        if target is None:
            raise ConfigurationError(
                code="checker_not_found",
                message=f"Address checker '{attr_path}' not found in '{module_path}'",
                details={"path": path},
            )

    if not callable(target):
        raise ConfigurationError(
            code="checker_not_callable",
            message=f"Address checker '{path}' is not callable",
            details={"path": path},
        )

    return target
