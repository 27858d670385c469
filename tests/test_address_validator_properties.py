"""
Property-based tests for the address validator module.

Uses Hypothesis to verify that the validator is an exception-free
predicate around whatever chain-specific checker it is given.
"""

import io

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from address_resolver.address_validator import AddressValidator, load_address_checker
from address_resolver.audit_logger import AuditLogger
from address_resolver.enums import LogLevel
from address_resolver.exceptions import ConfigurationError


def bech32_like(address: str) -> bool:
    """Toy checker used throughout the tests."""
    return address.startswith("bc1") and len(address) >= 14


def exploding_checker(address: str) -> bool:
    raise RuntimeError("checker crashed")


class TestCheckerDelegationProperty:
    """The validator answers exactly what the checker answers."""

    @given(text=st.text(min_size=1, max_size=80))
    @settings(max_examples=100)
    def test_result_matches_checker(self, text: str) -> None:
        """
        *For any* non-empty string, is_valid SHALL equal the checker's
        verdict.
        """
        validator = AddressValidator(bech32_like)
        assert validator.is_valid(text) == bech32_like(text)

    @given(text=st.text(min_size=1, max_size=80))
    @settings(max_examples=50)
    def test_truthy_results_are_coerced_to_bool(self, text: str) -> None:
        """
        *For any* checker returning a truthy non-bool, is_valid SHALL return
        the bool True.
        """
        validator = AddressValidator(lambda address: address)
        assert validator.is_valid(text) is True

    def test_empty_string_is_never_valid(self) -> None:
        validator = AddressValidator(lambda address: True)
        assert validator.is_valid("") is False

    @pytest.mark.parametrize("value", [None, 1, b"bc1qxyz", ["bc1q"]])
    def test_non_string_is_never_valid(self, value) -> None:
        validator = AddressValidator(lambda address: True)
        assert validator.is_valid(value) is False


class TestMissingCheckerProperty:
    """Without a checker no raw address is accepted."""

    @given(text=st.text(max_size=80))
    @settings(max_examples=50)
    def test_no_checker_rejects_everything(self, text: str) -> None:
        """
        *For any* input, a validator without a checker SHALL report it as
        invalid.
        """
        validator = AddressValidator(None)

        assert not validator.has_checker
        assert validator.is_valid(text) is False


class TestCheckerFailureProperty:
    """A failing checker is logged and treated as invalid."""

    @given(text=st.text(min_size=1, max_size=40))
    @settings(max_examples=50)
    def test_exceptions_become_invalid(self, text: str) -> None:
        """
        *For any* input, a checker that raises SHALL make is_valid return
        False instead of propagating.
        """
        validator = AddressValidator(exploding_checker)
        assert validator.is_valid(text) is False

    def test_exception_is_logged(self) -> None:
        logger = AuditLogger(output_format="json", output_stream=io.StringIO())
        validator = AddressValidator(exploding_checker, logger=logger)

        validator.is_valid("bc1qanything")

        entries = logger.entries
        assert len(entries) == 1
        assert entries[0].level == LogLevel.ERROR
        assert entries[0].component == "AddressValidator"
        assert entries[0].data["error_type"] == "RuntimeError"


class TestCheckerLoadingProperty:
    """Checkers are imported from dotted paths."""

    def test_colon_path(self) -> None:
        checker = load_address_checker("os.path:isabs")
        assert checker("/tmp") is True

    def test_dotted_path(self) -> None:
        checker = load_address_checker("os.path.isabs")
        assert checker("relative") is False

    def test_nested_attribute(self) -> None:
        checker = load_address_checker("os:path.isabs")
        assert callable(checker)

    @pytest.mark.parametrize("path, code", [
        ("nodots", "invalid_checker_path"),
        (":isabs", "invalid_checker_path"),
        ("os.path:", "invalid_checker_path"),
        ("no_such_module_for_tests:check", "checker_import_failed"),
        ("os.path:no_such_function", "checker_not_found"),
        ("os:sep", "checker_not_callable"),
    ])
    def test_bad_paths(self, path: str, code: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_address_checker(path)

        assert exc_info.value.code == code
        assert exc_info.value.details["path"] == path
