"""
Property-based tests for the audit logger module.

Uses Hypothesis to verify output formats, level filtering, masking of
wallet secrets and the error context attached to error entries.
"""

import json
from io import StringIO

import pytest
from hypothesis import given, settings, assume
from hypothesis import strategies as st

from address_resolver.audit_logger import AuditLogger, LEVEL_ORDER
from address_resolver.enums import LogLevel
from address_resolver.exceptions import NetworkError


SENSITIVE_PATTERNS = sorted(AuditLogger.SENSITIVE_KEYS)


@st.composite
def log_level_strategy(draw) -> LogLevel:
    return draw(st.sampled_from(list(LogLevel)))


@st.composite
def component_name_strategy(draw) -> str:
    return draw(st.sampled_from([
        "ResolutionController",
        "DomainResolverClient",
        "AddressValidator",
    ]))


@st.composite
def message_strategy(draw) -> str:
    """Generate single-line log messages."""
    return draw(st.text(
        alphabet=st.characters(
            whitelist_categories=('L', 'N', 'P', 'S', 'Zs'),
            blacklist_characters='\x00\n\r',
        ),
        min_size=1,
        max_size=120,
    ))


@st.composite
def non_sensitive_key_strategy(draw) -> str:
    key = draw(st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_"),
        min_size=1,
        max_size=20,
    ))
    for pattern in SENSITIVE_PATTERNS:
        assume(pattern not in key)
    return key


@st.composite
def sensitive_key_strategy(draw) -> str:
    base = draw(st.sampled_from([
        "mnemonic", "seed_phrase", "wif", "xprv", "private_key",
        "api_key", "auth_header", "password", "session_token",
    ]))
    prefix = draw(st.sampled_from(['', 'wallet_', 'user_', 'MY_']))
    return f"{prefix}{base}"


class TestOutputFormatProperty:
    """Entries are written as JSON, text, or both."""

    @given(
        level=log_level_strategy(),
        component=component_name_strategy(),
        message=message_strategy(),
    )
    @settings(max_examples=100)
    def test_both_formats(self, level: LogLevel, component: str, message: str) -> None:
        """
        *For any* entry with output_format "both", the logger SHALL write one
        JSON line followed by one text line.
        """
        output = StringIO()
        logger = AuditLogger(output_format="both", output_stream=output, level="debug")

        logger.log(level, component, message, {"generation": 7})

        lines = output.getvalue().rstrip('\n').split('\n')
        assert len(lines) == 2

        parsed = json.loads(lines[0])
        assert parsed["level"] == level.value
        assert parsed["component"] == component
        assert parsed["message"] == message
        assert parsed["data"] == {"generation": 7}
        assert "timestamp" in parsed

        assert level.value.upper() in lines[1]
        assert f"[{component}]" in lines[1]
        assert message in lines[1]

    @given(message=message_strategy())
    @settings(max_examples=50)
    def test_json_only(self, message: str) -> None:
        """
        *For any* entry with output_format "json", exactly one parseable JSON
        line SHALL be written.
        """
        output = StringIO()
        logger = AuditLogger(output_format="json", output_stream=output)

        logger.log(LogLevel.INFO, "ResolutionController", message)

        lines = [line for line in output.getvalue().split('\n') if line]
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == message

    def test_text_line_layout(self) -> None:
        logger = AuditLogger(output_format="text", output_stream=StringIO())
        entry = logger.log(LogLevel.WARN, "ResolutionController", "new.sats lacks confirmations")

        text = logger.get_text_output(entry)

        assert text.startswith(f"[{entry.timestamp}] WARN [ResolutionController] ")
        assert text.endswith("new.sats lacks confirmations")

    def test_invalid_format_rejected(self) -> None:
        with pytest.raises(ValueError):
            AuditLogger(output_format="xml")


class TestLevelFilterProperty:
    """Entries below the configured level are kept but not written."""

    @given(minimum=log_level_strategy(), level=log_level_strategy())
    @settings(max_examples=100)
    def test_only_enabled_levels_are_written(self, minimum: LogLevel, level: LogLevel) -> None:
        """
        *For any* minimum level, an entry SHALL be written iff its level is
        at least the minimum, and SHALL always be recorded.
        """
        output = StringIO()
        logger = AuditLogger(output_format="json", output_stream=output, level=minimum.value)

        logger.log(level, "ResolutionController", "message")

        written = bool(output.getvalue())
        assert written == (LEVEL_ORDER[level] >= LEVEL_ORDER[minimum])
        assert len(logger.entries) == 1

    def test_level_is_case_insensitive(self) -> None:
        assert AuditLogger(level="WARN").level == LogLevel.WARN

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValueError):
            AuditLogger(level="verbose")

    def test_clear_entries(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        logger.log(LogLevel.INFO, "ResolutionController", "one")
        logger.clear_entries()
        assert logger.entries == []


class TestSensitiveDataMaskingProperty:
    """Wallet secrets never reach the log."""

    @given(
        sensitive_key=sensitive_key_strategy(),
        sensitive_value=st.text(alphabet=st.sampled_from("QWXYZ"), min_size=5, max_size=20),
    )
    @settings(max_examples=100)
    def test_sensitive_values_masked(self, sensitive_key: str, sensitive_value: str) -> None:
        """
        *For any* data key naming a secret, the value SHALL be replaced by
        the mask in the entry and in the written output.
        """
        output = StringIO()
        logger = AuditLogger(output_format="json", output_stream=output)

        entry = logger.log(LogLevel.INFO, "AddressValidator", "checked", {sensitive_key: sensitive_value})

        assert entry.data[sensitive_key] == AuditLogger.MASK_VALUE
        assert sensitive_value not in output.getvalue()

    @given(key=non_sensitive_key_strategy(), value=st.text(max_size=50))
    @settings(max_examples=100)
    def test_other_values_kept(self, key: str, value: str) -> None:
        """
        *For any* key not naming a secret, the value SHALL be kept unchanged.
        """
        logger = AuditLogger(output_stream=StringIO())
        entry = logger.log(LogLevel.INFO, "ResolutionController", "lookup", {key: value})
        assert entry.data[key] == value

    @given(sensitive_key=sensitive_key_strategy())
    @settings(max_examples=50)
    def test_nested_values_masked(self, sensitive_key: str) -> None:
        """
        *For any* secret nested in dictionaries or lists of dictionaries, the
        value SHALL be masked at every level.
        """
        logger = AuditLogger(output_stream=StringIO())

        entry = logger.log(LogLevel.INFO, "ResolutionController", "lookup", {
            "wallet": {sensitive_key: "hidden", "name": "alice.sats"},
            "accounts": [{sensitive_key: "hidden"}, "plain"],
        })

        assert entry.data["wallet"][sensitive_key] == AuditLogger.MASK_VALUE
        assert entry.data["wallet"]["name"] == "alice.sats"
        assert entry.data["accounts"] == [{sensitive_key: AuditLogger.MASK_VALUE}, "plain"]


class TestErrorContextProperty:
    """Error entries carry the exception's type, text and code."""

    @given(message=message_strategy(), code=st.sampled_from(["timeout", "network_error", "tls_error"]))
    @settings(max_examples=50)
    def test_structured_error_context(self, message: str, code: str) -> None:
        """
        *For any* structured error, the entry SHALL include its message, type
        and code alongside the additional data.
        """
        logger = AuditLogger(output_stream=StringIO())
        error = NetworkError(code=code, message=message)

        entry = logger.log_error(
            "ResolutionController",
            "Name lookup failed",
            error=error,
            additional_data={"generation": 3},
        )

        assert entry.level == LogLevel.ERROR
        assert entry.data["error_message"] == str(error)
        assert entry.data["error_type"] == "NetworkError"
        assert entry.data["error_code"] == code
        assert entry.data["generation"] == 3

    def test_plain_exception_has_no_code(self) -> None:
        logger = AuditLogger(output_stream=StringIO())

        entry = logger.log_error("AddressValidator", "checker raised", error=ValueError("bad"))

        assert entry.data == {"error_message": "bad", "error_type": "ValueError"}

    def test_additional_data_is_not_mutated(self) -> None:
        logger = AuditLogger(output_stream=StringIO())
        extra = {"generation": 1}

        logger.log_error("ResolutionController", "failed", error=RuntimeError("x"), additional_data=extra)

        assert extra == {"generation": 1}
