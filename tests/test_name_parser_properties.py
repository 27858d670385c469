"""
Property-based tests for the name parser module.

Uses Hypothesis to check how recipient strings are split into label and
suffix, and how the supported suffix set is rendered for users.
"""

import pytest
from hypothesis import given, settings, assume
from hypothesis import strategies as st

from address_resolver.exceptions import ConfigurationError
from address_resolver.name_parser import (
    NameParser,
    ParsedName,
    describe_supported_suffixes,
    normalize_suffixes,
    parse_name,
)


# Labels made of the characters people actually type into name fields
label_strategy = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz0123456789-_",
    min_size=1,
    max_size=20,
)

suffix_strategy = st.from_regex(r"[a-z][a-z0-9-]{0,9}", fullmatch=True)

# Shaped like bech32 / base58 addresses: no dots at all
address_like_strategy = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz0123456789ABCDEFGHJKLMNPQRSTUVWXYZ",
    min_size=1,
    max_size=64,
)


class TestDomainShapeProperty:
    """Domain-shaped input is split at its last dot."""

    @given(label=label_strategy, suffix=suffix_strategy)
    @settings(max_examples=100)
    def test_label_and_suffix_are_recovered(self, label: str, suffix: str) -> None:
        """
        *For any* label and well-formed suffix, parsing "label.suffix" SHALL
        return exactly that label and suffix.
        """
        parsed = parse_name(f"{label}.{suffix}")

        assert parsed == ParsedName(label=label, suffix=suffix)
        assert parsed.full_name == f"{label}.{suffix}"

    @given(label=label_strategy, suffix=suffix_strategy)
    @settings(max_examples=100)
    def test_parsing_is_case_insensitive(self, label: str, suffix: str) -> None:
        """
        *For any* domain, the upper-cased input SHALL parse to the same
        lower-cased name.
        """
        assert parse_name(f"{label}.{suffix}".upper()) == parse_name(f"{label}.{suffix}")

    @given(first=label_strategy, second=label_strategy, suffix=suffix_strategy)
    @settings(max_examples=50)
    def test_split_happens_at_last_dot(self, first: str, second: str, suffix: str) -> None:
        """
        *For any* multi-part name, the suffix SHALL be the part after the
        last dot and the label everything before it.
        """
        parsed = parse_name(f"{first}.{second}.{suffix}")

        assert parsed is not None
        assert parsed.suffix == suffix
        assert parsed.label == f"{first}.{second}"

    def test_examples(self) -> None:
        assert parse_name("alice.sats") == ParsedName("alice", "sats")
        assert parse_name("Alice.SATS") == ParsedName("alice", "sats")
        assert parse_name("bob.unisat").suffix == "unisat"
        assert parse_name("carol.btc").suffix == "btc"


class TestNonDomainProperty:
    """Strings that are not domain-shaped are reported as None."""

    @given(text=address_like_strategy)
    @settings(max_examples=100)
    def test_dotless_input_is_not_a_domain(self, text: str) -> None:
        """
        *For any* string without a dot, parsing SHALL return None.
        """
        assert parse_name(text) is None

    @given(suffix=suffix_strategy)
    @settings(max_examples=50)
    def test_empty_label_is_not_a_domain(self, suffix: str) -> None:
        """
        *For any* suffix, an input with nothing before the dot SHALL NOT be
        a domain.
        """
        assert parse_name(f".{suffix}") is None

    @given(label=label_strategy)
    @settings(max_examples=50)
    def test_trailing_dot_is_not_a_domain(self, label: str) -> None:
        """
        *For any* label, an input ending in a dot SHALL NOT be a domain.
        """
        assert parse_name(f"{label}.") is None

    @given(label=label_strategy, suffix=st.from_regex(r"[0-9][a-z0-9]{0,5}", fullmatch=True))
    @settings(max_examples=50)
    def test_suffix_must_start_with_letter(self, label: str, suffix: str) -> None:
        """
        *For any* suffix starting with a digit, parsing SHALL return None.
        """
        assert parse_name(f"{label}.{suffix}") is None

    @pytest.mark.parametrize("text", [
        "",
        "alice",
        "al ice.sats",
        "alice..sats",
        "bc1q...validaddr",
        "alice.sa ts",
        "alice.sats!",
    ])
    def test_malformed_inputs(self, text: str) -> None:
        assert parse_name(text) is None

    @pytest.mark.parametrize("value", [None, 42, b"alice.sats", ["alice.sats"]])
    def test_non_string_input_never_raises(self, value) -> None:
        assert parse_name(value) is None


class TestSupportedSuffixProperty:
    """Membership in the supported set is checked separately from shape."""

    @given(
        suffixes=st.lists(suffix_strategy, min_size=1, max_size=5, unique=True),
        label=label_strategy,
    )
    @settings(max_examples=100)
    def test_configured_suffixes_are_supported(self, suffixes: list[str], label: str) -> None:
        """
        *For any* configured suffix set, every configured suffix SHALL be
        supported and parse_name SHALL recognize names using it.
        """
        parser = NameParser(suffixes)

        for suffix in suffixes:
            parsed = parser.parse(f"{label}.{suffix}")
            assert parsed is not None
            assert parser.is_supported(parsed.suffix)

    @given(
        suffixes=st.lists(suffix_strategy, min_size=1, max_size=5, unique=True),
        other=suffix_strategy,
    )
    @settings(max_examples=100)
    def test_unconfigured_suffix_is_still_domain_shaped(
        self, suffixes: list[str], other: str
    ) -> None:
        """
        *For any* suffix outside the configured set, the name SHALL still
        parse but SHALL NOT be supported.
        """
        assume(other not in suffixes)
        parser = NameParser(suffixes)

        parsed = parser.parse(f"alice.{other}")
        assert parsed is not None
        assert not parser.is_supported(parsed.suffix)

    def test_suffixes_are_normalized(self) -> None:
        parser = NameParser([".SATS", "unisat", "sats", " x "])

        assert parser.supported_suffixes == ("sats", "unisat", "x")
        assert parser.is_supported("Sats")

    def test_generator_input_is_accepted(self) -> None:
        parser = NameParser(s for s in ["sats", "unisat"])
        assert parser.supported_suffixes == ("sats", "unisat")

    @pytest.mark.parametrize("suffixes", [[], [""], [".", " "]])
    def test_empty_suffix_set_is_a_configuration_error(self, suffixes) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            NameParser(suffixes)

        assert exc_info.value.code == "no_supported_suffixes"

    def test_normalize_suffixes_keeps_order(self) -> None:
        assert normalize_suffixes(["x", "sats", ".X"]) == ("x", "sats")


class TestSuffixDescriptionProperty:
    """The supported set is rendered as a readable list."""

    def test_english_description(self) -> None:
        text = describe_supported_suffixes(["sats", "unisat", "x", "bitmap"], "en")
        assert text == ".sats, .unisat, .x and .bitmap"

    def test_german_description(self) -> None:
        assert describe_supported_suffixes(["sats", "unisat"], "de") == ".sats und .unisat"

    def test_single_suffix(self) -> None:
        assert describe_supported_suffixes(["sats"]) == ".sats"

    @given(suffixes=st.lists(suffix_strategy, min_size=1, max_size=6, unique=True))
    @settings(max_examples=50)
    def test_every_suffix_is_mentioned(self, suffixes: list[str]) -> None:
        """
        *For any* suffix set, the description SHALL mention each suffix with
        a leading dot.
        """
        text = NameParser(suffixes).describe_supported("en")

        for suffix in suffixes:
            assert f".{suffix}" in text
