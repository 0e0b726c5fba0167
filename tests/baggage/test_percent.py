# (c) Copyright IBM Corp. 2025

import pytest

from tracewire.baggage.percent import SAFE_CHARS, decode, escape
from tracewire.exceptions import InvalidArgumentError


class TestEscape:
    def test_safe_string_is_returned_unchanged(self) -> None:
        value = "nometa-value"
        assert escape(value) is value
        assert escape(SAFE_CHARS) is SAFE_CHARS
        assert escape("") == ""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("blah blah blah", "blah%20blah%20blah"),
            ("100%", "100%25"),
            ('"quoted"', "%22quoted%22"),
            ("tab\there", "tab%09here"),
            ("é", "%C3%A9"),
            ("€", "%E2%82%AC"),
            ("\U0001f600", "%F0%9F%98%80"),
            ("aéb c", "a%C3%A9b%20c"),
        ],
    )
    def test_escape(self, value: str, expected: str) -> None:
        assert escape(value) == expected

    def test_surrogate_pair_is_one_code_point(self) -> None:
        assert escape("x\ud83d\ude00y") == "x%F0%9F%98%80y"

    @pytest.mark.parametrize(
        "value", ["a\ud83d", "\ud83dx", "\ud83d\ud83d", "\ude00", "ab\ude00c"]
    )
    def test_broken_surrogates(self, value: str) -> None:
        with pytest.raises(InvalidArgumentError):
            escape(value)

    def test_trailing_high_surrogate_message(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Trailing high surrogate"):
            escape("value \ud83d")


class TestDecode:
    def test_string_without_escapes_is_returned_unchanged(self) -> None:
        value = "plain+value"
        assert decode(value) is value

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("a%20b", "a b"),
            ("%C3%A9", "é"),
            ("%c3%a9", "é"),
            ("%F0%9F%98%80", "\U0001f600"),
            ("100%25", "100%"),
            ("café%21", "café!"),
        ],
    )
    def test_decode(self, value: str, expected: str) -> None:
        assert decode(value) == expected

    def test_plus_is_not_a_space(self) -> None:
        assert decode("a+b%20c") == "a+b c"

    @pytest.mark.parametrize("value", ["%", "%4", "abc%", "%zz", "%4g", "%٤١"])
    def test_invalid_escape(self, value: str) -> None:
        with pytest.raises(InvalidArgumentError):
            decode(value)

    def test_invalid_utf8_is_replaced(self) -> None:
        assert decode("%FF") == "�"

    def test_other_encoding(self) -> None:
        assert decode("%E9", "latin-1") == "é"

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "nometa-value",
            "blah blah blah",
            "somemetadata; someother=foo",
            "50% off, \"today\" \\ only",
            "über € \U0001f600",
        ],
    )
    def test_decode_reverses_escape(self, value: str) -> None:
        assert decode(escape(value)) == value
