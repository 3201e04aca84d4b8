"""Tests for devtoolshub.base_converter."""

from __future__ import annotations

import pytest

from devtoolshub.base_converter import (
    EMPTY_INPUT_ERROR,
    Base,
    convert_all_bases,
    convert_base,
    validation_error,
)


class TestValidation:
    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty(self, text: str):
        assert validation_error(text, Base.DECIMAL) == EMPTY_INPUT_ERROR

    @pytest.mark.parametrize(
        "text, base",
        [("102", Base.BINARY), ("8", Base.OCTAL), ("12a", Base.DECIMAL), ("fg", Base.HEXADECIMAL), ("-1", Base.DECIMAL)],
    )
    def test_invalid_digits(self, text: str, base: Base):
        error = validation_error(text, base)
        assert error.startswith(f"Invalid {base.value} number")

    def test_surrounding_whitespace_is_allowed(self):
        assert validation_error("  1010 ", Base.BINARY) is None


class TestConvertBase:
    def test_decimal_to_hex_is_lower_case(self):
        assert convert_base("255", Base.DECIMAL, Base.HEXADECIMAL).value == "ff"

    def test_hex_accepts_upper_case(self):
        assert convert_base("FF", Base.HEXADECIMAL, Base.BINARY).value == "11111111"

    def test_arbitrary_precision(self):
        big = "1" * 200
        result = convert_base(big, Base.BINARY, Base.DECIMAL)
        assert result.value == str(2 ** 200 - 1)

    def test_invalid_input(self):
        result = convert_base("2", Base.BINARY, Base.DECIMAL)
        assert not result.ok
        assert result.value == ""


class TestConvertAllBases:
    def test_every_base(self):
        result = convert_all_bases("10", Base.DECIMAL)
        assert result.values == {
            Base.BINARY: "1010",
            Base.OCTAL: "12",
            Base.DECIMAL: "10",
            Base.HEXADECIMAL: "a",
        }

    def test_source_base_echoes_trimmed_input(self):
        result = convert_all_bases(" 00FF ", Base.HEXADECIMAL)
        assert result.values[Base.HEXADECIMAL] == "00FF"
        assert result.values[Base.DECIMAL] == "255"

    def test_empty_input(self):
        assert convert_all_bases("", Base.OCTAL).error == EMPTY_INPUT_ERROR
