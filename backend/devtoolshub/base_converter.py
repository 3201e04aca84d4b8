from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from devtoolshub.results import ToolResult


class Base(str, Enum):
    BINARY = "binary"
    OCTAL = "octal"
    DECIMAL = "decimal"
    HEXADECIMAL = "hexadecimal"


BASE_RADIX = {
    Base.BINARY: 2,
    Base.OCTAL: 8,
    Base.DECIMAL: 10,
    Base.HEXADECIMAL: 16,
}

BASE_PREFIXES = {
    Base.BINARY: "",
    Base.OCTAL: "0o",
    Base.DECIMAL: "",
    Base.HEXADECIMAL: "0x",
}

_VALID_DIGITS = {
    Base.BINARY: re.compile(r"[01]+"),
    Base.OCTAL: re.compile(r"[0-7]+"),
    Base.DECIMAL: re.compile(r"[0-9]+"),
    Base.HEXADECIMAL: re.compile(r"[0-9a-fA-F]+"),
}

_DIGIT_HINTS = {
    Base.BINARY: "only 0 and 1 are allowed",
    Base.OCTAL: "digits 0-7 are allowed",
    Base.DECIMAL: "digits 0-9 are allowed",
    Base.HEXADECIMAL: "digits 0-9, a-f and A-F are allowed",
}

_FORMAT_SPEC = {
    Base.BINARY: "b",
    Base.OCTAL: "o",
    Base.DECIMAL: "d",
    Base.HEXADECIMAL: "x",
}

EMPTY_INPUT_ERROR = "Please enter a number"
TOO_LARGE_ERROR = "Number is too large to convert"


@dataclass(frozen=True)
class ConversionResult(ToolResult):
    value: str = ""


@dataclass(frozen=True)
class AllBasesResult(ToolResult):
    values: dict[Base, str] = field(default_factory=dict)


def validation_error(text: str, base: Base) -> str | None:
    """Return the user-facing reason *text* is not a number in *base*, or None."""
    cleaned = text.strip()
    if not cleaned:
        return EMPTY_INPUT_ERROR
    if not _VALID_DIGITS[base].fullmatch(cleaned):
        return f"Invalid {base.value} number, {_DIGIT_HINTS[base]}"
    return None


def format_in_base(value: int, base: Base) -> str:
    return format(value, _FORMAT_SPEC[base])


def convert_base(text: str, from_base: Base, to_base: Base) -> ConversionResult:
    """Convert *text* between bases; arbitrary size, lower-case output."""
    error = validation_error(text, from_base)
    if error:
        return ConversionResult.failure(error)
    try:
        value = int(text.strip(), BASE_RADIX[from_base])
        return ConversionResult(value=format_in_base(value, to_base))
    except ValueError:
        # Decimal strings beyond the interpreter's int/str digit limit
        return ConversionResult.failure(TOO_LARGE_ERROR)


def convert_all_bases(text: str, from_base: Base) -> AllBasesResult:
    """Convert *text* into every supported base.

    The source base echoes the trimmed input unchanged.
    """
    error = validation_error(text, from_base)
    if error:
        return AllBasesResult.failure(error)

    cleaned = text.strip()
    try:
        value = int(cleaned, BASE_RADIX[from_base])
        values = {base: cleaned if base is from_base else format_in_base(value, base) for base in Base}
    except ValueError:
        return AllBasesResult.failure(TOO_LARGE_ERROR)
    return AllBasesResult(values=values)
