from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from devtoolshub.results import ToolResult

NESTING_TOO_DEEP_ERROR = "JSON nesting is too deep"


@dataclass(frozen=True)
class JsonErrorLocation:
    position: int
    line: int
    column: int


@dataclass(frozen=True)
class JsonParseResult(ToolResult):
    value: Any = None
    location: JsonErrorLocation | None = None


@dataclass(frozen=True)
class JsonTextResult(ToolResult):
    text: str = ""
    location: JsonErrorLocation | None = None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} is not valid JSON")


def parse_json_with_location(source: str) -> JsonParseResult:
    """Strict JSON parse; errors carry the offending offset, line and column."""
    try:
        value = json.loads(source, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        return JsonParseResult(
            ok=False,
            error=str(exc),
            location=JsonErrorLocation(position=exc.pos, line=exc.lineno, column=exc.colno),
        )
    except ValueError as exc:
        return JsonParseResult.failure(str(exc))
    except RecursionError:
        return JsonParseResult.failure(NESTING_TOO_DEEP_ERROR)
    return JsonParseResult(value=value)


def _dump(value: Any, *, minify: bool = False) -> str:
    if minify:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value, ensure_ascii=False, indent=2)


def _reformat(source: str, transform: Callable[[Any], Any] | None = None, *, minify: bool = False) -> JsonTextResult:
    parsed = parse_json_with_location(source)
    if not parsed.ok:
        return JsonTextResult(ok=False, error=parsed.error, location=parsed.location)
    try:
        value = transform(parsed.value) if transform else parsed.value
        return JsonTextResult(text=_dump(value, minify=minify))
    except RecursionError:
        return JsonTextResult.failure(NESTING_TOO_DEEP_ERROR)


def format_json(source: str) -> JsonTextResult:
    return _reformat(source)


def minify_json(source: str) -> JsonTextResult:
    return _reformat(source, minify=True)


# ---------------------------------------------------------------------------
# Key style transforms
# ---------------------------------------------------------------------------

_SNAKE_SEGMENT = re.compile(r"_([a-z0-9])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_LETTER_DIGIT = re.compile(r"([a-zA-Z])([0-9])")
_DIGIT_LETTER = re.compile(r"([0-9])([a-zA-Z])")


def snake_to_camel(key: str) -> str:
    """``user_id_2`` -> ``userId2``"""
    if not key:
        return key
    return _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), key.lower())


def camel_to_snake(key: str) -> str:
    """``HTMLParser`` -> ``html_parser``, ``userId2`` -> ``user_id_2``"""
    if not key:
        return key
    key = _ACRONYM_BOUNDARY.sub(r"\1_\2", key)
    key = _CAMEL_BOUNDARY.sub(r"\1_\2", key)
    key = _LETTER_DIGIT.sub(r"\1_\2", key)
    key = _DIGIT_LETTER.sub(r"\1_\2", key)
    return key.lower()


def snake_to_pascal(key: str) -> str:
    camel = snake_to_camel(key)
    return camel[:1].upper() + camel[1:]


KEY_TRANSFORMS: dict[str, Callable[[str], str]] = {
    "snakeToCamel": snake_to_camel,
    "camelToSnake": camel_to_snake,
    "snakeToPascal": snake_to_pascal,
}


def transform_keys(value: Any, transform: Callable[[str], str]) -> Any:
    """Rename object keys recursively through nested objects and arrays."""
    if isinstance(value, list):
        return [transform_keys(item, transform) for item in value]
    if isinstance(value, dict):
        return {transform(key): transform_keys(item, transform) for key, item in value.items()}
    return value


def transform_json_string(source: str, kind: str) -> JsonTextResult:
    transform = KEY_TRANSFORMS.get(kind)
    if transform is None:
        return JsonTextResult.failure(f"Unsupported key transform: {kind}")
    return _reformat(source, lambda value: transform_keys(value, transform))
