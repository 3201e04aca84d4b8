"""Text encoders, decoders and hashes for the encoding tool.

Encoders and decoders are looked up by type tag in ``ENCODERS`` and
``DECODERS``; ``encode`` and ``decode`` wrap the lookup and turn codec
errors into failed results.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, unquote_to_bytes

from devtoolshub.results import ToolResult

# Characters encodeURIComponent leaves alone besides letters and digits.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_UNICODE_ESCAPE = re.compile(r"\\u([0-9a-fA-F]{4})")
_HEX_ESCAPE = re.compile(r"\\x([0-9a-fA-F]{2})")
_BAD_PERCENT = re.compile(r"%(?![0-9a-fA-F]{2})")
_BASE64_TEXT = re.compile(r"[A-Za-z0-9+/]*=*")
_WHITESPACE = re.compile(r"\s+")

_HTML_ENTITIES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#39;"}


@dataclass(frozen=True)
class EncodeResult(ToolResult):
    value: str = ""


@dataclass(frozen=True)
class DecodeResult(ToolResult):
    # str for text decoders, dict for query_string and jwt
    value: Any = None


# ---------------------------------------------------------------------------
# Encoders
# ---------------------------------------------------------------------------


def encode_unicode_escaped(text: str) -> str:
    """``\\uXXXX`` per UTF-16 code unit, so astral characters become pairs."""
    data = text.encode("utf-16-be", "surrogatepass")
    return "".join(f"\\u{int.from_bytes(data[i:i + 2], 'big'):04X}" for i in range(0, len(data), 2))


def encode_url_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def encode_hex_escaped(text: str) -> str:
    return "".join(f"\\x{byte:02X}" for byte in text.encode("utf-8"))


def encode_base64_text(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def md5_hash(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def sha1_hash(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


def encode_html_deep(text: str) -> str:
    """Entity-encode every character, using named entities where common."""
    return "".join(_HTML_ENTITIES.get(ch) or f"&#x{ord(ch):X};" for ch in text)


ENCODERS: dict[str, Callable[[str], str]] = {
    "unicode": encode_unicode_escaped,
    "url": encode_url_component,
    "utf16": encode_hex_escaped,
    "base64": encode_base64_text,
    "md5": md5_hash,
    "sha1": sha1_hash,
    "html": encode_html_deep,
}


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def decode_unicode_escaped(text: str) -> DecodeResult:
    units = _UNICODE_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), text)
    try:
        # Round-trip through UTF-16 so escaped surrogate pairs join up.
        value = units.encode("utf-16-be", "surrogatepass").decode("utf-16-be")
    except UnicodeDecodeError:
        return DecodeResult.failure("Unicode decode failed")
    return DecodeResult(value=value)


def _decode_uri_component(text: str) -> str:
    if _BAD_PERCENT.search(text):
        raise ValueError("malformed percent escape")
    return unquote_to_bytes(text).decode("utf-8")


def decode_url_component(text: str) -> DecodeResult:
    try:
        return DecodeResult(value=_decode_uri_component(text.replace("+", " ")))
    except (ValueError, UnicodeEncodeError):
        return DecodeResult.failure("URL decode failed")


def decode_hex_escaped(text: str) -> DecodeResult:
    found = _HEX_ESCAPE.findall(text)
    if not found:
        return DecodeResult.failure("No \\xXX found")
    data = bytes(int(pair, 16) for pair in found)
    return DecodeResult(value=data.decode("utf-8", errors="replace"))


def _b64_bytes(text: str) -> bytes:
    stripped = _WHITESPACE.sub("", text).rstrip("=")
    padded = stripped + "=" * (-len(stripped) % 4)
    return base64.b64decode(padded, validate=True)


def decode_base64_text(text: str) -> DecodeResult:
    compact = _WHITESPACE.sub("", text)
    if not compact:
        return DecodeResult.failure("Empty Base64")
    if not _BASE64_TEXT.fullmatch(compact):
        return DecodeResult.failure("Invalid Base64")
    try:
        data = _b64_bytes(compact)
    except (binascii.Error, ValueError):
        return DecodeResult.failure("Base64 decode failed")
    return DecodeResult(value=data.decode("utf-8", errors="replace"))


def parse_query_string(text: str) -> DecodeResult:
    """Decode ``a=1&b=2`` into a dict; repeated keys collect into lists."""
    query = text.strip()
    if query.startswith("?"):
        query = query[1:]
    parsed: dict[str, str | list[str]] = {}
    if not query:
        return DecodeResult(value=parsed)

    try:
        for pair in query.split("&"):
            raw_key, sep, raw_value = pair.partition("=")
            key = _decode_uri_component(raw_key.replace("+", " "))
            value = _decode_uri_component(raw_value.replace("+", " ")) if sep else ""
            if key in parsed:
                previous = parsed[key]
                parsed[key] = [*previous, value] if isinstance(previous, list) else [previous, value]
            else:
                parsed[key] = value
    except (ValueError, UnicodeEncodeError):
        return DecodeResult.failure("Query string decode failed")

    return DecodeResult(value=parsed)


def _b64url_text(segment: str) -> str:
    return _b64_bytes(segment.replace("-", "+").replace("_", "/")).decode("utf-8", errors="replace")


def decode_jwt(text: str) -> DecodeResult:
    """Decode a JWT's header and payload. The signature is not checked."""
    token = text.strip()
    if not token:
        return DecodeResult.failure("Empty JWT")
    parts = token.split(".")
    if len(parts) != 3:
        return DecodeResult.failure("JWT must have 3 parts")

    try:
        header_text = _b64url_text(parts[0])
        payload_text = _b64url_text(parts[1])
    except (binascii.Error, ValueError):
        return DecodeResult.failure("Base64Url decode failed")
    if not header_text or not payload_text:
        return DecodeResult.failure("Base64Url decode failed")

    try:
        decoded = {"header": json.loads(header_text), "payload": json.loads(payload_text)}
    except json.JSONDecodeError as exc:
        return DecodeResult.failure(str(exc))
    return DecodeResult(value=decoded)


DECODERS: dict[str, Callable[[str], DecodeResult]] = {
    "unicode": decode_unicode_escaped,
    "url": decode_url_component,
    "utf16": decode_hex_escaped,
    "base64": decode_base64_text,
    "query_string": parse_query_string,
    "jwt": decode_jwt,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def encode(kind: str, text: str) -> EncodeResult:
    encoder = ENCODERS.get(kind)
    if encoder is None:
        return EncodeResult.failure(f"Unsupported encoding type: {kind}")
    try:
        return EncodeResult(value=encoder(text))
    except UnicodeEncodeError:
        return EncodeResult.failure("Input contains characters that cannot be encoded")


def decode(kind: str, text: str) -> DecodeResult:
    decoder = DECODERS.get(kind)
    if decoder is None:
        return DecodeResult.failure(f"Unsupported decoding type: {kind}")
    return decoder(text)
