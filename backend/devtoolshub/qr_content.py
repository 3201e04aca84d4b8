"""Payload strings for QR codes: plain text, Wi-Fi, vCard, mailto, tel, smsto.

Only the text that goes into the code is produced here; drawing and
scanning the matrix is left to the client.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal
from urllib.parse import quote

from devtoolshub.results import ToolResult

WifiEncryption = Literal["WPA", "WEP", "nopass"]

_EMAIL_SHAPE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
# Everything except digits, keeping a leading "+"
_PHONE_NOISE = re.compile(r"(?!^\+)[^0-9]")
_NON_DIGIT = re.compile(r"[^0-9]")

# Stricter than encodeURIComponent: ! ' ( ) * are escaped as well.
_MAILTO_SAFE = "-_.~"


@dataclass(frozen=True)
class TextContent:
    content: str


@dataclass(frozen=True)
class WifiContent:
    ssid: str
    password: str = ""
    encryption: WifiEncryption = "WPA"
    hidden: bool = False


@dataclass(frozen=True)
class VCardContent:
    full_name: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    organization: str = ""
    title: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    url: str = ""
    note: str = ""


@dataclass(frozen=True)
class EmailContent:
    to: str
    subject: str = ""
    body: str = ""
    cc: str = ""
    bcc: str = ""


@dataclass(frozen=True)
class PhoneContent:
    number: str


@dataclass(frozen=True)
class SmsContent:
    number: str
    message: str = ""


QRContent = TextContent | WifiContent | VCardContent | EmailContent | PhoneContent | SmsContent


@dataclass(frozen=True)
class FormatResult(ToolResult):
    content: str = ""


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------


def escape_wifi(value: str) -> str:
    for char in ("\\", ";", ",", '"', ":"):
        value = value.replace(char, "\\" + char)
    return value


def escape_vcard(value: str) -> str:
    for char in ("\\", ";", ","):
        value = value.replace(char, "\\" + char)
    return value.replace("\n", "\\n")


def _encode_mailto_param(value: str) -> str:
    return quote(value, safe=_MAILTO_SAFE)


def _clean_phone_number(number: str) -> str | None:
    cleaned = _PHONE_NOISE.sub("", number.strip())
    if len(_NON_DIGIT.sub("", cleaned)) < 3:
        return None
    return cleaned


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_text(config: TextContent) -> FormatResult:
    content = config.content.strip()
    if not content:
        return FormatResult.failure("Content must not be empty")
    return FormatResult(content=content)


def format_wifi(config: WifiContent) -> FormatResult:
    """``WIFI:T:<enc>;S:<ssid>;P:<password>;H:true;;``"""
    if not config.ssid.strip():
        return FormatResult.failure("Network name (SSID) must not be empty")
    if config.encryption != "nopass" and not config.password:
        return FormatResult.failure("Encrypted networks require a password")

    content = f"WIFI:T:{config.encryption};S:{escape_wifi(config.ssid)};"
    if config.encryption != "nopass" and config.password:
        content += f"P:{escape_wifi(config.password)};"
    if config.hidden:
        content += "H:true;"
    return FormatResult(content=content + ";")


def format_vcard(config: VCardContent) -> FormatResult:
    """vCard 3.0, empty optional fields left out."""
    if not config.full_name.strip():
        return FormatResult.failure("Name must not be empty")

    lines = ["BEGIN:VCARD", "VERSION:3.0", f"FN:{escape_vcard(config.full_name)}"]
    if config.last_name or config.first_name:
        lines.append(f"N:{escape_vcard(config.last_name)};{escape_vcard(config.first_name)};;;")

    for prefix, value in (
        ("ORG", config.organization),
        ("TITLE", config.title),
        ("TEL", config.phone),
        ("EMAIL", config.email),
    ):
        if value:
            lines.append(f"{prefix}:{escape_vcard(value)}")

    address = (config.address, config.city, config.state, config.postal_code, config.country)
    if any(address):
        # PO box and extended address stay empty
        lines.append("ADR:" + ";".join(escape_vcard(part) for part in ("", "", *address)))

    if config.url:
        lines.append(f"URL:{escape_vcard(config.url)}")
    if config.note:
        lines.append(f"NOTE:{escape_vcard(config.note)}")

    lines.append("END:VCARD")
    return FormatResult(content="\n".join(lines))


def format_email(config: EmailContent) -> FormatResult:
    recipient = config.to.strip()
    if not recipient:
        return FormatResult.failure("Recipient address must not be empty")
    if not _EMAIL_SHAPE.fullmatch(recipient):
        return FormatResult.failure("Invalid email address")

    params = [
        f"{name}={_encode_mailto_param(value)}"
        for name, value in (
            ("subject", config.subject),
            ("body", config.body),
            ("cc", config.cc),
            ("bcc", config.bcc),
        )
        if value
    ]
    content = f"mailto:{recipient}"
    if params:
        content += "?" + "&".join(params)
    return FormatResult(content=content)


def format_phone(config: PhoneContent) -> FormatResult:
    if not config.number.strip():
        return FormatResult.failure("Phone number must not be empty")
    cleaned = _clean_phone_number(config.number)
    if cleaned is None:
        return FormatResult.failure("Please enter a valid phone number")
    return FormatResult(content=f"tel:{cleaned}")


def format_sms(config: SmsContent) -> FormatResult:
    if not config.number.strip():
        return FormatResult.failure("Phone number must not be empty")
    cleaned = _clean_phone_number(config.number)
    if cleaned is None:
        return FormatResult.failure("Please enter a valid phone number")
    content = f"smsto:{cleaned}"
    if config.message.strip():
        content += f":{config.message}"
    return FormatResult(content=content)


_FORMATTERS: dict[type, Callable[..., FormatResult]] = {
    TextContent: format_text,
    WifiContent: format_wifi,
    VCardContent: format_vcard,
    EmailContent: format_email,
    PhoneContent: format_phone,
    SmsContent: format_sms,
}


def format_qr_content(config: QRContent) -> FormatResult:
    formatter = _FORMATTERS.get(type(config))
    if formatter is None:
        return FormatResult.failure("Unsupported content type")
    return formatter(config)
