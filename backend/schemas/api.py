from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, RootModel

from devtoolshub.base_converter import Base
from devtoolshub.timestamps import TimestampUnit


# --- Regex Schemas ---

class RegexFlagsModel(BaseModel):
    g: bool = False
    i: bool = False
    m: bool = False
    s: bool = False
    u: bool = False
    y: bool = False


class RegexMatchRequest(BaseModel):
    pattern: str = Field(..., max_length=10_000)
    flags: RegexFlagsModel = Field(default_factory=RegexFlagsModel)
    # Length is capped by the regex_max_input_length setting
    subject: str


class RegexReplaceRequest(RegexMatchRequest):
    replacement: str = Field("", max_length=10_000)


class RegexExplainRequest(BaseModel):
    pattern: str = Field(..., max_length=10_000)
    flags: RegexFlagsModel = Field(default_factory=RegexFlagsModel)


class RegexEscapeRequest(BaseModel):
    text: str = Field(..., max_length=100_000)
    unescape: bool = False


class MatchResponse(BaseModel):
    match: str
    index: int
    groups: dict[str, str] = {}


class MatchListResponse(BaseModel):
    matches: list[MatchResponse]
    count: int


class ReplaceResponse(BaseModel):
    result: str
    replace_count: int


class ExplainPartResponse(BaseModel):
    type: str
    raw: str
    description: str


class ExplainResponse(BaseModel):
    parts: list[ExplainPartResponse]


class EscapeResponse(BaseModel):
    result: str


class RegexPresetResponse(BaseModel):
    id: str
    name: str
    pattern: str
    description: str
    flags: str = ""


class RegexPresetList(BaseModel):
    presets: list[RegexPresetResponse]


# --- Password Schemas ---

class RandomPasswordRequest(BaseModel):
    # Out-of-range lengths are clamped to 8..128 by the generator
    length: int = Field(16, ge=1, le=1024)
    uppercase: bool = True
    lowercase: bool = True
    digits: bool = True
    symbols: bool = False
    readable_mode: bool = False
    exclude_chars: str = Field("", max_length=256)
    count: int = Field(1, ge=1, le=10)


class PassphraseRequest(BaseModel):
    word_count: int = Field(4, ge=1, le=64)
    separator: Literal["-", "_", ".", " "] = "-"
    capitalize: bool = False
    count: int = Field(1, ge=1, le=10)


class StrengthRequest(BaseModel):
    mode: Literal["random", "passphrase"]
    pool_size: int = Field(..., ge=0, le=1_000_000)
    effective_length: int = Field(..., ge=0, le=10_000)


class StrengthResponse(BaseModel):
    entropy: float
    level: str
    label: str
    percentage: int
    crack_time_seconds: float | None = None  # None when beyond any meaningful bound
    crack_time: str
    uncrackable: bool = False


class GeneratedPasswordResponse(BaseModel):
    value: str
    mode: str
    pool_size: int
    effective_length: int
    strength: StrengthResponse


class PasswordBatchResponse(BaseModel):
    passwords: list[GeneratedPasswordResponse]


# --- Markdown Schemas ---

class MarkdownRequest(BaseModel):
    # Length is capped by the markdown_max_input_length setting
    markdown: str
    locale: str | None = Field(None, max_length=20)


class MarkdownExportRequest(MarkdownRequest):
    filename: str = Field("markdown-export.html", min_length=1, max_length=255)
    style: str | None = Field(None, max_length=50)


class ContainerBlockResponse(BaseModel):
    type: str
    title: str | None = None
    content: str


class MarkdownRenderResponse(BaseModel):
    html: str
    blocks: list[ContainerBlockResponse] = []


class HtmlFragmentResponse(BaseModel):
    html: str


# --- Converter Schemas ---

class BaseConvertRequest(BaseModel):
    value: str = Field(..., max_length=10_000)
    from_base: Base
    to_base: Base | None = None


class BaseConvertResponse(BaseModel):
    values: dict[str, str]
    result: str | None = None


class TimestampConvertRequest(BaseModel):
    value: str = Field(..., max_length=64)
    unit: TimestampUnit = TimestampUnit.SECONDS
    timezone: str = Field("UTC", max_length=64)


class TimestampConvertResponse(BaseModel):
    iso_utc: str
    local: str
    timezone: str
    seconds: int
    milliseconds: int


class DateConvertRequest(BaseModel):
    value: str = Field(..., max_length=64)
    timezone: str = Field("local", max_length=64)


class TimestampsResponse(BaseModel):
    seconds: int
    milliseconds: int
    iso_utc: str | None = None


# --- Encoding Schemas ---

class EncodingRequest(BaseModel):
    kind: str = Field(..., max_length=20)
    text: str = Field(..., max_length=1_000_000)


class EncodeResponse(BaseModel):
    value: str


class DecodeResponse(BaseModel):
    value: Any


# --- JSON Tool Schemas ---

class JsonFormatRequest(BaseModel):
    source: str = Field(..., max_length=5_000_000)
    minify: bool = False


class JsonTransformRequest(BaseModel):
    source: str = Field(..., max_length=5_000_000)
    kind: Literal["snakeToCamel", "camelToSnake", "snakeToPascal"]


class JsonTextResponse(BaseModel):
    text: str


# --- QR Content Schemas ---

class TextQR(BaseModel):
    type: Literal["text"]
    content: str = Field(..., max_length=4_000)


class WifiQR(BaseModel):
    type: Literal["wifi"]
    ssid: str = Field(..., max_length=64)
    password: str = Field("", max_length=128)
    encryption: Literal["WPA", "WEP", "nopass"] = "WPA"
    hidden: bool = False


class VCardQR(BaseModel):
    type: Literal["vcard"]
    full_name: str = Field(..., max_length=200)
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    phone: str = Field("", max_length=50)
    email: str = Field("", max_length=200)
    organization: str = Field("", max_length=200)
    title: str = Field("", max_length=200)
    address: str = Field("", max_length=300)
    city: str = Field("", max_length=100)
    state: str = Field("", max_length=100)
    postal_code: str = Field("", max_length=20)
    country: str = Field("", max_length=100)
    url: str = Field("", max_length=500)
    note: str = Field("", max_length=1_000)


class EmailQR(BaseModel):
    type: Literal["email"]
    to: str = Field(..., max_length=320)
    subject: str = Field("", max_length=500)
    body: str = Field("", max_length=2_000)
    cc: str = Field("", max_length=1_000)
    bcc: str = Field("", max_length=1_000)


class PhoneQR(BaseModel):
    type: Literal["phone"]
    number: str = Field(..., max_length=50)


class SmsQR(BaseModel):
    type: Literal["sms"]
    number: str = Field(..., max_length=50)
    message: str = Field("", max_length=1_000)


class QRContentRequest(RootModel):
    root: Annotated[
        TextQR | WifiQR | VCardQR | EmailQR | PhoneQR | SmsQR,
        Field(discriminator="type"),
    ]


class QRContentResponse(BaseModel):
    content: str


# --- Analytics Schemas ---

class EventsStoredResponse(BaseModel):
    stored: int


class SummaryRange(BaseModel):
    preset: str
    start: str
    end: str


class SummaryFilters(BaseModel):
    tool_name: str | None = None
    event_name: str | None = None


class SummaryBucketResponse(BaseModel):
    date: str
    total: int
    by_tool: dict[str, int] = {}
    by_event: dict[str, int] = {}


class SummaryTotals(BaseModel):
    events: int


class SummaryData(BaseModel):
    totals: SummaryTotals
    buckets: list[SummaryBucketResponse]


class AnalyticsSummaryResponse(BaseModel):
    range: SummaryRange
    filters: SummaryFilters
    data: SummaryData


# --- Admin Schemas ---

class AdminLoginResponse(BaseModel):
    success: bool


class AdminSessionResponse(BaseModel):
    authenticated: bool
