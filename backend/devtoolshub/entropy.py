from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

# Modern GPU cluster: 10 billion guesses per second.
DEFAULT_ATTEMPTS_PER_SECOND = 10_000_000_000

# ln(seconds) above which the estimate is reported as unbounded.
LOG_SECONDS_CUTOFF = 100

DEFAULT_LOCALE = "zh-CN"


class StrengthLevel(str, Enum):
    VERY_WEAK = "very-weak"
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"
    VERY_STRONG = "very-strong"


# (upper bound exclusive, level, progress-bar percentage)
_THRESHOLDS = (
    (28, StrengthLevel.VERY_WEAK, 10),
    (36, StrengthLevel.WEAK, 30),
    (60, StrengthLevel.MEDIUM, 55),
    (128, StrengthLevel.STRONG, 80),
)
_TOP_TIER = (StrengthLevel.VERY_STRONG, 100)

STRENGTH_LABELS: dict[str, dict[StrengthLevel, str]] = {
    "zh-CN": {
        StrengthLevel.VERY_WEAK: "极弱",
        StrengthLevel.WEAK: "弱",
        StrengthLevel.MEDIUM: "中等",
        StrengthLevel.STRONG: "强",
        StrengthLevel.VERY_STRONG: "极强",
    },
    "en": {
        StrengthLevel.VERY_WEAK: "Very weak",
        StrengthLevel.WEAK: "Weak",
        StrengthLevel.MEDIUM: "Medium",
        StrengthLevel.STRONG: "Strong",
        StrengthLevel.VERY_STRONG: "Very strong",
    },
}


@dataclass(frozen=True)
class StrengthInfo:
    level: StrengthLevel
    label: str
    percentage: int


@dataclass(frozen=True)
class StrengthAnalysis:
    entropy: float
    strength: StrengthInfo
    crack_time_seconds: float
    crack_time: str


# ---------------------------------------------------------------------------
# Entropy and strength
# ---------------------------------------------------------------------------


def compute_entropy(mode: str, pool_size: int, effective_length: int) -> float:
    """Entropy in bits: ``log2(pool_size) * effective_length``.

    Random passwords and passphrases share the formula; *mode* only tells
    which of the two the numbers describe. Returns 0 when either input is
    not positive.
    """
    if pool_size <= 0 or effective_length <= 0:
        return 0.0
    return math.log2(pool_size) * effective_length


def classify_strength(entropy_bits: float, locale: str = DEFAULT_LOCALE) -> StrengthInfo:
    labels = STRENGTH_LABELS.get(locale, STRENGTH_LABELS[DEFAULT_LOCALE])
    for bound, level, percentage in _THRESHOLDS:
        if entropy_bits < bound:
            return StrengthInfo(level=level, label=labels[level], percentage=percentage)
    level, percentage = _TOP_TIER
    return StrengthInfo(level=level, label=labels[level], percentage=percentage)


def estimate_crack_time_seconds(
    entropy_bits: float,
    attempts_per_second: float = DEFAULT_ATTEMPTS_PER_SECOND,
) -> float:
    """Average brute-force time, ``2^(entropy - 1) / attempts_per_second``.

    Computed in log space so large entropies do not overflow; returns
    ``math.inf`` once the natural log of the result passes the cutoff.
    """
    if entropy_bits <= 0:
        return 0.0
    log_seconds = (entropy_bits - 1) * math.log(2) - math.log(attempts_per_second)
    if log_seconds > LOG_SECONDS_CUTOFF:
        return math.inf
    return math.exp(log_seconds)


# ---------------------------------------------------------------------------
# Human-readable crack time
# ---------------------------------------------------------------------------


def _group_zh(n: int) -> str:
    if n >= 100_000_000:
        return f"{n / 100_000_000:.1f} 亿"
    if n >= 10_000:
        return f"{n / 10_000:.1f} 万"
    if n >= 1_000:
        return f"{n / 1_000:.1f} 千"
    return str(n)


def _group_en(n: int) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f} million"
    if n >= 1_000:
        return f"{n / 1_000:.1f} thousand"
    return str(n)


@dataclass(frozen=True)
class _CrackTimeWording:
    uncrackable: str
    instant: str
    under_second: str
    approx: str
    units: dict[str, str]
    beyond: str
    group: Callable[[int], str]

    def about(self, amount: str, unit: str) -> str:
        return self.approx.format(amount=amount, unit=self.units[unit])


_WORDINGS = {
    "zh-CN": _CrackTimeWording(
        uncrackable="理论不可破解",
        instant="瞬间",
        under_second="不到 1 秒",
        approx="约 {amount} {unit}",
        units={
            "second": "秒",
            "minute": "分钟",
            "hour": "小时",
            "day": "天",
            "month": "个月",
            "year": "年",
        },
        beyond="数十亿年以上",
        group=_group_zh,
    ),
    "en": _CrackTimeWording(
        uncrackable="Theoretically uncrackable",
        instant="Instantly",
        under_second="Less than 1 second",
        approx="About {amount} {unit}",
        units={
            "second": "seconds",
            "minute": "minutes",
            "hour": "hours",
            "day": "days",
            "month": "months",
            "year": "years",
        },
        beyond="Billions of years or more",
        group=_group_en,
    ),
}


def format_crack_time(seconds: float, locale: str = DEFAULT_LOCALE) -> str:
    """Bucket *seconds* into instant/sub-second/seconds/.../years wording.

    Only the wording depends on *locale*; bucket boundaries are fixed.
    """
    wording = _WORDINGS.get(locale, _WORDINGS[DEFAULT_LOCALE])

    if math.isinf(seconds):
        return wording.uncrackable
    if seconds < 0.001:
        return wording.instant
    if seconds < 1:
        return wording.under_second
    if seconds < 60:
        return wording.about(str(math.ceil(seconds)), "second")

    minutes = seconds / 60
    if minutes < 60:
        return wording.about(str(math.ceil(minutes)), "minute")

    hours = minutes / 60
    if hours < 24:
        return wording.about(str(math.ceil(hours)), "hour")

    days = hours / 24
    if days < 30:
        return wording.about(str(math.ceil(days)), "day")

    months = days / 30
    if months < 12:
        return wording.about(str(math.ceil(months)), "month")

    years = days / 365
    if years < 1000:
        return wording.about(str(math.ceil(years)), "year")
    if years < 1_000_000_000:
        return wording.about(wording.group(math.ceil(years)), "year")
    return wording.beyond


def analyze_strength(
    mode: str,
    pool_size: int,
    effective_length: int,
    *,
    locale: str = DEFAULT_LOCALE,
    attempts_per_second: float = DEFAULT_ATTEMPTS_PER_SECOND,
) -> StrengthAnalysis:
    entropy = compute_entropy(mode, pool_size, effective_length)
    seconds = estimate_crack_time_seconds(entropy, attempts_per_second)
    return StrengthAnalysis(
        entropy=entropy,
        strength=classify_strength(entropy, locale),
        crack_time_seconds=seconds,
        crack_time=format_crack_time(seconds, locale),
    )
