from __future__ import annotations

import logging
import secrets
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from devtoolshub.results import ToolResult
from devtoolshub.wordlist import load_wordlist

logger = logging.getLogger(__name__)

T = TypeVar("T")

UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
DIGITS = "0123456789"
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

# Visually confusable characters removed in readable mode: 0/O, 1/l/I, 5/S, 8/B, 2/Z
AMBIGUOUS_CHARS = "0O1lI5S8B2Z"

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
MIN_WORD_COUNT = 3
MAX_WORD_COUNT = 8
MIN_BATCH = 1
MAX_BATCH = 10

PASSPHRASE_SEPARATORS = ("-", "_", ".", " ")

EMPTY_POOL_ERROR = "Character pool is empty, select at least one character type"

MAX_UINT32 = 0xFFFFFFFF


def _random_uint32() -> int:
    return secrets.randbits(32)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


class PasswordMode(str, Enum):
    RANDOM = "random"
    PASSPHRASE = "passphrase"


@dataclass(frozen=True)
class RandomPasswordConfig:
    length: int = 16
    uppercase: bool = True
    lowercase: bool = True
    digits: bool = True
    symbols: bool = False
    readable_mode: bool = False
    exclude_chars: str = ""


@dataclass(frozen=True)
class PassphraseConfig:
    word_count: int = 4
    separator: str = "-"
    capitalize: bool = False


DEFAULT_RANDOM_CONFIG = RandomPasswordConfig()
DEFAULT_PASSPHRASE_CONFIG = PassphraseConfig()


@dataclass(frozen=True)
class GeneratedPassword:
    """A generated secret plus the two numbers its entropy depends on.

    ``pool_size`` is the character pool size (random mode) or wordlist
    size (passphrase mode); ``effective_length`` is the character count or
    the word count respectively.
    """

    value: str
    mode: PasswordMode
    pool_size: int
    effective_length: int


@dataclass(frozen=True)
class PasswordResult(ToolResult):
    password: GeneratedPassword | None = None


@dataclass(frozen=True)
class _CharacterClass:
    name: str
    charset: str
    # Symbols contain none of the ambiguous characters, so readable mode skips them.
    readable_filter: bool = True


_CHARACTER_CLASSES = (
    _CharacterClass("uppercase", UPPERCASE),
    _CharacterClass("lowercase", LOWERCASE),
    _CharacterClass("digits", DIGITS),
    _CharacterClass("symbols", SYMBOLS, readable_filter=False),
)


# ---------------------------------------------------------------------------
# Secure randomness
# ---------------------------------------------------------------------------


def secure_random_int(max_value: int, random_uint32: Callable[[], int] = _random_uint32) -> int:
    """Return a uniform integer in ``[0, max_value)``.

    Samples come from a 32-bit source; values in the truncated remainder
    above the largest multiple of *max_value* are rejected and redrawn so
    the result carries no modulo bias.
    """
    if max_value <= 0:
        raise ValueError("max_value must be positive")
    limit = MAX_UINT32 - (MAX_UINT32 % max_value)
    while True:
        sample = random_uint32()
        if sample < limit:
            return sample % max_value


def secure_shuffle(items: Sequence[T], random_uint32: Callable[[], int] = _random_uint32) -> list[T]:
    """Fisher-Yates shuffle into a new list."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = secure_random_int(i + 1, random_uint32)
        result[i], result[j] = result[j], result[i]
    return result


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _filtered_charset(char_class: _CharacterClass, readable_mode: bool, exclude_chars: str) -> str:
    chars = char_class.charset
    if readable_mode and char_class.readable_filter:
        chars = "".join(c for c in chars if c not in AMBIGUOUS_CHARS)
    if exclude_chars:
        chars = "".join(c for c in chars if c not in exclude_chars)
    return chars


def generate_random_password(
    config: RandomPasswordConfig = DEFAULT_RANDOM_CONFIG,
    random_uint32: Callable[[], int] = _random_uint32,
) -> PasswordResult:
    """Generate one random password.

    The length is clamped to 8..128. Every enabled class contributes one
    guaranteed character unless filtering emptied it, in which case that
    class is skipped without error. The rest is drawn from the whole pool
    and the result is shuffled.
    """
    length = _clamp(config.length, MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH)

    enabled = [c for c in _CHARACTER_CLASSES if getattr(config, c.name)]
    subsets = [_filtered_charset(c, config.readable_mode, config.exclude_chars) for c in enabled]
    pool = "".join(subsets)
    if not pool:
        return PasswordResult.failure(EMPTY_POOL_ERROR)

    required: list[str] = []
    for char_class, subset in zip(enabled, subsets):
        if not subset:
            logger.debug("No characters left in %s after filtering, skipping", char_class.name)
            continue
        required.append(subset[secure_random_int(len(subset), random_uint32)])

    chars = [pool[secure_random_int(len(pool), random_uint32)] for _ in range(length - len(required))]
    chars.extend(required)

    return PasswordResult(
        password=GeneratedPassword(
            value="".join(secure_shuffle(chars, random_uint32)),
            mode=PasswordMode.RANDOM,
            pool_size=len(pool),
            effective_length=length,
        )
    )


def generate_passphrase(
    config: PassphraseConfig = DEFAULT_PASSPHRASE_CONFIG,
    words: Sequence[str] | None = None,
    random_uint32: Callable[[], int] = _random_uint32,
) -> GeneratedPassword:
    """Join 3..8 words drawn with replacement from *words*.

    Defaults to the bundled diceware list when *words* is not given.
    """
    wordlist = words if words is not None else load_wordlist()
    word_count = _clamp(config.word_count, MIN_WORD_COUNT, MAX_WORD_COUNT)

    picked: list[str] = []
    for _ in range(word_count):
        word = wordlist[secure_random_int(len(wordlist), random_uint32)]
        if config.capitalize:
            word = word[:1].upper() + word[1:]
        picked.append(word)

    return GeneratedPassword(
        value=config.separator.join(picked),
        mode=PasswordMode.PASSPHRASE,
        pool_size=len(wordlist),
        effective_length=word_count,
    )


def generate_multiple(count: int, generator: Callable[[], T]) -> list[T]:
    """Call *generator* independently 1..10 times."""
    return [generator() for _ in range(_clamp(count, MIN_BATCH, MAX_BATCH))]
