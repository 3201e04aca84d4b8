"""Regex tester backend: pattern building, match enumeration, template
replacement and a lexical pattern explainer.

Patterns are compiled with the third-party ``regex`` engine, which accepts
the browser-style ``(?<name>...)`` group syntax, lookbehind and per-call
timeouts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

import regex

from devtoolshub.results import ToolResult

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 500_000

EMPTY_PATTERN_ERROR = "Pattern must not be empty"
INPUT_TOO_LONG_ERROR = "Test text is too long, please shorten it and try again"
TIMEOUT_ERROR = "Regex execution timed out, simplify the pattern or the test text"

# Flag letters in their fixed serialisation order.
_FLAG_ORDER = "gimsuy"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RegexFlags:
    """Independent boolean regex flags, all off by default.

    ``g`` (global) and ``y`` (sticky) are scan modes handled by this module;
    the others map onto engine flags. Without ``u`` the shorthand classes
    ``\\d``, ``\\w`` and ``\\b`` are rewritten to ASCII sets by
    :func:`translate_pattern`; the engine itself always runs in Unicode mode.
    """

    g: bool = False
    i: bool = False
    m: bool = False
    s: bool = False
    u: bool = False
    y: bool = False

    def as_string(self) -> str:
        return "".join(letter for letter in _FLAG_ORDER if getattr(self, letter))

    def engine_flags(self) -> int:
        value = regex.UNICODE
        if self.i:
            value |= regex.IGNORECASE
        if self.m:
            value |= regex.MULTILINE
        if self.s:
            value |= regex.DOTALL
        return value


@dataclass(frozen=True)
class CompiledPattern:
    """A successfully compiled pattern together with the flags it was built from."""

    source: str
    flags: RegexFlags
    engine: regex.Pattern = field(repr=False, compare=False)

    @property
    def flag_string(self) -> str:
        return self.flags.as_string()

    def with_global(self) -> CompiledPattern:
        # Global mode lives in the scanner, so the engine object is reused.
        if self.flags.g:
            return self
        return replace(self, flags=replace(self.flags, g=True))


@dataclass(frozen=True)
class MatchResult:
    """One match occurrence.

    ``groups`` maps ``"0"`` to capture group 1, ``"1"`` to group 2 and so
    on, plus named groups under their names. Groups that did not take part
    in the match are left out.
    """

    match: str
    index: int
    groups: dict[str, str]
    input: str = field(repr=False)

    @property
    def end(self) -> int:
        return self.index + len(self.match)


@dataclass(frozen=True)
class BuildResult(ToolResult):
    pattern: CompiledPattern | None = None


@dataclass(frozen=True)
class MatchResults(ToolResult):
    matches: list[MatchResult] = field(default_factory=list)


@dataclass(frozen=True)
class ReplaceResult(ToolResult):
    result: str = ""
    replace_count: int = 0


# ---------------------------------------------------------------------------
# Pattern translation
# ---------------------------------------------------------------------------

_ASCII_SETS = {"d": "0-9", "w": "A-Za-z0-9_"}
_WORD = "[A-Za-z0-9_]"
_ASCII_ESCAPES = {
    "d": "[0-9]",
    "D": "[^0-9]",
    "w": _WORD,
    "W": "[^A-Za-z0-9_]",
    "b": f"(?:(?<={_WORD})(?!{_WORD})|(?<!{_WORD})(?={_WORD}))",
    "B": f"(?:(?<={_WORD})(?={_WORD})|(?<!{_WORD})(?!{_WORD}))",
}


def _translate_class(pattern: str, start: int, ascii_shorthands: bool) -> tuple[str, int]:
    """Rewrite the class opened at *start*; returns the text and the index past ``]``.

    The first ``]`` always closes the class, so ``[]`` never matches and
    ``[^]`` matches any character. ``\\D`` and ``\\W`` cannot be spelled
    inside an ASCII set, so classes holding them become alternations
    (or lookaheads when the class is negated).
    """
    i = start + 1
    negated = pattern.startswith("^", i)
    if negated:
        i += 1

    members: list[str] = []
    excluded: list[str] = []
    while i < len(pattern) and pattern[i] != "]":
        if pattern[i] == "\\" and i + 1 < len(pattern):
            letter = pattern[i + 1]
            if ascii_shorthands and letter in "dw":
                members.append(_ASCII_SETS[letter])
            elif ascii_shorthands and letter in "DW":
                excluded.append(_ASCII_SETS[letter.lower()])
            else:
                members.append(pattern[i : i + 2])
            i += 2
            continue
        members.append(pattern[i])
        i += 1

    if i >= len(pattern):
        # Unterminated; the engine reports it
        return pattern[start:], len(pattern)

    body = "".join(members)
    end = i + 1
    if not excluded:
        if not body:
            return ("[\\s\\S]" if negated else "(?!)"), end
        return f"[{'^' if negated else ''}{body}]", end

    if negated:
        parts = [f"(?![{body}])"] if body else []
        parts += [f"(?=[{chars}])" for chars in excluded[:-1]]
        parts.append(f"[{excluded[-1]}]")
        return f"(?:{''.join(parts)})", end

    alternatives = [f"[{body}]"] if body else []
    alternatives += [f"[^{chars}]" for chars in excluded]
    return f"(?:{'|'.join(alternatives)})", end


def translate_pattern(pattern: str, flags: RegexFlags) -> str:
    """Rewrite browser regex syntax into what the ``regex`` engine expects.

    - ``\\k<name>`` becomes ``(?P=name)``.
    - Without ``m``, ``$`` only matches at the very end, never before a
      trailing newline.
    - Without ``u``, ``\\d``, ``\\w`` and ``\\b`` (and their negations) are
      spelled out as ASCII classes. Case folding stays Unicode-aware.
    """
    ascii_shorthands = not flags.u
    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            letter = pattern[i + 1]
            if letter == "k" and pattern.startswith("<", i + 2):
                close = pattern.find(">", i + 3)
                if close != -1:
                    out.append(f"(?P={pattern[i + 3 : close]})")
                    i = close + 1
                    continue
            if ascii_shorthands and letter in _ASCII_ESCAPES:
                out.append(_ASCII_ESCAPES[letter])
            else:
                out.append(pattern[i : i + 2])
            i += 2
            continue
        if ch == "[":
            translated, i = _translate_class(pattern, i, ascii_shorthands)
            out.append(translated)
            continue
        if ch == "$" and not flags.m:
            out.append(r"\Z")
        else:
            out.append(ch)
        i += 1
    return "".join(out)


# ---------------------------------------------------------------------------
# Build / match
# ---------------------------------------------------------------------------


def build_pattern(pattern: str, flags: RegexFlags | None = None) -> BuildResult:
    """Compile *pattern* with *flags*.

    The engine's own error message is returned unchanged on syntax errors.
    ``source`` keeps the pattern as written; the engine gets the
    translated form.
    """
    flags = flags or RegexFlags()
    if not pattern:
        return BuildResult.failure(EMPTY_PATTERN_ERROR)
    try:
        engine = regex.compile(translate_pattern(pattern, flags), flags.engine_flags())
    except (regex.error, ValueError, OverflowError) as exc:
        return BuildResult.failure(str(exc))
    return BuildResult(pattern=CompiledPattern(source=pattern, flags=flags, engine=engine))


def test_pattern(compiled: CompiledPattern, subject: str) -> bool:
    """Return True when *compiled* matches *subject* at least once."""
    if compiled.flags.y:
        return compiled.engine.match(subject) is not None
    return compiled.engine.search(subject) is not None


def find_all_matches(
    compiled: CompiledPattern,
    subject: str,
    *,
    timeout: float | None = None,
) -> list[MatchResult]:
    """Enumerate every non-overlapping match left to right.

    Always scans in global mode. A zero-length match moves the cursor one
    character forward so the scan terminates. In sticky mode each match
    has to start exactly at the cursor and the scan stops at the first
    miss. Raises ``TimeoutError`` when *timeout* seconds are exceeded.
    """
    scanner = compiled.with_global()
    engine = scanner.engine
    sticky = scanner.flags.y

    results: list[MatchResult] = []
    cursor = 0
    while cursor <= len(subject):
        if sticky:
            found = engine.match(subject, cursor, timeout=timeout)
        else:
            found = engine.search(subject, cursor, timeout=timeout)
        if found is None:
            break
        results.append(_to_match_result(found, engine, subject))
        start, end = found.span()
        cursor = end if end > start else end + 1
    return results


def _to_match_result(found: regex.Match, engine: regex.Pattern, subject: str) -> MatchResult:
    groups: dict[str, str] = {}
    for name, index in engine.groupindex.items():
        value = found.group(index)
        if value is not None:
            groups[name] = value
    for index in range(1, engine.groups + 1):
        value = found.group(index)
        key = str(index - 1)
        if value is not None and key not in groups:
            groups[key] = value
    return MatchResult(match=found.group(0), index=found.start(), groups=groups, input=subject)


def get_match_results(
    pattern: str,
    flags: RegexFlags | None,
    subject: str,
    *,
    max_input_length: int = MAX_INPUT_LENGTH,
    timeout: float | None = None,
) -> MatchResults:
    """Build *pattern* and return all of its matches in *subject*."""
    if len(subject) > max_input_length:
        return MatchResults.failure(INPUT_TOO_LONG_ERROR)
    built = build_pattern(pattern, flags)
    if not built.ok:
        return MatchResults.failure(built.error)
    try:
        matches = find_all_matches(built.pattern, subject, timeout=timeout)
    except TimeoutError:
        logger.warning("Regex scan timed out (pattern length %d)", len(pattern))
        return MatchResults.failure(TIMEOUT_ERROR)
    return MatchResults(matches=matches)


# ---------------------------------------------------------------------------
# Replace
# ---------------------------------------------------------------------------

# $& whole match, $` prefix, $' suffix, $1-$9, $<name>
_TEMPLATE_TOKEN = regex.compile(r"\$(?:(?P<special>[&`'])|(?P<number>[1-9])|<(?P<name>[^>]*)>)")


def expand_template(
    template: str,
    found: MatchResult,
    group_count: int,
    group_names: frozenset[str] | set[str] = frozenset(),
) -> str:
    """Expand a replacement template for a single match.

    References to groups that exist but did not participate expand to the
    empty string. References to groups the pattern does not define are
    kept literally.
    """

    def substitute(token: regex.Match) -> str:
        special = token.group("special")
        if special == "&":
            return found.match
        if special == "`":
            return found.input[: found.index]
        if special == "'":
            return found.input[found.end :]

        number = token.group("number")
        if number is not None:
            position = int(number)
            if position > group_count:
                return token.group(0)
            return found.groups.get(str(position - 1), "")

        name = token.group("name")
        if name not in group_names:
            return token.group(0)
        return found.groups.get(name, "")

    return _TEMPLATE_TOKEN.sub(substitute, template)


def replace_all(
    pattern: str,
    flags: RegexFlags | None,
    subject: str,
    replacement: str,
    *,
    timeout: float | None = None,
) -> ReplaceResult:
    """Replace every match of *pattern* in *subject* using *replacement*.

    ``replace_count`` counts replaced match occurrences, not template
    substitutions.
    """
    built = build_pattern(pattern, flags)
    if not built.ok:
        return ReplaceResult.failure(built.error)

    compiled = built.pattern
    try:
        matches = find_all_matches(compiled, subject, timeout=timeout)
    except TimeoutError:
        logger.warning("Regex replace timed out (pattern length %d)", len(pattern))
        return ReplaceResult.failure(TIMEOUT_ERROR)

    group_count = compiled.engine.groups
    group_names = frozenset(compiled.engine.groupindex)

    pieces: list[str] = []
    last = 0
    for found in matches:
        pieces.append(subject[last : found.index])
        pieces.append(expand_template(replacement, found, group_count, group_names))
        last = found.end
    pieces.append(subject[last:])

    return ReplaceResult(result="".join(pieces), replace_count=len(matches))


# ---------------------------------------------------------------------------
# Escape / unescape
# ---------------------------------------------------------------------------

_REGEX_SPECIAL = regex.compile(r"[.*+?^${}()\[\]|\\]")
_ESCAPED_CHAR = regex.compile(r"\\(.)")


def escape_for_regex(text: str) -> str:
    """Escape regex metacharacters so *text* matches literally."""
    return _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), text)


def unescape_regex(text: str) -> str:
    """Drop one level of backslash escaping (``\\d`` becomes ``d``)."""
    return _ESCAPED_CHAR.sub(lambda m: m.group(1), text)


# ---------------------------------------------------------------------------
# Explain
# ---------------------------------------------------------------------------


class TokenType(str, Enum):
    LITERAL = "literal"
    ESCAPE = "escape"
    CHARACTER_CLASS = "characterClass"
    GROUP = "group"
    ANCHOR = "anchor"
    QUANTIFIER = "quantifier"
    ALTERNATION = "alternation"
    ANY = "any"


@dataclass(frozen=True)
class ExplainPart:
    type: TokenType
    raw: str
    description: str


@dataclass(frozen=True)
class ExplainResult(ToolResult):
    parts: list[ExplainPart] = field(default_factory=list)


ESCAPE_DESCRIPTIONS: dict[str, str] = {
    "d": "digit [0-9]",
    "D": "non-digit",
    "w": "word character [a-zA-Z0-9_]",
    "W": "non-word character",
    "s": "whitespace",
    "S": "non-whitespace",
    "b": "word boundary",
    "B": "non-word boundary",
    "n": "line feed",
    "r": "carriage return",
    "t": "tab",
    "0": "null character",
}

_QUANTIFIER_DESCRIPTIONS = {
    "*": "0 or more times",
    "+": "1 or more times",
    "?": "0 or 1 time",
}
_LAZY_DESCRIPTION = "lazy modifier (match as few as possible)"

_NAMED_GROUP = regex.compile(r"\(\?P?<([A-Za-z_]\w*)>")


def _literal(char: str) -> str:
    return f"literal '{char}'"


def _find_class_end(pattern: str, start: int) -> int:
    """Return the index just past the ``]`` closing the class opened at *start*."""
    end = start + 1
    depth = 0
    while end < len(pattern):
        ch = pattern[end]
        if ch == "\\":
            end += 2
            continue
        if ch == "[":
            depth += 1
        elif ch == "]":
            if depth == 0:
                return end + 1
            depth -= 1
        end += 1
    return len(pattern)


def _find_group_end(pattern: str, start: int) -> int:
    """Return the index just past the ``)`` closing the group opened at *start*."""
    end = start + 1
    depth = 1
    while end < len(pattern):
        ch = pattern[end]
        if ch == "\\":
            end += 2
            continue
        if ch == "[":
            end = _find_class_end(pattern, end)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return end + 1
        end += 1
    return len(pattern)


def _describe_group(raw: str) -> str:
    if raw.startswith("(?:"):
        return "non-capturing group"
    if raw.startswith("(?="):
        return "positive lookahead"
    if raw.startswith("(?!"):
        return "negative lookahead"
    if raw.startswith("(?<="):
        return "positive lookbehind"
    if raw.startswith("(?<!"):
        return "negative lookbehind"
    named = _NAMED_GROUP.match(raw)
    if named:
        return f"named capturing group '{named.group(1)}'"
    if raw.startswith("(?"):
        return "group with inline modifiers"
    return "capturing group"


def tokenize_pattern(pattern: str) -> list[ExplainPart]:
    """Split *pattern* into explain parts in a single left-to-right pass.

    This is a lexical classifier, not a parser. The ``raw`` fields of the
    returned parts always concatenate back to *pattern*.
    """
    parts: list[ExplainPart] = []
    length = len(pattern)
    i = 0

    while i < length:
        c = pattern[i]

        if c == "\\":
            if i + 1 >= length:
                parts.append(ExplainPart(TokenType.ESCAPE, "\\", "incomplete backslash"))
                i += 1
                continue
            nxt = pattern[i + 1]
            raw = pattern[i : i + 2]
            if nxt in ESCAPE_DESCRIPTIONS:
                parts.append(ExplainPart(TokenType.ESCAPE, raw, ESCAPE_DESCRIPTIONS[nxt]))
            else:
                parts.append(ExplainPart(TokenType.LITERAL, raw, _literal(nxt)))
            i += 2
            continue

        if c == "[":
            end = _find_class_end(pattern, i)
            raw = pattern[i:end]
            description = "negated character class" if raw.startswith("[^") else "character class"
            parts.append(ExplainPart(TokenType.CHARACTER_CLASS, raw, description))
            i = end
            continue

        if c == "(":
            end = _find_group_end(pattern, i)
            raw = pattern[i:end]
            parts.append(ExplainPart(TokenType.GROUP, raw, _describe_group(raw)))
            i = end
            continue

        if c in ")]}":
            parts.append(ExplainPart(TokenType.LITERAL, c, _literal(c)))
            i += 1
            continue

        if c == "^":
            parts.append(ExplainPart(TokenType.ANCHOR, c, "start of line/string"))
            i += 1
            continue

        if c == "$":
            parts.append(ExplainPart(TokenType.ANCHOR, c, "end of line/string"))
            i += 1
            continue

        if c in _QUANTIFIER_DESCRIPTIONS:
            previous = parts[-1] if parts else None
            if (
                c == "?"
                and previous is not None
                and previous.type is TokenType.QUANTIFIER
                and previous.description != _LAZY_DESCRIPTION
            ):
                description = _LAZY_DESCRIPTION
            else:
                description = _QUANTIFIER_DESCRIPTIONS[c]
            parts.append(ExplainPart(TokenType.QUANTIFIER, c, description))
            i += 1
            continue

        if c == "{":
            close = pattern.find("}", i)
            end = length if close == -1 else close + 1
            parts.append(ExplainPart(TokenType.QUANTIFIER, pattern[i:end], "quantifier (repeat range)"))
            i = end
            continue

        if c == ".":
            parts.append(ExplainPart(TokenType.ANY, c, "any character except line breaks"))
            i += 1
            continue

        if c == "|":
            parts.append(ExplainPart(TokenType.ALTERNATION, c, "or"))
            i += 1
            continue

        parts.append(ExplainPart(TokenType.LITERAL, c, _literal(c)))
        i += 1

    return parts


def explain_pattern(pattern: str, flags: RegexFlags | None = None) -> ExplainResult:
    """Compile *pattern* first, then explain it token by token."""
    built = build_pattern(pattern, flags)
    if not built.ok:
        return ExplainResult.failure(built.error)
    return ExplainResult(parts=tokenize_pattern(pattern))


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RegexPreset:
    id: str
    name: str
    pattern: str
    description: str
    flags: RegexFlags = field(default_factory=RegexFlags)


REGEX_PRESETS: list[RegexPreset] = [
    RegexPreset(
        id="email",
        name="Email",
        pattern=r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}",
        description="Common email address format (for reference only)",
    ),
    RegexPreset(
        id="phone-cn",
        name="Mobile number (mainland China)",
        pattern=r"1[3-9]\d{9}",
        description="11-digit mobile number (for reference only)",
    ),
    RegexPreset(
        id="url",
        name="URL",
        pattern=r"https?://[^\s]+",
        description="HTTP(S) link (for reference only)",
    ),
    RegexPreset(
        id="ipv4",
        name="IPv4",
        pattern=r"\b(?:\d{1,3}\.){3}\d{1,3}\b",
        description="IPv4 address (for reference only)",
    ),
    RegexPreset(
        id="id-card-cn",
        name="ID card number (mainland China)",
        pattern=r"\d{17}[0-9Xx]",
        description="18-digit resident ID number (for reference only)",
    ),
    RegexPreset(
        id="chinese",
        name="Chinese characters",
        pattern=r"[\u4e00-\u9fff]+",
        description="Common CJK unified ideographs",
    ),
    RegexPreset(
        id="digits",
        name="Digits",
        pattern=r"\d+",
        description="One or more digits",
    ),
    RegexPreset(
        id="blank-line",
        name="Blank line",
        pattern=r"^\s*$",
        description="Empty lines or lines containing only whitespace",
        flags=RegexFlags(m=True),
    ),
]


def get_regex_presets() -> list[RegexPreset]:
    return list(REGEX_PRESETS)
