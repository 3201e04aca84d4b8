"""Tests for devtoolshub.regex_engine — building, matching, replacing and explaining patterns."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from devtoolshub import regex_engine
from devtoolshub.regex_engine import (
    EMPTY_PATTERN_ERROR,
    INPUT_TOO_LONG_ERROR,
    REGEX_PRESETS,
    TIMEOUT_ERROR,
    RegexFlags,
    TokenType,
    build_pattern,
    escape_for_regex,
    explain_pattern,
    find_all_matches,
    get_match_results,
    get_regex_presets,
    replace_all,
    tokenize_pattern,
    translate_pattern,
    unescape_regex,
)


def _compile(pattern: str, **flags: bool):
    built = build_pattern(pattern, RegexFlags(**flags))
    assert built.ok, built.error
    return built.pattern


# -----------------------------------------------------------------------
# build_pattern
# -----------------------------------------------------------------------


class TestBuildPattern:
    """Compilation and flag handling."""

    def test_empty_pattern_is_rejected(self):
        result = build_pattern("")
        assert not result.ok
        assert result.error == EMPTY_PATTERN_ERROR
        assert result.pattern is None

    def test_syntax_error_reports_engine_message(self):
        result = build_pattern("(abc")
        assert not result.ok
        assert result.error

    def test_flag_string_follows_canonical_order(self):
        assert RegexFlags(y=True, g=True, i=True).as_string() == "giy"

    def test_compiled_pattern_keeps_source_and_flags(self):
        compiled = _compile("a+", i=True)
        assert compiled.source == "a+"
        assert compiled.flag_string == "i"

    def test_test_pattern_finds_first_match(self):
        compiled = _compile(r"\d")
        assert regex_engine.test_pattern(compiled, "abc1")
        assert not regex_engine.test_pattern(compiled, "abc")

    def test_sticky_test_only_matches_at_start(self):
        compiled = _compile(r"\d", y=True)
        assert not regex_engine.test_pattern(compiled, "a1")
        assert regex_engine.test_pattern(compiled, "1a")


# -----------------------------------------------------------------------
# find_all_matches
# -----------------------------------------------------------------------


class TestFindAllMatches:
    """Global enumeration semantics."""

    def test_lists_every_match_with_index(self):
        matches = find_all_matches(_compile(r"\d+"), "a1b22c333")
        assert [m.match for m in matches] == ["1", "22", "333"]
        assert [m.index for m in matches] == [1, 3, 6]

    def test_scans_globally_without_g_flag(self):
        matches = find_all_matches(_compile("a"), "aaa")
        assert len(matches) == 3

    def test_zero_length_matches_terminate(self):
        matches = find_all_matches(_compile("x*"), "abc")
        assert [m.index for m in matches] == [0, 1, 2, 3]
        assert all(m.match == "" for m in matches)

    def test_multiline_anchor(self):
        matches = find_all_matches(_compile("^", m=True), "a\nb")
        assert [m.index for m in matches] == [0, 2]

    def test_sticky_stops_at_first_gap(self):
        matches = find_all_matches(_compile(r"\d", y=True), "12a3")
        assert [m.match for m in matches] == ["1", "2"]

    def test_named_and_numbered_groups(self):
        matches = find_all_matches(_compile(r"(?<year>\d{4})-(\d{2})"), "on 2024-05")
        assert matches[0].groups == {"year": "2024", "0": "2024", "1": "05"}

    def test_non_participating_groups_are_omitted(self):
        matches = find_all_matches(_compile("a(b)?c"), "ac")
        assert matches[0].groups == {}

    def test_ignore_case(self):
        matches = find_all_matches(_compile("abc", i=True), "ABC abc")
        assert len(matches) == 2

    def test_dotall(self):
        assert find_all_matches(_compile("a.b"), "a\nb") == []
        assert len(find_all_matches(_compile("a.b", s=True), "a\nb")) == 1

    def test_shorthand_classes_are_ascii_without_unicode_flag(self):
        arabic_three = "٣"
        assert find_all_matches(_compile(r"\d"), arabic_three) == []
        assert len(find_all_matches(_compile(r"\d", u=True), arabic_three)) == 1

    def test_match_end_and_input(self):
        match = find_all_matches(_compile("bc"), "abcd")[0]
        assert match.end == 3
        assert match.input == "abcd"


# -----------------------------------------------------------------------
# translate_pattern
# -----------------------------------------------------------------------


class TestTranslatePattern:
    """Browser syntax and semantics carried over to the engine."""

    @pytest.mark.parametrize(
        "pattern, flags, expected",
        [
            (r"\d", {}, "[0-9]"),
            (r"\d", {"u": True}, r"\d"),
            ("a$", {}, r"a\Z"),
            ("a$", {"m": True}, "a$"),
            (r"\$", {}, r"\$"),
            ("[$]", {}, "[$]"),
            (r"(?<x>a)\k<x>", {}, "(?<x>a)(?P=x)"),
            (r"[\d_]", {}, "[0-9_]"),
            (r"[\b]", {}, r"[\b]"),
            ("[]", {}, "(?!)"),
            ("[^]", {}, r"[\s\S]"),
            ("[abc", {}, "[abc"),
        ],
    )
    def test_rewrites(self, pattern: str, flags: dict, expected: str):
        assert translate_pattern(pattern, RegexFlags(**flags)) == expected

    def test_source_is_kept_untranslated(self):
        assert _compile("a$").source == "a$"

    def test_case_folding_is_unicode(self):
        assert len(find_all_matches(_compile("é", i=True), "É")) == 1

    def test_dollar_ignores_trailing_newline(self):
        assert find_all_matches(_compile("a$"), "a\n") == []
        assert len(find_all_matches(_compile("a$"), "a")) == 1
        assert len(find_all_matches(_compile("a$", m=True), "a\n")) == 1

    def test_named_backreference(self):
        matches = find_all_matches(_compile(r"(?<x>a)\k<x>"), "aa")
        assert [m.match for m in matches] == ["aa"]

    def test_word_class_is_ascii_without_unicode_flag(self):
        assert [m.match for m in find_all_matches(_compile(r"\w+"), "café")] == ["caf"]
        assert [m.match for m in find_all_matches(_compile(r"\w+", u=True), "café")] == ["café"]

    def test_word_boundary_is_ascii_without_unicode_flag(self):
        assert [m.index for m in find_all_matches(_compile(r"\bb"), "éb")] == [1]
        assert find_all_matches(_compile(r"\bb", u=True), "éb") == []

    def test_whitespace_is_unicode(self):
        assert len(find_all_matches(_compile(r"\s"), "\u00a0")) == 1

    def test_negated_shorthand_inside_class(self):
        assert [m.match for m in find_all_matches(_compile(r"[\Wa]+"), "a-é_")] == ["a-é"]

    def test_negated_class_with_negated_shorthand(self):
        assert [m.match for m in find_all_matches(_compile(r"[^\W\d]"), "a1_é")] == ["a", "_"]
        assert [m.match for m in find_all_matches(_compile(r"[^\d\s]"), "1 é")] == ["é"]

    def test_empty_classes(self):
        assert find_all_matches(_compile("x[]"), "x]") == []
        assert len(find_all_matches(_compile("a[^]b"), "a\nb")) == 1


class TestGetMatchResults:
    """Wrapper with input cap, compile errors and timeouts as values."""

    def test_returns_matches(self):
        result = get_match_results(r"\w+", RegexFlags(), "hello world")
        assert result.ok
        assert [m.match for m in result.matches] == ["hello", "world"]

    def test_rejects_oversized_subject_before_compiling(self):
        result = get_match_results("(", RegexFlags(), "123456", max_input_length=5)
        assert result.error == INPUT_TOO_LONG_ERROR

    def test_compile_error_is_a_value(self):
        result = get_match_results("[a-", None, "abc")
        assert not result.ok
        assert result.matches == []

    def test_timeout_is_reported(self):
        with patch.object(regex_engine, "find_all_matches", side_effect=TimeoutError):
            result = get_match_results("a", RegexFlags(), "aaa", timeout=0.1)
        assert not result.ok
        assert result.error == TIMEOUT_ERROR


# -----------------------------------------------------------------------
# replace_all
# -----------------------------------------------------------------------


class TestReplaceAll:
    """Template expansion and replacement counting."""

    def test_numbered_groups(self):
        result = replace_all(r"(\w+)@(\w+)", None, "me@host", "$2 at $1")
        assert result.result == "host at me"
        assert result.replace_count == 1

    def test_whole_match(self):
        assert replace_all("b", None, "abc", "[$&]").result == "a[b]c"

    def test_prefix_and_suffix(self):
        assert replace_all("b", None, "abc", "<$`|$'>").result == "a<a|c>c"

    def test_undefined_group_number_stays_literal(self):
        assert replace_all("(a)(b)", None, "ab", "$3").result == "$3"

    def test_named_group(self):
        assert replace_all(r"(?<x>\d)", None, "a1", "<$<x>>").result == "a<1>"

    def test_unknown_name_stays_literal(self):
        assert replace_all(r"(?<x>\d)", None, "a1", "$<nope>").result == "a$<nope>"

    def test_non_participating_group_is_empty(self):
        assert replace_all("a(b)?", None, "a", "[$1]").result == "[]"

    def test_double_dollar_is_not_special(self):
        assert replace_all("a", None, "a", "$$").result == "$$"

    def test_counts_every_occurrence(self):
        result = replace_all("o", None, "foo boo", "0")
        assert result.result == "f00 b00"
        assert result.replace_count == 4

    def test_zero_length_matches(self):
        result = replace_all("x*", None, "ab", "-")
        assert result.result == "-a-b-"
        assert result.replace_count == 3

    def test_no_match_returns_subject(self):
        result = replace_all("z", None, "abc", "y")
        assert result.result == "abc"
        assert result.replace_count == 0

    def test_invalid_pattern(self):
        result = replace_all("(", None, "abc", "y")
        assert not result.ok


class TestEscape:
    def test_escape_metacharacters(self):
        assert escape_for_regex("a.b*c") == r"a\.b\*c"
        assert escape_for_regex("(x)[y]{z}") == r"\(x\)\[y\]\{z\}"

    def test_escaped_text_matches_literally(self):
        text = "1+1=2? $5 ^_^ |a|"
        matches = find_all_matches(_compile(escape_for_regex(text)), f"say {text}")
        assert [m.match for m in matches] == [text]

    def test_unescape_drops_one_level(self):
        assert unescape_regex(r"a\.b\\c") == "a.b\\c"


# -----------------------------------------------------------------------
# explain_pattern
# -----------------------------------------------------------------------


EXPLAIN_CORPUS = [
    r"^\d{3}-\d{4}$",
    r"(?:ab)+?",
    r"[^a-z\]]+",
    r"(?<name>\w+)\s(?=x)",
    r"a|b|c",
    r"(?<=\$)\d+(?:\.\d{2})?",
    r"\bfoo.*?bar\b",
    r"[一-鿿]+",
    r"(a(b[)]c)d)e",
]


class TestExplainPattern:
    """Lexical explanation of patterns."""

    @pytest.mark.parametrize("pattern", EXPLAIN_CORPUS)
    def test_raw_parts_round_trip(self, pattern: str):
        result = explain_pattern(pattern)
        assert result.ok, result.error
        assert "".join(part.raw for part in result.parts) == pattern

    def test_token_types(self):
        parts = explain_pattern(r"^a.\d+?$").parts
        assert [p.type for p in parts] == [
            TokenType.ANCHOR,
            TokenType.LITERAL,
            TokenType.ANY,
            TokenType.ESCAPE,
            TokenType.QUANTIFIER,
            TokenType.QUANTIFIER,
            TokenType.ANCHOR,
        ]
        assert parts[4].description == "1 or more times"
        assert parts[5].description.startswith("lazy")

    def test_escape_descriptions(self):
        parts = explain_pattern(r"\d\w\s").parts
        assert [p.description for p in parts] == [
            "digit [0-9]",
            "word character [a-zA-Z0-9_]",
            "whitespace",
        ]

    def test_escaped_metacharacter_is_literal(self):
        part = explain_pattern(r"\.").parts[0]
        assert part.type is TokenType.LITERAL
        assert part.raw == r"\."

    def test_group_descriptions(self):
        assert explain_pattern("(?<word>x)").parts[0].description == "named capturing group 'word'"
        assert explain_pattern("(?<=a)b").parts[0].description == "positive lookbehind"
        assert explain_pattern("(?!a)b").parts[0].description == "negative lookahead"
        assert explain_pattern("(?:a)").parts[0].description == "non-capturing group"
        assert explain_pattern("(a)").parts[0].description == "capturing group"

    def test_group_is_a_single_part(self):
        parts = explain_pattern("(a|b)+").parts
        assert [p.raw for p in parts] == ["(a|b)", "+"]

    def test_character_classes(self):
        parts = explain_pattern("[abc][^0-9]").parts
        assert [p.description for p in parts] == ["character class", "negated character class"]

    def test_repeat_range(self):
        part = explain_pattern("a{2,4}").parts[1]
        assert part.type is TokenType.QUANTIFIER
        assert part.raw == "{2,4}"

    def test_invalid_pattern_is_not_explained(self):
        result = explain_pattern("(")
        assert not result.ok
        assert result.parts == []

    def test_trailing_backslash(self):
        parts = tokenize_pattern("a\\")
        assert parts[-1].type is TokenType.ESCAPE
        assert parts[-1].raw == "\\"


class TestPresets:
    def test_catalogue_is_copied(self):
        presets = get_regex_presets()
        presets.clear()
        assert len(REGEX_PRESETS) == 8

    @pytest.mark.parametrize("preset", REGEX_PRESETS, ids=lambda p: p.id)
    def test_every_preset_compiles(self, preset):
        assert build_pattern(preset.pattern, preset.flags).ok

    def test_blank_line_preset_is_multiline(self):
        preset = next(p for p in REGEX_PRESETS if p.id == "blank-line")
        assert preset.flags.as_string() == "m"

    def test_cjk_preset_matches_chinese(self):
        preset = next(p for p in REGEX_PRESETS if p.id == "chinese")
        matches = find_all_matches(_compile(preset.pattern), "hello 中文 world")
        assert [m.match for m in matches] == ["中文"]
