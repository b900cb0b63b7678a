from synbuf.buffer import Freshness, Line
from synbuf.highlight import (
    PLAIN_PROFILE,
    RUST_PROFILE,
    Classifier,
    HighlightTag,
    LanguageProfile,
    build_rules,
    is_separator,
)

NONE = HighlightTag.NONE
ML = HighlightTag.MULTILINE_COMMENT


def make_profile(**overrides: object) -> LanguageProfile:
    fields: dict[str, object] = {
        "name": "Test",
        "numbers": True,
        "strings": True,
        "characters": True,
        "comments": True,
        "multiline_comments": True,
        "primary_keywords": ("let",),
        "secondary_keywords": ("u32",),
    }
    fields.update(overrides)
    return LanguageProfile(**fields)  # type: ignore[arg-type]


def scan(text: str, *, start_with_comment: bool = False, **overrides: object):
    classifier = Classifier(make_profile(**overrides))
    return classifier.scan(Line.from_text(text).units, start_with_comment)


def test_open_multiline_comment_tags_whole_line_and_stays_open() -> None:
    tags, still_open = scan("/* start")

    assert tags == [ML] * 8
    assert still_open is True


def test_carried_in_comment_closes_then_normal_rules_resume() -> None:
    tags, still_open = scan("middle */ let y = 2;", start_with_comment=True)

    expected = [ML] * 9 + [NONE] + [HighlightTag.PRIMARY_KEYWORD] * 3
    expected += [NONE] * 5 + [HighlightTag.NUMBER, NONE]
    assert tags == expected
    assert still_open is False


def test_carried_in_comment_without_close_stays_open() -> None:
    tags, still_open = scan("still inside", start_with_comment=True)

    assert tags == [ML] * 12
    assert still_open is True


def test_comment_opened_and_closed_on_one_line() -> None:
    tags, still_open = scan("a /* b */ c")

    assert tags == [NONE, NONE] + [ML] * 7 + [NONE, NONE]
    assert still_open is False


def test_comment_close_is_searched_after_the_opener() -> None:
    tags, still_open = scan("/*/")

    assert tags == [ML] * 3
    assert still_open is True


def test_keyword_requires_separators_on_both_sides() -> None:
    letter, _ = scan("letter = 1;")
    plain_let, _ = scan("let x = 1;")
    glued, _ = scan("xlet")

    assert HighlightTag.PRIMARY_KEYWORD not in letter
    assert plain_let[:4] == [HighlightTag.PRIMARY_KEYWORD] * 3 + [NONE]
    assert HighlightTag.PRIMARY_KEYWORD not in glued


def test_secondary_keyword_between_punctuation() -> None:
    tags, _ = scan("x: u32,")

    assert tags[3:6] == [HighlightTag.SECONDARY_KEYWORD] * 3
    assert tags[6] is NONE


def test_number_needs_separator_before_it() -> None:
    glued, _ = scan("a5")
    spaced, _ = scan(" 5")
    decimal, _ = scan("1.25")

    assert glued == [NONE, NONE]
    assert spaced == [NONE, HighlightTag.NUMBER]
    assert decimal == [HighlightTag.NUMBER] * 4


def test_character_literals_plain_and_escaped() -> None:
    plain, _ = scan("'a'")
    escaped, _ = scan("'\\n'")
    too_long, _ = scan("'ab'")

    assert plain == [HighlightTag.CHARACTER] * 3
    assert escaped == [HighlightTag.CHARACTER] * 4
    assert too_long == [NONE] * 4


def test_line_comment_runs_to_end_of_line() -> None:
    tags, still_open = scan('x // "y" /* z')

    assert tags == [NONE, NONE] + [HighlightTag.COMMENT] * 11
    assert still_open is False


def test_strings_terminated_and_unterminated() -> None:
    closed, _ = scan('a "b c" d')
    open_ended, _ = scan('"abc')

    assert closed == [NONE, NONE] + [HighlightTag.STRING] * 5 + [NONE, NONE]
    assert open_ended == [HighlightTag.STRING] * 4


def test_string_wins_over_keyword_inside_quotes() -> None:
    tags, _ = scan('"let"')

    assert tags == [HighlightTag.STRING] * 5


def test_disabled_rules_leave_everything_untagged() -> None:
    classifier = Classifier(PLAIN_PROFILE)

    tags, still_open = classifier.scan(Line.from_text('"a" 1 // x /*').units)

    assert set(tags) == {NONE}
    assert still_open is False


def test_build_rules_only_includes_enabled_rules() -> None:
    assert len(build_rules(RUST_PROFILE)) == 7
    assert build_rules(PLAIN_PROFILE) == []
    assert len(build_rules(make_profile(numbers=False, secondary_keywords=()))) == 5


def test_separator_covers_ascii_punctuation_and_whitespace_only() -> None:
    assert is_separator("_")
    assert is_separator(" ")
    assert is_separator("\t")
    assert not is_separator("a")
    assert not is_separator("é")


def test_search_overlay_replaces_base_tags() -> None:
    classifier = Classifier(make_profile())
    line = Line.from_text("let let")

    classifier.classify(line, word="t l")

    assert line.tags[2:5] == (HighlightTag.MATCH,) * 3
    assert line.base_tags[:3] == (HighlightTag.PRIMARY_KEYWORD,) * 3
    assert line.tags[:2] == (HighlightTag.PRIMARY_KEYWORD,) * 2


def test_fresh_line_is_not_rescanned_but_overlay_follows_word() -> None:
    classifier = Classifier(make_profile())
    line = Line.from_text("let x = 1;")

    assert classifier.classify(line) is False
    base = line.base_tags
    assert line.state is Freshness.FRESH

    assert classifier.classify(line, word="x") is False
    assert line.base_tags is base
    assert line.tags[4] is HighlightTag.MATCH

    classifier.classify(line)
    assert line.tags == base


def test_pending_line_is_rescanned_each_pass() -> None:
    classifier = Classifier(make_profile())
    line = Line.from_text("/* open")

    assert classifier.classify(line) is True
    first = line.base_tags
    assert line.state is Freshness.FRESH_PENDING

    assert classifier.classify(line) is True
    assert line.base_tags is not first
    assert line.base_tags == first


def test_fresh_line_ending_in_unclosed_comment_reports_open() -> None:
    classifier = Classifier(make_profile())
    line = Line.from_text("/* x")
    line.set_classification([ML] * 4, still_open=False)

    assert classifier.classify(line) is True


def test_fresh_line_ending_with_comment_close_reports_closed() -> None:
    classifier = Classifier(make_profile())
    line = Line.from_text("/**/")
    line.set_classification([ML] * 4, still_open=False)

    assert classifier.classify(line) is False
