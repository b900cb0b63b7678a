"""Per-line classification engine.

A ``Classifier`` turns a ``LanguageProfile`` into an ordered table of rules.
Each rule looks at the units of a line at a cursor and either declines
(``None``) or claims a span. Rules are tried in table order and the first
claim wins; when every rule declines the unit is tagged ``NONE``.

Table order: multi-line comment, character literal, line comment, primary
keywords, secondary keywords, string, number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

import grapheme

from .profile import LanguageProfile
from .tags import HighlightTag

if TYPE_CHECKING:
    from synbuf.buffer.line import Line

COMMENT_OPEN = ("/", "*")
COMMENT_CLOSE = ("*", "/")
_ASCII_PUNCTUATION = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")
_ASCII_WHITESPACE = frozenset(" \t\n\r\x0c")
_DIGITS = frozenset("0123456789")


@dataclass(frozen=True, slots=True)
class RuleMatch:
    """Span ``[start, end)`` claimed by a rule."""

    end: int
    tag: HighlightTag
    still_open: bool = False


Units = Sequence[str]
Rule = Callable[[Units, int], Optional[RuleMatch]]


def is_separator(unit: str) -> bool:
    return unit in _ASCII_PUNCTUATION or unit in _ASCII_WHITESPACE


def _find_pair(units: Units, pair: tuple[str, str], start: int) -> Optional[int]:
    first, second = pair
    for index in range(max(start, 0), len(units) - 1):
        if units[index] == first and units[index + 1] == second:
            return index
    return None


def _starts_with(units: Units, index: int, pair: tuple[str, str]) -> bool:
    return (
        index + 1 < len(units)
        and units[index] == pair[0]
        and units[index + 1] == pair[1]
    )


def close_multiline_comment(units: Units, start: int) -> RuleMatch:
    """Consume through the first ``*/`` at or after ``start``, or to the end."""

    closing = _find_pair(units, COMMENT_CLOSE, start)
    if closing is None:
        return RuleMatch(len(units), HighlightTag.MULTILINE_COMMENT, still_open=True)
    return RuleMatch(closing + 2, HighlightTag.MULTILINE_COMMENT)


def _multiline_comment_rule(units: Units, index: int) -> Optional[RuleMatch]:
    if not _starts_with(units, index, COMMENT_OPEN):
        return None
    return close_multiline_comment(units, index + 2)


def _character_rule(units: Units, index: int) -> Optional[RuleMatch]:
    if units[index] != "'" or index + 1 >= len(units):
        return None
    closing = index + 3 if units[index + 1] == "\\" else index + 2
    if closing < len(units) and units[closing] == "'":
        return RuleMatch(closing + 1, HighlightTag.CHARACTER)
    return None


def _line_comment_rule(units: Units, index: int) -> Optional[RuleMatch]:
    if _starts_with(units, index, ("/", "/")):
        return RuleMatch(len(units), HighlightTag.COMMENT)
    return None


def _string_rule(units: Units, index: int) -> Optional[RuleMatch]:
    if units[index] != '"':
        return None
    cursor = index + 1
    while cursor < len(units):
        if units[cursor] == '"':
            return RuleMatch(cursor + 1, HighlightTag.STRING)
        cursor += 1
    return RuleMatch(len(units), HighlightTag.STRING)


def _number_rule(units: Units, index: int) -> Optional[RuleMatch]:
    if units[index] not in _DIGITS:
        return None
    if index > 0 and not is_separator(units[index - 1]):
        return None
    cursor = index + 1
    while cursor < len(units) and (units[cursor] in _DIGITS or units[cursor] == "."):
        cursor += 1
    return RuleMatch(cursor, HighlightTag.NUMBER)


def _keyword_rule(keywords: Sequence[str], tag: HighlightTag) -> Rule:
    segmented = [tuple(grapheme.graphemes(word)) for word in keywords]

    def match(units: Units, index: int) -> Optional[RuleMatch]:
        if index > 0 and not is_separator(units[index - 1]):
            return None
        for word in segmented:
            end = index + len(word)
            if end > len(units):
                continue
            if end < len(units) and not is_separator(units[end]):
                continue
            if tuple(units[index:end]) == word:
                return RuleMatch(end, tag)
        return None

    return match


def build_rules(profile: LanguageProfile) -> List[Rule]:
    rules: List[Rule] = []
    if profile.multiline_comments:
        rules.append(_multiline_comment_rule)
    if profile.characters:
        rules.append(_character_rule)
    if profile.comments:
        rules.append(_line_comment_rule)
    if profile.primary_keywords:
        rules.append(
            _keyword_rule(profile.primary_keywords, HighlightTag.PRIMARY_KEYWORD)
        )
    if profile.secondary_keywords:
        rules.append(
            _keyword_rule(profile.secondary_keywords, HighlightTag.SECONDARY_KEYWORD)
        )
    if profile.strings:
        rules.append(_string_rule)
    if profile.numbers:
        rules.append(_number_rule)
    return rules


class Classifier:
    """Scans lines with the rule table derived from one profile."""

    def __init__(self, profile: LanguageProfile) -> None:
        self.profile = profile
        self._rules = build_rules(profile)

    def scan(
        self, units: Units, start_with_comment: bool = False
    ) -> tuple[List[HighlightTag], bool]:
        """Classify ``units``; return the tags and whether a comment is still open."""

        tags: List[HighlightTag] = []
        index = 0
        still_open = False

        if start_with_comment:
            claimed = close_multiline_comment(units, 0)
            tags.extend([claimed.tag] * claimed.end)
            index = claimed.end
            still_open = claimed.still_open

        while index < len(units):
            claimed = self._first_match(units, index)
            if claimed is None:
                tags.append(HighlightTag.NONE)
                index += 1
                continue
            tags.extend([claimed.tag] * (claimed.end - index))
            index = claimed.end
            still_open = claimed.still_open

        return tags, still_open

    def classify(
        self,
        line: "Line",
        word: Optional[str] = None,
        start_with_comment: bool = False,
    ) -> bool:
        """Refresh ``line``'s tags and report whether it ends in an open comment.

        Fresh lines keep their base tags; only the search overlay is rebuilt.
        """

        if line.is_fresh:
            self.overlay_matches(line, word)
            return self._reopens(line)

        tags, still_open = self.scan(line.units, start_with_comment)
        line.set_classification(tags, still_open=still_open)
        self.overlay_matches(line, word)
        return still_open

    def overlay_matches(self, line: "Line", word: Optional[str]) -> None:
        tags = list(line.base_tags)
        if word:
            for start, end in line.iter_matches(word):
                for index in range(start, min(end, len(tags))):
                    tags[index] = HighlightTag.MATCH
        line.set_display_tags(tags)

    def _first_match(self, units: Units, index: int) -> Optional[RuleMatch]:
        for rule in self._rules:
            claimed = rule(units, index)
            if claimed is not None:
                return claimed
        return None

    @staticmethod
    def _reopens(line: "Line") -> bool:
        base = line.base_tags
        return bool(
            base
            and base[-1] is HighlightTag.MULTILINE_COMMENT
            and not line.text.endswith("*/")
        )


__all__ = [
    "Classifier",
    "RuleMatch",
    "build_rules",
    "close_multiline_comment",
    "is_separator",
]
