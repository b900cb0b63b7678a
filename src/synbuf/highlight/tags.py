"""Classification tags assigned to scan units."""

from __future__ import annotations

from enum import Enum


class HighlightTag(Enum):
    """Semantic category of one unit of a line.

    The display layer owns the mapping from tag to visual style.
    """

    NONE = "none"
    NUMBER = "number"
    MATCH = "match"
    STRING = "string"
    CHARACTER = "character"
    COMMENT = "comment"
    MULTILINE_COMMENT = "multiline_comment"
    PRIMARY_KEYWORD = "primary_keyword"
    SECONDARY_KEYWORD = "secondary_keyword"


__all__ = ["HighlightTag"]
