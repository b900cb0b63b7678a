"""One editable line of text with its cached classification.

Every index in this module counts extended grapheme clusters: lengths, edit
positions, search results, render columns and tag slots all use the same
unit. The text is re-segmented after each mutation, so an inserted combining
mark that fuses with its neighbour leaves the length unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence

import grapheme

from synbuf.highlight.tags import HighlightTag

from .state import SearchDirection

TAB_RENDERING = "  "


class Freshness(Enum):
    """Whether the cached classification matches the current text.

    ``FRESH_PENDING`` lines were scanned but ended inside an open multi-line
    comment; they are rescanned on every pass so that comment boundaries
    moved on earlier lines keep propagating.
    """

    STALE = "stale"
    FRESH = "fresh"
    FRESH_PENDING = "fresh_pending"


@dataclass(frozen=True, slots=True)
class StyledRun:
    """Consecutive rendered text sharing one tag."""

    text: str
    tag: HighlightTag


def _segment(text: str) -> tuple[str, ...]:
    return tuple(grapheme.graphemes(text))


class Line:
    __slots__ = ("_text", "_units", "_base_tags", "_tags", "_state")

    def __init__(self, text: str = "") -> None:
        self._text = ""
        self._units: tuple[str, ...] = ()
        self._set_text(text)
        self._base_tags: tuple[HighlightTag, ...] = ()
        self._tags: tuple[HighlightTag, ...] = ()
        self._state = Freshness.STALE

    @classmethod
    def from_text(cls, text: str) -> "Line":
        return cls(text)

    def __len__(self) -> int:
        return len(self._units)

    def __repr__(self) -> str:
        return f"Line({self._text!r}, state={self._state.value})"

    @property
    def length(self) -> int:
        return len(self._units)

    @property
    def is_empty(self) -> bool:
        return not self._units

    @property
    def text(self) -> str:
        return self._text

    @property
    def units(self) -> tuple[str, ...]:
        return self._units

    @property
    def state(self) -> Freshness:
        return self._state

    @property
    def is_fresh(self) -> bool:
        return self._state is Freshness.FRESH

    @property
    def tags(self) -> tuple[HighlightTag, ...]:
        """Displayed tags: the base classification plus any search overlay."""

        return self._tags

    @property
    def base_tags(self) -> tuple[HighlightTag, ...]:
        return self._base_tags

    def invalidate(self) -> None:
        self._state = Freshness.STALE

    def insert(self, at: int, unit: str) -> bool:
        if not unit:
            return False
        if at >= len(self._units):
            self._set_text(self._text + unit)
        else:
            at = max(at, 0)
            self._set_text(
                "".join(self._units[:at]) + unit + "".join(self._units[at:])
            )
        self.invalidate()
        return True

    def delete(self, at: int) -> bool:
        if at < 0 or at >= len(self._units):
            return False
        self._set_text("".join(self._units[:at]) + "".join(self._units[at + 1 :]))
        self.invalidate()
        return True

    def split(self, at: int) -> "Line":
        """Keep ``[0, at)`` in this line and return ``[at, len)`` as a new one."""

        at = min(max(at, 0), len(self._units))
        suffix = Line("".join(self._units[at:]))
        self._set_text("".join(self._units[:at]))
        self._base_tags = ()
        self._tags = ()
        self.invalidate()
        return suffix

    def append(self, other: "Line") -> None:
        self._set_text(self._text + other.text)
        self.invalidate()

    def render(self, start: int, end: int) -> List[StyledRun]:
        end = min(end, len(self._units))
        start = max(min(start, end), 0)

        runs: List[StyledRun] = []
        pieces: List[str] = []
        current: Optional[HighlightTag] = None
        for index in range(start, end):
            unit = self._units[index]
            tag = self._tags[index] if index < len(self._tags) else HighlightTag.NONE
            if tag is not current:
                if pieces and current is not None:
                    runs.append(StyledRun("".join(pieces), current))
                pieces = []
                current = tag
            pieces.append(TAB_RENDERING if unit == "\t" else unit)
        if pieces and current is not None:
            runs.append(StyledRun("".join(pieces), current))
        return runs

    def find(
        self, query: str, at: int, direction: SearchDirection
    ) -> Optional[int]:
        """Return the unit index of ``query`` searching from ``at``.

        Forward searches ``[at, len)`` for the first hit, backward searches
        ``[0, at)`` for the last one. Hits that start or end inside a grapheme
        cluster are skipped.
        """

        length = len(self._units)
        if not query or at < 0 or at > length:
            return None

        if direction is SearchDirection.FORWARD:
            start, end = at, length
        else:
            start, end = 0, at

        window = self._units[start:end]
        haystack = "".join(window)
        boundaries: dict[int, int] = {}
        consumed = 0
        for index, unit in enumerate(window):
            boundaries[consumed] = start + index
            consumed += len(unit)
        boundaries[consumed] = end

        if direction is SearchDirection.FORWARD:
            offset = haystack.find(query)
            while offset >= 0 and not self._on_boundaries(boundaries, offset, query):
                offset = haystack.find(query, offset + 1)
        else:
            offset = haystack.rfind(query)
            while offset >= 0 and not self._on_boundaries(boundaries, offset, query):
                offset = haystack.rfind(query, 0, offset + len(query) - 1)
        if offset < 0:
            return None
        return boundaries[offset]

    def iter_matches(self, word: str) -> Iterator[tuple[int, int]]:
        """Yield ``(start, end)`` unit spans of non-overlapping hits of ``word``."""

        if not word:
            return
        width = grapheme.length(word)
        index = 0
        while True:
            hit = self.find(word, index, SearchDirection.FORWARD)
            if hit is None:
                return
            yield hit, hit + width
            index = hit + width

    def set_classification(
        self, base_tags: Sequence[HighlightTag], *, still_open: bool
    ) -> None:
        self._base_tags = tuple(base_tags)
        self._tags = self._base_tags
        self._state = Freshness.FRESH_PENDING if still_open else Freshness.FRESH

    def set_display_tags(self, tags: Sequence[HighlightTag]) -> None:
        self._tags = tuple(tags)

    @staticmethod
    def _on_boundaries(boundaries: dict[int, int], offset: int, query: str) -> bool:
        return offset in boundaries and offset + len(query) in boundaries

    def _set_text(self, text: str) -> None:
        self._text = text
        self._units = _segment(text)


__all__ = ["Freshness", "Line", "StyledRun", "TAB_RENDERING"]
