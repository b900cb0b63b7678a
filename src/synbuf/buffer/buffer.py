"""Buffer façade: ordered lines, cross-line edits, search and classification."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Iterable, List, Optional

from synbuf.highlight import (
    PLAIN_PROFILE,
    Classifier,
    LanguageProfile,
    ProfileRegistry,
    default_registry,
)
from synbuf.runtime import telemetry

from . import storage
from .line import Line
from .state import Position, SearchDirection


@dataclass(slots=True)
class BufferView:
    """Summary a host can show in a status line."""

    path: Optional[str]
    file_type: str
    line_count: int
    dirty: bool


class Buffer:
    """Ordered lines of one document plus the profile used to classify them.

    Edits never raise for bad positions: a row past the end is ignored,
    except that inserting at ``y == line_count`` appends one new line.
    """

    def __init__(
        self,
        lines: Iterable[Line] = (),
        *,
        path: Optional[str] = None,
        profile: Optional[LanguageProfile] = None,
        registry: Optional[ProfileRegistry] = None,
    ) -> None:
        self._lines: List[Line] = list(lines)
        self.path = path
        self.registry = registry
        self._dirty = False
        self._profile = profile or PLAIN_PROFILE
        self._classifier = Classifier(self._profile)

    @classmethod
    def from_text(
        cls, text: str, *, profile: Optional[LanguageProfile] = None
    ) -> "Buffer":
        return cls(
            (Line.from_text(line) for line in storage.split_lines(text)),
            profile=profile,
        )

    @classmethod
    def open(
        cls, path: str, *, registry: Optional[ProfileRegistry] = None
    ) -> "Buffer":
        """Load ``path``; the profile is resolved from it through ``registry``."""

        registry = registry or default_registry()
        with telemetry.span("buffer::open", component="buffer", metadata={"path": path}):
            lines = storage.read_lines(path)
        return cls(
            (Line.from_text(line) for line in lines),
            path=path,
            profile=registry.resolve(path),
            registry=registry,
        )

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def lines(self) -> tuple[Line, ...]:
        return tuple(self._lines)

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def profile(self) -> LanguageProfile:
        return self._profile

    @property
    def file_type(self) -> str:
        return self._profile.name

    def set_profile(self, profile: LanguageProfile) -> None:
        self._profile = profile
        self._classifier = Classifier(profile)
        self.invalidate_from(0)

    def line(self, index: int) -> Optional[Line]:
        if 0 <= index < len(self._lines):
            return self._lines[index]
        return None

    def text(self) -> str:
        return "\n".join(line.text for line in self._lines)

    def snapshot(self) -> BufferView:
        return BufferView(
            path=self.path,
            file_type=self.file_type,
            line_count=len(self._lines),
            dirty=self._dirty,
        )

    def insert(self, position: Position, unit: str) -> None:
        if position.y < 0 or position.y > len(self._lines):
            return
        with Transaction(self, "insert", position) as tx:
            if unit == "\n":
                self._insert_newline(position)
                changed = True
            elif position.y == len(self._lines):
                line = Line()
                changed = line.insert(0, unit)
                if changed:
                    self._lines.append(line)
            else:
                changed = self._lines[position.y].insert(position.x, unit)
            tx.commit(changed)

    def delete(self, position: Position) -> None:
        if position.y < 0 or position.y >= len(self._lines):
            return
        with Transaction(self, "delete", position) as tx:
            line = self._lines[position.y]
            if position.x == len(line) and position.y + 1 < len(self._lines):
                line.append(self._lines.pop(position.y + 1))
                changed = True
            else:
                changed = line.delete(position.x)
            tx.commit(changed)

    def find(
        self,
        query: str,
        at: Position,
        direction: SearchDirection = SearchDirection.FORWARD,
    ) -> Optional[Position]:
        """First hit of ``query`` from ``at`` in ``direction``, crossing lines.

        On each line after the first the search restarts at column 0
        (forward) or at the line's end (backward).
        """

        if not query or at.y < 0 or at.y >= len(self._lines):
            return None

        if direction is SearchDirection.FORWARD:
            rows = range(at.y, len(self._lines))
        else:
            rows = range(at.y, -1, -1)

        for y in rows:
            line = self._lines[y]
            if y == at.y:
                x = at.x
            elif direction is SearchDirection.FORWARD:
                x = 0
            else:
                x = len(line)
            hit = line.find(query, x, direction)
            if hit is not None:
                return Position(hit, y)
        return None

    def classify(
        self, word: Optional[str] = None, until: Optional[int] = None
    ) -> int:
        """Classify lines from the top through ``until + 1``.

        The multi-line comment flag is always propagated from line 0. Returns
        the number of lines that were actually rescanned.
        """

        if until is None:
            stop = len(self._lines)
        else:
            stop = min(max(until, 0) + 1, len(self._lines))

        rescanned = 0
        start_with_comment = False
        with telemetry.span(
            "buffer::classify",
            component="highlight",
            metadata={"lines": stop, "word": word or ""},
        ) as handle:
            for line in self._lines[:stop]:
                if not line.is_fresh:
                    rescanned += 1
                start_with_comment = self._classifier.classify(
                    line, word, start_with_comment
                )
            handle.add_metadata("rescanned", rescanned)
        return rescanned

    def invalidate_from(self, index: int) -> None:
        for line in self._lines[max(index, 0) :]:
            line.invalidate()

    def save(self, path: Optional[str] = None) -> bool:
        """Write the buffer to ``path`` (or the current path).

        Returns ``False`` when no path is known. A new path re-resolves the
        language profile.
        """

        target = path or self.path
        if not target:
            return False

        with telemetry.span("buffer::save", component="buffer", metadata={"path": target}):
            storage.write_lines(target, (line.text for line in self._lines))

        if target != self.path:
            self.path = target
            registry = self.registry or default_registry()
            resolved = registry.resolve(target)
            if resolved != self._profile:
                self.set_profile(resolved)
        self._dirty = False
        return True

    def _insert_newline(self, position: Position) -> None:
        if position.y == len(self._lines):
            self._lines.append(Line())
            return
        suffix = self._lines[position.y].split(position.x)
        self._lines.insert(position.y + 1, suffix)


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one edit in a telemetry span and applies its bookkeeping.

    A committed change marks the buffer dirty and invalidates from the line
    before the edit, since that line's open-comment state can change what
    follows.
    """

    def __init__(self, buffer: Buffer, label: str, position: Position) -> None:
        self.buffer = buffer
        self.label = label
        self.position = position
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"x": self.position.x, "y": self.position.y},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, changed: bool) -> None:
        if not changed:
            return
        self.buffer._dirty = True
        self.buffer.invalidate_from(self.position.y - 1)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "BufferView", "Transaction"]
