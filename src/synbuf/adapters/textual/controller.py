"""Host-side controller that turns a Buffer into styled Textual output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from rich.text import Text

from synbuf.buffer import Buffer, BufferIOError, Position, SearchDirection, StyledRun
from synbuf.highlight import HighlightTag
from synbuf.runtime import telemetry

TAG_STYLES: Dict[HighlightTag, str] = {
    HighlightTag.NONE: "rgb(255,255,255)",
    HighlightTag.NUMBER: "rgb(220,163,163)",
    HighlightTag.MATCH: "rgb(38,139,210)",
    HighlightTag.STRING: "rgb(211,54,130)",
    HighlightTag.CHARACTER: "rgb(108,113,196)",
    HighlightTag.COMMENT: "rgb(133,153,0)",
    HighlightTag.MULTILINE_COMMENT: "rgb(133,153,0)",
    HighlightTag.PRIMARY_KEYWORD: "rgb(181,137,0)",
    HighlightTag.SECONDARY_KEYWORD: "rgb(42,161,152)",
}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def to_rich_text(runs: Iterable[StyledRun]) -> Text:
    text = Text()
    for run in runs:
        text.append(run.text, style=TAG_STYLES.get(run.tag, ""))
    return text


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_lines: Callable[[List[Text]], None]
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


@dataclass(slots=True)
class SearchSession:
    origin: Position
    query: str = ""


class TextualBufferAdapter:
    """Cursor, viewport and incremental search on top of a Buffer.

    Key names follow Textual (``"left"``, ``"ctrl+s"``, ...). Printable input
    arrives as ``text``.
    """

    def __init__(
        self,
        buffer: Buffer,
        hooks: TextualUIHooks,
        *,
        height: int = 24,
        width: int = 80,
    ) -> None:
        self.buffer = buffer
        self.hooks = hooks
        self.height = max(height, 1)
        self.width = max(width, 1)
        self.cursor = Position(0, 0)
        self.row_offset = 0
        self.col_offset = 0
        self.message = ""
        self._search: Optional[SearchSession] = None
        self.refresh()

    @property
    def searching(self) -> bool:
        return self._search is not None

    @property
    def search_word(self) -> Optional[str]:
        if self._search is None or not self._search.query:
            return None
        return self._search.query

    def resize(self, height: int, width: int) -> None:
        self.height = max(height, 1)
        self.width = max(width, 1)
        self.refresh()

    def refresh(self) -> List[Text]:
        self._scroll()
        self.buffer.classify(
            word=self.search_word, until=self.row_offset + self.height
        )
        rendered: List[Text] = []
        for y in range(self.row_offset, self.row_offset + self.height):
            line = self.buffer.line(y)
            if line is None:
                break
            runs = line.render(self.col_offset, self.col_offset + self.width)
            rendered.append(to_rich_text(runs))
        self.hooks.update_lines(rendered)
        self.hooks.update_status(self.status_text())
        return rendered

    def status_text(self) -> str:
        if self._search is not None:
            return f"Search: {self._search.query}"
        view = self.buffer.snapshot()
        name = view.path or "[No Name]"
        modified = " (modified)" if view.dirty else ""
        status = (
            f"{name} - {view.line_count} lines{modified} | {view.file_type}"
            f" | {self.cursor.y + 1}/{view.line_count}"
        )
        if self.message:
            return f"{status} | {self.message}"
        return status

    def handle_key(self, key: str, *, text: Optional[str] = None) -> bool:
        """Apply one key press; return whether it was consumed."""

        self.hooks.log(f"key -> key={key!r} text={text!r} cursor={self.cursor}")
        if self._search is not None:
            consumed = self._handle_search_key(key, text)
        else:
            consumed = self._handle_edit_key(key, text)
        if consumed:
            self.refresh()
        return consumed

    def start_search(self) -> None:
        self._search = SearchSession(origin=self.cursor)

    def update_search(self, query: str) -> Optional[Position]:
        if self._search is None:
            self.start_search()
        assert self._search is not None
        self._search.query = query
        if not query:
            return None
        return self._jump(self.buffer.find(query, self.cursor, SearchDirection.FORWARD))

    def search_next(self) -> Optional[Position]:
        if not self.search_word:
            return None
        step = self.cursor.with_x(self.cursor.x + 1)
        return self._jump(
            self.buffer.find(self.search_word, step, SearchDirection.FORWARD)
        )

    def search_previous(self) -> Optional[Position]:
        if not self.search_word:
            return None
        return self._jump(
            self.buffer.find(self.search_word, self.cursor, SearchDirection.BACKWARD)
        )

    def end_search(self, *, accept: bool = True) -> None:
        if self._search is not None and not accept:
            self.cursor = self._search.origin
        self._search = None
        self.refresh()

    def _jump(self, hit: Optional[Position]) -> Optional[Position]:
        if hit is not None:
            self.cursor = hit
        return hit

    def _handle_search_key(self, key: str, text: Optional[str]) -> bool:
        assert self._search is not None
        if key == "enter":
            self.end_search(accept=True)
        elif key == "escape":
            self.end_search(accept=False)
        elif key in {"right", "down"}:
            self.search_next()
        elif key in {"left", "up"}:
            self.search_previous()
        elif key == "backspace":
            self.update_search(self._search.query[:-1])
        elif text and text.isprintable():
            self.update_search(self._search.query + text)
        else:
            return False
        return True

    def _handle_edit_key(self, key: str, text: Optional[str]) -> bool:
        self.message = ""
        if key == "ctrl+s":
            self._save()
        elif key == "ctrl+f":
            self.start_search()
        elif key == "enter":
            self.buffer.insert(self.cursor, "\n")
            self._move_right()
        elif key == "backspace":
            if self.cursor.x > 0 or self.cursor.y > 0:
                self._move_left()
                self.buffer.delete(self.cursor)
        elif key == "delete":
            self.buffer.delete(self.cursor)
        elif key in {"up", "down", "left", "right", "home", "end", "pageup", "pagedown"}:
            self._move(key)
        elif text and (text == "\t" or text.isprintable()):
            self.buffer.insert(self.cursor, text)
            self._move_right()
        else:
            return False
        return True

    def _save(self) -> None:
        try:
            saved = self.buffer.save()
        except BufferIOError as exc:
            telemetry.record_event(
                "adapter.save_failed",
                level="error",
                data={"path": exc.path, "reason": str(exc)},
            )
            self.message = f"Error writing file: {exc}"
            return
        self.message = "File saved successfully." if saved else "No file name."

    def _line_length(self, y: int) -> int:
        line = self.buffer.line(y)
        return len(line) if line is not None else 0

    def _move(self, key: str) -> None:
        x, y = self.cursor.x, self.cursor.y
        last_row = self.buffer.line_count
        if key == "up":
            y = max(y - 1, 0)
        elif key == "down":
            y = min(y + 1, last_row)
        elif key == "left":
            self._move_left()
            return
        elif key == "right":
            self._move_right()
            return
        elif key == "home":
            x = 0
        elif key == "end":
            x = self._line_length(y)
        elif key == "pageup":
            y = max(y - self.height, 0)
        elif key == "pagedown":
            y = min(y + self.height, last_row)
        self.cursor = Position(min(x, self._line_length(y)), y)

    def _move_left(self) -> None:
        x, y = self.cursor.x, self.cursor.y
        if x > 0:
            self.cursor = self.cursor.with_x(x - 1)
        elif y > 0:
            self.cursor = Position(self._line_length(y - 1), y - 1)

    def _move_right(self) -> None:
        x, y = self.cursor.x, self.cursor.y
        if x < self._line_length(y):
            self.cursor = self.cursor.with_x(x + 1)
        elif y < self.buffer.line_count:
            self.cursor = Position(0, y + 1)

    def _scroll(self) -> None:
        x, y = self.cursor.x, self.cursor.y
        if y < self.row_offset:
            self.row_offset = y
        elif y >= self.row_offset + self.height:
            self.row_offset = y - self.height + 1
        if x < self.col_offset:
            self.col_offset = x
        elif x >= self.col_offset + self.width:
            self.col_offset = x - self.width + 1


__all__ = [
    "TAG_STYLES",
    "SearchSession",
    "TextualBufferAdapter",
    "TextualUIHooks",
    "to_rich_text",
]
