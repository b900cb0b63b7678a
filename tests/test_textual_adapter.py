from __future__ import annotations

from pathlib import Path
from typing import List

from rich.text import Text

from synbuf.adapters.textual import (
    TAG_STYLES,
    TextualBufferAdapter,
    TextualUIHooks,
    to_rich_text,
)
from synbuf.buffer import Buffer, Position, StyledRun
from synbuf.highlight import RUST_PROFILE, HighlightTag


def make_adapter(
    text: str = "", **kwargs
) -> tuple[TextualBufferAdapter, List[List[Text]], List[str]]:
    frames: List[List[Text]] = []
    statuses: List[str] = []
    hooks = TextualUIHooks(
        update_lines=lambda lines: frames.append(lines),
        update_status=lambda status: statuses.append(status),
    )
    buffer = Buffer.from_text(text, profile=RUST_PROFILE)
    adapter = TextualBufferAdapter(buffer, hooks, **kwargs)
    return adapter, frames, statuses


def type_text(adapter: TextualBufferAdapter, text: str) -> None:
    for char in text:
        adapter.handle_key(char, text=char)


def test_to_rich_text_applies_tag_styles() -> None:
    text = to_rich_text(
        [
            StyledRun("let", HighlightTag.PRIMARY_KEYWORD),
            StyledRun(" x", HighlightTag.NONE),
        ]
    )

    assert text.plain == "let x"
    assert str(text.spans[0].style) == TAG_STYLES[HighlightTag.PRIMARY_KEYWORD]
    assert set(TAG_STYLES) == set(HighlightTag)


def test_adapter_renders_on_construction() -> None:
    adapter, frames, statuses = make_adapter("fn main() {}")

    assert frames[-1][0].plain == "fn main() {}"
    assert statuses[-1].startswith("[No Name] - 1 lines | Rust | 1/1")
    assert adapter.cursor == Position(0, 0)


def test_typing_enter_and_backspace_edit_buffer() -> None:
    adapter, frames, statuses = make_adapter()

    type_text(adapter, "ab")
    adapter.handle_key("enter")
    type_text(adapter, "c")
    adapter.handle_key("backspace")
    adapter.handle_key("backspace")

    assert adapter.buffer.text() == "ab"
    assert adapter.cursor == Position(2, 0)
    assert "(modified)" in statuses[-1]
    assert [line.plain for line in frames[-1]] == ["ab"]


def test_backspace_at_origin_is_noop() -> None:
    adapter, _, _ = make_adapter("x")

    adapter.handle_key("backspace")

    assert adapter.buffer.text() == "x"
    assert adapter.buffer.dirty is False


def test_cursor_movement_clamps_to_line_length() -> None:
    adapter, _, _ = make_adapter("long line\nab")

    adapter.handle_key("end")
    assert adapter.cursor == Position(9, 0)
    adapter.handle_key("down")
    assert adapter.cursor == Position(2, 1)
    adapter.handle_key("right")
    assert adapter.cursor == Position(0, 2)
    adapter.handle_key("left")
    assert adapter.cursor == Position(2, 1)
    adapter.handle_key("home")
    assert adapter.cursor == Position(0, 1)


def test_viewport_scrolls_with_cursor() -> None:
    text = "\n".join(f"line {index}" for index in range(10))
    adapter, frames, _ = make_adapter(text, height=3, width=4)

    for _ in range(5):
        adapter.handle_key("down")

    assert adapter.row_offset == 3
    assert [line.plain for line in frames[-1]] == ["line", "line", "line"]


def test_search_jumps_and_cancel_restores_cursor() -> None:
    adapter, _, statuses = make_adapter("alpha beta\ngamma beta")

    adapter.handle_key("ctrl+f")
    type_text(adapter, "beta")
    assert statuses[-1] == "Search: beta"
    assert adapter.cursor == Position(6, 0)

    adapter.handle_key("right")
    assert adapter.cursor == Position(6, 1)
    adapter.handle_key("left")
    assert adapter.cursor == Position(6, 0)

    adapter.handle_key("escape")
    assert adapter.cursor == Position(0, 0)
    assert adapter.searching is False


def test_search_highlights_matches_until_accepted() -> None:
    adapter, frames, _ = make_adapter("let x = 1;")

    adapter.start_search()
    adapter.update_search("x")
    adapter.refresh()
    styles = {str(span.style) for span in frames[-1][0].spans}
    assert TAG_STYLES[HighlightTag.MATCH] in styles

    adapter.end_search(accept=True)
    styles = {str(span.style) for span in frames[-1][0].spans}
    assert TAG_STYLES[HighlightTag.MATCH] not in styles
    assert adapter.cursor == Position(4, 0)


def test_ctrl_s_without_path_reports_no_file_name() -> None:
    adapter, _, statuses = make_adapter("a")

    adapter.handle_key("ctrl+s")

    assert adapter.message == "No file name."
    assert statuses[-1].endswith("| No file name.")


def test_ctrl_s_writes_file(tmp_path: Path) -> None:
    path = tmp_path / "main.rs"
    path.write_text("fn\n", encoding="utf-8")
    frames: List[List[Text]] = []
    hooks = TextualUIHooks(update_lines=lambda lines: frames.append(lines))
    adapter = TextualBufferAdapter(Buffer.open(str(path)), hooks)

    adapter.handle_key("end")
    type_text(adapter, " f")
    adapter.handle_key("ctrl+s")

    assert path.read_text(encoding="utf-8") == "fn f\n"
    assert adapter.message == "File saved successfully."
    assert adapter.buffer.dirty is False


def test_ctrl_s_failure_sets_error_message(tmp_path: Path) -> None:
    adapter, _, _ = make_adapter("a")
    adapter.buffer.path = str(tmp_path / "missing" / "out.rs")

    adapter.handle_key("ctrl+s")

    assert adapter.message.startswith("Error writing file:")
    assert "out.rs" in adapter.message


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    hooks = TextualUIHooks(update_lines=lambda _: None, log=logs.append)
    adapter = TextualBufferAdapter(Buffer(), hooks)

    adapter.handle_key("a", text="a")

    assert any(line.startswith("key ->") for line in logs)


def test_unhandled_key_is_not_consumed() -> None:
    adapter, frames, _ = make_adapter("a")
    count = len(frames)

    assert adapter.handle_key("f5") is False
    assert len(frames) == count
