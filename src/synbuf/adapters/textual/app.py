"""Executable Textual app that hosts a synbuf Buffer."""

from __future__ import annotations

import argparse
import os
from typing import List, Optional, Sequence

try:  # pragma: no cover - imported only when the demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use synbuf.adapters.textual.app"
    ) from exc

from rich.text import Text

from synbuf.buffer import Buffer
from synbuf.highlight import default_registry
from synbuf.runtime import telemetry

from .controller import TextualBufferAdapter, TextualUIHooks

QUIT_KEYS = {"ctrl+q", "ctrl+c"}


def load_buffer(path: Optional[str]) -> Buffer:
    """Open ``path`` if it exists, otherwise start an empty buffer bound to it."""

    registry = default_registry()
    if path is None:
        return Buffer(registry=registry)
    if os.path.exists(path):
        return Buffer.open(path, registry=registry)
    return Buffer(path=path, profile=registry.resolve(path), registry=registry)


class SynbufApp(App[None]):
    """Minimal editor view: highlighted buffer plus a status line."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		padding: 0 1;
		content-align: left top;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, buffer: Buffer) -> None:
        super().__init__()
        self.buffer = buffer
        self.adapter: TextualBufferAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        self._buffer_widget = Static("", id="buffer-view")
        self._status_widget = Static("", id="status-line")
        yield self._buffer_widget
        yield self._status_widget

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_lines=self._update_lines,
            update_status=self._update_status,
        )
        height, width = self._viewport_size()
        self.adapter = TextualBufferAdapter(
            self.buffer, hooks, height=height, width=width
        )

    def on_resize(self, event: events.Resize) -> None:
        del event
        if self.adapter:
            self.adapter.resize(*self._viewport_size())

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key in QUIT_KEYS:
            return
        text = event.character if event.is_printable or event.key == "tab" else None
        if self.adapter.handle_key(event.key, text=text):
            event.stop()

    def _viewport_size(self) -> tuple[int, int]:
        # One row for the status line, two columns of padding.
        return max(self.size.height - 1, 1), max(self.size.width - 2, 1)

    def _update_lines(self, lines: List[Text]) -> None:
        if self._buffer_widget:
            self._buffer_widget.update(Text("\n").join(lines))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a file with synbuf.")
    parser.add_argument("path", nargs="?", help="File to open or create")
    parser.add_argument(
        "--log-preset",
        choices=telemetry.LOG_PRESETS,
        help="telelog preset (default: SYNBUF_LOG_PRESET or SYNBUF_* settings)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    SynbufApp(load_buffer(args.path)).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
