"""Textual host adapter for synbuf buffers."""

from .controller import (
    TAG_STYLES,
    SearchSession,
    TextualBufferAdapter,
    TextualUIHooks,
    to_rich_text,
)

__all__ = [
    "TAG_STYLES",
    "SearchSession",
    "TextualBufferAdapter",
    "TextualUIHooks",
    "to_rich_text",
]
