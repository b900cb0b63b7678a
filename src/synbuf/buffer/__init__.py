"""Lines, buffers and their persistence."""

from .buffer import Buffer, BufferView, Transaction
from .errors import BufferIOError
from .line import Freshness, Line, StyledRun
from .state import Position, SearchDirection
from .storage import read_lines, split_lines, write_lines

__all__ = [
    "Buffer",
    "BufferView",
    "Transaction",
    "BufferIOError",
    "Freshness",
    "Line",
    "StyledRun",
    "Position",
    "SearchDirection",
    "read_lines",
    "split_lines",
    "write_lines",
]
