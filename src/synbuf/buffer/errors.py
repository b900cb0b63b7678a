"""Errors surfaced by the buffer layer."""

from __future__ import annotations

from typing import Optional


class BufferIOError(OSError):
    """Raised when loading or saving a buffer fails.

    The underlying exception is chained as ``__cause__``; its ``errno`` is
    copied when it has one.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str,
        operation: str,
        errno: Optional[int] = None,
    ) -> None:
        if errno is None:
            super().__init__(message)
        else:
            super().__init__(errno, message)
        self.path = path
        self.operation = operation

    def __str__(self) -> str:
        return f"{self.operation} {self.path!r}: {self.args[-1]}"


__all__ = ["BufferIOError"]
