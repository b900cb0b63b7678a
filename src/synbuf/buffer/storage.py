"""Flat newline-joined text persistence for buffers.

Line terminators are not round-tripped: ``\\r\\n`` input is read as plain
lines and every line is written back followed by a single ``\\n``.
"""

from __future__ import annotations

from typing import Iterable, List

from synbuf.runtime import telemetry

from .errors import BufferIOError


def split_lines(text: str) -> List[str]:
    """Split on ``\\n``; a trailing terminator does not start a new line."""

    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_lines(path: str) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise BufferIOError(
            exc.strerror or str(exc), path=path, operation="load", errno=exc.errno
        ) from exc
    except UnicodeDecodeError as exc:
        raise BufferIOError(
            f"not valid UTF-8: {exc.reason}", path=path, operation="load"
        ) from exc

    lines = split_lines(text)
    telemetry.record_event(
        "buffer.load", level="debug", data={"path": path, "lines": len(lines)}
    )
    return lines


def write_lines(path: str, lines: Iterable[str]) -> int:
    """Write each line followed by ``\\n``; return the number of lines written."""

    count = 0
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as handle:
            for line in lines:
                handle.write(line)
                handle.write("\n")
                count += 1
    except OSError as exc:
        raise BufferIOError(
            exc.strerror or str(exc), path=path, operation="save", errno=exc.errno
        ) from exc

    telemetry.record_event(
        "buffer.save", level="debug", data={"path": path, "lines": count}
    )
    return count


__all__ = ["read_lines", "split_lines", "write_lines"]
