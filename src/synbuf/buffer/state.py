"""Positions and search direction shared by lines and buffers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class Position:
    """Zero-based grapheme column ``x`` on line ``y``.

    No range is enforced; operations given an out-of-range position degrade
    to no-ops.
    """

    x: int = 0
    y: int = 0

    def with_x(self, x: int) -> "Position":
        return Position(x, self.y)

    def with_y(self, y: int) -> "Position":
        return Position(self.x, y)


class SearchDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


__all__ = ["Position", "SearchDirection"]
