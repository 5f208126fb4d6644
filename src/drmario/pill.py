"""Pill definition and basic behaviour.

A pill is the two-cell piece under player control.  It is described by the
column/row of its pivot cell, one of four orientations and the colours of
its two halves.  The second half's position is looked up in
``ROTATION_OFFSETS`` so that rotating never makes the pill drift sideways.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple

from .board import Color

# Pivot of a freshly spawned pill.
SPAWN_X = 3
SPAWN_Y = 1

# (dx, dy) of each half relative to the pivot.  The first entry belongs to
# ``colors[0]`` and the second to ``colors[1]``.
ROTATION_OFFSETS: Tuple[Tuple[Tuple[int, int], Tuple[int, int]], ...] = (
    ((0, 0), (1, 0)),  # horizontal
    ((0, 0), (0, -1)),  # vertical
    ((1, 0), (0, 0)),  # horizontal, flipped
    ((0, -1), (0, 0)),  # vertical, flipped
)


class Segment(NamedTuple):
    """Absolute position and colour of one pill half."""

    x: int
    y: int
    color: Color


@dataclass
class Pill:
    """Active falling pill."""

    colors: Tuple[Color, Color]
    x: int = SPAWN_X
    y: int = SPAWN_Y
    rotation: int = 0

    @property
    def position(self) -> Tuple[int, int]:
        """Pivot as ``(x, y)``."""

        return self.x, self.y

    def segments(
        self,
        x: Optional[int] = None,
        y: Optional[int] = None,
        rotation: Optional[int] = None,
    ) -> List[Segment]:
        """Return both halves for the current or a hypothetical placement."""

        x = self.x if x is None else x
        y = self.y if y is None else y
        rotation = self.rotation if rotation is None else rotation
        offsets = ROTATION_OFFSETS[rotation % len(ROTATION_OFFSETS)]
        return [
            Segment(x + dx, y + dy, color)
            for (dx, dy), color in zip(offsets, self.colors)
        ]

    def move(self, dx: int, dy: int) -> None:
        """Shift the pivot by ``dx`` columns and ``dy`` rows."""

        self.x += dx
        self.y += dy

    def place(self, x: int, y: int, rotation: int) -> None:
        """Commit a complete placement, e.g. one chosen by a kick."""

        self.x = x
        self.y = y
        self.rotation = rotation % len(ROTATION_OFFSETS)
