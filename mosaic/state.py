"""Geometry and result types shared by the mosaic pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ScaleMode(str, Enum):
    """How a tile is fitted into its placement box."""

    PAD = "pad"  # letterbox onto a transparent tile
    STRETCH = "stretch"  # fill the box, ignoring aspect ratio


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def as_tuple(self) -> Tuple[int, int]:
        return self.width, self.height

    def scaled(self, columns: int, rows: int) -> "Size":
        """Return this size multiplied by a number of columns and rows."""

        return Size(self.width * columns, self.height * rows)


@dataclass(frozen=True)
class TilePlacement:
    """Absolute placement of one input bitmap on the canvas."""

    index: int
    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.x + self.width, self.y + self.height


@dataclass(frozen=True)
class Thumbnail:
    """Encoded mosaic plus the dimensions it was rendered at."""

    data: bytes
    width: int
    height: int
    content_type: str = "image/png"

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def to_bytes(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)
