"""Reference selection, canvas sizing and per-count tile plans."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Sequence, Tuple

from PIL import Image

from .errors import NoReferenceFound, UnsupportedCount
from .state import Size, TilePlacement

logger = logging.getLogger(__name__)


MAX_TILES = 4

# count -> (index, column, row, width in cells, height in cells)
TILE_PLANS: Dict[int, Tuple[Tuple[int, int, int, int, int], ...]] = {
    2: (
        (0, 0, 0, 1, 1),
        (1, 1, 0, 1, 1),
    ),
    3: (
        (0, 0, 0, 1, 1),
        (1, 1, 0, 1, 1),
        (2, 0, 1, 2, 1),
    ),
    4: (
        (0, 0, 0, 1, 1),
        (1, 1, 0, 1, 1),
        (2, 0, 1, 1, 1),
        (3, 1, 1, 1, 1),
    ),
}


def plan_extent(plan: Sequence[Tuple[int, int, int, int, int]]) -> Tuple[int, int]:
    """(columns, rows) of reference-sized cells covered by a tile plan."""
    columns = max(column + cells_w for _, column, _, cells_w, _ in plan)
    rows = max(row + cells_h for _, _, row, _, cells_h in plan)
    return columns, rows


# count -> (columns, rows); a single image is never laid out
CANVAS_MULTIPLIERS: Dict[int, Tuple[int, int]] = {
    1: (1, 1),
    **{count: plan_extent(plan) for count, plan in TILE_PLANS.items()},
}


def check_canvas_multipliers(multipliers: Mapping[int, Tuple[int, int]]) -> None:
    """Raise ValueError unless ``multipliers`` matches the tile plans exactly."""
    if set(multipliers) != set(CANVAS_MULTIPLIERS):
        raise ValueError(
            f"canvas_multipliers must cover counts {sorted(CANVAS_MULTIPLIERS)}, got {sorted(multipliers)}"
        )
    for count, expected in CANVAS_MULTIPLIERS.items():
        if tuple(multipliers[count]) != expected:
            raise ValueError(
                f"canvas_multipliers[{count}] is {tuple(multipliers[count])}, "
                f"but the tile plan for {count} image(s) covers {expected}"
            )


def select_reference(images: Sequence[Image.Image]) -> Image.Image:
    """Return the bitmap with the most pixels.

    Ties go to the first maximal bitmap in input order.
    """
    if not images:
        raise NoReferenceFound()
    # max() keeps the first of equal keys
    return max(images, key=lambda im: im.width * im.height)


def reference_size(images: Sequence[Image.Image]) -> Size:
    reference = select_reference(images)
    return Size(reference.width, reference.height)


def size_canvas(
    count: int,
    reference: Size,
    multipliers: Mapping[int, Tuple[int, int]] = CANVAS_MULTIPLIERS,
) -> Size:
    """Total canvas size for ``count`` tiles of the reference geometry."""
    if count not in multipliers:
        raise UnsupportedCount(count)
    columns, rows = multipliers[count]
    canvas = reference.scaled(columns, rows)
    logger.debug("Canvas for %d image(s): %dx%d", count, canvas.width, canvas.height)
    return canvas


def tile_plan(count: int, reference: Size) -> Tuple[TilePlacement, ...]:
    """Resolve the tile plan for ``count`` images into pixel placements."""
    if count not in TILE_PLANS:
        raise UnsupportedCount(count, f"No tile plan for {count} image(s)")
    return tuple(
        TilePlacement(
            index=index,
            x=column * reference.width,
            y=row * reference.height,
            width=cells_w * reference.width,
            height=cells_h * reference.height,
        )
        for index, column, row, cells_w, cells_h in TILE_PLANS[count]
    )
