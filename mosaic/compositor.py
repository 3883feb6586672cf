"""Layout compositor shared by the foreground and backdrop passes."""

from __future__ import annotations

import logging
from typing import Sequence

from PIL import Image

from .errors import EmptyInput, NoReferenceFound, ReferenceSelectionFailed, TooManyTiles
from .layout import MAX_TILES, reference_size, tile_plan
from .scaling import scale_tiles
from .state import ScaleMode, Size

logger = logging.getLogger(__name__)


def compose(
    images: Sequence[Image.Image],
    canvas: Size,
    mode: ScaleMode,
    workers: int = 1,
) -> Image.Image:
    """Arrange ``images`` on a transparent canvas following the tile plan.

    A single image is returned as an RGBA copy at its own size; it is never
    resampled and ``canvas`` is ignored.
    """
    count = len(images)
    if count == 0:
        raise EmptyInput()
    if count > MAX_TILES:
        raise TooManyTiles(count)
    if count == 1:
        return images[0].convert("RGBA")

    try:
        reference = reference_size(images)
    except NoReferenceFound as exc:
        raise ReferenceSelectionFailed(str(exc)) from exc

    placements = tile_plan(count, reference)
    tiles = scale_tiles(
        [(images[p.index], p.width, p.height) for p in placements],
        mode,
        workers=workers,
    )

    composite = Image.new("RGBA", canvas.as_tuple(), (0, 0, 0, 0))
    for placement, tile in zip(placements, tiles):
        logger.debug("Overlaying %s tile %d at x: %d, y: %d", ScaleMode(mode).value, placement.index, placement.x, placement.y)
        composite.alpha_composite(tile, dest=(placement.x, placement.y))
    return composite
