"""Mosaic pipeline: reference geometry, two compositing passes, blur, encode."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence, Tuple

from PIL import Image

from .background import blur_backdrop
from .compositor import compose
from .config import MosaicConfig
from .errors import EmptyInput, MosaicError, TooManyTiles
from .layout import MAX_TILES, reference_size, size_canvas
from .state import ScaleMode, Size, Thumbnail
from .thumbnail import finalize
from .utils.timing import StepTimer

logger = logging.getLogger(__name__)


class MosaicEngine:
    """Renders 1-4 decoded images into one blurred-backdrop mosaic.

    The engine is synchronous and CPU bound. It keeps no per-request state,
    so one instance can serve concurrent callers.
    """

    def __init__(self, config: Optional[MosaicConfig] = None) -> None:
        self.config = config or MosaicConfig()

    def canvas_for(self, images: Sequence[Image.Image]) -> Size:
        count = len(images)
        if count == 0:
            raise EmptyInput()
        if count > MAX_TILES:
            raise TooManyTiles(count)
        return size_canvas(count, reference_size(images), self.config.canvas_multipliers)

    def render_layers(self, images: Sequence[Image.Image]) -> Tuple[Image.Image, Image.Image]:
        """Return ``(foreground, backdrop)``: the pad pass and the unblurred stretch pass."""

        canvas = self.canvas_for(images)
        workers = self.config.workers
        if workers > 1:
            with ThreadPoolExecutor(max_workers=2) as ex:
                fg = ex.submit(compose, images, canvas, ScaleMode.PAD, workers)
                bg = ex.submit(compose, images, canvas, ScaleMode.STRETCH, workers)
                return fg.result(), bg.result()
        return (
            compose(images, canvas, ScaleMode.PAD),
            compose(images, canvas, ScaleMode.STRETCH),
        )

    def generate_combined_thumbnail(self, images: Sequence[Image.Image]) -> Thumbnail:
        timer = StepTimer(logger)
        try:
            with timer.time_step("compose"):
                foreground, backdrop = self.render_layers(images)
            with timer.time_step("blur"):
                blurred = blur_backdrop(backdrop, self.config.blur_radius)
            with timer.time_step("encode"):
                thumbnail = finalize(blurred, foreground, self.config.image_format)
        except MosaicError as exc:
            if not exc.client_error:
                logger.error("Failed to generate combined thumbnail: %s", exc)
            raise

        logger.debug(
            "Generated combined thumbnail with size %dx%d and %d bytes in %.3fs",
            thumbnail.width,
            thumbnail.height,
            len(thumbnail.data),
            timer.total,
        )
        return thumbnail


def generate_combined_thumbnail(images: Sequence[Image.Image], config: Optional[MosaicConfig] = None) -> Thumbnail:
    return MosaicEngine(config).generate_combined_thumbnail(images)
