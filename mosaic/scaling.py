"""Tile scaling: letterboxed (pad) and stretched resizes of one bitmap."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple

from PIL import Image

from .state import ScaleMode


PAD_RESAMPLE = Image.Resampling.LANCZOS
STRETCH_RESAMPLE = Image.Resampling.BILINEAR


def fit_within(size: Tuple[int, int], target_width: int, target_height: int) -> Tuple[int, int]:
    """Largest size with the aspect ratio of ``size`` that fits the target box.

    Dimensions are truncated, never rounded up, so the result never exceeds
    the target. Each side is at least one pixel.
    """
    width, height = size
    aspect_ratio = width / height
    if aspect_ratio > target_width / target_height:
        new_width, new_height = target_width, int(target_width / aspect_ratio)
    else:
        new_width, new_height = int(target_height * aspect_ratio), target_height
    return max(1, new_width), max(1, new_height)


def _to_rgba(image: Image.Image) -> Image.Image:
    return image if image.mode == "RGBA" else image.convert("RGBA")


def scale_tile(image: Image.Image, target_width: int, target_height: int, mode: ScaleMode) -> Image.Image:
    """Resize ``image`` into a ``target_width`` x ``target_height`` RGBA tile.

    ``pad`` keeps the aspect ratio and centres the result on a transparent
    tile; ``stretch`` fills the tile exactly. The input is never modified.
    """
    if target_width <= 0 or target_height <= 0:
        raise ValueError(f"Target tile size must be positive, got {target_width}x{target_height}")
    mode = ScaleMode(mode)
    source = _to_rgba(image)

    if mode is ScaleMode.STRETCH:
        return source.resize((target_width, target_height), STRETCH_RESAMPLE)

    new_width, new_height = fit_within(source.size, target_width, target_height)
    resized = source.resize((new_width, new_height), PAD_RESAMPLE)

    x = (target_width - new_width) // 2
    y = (target_height - new_height) // 2
    tile = Image.new("RGBA", (target_width, target_height), (0, 0, 0, 0))
    tile.alpha_composite(resized, dest=(x, y))
    return tile


def scale_tiles(
    jobs: Sequence[Tuple[Image.Image, int, int]],
    mode: ScaleMode,
    workers: int = 1,
) -> List[Image.Image]:
    """Scale each ``(image, width, height)`` job, keeping input order.

    With ``workers > 1`` the jobs run on a thread pool; every job reads only
    its own source and allocates its own output.
    """
    if workers <= 1 or len(jobs) <= 1:
        return [scale_tile(image, w, h, mode) for image, w, h in jobs]
    with ThreadPoolExecutor(max_workers=min(workers, len(jobs))) as ex:
        return list(ex.map(lambda job: scale_tile(job[0], job[1], job[2], mode), jobs))
