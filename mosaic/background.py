"""Blurred backdrop for the stretched composite."""

from __future__ import annotations

import logging

from PIL import Image, ImageFilter

from .errors import BlurGeometryError

logger = logging.getLogger(__name__)


DEFAULT_BLUR_RADIUS = 50.0
RGB_CHANNELS = 3


def _check_geometry(image: Image.Image) -> bytes:
    """Return the packed RGB buffer of ``image``, checked against its size.

    Pillow always packs ``convert("RGB")`` output at three bytes per pixel;
    the check guards against foreign image objects handing in a short buffer.
    """
    buffer = image.tobytes()
    expected = image.width * image.height * RGB_CHANNELS
    if len(buffer) != expected:
        raise BlurGeometryError(expected, len(buffer))
    return buffer


def blur_backdrop(image: Image.Image, radius: float = DEFAULT_BLUR_RADIUS) -> Image.Image:
    """Gaussian-blur the RGB channels of ``image`` into a new RGB image.

    Alpha is dropped; the stretched backdrop covers every pixel.
    """
    rgb = image.convert("RGB")
    logger.debug("Blurring background: %dx%d (radius %.1f)", rgb.width, rgb.height, radius)
    buffer = _check_geometry(rgb)
    # blur the checked buffer itself, not a second copy of the source
    checked = Image.frombytes("RGB", (rgb.width, rgb.height), buffer)
    return checked.filter(ImageFilter.GaussianBlur(radius=radius))
