"""Merge the foreground over the blurred backdrop and encode the result."""

from __future__ import annotations

import io

from PIL import Image

from .errors import EncodingError
from .state import Thumbnail


# lossless formats with alpha: format -> (content type, save options)
OUTPUT_FORMATS = {
    "PNG": ("image/png", {}),
    "WEBP": ("image/webp", {"lossless": True}),
}


def encode_image(image: Image.Image, image_format: str = "PNG") -> bytes:
    image_format = image_format.upper()
    if image_format not in OUTPUT_FORMATS:
        raise EncodingError(f"Unsupported output format {image_format!r}")
    _, options = OUTPUT_FORMATS[image_format]
    buffer = io.BytesIO()
    try:
        image.save(buffer, format=image_format, **options)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodingError(f"Image encoding error: {exc}") from exc
    return buffer.getvalue()


def finalize(blurred_backdrop: Image.Image, foreground: Image.Image, image_format: str = "PNG") -> Thumbnail:
    """Overlay ``foreground`` at the origin of ``blurred_backdrop`` and encode.

    The thumbnail dimensions are those of the backdrop.
    """
    if foreground.width > blurred_backdrop.width or foreground.height > blurred_backdrop.height:
        raise EncodingError(
            f"Foreground {foreground.width}x{foreground.height} does not fit backdrop "
            f"{blurred_backdrop.width}x{blurred_backdrop.height}"
        )

    merged = blurred_backdrop.convert("RGBA")
    merged.alpha_composite(foreground.convert("RGBA"), dest=(0, 0))

    data = encode_image(merged, image_format)
    content_type, _ = OUTPUT_FORMATS[image_format.upper()]
    return Thumbnail(
        data=data,
        width=blurred_backdrop.width,
        height=blurred_backdrop.height,
        content_type=content_type,
    )
