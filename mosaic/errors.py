"""Error taxonomy for mosaic generation.

Every error carries ``client_error`` so the calling layer can decide between
a caller-side failure (bad input) and an internal one without matching on
concrete classes.
"""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for all mosaic failures."""

    client_error = False


class EmptyInput(MosaicError):
    client_error = True

    def __init__(self, message: str = "Image array is empty") -> None:
        super().__init__(message)


class UnsupportedCount(MosaicError):
    client_error = True

    def __init__(self, count: int, message: str | None = None) -> None:
        self.count = count
        super().__init__(message or f"Unsupported image count {count}, expected 1 to 4")


class TooManyTiles(UnsupportedCount):
    def __init__(self, count: int) -> None:
        super().__init__(count, f"Image array has too many images ({count}), maximum is 4")


class NoReferenceFound(MosaicError):
    def __init__(self, message: str = "Could not find image with most pixels, array is likely empty") -> None:
        super().__init__(message)


class ReferenceSelectionFailed(MosaicError):
    pass


class BlurGeometryError(MosaicError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Failed to blur image: buffer has {actual} bytes, expected {expected}")


class EncodingError(MosaicError):
    pass


class NoImagesFound(MosaicError):
    client_error = True

    def __init__(self, message: str = "No images found for post") -> None:
        super().__init__(message)


class FetchError(MosaicError):
    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Could not retrieve image from {url}: {reason}")


__all__ = [
    "MosaicError",
    "EmptyInput",
    "UnsupportedCount",
    "TooManyTiles",
    "NoReferenceFound",
    "ReferenceSelectionFailed",
    "BlurGeometryError",
    "EncodingError",
    "NoImagesFound",
    "FetchError",
]
