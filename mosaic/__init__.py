"""Mosaic previews for multi-image posts.

Decoded images are laid out by count (1-4) into a letterboxed foreground
over a blurred, stretched backdrop of the same tiles, then encoded as PNG.

- geometry and result types (`state.py`)
- tile scaling (`scaling.py`)
- reference selection, canvas sizing, tile plans (`layout.py`)
- layout compositor (`compositor.py`)
- backdrop blur (`background.py`)
- merge and encode (`thumbnail.py`)
- pipeline (`engine.py`), configuration (`config.py`)
- CDN fetching (`fetch.py`) and the command line (`cli.py`)
"""

from .config import MosaicConfig
from .engine import MosaicEngine, generate_combined_thumbnail
from .errors import (
    BlurGeometryError,
    EmptyInput,
    EncodingError,
    FetchError,
    MosaicError,
    NoImagesFound,
    NoReferenceFound,
    ReferenceSelectionFailed,
    TooManyTiles,
    UnsupportedCount,
)
from .state import ScaleMode, Size, Thumbnail, TilePlacement

__all__ = [
    "MosaicConfig",
    "MosaicEngine",
    "generate_combined_thumbnail",
    "ScaleMode",
    "Size",
    "Thumbnail",
    "TilePlacement",
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
