"""Engine configuration bound at construction time."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from .background import DEFAULT_BLUR_RADIUS
from .layout import CANVAS_MULTIPLIERS, check_canvas_multipliers
from .thumbnail import OUTPUT_FORMATS


@dataclass(frozen=True)
class MosaicConfig:
    blur_radius: float = DEFAULT_BLUR_RADIUS
    # must agree with the tile plans, see layout.check_canvas_multipliers
    canvas_multipliers: Mapping[int, Tuple[int, int]] = field(default_factory=lambda: dict(CANVAS_MULTIPLIERS))
    image_format: str = "PNG"
    # >1 scales tiles and runs the two passes on threads
    workers: int = 1

    def __post_init__(self) -> None:
        if self.blur_radius < 0:
            raise ValueError("blur_radius cannot be negative")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        check_canvas_multipliers(self.canvas_multipliers)
        image_format = self.image_format.upper()
        if image_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"image_format must be one of {sorted(OUTPUT_FORMATS)}, got {self.image_format!r}"
            )
        object.__setattr__(self, "image_format", image_format)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "MosaicConfig":
        """Build a config, overriding defaults from ``MOSAIC_*`` variables."""

        env = os.environ if environ is None else environ
        kwargs = {}
        if env.get("MOSAIC_BLUR_RADIUS"):
            kwargs["blur_radius"] = float(env["MOSAIC_BLUR_RADIUS"])
        if env.get("MOSAIC_WORKERS"):
            kwargs["workers"] = int(env["MOSAIC_WORKERS"])
        if env.get("MOSAIC_IMAGE_FORMAT"):
            kwargs["image_format"] = env["MOSAIC_IMAGE_FORMAT"]
        return cls(**kwargs)
