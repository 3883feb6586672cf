"""Small helpers shared across the mosaic package."""

from .timing import StepTimer

__all__ = ["StepTimer"]
