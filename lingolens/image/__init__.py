"""Image handles passed through the pipeline."""

from .resource import ImageResource, ImageSlot

__all__ = [
    "ImageResource",
    "ImageSlot",
]
