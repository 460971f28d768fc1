"""Image handle borrowed by the pipeline for the duration of one run.

The handle owns the raw upload bytes and decodes them lazily with OpenCV,
the same way the OCR helpers load images. Once released, the bytes and the
decoded array are dropped and any further access raises ``ImageError``.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import cv2
import numpy as np

from lingolens.errors import ImageError

logger = logging.getLogger(__name__)


class ImageResource:
    """Opaque binary handle for one uploaded image."""

    def __init__(self, data: bytes, name: str = "upload") -> None:
        if not data:
            raise ImageError("The uploaded image is empty.")
        self.name = name
        self._data: Optional[bytes] = bytes(data)
        self._rgb: Optional[np.ndarray] = None
        self._released = False

    @classmethod
    def from_path(cls, path: str) -> "ImageResource":
        if not os.path.exists(path):
            raise FileNotFoundError(f"Image file not found: {path}")
        with open(path, "rb") as f:
            return cls(f.read(), name=os.path.basename(path))

    @classmethod
    def from_bytes(cls, data: bytes, name: str = "upload") -> "ImageResource":
        return cls(data, name=name)

    @property
    def released(self) -> bool:
        return self._released

    @property
    def data(self) -> bytes:
        if self._released or self._data is None:
            raise ImageError("The image handle has already been released.", detail=self.name)
        return self._data

    def to_rgb(self) -> np.ndarray:
        """Decode the image into an RGB array (cached until release).

        Doxygen:
        - @return: HxWx3 uint8 RGB array.
        - @throws ImageError: If the handle was released or the bytes are not an image.
        """
        if self._rgb is not None and not self._released:
            return self._rgb
        buf = np.frombuffer(self.data, dtype=np.uint8)
        img_bgr = cv2.imdecode(buf, cv2.IMREAD_COLOR)
        if img_bgr is None:
            raise ImageError(detail=f"failed to decode {self.name}")
        self._rgb = cv2.cvtColor(img_bgr, cv2.COLOR_BGR2RGB)
        return self._rgb

    def release(self) -> None:
        """Drop the bytes and any decoded pixels. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        self._data = None
        self._rgb = None
        logger.debug("Released image handle %s", self.name)

    def __enter__(self) -> "ImageResource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self._released else f"{len(self._data or b'')} bytes"
        return f"ImageResource({self.name!r}, {state})"


class ImageSlot:
    """Holds the single active image of a session.

    Binding a new image releases the previous one, mirroring how an upload
    widget revokes the old object URL when a new file is chosen.
    """

    def __init__(self) -> None:
        self._current: Optional[ImageResource] = None

    @property
    def current(self) -> Optional[ImageResource]:
        return self._current

    def replace(self, image: ImageResource) -> ImageResource:
        previous, self._current = self._current, image
        if previous is not None and previous is not image:
            previous.release()
        return image

    def clear(self) -> None:
        previous, self._current = self._current, None
        if previous is not None:
            previous.release()
