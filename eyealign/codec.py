"""
Image codec capability.

Wraps decode, encode and resize behind a Protocol so the pipeline can be
driven by an in-memory fake in tests. OpenCVCodec is the production
implementation.

Non-goals:
    - No EXIF orientation handling; images are used as stored.
    - No color management.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ImageCodec(Protocol):
    """Read, write and scale pixel buffers."""

    def decode(self, path: PathLike) -> Optional[np.ndarray]:
        """Return the image, or None if it cannot be decoded."""
        ...

    def encode(self, image: np.ndarray, path: PathLike) -> bool:
        """Write image to path. Return False if the write failed."""
        ...

    def resize(self, image: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
        """Scale image to exactly size=(width, height)."""
        ...


class OpenCVCodec:
    """Codec backed by cv2.imread / cv2.imwrite / cv2.resize."""

    def decode(self, path: PathLike) -> Optional[np.ndarray]:
        image = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if image is None or image.size == 0:
            logger.debug("cv2.imread returned no data for %s", path)
            return None
        return image

    def encode(self, image: np.ndarray, path: PathLike) -> bool:
        return bool(cv2.imwrite(str(path), image))

    def resize(self, image: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
        """Non-aspect-preserving scale to exactly (width, height).

        Uses area interpolation when shrinking and bilinear when enlarging.
        """
        h, w = image.shape[:2]
        target_w, target_h = size
        if target_w * target_h < w * h:
            interpolation = cv2.INTER_AREA
        else:
            interpolation = cv2.INTER_LINEAR
        return cv2.resize(image, (target_w, target_h), interpolation=interpolation)
