"""
Preprocessing for the detector.

Responsibility:
    Validate a decoded image and convert it to the single-channel
    grayscale buffer the Haar cascades expect.

Non-goals:
    - No histogram equalization or denoising; the detector sees the
      image as decoded.
    - No detection.
"""

import cv2
import numpy as np


def validate_image(image: np.ndarray) -> None:
    """Validate that an image is a non-empty 2D or 3D numpy array.

    Raises:
        TypeError: If image is not a numpy ndarray.
        ValueError: If image is empty or has an unsupported shape.
    """
    if not isinstance(image, np.ndarray):
        raise TypeError(
            f"Expected image to be a numpy ndarray, "
            f"got {type(image).__name__}. "
            f"Use cv2.imread() or ImageCodec.decode() to obtain images."
        )

    if image.size == 0:
        raise ValueError("Image is empty (zero size).")

    if image.ndim == 3 and image.shape[2] not in (1, 3, 4):
        raise ValueError(
            f"Expected 1, 3 or 4 channels, got {image.shape[2]} channels."
        )

    if image.ndim not in (2, 3):
        raise ValueError(
            f"Expected a 2- or 3-dimensional image, "
            f"got {image.ndim} dimensions with shape {image.shape}."
        )


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Return a single-channel grayscale copy of a BGR/BGRA/gray image.

    Raises:
        TypeError: If image is not a numpy ndarray.
        ValueError: If image is empty or has an unsupported shape.
    """
    validate_image(image)

    if image.ndim == 2:
        return image
    if image.shape[2] == 1:
        return image[:, :, 0]
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
