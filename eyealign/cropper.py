"""
Crop rectangle computation for eye-aligned ID photos.

Responsibility:
    Given the face box and the filtered eyes, compute the source region
    that, once resized to the target size, centers the face horizontally
    and puts the average eye line at CropConfig.eye_align_fraction of the
    output height. Then extract and resize that region.

The crop is the target size plus padding_ratio of each target dimension on
every side. Because the resize is uniform on each axis, placing the eyes at
the configured fraction of the crop places them at the same fraction of
the output.

Non-goals:
    - No rotation, tilt or scale correction from eye spacing.
    - No detection or drawing.
"""

import logging
from typing import Callable, Optional, Sequence, Tuple

import cv2
import numpy as np

from eyealign.config import CropConfig, round_half_up
from eyealign.errors import GeometryDegenerate
from eyealign.geometry import BoundingBox, CropRectangle

logger = logging.getLogger(__name__)

Resizer = Callable[[np.ndarray, Tuple[int, int]], np.ndarray]


def average_eye_y(face: BoundingBox, eyes: Sequence[BoundingBox]) -> int:
    """Mean vertical center of the eyes in image-global coordinates.

    Args:
        face: Face box (image-global).
        eyes: Non-empty sequence of face-local eye boxes.

    Raises:
        ValueError: If eyes is empty. Callers decide what an eyeless face
                    means before asking for an eye line.
    """
    if not eyes:
        raise ValueError("Cannot average the eye line of zero eyes.")

    total = sum(eye.to_global(face).center[1] for eye in eyes)
    return total // len(eyes)


def compute_crop_rect(
    image_size: Tuple[int, int],
    face: BoundingBox,
    eyes: Sequence[BoundingBox],
    config: CropConfig,
) -> CropRectangle:
    """Compute the image-global region to extract before resizing.

    Args:
        image_size: Source (width, height) in pixels.
        face: Face box (image-global).
        eyes: Non-empty sequence of filtered, face-local eye boxes.
        config: Output geometry.

    Returns:
        A CropRectangle fully contained in the source image.

    Raises:
        ValueError: If eyes is empty.
        GeometryDegenerate: If the padded crop is larger than the image on
                            either axis and config.degenerate_policy is
                            'reject'.
    """
    image_w, image_h = image_size
    avg_eye_y = average_eye_y(face, eyes)

    vertical_padding = round_half_up(config.target_height * config.padding_ratio)
    horizontal_padding = round_half_up(config.target_width * config.padding_ratio)

    crop_h = config.target_height + 2 * vertical_padding
    crop_w = config.target_width + 2 * horizontal_padding

    too_wide = crop_w > image_w
    too_tall = crop_h > image_h
    if (too_wide or too_tall) and config.degenerate_policy == "reject":
        raise GeometryDegenerate((crop_w, crop_h), (image_w, image_h))

    if too_wide:
        crop_x, crop_w = 0, image_w
    else:
        crop_x = face.x + face.width // 2 - crop_w // 2
        crop_x = max(0, min(crop_x, image_w - crop_w))

    if too_tall:
        crop_y, crop_h = 0, image_h
    else:
        eye_offset = round_half_up(config.final_eye_y / config.target_height * crop_h)
        crop_y = avg_eye_y - eye_offset
        crop_y = max(0, min(crop_y, image_h - crop_h))

    if too_wide or too_tall:
        logger.debug(
            "Crop exceeds image %dx%d; using full extent (wide=%s, tall=%s).",
            image_w, image_h, too_wide, too_tall,
        )

    return CropRectangle(x=crop_x, y=crop_y, width=crop_w, height=crop_h)


def crop_and_resize(
    image: np.ndarray,
    rect: CropRectangle,
    config: CropConfig,
    resize: Optional[Resizer] = None,
) -> np.ndarray:
    """Extract rect from image and scale it to exactly the target size.

    Args:
        image: Source BGR image (H, W, 3).
        rect: Region to extract, as returned by compute_crop_rect().
        config: Output geometry.
        resize: Scaling primitive, normally ImageCodec.resize. Defaults to
                cv2.resize with area interpolation.

    Returns:
        A new array of shape (target_height, target_width, channels).
    """
    region = image[rect.y:rect.y + rect.height, rect.x:rect.x + rect.width]
    if resize is None:
        return cv2.resize(region, config.target_size, interpolation=cv2.INTER_AREA)
    return resize(region, config.target_size)
