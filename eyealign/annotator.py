"""
Debug overlays for the eye-alignment pipeline.

Responsibility:
    Draw the filtered eye boxes and the averaged eye line onto the working
    image so the alignment can be checked by eye. Drawing happens in place,
    on the full source image, before cropping: the coordinates here are
    image-global and would be wrong after crop/resize.

Non-goals:
    - No file writing or display windows.
    - No detection or crop logic.
"""

from typing import Sequence

import cv2
import numpy as np

from eyealign.config import AnnotationConfig
from eyealign.cropper import average_eye_y
from eyealign.geometry import BoundingBox


def draw_eye_boxes(
    image: np.ndarray,
    face: BoundingBox,
    eyes: Sequence[BoundingBox],
    config: AnnotationConfig,
) -> None:
    """Outline every eye box (translated to image-global coordinates)."""
    for eye in eyes:
        box = eye.to_global(face)
        cv2.rectangle(
            image,
            (box.x, box.y),
            (box.x2, box.y2),
            color=config.eye_box_color,
            thickness=config.thickness,
            lineType=cv2.LINE_8,
        )


def draw_eye_line(
    image: np.ndarray,
    face: BoundingBox,
    eyes: Sequence[BoundingBox],
    config: AnnotationConfig,
) -> None:
    """Draw a horizontal line across the full width at the average eye row."""
    y = average_eye_y(face, eyes)
    cv2.line(
        image,
        (0, y),
        (image.shape[1], y),
        color=config.eye_line_color,
        thickness=config.thickness,
        lineType=cv2.LINE_AA,
    )


def annotate(
    image: np.ndarray,
    face: BoundingBox,
    eyes: Sequence[BoundingBox],
    config: AnnotationConfig,
) -> None:
    """Draw eye boxes and the eye line onto image, in place.

    Does nothing when annotation is disabled or there are no eyes.
    """
    if not config.enabled or not eyes:
        return

    draw_eye_boxes(image, face, eyes, config)
    draw_eye_line(image, face, eyes, config)
