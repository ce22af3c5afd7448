"""
False-positive filtering for eye detections.

Responsibility:
    Drop eye candidates whose centers fall outside the region of the face
    where eyes are expected: 20%-50% of the face height from the top and
    20%-80% of the face width from the left. Both bands are inclusive.

Non-goals:
    - No cap on the number of surviving eyes (zero, one or many).
    - No left/right eye pairing.

Hard-coded:
    - The band fractions below. They describe an upright frontal face,
      which is the only pose this package supports.
"""

from typing import List, Sequence

from eyealign.geometry import BoundingBox

_TOP_FRACTION = 0.2
_BOTTOM_FRACTION = 0.5
_LEFT_FRACTION = 0.2
_RIGHT_FRACTION = 0.8


def filter_eyes(face: BoundingBox, eyes: Sequence[BoundingBox]) -> List[BoundingBox]:
    """Keep only eye boxes whose centers lie in the expected face region.

    Args:
        face: Face box in image-global coordinates.
        eyes: Raw eye boxes in face-local coordinates.

    Returns:
        The surviving eye boxes, still face-local, in their original order.
        An empty list if none survive (or none were given).
    """
    top = face.y + int(face.height * _TOP_FRACTION)
    bottom = face.y + int(face.height * _BOTTOM_FRACTION)
    left = face.x + int(face.width * _LEFT_FRACTION)
    right = face.x + int(face.width * _RIGHT_FRACTION)

    kept: List[BoundingBox] = []
    for eye in eyes:
        center_x, center_y = eye.to_global(face).center

        if top <= center_y <= bottom and left <= center_x <= right:
            kept.append(eye)

    return kept
