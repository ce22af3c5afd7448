"""
Geometry value types for the eye-alignment pipeline.

This module defines the frozen rectangles passed between the detector,
the eye filter, the crop calculator and the annotator. They carry no
behavior beyond coordinate translation and plain-dict export.

Coordinate spaces:
    - image-global: origin at the image's top-left corner (face boxes,
      crop rectangles).
    - face-local: origin at the face box's top-left corner (raw eye
      boxes from the eye detector). Use BoundingBox.to_global() before
      comparing or drawing them.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned rectangle given by its top-left corner and size.

    Attributes:
        x: Left edge in pixels.
        y: Top edge in pixels.
        width: Width in pixels.
        height: Height in pixels.
    """

    x: int
    y: int
    width: int
    height: int

    def to_global(self, face: "BoundingBox") -> "BoundingBox":
        """Translate a face-local box into image-global coordinates."""
        return BoundingBox(
            x=face.x + self.x,
            y=face.y + self.y,
            width=self.width,
            height=self.height,
        )

    @property
    def center(self) -> Tuple[int, int]:
        """Integer (x, y) center, truncated."""
        return self.x + self.width // 2, self.y + self.height // 2

    @property
    def x2(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    def to_dict(self) -> dict:
        """Return a plain dict suitable for JSON serialization."""
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_xywh(cls, rect) -> "BoundingBox":
        """Build a box from an OpenCV-style (x, y, w, h) sequence."""
        x, y, w, h = (int(v) for v in rect)
        return cls(x=x, y=y, width=w, height=h)


@dataclass(frozen=True, slots=True)
class CropRectangle:
    """Image-global region extracted before resizing to the target size."""

    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class DetectionResult:
    """One face (image-global) and its raw eye boxes (face-local).

    Produced once per image by the detector and never modified.
    """

    face: BoundingBox
    eyes: Tuple[BoundingBox, ...] = ()
