"""
Shared fixtures: a scripted detector, a failing codec, and image files.
"""

from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np
import pytest

from eyealign.codec import OpenCVCodec
from eyealign.geometry import BoundingBox


class FakeDetector:
    """Returns a fixed face and eye list, recording what it was shown."""

    def __init__(self, face: Optional[BoundingBox] = None, eyes: List[BoundingBox] = ()):
        self.face = face
        self.eyes = list(eyes)
        self.face_regions = []

    def detect_face(self, gray):
        return self.face

    def detect_eyes(self, gray_face):
        self.face_regions.append(gray_face.shape)
        return list(self.eyes)


class FlakyDetector(FakeDetector):
    """Raises on the first detect_face call, then behaves like FakeDetector."""

    def __init__(self, face=None, eyes=()):
        super().__init__(face, eyes)
        self.calls = 0

    def detect_face(self, gray):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("detector backend failure")
        return super().detect_face(gray)


class FailingEncodeCodec(OpenCVCodec):
    """OpenCVCodec whose writes always fail."""

    def encode(self, image, path):
        return False


def write_image(path: Path, width: int, height: int, value: int = 0) -> Path:
    image = np.full((height, width, 3), value, dtype=np.uint8)
    assert cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def input_dir(tmp_path) -> Path:
    d = tmp_path / "in"
    d.mkdir()
    return d


@pytest.fixture
def output_dir(tmp_path) -> Path:
    return tmp_path / "out"
