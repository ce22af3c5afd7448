"""
Tests for the detector module.

The cascade tests use the Haar cascades bundled with opencv-python.
"""

import numpy as np
import pytest

from eyealign.config import DetectorConfig
from eyealign.detector import CascadeDetector, detect
from eyealign.errors import ResourceSetupError
from eyealign.geometry import BoundingBox, DetectionResult
from eyealign.model_loader import resolve_cascade_path

from conftest import FakeDetector


def test_bundled_cascades_resolve():
    path = resolve_cascade_path("haarcascade_eye.xml")
    assert path.is_file()


def test_missing_cascade():
    with pytest.raises(FileNotFoundError, match="no_such_cascade"):
        CascadeDetector(DetectorConfig(face_cascade="no_such_cascade.xml"))


def test_invalid_cascade(tmp_path):
    bogus = tmp_path / "bogus.xml"
    bogus.write_text("<opencv_storage></opencv_storage>", encoding="utf-8")

    with pytest.raises(ResourceSetupError):
        CascadeDetector(DetectorConfig(eye_cascade=str(bogus)))


def test_cascade_detector_blank_image():
    """Smoke test: no face on a flat gray frame."""
    detector = CascadeDetector(DetectorConfig())
    frame = np.full((240, 320, 3), 128, dtype=np.uint8)

    assert detect(detector, frame) is None


def test_detect_passes_face_region_to_eye_detector():
    face = BoundingBox(10, 20, 30, 40)
    eyes = [BoundingBox(5, 10, 6, 4)]
    fake = FakeDetector(face, eyes)

    result = detect(fake, np.zeros((100, 100, 3), dtype=np.uint8))

    assert result == DetectionResult(face=face, eyes=tuple(eyes))
    assert fake.face_regions == [(40, 30)]


def test_detect_no_face():
    fake = FakeDetector(None)
    assert detect(fake, np.zeros((10, 10, 3), dtype=np.uint8)) is None
    assert fake.face_regions == []


def test_detect_input_validation():
    with pytest.raises(TypeError):
        detect(FakeDetector(None), "not a frame")


def test_load_cascade_rejects_unparseable_file(tmp_path):
    from eyealign.model_loader import load_cascade

    garbage = tmp_path / "garbage.xml"
    garbage.write_text("this is <not xml", encoding="utf-8")

    with pytest.raises(ResourceSetupError):
        load_cascade(str(garbage))
