"""
Detector capability for the eye-alignment pipeline.

The pipeline only needs two questions answered about an image: where is
the face, and where are the eye candidates inside it. This module defines
that contract as a Protocol and provides the production implementation
on top of OpenCV Haar cascades.

Public contract:
    FaceEyeDetector.detect_face(gray) -> Optional[BoundingBox]   (image-global)
    FaceEyeDetector.detect_eyes(gray_face) -> List[BoundingBox]  (face-local)
    detect(detector, image) -> Optional[DetectionResult]

Non-goals:
    - No multi-face handling: the first face reported is used.
    - No file I/O, cropping or drawing.
"""

import logging
import threading
from typing import List, Optional, Protocol

import numpy as np

from eyealign.config import DetectorConfig, load_config
from eyealign.geometry import BoundingBox, DetectionResult
from eyealign.model_loader import load_cascade
from eyealign.preprocessor import to_grayscale

logger = logging.getLogger(__name__)


class FaceEyeDetector(Protocol):
    """Anything that can locate one face and the eyes inside it."""

    def detect_face(self, gray: np.ndarray) -> Optional[BoundingBox]:
        """Return the face box in image-global coordinates, or None."""
        ...

    def detect_eyes(self, gray_face: np.ndarray) -> List[BoundingBox]:
        """Return eye boxes relative to the top-left of gray_face."""
        ...


class CascadeDetector:
    """Face and eye detector using OpenCV Haar cascades.

    Usage:
        detector = CascadeDetector()                    # Bundled cascades
        detector = CascadeDetector(config.detector)     # Custom parameters
        result = detect(detector, image)

    Both cascades are loaded once in the constructor so that a missing or
    broken cascade aborts the run before any image is touched. Worker
    threads other than the constructing one lazily load their own
    classifiers.
    """

    def __init__(self, config: Optional[DetectorConfig] = None) -> None:
        """Initialize the detector and load both cascades.

        Raises:
            FileNotFoundError: If a cascade file is missing.
            ResourceSetupError: If a cascade file cannot be loaded.
        """
        if config is None:
            config = load_config().detector

        self._config = config
        self._local = threading.local()
        self._load_classifiers()

        logger.info(
            "CascadeDetector initialized (face=%s, eye=%s, scale_factor=%.2f)",
            config.face_cascade,
            config.eye_cascade,
            config.scale_factor,
        )

    @property
    def config(self) -> DetectorConfig:
        """Return the active configuration (read-only)."""
        return self._config

    def _load_classifiers(self) -> None:
        self._local.face = load_cascade(self._config.face_cascade)
        self._local.eye = load_cascade(self._config.eye_cascade)

    def _classifiers(self):
        if not hasattr(self._local, "face"):
            self._load_classifiers()
        return self._local.face, self._local.eye

    def detect_face(self, gray: np.ndarray) -> Optional[BoundingBox]:
        face_cascade, _ = self._classifiers()
        faces = face_cascade.detectMultiScale(
            gray,
            scaleFactor=self._config.scale_factor,
            minNeighbors=self._config.min_neighbors,
            minSize=self._config.min_size,
        )
        if len(faces) == 0:
            return None
        if len(faces) > 1:
            logger.debug("%d faces found; using the first.", len(faces))
        return BoundingBox.from_xywh(faces[0])

    def detect_eyes(self, gray_face: np.ndarray) -> List[BoundingBox]:
        _, eye_cascade = self._classifiers()
        eyes = eye_cascade.detectMultiScale(
            gray_face,
            scaleFactor=self._config.scale_factor,
            minNeighbors=self._config.min_neighbors,
        )
        return [BoundingBox.from_xywh(e) for e in eyes]


def detect(detector: FaceEyeDetector, image: np.ndarray) -> Optional[DetectionResult]:
    """Run face then eye detection on a decoded image.

    Args:
        detector: Any FaceEyeDetector implementation.
        image: BGR image as decoded by the codec.

    Returns:
        A DetectionResult with raw (unfiltered) face-local eyes, or None
        when no face was found.

    Raises:
        TypeError: If image is not a numpy ndarray.
        ValueError: If image is empty or has an unsupported shape.
    """
    gray = to_grayscale(image)

    face = detector.detect_face(gray)
    if face is None:
        return None

    face_region = gray[face.y:face.y2, face.x:face.x2]
    eyes = detector.detect_eyes(face_region)
    return DetectionResult(face=face, eyes=tuple(eyes))
