"""
Cascade loading for the eye-alignment detector.

Responsibility:
    Resolve a Haar cascade XML path and return a ready-to-use
    cv2.CascadeClassifier.

Non-goals:
    - No detection or image-level logic.
    - No automatic model downloading.

Failure behavior:
    - A missing cascade file raises FileNotFoundError with every location
      that was tried.
    - A file that OpenCV cannot parse raises ResourceSetupError.
"""

import logging
from pathlib import Path
from typing import List

import cv2

from eyealign.config import get_project_root
from eyealign.errors import ResourceSetupError

logger = logging.getLogger(__name__)


def resolve_cascade_path(name: str) -> Path:
    """Locate a cascade file.

    Lookup order:
        1. The path as given (absolute, or relative to the working directory).
        2. Relative to the project root.
        3. Inside the cascades bundled with opencv-python (cv2.data).

    Raises:
        FileNotFoundError: If none of the candidates exists.
    """
    candidates: List[Path] = [Path(name)]
    if not Path(name).is_absolute():
        candidates.append(get_project_root() / name)
        candidates.append(Path(cv2.data.haarcascades) / name)

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    tried = "\n".join(f"  Tried: {c}" for c in candidates)
    raise FileNotFoundError(
        f"Cascade file not found: '{name}'.\n{tried}\n"
        f"  Provide the file or update the detector section of your config."
    )


def load_cascade(name: str) -> cv2.CascadeClassifier:
    """Load a Haar cascade classifier.

    Args:
        name: Cascade file name or path (see resolve_cascade_path).

    Returns:
        A loaded cv2.CascadeClassifier.

    Raises:
        FileNotFoundError: If the cascade file does not exist.
        ResourceSetupError: If OpenCV fails to load the file.
    """
    path = resolve_cascade_path(name)

    logger.info("Loading cascade: %s", path)
    classifier = cv2.CascadeClassifier()
    try:
        # Some OpenCV builds wrap parse failures in SystemError.
        loaded = classifier.load(str(path))
    except (cv2.error, SystemError) as e:
        raise ResourceSetupError(
            f"OpenCV could not parse cascade file {path}.\n"
            f"  OpenCV error: {e}"
        ) from e

    if not loaded or classifier.empty():
        raise ResourceSetupError(
            f"Failed to load cascade classifier from {path}. "
            f"The file exists but is not a valid OpenCV cascade."
        )

    return classifier
