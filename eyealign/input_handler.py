"""
Input discovery for the eye-alignment pipeline.

Responsibility:
    List the image files of a flat input directory, filtered by extension
    (case-insensitive) and sorted by name so runs are reproducible.

Non-goals:
    - No recursion into subdirectories.
    - No decoding; unreadable files are the pipeline's business.

Failure behavior:
    - A missing/unreadable directory, or one without a single matching
      file, raises InputDirectoryInvalid before any processing starts.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from eyealign.errors import InputDirectoryInvalid

logger = logging.getLogger(__name__)

# Image extensions recognized by default
_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")


def discover_images(
    directory: Union[str, Path],
    extensions: Iterable[str] = _IMAGE_EXTENSIONS,
) -> List[Path]:
    """Return the sorted image files directly inside directory.

    Args:
        directory: Input directory path.
        extensions: Accepted suffixes, lower case with the leading dot.

    Returns:
        A non-empty, name-sorted list of file paths.

    Raises:
        InputDirectoryInvalid: If the directory is missing, unreadable,
                               or contains no matching files.
    """
    root = Path(directory)
    accepted = {e.lower() for e in extensions}

    if not root.is_dir():
        raise InputDirectoryInvalid(
            f"Input directory not found: '{root}'. "
            f"Provide an existing directory of images."
        )

    try:
        images = sorted(
            p for p in root.iterdir()
            if p.is_file() and p.suffix.lower() in accepted
        )
    except OSError as e:
        raise InputDirectoryInvalid(
            f"Cannot read input directory '{root}': {e}"
        ) from e

    if not images:
        raise InputDirectoryInvalid(
            f"No image files found in directory: '{root}'. "
            f"Supported extensions: {sorted(accepted)}."
        )

    logger.info("Found %d images in directory: %s", len(images), root)
    return images
