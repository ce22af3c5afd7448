"""
Tests for the preprocessing module.
"""

import numpy as np
import pytest

from eyealign.preprocessor import to_grayscale


def test_bgr_to_gray():
    frame = np.zeros((48, 64, 3), dtype=np.uint8)
    frame[:, :, 1] = 255

    gray = to_grayscale(frame)

    assert gray.shape == (48, 64)
    assert gray.dtype == np.uint8
    assert gray[0, 0] == 150  # 0.587 * 255


def test_gray_passthrough():
    gray = np.full((10, 10), 7, dtype=np.uint8)
    assert to_grayscale(gray) is gray


def test_bgra_to_gray():
    frame = np.zeros((10, 10, 4), dtype=np.uint8)
    assert to_grayscale(frame).shape == (10, 10)


def test_empty_frame():
    with pytest.raises(ValueError):
        to_grayscale(np.array([]))


def test_none_frame():
    with pytest.raises(TypeError):
        to_grayscale(None)


def test_wrong_channels():
    with pytest.raises(ValueError, match="channels"):
        to_grayscale(np.zeros((10, 10, 2), dtype=np.uint8))
