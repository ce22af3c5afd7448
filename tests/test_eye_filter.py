"""
Tests for the eye candidate filter.
"""

from eyealign.eye_filter import filter_eyes
from eyealign.geometry import BoundingBox

# Face at (100, 100) size 100x100: vertical band [120, 150], horizontal [120, 180].
FACE = BoundingBox(100, 100, 100, 100)


def _eye_centered_at(cx: int, cy: int) -> BoundingBox:
    """Face-local 10x10 box whose global center is (cx, cy)."""
    return BoundingBox(cx - FACE.x - 5, cy - FACE.y - 5, 10, 10)


def test_empty_input_returns_empty():
    assert filter_eyes(FACE, []) == []


def test_thresholds_are_inclusive():
    eyes = [
        _eye_centered_at(150, 120),  # top edge
        _eye_centered_at(150, 150),  # bottom edge
        _eye_centered_at(120, 135),  # left edge
        _eye_centered_at(180, 135),  # right edge
    ]
    assert filter_eyes(FACE, eyes) == eyes


def test_just_outside_thresholds_rejected():
    eyes = [
        _eye_centered_at(150, 119),
        _eye_centered_at(150, 151),
        _eye_centered_at(119, 135),
        _eye_centered_at(181, 135),
    ]
    assert filter_eyes(FACE, eyes) == []


def test_order_preserved_and_input_untouched():
    good_a = _eye_centered_at(130, 130)
    bad = _eye_centered_at(150, 190)  # mouth region
    good_b = _eye_centered_at(170, 130)
    eyes = [good_a, bad, good_b]

    assert filter_eyes(FACE, eyes) == [good_a, good_b]
    assert eyes == [good_a, bad, good_b]


def test_no_cap_on_result_count():
    eyes = [_eye_centered_at(130 + i, 130) for i in range(5)]
    assert len(filter_eyes(FACE, eyes)) == 5


def test_portrait_scenario_keeps_both_eyes():
    face = BoundingBox(1400, 1200, 1000, 1400)
    eyes = [BoundingBox(150, 300, 120, 80), BoundingBox(730, 300, 120, 80)]
    assert filter_eyes(face, eyes) == eyes
