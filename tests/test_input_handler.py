"""
Tests for input discovery.
"""

import pytest

from eyealign.errors import InputDirectoryInvalid
from eyealign.input_handler import discover_images


def test_missing_directory(tmp_path):
    with pytest.raises(InputDirectoryInvalid, match="not found"):
        discover_images(tmp_path / "nope")


def test_no_matching_files(tmp_path):
    (tmp_path / "notes.txt").write_text("hi")
    with pytest.raises(InputDirectoryInvalid, match="No image files"):
        discover_images(tmp_path)


def test_filters_and_sorts(tmp_path):
    for name in ("b.PNG", "a.jpg", "c.JPEG", "d.gif", "e.txt"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "sub.jpg").mkdir()

    found = discover_images(tmp_path)

    assert [p.name for p in found] == ["a.jpg", "b.PNG", "c.JPEG"]


def test_custom_extensions(tmp_path):
    (tmp_path / "a.jpg").write_bytes(b"")
    (tmp_path / "b.png").write_bytes(b"")

    assert [p.name for p in discover_images(tmp_path, (".png",))] == ["b.png"]


def test_is_a_value_error(tmp_path):
    with pytest.raises(ValueError):
        discover_images(tmp_path)
