"""
Tests for batch report export.
"""

import csv
import json
from pathlib import Path

from eyealign.geometry import CropRectangle
from eyealign.pipeline import BatchReport, ImageResult, Outcome
from eyealign.serializer import save_csv, save_json


def _report():
    report = BatchReport()
    report.add(ImageResult(
        Path("in/a.jpg"), Outcome.TWO_PLUS_EYES, output=Path("out/a.jpg"),
        eye_count=2, crop=CropRectangle(850, 607, 2100, 2800),
    ))
    report.add(ImageResult(
        Path("in/b.jpg"), Outcome.NO_FACE, output=Path("out/b.jpg"),
        message="No face detected; original copied.",
    ))
    return report


def test_save_json(tmp_path):
    path = tmp_path / "nested" / "report.json"
    save_json(_report(), str(path))

    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload["totals"] == {"processed": 1, "skipped": 1, "failed": 0}
    assert payload["outcomes"] == {"two_plus_eyes": 1, "no_face": 1}
    first = payload["results"][0]
    assert first["crop"] == {"x": 850, "y": 607, "width": 2100, "height": 2800}
    assert first["status"] == "processed"
    assert payload["results"][1]["crop"] is None


def test_save_csv(tmp_path):
    path = tmp_path / "report.csv"
    save_csv(_report(), str(path))

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == 2
    assert rows[0]["outcome"] == "two_plus_eyes"
    assert rows[0]["crop_width"] == "2100"
    assert rows[1]["crop_x"] == ""
    assert rows[1]["status"] == "skipped"
