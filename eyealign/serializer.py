"""
Batch report export.

Responsibility:
    Write the per-image outcomes of a run to JSON or CSV so a batch can
    be audited without scraping the console log.

Non-goals:
    - No image writing.
    - No streaming output; files are written once, after the run.
"""

import csv
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from eyealign.pipeline import BatchReport

logger = logging.getLogger(__name__)

_CSV_FIELDS = [
    "source", "output", "outcome", "status", "eye_count",
    "crop_x", "crop_y", "crop_width", "crop_height", "message",
]


def save_json(report: "BatchReport", output_path: str) -> None:
    """Export a batch report to a JSON file.

    Output schema:
        {
            "results": [
                {"source": ..., "output": ..., "outcome": "two_plus_eyes",
                 "status": "processed", "eye_count": 2,
                 "crop": {"x": ..., "y": ..., "width": ..., "height": ...},
                 "message": ""}
            ],
            "totals": {"processed": N, "skipped": M, "failed": K},
            "outcomes": {"two_plus_eyes": N, ...}
        }

    Raises:
        OSError: If the output path is not writable.
    """
    _ensure_parent_dir(output_path)

    payload = report.to_dict()
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

    logger.info(
        "JSON report saved: %s (%d images)", output_path, len(report.results),
    )


def save_csv(report: "BatchReport", output_path: str) -> None:
    """Export a batch report to a CSV file, one row per image.

    Raises:
        OSError: If the output path is not writable.
    """
    _ensure_parent_dir(output_path)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_FIELDS)
        writer.writeheader()

        for result in report.results:
            row = result.to_dict()
            crop = row.pop("crop") or {}
            writer.writerow({
                **row,
                "crop_x": crop.get("x", ""),
                "crop_y": crop.get("y", ""),
                "crop_width": crop.get("width", ""),
                "crop_height": crop.get("height", ""),
            })

    logger.info("CSV report saved: %s (%d rows)", output_path, len(report.results))


def _ensure_parent_dir(path: str) -> None:
    """Create parent directories if they don't exist."""
    parent = Path(path).parent
    parent.mkdir(parents=True, exist_ok=True)
