"""
Per-image pipeline for eye-aligned ID photos.

Responsibility:
    Take one input file through decode → detect → filter eyes →
    (annotate) → crop → resize → encode, and classify how it ended.
    Every image ends in exactly one Outcome; nothing is retried.

    NO_FACE / ZERO_EYES / GEOMETRY_DEGENERATE copy the original file
    through unchanged. DECODE_FAILURE writes nothing. ONE_EYE and
    TWO_PLUS_EYES produce a cropped image.

Results are returned, not logged: the caller decides how to report them.
A failure in one image never stops the batch.

Non-goals:
    - No retries or timeouts around detector/codec calls.
    - No shared state between images; the config is frozen.
"""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from eyealign.annotator import annotate
from eyealign.codec import ImageCodec
from eyealign.config import AppConfig
from eyealign.cropper import compute_crop_rect, crop_and_resize
from eyealign.detector import FaceEyeDetector, detect
from eyealign.errors import GeometryDegenerate
from eyealign.eye_filter import filter_eyes
from eyealign.geometry import CropRectangle
from eyealign.output_handler import OutputHandler

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    """Terminal state of one image."""

    TWO_PLUS_EYES = "two_plus_eyes"
    ONE_EYE = "one_eye"
    NO_FACE = "no_face"
    ZERO_EYES = "zero_eyes"
    DECODE_FAILURE = "decode_failure"
    GEOMETRY_DEGENERATE = "geometry_degenerate"
    ENCODE_FAILURE = "encode_failure"
    ERROR = "error"

    @property
    def status(self) -> str:
        """'processed', 'skipped' or 'error'."""
        return _STATUS[self]


_STATUS = {
    Outcome.TWO_PLUS_EYES: "processed",
    Outcome.ONE_EYE: "processed",
    Outcome.NO_FACE: "skipped",
    Outcome.ZERO_EYES: "skipped",
    Outcome.DECODE_FAILURE: "error",
    Outcome.GEOMETRY_DEGENERATE: "error",
    Outcome.ENCODE_FAILURE: "error",
    Outcome.ERROR: "error",
}


@dataclass(frozen=True)
class ImageResult:
    """What happened to one input file.

    Attributes:
        source: Input file.
        outcome: Terminal state.
        output: File written to the output directory, or None.
        message: Human-readable detail (warnings, error text).
        eye_count: Eyes left after filtering (0 if detection never ran).
        crop: Crop rectangle used, when one was computed.
    """

    source: Path
    outcome: Outcome
    output: Optional[Path] = None
    message: str = ""
    eye_count: int = 0
    crop: Optional[CropRectangle] = None

    @property
    def status(self) -> str:
        return self.outcome.status

    def to_dict(self) -> dict:
        return {
            "source": str(self.source),
            "output": str(self.output) if self.output is not None else None,
            "outcome": self.outcome.value,
            "status": self.status,
            "eye_count": self.eye_count,
            "crop": self.crop.to_dict() if self.crop is not None else None,
            "message": self.message,
        }


@dataclass
class BatchReport:
    """Ordered per-image results of one run."""

    results: List[ImageResult] = field(default_factory=list)

    def add(self, result: ImageResult) -> None:
        self.results.append(result)

    def counts(self) -> Dict[str, int]:
        """Number of images per outcome value."""
        return dict(Counter(r.outcome.value for r in self.results))

    def _count_status(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def processed(self) -> int:
        return self._count_status("processed")

    @property
    def skipped(self) -> int:
        return self._count_status("skipped")

    @property
    def failed(self) -> int:
        return self._count_status("error")

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "totals": {
                "processed": self.processed,
                "skipped": self.skipped,
                "failed": self.failed,
            },
            "outcomes": self.counts(),
        }


class Pipeline:
    """Runs the eye-alignment steps on one image at a time.

    Usage:
        pipeline = Pipeline(config, detector, codec, output_handler)
        result = pipeline.process(path)
        for result in pipeline.run(paths):
            ...

    The detector and codec are capabilities (see FaceEyeDetector and
    ImageCodec); tests pass fakes for both.
    """

    def __init__(
        self,
        config: AppConfig,
        detector: FaceEyeDetector,
        codec: ImageCodec,
        output: OutputHandler,
    ) -> None:
        self._config = config
        self._detector = detector
        self._codec = codec
        self._output = output

    @property
    def config(self) -> AppConfig:
        return self._config

    def process(self, source: Path) -> ImageResult:
        """Process one file and classify the result.

        Any exception raised by the detector, codec or filesystem becomes
        Outcome.ERROR instead of propagating, so one bad file never stops
        a batch.
        """
        source = Path(source)
        try:
            return self._process(source)
        except Exception as e:
            logger.exception("Unexpected failure on %s", source)
            return ImageResult(source, Outcome.ERROR, message=str(e))

    def _process(self, source: Path) -> ImageResult:
        image = self._codec.decode(source)
        if image is None or image.size == 0:
            return ImageResult(
                source, Outcome.DECODE_FAILURE,
                message="Failed to load image; nothing written.",
            )

        detection = detect(self._detector, image)
        if detection is None:
            return ImageResult(
                source, Outcome.NO_FACE,
                output=self._output.passthrough(source),
                message="No face detected; original copied.",
            )

        face = detection.face
        eyes = filter_eyes(face, detection.eyes)
        if not eyes:
            return ImageResult(
                source, Outcome.ZERO_EYES,
                output=self._output.passthrough(source),
                message="No eyes detected; original copied.",
            )

        annotate(image, face, eyes, self._config.annotation)

        h, w = image.shape[:2]
        try:
            rect = compute_crop_rect((w, h), face, eyes, self._config.crop)
        except GeometryDegenerate as e:
            return ImageResult(
                source, Outcome.GEOMETRY_DEGENERATE,
                output=self._output.passthrough(source),
                message=f"{e} Original copied.",
                eye_count=len(eyes),
            )

        # The cropped output replaces the working image from here on.
        image = crop_and_resize(image, rect, self._config.crop, resize=self._codec.resize)

        try:
            written = self._output.write(source, image)
        except OSError as e:
            return ImageResult(
                source, Outcome.ENCODE_FAILURE,
                message=str(e), eye_count=len(eyes), crop=rect,
            )

        if len(eyes) == 1:
            return ImageResult(
                source, Outcome.ONE_EYE, output=written,
                message="Only one eye detected; alignment may be imprecise.",
                eye_count=1, crop=rect,
            )

        return ImageResult(
            source, Outcome.TWO_PLUS_EYES, output=written,
            eye_count=len(eyes), crop=rect,
        )

    def run(self, sources: Iterable[Path]) -> Iterator[ImageResult]:
        """Process sources, yielding results in input order.

        With pipeline.workers > 1 images are processed concurrently, one
        image per worker.
        """
        workers = self._config.pipeline.workers
        if workers <= 1:
            for source in sources:
                yield self.process(source)
            return

        with ThreadPoolExecutor(max_workers=workers) as executor:
            yield from executor.map(self.process, sources)

    def run_batch(self, sources: Iterable[Path]) -> BatchReport:
        """Process every source and collect a BatchReport."""
        report = BatchReport()
        for result in self.run(sources):
            report.add(result)
        return report
