"""
Eye Align — eye-aligned ID photo cropping with OpenCV.

Public API:
    - Pipeline: Runs one image (or a batch) through detect → align → crop.
    - CascadeDetector: Production face/eye detector (Haar cascades).
    - OpenCVCodec: Production image codec.
    - filter_eyes, compute_crop_rect, annotate: The alignment algorithm.
    - load_config / AppConfig / CropConfig: Configuration.

Usage:
    from eyealign import CascadeDetector, OpenCVCodec, OutputHandler, Pipeline, load_config

    config = load_config()
    codec = OpenCVCodec()
    pipeline = Pipeline(config, CascadeDetector(config.detector), codec,
                        OutputHandler("out/", codec, config.output))
    report = pipeline.run_batch(paths)
"""

from eyealign.annotator import annotate
from eyealign.codec import ImageCodec, OpenCVCodec
from eyealign.config import AppConfig, CropConfig, load_config
from eyealign.cropper import compute_crop_rect, crop_and_resize
from eyealign.detector import CascadeDetector, FaceEyeDetector, detect
from eyealign.errors import (
    EyeAlignError,
    GeometryDegenerate,
    InputDirectoryInvalid,
    ResourceSetupError,
)
from eyealign.eye_filter import filter_eyes
from eyealign.geometry import BoundingBox, CropRectangle, DetectionResult
from eyealign.input_handler import discover_images
from eyealign.output_handler import OutputHandler
from eyealign.pipeline import BatchReport, ImageResult, Outcome, Pipeline

__all__ = [
    "AppConfig",
    "BatchReport",
    "BoundingBox",
    "CascadeDetector",
    "CropConfig",
    "CropRectangle",
    "DetectionResult",
    "EyeAlignError",
    "FaceEyeDetector",
    "GeometryDegenerate",
    "ImageCodec",
    "ImageResult",
    "InputDirectoryInvalid",
    "OpenCVCodec",
    "Outcome",
    "OutputHandler",
    "Pipeline",
    "ResourceSetupError",
    "annotate",
    "compute_crop_rect",
    "crop_and_resize",
    "detect",
    "discover_images",
    "filter_eyes",
    "load_config",
]
