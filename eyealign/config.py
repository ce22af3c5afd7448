"""
Configuration management for the eye-alignment cropper.

Provides a layered configuration system with the following precedence
(highest to lowest):

    CLI arguments > Environment variables > YAML config file > Defaults

Design constraints:
    - The system MUST run with zero configuration (900x1200 ID photos).
    - Missing or invalid values fail early and loudly.
    - The resulting AppConfig is frozen and threaded through every call;
      nothing in the pipeline reads global mutable state.

Non-goals:
    - No dynamic reloading.
    - No per-image configuration.
"""

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Project root resolution
# ---------------------------------------------------------------------------
# Resolved relative to this file's location: eyealign/config.py → project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Return the resolved project root directory."""
    return _PROJECT_ROOT


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's built-in round() uses banker's rounding (round(2.5) == 2),
    which would shift crop edges by a pixel on exact halves.
    """
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Configuration dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CropConfig:
    """Output geometry.

    Attributes:
        target_width: Final output width in pixels.
        target_height: Final output height in pixels.
        eye_align_fraction: Fraction of target_height where the eye line lands.
        padding_ratio: Fraction of each target dimension added as padding on
                       each side of the crop before downscaling.
        degenerate_policy: What to do when the padded crop is larger than the
                           source image: 'reject' (pass the original through)
                           or 'full_image' (use the full extent on that axis).
    """

    target_width: int = 900
    target_height: int = 1200
    eye_align_fraction: float = 1.0 / 3.0
    padding_ratio: float = 2.0 / 3.0
    degenerate_policy: str = "reject"

    @property
    def target_size(self) -> Tuple[int, int]:
        """(width, height) of the final image."""
        return self.target_width, self.target_height

    @property
    def final_eye_y(self) -> int:
        """Row of the eye line in the final image."""
        return round_half_up(self.target_height * self.eye_align_fraction)


@dataclass(frozen=True)
class DetectorConfig:
    """Haar cascade detector parameters.

    Attributes:
        face_cascade: Face cascade XML. Bare file names are looked up in the
                      cascades bundled with OpenCV; other relative paths
                      resolve against the project root.
        eye_cascade: Eye cascade XML, resolved the same way.
        scale_factor: detectMultiScale image pyramid step (> 1.0).
        min_neighbors: detectMultiScale neighbor threshold.
        min_size: Minimum face (width, height) in pixels.
    """

    face_cascade: str = "haarcascade_frontalface_default.xml"
    eye_cascade: str = "haarcascade_eye.xml"
    scale_factor: float = 1.1
    min_neighbors: int = 3
    min_size: Tuple[int, int] = (30, 30)


@dataclass(frozen=True)
class InputConfig:
    """Input discovery configuration.

    Attributes:
        extensions: Accepted file extensions (lower case, with dot).
    """

    extensions: Tuple[str, ...] = (".jpg", ".jpeg", ".png")


@dataclass(frozen=True)
class OutputConfig:
    """Output behavior configuration.

    Attributes:
        report: Batch report format(s). Comma-separated subset of
                'json', 'csv', or 'none'.
    """

    report: str = "none"

    @property
    def report_formats(self) -> Tuple[str, ...]:
        formats = tuple(m.strip() for m in self.report.split(",") if m.strip())
        return tuple(m for m in formats if m != "none")


@dataclass(frozen=True)
class AnnotationConfig:
    """Debug overlay parameters.

    Attributes:
        enabled: Draw eye boxes and the eye line before cropping.
        eye_box_color: BGR color for eye rectangles.
        eye_line_color: BGR color for the eye-alignment line.
        thickness: Stroke width in pixels.
    """

    enabled: bool = False
    eye_box_color: Tuple[int, int, int] = (0, 255, 0)
    eye_line_color: Tuple[int, int, int] = (0, 0, 255)
    thickness: int = 2


@dataclass(frozen=True)
class PipelineConfig:
    """Batch execution parameters.

    Attributes:
        workers: Number of images processed concurrently. 1 means serial.
    """

    workers: int = 1


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration.

    Aggregates all sub-configurations into a single, frozen object.
    """

    crop: CropConfig = field(default_factory=CropConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    input: InputConfig = field(default_factory=InputConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    annotation: AnnotationConfig = field(default_factory=AnnotationConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

_VALID_DEGENERATE_POLICIES = {"reject", "full_image"}
_VALID_REPORT_FORMATS = {"json", "csv", "none"}


def _validate(config: AppConfig) -> None:
    """Validate configuration values. Raises ValueError on invalid state."""

    crop = config.crop
    if crop.target_width <= 0 or crop.target_height <= 0:
        raise ValueError(
            f"crop target size must be positive, "
            f"got {crop.target_width}x{crop.target_height}."
        )

    if not (0.0 < crop.eye_align_fraction < 1.0):
        raise ValueError(
            f"crop.eye_align_fraction must be in (0.0, 1.0), "
            f"got {crop.eye_align_fraction}."
        )

    if crop.padding_ratio < 0.0:
        raise ValueError(
            f"crop.padding_ratio must be non-negative, got {crop.padding_ratio}."
        )

    if crop.degenerate_policy not in _VALID_DEGENERATE_POLICIES:
        raise ValueError(
            f"Invalid crop.degenerate_policy: '{crop.degenerate_policy}'. "
            f"Must be one of {_VALID_DEGENERATE_POLICIES}."
        )

    if config.detector.scale_factor <= 1.0:
        raise ValueError(
            f"detector.scale_factor must be greater than 1.0, "
            f"got {config.detector.scale_factor}."
        )

    if config.detector.min_neighbors < 0:
        raise ValueError(
            f"detector.min_neighbors must be non-negative, "
            f"got {config.detector.min_neighbors}."
        )

    if len(config.detector.min_size) != 2 or any(d < 0 for d in config.detector.min_size):
        raise ValueError(
            f"detector.min_size must be a non-negative (width, height) tuple, "
            f"got {config.detector.min_size}."
        )

    if not config.input.extensions:
        raise ValueError("input.extensions must not be empty.")

    formats = set(m.strip() for m in config.output.report.split(",") if m.strip())
    invalid_formats = formats - _VALID_REPORT_FORMATS
    if invalid_formats:
        raise ValueError(
            f"Invalid output.report format(s): {invalid_formats}. "
            f"Valid formats: {_VALID_REPORT_FORMATS}. "
            f"Use comma-separated values for multiple reports."
        )

    for name in ("eye_box_color", "eye_line_color"):
        color = getattr(config.annotation, name)
        if len(color) != 3 or any(not (0 <= c <= 255) for c in color):
            raise ValueError(
                f"annotation.{name} must be a BGR triple in [0, 255], got {color}."
            )

    if config.annotation.thickness <= 0:
        raise ValueError(
            f"annotation.thickness must be positive, got {config.annotation.thickness}."
        )

    if config.pipeline.workers < 1:
        raise ValueError(
            f"pipeline.workers must be at least 1, got {config.pipeline.workers}."
        )


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

def _parse_tuple(value, expected_len: int, cast_type=float):
    """Convert a list from YAML into a tuple of the expected type and length."""
    if isinstance(value, (list, tuple)):
        if len(value) != expected_len:
            raise ValueError(
                f"Expected {expected_len} values, got {len(value)}: {value}"
            )
        return tuple(cast_type(v) for v in value)
    return value


def _parse_bool(value) -> bool:
    """YAML gives real bools; environment variables give strings."""
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _build_crop_config(raw: dict) -> CropConfig:
    """Build CropConfig from a raw YAML dict."""
    kwargs = {}
    if "target_width" in raw:
        kwargs["target_width"] = int(raw["target_width"])
    if "target_height" in raw:
        kwargs["target_height"] = int(raw["target_height"])
    if "eye_align_fraction" in raw:
        kwargs["eye_align_fraction"] = float(raw["eye_align_fraction"])
    if "padding_ratio" in raw:
        kwargs["padding_ratio"] = float(raw["padding_ratio"])
    if "degenerate_policy" in raw:
        kwargs["degenerate_policy"] = str(raw["degenerate_policy"]).lower()
    return CropConfig(**kwargs)


def _build_detector_config(raw: dict) -> DetectorConfig:
    """Build DetectorConfig from a raw YAML dict."""
    kwargs = {}
    if "face_cascade" in raw:
        kwargs["face_cascade"] = str(raw["face_cascade"])
    if "eye_cascade" in raw:
        kwargs["eye_cascade"] = str(raw["eye_cascade"])
    if "scale_factor" in raw:
        kwargs["scale_factor"] = float(raw["scale_factor"])
    if "min_neighbors" in raw:
        kwargs["min_neighbors"] = int(raw["min_neighbors"])
    if "min_size" in raw:
        kwargs["min_size"] = _parse_tuple(raw["min_size"], 2, int)
    return DetectorConfig(**kwargs)


def _build_input_config(raw: dict) -> InputConfig:
    """Build InputConfig from a raw YAML dict."""
    kwargs = {}
    if "extensions" in raw:
        exts = raw["extensions"]
        if isinstance(exts, str):
            exts = exts.split(",")
        kwargs["extensions"] = tuple(
            "." + str(e).strip().lower().lstrip(".") for e in exts if str(e).strip()
        )
    return InputConfig(**kwargs)


def _build_output_config(raw: dict) -> OutputConfig:
    """Build OutputConfig from a raw YAML dict."""
    kwargs = {}
    if "report" in raw:
        kwargs["report"] = str(raw["report"]).lower()
    return OutputConfig(**kwargs)


def _build_annotation_config(raw: dict) -> AnnotationConfig:
    """Build AnnotationConfig from a raw YAML dict."""
    kwargs = {}
    if "enabled" in raw:
        kwargs["enabled"] = _parse_bool(raw["enabled"])
    if "eye_box_color" in raw:
        kwargs["eye_box_color"] = _parse_tuple(raw["eye_box_color"], 3, int)
    if "eye_line_color" in raw:
        kwargs["eye_line_color"] = _parse_tuple(raw["eye_line_color"], 3, int)
    if "thickness" in raw:
        kwargs["thickness"] = int(raw["thickness"])
    return AnnotationConfig(**kwargs)


def _build_pipeline_config(raw: dict) -> PipelineConfig:
    """Build PipelineConfig from a raw YAML dict."""
    kwargs = {}
    if "workers" in raw:
        kwargs["workers"] = int(raw["workers"])
    return PipelineConfig(**kwargs)


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------

_ENV_PREFIX = "EYE_ALIGN_"


def _apply_env_overrides(raw: dict) -> dict:
    """Apply environment variable overrides to the raw config dict.

    Environment variables follow the pattern:
        EYE_ALIGN_CROP_TARGET_WIDTH=600
        EYE_ALIGN_PIPELINE_WORKERS=4
    """
    env_map = {
        f"{_ENV_PREFIX}CROP_TARGET_WIDTH": ("crop", "target_width"),
        f"{_ENV_PREFIX}CROP_TARGET_HEIGHT": ("crop", "target_height"),
        f"{_ENV_PREFIX}CROP_EYE_ALIGN_FRACTION": ("crop", "eye_align_fraction"),
        f"{_ENV_PREFIX}CROP_PADDING_RATIO": ("crop", "padding_ratio"),
        f"{_ENV_PREFIX}CROP_DEGENERATE_POLICY": ("crop", "degenerate_policy"),
        f"{_ENV_PREFIX}DETECTOR_SCALE_FACTOR": ("detector", "scale_factor"),
        f"{_ENV_PREFIX}DETECTOR_MIN_NEIGHBORS": ("detector", "min_neighbors"),
        f"{_ENV_PREFIX}OUTPUT_REPORT": ("output", "report"),
        f"{_ENV_PREFIX}ANNOTATION_ENABLED": ("annotation", "enabled"),
        f"{_ENV_PREFIX}PIPELINE_WORKERS": ("pipeline", "workers"),
    }

    for env_var, (section, key) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            raw.setdefault(section, {})[key] = value
            logger.debug("Config override from env: %s=%s", env_var, value)

    return raw


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------

def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load and validate application configuration.

    Precedence (highest → lowest):
        Environment variables > YAML file > Hard-coded defaults

    Args:
        config_path: Path to a YAML configuration file. If None,
                     the system runs entirely on defaults.

    Returns:
        A validated, frozen AppConfig instance.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ValueError: If any configuration value is invalid.
        yaml.YAMLError: If the YAML file is malformed.
    """
    raw: dict = {}

    # --- Layer 1: YAML file ---
    if config_path is not None:
        resolved = Path(config_path)
        if not resolved.is_absolute() and not resolved.is_file():
            resolved = _PROJECT_ROOT / resolved

        if not resolved.is_file():
            raise FileNotFoundError(
                f"Configuration file not found: {resolved}. "
                f"Provide a valid path or omit to use defaults."
            )

        logger.info("Loading config from: %s", resolved)
        with open(resolved, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    # --- Layer 2: Environment variable overrides ---
    raw = _apply_env_overrides(raw)

    # --- Build typed configs ---
    config = AppConfig(
        crop=_build_crop_config(raw.get("crop", {})),
        detector=_build_detector_config(raw.get("detector", {})),
        input=_build_input_config(raw.get("input", {})),
        output=_build_output_config(raw.get("output", {})),
        annotation=_build_annotation_config(raw.get("annotation", {})),
        pipeline=_build_pipeline_config(raw.get("pipeline", {})),
    )

    validate(config)

    logger.debug("Configuration loaded: %s", config)
    return config


def validate(config: AppConfig) -> AppConfig:
    """Validate an AppConfig built or modified outside load_config.

    Returns the same config so callers can chain it after
    dataclasses.replace().
    """
    _validate(config)
    return config
