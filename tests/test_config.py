"""
Tests for the configuration module.
"""

import pytest

from eyealign.config import (
    AppConfig,
    CropConfig,
    DetectorConfig,
    PipelineConfig,
    _validate,
    load_config,
    round_half_up,
)


def test_load_defaults():
    """Test loading configuration without any file."""
    config = load_config(None)
    assert isinstance(config, AppConfig)
    assert config.crop.target_size == (900, 1200)
    assert config.crop.final_eye_y == 400
    assert config.crop.degenerate_policy == "reject"
    assert config.annotation.enabled is False
    assert config.input.extensions == (".jpg", ".jpeg", ".png")
    assert config.pipeline.workers == 1


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(933.33) == 933
    assert round_half_up(800.0) == 800
    assert round_half_up(0.49) == 0


def test_validation_failure():
    """Test fail-fast validation."""
    with pytest.raises(ValueError, match="eye_align_fraction"):
        _validate(AppConfig(crop=CropConfig(eye_align_fraction=1.5)))

    with pytest.raises(ValueError, match="target size"):
        _validate(AppConfig(crop=CropConfig(target_width=0)))

    with pytest.raises(ValueError, match="degenerate_policy"):
        _validate(AppConfig(crop=CropConfig(degenerate_policy="stretch")))

    with pytest.raises(ValueError, match="scale_factor"):
        _validate(AppConfig(detector=DetectorConfig(scale_factor=1.0)))

    with pytest.raises(ValueError, match="workers"):
        _validate(AppConfig(pipeline=PipelineConfig(workers=0)))


def test_env_override(monkeypatch):
    """Test environment variable overrides."""
    monkeypatch.setenv("EYE_ALIGN_CROP_TARGET_WIDTH", "600")
    monkeypatch.setenv("EYE_ALIGN_PIPELINE_WORKERS", "3")
    monkeypatch.setenv("EYE_ALIGN_ANNOTATION_ENABLED", "true")

    config = load_config(None)

    assert config.crop.target_width == 600
    assert config.pipeline.workers == 3
    assert config.annotation.enabled is True


def test_invalid_report_format(monkeypatch):
    monkeypatch.setenv("EYE_ALIGN_OUTPUT_REPORT", "json,xml")
    with pytest.raises(ValueError, match="report"):
        load_config(None)


def test_blank_report_means_none(monkeypatch):
    monkeypatch.setenv("EYE_ALIGN_OUTPUT_REPORT", "")

    config = load_config(None)

    assert config.output.report_formats == ()


def test_yaml_file(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "crop:\n"
        "  target_width: 413\n"
        "  target_height: 531\n"
        "  degenerate_policy: FULL_IMAGE\n"
        "input:\n"
        "  extensions: [JPG, .png]\n"
        "output:\n"
        "  report: json,csv\n"
        "annotation:\n"
        "  eye_line_color: [255, 0, 0]\n",
        encoding="utf-8",
    )

    config = load_config(str(config_file))

    assert config.crop.target_size == (413, 531)
    assert config.crop.degenerate_policy == "full_image"
    assert config.input.extensions == (".jpg", ".png")
    assert config.output.report_formats == ("json", "csv")
    assert config.annotation.eye_line_color == (255, 0, 0)


def test_missing_yaml_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))
