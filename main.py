"""
Eye Align CLI Entrypoint.

Responsibility:
    Parse command-line arguments, configure the application, wire together
    the detector, codec and output handler, and run the batch.

Usage:
    python main.py photos/ cropped/ false
    python main.py photos/ cropped/ true --workers 4 --report json,csv
    python main.py photos/ cropped/ false --config my_config.yaml

The third positional argument turns on debug overlays (eye boxes and the
eye line); only the literal "true" (any case) enables it.

This module is the executable entry point. It should not be imported
by other modules.
"""

import argparse
import dataclasses
import logging
import sys
import time

# Configure logging before importing local modules
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("main")

from eyealign.codec import OpenCVCodec
from eyealign.config import AppConfig, load_config, validate
from eyealign.detector import CascadeDetector
from eyealign.errors import InputDirectoryInvalid, ResourceSetupError
from eyealign.input_handler import discover_images
from eyealign.output_handler import OutputHandler
from eyealign.pipeline import BatchReport, ImageResult, Pipeline


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Eye-aligned ID photo cropper",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("input_dir", help="Directory of .jpg/.jpeg/.png images.")
    parser.add_argument("output_dir", help="Directory for processed images (created if absent).")
    parser.add_argument(
        "show_lines",
        help="'true' to draw eye boxes and the eye line before cropping.",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to YAML configuration file.",
    )
    parser.add_argument("--width", type=int, help="Output width in pixels. Overrides config.")
    parser.add_argument("--height", type=int, help="Output height in pixels. Overrides config.")
    parser.add_argument(
        "--eye-fraction",
        type=float,
        help="Fraction of output height where the eye line lands. Overrides config.",
    )
    parser.add_argument(
        "--on-degenerate",
        choices=["reject", "full_image"],
        help="Policy when the padded crop is larger than the image. Overrides config.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of images processed concurrently. Overrides config.",
    )
    parser.add_argument(
        "--report",
        type=str,
        help="Batch report format(s): 'json', 'csv', 'json,csv' or 'none'. Overrides config.",
    )

    return parser.parse_args(argv)


def parse_flag(value: str) -> bool:
    """Only 'true' (case-insensitive) is true; everything else is false."""
    return value.strip().lower() == "true"


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Return a validated copy of config with CLI overrides applied."""
    crop_changes = {}
    if args.width is not None:
        crop_changes["target_width"] = args.width
    if args.height is not None:
        crop_changes["target_height"] = args.height
    if args.eye_fraction is not None:
        crop_changes["eye_align_fraction"] = args.eye_fraction
    if args.on_degenerate is not None:
        crop_changes["degenerate_policy"] = args.on_degenerate

    config = dataclasses.replace(
        config,
        crop=dataclasses.replace(config.crop, **crop_changes),
        annotation=dataclasses.replace(config.annotation, enabled=parse_flag(args.show_lines)),
    )

    if args.workers is not None:
        config = dataclasses.replace(
            config, pipeline=dataclasses.replace(config.pipeline, workers=args.workers),
        )

    if args.report is not None:
        config = dataclasses.replace(
            config, output=dataclasses.replace(config.output, report=args.report.lower()),
        )

    return validate(config)


def log_result(result: ImageResult) -> None:
    """One log line per file, at a level matching its status."""
    name = result.source.name
    if result.status == "processed":
        if result.message:
            logger.warning("%s: %s", name, result.message)
        logger.info("Processed: %s", name)
    elif result.status == "skipped":
        logger.warning("%s: %s", name, result.message)
    else:
        logger.error("%s [%s]: %s", name, result.outcome.value, result.message)


def main(argv=None) -> int:
    """Main execution loop."""
    args = parse_args(argv)

    # 1. Load Configuration (CLI args > ENV > YAML > Defaults)
    try:
        config = apply_overrides(load_config(args.config), args)
        logger.info("Configuration active for this run.")
    except Exception as e:
        logger.error("Configuration error: %s", e)
        return 1

    # 2. Initialize Components (fatal errors abort before any image)
    try:
        sources = discover_images(args.input_dir, config.input.extensions)
        detector = CascadeDetector(config.detector)
        codec = OpenCVCodec()
        output_handler = OutputHandler(args.output_dir, codec, config.output)
        pipeline = Pipeline(config, detector, codec, output_handler)

    except (InputDirectoryInvalid, ResourceSetupError, FileNotFoundError, OSError) as e:
        logger.error("Initialization failed: %s", e)
        return 1
    except Exception as e:
        logger.exception("Unexpected initialization error: %s", e)
        return 1

    # 3. Processing Loop
    start_time = time.perf_counter()
    report = BatchReport()
    try:
        for result in pipeline.run(sources):
            log_result(result)
            report.add(result)
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
    except Exception as e:
        logger.exception("Runtime error during processing: %s", e)
        return 1
    finally:
        elapsed = time.perf_counter() - start_time
        output_handler.finalize(report)

    logger.info(
        "Done! %d processed, %d skipped, %d failed in %.2fs.",
        report.processed, report.skipped, report.failed, elapsed,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
