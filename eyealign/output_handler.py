"""
Output handling for the eye-alignment pipeline.

Responsibility:
    Own the output directory: map input files to flat output paths,
    write processed images through the codec, copy originals through
    untouched, and write batch reports on finalize.

Non-goals:
    - No detection or geometry.
    - No cleanup of stale files from earlier runs.
"""

import logging
import shutil
from pathlib import Path
from typing import Union

import numpy as np

from eyealign.codec import ImageCodec
from eyealign.config import OutputConfig
from eyealign.serializer import save_csv, save_json

logger = logging.getLogger(__name__)


class OutputHandler:
    """Writes results into a flat output directory.

    Output files keep the input's file name; directory structure is not
    preserved. Because names map 1:1 from inputs, concurrent workers
    never write the same path.

    Usage:
        handler = OutputHandler(output_dir, codec, config.output)
        handler.write(source, image)
        handler.passthrough(source)
        ...
        handler.finalize(report)
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        codec: ImageCodec,
        config: OutputConfig = OutputConfig(),
    ) -> None:
        """Initialize the handler and create the output directory.

        Raises:
            OSError: If the directory cannot be created.
        """
        self._output_dir = Path(output_dir)
        self._codec = codec
        self._config = config

        self._output_dir.mkdir(parents=True, exist_ok=True)

        logger.info(
            "OutputHandler initialized: output_dir=%s, reports=%s",
            self._output_dir, self._config.report_formats or "none",
        )

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def output_path_for(self, source: Union[str, Path]) -> Path:
        """Output location for an input file (same name, flat)."""
        return self._output_dir / Path(source).name

    def write(self, source: Union[str, Path], image: np.ndarray) -> Path:
        """Encode image to the output path for source.

        Raises:
            OSError: If the codec reports a failed write.
        """
        destination = self.output_path_for(source)
        if not self._codec.encode(image, destination):
            raise OSError(f"Failed to encode image to {destination}")
        logger.debug("Wrote %s", destination)
        return destination

    def passthrough(self, source: Union[str, Path]) -> Path:
        """Copy the original file byte-for-byte to its output path."""
        destination = self.output_path_for(source)
        if Path(source).resolve() != destination.resolve():
            shutil.copyfile(source, destination)
        logger.debug("Copied original %s to %s", source, destination)
        return destination

    def finalize(self, report) -> None:
        """Write the configured batch reports.

        Must be called after all images have been processed.
        """
        formats = self._config.report_formats

        if "json" in formats:
            save_json(report, str(self._output_dir / "report.json"))

        if "csv" in formats:
            save_csv(report, str(self._output_dir / "report.csv"))

        logger.info("OutputHandler finalized.")
