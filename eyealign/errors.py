"""
Exception taxonomy for the eye-alignment pipeline.

Setup errors (bad input directory, unusable cascade files) are fatal and
abort the run before any image is processed. GeometryDegenerate is
recoverable: the pipeline classifies it per image and moves on.

Empty detections (no face, no eyes) are NOT exceptions. They are normal
outcomes reported through pipeline.Outcome.
"""


class EyeAlignError(Exception):
    """Base class for all errors raised by this package."""


class InputDirectoryInvalid(EyeAlignError, ValueError):
    """The input directory is missing, unreadable, or holds no images."""


class ResourceSetupError(EyeAlignError, RuntimeError):
    """A detector resource (cascade file) could not be loaded."""


class GeometryDegenerate(EyeAlignError):
    """The padded crop rectangle does not fit inside the source image.

    Attributes:
        crop_size: (width, height) of the requested crop.
        image_size: (width, height) of the source image.
    """

    def __init__(self, crop_size, image_size) -> None:
        self.crop_size = crop_size
        self.image_size = image_size
        super().__init__(
            f"Crop {crop_size[0]}x{crop_size[1]} does not fit inside "
            f"image {image_size[0]}x{image_size[1]}."
        )
