"""Render settings.

``RenderSettings`` collects the image and sampling parameters that the
command line exposes. It contains no Taichi state and can be imported before
the runtime is initialised.
"""

from dataclasses import dataclass

DEFAULT_ASPECT_RATIO = 3.0 / 2.0


@dataclass(frozen=True)
class RenderSettings:
    """Image and sampling configuration for a render.

    Attributes:
        image_width: Output width in pixels.
        aspect_ratio: Width divided by height. The height is derived from it.
        samples_per_pixel: Number of jittered camera rays averaged per pixel.
        max_depth: Maximum number of bounces per light path. 0 renders black.
        batch_size: Samples rendered between progress updates.
        jitter: Randomise the sub-pixel position of each sample. Disabling it
            aims every sample through the pixel center.

    Raises:
        ValueError: On construction, if any value is out of range.

    Example:
        >>> settings = RenderSettings(image_width=300, samples_per_pixel=50)
        >>> settings.image_height
        200
    """

    image_width: int = 400
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    samples_per_pixel: int = 10
    max_depth: int = 5
    batch_size: int = 1
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.image_width < 1 or self.image_height < 1:
            raise ValueError(
                f"Image dimensions ({self.image_width}x{self.image_height}) must be at least 1x1"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")

    @property
    def image_height(self) -> int:
        """Image height in pixels, derived from width and aspect ratio."""
        return int(self.image_width / self.aspect_ratio)
