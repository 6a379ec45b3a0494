"""Image export utilities for rendered images.

This module turns the linear mean-color grid produced by the renderer into
8-bit pixels and writes them to disk.

The encoding applied to every channel:
    1. NaN and infinities become 0, negative values become 0
    2. Gamma 2 correction (square root)
    3. Clamp to [0, 0.999]
    4. Quantise as int(256 * c), giving 0..255

Supported formats:
    - PPM (plain-text P3, written directly)
    - PNG and any other raster format Pillow can write

Example:
    >>> from pathtracer.output.export import save_image
    >>> save_image("final.ppm", image)
    >>> save_image("final.png", image)
"""

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

# Upper clamp before quantisation so that 256 * c stays below 256
MAX_INTENSITY = 0.999

PPM_MAX_VALUE = 255


def encode_colors(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert linear colors to gamma-corrected 8-bit values.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    linear = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0, posinf=0.0, neginf=0.0)
    linear = np.maximum(linear, 0.0)

    corrected = np.clip(np.sqrt(linear), 0.0, MAX_INTENSITY)

    return (256.0 * corrected).astype(np.uint8)


def _check_image_shape(image: npt.NDArray[np.floating]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")


def write_ppm(filepath: str | Path, image: npt.NDArray[np.floating]) -> None:
    """Write an image as a plain-text PPM (P3) file.

    The header is ``P3``, then ``width height``, then ``255``; one
    ``r g b`` line per pixel follows, top row first, left to right.

    Args:
        filepath: Output file path.
        image: Linear image array of shape (H, W, 3), row 0 on top.

    Raises:
        ValueError: If the image does not have shape (H, W, 3).
    """
    _check_image_shape(image)
    pixels = encode_colors(image)
    height, width, _ = pixels.shape

    lines = ["P3", f"{width} {height}", str(PPM_MAX_VALUE)]
    lines.extend(f"{r} {g} {b}" for r, g, b in pixels.reshape(-1, 3))

    Path(filepath).write_text("\n".join(lines) + "\n", encoding="ascii")
    logger.info("Wrote %dx%d PPM image to %s", width, height, filepath)


def save_png(filepath: str | Path, image: npt.NDArray[np.floating]) -> None:
    """Save an image with Pillow; the format follows the file extension.

    Args:
        filepath: Output file path (e.g. "output.png").
        image: Linear image array of shape (H, W, 3), row 0 on top.

    Raises:
        ValueError: If the image does not have shape (H, W, 3).
    """
    _check_image_shape(image)
    pixels = encode_colors(image)

    pil_image = PILImage.fromarray(pixels)
    pil_image.save(filepath)
    logger.info("Wrote %dx%d image to %s", pixels.shape[1], pixels.shape[0], filepath)


def save_image(filepath: str | Path, image: npt.NDArray[np.floating]) -> None:
    """Save an image, choosing PPM or Pillow from the file suffix."""
    if Path(filepath).suffix.lower() == ".ppm":
        write_ppm(filepath, image)
    else:
        save_png(filepath, image)


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Root mean squared difference of two linear mean-color grids.

    Used to measure Monte Carlo convergence against a high sample count
    reference; the error shrinks roughly as 1/sqrt(samples_per_pixel).

    Raises:
        ValueError: If the shapes differ.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    squared = np.square(np.subtract(image_a, image_b, dtype=np.float64))
    return float(np.sqrt(squared.mean()))
