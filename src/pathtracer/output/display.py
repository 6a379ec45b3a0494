"""Matplotlib-based preview display for rendered images.

The preview shows exactly the pixels that would be written to disk: the
image goes through the same gamma and quantisation as the file writers.

Example:
    >>> from pathtracer.output.display import show_preview
    >>> show_preview(image, title="Final scene - 10 SPP")
"""

import numpy as np
import numpy.typing as npt

from pathtracer.output.export import encode_colors


def show_preview(
    image: npt.NDArray[np.floating],
    title: str | None = None,
    *,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: Linear image array of shape (H, W, 3), row 0 on top.
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    pixels = encode_colors(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(pixels)
    ax.axis("off")

    if title is None:
        title = f"Render Preview - {pixels.shape[1]}x{pixels.shape[0]}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
