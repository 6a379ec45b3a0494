"""Output module for encoding, saving and previewing rendered images.

Components:
    export: Gamma/quantisation and PPM/PNG writers
    display: Matplotlib-based static preview

Both operate on the linear (H, W, 3) mean-color grid returned by the
renderer, row 0 on top.
"""

from pathtracer.output.display import show_preview
from pathtracer.output.export import (
    compute_rmse,
    encode_colors,
    save_image,
    save_png,
    write_ppm,
)

__all__ = [
    "encode_colors",
    "write_ppm",
    "save_png",
    "save_image",
    "compute_rmse",
    "show_preview",
]
