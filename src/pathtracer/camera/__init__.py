"""Camera module for primary ray generation.

Components:
    camera: Thin-lens camera with look-at positioning and defocus blur

Ray generation uses normalized image coordinates:
    s in [0, 1]: left to right across the image
    t in [0, 1]: bottom to top across the image

The camera module declares Taichi fields; import it after
pathtracer.runtime.init_runtime().
"""

from .camera import Camera, get_camera_info, get_ray, setup_camera

__all__ = [
    "Camera",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]
