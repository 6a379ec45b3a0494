"""Thin-lens camera model for primary ray generation.

This module implements a positionable camera with depth of field. It supports:
- Look-at positioning (look_from, look_at, view_up)
- Vertical field of view specification
- Arbitrary aspect ratios
- Defocus blur through a circular aperture focused at ``focus_distance``

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at toward look_from (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport lies on the plane of perfect focus, ``focus_distance`` along -w.
Rays start at a random point on the lens disk and pass through the viewport
point for (s, t), so only geometry on that plane is perfectly sharp. With a
zero aperture every ray starts at ``look_from`` and the camera is a pinhole.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.camera.camera import Camera, setup_camera, get_ray
    >>>
    >>> camera = Camera(
    ...     look_from=(13.0, 2.0, 3.0),
    ...     look_at=(0.0, 0.0, 0.0),
    ...     view_up=(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=3.0 / 2.0,
    ...     aperture=0.1,
    ...     focus_distance=10.0,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from pathtracer.core.ray import Ray, make_ray
from pathtracer.core.vec3 import random_in_unit_disk

logger = logging.getLogger(__name__)

# Tolerance for degenerate camera bases
_DEGENERATE_EPSILON = 1e-12

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Configuration for a thin-lens camera.

    Attributes:
        look_from: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at in world space (x, y, z).
        view_up: Up direction used to orient the camera (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 disables defocus blur.
        focus_distance: Distance from look_from to the plane of perfect focus.
    """

    look_from: tuple[float, float, float]
    look_at: tuple[float, float, float]
    view_up: tuple[float, float, float]
    vfov: float
    aspect_ratio: float
    aperture: float = 0.0
    focus_distance: float = 1.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f64, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f64, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f64, shape=())  # Backward (opposite view)

# Viewport on the focus plane
_horizontal = ti.Vector.field(3, dtype=ti.f64, shape=())  # Full width
_vertical = ti.Vector.field(3, dtype=ti.f64, shape=())  # Full height
_lower_left_corner = ti.Vector.field(3, dtype=ti.f64, shape=())

_lens_radius = ti.field(dtype=ti.f64, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def _validate_camera(camera: Camera) -> None:
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"vfov must be in (0, 180) degrees, got {camera.vfov}")
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"aspect_ratio must be positive, got {camera.aspect_ratio}")
    if camera.aperture < 0.0:
        raise ValueError(f"aperture must be non-negative, got {camera.aperture}")
    if camera.focus_distance <= 0.0:
        raise ValueError(f"focus_distance must be positive, got {camera.focus_distance}")


def setup_camera(camera: Camera) -> None:
    """Initialize camera state from configuration.

    Computes the orthonormal basis (u, v, w), the viewport on the focus plane
    and the lens radius, and stores them in Taichi fields. The state is
    read-only for every kernel launched afterwards.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the field of view, aspect ratio, aperture or focus
            distance is out of range, if look_from equals look_at, or if
            view_up is parallel to the view direction.
    """
    _validate_camera(camera)

    theta = math.radians(camera.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h
    viewport_width = camera.aspect_ratio * viewport_height

    look_from = np.array(camera.look_from, dtype=np.float64)
    look_at = np.array(camera.look_at, dtype=np.float64)
    view_up = np.array(camera.view_up, dtype=np.float64)

    # w points from look_at toward look_from (backward)
    w = look_from - look_at
    w_norm = np.linalg.norm(w)
    if w_norm < _DEGENERATE_EPSILON:
        raise ValueError("look_from and look_at must be distinct points")
    w = w / w_norm

    # u points right (perpendicular to w and view_up)
    u = np.cross(view_up, w)
    u_norm = np.linalg.norm(u)
    if u_norm < _DEGENERATE_EPSILON:
        raise ValueError("view_up must not be parallel to the view direction")
    u = u / u_norm

    v = np.cross(w, u)

    horizontal = camera.focus_distance * viewport_width * u
    vertical = camera.focus_distance * viewport_height * v
    lower_left = look_from - horizontal / 2.0 - vertical / 2.0 - camera.focus_distance * w

    _camera_origin[None] = look_from.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _horizontal[None] = horizontal.tolist()
    _vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()
    _lens_radius[None] = camera.aperture / 2.0

    logger.debug(
        "Camera at %s looking at %s (vfov=%.1f, aperture=%.3f, focus=%.3f)",
        camera.look_from,
        camera.look_at,
        camera.vfov,
        camera.aperture,
        camera.focus_distance,
    )


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(s: ti.f64, t: ti.f64) -> Ray:
    """Generate a primary ray through normalized image coordinates (s, t).

    - s = 0: left edge, s = 1: right edge
    - t = 0: bottom edge, t = 1: top edge

    The origin is offset by a random point on the lens disk; the direction
    is not normalized.

    Args:
        s: Horizontal coordinate in [0, 1].
        t: Vertical coordinate in [0, 1].

    Returns:
        A Ray from the lens toward the focus-plane point for (s, t).
    """
    rd = _lens_radius[None] * random_in_unit_disk()
    offset = _camera_u[None] * rd.x + _camera_v[None] * rd.y

    origin = _camera_origin[None] + offset
    direction = (
        _lower_left_corner[None] + s * _horizontal[None] + t * _vertical[None] - origin
    )

    return make_ray(origin, direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float] | float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left
        and lens_radius.
    """

    def _as_tuple(field) -> tuple[float, float, float]:
        vec = field[None]
        return (float(vec[0]), float(vec[1]), float(vec[2]))

    return {
        "origin": _as_tuple(_camera_origin),
        "u": _as_tuple(_camera_u),
        "v": _as_tuple(_camera_v),
        "w": _as_tuple(_camera_w),
        "horizontal": _as_tuple(_horizontal),
        "vertical": _as_tuple(_vertical),
        "lower_left": _as_tuple(_lower_left_corner),
        "lens_radius": float(_lens_radius[None]),
    }
