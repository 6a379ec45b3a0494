"""Ray data structure.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> # Inside a Taichi kernel:
    >>> # ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
    >>> # point = ray_at(ray, 5.0)  # (0, 0, -5)
"""

import taichi as ti

from pathtracer.core.vec3 import point3, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of travel. Not required to be unit length.
    """

    origin: point3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> point3:
    """Point reached after travelling parameter ``t`` along the ray."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: point3, direction: vec3) -> Ray:
    """Create a ray inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)
