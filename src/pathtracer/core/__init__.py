"""Core rendering module.

Components:
    vec3: Double-precision vector algebra and random sampling
    ray: Ray data structure
    integrator: Path integrator, render target and parallel sampling kernels
    progressive: Batched, progressive rendering driver

The core estimates the color reaching the camera through each pixel by
averaging independent Monte Carlo light paths. Paths bounce off materials up
to a fixed depth and pick up the sky gradient when they escape the scene.
"""

from .ray import Ray, make_ray, ray_at
from .vec3 import (
    color,
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    point3,
    random_double,
    random_in_hemisphere,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    random_vec3,
    reflect,
    refract,
    unit_vector,
    vec3,
)

# Note: integrator and progressive are NOT imported here. They declare Taichi
# fields and must be imported after pathtracer.runtime.init_runtime().

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "point3",
    "color",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit_vector",
    "near_zero",
    "reflect",
    "refract",
    "random_double",
    "random_vec3",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_hemisphere",
    "random_in_unit_disk",
]
