"""Lambertian (ideal diffuse) material.

Diffuse surfaces scatter incoming light in a cosine-weighted distribution
around the surface normal. The scattered direction is the normal plus a
random unit vector, which produces that distribution without an explicit
pdf; the attenuation is the albedo.

Example:
    >>> from pathtracer.materials.lambertian import Lambertian
    >>> matte_red = Lambertian(albedo=(0.7, 0.1, 0.1))
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambertian(albedo, normal)
"""

from dataclasses import dataclass

import taichi as ti

from pathtracer.core.vec3 import color, near_zero, random_unit_vector, vec3


@dataclass(frozen=True)
class Lambertian:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB). Components must be
            non-negative; values above 1 amplify light.

    Raises:
        ValueError: If any albedo component is negative.
    """

    albedo: tuple[float, float, float]

    def __post_init__(self) -> None:
        for i, component in enumerate(self.albedo):
            if component < 0.0:
                raise ValueError(f"Albedo component {i} = {component} is negative.")


@ti.func
def lambertian_direction(normal: vec3, offset: vec3) -> vec3:
    """Return normal + offset, or the normal when that sum is near zero."""
    direction = normal + offset
    if near_zero(direction):
        direction = normal
    return direction


@ti.func
def scatter_lambertian(albedo: color, normal: vec3):
    """Sample a scattered direction for a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color.
        normal: The unit surface normal, facing the incoming ray.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter). If
        normal + random_unit_vector() is degenerate (near zero), the normal
        itself is used. Lambertian surfaces always scatter, so did_scatter
        is always 1.
    """
    return lambertian_direction(normal, random_unit_vector()), albedo, 1
