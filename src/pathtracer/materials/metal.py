"""Metal (specular reflective) material.

Metals mirror the incoming direction about the surface normal. A fuzz
factor perturbs the mirror direction by a random point in a sphere of that
radius, modelling a rough surface. A perturbed ray that ends up pointing
into the surface is absorbed.

The reflection formula is:
    R = I - 2(I . N)N

Example:
    >>> from pathtracer.materials.metal import Metal
    >>> brushed_gold = Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
    >>> Metal(albedo=(0.8, 0.8, 0.8), fuzz=4.0).fuzz  # clamped
    1.0
"""

from dataclasses import dataclass

import taichi as ti

from pathtracer.core.vec3 import color, dot, random_in_unit_sphere, reflect, unit_vector, vec3


@dataclass(frozen=True)
class Metal:
    """Metal material properties.

    Attributes:
        albedo: The reflective color (RGB), non-negative components.
        fuzz: Surface roughness. 0 is a perfect mirror. Values above 1 are
            clamped to 1 at construction.

    Raises:
        ValueError: If any albedo component or the fuzz is negative.
    """

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        for i, component in enumerate(self.albedo):
            if component < 0.0:
                raise ValueError(f"Albedo component {i} = {component} is negative.")
        if self.fuzz < 0.0:
            raise ValueError(f"Fuzz = {self.fuzz} is negative.")
        if self.fuzz > 1.0:
            # Frozen dataclass: bypass __setattr__ to store the clamped value
            object.__setattr__(self, "fuzz", 1.0)


@ti.func
def scatter_metal(
    albedo: color,
    fuzz: ti.f64,
    incident_direction: vec3,
    normal: vec3,
):
    """Compute the scattered direction for a metal surface.

    Args:
        albedo: The reflective color.
        fuzz: Roughness in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the incoming ray.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter).
        did_scatter is 0 (absorbed) when the perturbed direction does not
        point away from the surface, i.e. dot(scattered, normal) <= 0.
    """
    reflected = reflect(unit_vector(incident_direction), normal)
    scattered_direction = reflected + fuzz * random_in_unit_sphere()

    did_scatter = 1
    if dot(scattered_direction, normal) <= 0.0:
        did_scatter = 0

    return scattered_direction, albedo, did_scatter
