"""Dielectric (glass/water) material.

Dielectrics both reflect and refract. Which one happens to a given ray is
decided stochastically from Schlick's approximation of the Fresnel
reflectance, so reflections brighten at grazing angles. When Snell's law has
no solution (total internal reflection) the ray always reflects.

Key physics:
    - Snell's law: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick: R(theta) = r0 + (1 - r0)(1 - cos(theta))^5,
      r0 = ((1 - eta) / (1 + eta))^2
    - Total internal reflection when eta * sin(theta) > 1

Dielectrics absorb nothing: the attenuation is always white.

Example:
    >>> from pathtracer.materials.dielectric import Dielectric
    >>> glass = Dielectric(refractive_index=1.5)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtracer.core.vec3 import dot, reflect, refract, unit_vector, vec3


@dataclass(frozen=True)
class Dielectric:
    """Dielectric material properties.

    Attributes:
        refractive_index: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4

    Raises:
        ValueError: If the refractive index is not positive.
    """

    refractive_index: float = 1.5

    def __post_init__(self) -> None:
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Refractive index = {self.refractive_index} must be positive."
            )


@ti.func
def schlick_reflectance(cosine: ti.f64, refraction_ratio: ti.f64) -> ti.f64:
    """Approximate Fresnel reflectance with Schlick's formula.

    Args:
        cosine: Cosine of the angle between the incoming ray and the normal.
        refraction_ratio: Ratio of refractive indices across the boundary.

    Returns:
        The reflectance in [0, 1].
    """
    r0 = (1.0 - refraction_ratio) / (1.0 + refraction_ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def _refraction_ratio(refractive_index: ti.f64, front_face: ti.i32) -> ti.f64:
    # Entering: air to material. Leaving: material to air.
    ratio = refractive_index
    if front_face == 1:
        ratio = 1.0 / refractive_index
    return ratio


@ti.func
def will_reflect(
    refractive_index: ti.f64,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
) -> ti.i32:
    """Return 1 if the ray is totally internally reflected, 0 otherwise."""
    refraction_ratio = _refraction_ratio(refractive_index, front_face)
    cos_theta = tm.min(dot(-unit_vector(incident_direction), normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)

    return refraction_ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(
    refractive_index: ti.f64,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Compute the scattered direction for a dielectric surface.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the incoming ray.
        front_face: 1 if the ray enters the material from outside,
            0 if it is leaving the material.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter) where the
        attenuation is white and did_scatter is always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    refraction_ratio = _refraction_ratio(refractive_index, front_face)
    unit_direction = unit_vector(incident_direction)
    cos_theta = tm.min(dot(-unit_direction, normal), 1.0)

    cannot_refract = will_reflect(refractive_index, incident_direction, normal, front_face)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or schlick_reflectance(cos_theta, refraction_ratio) > ti.random(ti.f64):
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, refraction_ratio)

    return scattered_direction, attenuation, 1

