"""Sphere primitive with ray-sphere intersection.

The host-side ``Sphere`` describes a sphere in a scene (center, radius and
the material it is made of). ``SphereGeometry`` is its device-side
counterpart used inside kernels, and ``hit_sphere`` solves the ray-sphere
quadratic for it.

Example:
    >>> from pathtracer.geometry.sphere import Sphere
    >>> from pathtracer.materials import Lambertian
    >>> ball = Sphere(center=(0.0, 0.0, -1.0), radius=0.5, material=Lambertian((0.7, 0.3, 0.3)))
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

import taichi as ti

from pathtracer.core.ray import Ray, ray_at
from pathtracer.core.vec3 import dot, length_squared, point3
from pathtracer.geometry.hittable import HitRecord, face_normal

if TYPE_CHECKING:
    from pathtracer.materials import Material


@dataclass(frozen=True)
class Sphere:
    """A sphere in a scene.

    Attributes:
        center: Center point (x, y, z).
        radius: Radius, strictly positive.
        material: The material the sphere is made of. One material instance
            may be shared by many spheres.

    Raises:
        ValueError: If the radius is not positive.
    """

    center: tuple[float, float, float]
    radius: float
    material: "Material"

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@ti.dataclass
class SphereGeometry:
    """Device-side sphere geometry.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere.
    """

    center: point3
    radius: ti.f64


@ti.func
def hit_sphere(
    ray: Ray,
    sphere: SphereGeometry,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Solves |O + tD - C|^2 = r^2, i.e. a*t^2 + 2*half_b*t + c = 0 with:
        a = dot(D, D)
        half_b = dot(O - C, D)
        c = dot(O - C, O - C) - r^2

    A negative discriminant (half_b^2 - a*c) means the ray misses. The nearer
    root is used when it lies in (t_min, t_max), otherwise the farther one,
    otherwise there is no hit.

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        t_min: Exclusive lower bound on the hit parameter.
        t_max: Exclusive upper bound on the hit parameter.

    Returns:
        A HitRecord; material_id is left at -1 for the caller to fill in.
    """
    oc = ray.origin - sphere.center
    a = length_squared(ray.direction)
    half_b = dot(oc, ray.direction)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    # Result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = point3(0.0, 0.0, 0.0)
    hit_normal = point3(0.0, 0.0, 0.0)
    is_front_face = 0

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        root = (-half_b - sqrt_d) / a
        valid = (root > t_min) and (root < t_max)
        if not valid:
            root = (-half_b + sqrt_d) / a
            valid = (root > t_min) and (root < t_max)

        if valid:
            did_hit = 1
            hit_t = root
            hit_point = ray_at(ray, root)
            outward_normal = (hit_point - sphere.center) / sphere.radius
            is_front_face, hit_normal = face_normal(ray.direction, outward_normal)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
        material_id=-1,
    )
