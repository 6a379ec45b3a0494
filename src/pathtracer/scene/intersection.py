"""Scene-level ray intersection over the device sphere arena.

Spheres are stored in Taichi fields (Structure-of-Arrays layout) together
with the ID of the material each one references. ``hit_world`` scans all of
them and returns the closest hit; there is no acceleration structure.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.scene.intersection import load_scene
    >>> from pathtracer.scene.presets import three_spheres_scene
    >>> load_scene(three_spheres_scene())
    >>> # Use hit_world within a Taichi kernel
"""

import logging

import taichi as ti

from pathtracer.core.ray import Ray
from pathtracer.geometry.hittable import HitRecord, miss_record
from pathtracer.geometry.sphere import SphereGeometry, hit_sphere
from pathtracer.materials.registry import add_material, clear_materials
from pathtracer.scene.hittable_list import HittableList

logger = logging.getLogger(__name__)

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the arena.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Add a sphere to the arena.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID the sphere references.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the arena."""
    return int(num_spheres[None])


def load_scene(world: HittableList) -> dict[int, int]:
    """Upload a scene to the device arenas, replacing their contents.

    Every distinct material instance is stored once and every sphere
    references it by ID.

    Args:
        world: The scene to upload.

    Returns:
        Mapping from id() of each host material to its device material ID.

    Raises:
        RuntimeError: If the scene exceeds the sphere or material capacity.
    """
    clear_scene()
    clear_materials()

    material_ids: dict[int, int] = {}
    for material in world.materials():
        material_ids[id(material)] = add_material(material)

    for sphere in world:
        add_sphere(sphere.center, sphere.radius, material_ids[id(sphere.material)])

    logger.debug(
        "Loaded scene with %d spheres and %d materials", len(world), len(material_ids)
    )
    return material_ids


@ti.func
def hit_world(ray: Ray, t_min: ti.f64, t_max: ti.f64) -> HitRecord:
    """Find the closest intersection of a ray with the scene.

    Every sphere is tested with the upper bound narrowed to the closest hit
    found so far, so later spheres can only report closer hits and one pass
    suffices.

    Args:
        ray: The ray to trace.
        t_min: Exclusive lower bound on the hit parameter.
        t_max: Exclusive upper bound on the hit parameter.

    Returns:
        The closest HitRecord with its material_id set, or a miss record.
    """
    closest_so_far = t_max
    result = miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = SphereGeometry(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray, sphere, t_min, closest_so_far)
        if rec.hit == 1:
            closest_so_far = rec.t
            result = HitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                front_face=rec.front_face,
                material_id=sphere_material_ids[i],
            )

    return result
