"""Device-side material arena and scatter dispatch.

Materials are stored in a single Structure-of-Arrays table indexed by
material ID. Each row carries a ``MaterialType`` tag plus the parameters of
every variant; only the columns relevant to the tag are read:

    =============  ==============  ===========  ==================
    type           albedo          fuzz         refractive_index
    =============  ==============  ===========  ==================
    LAMBERTIAN     used            -            -
    METAL          used            used         -
    DIELECTRIC     -               -            used
    =============  ==============  ===========  ==================

``scatter`` pattern-matches on the tag and forwards to the variant's scatter
function. The arena is filled from host-side material dataclasses before a
render and is read-only while kernels run.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.materials import Dielectric, Metal
    >>> from pathtracer.materials.registry import add_material, clear_materials
    >>> clear_materials()
    >>> glass_id = add_material(Dielectric(1.5))
    >>> mirror_id = add_material(Metal((0.9, 0.9, 0.9), fuzz=0.0))
"""

import taichi as ti

from pathtracer.core.ray import Ray
from pathtracer.core.vec3 import vec3
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.dielectric import scatter_dielectric
from pathtracer.materials.lambertian import scatter_lambertian
from pathtracer.materials.metal import scatter_metal
from pathtracer.materials.types import Material, MaterialType, get_material_type_of

# Maximum number of materials in the arena
MAX_MATERIALS = 1024

material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing rows will be overwritten
    when new materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Add a material to the arena.

    Args:
        material: A Lambertian, Metal or Dielectric instance.

    Returns:
        The material ID (row index) of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        TypeError: If the material type is not supported.
    """
    material_type = get_material_type_of(material)

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    albedo = (0.0, 0.0, 0.0)
    fuzz = 0.0
    refractive_index = 1.0
    if material_type == MaterialType.LAMBERTIAN:
        albedo = material.albedo
    elif material_type == MaterialType.METAL:
        albedo = material.albedo
        fuzz = material.fuzz
    else:
        refractive_index = material.refractive_index

    material_types[idx] = int(material_type)
    material_albedos[idx] = [albedo[0], albedo[1], albedo[2]]
    material_fuzz[idx] = fuzz
    material_refractive_indices[idx] = refractive_index
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the arena."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the type tag of a material, or -1 for an invalid ID."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def scatter(ray_in: Ray, rec: HitRecord):
    """Scatter an incoming ray off the material recorded in ``rec``.

    The scattered ray starts at ``rec.point``; only its direction is
    returned.

    Args:
        ray_in: The incoming ray.
        rec: The hit record of the intersection being shaded.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter) where
        did_scatter is 0 if the ray was absorbed. Rays hitting an invalid
        material ID are absorbed.
    """
    mat_type = get_material_type(rec.material_id)
    material_id = rec.material_id

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian(
            material_albedos[material_id], rec.normal
        )

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal(
            material_albedos[material_id],
            material_fuzz[material_id],
            ray_in.direction,
            rec.normal,
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric(
            material_refractive_indices[material_id],
            ray_in.direction,
            rec.normal,
            rec.front_face,
        )

    return scattered_direction, attenuation, did_scatter
