"""Materials module for light scattering models.

Components:
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    types: Material type tags and the Material union
    registry: Device-side material arena and scatter dispatch

Each material provides a scatter function returning
(scattered_direction, attenuation, did_scatter); did_scatter == 0 means the
ray was absorbed and contributes no light.
"""

from .dielectric import Dielectric, schlick_reflectance, scatter_dielectric, will_reflect
from .lambertian import Lambertian, lambertian_direction, scatter_lambertian
from .metal import Metal, scatter_metal
from .types import Material, MaterialType, get_material_type_of

# Note: registry is NOT imported here. It declares Taichi fields and must be
# imported after pathtracer.runtime.init_runtime().

__all__ = [
    "Material",
    "MaterialType",
    "get_material_type_of",
    # Lambertian
    "Lambertian",
    "scatter_lambertian",
    "lambertian_direction",
    # Metal
    "Metal",
    "scatter_metal",
    # Dielectric
    "Dielectric",
    "scatter_dielectric",
    "schlick_reflectance",
    "will_reflect",
]
