"""Material type tags and the closed set of host-side material variants."""

from enum import IntEnum

from pathtracer.materials.dielectric import Dielectric
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.metal import Metal


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used as the tag of the device material table and for dispatch in the
    path tracer.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


Material = Lambertian | Metal | Dielectric


def get_material_type_of(material: Material) -> MaterialType:
    """Map a host-side material instance to its type tag.

    Raises:
        TypeError: If the object is not one of the supported materials.
    """
    if isinstance(material, Lambertian):
        return MaterialType.LAMBERTIAN
    if isinstance(material, Metal):
        return MaterialType.METAL
    if isinstance(material, Dielectric):
        return MaterialType.DIELECTRIC
    raise TypeError(f"Unsupported material type: {type(material).__name__}")
