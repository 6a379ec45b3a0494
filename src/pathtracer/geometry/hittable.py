"""Hit records and the front-face normal rule shared by all intersectables.

Every intersectable exposes the same contract::

    hit_<shape>(ray, shape, t_min, t_max) -> HitRecord

returning the closest intersection with ``t_min < t < t_max``, or a record
with ``hit == 0`` when there is none. Stored normals always oppose the
incoming ray; ``front_face`` records whether the geometric outward normal had
to be flipped to achieve that.
"""

import taichi as ti

from pathtracer.core.vec3 import dot, point3, vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray intersected a surface, 0 on a miss. The remaining
            fields are only valid when hit == 1.
        t: Ray parameter at the intersection.
        point: The intersection point.
        normal: Unit surface normal, oriented against the incoming ray.
        front_face: 1 if the ray arrived from the outward-normal side,
            0 if it hit the surface from inside.
        material_id: Index of the material governing scattering at this point.
            The scene owns the material; the record only identifies it.
    """

    hit: ti.i32
    t: ti.f64
    point: point3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def face_normal(direction: vec3, outward_normal: vec3):
    """Orient an outward normal against the incoming ray direction.

    Args:
        direction: The incoming ray direction.
        outward_normal: The geometric normal, unit length, pointing out of
            the surface.

    Returns:
        A tuple (front_face, normal). front_face is 1 when
        dot(direction, outward_normal) < 0 and the outward normal is kept;
        otherwise it is 0 and the normal is negated.
    """
    front_face = 1
    normal = outward_normal
    if dot(direction, outward_normal) >= 0.0:
        front_face = 0
        normal = -outward_normal
    return front_face, normal


@ti.func
def miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )
