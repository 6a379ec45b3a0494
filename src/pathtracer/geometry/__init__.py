"""Geometry module for hit records and shape primitives.

Components:
    hittable: HitRecord structure and the front-face normal rule
    sphere: Sphere primitive with ray-sphere intersection

Intersection routines are Taichi functions following the pattern:
    rec = hit_<shape>(ray, shape, t_min, t_max)
"""

from .hittable import HitRecord, face_normal, miss_record
from .sphere import Sphere, SphereGeometry, hit_sphere

__all__ = [
    "HitRecord",
    "face_normal",
    "miss_record",
    "Sphere",
    "SphereGeometry",
    "hit_sphere",
]
