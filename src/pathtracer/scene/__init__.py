"""Scene module for scene containers, presets and ray-scene queries.

Components:
    hittable_list: Host-side ordered collection of spheres
    intersection: Device sphere arena and closest-hit query
    presets: Ready-made scenes and matching cameras

A scene is assembled in Python as a ``HittableList`` and uploaded to Taichi
fields with ``intersection.load_scene`` before rendering. The arena is
read-only while kernels run.
"""

from .hittable_list import HittableList

# Note: intersection and presets are NOT imported here. Both pull in modules
# that declare Taichi fields and must be imported after
# pathtracer.runtime.init_runtime().

__all__ = [
    "HittableList",
]
