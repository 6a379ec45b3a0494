"""Preset scenes and matching cameras.

Two scenes are provided:
- ``final_scene``: a large glass, a diffuse and a metal sphere on a grey
  ground plane, surrounded by a grid of small randomly placed spheres with
  random materials.
- ``three_spheres_scene``: a small scene with one sphere of each material,
  useful for quick previews and tests.

Scene construction is host-side Python. Randomness comes from a seeded
``numpy.random.Generator`` so a given seed always builds the same scene.

Example:
    >>> from pathtracer.scene.presets import final_scene, final_scene_camera
    >>> world = final_scene(seed=42)
    >>> camera = final_scene_camera(aspect_ratio=3.0 / 2.0)
"""

import numpy as np

from pathtracer.camera.camera import Camera
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials import Dielectric, Lambertian, Material, Metal
from pathtracer.scene.hittable_list import HittableList

# =============================================================================
# Final Scene Parameters
# =============================================================================

GROUND_ALBEDO = (0.5, 0.5, 0.5)
GROUND_CENTER = (0.0, -1000.0, -1.0)
GROUND_RADIUS = 1000.0

# Small spheres are placed on a 22 x 22 lattice, one per cell
GRID_RANGE = range(-11, 11)
SMALL_RADIUS = 0.2
# Small spheres closer than this to the metal sphere's footprint are skipped
CLEARANCE_POINT = np.array([4.0, 0.2, 0.0])
CLEARANCE = 0.9

# Probability thresholds for the small sphere materials
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.95

GLASS_IOR = 1.5


def _random_small_material(rng: np.random.Generator) -> Material:
    """Draw a material for one of the small spheres."""
    choose_material = rng.random()
    if choose_material < DIFFUSE_PROBABILITY:
        albedo = rng.random(3) * rng.random(3)
        return Lambertian(tuple(float(c) for c in albedo))
    if choose_material < METAL_PROBABILITY:
        albedo = rng.uniform(0.5, 1.0, 3)
        fuzz = float(rng.uniform(0.0, 0.5))
        return Metal(tuple(float(c) for c in albedo), fuzz)
    return Dielectric(GLASS_IOR)


def final_scene(seed: int = 0) -> HittableList:
    """Build the final scene.

    Args:
        seed: Seed for the placement and material of the small spheres.

    Returns:
        The populated scene.
    """
    rng = np.random.default_rng(seed)
    world = HittableList()

    world.add(Sphere(GROUND_CENTER, GROUND_RADIUS, Lambertian(GROUND_ALBEDO)))

    for a in GRID_RANGE:
        for b in GRID_RANGE:
            center = np.array([a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random()])

            if np.linalg.norm(center - CLEARANCE_POINT) > CLEARANCE:
                material = _random_small_material(rng)
                world.add(Sphere(tuple(float(c) for c in center), SMALL_RADIUS, material))

    world.add(Sphere((0.0, 1.0, 0.0), 1.0, Dielectric(GLASS_IOR)))
    world.add(Sphere((-4.0, 1.0, 0.0), 1.0, Lambertian((0.4, 0.4, 0.1))))
    world.add(Sphere((4.0, 1.0, 0.0), 1.0, Metal((0.7, 0.6, 0.5), 0.0)))

    return world


def final_scene_camera(aspect_ratio: float = 3.0 / 2.0) -> Camera:
    """Camera looking at the final scene from a low, distant viewpoint."""
    return Camera(
        look_from=(13.0, 2.0, 3.0),
        look_at=(0.0, 0.0, 0.0),
        view_up=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_distance=10.0,
    )


def three_spheres_scene() -> HittableList:
    """Build a small scene with one sphere of each material on a ground sphere."""
    ground = Lambertian((0.8, 0.8, 0.0))
    center = Lambertian((0.1, 0.2, 0.5))
    left = Dielectric(GLASS_IOR)
    right = Metal((0.8, 0.6, 0.2), 0.0)

    return HittableList(
        [
            Sphere((0.0, -100.5, -1.0), 100.0, ground),
            Sphere((0.0, 0.0, -1.0), 0.5, center),
            Sphere((-1.0, 0.0, -1.0), 0.5, left),
            Sphere((1.0, 0.0, -1.0), 0.5, right),
        ]
    )


def three_spheres_camera(aspect_ratio: float = 16.0 / 9.0) -> Camera:
    """Camera facing the three spheres head-on, without depth of field."""
    return Camera(
        look_from=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        view_up=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=aspect_ratio,
    )

