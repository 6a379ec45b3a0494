"""Taichi-based Monte Carlo path tracer.

This package renders scenes of spheres with diffuse, metallic and glass
materials through a thin-lens camera, using Taichi kernels for parallel
per-pixel sampling:
- Recursive (depth-bounded) path integration with a sky gradient background
- Lambertian, metal (fuzzy reflection) and dielectric (Schlick/Snell) materials
- Sphere primitives collected in a flat hittable list
- Depth of field via a thin-lens camera model
- Progressive accumulation with gamma-corrected PPM/PNG output

Subpackages:
    core: Vector algebra, rays, the path integrator and the progressive renderer
    geometry: Hit records and the sphere primitive
    materials: Scattering models and the device-side material arena
    scene: Hittable list, scene upload/intersection and preset scenes
    camera: Thin-lens camera with ray generation
    output: Color encoding, image export and preview

Taichi must be initialised (see ``pathtracer.runtime.init_runtime``) before
importing modules that declare Taichi fields.
"""

__version__ = "0.1.0"
