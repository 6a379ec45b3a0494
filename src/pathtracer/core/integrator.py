"""Path tracing integrator and parallel per-pixel sampler.

This module implements the color integrator and the rendering kernels that
drive it. A camera ray is traced through the scene, bouncing off surfaces
according to their materials, until it escapes to the sky, is absorbed, or
runs out of depth.

``ray_color`` is the loop form of the classic recursion::

    ray_color(r, depth) = black                                 if depth <= 0
                        = attenuation * ray_color(scattered, depth - 1)
                                                                if r hits and scatters
                        = black                                 if r hits and is absorbed
                        = sky(r)                                if r misses

Taichi functions cannot recurse, so the product of attenuations is carried
in a throughput vector instead of on the call stack.

Sampling is parallel over pixels: the outermost ``ti.ndrange`` loop of the
accumulation kernel is distributed over the Taichi thread pool, each pixel
owns its cell of the sum buffer, and ``ti.random`` draws from per-thread
generator state.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.core.integrator import render
    >>> from pathtracer.scene.presets import three_spheres_scene, three_spheres_camera
    >>>
    >>> image = render(three_spheres_scene(), three_spheres_camera(), 160, 90, 16, 10)
    >>> image.shape
    (90, 160, 3)
"""

import logging
import math
import time

import numpy as np
import numpy.typing as npt
import taichi as ti

from pathtracer.camera.camera import Camera, get_ray, setup_camera
from pathtracer.core.ray import Ray, make_ray
from pathtracer.core.vec3 import color, unit_vector, vec3
from pathtracer.materials.registry import scatter
from pathtracer.scene.hittable_list import HittableList
from pathtracer.scene.intersection import hit_world, load_scene

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Hits closer than this are ignored to avoid self-intersection ("shadow acne")
T_MIN = 0.001
T_MAX = math.inf

# Sky gradient endpoints
SKY_HORIZON = color(1.0, 1.0, 1.0)
SKY_ZENITH = color(0.5, 0.7, 1.0)


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> color:
    """Background radiance: a vertical white-to-blue gradient."""
    unit_direction = unit_vector(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * SKY_HORIZON + t * SKY_ZENITH


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32) -> color:
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Maximum number of surface interactions. A path that uses
            them all without escaping contributes black.

    Returns:
        The estimated radiance (RGB). NaN is not filtered here.
    """
    result = color(0.0, 0.0, 0.0)
    throughput = color(1.0, 1.0, 1.0)
    origin = ray.origin
    direction = ray.direction

    # Active flag instead of break; the loop body is skipped once the path ends
    active = 1

    for _ in range(max_depth):
        if active == 1:
            current = make_ray(origin, direction)
            rec = hit_world(current, T_MIN, T_MAX)

            if rec.hit == 0:
                result = throughput * sky_color(direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter = scatter(current, rec)

                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    origin = rec.point
                    direction = scattered_direction

    return result


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Per-pixel sum of all samples; j = 0 is the bottom row
_color_sum = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Samples per pixel accumulated so far (same for every pixel)
_total_samples = ti.field(dtype=ti.i32, shape=())

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers. The buffers are
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is below 1 or exceeds the maximum.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_sum.fill(0.0)
    _total_samples[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_total_samples() -> int:
    """Get the number of samples per pixel accumulated so far.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return int(_total_samples[None])


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _accumulate_kernel(
    width: ti.i32, height: ti.i32, num_samples: ti.i32, max_depth: ti.i32, jitter: ti.i32
):
    """Add ``num_samples`` samples to every pixel of the sum buffer."""
    for i, j in ti.ndrange(width, height):
        pixel_sum = color(0.0, 0.0, 0.0)

        for _ in range(num_samples):
            du = 0.5
            dv = 0.5
            if jitter == 1:
                du = ti.random(ti.f64)
                dv = ti.random(ti.f64)

            s = (ti.cast(i, ti.f64) + du) / ti.cast(width, ti.f64)
            t = (ti.cast(j, ti.f64) + dv) / ti.cast(height, ti.f64)
            pixel_sum += ray_color(get_ray(s, t), max_depth)

        _color_sum[i, j] += pixel_sum


@ti.kernel
def _trace_ray_kernel(
    ox: ti.f64,
    oy: ti.f64,
    oz: ti.f64,
    dx: ti.f64,
    dy: ti.f64,
    dz: ti.f64,
    max_depth: ti.i32,
) -> color:
    ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
    return ray_color(ray, max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def accumulate_samples(num_samples: int, max_depth: int, jitter: bool = True) -> None:
    """Add samples to every pixel of the render target.

    The camera and scene must already be uploaded. Can be called repeatedly
    to refine the image.

    Args:
        num_samples: Samples to add per pixel.
        max_depth: Maximum path depth.
        jitter: Randomize the sample position within each pixel. Without
            jitter every sample goes through the pixel center.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    if num_samples <= 0:
        return

    width, height = get_image_dimensions()
    _accumulate_kernel(width, height, num_samples, max_depth, 1 if jitter else 0)
    _total_samples[None] += num_samples


def get_image_numpy() -> npt.NDArray[np.float64]:
    """Get the mean color of every pixel as a NumPy array.

    The array shape is (height, width, 3) with dtype float64. Row 0 is the
    top of the image. Values are linear and unclamped; an image with no
    samples is all zeros.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    samples = int(_total_samples[None])

    image = _color_sum.to_numpy()[:width, :height, :]
    if samples > 0:
        image = image / samples

    # (width, height, 3) -> (height, width, 3), then put the top row first
    image = np.transpose(image, (1, 0, 2))
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float64)


def render(
    world: HittableList,
    camera: Camera,
    image_width: int,
    image_height: int,
    samples_per_pixel: int,
    max_depth: int,
    jitter: bool = True,
) -> npt.NDArray[np.float64]:
    """Render a scene to a grid of mean pixel colors.

    Uploads the camera and scene, clears the render target and accumulates
    ``samples_per_pixel`` samples per pixel.

    Args:
        world: The scene to render.
        camera: The camera to render from.
        image_width: Image width in pixels.
        image_height: Image height in pixels.
        samples_per_pixel: Samples averaged per pixel.
        max_depth: Maximum path depth.
        jitter: Randomize the sample position within each pixel.

    Returns:
        Linear colors of shape (image_height, image_width, 3), row 0 on top.

    Raises:
        ValueError: If a dimension, the sample count or the depth is out of
            range, or if the camera is invalid.
        RuntimeError: If the scene exceeds the arena capacity.
    """
    if samples_per_pixel < 1:
        raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    setup_camera(camera)
    load_scene(world)
    setup_render_target(image_width, image_height)

    logger.info(
        "Rendering %dx%d, %d spp, max depth %d",
        image_width,
        image_height,
        samples_per_pixel,
        max_depth,
    )
    start = time.perf_counter()
    accumulate_samples(samples_per_pixel, max_depth, jitter)
    logger.info("Rendered in %.2fs", time.perf_counter() - start)

    return get_image_numpy()


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int,
) -> tuple[float, float, float]:
    """Evaluate ``ray_color`` for a single ray against the loaded scene.

    Python-callable entry point for testing and debugging. For rendering,
    use ``render`` or ``accumulate_samples``.

    Args:
        origin: Ray origin.
        direction: Ray direction.
        max_depth: Maximum path depth.

    Returns:
        Tuple of (R, G, B) radiance.
    """
    result = _trace_ray_kernel(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], max_depth
    )
    return (float(result[0]), float(result[1]), float(result[2]))
