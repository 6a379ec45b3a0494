"""Progressive renderer for batched sample accumulation.

This module wraps the integrator's render target in a small stateful object
that supports:
- Rendering a scene in batches that refine the image over time
- Progress callbacks, or a generator yielding after each batch
- Resetting the accumulator without re-uploading the scene

The render target, camera and scene arenas are module-level Taichi fields,
so only one renderer is meaningful at a time; creating a new one replaces
the state of the previous one.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtracer.core.progressive import ProgressiveRenderer
    >>> from pathtracer.scene.presets import final_scene, final_scene_camera
    >>>
    >>> renderer = ProgressiveRenderer(final_scene(), final_scene_camera(), 300, 200, 5)
    >>> renderer.render(16, batch_size=4)
    >>> image = renderer.get_image_numpy()
"""

import logging
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from pathtracer.camera.camera import Camera, setup_camera
from pathtracer.core.integrator import (
    accumulate_samples,
    clear_render_target,
    get_image_numpy,
    get_total_samples,
    setup_render_target,
)
from pathtracer.scene.hittable_list import HittableList
from pathtracer.scene.intersection import load_scene

logger = logging.getLogger(__name__)

# Callback receives (current_samples, target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A renderer that accumulates samples per pixel over repeated calls.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Maximum path depth.
        jitter: Whether samples are jittered within each pixel.
    """

    def __init__(
        self,
        world: HittableList,
        camera: Camera,
        width: int,
        height: int,
        max_depth: int,
        jitter: bool = True,
    ) -> None:
        """Upload the scene and camera and set up an empty render target.

        Args:
            world: The scene to render.
            camera: The camera to render from.
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            max_depth: Maximum path depth.
            jitter: Randomize the sample position within each pixel.

        Raises:
            ValueError: If the dimensions, depth or camera are invalid.
            RuntimeError: If the scene exceeds the arena capacity.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")

        self._width = width
        self._height = height
        self._max_depth = max_depth
        self._jitter = jitter

        setup_camera(camera)
        load_scene(world)
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def jitter(self) -> bool:
        return self._jitter

    @property
    def sample_count(self) -> int:
        """Samples per pixel accumulated since the last reset."""
        return get_total_samples()

    def reset(self) -> None:
        """Discard all accumulated samples, keeping scene and camera."""
        clear_render_target()

    def _render_batch(self, batch: int) -> None:
        accumulate_samples(batch, self._max_depth, self._jitter)
        logger.debug("Accumulated %d samples per pixel", self.sample_count)

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Add num_samples paths per pixel on top of what is already accumulated.

        Repeated calls keep refining the same image until reset() is called.

        Args:
            num_samples: Total number of samples to add per pixel.
            batch_size: Number of samples per kernel launch. Larger batches
                reduce launch overhead but report progress less often.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is less than 1.
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Generator form of render(); yields after every kernel launch.

        Stopping iteration early keeps the samples already accumulated.

        Args:
            num_samples: Total number of samples to add per pixel.
            batch_size: Number of samples per kernel launch.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Raises:
            ValueError: If batch_size is less than 1.
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            self._render_batch(batch)
            remaining -= batch
            yield (self.sample_count, target_samples)

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the mean linear colors, shape (height, width, 3), row 0 on top."""
        return get_image_numpy()

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"max_depth={self.max_depth}, samples={self.sample_count})"
        )
