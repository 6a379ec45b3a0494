"""Tests for the progressive renderer.

This module tests the ProgressiveRenderer class including:
- Initialization and setup
- Progressive sample accumulation
- Batch rendering
- Progress callbacks and generators
- Reset functionality

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

import numpy as np
import pytest


def _make_renderer(width=16, height=8, max_depth=5, jitter=True):
    from pathtracer.core.progressive import ProgressiveRenderer
    from pathtracer.scene.presets import three_spheres_camera, three_spheres_scene

    return ProgressiveRenderer(
        three_spheres_scene(),
        three_spheres_camera(width / height),
        width,
        height,
        max_depth,
        jitter=jitter,
    )


class TestProgressiveRendererInit:
    """Test ProgressiveRenderer initialization."""

    def test_init_creates_render_target(self):
        from pathtracer.core.integrator import get_image_dimensions
        from pathtracer.scene.intersection import get_sphere_count

        renderer = _make_renderer(32, 16)

        assert renderer.width == 32
        assert renderer.height == 16
        assert renderer.sample_count == 0
        assert get_image_dimensions() == (32, 16)
        assert get_sphere_count() == 4

    def test_init_rejects_oversized_dimensions(self):
        with pytest.raises(ValueError, match="exceed maximum"):
            _make_renderer(4096, 100)

    def test_init_rejects_negative_depth(self):
        with pytest.raises(ValueError, match="max_depth"):
            _make_renderer(max_depth=-1)

    def test_repr_shows_state(self):
        renderer = _make_renderer(16, 8)
        renderer.render(2)
        assert repr(renderer) == "ProgressiveRenderer(width=16, height=8, max_depth=5, samples=2)"


class TestProgressiveRendering:
    """Test sample accumulation."""

    def test_render_accumulates_samples(self):
        renderer = _make_renderer()
        renderer.render(3)
        renderer.render(2)
        assert renderer.sample_count == 5

    @pytest.mark.parametrize("num_samples", [0, -3])
    def test_non_positive_samples_do_nothing(self, num_samples):
        renderer = _make_renderer()
        renderer.render(num_samples)
        assert renderer.sample_count == 0

    def test_invalid_batch_size(self):
        renderer = _make_renderer()
        with pytest.raises(ValueError, match="batch_size"):
            renderer.render(4, batch_size=0)

    def test_callback_receives_progress(self):
        """Batches of 4 over 10 samples report 4, 8 and the final 10."""
        renderer = _make_renderer()
        progress = []

        renderer.render(10, batch_size=4, callback=lambda cur, tgt: progress.append((cur, tgt)))

        assert progress == [(4, 10), (8, 10), (10, 10)]

    def test_callback_with_existing_samples(self):
        renderer = _make_renderer()
        renderer.render(3)
        progress = []

        renderer.render(2, callback=lambda cur, tgt: progress.append((cur, tgt)))

        assert progress == [(4, 5), (5, 5)]

    def test_render_progressive_yields_progress(self):
        renderer = _make_renderer()
        steps = list(renderer.render_progressive(6, batch_size=3))
        assert steps == [(3, 6), (6, 6)]

    def test_render_progressive_interruptible(self):
        """Stopping the generator early keeps what was rendered so far."""
        renderer = _make_renderer()
        for current, _ in renderer.render_progressive(100, batch_size=2):
            if current >= 4:
                break
        assert renderer.sample_count == 4

    def test_reset_clears_samples_and_image(self):
        renderer = _make_renderer()
        renderer.render(2)
        assert renderer.get_image_numpy().max() > 0.0

        renderer.reset()

        assert renderer.sample_count == 0
        assert (renderer.get_image_numpy() == 0.0).all()

    def test_image_is_mean_of_samples(self):
        """Without jitter the batched mean matches a single-batch render."""
        from pathtracer.core.integrator import render
        from pathtracer.core.progressive import ProgressiveRenderer
        from pathtracer.geometry import Sphere
        from pathtracer.materials import Metal
        from pathtracer.scene import HittableList
        from pathtracer.scene.presets import three_spheres_camera

        world = HittableList([Sphere((0.0, 0.0, -1.0), 0.5, Metal((0.9, 0.5, 0.1), 0.0))])
        camera = three_spheres_camera(2.0)

        renderer = ProgressiveRenderer(world, camera, 16, 8, 5, jitter=False)
        renderer.render(6, batch_size=4)
        progressive_image = renderer.get_image_numpy()

        reference = render(world, camera, 16, 8, 1, 5, jitter=False)

        assert progressive_image.shape == (8, 16, 3)
        np.testing.assert_allclose(progressive_image, reference, rtol=1e-12, atol=1e-15)

    def test_no_nan_or_negative_values(self):
        renderer = _make_renderer(max_depth=10)
        renderer.render(8, batch_size=4)
        image = renderer.get_image_numpy()

        assert np.isfinite(image).all()
        assert image.min() >= 0.0
