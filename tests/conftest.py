"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field declared by modules imported earlier.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear the scene arena, material arena and render target around each test."""
    # Imported here so Taichi is initialized before fields are declared
    from pathtracer.core.integrator import clear_render_target
    from pathtracer.materials.registry import clear_materials
    from pathtracer.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_materials()
        clear_render_target()

    _clear_all()
    yield
    _clear_all()
