"""Unit tests for vector algebra and random sampling.

Tests cover:
- Dot/cross products and lengths
- unit_vector normalization
- near_zero threshold
- Reflection and refraction identities
- Distribution bounds of the random samplers
"""

import math

import pytest
import taichi as ti

# Draws per sampler distribution test
N_SAMPLES = 2000


class TestVectorOperations:
    """Tests for the deterministic vector helpers."""

    def test_dot_and_cross(self):
        """Cross product of x and y is z; dot of orthogonal vectors is 0."""
        from pathtracer.core.vec3 import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f64, shape=())
        cross_result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            x = vec3(1.0, 0.0, 0.0)
            y = vec3(0.0, 1.0, 0.0)
            dot_result[None] = dot(x, y)
            cross_result[None] = cross(x, y)

        test_kernel()
        assert dot_result[None] == 0.0
        c = cross_result[None]
        assert (c[0], c[1], c[2]) == (0.0, 0.0, 1.0)

    def test_length(self):
        """Length of (3, 4, 12) is 13."""
        from pathtracer.core.vec3 import length, length_squared, vec3

        len_result = ti.field(dtype=ti.f64, shape=())
        len_sq_result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 12.0)
            len_result[None] = length(v)
            len_sq_result[None] = length_squared(v)

        test_kernel()
        assert len_result[None] == pytest.approx(13.0)
        assert len_sq_result[None] == pytest.approx(169.0)

    @pytest.mark.parametrize(
        "v",
        [(1.0, 2.0, 3.0), (-0.001, 0.0, 0.002), (1e6, -1e6, 5.0)],
    )
    def test_unit_vector_has_unit_length(self, v):
        """unit_vector produces a vector of length 1 with the same direction."""
        from pathtracer.core.vec3 import length, unit_vector, vec3

        unit_result = ti.Vector.field(3, dtype=ti.f64, shape=())
        len_result = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(x: ti.f64, y: ti.f64, z: ti.f64):
            u = unit_vector(vec3(x, y, z))
            unit_result[None] = u
            len_result[None] = length(u)

        test_kernel(*v)
        assert len_result[None] == pytest.approx(1.0, abs=1e-12)
        norm = math.sqrt(sum(c * c for c in v))
        u = unit_result[None]
        for i in range(3):
            assert u[i] == pytest.approx(v[i] / norm, abs=1e-12)

    def test_near_zero(self):
        """near_zero is true only when every component is below 1e-8."""
        from pathtracer.core.vec3 import near_zero, vec3

        results = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            results[0] = near_zero(vec3(1e-9, -1e-9, 0.0))
            results[1] = near_zero(vec3(1e-9, 1e-7, 0.0))
            results[2] = near_zero(vec3(0.0, 0.0, -1.0))

        test_kernel()
        assert results[0] == 1
        assert results[1] == 0
        assert results[2] == 0


class TestReflectRefract:
    """Tests for reflect and refract."""

    @pytest.mark.parametrize(
        "v",
        [(1.0, -1.0, 0.0), (0.3, -0.8, 0.5), (-2.0, 0.5, 1.0)],
    )
    def test_reflect_negates_normal_component(self, v):
        """dot(reflect(v, n), n) == -dot(v, n) for a unit normal."""
        from pathtracer.core.vec3 import dot, reflect, unit_vector, vec3

        before = ti.field(dtype=ti.f64, shape=())
        after = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(x: ti.f64, y: ti.f64, z: ti.f64):
            n = unit_vector(vec3(0.2, 1.0, -0.1))
            d = vec3(x, y, z)
            before[None] = dot(d, n)
            after[None] = dot(reflect(d, n), n)

        test_kernel(*v)
        assert after[None] == pytest.approx(-before[None], abs=1e-12)

    def test_reflect_mirror(self):
        """(1, -1, 0) reflected about +y is (1, 1, 0)."""
        from pathtracer.core.vec3 import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert (r[0], r[1], r[2]) == (1.0, 1.0, 0.0)

    def test_refract_unit_ratio_keeps_direction(self):
        """With an index ratio of 1 the ray passes straight through."""
        from pathtracer.core.vec3 import refract, unit_vector, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())
        expected = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            uv = unit_vector(vec3(0.4, -1.0, 0.3))
            expected[None] = uv
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), 1.0)

        test_kernel()
        r = result[None]
        e = expected[None]
        for i in range(3):
            assert r[i] == pytest.approx(e[i], abs=1e-12)

    def test_refract_bends_toward_normal(self):
        """Entering a denser medium bends the ray toward the normal (Snell's law)."""
        from pathtracer.core.vec3 import refract, unit_vector, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            # 45 degree incidence onto a surface with normal +y
            uv = unit_vector(vec3(1.0, -1.0, 0.0))
            result[None] = refract(uv, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        sin_out = r[0] / math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert sin_out == pytest.approx(math.sin(math.pi / 4) / 1.5, abs=1e-12)
        assert r[1] < 0.0


class TestRandomSampling:
    """Tests for the bounds of the random samplers."""

    def test_random_double_range(self):
        """random_double stays within [min, max)."""
        from pathtracer.core.vec3 import random_double

        samples = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                samples[i] = random_double(-2.0, 3.0)

        test_kernel()
        values = samples.to_numpy()
        assert values.min() >= -2.0
        assert values.max() < 3.0
        # Should cover most of the interval
        assert values.min() < -1.5
        assert values.max() > 2.5

    def test_random_in_unit_sphere(self):
        """Points lie strictly inside the unit ball."""
        from pathtracer.core.vec3 import length_squared, random_in_unit_sphere

        lengths = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                lengths[i] = length_squared(random_in_unit_sphere())

        test_kernel()
        assert lengths.to_numpy().max() < 1.0

    def test_random_unit_vector(self):
        """Random unit vectors have length 1."""
        from pathtracer.core.vec3 import length, random_unit_vector

        lengths = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                lengths[i] = length(random_unit_vector())

        test_kernel()
        values = lengths.to_numpy()
        assert abs(values - 1.0).max() < 1e-12

    def test_random_in_hemisphere(self):
        """Samples never point against the normal."""
        from pathtracer.core.vec3 import dot, random_in_hemisphere, vec3

        dots = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 0.0, 1.0)
            for i in range(N_SAMPLES):
                dots[i] = dot(random_in_hemisphere(n), n)

        test_kernel()
        assert dots.to_numpy().min() >= 0.0

    def test_random_in_unit_disk(self):
        """Points lie inside the unit disk in the z = 0 plane."""
        from pathtracer.core.vec3 import random_in_unit_disk

        points = ti.Vector.field(3, dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                points[i] = random_in_unit_disk()

        test_kernel()
        p = points.to_numpy()
        assert (p[:, 2] == 0.0).all()
        assert (p[:, 0] ** 2 + p[:, 1] ** 2).max() < 1.0
