"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere
- Ray starting inside sphere (back face)
- Open interval bounds on t
- Hit point round trip for non-unit directions
- Host-side Sphere validation
"""

import pytest
import taichi as ti


def _make_hit_kernel():
    """Build a kernel that intersects one ray with one sphere and stores the record."""
    from pathtracer.core.ray import make_ray
    from pathtracer.core.vec3 import vec3
    from pathtracer.geometry.sphere import SphereGeometry, hit_sphere

    out = {
        "hit": ti.field(dtype=ti.i32, shape=()),
        "t": ti.field(dtype=ti.f64, shape=()),
        "point": ti.Vector.field(3, dtype=ti.f64, shape=()),
        "normal": ti.Vector.field(3, dtype=ti.f64, shape=()),
        "front_face": ti.field(dtype=ti.i32, shape=()),
    }
    hit_f, t_f, point_f, normal_f, front_f = (
        out["hit"],
        out["t"],
        out["point"],
        out["normal"],
        out["front_face"],
    )

    @ti.kernel
    def test_kernel(
        ox: ti.f64,
        oy: ti.f64,
        oz: ti.f64,
        dx: ti.f64,
        dy: ti.f64,
        dz: ti.f64,
        radius: ti.f64,
        t_min: ti.f64,
        t_max: ti.f64,
    ):
        ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
        sphere = SphereGeometry(center=vec3(0.0, 0.0, 0.0), radius=radius)
        rec = hit_sphere(ray, sphere, t_min, t_max)
        hit_f[None] = rec.hit
        t_f[None] = rec.t
        point_f[None] = rec.point
        normal_f[None] = rec.normal
        front_f[None] = rec.front_face

    def run(origin, direction, radius=1.0, t_min=0.001, t_max=1e9):
        test_kernel(*origin, *direction, radius, t_min, t_max)
        return {
            "hit": int(hit_f[None]),
            "t": float(t_f[None]),
            "point": tuple(float(c) for c in point_f[None]),
            "normal": tuple(float(c) for c in normal_f[None]),
            "front_face": int(front_f[None]),
        }

    return run


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    @pytest.mark.parametrize("radius", [0.5, 1.0, 2.0])
    def test_direct_hit_front_face(self, radius):
        """A ray from +z toward the origin hits at z=r with normal (0, 0, 1)."""
        run = _make_hit_kernel()
        rec = run((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), radius=radius)

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(5.0 - radius)
        assert rec["point"] == pytest.approx((0.0, 0.0, radius))
        assert rec["normal"] == pytest.approx((0.0, 0.0, 1.0))
        assert rec["front_face"] == 1

    def test_miss(self):
        """A ray passing beside the sphere misses."""
        run = _make_hit_kernel()
        rec = run((5.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0

    def test_inside_hits_back_face(self):
        """From the center the far root is used and the normal faces inward."""
        run = _make_hit_kernel()
        rec = run((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(1.0)
        assert rec["front_face"] == 0
        # Normal opposes the ray direction
        assert rec["normal"] == pytest.approx((0.0, 0.0, -1.0))

    def test_sphere_behind_ray_misses(self):
        """Both roots negative means no hit."""
        run = _make_hit_kernel()
        rec = run((0.0, 0.0, 5.0), (0.0, 0.0, 1.0))
        assert rec["hit"] == 0

    def test_t_max_is_exclusive(self):
        """A root exactly at t_max is rejected; the far root beyond it too."""
        run = _make_hit_kernel()
        rec = run((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), t_max=4.0)
        assert rec["hit"] == 0

    def test_t_min_skips_near_root(self):
        """A near root below t_min falls through to the far root."""
        run = _make_hit_kernel()
        rec = run((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), t_min=4.5)

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(6.0)
        assert rec["front_face"] == 0

    @pytest.mark.parametrize(
        "origin, direction",
        [
            ((0.3, -0.2, 4.0), (0.0, 0.0, -3.0)),
            ((3.0, 2.0, 1.0), (-1.5, -1.0, -0.4)),
            ((-0.1, 6.0, 0.2), (0.02, -0.5, 0.0)),
        ],
    )
    def test_hit_point_lies_on_ray_and_sphere(self, origin, direction):
        """The hit point equals origin + t * direction and lies on the sphere."""
        run = _make_hit_kernel()
        rec = run(origin, direction)

        assert rec["hit"] == 1
        expected = tuple(o + rec["t"] * d for o, d in zip(origin, direction, strict=True))
        assert rec["point"] == pytest.approx(expected, abs=1e-9)
        assert sum(c * c for c in rec["point"]) == pytest.approx(1.0, abs=1e-9)
        assert sum(c * c for c in rec["normal"]) == pytest.approx(1.0, abs=1e-9)


class TestSphereHost:
    """Tests for the host-side Sphere description."""

    def test_valid_sphere(self):
        from pathtracer.geometry import Sphere
        from pathtracer.materials import Lambertian

        material = Lambertian((0.5, 0.5, 0.5))
        sphere = Sphere((0.0, 1.0, 0.0), 1.0, material)
        assert sphere.radius == 1.0
        assert sphere.material is material

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_rejected(self, radius):
        from pathtracer.geometry import Sphere
        from pathtracer.materials import Lambertian

        with pytest.raises(ValueError, match="radius"):
            Sphere((0.0, 0.0, 0.0), radius, Lambertian((0.5, 0.5, 0.5)))
