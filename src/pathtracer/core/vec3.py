"""Vector algebra and random sampling for double-precision path tracing.

This module provides the 3-component vector type used for points, directions
and linear RGB colors, plus the geometric helpers (dot/cross products,
reflection, refraction) and the Monte Carlo sampling routines the materials
and camera draw from. All functions are Taichi functions and run inside
kernels.

Vectors are values: every operator returns a new vector and nothing is
mutated in place.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> @ti.kernel
    ... def mirror() -> vec3:
    ...     return reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
    >>> mirror()  # (1, 1, 0)
"""

import taichi as ti
import taichi.math as tm

# Double-precision 3-vector. Aliases document intent only.
vec3 = ti.types.vector(3, ti.f64)
point3 = vec3
color = vec3

# Threshold below which every component counts as zero
NEAR_ZERO_EPSILON = 1e-8


# =============================================================================
# Vector Operations
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Squared Euclidean length, avoiding the square root."""
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f64:
    """Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Precondition: ``v`` is not the zero vector. A zero vector yields NaN
    components; this is not checked.
    """
    return v / length(v)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if every component of ``v`` is within 1e-8 of zero."""
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror ``v`` about the unit normal ``n``: v - 2 (v . n) n."""
    return v - 2.0 * dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: ti.f64) -> vec3:
    """Refract a unit direction through a surface (vector form of Snell's law).

    The refracted ray is split into a component perpendicular to the normal
    and one parallel to it.

    Args:
        uv: Incoming unit direction.
        n: Unit normal on the incoming side of the surface.
        etai_over_etat: Ratio of refractive indices (incident / transmitted).

    Returns:
        The refracted direction. The caller must have ruled out total
        internal reflection; this function does not check for it.
    """
    cos_theta = tm.min(dot(-uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * n
    return r_out_perp + r_out_parallel


# =============================================================================
# Random Sampling
# =============================================================================


@ti.func
def random_double(min_value: ti.f64, max_value: ti.f64) -> ti.f64:
    """Uniform random double in [min_value, max_value)."""
    return min_value + (max_value - min_value) * ti.random(ti.f64)


@ti.func
def random_vec3(min_value: ti.f64, max_value: ti.f64) -> vec3:
    """Random vector uniformly distributed in the cube [min, max)^3."""
    return vec3(
        random_double(min_value, max_value),
        random_double(min_value, max_value),
        random_double(min_value, max_value),
    )


@ti.func
def random_in_unit_sphere() -> vec3:
    """Random point strictly inside the unit sphere.

    Rejection sampling: draw from the enclosing cube until the point lands
    inside the sphere. About two draws are needed on average.
    """
    p = random_vec3(-1.0, 1.0)
    while length_squared(p) >= 1.0:
        p = random_vec3(-1.0, 1.0)
    return p


@ti.func
def random_unit_vector() -> vec3:
    """Random direction on the unit sphere."""
    return unit_vector(random_in_unit_sphere())


@ti.func
def random_in_hemisphere(normal: vec3) -> vec3:
    """Random point in the unit ball, flipped into the hemisphere of ``normal``."""
    in_unit_sphere = random_in_unit_sphere()
    result = in_unit_sphere
    if dot(in_unit_sphere, normal) <= 0.0:
        result = -in_unit_sphere
    return result


@ti.func
def random_in_unit_disk() -> vec3:
    """Random point (x, y, 0) strictly inside the unit disk.

    Rejection sampling over the square [-1, 1)^2. Used for lens sampling.
    """
    p = vec3(random_double(-1.0, 1.0), random_double(-1.0, 1.0), 0.0)
    while p.x * p.x + p.y * p.y >= 1.0:
        p = vec3(random_double(-1.0, 1.0), random_double(-1.0, 1.0), 0.0)
    return p
