"""Ray data structure and 2D vector utilities.

This module provides the Vector2 value type, the Ray dataclass and the vector
helpers used by the tracer: reflection, Snell refraction, Schlick's Fresnel
approximation and random direction sampling.

Randomness is never global. Every sampling helper takes an explicit
``numpy.random.Generator`` so parallel chunks stay independent and can be
seeded deterministically.

Example:
    >>> from lumen2d.core.ray import Vector2, make_ray, ray_at
    >>> ray = make_ray(Vector2(0.0, 0.0), Vector2(2.0, 0.0))
    >>> ray_at(ray, 5.0)
    Vector2(x=5.0, y=0.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np

# Distances at or below this value are treated as self-intersections
T_MIN = 1e-6

# Offset applied to secondary ray origins to leave the surface they start on
RAY_EPSILON = 1e-6


@dataclass(frozen=True, slots=True)
class Vector2:
    """An immutable 2D vector.

    Attributes:
        x: The x component.
        y: The y component.
    """

    x: float
    y: float

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def dot(self, other: Vector2) -> float:
        """Compute the dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2) -> float:
        """Compute the 2D cross product (z component of the 3D cross product)."""
        return self.x * other.y - self.y * other.x

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vector2:
        """Return a unit vector in the same direction.

        Returns:
            The normalized vector. A zero-length vector is returned unchanged.
        """
        norm = self.length()
        if norm == 0.0:
            return self
        return Vector2(self.x / norm, self.y / norm)

    def rotate(self, angle: float) -> Vector2:
        """Rotate counter-clockwise by ``angle`` radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return Vector2(self.x * cos_a - self.y * sin_a, self.x * sin_a + self.y * cos_a)

    def perpendicular(self) -> Vector2:
        """Return the vector rotated by +90 degrees."""
        return Vector2(-self.y, self.x)

    @classmethod
    def from_angle(cls, angle: float) -> Vector2:
        """Create a unit vector pointing at ``angle`` radians from the +x axis."""
        return cls(math.cos(angle), math.sin(angle))


# Anything accepted where a point or direction is expected
VectorLike = Vector2 | Sequence[float]


def vec2(value: VectorLike) -> Vector2:
    """Coerce a Vector2 or an (x, y) sequence to a Vector2.

    Raises:
        ValueError: If the value does not have exactly two finite components.
    """
    if isinstance(value, Vector2):
        x, y = value.x, value.y
    else:
        if len(value) != 2:
            raise ValueError(f"Expected an (x, y) pair, got {value!r}")
        x, y = float(value[0]), float(value[1])
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Vector components must be finite, got ({x}, {y})")
    return Vector2(x, y)


@dataclass(frozen=True, slots=True)
class Ray:
    """A half-line with an origin point and a unit direction.

    Rays are created fresh for every trace step and never mutated.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Expected to be unit length; use
            make_ray() to normalize an arbitrary direction.
    """

    origin: Vector2
    direction: Vector2


def ray_at(ray: Ray, t: float) -> Vector2:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return Vector2(ray.origin.x + t * ray.direction.x, ray.origin.y + t * ray.direction.y)


def make_ray(origin: VectorLike, direction: VectorLike) -> Ray:
    """Create a ray, normalizing the direction.

    Raises:
        ValueError: If the direction has zero length.
    """
    d = vec2(direction)
    if d.length_squared() == 0.0:
        raise ValueError("Ray direction must be non-zero")
    return Ray(origin=vec2(origin), direction=d.normalized())


# =============================================================================
# Scattering Helpers
# =============================================================================


def reflect(incident: Vector2, normal: Vector2) -> Vector2:
    """Reflect an incident direction about a unit normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (unit length, either orientation).

    Returns:
        The reflected direction d - 2(d.n)n.
    """
    k = 2.0 * incident.dot(normal)
    return Vector2(incident.x - k * normal.x, incident.y - k * normal.y)


def refract(incident: Vector2, normal: Vector2, eta: float) -> Vector2 | None:
    """Refract an incident direction through a surface using Snell's law.

    Args:
        incident: The incoming unit direction.
        normal: The unit surface normal facing the incident side
            (incident . normal <= 0).
        eta: Ratio of refractive indices n_incident / n_transmitted.

    Returns:
        The refracted unit direction, or None on total internal reflection
        (negative discriminant).
    """
    cos_i = -incident.dot(normal)
    sin2_t = eta * eta * (1.0 - cos_i * cos_i)
    discriminant = 1.0 - sin2_t
    if discriminant < 0.0:
        return None
    cos_t = math.sqrt(discriminant)
    k = eta * cos_i - cos_t
    return Vector2(eta * incident.x + k * normal.x, eta * incident.y + k * normal.y).normalized()


def schlick_fresnel(cosine: float, ref_idx: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        The approximate Fresnel reflectance coefficient.
    """
    r0 = ((1.0 - ref_idx) / (1.0 + ref_idx)) ** 2
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


def offset_ray_origin(point: Vector2, normal: Vector2, direction: Vector2) -> Vector2:
    """Offset a secondary ray origin off the surface it starts on.

    Pushes the point along the normal toward the side the new ray travels to
    (outside for reflection, inside for refraction).
    """
    if direction.dot(normal) < 0.0:
        return point - normal * RAY_EPSILON
    return point + normal * RAY_EPSILON


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_unit_vector(rng: np.random.Generator) -> Vector2:
    """Generate a unit vector uniformly distributed on the circle."""
    return Vector2.from_angle(2.0 * math.pi * rng.random())


def random_in_unit_disk(rng: np.random.Generator) -> Vector2:
    """Generate a point uniformly distributed inside the unit disk."""
    radius = math.sqrt(rng.random())
    return Vector2.from_angle(2.0 * math.pi * rng.random()) * radius
