"""Circle primitive with robust ray-circle intersection.

This module provides the Circle dataclass, the Hit record shared by every
primitive, and the ray-circle intersection using the sign-aware quadratic
formulation that avoids catastrophic cancellation when b^2 is nearly equal
to 4ac.

Example:
    >>> from lumen2d.core.ray import Vector2, make_ray
    >>> from lumen2d.geometry.circle import Circle, intersect_circle
    >>> circle = Circle(center=Vector2(0.0, 0.0), radius=1.0)
    >>> hit = intersect_circle(make_ray((5.0, 0.0), (-1.0, 0.0)), circle)
    >>> hit.distance
    4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from lumen2d.core.ray import T_MIN, Ray, Vector2, VectorLike, ray_at, vec2


@dataclass(frozen=True, slots=True)
class Hit:
    """Record of a ray-primitive intersection.

    Attributes:
        distance: Parameter along the ray where the intersection occurred
            (always > T_MIN).
        point: The point where the ray met the surface.
        normal: Unit surface normal. For closed shapes it points away from
            the interior; for open segments it faces the incoming ray.
        front_face: True when the ray arrives from outside the shape
            (direction . normal < 0). Always True for segments.
    """

    distance: float
    point: Vector2
    normal: Vector2
    front_face: bool


@dataclass(frozen=True, slots=True)
class Circle:
    """A circle defined by center point and radius.

    Attributes:
        center: The center point of the circle.
        radius: The radius of the circle (positive, finite).
    """

    center: Vector2
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", vec2(self.center))
        if not math.isfinite(self.radius) or self.radius <= 0.0:
            raise ValueError(f"Circle radius = {self.radius} must be positive and finite")


def make_circle(center: VectorLike, radius: float) -> Circle:
    """Create a circle from any (x, y) center and a radius."""
    return Circle(center=vec2(center), radius=float(radius))


def _solve_quadratic_robust(h: float, a: float, c: float, sqrt_d: float) -> tuple[float, float]:
    """Solve a*t^2 + 2*h*t + c = 0 with a numerically stable formula.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of the discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    sign_h = -1.0 if h < 0.0 else 1.0
    q = -(h + sign_h * sqrt_d)

    if abs(q) < 1e-12:
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


def intersect_circle(
    ray: Ray,
    circle: Circle,
    t_min: float = T_MIN,
    t_max: float = math.inf,
) -> Hit | None:
    """Test for ray-circle intersection.

    The intersection is found by solving
        |origin + t * direction - center|^2 = radius^2
    which expands to a*t^2 + 2*h*t + c = 0 with
        a = d.d, h = d.oc, c = oc.oc - r^2, oc = origin - center.

    Args:
        ray: The ray to test.
        circle: The circle to test against.
        t_min: Minimum distance for a valid hit (avoids self-intersection).
        t_max: Maximum distance for a valid hit.

    Returns:
        The nearest Hit with distance in (t_min, t_max), or None.
    """
    oc = ray.origin - circle.center
    a = ray.direction.length_squared()
    h = ray.direction.dot(oc)
    c = oc.length_squared() - circle.radius * circle.radius

    discriminant = h * h - a * c
    if discriminant < 0.0:
        return None

    t0, t1 = _solve_quadratic_robust(h, a, c, math.sqrt(discriminant))

    t = t0
    if not (t_min < t < t_max):
        t = t1
        if not (t_min < t < t_max):
            return None

    point = ray_at(ray, t)
    normal = (point - circle.center) / circle.radius
    return Hit(
        distance=t,
        point=point,
        normal=normal,
        front_face=ray.direction.dot(normal) < 0.0,
    )


def circle_contains(circle: Circle, point: Vector2) -> bool:
    """Check whether a point lies strictly inside the circle."""
    return (point - circle.center).length_squared() < circle.radius * circle.radius
