"""Closed polygon and half-plane primitives.

Polygons are simple closed outlines stored counter-clockwise, so every edge's
outward normal is the edge direction rotated by -90 degrees. A half-plane is
the region on the side of a line opposite its normal; it is closed but
unbounded, which makes it useful for floors, water surfaces and large slabs.

Both shapes have an interior and can therefore bound a medium (refractive or
absorbing).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from lumen2d.core.ray import T_MIN, Ray, Vector2, VectorLike, ray_at, vec2

from .circle import Hit
from .segment import PARALLEL_EPSILON, intersect_edge


def signed_area(vertices: Sequence[Vector2]) -> float:
    """Compute the signed area of a polygon (positive when counter-clockwise)."""
    total = 0.0
    count = len(vertices)
    for i in range(count):
        a = vertices[i]
        b = vertices[(i + 1) % count]
        total += a.cross(b)
    return 0.5 * total


@dataclass(frozen=True, slots=True)
class Polygon:
    """A simple closed polygon.

    Vertices given clockwise are reversed on construction so the stored
    outline is always counter-clockwise.

    Attributes:
        vertices: The outline vertices (at least three, non-zero area).
    """

    vertices: tuple[Vector2, ...]

    def __post_init__(self) -> None:
        points = tuple(vec2(v) for v in self.vertices)
        if len(points) < 3:
            raise ValueError(f"Polygon needs at least 3 vertices, got {len(points)}")
        area = signed_area(points)
        if abs(area) < 1e-12:
            raise ValueError("Polygon has zero area")
        if area < 0.0:
            points = tuple(reversed(points))
        object.__setattr__(self, "vertices", points)

    def edges(self) -> list[tuple[Vector2, Vector2]]:
        """Return the (start, end) pairs of every edge."""
        count = len(self.vertices)
        return [(self.vertices[i], self.vertices[(i + 1) % count]) for i in range(count)]


def make_polygon(vertices: Sequence[VectorLike]) -> Polygon:
    return Polygon(vertices=tuple(vec2(v) for v in vertices))


def make_box(
    center: VectorLike,
    size: VectorLike,
    angle: float = 0.0,
) -> Polygon:
    """Create a rectangle as a polygon.

    Args:
        center: Center of the rectangle.
        size: Full (width, height) of the rectangle.
        angle: Counter-clockwise rotation in radians.

    Returns:
        A four-vertex Polygon.
    """
    c = vec2(center)
    half = vec2(size) * 0.5
    corners = [
        Vector2(-half.x, -half.y),
        Vector2(half.x, -half.y),
        Vector2(half.x, half.y),
        Vector2(-half.x, half.y),
    ]
    return Polygon(vertices=tuple(c + corner.rotate(angle) for corner in corners))


def polygon_area(polygon: Polygon) -> float:
    return abs(signed_area(polygon.vertices))


def polygon_perimeter(polygon: Polygon) -> float:
    return sum((end - start).length() for start, end in polygon.edges())


def _edge_outward_normal(start: Vector2, end: Vector2) -> Vector2:
    # Counter-clockwise winding puts the interior on the left of each edge
    edge = end - start
    return Vector2(edge.y, -edge.x).normalized()


def intersect_polygon(
    ray: Ray,
    polygon: Polygon,
    t_min: float = T_MIN,
    t_max: float = math.inf,
) -> Hit | None:
    """Test for ray-polygon intersection.

    Tests every edge and keeps the nearest hit.

    Args:
        ray: The ray to test.
        polygon: The polygon to test against.
        t_min: Minimum distance for a valid hit.
        t_max: Maximum distance for a valid hit.

    Returns:
        The nearest Hit with an outward normal, or None.
    """
    closest_t = t_max
    closest_normal = None

    for start, end in polygon.edges():
        t = intersect_edge(ray, start, end, t_min, closest_t)
        if t is not None:
            closest_t = t
            closest_normal = _edge_outward_normal(start, end)

    if closest_normal is None:
        return None
    return Hit(
        distance=closest_t,
        point=ray_at(ray, closest_t),
        normal=closest_normal,
        front_face=ray.direction.dot(closest_normal) < 0.0,
    )


def polygon_contains(polygon: Polygon, point: Vector2) -> bool:
    """Check whether a point lies inside the polygon (even-odd rule)."""
    inside = False
    for start, end in polygon.edges():
        if (start.y > point.y) != (end.y > point.y):
            x_cross = start.x + (point.y - start.y) * (end.x - start.x) / (end.y - start.y)
            if point.x < x_cross:
                inside = not inside
    return inside


# =============================================================================
# Half-plane
# =============================================================================


@dataclass(frozen=True, slots=True)
class HalfPlane:
    """The closed region behind a line.

    Points p with (p - point) . normal < 0 are inside.

    Attributes:
        point: Any point on the boundary line.
        normal: Outward normal of the boundary (normalized on construction).
    """

    point: Vector2
    normal: Vector2

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", vec2(self.point))
        normal = vec2(self.normal)
        if normal.length_squared() == 0.0:
            raise ValueError("HalfPlane normal must be non-zero")
        object.__setattr__(self, "normal", normal.normalized())


def make_half_plane(point: VectorLike, normal: VectorLike) -> HalfPlane:
    return HalfPlane(point=vec2(point), normal=vec2(normal))


def intersect_half_plane(
    ray: Ray,
    plane: HalfPlane,
    t_min: float = T_MIN,
    t_max: float = math.inf,
) -> Hit | None:
    """Test for ray-boundary intersection of a half-plane."""
    denom = ray.direction.dot(plane.normal)
    if abs(denom) < PARALLEL_EPSILON:
        return None

    t = (plane.point - ray.origin).dot(plane.normal) / denom
    if not (t_min < t < t_max):
        return None
    return Hit(
        distance=t,
        point=ray_at(ray, t),
        normal=plane.normal,
        front_face=denom < 0.0,
    )


def half_plane_contains(plane: HalfPlane, point: Vector2) -> bool:
    return (point - plane.point).dot(plane.normal) < 0.0
