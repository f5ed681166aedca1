"""Tagged-variant dispatch over the primitive shapes.

Primitives form a closed set (Circle, Segment, Polygon, HalfPlane). Rather
than a class hierarchy, every query here matches on the variant and calls the
shape-specific routine, which keeps the set of behaviors exhaustive and easy
to audit.
"""

from __future__ import annotations

import math

import numpy as np

from lumen2d.core.ray import T_MIN, Ray, Vector2, random_in_unit_disk

from .circle import Circle, Hit, circle_contains, intersect_circle
from .polygon import (
    HalfPlane,
    Polygon,
    half_plane_contains,
    intersect_half_plane,
    intersect_polygon,
    polygon_area,
    polygon_contains,
    polygon_perimeter,
)
from .segment import Segment, intersect_segment

Primitive = Circle | Segment | Polygon | HalfPlane


def intersect(
    primitive: Primitive,
    ray: Ray,
    t_min: float = T_MIN,
    t_max: float = math.inf,
) -> Hit | None:
    """Intersect a ray with any primitive.

    Args:
        primitive: The shape to test.
        ray: The ray to test.
        t_min: Minimum distance for a valid hit.
        t_max: Maximum distance for a valid hit.

    Returns:
        The nearest Hit in (t_min, t_max), or None.
    """
    match primitive:
        case Circle():
            return intersect_circle(ray, primitive, t_min, t_max)
        case Segment():
            return intersect_segment(ray, primitive, t_min, t_max)
        case Polygon():
            return intersect_polygon(ray, primitive, t_min, t_max)
        case HalfPlane():
            return intersect_half_plane(ray, primitive, t_min, t_max)
    raise TypeError(f"Unknown primitive: {primitive!r}")


def is_closed(primitive: Primitive) -> bool:
    """Check whether the primitive has an interior that can hold a medium."""
    return not isinstance(primitive, Segment)


def is_flat(primitive: Primitive) -> bool:
    """Check whether a ray leaving the surface can never hit it again."""
    return isinstance(primitive, (Segment, HalfPlane))


def contains(primitive: Primitive, point: Vector2) -> bool:
    """Check whether a point lies strictly inside the primitive."""
    match primitive:
        case Circle():
            return circle_contains(primitive, point)
        case Segment():
            return False
        case Polygon():
            return polygon_contains(primitive, point)
        case HalfPlane():
            return half_plane_contains(primitive, point)
    raise TypeError(f"Unknown primitive: {primitive!r}")


def area(primitive: Primitive) -> float:
    """Get the enclosed area (0 for segments, infinite for half-planes)."""
    match primitive:
        case Circle():
            return math.pi * primitive.radius * primitive.radius
        case Segment():
            return 0.0
        case Polygon():
            return polygon_area(primitive)
        case HalfPlane():
            return math.inf
    raise TypeError(f"Unknown primitive: {primitive!r}")


def can_sample(primitive: Primitive) -> bool:
    """Check whether sample_point() supports the primitive (bounded shapes only)."""
    return not isinstance(primitive, HalfPlane)


def sample_point(primitive: Primitive, rng: np.random.Generator) -> Vector2:
    """Sample a point on the primitive for light sampling.

    Circles are sampled uniformly over their disk, segments uniformly along
    their length and polygons uniformly along their perimeter.

    Raises:
        ValueError: If the primitive is unbounded.
    """
    match primitive:
        case Circle():
            return primitive.center + random_in_unit_disk(rng) * primitive.radius
        case Segment():
            return primitive.start + (primitive.end - primitive.start) * rng.random()
        case Polygon():
            return _sample_perimeter(primitive, rng.random() * polygon_perimeter(primitive))
    raise ValueError(f"Cannot sample points on {type(primitive).__name__}")


def _sample_perimeter(polygon: Polygon, offset: float) -> Vector2:
    """Walk ``offset`` units along the polygon outline from its first vertex."""
    for start, end in polygon.edges():
        edge_length = (end - start).length()
        if offset <= edge_length:
            return start + (end - start) * (offset / edge_length)
        offset -= edge_length
    return polygon.vertices[0]
