"""Geometry module for 2D shape primitives.

This module provides geometric primitives and intersection algorithms:

Components:
    circle: Circle primitive, the shared Hit record, ray-circle intersection
    segment: Open line segments (walls, mirrors, strip lights)
    polygon: Closed polygons, boxes and half-planes
    primitive: Tagged-variant dispatch (intersect, contains, area, sampling)

Every intersection routine returns ``Hit | None`` and treats distances at or
below T_MIN as misses, which guards against self-intersection at the previous
bounce point.

Ray-object intersection follows the pattern:
    hit = intersect(primitive, ray, t_min, t_max)
"""

from .circle import Circle, Hit, intersect_circle, make_circle
from .polygon import (
    HalfPlane,
    Polygon,
    intersect_half_plane,
    intersect_polygon,
    make_box,
    make_half_plane,
    make_polygon,
)
from .primitive import (
    Primitive,
    area,
    can_sample,
    contains,
    intersect,
    is_closed,
    is_flat,
    sample_point,
)
from .segment import Segment, intersect_segment, make_segment

__all__ = [
    "Hit",
    "Primitive",
    "Circle",
    "make_circle",
    "intersect_circle",
    "Segment",
    "make_segment",
    "intersect_segment",
    "Polygon",
    "make_polygon",
    "make_box",
    "intersect_polygon",
    "HalfPlane",
    "make_half_plane",
    "intersect_half_plane",
    "intersect",
    "contains",
    "area",
    "is_closed",
    "is_flat",
    "can_sample",
    "sample_point",
]
