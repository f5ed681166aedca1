"""Line segment primitive with ray-segment intersection.

A segment is an open, infinitely thin wall between two endpoints. It has no
interior, so it can carry surface materials (diffuse, specular, emissive) but
never a medium.

Ray-segment intersection solves
    origin + t * d = start + s * e,   e = end - start
with 2D cross products:
    t = (start - origin) x e / (d x e)
    s = (start - origin) x d / (d x e)
and accepts the hit when t lies in (t_min, t_max) and s in [0, 1].
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from lumen2d.core.ray import T_MIN, Ray, Vector2, VectorLike, ray_at, vec2

from .circle import Hit

# Rays closer to parallel than this are treated as missing the segment
PARALLEL_EPSILON = 1e-12


@dataclass(frozen=True, slots=True)
class Segment:
    """A line segment between two endpoints.

    Attributes:
        start: The first endpoint.
        end: The second endpoint (must differ from start).
    """

    start: Vector2
    end: Vector2

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", vec2(self.start))
        object.__setattr__(self, "end", vec2(self.end))
        if (self.end - self.start).length_squared() == 0.0:
            raise ValueError(f"Segment endpoints must differ, got {self.start} twice")


def make_segment(start: VectorLike, end: VectorLike) -> Segment:
    """Create a segment from any two (x, y) points."""
    return Segment(start=vec2(start), end=vec2(end))


def segment_length(segment: Segment) -> float:
    return (segment.end - segment.start).length()


def segment_normal(segment: Segment) -> Vector2:
    """Get the unit normal on the left of start -> end (unoriented)."""
    return (segment.end - segment.start).perpendicular().normalized()


def intersect_edge(
    ray: Ray,
    start: Vector2,
    end: Vector2,
    t_min: float,
    t_max: float,
) -> float | None:
    """Intersect a ray with the edge start -> end.

    Returns:
        The ray parameter t of the hit, or None when the ray is parallel to
        the edge or the hit falls outside the edge or the (t_min, t_max) range.
    """
    edge = end - start
    denom = ray.direction.cross(edge)
    if abs(denom) < PARALLEL_EPSILON:
        return None

    to_start = start - ray.origin
    t = to_start.cross(edge) / denom
    if not (t_min < t < t_max):
        return None

    s = to_start.cross(ray.direction) / denom
    if s < 0.0 or s > 1.0:
        return None
    return t


def intersect_segment(
    ray: Ray,
    segment: Segment,
    t_min: float = T_MIN,
    t_max: float = math.inf,
) -> Hit | None:
    """Test for ray-segment intersection.

    The returned normal is the segment perpendicular flipped to face the
    incoming ray, so shading always sees the side the ray arrived from.

    Args:
        ray: The ray to test.
        segment: The segment to test against.
        t_min: Minimum distance for a valid hit.
        t_max: Maximum distance for a valid hit.

    Returns:
        The Hit, or None if the ray misses.
    """
    t = intersect_edge(ray, segment.start, segment.end, t_min, t_max)
    if t is None:
        return None

    normal = segment_normal(segment)
    if ray.direction.dot(normal) > 0.0:
        normal = -normal
    return Hit(distance=t, point=ray_at(ray, t), normal=normal, front_face=True)
