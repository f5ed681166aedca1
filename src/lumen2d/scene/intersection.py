"""Scene-level ray queries.

This module provides nearest-hit testing over every object of a scene, and the
media queries the tracer uses to know which closed media a point lies in.

Example:
    >>> from lumen2d.scene.intersection import nearest_hit
    >>> record = nearest_hit(ray, scene)
    >>> if record is not None:
    ...     print(record.distance, record.material)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from lumen2d.core.ray import T_MIN, Ray, Vector2
from lumen2d.geometry.circle import Hit
from lumen2d.geometry.primitive import Primitive, area, contains, intersect
from lumen2d.materials.material import Material, is_medium

from .scene import Scene, SceneObject


@dataclass(frozen=True, slots=True)
class SceneHitRecord:
    """Record of a ray-scene intersection with the object that was hit.

    Attributes:
        hit: The geometric intersection.
        obj: The scene object that was hit.
    """

    hit: Hit
    obj: SceneObject

    @property
    def distance(self) -> float:
        return self.hit.distance

    @property
    def primitive(self) -> Primitive:
        return self.obj.primitive

    @property
    def material(self) -> Material:
        return self.obj.material


def nearest_hit(
    ray: Ray,
    scene: Scene,
    exclude: SceneObject | None = None,
    t_min: float = T_MIN,
    t_max: float = math.inf,
) -> SceneHitRecord | None:
    """Test a ray against every object in the scene.

    Keeps the strictly nearest hit, so the result does not depend on object
    order except for exact ties, which resolve to the first object in scene
    order.

    Args:
        ray: The ray to test.
        scene: The scene to test against.
        exclude: An object to skip, typically the flat surface the ray just
            left. Compared by identity.
        t_min: Minimum distance for a valid hit.
        t_max: Maximum distance for a valid hit.

    Returns:
        A SceneHitRecord for the closest intersection, or None.
    """
    closest_t = t_max
    result = None

    for obj in scene.objects:
        if obj is exclude:
            continue
        hit = intersect(obj.primitive, ray, t_min, closest_t)
        if hit is not None:
            closest_t = hit.distance
            result = SceneHitRecord(hit=hit, obj=obj)

    return result


def media_at(scene: Scene, point: Vector2) -> tuple[SceneObject, ...]:
    """Find the media containing a point.

    Args:
        scene: The scene to query.
        point: The point to locate.

    Returns:
        The medium objects whose interior contains the point, ordered from
        outermost to innermost (by descending area).
    """
    inside = [obj for obj in scene.objects if is_medium(obj.material) and contains(obj.primitive, point)]
    inside.sort(key=lambda obj: area(obj.primitive), reverse=True)
    return tuple(inside)
