"""Incremental scene construction.

SceneBuilder collects (primitive, material) pairs with convenience methods for
each primitive kind and produces an immutable Scene. Every primitive and
material is validated as soon as it is added, so a malformed scene fails at
the offending call rather than mid-render.

Example:
    >>> from lumen2d.materials import Diffuse, Refractive
    >>> from lumen2d.scene.builder import SceneBuilder
    >>> builder = SceneBuilder()
    >>> builder.add_light_circle((0.3, 0.3), 0.05, intensity=4.0)
    0
    >>> builder.add_circle((0.6, 0.5), 0.15, Refractive(ior=1.5))
    1
    >>> builder.add_segment((0.0, 0.9), (1.0, 0.9), Diffuse((0.7, 0.7, 0.7)))
    2
    >>> scene = builder.build()
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from lumen2d.core.ray import VectorLike, vec2
from lumen2d.core.spectrum import SpectrumLike
from lumen2d.geometry.circle import Circle
from lumen2d.geometry.polygon import HalfPlane, Polygon, make_box
from lumen2d.geometry.primitive import Primitive
from lumen2d.geometry.segment import Segment
from lumen2d.materials.emissive import Emissive
from lumen2d.materials.material import Material, MaterialType, material_type

from .scene import Scene, SceneObject

logger = logging.getLogger(__name__)


class SceneBuilder:
    """Accumulates scene objects and builds an immutable Scene.

    Attributes:
        objects: The objects added so far, in insertion order.
    """

    def __init__(self) -> None:
        self.objects: list[SceneObject] = []

    def clear(self) -> None:
        """Remove every object added so far."""
        self.objects.clear()

    def add(self, primitive: Primitive, material: Material, name: str | None = None) -> int:
        """Add a primitive with its material.

        Args:
            primitive: The shape to add.
            material: The material for the shape.
            name: Optional label for logs and error messages.

        Returns:
            The index of the added object.

        Raises:
            ValueError: If the pairing is invalid (e.g. a medium on a segment).
        """
        self.objects.append(SceneObject(primitive=primitive, material=material, name=name))
        return len(self.objects) - 1

    # =========================================================================
    # Primitive Convenience Methods
    # =========================================================================

    def add_circle(
        self,
        center: VectorLike,
        radius: float,
        material: Material,
        name: str | None = None,
    ) -> int:
        return self.add(Circle(center=vec2(center), radius=float(radius)), material, name)

    def add_segment(
        self,
        start: VectorLike,
        end: VectorLike,
        material: Material,
        name: str | None = None,
    ) -> int:
        return self.add(Segment(start=vec2(start), end=vec2(end)), material, name)

    def add_polygon(
        self,
        vertices: Sequence[VectorLike],
        material: Material,
        name: str | None = None,
    ) -> int:
        return self.add(Polygon(vertices=tuple(vec2(v) for v in vertices)), material, name)

    def add_box(
        self,
        center: VectorLike,
        size: VectorLike,
        material: Material,
        angle: float = 0.0,
        name: str | None = None,
    ) -> int:
        """Add a (possibly rotated) rectangle.

        Args:
            center: Center of the rectangle.
            size: Full (width, height).
            material: The material for the rectangle.
            angle: Counter-clockwise rotation in radians.
            name: Optional label.

        Returns:
            The index of the added object.
        """
        return self.add(make_box(center, size, angle), material, name)

    def add_half_plane(
        self,
        point: VectorLike,
        normal: VectorLike,
        material: Material,
        name: str | None = None,
    ) -> int:
        return self.add(HalfPlane(point=vec2(point), normal=vec2(normal)), material, name)

    def add_light_circle(
        self,
        center: VectorLike,
        radius: float,
        intensity: SpectrumLike,
        name: str | None = None,
    ) -> int:
        """Add a circular light source.

        Args:
            center: Center of the light.
            radius: Radius of the light.
            intensity: Radiant intensity, scalar or per channel.
            name: Optional label.

        Returns:
            The index of the added light.
        """
        return self.add_circle(center, radius, Emissive(intensity=intensity), name)

    def add_light_segment(
        self,
        start: VectorLike,
        end: VectorLike,
        intensity: SpectrumLike,
        name: str | None = None,
    ) -> int:
        """Add a strip light along a segment."""
        return self.add_segment(start, end, Emissive(intensity=intensity), name)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_object_count(self) -> int:
        return len(self.objects)

    def get_light_count(self) -> int:
        return sum(1 for obj in self.objects if obj.is_light)

    def get_material_counts(self) -> dict[MaterialType, int]:
        """Count objects per material type."""
        return dict(Counter(material_type(obj.material) for obj in self.objects))

    def build(self) -> Scene:
        """Build the immutable scene.

        Returns:
            A Scene holding the objects added so far.

        Raises:
            ValueError: If the scene has no light.
        """
        scene = Scene(objects=tuple(self.objects))
        counts = ", ".join(f"{t.name.lower()}={n}" for t, n in sorted(self.get_material_counts().items()))
        logger.info(f"Built scene with {len(scene)} objects ({counts})")
        return scene
