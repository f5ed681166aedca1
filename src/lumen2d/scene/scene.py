"""Immutable scene container.

A Scene is an ordered tuple of SceneObjects, each pairing exactly one
primitive with exactly one material. Objects with an Emissive material are the
scene's lights. The scene is validated once at construction and never
mutated afterwards, so it can be shared by reference across render workers.

Validation rejects malformed input eagerly, before any rendering starts:
    - media materials (Refractive, Absorbing) on open primitives
    - emitters on primitives that cannot be sampled
    - scenes without any light
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from lumen2d.geometry.primitive import Primitive, area, can_sample, is_closed
from lumen2d.materials.emissive import Emissive
from lumen2d.materials.material import Material, is_medium, material_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SceneObject:
    """A primitive with its material.

    SceneObjects compare by identity so that the tracer can exclude the exact
    object a ray departed from.

    Attributes:
        primitive: The shape.
        material: The optical behavior of the shape.
        name: Optional label used in logs and error messages.
    """

    primitive: Primitive
    material: Material
    name: str | None = None

    def __post_init__(self) -> None:
        try:
            material_type(self.material)
            area(self.primitive)
        except TypeError as e:
            raise ValueError(f"{self._label()}: {e}") from e
        if is_medium(self.material) and not is_closed(self.primitive):
            raise ValueError(
                f"{self._label()}: {type(self.material).__name__} needs a closed "
                f"primitive, got {type(self.primitive).__name__}"
            )
        if isinstance(self.material, Emissive) and not can_sample(self.primitive):
            raise ValueError(
                f"{self._label()}: {type(self.primitive).__name__} cannot be a light"
            )

    @property
    def is_light(self) -> bool:
        return isinstance(self.material, Emissive)

    def _label(self) -> str:
        return self.name if self.name is not None else type(self.primitive).__name__


@dataclass(frozen=True)
class Scene:
    """An ordered, read-only collection of scene objects.

    Attributes:
        objects: The scene objects in insertion order.
        lights: The emissive subset of ``objects`` (derived).
    """

    objects: tuple[SceneObject, ...]
    lights: tuple[SceneObject, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        objects = tuple(self.objects)
        for obj in objects:
            if not isinstance(obj, SceneObject):
                raise ValueError(f"Scene entries must be SceneObject, got {obj!r}")
        lights = tuple(obj for obj in objects if obj.is_light)
        if not lights:
            raise ValueError("Scene must contain at least one light")
        object.__setattr__(self, "objects", objects)
        object.__setattr__(self, "lights", lights)
        logger.debug(f"Scene built: {len(objects)} objects, {len(lights)} lights")

    @classmethod
    def from_objects(cls, objects: Iterable[SceneObject]) -> Scene:
        return cls(objects=tuple(objects))

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(self.objects)
