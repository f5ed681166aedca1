"""Scene module for scene construction and ray-scene queries.

This module handles scene representation and ray-scene queries:

Components:
    scene: SceneObject (primitive + material) and the immutable Scene
    intersection: Nearest-hit testing and media containment queries
    builder: SceneBuilder for incremental construction
    presets: Example scenes (lens, absorbing, mirror)

Scenes are built once, validated eagerly and never mutated afterwards, so a
single Scene is shared by reference across every render worker.
"""

from .builder import SceneBuilder
from .intersection import SceneHitRecord, media_at, nearest_hit
from .presets import (
    PRESETS,
    PresetParams,
    create_absorbing_scene,
    create_lens_scene,
    create_mirror_scene,
    create_preset,
)
from .scene import Scene, SceneObject

__all__ = [
    # Scene module
    "Scene",
    "SceneObject",
    # Intersection module
    "SceneHitRecord",
    "nearest_hit",
    "media_at",
    # Builder module
    "SceneBuilder",
    # Presets module
    "PRESETS",
    "PresetParams",
    "create_preset",
    "create_lens_scene",
    "create_absorbing_scene",
    "create_mirror_scene",
]
