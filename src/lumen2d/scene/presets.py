"""Example scene presets.

Ready-made scenes exercising each material, laid out in the unit square
[0, 1] x [0, 1] that a square render with default settings covers. Rows grow
along +y, so y = 0 is the top of the image.

Example:
    >>> from lumen2d.scene.presets import PresetParams, create_preset
    >>> scene = create_preset("lens", PresetParams(light_intensity=6.0))
    >>> len(scene.lights)
    1
"""

import math
from collections.abc import Callable
from dataclasses import dataclass

from lumen2d.materials import Absorbing, Diffuse, Refractive, Specular

from .builder import SceneBuilder
from .scene import Scene

# =============================================================================
# Preset Parameters
# =============================================================================


@dataclass
class PresetParams:
    """Parameters shared by the preset scenes.

    Attributes:
        light_intensity: Radiant intensity of the main light.
            Default is 4.0.
        light_color: RGB tint of the main light, multiplied with the intensity.
            Default is white (1.0, 1.0, 1.0).
        light_radius: Radius of the main circular light.
            Default is 0.04.
        wall_color: RGB albedo of the diffuse walls.
            Default is (0.73, 0.73, 0.73).
    """

    light_intensity: float = 4.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    light_radius: float = 0.04
    wall_color: tuple[float, float, float] = (0.73, 0.73, 0.73)

    @property
    def light_radiance(self) -> tuple[float, float, float]:
        r, g, b = self.light_color
        return (r * self.light_intensity, g * self.light_intensity, b * self.light_intensity)


# Material constants
GLASS_IOR = 1.5
WATER_EXTINCTION = (1.2, 0.3, 0.1)
MIRROR_REFLECTIVITY = 0.95
INK_EXTINCTION = (0.5, 4.0, 8.0)
TINTED_GLASS_ABSORPTION = (4.0, 0.5, 3.0)
RED_WALL_ALBEDO = (0.65, 0.05, 0.05)
GREEN_WALL_ALBEDO = (0.12, 0.45, 0.15)


def _add_room(builder: SceneBuilder, params: PresetParams) -> None:
    """Add the floor and the two side walls shared by every preset."""
    builder.add_segment((0.05, 0.95), (0.95, 0.95), Diffuse(params.wall_color), name="floor")
    builder.add_segment((0.05, 0.05), (0.05, 0.95), Diffuse(RED_WALL_ALBEDO), name="left_wall")
    builder.add_segment((0.95, 0.05), (0.95, 0.95), Diffuse(GREEN_WALL_ALBEDO), name="right_wall")


# =============================================================================
# Preset Factories
# =============================================================================


def create_lens_scene(params: PresetParams | None = None) -> Scene:
    """A glass lens and a tinted glass prism under one light.

    Looking through the lens shows a refracted image of the light. Glass blocks
    shadow rays, so the lens and prism cast shadows on the floor beneath them.
    """
    if params is None:
        params = PresetParams()

    builder = SceneBuilder()
    _add_room(builder, params)
    builder.add_light_circle((0.5, 0.15), params.light_radius, params.light_radiance, name="light")
    builder.add_circle((0.5, 0.5), 0.15, Refractive(ior=GLASS_IOR, fresnel=True), name="lens")

    height = 0.18
    apex = (0.75, 0.62)
    half_base = height / math.sqrt(3.0)
    builder.add_polygon(
        [apex, (apex[0] - half_base, apex[1] + height), (apex[0] + half_base, apex[1] + height)],
        Refractive(ior=GLASS_IOR, absorption=TINTED_GLASS_ABSORPTION),
        name="prism",
    )
    return builder.build()


def create_absorbing_scene(params: PresetParams | None = None) -> Scene:
    """A tank of blue-green water with a blot of ink, lit from above.

    Both media only absorb, so shadow rays pass through them: the floor under
    the tank is lit with a blue-green tint, and more darkly where the ink lies
    between it and the light.
    """
    if params is None:
        params = PresetParams()

    builder = SceneBuilder()
    _add_room(builder, params)
    builder.add_light_circle((0.5, 0.2), params.light_radius, params.light_radiance, name="light")
    builder.add_box((0.5, 0.79), (0.88, 0.28), Absorbing(WATER_EXTINCTION), name="water")
    builder.add_circle((0.35, 0.8), 0.08, Absorbing(INK_EXTINCTION), name="ink")
    return builder.build()


def create_mirror_scene(params: PresetParams | None = None) -> Scene:
    """Two tilted mirrors redirecting an occluded light onto the walls."""
    if params is None:
        params = PresetParams()

    builder = SceneBuilder()
    _add_room(builder, params)
    builder.add_light_circle((0.2, 0.25), params.light_radius, params.light_radiance, name="light")
    builder.add_box((0.35, 0.45), (0.02, 0.3), Diffuse((0.2, 0.2, 0.2)), name="blocker")
    builder.add_segment((0.55, 0.1), (0.85, 0.3), Specular(MIRROR_REFLECTIVITY), name="mirror_top")
    builder.add_segment((0.6, 0.85), (0.9, 0.65), Specular(MIRROR_REFLECTIVITY), name="mirror_bottom")
    builder.add_circle((0.7, 0.55), 0.06, Specular(MIRROR_REFLECTIVITY), name="ball")
    return builder.build()


PRESETS: dict[str, Callable[[PresetParams | None], Scene]] = {
    "lens": create_lens_scene,
    "absorbing": create_absorbing_scene,
    "mirror": create_mirror_scene,
}


def create_preset(name: str, params: PresetParams | None = None) -> Scene:
    """Build a preset scene by name.

    Raises:
        ValueError: If the name is not one of PRESETS.
    """
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown preset {name!r}, expected one of {sorted(PRESETS)}") from None
    return factory(params)
