"""Recursive light-path integrator.

trace() follows one ray through the scene and returns the radiance it carries
back to its origin. It is a pure function of the ray, the read-only scene and
an explicit random generator, so any number of workers may call it
concurrently on a shared Scene.

Material behavior:
    - Emissive: returns the light intensity
    - Diffuse: direct light sampling, one shadow ray per light, no bounce
    - Specular: mirror reflection, scaled by the reflectivity
    - Refractive: Snell refraction, total internal reflection falls back to
      reflection
    - Absorbing: the ray crosses the boundary unchanged

Media are tracked as a stack of the closed objects the ray is currently
inside, ordered outermost to innermost. Beer-Lambert attenuation uses the
extinction of the innermost medium and is applied only to the distance
travelled inside it; free-space travel is never attenuated. Rays leaving a
medium boundary start exactly at the hit point, so interior path lengths run
boundary to boundary; T_MIN keeps them from re-hitting the boundary they left.

Example:
    >>> import numpy as np
    >>> from lumen2d.core.ray import make_ray
    >>> from lumen2d.core.tracer import trace
    >>> rng = np.random.default_rng(0)
    >>> radiance = trace(make_ray((0.5, 0.5), (0.0, 1.0)), scene, rng)
"""

from __future__ import annotations

import numpy as np

from lumen2d.core.ray import Ray, offset_ray_origin
from lumen2d.core.settings import TraceOptions
from lumen2d.core.spectrum import Spectrum, zero_spectrum
from lumen2d.geometry.primitive import is_flat, sample_point
from lumen2d.materials import (
    Absorbing,
    Diffuse,
    Emissive,
    Refractive,
    Specular,
    diffuse_falloff,
    medium_extinction,
    scatter_refractive,
    scatter_specular,
    transmittance,
)
from lumen2d.scene.intersection import SceneHitRecord, nearest_hit
from lumen2d.scene.scene import Scene, SceneObject

# Media stack: closed medium objects the ray is inside, outermost first
Media = tuple[SceneObject, ...]

DEFAULT_TRACE_OPTIONS = TraceOptions()

# Upper bound on medium boundaries a single shadow ray may cross
MAX_SHADOW_CROSSINGS = 64


def trace(
    ray: Ray,
    scene: Scene,
    rng: np.random.Generator,
    options: TraceOptions = DEFAULT_TRACE_OPTIONS,
    depth: int = 0,
    media: Media = (),
    exclude: SceneObject | None = None,
) -> Spectrum:
    """Trace a ray through the scene.

    Args:
        ray: The ray to follow. Its direction must be unit length.
        scene: The scene to trace against.
        rng: Generator driving every stochastic choice along the path.
        options: Depth limit, ambient index and background radiance.
        depth: Number of bounces taken so far.
        media: Media the ray origin lies in, outermost first.
        exclude: Object the ray just departed from, skipped by the first
            intersection query.

    Returns:
        The per-channel radiance carried back along the ray. Never negative.
    """
    if depth > options.max_depth:
        return zero_spectrum()

    extinction = _current_extinction(media)
    record = nearest_hit(ray, scene, exclude=exclude)
    if record is None:
        return options.background_radiance * transmittance(extinction, float("inf"))

    radiance = _shade(ray, record, scene, rng, options, depth, media)
    return radiance * transmittance(extinction, record.distance)


def _shade(
    ray: Ray,
    record: SceneHitRecord,
    scene: Scene,
    rng: np.random.Generator,
    options: TraceOptions,
    depth: int,
    media: Media,
) -> Spectrum:
    material = record.material
    match material:
        case Emissive():
            return material.radiance.copy()
        case Diffuse():
            return material.albedo * _direct_lighting(record, scene, rng, media)
        case Specular():
            return material.reflectance * _trace_specular(ray, record, scene, rng, options, depth, media)
        case Refractive():
            return _trace_refractive(ray, record, material, scene, rng, options, depth, media)
        case Absorbing():
            return _trace_absorbing(ray, record, scene, rng, options, depth, media)
    raise TypeError(f"Unknown material: {material!r}")


# =============================================================================
# Surface Rules
# =============================================================================


def _direct_lighting(
    record: SceneHitRecord,
    scene: Scene,
    rng: np.random.Generator,
    media: Media,
) -> Spectrum:
    """Gather the light arriving directly at a diffuse hit point.

    Samples one point on every light and casts a shadow ray toward it.
    """
    hit = record.hit
    normal = hit.normal if hit.front_face else -hit.normal
    departed = _departed(record)
    total = zero_spectrum()

    for light in scene.lights:
        if light is record.obj:
            continue
        target = sample_point(light.primitive, rng)
        offset = target - hit.point
        if offset.length_squared() == 0.0:
            continue
        to_light = offset.normalized()
        if normal.dot(to_light) <= 0.0:
            continue

        origin = offset_ray_origin(hit.point, normal, to_light)
        shadow = _shadow_transmittance(Ray(origin, to_light), light, offset.length(), scene, media, departed)
        if shadow is None:
            continue
        transmit, distance = shadow
        weight = diffuse_falloff(normal, to_light, distance)
        total += light.material.radiance * transmit * weight

    return total


def _shadow_transmittance(
    ray: Ray,
    light: SceneObject,
    max_distance: float,
    scene: Scene,
    media: Media,
    exclude: SceneObject | None,
) -> tuple[Spectrum, float] | None:
    """Walk a shadow ray toward a light.

    Absorbing media attenuate the shadow ray; any other surface blocks it.

    Returns:
        (transmittance, distance travelled to the light surface), or None if
        the light is occluded.
    """
    transmit = np.ones(3, dtype=np.float64)
    travelled = 0.0
    remaining = max_distance

    for _ in range(MAX_SHADOW_CROSSINGS):
        record = nearest_hit(ray, scene, exclude=exclude, t_max=remaining)
        extinction = _current_extinction(media)
        if record is None:
            # The sample lies on the light surface itself
            return transmit * transmittance(extinction, remaining), travelled + remaining

        transmit = transmit * transmittance(extinction, record.distance)
        travelled += record.distance
        if record.obj is light:
            return transmit, travelled
        if not isinstance(record.material, Absorbing):
            return None

        media = _cross_boundary(media, record.obj, record.hit.front_face)
        remaining -= record.distance
        ray = Ray(record.hit.point, ray.direction)
        exclude = _departed(record)

    return None


def _trace_specular(
    ray: Ray,
    record: SceneHitRecord,
    scene: Scene,
    rng: np.random.Generator,
    options: TraceOptions,
    depth: int,
    media: Media,
) -> Spectrum:
    hit = record.hit
    direction = scatter_specular(ray.direction, hit.normal)
    origin = offset_ray_origin(hit.point, hit.normal, direction)
    return trace(Ray(origin, direction), scene, rng, options, depth + 1, media, _departed(record))


def _trace_refractive(
    ray: Ray,
    record: SceneHitRecord,
    material: Refractive,
    scene: Scene,
    rng: np.random.Generator,
    options: TraceOptions,
    depth: int,
    media: Media,
) -> Spectrum:
    """Refract (or reflect) at a refractive boundary.

    The indices on each side come from the media stack: entering goes from the
    current medium into the material, exiting goes from the material into
    whatever medium remains once it is popped.
    """
    hit = record.hit
    entering = hit.front_face
    crossed = _cross_boundary(media, record.obj, entering)

    if entering:
        eta = _current_ior(media, options.ambient_ior) / material.ior
        normal = hit.normal
    else:
        eta = material.ior / _current_ior(crossed, options.ambient_ior)
        normal = -hit.normal

    direction, transmitted = scatter_refractive(ray.direction, normal, eta, rng, material.fresnel)
    next_media = crossed if transmitted else media
    return trace(Ray(hit.point, direction), scene, rng, options, depth + 1, next_media, _departed(record))


def _trace_absorbing(
    ray: Ray,
    record: SceneHitRecord,
    scene: Scene,
    rng: np.random.Generator,
    options: TraceOptions,
    depth: int,
    media: Media,
) -> Spectrum:
    hit = record.hit
    next_media = _cross_boundary(media, record.obj, hit.front_face)
    return trace(Ray(hit.point, ray.direction), scene, rng, options, depth + 1, next_media, _departed(record))


# =============================================================================
# Media Stack Helpers
# =============================================================================


def _current_extinction(media: Media) -> Spectrum:
    """Get the extinction of the innermost medium (zero outside all media)."""
    if not media:
        return zero_spectrum()
    return medium_extinction(media[-1].material)


def _current_ior(media: Media, ambient_ior: float) -> float:
    """Get the index of the innermost refractive medium, else the ambient index."""
    for obj in reversed(media):
        if isinstance(obj.material, Refractive):
            return obj.material.ior
    return ambient_ior


def _cross_boundary(media: Media, obj: SceneObject, entering: bool) -> Media:
    """Push ``obj`` on entry, remove it on exit."""
    if entering:
        if any(m is obj for m in media):
            return media
        return media + (obj,)
    for i in range(len(media) - 1, -1, -1):
        if media[i] is obj:
            return media[:i] + media[i + 1 :]
    return media


def _departed(record: SceneHitRecord) -> SceneObject | None:
    # A ray leaving a flat primitive can never hit it again
    return record.obj if is_flat(record.primitive) else None
