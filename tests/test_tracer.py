"""Tests for the recursive light-path tracer.

Tests cover:
- Termination: escape to background, depth exhaustion
- Emitters, diffuse direct lighting with the 1/d falloff, occlusion
- Specular reflection scaled by reflectivity
- Refraction through slabs (Snell bending) and TIR-free straight passes
- Beer-Lambert attenuation applied only inside media
"""

import math

import numpy as np
import pytest


def _trace_mean(ray, scene, options=None, samples=200, seed=0, **kwargs):
    """Average trace() over independent samples of the same ray."""
    from lumen2d.core.tracer import DEFAULT_TRACE_OPTIONS, trace

    rng = np.random.default_rng(seed)
    options = options or DEFAULT_TRACE_OPTIONS
    total = np.zeros(3)
    for _ in range(samples):
        total += trace(ray, scene, rng, options, **kwargs)
    return total / samples


def _far_light():
    """A light well away from every test ray."""
    from lumen2d.geometry import make_circle
    from lumen2d.materials import Emissive
    from lumen2d.scene import SceneObject

    return SceneObject(make_circle((50.0, 50.0), 0.1), Emissive(1.0), name="far_light")


class TestTermination:
    """Tests for escaping rays and the depth limit."""

    def test_escaping_ray_returns_background(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.settings import TraceOptions
        from lumen2d.core.tracer import trace
        from lumen2d.scene import Scene

        scene = Scene(objects=(_far_light(),))
        radiance = trace(make_ray((0.0, 0.0), (1.0, 0.0)), scene, rng, TraceOptions(background=(0.1, 0.2, 0.3)))
        np.testing.assert_allclose(radiance, [0.1, 0.2, 0.3])

    def test_escaping_ray_default_background_is_black(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.scene import Scene

        scene = Scene(objects=(_far_light(),))
        np.testing.assert_array_equal(trace(make_ray((0.0, 0.0), (1.0, 0.0)), scene, rng), [0.0, 0.0, 0.0])

    def test_depth_beyond_limit_returns_zero(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.settings import TraceOptions
        from lumen2d.core.tracer import trace
        from lumen2d.scene import Scene

        scene = Scene(objects=(_far_light(),))
        options = TraceOptions(max_depth=3, background=1.0)
        np.testing.assert_array_equal(
            trace(make_ray((0.0, 0.0), (1.0, 0.0)), scene, rng, options, depth=4), [0.0, 0.0, 0.0]
        )

    def test_facing_mirrors_terminate_with_zero(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.settings import TraceOptions
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Specular
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_segment((0.0, -1.0), (0.0, 1.0), Specular(1.0))
        builder.add_segment((1.0, -1.0), (1.0, 1.0), Specular(1.0))
        builder.add_light_circle((50.0, 50.0), 0.1, 1.0)
        scene = builder.build()

        radiance = trace(make_ray((0.5, 0.0), (1.0, 0.0)), scene, rng, TraceOptions(max_depth=8, background=1.0))
        np.testing.assert_array_equal(radiance, [0.0, 0.0, 0.0])


class TestEmissiveAndDiffuse:
    """Tests for lights and diffuse direct lighting."""

    def test_hitting_light_returns_intensity(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_light_circle((2.0, 0.0), 0.5, (1.0, 2.0, 3.0))
        radiance = trace(make_ray((0.0, 0.0), (1.0, 0.0)), builder.build(), rng)
        np.testing.assert_allclose(radiance, [1.0, 2.0, 3.0])

    def test_diffuse_follows_inverse_distance(self, lit_wall_scene):
        """A light of intensity I at distance d gives radiance ~ I / d."""
        from lumen2d.core.ray import make_ray

        ray = make_ray((0.3, 0.8), (1.0, 1.0))  # hits the floor at (0.5, 1.0)
        near = _trace_mean(ray, lit_wall_scene(distance=0.25))
        far = _trace_mean(ray, lit_wall_scene(distance=0.5))

        np.testing.assert_allclose(far, 1.0 / 0.5, rtol=0.03)
        np.testing.assert_allclose(near, 1.0 / 0.25, rtol=0.03)
        np.testing.assert_allclose(near / far, 2.0, rtol=0.03)

    def test_diffuse_scales_with_intensity_and_albedo(self, lit_wall_scene):
        from lumen2d.core.ray import make_ray

        ray = make_ray((0.3, 0.8), (1.0, 1.0))
        base = _trace_mean(ray, lit_wall_scene(intensity=1.0), samples=50)
        scaled = _trace_mean(ray, lit_wall_scene(intensity=3.0, color=(1.0, 0.5, 0.0)), samples=50)

        np.testing.assert_allclose(scaled, base * np.array([3.0, 1.5, 0.0]))

    def test_occluded_light_contributes_nothing(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Diffuse
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_segment((0.0, 1.0), (1.0, 1.0), Diffuse((1.0, 1.0, 1.0)))
        builder.add_light_circle((0.5, 0.5), 0.005, 1.0)
        builder.add_segment((0.4, 0.75), (0.6, 0.75), Diffuse((1.0, 1.0, 1.0)), name="blocker")
        scene = builder.build()

        radiance = trace(make_ray((0.3, 0.8), (1.0, 1.0)), scene, rng)
        np.testing.assert_array_equal(radiance, [0.0, 0.0, 0.0])

    def test_light_behind_surface_contributes_nothing(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Diffuse
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_segment((0.0, 1.0), (1.0, 1.0), Diffuse((1.0, 1.0, 1.0)))
        builder.add_light_circle((0.5, 1.5), 0.005, 1.0)  # on the other side of the floor
        scene = builder.build()

        np.testing.assert_array_equal(trace(make_ray((0.3, 0.8), (1.0, 1.0)), scene, rng), [0.0, 0.0, 0.0])

    def test_segment_light(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Diffuse
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_segment((0.0, 1.0), (1.0, 1.0), Diffuse((1.0, 1.0, 1.0)))
        builder.add_light_segment((0.499, 0.5), (0.501, 0.5), 1.0)
        scene = builder.build()

        radiance = _trace_mean(make_ray((0.3, 0.8), (1.0, 1.0)), scene, samples=20)
        np.testing.assert_allclose(radiance, 2.0, rtol=1e-3)


class TestSpecular:
    """Tests for mirror reflection."""

    def test_mirror_reflects_light_scaled_by_reflectivity(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Specular
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_segment((0.0, 1.0), (1.0, 1.0), Specular((0.5, 0.25, 1.0)))
        builder.add_light_circle((0.7, 0.5), 0.05, 2.0)
        scene = builder.build()

        # (0.3, 0.5) -> mirror at (0.5, 1.0) -> reflected toward (0.7, 0.5)
        radiance = trace(make_ray((0.3, 0.5), (0.2, 0.5)), scene, rng)
        np.testing.assert_allclose(radiance, [1.0, 0.5, 2.0])


class TestRefraction:
    """Tests for refractive media."""

    def test_slab_bends_ray_by_snells_law(self, rng):
        """A 45 degree ray through a glass slab lands where Snell's law predicts."""
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Refractive
        from lumen2d.scene import SceneBuilder

        sin_t = math.sin(math.radians(45.0)) / 1.5
        shift = 0.6 + 0.2 * sin_t / math.sqrt(1.0 - sin_t * sin_t)

        def scene_with_light_at(x):
            builder = SceneBuilder()
            builder.add_box((0.5, 0.5), (2.0, 0.2), Refractive(ior=1.5))  # y in [0.4, 0.6]
            builder.add_light_circle((x, 0.1), 0.01, 1.0)
            return builder.build()

        ray = make_ray((0.9, 0.9), (-1.0, -1.0))
        bent = trace(ray, scene_with_light_at(0.9 - shift), rng)
        straight = trace(ray, scene_with_light_at(0.1), rng)

        np.testing.assert_allclose(bent, [1.0, 1.0, 1.0])
        np.testing.assert_array_equal(straight, [0.0, 0.0, 0.0])

    def test_absorption_only_inside_the_medium(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Refractive
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_light_circle((0.5, 0.1), 0.05, 1.0)
        builder.add_box((0.5, 0.5), (0.4, 0.2), Refractive(ior=1.5, absorption=(0.0, 1.0, 2.0)))
        scene = builder.build()

        expected = np.exp(-np.array([0.0, 1.0, 2.0]) * 0.2)
        close = trace(make_ray((0.5, 0.65), (0.0, -1.0)), scene, rng)
        far = trace(make_ray((0.5, 5.0), (0.0, -1.0)), scene, rng)

        np.testing.assert_allclose(close, expected)
        np.testing.assert_allclose(far, expected)

    def test_total_internal_reflection_keeps_ray_inside(self, rng):
        """A steep ray inside glass is reflected, so a light beyond the face stays dark."""
        from lumen2d.core.ray import make_ray
        from lumen2d.core.settings import TraceOptions
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Refractive
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        glass = builder.add_box((0.0, 0.0), (10.0, 1.0), Refractive(ior=1.5))  # y in [-0.5, 0.5]
        builder.add_light_circle((0.0, 3.0), 2.0, 1.0)
        scene = builder.build()
        media = (scene.objects[glass],)

        steep = make_ray((0.0, 0.0), (math.sin(math.radians(60.0)), math.cos(math.radians(60.0))))
        shallow = make_ray((0.0, 0.0), (math.sin(math.radians(10.0)), math.cos(math.radians(10.0))))

        options = TraceOptions(max_depth=4)
        np.testing.assert_array_equal(trace(steep, scene, rng, options, media=media), [0.0, 0.0, 0.0])
        np.testing.assert_allclose(trace(shallow, scene, rng, options, media=media), [1.0, 1.0, 1.0])


class TestAbsorbingMedia:
    """Tests for Beer-Lambert media."""

    def test_ray_crosses_absorbing_medium_straight(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Absorbing
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_light_circle((3.0, 0.0), 0.5, 1.0)
        builder.add_box((1.0, 0.0), (0.5, 1.0), Absorbing((0.0, 2.0, 4.0)))
        scene = builder.build()

        radiance = trace(make_ray((0.0, 0.0), (1.0, 0.0)), scene, rng)
        np.testing.assert_allclose(radiance, np.exp(-np.array([0.0, 2.0, 4.0]) * 0.5))

    def test_interior_path_runs_boundary_to_boundary(self, rng):
        """Many crossings lose no interior path length to the origin offset."""
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Absorbing, Refractive
        from lumen2d.scene import SceneBuilder

        sigma = np.array([0.0, 3.0, 6.0])
        builder = SceneBuilder()
        builder.add_light_circle((5.0, 0.0), 0.5, 1.0)
        for x in (1.0, 1.5, 2.0):
            builder.add_box((x, 0.0), (0.2, 1.0), Absorbing(tuple(sigma)))
        builder.add_circle((3.0, 0.0), 0.25, Refractive(ior=1.5, absorption=tuple(sigma)))
        scene = builder.build()

        radiance = trace(make_ray((0.0, 0.0), (1.0, 0.0)), scene, rng)
        np.testing.assert_allclose(radiance, np.exp(-sigma * (3 * 0.2 + 0.5)), rtol=1e-9)

    def test_attenuation_decreases_with_thickness(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Absorbing
        from lumen2d.scene import SceneBuilder

        values = []
        for thickness in (0.0, 0.1, 0.5, 1.0):
            builder = SceneBuilder()
            builder.add_light_circle((3.0, 0.0), 0.5, 1.0)
            if thickness > 0.0:
                builder.add_box((1.0, 0.0), (thickness, 1.0), Absorbing(1.0))
            values.append(trace(make_ray((0.0, 0.0), (1.0, 0.0)), builder.build(), rng)[0])

        assert values[0] == pytest.approx(1.0)
        assert all(b < a for a, b in zip(values, values[1:]))

    def test_ray_starting_inside_medium(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.settings import TraceOptions
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Absorbing
        from lumen2d.scene import Scene, SceneObject
        from lumen2d.geometry import make_circle

        ink = SceneObject(make_circle((0.0, 0.0), 0.5), Absorbing((0.0, 1.0, 2.0)))
        scene = Scene(objects=(ink, _far_light()))

        radiance = trace(make_ray((0.0, 0.0), (1.0, 0.0)), scene, rng, TraceOptions(background=1.0), media=(ink,))
        np.testing.assert_allclose(radiance, np.exp(-np.array([0.0, 1.0, 2.0]) * 0.5))

    def test_escape_through_unbounded_medium_is_black(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.settings import TraceOptions
        from lumen2d.core.tracer import trace
        from lumen2d.geometry import make_half_plane
        from lumen2d.materials import Absorbing
        from lumen2d.scene import Scene, SceneObject

        sea = SceneObject(make_half_plane((0.0, 0.0), (0.0, -1.0)), Absorbing((0.0, 1.0, 2.0)))
        scene = Scene(objects=(sea, _far_light()))

        radiance = trace(make_ray((0.0, 1.0), (0.0, 1.0)), scene, rng, TraceOptions(background=1.0), media=(sea,))
        np.testing.assert_array_equal(radiance, [1.0, 0.0, 0.0])

    def test_shadow_ray_attenuated_by_absorbing_medium(self):
        from lumen2d.core.ray import make_ray
        from lumen2d.materials import Absorbing, Diffuse
        from lumen2d.scene import SceneBuilder

        sigma = np.array([0.0, 5.0, 10.0])
        ray = make_ray((0.3, 0.8), (1.0, 1.0))

        builder = SceneBuilder()
        builder.add_segment((0.0, 1.0), (1.0, 1.0), Diffuse((1.0, 1.0, 1.0)))
        builder.add_light_circle((0.5, 0.5), 0.005, 1.0)
        clear = _trace_mean(ray, builder.build(), samples=20)

        builder.add_box((0.5, 0.75), (0.2, 0.1), Absorbing(tuple(sigma)))
        tinted = _trace_mean(ray, builder.build(), samples=20)

        np.testing.assert_allclose(tinted / clear, np.exp(-sigma * 0.1), rtol=5e-3)

    def test_refractive_occluder_blocks_shadow_ray(self, rng):
        from lumen2d.core.ray import make_ray
        from lumen2d.core.tracer import trace
        from lumen2d.materials import Diffuse, Refractive
        from lumen2d.scene import SceneBuilder

        builder = SceneBuilder()
        builder.add_segment((0.0, 1.0), (1.0, 1.0), Diffuse((1.0, 1.0, 1.0)))
        builder.add_light_circle((0.5, 0.5), 0.005, 1.0)
        builder.add_box((0.5, 0.75), (0.2, 0.1), Refractive(ior=1.5))
        scene = builder.build()

        np.testing.assert_array_equal(trace(make_ray((0.3, 0.8), (1.0, 1.0)), scene, rng), [0.0, 0.0, 0.0])
