"""Tests for the progressive renderer.

Tests cover:
- Sample accounting across batches and calls, including failed batches
- Progress callbacks and the generator interface
- Reset reproducing the first render
- Image accessors and saving, rounded like PNG export
"""

import numpy as np
import pytest


@pytest.fixture
def renderer():
    from lumen2d.core.progressive import ProgressiveRenderer
    from lumen2d.core.settings import RenderSettings
    from lumen2d.scene import create_preset

    settings = RenderSettings(width=8, height=6, seed=11, tile_size=4)
    return ProgressiveRenderer(create_preset("lens"), settings, workers=2)


class TestSampleAccounting:
    """Tests for sample counting."""

    def test_initial_state(self, renderer):
        assert renderer.sample_count == 0
        assert renderer.width == 8
        assert renderer.height == 6
        np.testing.assert_array_equal(renderer.get_image(), np.zeros((6, 8, 3)))

    def test_render_accumulates(self, renderer):
        renderer.render(3, batch_size=2)
        assert renderer.sample_count == 3
        renderer.render(2)
        assert renderer.sample_count == 5
        np.testing.assert_array_equal(renderer.buffer.counts, 5)

    def test_zero_samples_is_noop(self, renderer):
        renderer.render(0)
        assert renderer.sample_count == 0

    def test_invalid_batch_size(self, renderer):
        with pytest.raises(ValueError, match="batch_size"):
            renderer.render(4, batch_size=0)

    def test_failed_batch_adds_nothing(self, renderer, monkeypatch):
        import lumen2d.core.scheduler as scheduler

        renderer.render(1)
        before = renderer.get_image()

        def failing_render_tile(scene, settings, tile, rng, samples=None):
            if tile.index == 0:
                raise RuntimeError("tile exploded")
            return np.ones((tile.height, tile.width, 3))

        monkeypatch.setattr(scheduler, "render_tile", failing_render_tile)
        with pytest.raises(RuntimeError, match="tile exploded"):
            renderer.render(2, batch_size=2)

        assert renderer.sample_count == 1
        np.testing.assert_array_equal(renderer.buffer.counts, 1)
        np.testing.assert_array_equal(renderer.get_image(), before)


class TestProgress:
    """Tests for callbacks and the generator interface."""

    def test_callback_after_each_batch(self, renderer):
        calls = []
        renderer.render(5, batch_size=2, callback=lambda current, target: calls.append((current, target)))
        assert calls == [(2, 5), (4, 5), (5, 5)]

    def test_generator_yields_progress(self, renderer):
        renderer.render(1)
        progress = list(renderer.render_progressive(4, batch_size=3))
        assert progress == [(4, 5), (5, 5)]


class TestReset:
    """Tests for resetting the accumulation."""

    def test_reset_clears(self, renderer):
        renderer.render(2)
        renderer.reset()
        assert renderer.sample_count == 0
        assert renderer.buffer.total_energy() == 0.0

    def test_reset_reproduces_first_render(self, renderer):
        renderer.render(2, batch_size=1)
        first = renderer.get_image()
        renderer.reset()
        renderer.render(2, batch_size=1)
        np.testing.assert_array_equal(renderer.get_image(), first)

    def test_batches_are_independent(self, renderer):
        """Each batch draws fresh samples rather than repeating the first."""
        from lumen2d.core.progressive import ProgressiveRenderer

        renderer.render(1)
        one = renderer.get_image()
        renderer.render(1)
        two = renderer.get_image()

        single = ProgressiveRenderer(renderer.scene, renderer.settings, workers=1)
        single.render(2, batch_size=2)

        assert not np.array_equal(one, two)
        assert not np.array_equal(two, single.get_image())


class TestImageOutput:
    """Tests for image accessors."""

    def test_numpy_image_range(self, renderer):
        renderer.render(2)
        image = renderer.get_image_numpy(gamma=2.2)
        assert image.dtype == np.float32
        assert image.shape == (6, 8, 3)
        assert image.min() >= 0.0
        assert image.max() <= 1.0

    def test_uint8_image(self, renderer):
        renderer.render(1)
        image = renderer.get_image_uint8()
        assert image.dtype == np.uint8
        assert image.shape == (6, 8, 3)

    def test_uint8_image_matches_png_export(self, renderer, tmp_path):
        """Accessor, save_image and PNG export all round to the same bytes."""
        from lumen2d.preview import image_to_uint8, load_png

        renderer.render(2)
        expected = image_to_uint8(renderer.get_image(), gamma=2.2)
        np.testing.assert_array_equal(renderer.get_image_uint8(), expected)

        path = tmp_path / "render.png"
        renderer.save_image(str(path))
        np.testing.assert_array_equal(load_png(path), expected)

    def test_uint8_rounds_to_nearest(self, renderer):
        renderer.buffer.add_sample(0, 0, np.array([0.5, 0.999, 0.25]))
        np.testing.assert_array_equal(renderer.get_image_uint8(gamma=1.0)[0, 0], [128, 255, 64])

    def test_save_image(self, renderer, tmp_path):
        from PIL import Image

        renderer.render(1)
        path = tmp_path / "render.png"
        renderer.save_image(str(path))

        with Image.open(path) as saved:
            assert saved.size == (8, 6)
            assert saved.mode == "RGB"

    def test_repr(self, renderer):
        assert repr(renderer) == "ProgressiveRenderer(width=8, height=6, samples=0)"
