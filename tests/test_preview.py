"""Tests for tone mapping and PNG export.

Tests cover:
- Tone mapping operators stay in [0, 1] and preserve ordering
- Gamma encoding
- 8-bit conversion, PNG save/load and RMSE
"""

import numpy as np
import pytest


@pytest.fixture
def hdr_image():
    """A small linear image with values well above 1."""
    values = np.linspace(0.0, 20.0, 4 * 5 * 3).reshape(4, 5, 3)
    return values


class TestToneMapping:
    """Tests for the tone mapping operators."""

    @pytest.mark.parametrize("method", ["none", "reinhard", "luminance", "exposure"])
    def test_output_in_unit_range(self, hdr_image, method):
        from lumen2d.preview import process_image_for_display

        display = process_image_for_display(hdr_image, tone_map=method)
        assert display.dtype == np.float32
        assert display.shape == hdr_image.shape
        assert display.min() >= 0.0
        assert display.max() <= 1.0

    def test_reinhard_values(self):
        from lumen2d.preview import tone_map_reinhard

        image = np.array([[[0.0, 1.0, 3.0]]])
        np.testing.assert_allclose(tone_map_reinhard(image), [[[0.0, 0.5, 0.75]]])

    def test_reinhard_is_monotonic(self, hdr_image):
        from lumen2d.preview import tone_map_reinhard

        flat = tone_map_reinhard(hdr_image).ravel()
        assert np.all(np.diff(flat) > 0.0)

    def test_luminance_keeps_hue(self):
        from lumen2d.preview import tone_map_luminance

        mapped = tone_map_luminance(np.array([[[4.0, 2.0, 1.0]]]))[0, 0]
        assert mapped[0] / mapped[1] == pytest.approx(2.0, rel=1e-5)
        assert mapped[1] / mapped[2] == pytest.approx(2.0, rel=1e-5)
        assert mapped.max() <= 1.0

    def test_luminance_keeps_hue_of_bright_saturated_colors(self):
        """A dominant channel is brought to 1 without clipping the others' ratios."""
        from lumen2d.preview import tone_map_luminance

        mapped = tone_map_luminance(np.array([[[50.0, 5.0, 0.5]]]))[0, 0]
        assert mapped[0] == pytest.approx(1.0, rel=1e-5)
        assert mapped[0] / mapped[1] == pytest.approx(10.0, rel=1e-5)
        assert mapped[1] / mapped[2] == pytest.approx(10.0, rel=1e-5)

    def test_exposure_brightens(self):
        from lumen2d.preview import tone_map_exposure

        image = np.full((1, 1, 3), 0.5)
        assert tone_map_exposure(image, 2.0)[0, 0, 0] > tone_map_exposure(image, 1.0)[0, 0, 0]

    def test_auto_exposure(self):
        from lumen2d.preview import auto_exposure, tone_map_exposure

        image = np.full((2, 2, 3), 4.0)
        exposure = auto_exposure(image)
        assert tone_map_exposure(image, exposure)[0, 0, 0] == pytest.approx(0.9, abs=0.01)
        assert auto_exposure(np.zeros((2, 2, 3))) == 1.0

    def test_unknown_method(self, hdr_image):
        from lumen2d.preview import process_image_for_display

        with pytest.raises(ValueError, match="Unknown tone mapping"):
            process_image_for_display(hdr_image, tone_map="filmic")

    def test_wrong_shape(self):
        from lumen2d.preview import process_image_for_display

        with pytest.raises(ValueError, match="H, W, 3"):
            process_image_for_display(np.zeros((4, 4)))


class TestGamma:
    """Tests for gamma encoding."""

    def test_gamma_brightens_midtones(self):
        from lumen2d.preview import apply_gamma

        image = np.full((1, 1, 3), 0.25)
        np.testing.assert_allclose(apply_gamma(image, 2.0), 0.5)
        np.testing.assert_allclose(apply_gamma(image, 1.0), 0.25)

    def test_gamma_clamps(self):
        from lumen2d.preview import apply_gamma

        image = np.array([[[-1.0, 0.5, 3.0]]])
        encoded = apply_gamma(image, 1.0)
        np.testing.assert_allclose(encoded, [[[0.0, 0.5, 1.0]]])

    def test_invalid_gamma(self):
        from lumen2d.preview import apply_gamma

        with pytest.raises(ValueError, match="gamma"):
            apply_gamma(np.zeros((1, 1, 3)), 0.0)


class TestExport:
    """Tests for 8-bit conversion and PNG files."""

    def test_image_to_uint8(self):
        from lumen2d.preview import image_to_uint8

        image = np.array([[[0.0, 0.5, 1.0], [2.0, 0.25, 0.75]]])
        pixels = image_to_uint8(image, gamma=1.0)
        assert pixels.dtype == np.uint8
        np.testing.assert_array_equal(pixels, [[[0, 128, 255], [255, 64, 191]]])

    def test_png_round_trip(self, tmp_path):
        from lumen2d.preview import image_to_uint8, load_png, save_png_from_array

        rng = np.random.default_rng(0)
        image = rng.random((6, 9, 3))
        path = tmp_path / "image.png"
        save_png_from_array(image, path, gamma=2.2)

        loaded = load_png(path)
        assert loaded.shape == (6, 9, 3)
        np.testing.assert_array_equal(loaded, image_to_uint8(image, gamma=2.2))

    def test_save_buffer_png(self, tmp_path):
        from lumen2d.core.buffer import PixelBuffer
        from lumen2d.preview import load_png, save_png

        buffer = PixelBuffer(3, 2)
        buffer.add_sample(2, 1, np.array([1.0, 0.0, 0.0]))
        path = tmp_path / "buffer.png"
        save_png(buffer, path, gamma=1.0)

        loaded = load_png(path)
        assert loaded.shape == (2, 3, 3)
        np.testing.assert_array_equal(loaded[1, 2], [255, 0, 0])
        np.testing.assert_array_equal(loaded[0, 0], [0, 0, 0])

    def test_radiance_image_rejects_other_types(self):
        from lumen2d.preview import radiance_image

        with pytest.raises(TypeError):
            radiance_image(np.zeros((2, 2, 3)))

    def test_rmse(self):
        from lumen2d.preview import compute_rmse

        a = np.zeros((2, 2, 3), dtype=np.uint8)
        b = np.full((2, 2, 3), 3, dtype=np.uint8)
        assert compute_rmse(a, a) == 0.0
        assert compute_rmse(a, b) == pytest.approx(3.0)

    def test_rmse_shape_mismatch(self):
        from lumen2d.preview import compute_rmse

        with pytest.raises(ValueError, match="shapes"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))
