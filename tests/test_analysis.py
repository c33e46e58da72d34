"""
Analyzer Tests
==============

Tests for the focus, illumination and skin coverage analyzers.
"""

import numpy as np
import pytest

from conftest import make_rgb


class TestFocusAnalyzer:
    """Mean absolute Laplacian over interior pixels."""

    def test_uniform_image_is_zero(self):
        from finger_quality.analysis import FocusAnalyzer

        gray = np.full((40, 40), 128, dtype=np.uint8)
        assert FocusAnalyzer().score(gray).value == 0.0

    def test_checkerboard_is_maximal(self):
        """Every interior pixel differs from all four neighbours by 255."""
        from finger_quality.analysis import FocusAnalyzer

        gray = (np.indices((20, 20)).sum(axis=0) % 2 * 255).astype(np.uint8)
        assert FocusAnalyzer().score(gray).value == pytest.approx(1020.0)

    def test_vertical_edge(self):
        """Two interior columns respond to a step edge."""
        from finger_quality.analysis import FocusAnalyzer

        gray = np.zeros((10, 10), dtype=np.uint8)
        gray[:, 5:] = 100
        # 8 rows x 2 columns x 100 over 8 x 8 interior pixels
        assert FocusAnalyzer().score(gray).value == pytest.approx(25.0)

    @pytest.mark.parametrize("shape", [(2, 2), (2, 50), (50, 2), (0, 0)])
    def test_too_small_is_zero(self, shape):
        from finger_quality.analysis import FocusAnalyzer

        assert FocusAnalyzer().score(np.zeros(shape, dtype=np.uint8)).value == 0.0

    def test_rejects_colour_input(self):
        from finger_quality.analysis import FocusAnalyzer

        with pytest.raises(ValueError):
            FocusAnalyzer().score(make_rgb(10, 10))


class TestIlluminationAnalyzer:
    """Mean luminance."""

    def test_uniform_mean(self):
        from finger_quality.analysis import IlluminationAnalyzer

        gray = np.full((30, 30), 128, dtype=np.uint8)
        assert IlluminationAnalyzer().score(gray).value == 128.0

    def test_mixed_mean(self):
        from finger_quality.analysis import IlluminationAnalyzer

        gray = np.full((10, 10), 100, dtype=np.uint8)
        gray[:, 5:] = 200
        assert IlluminationAnalyzer().score(gray).value == pytest.approx(150.0)

    def test_empty_is_zero(self):
        from finger_quality.analysis import IlluminationAnalyzer

        assert IlluminationAnalyzer().score(np.zeros((0, 0), dtype=np.uint8)).value == 0.0


class TestSkinCoverageAnalyzer:
    """Rule-based skin percentage inside the centered circle."""

    def test_skin_tone_is_full_coverage(self):
        from finger_quality.analysis import SkinCoverageAnalyzer

        assert SkinCoverageAnalyzer().score(make_rgb(320, 320)).value == 100.0

    @pytest.mark.parametrize("color", [(255, 0, 0), (0, 0, 255), (0, 0, 0), (255, 255, 255)])
    def test_non_skin_colours(self, color):
        """Saturated red fails the green and blue floors."""
        from finger_quality.analysis import SkinCoverageAnalyzer

        assert SkinCoverageAnalyzer().score(make_rgb(320, 320, color)).value == 0.0

    def test_margin_bounds_are_exclusive(self):
        from finger_quality.analysis import SkinCoverageAnalyzer

        samples = np.array(
            [
                [60, 51, 44],   # r-g = 9, r-b = 16
                [59, 51, 44],   # r-g = 8
                [60, 51, 45],   # r-b = 15
                [51, 36, 21],   # just above every floor
                [50, 36, 21],   # r not above 50
            ],
            dtype=np.uint8,
        )
        mask = SkinCoverageAnalyzer().skin_mask(samples)
        assert mask.tolist() == [True, False, False, True, False]

    def test_half_covered(self):
        from finger_quality.analysis import SkinCoverageAnalyzer

        rgb = make_rgb(100, 100, (0, 0, 0))
        rgb[:, :50] = (200, 150, 120)
        value = SkinCoverageAnalyzer().score(rgb).value
        assert 40.0 < value < 60.0

    def test_tiny_image_has_no_samples(self):
        from finger_quality.analysis import SkinCoverageAnalyzer

        assert SkinCoverageAnalyzer().score(make_rgb(1, 1)).value == 0.0

    def test_rejects_grayscale(self):
        from finger_quality.analysis import SkinCoverageAnalyzer

        with pytest.raises(ValueError):
            SkinCoverageAnalyzer().score(np.zeros((10, 10), dtype=np.uint8))


class TestAnalyzerProtocol:
    """Shared structural type."""

    def test_analyzers_satisfy_protocol(self):
        from finger_quality.analysis import Analyzer, FocusAnalyzer, IlluminationAnalyzer, SkinCoverageAnalyzer

        analyzers = [FocusAnalyzer(), IlluminationAnalyzer(), SkinCoverageAnalyzer()]
        assert all(isinstance(analyzer, Analyzer) for analyzer in analyzers)
        assert [analyzer.name for analyzer in analyzers] == ["focus", "illumination", "coverage"]

    def test_plain_object_is_not_an_analyzer(self):
        from finger_quality.analysis import Analyzer

        assert not isinstance(object(), Analyzer)


class TestRegions:
    """Center crop and circle sampling."""

    def test_wide_crop_is_clamped(self):
        """A wide image yields a non-square crop."""
        from finger_quality.geometry import RegionCropper

        region = RegionCropper(0.55).crop(200, 100)
        assert (region.left, region.top, region.right, region.bottom) == (45, 0, 155, 100)
        assert (region.width, region.height) == (110, 100)

    def test_square_crop(self):
        from finger_quality.geometry import RegionCropper

        region = RegionCropper(0.55).crop(400, 400)
        assert (region.left, region.top, region.width, region.height) == (90, 90, 220, 220)

    def test_tall_crop(self):
        from finger_quality.geometry import RegionCropper

        region = RegionCropper(0.55).crop(100, 200)
        assert (region.left, region.top, region.width, region.height) == (23, 73, 55, 55)

    def test_degenerate_crop_is_empty(self):
        from finger_quality.geometry import RegionCropper

        assert RegionCropper(0.55).crop(0, 0).is_empty
        assert RegionCropper(0.55).crop(1, 1).is_empty

    def test_crop_image_copies(self):
        from finger_quality.geometry import RegionCropper

        rgb = make_rgb(200, 100)
        cropped = RegionCropper(0.55).crop_image(rgb)
        assert cropped.shape == (100, 110, 3)
        cropped[:] = 0
        assert rgb[50, 100, 0] == 200

    def test_invalid_ratio(self):
        from finger_quality.geometry import RegionCropper

        with pytest.raises(ValueError):
            RegionCropper(0)

    def test_centered_circle(self):
        from finger_quality.geometry import CircleRegion

        circle = CircleRegion.centered(120, 90, 0.5, 1 / 6)
        assert (circle.center_x, circle.center_y, circle.radius) == (60, 45, 20)

    def test_sample_points_inside_circle_and_image(self):
        from finger_quality.geometry import CircleRegion

        circle = CircleRegion(center_x=5, center_y=5, radius=10)
        rows, cols = circle.sample_points(width=12, height=8, stride=2)

        assert rows.size > 0
        assert rows.min() >= 0 and rows.max() < 8
        assert cols.min() >= 0 and cols.max() < 12
        assert np.all((rows - 5) ** 2 + (cols - 5) ** 2 <= 100)

    def test_zero_radius_has_no_points(self):
        from finger_quality.geometry import CircleRegion

        rows, cols = CircleRegion(center_x=5, center_y=5, radius=0).sample_points(10, 10)
        assert rows.size == 0 and cols.size == 0
