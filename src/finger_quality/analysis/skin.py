"""
Skin Coverage Analyzer
======================

Percentage of skin-coloured samples inside a centered circle of the
resized colour crop.

Classifier:
    A pixel (r, g, b) is skin iff all of
        r > 50, g > 35, b > 20,
        r > g, r > b,
        r - g > 8, r - b > 15
    hold. This is a fixed rule tuned for typical indoor lighting, not a
    learned model.

Sampling:
    Circle radius = 0.45 * width, stride-2 grid, points outside the
    image skipped (same clamping as the live detector).
"""

import logging
from typing import Optional

import numpy as np

from finger_quality.config import SkinConfig
from finger_quality.geometry.regions import CircleRegion
from finger_quality.imaging.sampler import circle_samples, split_rgb
from finger_quality.models.results import ScoreResult


logger = logging.getLogger(__name__)


class SkinCoverageAnalyzer:
    """
    Rule-based skin coverage estimate.

    Attributes:
        config: Classifier bounds and sampling geometry
    """

    name = "coverage"

    def __init__(self, config: Optional[SkinConfig] = None) -> None:
        self.config = config or SkinConfig()

    def skin_mask(self, rgb_samples: np.ndarray) -> np.ndarray:
        """
        Classify RGB samples.

        Args:
            rgb_samples: (..., 3) uint8 array in RGB order

        Returns:
            Boolean array of the leading shape
        """
        cfg = self.config
        r, g, b = split_rgb(rgb_samples)
        return (
            (r > cfg.red_min)
            & (g > cfg.green_min)
            & (b > cfg.blue_min)
            & (r > g)
            & (r > b)
            & ((r - g) > cfg.red_green_margin)
            & ((r - b) > cfg.red_blue_margin)
        )

    def score(self, rgb: np.ndarray) -> ScoreResult:
        """
        Compute skin coverage.

        Args:
            rgb: Colour image, shape (H, W, 3), RGB order

        Returns:
            ScoreResult with a percentage in [0, 100]; 0.0 without samples
        """
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise ValueError(f"SkinCoverageAnalyzer expects an RGB image, got shape {rgb.shape}")

        height, width = rgb.shape[:2]
        circle = CircleRegion.centered(width, height, 0.5, self.config.radius_ratio)
        samples = circle_samples(rgb, circle, self.config.sample_stride)

        total = int(samples.shape[0])
        if total == 0:
            return ScoreResult(0.0)

        skin = int(np.count_nonzero(self.skin_mask(samples)))
        percent = 100.0 * skin / total
        logger.debug(f"Skin coverage in crop: {percent:.1f}% ({skin}/{total})")
        return ScoreResult(percent)
