"""
Focus Analyzer
==============

Laplacian sharpness estimate on the grayscale, resized crop.

Formula:
    focus = mean over interior pixels of |4*c - (t + b + l + r)|

The 1-pixel border is excluded. A sharp image has strong second
derivatives at ridges and edges; a uniformly coloured image scores 0.

The acceptance threshold (> 12) is advisory: focus contributes to the
overall score but never gates pass/fail.
"""

import logging

import cv2
import numpy as np

from finger_quality.models.results import ScoreResult


logger = logging.getLogger(__name__)


class FocusAnalyzer:
    """Mean absolute 4-neighbour Laplacian."""

    name = "focus"

    def score(self, gray: np.ndarray) -> ScoreResult:
        """
        Args:
            gray: Single-channel image, shape (H, W)

        Returns:
            ScoreResult with a non-negative value; 0.0 when the image has
            no interior pixels
        """
        if gray.ndim != 2:
            raise ValueError(f"FocusAnalyzer expects a single-channel image, got shape {gray.shape}")

        height, width = gray.shape
        if height < 3 or width < 3:
            return ScoreResult(0.0)

        # ksize=1 is the plain 4-neighbour kernel [[0,1,0],[1,-4,1],[0,1,0]]
        laplacian = cv2.Laplacian(gray, cv2.CV_64F, ksize=1)
        interior = np.abs(laplacian[1:-1, 1:-1])
        return ScoreResult(float(interior.mean()))
