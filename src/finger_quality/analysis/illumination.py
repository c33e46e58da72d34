"""
Illumination Analyzer
=====================

Mean luminance of the grayscale, resized crop. This is a gating metric.
"""

import numpy as np

from finger_quality.models.results import ScoreResult


class IlluminationAnalyzer:
    """Arithmetic mean over every pixel."""

    name = "illumination"

    def score(self, gray: np.ndarray) -> ScoreResult:
        if gray.size == 0:
            return ScoreResult(0.0)
        return ScoreResult(float(np.mean(gray, dtype=np.float64)))
