"""
Analysis Module
===============

Independent pixel analyzers run on the cropped, resized still.

Components:
    - FocusAnalyzer: Laplacian sharpness (grayscale input)
    - IlluminationAnalyzer: Mean luminance (grayscale input)
    - SkinCoverageAnalyzer: Rule-based skin percentage (RGB input)

Every analyzer is a pure function of its input image, so they may run
in any order or concurrently.
"""

from typing import Protocol, runtime_checkable

import numpy as np

from finger_quality.analysis.focus import FocusAnalyzer
from finger_quality.analysis.illumination import IlluminationAnalyzer
from finger_quality.analysis.skin import SkinCoverageAnalyzer
from finger_quality.models.results import ScoreResult


@runtime_checkable
class Analyzer(Protocol):
    """Structural type shared by all analyzers."""

    name: str

    def score(self, image: np.ndarray) -> ScoreResult:
        ...


__all__ = [
    "Analyzer",
    "FocusAnalyzer",
    "IlluminationAnalyzer",
    "SkinCoverageAnalyzer",
]
