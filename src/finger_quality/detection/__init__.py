"""
Detection Module
================

Live placement feedback for the camera preview.

Components:
    - LivePlacementDetector: per-frame position/light test
    - LiveFeedback: rate limiting and soft-failure policy over DetectorState

Design Philosophy:
    The detector only sees one frame at a time. Everything that spans
    frames lives in the caller-owned DetectorState.
"""

from finger_quality.detection.live import LivePlacementDetector, PlacementResult
from finger_quality.detection.feedback import LiveFeedback

__all__ = [
    "LivePlacementDetector",
    "PlacementResult",
    "LiveFeedback",
]
