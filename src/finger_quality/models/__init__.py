"""
Data Models
===========

Value types shared by the live detector and the capture pipeline.

Models:
    Codes:
        - CaptureFailureReason: Why a capture produced no report
        - HintText: Three-state placement hint
        - MetricStatus: Per-metric status strings

    State:
        - LiveIndicatorState: position/light flags and hint
        - DetectorState: caller-owned live detection state

    Results:
        - ScoreResult: Raw analyzer output
        - QualityItem, ScoreBreakdown, ScoreDecision, QualityReport
"""

from finger_quality.models.reason_codes import CaptureFailureReason, HintText, MetricStatus
from finger_quality.models.state import DetectorState, LiveIndicatorState, hint_for
from finger_quality.models.results import (
    QualityItem,
    QualityReport,
    ScoreBreakdown,
    ScoreDecision,
    ScoreResult,
)

__all__ = [
    # Codes
    "CaptureFailureReason",
    "HintText",
    "MetricStatus",
    # State
    "LiveIndicatorState",
    "DetectorState",
    "hint_for",
    # Results
    "ScoreResult",
    "QualityItem",
    "ScoreBreakdown",
    "ScoreDecision",
    "QualityReport",
]
