"""
Reason Codes
============

Fixed sets of machine-readable codes used by the core.

Rules:
    - No free-text explanations in codes
    - One clear cause per code
"""

from enum import Enum


class CaptureFailureReason(str, Enum):
    """
    Why a capture attempt did not produce a QualityReport.

    Attributes:
        CAMERA_NOT_READY: Camera collaborator is not initialised
        FINGER_NOT_IN_POSITION: Position indicator was red at capture time
        CAMERA_ERROR: Taking the picture failed
        INVALID_IMAGE: Still was empty or could not be decoded
        ANALYSIS_FAILED: Crop, resize or an analyzer raised
    """

    CAMERA_NOT_READY = "CAMERA_NOT_READY"
    FINGER_NOT_IN_POSITION = "FINGER_NOT_IN_POSITION"
    CAMERA_ERROR = "CAMERA_ERROR"
    INVALID_IMAGE = "INVALID_IMAGE"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"


class HintText(str, Enum):
    """
    Placement hint shown under the live preview.

    Attributes:
        ADJUST_FINGER: Position is not ok
        IMPROVE_LIGHTING: Position ok, lighting out of range
        READY: Position and lighting ok
    """

    ADJUST_FINGER = "Adjust Finger"
    IMPROVE_LIGHTING = "Improve Lighting"
    READY = "Perfect! Tap to Capture"


class MetricStatus(str, Enum):
    """Human status strings of the per-metric report items."""

    GOOD = "Good"
    POOR = "Poor"
    LOW = "Low"
    SLIGHT_BLUR = "Slight Blur (OK)"
