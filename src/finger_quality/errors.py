"""
Error Types
===========

Exception taxonomy for the capture quality core.

Policies:
    - InputError: malformed frame or still; reported as a failed result
    - DetectionFailure: swallowed by the live loop, previous indicator kept
    - CaptureFailure: reported to the caller, live feed always resumed

No error is fatal to the process.
"""

from finger_quality.models.reason_codes import CaptureFailureReason


class FingerQualityError(Exception):
    """Base class for all finger_quality errors."""
    pass


class InputError(FingerQualityError):
    """Raised for empty buffers, bad dimensions or undecodable stills."""
    pass


class DetectionFailure(FingerQualityError):
    """Raised when live per-frame analysis fails."""
    pass


class CaptureFailure(FingerQualityError):
    """
    Raised when any step of the capture pipeline fails.

    Attributes:
        reason: Machine-readable failure reason
    """

    def __init__(self, reason: CaptureFailureReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.reason.value}: {super().__str__()}"
