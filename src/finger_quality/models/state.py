"""
Live Detection State Models
===========================

State carried between live frames.

Core Concepts:
    - LiveIndicatorState: what the UI shows (circle colour, lighting, hint)
    - DetectorState: the only cross-call state of the live path, owned by
      the calling shell and passed into / returned from the core

The core never mutates a DetectorState; it returns an updated copy.

Example:
    from finger_quality.models.state import DetectorState

    state = DetectorState()
    state = feedback.process(state, frame, now=time.monotonic())
    print(state.indicator.hint.value)
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finger_quality.models.reason_codes import HintText


def hint_for(position_ok: bool, light_ok: bool) -> HintText:
    """Derive the three-state placement hint."""
    if not position_ok:
        return HintText.ADJUST_FINGER
    if not light_ok:
        return HintText.IMPROVE_LIGHTING
    return HintText.READY


class LiveIndicatorState(BaseModel):
    """
    Indicator flags recomputed on every sampled live frame.

    Attributes:
        position_ok: Finger covers the target circle
        light_ok: Whole-frame brightness within range
        hint: Hint text derived from the two flags
    """

    model_config = ConfigDict(frozen=True)

    position_ok: bool = Field(default=False, description="Finger in position")
    light_ok: bool = Field(default=True, description="Lighting acceptable")
    hint: HintText = Field(default=HintText.ADJUST_FINGER, description="Placement hint")

    @classmethod
    def from_flags(cls, position_ok: bool, light_ok: bool) -> "LiveIndicatorState":
        return cls(
            position_ok=position_ok,
            light_ok=light_ok,
            hint=hint_for(position_ok, light_ok),
        )


class DetectorState(BaseModel):
    """
    Caller-owned state of the live detection path.

    Attributes:
        indicator: Last successfully computed indicator
        is_detecting: A detection is in flight
        last_detection_at: Monotonic seconds of the last completed detection
        frames_processed: Frames that ran through the detector
        frames_dropped: Frames rejected by the busy/cooldown guard
        detection_failures: Detector runs that raised
        last_error: Message of the most recent failure
    """

    model_config = ConfigDict(frozen=True)

    indicator: LiveIndicatorState = Field(default_factory=LiveIndicatorState)
    is_detecting: bool = Field(default=False)
    last_detection_at: Optional[float] = Field(default=None)
    frames_processed: int = Field(default=0, ge=0)
    frames_dropped: int = Field(default=0, ge=0)
    detection_failures: int = Field(default=0, ge=0)
    last_error: Optional[str] = Field(default=None)
