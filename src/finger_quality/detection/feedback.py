"""
Live Feedback Policy
====================

Rate-limited, failure-tolerant wrapper around the live placement detector.

The core holds no state of its own: every call takes the caller's
DetectorState and returns an updated copy.

Rules:
    - A frame is processed only if no detection is in flight AND the
      cooldown has elapsed since the last COMPLETED detection
    - Rejected frames are dropped, never queued
    - A failing detection keeps the previous indicator (no UI flicker)
    - is_detecting is cleared on every path
"""

import logging
import time
from typing import Callable, Optional

from finger_quality.config import LiveDetectionConfig
from finger_quality.detection.live import LivePlacementDetector, PlacementResult
from finger_quality.errors import DetectionFailure
from finger_quality.models.state import DetectorState, LiveIndicatorState
from finger_quality.stream.frame import LumaFrame


logger = logging.getLogger(__name__)


class LiveFeedback:
    """
    Stateless live detection step over an explicit DetectorState.

    Attributes:
        detector: Placement detector run on admitted frames
        cooldown_sec: Minimum seconds between completed detections
        clock: Monotonic time source, read on arrival and on completion

    Example:
        feedback = LiveFeedback()
        state = DetectorState()

        for frame in frames:
            state = feedback.process(state, frame)
            show(state.indicator)
    """

    def __init__(
        self,
        detector: Optional[LivePlacementDetector] = None,
        config: Optional[LiveDetectionConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or (detector.config if detector else LiveDetectionConfig())
        self.detector = detector or LivePlacementDetector(self.config)
        self.cooldown_sec = self.config.detection_cooldown_ms / 1000.0
        self.clock = clock

    def admit(self, state: DetectorState, now: float) -> bool:
        """Whether a frame arriving at `now` should be processed."""
        if state.is_detecting:
            return False
        if state.last_detection_at is not None and now - state.last_detection_at < self.cooldown_sec:
            return False
        return True

    def drop(self, state: DetectorState) -> DetectorState:
        """Count a dropped frame."""
        return state.model_copy(update={"frames_dropped": state.frames_dropped + 1})

    def begin(self, state: DetectorState) -> DetectorState:
        """Mark a detection as in flight."""
        return state.model_copy(update={"is_detecting": True})

    def run(self, state: DetectorState, frame: LumaFrame) -> DetectorState:
        """
        Run the detector on an already admitted frame.

        Any exception from the detector is wrapped in DetectionFailure,
        logged and counted; the previous indicator is kept.
        last_detection_at is read from the clock after the detector
        returns, so the cooldown starts at completion.

        Args:
            state: State with is_detecting set (or not; it is cleared)
            frame: Frame to analyse

        Returns:
            Updated state with is_detecting cleared
        """
        update = {"frames_processed": state.frames_processed + 1}
        try:
            try:
                result = self.detector.detect(frame)
            except Exception as e:
                raise DetectionFailure(f"Detection error on {frame!r}: {e}") from e
            update["indicator"] = self.indicator_for(result)
        except DetectionFailure as e:
            logger.warning(f"{e}; keeping previous indicator")
            update["detection_failures"] = state.detection_failures + 1
            update["last_error"] = str(e)
        finally:
            update["is_detecting"] = False
            update["last_detection_at"] = self.clock()

        return state.model_copy(update=update)

    def process(self, state: DetectorState, frame: LumaFrame, now: Optional[float] = None) -> DetectorState:
        """
        Admit-or-drop, then detect.

        Args:
            state: Caller-owned detector state
            frame: Incoming live frame
            now: Arrival time in clock seconds (defaults to clock())

        Returns:
            Updated state
        """
        if now is None:
            now = self.clock()
        if not self.admit(state, now):
            return self.drop(state)
        return self.run(self.begin(state), frame)

    def indicator_for(self, result: PlacementResult) -> LiveIndicatorState:
        light_ok = result.light_ok if self.config.light_check_enabled else True
        return LiveIndicatorState.from_flags(result.position_ok, light_ok)
