"""
Capture Session
===============

Orchestrates the live feedback loop and still capture against a camera
collaborator.

Flow:
    Live:
        camera callback -> FrameMailbox (drop if busy/cooling down)
        -> LiveFeedback -> DetectorState.indicator -> UI

    Capture:
        guard (camera ready, finger in position)
        -> suspend live feed, stop stream, settle
        -> take picture -> decode -> CapturePipeline -> QualityReport
        -> ALWAYS resume the live feed (success, failure or retake)

Design Rules:
    - The session owns the DetectorState; the core stays stateless
    - No failure leaves the session without live feedback
    - The camera is a Protocol; no driver code lives here
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from finger_quality import config as config_module
from finger_quality.config import Settings
from finger_quality.detection.feedback import LiveFeedback
from finger_quality.detection.live import LivePlacementDetector
from finger_quality.errors import CaptureFailure, InputError
from finger_quality.models.reason_codes import CaptureFailureReason
from finger_quality.models.results import QualityReport
from finger_quality.models.state import DetectorState, LiveIndicatorState
from finger_quality.pipeline import CapturePipeline
from finger_quality.stream.frame import LumaFrame
from finger_quality.stream.image_decoder import decode_still
from finger_quality.stream.mailbox import FrameMailbox


logger = logging.getLogger(__name__)


ACCEPTED_MESSAGE = "Finger image accepted"
RETRY_MESSAGE = "Fix lighting and retry"


class CameraDevice(Protocol):
    """
    Protocol for the camera collaborator supplied by the shell.

    Implementations deliver live luminance frames through a callback and
    take encoded stills on demand. The callback may run on the camera's
    own thread; the mailbox hands frames to the event loop thread-safely.
    """

    @property
    def is_ready(self) -> bool:
        ...

    def start_stream(self, callback: Callable[[LumaFrame], None]) -> None:
        ...

    def stop_stream(self) -> None:
        ...

    async def take_picture(self) -> bytes:
        ...


@dataclass(frozen=True, slots=True)
class AcceptanceOutcome:
    """Result of the user pressing Accept on a report."""

    accepted: bool
    message: str


class CaptureSession:
    """
    Live feedback plus capture for one camera.

    Attributes:
        camera: Camera collaborator
        settings: Thresholds and timing
        clock: Monotonic time source shared with the feedback policy
        mailbox: Single-slot live frame hand-off
        feedback: Live detection policy
        pipeline: Still scoring pipeline

    Example:
        session = CaptureSession(camera, settings)
        session.start()
        loop_task = asyncio.create_task(session.run())

        if session.indicator.position_ok:
            report = await session.capture()
            outcome = session.accept(report)

        await session.stop()
    """

    def __init__(
        self,
        camera: CameraDevice,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.camera = camera
        self.settings = settings or Settings()
        self.clock = clock

        live_cfg = self.settings.live
        self.mailbox = FrameMailbox(cooldown_ms=live_cfg.detection_cooldown_ms)
        self.feedback = LiveFeedback(detector=LivePlacementDetector(live_cfg), config=live_cfg, clock=clock)
        self.pipeline = CapturePipeline(self.settings)

        self._state = DetectorState()
        self._running: bool = False
        self._stream_active: bool = False
        self._last_report: Optional[QualityReport] = None

        self._input_errors: int = 0
        self._captures: int = 0
        self._capture_failures: int = 0

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> DetectorState:
        return self._state

    @property
    def indicator(self) -> LiveIndicatorState:
        return self._state.indicator

    @property
    def stream_active(self) -> bool:
        return self._stream_active

    @property
    def last_report(self) -> Optional[QualityReport]:
        return self._last_report

    # =========================================================================
    # Live feed
    # =========================================================================

    def start(self) -> None:
        """Begin live frame delivery."""
        self.mailbox.resume()
        self.camera.start_stream(self.on_frame)
        self._stream_active = True
        logger.info("Live detection stream started")

    def on_frame(self, frame: LumaFrame) -> bool:
        """
        Camera callback. Never blocks and never raises.

        May be called from the camera's own thread.

        Returns:
            True if the frame was accepted into the mailbox
        """
        if self.mailbox.offer(frame, self.clock()):
            return True
        self._state = self.feedback.drop(self._state)
        return False

    def on_frame_data(self, width: int, height: int, luma: bytes, stride: Optional[int] = None) -> bool:
        """
        Camera callback taking a raw frame descriptor.

        Malformed descriptors are logged and counted, not raised.
        """
        try:
            frame = LumaFrame(width=width, height=height, luma=luma, stride=width if stride is None else stride)
        except InputError as e:
            self._input_errors += 1
            logger.warning(f"Rejected live frame: {e}")
            return False
        return self.on_frame(frame)

    def process_pending(self) -> bool:
        """
        Run detection on the waiting frame, if any.

        Returns:
            True if a frame was processed
        """
        frame = self.mailbox.get_nowait()
        if frame is None:
            return False
        self._detect(frame)
        return True

    def _detect(self, frame: LumaFrame) -> None:
        completed_at: Optional[float] = None
        try:
            self._state = self.feedback.run(self.feedback.begin(self._state), frame)
            completed_at = self._state.last_detection_at
        finally:
            self.mailbox.complete(self.clock() if completed_at is None else completed_at)

    async def run(self) -> None:
        """
        Live detection loop.

        Runs until stop() is called.
        """
        self._running = True
        logger.info("Live detection loop started")

        while self._running:
            try:
                frame = await self.mailbox.get(timeout=0.5)
                if frame is None:
                    continue
                self._detect(frame)
            except asyncio.CancelledError:
                logger.info("Live detection loop cancelled")
                break

        logger.info("Live detection loop stopped")

    async def stop(self) -> None:
        """Stop the loop and the camera stream."""
        self._running = False
        self.mailbox.suspend()
        if self._stream_active:
            self.camera.stop_stream()
            self._stream_active = False
        logger.info("CaptureSession stopped")

    # =========================================================================
    # Capture
    # =========================================================================

    async def capture(self) -> QualityReport:
        """
        Capture and score a still.

        Returns:
            QualityReport for the captured finger crop

        Raises:
            CaptureFailure: With the reason of the failing step. The live
                feed is resumed before the exception propagates.
        """
        if not self.camera.is_ready:
            raise CaptureFailure(CaptureFailureReason.CAMERA_NOT_READY, "Camera not ready")

        position_ok = self._state.indicator.position_ok
        if self.settings.capture.require_position_for_capture and not position_ok:
            raise CaptureFailure(
                CaptureFailureReason.FINGER_NOT_IN_POSITION,
                "Place finger inside the circle first",
            )

        self._captures += 1
        self.mailbox.suspend()
        try:
            self._stop_stream_for_capture()

            settle_sec = self.settings.capture.settle_delay_ms / 1000.0
            if settle_sec > 0:
                await asyncio.sleep(settle_sec)

            try:
                data = await self.camera.take_picture()
            except Exception as e:
                raise CaptureFailure(CaptureFailureReason.CAMERA_ERROR, f"Taking picture failed: {e}") from e

            try:
                still = decode_still(data)
            except InputError as e:
                raise CaptureFailure(CaptureFailureReason.INVALID_IMAGE, str(e)) from e

            report = self.pipeline.run(still, position_ok=position_ok)
            self._last_report = report
            return report

        except CaptureFailure as e:
            self._capture_failures += 1
            logger.error(f"Capture failed: {e}")
            raise
        except Exception as e:
            self._capture_failures += 1
            logger.error(f"Capture failed unexpectedly: {e}")
            raise CaptureFailure(CaptureFailureReason.ANALYSIS_FAILED, f"Capture failed: {e}") from e
        finally:
            self._resume_stream()

    def _stop_stream_for_capture(self) -> None:
        if not self._stream_active:
            return
        try:
            self.camera.stop_stream()
        except Exception as e:
            raise CaptureFailure(CaptureFailureReason.CAMERA_ERROR, f"Stopping stream failed: {e}") from e
        self._stream_active = False

    def _resume_stream(self) -> None:
        self.mailbox.resume()
        if self._stream_active:
            return
        try:
            self.camera.start_stream(self.on_frame)
            self._stream_active = True
            logger.info("Live detection stream resumed")
        except Exception as e:
            logger.error(f"Failed to resume live stream: {e}")

    def accept(self, report: Optional[QualityReport] = None) -> AcceptanceOutcome:
        """
        User pressed Accept.

        A failed report is not accepted; the user is asked to retry.
        """
        report = report or self._last_report
        if report is None:
            return AcceptanceOutcome(accepted=False, message="Nothing to accept")

        if report.overall_passed:
            self._last_report = None
            logger.info(f"Capture accepted (score={report.overall_score})")
            return AcceptanceOutcome(accepted=True, message=ACCEPTED_MESSAGE)

        return AcceptanceOutcome(accepted=False, message=RETRY_MESSAGE)

    def retake(self) -> None:
        """User pressed Retake; the report is discarded."""
        self._last_report = None
        self._resume_stream()

    def metrics(self) -> dict:
        """Session metrics for observability."""
        return {
            **self.mailbox.metrics(),
            "frames_processed": self._state.frames_processed,
            "detection_failures": self._state.detection_failures,
            "input_errors": self._input_errors,
            "captures": self._captures,
            "capture_failures": self._capture_failures,
            "position_ok": self._state.indicator.position_ok,
            "light_ok": self._state.indicator.light_ok,
            "hint": self._state.indicator.hint.value,
        }


def create_session(camera: CameraDevice, settings: Optional[Settings] = None) -> CaptureSession:
    """Build a session from the loaded global settings unless overridden."""
    return CaptureSession(camera, settings or config_module.settings)
