"""
Live Detection Tests
====================

Tests for LumaFrame validation, the placement detector and the
rate-limited feedback policy.
"""

import numpy as np
import pytest

from conftest import make_luma


class TestLumaFrame:
    """Frame construction invariants."""

    def test_zero_area_frame_is_valid(self):
        from finger_quality.stream.frame import LumaFrame

        frame = LumaFrame(width=0, height=0, luma=b"", stride=0)
        assert frame.is_empty

    def test_negative_dimensions_rejected(self):
        from finger_quality.errors import InputError
        from finger_quality.stream.frame import LumaFrame

        with pytest.raises(InputError):
            LumaFrame(width=-1, height=10, luma=b"", stride=0)

    def test_stride_smaller_than_width_rejected(self):
        from finger_quality.errors import InputError
        from finger_quality.stream.frame import LumaFrame

        with pytest.raises(InputError):
            LumaFrame(width=10, height=10, luma=bytes(100), stride=8)

    def test_short_buffer_rejected(self):
        from finger_quality.errors import InputError
        from finger_quality.stream.frame import LumaFrame

        with pytest.raises(InputError):
            LumaFrame.packed(10, 10, bytes(99))

    def test_last_row_without_padding_accepted(self):
        from finger_quality.stream.frame import LumaFrame

        # (height - 1) * stride + width bytes
        frame = LumaFrame(width=10, height=3, luma=bytes(2 * 16 + 10), stride=16)
        assert frame.height == 3


class TestLivePlacementDetector:
    """Position and light checks."""

    def test_mid_grey_frame_in_position(self, good_frame):
        from finger_quality.detection import LivePlacementDetector

        result = LivePlacementDetector().detect(good_frame)
        assert result.position_ok is True
        assert result.light_ok is True
        assert result.in_range_percent == 100.0
        assert result.sampled > 0

    @pytest.mark.parametrize("value", [0, 255])
    def test_black_or_white_frame_not_in_position(self, value):
        from finger_quality.detection import LivePlacementDetector

        result = LivePlacementDetector().detect(make_luma(120, 90, value=value))
        assert result.position_ok is False
        assert result.in_range_percent == 0.0

    @pytest.mark.parametrize(
        "value,expected",
        [(70, False), (71, True), (209, True), (210, False)],
    )
    def test_luma_bounds_are_exclusive(self, value, expected):
        from finger_quality.detection import LivePlacementDetector

        result = LivePlacementDetector().detect(make_luma(120, 90, value=value))
        assert result.position_ok is expected

    @pytest.mark.parametrize("width,height", [(0, 0), (0, 50), (50, 0)])
    def test_zero_area_frame(self, width, height):
        from finger_quality.detection import LivePlacementDetector
        from finger_quality.stream.frame import LumaFrame

        frame = LumaFrame(width=width, height=height, luma=b"", stride=width)
        result = LivePlacementDetector().detect(frame)
        assert result.position_ok is False
        assert result.light_ok is True
        assert result.sampled == 0

    def test_tiny_frame_without_samples(self):
        from finger_quality.detection import LivePlacementDetector

        # radius = int(5 / 6) = 0
        result = LivePlacementDetector().detect(make_luma(5, 5, value=128))
        assert result.sampled == 0
        assert result.position_ok is False

    def test_stride_padding_is_not_sampled(self):
        from finger_quality.detection import LivePlacementDetector

        frame = make_luma(60, 60, value=128, stride=64)
        result = LivePlacementDetector().detect(frame)
        assert result.position_ok is True
        assert result.in_range_percent == 100.0

    def test_bright_surroundings_fail_light_check(self):
        from finger_quality.detection import LivePlacementDetector
        from finger_quality.stream.frame import LumaFrame

        plane = np.full((100, 100), 250, dtype=np.uint8)
        plane[30:70, 30:70] = 128
        frame = LumaFrame.packed(100, 100, plane.tobytes())

        result = LivePlacementDetector().detect(frame)
        assert result.position_ok is True
        assert result.light_ok is False
        assert result.mean_luma == 250.0

    def test_partial_coverage_below_threshold(self):
        from finger_quality.detection import LivePlacementDetector
        from finger_quality.stream.frame import LumaFrame

        plane = np.zeros((90, 120), dtype=np.uint8)
        plane[:, :60] = 128
        frame = LumaFrame.packed(120, 90, plane.tobytes())

        result = LivePlacementDetector().detect(frame)
        assert 40.0 < result.in_range_percent < 60.0
        assert result.position_ok is False

    def test_config_override(self):
        from finger_quality.config import LiveDetectionConfig
        from finger_quality.detection import LivePlacementDetector

        detector = LivePlacementDetector(LiveDetectionConfig(luma_max=100))
        assert detector.detect(make_luma(120, 90, value=128)).position_ok is False

    def test_light_check_disabled(self, dark_frame):
        from finger_quality.config import LiveDetectionConfig
        from finger_quality.detection import LivePlacementDetector

        detector = LivePlacementDetector(LiveDetectionConfig(light_check_enabled=False))
        assert detector.detect(dark_frame).light_ok is True


class TestLiveFeedback:
    """Rate limiting and soft failures over DetectorState."""

    def test_first_frame_processed(self, clock, good_frame):
        from finger_quality.detection import LiveFeedback
        from finger_quality.models import DetectorState, HintText

        state = LiveFeedback(clock=clock).process(DetectorState(), good_frame)
        assert state.frames_processed == 1
        assert state.is_detecting is False
        assert state.last_detection_at == 10.0
        assert state.indicator.position_ok is True
        assert state.indicator.hint == HintText.READY

    def test_frame_within_cooldown_dropped(self, clock, good_frame, dark_frame):
        from finger_quality.detection import LiveFeedback
        from finger_quality.models import DetectorState

        feedback = LiveFeedback(clock=clock)
        state = feedback.process(DetectorState(), good_frame)
        clock.advance(0.2)
        state = feedback.process(state, dark_frame)

        assert state.frames_dropped == 1
        assert state.frames_processed == 1
        assert state.indicator.position_ok is True

    def test_frame_after_cooldown_processed(self, clock, good_frame, dark_frame):
        from finger_quality.detection import LiveFeedback
        from finger_quality.models import DetectorState, HintText

        feedback = LiveFeedback(clock=clock)
        state = feedback.process(DetectorState(), good_frame)
        clock.advance(0.6)
        state = feedback.process(state, dark_frame)

        assert state.frames_processed == 2
        assert state.indicator.position_ok is False
        assert state.indicator.hint == HintText.ADJUST_FINGER

    def test_explicit_arrival_time(self, clock, good_frame):
        """An explicit arrival time is used for admission only."""
        from finger_quality.detection import LiveFeedback
        from finger_quality.models import DetectorState

        feedback = LiveFeedback(clock=clock)
        state = feedback.process(DetectorState(), good_frame)
        assert feedback.process(state, good_frame, now=10.1).frames_dropped == 1
        assert feedback.process(state, good_frame, now=10.5).frames_processed == 2

    def test_cooldown_starts_at_completion(self, clock, good_frame):
        """A slow detection pushes the next admission window back."""
        from finger_quality.detection import LiveFeedback, LivePlacementDetector
        from finger_quality.models import DetectorState

        class SlowDetector(LivePlacementDetector):
            def detect(self, frame):
                clock.advance(0.3)
                return super().detect(frame)

        feedback = LiveFeedback(detector=SlowDetector(), clock=clock)
        state = feedback.process(DetectorState(), good_frame)
        assert state.last_detection_at == pytest.approx(10.3)

        # 0.6 s after arrival but only 0.3 s after completion
        clock.advance(0.3)
        assert feedback.admit(state, clock()) is False
        clock.advance(0.25)
        assert feedback.admit(state, clock()) is True

    def test_in_flight_detection_blocks_admission(self):
        from finger_quality.detection import LiveFeedback
        from finger_quality.models import DetectorState

        feedback = LiveFeedback()
        state = feedback.begin(DetectorState())
        assert feedback.admit(state, now=100.0) is False

    def test_failure_keeps_previous_indicator(self, clock, good_frame):
        from finger_quality.detection import LiveFeedback, LivePlacementDetector
        from finger_quality.models import DetectorState, LiveIndicatorState

        class BrokenDetector(LivePlacementDetector):
            def detect(self, frame):
                clock.advance(0.1)
                raise RuntimeError("sensor glitch")

        previous = LiveIndicatorState.from_flags(position_ok=True, light_ok=True)
        feedback = LiveFeedback(detector=BrokenDetector(), clock=clock)
        state = feedback.process(DetectorState(indicator=previous), good_frame)

        assert state.indicator == previous
        assert state.detection_failures == 1
        assert "sensor glitch" in state.last_error
        assert state.is_detecting is False
        assert state.last_detection_at == pytest.approx(10.1)

    def test_caller_state_is_not_mutated(self, clock, good_frame):
        from finger_quality.detection import LiveFeedback
        from finger_quality.models import DetectorState

        original = DetectorState()
        LiveFeedback(clock=clock).process(original, good_frame)
        assert original.frames_processed == 0
        assert original.indicator.position_ok is False


class TestHints:
    """Three-state placement hint."""

    @pytest.mark.parametrize(
        "position_ok,light_ok,expected",
        [
            (False, True, "Adjust Finger"),
            (False, False, "Adjust Finger"),
            (True, False, "Improve Lighting"),
            (True, True, "Perfect! Tap to Capture"),
        ],
    )
    def test_hint_for(self, position_ok, light_ok, expected):
        from finger_quality.models import hint_for

        assert hint_for(position_ok, light_ok).value == expected
