"""
Test Configuration
==================

Pytest fixtures and test configuration for finger_quality.
"""

import cv2
import numpy as np
import pytest


SKIN_RGB = (200, 150, 120)


def make_luma(width, height, value=128, stride=None):
    """Build a LumaFrame filled with one luminance value (padding bytes are 0)."""
    from finger_quality.stream.frame import LumaFrame

    stride = width if stride is None else stride
    plane = np.zeros((height, stride), dtype=np.uint8)
    plane[:, :width] = value
    return LumaFrame(width=width, height=height, luma=plane.tobytes(), stride=stride)


def make_rgb(width, height, color=SKIN_RGB):
    """Build an RGB raster filled with one colour."""
    image = np.empty((height, width, 3), dtype=np.uint8)
    image[:, :] = color
    return image


def encode_rgb_jpeg(rgb):
    ok, buf = cv2.imencode(".jpg", cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR), [int(cv2.IMWRITE_JPEG_QUALITY), 95])
    assert ok
    return buf.tobytes()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeCamera:
    """In-memory camera collaborator recording stream calls."""

    def __init__(self, picture=b"", ready=True, picture_error=None):
        self.is_ready = ready
        self.picture = picture
        self.picture_error = picture_error
        self.callback = None
        self.streaming = False
        self.start_calls = 0
        self.stop_calls = 0
        self.pictures_taken = 0
        self.streaming_during_picture = None

    def start_stream(self, callback):
        self.callback = callback
        self.streaming = True
        self.start_calls += 1

    def stop_stream(self):
        self.streaming = False
        self.stop_calls += 1

    async def take_picture(self):
        self.pictures_taken += 1
        self.streaming_during_picture = self.streaming
        if self.picture_error is not None:
            raise self.picture_error
        return self.picture


@pytest.fixture
def settings():
    """Default settings with no settle delay."""
    from finger_quality.config import CaptureConfig, Settings

    return Settings(capture=CaptureConfig(settle_delay_ms=0))


@pytest.fixture
def clock():
    return FakeClock(start=10.0)


@pytest.fixture
def good_frame():
    """Mid-grey live frame: finger in position, lighting ok."""
    return make_luma(120, 90, value=128)


@pytest.fixture
def dark_frame():
    return make_luma(120, 90, value=0)


@pytest.fixture
def skin_still():
    from finger_quality.stream.frame import StillImage

    return StillImage(pixels=make_rgb(640, 480))


@pytest.fixture
def skin_jpeg():
    return encode_rgb_jpeg(make_rgb(640, 480))
