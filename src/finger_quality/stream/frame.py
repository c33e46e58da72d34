"""
Frame Data Model
=================

Pixel buffers handed to the core by the camera shell.

Two shapes exist:
    - LumaFrame: single luminance plane with a row stride (live preview)
    - StillImage: full RGB raster (decoded capture)

Design Rules:
    - Frames are immutable views; the core never retains them past a call
    - Construction validates dimensions and buffer length
    - A zero-area LumaFrame is valid and yields an empty detection result
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from finger_quality.errors import InputError


@dataclass(frozen=True, slots=True)
class LumaFrame:
    """
    Live preview frame (Y plane of a YUV420 camera image).

    Attributes:
        width: Frame width in pixels
        height: Frame height in pixels
        luma: Raw luminance bytes, row-major with `stride` bytes per row
        stride: Bytes per row (>= width)
        timestamp: Optional capture time supplied by the shell
    """

    width: int
    height: int
    luma: bytes
    stride: int
    timestamp: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.width < 0 or self.height < 0:
            raise InputError(f"Negative frame dimensions: {self.width}x{self.height}")
        if self.stride < self.width:
            raise InputError(f"Stride {self.stride} is smaller than width {self.width}")
        if self.is_empty:
            return
        required = (self.height - 1) * self.stride + self.width
        if len(self.luma) < required:
            raise InputError(
                f"Luma plane too short: {len(self.luma)} bytes, "
                f"need {required} for {self.width}x{self.height} stride {self.stride}"
            )

    @classmethod
    def packed(cls, width: int, height: int, luma: bytes, timestamp: Optional[float] = None) -> "LumaFrame":
        """Frame whose stride equals its width."""
        return cls(width=width, height=height, luma=luma, stride=width, timestamp=timestamp)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the plane."""
        return (
            f"LumaFrame({self.width}x{self.height}, "
            f"stride={self.stride}, bytes={len(self.luma)})"
        )


@dataclass(frozen=True, slots=True)
class StillImage:
    """
    Decoded still capture.

    Attributes:
        pixels: RGB raster, shape (H, W, 3), dtype uint8
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        """Validate invariants."""
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise InputError(f"Still pixels must be a numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise InputError(f"Invalid still shape: {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise InputError(f"Invalid still dtype: {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InputError(f"Empty still: {pixels.shape[1]}x{pixels.shape[0]}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def __repr__(self) -> str:
        return f"StillImage({self.width}x{self.height})"
