"""
Pixel Sampler
=============

Channel views over raw frame buffers, shared by every analyzer.

Design Rules:
    - Views are zero-copy where numpy allows it
    - Row stride is honoured; padding bytes are never read as pixels
    - Nothing here decides anything; it only reads pixels
"""

from typing import Tuple

import numpy as np

from finger_quality.geometry.regions import CircleRegion
from finger_quality.stream.frame import LumaFrame


def luma_view(frame: LumaFrame) -> np.ndarray:
    """
    2-D read-only view of a frame's luminance plane.

    Args:
        frame: Live frame with row stride

    Returns:
        Array of shape (height, width), dtype uint8
    """
    if frame.is_empty:
        return np.empty((frame.height, frame.width), dtype=np.uint8)

    plane = np.frombuffer(frame.luma, dtype=np.uint8)
    # LumaFrame guarantees (height - 1) * stride + width bytes
    return np.lib.stride_tricks.as_strided(
        plane,
        shape=(frame.height, frame.width),
        strides=(frame.stride, 1),
        writeable=False,
    )


def linear_samples(frame: LumaFrame, step: int) -> np.ndarray:
    """
    Every `step`-th byte of the whole plane, ignoring width/height/stride.

    Returns:
        1-D uint8 array, empty for an empty buffer
    """
    plane = np.frombuffer(frame.luma, dtype=np.uint8)
    return plane[::step]


def circle_samples(image: np.ndarray, circle: CircleRegion, stride: int) -> np.ndarray:
    """
    Pixel values at the circle's stride-grid points.

    Args:
        image: (H, W) or (H, W, C) array
        circle: Sampling circle
        stride: Grid step

    Returns:
        (N,) or (N, C) array of the sampled pixels
    """
    height, width = image.shape[:2]
    rows, cols = circle.sample_points(width, height, stride)
    return image[rows, cols]


def split_rgb(samples: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split (..., 3) RGB samples into signed int32 channel arrays."""
    values = samples.astype(np.int32)
    return values[..., 0], values[..., 1], values[..., 2]
