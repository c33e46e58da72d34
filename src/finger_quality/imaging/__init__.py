"""
Imaging Module
==============

Channel views and sparse sampling over pixel buffers.
"""

from finger_quality.imaging.sampler import (
    circle_samples,
    linear_samples,
    luma_view,
    split_rgb,
)

__all__ = [
    "luma_view",
    "linear_samples",
    "circle_samples",
    "split_rgb",
]
