"""
Geometry Module
===============

Crop rectangles and circular sampling regions.
"""

from finger_quality.geometry.regions import CircleRegion, Region, RegionCropper

__all__ = [
    "Region",
    "CircleRegion",
    "RegionCropper",
]
