"""
Region Management
=================

Rectangular crops and circular sampling regions over an image.

This module handles:
    - Center-square crop of a full-resolution still (RegionCropper)
    - Circular sampling grids used by the live detector and the skin
      coverage analyzer (CircleRegion)

All regions are clamped to the owning image's bounds. A region that ends up
with zero area is valid and produces an empty result downstream.

Example:
    from finger_quality.geometry import RegionCropper

    cropper = RegionCropper(size_ratio=0.55)
    region = cropper.crop(width=200, height=100)
    print(region.width, region.height)  # 110 100
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Region:
    """
    Axis-aligned rectangle, right/bottom exclusive.

    Attributes:
        left: First column
        top: First row
        right: One past the last column
        bottom: One past the last row
    """

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return max(0, self.right - self.left)

    @property
    def height(self) -> int:
        return max(0, self.bottom - self.top)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def slice(self, image: np.ndarray) -> np.ndarray:
        """Return the sub-array of `image` covered by this region (a view)."""
        return image[self.top:self.top + self.height, self.left:self.left + self.width]


@dataclass(frozen=True, slots=True)
class CircleRegion:
    """
    Circle used for sparse sampling.

    Attributes:
        center_x: Center column
        center_y: Center row
        radius: Radius in pixels
    """

    center_x: int
    center_y: int
    radius: int

    @classmethod
    def centered(cls, width: int, height: int, center_ratio: float, radius_ratio: float) -> "CircleRegion":
        """
        Circle centered in a width x height image.

        The radius is a fraction of the image width.
        """
        return cls(
            center_x=int(width * center_ratio),
            center_y=int(height * center_ratio),
            radius=int(width * radius_ratio),
        )

    def sample_points(self, width: int, height: int, stride: int = 2) -> Tuple[np.ndarray, np.ndarray]:
        """
        Grid points inside the circle and inside the image.

        The grid spans [center - radius, center + radius) on both axes
        with the given stride. Points outside the image are skipped,
        not counted.

        Args:
            width: Image width
            height: Image height
            stride: Grid step in pixels

        Returns:
            Tuple of (rows, cols) index arrays, possibly empty
        """
        r = self.radius
        ys = np.arange(self.center_y - r, self.center_y + r, stride, dtype=np.int64)
        xs = np.arange(self.center_x - r, self.center_x + r, stride, dtype=np.int64)
        if ys.size == 0 or xs.size == 0:
            empty = np.empty(0, dtype=np.int64)
            return empty, empty

        gy, gx = np.meshgrid(ys, xs, indexing="ij")
        dx = gx - self.center_x
        dy = gy - self.center_y
        inside = (
            (gx >= 0) & (gx < width)
            & (gy >= 0) & (gy < height)
            & (dx * dx + dy * dy <= r * r)
        )
        return gy[inside], gx[inside]


class RegionCropper:
    """
    Deterministic center-square crop.

    The crop side is a fraction of the image WIDTH. Near the edges the
    clamp may shrink the crop on one axis, so a wide image can yield a
    non-square region.

    Attributes:
        size_ratio: Crop side as a fraction of width
    """

    def __init__(self, size_ratio: float = 0.55) -> None:
        if size_ratio <= 0:
            raise ValueError("size_ratio must be positive")
        self.size_ratio = size_ratio

    def crop(self, width: int, height: int) -> Region:
        """
        Compute the crop rectangle for a width x height image.

        Never raises; degenerate inputs give a zero-area region.
        """
        width = max(0, width)
        height = max(0, height)

        crop_size = int(width * self.size_ratio)
        cx = width // 2
        cy = height // 2

        left = max(0, cx - crop_size // 2)
        top = max(0, cy - crop_size // 2)

        right = min(width, left + crop_size)
        bottom = min(height, top + crop_size)

        return Region(left=left, top=top, right=right, bottom=bottom)

    def crop_image(self, image: np.ndarray) -> np.ndarray:
        """
        Crop an (H, W) or (H, W, C) array.

        Returns a contiguous copy so callers may hold on to it.
        """
        height, width = image.shape[:2]
        region = self.crop(width, height)
        logger.debug(
            f"Crop {width}x{height} -> ({region.left},{region.top}) "
            f"{region.width}x{region.height}"
        )
        return np.ascontiguousarray(region.slice(image))
