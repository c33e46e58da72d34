"""
Live Placement Detector
=======================

Cheap per-frame test that drives the green/red position circle and the
lighting indicator.

Algorithm:
    Position:
        Sample a stride-2 grid inside a centered circle (radius = width/6)
        of the luminance plane. A sample is "in range" when
        luma_min < Y < luma_max. The finger is in position when more than
        55% of the samples are in range.

    Light:
        Take every 2000th byte of the whole plane (linear index, stride
        and padding included) and require light_min < mean < light_max.

Design Rules:
    - Pure function of the frame; no state, no side effects
    - Never divides by zero: no samples means position_ok = False and
      light_ok = True
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from finger_quality.config import LiveDetectionConfig
from finger_quality.geometry.regions import CircleRegion
from finger_quality.imaging.sampler import circle_samples, linear_samples, luma_view
from finger_quality.stream.frame import LumaFrame


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlacementResult:
    """
    Output of one live detection.

    Attributes:
        position_ok: In-range ratio above threshold
        light_ok: Whole-frame mean luminance within range
        in_range_percent: Percent of circle samples in range
        mean_luma: Mean of the light-check samples (None without samples)
        sampled: Number of circle samples
    """

    position_ok: bool
    light_ok: bool
    in_range_percent: float
    mean_luma: Optional[float]
    sampled: int

    @classmethod
    def empty(cls) -> "PlacementResult":
        return cls(position_ok=False, light_ok=True, in_range_percent=0.0, mean_luma=None, sampled=0)


class LivePlacementDetector:
    """
    Brightness-ratio finger presence test for live frames.

    Attributes:
        config: Live detection thresholds
    """

    def __init__(self, config: Optional[LiveDetectionConfig] = None) -> None:
        self.config = config or LiveDetectionConfig()

    def detect(self, frame: LumaFrame) -> PlacementResult:
        """
        Run the position and (optionally) light checks on a frame.

        Args:
            frame: Live luminance frame

        Returns:
            PlacementResult; empty result for a zero-area frame
        """
        if frame.is_empty:
            return PlacementResult.empty()

        cfg = self.config
        percent, sampled = self.position_coverage(frame)
        position_ok = sampled > 0 and percent > cfg.position_ratio_threshold * 100.0

        mean_luma = self.mean_luma(frame)
        if not cfg.light_check_enabled or mean_luma is None:
            light_ok = True
        else:
            light_ok = cfg.light_min < mean_luma < cfg.light_max

        logger.debug(
            f"Finger position brightness coverage: {percent:.1f}% "
            f"({sampled} samples), mean luma: {mean_luma}"
        )

        return PlacementResult(
            position_ok=position_ok,
            light_ok=light_ok,
            in_range_percent=percent,
            mean_luma=mean_luma,
            sampled=sampled,
        )

    def position_coverage(self, frame: LumaFrame) -> Tuple[float, int]:
        """
        Percent of circle samples whose luminance is in range.

        Returns:
            Tuple of (percent, sampled); (0.0, 0) without samples
        """
        cfg = self.config
        circle = CircleRegion.centered(
            frame.width, frame.height, cfg.center_ratio, cfg.radius_ratio,
        )
        samples = circle_samples(luma_view(frame), circle, cfg.sample_stride)
        total = int(samples.size)
        if total == 0:
            return 0.0, 0

        in_range = int(np.count_nonzero((samples > cfg.luma_min) & (samples < cfg.luma_max)))
        return 100.0 * in_range / total, total

    def mean_luma(self, frame: LumaFrame) -> Optional[float]:
        """Mean of the sparse whole-plane samples, None if there are none."""
        samples = linear_samples(frame, self.config.light_sample_stride)
        if samples.size == 0:
            return None
        return float(samples.mean())
