"""
Score Aggregator
================

Deterministic decision policy combining the three analyzer outputs.

Decision Rules:
    Coverage override (position was ok at capture time):
        coverage < 40  ->  coverage = 65
        coverage_passed = True
    Otherwise:
        coverage_passed = coverage > 20

    illumination_passed = 70 < illumination < 220
    overall_passed = illumination_passed AND coverage_passed
    (focus never gates)

Score (0-100):
    focus_part    = clamp(focus / 35 * 35, 0, 35)
    illum_part    = 35 if 85 <= I <= 195, 25 if 70 <= I <= 220, else 10
    coverage_part = clamp(coverage / 100 * 30, 0, 30)
    overall_score = round_half_up(focus_part + illum_part + coverage_part)
"""

import logging
import math
from typing import Optional

from finger_quality.config import CoverageConfig, FocusConfig, IlluminationConfig, ScoringConfig
from finger_quality.models.reason_codes import MetricStatus
from finger_quality.models.results import QualityItem, ScoreBreakdown, ScoreDecision


logger = logging.getLogger(__name__)


FOCUS_TITLE = "Focus / Blur"
ILLUMINATION_TITLE = "Illumination"
COVERAGE_TITLE = "Finger Coverage"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero (values here are >= 0)."""
    return int(math.floor(value + 0.5))


class ScoreAggregator:
    """
    Pure scoring and acceptance policy.

    Given the same (focus, illumination, coverage, position_ok) the
    aggregator always returns the same decision.

    Attributes:
        focus_config: Advisory focus threshold
        illumination_config: Gate and band bounds
        coverage_config: Gate and override policy
        scoring_config: Score weights
    """

    def __init__(
        self,
        focus_config: Optional[FocusConfig] = None,
        illumination_config: Optional[IlluminationConfig] = None,
        coverage_config: Optional[CoverageConfig] = None,
        scoring_config: Optional[ScoringConfig] = None,
    ) -> None:
        self.focus_config = focus_config or FocusConfig()
        self.illumination_config = illumination_config or IlluminationConfig()
        self.coverage_config = coverage_config or CoverageConfig()
        self.scoring_config = scoring_config or ScoringConfig()

    def aggregate(
        self,
        focus: float,
        illumination: float,
        coverage: float,
        position_ok: bool,
    ) -> ScoreDecision:
        """
        Combine raw analyzer values into a scored decision.

        Args:
            focus: Mean Laplacian
            illumination: Mean luminance
            coverage: Skin percent
            position_ok: Live position indicator at capture time

        Returns:
            ScoreDecision with score, pass flag, ordered items and breakdown
        """
        cov = self.coverage_config
        ill = self.illumination_config

        # Relaxed-acceptance business rule: a green circle at capture time
        # vouches for coverage even though the captured still is never
        # re-verified. Product policy; revisit with the product owner.
        coverage_used = coverage
        overridden = False
        if position_ok:
            if coverage < cov.override_floor:
                coverage_used = cov.override_value
                overridden = True
            coverage_passed = True
        else:
            coverage_passed = coverage > cov.pass_threshold

        illumination_passed = ill.min < illumination < ill.max
        focus_acceptable = focus > self.focus_config.acceptable_threshold
        overall_passed = illumination_passed and coverage_passed

        focus_part = self.focus_part(focus)
        illumination_part = self.illumination_part(illumination)
        coverage_part = self.coverage_part(coverage_used)
        overall_score = round_half_up(focus_part + illumination_part + coverage_part)

        breakdown = ScoreBreakdown(
            focus=max(0.0, focus),
            illumination=max(0.0, illumination),
            coverage_raw=_clamp(coverage, 0.0, 100.0),
            coverage=_clamp(coverage_used, 0.0, 100.0),
            coverage_overridden=overridden,
            focus_part=focus_part,
            illumination_part=illumination_part,
            coverage_part=coverage_part,
            focus_acceptable=focus_acceptable,
            illumination_passed=illumination_passed,
            coverage_passed=coverage_passed,
        )

        items = [
            QualityItem(
                title=FOCUS_TITLE,
                status=(MetricStatus.GOOD if focus_acceptable else MetricStatus.SLIGHT_BLUR).value,
                passed=True,
                score=f"{focus:.1f}",
            ),
            QualityItem(
                title=ILLUMINATION_TITLE,
                status=(MetricStatus.GOOD if illumination_passed else MetricStatus.POOR).value,
                passed=illumination_passed,
                score=f"{illumination:.0f}",
            ),
            QualityItem(
                title=COVERAGE_TITLE,
                status=(MetricStatus.GOOD if coverage_passed else MetricStatus.LOW).value,
                passed=coverage_passed,
                score=f"{coverage_used:.0f}%",
            ),
        ]

        if overridden:
            logger.info(
                f"Coverage {coverage:.1f}% replaced by {coverage_used:.0f}% "
                f"(position was ok at capture)"
            )

        return ScoreDecision(
            overall_score=int(_clamp(overall_score, 0, 100)),
            overall_passed=overall_passed,
            items=items,
            breakdown=breakdown,
        )

    def focus_part(self, focus: float) -> float:
        sc = self.scoring_config
        return _clamp(focus / sc.focus_scale * sc.focus_max, 0.0, sc.focus_max)

    def illumination_part(self, illumination: float) -> float:
        sc = self.scoring_config
        ill = self.illumination_config
        if ill.good_min <= illumination <= ill.good_max:
            return sc.illum_good
        if ill.min <= illumination <= ill.max:
            return sc.illum_fair
        return sc.illum_poor

    def coverage_part(self, coverage: float) -> float:
        sc = self.scoring_config
        return _clamp(coverage / 100.0 * sc.coverage_max, 0.0, sc.coverage_max)
