"""
Result Models
=============

Value types returned by the analyzers and the score aggregator.

Output Contract (QualityReport):
    {
        "overall_score": 85,
        "overall_passed": true,
        "items": [
            {"title": "Focus / Blur", "status": "Good", "passed": true, "score": "40.0"},
            {"title": "Illumination", "status": "Good", "passed": true, "score": "130"},
            {"title": "Finger Coverage", "status": "Good", "passed": true, "score": "50%"}
        ],
        "breakdown": {...},
        "cropped_image": "<JPEG bytes>"
    }

Design Rules:
    - Items are always ordered Focus, Illumination, Coverage
    - All models are immutable once built
"""

from dataclasses import dataclass
from typing import List

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class ScoreResult:
    """
    Raw analyzer output.

    Attributes:
        value: Laplacian mean, mean luminance, or skin percentage
    """

    value: float

    def __repr__(self) -> str:
        return f"ScoreResult({self.value:.3f})"


class QualityItem(BaseModel):
    """
    One line of the post-capture report.

    Attributes:
        title: Metric name shown to the user
        status: Human status string ("Good", "Poor", ...)
        passed: Whether this metric passed
        score: Formatted raw value
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Metric name")
    status: str = Field(..., description="Human status string")
    passed: bool = Field(..., description="Whether the metric passed")
    score: str = Field(..., description="Formatted score")


class ScoreBreakdown(BaseModel):
    """
    Every intermediate value of the acceptance decision.

    Kept alongside the report so a caller can explain a result
    without recomputing it.
    """

    model_config = ConfigDict(frozen=True)

    focus: float = Field(..., ge=0.0, description="Raw mean Laplacian")
    illumination: float = Field(..., ge=0.0, description="Mean luminance")
    coverage_raw: float = Field(..., ge=0.0, le=100.0, description="Measured skin percent")
    coverage: float = Field(..., ge=0.0, le=100.0, description="Skin percent used for scoring")
    coverage_overridden: bool = Field(..., description="Coverage replaced by the position override")

    focus_part: float = Field(..., ge=0.0)
    illumination_part: float = Field(..., ge=0.0)
    coverage_part: float = Field(..., ge=0.0)

    focus_acceptable: bool = Field(..., description="Advisory focus threshold met")
    illumination_passed: bool = Field(..., description="Illumination gate")
    coverage_passed: bool = Field(..., description="Coverage gate")


class ScoreDecision(BaseModel):
    """Aggregator output before the preview image is attached."""

    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(..., ge=0, le=100)
    overall_passed: bool
    items: List[QualityItem]
    breakdown: ScoreBreakdown


class QualityReport(BaseModel):
    """
    Complete result of one capture attempt.

    Built once per capture; discarded when the user retakes or accepts.
    """

    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(..., ge=0, le=100, description="Weighted score 0-100")
    overall_passed: bool = Field(..., description="Illumination and coverage gates passed")
    items: List[QualityItem] = Field(..., description="Focus, Illumination, Coverage")
    breakdown: ScoreBreakdown
    cropped_image: bytes = Field(default=b"", description="JPEG preview of the scored crop")

    def __repr__(self) -> str:
        return (
            f"QualityReport(score={self.overall_score}, "
            f"passed={self.overall_passed}, "
            f"preview={len(self.cropped_image)} bytes)"
        )
