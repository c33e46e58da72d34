"""
Capture Pipeline
================

Strictly sequential scoring of one captured still.

Stages:
    1. Center-square crop of the full-resolution still
    2. Aspect-preserving resize to the scoring width (~320 px)
    3. Grayscale reduction
    4. Focus, Illumination, Coverage analyzers
    5. Score aggregation
    6. JPEG encode of the full-resolution crop for preview

Design Rules:
    - Analyzers see the resized copy only; thresholds were tuned at 320 px
    - Result order is always Focus, Illumination, Coverage, even when the
      analyzers run concurrently
    - Every failure surfaces as CaptureFailure
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from finger_quality.analysis import Analyzer, FocusAnalyzer, IlluminationAnalyzer, SkinCoverageAnalyzer
from finger_quality.config import Settings
from finger_quality.errors import CaptureFailure, InputError
from finger_quality.geometry.regions import RegionCropper
from finger_quality.models.reason_codes import CaptureFailureReason
from finger_quality.models.results import QualityReport, ScoreResult
from finger_quality.scoring.aggregator import ScoreAggregator
from finger_quality.stream.frame import StillImage
from finger_quality.stream.image_decoder import encode_jpeg, resize_to_width, to_grayscale


logger = logging.getLogger(__name__)


class CapturePipeline:
    """
    Crop, resize, analyse and score a still.

    Attributes:
        settings: Thresholds and pipeline options
        cropper: Center-square cropper
        aggregator: Decision policy

    Example:
        pipeline = CapturePipeline(settings)
        report = pipeline.run(still, position_ok=True)
        print(report.overall_score, report.overall_passed)
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        cfg = self.settings

        self.cropper = RegionCropper(size_ratio=cfg.capture.crop_size_ratio)
        self.focus: Analyzer = FocusAnalyzer()
        self.illumination: Analyzer = IlluminationAnalyzer()
        self.coverage: Analyzer = SkinCoverageAnalyzer(cfg.skin)
        self.aggregator = ScoreAggregator(
            focus_config=cfg.focus,
            illumination_config=cfg.illumination,
            coverage_config=cfg.coverage,
            scoring_config=cfg.scoring,
        )

        logger.info(
            f"CapturePipeline initialized: crop_ratio={cfg.capture.crop_size_ratio}, "
            f"resize_width={cfg.capture.resize_width}, "
            f"concurrent={cfg.capture.concurrent_analyzers}"
        )

    def run(self, still: StillImage, position_ok: bool) -> QualityReport:
        """
        Score a decoded still.

        Args:
            still: Full-resolution RGB still
            position_ok: Live position indicator at capture time

        Returns:
            QualityReport with score, decision, items and preview JPEG

        Raises:
            CaptureFailure: INVALID_IMAGE for empty crops or bad input,
                ANALYSIS_FAILED for anything else
        """
        capture_cfg = self.settings.capture
        try:
            cropped = self.cropper.crop_image(still.pixels)
            if cropped.size == 0:
                raise InputError(f"Crop of {still!r} is empty")

            small = resize_to_width(cropped, capture_cfg.resize_width, capture_cfg.resize_interpolation)
            gray = to_grayscale(small)

            focus, illumination, coverage = self.analyze(gray, small)

            decision = self.aggregator.aggregate(
                focus=focus.value,
                illumination=illumination.value,
                coverage=coverage.value,
                position_ok=position_ok,
            )
            preview = encode_jpeg(cropped, capture_cfg.jpeg_quality)
        except InputError as e:
            raise CaptureFailure(CaptureFailureReason.INVALID_IMAGE, str(e)) from e
        except CaptureFailure:
            raise
        except Exception as e:
            raise CaptureFailure(CaptureFailureReason.ANALYSIS_FAILED, f"Scoring failed: {e}") from e

        logger.info(
            f"Capture scored: score={decision.overall_score}, passed={decision.overall_passed}, "
            f"focus={focus.value:.1f}, illumination={illumination.value:.1f}, "
            f"coverage={coverage.value:.1f}%"
        )

        return QualityReport(
            overall_score=decision.overall_score,
            overall_passed=decision.overall_passed,
            items=decision.items,
            breakdown=decision.breakdown,
            cropped_image=preview,
        )

    def analyze(self, gray: np.ndarray, rgb: np.ndarray) -> Tuple[ScoreResult, ScoreResult, ScoreResult]:
        """
        Run the three analyzers.

        Returns:
            Tuple of ScoreResult in the order (focus, illumination, coverage)
        """
        jobs: List[Tuple[Analyzer, np.ndarray]] = [
            (self.focus, gray),
            (self.illumination, gray),
            (self.coverage, rgb),
        ]

        if self.settings.capture.concurrent_analyzers:
            with ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="analyzer") as pool:
                futures = [pool.submit(analyzer.score, image) for analyzer, image in jobs]
                results = [future.result() for future in futures]
        else:
            results = [analyzer.score(image) for analyzer, image in jobs]

        for (analyzer, _), result in zip(jobs, results):
            logger.debug(f"Analyzer {analyzer.name}: {result.value:.2f}")

        focus, illumination, coverage = results
        return focus, illumination, coverage
