"""
Scoring Module
==============

Weighted 0-100 score and pass/fail decision for a captured still.
"""

from finger_quality.scoring.aggregator import ScoreAggregator, round_half_up

__all__ = [
    "ScoreAggregator",
    "round_half_up",
]
