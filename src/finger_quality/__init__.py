"""
finger_quality
==============

Image-quality core for guided finger capture.

This package scores a finger placed in front of a camera. It provides a
cheap per-frame placement check for live feedback, and a deterministic
focus / illumination / skin-coverage scoring pipeline that accepts or
rejects a captured still for downstream biometric use.

Components:
    - stream: Frame types, single-slot live mailbox, still decoding
    - detection: Live placement detector and rate-limited feedback policy
    - geometry: Center crop and circular sampling regions
    - analysis: Focus, illumination and skin coverage analyzers
    - scoring: Weighted score and pass/fail policy
    - pipeline: Crop -> resize -> analyze -> score for one still
    - session: Camera orchestration with guaranteed live-feed resumption

Example:
    from finger_quality.pipeline import CapturePipeline
    from finger_quality.stream.image_decoder import decode_still

    report = CapturePipeline().run(decode_still(jpeg_bytes), position_ok=True)
    print(report.overall_score, report.overall_passed)
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
