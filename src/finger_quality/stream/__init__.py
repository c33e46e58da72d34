"""
Stream Module
=============

Frame types, the live frame hand-off, and still image decoding.

This module provides the ingestion layer of the core:
    - LumaFrame / StillImage: Typed pixel buffers (internal representation)
    - FrameMailbox: Single-slot hand-off that drops frames while busy
    - image_decoder: Still decode, resize, grayscale and JPEG encode

Example:
    from finger_quality.stream import FrameMailbox, LumaFrame

    mailbox = FrameMailbox(cooldown_ms=500)

    # Camera callback
    mailbox.offer(LumaFrame.packed(width, height, plane))

    # Detection loop
    frame = await mailbox.get(timeout=1.0)
"""

from finger_quality.stream.frame import LumaFrame, StillImage
from finger_quality.stream.mailbox import FrameMailbox


__all__ = [
    "LumaFrame",
    "StillImage",
    "FrameMailbox",
]
