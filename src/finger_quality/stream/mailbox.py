"""
Frame Mailbox
=============

Single-slot hand-off between the camera callback and the live detection loop.

This replaces a queue: the camera produces frames far faster than the
detector needs them, so extra frames are DROPPED, never buffered.

Design Rules:
    - At most one frame waits in the slot
    - offer() is synchronous and never blocks; it may be called from the
      camera's own thread (slot state is lock-guarded and the wake-up is
      marshalled onto the consumer's event loop)
    - A frame is accepted only if the slot is empty, no detection is in
      flight, delivery is not suspended, and the cooldown has elapsed
      since the last completed detection
    - Does NOT process or modify frames
"""

import asyncio
import logging
import threading
import time
from typing import Optional

from finger_quality.stream.frame import LumaFrame


logger = logging.getLogger(__name__)


class FrameMailbox:
    """
    Single-slot mailbox with drop-if-busy-or-cooling-down semantics.

    Attributes:
        cooldown_sec: Minimum seconds between completed detections
        dropped_count: Frames rejected by offer()
        total_offered: Frames ever offered

    Example:
        mailbox = FrameMailbox(cooldown_ms=500)

        # Producer (camera callback)
        mailbox.offer(frame)

        # Consumer
        frame = await mailbox.get(timeout=1.0)
        try:
            detect(frame)
        finally:
            mailbox.complete()
    """

    def __init__(self, cooldown_ms: int = 500) -> None:
        if cooldown_ms < 0:
            raise ValueError("cooldown_ms must be >= 0")

        self.cooldown_sec = cooldown_ms / 1000.0
        self._slot: Optional[LumaFrame] = None
        self._ready: asyncio.Event = asyncio.Event()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = threading.Lock()
        self._busy: bool = False
        self._suspended: bool = False
        self._last_completed: Optional[float] = None

        self._dropped_count: int = 0
        self._total_offered: int = 0
        self._delivered: int = 0

    @property
    def busy(self) -> bool:
        """Whether a detection is in flight."""
        return self._busy

    @property
    def suspended(self) -> bool:
        return self._suspended

    @property
    def has_frame(self) -> bool:
        return self._slot is not None

    @property
    def dropped_count(self) -> int:
        return self._dropped_count

    @property
    def total_offered(self) -> int:
        return self._total_offered

    def offer(self, frame: LumaFrame, now: Optional[float] = None) -> bool:
        """
        Offer a frame from the producer.

        Args:
            frame: Incoming live frame
            now: Arrival time in monotonic seconds (defaults to now)

        Returns:
            True if the frame was placed in the slot, False if dropped.
        """
        if now is None:
            now = time.monotonic()

        with self._lock:
            self._total_offered += 1
            if (
                self._suspended
                or self._busy
                or self._slot is not None
                or (self._last_completed is not None and now - self._last_completed < self.cooldown_sec)
            ):
                self._dropped_count += 1
                return False
            self._slot = frame

        self._wake()
        return True

    def _wake(self) -> None:
        """Set the ready event on the consumer's loop."""
        loop = self._loop
        if loop is None or loop.is_closed():
            self._ready.set()
            return

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            self._ready.set()
        else:
            loop.call_soon_threadsafe(self._ready.set)

    async def get(self, timeout: Optional[float] = None) -> Optional[LumaFrame]:
        """
        Take the waiting frame and mark a detection as in flight.

        Args:
            timeout: Maximum seconds to wait. None = wait forever.

        Returns:
            The frame, or None if timeout occurred.
        """
        self._loop = asyncio.get_running_loop()
        if self._slot is None:
            try:
                if timeout is not None:
                    await asyncio.wait_for(self._ready.wait(), timeout=timeout)
                else:
                    await self._ready.wait()
            except asyncio.TimeoutError:
                return None
        return self.get_nowait()

    def get_nowait(self) -> Optional[LumaFrame]:
        """Take the waiting frame without waiting, None if the slot is empty."""
        with self._lock:
            frame = self._slot
            if frame is None:
                self._ready.clear()
                return None
            self._slot = None
            self._ready.clear()
            self._busy = True
            self._delivered += 1
            return frame

    def complete(self, now: Optional[float] = None) -> None:
        """Mark the in-flight detection as finished."""
        with self._lock:
            self._busy = False
            self._last_completed = time.monotonic() if now is None else now

    def suspend(self) -> int:
        """
        Stop accepting frames and discard any waiting frame.

        Returns:
            Number of frames discarded (0 or 1).
        """
        with self._lock:
            self._suspended = True
        return self.clear()

    def resume(self) -> None:
        """Accept frames again."""
        with self._lock:
            self._suspended = False

    def clear(self) -> int:
        """
        Discard the waiting frame.

        Returns:
            Number of frames cleared.
        """
        with self._lock:
            if self._slot is None:
                return 0
            self._slot = None
            self._ready.clear()
            return 1

    def metrics(self) -> dict:
        """
        Get mailbox metrics for observability.

        Returns:
            Dict with offered, delivered, dropped, busy, suspended
        """
        return {
            "total_offered": self._total_offered,
            "delivered": self._delivered,
            "dropped_count": self._dropped_count,
            "busy": self._busy,
            "suspended": self._suspended,
        }
