"""
fishtank module: runtime/scheduler.py

Frame callbacks with requestAnimationFrame semantics:
- request_frame() queues a callback for the next frame and returns a handle
- cancel_frame(handle) drops it (unknown or spent handles are ignored)
- a callback requested while a frame is running waits for the following frame
"""

from __future__ import annotations
from typing import Callable, Dict, List, Tuple

FrameCallback = Callable[[float], None]


class FrameQueue:
    def __init__(self) -> None:
        self._next_handle = 1
        self._pending: Dict[int, FrameCallback] = {}
        self._running: Dict[int, FrameCallback] = {}

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)
        self._running.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self, timestamp: float) -> int:
        """Run every callback queued before this frame started. Returns how many ran."""
        batch: List[Tuple[int, FrameCallback]] = list(self._pending.items())
        self._pending = {}
        self._running = dict(batch)
        ran = 0
        try:
            for handle, callback in batch:
                if handle not in self._running:
                    continue
                del self._running[handle]
                callback(timestamp)
                ran += 1
        finally:
            self._running = {}
        return ran


class ManualScheduler(FrameQueue):
    """Frames advance only when asked; for tests and headless embedding."""

    def __init__(self, frame_ms: float = 1000.0 / 60.0) -> None:
        super().__init__()
        self.frame_ms = frame_ms
        self.now = 0.0
        self.frames = 0

    def advance(self, frames: int = 1) -> int:
        ran = 0
        for _ in range(frames):
            self.now += self.frame_ms
            self.frames += 1
            ran += self.run_frame(self.now)
        return ran
