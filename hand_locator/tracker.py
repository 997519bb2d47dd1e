"""
tracker.py – Periodic acquisition → detection loop.

HandTracker owns the frame source and runs one tick at a time:
  pacing delay → pull → resize/detect/annotate → log → display callback

Ticks are independent. An empty pull, a failed read, a per-frame processing
failure or a failed display hand-off skips the rest of that tick; the next
tick is the only recovery. Only DeviceUnavailable propagates.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import cv2
import numpy as np

from hand_locator.capture import DeviceUnavailable, FrameSource
from hand_locator.core import (
    EmptyFrame,
    FrameAnalysis,
    HandDetection,
    ProcessingError,
    analyze_frame,
)
from hand_locator.debug import save_debug_artifacts
from hand_locator.display import DisplayImage, to_display_image

log = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Outcome of one tick that produced a frame."""
    index: int
    detection: Optional[HandDetection]
    annotated: np.ndarray
    display_image: Optional[DisplayImage]


def report_detection(detection: HandDetection) -> None:
    b = detection.bbox
    log.info("Hand detected")
    log.info("  - Hand position (x, y): %d, %d", b.x, b.y)
    log.info("  - Hand size (width, height): %d, %d", b.width, b.height)


def run_periodic(
    task: Callable[[], object],
    interval: float,
    should_continue: Callable[[], bool] = lambda: True,
    max_ticks: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    """Invoke ``task`` every ``interval`` seconds on the calling thread.

    A task that overruns its slot delays the next one; missed slots are not
    replayed. Returns the number of invocations.
    """
    count = 0
    next_at = clock()
    while should_continue() and (max_ticks is None or count < max_ticks):
        delay = next_at - clock()
        if delay > 0:
            sleep(delay)
        else:
            next_at = clock()

        task()
        count += 1
        next_at += interval
    return count


class HandTracker:
    """Long-lived controller for the camera and the tick schedule."""

    def __init__(
        self,
        source: FrameSource,
        *,
        buffer_limit: int = 1,
        tick_interval: float = 0.008,
        pacing_delay: float = 0.030,
        on_frame: Optional[Callable[[DisplayImage], None]] = None,
        debug_dir: Optional[Path] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.source = source
        self.buffer_limit = buffer_limit
        self.tick_interval = tick_interval
        self.pacing_delay = pacing_delay
        self.on_frame = on_frame
        self.debug_dir = debug_dir
        self._sleep = sleep
        self._running = False
        self.tick_count = 0

    def start(self) -> None:
        """Open the camera and apply the buffer limit. DeviceUnavailable propagates."""
        self.source.open()
        self.source.set_buffer_limit(self.buffer_limit)
        self._running = True

    def stop(self) -> None:
        """Ask run() to return after the current tick."""
        self._running = False

    def close(self) -> None:
        self._running = False
        self.source.close()

    def tick(self) -> Optional[TickResult]:
        """Run one acquisition → detection cycle.

        Returns None when the tick was skipped (no frame, a failed read,
        or a frame that could not be processed).
        """
        index = self.tick_count
        self.tick_count += 1

        if self.pacing_delay > 0:
            self._sleep(self.pacing_delay)

        try:
            frame = self.source.pull()
        except DeviceUnavailable:
            raise
        except Exception as exc:
            log.warning("Skipping tick %d: camera read failed: %s", index, exc)
            return None
        if frame is None:
            return None

        try:
            analysis = analyze_frame(frame)
        except (EmptyFrame, ProcessingError) as exc:
            log.warning("Skipping tick %d: %s", index, exc)
            return None

        if analysis.detection is not None:
            report_detection(analysis.detection)

        if self.debug_dir is not None:
            self._save_debug(index, analysis)

        display_image = to_display_image(analysis.annotated)
        if display_image is not None and self.on_frame is not None:
            try:
                self.on_frame(display_image)
            except Exception as exc:
                log.warning("Display failed for tick %d: %s", index, exc)
                display_image = None

        return TickResult(
            index=index,
            detection=analysis.detection,
            annotated=analysis.annotated,
            display_image=display_image,
        )

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Tick every ``tick_interval`` seconds until stop() or ``max_ticks``."""
        if not self._running:
            self.start()
        log.info("Tracking hands on camera %d every %.0f ms (+%.0f ms pacing)",
                 self.source.device_index, self.tick_interval * 1000, self.pacing_delay * 1000)
        count = run_periodic(
            self.tick,
            self.tick_interval,
            should_continue=lambda: self._running,
            max_ticks=max_ticks,
            sleep=self._sleep,
        )
        log.info("Stopped after %d ticks", count)
        return count

    def _save_debug(self, index: int, analysis: FrameAnalysis) -> None:
        try:
            save_debug_artifacts(self.debug_dir, index, analysis.resized, analysis.binary, analysis.detection)
        except (OSError, cv2.error) as exc:
            log.warning("Failed to save debug artifacts for tick %d: %s", index, exc)

    def __enter__(self) -> "HandTracker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
