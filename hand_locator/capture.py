"""
capture.py – Pull-based camera frame source.

Wraps a cv2.VideoCapture device. Frames are read on demand; a read that
yields nothing (warm-up, transient stall) is reported as None rather than
raised.
"""

import logging
from typing import Callable, Optional

import cv2
import numpy as np

log = logging.getLogger(__name__)


class DeviceUnavailable(Exception):
    """Camera device could not be opened or is not open."""
    pass


class FrameSource:
    """Owns a single camera handle with an explicit open/close lifecycle."""

    def __init__(self, device_index: int = 0, capture_factory: Callable = cv2.VideoCapture):
        self.device_index = device_index
        self._capture_factory = capture_factory
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> "FrameSource":
        """Open the device. Raises DeviceUnavailable if no device matches."""
        if self._cap is not None:
            return self

        cap = self._capture_factory(self.device_index)
        if cap is None or not cap.isOpened():
            if cap is not None:
                cap.release()
            raise DeviceUnavailable(f"Could not open camera {self.device_index}")

        self._cap = cap
        log.info("Opened camera %d", self.device_index)
        return self

    def set_buffer_limit(self, n: int) -> bool:
        """Limit the device's internal frame queue to ``n`` frames.

        Best-effort: returns False when the backend ignores the property.
        """
        if n < 1:
            raise ValueError(f"buffer limit must be >= 1 (got {n})")
        cap = self._require_open()

        accepted = bool(cap.set(cv2.CAP_PROP_BUFFERSIZE, n))
        if accepted:
            log.debug("Camera %d buffer limit set to %d", self.device_index, n)
        else:
            log.debug("Camera %d backend ignored buffer limit %d", self.device_index, n)
        return accepted

    def pull(self) -> Optional[np.ndarray]:
        """Read the next frame, or None if the device produced none."""
        cap = self._require_open()
        ret, frame = cap.read()
        if not ret or frame is None or frame.size == 0:
            return None
        return frame

    def close(self) -> None:
        if self._cap is None:
            return
        self._cap.release()
        self._cap = None
        log.info("Released camera %d", self.device_index)

    def _require_open(self):
        if self._cap is None:
            raise DeviceUnavailable(f"Camera {self.device_index} is not open")
        return self._cap

    def __enter__(self) -> "FrameSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
