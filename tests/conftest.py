from __future__ import annotations

import numpy as np
import pytest


class FakeCapture:
    """Stands in for cv2.VideoCapture: replays a queue of frames."""

    def __init__(self, frames=(), opened: bool = True, accepts_buffer: bool = True) -> None:
        self.frames = list(frames)
        self.opened = opened
        self.accepts_buffer = accepts_buffer
        self.props: dict[int, float] = {}
        self.reads = 0
        self.release_calls = 0

    def isOpened(self) -> bool:
        return self.opened

    def set(self, prop: int, value: float) -> bool:
        if not self.accepts_buffer:
            return False
        self.props[prop] = value
        return True

    def read(self):
        self.reads += 1
        if not self.frames:
            return False, None
        frame = self.frames.pop(0)
        return frame is not None, frame

    def release(self) -> None:
        self.release_calls += 1
        self.opened = False


def draw_rects(rects, size=(640, 480), channels=3) -> np.ndarray:
    width, height = size
    shape = (height, width) if channels == 1 else (height, width, channels)
    frame = np.zeros(shape, dtype=np.uint8)
    for x, y, w, h in rects:
        frame[y:y + h, x:x + w] = 255
    return frame


@pytest.fixture
def make_frame():
    return draw_rects


@pytest.fixture
def fake_capture():
    return FakeCapture
