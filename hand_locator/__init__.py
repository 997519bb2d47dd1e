"""hand_locator – Locate the dominant hand blob in live camera frames."""

from hand_locator.core import detect_hand, locate_hand
from hand_locator.capture import FrameSource
from hand_locator.tracker import HandTracker

__all__ = ["detect_hand", "locate_hand", "FrameSource", "HandTracker"]
