"""
core.py – Single-frame hand detection API.

Pipeline (fixed order, every stage runs on a fresh buffer):
  1. Resize to the working resolution (INTER_AREA)
  2. Grayscale
  3. 7x7 Gaussian blur, sigma derived from the kernel
  4. Otsu threshold → binary foreground mask
  5. External contours, simple chain approximation
  6. Largest contour by area wins (first one found on ties)
  7. Bounding rect + overlay on a copy of the resized color frame
"""

import logging
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

log = logging.getLogger(__name__)

WORK_SIZE = (640, 480)  # (width, height)
BLUR_KERNEL = (7, 7)

CONTOUR_COLOR = (0, 0, 255)  # red
BBOX_COLOR = (255, 0, 0)  # blue
LINE_THICKNESS = 2


class ProcessingError(Exception):
    """Image processing failed for a single frame."""
    pass


class EmptyFrame(Exception):
    """No pixel data to process."""
    pass


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in working-frame pixels."""
    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True, eq=False)
class HandDetection:
    """The dominant foreground region of a frame."""
    contour: np.ndarray
    bbox: BoundingBox
    area: float

    def to_dict(self) -> dict:
        return {
            "found": True,
            **self.bbox.to_dict(),
            "area": round(self.area, 1),
            "points": len(self.contour),
        }


def _check_frame(image: Optional[np.ndarray]) -> np.ndarray:
    if image is None or image.size == 0:
        raise EmptyFrame("frame has no pixel data")
    return image


def resize_frame(image: np.ndarray, size: tuple[int, int] = WORK_SIZE) -> np.ndarray:
    """Resize to ``size`` (width, height) with area interpolation.

    Always returns a new array, even when no scaling is needed.
    """
    image = _check_frame(image)
    try:
        return cv2.resize(image, size, interpolation=cv2.INTER_AREA)
    except cv2.error as exc:
        raise ProcessingError(f"resize failed: {exc}") from exc


def _to_gray(image: np.ndarray) -> np.ndarray:
    channels = 1 if image.ndim == 2 else image.shape[2]
    if channels == 1:
        return image.reshape(image.shape[:2]).copy()
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    raise ProcessingError(f"unsupported channel count: {channels}")


def segment_foreground(image: np.ndarray) -> np.ndarray:
    """Grayscale, blur and Otsu-threshold a frame into a 0/255 mask."""
    image = _check_frame(image)
    try:
        gray = _to_gray(image)
        blurred = cv2.GaussianBlur(gray, BLUR_KERNEL, 0)
        _, binary = cv2.threshold(blurred, 0, 255, cv2.THRESH_BINARY | cv2.THRESH_OTSU)
    except cv2.error as exc:
        raise ProcessingError(f"segmentation failed: {exc}") from exc
    return binary


def find_hand_contours(binary: np.ndarray) -> list[np.ndarray]:
    """Outer contours of a binary mask, in OpenCV scan order."""
    try:
        contours, _ = cv2.findContours(binary, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    except cv2.error as exc:
        raise ProcessingError(f"contour extraction failed: {exc}") from exc
    return list(contours)


def select_dominant(contours: list[np.ndarray]) -> Optional[tuple[int, float]]:
    """Return (index, area) of the largest contour, or None.

    Only a strictly greater area replaces the current best, so zero-area
    contours never win and ties go to the earliest contour.
    """
    max_area = 0.0
    max_idx = -1
    for i, contour in enumerate(contours):
        area = cv2.contourArea(contour)
        if area > max_area:
            max_area = area
            max_idx = i

    if max_idx < 0:
        return None
    return max_idx, float(max_area)


@dataclass
class FrameAnalysis:
    """Every intermediate of one detector pass over a camera frame."""
    resized: np.ndarray
    binary: np.ndarray
    detection: Optional[HandDetection]
    annotated: np.ndarray


def _dominant_region(binary: np.ndarray) -> Optional[HandDetection]:
    contours = find_hand_contours(binary)

    best = select_dominant(contours)
    if best is None:
        log.debug("No hand: %d contours, none with positive area", len(contours))
        return None

    idx, area = best
    contour = contours[idx].copy()
    x, y, w, h = cv2.boundingRect(contour)
    contour.setflags(write=False)
    log.debug("Hand: contour %d/%d area=%.1f bbox=(%d,%d,%d,%d)",
              idx + 1, len(contours), area, x, y, w, h)

    return HandDetection(
        contour=contour,
        bbox=BoundingBox(int(x), int(y), int(w), int(h)),
        area=area,
    )


def detect_hand(image: np.ndarray) -> Optional[HandDetection]:
    """Detect the dominant foreground blob in an already-resized frame."""
    return _dominant_region(segment_foreground(image))


def draw_overlay(image: np.ndarray, detection: Optional[HandDetection]) -> np.ndarray:
    """Draw contour and bounding box onto a 3-channel BGR copy of ``image``."""
    image = _check_frame(image)
    if image.ndim == 2 or image.shape[2] == 1:
        annotated = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    elif image.shape[2] == 4:
        annotated = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    else:
        annotated = image.copy()

    if detection is None:
        return annotated

    b = detection.bbox
    cv2.drawContours(annotated, [detection.contour], -1, CONTOUR_COLOR, LINE_THICKNESS)
    cv2.rectangle(annotated, (b.x, b.y), (b.x + b.width, b.y + b.height),
                  BBOX_COLOR, LINE_THICKNESS)
    return annotated


def analyze_frame(frame: np.ndarray) -> FrameAnalysis:
    """Resize, segment, detect and annotate one camera frame."""
    resized = resize_frame(frame)
    binary = segment_foreground(resized)
    detection = _dominant_region(binary)
    try:
        annotated = draw_overlay(resized, detection)
    except cv2.error as exc:
        raise ProcessingError(f"overlay failed: {exc}") from exc
    return FrameAnalysis(resized=resized, binary=binary, detection=detection, annotated=annotated)


def locate_hand(frame: np.ndarray) -> tuple[Optional[HandDetection], np.ndarray]:
    """Resize, detect and annotate one camera frame.

    Returns (detection or None, annotated working-size frame).
    """
    analysis = analyze_frame(frame)
    return analysis.detection, analysis.annotated
