"""
display.py – Convert annotated frames into a display-ready image.

The display toolkit itself is external; this module only packs an owned
pixel buffer into a plain structure (size, pixel format, stride, bytes)
that a toolkit can copy from.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

log = logging.getLogger(__name__)

_PIXEL_FORMATS = {
    1: "gray8",
    3: "bgr24",
}


class DisplayConversionError(Exception):
    """Frame cannot be represented as a display image."""
    pass


@dataclass(frozen=True)
class DisplayImage:
    width: int
    height: int
    pixel_format: str
    stride: int
    data: bytes


def pack_frame(frame: np.ndarray) -> DisplayImage:
    """Pack a uint8 gray or BGR frame into a compact row-major buffer.

    Strided views are copied out, so ``stride == width * channels``.
    """
    if frame is None or frame.size == 0:
        raise DisplayConversionError("empty frame")
    if frame.dtype != np.uint8:
        raise DisplayConversionError(f"unsupported dtype: {frame.dtype}")

    rows, cols = frame.shape[:2]
    channels = 1 if frame.ndim == 2 else frame.shape[2]
    pixel_format = _PIXEL_FORMATS.get(channels)
    if pixel_format is None:
        raise DisplayConversionError(f"unsupported channel count: {channels}")

    compact = np.ascontiguousarray(frame)
    return DisplayImage(
        width=cols,
        height=rows,
        pixel_format=pixel_format,
        stride=compact.strides[0],
        data=compact.tobytes(),
    )


def to_display_image(frame: np.ndarray) -> Optional[DisplayImage]:
    """Like pack_frame, but logs and returns None on failure."""
    try:
        return pack_frame(frame)
    except DisplayConversionError as exc:
        log.warning("Failed to convert frame for display: %s", exc)
        return None
