from __future__ import annotations

import logging

import numpy as np
import pytest

from hand_locator.display import DisplayConversionError, pack_frame, to_display_image


def test_pack_color_frame() -> None:
    frame = np.full((480, 640, 3), 7, dtype=np.uint8)

    image = pack_frame(frame)

    assert (image.width, image.height) == (640, 480)
    assert image.pixel_format == "bgr24"
    assert image.stride == 640 * 3
    assert len(image.data) == 480 * 640 * 3


def test_pack_gray_frame() -> None:
    image = pack_frame(np.zeros((480, 640), dtype=np.uint8))

    assert image.pixel_format == "gray8"
    assert image.stride == 640
    assert len(image.data) == 480 * 640


def test_pack_compacts_strided_views() -> None:
    frame = np.arange(4 * 6 * 3, dtype=np.uint8).reshape(4, 6, 3)
    view = frame[:, ::2]

    image = pack_frame(view)

    assert image.width == 3
    assert image.stride == 3 * 3
    assert image.data == np.ascontiguousarray(view).tobytes()


@pytest.mark.parametrize(
    "frame",
    [
        np.zeros((10, 10, 3), dtype=np.float32),
        np.zeros((10, 10, 2), dtype=np.uint8),
        np.zeros((0, 10, 3), dtype=np.uint8),
    ],
)
def test_pack_rejects_unsupported_frames(frame) -> None:
    with pytest.raises(DisplayConversionError):
        pack_frame(frame)


def test_to_display_image_swallows_conversion_errors(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="hand_locator.display"):
        image = to_display_image(np.zeros((10, 10, 4), dtype=np.uint8))

    assert image is None
    assert "Failed to convert frame for display" in caplog.text
