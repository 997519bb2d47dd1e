"""
debug.py – Save debug artifacts for visual inspection.

When a debug dir is set, saves per-frame:
  frame_original.jpg, frame_binary.jpg, frame_final.jpg, frame_debug.json
"""

import json
import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from hand_locator.core import HandDetection, draw_overlay

log = logging.getLogger(__name__)


def save_debug_artifacts(
    debug_dir: Path,
    frame_idx: int,
    image_bgr: np.ndarray,
    binary: np.ndarray,
    detection: Optional[HandDetection],
) -> None:
    """Write all debug images and JSON for one frame."""
    debug_dir.mkdir(parents=True, exist_ok=True)
    prefix = f"frame_{frame_idx:04d}"

    # 1. Original (working size)
    cv2.imwrite(str(debug_dir / f"{prefix}_original.jpg"), image_bgr)

    # 2. Otsu mask
    cv2.imwrite(str(debug_dir / f"{prefix}_binary.jpg"), binary)

    # 3. Final result
    img_final = draw_overlay(image_bgr, detection)
    if detection is not None:
        b = detection.bbox
        label = f"hand {b.width}x{b.height} area={detection.area:.0f}"
        cv2.putText(img_final, label, (b.x, max(b.y - 10, 15)),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2)
    else:
        cv2.putText(img_final, "NO HAND", (30, 40),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.0, (0, 0, 255), 2)
    cv2.imwrite(str(debug_dir / f"{prefix}_final.jpg"), img_final)

    # 4. Debug JSON
    debug_data = {
        "frame_idx": frame_idx,
        "foreground_ratio": round(float(np.count_nonzero(binary)) / binary.size, 4),
        "result": detection.to_dict() if detection is not None else {"found": False},
    }
    with open(debug_dir / f"{prefix}_debug.json", "w") as fh:
        json.dump(debug_data, fh, indent=2, default=str)

    log.debug("Saved debug artifacts for frame %d to %s", frame_idx, debug_dir)
