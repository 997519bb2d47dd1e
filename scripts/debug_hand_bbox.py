#!/usr/bin/env python3
"""
Debug script for hand bbox detection.

Runs the hand detector on frames sampled from a video file and writes the
original, binary mask and annotated result for each sample.

Usage:
    python scripts/debug_hand_bbox.py <video_path> [--timestamps 1,2,3] [--output-dir /tmp/debug]

Example:
    python scripts/debug_hand_bbox.py /path/to/recording.mp4 --timestamps 0.5,2,4
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from hand_locator.core import ProcessingError, analyze_frame
from hand_locator.debug import save_debug_artifacts


def extract_frame(video_path: str, time_sec: float) -> Optional[np.ndarray]:
    """Extract a single BGR frame at ``time_sec``, or None if it cannot be read."""
    cap = cv2.VideoCapture(video_path)
    if not cap.isOpened():
        print(f"⚠️ Could not open video: {video_path}")
        return None

    fps = cap.get(cv2.CAP_PROP_FPS)
    total_frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
    if fps <= 0:
        fps = 30  # Default fallback

    target_frame = int(time_sec * fps)
    if total_frames > 0:
        target_frame = min(target_frame, total_frames - 1)

    cap.set(cv2.CAP_PROP_POS_FRAMES, target_frame)
    ret, frame = cap.read()
    cap.release()

    if not ret:
        print(f"⚠️ Could not read frame at {time_sec}s")
        return None
    return frame


def main():
    parser = argparse.ArgumentParser(description='Debug hand bbox detection')
    parser.add_argument('video_path', help='Path to video file')
    parser.add_argument('--timestamps', default='1,2,3',
                        help='Comma-separated timestamps to sample (default: 1,2,3)')
    parser.add_argument('--output-dir', default='/tmp/debug_hand',
                        help='Output directory for debug images')

    args = parser.parse_args()

    if not os.path.exists(args.video_path):
        print(f"❌ Video not found: {args.video_path}")
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    print(f"📁 Output directory: {output_dir}")

    timestamps = [float(t.strip()) for t in args.timestamps.split(',')]
    print(f"⏱️ Timestamps: {timestamps}")

    found = 0
    for idx, ts in enumerate(timestamps):
        frame = extract_frame(args.video_path, ts)
        if frame is None:
            continue

        try:
            analysis = analyze_frame(frame)
        except ProcessingError as exc:
            print(f"❌ {ts:.2f}s: {exc}")
            continue

        detection = analysis.detection
        save_debug_artifacts(output_dir, idx, analysis.resized, analysis.binary, detection)

        if detection is None:
            print(f"  {ts:.2f}s: no hand")
            continue

        found += 1
        b = detection.bbox
        print(f"  {ts:.2f}s: hand @ ({b.x},{b.y}) {b.width}x{b.height} area={detection.area:.0f}")

    print(f"\n✅ Hand found in {found}/{len(timestamps)} samples")
    print(f"📁 Debug images saved to: {output_dir}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
