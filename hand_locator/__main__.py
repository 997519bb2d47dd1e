"""
__main__.py – CLI entry point for hand_locator.

Usage:
    python -m hand_locator run
    python -m hand_locator run --device 1 --show --debug-dir ./debug
    python -m hand_locator detect --images img1.jpg img2.jpg --out result.json
"""

import argparse
import json
import logging
import signal
import sys
from pathlib import Path

import cv2
import numpy as np

from hand_locator.config import config

log = logging.getLogger("hand_locator")

WINDOW_NAME = "hand_locator"


def show_in_window(image) -> None:
    """Display collaborator backed by an OpenCV window."""
    channels = 1 if image.pixel_format == "gray8" else 3
    frame = np.frombuffer(image.data, dtype=np.uint8).reshape(image.height, image.width, channels)
    cv2.imshow(WINDOW_NAME, frame)
    cv2.waitKey(1)


def cmd_run(args: argparse.Namespace) -> int:
    """Run the live camera loop."""
    from hand_locator.capture import DeviceUnavailable, FrameSource
    from hand_locator.tracker import HandTracker

    device = config.CAMERA_INDEX if args.device is None else args.device
    debug_dir = args.debug_dir or (Path(config.DEBUG_DIR) if config.DEBUG_DIR else None)
    show = args.show or config.SHOW_WINDOW

    tracker = HandTracker(
        FrameSource(device),
        buffer_limit=config.BUFFER_SIZE,
        tick_interval=config.TICK_INTERVAL_MS / 1000.0,
        pacing_delay=config.PACING_DELAY_MS / 1000.0,
        on_frame=show_in_window if show else None,
        debug_dir=debug_dir,
    )

    def _handle_signal(signum, frame):
        log.info("Shutdown signal received, finishing current tick...")
        tracker.stop()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        tracker.start()
    except DeviceUnavailable as exc:
        log.error("%s", exc)
        return 1

    try:
        tracker.run(max_ticks=args.max_ticks)
    finally:
        tracker.close()
        if show:
            cv2.destroyAllWindows()
    return 0


def cmd_detect(args: argparse.Namespace) -> int:
    """Run hand detection on still images."""
    from hand_locator.core import EmptyFrame, ProcessingError, analyze_frame
    from hand_locator.debug import save_debug_artifacts

    results = {}
    failed = 0
    for idx, img_path in enumerate(args.images):
        img = cv2.imread(str(img_path))
        if img is None:
            log.error("Cannot read image: %s", img_path)
            failed += 1
            continue

        try:
            analysis = analyze_frame(img)
        except (EmptyFrame, ProcessingError) as exc:
            log.error("Detection failed for %s: %s", img_path, exc)
            failed += 1
            continue

        detection = analysis.detection
        result = detection.to_dict() if detection is not None else {"found": False}
        results[str(img_path)] = result
        _print_result(str(img_path), result)

        if args.debug_dir:
            save_debug_artifacts(args.debug_dir, idx, analysis.resized, analysis.binary, detection)

    if args.out:
        with open(args.out, "w") as fh:
            json.dump(results, fh, indent=2)
        log.info("Results saved to %s", args.out)

    return 1 if failed and not results else 0


def _print_result(label: str, result: dict) -> None:
    if result.get("found"):
        print(f"  {label}: hand @ ({result['x']},{result['y']}) "
              f"{result['width']}x{result['height']} area={result['area']:.0f}")
    else:
        print(f"  {label}: no hand")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hand_locator",
        description="Largest-blob hand detection on camera frames",
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    sub = parser.add_subparsers(dest="command")

    # run
    p_run = sub.add_parser("run", help="Track hands on a live camera")
    p_run.add_argument("--device", type=int, default=None, help="Camera index")
    p_run.add_argument("--max-ticks", type=int, default=None)
    p_run.add_argument("--show", action="store_true", help="Show annotated frames in a window")
    p_run.add_argument("--debug-dir", type=Path, help="Debug artifacts directory")

    # detect
    p_detect = sub.add_parser("detect", help="Run detection on image files")
    p_detect.add_argument("--images", nargs="+", type=Path, required=True)
    p_detect.add_argument("--out", type=Path, help="Output JSON path")
    p_detect.add_argument("--debug-dir", type=Path, help="Debug artifacts directory")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    problems = config.validate()
    if problems:
        for problem in problems:
            log.error("Invalid configuration: %s", problem)
        return 1

    if args.command == "run":
        return cmd_run(args)
    if args.command == "detect":
        return cmd_detect(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
