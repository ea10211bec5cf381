"""
FrameGrabber: command-line entry point.
Read video metadata, extract a frame at a timestamp as JPEG, or open the editor window.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import config as cfg
from editor.frame_editor import ASPECT_RATIOS
from grabber.frame_grabber import BACKENDS, FrameExtractionError, FrameGrabber
from logging_config import setup_logging
from utils.images import ImageDecodeError

logger = logging.getLogger(__name__)


def video_info(video_path: str | Path) -> Dict[str, Any]:
    """Duration / fps / size of a video, as the grabber sees it."""
    grabber = FrameGrabber(backend="opencv")
    grabber.select_video(video_path)
    h, w = grabber.frame_shape
    return {
        "video": str(grabber.video_path),
        "duration": round(grabber.duration, 3),
        "fps": round(grabber.fps, 3),
        "width": w,
        "height": h,
        "slider_max": round(grabber.slider_max, 3),
    }


def grab_frame(
    video_path: str | Path,
    seconds: float,
    output_path: Optional[str | Path] = None,
    backend: str = cfg.DEFAULT_BACKEND,
) -> Dict[str, Any]:
    """
    Extract the frame at `seconds` and write it as JPEG.
    output_path defaults to OUTPUT_DIR/frame_<t>s.jpg.
    """
    grabber = FrameGrabber(backend=backend)
    grabber.load()
    grabber.select_video(video_path)
    grabber.seek(seconds)
    data = grabber.extract()

    out = Path(output_path) if output_path else cfg.OUTPUT_DIR / grabber.download_name()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    logger.info("Wrote %s", out)
    return {
        "output": str(out),
        "requested_time": seconds,
        "extraction_time": grabber.extraction_time(),
        "duration": grabber.duration,
        "backend": grabber.active_backend,
        "bytes": len(data),
    }


def main() -> None:
    ap = argparse.ArgumentParser(description="FrameGrabber: extract and annotate video frames")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--log-file", default=None, help="Also write logs to this file")
    sub = ap.add_subparsers(dest="command", required=True)

    p_info = sub.add_parser("info", help="Print video duration, fps and size")
    p_info.add_argument("video", help="Input video path")

    p_grab = sub.add_parser("grab", help="Extract one frame as JPEG")
    p_grab.add_argument("video", help="Input video path")
    p_grab.add_argument("-t", "--time", type=float, default=0.0, help="Timestamp in seconds")
    p_grab.add_argument("-o", "--output", default=None, help="Output JPEG path")
    p_grab.add_argument("--backend", choices=BACKENDS, default=cfg.DEFAULT_BACKEND,
                        help="Decoder: ffmpeg, opencv, or auto (ffmpeg if installed)")

    p_edit = sub.add_parser("edit", help="Annotate an image in an OpenCV window")
    p_edit.add_argument("image", nargs="?", default=None, help="Image to annotate")
    p_edit.add_argument("-o", "--output", default=None, help="Output JPEG path")
    p_edit.add_argument("--aspect", type=int, default=cfg.DEFAULT_ASPECT_RATIO,
                        choices=range(len(ASPECT_RATIOS)),
                        help="Blank canvas aspect ratio index: " + ", ".join(
                            f"{i}={label}" for i, (label, _, _) in enumerate(ASPECT_RATIOS)))

    args = ap.parse_args()
    setup_logging(logging.DEBUG if args.verbose else cfg.LOG_LEVEL, args.log_file)

    try:
        if args.command == "info":
            print(json.dumps(video_info(args.video), indent=2))
        elif args.command == "grab":
            result = grab_frame(args.video, args.time, args.output, args.backend)
            print(json.dumps(result, indent=2))
        else:
            # Imported lazily: opens a GUI window
            from utils.editor_window import run_editor

            saved = run_editor(args.image, args.output, args.aspect)
            if saved:
                print(f"Saved edited frame to {saved}")
    except (FileNotFoundError, FrameExtractionError, ImageDecodeError) as e:
        raise SystemExit(f"Error: {e}")


if __name__ == "__main__":
    main()
