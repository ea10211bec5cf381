"""
ffmpeg frame extraction: seek, decode one frame, write it as JPEG.
The ffmpeg executable is resolved from PATH (or FRAMEGRABBER_FFMPEG).
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

import config as cfg

logger = logging.getLogger(__name__)


class FFmpegError(RuntimeError):
    """ffmpeg is missing, failed, or produced no output."""


def find_ffmpeg(binary: str = cfg.FFMPEG_BINARY) -> Optional[str]:
    """Absolute path of the ffmpeg executable, or None when it is not installed."""
    return shutil.which(binary)


def input_extension(name: str) -> str:
    """Extension (with dot) of the source file name; DEFAULT_VIDEO_EXTENSION if it has none."""
    suffix = Path(name).suffix
    return suffix if suffix else cfg.DEFAULT_VIDEO_EXTENSION


def format_seconds(seconds: float) -> str:
    """Fixed-point seconds for -ss; ffmpeg does not parse exponent notation."""
    return f"{seconds:.6f}".rstrip("0").rstrip(".") or "0"


def build_extract_command(
    ffmpeg: str,
    input_path: str | Path,
    output_path: str | Path,
    seconds: float,
    qscale: int = cfg.FFMPEG_QSCALE,
) -> List[str]:
    # -ss before -i seeks on the demuxer, which is much faster than decoding up to t
    return [
        ffmpeg, "-y", "-loglevel", "error",
        "-ss", format_seconds(seconds),
        "-i", str(input_path),
        "-frames:v", "1",
        "-q:v", str(qscale),
        str(output_path),
    ]


def extract_frame_jpeg(
    video_path: str | Path,
    seconds: float,
    ffmpeg: Optional[str] = None,
    qscale: int = cfg.FFMPEG_QSCALE,
    timeout: float = cfg.FFMPEG_TIMEOUT,
) -> bytes:
    """
    Extract a single frame at `seconds` and return its JPEG bytes.
    The video is copied into a scratch directory as input<ext> so ffmpeg
    picks the demuxer from the uploaded file extension; the directory is removed afterwards.
    """
    ffmpeg = ffmpeg or find_ffmpeg()
    if ffmpeg is None:
        raise FFmpegError(f"ffmpeg executable not found ({cfg.FFMPEG_BINARY})")

    video_path = Path(video_path)
    with tempfile.TemporaryDirectory(prefix="framegrabber_") as tmp:
        tmp_dir = Path(tmp)
        input_path = tmp_dir / f"input{input_extension(video_path.name)}"
        output_path = tmp_dir / "frame.jpg"
        shutil.copyfile(video_path, input_path)

        cmd = build_extract_command(ffmpeg, input_path, output_path, seconds, qscale)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise FFmpegError(f"ffmpeg timed out after {timeout}s") from e
        except OSError as e:
            raise FFmpegError(f"Could not run ffmpeg: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise FFmpegError(f"ffmpeg exited with {result.returncode}: {stderr}")
        if not output_path.is_file():
            raise FFmpegError("ffmpeg produced no frame (timestamp past end of stream?)")
        return output_path.read_bytes()
