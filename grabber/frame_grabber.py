"""
Frame grabber state: selected video, timeline position, last extracted frame.
Decoding is delegated to ffmpeg (preferred) or OpenCV.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional

import config as cfg
from utils.ffmpeg import FFmpegError, extract_frame_jpeg, find_ffmpeg
from utils.images import encode_jpeg
from utils.video_processor import FrameReadError, VideoProcessor

logger = logging.getLogger(__name__)

BACKENDS = ("auto", "ffmpeg", "opencv")


class FrameExtractionError(RuntimeError):
    """A frame could not be extracted from the selected video."""


class FrameGrabber:
    """
    Mirrors the grabber panel: pick a file, move the slider, press "Update preview".
    - duration stays 0 until metadata reports a finite value
    - extraction time is clamped to [0, max(MIN_SEEK_DURATION, duration)]
    - a new file discards the previous frame
    """

    def __init__(
        self,
        backend: str = cfg.DEFAULT_BACKEND,
        ffmpeg_binary: str = cfg.FFMPEG_BINARY,
    ):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend {backend!r}; expected one of {BACKENDS}")
        self.backend = backend
        self.ffmpeg_binary = ffmpeg_binary
        self.ffmpeg_path: Optional[str] = None
        self.is_ready = False
        self.is_loading = False
        self.is_extracting = False

        self.video_path: Optional[Path] = None
        self.duration: float = 0.0
        self.position: float = 0.0
        self.frame_jpeg: Optional[bytes] = None
        self.frame_shape: tuple[int, int] = (0, 0)
        self.fps: float = 0.0

    # ------------------------------------------------------------------
    # Backend
    # ------------------------------------------------------------------

    def load(self) -> bool:
        """Resolve the decoding backend once. Returns readiness."""
        if self.is_ready or self.is_loading:
            return self.is_ready
        self.is_loading = True
        try:
            if self.backend in ("auto", "ffmpeg"):
                self.ffmpeg_path = find_ffmpeg(self.ffmpeg_binary)
                if self.ffmpeg_path is None:
                    if self.backend == "ffmpeg":
                        logger.error("ffmpeg not found (%s)", self.ffmpeg_binary)
                        return False
                    logger.info("ffmpeg not found; using OpenCV for frame extraction")
                else:
                    logger.info("Using ffmpeg at %s", self.ffmpeg_path)
            self.is_ready = True
            return True
        finally:
            self.is_loading = False

    @property
    def active_backend(self) -> Optional[str]:
        if not self.is_ready:
            return None
        if self.backend == "opencv":
            return "opencv"
        return "ffmpeg" if self.ffmpeg_path else "opencv"

    # ------------------------------------------------------------------
    # Video selection / timeline
    # ------------------------------------------------------------------

    def select_video(self, path: str | Path | None) -> None:
        """Select a new video (or None to deselect). Resets position, duration and frame."""
        self.frame_jpeg = None
        self.position = 0.0
        self.duration = 0.0
        self.frame_shape = (0, 0)
        self.fps = 0.0
        if path is None:
            self.video_path = None
            return

        path = Path(path)
        if not path.is_file():
            self.video_path = None
            raise FileNotFoundError(f"Video not found: {path}")
        self.video_path = path
        self._load_metadata()

    def _load_metadata(self) -> None:
        proc = VideoProcessor(self.video_path)
        if not proc.open():
            logger.warning("No metadata for %s; duration stays 0", self.video_path)
            return
        try:
            duration = proc.duration
            self.frame_shape = proc.frame_shape
            self.fps = proc.fps
        finally:
            proc.close()
        if math.isfinite(duration):
            self.duration = duration
        logger.info(
            "Selected %s (%.2fs, %.2f fps, %dx%d)",
            self.video_path.name, self.duration, self.fps,
            self.frame_shape[1], self.frame_shape[0],
        )

    @property
    def slider_max(self) -> float:
        return max(cfg.MIN_SLIDER_MAX, self.duration)

    @property
    def slider_step(self) -> float:
        return cfg.SLIDER_STEP

    def seek(self, seconds: float) -> None:
        if seconds is None or math.isnan(seconds):
            return
        self.position = float(seconds)

    def extraction_time(self) -> float:
        return max(0.0, min(self.position, max(cfg.MIN_SEEK_DURATION, self.duration)))

    def time_label(self) -> str:
        return f"Time: {self.position:.2f}s / {self.duration:.2f}s"

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def extract(self) -> Optional[bytes]:
        """
        Extract the frame at extraction_time() as JPEG bytes.
        Returns None when no video is selected. The previous frame is kept on failure.
        """
        if self.video_path is None:
            return None
        self.is_extracting = True
        try:
            if not self.is_ready and not self.load():
                raise FrameExtractionError("Frame extraction backend is not ready")
            seconds = self.extraction_time()
            if self.active_backend == "ffmpeg":
                data = extract_frame_jpeg(self.video_path, seconds, ffmpeg=self.ffmpeg_path)
            else:
                with VideoProcessor(self.video_path) as proc:
                    frame = proc.read_frame_at(seconds)
                data = encode_jpeg(frame, quality=cfg.GRAB_JPEG_QUALITY)
            self.frame_jpeg = data
            logger.info("Extracted frame at %.3fs (%d bytes)", seconds, len(data))
            return data
        except FrameExtractionError:
            raise
        except (FFmpegError, FrameReadError, OSError, RuntimeError) as e:
            logger.exception("Failed to extract frame")
            raise FrameExtractionError(str(e)) from e
        finally:
            self.is_extracting = False

    def download_name(self) -> str:
        return f"frame_{self.position:.2f}s.jpg"
