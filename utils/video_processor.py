"""
Video I/O: read metadata from a user-supplied video and grab a frame at a timestamp.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class FrameReadError(RuntimeError):
    """OpenCV could not open the video or decode a frame from it."""


class VideoProcessor:
    """
    Thin wrapper over cv2.VideoCapture.
    Exposes fps, frame count, frame shape and duration; seeks by time.
    """

    def __init__(self, video_path: str | Path):
        self.video_path = Path(video_path)
        self.cap: Optional[cv2.VideoCapture] = None
        self._fps: float = 0.0
        self._total_frames: int = 0
        self._frame_shape: Tuple[int, int] = (0, 0)

    def open(self) -> bool:
        self.cap = cv2.VideoCapture(str(self.video_path))
        if not self.cap.isOpened():
            logger.warning("OpenCV could not open %s", self.video_path)
            self.cap.release()
            self.cap = None
            return False
        self._fps = float(self.cap.get(cv2.CAP_PROP_FPS) or 0.0)
        self._total_frames = int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT))
        w = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        h = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self._frame_shape = (h, w)
        return True

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def total_frames(self) -> int:
        return self._total_frames

    @property
    def frame_shape(self) -> Tuple[int, int]:
        return self._frame_shape

    @property
    def duration(self) -> float:
        """Seconds; nan when the container reports no usable fps or frame count."""
        if self._fps <= 0 or self._total_frames <= 0:
            return math.nan
        return self._total_frames / self._fps

    def close(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None

    def __enter__(self) -> "VideoProcessor":
        if not self.open():
            raise FrameReadError(f"Could not open video: {self.video_path}")
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def read_frame_at(self, seconds: float) -> np.ndarray:
        """
        Seek to `seconds` and decode one BGR frame.
        Falls back to the last frame when the seek lands past the end.
        """
        if self.cap is None and not self.open():
            raise FrameReadError(f"Could not open video: {self.video_path}")
        self.cap.set(cv2.CAP_PROP_POS_MSEC, max(0.0, seconds) * 1000.0)
        ret, frame = self.cap.read()
        if (not ret or frame is None) and self._total_frames > 0:
            # Seeking exactly to the duration overshoots; take the final frame instead
            self.cap.set(cv2.CAP_PROP_POS_FRAMES, self._total_frames - 1)
            ret, frame = self.cap.read()
        if not ret or frame is None or not frame.size:
            raise FrameReadError(f"Could not read frame at {seconds:.3f}s from {self.video_path}")
        return frame
