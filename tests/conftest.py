"""Shared fixtures: a small synthetic video and encoded test images."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest

from utils.images import encode_jpeg, encode_png

VIDEO_FPS = 25.0
VIDEO_FRAMES = 50
VIDEO_SIZE = (64, 48)  # (w, h)
# Frame i is a flat grey of value i * BRIGHTNESS_STEP
BRIGHTNESS_STEP = 5


@pytest.fixture
def video_path(tmp_path: Path) -> Path:
    """2-second MJPG AVI whose frames get brighter over time."""
    path = tmp_path / "clip.avi"
    w, h = VIDEO_SIZE
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), VIDEO_FPS, (w, h))
    assert writer.isOpened(), "OpenCV could not create an MJPG writer"
    for i in range(VIDEO_FRAMES):
        frame = np.full((h, w, 3), i * BRIGHTNESS_STEP, dtype=np.uint8)
        writer.write(frame)
    writer.release()
    return path


@pytest.fixture
def make_frame():
    def _make(width: int = 80, height: int = 60, color=(30, 60, 90)) -> np.ndarray:
        return np.full((height, width, 3), color, dtype=np.uint8)
    return _make


@pytest.fixture
def jpeg_bytes(make_frame):
    def _jpeg(width: int = 80, height: int = 60, color=(30, 60, 90)) -> bytes:
        return encode_jpeg(make_frame(width, height, color), quality=95)
    return _jpeg


@pytest.fixture
def png_bytes(make_frame):
    def _png(width: int = 80, height: int = 60, color=(30, 60, 90)) -> bytes:
        return encode_png(make_frame(width, height, color))
    return _png
