"""Utilities: video I/O, ffmpeg extraction, image helpers, canvas rendering."""

from .video_processor import FrameReadError, VideoProcessor

__all__ = ["FrameReadError", "VideoProcessor"]
