"""Frame grabber: pick a video, seek, extract a JPEG frame."""

from .frame_grabber import BACKENDS, FrameExtractionError, FrameGrabber

__all__ = ["BACKENDS", "FrameExtractionError", "FrameGrabber"]
