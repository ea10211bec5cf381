"""
Configuration for FrameGrabber.
All defaults for frame extraction, the editor canvas and logging live here.
Assumptions are documented via comments.
"""

import logging
import os
from pathlib import Path

# -----------------------------------------------------------------------------
# PATHS
# -----------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent
# Extracted frames and edited images land here unless the CLI says otherwise
OUTPUT_DIR = PROJECT_ROOT / "output"
# Dashboard uploads are written here so OpenCV / ffmpeg can read them from disk
UPLOAD_DIR = OUTPUT_DIR / "uploads"

# -----------------------------------------------------------------------------
# FRAME GRABBER
# -----------------------------------------------------------------------------
# Timeline slider granularity in seconds (one frame at 25 fps).
SLIDER_STEP = 0.04
# Slider maximum never drops below this, so an unknown duration still gives a usable range.
MIN_SLIDER_MAX = 0.01
# Extraction time is clamped to [0, max(MIN_SEEK_DURATION, duration)].
MIN_SEEK_DURATION = 0.001
# Backend: "auto" (ffmpeg when available, else OpenCV), "ffmpeg" or "opencv".
DEFAULT_BACKEND = "auto"
# ffmpeg executable; override with FRAMEGRABBER_FFMPEG=/path/to/ffmpeg
FFMPEG_BINARY = os.environ.get("FRAMEGRABBER_FFMPEG", "ffmpeg")
# ffmpeg -q:v for JPEG output (2 = near-best quality).
FFMPEG_QSCALE = 2
# Seconds before an ffmpeg call is abandoned.
FFMPEG_TIMEOUT = 120
# Input extension used when the uploaded file name has none.
DEFAULT_VIDEO_EXTENSION = ".mp4"
# OpenCV JPEG quality (0-100) for extracted frames; roughly matches -q:v 2.
GRAB_JPEG_QUALITY = 95
# Upload types offered by the dashboard.
VIDEO_TYPES = ["mp4", "mov", "webm", "mkv", "avi", "m4v"]

# -----------------------------------------------------------------------------
# FRAME EDITOR
# -----------------------------------------------------------------------------
# Canvas presets: (label, width, height). Index 0 is the default.
ASPECT_RATIOS = [
    ("16:9", 1280, 720),
    ("4:3", 960, 720),
    ("1:1", 720, 720),
    ("3:4", 540, 720),
    ("9:16", 405, 720),
]
DEFAULT_ASPECT_RATIO = 0
CANVAS_BACKGROUND = "white"
# Number of undo snapshots kept; oldest are dropped first.
HISTORY_LIMIT = 50
DEFAULT_TOOL = "draw"
DEFAULT_COLOR = "#000000"
# Brush and shape outline width (pixels).
STROKE_WIDTH = 5
FONT_FAMILY = "Arial"
FONT_SIZE = 24
# Imported frames taller than this are scaled down to fit.
MAX_IMPORT_HEIGHT = 720
# On-screen canvas is shown at 90% of the fitted scale.
DISPLAY_PADDING = 0.9
# Export quality as a 0-1 fraction; scaled to 0-100 for OpenCV.
EXPORT_JPEG_QUALITY = 0.9
EDITED_FRAME_NAME = "edited-frame.jpg"

# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
