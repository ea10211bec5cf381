"""Frame editor: canvas objects, drawing tools, undo/redo history."""

from .shapes import (
    CanvasObject,
    CircleObject,
    ImageObject,
    LineObject,
    PathObject,
    RectObject,
    TextObject,
    object_from_dict,
)
from .canvas import Canvas
from .history import History
from .tools import Tool, ToolController
from .frame_editor import ASPECT_RATIOS, FrameEditor

__all__ = [
    "ASPECT_RATIOS",
    "Canvas",
    "CanvasObject",
    "CircleObject",
    "FrameEditor",
    "History",
    "ImageObject",
    "LineObject",
    "PathObject",
    "RectObject",
    "TextObject",
    "Tool",
    "ToolController",
    "object_from_dict",
]
