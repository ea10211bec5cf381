"""
Drawing tools: turn pointer events into canvas objects.
Pointer coordinates are canvas pixels (already divided by the display scale).
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable, Optional

import config as cfg
from editor.canvas import Canvas
from editor.shapes import (
    CanvasObject,
    CircleObject,
    LineObject,
    PathObject,
    RectObject,
    TextObject,
)
from utils.images import parse_color

logger = logging.getLogger(__name__)


class Tool(str, Enum):
    DRAW = "draw"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINE = "line"
    TEXT = "text"


class ToolController:
    """
    Holds the selected tool and colour and the in-progress shape.
    `on_commit` is called whenever a finished object should be recorded in history.
    """

    def __init__(
        self,
        canvas: Canvas,
        on_commit: Optional[Callable[[], None]] = None,
        tool: Tool | str = cfg.DEFAULT_TOOL,
        color: str = cfg.DEFAULT_COLOR,
        stroke_width: float = cfg.STROKE_WIDTH,
    ):
        self.canvas = canvas
        self.on_commit = on_commit
        self.stroke_width = stroke_width
        self.is_drawing = False
        self._start = (0.0, 0.0)
        self._shape: Optional[CanvasObject] = None
        self._editing_text: Optional[TextObject] = None
        self._color = cfg.DEFAULT_COLOR
        self.color = color
        self.tool = Tool(tool)
        self.select_tool(self.tool)

    @property
    def color(self) -> str:
        return self._color

    @color.setter
    def color(self, value: str) -> None:
        parse_color(value)  # raises ValueError on bad input
        self._color = value
        if self._editing_text is not None:
            self._editing_text.fill = value

    @property
    def editing_text(self) -> Optional[TextObject]:
        return self._editing_text

    @property
    def drawing_mode(self) -> bool:
        """True when freehand drawing is active."""
        return self.tool is Tool.DRAW

    def select_tool(self, tool: Tool | str) -> None:
        """Switch tool; abandons any drag in progress."""
        if self._editing_text is not None:
            self.finish_text()
        self.tool = Tool(tool)
        self.is_drawing = False
        self._shape = None
        self.canvas.selection = self.tool is Tool.TEXT
        logger.debug("Selected tool: %s", self.tool.value)
        if self.tool is Tool.TEXT:
            # Existing objects must not be picked up while placing text
            for obj in self.canvas.objects:
                obj.selectable = False

    def cancel(self) -> None:
        """Drop any in-progress shape or text edit without committing it."""
        self.is_drawing = False
        self._shape = None
        self._editing_text = None

    def _commit(self) -> None:
        if self.on_commit is not None:
            self.on_commit()

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, x: float, y: float) -> None:
        if self.tool is Tool.TEXT:
            self._text_pointer_down(x, y)
            return

        self.is_drawing = True
        self._start = (x, y)
        if self.tool is Tool.DRAW:
            shape: CanvasObject = PathObject(
                stroke=self.color, stroke_width=self.stroke_width, points=[(x, y)],
            )
        elif self.tool is Tool.RECTANGLE:
            shape = RectObject(
                left=x, top=y, width=0, height=0,
                stroke=self.color, stroke_width=self.stroke_width,
            )
        elif self.tool is Tool.CIRCLE:
            shape = CircleObject(
                left=x, top=y, radius=0,
                stroke=self.color, stroke_width=self.stroke_width,
            )
        else:
            shape = LineObject(
                x1=x, y1=y, x2=x, y2=y, left=x, top=y,
                stroke=self.color, stroke_width=self.stroke_width,
            )
        self._shape = self.canvas.add(shape)

    def pointer_move(self, x: float, y: float) -> None:
        if not self.is_drawing or self._shape is None:
            return
        sx, sy = self._start
        shape = self._shape
        if isinstance(shape, PathObject):
            shape.points.append((x, y))
        elif isinstance(shape, RectObject):
            shape.width = abs(x - sx)
            shape.height = abs(y - sy)
            shape.left = min(sx, x)
            shape.top = min(sy, y)
        elif isinstance(shape, CircleObject):
            shape.radius = math.hypot(x - sx, y - sy) / 2
            shape.left = min(sx, x)
            shape.top = min(sy, y)
        elif isinstance(shape, LineObject):
            shape.x2 = x
            shape.y2 = y

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        if x is not None and y is not None:
            self.pointer_move(x, y)
        self.is_drawing = False
        shape = self._shape
        self._shape = None
        if shape is not None:
            self._commit()

    # ------------------------------------------------------------------
    # Text editing
    # ------------------------------------------------------------------

    def _text_pointer_down(self, x: float, y: float) -> None:
        if self._editing_text is not None:
            # Clicking elsewhere ends the current edit
            if self._editing_text.contains(x, y):
                return
            self.finish_text()
        if self.canvas.find_target(x, y) is not None:
            return
        text = TextObject(
            left=x,
            top=y,
            text="",
            fill=self.color,
            stroke=self.color,
            selectable=True,
            editable=True,
        )
        self.canvas.add(text)
        self._editing_text = text

    def type_text(self, chars: str) -> None:
        if self._editing_text is not None:
            self._editing_text.text += chars

    def backspace(self) -> None:
        if self._editing_text is not None:
            self._editing_text.text = self._editing_text.text[:-1]

    def finish_text(self) -> Optional[TextObject]:
        """
        Leave text editing. Empty text is discarded; otherwise the text is
        frozen (not selectable, not editable) and committed.
        Returns the kept text object, if any.
        """
        text = self._editing_text
        self._editing_text = None
        if text is None:
            return None
        if text.text == "":
            self.canvas.remove(text)
            return None
        text.selectable = False
        text.editable = False
        self._commit()
        return text
