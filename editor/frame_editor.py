"""
Frame editor: canvas + tools + undo history, plus import and JPEG export.
UI layers (Streamlit page, OpenCV window) drive this object and render its canvas.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Callable, Optional

import numpy as np

import config as cfg
from editor.canvas import Canvas
from editor.history import History
from editor.tools import Tool, ToolController
from utils.images import encode_jpeg
from utils.visualization import render_canvas

logger = logging.getLogger(__name__)

ASPECT_RATIOS = cfg.ASPECT_RATIOS


class FrameEditor:
    """
    Owns the canvas state and its history.
    Every committed change (shape finished, image imported, resize, clear)
    pushes a JSON snapshot; undo/redo restore snapshots.
    """

    def __init__(
        self,
        aspect_ratio: int = cfg.DEFAULT_ASPECT_RATIO,
        history_limit: int = cfg.HISTORY_LIMIT,
        on_image_import: Optional[Callable[[], None]] = None,
    ):
        if not 0 <= aspect_ratio < len(ASPECT_RATIOS):
            raise IndexError(f"Aspect ratio index out of range: {aspect_ratio}")
        _, width, height = ASPECT_RATIOS[aspect_ratio]
        self.aspect_ratio = aspect_ratio
        self.canvas = Canvas(width, height, background=cfg.CANVAS_BACKGROUND)
        self.history = History(limit=history_limit)
        self.tools = ToolController(self.canvas, on_commit=self.save_history)
        self.on_image_import = on_image_import
        self._loaded_image_digest: Optional[str] = None
        self.history.reset(self.canvas.to_json())

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def save_history(self) -> None:
        self.history.save(self.canvas.to_json())

    def _restore(self, snapshot: Optional[str]) -> bool:
        if snapshot is None:
            return False
        self.tools.cancel()
        with self.history.loading():
            self.canvas.load_from_json(snapshot)
        return True

    def undo(self) -> bool:
        return self._restore(self.history.undo())

    def redo(self) -> bool:
        return self._restore(self.history.redo())

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def handle_key(self, key: str, ctrl: bool = False, shift: bool = False) -> bool:
        """
        Ctrl/Cmd+Z undoes, Ctrl/Cmd+Shift+Z redoes.
        Returns True when the key was consumed.
        """
        if not ctrl or key.lower() != "z":
            return False
        if shift:
            self.redo()
        else:
            self.undo()
        return True

    # ------------------------------------------------------------------
    # Canvas operations
    # ------------------------------------------------------------------

    def select_aspect_ratio(self, index: int) -> None:
        if not 0 <= index < len(ASPECT_RATIOS):
            raise IndexError(f"Aspect ratio index out of range: {index}")
        self.tools.finish_text()
        label, width, height = ASPECT_RATIOS[index]
        self.aspect_ratio = index
        self.canvas.set_dimensions(width, height)
        logger.debug("Canvas resized to %s (%dx%d)", label, width, height)
        self.save_history()

    def select_tool(self, tool: Tool | str) -> None:
        self.tools.select_tool(tool)

    def set_color(self, color: str) -> None:
        self.tools.color = color

    def import_image(self, data: bytes) -> bool:
        """
        Place an image on the canvas and size the canvas to it.
        The same image bytes imported twice in a row are ignored.
        """
        digest = hashlib.sha1(data).hexdigest()
        if digest == self._loaded_image_digest:
            return False
        self.tools.finish_text()
        self.canvas.load_image(data)
        self._loaded_image_digest = digest
        self.save_history()
        if self.on_image_import is not None:
            self.on_image_import()
        return True

    def clear(self, confirm: bool = True) -> bool:
        """Remove every object and reset the background. Nothing happens unless confirmed."""
        if not confirm:
            return False
        self.tools.finish_text()
        self.canvas.clear()
        self.save_history()
        return True

    # ------------------------------------------------------------------
    # Display / export
    # ------------------------------------------------------------------

    def display_scale(self, container_width: float, container_height: float) -> float:
        """Scale that fits the canvas inside a container; never enlarges."""
        width = self.canvas.width or 1
        height = self.canvas.height or 1
        scale = min(container_width / width, container_height / height, 1.0)
        return scale * cfg.DISPLAY_PADDING

    def render(self) -> np.ndarray:
        return render_canvas(self.canvas)

    def export_jpeg(self, quality: float = cfg.EXPORT_JPEG_QUALITY) -> bytes:
        """JPEG at the canvas' own size (display scale is not applied)."""
        return encode_jpeg(self.render(), quality=round(quality * 100))

    @property
    def download_name(self) -> str:
        return cfg.EDITED_FRAME_NAME
