"""
Canvas model: dimensions, background colour and an ordered list of objects.
State round-trips through JSON so history can snapshot and restore it.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Dict, List, Optional

import config as cfg
from editor.shapes import CanvasObject, ImageObject, object_from_dict
from utils.images import decode_image, to_data_url

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class Canvas:
    """
    Objects are drawn in insertion order; the background fills the whole canvas.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: str = cfg.CANVAS_BACKGROUND,
    ):
        self.width = int(width)
        self.height = int(height)
        self.background = background
        self._objects: List[CanvasObject] = []
        # Only the text tool turns this on
        self.selection = False

    @property
    def objects(self) -> List[CanvasObject]:
        return list(self._objects)

    def add(self, obj: CanvasObject) -> CanvasObject:
        self._objects.append(obj)
        return obj

    def remove(self, obj: CanvasObject) -> None:
        for i, existing in enumerate(self._objects):
            if existing is obj:
                del self._objects[i]
                return

    def clear(self) -> None:
        self._objects.clear()
        self.background = cfg.CANVAS_BACKGROUND

    def set_dimensions(self, width: int, height: int) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))

    def find_target(self, x: float, y: float) -> Optional[CanvasObject]:
        """Topmost selectable object under (x, y), if any."""
        for obj in reversed(self._objects):
            if obj.selectable and obj.contains(x, y):
                return obj
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "width": self.width,
            "height": self.height,
            "background": self.background,
            "objects": [obj.to_dict() for obj in self._objects],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def load_from_dict(self, data: Dict[str, Any]) -> None:
        objects = [object_from_dict(o) for o in data.get("objects", [])]
        self.set_dimensions(data.get("width", self.width), data.get("height", self.height))
        self.background = data.get("background", cfg.CANVAS_BACKGROUND)
        self._objects = objects

    def load_from_json(self, snapshot: str) -> None:
        """Replace the whole canvas state with a snapshot produced by to_json()."""
        self.load_from_dict(json.loads(snapshot))

    def load_image(self, data: bytes, max_height: int = cfg.MAX_IMPORT_HEIGHT) -> ImageObject:
        """
        Add an image as a non-selectable background and size the canvas to it.
        Images taller than max_height are scaled down; the canvas gets a 1px
        margin so the scaled image never leaves an uncovered edge.
        """
        frame = decode_image(data)
        image_height, image_width = frame.shape[:2]

        scale = 1.0
        if image_height > max_height:
            scale = max_height / image_height

        new_width = math.ceil(image_width * scale) + 1
        new_height = math.ceil(image_height * scale) + 1
        self.set_dimensions(new_width, new_height)

        image = ImageObject(
            left=0.0,
            top=0.0,
            src=to_data_url(data),
            width=image_width,
            height=image_height,
            scale=new_width / image_width,
            selectable=False,
        )
        self.add(image)
        logger.info(
            "Loaded %dx%d image onto %dx%d canvas",
            image_width, image_height, new_width, new_height,
        )
        return image
