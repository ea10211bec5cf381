"""
Canvas objects: background image, freehand path, rectangle, circle, line, text.
Each serializes to a plain dict tagged with "type" so a whole canvas can be
snapshotted as JSON for undo/redo.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Tuple

import config as cfg


@dataclass
class CanvasObject:
    left: float = 0.0
    top: float = 0.0
    stroke: str = cfg.DEFAULT_COLOR
    stroke_width: float = cfg.STROKE_WIDTH
    fill: str = "transparent"
    selectable: bool = False

    type = "object"

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["type"] = self.type
        return d

    def contains(self, x: float, y: float) -> bool:
        """Hit test against the bounding box."""
        x1, y1, x2, y2 = self.bounds()
        return x1 <= x <= x2 and y1 <= y <= y2

    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.left, self.top, self.left, self.top)


@dataclass
class ImageObject(CanvasObject):
    # data URL of the encoded image; keeps snapshots self-contained
    src: str = ""
    width: int = 0
    height: int = 0
    scale: float = 1.0

    type = "image"

    def bounds(self) -> Tuple[float, float, float, float]:
        return (
            self.left,
            self.top,
            self.left + self.width * self.scale,
            self.top + self.height * self.scale,
        )


@dataclass
class PathObject(CanvasObject):
    points: List[Tuple[float, float]] = field(default_factory=list)

    type = "path"

    def bounds(self) -> Tuple[float, float, float, float]:
        if not self.points:
            return super().bounds()
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))


@dataclass
class RectObject(CanvasObject):
    width: float = 0.0
    height: float = 0.0

    type = "rect"

    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.left, self.top, self.left + self.width, self.top + self.height)


@dataclass
class CircleObject(CanvasObject):
    """left/top is the top-left corner of the bounding box, not the centre."""

    radius: float = 0.0

    type = "circle"

    @property
    def center(self) -> Tuple[float, float]:
        return (self.left + self.radius, self.top + self.radius)

    def bounds(self) -> Tuple[float, float, float, float]:
        d = 2 * self.radius
        return (self.left, self.top, self.left + d, self.top + d)


@dataclass
class LineObject(CanvasObject):
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    type = "line"

    def bounds(self) -> Tuple[float, float, float, float]:
        return (
            min(self.x1, self.x2),
            min(self.y1, self.y2),
            max(self.x1, self.x2),
            max(self.y1, self.y2),
        )


@dataclass
class TextObject(CanvasObject):
    text: str = ""
    font_family: str = cfg.FONT_FAMILY
    font_size: int = cfg.FONT_SIZE
    editable: bool = False

    type = "text"

    def bounds(self) -> Tuple[float, float, float, float]:
        # Rough box: average glyph is ~0.6 em wide
        width = 0.6 * self.font_size * max(1, len(self.text))
        return (self.left, self.top, self.left + width, self.top + self.font_size)


OBJECT_TYPES = {
    cls.type: cls
    for cls in (ImageObject, PathObject, RectObject, CircleObject, LineObject, TextObject)
}


def object_from_dict(data: Dict[str, Any]) -> CanvasObject:
    """Rebuild a canvas object from its to_dict() form. Unknown keys are ignored."""
    kind = data.get("type")
    cls = OBJECT_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown canvas object type: {kind!r}")
    names = {f.name for f in fields(cls)}
    kwargs = {k: v for k, v in data.items() if k in names}
    if cls is PathObject and "points" in kwargs:
        kwargs["points"] = [(float(x), float(y)) for x, y in kwargs["points"]]
    return cls(**kwargs)
