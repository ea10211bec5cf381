"""
Rasterize a canvas (background, image, paths, shapes, text) onto a BGR frame.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Tuple

import cv2
import numpy as np

from utils.images import decode_image, from_data_url, parse_color

if TYPE_CHECKING:
    from editor.canvas import Canvas
    from editor.shapes import (
        CanvasObject,
        CircleObject,
        ImageObject,
        LineObject,
        PathObject,
        RectObject,
        TextObject,
    )

FONT = cv2.FONT_HERSHEY_SIMPLEX


def _pt(x: float, y: float) -> Tuple[int, int]:
    return int(round(x)), int(round(y))


def _thickness(obj: CanvasObject) -> int:
    return max(1, int(round(obj.stroke_width)))


def _fill_color(obj: CanvasObject):
    if not obj.fill or obj.fill == "transparent":
        return None
    return parse_color(obj.fill)


@lru_cache(maxsize=8)
def _decode_src(src: str) -> np.ndarray:
    return decode_image(from_data_url(src))


def _draw_image(out: np.ndarray, obj: ImageObject) -> None:
    if not obj.src:
        return
    img = _decode_src(obj.src)
    w = max(1, int(round(obj.width * obj.scale)))
    h = max(1, int(round(obj.height * obj.scale)))
    if (img.shape[1], img.shape[0]) != (w, h):
        interp = cv2.INTER_AREA if w < img.shape[1] else cv2.INTER_LINEAR
        img = cv2.resize(img, (w, h), interpolation=interp)

    # Clip the pasted region to the canvas
    x0, y0 = _pt(obj.left, obj.top)
    H, W = out.shape[:2]
    dx1, dy1 = max(0, x0), max(0, y0)
    dx2, dy2 = min(W, x0 + w), min(H, y0 + h)
    if dx1 >= dx2 or dy1 >= dy2:
        return
    out[dy1:dy2, dx1:dx2] = img[dy1 - y0:dy2 - y0, dx1 - x0:dx2 - x0]


def _draw_path(out: np.ndarray, obj: PathObject) -> None:
    if not obj.points:
        return
    color = parse_color(obj.stroke)
    t = _thickness(obj)
    pts = [_pt(x, y) for x, y in obj.points]
    if len(pts) == 1:
        cv2.circle(out, pts[0], max(1, t // 2), color, -1, cv2.LINE_AA)
        return
    # Thick cv2.line segments have round ends, which joins the stroke smoothly
    for a, b in zip(pts, pts[1:]):
        cv2.line(out, a, b, color, t, cv2.LINE_AA)


def _draw_rect(out: np.ndarray, obj: RectObject) -> None:
    p1 = _pt(obj.left, obj.top)
    p2 = _pt(obj.left + obj.width, obj.top + obj.height)
    fill = _fill_color(obj)
    if fill is not None:
        cv2.rectangle(out, p1, p2, fill, -1)
    cv2.rectangle(out, p1, p2, parse_color(obj.stroke), _thickness(obj), cv2.LINE_AA)


def _draw_circle(out: np.ndarray, obj: CircleObject) -> None:
    center = _pt(*obj.center)
    radius = int(round(obj.radius))
    fill = _fill_color(obj)
    if fill is not None:
        cv2.circle(out, center, radius, fill, -1, cv2.LINE_AA)
    cv2.circle(out, center, radius, parse_color(obj.stroke), _thickness(obj), cv2.LINE_AA)


def _draw_line(out: np.ndarray, obj: LineObject) -> None:
    cv2.line(
        out, _pt(obj.x1, obj.y1), _pt(obj.x2, obj.y2),
        parse_color(obj.stroke), _thickness(obj), cv2.LINE_AA,
    )


def text_scale(font_size: float) -> float:
    """Hershey font scale whose cap height is roughly `font_size` pixels."""
    (_, base_h), base_line = cv2.getTextSize("Hg", FONT, 1.0, 1)
    return font_size / float(base_h + base_line)


def _draw_text(out: np.ndarray, obj: TextObject) -> None:
    if not obj.text:
        return
    scale = text_scale(obj.font_size)
    thickness = max(1, int(round(obj.font_size / 12)))
    color_name = obj.fill if obj.fill and obj.fill != "transparent" else obj.stroke
    color = parse_color(color_name)
    (_, text_h), _ = cv2.getTextSize(obj.text, FONT, scale, thickness)
    # left/top is the top-left of the text box; putText wants the baseline
    origin = _pt(obj.left, obj.top + text_h)
    cv2.putText(out, obj.text, origin, FONT, scale, color, thickness, cv2.LINE_AA)


# Keyed by the serialized "type" tag of each canvas object
_DRAWERS = {
    "image": _draw_image,
    "path": _draw_path,
    "rect": _draw_rect,
    "circle": _draw_circle,
    "line": _draw_line,
    "text": _draw_text,
}


def render_canvas(canvas: Canvas) -> np.ndarray:
    """Draw every object in order over the background colour. Returns (H, W, 3) uint8 BGR."""
    out = np.empty((canvas.height, canvas.width, 3), dtype=np.uint8)
    out[:] = parse_color(canvas.background)
    for obj in canvas.objects:
        drawer = _DRAWERS.get(obj.type)
        if drawer is not None:
            drawer(out, obj)
    return out
