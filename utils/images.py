"""
Image helpers: JPEG encode/decode, data URLs, colour parsing.
Frames are BGR uint8 arrays as returned by OpenCV.
"""

from __future__ import annotations

import base64
from typing import Tuple

import cv2
import numpy as np

# Named colours accepted for the canvas background (BGR)
NAMED_COLORS = {
    "white": (255, 255, 255),
    "black": (0, 0, 0),
    "red": (0, 0, 255),
    "green": (0, 128, 0),
    "blue": (255, 0, 0),
    "yellow": (0, 255, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
}


class ImageDecodeError(ValueError):
    """Raised when bytes cannot be decoded as an image."""


def parse_color(color: str) -> Tuple[int, int, int]:
    """
    '#rrggbb', '#rgb' or a name from NAMED_COLORS -> BGR tuple.
    Raises ValueError for anything else.
    """
    value = color.strip().lower()
    if value in NAMED_COLORS:
        return NAMED_COLORS[value]
    if value.startswith("#"):
        digits = value[1:]
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) == 6:
            try:
                r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
            except ValueError:
                pass
            else:
                return (b, g, r)
    raise ValueError(f"Unsupported colour: {color!r}")


def encode_jpeg(frame: np.ndarray, quality: int = 95) -> bytes:
    """Encode a BGR frame as JPEG. quality is 0-100."""
    quality = int(max(0, min(100, quality)))
    ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
    if not ok:
        raise RuntimeError("OpenCV failed to encode JPEG")
    return buf.tobytes()


def encode_png(frame: np.ndarray) -> bytes:
    ok, buf = cv2.imencode(".png", frame)
    if not ok:
        raise RuntimeError("OpenCV failed to encode PNG")
    return buf.tobytes()


def decode_image(data: bytes) -> np.ndarray:
    """Decode JPEG/PNG/... bytes to a BGR frame."""
    if not data:
        raise ImageDecodeError("Empty image data")
    arr = np.frombuffer(data, dtype=np.uint8)
    frame = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if frame is None:
        raise ImageDecodeError("Could not decode image data")
    return frame


def sniff_mime(data: bytes) -> str:
    if data[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    return "application/octet-stream"


def to_data_url(data: bytes, mime: str | None = None) -> str:
    mime = mime or sniff_mime(data)
    return f"data:{mime};base64," + base64.b64encode(data).decode("ascii")


def from_data_url(url: str) -> bytes:
    """Return the payload of a base64 data URL."""
    header, sep, payload = url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ImageDecodeError("Not a base64 data URL")
    try:
        return base64.b64decode(payload, validate=True)
    except ValueError as e:
        raise ImageDecodeError(f"Invalid base64 payload: {e}") from e
