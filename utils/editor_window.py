"""
Interactive annotation window: open an image in an OpenCV window, draw on it
with the mouse, save the result as JPEG.
Run: python -m utils.editor_window path/to/frame.jpg [--output output/edited-frame.jpg]

Keys (outside text editing):
  d draw  r rectangle  c circle  l line  t text
  1-8 colour  a next aspect ratio  x clear (then y to confirm)
  Ctrl+Z / u undo  Ctrl+Y / Ctrl+Shift+Z / y redo
  s save and quit  q / Esc quit without saving
While typing text: Enter or Esc finishes, Backspace deletes.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import cv2

import config as cfg
from editor.frame_editor import ASPECT_RATIOS, FrameEditor
from editor.tools import Tool
from logging_config import setup_logging
from utils.images import ImageDecodeError

logger = logging.getLogger(__name__)

WINDOW_TITLE = "FrameGrabber editor"
# Screen area the canvas is fitted into
SCREEN_SIZE = (1600, 900)

TOOL_KEYS = {
    ord("d"): Tool.DRAW,
    ord("r"): Tool.RECTANGLE,
    ord("c"): Tool.CIRCLE,
    ord("l"): Tool.LINE,
    ord("t"): Tool.TEXT,
}
PALETTE = ["#000000", "#ffffff", "#ff0000", "#00ff00", "#0000ff", "#ffff00", "#ff00ff", "#00ffff"]

KEY_ENTER = (10, 13)
KEY_ESC = 27
KEY_BACKSPACE = (8, 127)
KEY_CTRL_Z = 26
KEY_CTRL_Y = 25


class EditorWindow:
    """Routes OpenCV mouse/keyboard events to a FrameEditor and redraws it."""

    def __init__(self, editor: FrameEditor, output_path: Path):
        self.editor = editor
        self.output_path = output_path
        self.confirm_clear = False
        self.saved: Optional[Path] = None

    @property
    def scale(self) -> float:
        return self.editor.display_scale(*SCREEN_SIZE)

    def on_mouse(self, event: int, x: int, y: int, _flags: int, _param: None) -> None:
        s = self.scale
        cx, cy = x / s, y / s
        tools = self.editor.tools
        if event == cv2.EVENT_LBUTTONDOWN:
            tools.pointer_down(cx, cy)
        elif event == cv2.EVENT_MOUSEMOVE:
            tools.pointer_move(cx, cy)
        elif event == cv2.EVENT_LBUTTONUP:
            tools.pointer_up(cx, cy)

    def status_line(self) -> str:
        if self.confirm_clear:
            return "Clear the canvas? y = yes, any other key = no"
        tools = self.editor.tools
        if tools.editing_text is not None:
            return "Typing: Enter/Esc to finish"
        label = ASPECT_RATIOS[self.editor.aspect_ratio][0]
        return f"Tool: {tools.tool.value}  Colour: {tools.color}  Aspect: {label}  s=save q=quit"

    def frame(self):
        img = self.editor.render()
        s = self.scale
        if s != 1.0:
            h, w = img.shape[:2]
            img = cv2.resize(img, (max(1, int(w * s)), max(1, int(h * s))), interpolation=cv2.INTER_AREA)
        cv2.putText(img, self.status_line(), (10, 24), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 0), 3)
        cv2.putText(img, self.status_line(), (10, 24), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)
        return img

    def handle_key(self, key: int) -> bool:
        """Returns False when the window should close."""
        editor = self.editor
        tools = editor.tools

        if self.confirm_clear:
            self.confirm_clear = False
            if key == ord("y"):
                editor.clear(confirm=True)
            return True

        if tools.editing_text is not None:
            if key in KEY_ENTER or key == KEY_ESC:
                tools.finish_text()
            elif key in KEY_BACKSPACE:
                tools.backspace()
            elif 32 <= key < 127:
                tools.type_text(chr(key))
            return True

        if key in (ord("q"), KEY_ESC):
            return False
        if key == ord("s"):
            self.save()
            return False
        if key in TOOL_KEYS:
            editor.select_tool(TOOL_KEYS[key])
        elif ord("1") <= key <= ord("8"):
            editor.set_color(PALETTE[key - ord("1")])
        elif key == ord("a"):
            editor.select_aspect_ratio((editor.aspect_ratio + 1) % len(ASPECT_RATIOS))
        elif key == ord("x"):
            self.confirm_clear = True
        elif key in (KEY_CTRL_Z, ord("u")):
            editor.handle_key("z", ctrl=True)
        elif key in (KEY_CTRL_Y, ord("y")):
            editor.handle_key("z", ctrl=True, shift=True)
        return True

    def save(self) -> Path:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_bytes(self.editor.export_jpeg())
        self.saved = self.output_path
        logger.info("Saved edited frame to %s", self.output_path)
        return self.output_path

    def run(self) -> Optional[Path]:
        cv2.namedWindow(WINDOW_TITLE)
        cv2.setMouseCallback(WINDOW_TITLE, self.on_mouse, None)
        try:
            while True:
                cv2.imshow(WINDOW_TITLE, self.frame())
                key = cv2.waitKey(15) & 0xFF
                if key == 0xFF:
                    continue
                if not self.handle_key(key):
                    break
        finally:
            cv2.destroyAllWindows()
        return self.saved


def run_editor(
    image_path: str | Path | None,
    output_path: str | Path | None = None,
    aspect_ratio: int = cfg.DEFAULT_ASPECT_RATIO,
) -> Optional[Path]:
    """Open the editor window, optionally with an image imported. Returns the saved path."""
    editor = FrameEditor(aspect_ratio=aspect_ratio)
    if image_path is not None:
        image_path = Path(image_path)
        if not image_path.is_file():
            raise FileNotFoundError(f"Image not found: {image_path}")
        editor.import_image(image_path.read_bytes())
    out = Path(output_path) if output_path else cfg.OUTPUT_DIR / editor.download_name
    return EditorWindow(editor, out).run()


def main() -> None:
    ap = argparse.ArgumentParser(description="Annotate an image and save it as JPEG")
    ap.add_argument("image", nargs="?", default=None, help="Image to annotate (blank canvas if omitted)")
    ap.add_argument("-o", "--output", default=None, help="Output JPEG path (default: output/edited-frame.jpg)")
    ap.add_argument("--aspect", type=int, default=cfg.DEFAULT_ASPECT_RATIO,
                    help="Blank canvas aspect ratio index: " + ", ".join(
                        f"{i}={label}" for i, (label, _, _) in enumerate(ASPECT_RATIOS)))
    args = ap.parse_args()

    setup_logging()
    try:
        saved = run_editor(args.image, args.output, args.aspect)
    except (FileNotFoundError, ImageDecodeError) as e:
        raise SystemExit(str(e))
    if saved:
        print(f"Saved edited frame to {saved}")


if __name__ == "__main__":
    main()
