"""Event routing of the OpenCV editor window (no window is opened)."""

import cv2
import pytest

from editor.frame_editor import FrameEditor
from editor.shapes import RectObject, TextObject
from editor.tools import Tool
from utils.editor_window import KEY_CTRL_Z, EditorWindow, main
from utils.images import decode_image


@pytest.fixture
def window(tmp_path):
    return EditorWindow(FrameEditor(), tmp_path / "edited.jpg")


def test_mouse_coordinates_are_unscaled(window):
    # 1280x720 canvas in a 1600x900 screen -> display scale 0.9
    assert window.scale == pytest.approx(0.9)
    window.handle_key(ord("r"))
    window.on_mouse(cv2.EVENT_LBUTTONDOWN, 90, 90, 0, None)
    window.on_mouse(cv2.EVENT_MOUSEMOVE, 180, 135, 0, None)
    window.on_mouse(cv2.EVENT_LBUTTONUP, 180, 135, 0, None)
    (rect,) = window.editor.canvas.objects
    assert isinstance(rect, RectObject)
    assert rect.left == pytest.approx(100)
    assert rect.width == pytest.approx(100)
    assert rect.height == pytest.approx(50)


def test_tool_colour_and_undo_keys(window):
    editor = window.editor
    window.handle_key(ord("l"))
    assert editor.tools.tool is Tool.LINE
    window.handle_key(ord("3"))
    assert editor.tools.color == "#ff0000"
    window.on_mouse(cv2.EVENT_LBUTTONDOWN, 10, 10, 0, None)
    window.on_mouse(cv2.EVENT_LBUTTONUP, 50, 50, 0, None)
    assert len(editor.canvas.objects) == 1
    window.handle_key(KEY_CTRL_Z)
    assert editor.canvas.objects == []
    window.handle_key(ord("y"))
    assert len(editor.canvas.objects) == 1


def test_clear_needs_confirmation(window):
    editor = window.editor
    window.on_mouse(cv2.EVENT_LBUTTONDOWN, 10, 10, 0, None)
    window.on_mouse(cv2.EVENT_LBUTTONUP, 20, 20, 0, None)
    window.handle_key(ord("x"))
    assert "Clear" in window.status_line()
    window.handle_key(ord("n"))
    assert len(editor.canvas.objects) == 1
    window.handle_key(ord("x"))
    window.handle_key(ord("y"))
    assert editor.canvas.objects == []


def test_typing_text(window):
    editor = window.editor
    window.handle_key(ord("t"))
    window.on_mouse(cv2.EVENT_LBUTTONDOWN, 45, 45, 0, None)
    for ch in "hiq":
        # 'q' is typed, not treated as quit, while editing
        assert window.handle_key(ord(ch)) is True
    window.handle_key(8)
    window.handle_key(13)
    (text,) = editor.canvas.objects
    assert isinstance(text, TextObject)
    assert text.text == "hi"
    assert editor.tools.editing_text is None


def test_aspect_cycle_and_save(window):
    window.handle_key(ord("a"))
    assert window.editor.aspect_ratio == 1
    assert window.frame().shape[2] == 3
    assert window.handle_key(ord("s")) is False
    assert window.saved == window.output_path
    assert decode_image(window.output_path.read_bytes()).shape == (720, 960, 3)


def test_quit_without_saving(window):
    assert window.handle_key(ord("q")) is False
    assert window.saved is None
    assert not window.output_path.exists()


def test_main_exits_on_unreadable_image(tmp_path, monkeypatch):
    bogus = tmp_path / "frame.png"
    bogus.write_bytes(b"\x00\x01\x02")
    monkeypatch.setattr("sys.argv", ["framegrabber-editor", str(bogus)])
    with pytest.raises(SystemExit, match="Could not decode image data"):
        main()
