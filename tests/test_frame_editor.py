import pytest

from editor.frame_editor import ASPECT_RATIOS, FrameEditor
from editor.shapes import ImageObject, RectObject, TextObject
from editor.tools import Tool
from utils.images import decode_image


def _draw_rect(editor: FrameEditor, x1=10, y1=10, x2=60, y2=40) -> None:
    editor.select_tool(Tool.RECTANGLE)
    editor.tools.pointer_down(x1, y1)
    editor.tools.pointer_up(x2, y2)


def test_initial_state():
    editor = FrameEditor()
    assert (editor.canvas.width, editor.canvas.height) == (1280, 720)
    assert editor.canvas.background == "white"
    assert len(editor.history) == 1
    assert editor.history.index == 0
    assert not editor.can_undo
    assert not editor.can_redo


def test_aspect_ratio_presets():
    assert [(w, h) for _, w, h in ASPECT_RATIOS] == [
        (1280, 720), (960, 720), (720, 720), (540, 720), (405, 720),
    ]
    editor = FrameEditor()
    editor.select_aspect_ratio(4)
    assert (editor.canvas.width, editor.canvas.height) == (405, 720)
    assert len(editor.history) == 2
    with pytest.raises(IndexError):
        editor.select_aspect_ratio(5)


def test_undo_redo_restores_objects():
    editor = FrameEditor()
    _draw_rect(editor)
    _draw_rect(editor, 100, 100, 150, 150)
    assert len(editor.canvas.objects) == 2

    assert editor.undo()
    assert len(editor.canvas.objects) == 1
    assert editor.undo()
    assert editor.canvas.objects == []
    assert not editor.undo()

    assert editor.redo()
    (rect,) = editor.canvas.objects
    assert isinstance(rect, RectObject)
    assert (rect.left, rect.top, rect.width, rect.height) == (10, 10, 50, 30)
    # Restoring must not have added history entries
    assert len(editor.history) == 3


def test_undo_restores_canvas_size():
    editor = FrameEditor()
    editor.select_aspect_ratio(2)
    editor.undo()
    assert (editor.canvas.width, editor.canvas.height) == (1280, 720)


def test_keyboard_shortcuts():
    editor = FrameEditor()
    _draw_rect(editor)
    assert editor.handle_key("z", ctrl=True)
    assert editor.canvas.objects == []
    assert editor.handle_key("Z", ctrl=True, shift=True)
    assert len(editor.canvas.objects) == 1
    assert not editor.handle_key("z")
    assert not editor.handle_key("y", ctrl=True)


def test_clear_requires_confirmation():
    editor = FrameEditor()
    _draw_rect(editor)
    editor.canvas.background = "#ff0000"
    assert not editor.clear(confirm=False)
    assert len(editor.canvas.objects) == 1

    assert editor.clear(confirm=True)
    assert editor.canvas.objects == []
    assert editor.canvas.background == "white"
    editor.undo()
    assert len(editor.canvas.objects) == 1


def test_import_image_sizes_canvas_and_notifies(jpeg_bytes):
    calls = []
    editor = FrameEditor(on_image_import=lambda: calls.append(1))
    data = jpeg_bytes(320, 180)
    assert editor.import_image(data)
    assert (editor.canvas.width, editor.canvas.height) == (321, 181)
    assert isinstance(editor.canvas.objects[0], ImageObject)
    assert calls == [1]
    assert editor.can_undo

    # Same frame again is ignored
    assert not editor.import_image(data)
    assert calls == [1]
    assert len(editor.canvas.objects) == 1


def test_display_scale_never_enlarges():
    editor = FrameEditor()
    assert editor.display_scale(2560, 1440) == pytest.approx(0.9)
    assert editor.display_scale(640, 720) == pytest.approx(0.5 * 0.9)
    assert editor.display_scale(1280, 360) == pytest.approx(0.5 * 0.9)


def test_export_jpeg_uses_canvas_size(jpeg_bytes):
    editor = FrameEditor()
    editor.import_image(jpeg_bytes(200, 100))
    _draw_rect(editor)
    data = editor.export_jpeg()
    assert data[:3] == b"\xff\xd8\xff"
    assert decode_image(data).shape == (101, 201, 3)
    assert editor.download_name == "edited-frame.jpg"


def test_undo_discards_text_being_edited():
    editor = FrameEditor()
    _draw_rect(editor)
    editor.select_tool(Tool.TEXT)
    editor.tools.pointer_down(300, 300)
    editor.tools.type_text("draft")
    editor.undo()
    assert editor.tools.editing_text is None
    assert editor.canvas.objects == []


def test_resize_while_typing_leaves_no_empty_text_in_history():
    editor = FrameEditor()
    editor.select_tool(Tool.TEXT)
    editor.tools.pointer_down(100, 100)
    editor.select_aspect_ratio(2)
    assert editor.tools.editing_text is None
    assert editor.canvas.objects == []

    editor.undo()
    assert editor.canvas.objects == []
    assert editor.canvas.find_target(100, 100) is None
    editor.tools.pointer_down(100, 100)
    assert isinstance(editor.tools.editing_text, TextObject)


def test_clear_and_import_finish_text_being_typed(jpeg_bytes):
    editor = FrameEditor()
    editor.select_tool(Tool.TEXT)
    editor.tools.pointer_down(50, 50)
    editor.tools.type_text("hello")
    editor.import_image(jpeg_bytes(64, 48))
    assert editor.tools.editing_text is None
    (text,) = [o for o in editor.canvas.objects if isinstance(o, TextObject)]
    assert text.text == "hello"
    assert not text.editable

    editor.tools.pointer_down(5, 5)
    editor.clear(confirm=True)
    assert editor.tools.editing_text is None
    for state in editor.history.states:
        assert '"editable": true' not in state
