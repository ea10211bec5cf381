"""
Streamlit page for FrameGrabber.
Upload a video, pick a time, preview the exact frame and download it; then
annotate the frame in the editor panel and download the edited JPEG.
Run: streamlit run dashboard.py
"""

from __future__ import annotations

from pathlib import Path

import cv2
import pandas as pd
import streamlit as st

import config as cfg
from editor.frame_editor import ASPECT_RATIOS, FrameEditor
from editor.tools import Tool
from grabber.frame_grabber import FrameExtractionError, FrameGrabber
from logging_config import setup_logging

# Width x height of the area the canvas preview is fitted into
CANVAS_CONTAINER = (1100, 700)


def _state() -> tuple[FrameGrabber, FrameEditor]:
    if "grabber" not in st.session_state:
        grabber = FrameGrabber()
        grabber.load()
        st.session_state.grabber = grabber
        st.session_state.uploaded_id = None
    if "editor" not in st.session_state:
        st.session_state.editor = FrameEditor(
            on_image_import=lambda: st.toast("Frame imported into the editor"),
        )
    return st.session_state.grabber, st.session_state.editor


def _is_new_upload(uploaded, last_id) -> bool:
    """Streamlit gives every upload its own file_id, even when the name repeats."""
    return uploaded.file_id != last_id


def _parse_points(text: str) -> list[tuple[float, float]]:
    """'x,y; x,y; ...' -> list of points. Raises ValueError on malformed input."""
    points = []
    for chunk in text.replace("\n", ";").split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        x, y = chunk.split(",")
        points.append((float(x), float(y)))
    return points


def grabber_panel(grabber: FrameGrabber, editor: FrameEditor) -> None:
    st.header("Frame grabber")
    st.caption("Upload a video, pick a time, preview the exact frame, and download it.")

    uploaded = st.file_uploader("Choose a video", type=cfg.VIDEO_TYPES)
    if uploaded is None:
        if st.session_state.uploaded_id is not None:
            grabber.select_video(None)
            st.session_state.uploaded_id = None
        return

    if _is_new_upload(uploaded, st.session_state.uploaded_id):
        cfg.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
        dest = cfg.UPLOAD_DIR / Path(uploaded.name).name
        dest.write_bytes(uploaded.getvalue())
        grabber.select_video(dest)
        st.session_state.uploaded_id = uploaded.file_id
        st.session_state.seek_slider = 0.0

    st.video(uploaded)

    position = st.slider(
        "Position (s)",
        min_value=0.0,
        max_value=float(grabber.slider_max),
        step=grabber.slider_step,
        key="seek_slider",
    )
    grabber.seek(position)
    st.write(grabber.time_label())

    if not grabber.is_ready:
        st.info("Loading frame extraction backend…")
    if st.button("Update preview", disabled=not grabber.is_ready or grabber.is_extracting):
        with st.spinner("Extracting…"):
            try:
                grabber.extract()
            except FrameExtractionError as e:
                st.error(f"Failed to extract frame: {e}")

    if grabber.frame_jpeg:
        st.image(grabber.frame_jpeg, caption="Extracted frame preview", use_container_width=True)
        c_dl, c_edit = st.columns(2)
        with c_dl:
            st.download_button(
                "Download frame",
                data=grabber.frame_jpeg,
                file_name=grabber.download_name(),
                mime="image/jpeg",
            )
        with c_edit:
            if st.button("Edit this frame"):
                editor.import_image(grabber.frame_jpeg)


def _shape_inputs(editor: FrameEditor, tool: Tool) -> None:
    w, h = editor.canvas.width, editor.canvas.height
    tools = editor.tools
    if tool is Tool.DRAW:
        text = st.text_area("Stroke points (x,y; x,y; …)", "100,100; 150,140; 200,120")
        if st.button("Draw stroke"):
            try:
                points = _parse_points(text)
            except ValueError:
                st.warning("Points must look like 10,20; 30,40")
                return
            if not points:
                st.warning("Enter at least one point.")
                return
            tools.pointer_down(*points[0])
            for p in points[1:]:
                tools.pointer_move(*p)
            tools.pointer_up()
        return

    if tool is Tool.TEXT:
        c1, c2 = st.columns(2)
        x = c1.number_input("x", 0.0, float(w), 50.0)
        y = c2.number_input("y", 0.0, float(h), 50.0)
        value = st.text_input("Text", "")
        if st.button("Add text"):
            tools.pointer_down(x, y)
            tools.type_text(value)
            if tools.finish_text() is None:
                st.warning("Empty text was discarded.")
        return

    c1, c2, c3, c4 = st.columns(4)
    x1 = c1.number_input("start x", 0.0, float(w), 50.0)
    y1 = c2.number_input("start y", 0.0, float(h), 50.0)
    x2 = c3.number_input("end x", 0.0, float(w), 200.0)
    y2 = c4.number_input("end y", 0.0, float(h), 150.0)
    if st.button(f"Add {tool.value}"):
        tools.pointer_down(x1, y1)
        tools.pointer_up(x2, y2)


def editor_panel(editor: FrameEditor) -> None:
    st.header("Frame editor")

    c_ratio, c_tool, c_color = st.columns([1, 2, 1])
    with c_ratio:
        labels = [label for label, _, _ in ASPECT_RATIOS]
        choice = st.selectbox("Aspect ratio", range(len(labels)), format_func=labels.__getitem__,
                              index=editor.aspect_ratio)
        if choice != editor.aspect_ratio:
            editor.select_aspect_ratio(choice)
    with c_tool:
        tool_values = [t.value for t in Tool]
        tool = Tool(st.radio("Tool", tool_values, index=tool_values.index(editor.tools.tool.value),
                             horizontal=True))
        if tool is not editor.tools.tool:
            editor.select_tool(tool)
    with c_color:
        color = st.color_picker("Color", editor.tools.color)
        if color != editor.tools.color:
            editor.set_color(color)

    _shape_inputs(editor, tool)

    c_undo, c_redo, c_clear, c_dl = st.columns(4)
    with c_undo:
        if st.button("Undo", disabled=not editor.can_undo):
            editor.undo()
            st.rerun()
    with c_redo:
        if st.button("Redo", disabled=not editor.can_redo):
            editor.redo()
            st.rerun()
    with c_clear:
        confirm = st.checkbox("Confirm clear", value=False)
        if st.button("Clear"):
            if not editor.clear(confirm=confirm):
                st.warning("Tick 'Confirm clear' to clear the canvas.")
    with c_dl:
        st.download_button(
            "Download",
            data=editor.export_jpeg(),
            file_name=editor.download_name,
            mime="image/jpeg",
        )

    scale = editor.display_scale(*CANVAS_CONTAINER)
    rgb = cv2.cvtColor(editor.render(), cv2.COLOR_BGR2RGB)
    st.image(rgb, width=max(1, int(editor.canvas.width * scale)))
    st.caption(
        f"Canvas {editor.canvas.width}×{editor.canvas.height} · "
        f"history {editor.history.index + 1}/{len(editor.history)}"
    )

    objects = [o.to_dict() for o in editor.canvas.objects]
    if objects:
        df = pd.DataFrame(objects).drop(columns=["src", "points"], errors="ignore")
        with st.expander("Objects"):
            st.dataframe(df, use_container_width=True)


def main() -> None:
    st.set_page_config(page_title="FrameGrabber", page_icon="🎞️", layout="wide")
    setup_logging()
    st.title("FrameGrabber")

    grabber, editor = _state()
    tab_grab, tab_edit = st.tabs(["Grab frame", "Edit frame"])
    with tab_grab:
        grabber_panel(grabber, editor)
    with tab_edit:
        editor_panel(editor)


if __name__ == "__main__":
    main()
