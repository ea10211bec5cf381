import subprocess
from pathlib import Path

import pytest

import utils.ffmpeg as ffmpeg_mod
from utils.ffmpeg import FFmpegError, build_extract_command, extract_frame_jpeg, input_extension


@pytest.fixture
def fake_run(monkeypatch, jpeg_bytes):
    """Replace subprocess.run with a fake ffmpeg that writes a JPEG to the output path."""
    calls = []
    payload = jpeg_bytes(16, 16)

    def _run(cmd, capture_output=True, timeout=None):
        calls.append(cmd)
        Path(cmd[-1]).write_bytes(payload)
        return subprocess.CompletedProcess(cmd, 0, b"", b"")

    monkeypatch.setattr(ffmpeg_mod.subprocess, "run", _run)
    return calls, payload


def test_input_extension():
    assert input_extension("holiday.MOV") == ".MOV"
    assert input_extension("clip.webm") == ".webm"
    assert input_extension("noext") == ".mp4"


def test_command_seeks_before_input():
    cmd = build_extract_command("ffmpeg", "in.mp4", "out.jpg", 1.5)
    assert cmd[0] == "ffmpeg"
    assert cmd.index("-ss") < cmd.index("-i")
    assert cmd[cmd.index("-ss") + 1] == "1.5"
    assert cmd[cmd.index("-frames:v") + 1] == "1"
    assert cmd[cmd.index("-q:v") + 1] == "2"
    assert cmd[-1] == "out.jpg"


@pytest.mark.parametrize("seconds, expected", [
    (0.00004, "0.00004"),
    (0.0, "0"),
    (12.0, "12"),
    (3.04, "3.04"),
])
def test_seek_time_is_fixed_point(seconds, expected):
    cmd = build_extract_command("ffmpeg", "in.mp4", "out.jpg", seconds)
    ss = cmd[cmd.index("-ss") + 1]
    assert ss == expected
    assert "e" not in ss


def test_extract_returns_output_and_cleans_up(tmp_path, fake_run):
    calls, payload = fake_run
    video = tmp_path / "movie.webm"
    video.write_bytes(b"\x1a\x45\xdf\xa3 fake webm")

    data = extract_frame_jpeg(video, 2.25, ffmpeg="/usr/bin/ffmpeg")

    assert data == payload
    (cmd,) = calls
    input_path = Path(cmd[cmd.index("-i") + 1])
    assert input_path.name == "input.webm"
    assert Path(cmd[-1]).name == "frame.jpg"
    # Scratch directory is gone
    assert not input_path.parent.exists()


def test_missing_binary(tmp_path, monkeypatch):
    monkeypatch.setattr(ffmpeg_mod, "find_ffmpeg", lambda binary=None: None)
    video = tmp_path / "a.mp4"
    video.write_bytes(b"x")
    with pytest.raises(FFmpegError, match="not found"):
        extract_frame_jpeg(video, 0.0)


def test_nonzero_exit(tmp_path, monkeypatch):
    def _run(cmd, capture_output=True, timeout=None):
        return subprocess.CompletedProcess(cmd, 1, b"", b"Invalid data found")

    monkeypatch.setattr(ffmpeg_mod.subprocess, "run", _run)
    video = tmp_path / "a.mp4"
    video.write_bytes(b"x")
    with pytest.raises(FFmpegError, match="Invalid data found"):
        extract_frame_jpeg(video, 0.0, ffmpeg="ffmpeg")


def test_no_output_file(tmp_path, monkeypatch):
    def _run(cmd, capture_output=True, timeout=None):
        return subprocess.CompletedProcess(cmd, 0, b"", b"")

    monkeypatch.setattr(ffmpeg_mod.subprocess, "run", _run)
    video = tmp_path / "a.mp4"
    video.write_bytes(b"x")
    with pytest.raises(FFmpegError, match="no frame"):
        extract_frame_jpeg(video, 99.0, ffmpeg="ffmpeg")


def test_timeout(tmp_path, monkeypatch):
    def _run(cmd, capture_output=True, timeout=None):
        raise subprocess.TimeoutExpired(cmd, timeout)

    monkeypatch.setattr(ffmpeg_mod.subprocess, "run", _run)
    video = tmp_path / "a.mp4"
    video.write_bytes(b"x")
    with pytest.raises(FFmpegError, match="timed out"):
        extract_frame_jpeg(video, 0.0, ffmpeg="ffmpeg", timeout=1)
