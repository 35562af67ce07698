from unittest.mock import MagicMock, patch

import pygame
import pytest

from rasengan_core.frame_export import FfmpegSink, FrameExportError, build_ffmpeg_command, surface_to_rgba


def test_ffmpeg_command_matches_encoder_settings():
    assert build_ffmpeg_command() == [
        "ffmpeg", "-loglevel", "verbose", "-y", "-f", "rawvideo", "-pix_fmt", "rgba",
        "-s", "800x600", "-r", "60", "-an", "-i", "-", "-c:v", "libx264", "output.mp4",
    ]


def test_missing_ffmpeg_is_reported():
    with patch("rasengan_core.frame_export.shutil.which", return_value=None):
        with pytest.raises(FrameExportError):
            FfmpegSink().open()


def test_spawn_failure_is_reported():
    with patch("rasengan_core.frame_export.shutil.which", return_value="/usr/bin/ffmpeg"), \
         patch("rasengan_core.frame_export.subprocess.Popen", side_effect=FileNotFoundError("nope")):
        with pytest.raises(FrameExportError):
            FfmpegSink().open()


@pytest.fixture
def popen():
    proc = MagicMock()
    proc.wait.return_value = 0
    with patch("rasengan_core.frame_export.shutil.which", return_value="/usr/bin/ffmpeg"), \
         patch("rasengan_core.frame_export.subprocess.Popen", return_value=proc) as p:
        yield p, proc


def test_frames_are_streamed_then_pipe_closed(popen):
    p, proc = popen
    with FfmpegSink(width=2, height=2) as sink:
        sink.write(b"\x00" * 16)
        sink.write(b"\xff" * 16)
    assert p.call_args[0][0][0] == "ffmpeg"
    assert proc.stdin.write.call_count == 2
    proc.stdin.close.assert_called_once()
    proc.wait.assert_called_once()
    assert sink.frames_written == 2


def test_wrong_frame_size_is_rejected(popen):
    with FfmpegSink(width=2, height=2) as sink:
        with pytest.raises(ValueError):
            sink.write(b"\x00" * 15)


def test_broken_pipe_is_reported(popen):
    _, proc = popen
    proc.stdin.write.side_effect = BrokenPipeError()
    with FfmpegSink(width=2, height=2) as sink:
        with pytest.raises(FrameExportError):
            sink.write(b"\x00" * 16)


def test_close_returns_encoder_exit_code(popen):
    _, proc = popen
    proc.wait.return_value = 1
    sink = FfmpegSink(width=2, height=2)
    sink.open()
    assert sink.close() == 1
    assert sink.close() is None


def test_write_without_open_fails():
    with pytest.raises(FrameExportError):
        FfmpegSink().write(b"")


def test_capture_is_top_row_first_rgba():
    surface = pygame.Surface((2, 2))
    surface.fill((255, 0, 0), pygame.Rect(0, 0, 2, 1))
    surface.fill((0, 0, 255), pygame.Rect(0, 1, 2, 1))
    data = surface_to_rgba(surface)
    assert len(data) == 2 * 2 * 4
    assert tuple(data[:4]) == (255, 0, 0, 255)
    assert tuple(data[-4:]) == (0, 0, 255, 255)
