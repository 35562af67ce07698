#!/usr/bin/env python3
"""
Video export: stream raw RGBA frames into an ffmpeg child process.

The parent writes width*height*4 bytes per frame into ffmpeg's stdin; ffmpeg
encodes them to H.264. Frames must be top row first, which is the row order
pygame surfaces already use.

Usage:
    with FfmpegSink() as sink:
        sink.write(frame_bytes)
"""
import logging
import shutil
import subprocess
from typing import List, Optional

import pygame

from .constants import (
    BYTES_PER_PIXEL,
    EXPORT_FILENAME,
    FFMPEG_BINARY,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)

logger = logging.getLogger(__name__)


class FrameExportError(RuntimeError):
    """Raised when the encoder cannot be started or stops accepting frames."""


def build_ffmpeg_command(width: int = VIEW_WIDTH, height: int = VIEW_HEIGHT,
                         fps: int = TARGET_FPS, output: str = EXPORT_FILENAME,
                         binary: str = FFMPEG_BINARY) -> List[str]:
    return [
        binary,
        "-loglevel", "verbose",
        "-y",
        "-f", "rawvideo",
        "-pix_fmt", "rgba",
        "-s", f"{width}x{height}",
        "-r", str(fps),
        "-an",
        "-i", "-",
        "-c:v", "libx264",
        output,
    ]


def surface_to_rgba(surface) -> bytes:
    """Raw RGBA bytes of a surface, top row first."""
    return pygame.image.tobytes(surface, "RGBA", False)


class FfmpegSink:
    """
    Frame sink backed by an ffmpeg subprocess reading rawvideo from stdin.

    The process is started by open() (or entering the context manager) and
    torn down by close(), which closes the pipe and waits for ffmpeg to exit.
    """

    def __init__(self, output: str = EXPORT_FILENAME, width: int = VIEW_WIDTH,
                 height: int = VIEW_HEIGHT, fps: int = TARGET_FPS, binary: str = FFMPEG_BINARY):
        self.output = output
        self.width = width
        self.height = height
        self.fps = fps
        self.binary = binary
        self.frame_size = width * height * BYTES_PER_PIXEL
        self.frames_written = 0
        self.process: Optional[subprocess.Popen] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def open(self) -> None:
        if shutil.which(self.binary) is None:
            raise FrameExportError(f"{self.binary} not found on PATH")
        cmd = build_ffmpeg_command(self.width, self.height, self.fps, self.output, self.binary)
        logger.info("Starting encoder: %s", " ".join(cmd))
        try:
            self.process = subprocess.Popen(cmd, stdin=subprocess.PIPE)
        except OSError as e:
            raise FrameExportError(f"failed to start {self.binary}: {e}") from e

    def write(self, frame: bytes) -> None:
        if self.process is None or self.process.stdin is None:
            raise FrameExportError("encoder is not running")
        if len(frame) != self.frame_size:
            raise ValueError(f"expected {self.frame_size} bytes per frame, got {len(frame)}")
        try:
            self.process.stdin.write(frame)
        except (BrokenPipeError, OSError) as e:
            raise FrameExportError(f"encoder stopped accepting frames: {e}") from e
        self.frames_written += 1

    def close(self) -> Optional[int]:
        """Close the pipe, wait for ffmpeg and return its exit code."""
        if self.process is None:
            return None
        proc = self.process
        self.process = None
        try:
            if proc.stdin is not None:
                proc.stdin.close()
        except OSError as e:
            logger.warning("Error closing encoder pipe: %s", e)
        rc = proc.wait()
        if rc != 0:
            logger.warning("%s exited with code %d", self.binary, rc)
        else:
            logger.info("Done rendering %d frames to %s", self.frames_written, self.output)
        return rc
