#!/usr/bin/env python3
"""
The update -> render loop shared by the interactive viewer and the exporter.

Both modes have the same shape (init, loop until a stop condition, teardown);
they differ only in the termination predicate, how the camera moves and
whether frames are forwarded to a sink.
"""
import logging
from typing import Callable, Optional

from .camera import Camera3D, InputState
from .data_models import RasenganEffect
from .motion import OrbiterMotion

logger = logging.getLogger(__name__)

StopPredicate = Callable[[int, InputState], bool]
CameraUpdate = Callable[[Camera3D, InputState, float], None]


def until_closed(frame: int, inputs: InputState) -> bool:
    return inputs.quit


def frame_limit(n: int) -> StopPredicate:
    """Stop after n frames, or earlier if the window is closed."""
    def should_stop(frame: int, inputs: InputState) -> bool:
        return inputs.quit or frame >= n
    return should_stop


class FrameLoop:
    """
    Drives one effect through a renderer.

    The renderer must provide poll() -> InputState, tick() -> seconds since the
    last frame, draw(effect, camera) and capture() -> bytes.
    """

    def __init__(self, renderer, effect: RasenganEffect, motion: OrbiterMotion,
                 camera: Camera3D, camera_update: CameraUpdate):
        self.renderer = renderer
        self.effect = effect
        self.motion = motion
        self.camera = camera
        self.camera_update = camera_update

    def step(self) -> InputState:
        inputs = self.renderer.poll()
        dt = self.renderer.tick()
        self.motion.advance(self.effect)
        self.camera_update(self.camera, inputs, dt)
        self.renderer.draw(self.effect, self.camera)
        return inputs

    def run(self, should_stop: StopPredicate, sink=None) -> int:
        """
        Loop until should_stop(frame, inputs) is true.

        Args:
            should_stop: Termination predicate, checked before every frame
            sink: Optional object with write(bytes); receives every rendered frame

        Returns:
            Number of frames rendered.
        """
        frame = 0
        inputs = InputState()
        while not should_stop(frame, inputs):
            inputs = self.step()
            if inputs.quit:
                break
            if sink is not None:
                sink.write(self.renderer.capture())
            frame += 1
            if frame % 600 == 0:
                logger.debug("Rendered %d frames", frame)
        return frame
