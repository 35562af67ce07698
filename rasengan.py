#!/usr/bin/env python3
"""
Rasengan effect application entry points and pygame rendering glue.

What this module does
- Opens an 800x600 pygame window and builds the default Rasengan effect: 300
  orbiters in three radius tiers around a translucent core sphere.
- Runs the shared FrameLoop either interactively (mouse orbit/zoom/pan camera,
  FPS readout, until the window is closed) or as a fixed-length exporter that
  auto-orbits the camera and streams every frame into ffmpeg.

Controls (interactive)
- Left-drag: orbit | Right-drag: pan | Wheel: zoom | Close window: quit

Running
1) Install dependencies: `pip install -e .` (ffmpeg must be on PATH to export)
2) Viewer: `rasengan` (or `python rasengan.py`)
3) Export 30 s to output.mp4: `rasengan-export`
"""

import logging
import random
import sys

import pygame

from rasengan_core.camera import Camera3D, InputState, OrbitCameraController, auto_orbit
from rasengan_core.constants import (
    AUTO_ORBIT_SPEED,
    BACKGROUND_COLOR,
    CORE_RADIUS,
    EFFECT_CENTER,
    END_COLOR,
    EXPORT_FRAMES,
    FPS_TEXT_COLOR,
    FPS_TEXT_POS,
    HUD_FONT_SIZE,
    ORBIT_RADII,
    START_COLOR,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    WINDOW_TITLE,
)
from rasengan_core.data_models import RasenganEffect, init_rasengan
from rasengan_core.frame_export import FfmpegSink, FrameExportError, surface_to_rgba
from rasengan_core.frame_loop import FrameLoop, frame_limit, until_closed
from rasengan_core.motion import OrbiterMotion
from rasengan_core.trail_render import draw_grid, draw_rasengan

logger = logging.getLogger("rasengan")

# ============================================================
# Pygame Renderer
# ============================================================

class PygameRenderer:
    """
    Pygame window: polls mouse input, draws the effect and grid, and hands
    back the rendered frame as raw RGBA bytes when exporting.
    """
    def __init__(self, width=VIEW_WIDTH, height=VIEW_HEIGHT, fps=TARGET_FPS, show_fps=True):
        self.width = width
        self.height = height
        self.fps = fps
        self.show_fps = show_fps
        self.surface = None
        self.clock = None
        self.font = None

    def open(self):
        pygame.init()
        pygame.display.set_caption(WINDOW_TITLE)
        self.surface = pygame.display.set_mode((self.width, self.height))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, HUD_FONT_SIZE)
        # Discard the motion accumulated before the first frame
        pygame.mouse.get_rel()

    def close(self):
        pygame.quit()

    def poll(self) -> InputState:
        state = InputState()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                state.quit = True
            elif event.type == pygame.MOUSEWHEEL:
                state.wheel += event.y
        buttons = pygame.mouse.get_pressed()
        state.left_down = bool(buttons[0])
        state.right_down = bool(buttons[2])
        state.mouse_delta = pygame.mouse.get_rel()
        return state

    def tick(self) -> float:
        return self.clock.tick(self.fps) / 1000.0

    def draw(self, effect: RasenganEffect, camera: Camera3D):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        camera.set_viewport_size(self.width, self.height)

        # No depth buffer: paint back to front
        draw_grid(surf, camera)
        draw_rasengan(surf, camera, effect)

        if self.show_fps:
            self.draw_fps(surf)

        pygame.display.flip()

    def draw_fps(self, surf):
        fps = int(round(self.clock.get_fps()))
        surf.blit(self.font.render(f"{fps} FPS", True, FPS_TEXT_COLOR), FPS_TEXT_POS)

    def capture(self) -> bytes:
        return surface_to_rgba(self.surface)

# ============================================================
# Default Scene and Application Entry
# ============================================================

def build_default_effect(rng: random.Random) -> RasenganEffect:
    inner, middle, outer = ORBIT_RADII
    return init_rasengan(
        EFFECT_CENTER,
        START_COLOR,
        END_COLOR,
        CORE_RADIUS,
        inner, middle, outer,
        rng,
    )


def _setup_logging():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main():
    _setup_logging()
    rng = random.Random()
    effect = build_default_effect(rng)
    controller = OrbitCameraController()

    renderer = PygameRenderer()
    try:
        renderer.open()
        loop = FrameLoop(
            renderer, effect, OrbiterMotion(rng), Camera3D(),
            lambda cam, inputs, dt: controller.update(cam, inputs),
        )
        frames = loop.run(until_closed)
        logger.info("Viewer closed after %d frames", frames)
    finally:
        renderer.close()


def export_main(frames=EXPORT_FRAMES):
    _setup_logging()
    rng = random.Random()
    effect = build_default_effect(rng)

    try:
        sink = FfmpegSink()
        sink.open()
    except FrameExportError as e:
        logger.error("%s", e)
        sys.exit(1)

    renderer = PygameRenderer(show_fps=False)
    try:
        renderer.open()
        loop = FrameLoop(
            renderer, effect, OrbiterMotion(rng), Camera3D(),
            lambda cam, inputs, dt: auto_orbit(cam, dt, AUTO_ORBIT_SPEED),
        )
        loop.run(frame_limit(frames), sink)
    except FrameExportError as e:
        logger.error("%s", e)
        sys.exit(1)
    finally:
        renderer.close()
        sink.close()


if __name__ == "__main__":
    main()
