#!/usr/bin/env python3
"""
Shared constants for the Rasengan effect (world units, radians, frames).

All tunables live here; nothing is configurable at runtime. Keeping them in one
place keeps the motion model, renderer and exporter consistent.
"""
import math

TWO_PI = 2.0 * math.pi

# Effect sizing
NUM_ORBITERS = 300
TRAIL_SIZE = 300

# Orbiter motion (per frame)
MAX_ANGULAR_SPEED = 0.05  # rad/frame, applied to both axes
ACCEL_JITTER = 0.001  # width of the random acceleration range
ACCEL_BIAS = -0.0005  # lower bound of the random acceleration range
INITIAL_SPEED_AZ = (0.01, 0.02)  # (base, random span)
INITIAL_SPEED_EL = (-0.015, 0.03)
INNER_TIER_FRACTION = 0.4  # orbiters below this fraction use the inner radius
MIDDLE_TIER_FRACTION = 0.6

# Default scene
EFFECT_CENTER = (0.0, 1.0, 0.0)
START_COLOR = (0, 180, 255, 255)  # blue
END_COLOR = (200, 255, 255, 255)  # white
CORE_RADIUS = 0.3
ORBIT_RADII = (0.3, 0.9, 1.5)  # inner, middle, outer
CORE_COLOR = (255, 255, 255, 180)

# Window / rendering
VIEW_WIDTH = 800
VIEW_HEIGHT = 600
TARGET_FPS = 60
WINDOW_TITLE = "Multiple Rasengan Effects"
BACKGROUND_COLOR = (0, 0, 0)
GRID_COLOR = (130, 130, 130)
GRID_SLICES = 10
GRID_SPACING = 1.0
FPS_TEXT_COLOR = (0, 228, 48)
FPS_TEXT_POS = (10, 40)
HUD_FONT_SIZE = 24
NEAR_PLANE = 0.01

# Camera
CAMERA_POSITION = (4.0, 3.0, 4.0)
CAMERA_TARGET = (0.0, 1.0, 0.0)
CAMERA_UP = (0.0, 1.0, 0.0)
CAMERA_FOVY = 45.0  # degrees
SENSITIVITY_ORBIT = 0.005
SENSITIVITY_ZOOM = 1.0
SENSITIVITY_PAN = 0.005
MIN_ELEVATION = 0.1
MAX_ELEVATION = math.pi - 0.1
MIN_CAMERA_RADIUS = 0.5
MAX_CAMERA_RADIUS = 100.0
AUTO_ORBIT_SPEED = 0.5  # rad/s while exporting

# Video export
EXPORT_SECONDS = 30
EXPORT_FRAMES = TARGET_FPS * EXPORT_SECONDS
EXPORT_FILENAME = "output.mp4"
FFMPEG_BINARY = "ffmpeg"
BYTES_PER_PIXEL = 4  # rgba
