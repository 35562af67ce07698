#!/usr/bin/env python3
"""
Camera utilities: a perspective 3D camera and the orbit controls that move it.

The camera is described by position, target, up and a vertical field of view;
world_to_screen projects world points into viewport pixels. The orbit
controller keeps no mode state: spherical coordinates are recomputed from the
camera's Cartesian offset every frame.
"""
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .constants import (
    CAMERA_FOVY,
    CAMERA_POSITION,
    CAMERA_TARGET,
    CAMERA_UP,
    MAX_CAMERA_RADIUS,
    MAX_ELEVATION,
    MIN_CAMERA_RADIUS,
    MIN_ELEVATION,
    NEAR_PLANE,
    SENSITIVITY_ORBIT,
    SENSITIVITY_PAN,
    SENSITIVITY_ZOOM,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector_utils import (
    Vec3,
    cartesian_to_spherical,
    clamp,
    spherical_to_cartesian,
    vec_add,
    vec_cross,
    vec_norm,
    vec_scale,
    vec_sub,
)

PERSPECTIVE = "perspective"


@dataclass
class InputState:
    """Mouse state sampled once per frame."""
    left_down: bool = False
    right_down: bool = False
    mouse_delta: Tuple[float, float] = (0.0, 0.0)
    wheel: float = 0.0
    quit: bool = False


class Camera3D:
    """
    Perspective camera looking from position towards target.

    Attributes:
        position, target, up: world-space vectors.
        fovy: vertical field of view in degrees.
        projection: projection mode; only PERSPECTIVE is supported.
        viewport_size: (width, height) in pixels.
    """

    def __init__(self, position=CAMERA_POSITION, target=CAMERA_TARGET, up=CAMERA_UP,
                 fovy=CAMERA_FOVY, projection=PERSPECTIVE):
        self.position: Vec3 = tuple(position)
        self.target: Vec3 = tuple(target)
        self.up: Vec3 = tuple(up)
        self.fovy = fovy
        self.projection = projection
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def basis(self) -> Tuple[Vec3, Vec3, Vec3]:
        """Return (right, up, forward) unit vectors of the view."""
        forward = vec_norm(vec_sub(self.target, self.position))
        right = vec_norm(vec_cross(forward, self.up))
        up = vec_norm(vec_cross(right, forward))
        return right, up, forward

    def focal_length(self) -> float:
        """Pixels per world unit at distance 1 along the view axis."""
        return (self.viewport_size[1] / 2.0) / math.tan(math.radians(self.fovy) / 2.0)

    def projector(self) -> "ViewProjection":
        """Snapshot of the current view for projecting many points."""
        return ViewProjection(self)

    def world_to_screen(self, point: Vec3) -> Optional[Tuple[float, float]]:
        """Project a world point to pixels, or None if it is behind the near plane."""
        screen, visible = self.projector().project_points([point])
        if not visible[0]:
            return None
        return tuple(screen[0].tolist())

    def project_radius(self, center: Vec3, radius: float) -> Optional[float]:
        """On-screen radius in pixels of a sphere, or None if behind the camera."""
        proj = self.projector()
        depth = proj.to_view([center])[0, 2]
        if depth <= NEAR_PLANE:
            return None
        return radius * proj.focal / float(depth)

    def project_segment(self, a: Vec3, b: Vec3):
        """
        Project a world segment, clipping it against the near plane.

        Returns:
            ((x0, y0), (x1, y1)) in pixels, or None if fully behind the camera.
        """
        sa, sb, keep = self.projector().project_segments([a], [b])
        if not keep[0]:
            return None
        return tuple(sa[0].tolist()), tuple(sb[0].tolist())


class ViewProjection:
    """
    View basis and focal length frozen for one frame.

    Works on (N, 3) arrays of world points so a whole swarm is projected with
    a handful of numpy operations instead of one basis rebuild per point.
    """

    def __init__(self, camera: Camera3D):
        self.rotation = np.array(camera.basis(), dtype=np.float64)  # rows: right, up, forward
        self.eye = np.array(camera.position, dtype=np.float64)
        self.focal = camera.focal_length()
        w, h = camera.viewport_size
        self.cx = w / 2.0
        self.cy = h / 2.0

    def to_view(self, points) -> np.ndarray:
        """World points to view space (x right, y up, z depth), shape (N, 3)."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        return (pts - self.eye) @ self.rotation.T

    def _view_to_screen(self, v: np.ndarray) -> np.ndarray:
        with np.errstate(divide="ignore", invalid="ignore"):
            scale = self.focal / v[:, 2]
            return np.stack((self.cx + v[:, 0] * scale, self.cy - v[:, 1] * scale), axis=1)

    def project_points(self, points):
        """
        Returns:
            (screen, visible): (N, 2) pixel coordinates, NaN where the point is
            behind the near plane, and the (N,) visibility mask.
        """
        v = self.to_view(points)
        visible = v[:, 2] > NEAR_PLANE
        screen = self._view_to_screen(v)
        screen[~visible] = np.nan
        return screen, visible

    @staticmethod
    def _clip_to_near(behind: np.ndarray, front: np.ndarray) -> np.ndarray:
        t = (NEAR_PLANE - behind[:, 2]) / (front[:, 2] - behind[:, 2])
        clipped = behind + (front - behind) * t[:, None]
        clipped[:, 2] = NEAR_PLANE
        return clipped

    def project_segments(self, a, b):
        """
        Project segments a[i] -> b[i], clipping them against the near plane.

        Returns:
            (sa, sb, keep): (N, 2) pixel endpoints and the (N,) mask of segments
            with any part in front of the camera. Rows outside keep are NaN.
        """
        va = self.to_view(a)
        vb = self.to_view(b)
        a_in = va[:, 2] > NEAR_PLANE
        b_in = vb[:, 2] > NEAR_PLANE
        keep = a_in | b_in

        clip_a = keep & ~a_in
        if clip_a.any():
            va[clip_a] = self._clip_to_near(va[clip_a], vb[clip_a])
        clip_b = keep & ~b_in
        if clip_b.any():
            vb[clip_b] = self._clip_to_near(vb[clip_b], va[clip_b])

        sa = self._view_to_screen(va)
        sb = self._view_to_screen(vb)
        sa[~keep] = np.nan
        sb[~keep] = np.nan
        return sa, sb, keep


class OrbitCameraController:
    """
    Mouse-driven orbit controls around the camera target.

    - Left drag orbits (azimuth/elevation), elevation kept off the poles.
    - Wheel zooms by changing the distance to the target.
    - Right drag pans position and target together in the view plane.
    """

    def __init__(self, orbit_sensitivity=SENSITIVITY_ORBIT, zoom_sensitivity=SENSITIVITY_ZOOM,
                 pan_sensitivity=SENSITIVITY_PAN):
        self.orbit_sensitivity = orbit_sensitivity
        self.zoom_sensitivity = zoom_sensitivity
        self.pan_sensitivity = pan_sensitivity

    def update(self, camera: Camera3D, inputs: InputState) -> None:
        radius, azimuth, elevation = cartesian_to_spherical(vec_sub(camera.position, camera.target))

        if inputs.left_down:
            dx, dy = inputs.mouse_delta
            azimuth -= dx * self.orbit_sensitivity
            elevation -= dy * self.orbit_sensitivity
            elevation = clamp(elevation, MIN_ELEVATION, MAX_ELEVATION)

        if inputs.wheel != 0:
            radius -= inputs.wheel * self.zoom_sensitivity
            radius = clamp(radius, MIN_CAMERA_RADIUS, MAX_CAMERA_RADIUS)

        camera.position = vec_add(camera.target, spherical_to_cartesian(radius, azimuth, elevation))

        if inputs.right_down:
            dx, dy = inputs.mouse_delta
            right, up, _ = camera.basis()
            pan = vec_add(vec_scale(right, -dx * self.pan_sensitivity),
                          vec_scale(up, dy * self.pan_sensitivity))
            camera.target = vec_add(camera.target, pan)
            camera.position = vec_add(camera.position, pan)


def auto_orbit(camera: Camera3D, dt: float, speed: float) -> None:
    """Rotate the camera about the world Y axis through its target by speed*dt radians."""
    angle = speed * dt
    c, s = math.cos(angle), math.sin(angle)
    ox, oy, oz = vec_sub(camera.position, camera.target)
    rotated = (ox * c + oz * s, oy, -ox * s + oz * c)
    camera.position = vec_add(camera.target, rotated)
