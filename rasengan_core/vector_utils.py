#!/usr/bin/env python3
"""
Vector helper functions for 3D operations.

Vectors are plain (x, y, z) tuples; these small functions are used by the
motion model, the camera and the renderer.
"""
import math
from typing import Tuple

Vec3 = Tuple[float, float, float]


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vec_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vec_scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def vec_len(a: Vec3) -> float:
    return math.sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def vec_norm(a: Vec3) -> Vec3:
    l = vec_len(a)
    if l == 0:
        return (0.0, 0.0, 0.0)
    return (a[0] / l, a[1] / l, a[2] / l)


def vec_cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def spherical_to_cartesian(radius: float, azimuth: float, elevation: float) -> Vec3:
    """
    Offset for a point at (radius, azimuth, elevation).

    Elevation is the polar angle measured from +Y, azimuth is measured in the
    XZ plane from +X towards +Z.
    """
    sin_el = math.sin(elevation)
    return (
        radius * sin_el * math.cos(azimuth),
        radius * math.cos(elevation),
        radius * sin_el * math.sin(azimuth),
    )


def cartesian_to_spherical(offset: Vec3) -> Tuple[float, float, float]:
    """Inverse of spherical_to_cartesian; returns (radius, azimuth, elevation)."""
    radius = vec_len(offset)
    if radius == 0:
        return (0.0, 0.0, 0.0)
    azimuth = math.atan2(offset[2], offset[0])
    elevation = math.acos(clamp(offset[1] / radius, -1.0, 1.0))
    return (radius, azimuth, elevation)
