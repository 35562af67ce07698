#!/usr/bin/env python3
"""
Drawing for the Rasengan effect: gradient trails, the core sphere and the grid.

Trails are walked oldest to newest; each segment gets a color interpolated
between the effect's start and end colors, so the tail fades from the start
color into the end color at the orbiter's head.

Rendering notes
- All trail segments of a frame are gathered into numpy arrays and projected
  in one pass through a ViewProjection.
- Short on-screen segments on 32-bit surfaces are rasterized by sampling
  straight into the surface's pixel array; long or partly off-screen ones go
  through pygame.draw.line, which clips them.
- There is no depth buffer, so callers draw back to front: grid, trails, core.
"""
from functools import lru_cache
from typing import Iterable, Tuple

import numpy as np
import pygame
from pygame import gfxdraw

from .camera import Camera3D, ViewProjection
from .constants import CORE_COLOR, GRID_COLOR, GRID_SLICES, GRID_SPACING
from .data_models import Color, RasenganEffect
from .trail_buffer import TrailBuffer

COORD_LIMIT = 30000  # pixel coordinates handed to pygame stay within this
RASTER_BUCKETS = (1, 2, 4, 8, 16, 32, 64)  # samples per segment; longer ones use pygame

Segments = Tuple[np.ndarray, np.ndarray, np.ndarray]


def color_lerp(c1: Color, c2: Color, t: float) -> Color:
    """Per-channel linear interpolation, truncated to integers."""
    return tuple(int(a + (b - a) * t) for a, b in zip(c1, c2))


@lru_cache(maxsize=64)
def trail_gradient(start_color: Color, end_color: Color, count: int) -> np.ndarray:
    """Colors of segments 1..count-1 of a count-point trail, shape (count-1, 4)."""
    colors = np.array([color_lerp(start_color, end_color, j / (count - 1)) for j in range(1, count)],
                      dtype=np.uint8).reshape(-1, 4)
    colors.setflags(write=False)
    return colors


def collect_segments(trails: Iterable[TrailBuffer], start_color: Color, end_color: Color) -> Segments:
    """
    Gather consecutive point pairs of every trail, oldest first.

    Segment j (1-based) of a trail with count points uses t = j / (count - 1).
    Segments touching an unset point are dropped, so nothing is drawn from an
    empty slot.

    Returns:
        (p0, p1, colors): (M, 3) older endpoints, (M, 3) newer endpoints and
        (M, 4) uint8 RGBA colors.
    """
    older, newer, colors = [], [], []
    for trail in trails:
        points = trail.chronological()
        if len(points) <= 1:
            continue
        older.append(points[:-1])
        newer.append(points[1:])
        colors.append(trail_gradient(start_color, end_color, len(points)))
    if not older:
        return np.empty((0, 3)), np.empty((0, 3)), np.empty((0, 4), dtype=np.uint8)

    p0 = np.concatenate(older)
    p1 = np.concatenate(newer)
    c = np.concatenate(colors)
    ok = np.isfinite(p0).all(axis=1) & np.isfinite(p1).all(axis=1)
    if not ok.all():
        p0, p1, c = p0[ok], p1[ok], c[ok]
    return p0, p1, c


def _map_colors(surface, colors: np.ndarray) -> np.ndarray:
    """RGB rows to the surface's packed pixel values (opaque)."""
    masks = surface.get_masks()
    shifts = surface.get_shifts()
    losses = surface.get_losses()
    mapped = np.zeros(len(colors), dtype=np.uint32)
    for ch in range(3):
        mapped |= ((colors[:, ch].astype(np.uint32) >> losses[ch]) << shifts[ch]) & np.uint32(masks[ch])
    if masks[3]:
        mapped |= np.uint32(masks[3])
    return mapped


def _plot_segments(surface, start: np.ndarray, delta: np.ndarray, span: np.ndarray,
                   colors: np.ndarray) -> None:
    """Sample on-screen segments into a 32-bit surface's pixels."""
    width = surface.get_width()
    mapped = _map_colors(surface, colors)
    samples = np.maximum(np.ceil(span), 1)
    origin = (start + 0.5).astype(np.float32)  # truncating x + 0.5 rounds to the nearest pixel
    delta = delta.astype(np.float32)

    pixels = pygame.surfarray.pixels2d(surface)
    try:
        rows = pixels.T
        flat = rows.reshape(-1) if rows.flags.c_contiguous else None
        lower = 0
        for size in RASTER_BUCKETS:
            sel = (samples > lower) & (samples <= size)
            lower = size
            if not sel.any():
                continue
            t = np.arange(size, dtype=np.float32) / np.float32(size)
            xs = (origin[sel, 0:1] + delta[sel, 0:1] * t).astype(np.intp)
            ys = (origin[sel, 1:2] + delta[sel, 1:2] * t).astype(np.intp)
            values = mapped[sel][:, None]
            if flat is not None:
                flat[ys * width + xs] = values
            else:
                pixels[xs, ys] = values
    finally:
        del pixels


def _clip_to_limit(sa: np.ndarray, sb: np.ndarray):
    """
    Liang-Barsky clip of pixel segments to the +/-COORD_LIMIT box.

    Returns:
        (sa, sb, within): clipped endpoints and the mask of segments that
        touch the box at all.
    """
    delta = sb - sa
    t0 = np.zeros(len(sa))
    t1 = np.ones(len(sa))
    within = np.ones(len(sa), dtype=bool)
    with np.errstate(divide="ignore", invalid="ignore"):
        for p, q in ((-delta, sa + COORD_LIMIT), (delta, COORD_LIMIT - sa)):
            for axis in range(2):
                pk, qk = p[:, axis], q[:, axis]
                within &= ~((pk == 0) & (qk < 0))
                t = qk / pk
                t0 = np.where(pk < 0, np.maximum(t0, t), t0)
                t1 = np.where(pk > 0, np.minimum(t1, t), t1)
    within &= t0 <= t1
    return sa + delta * t0[:, None], sa + delta * t1[:, None], within


def _draw_lines(surface, sa: np.ndarray, sb: np.ndarray, colors: np.ndarray) -> int:
    sa, sb, within = _clip_to_limit(sa, sb)
    starts = np.rint(sa[within]).astype(int).tolist()
    ends = np.rint(sb[within]).astype(int).tolist()
    for a, b, color in zip(starts, ends, colors[within, :3].tolist()):
        pygame.draw.line(surface, color, a, b, 1)
    return len(starts)


def draw_segments(surface, projection: ViewProjection, p0: np.ndarray, p1: np.ndarray,
                  colors: np.ndarray) -> int:
    """
    Project and draw world segments.

    Returns:
        Number of segments drawn.
    """
    if not len(p0):
        return 0
    sa, sb, keep = projection.project_segments(p0, p1)
    if not keep.all():
        sa, sb, colors = sa[keep], sb[keep], colors[keep]

    w, h = surface.get_size()
    delta = sb - sa
    span = np.abs(delta).max(axis=1)
    low = np.minimum(sa, sb)
    high = np.maximum(sa, sb)
    fast = ((low >= 0).all(axis=1) & (high[:, 0] <= w - 1) & (high[:, 1] <= h - 1)
            & (span < RASTER_BUCKETS[-1]))
    if surface.get_bytesize() != 4:
        fast[:] = False

    drawn = 0
    if fast.any():
        _plot_segments(surface, sa[fast], delta[fast], span[fast], colors[fast])
        drawn += int(fast.sum())
    if not fast.all():
        slow = ~fast
        drawn += _draw_lines(surface, sa[slow], sb[slow], colors[slow])
    return drawn


def draw_sphere(surface, camera: Camera3D, center, radius: float, color) -> None:
    """Draw a sphere as a flat (optionally translucent) disc at its projected size."""
    screen = camera.world_to_screen(center)
    r_px = camera.project_radius(center, radius)
    if screen is None or r_px is None:
        return
    x, y = int(round(screen[0])), int(round(screen[1]))
    if abs(x) > COORD_LIMIT or abs(y) > COORD_LIMIT:
        return
    r = max(1, min(int(r_px), COORD_LIMIT))
    gfxdraw.filled_circle(surface, x, y, r, color)
    gfxdraw.aacircle(surface, x, y, r, color)


def draw_rasengan(surface, camera: Camera3D, effect: RasenganEffect) -> int:
    """
    Draw every orbiter trail, then the core sphere on top.

    Returns:
        Number of trail segments drawn.
    """
    p0, p1, colors = collect_segments((orb.trail for orb in effect.orbiters),
                                      effect.start_color, effect.end_color)
    drawn = draw_segments(surface, camera.projector(), p0, p1, colors)
    draw_sphere(surface, camera, effect.position, effect.core_radius, CORE_COLOR)
    return drawn


def draw_grid(surface, camera: Camera3D, slices: int = GRID_SLICES,
              spacing: float = GRID_SPACING, color=GRID_COLOR) -> int:
    """Reference grid on the XZ plane, centered on the origin."""
    half = (slices // 2) * spacing
    ticks = np.arange(-(slices // 2), slices // 2 + 1) * spacing
    zeros = np.zeros_like(ticks)
    p0 = np.concatenate((np.stack((ticks, zeros, np.full_like(ticks, -half)), axis=1),
                         np.stack((np.full_like(ticks, -half), zeros, ticks), axis=1)))
    p1 = np.concatenate((np.stack((ticks, zeros, np.full_like(ticks, half)), axis=1),
                         np.stack((np.full_like(ticks, half), zeros, ticks), axis=1)))
    colors = np.tile(np.array(tuple(color[:3]) + (255,), dtype=np.uint8), (len(p0), 1))
    return draw_segments(surface, camera.projector(), p0, p1, colors)
