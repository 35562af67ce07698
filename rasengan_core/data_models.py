#!/usr/bin/env python3
"""
Data models for the Rasengan effect.

This module defines the Orbiter and RasenganEffect dataclasses shared between
the motion model, the renderer and the frame loop.

Units and usage
- Angles are in radians, angular speeds and accelerations are per frame.
- Positions are world-space (x, y, z) tuples; colors are RGBA tuples in 0..255.
- Each orbiter exclusively owns its trail buffer; the effect owns its orbiters.
"""
import math
import random
from dataclasses import dataclass, field
from typing import List, Tuple

from .constants import (
    INITIAL_SPEED_AZ,
    INITIAL_SPEED_EL,
    INNER_TIER_FRACTION,
    MIDDLE_TIER_FRACTION,
    NUM_ORBITERS,
    TRAIL_SIZE,
    TWO_PI,
)
from .trail_buffer import TrailBuffer
from .vector_utils import Vec3

Color = Tuple[int, int, int, int]


@dataclass
class Orbiter:
    """
    One particle circling the effect center on a sphere of fixed radius.

    Fields:
    - azimuth: horizontal angle, kept in [0, 2*pi) by wraparound
    - elevation: polar angle from +Y, kept in [0, pi] by reflection
    - speed_az, speed_el: angular velocities, clamped per frame
    - accel_az, accel_el: random perturbations drawn on every update
    - radius: orbit radius, fixed for the orbiter's lifetime
    - trail: recent world positions
    """
    azimuth: float
    elevation: float
    speed_az: float
    speed_el: float
    radius: float
    accel_az: float = 0.0
    accel_el: float = 0.0
    trail: TrailBuffer = field(default_factory=lambda: TrailBuffer(TRAIL_SIZE))


@dataclass
class RasenganEffect:
    """A core sphere plus a swarm of orbiters in three radius tiers."""
    position: Vec3
    start_color: Color
    end_color: Color
    core_radius: float
    inner_radius: float
    middle_radius: float
    outer_radius: float
    orbiters: List[Orbiter] = field(default_factory=list)

    def tier_radius(self, index: int, count: int) -> float:
        """Orbit radius for the orbiter at index out of count."""
        if index < count * INNER_TIER_FRACTION:
            return self.inner_radius
        if index < count * MIDDLE_TIER_FRACTION:
            return self.middle_radius
        return self.outer_radius


def init_rasengan(position: Vec3, start_color: Color, end_color: Color,
                  core_radius: float, inner_radius: float, middle_radius: float,
                  outer_radius: float, rng: random.Random,
                  count: int = NUM_ORBITERS, trail_size: int = TRAIL_SIZE) -> RasenganEffect:
    """
    Build an effect with count orbiters at random angles and speeds.

    Args:
        position: World-space center of the effect
        start_color: Trail color at the oldest point
        end_color: Trail color at the newest point
        core_radius: Radius of the translucent core sphere
        inner_radius, middle_radius, outer_radius: Orbit radius tiers
        rng: Random source used for the initial angles and speeds
        count: Number of orbiters
        trail_size: Capacity of each orbiter's trail

    Returns:
        A RasenganEffect with empty trails.
    """
    effect = RasenganEffect(
        position=tuple(position),
        start_color=tuple(start_color),
        end_color=tuple(end_color),
        core_radius=core_radius,
        inner_radius=inner_radius,
        middle_radius=middle_radius,
        outer_radius=outer_radius,
    )
    az_base, az_span = INITIAL_SPEED_AZ
    el_base, el_span = INITIAL_SPEED_EL
    for i in range(count):
        effect.orbiters.append(Orbiter(
            azimuth=rng.random() * TWO_PI,
            elevation=rng.random() * math.pi,
            speed_az=az_base + rng.random() * az_span,
            speed_el=el_base + rng.random() * el_span,
            radius=effect.tier_radius(i, count),
            trail=TrailBuffer(trail_size),
        ))
    return effect
