#!/usr/bin/env python3
"""
Orbiter motion model for the Rasengan effect.

Responsibilities
- Perturb each orbiter's angular acceleration with a small random kick.
- Integrate angular speed and position once per frame with bounded speed.
- Convert the spherical position to world space and record it in the trail.

Conventions
- Azimuth wraps around into [0, 2*pi); elevation bounces off the poles and
  reverses its speed. Spherical coordinates have genuine poles, so the two
  axes are treated differently on purpose.
- Speeds are clamped to [-MAX_ANGULAR_SPEED, MAX_ANGULAR_SPEED]. The bound is
  not physical; it stops the random walk from drifting without limit.

Randomness
- The random source is injected so tests can seed or mock it. Anything with a
  random() method returning floats in [0, 1) will do.
"""
import math
import random
from typing import Optional

from .constants import ACCEL_BIAS, ACCEL_JITTER, MAX_ANGULAR_SPEED, TWO_PI
from .data_models import Orbiter, RasenganEffect
from .vector_utils import Vec3, clamp, spherical_to_cartesian, vec_add


def wrap_azimuth(azimuth: float) -> float:
    """Wrap an azimuth that is at most one turn out of range into [0, 2*pi)."""
    return math.fmod(azimuth + TWO_PI, TWO_PI)


def reflect_elevation(elevation: float, speed: float):
    """
    Bounce an elevation that stepped past a pole back into [0, pi].

    Returns:
        (elevation, speed) with the speed negated if a reflection happened.
    """
    if elevation < 0.0:
        return -elevation, -speed
    if elevation > math.pi:
        return TWO_PI - elevation, -speed
    return elevation, speed


class OrbiterMotion:
    """
    Per-frame integrator for every orbiter of an effect.

    The update is a plain explicit Euler step in angle space:
    accel -> speed (clamped) -> angle (wrapped or reflected) -> world position.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random source for the acceleration kicks; a fresh unseeded
                random.Random is used when omitted.
        """
        self.rng = rng if rng is not None else random.Random()

    def _kick(self) -> float:
        return ACCEL_BIAS + self.rng.random() * ACCEL_JITTER

    def advance_orbiter(self, orb: Orbiter, center: Vec3) -> Vec3:
        """
        Advance a single orbiter by one frame and record its new position.

        Args:
            orb: Orbiter to update (modified in place)
            center: World-space center of the owning effect

        Returns:
            The new world-space position.
        """
        orb.accel_az = self._kick()
        orb.accel_el = self._kick()
        orb.speed_az = clamp(orb.speed_az + orb.accel_az, -MAX_ANGULAR_SPEED, MAX_ANGULAR_SPEED)
        orb.speed_el = clamp(orb.speed_el + orb.accel_el, -MAX_ANGULAR_SPEED, MAX_ANGULAR_SPEED)

        orb.azimuth = wrap_azimuth(orb.azimuth + orb.speed_az)
        orb.elevation, orb.speed_el = reflect_elevation(orb.elevation + orb.speed_el, orb.speed_el)

        pos = vec_add(center, spherical_to_cartesian(orb.radius, orb.azimuth, orb.elevation))
        orb.trail.push(pos)
        return pos

    def advance(self, effect: RasenganEffect) -> None:
        """Advance every orbiter of effect by one frame."""
        for orb in effect.orbiters:
            self.advance_orbiter(orb, effect.position)
