"""Spherical <-> Cartesian conversion (physics convention).

Inclination is measured from the +Z pole, azimuth from +X towards +Y. The
azimuth recovery uses an explicit quadrant table around ``atan(y / x)`` instead
of ``atan2``; the per-frequency recipes depend on its sign/offset convention
near the axes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from .linalg import Vector4, point

__all__ = [
    "ZERO",
    "SphericalCoord",
    "to_cartesian",
    "to_spherical",
]

ZERO = 1e-14

_DEG_90 = math.radians(90.0)
_DEG_180 = math.radians(180.0)


@dataclass(slots=True)
class SphericalCoord:
    radius: float = 1.0
    azimuth: float = 0.0  # radians, (-pi, pi]
    inclination: float = 0.0  # radians, [0, pi]

    def degrees(self) -> tuple[float, float]:
        """(azimuth, inclination) in degrees, for reports."""
        return math.degrees(self.azimuth), math.degrees(self.inclination)


def to_cartesian(sc: SphericalCoord) -> Vector4:
    sin_inc = math.sin(sc.inclination)
    return point(
        sc.radius * sin_inc * math.cos(sc.azimuth),
        sc.radius * sin_inc * math.sin(sc.azimuth),
        sc.radius * math.cos(sc.inclination),
    )


def to_spherical(p: Sequence[float], previous: SphericalCoord | None = None) -> SphericalCoord:
    """Recover (radius, azimuth, inclination) from a Cartesian point.

    A point at the origin has no direction: only the radius is updated and the
    angles of *previous* (or zeros) are carried over unchanged.

    ======  ======  =====================
    x       y       azimuth
    ======  ======  =====================
    0       0       0
    0       +       90
    0       -       -90
    +       any     atan(y/x) (0 on axis)
    -       0       180
    -       +       180 + atan(y/x)
    -       -       -180 + atan(y/x)
    ======  ======  =====================
    """
    x, y, z = p[0], p[1], p[2]
    radius = math.sqrt(x * x + y * y + z * z)
    if previous is None:
        previous = SphericalCoord(radius=0.0)
    if abs(radius) <= ZERO:
        return SphericalCoord(radius, previous.azimuth, previous.inclination)

    inclination = math.acos(z / radius)

    if abs(x) <= ZERO:
        if abs(y) <= ZERO:
            azimuth = 0.0
        elif y > 0:
            azimuth = _DEG_90
        else:
            azimuth = -_DEG_90
    elif x > 0:
        if abs(y) <= ZERO:
            azimuth = 0.0
        else:
            azimuth = math.atan(y / x)
    else:
        if abs(y) <= ZERO:
            azimuth = _DEG_180
        elif y > 0:
            azimuth = _DEG_180 + math.atan(y / x)
        else:
            azimuth = -_DEG_180 + math.atan(y / x)

    return SphericalCoord(radius, azimuth, inclination)
