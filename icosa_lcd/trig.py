"""Spherical trigonometry for the LCD construction.

Triangle notation follows the usual convention: sides ``a, b, c`` (arcs, in
radians) lie opposite angles ``A, B, C``. The solver takes two sides and the
angle opposite one of them (``b``, ``c``, ``C``), which is the classical
ambiguous case: when ``b > c`` and ``C`` is acute two triangles fit the data.

When a vertex is placed from a solved triangle, angle ``A`` sits at the pole,
so side ``c`` becomes the vertex inclination and ``A`` its azimuth.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .linalg import Vector4
from .spherical import SphericalCoord, to_cartesian

__all__ = [
    "SphericalTriangle",
    "asin_clamp",
    "acos_clamp",
    "ambiguous_candidates",
    "solve_oblique",
    "reference_triangle",
    "vertex_from_triangle",
]

_DEG_90 = math.radians(90.0)
_DEG_180 = math.radians(180.0)


@dataclass(slots=True)
class SphericalTriangle:
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    A: float = 0.0
    B: float = 0.0
    C: float = 0.0

    def degrees(self) -> Tuple[float, float, float, float, float, float]:
        return tuple(math.degrees(v) for v in (self.a, self.b, self.c, self.A, self.B, self.C))  # type: ignore[return-value]


def asin_clamp(value: float) -> float:
    """``asin`` with the argument clamped to [-1, 1] to absorb rounding overshoot."""
    return math.asin(max(-1.0, min(1.0, value)))


def acos_clamp(value: float) -> float:
    return math.acos(max(-1.0, min(1.0, value)))


def _half_angle_from_cot(v: float) -> float:
    # 2 * atan(1 / v), with the signed limit when v is exactly zero.
    if v == 0.0:
        return math.copysign(math.pi, v)
    return math.atan(1.0 / v) * 2.0


def ambiguous_candidates(b: float, c: float, C: float) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Both ``(A, B)`` solutions of the ambiguous case, primary first.

    ``B`` comes from the sine rule, its supplement gives the second candidate.
    ``A`` follows from Napier's analogy
    ``cot(A/2) = tan((C - B)/2) · sin((c + b)/2) / sin((c - b)/2)``.
    """
    B = asin_clamp(math.sin(C) * math.sin(b) / math.sin(c))
    B2 = _DEG_180 - B
    ratio = math.sin((c + b) / 2.0) / math.sin((c - b) / 2.0)
    A = _half_angle_from_cot(math.tan((C - B) / 2.0) * ratio)
    A2 = _half_angle_from_cot(math.tan((C - B2) / 2.0) * ratio)
    return (A, B), (A2, B2)


def solve_oblique(b: float, c: float, C: float) -> SphericalTriangle:
    """Solve an oblique spherical triangle from sides b, c and angle C.

    Ambiguous case (``b > c`` and ``C < 90°``): keep the primary candidate
    unless its ``A`` is negative, in which case the supplementary-``B``
    solution is used. Side ``a`` then follows from the sine rule.

    Otherwise ``B`` comes from the (clamped) sine rule, ``a`` from Napier's
    analogy and ``A`` from the law of cosines.
    """
    st = SphericalTriangle(b=b, c=c, C=C)
    if b > c and C < _DEG_90:
        (A, B), (A2, B2) = ambiguous_candidates(b, c, C)
        if A < 0:
            A, B = A2, B2
        st.A = A
        st.B = B
        st.a = asin_clamp(math.sin(A) * math.sin(b) / math.sin(B))
    else:
        B = asin_clamp(math.sin(b) * math.sin(C) / math.sin(c))
        a = 2.0 * math.atan(
            math.tan((b + c) / 2.0) * math.cos((B + C) / 2.0) / math.cos((B - C) / 2.0)
        )
        st.B = B
        st.a = a
        st.A = acos_clamp((math.cos(a) - math.cos(b) * math.cos(c)) / (math.sin(b) * math.sin(c)))
    return st


def reference_triangle() -> SphericalTriangle:
    """The icosahedral LCD triangle: A = 36°, B = 60°, right angle at C.

    Uses Napier's rules for right triangles::

        cos A = cos a · sin B
        cos B = cos b · sin A
        cos c = cot A · cot B
    """
    A = math.radians(36.0)
    B = math.radians(60.0)
    return SphericalTriangle(
        a=math.acos(math.cos(A) / math.sin(B)),
        b=math.acos(math.cos(B) / math.sin(A)),
        c=math.acos(1.0 / (math.tan(A) * math.tan(B))),
        A=A,
        B=B,
        C=_DEG_90,
    )


def vertex_from_triangle(b: float, c: float, C: float) -> Tuple[SphericalTriangle, SphericalCoord, Vector4]:
    """Place a unit-sphere point from a solved triangle (inclination c, azimuth A)."""
    st = solve_oblique(b, c, C)
    sc = SphericalCoord(radius=1.0, azimuth=st.A, inclination=st.c)
    return st, sc, to_cartesian(sc)
