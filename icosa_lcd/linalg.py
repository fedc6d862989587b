"""4x4 matrix and small vector algebra (pure Python).

Matrices are flat, row-major lists of 16 floats. Points are homogeneous
``Vector4 = (x, y, z, w)`` tuples treated as *row* vectors, so a transform is
``p' = p · M``. Composition therefore reads left to right: ``multiply(a, b)``
applies ``a`` first, then ``b``.

Only rotations, axis mirrors and their transposes are built here; for those the
transpose is the inverse.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

__all__ = [
    "Matrix4",
    "Vector3",
    "Vector4",
    "X_AXIS",
    "Y_AXIS",
    "Z_AXIS",
    "point",
    "identity",
    "multiply",
    "transpose",
    "rotation_matrix",
    "scale_matrix",
    "matrix_from_axes",
    "transform",
    "transform_points",
    "vector",
    "norm",
    "normalize",
    "dot",
    "cross",
]

Matrix4 = List[float]
Vector3 = Tuple[float, float, float]
Vector4 = Tuple[float, float, float, float]

X_AXIS = "x"
Y_AXIS = "y"
Z_AXIS = "z"


def point(x: float, y: float, z: float) -> Vector4:
    """Homogeneous point with ``w = 1``."""
    return (x, y, z, 1.0)


def identity() -> Matrix4:
    return [
        1.0, 0.0, 0.0, 0.0,
        0.0, 1.0, 0.0, 0.0,
        0.0, 0.0, 1.0, 0.0,
        0.0, 0.0, 0.0, 1.0,
    ]


def multiply(a: Sequence[float], b: Sequence[float]) -> Matrix4:
    """Row-major product ``C = A · B``."""
    c = [0.0] * 16
    for r in range(4):
        row = r * 4
        a0, a1, a2, a3 = a[row], a[row + 1], a[row + 2], a[row + 3]
        for col in range(4):
            c[row + col] = a0 * b[col] + a1 * b[4 + col] + a2 * b[8 + col] + a3 * b[12 + col]
    return c


def transpose(m: Sequence[float]) -> Matrix4:
    out = list(m)
    for r in range(4):
        for c in range(r + 1, 4):
            out[r * 4 + c], out[c * 4 + r] = m[c * 4 + r], m[r * 4 + c]
    return out


def rotation_matrix(axis: str, angle: float) -> Matrix4:
    """Rotation about a coordinate axis by *angle* radians (row-vector convention)."""
    m = identity()
    c = math.cos(angle)
    s = math.sin(angle)
    if axis == X_AXIS:
        m[5], m[6] = c, s
        m[9], m[10] = -s, c
    elif axis == Y_AXIS:
        m[0], m[2] = c, -s
        m[8], m[10] = s, c
    elif axis == Z_AXIS:
        m[0], m[1] = c, s
        m[4], m[5] = -s, c
    else:
        raise ValueError(f"Unknown rotation axis '{axis}'")
    return m


def scale_matrix(x: float, y: float, z: float) -> Matrix4:
    """Axis scale; ``scale_matrix(-1, 1, 1)`` is the x-axis mirror."""
    m = identity()
    m[0] = x
    m[5] = y
    m[10] = z
    return m


def matrix_from_axes(x_axis: Vector3, y_axis: Vector3, z_axis: Vector3) -> Tuple[Matrix4, Matrix4]:
    """Rotation whose columns are the given orthonormal axes, plus its transpose.

    ``p · m`` yields the coordinates of ``p`` in the (x, y, z) frame; the
    transpose maps frame coordinates back.
    """
    m = [
        x_axis[0], y_axis[0], z_axis[0], 0.0,
        x_axis[1], y_axis[1], z_axis[1], 0.0,
        x_axis[2], y_axis[2], z_axis[2], 0.0,
        0.0, 0.0, 0.0, 1.0,
    ]
    return m, transpose(m)


def transform(m: Sequence[float], v: Sequence[float]) -> Vector4:
    """Apply *m* to a single homogeneous row vector."""
    x, y, z, w = v
    return (
        x * m[0] + y * m[4] + z * m[8] + w * m[12],
        x * m[1] + y * m[5] + z * m[9] + w * m[13],
        x * m[2] + y * m[6] + z * m[10] + w * m[14],
        x * m[3] + y * m[7] + z * m[11] + w * m[15],
    )


def transform_points(m: Sequence[float], points: Sequence[Sequence[float]]) -> List[Vector4]:
    """Apply *m* to every point of a batch."""
    return [transform(m, p) for p in points]


def vector(a: Sequence[float], b: Sequence[float]) -> Vector3:
    """Vector from point *a* to point *b*."""
    return (b[0] - a[0], b[1] - a[1], b[2] - a[2])


def norm(v: Sequence[float]) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def normalize(v: Sequence[float]) -> Vector3:
    n = norm(v)
    if n == 0:
        raise ValueError("Cannot normalize zero-length vector")
    return (v[0] / n, v[1] / n, v[2] / n)


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Sequence[float], b: Sequence[float]) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )
