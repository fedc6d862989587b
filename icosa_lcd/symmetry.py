"""Face and region transforms for one icosahedral face.

Two frames are involved:

* the *local* frame, where the reference face sits on the equator with an
  icosahedron vertex at the +Z pole and the face's apex on the +X meridian;
* the *global* (face) frame, where the face normal is +Z, the face's lower
  edge runs along +X and its apex lies towards +Y.

Inside the global frame the face splits into six regions around its centre,
related by the x-axis mirror and the 120° / 240° rotations::

                  ^ y
                  |
                  +
                . | .
              .   |   .
            .  3  |  2  .
          .       |       .
        .  4      +     1   .   ---> x
      .        5  |  0        .
    + . . . . . . . . . . . . . +

Region 0 is the LCD triangle in which vertices are usually constructed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce
from typing import Dict, List, Sequence, Tuple

from .linalg import (
    Matrix4,
    Vector4,
    cross,
    identity,
    matrix_from_axes,
    multiply,
    normalize,
    point,
    scale_matrix,
    transform,
    vector,
)
from .spherical import SphericalCoord, to_cartesian

__all__ = [
    "REGION_COUNT",
    "FaceTransforms",
    "RegionTransformTable",
    "check_region",
    "rotation_matrix_from_triangle",
    "build_face_transforms",
    "build_subface_transforms",
    "build_transforms",
    "build_region_transforms",
]

REGION_COUNT = 6

# Region-to-region products, applied left to right to row vectors.
#   X  : x-axis mirror
#   M1 / M2 : face-frame rotation by -120° / -240°
#   T1 / T2 : their transposes (+120° / +240°)
# An empty entry is the identity.
_REGION_TABLE: Tuple[Tuple[str, ...], ...] = (
    ("", "X T1", "T1", "X T2", "T2", "X"),
    ("M1 X", "", "M1 X T1", "M1 T2", "X", "M1"),
    ("M1", "M1 X T1", "", "X", "M1 T2", "M1 X"),
    ("M2 X", "M2 T1", "X", "", "M2 X T2", "M2"),
    ("M2", "X", "M2 T1", "M2 X T2", "", "M2 X"),
    ("X", "T1", "X T1", "T2", "X T2", ""),
)


@dataclass(slots=True)
class FaceTransforms:
    """Rotations for the reference face; computed once, read-only afterwards."""

    to_global: Matrix4
    to_local: Matrix4
    # Face-frame z rotations by 0°, 120°, 240° and their transposes.
    rotations: Tuple[Matrix4, Matrix4, Matrix4]
    inverse_rotations: Tuple[Matrix4, Matrix4, Matrix4]


@dataclass(slots=True)
class RegionTransformTable:
    """6x6 table; ``matrices[i][j]`` maps a global point in region i to region j."""

    matrices: List[List[Matrix4]]

    def matrix(self, src: int, dst: int) -> Matrix4:
        check_region(src)
        check_region(dst)
        return self.matrices[src][dst]

    def exchange(self, src: int, dst: int, p: Sequence[float]) -> Vector4:
        """Image of global point *p* (in region *src*) inside region *dst*."""
        return transform(self.matrix(src, dst), p)


def check_region(region: int) -> None:
    if not 0 <= region < REGION_COUNT:
        raise IndexError(f"Region index {region} outside 0..{REGION_COUNT - 1}")


def rotation_matrix_from_triangle(
    p0: Sequence[float], p1: Sequence[float], p2: Sequence[float]
) -> Tuple[Matrix4, Matrix4]:
    """Rotation into the frame of triangle (p0, p1, p2) and its transpose.

    Local x runs from p2 to p0, local y points towards p1 (re-orthogonalised),
    local z is the triangle normal. Translation is ignored.
    """
    x_axis = normalize(vector(p2, p0))
    y_axis = normalize(vector(p2, p1))
    z_axis = normalize(cross(x_axis, y_axis))
    y_axis = normalize(cross(z_axis, x_axis))
    return matrix_from_axes(x_axis, y_axis, z_axis)


def build_face_transforms() -> Tuple[Matrix4, Matrix4]:
    """Local-to-global rotation for the equatorial reference face and its inverse."""
    ridge = math.atan(2.0)  # angle between neighbouring icosahedron vertices
    apex = to_cartesian(SphericalCoord(1.0, 0.0, ridge))
    right = to_cartesian(SphericalCoord(1.0, math.radians(36.0), math.pi - ridge))
    left = to_cartesian(SphericalCoord(1.0, math.radians(-36.0), math.pi - ridge))
    return rotation_matrix_from_triangle(right, apex, left)


def build_subface_transforms() -> Tuple[Tuple[Matrix4, Matrix4, Matrix4], Tuple[Matrix4, Matrix4, Matrix4]]:
    """z rotations by 0°, 120° and 240° derived from a unit equilateral triangle.

    Regions 0 and 5 belong to the 0° step, 1 and 2 to 120°, 3 and 4 to 240°.
    """
    corners = (
        point(0.5, -math.sqrt(3.0) / 6, 0.0),
        point(0.0, math.sqrt(3.0) / 3, 0.0),
        point(-0.5, -math.sqrt(3.0) / 6, 0.0),
    )
    rotations = []
    inverses = []
    for step in range(3):
        # Cycle the corners so the frame origin walks around the triangle.
        p0, p1, p2 = (corners[(i + step) % 3] for i in range(3))
        m, mt = rotation_matrix_from_triangle(p0, p1, p2)
        rotations.append(m)
        inverses.append(mt)
    return (rotations[0], rotations[1], rotations[2]), (inverses[0], inverses[1], inverses[2])


def build_transforms() -> FaceTransforms:
    to_global, to_local = build_face_transforms()
    rotations, inverse_rotations = build_subface_transforms()
    return FaceTransforms(
        to_global=to_global,
        to_local=to_local,
        rotations=rotations,
        inverse_rotations=inverse_rotations,
    )


def build_region_transforms(face: FaceTransforms) -> RegionTransformTable:
    """Assemble all 36 region-to-region matrices from the face rotations."""
    named: Dict[str, Matrix4] = {
        "X": scale_matrix(-1.0, 1.0, 1.0),
        "M1": face.rotations[1],
        "M2": face.rotations[2],
        "T1": face.inverse_rotations[1],
        "T2": face.inverse_rotations[2],
    }
    matrices: List[List[Matrix4]] = []
    for row in _REGION_TABLE:
        matrices.append(
            [reduce(multiply, (named[f] for f in entry.split()), identity()) for entry in row]
        )
    return RegionTransformTable(matrices=matrices)
