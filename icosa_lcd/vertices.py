"""Vertex placement and symmetric replication inside one icosahedral face.

A vertex is constructed once, in one region, either directly from spherical
coordinates or from a solved oblique triangle. Its five other images are then
derived through the region transform table: the representative point goes to
the global face frame, is copied into every other region there, and all six
points come back to the local frame where their spherical coordinates are
recomputed.

Usage::

    geometry = build_geometry()
    session = LcdSession(geometry, vertex_count=2)
    session.create_vertex_by_sc(0, 0, azimuth, inclination)
    session.global_point(0, 0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from .linalg import Vector4, point, transform, transform_points
from .spherical import SphericalCoord, to_cartesian, to_spherical
from .symmetry import (
    REGION_COUNT,
    FaceTransforms,
    RegionTransformTable,
    build_region_transforms,
    build_transforms,
    check_region,
)
from .trig import SphericalTriangle, reference_triangle, vertex_from_triangle

__all__ = [
    "MAX_VERTICES",
    "LcdGeometry",
    "Vertex",
    "LcdSession",
    "build_geometry",
]

log = logging.getLogger(__name__)

# Enough for the densest supported configuration, (7,0).
MAX_VERTICES = 20

ORIGIN: Vector4 = point(0.0, 0.0, 0.0)


@dataclass(slots=True, frozen=True)
class LcdGeometry:
    """Fixed transforms and reference triangle shared by every session."""

    face: FaceTransforms
    regions: RegionTransformTable
    reference: SphericalTriangle


def build_geometry() -> LcdGeometry:
    face = build_transforms()
    reference = reference_triangle()
    log.info(
        "Reference LCD triangle sides a=%.6f b=%.6f c=%.6f deg",
        *reference.degrees()[:3],
    )
    return LcdGeometry(face=face, regions=build_region_transforms(face), reference=reference)


@dataclass(slots=True)
class Vertex:
    """Six symmetric instances of one sphere location (local frame)."""

    points: List[Vector4] = field(default_factory=lambda: [ORIGIN] * REGION_COUNT)
    coords: List[SphericalCoord] = field(
        default_factory=lambda: [SphericalCoord(radius=0.0) for _ in range(REGION_COUNT)]
    )
    defined: bool = False


class LcdSession:
    """Vertex store for one frequency's computation.

    Vertex ids are bounded by ``vertex_count`` and region indices by 0..5;
    out-of-range access raises ``IndexError``.
    """

    def __init__(self, geometry: LcdGeometry, vertex_count: int = MAX_VERTICES) -> None:
        if not 0 < vertex_count <= MAX_VERTICES:
            raise ValueError(f"vertex_count must be within 1..{MAX_VERTICES}")
        self.geometry = geometry
        self.vertex_count = vertex_count
        self.vertices: List[Vertex] = [Vertex() for _ in range(vertex_count)]

    @property
    def reference(self) -> SphericalTriangle:
        return self.geometry.reference

    def reset(self) -> None:
        self.vertices = [Vertex() for _ in range(self.vertex_count)]

    def vertex(self, v: int) -> Vertex:
        if not 0 <= v < self.vertex_count:
            raise IndexError(f"Vertex id {v} outside 0..{self.vertex_count - 1}")
        return self.vertices[v]

    def point(self, v: int, a: int) -> Vector4:
        check_region(a)
        return self.vertex(v).points[a]

    def coord(self, v: int, a: int) -> SphericalCoord:
        check_region(a)
        return self.vertex(v).coords[a]

    def inclination(self, v: int, a: int) -> float:
        return self.coord(v, a).inclination

    def global_point(self, v: int, a: int) -> Vector4:
        """Instance (v, a) placed in the global face frame."""
        return transform(self.geometry.face.to_global, self.point(v, a))

    def defined_ids(self) -> List[int]:
        return [i for i, vtx in enumerate(self.vertices) if vtx.defined]

    def instances(self) -> Iterator[Tuple[int, int, Vector4]]:
        """Every (vertex id, region, local point) of the defined vertices."""
        for v in self.defined_ids():
            for a, p in enumerate(self.vertices[v].points):
                yield v, a, p

    # -- construction -----------------------------------------------------

    def create_vertex_by_sc(self, v: int, a: int, azimuth: float, inclination: float) -> None:
        """Place vertex *v* in region *a* on the unit sphere, then replicate it."""
        sc = SphericalCoord(radius=1.0, azimuth=azimuth, inclination=inclination)
        self._place(v, a, sc, to_cartesian(sc))

    def create_vertex_by_strig(self, v: int, a: int, b: float, c: float, C: float) -> None:
        """Place vertex *v* from an oblique triangle (inclination c, azimuth A)."""
        _, sc, p = vertex_from_triangle(b, c, C)
        self._place(v, a, sc, p)

    def create_vertex_from_vertex(self, vd: int, ad: int, vs: int, as_: int, b: float, C: float) -> None:
        """Triangle placement whose side ``c`` is the inclination of instance (vs, as_)."""
        self.create_vertex_by_strig(vd, ad, b, self.inclination(vs, as_), C)

    def _place(self, v: int, a: int, sc: SphericalCoord, p: Vector4) -> None:
        check_region(a)
        vertex = self.vertex(v)
        vertex.coords[a] = sc
        vertex.points[a] = p
        self._generate_all(vertex, a)
        vertex.defined = True

    def _generate_all(self, vertex: Vertex, a: int) -> None:
        face = self.geometry.face
        regions = self.geometry.regions

        known = transform(face.to_global, vertex.points[a])
        global_points = [
            known if i == a else regions.exchange(a, i, known) for i in range(REGION_COUNT)
        ]
        vertex.points = transform_points(face.to_local, global_points)
        vertex.coords = [to_spherical(p, vertex.coords[i]) for i, p in enumerate(vertex.points)]
