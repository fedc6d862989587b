"""Class I (n,0) truncation configurations, n = 2..7.

Each configuration is a fixed construction sequence over a small set of
vertices. Frequencies 2 to 4 are fully determined by the reference triangle;
5 to 7 leave one angle free, which is closed with :func:`search.build_loop`
by requiring two vertex instances to share an inclination.

Every solution is reported through an output layout: a list of
``(vertex, region)`` instances that tile region 0 of the face, and the
triangles connecting them (counter-clockwise seen from outside).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, List, Sequence, Tuple

from .linalg import Vector4
from .search import (
    DEFAULT_INITIAL_STEP,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    SearchResult,
    build_loop,
)
from .spherical import SphericalCoord
from .vertices import LcdGeometry, LcdSession

__all__ = [
    "FREQUENCIES",
    "VERTEX_COUNTS",
    "SEEDS_DEG",
    "OutputLayout",
    "LAYOUTS",
    "SearchSettings",
    "SelectedVertex",
    "Solution",
    "build_20",
    "build_30",
    "build_40",
    "build_50",
    "build_60",
    "build_60_a",
    "build_60_b",
    "build_70_a",
    "build_70_b1",
    "build_70_b2",
    "build_70_b3",
    "log_70_details",
    "solve_20",
    "solve_30",
    "solve_40",
    "solve_50",
    "solve_60",
    "solve_70",
    "solve_frequency",
]

log = logging.getLogger(__name__)

FREQUENCIES: Tuple[int, ...] = (2, 3, 4, 5, 6, 7)

# Session size per frequency (highest vertex id + 1).
VERTEX_COUNTS: Dict[int, int] = {2: 2, 3: 3, 4: 4, 5: 5, 6: 7, 7: 8}

# Starting values of the free angle, found empirically.
SEEDS_DEG: Dict[str, float] = {
    "50": 9.0,
    "60_a": 5.0,
    "60_b": 6.0,
    "70_a": 5.5,
    "70_b": 4.0,
}

_DEG_36 = math.radians(36.0)
_DEG_60 = math.radians(60.0)
_DEG_90 = math.radians(90.0)
_DEG_120 = math.radians(120.0)
_DEG_144 = math.radians(144.0)


@dataclass(frozen=True, slots=True)
class OutputLayout:
    selection: Tuple[Tuple[int, int], ...]
    faces: Tuple[Tuple[int, int, int], ...]


LAYOUTS: Dict[int, OutputLayout] = {
    2: OutputLayout(
        selection=((0, 0), (1, 0), (0, 4), (0, 1)),
        faces=((0, 1, 3), (0, 3, 2)),
    ),
    3: OutputLayout(
        selection=((0, 5), (0, 0), (1, 0), (2, 0), (0, 1)),
        faces=((0, 1, 3), (1, 4, 3), (1, 2, 4)),
    ),
    4: OutputLayout(
        selection=((0, 0), (1, 0), (2, 0), (3, 5), (3, 0), (1, 1), (3, 2)),
        faces=((0, 4, 3), (0, 1, 4), (1, 5, 4), (1, 2, 5), (3, 4, 6)),
    ),
    5: OutputLayout(
        selection=((0, 5), (0, 0), (1, 0), (2, 0), (3, 0), (4, 0), (1, 1), (3, 3), (3, 1)),
        faces=((0, 1, 4), (1, 5, 4), (1, 2, 5), (2, 6, 5), (2, 3, 6), (4, 5, 8), (4, 8, 7)),
    ),
    6: OutputLayout(
        selection=(
            (0, 0), (1, 0), (2, 0), (3, 0),
            (4, 5), (4, 0), (5, 0), (2, 1),
            (6, 0), (4, 1),
        ),
        faces=(
            (0, 1, 5), (0, 5, 4), (1, 2, 6), (1, 6, 5), (2, 3, 7),
            (2, 7, 6), (4, 5, 8), (5, 9, 8), (5, 6, 9),
        ),
    ),
    7: OutputLayout(
        selection=(
            (0, 5), (0, 0), (1, 0), (2, 0), (3, 0),
            (4, 0), (5, 0), (6, 0), (2, 1),
            (7, 5), (7, 0), (5, 1), (7, 2),
        ),
        faces=(
            (0, 1, 5), (1, 6, 5), (1, 2, 6), (2, 7, 6), (2, 3, 7), (3, 8, 7), (3, 4, 8),
            (5, 10, 9), (5, 6, 10), (6, 11, 10), (6, 7, 11),
            (9, 10, 12),
        ),
    ),
}


@dataclass(slots=True)
class SearchSettings:
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    initial_step: float = DEFAULT_INITIAL_STEP

    def run(self, build: Callable[[float], float], seed_deg: float) -> SearchResult:
        return build_loop(
            build,
            math.radians(seed_deg),
            self.tolerance,
            initial_step=self.initial_step,
            max_iterations=self.max_iterations,
        )


@dataclass(slots=True)
class SelectedVertex:
    vertex: int
    region: int
    point: Vector4  # global face frame
    coord: SphericalCoord  # local frame


@dataclass(slots=True)
class Solution:
    """One written configuration: selected instances plus connectivity."""

    frequency: int
    variant: str = ""
    vertices: List[SelectedVertex] = field(default_factory=list)
    faces: List[Tuple[int, int, int]] = field(default_factory=list)
    seed_deg: float | None = None
    search: SearchResult | None = None

    @property
    def residual(self) -> float:
        return self.search.residual if self.search is not None else 0.0

    @property
    def converged(self) -> bool:
        return self.search is None or self.search.converged

    @property
    def points(self) -> List[Tuple[float, float, float]]:
        return [(v.point[0], v.point[1], v.point[2]) for v in self.vertices]

    def filename(self, base_name: str = "icosa", suffix: str = ".off") -> str:
        stem = f"{base_name}{self.frequency}0"
        if self.variant:
            stem += f"_{self.variant}"
        return stem + suffix


# ---------------------------------------------------------------------------
# Construction sequences
# ---------------------------------------------------------------------------


def build_20(session: LcdSession) -> None:
    ref = session.reference
    session.create_vertex_by_sc(0, 0, 0.0, 2 * ref.b + ref.c + ref.a)
    session.create_vertex_by_sc(1, 0, _DEG_36, 2 * (ref.c + ref.a))


def build_30(session: LcdSession) -> None:
    ref = session.reference
    session.create_vertex_by_sc(2, 0, 0.0, 2 * ref.b + ref.c)
    session.create_vertex_by_sc(1, 0, _DEG_36, 2 * (ref.c + ref.a))
    session.create_vertex_from_vertex(0, 1, 2, 0, 2 * ref.b, _DEG_144)


def build_40(session: LcdSession) -> None:
    ref = session.reference
    session.create_vertex_by_sc(2, 0, _DEG_36, 2 * (ref.c + ref.a))
    # Same point as create_vertex_by_sc(0, 1, 18°, 90°).
    session.create_vertex_by_strig(0, 1, 2 * ref.b, _DEG_90, _DEG_144)
    session.create_vertex_by_sc(3, 2, 0.0, _DEG_90)
    session.create_vertex_from_vertex(1, 1, 3, 0, 2 * ref.b, _DEG_144)


def build_50(session: LcdSession, x: float) -> float:
    """Residual for (5,0): v4 and v0 must share an inclination in region 2."""
    ref = session.reference
    session.create_vertex_by_sc(3, 0, 0.0, 2 * ref.b + ref.c + x)
    session.create_vertex_from_vertex(4, 0, 3, 0, 2 * ref.b + ref.c, _DEG_120)
    session.create_vertex_from_vertex(1, 1, 3, 0, 2 * ref.b, _DEG_144)
    session.create_vertex_from_vertex(0, 1, 3, 1, 2 * ref.b, _DEG_144)
    session.create_vertex_by_sc(2, 0, _DEG_36, 2 * (ref.c + ref.a))
    return session.inclination(4, 2) - session.inclination(0, 2)


def build_60(session: LcdSession) -> None:
    """Fixed part of (6,0); v4 is left to one of the two variants."""
    ref = session.reference
    session.create_vertex_by_sc(0, 0, 0.0, 2 * ref.b + ref.c + ref.a)
    session.create_vertex_by_sc(6, 0, 0.0, 2 * ref.b + ref.c)
    session.create_vertex_by_sc(3, 0, _DEG_36, 2 * (ref.c + ref.a))
    session.create_vertex_from_vertex(1, 1, 6, 0, 2 * ref.b, _DEG_144)
    session.create_vertex_by_sc(5, 2, 0.0, session.inclination(1, 2))
    session.create_vertex_from_vertex(2, 1, 5, 0, 2 * ref.b, _DEG_144)


def build_60_a(session: LcdSession, x: float) -> float:
    session.create_vertex_by_sc(4, 0, x, session.inclination(5, 0))
    return session.inclination(4, 1) - session.inclination(1, 1)


def build_60_b(session: LcdSession, x: float) -> float:
    session.create_vertex_by_sc(4, 0, x, session.inclination(5, 0))
    return session.inclination(4, 2) - session.inclination(0, 1)


def build_70_a(session: LcdSession, x: float) -> float:
    """Residual for the first (7,0) stage; places every vertex except v5."""
    ref = session.reference
    session.create_vertex_by_sc(3, 0, _DEG_36, 2 * (ref.a + ref.c))

    session.create_vertex_by_sc(7, 2, 0.0, 2 * ref.b + ref.c - x)
    session.create_vertex_from_vertex(4, 2, 7, 2, 2 * ref.b + ref.c, _DEG_60)
    session.create_vertex_from_vertex(0, 1, 7, 2, 2 * ref.b, _DEG_144)

    session.create_vertex_from_vertex(1, 1, 7, 1, 2 * ref.b, _DEG_144)

    session.create_vertex_from_vertex(6, 0, 4, 0, 2 * ref.b + ref.c, _DEG_120)
    session.create_vertex_from_vertex(2, 1, 4, 0, 2 * ref.b, _DEG_144)
    return session.inclination(6, 2) - session.inclination(1, 2)


def build_70_b1(session: LcdSession, x: float) -> float:
    session.create_vertex_by_sc(5, 2, x, session.inclination(0, 2))
    return session.inclination(5, 1) - session.inclination(1, 1)


def build_70_b2(session: LcdSession, x: float) -> float:
    session.create_vertex_by_sc(5, 2, x, session.inclination(0, 2))
    return session.inclination(5, 0) - session.inclination(4, 0)


def build_70_b3(session: LcdSession, x: float) -> float:
    session.create_vertex_by_sc(5, 0, x, session.inclination(4, 0))
    return session.inclination(5, 1) - session.inclination(1, 1)


def log_70_details(session: LcdSession) -> None:
    """Debug report of the (7,0) inclination groups, in degrees."""
    if not log.isEnabledFor(logging.DEBUG):
        return
    groups: Sequence[Sequence[Tuple[int, int]]] = (
        ((2, 3), (2, 2)),
        ((6, 2), (1, 2)),
        ((5, 2), (0, 2)),
        ((7, 2), (4, 2), (0, 1)),
        ((7, 1), (5, 1), (1, 1)),
        ((4, 0), (5, 0), (6, 0), (2, 1)),
    )
    for group in groups:
        label = " ".join(f"{v},{a}" for v, a in group)
        values = "  ".join(f"{math.degrees(session.inclination(v, a)):12.9f}" for v, a in group)
        log.debug(" %-17s %s", label, values)


# ---------------------------------------------------------------------------
# Solutions
# ---------------------------------------------------------------------------


def _snapshot(
    session: LcdSession,
    frequency: int,
    variant: str = "",
    seed_deg: float | None = None,
    search: SearchResult | None = None,
) -> Solution:
    layout = LAYOUTS[frequency]
    vertices = [
        SelectedVertex(
            vertex=v,
            region=a,
            point=session.global_point(v, a),
            coord=session.coord(v, a),
        )
        for v, a in layout.selection
    ]
    return Solution(
        frequency=frequency,
        variant=variant,
        vertices=vertices,
        faces=list(layout.faces),
        seed_deg=seed_deg,
        search=search,
    )


def _search(
    session: LcdSession,
    build: Callable[[LcdSession, float], float],
    seed_key: str,
    settings: SearchSettings,
) -> SearchResult:
    result = settings.run(partial(build, session), SEEDS_DEG[seed_key])
    if result.converged:
        log.info(
            "  %s converged: x=%.9f deg after %d iterations",
            build.__name__,
            math.degrees(result.value),
            result.iterations,
        )
    return result


def solve_20(session: LcdSession, settings: SearchSettings) -> List[Solution]:
    build_20(session)
    return [_snapshot(session, 2)]


def solve_30(session: LcdSession, settings: SearchSettings) -> List[Solution]:
    build_30(session)
    return [_snapshot(session, 3)]


def solve_40(session: LcdSession, settings: SearchSettings) -> List[Solution]:
    build_40(session)
    return [_snapshot(session, 4)]


def solve_50(session: LcdSession, settings: SearchSettings) -> List[Solution]:
    result = _search(session, build_50, "50", settings)
    return [_snapshot(session, 5, seed_deg=SEEDS_DEG["50"], search=result)]


def solve_60(session: LcdSession, settings: SearchSettings) -> List[Solution]:
    # Known to be incomplete: one constraint per variant, more free parameters.
    solutions = []
    for variant, build in (("a", build_60_a), ("b", build_60_b)):
        log.info("Class I icosahedron (6,0): variant %s", variant.upper())
        build_60(session)
        key = f"60_{variant}"
        result = _search(session, build, key, settings)
        solutions.append(
            _snapshot(session, 6, variant=variant, seed_deg=SEEDS_DEG[key], search=result)
        )
    return solutions


def solve_70(session: LcdSession, settings: SearchSettings) -> List[Solution]:
    _search(session, build_70_a, "70_a", settings)
    log_70_details(session)
    solutions = []
    for variant, build in (("a", build_70_b1), ("b", build_70_b2), ("c", build_70_b3)):
        log.info("Class I icosahedron (7,0): variant %s", variant.upper())
        result = _search(session, build, "70_b", settings)
        log_70_details(session)
        solutions.append(
            _snapshot(session, 7, variant=variant, seed_deg=SEEDS_DEG["70_b"], search=result)
        )
    return solutions


_SOLVERS: Dict[int, Callable[[LcdSession, SearchSettings], List[Solution]]] = {
    2: solve_20,
    3: solve_30,
    4: solve_40,
    5: solve_50,
    6: solve_60,
    7: solve_70,
}


def solve_frequency(
    frequency: int,
    geometry: LcdGeometry,
    settings: SearchSettings | None = None,
) -> List[Solution]:
    """Compute every solution of the (frequency, 0) configuration.

    A fresh session is used per call, so results never depend on a
    previously solved frequency.
    """
    if frequency not in _SOLVERS:
        raise ValueError(f"Unsupported frequency {frequency}; expected one of {FREQUENCIES}")
    log.info("Class I icosahedron (%d,0): computing truncation configuration", frequency)
    session = LcdSession(geometry, vertex_count=VERTEX_COUNTS[frequency])
    return _SOLVERS[frequency](session, settings or SearchSettings())
