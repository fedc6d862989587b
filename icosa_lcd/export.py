"""Export utilities for the LCD generator.

Handles OFF geometry files, the JSON vertex manifest and optional STL meshes.
FreeCAD imports are lazy so the module can be imported in headless/test
environments.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from .configurations import Solution

__all__ = [
    "format_off",
    "write_off",
    "read_off",
    "export_manifest",
    "export_stl",
]

Point = Tuple[float, float, float]
Face = Tuple[int, int, int]


# ---------------------------------------------------------------------------
# OFF export
# ---------------------------------------------------------------------------

def format_off(points: Sequence[Sequence[float]], faces: Sequence[Sequence[int]], digits: int = 9) -> str:
    """Render points and triangles as OFF text (no edge count)."""
    width = digits + 3
    lines = ["OFF", f"{len(points)} {len(faces)} 0"]
    for p in points:
        lines.append(" ".join(f"{float(p[i]):{width}.{digits}f}" for i in range(3)))
    for face in faces:
        lines.append("3 " + " ".join(str(int(i)) for i in face))
    return "\n".join(lines) + "\n"


def write_off(solution: Solution, destination: Path, digits: int = 9) -> None:
    """Write one solution's global-frame points and faces to *destination*."""
    destination.write_text(format_off(solution.points, solution.faces, digits), encoding="utf-8")
    logging.info("Wrote geometry %s", destination)


def read_off(source: Path) -> Tuple[List[Point], List[Face]]:
    """Parse a triangle-only OFF file written by :func:`write_off`."""
    tokens = [
        line.split()
        for line in source.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]
    if not tokens or tokens[0] != ["OFF"]:
        raise ValueError(f"{source} is not an OFF file")
    try:
        n_points, n_faces = int(tokens[1][0]), int(tokens[1][1])
    except (IndexError, ValueError) as exc:
        raise ValueError(f"{source}: malformed OFF header") from exc
    body = tokens[2:]
    if len(body) < n_points + n_faces:
        raise ValueError(f"{source}: expected {n_points} points and {n_faces} faces")

    points: List[Point] = []
    for row in body[:n_points]:
        points.append((float(row[0]), float(row[1]), float(row[2])))
    faces: List[Face] = []
    for row in body[n_points:n_points + n_faces]:
        if int(row[0]) != 3:
            raise ValueError(f"{source}: only triangular faces are supported")
        faces.append((int(row[1]), int(row[2]), int(row[3])))
    return points, faces


# ---------------------------------------------------------------------------
# Manifest export
# ---------------------------------------------------------------------------

def _solution_entry(solution: Solution, base_name: str) -> Dict[str, Any]:
    return {
        "file": solution.filename(base_name),
        "frequency": solution.frequency,
        "variant": solution.variant or None,
        "seed_deg": solution.seed_deg,
        "iterations": solution.search.iterations if solution.search is not None else 0,
        "residual": solution.residual,
        "converged": solution.converged,
        "vertices": [
            {
                "vertex": v.vertex,
                "region": v.region,
                "xyz": [v.point[0], v.point[1], v.point[2]],
                "azimuth_deg": math.degrees(v.coord.azimuth),
                "inclination_deg": math.degrees(v.coord.inclination),
            }
            for v in solution.vertices
        ],
        "faces": [list(face) for face in solution.faces],
    }


def export_manifest(solutions: Sequence[Solution], destination: Path, base_name: str = "icosa") -> None:
    """Write per-solution metadata as a JSON manifest."""
    manifest = [_solution_entry(s, base_name) for s in solutions]
    destination.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    logging.info("Wrote manifest %s", destination)


# ---------------------------------------------------------------------------
# STL export (FreeCAD)
# ---------------------------------------------------------------------------

def export_stl(solution: Solution, destination: Path) -> bool:
    """Write the solution's triangles as an STL mesh through FreeCAD's ``Mesh``.

    Returns ``False`` without writing when FreeCAD is not importable.
    """
    try:
        import Mesh  # type: ignore
    except ImportError:
        logging.warning("Mesh not available; skipping STL export")
        return False

    points = solution.points
    triangles = [[points[i] for i in face] for face in solution.faces]
    mesh = Mesh.Mesh(triangles)
    mesh.write(str(destination))
    logging.info("Wrote STL %s", destination)
    return True
