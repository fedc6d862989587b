"""Pipeline architecture for the LCD generator.

Breaks one generation run into composable, testable steps. Each step receives
a shared ``PipelineContext`` and can read/write its fields. Steps declare their
own ``should_run`` predicate so the pipeline runner skips irrelevant stages.

Usage::

    from icosa_lcd.pipeline import LcdPipeline, PipelineContext

    ctx = PipelineContext(params=my_params, out_dir=Path("exports"))
    pipeline = LcdPipeline()           # default steps
    pipeline.run(ctx)
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .configurations import FREQUENCIES, SearchSettings, Solution, solve_frequency
from .parameters import GeneratorParameters
from .vertices import LcdGeometry, build_geometry

__all__ = [
    "PipelineContext",
    "PipelineStep",
    "LcdPipeline",
    "GeometryStep",
    "FrequencyStep",
    "OffExportStep",
    "ManifestExportStep",
    "StlExportStep",
    "default_steps",
]


# ---------------------------------------------------------------------------
# Pipeline context: shared state between steps
# ---------------------------------------------------------------------------


@dataclass
class PipelineContext:
    """Mutable state bag passed through every pipeline step."""

    params: GeneratorParameters
    out_dir: Path = field(default_factory=lambda: Path("exports"))

    # Populated by GeometryStep.
    geometry: LcdGeometry | None = None

    # Populated by FrequencyStep, in run order.
    solutions: List[Solution] = field(default_factory=list)

    # Populated by export steps.
    written: List[Path] = field(default_factory=list)

    def search_settings(self) -> SearchSettings:
        return SearchSettings(
            tolerance=self.params.tolerance_rad,
            max_iterations=self.params.max_iterations,
            initial_step=math.radians(self.params.initial_step_deg),
        )


# ---------------------------------------------------------------------------
# Step base class
# ---------------------------------------------------------------------------


class PipelineStep(ABC):
    """A single composable stage of the generation pipeline."""

    name: str = "unnamed"

    def should_run(self, ctx: PipelineContext) -> bool:
        """Return ``False`` to skip this step for the current context."""
        return True

    @abstractmethod
    def execute(self, ctx: PipelineContext) -> None:
        """Perform the step's work, mutating *ctx* as needed."""
        ...


# ---------------------------------------------------------------------------
# Concrete steps
# ---------------------------------------------------------------------------


def _ensure_out_dir(ctx: PipelineContext) -> bool:
    try:
        ctx.out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logging.error("Could not create output folder %s: %s", ctx.out_dir, exc)
        return False
    return True


class GeometryStep(PipelineStep):
    """Build the face/region transforms and the reference triangle."""

    name = "geometry"

    def execute(self, ctx: PipelineContext) -> None:
        ctx.geometry = build_geometry()


class FrequencyStep(PipelineStep):
    """Solve one (n,0) configuration on a fresh vertex session."""

    def __init__(self, frequency: int) -> None:
        self.frequency = frequency
        self.name = f"class_i_{frequency}0"

    def should_run(self, ctx: PipelineContext) -> bool:
        return self.frequency in ctx.params.frequencies

    def execute(self, ctx: PipelineContext) -> None:
        if ctx.geometry is None:
            ctx.geometry = build_geometry()
        solutions = solve_frequency(self.frequency, ctx.geometry, ctx.search_settings())
        for solution in solutions:
            if not solution.converged:
                logging.warning(
                    "(%d,0)%s did not converge; geometry is not valid",
                    solution.frequency,
                    f" variant {solution.variant}" if solution.variant else "",
                )
        ctx.solutions.extend(solutions)


class OffExportStep(PipelineStep):
    """Write one OFF file per solution."""

    name = "off_export"

    def should_run(self, ctx: PipelineContext) -> bool:
        return bool(ctx.solutions)

    def execute(self, ctx: PipelineContext) -> None:
        from .export import write_off

        if not _ensure_out_dir(ctx):
            return
        for solution in ctx.solutions:
            path = ctx.out_dir / solution.filename(ctx.params.base_name)
            try:
                write_off(solution, path, ctx.params.off_digits)
            except OSError as exc:
                logging.error("Could not write %s: %s", path, exc)
                continue
            ctx.written.append(path)


class ManifestExportStep(PipelineStep):
    """Write the JSON vertex manifest."""

    name = "manifest_export"

    def should_run(self, ctx: PipelineContext) -> bool:
        return ctx.params.generate_manifest and bool(ctx.solutions)

    def execute(self, ctx: PipelineContext) -> None:
        from .export import export_manifest

        if not _ensure_out_dir(ctx):
            return
        path = ctx.out_dir / ctx.params.manifest_name
        try:
            export_manifest(ctx.solutions, path, ctx.params.base_name)
        except OSError as exc:
            logging.error("Could not write %s: %s", path, exc)
            return
        ctx.written.append(path)


class StlExportStep(PipelineStep):
    """Export STL meshes through FreeCAD, when available."""

    name = "stl_export"

    def should_run(self, ctx: PipelineContext) -> bool:
        return ctx.params.export_stl and bool(ctx.solutions)

    def execute(self, ctx: PipelineContext) -> None:
        from .export import export_stl

        if not _ensure_out_dir(ctx):
            return
        for solution in ctx.solutions:
            path = ctx.out_dir / solution.filename(ctx.params.base_name, suffix=".stl")
            try:
                if not export_stl(solution, path):
                    return
            except OSError as exc:
                logging.error("Could not write %s: %s", path, exc)
                continue
            ctx.written.append(path)


# ---------------------------------------------------------------------------
# Pipeline orchestrator
# ---------------------------------------------------------------------------


def default_steps() -> List[PipelineStep]:
    """Return the standard ordered list of pipeline steps."""
    steps: List[PipelineStep] = [GeometryStep()]
    steps.extend(FrequencyStep(n) for n in FREQUENCIES)
    steps.extend([OffExportStep(), ManifestExportStep(), StlExportStep()])
    return steps


class LcdPipeline:
    """Orchestrates a full generation run.

    Users can supply a custom step list to re-order, insert, or remove stages.
    """

    def __init__(self, steps: List[PipelineStep] | None = None) -> None:
        self.steps = steps if steps is not None else default_steps()

    @property
    def step_names(self) -> List[str]:
        return [s.name for s in self.steps]

    def run(self, ctx: PipelineContext) -> None:
        """Execute all enabled steps in order."""
        for step in self.steps:
            if step.should_run(ctx):
                logging.info("[pipeline] %s", step.name)
                step.execute(ctx)

    def insert_before(self, reference_name: str, step: PipelineStep) -> None:
        """Insert *step* immediately before the step named *reference_name*."""
        for i, existing in enumerate(self.steps):
            if existing.name == reference_name:
                self.steps.insert(i, step)
                return
        self.steps.append(step)

    def insert_after(self, reference_name: str, step: PipelineStep) -> None:
        """Insert *step* immediately after the step named *reference_name*."""
        for i, existing in enumerate(self.steps):
            if existing.name == reference_name:
                self.steps.insert(i + 1, step)
                return
        self.steps.append(step)

    def remove(self, step_name: str) -> None:
        """Remove the step with the given name, if present."""
        self.steps = [s for s in self.steps if s.name != step_name]

    def replace(self, step_name: str, new_step: PipelineStep) -> None:
        """Replace an existing step with *new_step*."""
        for i, existing in enumerate(self.steps):
            if existing.name == step_name:
                self.steps[i] = new_step
                return
        self.steps.append(new_step)
