"""Configuration stack and parameter management for the LCD generator.

Parameters are layered from lowest to highest precedence:

1. Dataclass defaults.
2. JSON file: persistent run configuration. Keys may be given flat or grouped
   in ``"solver"`` / ``"output"`` sections.
3. CLI overrides: runtime tweaks for automation/headless workflows.

The interface is pure Python so unit tests run without FreeCAD.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging
import json

from .configurations import FREQUENCIES

__all__ = [
    "GeneratorParameters",
    "load_json_config",
    "apply_overrides",
    "parse_cli_overrides",
    "load_parameters",
]

_SECTIONS = ("solver", "output")


@dataclass(slots=True)
class GeneratorParameters:
    """Canonical set of adjustable generator parameters."""

    frequencies: List[int] = field(default_factory=lambda: list(FREQUENCIES))
    base_name: str = "icosa"

    # Search knobs.
    tolerance_rad: float = 1e-11
    max_iterations: int = 200
    initial_step_deg: float = 0.5

    # Outputs.
    off_digits: int = 9
    generate_manifest: bool = False
    manifest_name: str = "lcd_manifest.json"
    export_stl: bool = False

    def validate(self) -> None:
        if not self.frequencies:
            raise ValueError("At least one frequency must be selected")
        for freq in self.frequencies:
            if freq not in FREQUENCIES:
                raise ValueError(f"Frequency {freq} outside supported range 2..7")
        if not self.base_name:
            raise ValueError("Base name cannot be empty")
        if self.tolerance_rad <= 0:
            raise ValueError("Tolerance must be positive")
        if self.max_iterations < 1:
            raise ValueError("Max iterations must be at least 1")
        if self.initial_step_deg <= 0:
            raise ValueError("Initial step must be positive")
        if not 1 <= self.off_digits <= 17:
            raise ValueError("OFF digits must be within 1..17")
        if not self.manifest_name:
            raise ValueError("Manifest name cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GeneratorParameters":
        merged = {**asdict(cls()), **data}
        unknown = set(merged) - set(asdict(cls()))
        if unknown:
            raise KeyError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        merged["frequencies"] = [int(f) for f in merged["frequencies"]]
        params = cls(**merged)
        params.validate()
        return params


def load_json_config(path: Path | str | None) -> Dict[str, Any]:
    """Load the JSON config file, flattening known sections; ``None`` gives ``{}``."""

    if path is None:
        return {}
    json_path = Path(path)
    if not json_path.exists():
        raise FileNotFoundError(f"Config file not found: {json_path}")
    data = json.loads(json_path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError("Top-level JSON config must be an object")
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _SECTIONS:
            if not isinstance(value, Mapping):
                raise ValueError(f"Config section '{key}' must be an object")
            flat.update(value)
        else:
            flat[key] = value
    return flat


def apply_overrides(base: GeneratorParameters, overrides: Mapping[str, Any]) -> GeneratorParameters:
    """Return a copy of ``base`` with overrides applied."""

    merged = base.to_dict()
    for key, value in overrides.items():
        if key not in merged:
            raise KeyError(f"Unknown parameter '{key}'")
        merged[key] = value
    return GeneratorParameters.from_dict(merged)


def parse_cli_overrides(
    args: Optional[Iterable[str]] = None,
) -> Tuple[Dict[str, Any], Any]:
    """Parse CLI-style overrides using argparse conventions."""

    import argparse

    parser = argparse.ArgumentParser(description="Class I icosahedron LCD generator")
    parser.add_argument("--config", type=str, help="Path to JSON config", default=None)
    parser.add_argument("--out-dir", type=str, default="exports", help="Export folder")
    parser.add_argument(
        "--frequency",
        type=int,
        action="append",
        choices=list(FREQUENCIES),
        help="Frequency n of the (n,0) configuration; repeat to select several",
    )
    parser.add_argument("--base-name", type=str, help="Output file prefix")
    parser.add_argument("--tolerance", type=float, help="Search tolerance in radians")
    parser.add_argument("--max-iterations", type=int, help="Search iteration cap")
    parser.add_argument("--initial-step", type=float, help="Initial search step in degrees")
    parser.add_argument("--digits", type=int, help="Decimal places per OFF coordinate")
    parser.add_argument(
        "--manifest",
        action="store_true",
        help="Also write a JSON vertex manifest",
    )
    parser.add_argument(
        "--stl",
        action="store_true",
        help="Also write STL meshes (requires FreeCAD)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parsed, unknown = parser.parse_known_args(args=args)
    if unknown:
        logging.info("Ignoring unknown CLI args: %s", " ".join(unknown))
    overrides: Dict[str, Any] = {}
    if parsed.frequency:
        overrides["frequencies"] = sorted(set(parsed.frequency))
    if parsed.base_name is not None:
        overrides["base_name"] = parsed.base_name
    if parsed.tolerance is not None:
        overrides["tolerance_rad"] = parsed.tolerance
    if parsed.max_iterations is not None:
        overrides["max_iterations"] = parsed.max_iterations
    if parsed.initial_step is not None:
        overrides["initial_step_deg"] = parsed.initial_step
    if parsed.digits is not None:
        overrides["off_digits"] = parsed.digits
    if parsed.manifest:
        overrides["generate_manifest"] = True
    if parsed.stl:
        overrides["export_stl"] = True

    return overrides, parsed


def load_parameters(
    config_path: Path | str | None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> GeneratorParameters:
    """Load parameters using the JSON → CLI precedence chain."""

    data = load_json_config(config_path)
    params = GeneratorParameters.from_dict(data)
    if cli_overrides:
        params = apply_overrides(params, cli_overrides)
    return params
