#!/usr/bin/env python3
"""Headless entry point for the LCD truncation generator."""

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from icosa_lcd.parameters import load_parameters, parse_cli_overrides
from icosa_lcd.pipeline import LcdPipeline, PipelineContext


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def main() -> int:
    overrides, cli = parse_cli_overrides(_sanitized_args())
    configure_logging(cli.verbose)
    config_path = _resolve_config_path(cli.config)
    params = load_parameters(config_path, overrides)
    logging.info(
        "Parameters: frequencies=%s tolerance=%.1e max_iterations=%d",
        params.frequencies,
        params.tolerance_rad,
        params.max_iterations,
    )

    ctx = PipelineContext(params=params, out_dir=Path(cli.out_dir))
    LcdPipeline().run(ctx)

    failed = [s for s in ctx.solutions if not s.converged]
    logging.info(
        "Done: %d solutions, %d files written, %d not converged",
        len(ctx.solutions),
        len(ctx.written),
        len(failed),
    )
    return 0


def _sanitized_args() -> List[str]:
    return [arg for arg in sys.argv[1:] if arg not in {"--", "-"}]


def _default_config_path() -> str | None:
    candidate = REPO_ROOT / "configs" / "base.json"
    if candidate.exists():
        return str(candidate)
    return None


def _resolve_config_path(cli_config: str | None) -> str | None:
    if cli_config:
        path = Path(cli_config)
        if path.exists():
            return str(path)
        logging.warning("Config file %s not found; trying project default", path)
    default = _default_config_path()
    if default is None:
        logging.info("No configuration file found; using built-in defaults")
    return default


if __name__ == "__main__":
    sys.exit(main())
