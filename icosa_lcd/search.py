"""One-parameter search used to close the free degree of freedom of a configuration.

The residual callable rebuilds the configuration for a trial value and returns
an inclination difference that must vanish. The loop walks the value with a
fixed step while the residual keeps its sign, reverses on overshoot and halves
the step (with a direction flip) whenever the residual changes sign.

This is a heuristic, not a bracketing root finder: a bad seed can wander off,
which is only caught by the iteration cap.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

__all__ = [
    "DEFAULT_TOLERANCE",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_INITIAL_STEP",
    "FAILED_RESIDUAL",
    "SearchResult",
    "build_loop",
]

log = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-11
DEFAULT_MAX_ITERATIONS = 200
DEFAULT_INITIAL_STEP = math.radians(0.5)

# Reported residual when the iteration cap is hit.
FAILED_RESIDUAL = -1.0


@dataclass(slots=True)
class SearchResult:
    value: float
    residual: float  # |diff| on success, FAILED_RESIDUAL otherwise
    iterations: int

    @property
    def converged(self) -> bool:
        return self.residual >= 0.0


def build_loop(
    build: Callable[[float], float],
    seed: float,
    tolerance: float = DEFAULT_TOLERANCE,
    *,
    initial_step: float = DEFAULT_INITIAL_STEP,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> SearchResult:
    """Drive *build* until ``|build(value)| <= tolerance``.

    ``value`` is the last trial passed to *build*, so the caller's session
    holds the converged geometry when this returns. Hitting *max_iterations*
    logs a warning and reports ``FAILED_RESIDUAL``; it never raises.
    """
    if max_iterations < 1:
        raise ValueError("max_iterations must be >= 1")

    value = seed
    delta = initial_step
    lastdiff = 0.0
    iterations = 0

    while True:
        iterations += 1
        diff = build(value)
        if iterations == max_iterations:
            log.warning(
                "Search stopped after %d iterations (value=%.12f, residual=%.3e)",
                iterations,
                value,
                diff,
            )
            return SearchResult(value=value, residual=FAILED_RESIDUAL, iterations=iterations)
        if abs(diff) <= tolerance:
            break

        if diff > 0:
            if lastdiff > 0:
                if diff < lastdiff:
                    value += delta
                else:
                    # Moving away: back off and reverse.
                    value -= delta
                    delta = -delta
                    value += delta
            elif lastdiff < 0:
                # Crossed zero: back off, halve and reverse.
                value -= delta
                delta /= -2.0
                value += delta
            else:
                value += delta
        else:
            if lastdiff < 0:
                if diff > lastdiff:
                    value += delta
                else:
                    value -= delta
                    delta = -delta
                    value += delta
            elif lastdiff > 0:
                value -= delta
                delta /= -2.0
                value += delta
            else:
                value += delta
        lastdiff = diff

    log.debug(
        "Search converged after %d iterations (value=%.12f, residual=%.3e)",
        iterations,
        value,
        diff,
    )
    return SearchResult(value=value, residual=abs(diff), iterations=iterations)
