import logging
import math

import pytest

from icosa_lcd.search import (
    DEFAULT_INITIAL_STEP,
    FAILED_RESIDUAL,
    SearchResult,
    build_loop,
)


def test_converges_on_linear_residual():
    result = build_loop(lambda x: x - 0.1, 0.0)
    assert result.converged
    assert result.residual <= 1e-11
    assert math.isclose(result.value, 0.1, abs_tol=1e-11)
    assert result.iterations < 200


def test_converges_with_larger_initial_step():
    result = build_loop(lambda x: x - 1.2345, 0.0, 1e-11, initial_step=0.05)
    assert result.converged
    assert math.isclose(result.value, 1.2345, abs_tol=1e-11)
    assert result.iterations < 200


def test_default_step_converges_just_under_cap():
    """A far root with the default half-degree step needs nearly the full budget."""
    result = build_loop(lambda x: x - 1.2345, 0.0)
    assert result.converged
    assert result.iterations == 198
    assert math.isclose(result.value, 1.2345, abs_tol=1e-11)


def test_immediate_convergence_keeps_seed():
    result = build_loop(lambda x: 0.0, 0.3)
    assert result == SearchResult(value=0.3, residual=0.0, iterations=1)


def test_first_step_and_overshoot_reversal():
    trials = []

    def residual(x):
        trials.append(x)
        return x + 1.0

    build_loop(residual, 0.0, max_iterations=3)
    d = DEFAULT_INITIAL_STEP
    assert trials[0] == 0.0
    assert math.isclose(trials[1], d)
    # Residual grew: back off and step the other way.
    assert math.isclose(trials[2], -d)


def test_sign_change_halves_step():
    trials = []

    def residual(x):
        trials.append(x)
        return x - 0.6 * DEFAULT_INITIAL_STEP

    build_loop(residual, 0.0, max_iterations=4)
    d = DEFAULT_INITIAL_STEP
    # 0 -> d overshoots the root; back to 0 then half a step backwards.
    assert math.isclose(trials[2], -d / 2)
    assert math.isclose(trials[3], d / 4)


def test_iteration_cap_returns_sentinel(caplog):
    calls = []

    def residual(x):
        calls.append(x)
        return 1.0

    with caplog.at_level(logging.WARNING, logger="icosa_lcd.search"):
        result = build_loop(residual, 0.0)
    assert len(calls) == 200
    assert result.residual == FAILED_RESIDUAL
    assert not result.converged
    assert result.iterations == 200
    assert "200 iterations" in caplog.text


def test_rejects_non_positive_cap():
    with pytest.raises(ValueError):
        build_loop(lambda x: x, 0.0, max_iterations=0)
