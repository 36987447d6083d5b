import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure the repository root is on the path so ``trackspline`` is importable
sys.path.append(str(Path(__file__).resolve().parents[1]))

from trackspline.easing import (
    TransitionCurve,
    eval_timewarp,
    evaluate,
    timewarp,
    timewarp_center,
    timewarp_tension,
)


@pytest.mark.parametrize("curve", list(TransitionCurve))
def test_all_curves_start_at_zero(curve: TransitionCurve) -> None:
    assert evaluate(curve, 0.0) == 0.0


@pytest.mark.parametrize(
    "curve", [TransitionCurve.LINEAR, TransitionCurve.QUADRATIC, TransitionCurve.CUBIC]
)
def test_ramps_end_at_one(curve: TransitionCurve) -> None:
    assert evaluate(curve, 1.0) == 1.0
    assert evaluate(curve, 0.5) == pytest.approx(0.5)


def test_bump_shapes_return_to_zero() -> None:
    # Both bump shapes reproduce their literal formulas: zero at t = 1.
    assert evaluate(TransitionCurve.QUARTIC_BUMP, 1.0) == 0.0
    assert evaluate(TransitionCurve.PLATEAU, 1.0) == 0.0
    assert evaluate(TransitionCurve.QUARTIC_BUMP, 0.5) == pytest.approx(1.0)
    assert evaluate(TransitionCurve.PLATEAU, 0.5) == pytest.approx(1.0 - np.exp(-15.0))


def test_quartic_bump_literal_polynomial() -> None:
    for t in np.linspace(0.0, 1.0, 11):
        expected = t * t * (16.0 - 32.0 * t + 16.0 * t * t)
        assert evaluate(TransitionCurve.QUARTIC_BUMP, t) == pytest.approx(expected)


@pytest.mark.parametrize("curve", list(TransitionCurve))
def test_inputs_are_clamped(curve: TransitionCurve) -> None:
    assert evaluate(curve, -3.0) == evaluate(curve, 0.0)
    assert evaluate(curve, 7.5) == evaluate(curve, 1.0)


@pytest.mark.parametrize(
    "curve", [TransitionCurve.LINEAR, TransitionCurve.QUADRATIC, TransitionCurve.CUBIC]
)
def test_ramps_are_monotone_and_continuous(curve: TransitionCurve) -> None:
    t = np.linspace(0.0, 1.0, 1001)
    values = np.array([curve.evaluate(v) for v in t])
    assert np.all(np.diff(values) >= 0.0)
    assert np.max(np.abs(np.diff(values))) < 0.01


def test_plateau_is_symmetric() -> None:
    t = np.linspace(0.0, 0.5, 26)
    left = [TransitionCurve.PLATEAU.evaluate(v) for v in t]
    right = [TransitionCurve.PLATEAU.evaluate(1.0 - v) for v in t]
    assert np.allclose(left, right)


def test_timewarp_deadzone_is_identity() -> None:
    for t in (0.0, 0.3, 0.77, 1.0):
        assert timewarp(t, 0.005, -0.009) == t


def test_timewarp_center_bias() -> None:
    assert timewarp_center(0.5, 2.0) == pytest.approx(0.25)
    assert timewarp_center(0.5, -2.0) == pytest.approx(0.75)


@pytest.mark.parametrize("tension", [-3.0, -0.5, 0.5, 3.0])
def test_timewarp_tension_keeps_endpoints_and_midpoint(tension: float) -> None:
    assert timewarp_tension(0.0, tension) == pytest.approx(0.0, abs=1e-12)
    assert timewarp_tension(0.5, tension) == pytest.approx(0.5)
    assert timewarp_tension(1.0, tension) == pytest.approx(1.0)


def test_positive_tension_speeds_up_ends() -> None:
    assert timewarp_tension(0.1, 2.0) > 0.1
    assert timewarp_tension(0.1, -2.0) < 0.1


def test_eval_timewarp_composes() -> None:
    curve = TransitionCurve.CUBIC
    t, center, tension = 0.4, 1.0, 1.5
    assert eval_timewarp(curve, t, center, tension) == curve.evaluate(timewarp(t, center, tension))


def test_timewarp_clamps_out_of_range_progress() -> None:
    assert timewarp(-0.5, 1.0, 0.0) == 0.0
    assert timewarp(1.5, -1.0, 0.0) == 1.0


def test_curve_names() -> None:
    assert TransitionCurve.from_name("quartic-bump") is TransitionCurve.QUARTIC_BUMP
    assert TransitionCurve.from_name("linear") is TransitionCurve.LINEAR
    with pytest.raises(ValueError, match="unknown transition curve"):
        TransitionCurve.from_name("sine")
