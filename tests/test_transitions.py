import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure the repository root is on the path so ``trackspline`` is importable
sys.path.append(str(Path(__file__).resolve().parents[1]))

from trackspline.easing import TransitionCurve
from trackspline.transitions import (
    EasingSegment,
    FastTransitionSchedule,
    Forces,
    TransitionSchedule,
)


def _flat(duration: float) -> list[EasingSegment]:
    return [EasingSegment(TransitionCurve.LINEAR, 0.0, duration)]


def test_single_linear_segment_halfway() -> None:
    schedule = TransitionSchedule(
        vertical=[EasingSegment(TransitionCurve.LINEAR, 3.0, 2.0, center=0.0, tension=0.0)]
    )
    forces = schedule.evaluate(1.0)
    assert forces is not None
    assert forces.vertical == pytest.approx(1.5)
    assert forces.lateral == 0.0
    assert forces.roll == 0.0


def test_fast_single_linear_segment_halfway() -> None:
    schedule = TransitionSchedule(
        vertical=[EasingSegment(TransitionCurve.LINEAR, 3.0, 2.0)],
        lateral=_flat(2.0),
        roll=_flat(2.0),
    )
    forces = schedule.compile().evaluate(1.0)
    assert forces is not None
    assert forces.vertical == pytest.approx(1.5)


def test_length_is_shortest_channel() -> None:
    schedule = TransitionSchedule(
        vertical=_flat(1.0) + _flat(2.0),
        lateral=_flat(2.5),
        roll=_flat(4.0),
    )
    assert schedule.length() == pytest.approx(2.5)
    assert schedule.compile().length() == schedule.length()


def test_empty_channel_has_zero_length() -> None:
    schedule = TransitionSchedule(vertical=_flat(1.0), lateral=_flat(1.0))
    assert schedule.length() == 0.0
    assert schedule.compile().evaluate(0.0) is None


def test_segments_accumulate_terminal_values() -> None:
    schedule = TransitionSchedule(
        vertical=[
            EasingSegment(TransitionCurve.LINEAR, 1.0, 1.0),
            EasingSegment(TransitionCurve.LINEAR, 2.0, 1.0),
        ],
        lateral=_flat(2.0),
        roll=_flat(2.0),
    )
    assert schedule.evaluate(1.0).vertical == pytest.approx(1.0)
    assert schedule.evaluate(1.5).vertical == pytest.approx(2.0)
    # Past the end of the channel the accumulated value is held.
    assert schedule.evaluate(5.0).vertical == pytest.approx(3.0)


def test_bump_segment_returns_to_previous_value() -> None:
    schedule = TransitionSchedule(
        vertical=[
            EasingSegment(TransitionCurve.LINEAR, 0.5, 1.0),
            EasingSegment(TransitionCurve.PLATEAU, 2.0, 1.0),
            EasingSegment(TransitionCurve.LINEAR, 0.0, 1.0),
        ],
        lateral=_flat(3.0),
        roll=_flat(3.0),
    )
    assert schedule.evaluate(1.5).vertical == pytest.approx(0.5 + 2.0 * (1.0 - np.exp(-15.0)))
    assert schedule.evaluate(2.5).vertical == pytest.approx(0.5)


def test_negative_time_is_rejected() -> None:
    schedule = TransitionSchedule(_flat(1.0), _flat(1.0), _flat(1.0))
    assert schedule.evaluate(-1e-9) is None
    assert schedule.compile().evaluate(-1e-9) is None


def test_fast_rejects_time_at_or_past_length() -> None:
    schedule = TransitionSchedule(_flat(1.0), _flat(1.0), _flat(1.0))
    fast = schedule.compile()
    assert fast.evaluate(1.0) is None
    assert fast.evaluate(2.0) is None
    assert fast.evaluate(0.999) is not None


def test_segment_duration_must_be_positive() -> None:
    with pytest.raises(ValueError, match="duration"):
        EasingSegment(TransitionCurve.LINEAR, 1.0, 0.0)


def test_forces_arithmetic() -> None:
    a = Forces(1.0, 0.5, 10.0)
    b = Forces(0.25, -0.5, 5.0)
    assert a + b == Forces(1.25, 0.0, 15.0)
    assert a - b == Forces(0.75, 1.0, 5.0)


def _random_channel(rng: np.random.Generator) -> list[EasingSegment]:
    curves = list(TransitionCurve)
    segments = []
    for _ in range(int(rng.integers(1, 21))):
        center = 0.0 if rng.random() < 0.3 else float(rng.uniform(-3.0, 3.0))
        tension = 0.0 if rng.random() < 0.3 else float(rng.uniform(-3.0, 3.0))
        segments.append(
            EasingSegment(
                curve=curves[int(rng.integers(len(curves)))],
                value=float(rng.uniform(-5.0, 5.0)),
                duration=float(rng.uniform(0.01, 2.0)),
                center=center,
                tension=tension,
            )
        )
    return segments


def test_fast_evaluator_matches_linear_exactly() -> None:
    rng = np.random.default_rng(1234)
    for _ in range(40):
        schedule = TransitionSchedule(
            _random_channel(rng), _random_channel(rng), _random_channel(rng)
        )
        fast = FastTransitionSchedule.from_schedule(schedule)
        length = schedule.length()

        times = list(rng.uniform(0.0, length, 200))
        times.append(0.0)
        # Segment boundaries are where a lookup is most likely to disagree.
        for channel in (schedule.vertical, schedule.lateral, schedule.roll):
            accum = 0.0
            for segment in channel:
                accum += segment.duration
                if accum < length:
                    times.append(accum)

        for t in times:
            t = float(t)
            assert fast.evaluate(t) == schedule.evaluate(t)


def test_fast_evaluator_matches_on_dense_grid() -> None:
    schedule = TransitionSchedule(
        vertical=[
            EasingSegment(TransitionCurve.CUBIC, 1.5, 0.4, center=1.0),
            EasingSegment(TransitionCurve.QUARTIC_BUMP, -0.7, 0.3, tension=2.0),
            EasingSegment(TransitionCurve.QUADRATIC, -1.5, 0.5, center=-0.5, tension=-1.0),
        ],
        lateral=[EasingSegment(TransitionCurve.PLATEAU, 0.8, 1.2)],
        roll=[
            EasingSegment(TransitionCurve.LINEAR, 90.0, 0.6),
            EasingSegment(TransitionCurve.LINEAR, -90.0, 0.6),
        ],
    )
    fast = schedule.compile()
    t = 0.0
    while t < fast.length():
        assert fast.evaluate(t) == schedule.evaluate(t)
        t += 0.001
