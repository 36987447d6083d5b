"""Force transition schedules for force-driven track segments.

A :class:`TransitionSchedule` holds three independent channels (vertical,
lateral and roll).  Each channel is an ordered list of
:class:`EasingSegment` objects, each easing from the value reached by the
previous segment towards ``previous + value`` over ``duration`` seconds.

Two evaluators share the same interface (:class:`ForceEvaluator`):

``TransitionSchedule``
    Walks the segments of every channel on each query.  Simple and used as
    the reference implementation.
``FastTransitionSchedule``
    Precomputes absolute start times and start values and locates the active
    segment with a binary search.  Force segments query their schedule every
    integration step, so they compile to this form.

Both return ``None`` for times outside their domain instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import List, Optional, Protocol, Sequence

import numpy as np

from .easing import TransitionCurve


@dataclass(frozen=True)
class Forces:
    """Vertical and lateral load in g and roll rate in degrees per second."""

    vertical: float
    lateral: float
    roll: float

    def __add__(self, other: "Forces") -> "Forces":
        return Forces(
            self.vertical + other.vertical,
            self.lateral + other.lateral,
            self.roll + other.roll,
        )

    def __sub__(self, other: "Forces") -> "Forces":
        return Forces(
            self.vertical - other.vertical,
            self.lateral - other.lateral,
            self.roll - other.roll,
        )


@dataclass(frozen=True)
class EasingSegment:
    """A single transition within one channel of a schedule.

    Parameters
    ----------
    curve:
        Shape of the transition.
    value:
        Signed change applied over the segment.
    duration:
        Length of the segment in seconds.  Must be positive.
    center, tension:
        Time-warp controls, see :func:`~trackspline.easing.timewarp`.
    dynamic_length:
        Authoring flag preserved through the JSON format.  It has no effect
        on evaluation.
    """

    curve: TransitionCurve
    value: float
    duration: float
    center: float = 0.0
    tension: float = 0.0
    dynamic_length: bool = False

    def __post_init__(self) -> None:
        if not (math.isfinite(self.duration) and self.duration > 0):
            raise ValueError("transition duration must be positive and finite")
        for name in ("value", "center", "tension"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"transition {name} must be finite")

    def terminal_value(self) -> float:
        """Contribution of the segment once it has fully elapsed."""
        return self.value * self.curve.evaluate(1.0)

    def value_at(self, local_time: float) -> float:
        """Contribution ``local_time`` seconds into the segment."""
        return (
            self.curve.eval_timewarp(local_time / self.duration, self.center, self.tension)
            * self.value
        )


class ForceEvaluator(Protocol):
    """Anything that can be queried for forces at a schedule time."""

    def length(self) -> float:
        ...

    def evaluate(self, time: float) -> Optional[Forces]:
        ...


def _channel_length(segments: Sequence[EasingSegment]) -> float:
    return sum(s.duration for s in segments)


@dataclass
class TransitionSchedule:
    """Linear-scan evaluator over three channels of easing segments."""

    vertical: List[EasingSegment] = field(default_factory=list)
    lateral: List[EasingSegment] = field(default_factory=list)
    roll: List[EasingSegment] = field(default_factory=list)

    def length(self) -> float:
        """Usable duration: the shortest of the three channel totals."""
        return min(
            _channel_length(self.vertical),
            _channel_length(self.lateral),
            _channel_length(self.roll),
        )

    @staticmethod
    def _evaluate_channel(segments: Sequence[EasingSegment], time: float) -> float:
        time_accum = 0.0
        value = 0.0
        for segment in segments:
            if time_accum <= time <= time_accum + segment.duration:
                value += segment.value_at(time - time_accum)
                break
            value += segment.terminal_value()
            time_accum += segment.duration
        return value

    def evaluate(self, time: float) -> Optional[Forces]:
        """Return the scheduled forces at ``time`` or ``None`` if ``time < 0``.

        Past the end of a channel its final accumulated value is held.
        """
        if time < 0.0:
            return None
        return Forces(
            self._evaluate_channel(self.vertical, time),
            self._evaluate_channel(self.lateral, time),
            self._evaluate_channel(self.roll, time),
        )

    def compile(self) -> "FastTransitionSchedule":
        """Precompute a :class:`FastTransitionSchedule` for repeated queries."""
        return FastTransitionSchedule.from_schedule(self)


@dataclass(frozen=True)
class _AbsoluteChannel:
    """One channel with absolute start times and start values."""

    segments: tuple
    starts: tuple
    start_values: tuple
    ends: np.ndarray

    @classmethod
    def from_segments(cls, segments: Sequence[EasingSegment]) -> "_AbsoluteChannel":
        starts: list[float] = []
        start_values: list[float] = []
        ends: list[float] = []
        # Accumulate in segment order so prefix sums match the linear walk exactly.
        time_accum = 0.0
        value_accum = 0.0
        for segment in segments:
            starts.append(time_accum)
            start_values.append(value_accum)
            ends.append(time_accum + segment.duration)
            time_accum += segment.duration
            value_accum += segment.terminal_value()
        return cls(tuple(segments), tuple(starts), tuple(start_values), np.array(ends, dtype=float))

    def evaluate(self, time: float) -> float:
        if not self.segments:
            return 0.0
        # First segment whose end reaches ``time``: the rightmost segment
        # starting strictly before ``time`` (segment 0 when ``time == 0``).
        idx = int(np.searchsorted(self.ends, time, side="left"))
        idx = min(max(idx, 0), len(self.segments) - 1)
        segment = self.segments[idx]
        return self.start_values[idx] + segment.value_at(time - self.starts[idx])


class FastTransitionSchedule:
    """Binary-search evaluator precomputed from a :class:`TransitionSchedule`.

    Evaluation is ``O(log n)`` per channel and returns exactly the same values
    as the linear evaluator for every ``0 <= time < length()``.
    """

    def __init__(self, vertical: _AbsoluteChannel, lateral: _AbsoluteChannel,
                 roll: _AbsoluteChannel, length: float) -> None:
        self._vertical = vertical
        self._lateral = lateral
        self._roll = roll
        self._length = length

    @classmethod
    def from_schedule(cls, schedule: TransitionSchedule) -> "FastTransitionSchedule":
        return cls(
            _AbsoluteChannel.from_segments(schedule.vertical),
            _AbsoluteChannel.from_segments(schedule.lateral),
            _AbsoluteChannel.from_segments(schedule.roll),
            schedule.length(),
        )

    def length(self) -> float:
        return self._length

    def evaluate(self, time: float) -> Optional[Forces]:
        """Return the scheduled forces, or ``None`` outside ``[0, length)``."""
        if time < 0.0 or time >= self._length:
            return None
        return Forces(
            self._vertical.evaluate(time),
            self._lateral.evaluate(time),
            self._roll.evaluate(time),
        )


__all__ = [
    "Forces",
    "EasingSegment",
    "ForceEvaluator",
    "TransitionSchedule",
    "FastTransitionSchedule",
]
