"""Easing curves used to shape force transitions.

Each :class:`TransitionCurve` maps a normalised progress ``t`` in ``[0, 1]``
to a normalised output.  Inputs outside the unit interval are clamped rather
than rejected.  :func:`timewarp` re-parameterises progress before a shape is
applied, biasing it towards the start or end (``center``) and redistributing
it between the ends and the middle (``tension``).

Note that :attr:`TransitionCurve.PLATEAU` and
:attr:`TransitionCurve.QUARTIC_BUMP` are bumps, not ramps: both are zero at
either end, so a segment using them contributes nothing once it has elapsed.
"""

from __future__ import annotations

from enum import Enum
import math

# Centre and tension values smaller than this leave progress unchanged.
WARP_DEADZONE = 0.01


class TransitionCurve(Enum):
    """Shape of a single transition, named as in the track JSON format."""

    LINEAR = "linear"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"
    PLATEAU = "plateau"
    QUARTIC_BUMP = "quartic-bump"

    @classmethod
    def from_name(cls, name: str) -> "TransitionCurve":
        """Return the curve called ``name`` (``"quartic-bump"`` etc.)."""
        try:
            return cls(name)
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"unknown transition curve '{name}' (expected one of: {valid})") from None

    def evaluate(self, t: float) -> float:
        """Evaluate the shape at progress ``t`` (clamped to ``[0, 1]``)."""
        t = min(max(t, 0.0), 1.0)
        if self is TransitionCurve.LINEAR:
            return t
        if self is TransitionCurve.QUADRATIC:
            if t < 0.5:
                return 2.0 * t * t
            return 1.0 - (-2.0 * t + 2.0) ** 2 / 2.0
        if self is TransitionCurve.CUBIC:
            if t < 0.5:
                return 4.0 * t * t * t
            return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0
        if self is TransitionCurve.PLATEAU:
            return 1.0 - math.exp(-15.0 * (1.0 - abs(2.0 * t - 1.0)) ** 3)
        # QUARTIC_BUMP
        return t * t * (16.0 + t * (-32.0 + t * 16.0))

    def eval_timewarp(self, t: float, center: float, tension: float) -> float:
        """Evaluate the shape after warping ``t`` with ``center`` and ``tension``."""
        return self.evaluate(timewarp(t, center, tension))


def timewarp_center(t: float, center: float) -> float:
    """Bias progress towards the end (``center > 0``) or the start (``center < 0``)."""
    if abs(center) < WARP_DEADZONE:
        return t
    if center > 0.0:
        return t ** (2.0 ** (center / 2.0))
    return 1.0 - (1.0 - t) ** (2.0 ** (-center / 2.0))


def timewarp_tension(t: float, tension: float) -> float:
    """Speed up the ends and slow the middle (``tension > 0``), or the reverse (``tension < 0``)."""
    if abs(tension) < WARP_DEADZONE:
        return t
    if tension > 0.0:
        return 0.5 * (math.sinh(2.0 * tension * (t - 0.5)) / math.sinh(tension) + 1.0)
    return 0.5 * (math.asinh(2.0 * math.sinh(tension) * (t - 0.5)) / tension + 1.0)


def timewarp(t: float, center: float, tension: float) -> float:
    """Apply the centre warp followed by the tension warp.

    ``t`` is clamped to ``[0, 1]`` first so the power curves stay real.
    """
    t = min(max(t, 0.0), 1.0)
    return timewarp_tension(timewarp_center(t, center), tension)


def evaluate(curve: TransitionCurve, t: float) -> float:
    """Functional form of :meth:`TransitionCurve.evaluate`."""
    return curve.evaluate(t)


def eval_timewarp(curve: TransitionCurve, t: float, center: float, tension: float) -> float:
    """Functional form of :meth:`TransitionCurve.eval_timewarp`."""
    return curve.eval_timewarp(t, center, tension)


__all__ = [
    "TransitionCurve",
    "timewarp",
    "timewarp_center",
    "timewarp_tension",
    "evaluate",
    "eval_timewarp",
]
