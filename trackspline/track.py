"""Declarative track description.

A :class:`Track` is an ordered list of segments, a :class:`TrackConfig`
holding the friction model settings and an anchor point giving the initial
position and speed.  Three segment kinds are supported:

``StraightSegment``
    A straight run of ``length`` metres.
``CurvedSegment``
    A circular arc of ``radius`` metres swept through ``angle`` degrees.
    ``direction`` rotates the turn axis about the direction of travel:
    ``0`` bends the path upwards and ``90`` turns it to the right.
``ForceSegment``
    A free-form segment whose shape follows from the forces prescribed by a
    :class:`~trackspline.transitions.TransitionSchedule`.

Every segment may declare ``fixed_speed`` to bypass the friction model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import List, Optional, Union

from scipy.spatial.transform import Rotation

from .spline import PathPoint
from .transitions import TransitionSchedule


def _check_positive(value: float, message: str) -> None:
    if not (math.isfinite(value) and value > 0):
        raise ValueError(message)


def _check_fixed_speed(fixed_speed: Optional[float]) -> None:
    if fixed_speed is not None:
        _check_positive(fixed_speed, "fixed_speed must be positive and finite when given")


@dataclass(frozen=True)
class TrackConfig:
    """Friction model settings shared by all segments of a track."""

    friction_parameter: float = 0.0
    drag_coefficient: float = 0.0
    heartline_height: float = 0.0


@dataclass(frozen=True)
class StraightSegment:
    length: float
    fixed_speed: Optional[float] = None

    def __post_init__(self) -> None:
        _check_positive(self.length, "straight segment length must be positive and finite")
        _check_fixed_speed(self.fixed_speed)


@dataclass(frozen=True)
class CurvedSegment:
    radius: float
    angle: float
    direction: float = 0.0
    fixed_speed: Optional[float] = None

    def __post_init__(self) -> None:
        _check_positive(self.radius, "curved segment radius must be positive and finite")
        _check_positive(self.angle, "curved segment angle must be positive and finite")
        if not math.isfinite(self.direction):
            raise ValueError("curved segment direction must be finite")
        _check_fixed_speed(self.fixed_speed)


@dataclass(frozen=True)
class ForceSegment:
    transitions: TransitionSchedule
    fixed_speed: Optional[float] = None

    def __post_init__(self) -> None:
        _check_fixed_speed(self.fixed_speed)


TrackSegment = Union[StraightSegment, CurvedSegment, ForceSegment]


def _default_anchor() -> PathPoint:
    return PathPoint([0.0, 0.0, 0.0], Rotation.identity(), 0.0, 0.0)


@dataclass
class Track:
    """Ordered segments plus friction settings and the starting state."""

    segments: List[TrackSegment] = field(default_factory=list)
    config: TrackConfig = field(default_factory=TrackConfig)
    anchor: PathPoint = field(default_factory=_default_anchor)

    def start_point(self) -> PathPoint:
        """The anchor with identity orientation and zero elapsed time."""
        return self.anchor.replace(orientation=Rotation.identity(), elapsed_time=0.0)


__all__ = [
    "TrackConfig",
    "StraightSegment",
    "CurvedSegment",
    "ForceSegment",
    "TrackSegment",
    "Track",
]
