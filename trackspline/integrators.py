"""Segment integrators.

Each integrator starts from a :class:`~trackspline.spline.PathPoint` and
steps forward with a fixed increment, emitting one point per step:

``integrate_straight``
    Distance step of :data:`~trackspline.constants.STRAIGHT_STEP`, orientation
    held constant.
``integrate_curved``
    ``CURVE_STEPS`` equal distance steps across a circular arc.  After each
    step the orientation turns by ``step / radius`` radians about the segment's
    turn axis.
``integrate_force``
    Time step of :data:`~trackspline.constants.DT`.  The prescribed vertical
    and lateral loads are converted into pitch and yaw rates and the roll
    channel into a roll rate about the direction of travel.

Unless the segment declares ``fixed_speed`` the speed is updated every step
with :func:`~trackspline.friction.advance_speed`, using the previously
emitted point (or the provisional point itself on the first step).  When the
updated speed is ``<= 0`` the vehicle has stalled: the current step is
discarded and the segment ends with the points emitted so far.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np
from scipy.spatial.transform import Rotation

from .angles import axis_rotation, local_axes
from .constants import (
    CURVE_STEPS,
    DT,
    G,
    LOCAL_FORWARD,
    LOCAL_RIGHT,
    ROLL_THRESHOLD,
    STRAIGHT_STEP,
    WORLD_UP,
)
from .friction import advance_speed
from .spline import PathPoint, PathSpline
from .track import CurvedSegment, ForceSegment, StraightSegment, TrackConfig, TrackSegment
from .transitions import ForceEvaluator, Forces


def _friction_speed(
    config: TrackConfig,
    points: List[PathPoint],
    provisional: PathPoint,
    dt: float,
) -> float:
    prev = points[-1] if points else provisional
    return advance_speed(
        config.friction_parameter,
        config.drag_coefficient,
        config.heartline_height,
        prev,
        provisional,
        dt,
    )


def integrate_straight(segment: StraightSegment, start: PathPoint, config: TrackConfig) -> PathSpline:
    """Integrate a straight run along the start orientation's forward axis."""
    step = STRAIGHT_STEP
    orientation = start.orientation
    forward = orientation.apply(LOCAL_FORWARD)
    pos = np.array(start.position, dtype=float)
    speed = start.speed
    elapsed = start.elapsed_time
    points: List[PathPoint] = []

    if segment.fixed_speed is None and speed <= 0.0:
        return PathSpline(points)

    progress = 0.0
    while progress < segment.length:
        pos = pos + forward * step
        if segment.fixed_speed is not None:
            speed = segment.fixed_speed
        else:
            provisional = PathPoint(pos, orientation, speed, elapsed)
            speed = _friction_speed(config, points, provisional, step / speed)
            if speed <= 0.0:
                break
        points.append(PathPoint(pos, orientation, speed, elapsed))
        elapsed += step / speed
        progress += step

    return PathSpline(points)


def curve_axis(direction_deg: float) -> np.ndarray:
    """Turn axis in the vehicle frame for a curve with the given ``direction``.

    The local right axis rotated about the direction of travel:
    ``0`` pitches the path up, ``90`` turns it right.
    """
    twist = Rotation.from_rotvec(LOCAL_FORWARD * np.radians(direction_deg))
    return twist.apply(LOCAL_RIGHT)


def integrate_curved(segment: CurvedSegment, start: PathPoint, config: TrackConfig) -> PathSpline:
    """Integrate a circular arc of ``segment.radius`` swept through ``segment.angle``."""
    arc_length = np.radians(segment.angle) * segment.radius
    step = arc_length / CURVE_STEPS
    # Post-multiplied, so the turn is about an axis fixed in the vehicle frame.
    turn = axis_rotation(curve_axis(segment.direction), step / segment.radius)

    orientation = start.orientation
    pos = np.array(start.position, dtype=float)
    speed = start.speed
    elapsed = start.elapsed_time
    points: List[PathPoint] = []

    if segment.fixed_speed is None and speed <= 0.0:
        return PathSpline(points)

    progress = 0.0
    while progress < arc_length:
        pos = pos + orientation.apply(LOCAL_FORWARD) * step
        orientation = orientation * turn
        if segment.fixed_speed is not None:
            speed = segment.fixed_speed
        else:
            # Friction is measured against the orientation the point is emitted with.
            provisional = PathPoint(pos, orientation, speed, elapsed)
            speed = _friction_speed(config, points, provisional, step / speed)
            if speed <= 0.0:
                break
        points.append(PathPoint(pos, orientation, speed, elapsed))
        elapsed += step / speed
        progress += step

    return PathSpline(points)


def integrate_force(
    segment: ForceSegment,
    start: PathPoint,
    baseline: Forces,
    config: TrackConfig,
    evaluator: Optional[ForceEvaluator] = None,
) -> PathSpline:
    """Integrate a segment shaped by its prescribed forces.

    Parameters
    ----------
    segment:
        The force segment to integrate.
    start:
        State at the beginning of the segment.
    baseline:
        Forces already acting at the start, added to the schedule's values so
        the schedule describes changes relative to the incoming load.
    config:
        Friction settings.
    evaluator:
        Schedule evaluator to use.  Defaults to the segment's schedule compiled
        into a :class:`~trackspline.transitions.FastTransitionSchedule`.
    """
    schedule = evaluator if evaluator is not None else segment.transitions.compile()
    length = schedule.length()

    speed = segment.fixed_speed if segment.fixed_speed is not None else start.speed
    orientation = start.orientation
    pos = np.array(start.position, dtype=float)
    points: List[PathPoint] = []

    if speed <= 0.0:
        return PathSpline(points)

    t = 0.0
    while t < length:
        scheduled = schedule.evaluate(t)
        if scheduled is None:
            break
        forces = scheduled + baseline
        distance = speed * DT

        if abs(forces.roll) > ROLL_THRESHOLD:
            forward = orientation.apply(LOCAL_FORWARD)
            orientation = axis_rotation(forward, np.radians(forces.roll) * DT) * orientation

        _, up, right = local_axes(orientation)
        force_vec = up * -forces.vertical + right * -forces.lateral + WORLD_UP
        normal_force = -float(np.dot(force_vec, up)) * G
        lateral_force = -float(np.dot(force_vec, right)) * G

        orientation = (
            axis_rotation(right, (normal_force / speed) * DT)
            * axis_rotation(up, -(lateral_force / speed) * DT)
        ) * orientation
        pos = pos + orientation.apply(LOCAL_FORWARD) * distance

        if segment.fixed_speed is None:
            provisional = PathPoint(pos, orientation, speed, t + start.elapsed_time)
            speed = _friction_speed(config, points, provisional, DT)
            if speed <= 0.0:
                break

        points.append(PathPoint(pos, orientation, speed, t + start.elapsed_time))
        t += DT

    return PathSpline(points)


def integrate_segment(
    segment: TrackSegment,
    start: PathPoint,
    baseline: Forces,
    config: TrackConfig,
) -> PathSpline:
    """Integrate any segment kind starting from ``start``."""
    if isinstance(segment, StraightSegment):
        return integrate_straight(segment, start, config)
    if isinstance(segment, CurvedSegment):
        return integrate_curved(segment, start, config)
    if isinstance(segment, ForceSegment):
        return integrate_force(segment, start, baseline, config)
    raise TypeError(f"unsupported track segment: {type(segment).__name__}")


__all__ = [
    "integrate_straight",
    "integrate_curved",
    "integrate_force",
    "integrate_segment",
    "curve_axis",
]
