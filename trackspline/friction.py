"""Energy based speed update with rolling friction and drag.

The vehicle's kinetic energy per unit mass is reduced by a cubic drag loss
and by the potential energy needed to climb between two samples, plus a
rolling-resistance term proportional to the distance travelled.  Both the
height change and the distance are measured at the friction contact point,
which sits below the heartline along the local down axis.
"""

from __future__ import annotations

import numpy as np

from .constants import FRICTION_HEIGHT_FACTOR, G, LOCAL_DOWN
from .spline import PathPoint


def friction_point(point: PathPoint, heartline_height: float) -> np.ndarray:
    """Return the friction contact point of ``point`` in world coordinates."""
    offset = point.orientation.apply(LOCAL_DOWN * (heartline_height * FRICTION_HEIGHT_FACTOR))
    return point.position + offset


def advance_speed(
    parameter: float,
    drag: float,
    heartline_height: float,
    prev_point: PathPoint,
    point: PathPoint,
    dt: float,
) -> float:
    """Return the speed after moving from ``prev_point`` to ``point``.

    Parameters
    ----------
    parameter:
        Rolling resistance coefficient applied to the distance travelled by
        the friction point.
    drag:
        Coefficient of the ``v**3 * dt`` drag energy loss.
    heartline_height:
        Height of the heartline above the track.
    prev_point, point:
        Consecutive samples.  The speed of ``prev_point`` is the starting
        speed.
    dt:
        Time taken between the samples in seconds.

    Returns
    -------
    float
        The new speed, or ``0.0`` when the remaining energy is not positive.
        A zero return means the vehicle has stalled.
    """
    last_friction = friction_point(prev_point, heartline_height)
    current_friction = friction_point(point, heartline_height)

    v = prev_point.speed
    energy = 0.5 * v * v
    energy -= v * v * v * dt * drag

    rise = current_friction[1] - last_friction[1]
    travelled = float(np.linalg.norm(current_friction - last_friction))
    energy -= (rise + travelled * parameter) * G

    if energy <= 0.0:
        return 0.0
    return float(np.sqrt(2.0 * energy))


__all__ = ["advance_speed", "friction_point"]
