r"""Forces experienced along an integrated path.

The load at a given arc length is reconstructed from the change in pitch and
yaw between the two samples bracketing that distance.  The angle changes are
resolved into the vehicle's normal and lateral planes using its roll angle,
turned into centripetal accelerations :math:`v^2 \kappa` and added to
gravity before being projected back onto the local up and right axes.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .angles import local_axes, orientation_to_euler, signed_angle_diff
from .constants import EPSILON, G, WORLD_UP
from .spline import PathPoint, PathSpline
from .transitions import Forces


def pair_forces(last_point: PathPoint, point: PathPoint) -> Forces:
    """Forces at ``point`` given the preceding sample ``last_point``.

    Vertical and lateral loads are reported in g.  Roll is always ``0`` as a
    roll rate cannot be recovered from the geometry of two samples.
    """
    delta_dist = float(np.linalg.norm(point.position - last_point.position))

    last_yaw, last_pitch, _ = orientation_to_euler(last_point.orientation)
    yaw, pitch, roll = orientation_to_euler(point.orientation)

    pitch_change = np.radians(signed_angle_diff(last_pitch, pitch))
    yaw_change = np.radians(signed_angle_diff(last_yaw, yaw))
    roll_rad = np.radians(roll)
    cos_pitch = np.cos(np.radians(abs(pitch)))

    normal_d_angle = pitch_change * np.cos(-roll_rad) - cos_pitch * -yaw_change * np.sin(-roll_rad)
    lateral_d_angle = -pitch_change * np.sin(roll_rad) - cos_pitch * yaw_change * np.cos(roll_rad)

    _, up, right = local_axes(point.orientation)
    force_vec = WORLD_UP.copy()
    # Coincident samples carry no curvature information.
    if delta_dist > EPSILON:
        v_sq = point.speed * point.speed
        force_vec = force_vec + up * (v_sq * normal_d_angle / delta_dist / G)
        force_vec = force_vec + right * (v_sq * lateral_d_angle / delta_dist / G)

    return Forces(float(np.dot(force_vec, up)), float(np.dot(force_vec, right)), 0.0)


def forces_at(spline: PathSpline, distance: float) -> Optional[Forces]:
    """Return the forces at arc length ``distance`` along ``spline``.

    ``None`` is returned when ``distance`` lies beyond the end of the spline
    or the spline has fewer than two samples.
    """
    pair = spline.bracket(distance)
    if pair is None:
        return None
    return pair_forces(*pair)


def force_profile(spline: PathSpline) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Evaluate the forces at every sample of ``spline``.

    Sample ``i`` uses the pair ``(i - 1, i)``, which is the pair
    :func:`forces_at` brackets at that sample's arc length; the first sample
    shares the first pair.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        Cumulative distance ``s`` and the vertical and lateral loads at each
        sample.  All loads are ``nan`` when the spline has fewer than two
        samples.
    """
    s = spline.cumulative_distance()
    vertical = np.full(s.shape, np.nan)
    lateral = np.full(s.shape, np.nan)
    points = spline.points
    if len(points) < 2:
        return s, vertical, lateral
    for i in range(len(points)):
        j = max(i, 1)
        forces = pair_forces(points[j - 1], points[j])
        vertical[i] = forces.vertical
        lateral[i] = forces.lateral
    return s, vertical, lateral


__all__ = ["pair_forces", "forces_at", "force_profile"]
