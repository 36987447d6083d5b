"""Orientation helpers.

Orientations are :class:`scipy.spatial.transform.Rotation` instances mapping
the vehicle frame (forward ``+Z``, up ``+Y``, right ``-X``) into the Y-up
world frame.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy.spatial.transform import Rotation


def local_axes(orientation: Rotation) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return the world-space ``(forward, up, right)`` unit vectors of ``orientation``."""
    m = orientation.as_matrix()
    return m[:, 2].copy(), m[:, 1].copy(), -m[:, 0]


def axis_rotation(axis: np.ndarray, angle: float) -> Rotation:
    """Rotation of ``angle`` radians about the unit vector ``axis``."""
    return Rotation.from_rotvec(np.asarray(axis, dtype=float) * angle)


def orientation_to_euler(orientation: Rotation) -> Tuple[float, float, float]:
    """Decompose ``orientation`` into ``(yaw, pitch, roll)`` in degrees.

    Yaw is measured from the horizontal projection of the forward axis,
    pitch from its vertical component and roll from the vertical components
    of the up and right axes.
    """
    forward, up, right = local_axes(orientation)
    yaw = np.arctan2(-forward[0], -forward[2])
    pitch = np.arctan2(forward[1], np.hypot(forward[0], forward[2]))
    roll = np.arctan2(-right[1], up[1])
    return float(np.degrees(yaw)), float(np.degrees(pitch)), float(np.degrees(roll))


def signed_angle_diff(a: float, b: float) -> float:
    """Return ``b - a`` in degrees wrapped into ``(-180, 180]``."""
    diff = b - a
    if not np.isfinite(diff):
        raise ValueError("angles must be finite")
    while diff <= -180.0:
        diff += 360.0
    while diff > 180.0:
        diff -= 360.0
    return diff


__all__ = ["local_axes", "axis_rotation", "orientation_to_euler", "signed_angle_diff"]
