"""Sampled vehicle paths.

A :class:`PathSpline` is an ordered list of :class:`PathPoint` samples in
arc-length order, as produced by the segment integrators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial.transform import Rotation


@dataclass(frozen=True, eq=False)
class PathPoint:
    """Position, orientation, speed and elapsed time of the vehicle.

    ``position`` is stored as a read-only ``(3,)`` array.
    """

    position: np.ndarray
    orientation: Rotation
    speed: float
    elapsed_time: float

    def __post_init__(self) -> None:
        pos = np.array(self.position, dtype=float).reshape(3)
        pos.setflags(write=False)
        object.__setattr__(self, "position", pos)
        object.__setattr__(self, "speed", float(self.speed))
        object.__setattr__(self, "elapsed_time", float(self.elapsed_time))

    @classmethod
    def from_wxyz(cls, position: Sequence[float], quaternion: Sequence[float],
                  speed: float = 0.0, elapsed_time: float = 0.0) -> "PathPoint":
        """Build a point from a scalar-first ``(w, x, y, z)`` quaternion."""
        w, x, y, z = (float(v) for v in quaternion)
        return cls(np.asarray(position, dtype=float), Rotation.from_quat([x, y, z, w]), speed, elapsed_time)

    def quaternion_wxyz(self) -> Tuple[float, float, float, float]:
        """Orientation as a scalar-first ``(w, x, y, z)`` tuple."""
        x, y, z, w = self.orientation.as_quat()
        return float(w), float(x), float(y), float(z)

    def replace(self, **changes) -> "PathPoint":
        """Return a copy with the given fields replaced."""
        values = {
            "position": self.position,
            "orientation": self.orientation,
            "speed": self.speed,
            "elapsed_time": self.elapsed_time,
        }
        values.update(changes)
        return PathPoint(**values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathPoint):
            return NotImplemented
        return (
            np.array_equal(self.position, other.position)
            and np.array_equal(self.orientation.as_quat(), other.orientation.as_quat())
            and self.speed == other.speed
            and self.elapsed_time == other.elapsed_time
        )


@dataclass
class PathSpline:
    """Ordered samples along a path."""

    points: List[PathPoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PathPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> PathPoint:
        return self.points[index]

    @classmethod
    def concatenate(cls, splines: Iterable["PathSpline"]) -> "PathSpline":
        """Join ``splines`` end to end, keeping every point."""
        points: List[PathPoint] = []
        for spline in splines:
            points.extend(spline.points)
        return cls(points)

    def decimate(self, step: int) -> "PathSpline":
        """Keep every ``step``-th point, starting with the first."""
        if step < 1:
            raise ValueError("step must be at least 1")
        return PathSpline(self.points[::step])

    # ------------------------------------------------------------------
    # Array views
    def positions(self) -> np.ndarray:
        """``(N, 3)`` array of positions."""
        if not self.points:
            return np.zeros((0, 3))
        return np.vstack([p.position for p in self.points])

    def speeds(self) -> np.ndarray:
        return np.array([p.speed for p in self.points], dtype=float)

    def times(self) -> np.ndarray:
        return np.array([p.elapsed_time for p in self.points], dtype=float)

    def segment_lengths(self) -> np.ndarray:
        """Euclidean distance between each pair of consecutive points."""
        pos = self.positions()
        if len(pos) < 2:
            return np.zeros(0)
        return np.linalg.norm(np.diff(pos, axis=0), axis=1)

    def cumulative_distance(self) -> np.ndarray:
        """Arc length at each point, starting from zero."""
        if not self.points:
            return np.zeros(0)
        return np.concatenate(([0.0], np.cumsum(self.segment_lengths())))

    # ------------------------------------------------------------------
    # Arc-length queries
    def total_distance(self) -> float:
        """Length of the polyline through all points."""
        total = 0.0
        for last, point in zip(self.points, self.points[1:]):
            total += float(np.linalg.norm(point.position - last.position))
        return total

    def bracket(self, distance: float) -> Optional[Tuple[PathPoint, PathPoint]]:
        """Return the consecutive points spanning arc length ``distance``.

        The first pair whose cumulative length reaches ``distance`` is
        returned.  ``None`` is returned when ``distance`` lies beyond the end
        of the spline or the spline has fewer than two points.
        """
        total = 0.0
        for last, point in zip(self.points, self.points[1:]):
            total += float(np.linalg.norm(point.position - last.position))
            if total >= distance:
                return last, point
        return None


__all__ = ["PathPoint", "PathSpline"]
