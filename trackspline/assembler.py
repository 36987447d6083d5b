"""Chain track segments into a single spline.

Segments are integrated strictly in order: each one starts from the last
point emitted so far and from the forces the vehicle experiences at the end
of the previous segment, so force segments describe changes relative to the
incoming load rather than resetting it.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .constants import DECIMATION, FORCE_PROBE_OFFSET
from .forces import forces_at
from .integrators import integrate_segment
from .spline import PathSpline
from .track import Track
from .transitions import Forces

logger = logging.getLogger(__name__)

# Standing load: 1 g vertical, no lateral load, no roll.
BASELINE_FORCES = Forces(1.0, 0.0, 0.0)


def make_splines(track: Track) -> List[PathSpline]:
    """Integrate every segment of ``track`` and return one spline per segment."""
    splines: List[PathSpline] = []
    point = track.start_point()
    forces = BASELINE_FORCES

    for index, segment in enumerate(track.segments):
        spline = integrate_segment(segment, point, forces, track.config)
        splines.append(spline)
        length = spline.total_distance()
        logger.debug(
            "segment %d (%s): %d points, %.3f m",
            index,
            type(segment).__name__,
            len(spline),
            length,
        )

        if len(spline) == 0:
            logger.debug("segment %d stalled before its first step", index)
            continue
        point = spline[-1]

        # Fewer than two points: keep the incoming forces.
        end_forces = forces_at(spline, length - FORCE_PROBE_OFFSET)
        if end_forces is not None:
            forces = end_forces

    return splines


def section_offsets(splines: List[PathSpline]) -> List[float]:
    """Arc length at which each spline starts within the concatenated path."""
    offsets: List[float] = []
    total = 0.0
    for spline in splines:
        offsets.append(total)
        total += spline.total_distance()
    return offsets


def get_track_spline(track: Track, decimation: int = DECIMATION) -> Tuple[PathSpline, List[float]]:
    """Integrate ``track`` and return the output spline and segment offsets.

    Parameters
    ----------
    track:
        Track description.
    decimation:
        Only every ``decimation``-th point of the concatenated segments is kept.

    Returns
    -------
    Tuple[PathSpline, List[float]]
        The decimated spline and, per segment, its starting arc length
        measured on the full-resolution splines.
    """
    splines = make_splines(track)
    offsets = section_offsets(splines)
    spline = PathSpline.concatenate(splines).decimate(decimation)
    logger.info(
        "assembled %d segments into %d points (%.3f m)",
        len(splines),
        len(spline),
        sum(s.total_distance() for s in splines),
    )
    return spline, offsets


__all__ = ["BASELINE_FORCES", "make_splines", "section_offsets", "get_track_spline"]
