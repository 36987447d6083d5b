"""Plotting helpers for ride diagnostics.

Simple :mod:`matplotlib` plots of the quantities derived from an assembled
spline.  Each function returns the :class:`~matplotlib.axes.Axes` for further
customisation.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt


def _mark_sections(ax: plt.Axes, section_offsets: Sequence[float] | None) -> None:
    if section_offsets is None:
        return
    for offset in list(section_offsets)[1:]:
        ax.axvline(offset, color="0.8", linewidth=0.8, zorder=0)


def plot_speed_profile(
    s: Iterable[float],
    speed: Iterable[float],
    section_offsets: Sequence[float] | None = None,
    label: str | None = None,
    ax: Optional[plt.Axes] = None,
) -> plt.Axes:
    """Plot speed against distance ``s`` along the track.

    ``section_offsets`` marks where each segment after the first begins, so
    stalls and fixed-speed sections can be matched to the track layout.
    """
    if ax is None:
        _, ax = plt.subplots()

    ax.plot(s, speed, color="tab:green", label=label)
    _mark_sections(ax, section_offsets)
    ax.set_xlabel("Distance along track [m]")
    ax.set_ylabel("Speed [m/s]")
    ax.set_ylim(bottom=0.0)
    if label is not None:
        ax.legend()
    return ax


def plot_force_profile(
    s: Iterable[float],
    vertical: Iterable[float],
    lateral: Iterable[float],
    section_offsets: Sequence[float] | None = None,
    label: str | None = None,
    ax: Optional[plt.Axes] = None,
) -> plt.Axes:
    """Plot vertical and lateral load in g versus distance.

    Non-finite samples are left out.  ``section_offsets`` draws a faint
    vertical line at the start of every segment after the first.
    """
    if ax is None:
        _, ax = plt.subplots()

    s_arr = np.asarray(list(s), dtype=float)
    vert_arr = np.asarray(list(vertical), dtype=float)
    lat_arr = np.asarray(list(lateral), dtype=float)
    if not (s_arr.shape == vert_arr.shape == lat_arr.shape):
        raise ValueError("s, vertical and lateral must have the same shape")

    mask = np.isfinite(vert_arr) & np.isfinite(lat_arr)
    suffix = f" ({label})" if label else ""
    ax.plot(s_arr[mask], vert_arr[mask], label=f"Vertical{suffix}", color="tab:blue")
    ax.plot(s_arr[mask], lat_arr[mask], label=f"Lateral{suffix}", color="tab:orange")

    _mark_sections(ax, section_offsets)

    ax.set_xlabel("Distance along track [m]")
    ax.set_ylabel("Load [g]")
    ax.legend()
    return ax
