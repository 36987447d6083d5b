"""Command line tool for integrating a track description.

Running ``python -m trackspline.run_spline --track data/example_track.json``
reads a track JSON document, integrates every segment and writes the results
to a time-stamped directory under ``outputs``:

``spline.json``
    The assembled spline and per-segment offsets, in the same format as
    :func:`trackspline.io_utils.get_spline`.
``points.csv``
    One row per output point with position, orientation, speed, time, Euler
    angles and the derived vertical and lateral loads.
``summary.json``
    Segment count, point count, total length, duration and segment offsets.
``speed_profile.png``, ``force_profile.png``
    Diagnostic plots, unless disabled with ``--no-plots``.
"""

from __future__ import annotations

from pathlib import Path
from datetime import datetime
import argparse
import json
import logging
import time

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from .angles import orientation_to_euler
from .assembler import get_track_spline
from .forces import force_profile
from .io_utils import read_track_json, spline_to_json, write_csv, write_json
from .plots import plot_force_profile, plot_speed_profile
from .spline import PathSpline

logger = logging.getLogger(__name__)


def points_frame(spline: PathSpline) -> pd.DataFrame:
    """Tabulate ``spline`` with derived angles and loads."""
    s, vert, lat = force_profile(spline)
    pos = spline.positions()
    quat = np.array([p.quaternion_wxyz() for p in spline], dtype=float).reshape(-1, 4)
    euler = np.array([orientation_to_euler(p.orientation) for p in spline], dtype=float).reshape(-1, 3)
    return pd.DataFrame(
        {
            "s_m": s,
            "x_m": pos[:, 0],
            "y_m": pos[:, 1],
            "z_m": pos[:, 2],
            "qw": quat[:, 0],
            "qx": quat[:, 1],
            "qy": quat[:, 2],
            "qz": quat[:, 3],
            "speed_mps": spline.speeds(),
            "time_s": spline.times(),
            "yaw_deg": euler[:, 0],
            "pitch_deg": euler[:, 1],
            "roll_deg": euler[:, 2],
            "vert_g": vert,
            "lat_g": lat,
        }
    )


def run(
    track_file: str | Path,
    out_root: str | Path = "outputs",
    plots: bool = True,
    timestamp: str | None = None,
) -> tuple[PathSpline, list[float], Path]:
    """Integrate ``track_file`` and write outputs.

    Parameters
    ----------
    track_file:
        Track JSON document.
    out_root:
        Directory under which the time-stamped output directory is created.
    plots:
        Whether to save the speed and force profile plots.
    timestamp:
        Name of the output directory.  Defaults to the current time.

    Returns
    -------
    tuple[PathSpline, list[float], Path]
        The decimated spline, the segment offsets and the output directory.
    """
    start_time = time.perf_counter()

    track = read_track_json(track_file)
    spline, offsets = get_track_spline(track)

    if timestamp is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = Path(out_root) / timestamp
    out_dir.mkdir(parents=True, exist_ok=True)

    write_json(spline_to_json(spline, offsets), out_dir / "spline.json")
    points_df = points_frame(spline)
    write_csv(points_df, out_dir / "points.csv")

    length = float(points_df["s_m"].iloc[-1]) if len(points_df) else 0.0
    duration = float(points_df["time_s"].iloc[-1]) if len(points_df) else 0.0
    with (out_dir / "summary.json").open("w") as f:
        json.dump(
            {
                "segments": len(track.segments),
                "points": len(spline),
                "length_m": length,
                "duration_s": duration,
                "section_offsets_m": offsets,
            },
            f,
        )

    if plots:
        ax = plot_speed_profile(points_df["s_m"], points_df["speed_mps"], section_offsets=offsets)
        ax.figure.savefig(out_dir / "speed_profile.png")
        plt.close(ax.figure)

        ax = plot_force_profile(
            points_df["s_m"], points_df["vert_g"], points_df["lat_g"], section_offsets=offsets
        )
        ax.figure.savefig(out_dir / "force_profile.png")
        plt.close(ax.figure)

    total_runtime = time.perf_counter() - start_time
    print(
        f"Segments: {len(track.segments)}, "
        f"Points: {len(spline)}, "
        f"Total runtime: {total_runtime:.3f} s"
    )
    logger.debug("outputs written to %s", out_dir)

    return spline, offsets, out_dir


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Integrate a track description into a spline")
    parser.add_argument("--track", default="data/example_track.json", help="Track JSON file")
    parser.add_argument("--out", default="outputs", help="Output root directory")
    parser.add_argument(
        "--no-plots",
        dest="plots",
        action="store_false",
        help="Do not write diagnostic plots",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    spline, offsets, out_dir = run(args.track, args.out, plots=args.plots)
    if spline.points:
        print(f"Final speed: {spline[-1].speed:.2f} m/s")
    print(f"Outputs written to {out_dir}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
