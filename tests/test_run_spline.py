import sys
from pathlib import Path
import json
import re

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")

# Ensure the repository root is on the path so ``trackspline`` is importable
sys.path.append(str(Path(__file__).resolve().parents[1]))

from trackspline.run_spline import main, run

BASE_PATH = Path(__file__).resolve().parents[1]
EXAMPLE_TRACK = BASE_PATH / "data" / "example_track.json"


def _write_track(path: Path) -> Path:
    document = {
        "sections": [
            {"type": "straight", "length": 2.0, "fixedSpeed": 5.0},
            {"type": "curved", "fixedSpeed": 5.0, "radius": 4.0, "direction": 90.0, "angle": 45.0},
        ],
        "config": {"parameter": 0.0, "resistance": 0.0, "heartlineHeight": 0.0},
        "anchor": {"pos": [0.0, 0.0, 0.0], "rot": [1.0, 0.0, 0.0, 0.0], "velocity": 5.0, "time": 0.0},
    }
    track_file = path / "track.json"
    track_file.write_text(json.dumps(document))
    return track_file


def test_example_track(tmp_path, capfd) -> None:
    spline, offsets, out_dir = run(EXAMPLE_TRACK, tmp_path, timestamp="example")

    out = capfd.readouterr().out
    assert re.search(r"Segments: 5, Points: \d+, Total runtime: [0-9.]+ s", out)

    assert out_dir == tmp_path / "example"
    for name in ["spline.json", "points.csv", "summary.json", "speed_profile.png", "force_profile.png"]:
        assert (out_dir / name).exists()

    with (out_dir / "summary.json").open() as f:
        summary = json.load(f)
    assert summary["segments"] == 5
    assert summary["points"] == len(spline)
    assert summary["section_offsets_m"] == offsets
    assert summary["length_m"] > 0.0
    assert summary["duration_s"] > 0.0

    points = pd.read_csv(out_dir / "points.csv")
    assert len(points) == len(spline)
    for col in ["s_m", "x_m", "y_m", "z_m", "qw", "speed_mps", "time_s", "vert_g", "lat_g"]:
        assert col in points.columns
    assert np.all(np.diff(points["s_m"].to_numpy()) >= 0.0)
    assert np.all(points["speed_mps"] > 0.0)


def test_run_without_plots(tmp_path) -> None:
    track_file = _write_track(tmp_path)
    spline, offsets, out_dir = run(track_file, tmp_path / "out", plots=False, timestamp="run")
    assert len(offsets) == 2
    assert offsets[1] > 1.9
    assert (out_dir / "spline.json").exists()
    assert not (out_dir / "speed_profile.png").exists()
    assert not (out_dir / "force_profile.png").exists()

    points = pd.read_csv(out_dir / "points.csv")
    assert np.allclose(points["speed_mps"], 5.0)
    # A flat right turn loads the rider sideways but not vertically.
    assert np.allclose(points["vert_g"], 1.0, atol=1e-6)


def test_main_cli(tmp_path, capfd) -> None:
    track_file = _write_track(tmp_path)
    main(["--track", str(track_file), "--out", str(tmp_path / "cli"), "--no-plots"])
    out = capfd.readouterr().out
    assert re.search(r"Final speed: 5\.00 m/s", out)
    assert "Outputs written to" in out
    written = list((tmp_path / "cli").iterdir())
    assert len(written) == 1
    assert (written[0] / "summary.json").exists()
