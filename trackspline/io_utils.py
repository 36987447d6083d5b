"""Reading and writing tracks and splines.

Tracks are exchanged as JSON documents with camel-case keys::

    {
      "sections": [
        {"type": "straight", "length": 10.0, "fixedSpeed": null},
        {"type": "curved", "fixedSpeed": null, "radius": 5.0, "direction": 90.0, "angle": 90.0},
        {"type": "force", "fixedSpeed": null,
         "transitions": {"vert": [...], "lat": [...], "roll": [...]}}
      ],
      "config": {"parameter": 0.02, "resistance": 1e-5, "heartlineHeight": 1.1},
      "anchor": {"pos": [0, 0, 0], "rot": [1, 0, 0, 0], "velocity": 10, "time": 0}
    }

Orientations are written as scalar-first ``[w, x, y, z]`` quaternions.  A
transition is ``{"curve", "value", "length", "center", "tension",
"dynamicLength"}``.  :func:`get_spline` is the text-in, text-out entry point
returning ``[{"points": [...]}, [offsets...]]``.

Malformed documents raise :class:`ValueError` naming the offending field.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import pandas as pd

from .assembler import get_track_spline
from .easing import TransitionCurve
from .spline import PathPoint, PathSpline
from .track import CurvedSegment, ForceSegment, StraightSegment, Track, TrackConfig, TrackSegment
from .transitions import EasingSegment, Forces, TransitionSchedule


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _require(data: Mapping[str, Any], key: str, context: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{context} must be a JSON object")
    if key not in data:
        raise ValueError(f"{context} missing required field '{key}'")
    return data[key]


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


def _optional_float(data: Mapping[str, Any], key: str, name: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    return _as_float(value, name)


def _as_vector(value: Any, size: int, name: str) -> List[float]:
    if not isinstance(value, (list, tuple)) or len(value) != size:
        raise ValueError(f"{name} must be an array of {size} numbers")
    return [_as_float(v, name) for v in value]


def _parse(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def point_from_dict(data: Mapping[str, Any], context: str = "point") -> PathPoint:
    pos = _as_vector(_require(data, "pos", context), 3, f"{context}.pos")
    rot = _as_vector(data.get("rot", [1.0, 0.0, 0.0, 0.0]), 4, f"{context}.rot")
    velocity = _as_float(data.get("velocity", 0.0), f"{context}.velocity")
    time = _as_float(data.get("time", 0.0), f"{context}.time")
    if sum(v * v for v in rot) == 0.0:
        raise ValueError(f"{context}.rot must be a non-zero quaternion")
    return PathPoint.from_wxyz(pos, rot, velocity, time)


def transition_from_dict(data: Mapping[str, Any], context: str = "transition") -> EasingSegment:
    curve = _require(data, "curve", context)
    if not isinstance(curve, str):
        raise ValueError(f"{context}.curve must be a string")
    return EasingSegment(
        curve=TransitionCurve.from_name(curve),
        value=_as_float(_require(data, "value", context), f"{context}.value"),
        duration=_as_float(_require(data, "length", context), f"{context}.length"),
        center=_as_float(data.get("center", 0.0), f"{context}.center"),
        tension=_as_float(data.get("tension", 0.0), f"{context}.tension"),
        dynamic_length=_as_bool(data.get("dynamicLength", False), f"{context}.dynamicLength"),
    )


def schedule_from_dict(data: Mapping[str, Any], context: str = "transitions") -> TransitionSchedule:
    channels = {}
    for key in ("vert", "lat", "roll"):
        items = _require(data, key, context)
        if not isinstance(items, list):
            raise ValueError(f"{context}.{key} must be an array")
        channels[key] = [
            transition_from_dict(item, f"{context}.{key}[{i}]") for i, item in enumerate(items)
        ]
    return TransitionSchedule(channels["vert"], channels["lat"], channels["roll"])


def section_from_dict(data: Mapping[str, Any], context: str = "section") -> TrackSegment:
    kind = _require(data, "type", context)
    fixed_speed = _optional_float(data, "fixedSpeed", f"{context}.fixedSpeed")
    if kind == "straight":
        return StraightSegment(
            length=_as_float(_require(data, "length", context), f"{context}.length"),
            fixed_speed=fixed_speed,
        )
    if kind == "curved":
        return CurvedSegment(
            radius=_as_float(_require(data, "radius", context), f"{context}.radius"),
            angle=_as_float(_require(data, "angle", context), f"{context}.angle"),
            direction=_as_float(_require(data, "direction", context), f"{context}.direction"),
            fixed_speed=fixed_speed,
        )
    if kind == "force":
        return ForceSegment(
            transitions=schedule_from_dict(
                _require(data, "transitions", context), f"{context}.transitions"
            ),
            fixed_speed=fixed_speed,
        )
    raise ValueError(f"{context} has unknown type {kind!r}")


def config_from_dict(data: Mapping[str, Any]) -> TrackConfig:
    if not isinstance(data, Mapping):
        raise ValueError("config must be a JSON object")
    return TrackConfig(
        friction_parameter=_as_float(data.get("parameter", 0.0), "config.parameter"),
        drag_coefficient=_as_float(data.get("resistance", 0.0), "config.resistance"),
        heartline_height=_as_float(data.get("heartlineHeight", 0.0), "config.heartlineHeight"),
    )


def track_from_dict(data: Mapping[str, Any]) -> Track:
    """Build a :class:`Track` from a decoded JSON document."""
    sections = _require(data, "sections", "track")
    if not isinstance(sections, list):
        raise ValueError("track.sections must be an array")
    return Track(
        segments=[section_from_dict(s, f"sections[{i}]") for i, s in enumerate(sections)],
        config=config_from_dict(data.get("config", {})),
        anchor=point_from_dict(_require(data, "anchor", "track"), "anchor"),
    )


def track_from_json(text: str) -> Track:
    return track_from_dict(_parse(text))


def read_track_json(path: str | Path) -> Track:
    """Read a track description from the JSON file at ``path``."""
    return track_from_json(Path(path).read_text())


def spline_from_json(text: str) -> Tuple[PathSpline, List[float]]:
    """Decode the output of :func:`get_spline`."""
    data = _parse(text)
    if not isinstance(data, list) or len(data) != 2:
        raise ValueError("spline document must be a [spline, offsets] pair")
    spline_data, offsets = data
    points = _require(spline_data, "points", "spline")
    spline = PathSpline([point_from_dict(p, f"points[{i}]") for i, p in enumerate(points)])
    return spline, [_as_float(v, "offset") for v in offsets]


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def point_to_dict(point: PathPoint) -> Dict[str, Any]:
    return {
        "pos": [float(v) for v in point.position],
        "rot": list(point.quaternion_wxyz()),
        "velocity": point.speed,
        "time": point.elapsed_time,
    }


def transition_to_dict(segment: EasingSegment) -> Dict[str, Any]:
    return {
        "curve": segment.curve.value,
        "value": segment.value,
        "length": segment.duration,
        "center": segment.center,
        "tension": segment.tension,
        "dynamicLength": segment.dynamic_length,
    }


def schedule_to_dict(schedule: TransitionSchedule) -> Dict[str, Any]:
    return {
        "vert": [transition_to_dict(t) for t in schedule.vertical],
        "lat": [transition_to_dict(t) for t in schedule.lateral],
        "roll": [transition_to_dict(t) for t in schedule.roll],
    }


def section_to_dict(segment: TrackSegment) -> Dict[str, Any]:
    if isinstance(segment, StraightSegment):
        return {"type": "straight", "length": segment.length, "fixedSpeed": segment.fixed_speed}
    if isinstance(segment, CurvedSegment):
        return {
            "type": "curved",
            "fixedSpeed": segment.fixed_speed,
            "radius": segment.radius,
            "direction": segment.direction,
            "angle": segment.angle,
        }
    if isinstance(segment, ForceSegment):
        return {
            "type": "force",
            "fixedSpeed": segment.fixed_speed,
            "transitions": schedule_to_dict(segment.transitions),
        }
    raise TypeError(f"unsupported track segment: {type(segment).__name__}")


def track_to_dict(track: Track) -> Dict[str, Any]:
    return {
        "sections": [section_to_dict(s) for s in track.segments],
        "config": {
            "parameter": track.config.friction_parameter,
            "resistance": track.config.drag_coefficient,
            "heartlineHeight": track.config.heartline_height,
        },
        "anchor": point_to_dict(track.anchor),
    }


def track_to_json(track: Track) -> str:
    return json.dumps(track_to_dict(track))


def forces_to_dict(forces: Forces) -> Dict[str, float]:
    return {"vert": forces.vertical, "lat": forces.lateral, "roll": forces.roll}


def spline_to_json(spline: PathSpline, offsets: Iterable[float]) -> str:
    """Encode an assembled spline and its segment offsets."""
    document = [
        {"points": [point_to_dict(p) for p in spline]},
        [float(v) for v in offsets],
    ]
    return json.dumps(document)


def get_spline(track_json: str) -> str:
    """Integrate the track encoded in ``track_json`` and return the encoded spline.

    Raises
    ------
    ValueError
        If ``track_json`` is not a valid track document.  No partial result
        is produced.
    """
    track = track_from_json(track_json)
    spline, offsets = get_track_spline(track)
    return spline_to_json(spline, offsets)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def write_json(text: str, file_path: str | Path) -> None:
    """Write ``text`` to ``file_path`` ensuring parent directories exist."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(text)


def write_csv(data: Mapping[str, Iterable] | pd.DataFrame, file_path: str | Path) -> None:
    """Write ``data`` to ``file_path`` ensuring parent directories exist."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(data, pd.DataFrame):
        data.to_csv(file_path, index=False)
    else:
        pd.DataFrame(data).to_csv(file_path, index=False)
