"""Saving and loading scenes as JSON documents."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from skysphere.circles import GreatCircle, SmallCircle
from skysphere.geometry import Point
from skysphere.scene import Scene, View

DEFAULT_FILENAME = "celestial_data.json"


def _number(value: float) -> float | None:
    """Non-finite numbers have no JSON form and are written as null."""
    return value if math.isfinite(value) else None


def to_dict(scene: Scene) -> dict[str, list[Any]]:
    """The saved form of a scene: points, arcs and circles, without view or selection."""
    return {
        "points": [
            [[_number(c) for c in p.absolute], p.name, p.movable, p.removable]
            for p in scene.points
        ],
        "arcs": [[a, b] for a, b in scene.arcs],
        "great_circles": [[gc.pole, gc.name] for gc in scene.great_circles],
        "small_circles": [
            [sc.pole, _number(sc.plane_distance), sc.name] for sc in scene.small_circles
        ],
    }


def dumps(scene: Scene) -> str:
    """Serialise a scene to pretty-printed JSON."""
    return json.dumps(to_dict(scene), indent=2, ensure_ascii=False)


def _array(value: Any, length: int, what: str) -> list[Any]:
    if not isinstance(value, list) or len(value) != length:
        raise ValueError(f"{what}: expected an array of {length} elements")
    return value


def _index(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{what}: expected a non-negative integer")
    return value


def _float(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{what}: expected a number")
    return float(value)


def _string(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{what}: expected a string")
    return value


def _flag(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{what}: expected a boolean")
    return value


def _list(data: dict[str, Any], key: str) -> list[Any]:
    if key not in data:
        raise ValueError(f"missing field {key!r}")
    value = data[key]
    if not isinstance(value, list):
        raise ValueError(f"{key}: expected an array")
    return value


def _parse(
    text: str,
) -> tuple[list[Point], list[tuple[int, int]], list[GreatCircle], list[SmallCircle]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"failed to parse file: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("failed to parse file: expected an object")

    points = []
    for i, entry in enumerate(_list(data, "points")):
        vec, name, movable, removable = _array(entry, 4, f"points[{i}]")
        coords = tuple(
            _float(c, f"points[{i}]") for c in _array(vec, 3, f"points[{i}] position")
        )
        point = Point.from_vec3(i, coords)
        point.name = _string(name, f"points[{i}] name")
        point.movable = _flag(movable, f"points[{i}] movable")
        point.removable = _flag(removable, f"points[{i}] removable")
        points.append(point)

    arcs = []
    for i, entry in enumerate(_list(data, "arcs")):
        a, b = _array(entry, 2, f"arcs[{i}]")
        arcs.append((_index(a, f"arcs[{i}]"), _index(b, f"arcs[{i}]")))

    great_circles = []
    for i, entry in enumerate(_list(data, "great_circles")):
        pole, name = _array(entry, 2, f"great_circles[{i}]")
        great_circles.append(
            GreatCircle(_index(pole, f"great_circles[{i}]"), _string(name, f"great_circles[{i}]"))
        )

    small_circles = []
    for i, entry in enumerate(_list(data, "small_circles")):
        pole, distance, name = _array(entry, 3, f"small_circles[{i}]")
        small_circles.append(
            SmallCircle(
                _index(pole, f"small_circles[{i}]"),
                _float(distance, f"small_circles[{i}]"),
                _string(name, f"small_circles[{i}]"),
            )
        )
    return points, arcs, great_circles, small_circles


def load_into(scene: Scene, text: str) -> None:
    """Replace the scene's contents with a saved document; the view is reset.

    Raises ValueError, leaving the scene untouched, if the document is malformed.
    """
    points, arcs, great_circles, small_circles = _parse(text)
    scene.points = points
    scene.arcs = arcs
    scene.great_circles = great_circles
    scene.small_circles = small_circles
    scene.view = View()
    scene.selection.clear()


def loads(text: str) -> Scene:
    """Build a new scene from a saved document."""
    scene = Scene()
    load_into(scene, text)
    return scene


def save(scene: Scene, path: str | Path = DEFAULT_FILENAME) -> None:
    """Write the scene to ``path`` as JSON."""
    Path(path).write_text(dumps(scene), encoding="utf-8")


def load(path: str | Path) -> Scene:
    """Read a scene from a JSON file."""
    return loads(Path(path).read_text(encoding="utf-8"))