import json

import pytest

from skysphere.circles import GreatCircle, SmallCircle
from skysphere.geometry import Point, Quaternion
from skysphere.scene import Scene
from skysphere.storage import dumps, load, load_into, loads, save, to_dict


def make_scene():
    scene = Scene()
    a = Point.from_vec3(0, (1.0, 0.0, 0.0))
    a.name = "A"
    a.removable = False
    b = Point.from_vec3(1, (0.0, 1.0, 0.0))
    b.name = "B"
    c = Point.from_vec3(2, (0.0, 0.0, 1.0))
    c.movable = False
    scene.points = [a, b, c]
    scene.arcs = [(0, 1), (1, 2)]
    scene.great_circles = [GreatCircle(2, "eq")]
    scene.small_circles = [SmallCircle(0, 0.5, "ring")]
    return scene


def test_to_dict_layout():
    data = to_dict(make_scene())
    assert data["points"][0] == [[1.0, 0.0, 0.0], "A", True, False]
    assert data["points"][2] == [[0.0, 0.0, 1.0], "", False, True]
    assert data["arcs"] == [[0, 1], [1, 2]]
    assert data["great_circles"] == [[2, "eq"]]
    assert data["small_circles"] == [[0, 0.5, "ring"]]


def test_dumps_is_pretty_json_of_dict():
    scene = make_scene()
    text = dumps(scene)
    assert json.loads(text) == to_dict(scene)
    assert '\n  "points": [' in text


def test_round_trip():
    scene = make_scene()
    restored = loads(dumps(scene))
    assert [p.absolute for p in restored.points] == [p.absolute for p in scene.points]
    assert [p.name for p in restored.points] == ["A", "B", ""]
    assert [(p.movable, p.removable) for p in restored.points] == [
        (p.movable, p.removable) for p in scene.points
    ]
    assert [p.id for p in restored.points] == [0, 1, 2]
    assert restored.arcs == scene.arcs
    assert restored.great_circles == scene.great_circles
    assert restored.small_circles == scene.small_circles


def test_loaded_points_are_unrotated():
    scene = make_scene()
    scene.set_euler((40.0, 10.0, 5.0))
    restored = loads(dumps(scene))
    for point in restored.points:
        assert point.rotated == point.absolute


def test_load_into_resets_view_and_selection():
    target = make_scene()
    target.set_euler((30.0, 0.0, 0.0))
    target.set_zoom(1.7)
    target.selection.select(1)
    load_into(target, dumps(make_scene()))
    assert target.view.rotation == Quaternion.identity()
    assert target.view.zoom == 1.0
    assert len(target.selection) == 0


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[]",
        '{"points": [], "arcs": [], "great_circles": []}',
        '{"points": [[[1, 0], "a", true, true]], "arcs": [], "great_circles": [], "small_circles": []}',
        '{"points": [], "arcs": [[-1, 0]], "great_circles": [], "small_circles": []}',
        '{"points": [], "arcs": [[true, 0]], "great_circles": [], "small_circles": []}',
        '{"points": [[[1, 0, 0], "a", 1, true]], "arcs": [], "great_circles": [], "small_circles": []}',
        '{"points": [], "arcs": [], "great_circles": [[0, 5]], "small_circles": []}',
        '{"points": [], "arcs": [], "great_circles": [], "small_circles": [[0, "x", "n"]]}',
    ],
)
def test_malformed_documents_raise(text):
    with pytest.raises(ValueError):
        loads(text)


def test_failed_load_leaves_scene_untouched():
    scene = make_scene()
    with pytest.raises(ValueError):
        load_into(scene, "{}")
    assert len(scene.points) == 3
    assert scene.arcs == [(0, 1), (1, 2)]


def test_integer_coordinates_are_accepted():
    text = '{"points": [[[0, 0, 1], "z", true, true]], "arcs": [], "great_circles": [], "small_circles": [[0, 0, ""]]}'
    scene = loads(text)
    assert scene.points[0].absolute == (0.0, 0.0, 1.0)
    assert scene.small_circles[0].plane_distance == 0.0


def test_save_and_load_file(tmp_path):
    scene = make_scene()
    path = tmp_path / "sky.json"
    save(scene, path)
    restored = load(path)
    assert restored.arcs == scene.arcs
    assert [p.name for p in restored.points] == [p.name for p in scene.points]