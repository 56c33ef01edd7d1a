import math

import pytest

from skysphere.circles import GreatCircle, SmallCircle, coordinate_grid_paths
from skysphere.geometry import Point
from skysphere.render import circle_info, main, point_info, render_svg, triangle_info
from skysphere.scene import Scene
from skysphere.storage import save


def octant_scene():
    scene = Scene()
    scene.points = [
        Point.from_vec3(0, (1.0, 0.0, 0.0)),
        Point.from_vec3(1, (0.0, 1.0, 0.0)),
        Point.from_vec3(2, (0.0, 0.0, 1.0)),
    ]
    return scene


def test_triangle_info_octant():
    scene = octant_scene()
    for i in range(3):
        scene.selection.select(i)
    info = triangle_info(scene)
    for value in (info.side_a, info.side_b, info.side_c, info.angle_a, info.angle_b, info.angle_c):
        assert value == pytest.approx(90.0)
    assert info.excess == pytest.approx(info.angle_a + info.angle_b + info.angle_c - 180.0)


def test_triangle_info_requires_three_selected():
    scene = octant_scene()
    scene.selection.select(0)
    scene.selection.select(1)
    assert triangle_info(scene) is None


def test_circle_info_great_and_small():
    scene = octant_scene()
    scene.great_circles = [GreatCircle(2, "eq")]
    scene.small_circles = [SmallCircle(2, 0.6, "ring")]
    scene.selection.select(2)
    infos = circle_info(scene)
    assert [i.kind for i in infos] == ["great", "small"]
    assert infos[0].name == "eq" and infos[0].pole == 2
    small = infos[1]
    assert small.plane_distance == 0.6
    assert small.radius**2 + small.plane_distance**2 == pytest.approx(1.0)


def test_circle_info_empty_without_single_selection():
    scene = octant_scene()
    scene.great_circles = [GreatCircle(2)]
    assert circle_info(scene) == []


def test_point_info_text():
    point = Point.from_vec3(3, (0.0, 0.0, 1.0))
    point.name = "Vega"
    lines = point_info(point).splitlines()
    assert lines[0] == "Absolute Coordinates:"
    assert "Rotated Frame Coordinates:" in lines
    assert "ID: 3" in lines
    assert "Name: Vega" in lines


def test_render_default_viewbox_and_points():
    scene = octant_scene()
    svg = render_svg(scene)
    assert svg.startswith("<svg")
    assert svg.endswith("</svg>")
    assert 'viewBox="0 0 100 100"' in svg
    assert svg.count('fill="rgba(255, 0, 0, ') == len(scene.points)


def test_render_marks_selected_point():
    scene = octant_scene()
    scene.selection.select(2)
    svg = render_svg(scene)
    assert svg.count('r="1"') == 1


def test_render_grid_adds_paths():
    scene = octant_scene()
    without = render_svg(scene)
    with_grid = render_svg(scene, show_grid=True)
    lat, lon = coordinate_grid_paths(scene.view.rotation)
    assert "#6B8E23" not in without
    assert with_grid.count("#6B8E23") == 2 * (len(lat) + len(lon))


def test_render_escapes_names_and_draws_circles():
    scene = octant_scene()
    scene.points[0].name = "<A&B>"
    scene.great_circles = [GreatCircle(2, "Equator")]
    scene.small_circles = [SmallCircle(1, 0.5, "Ring")]
    scene.arcs = [(0, 1)]
    svg = render_svg(scene)
    assert "&lt;A&amp;B&gt;" in svg
    assert "<A&B>" not in svg
    assert "Equator" in svg and "Ring" in svg
    assert 'stroke="lime"' in svg
    assert 'stroke="cyan"' in svg
    assert 'stroke="#FFA500"' in svg


def test_render_zoom_changes_viewbox():
    scene = octant_scene()
    scene.set_zoom(2.0)
    svg = render_svg(scene)
    size = 100.0 / 2.0
    assert f"{size:g} {size:g}\"" in svg


def test_main_writes_svg(tmp_path):
    scene = octant_scene()
    scene.points[1].name = "Deneb"
    source = tmp_path / "scene.json"
    target = tmp_path / "scene.svg"
    save(scene, source)
    assert main([str(source), "-o", str(target), "--grid"]) == 0
    text = target.read_text(encoding="utf-8")
    assert "Deneb" in text
    assert "#6B8E23" in text


def test_main_rotation_moves_points(tmp_path, capsys):
    scene = octant_scene()
    source = tmp_path / "scene.json"
    save(scene, source)
    assert main([str(source)]) == 0
    plain = capsys.readouterr().out
    assert main([str(source), "--euler", "90", "0", "0"]) == 0
    rotated = capsys.readouterr().out
    assert plain.startswith("<svg") and rotated.startswith("<svg")
    assert plain != rotated
    assert math.isfinite(len(rotated))


def test_main_reports_bad_file(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("nonsense", encoding="utf-8")
    assert main([str(bad)]) == 1
    assert "skysphere:" in capsys.readouterr().err
    assert main([str(tmp_path / "missing.json")]) == 1