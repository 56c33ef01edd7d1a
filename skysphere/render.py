"""Information panels and SVG rendering of a scene, with a command-line entry point."""

from __future__ import annotations

import argparse
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from xml.sax.saxutils import escape

from skysphere.circles import (
    _fmt,
    arc_paths,
    coordinate_grid_paths,
    great_circle_label_position,
    great_circle_paths,
    small_circle_label_position,
    small_circle_paths,
)
from skysphere.geometry import Point, arc_distance, triangle_angles
from skysphere.scene import Scene
from skysphere.storage import load


@dataclass(frozen=True)
class TriangleInfo:
    """Sides and angles, in degrees, of the spherical triangle on three selected points."""

    side_a: float
    side_b: float
    side_c: float
    angle_a: float
    angle_b: float
    angle_c: float
    excess: float


@dataclass(frozen=True)
class CircleInfo:
    """Description of a circle whose pole is the single selected point."""

    kind: str
    pole: int
    name: str
    plane_distance: float | None = None
    radius: float | None = None


def triangle_info(scene: Scene) -> TriangleInfo | None:
    """Triangle details when exactly three points are selected, else None."""
    if len(scene.selection) != 3:
        return None
    a_pos, b_pos, c_pos = (scene.points[i].absolute for i in scene.selection)
    side_a = arc_distance(b_pos, c_pos)
    side_b = arc_distance(a_pos, c_pos)
    side_c = arc_distance(a_pos, b_pos)
    angles = [math.degrees(x) for x in triangle_angles(side_a, side_b, side_c)]
    return TriangleInfo(
        side_a=math.degrees(side_a),
        side_b=math.degrees(side_b),
        side_c=math.degrees(side_c),
        angle_a=angles[0],
        angle_b=angles[1],
        angle_c=angles[2],
        excess=sum(angles) - 180.0,
    )


def circle_info(scene: Scene) -> list[CircleInfo]:
    """Great and small circles around the single selected point."""
    if len(scene.selection) != 1:
        return []
    pole = scene.selection[0]
    result = []
    gc = next((g for g in scene.great_circles if g.pole == pole), None)
    if gc is not None:
        result.append(CircleInfo("great", pole, gc.name))
    sc = next((s for s in scene.small_circles if s.pole == pole), None)
    if sc is not None:
        rest = 1.0 - sc.plane_distance**2
        radius = math.sqrt(rest) if rest >= 0.0 else math.nan
        result.append(CircleInfo("small", pole, sc.name, sc.plane_distance, radius))
    return result


def point_info(point: Point) -> str:
    """The text of a point's information box."""
    x, y, z = point.absolute
    theta, phi = point.abs_polar
    rx, ry, rz = point.rotated
    rtheta, rphi = point.rot_polar
    lines = [
        "Absolute Coordinates:",
        f"x: {x:.2f}, y: {-y:.2f}, z: {z:.2f}",
        f"θ: {-theta:.2f}, φ: {phi:.2f}°",
        "",
        "Rotated Frame Coordinates:",
        f"x: {rx:.2f}, y: {-ry:.2f}, z: {rz:.2f}",
        f"θ: {-rtheta:.2f}, φ: {rphi:.2f}",
        "",
        f"ID: {point.id}",
        f"Name: {point.name}",
        f"Movable: {'yes' if point.movable else 'no'}",
        f"Removable: {'yes' if point.removable else 'no'}",
    ]
    return "\n".join(lines)


def _attrs(**attrs: object) -> str:
    parts = []
    for key, value in attrs.items():
        text = _fmt(value) if isinstance(value, float) else str(value)
        parts.append(f'{key.replace("_", "-")}="{escape(text, {chr(34): "&quot;"})}"')
    return " ".join(parts)


def _path(d: str, stroke: str, width: str, **extra: object) -> str:
    return f"<path {_attrs(d=d, stroke=stroke, stroke_width=width, fill='none', **extra)}/>"


def _text(content: str, **attrs: object) -> str:
    return f"<text {_attrs(**attrs)}>{escape(content)}</text>"


def _grid(scene: Scene) -> list[str]:
    lat, lon = coordinate_grid_paths(scene.view.rotation)
    out = []
    for front, back in lat + lon:
        for d, opacity in ((front, "0.3"), (back, "0.1")):
            out.append(
                _path(d, "#6B8E23", "0.15", stroke_dasharray="0.5 0.5", opacity=opacity)
            )
    return out


def render_svg(scene: Scene, show_grid: bool = False) -> str:
    """Draw the sphere with its circles, arcs, labels and points as an SVG document."""
    zoom = scene.view.zoom
    origin = _fmt(50.0 - 50.0 / zoom)
    size = _fmt(100.0 / zoom)
    out = [
        f'<svg width="95vw" height="95vh" viewBox="{origin} {origin} {size} {size}">',
        '<circle cx="50" cy="50" r="25" stroke="white" stroke-width="0.2" '
        'fill="rgba(0, 0, 0, 0.4)"/>',
    ]
    if show_grid:
        out.extend(_grid(scene))
    for gc in scene.great_circles:
        front, back = great_circle_paths(scene.points[gc.pole].rotated)
        out.append(_path(front, "lime", "0.3"))
        out.append(_path(back, "rgba(0, 255, 0, 0.4)", "0.3"))
    for sc in scene.small_circles:
        front, back = small_circle_paths(scene.points[sc.pole].rotated, sc.plane_distance)
        out.append(_path(front, "cyan", "0.3"))
        out.append(_path(back, "rgba(0, 255, 255, 0.4)", "0.3"))
    for gc in scene.great_circles:
        if not gc.name:
            continue
        x, y = great_circle_label_position(scene.points[gc.pole].rotated)
        out.append(
            _text(
                gc.name, x=x - 2.0, y=y - 2.0, font_family="Arial", font_size="2",
                text_anchor="middle", fill="white",
                style="font-weight: bold; user-select: none;",
            )
        )
    for sc in scene.small_circles:
        if not sc.name:
            continue
        x, y, opacity = small_circle_label_position(scene.points[sc.pole].rotated)
        out.append(
            _text(
                sc.name, x=x, y=y + 3.0, fill=f"rgba(0, 255, 255, {_fmt(opacity)})",
                font_family="Arial", font_size="1.5", text_anchor="middle",
            )
        )
    for a, b in scene.arcs:
        front, back = arc_paths(scene.points[a].rotated, scene.points[b].rotated)
        out.append(_path(front, "#FFA500", "0.3"))
        out.append(_path(back, "rgba(255, 165, 0, 0.4)", "0.3"))
    for point in scene.points:
        x, y, z = point.rotated
        opacity = _fmt(1.0 if z > 0.0 else 0.4)
        r = 1.0 if point.id in scene.selection else 0.6
        cx, cy = x * 25.0 + 50.0, y * 25.0 + 50.0
        out.append(f"<circle {_attrs(cx=cx, cy=cy, r=r, fill=f'rgba(255, 0, 0, {opacity})')}/>")
        out.append(
            _text(
                point.name, x=cx, y=cy - 2.0, fill=f"rgba(255, 255, 255, {opacity})",
                font_family="Arial", font_size="2", text_anchor="middle",
                style="font-weight: bold; user-select: none;",
            )
        )
    out.append("</svg>")
    return "\n".join(out)


def main(argv: list[str] | None = None) -> int:
    """Render a saved scene file to SVG."""
    parser = argparse.ArgumentParser(
        prog="skysphere", description="Render a saved celestial sphere scene as SVG."
    )
    parser.add_argument("input", help="scene file in JSON")
    parser.add_argument("-o", "--output", help="SVG file to write (default: standard output)")
    parser.add_argument("--grid", action="store_true", help="draw the coordinate grid")
    parser.add_argument(
        "--euler", nargs=3, type=float, metavar=("YAW", "PITCH", "ROLL"),
        help="view rotation in degrees",
    )
    parser.add_argument("--zoom", type=float, help="zoom factor")
    args = parser.parse_args(argv)

    try:
        scene = load(args.input)
    except (OSError, ValueError) as exc:
        print(f"skysphere: {exc}", file=sys.stderr)
        return 1
    if args.euler is not None:
        scene.set_euler(tuple(args.euler))
    if args.zoom is not None:
        scene.set_zoom(args.zoom)
    svg = render_svg(scene, args.grid)
    if args.output:
        Path(args.output).write_text(svg + "\n", encoding="utf-8")
    else:
        print(svg)
    return 0