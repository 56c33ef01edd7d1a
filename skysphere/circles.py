"""Great circles, small circles, arcs and the coordinate grid, with SVG path data."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from skysphere.geometry import Point, Quaternion, Vec3

STEPS = 200
SVG_SCALE = 25.0
SVG_CENTER = 50.0

SvgPoint = tuple[float, float]


@dataclass
class GreatCircle:
    """A great circle identified by the index of its pole point."""

    pole: int
    name: str = ""


@dataclass
class SmallCircle:
    """A small circle: pole point index and the distance of its plane from the centre."""

    pole: int
    plane_distance: float
    name: str = ""


def _div(a: float, b: float) -> float:
    """Division that yields inf or NaN on a zero divisor."""
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _sqrt(value: float) -> float:
    return math.sqrt(value) if value >= 0.0 else math.nan


def _fmt(value: float) -> str:
    """Shortest round-trip decimal text without an exponent."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0.0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        return format(Decimal(text), "f")
    return text


def _svg(x: float, y: float) -> SvgPoint:
    return (x * SVG_SCALE + SVG_CENTER, y * SVG_SCALE + SVG_CENTER)


def _join(points: Iterable[SvgPoint]) -> str:
    return " L ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in points)


def _segments_data(segments: Iterable[Sequence[SvgPoint]]) -> str:
    return " ".join("M " + _join(seg) for seg in segments if seg)


def great_circle_points(pole: Vec3, steps: int = STEPS) -> list[Vec3]:
    """Points along the great circle whose pole is ``pole``, closing on the start."""
    x, y, z = pole
    r2 = math.hypot(x, y)
    u = (_div(-y, r2), _div(x, r2), 0.0)
    v = (-z * u[1], z * u[0], r2)
    result = []
    for i in range(steps + 1):
        theta = i * math.tau / steps
        c, s = math.cos(theta), math.sin(theta)
        result.append((c * u[0] + s * v[0], c * u[1] + s * v[1], c * u[2] + s * v[2]))
    return result


def small_circle_points(pole: Vec3, distance: float, steps: int = STEPS) -> list[Vec3]:
    """Points along the small circle around ``pole`` whose plane lies at ``distance``."""
    px, py, pz = pole
    center = (px * distance, py * distance, pz * distance)
    radius = _sqrt(1.0 - distance * distance)
    if abs(px) < abs(py) and abs(px) < abs(pz):
        u = (0.0, pz, -py)
    elif abs(py) < abs(pz):
        u = (-pz, 0.0, px)
    else:
        u = (py, -px, 0.0)
    mag = math.sqrt(u[0] * u[0] + u[1] * u[1] + u[2] * u[2])
    u = (_div(u[0], mag), _div(u[1], mag), _div(u[2], mag))
    v = (
        py * u[2] - pz * u[1],
        pz * u[0] - px * u[2],
        px * u[1] - py * u[0],
    )
    result = []
    for i in range(steps + 1):
        angle = i * math.tau / steps
        c, s = math.cos(angle), math.sin(angle)
        result.append(
            tuple(center[k] + radius * (c * u[k] + s * v[k]) for k in range(3))
        )
    return result


def arc_points(p1: Vec3, p2: Vec3, steps: int = STEPS) -> list[Vec3]:
    """Points along the shorter great-circle arc from ``p1`` to ``p2``."""
    pq = min(1.0, max(-1.0, p1[0] * p2[0] + p1[1] * p2[1] + p1[2] * p2[2]))
    if abs(pq) > 1.0 - 1e-5:
        r = math.hypot(p1[0], p1[1])
        z = (_div(-p1[1], r), _div(p1[0], r), 0.0)
    else:
        r = math.sqrt(1.0 - pq * pq)
        z = tuple((p2[k] - p1[k] * pq) / r for k in range(3))
    total = math.acos(pq)
    result = []
    for i in range(steps + 1):
        theta = i * total / steps
        c, s = math.cos(theta), math.sin(theta)
        result.append(tuple(c * p1[k] + s * z[k] for k in range(3)))
    return result


def split_by_side(points: Iterable[Vec3]) -> tuple[list[SvgPoint], list[SvgPoint]]:
    """Project to SVG coordinates, sorted into front (z >= 0) and back lists."""
    front: list[SvgPoint] = []
    back: list[SvgPoint] = []
    for x, y, z in points:
        (front if z >= 0.0 else back).append(_svg(x, y))
    return front, back


def split_segments(
    points: Iterable[Vec3],
) -> tuple[list[list[SvgPoint]], list[list[SvgPoint]]]:
    """Split a polyline into front and back segments, cut where it crosses z = 0."""
    front_segments: list[list[SvgPoint]] = []
    back_segments: list[list[SvgPoint]] = []
    current_front: list[SvgPoint] = []
    current_back: list[SvgPoint] = []
    last_positive: bool | None = None
    prev: Vec3 | None = None
    for point in points:
        x, y, z = point
        positive = z >= 0.0
        if prev is not None and last_positive != positive:
            t = prev[2] / (prev[2] - z)
            crossing = _svg(prev[0] + t * (x - prev[0]), prev[1] + t * (y - prev[1]))
            if last_positive:
                current_front.append(crossing)
                front_segments.append(current_front)
                current_front = []
                current_back.append(crossing)
            else:
                current_back.append(crossing)
                back_segments.append(current_back)
                current_back = []
                current_front.append(crossing)
        (current_front if positive else current_back).append(_svg(x, y))
        last_positive = positive
        prev = point
    if current_front:
        front_segments.append(current_front)
    if current_back:
        back_segments.append(current_back)
    return front_segments, back_segments


def great_circle_paths(pole: Vec3) -> tuple[str, str]:
    """SVG path data (front, back) for the great circle around ``pole``."""
    front, back = split_by_side(great_circle_points(pole))
    return "M " + _join(front), "M " + _join(back)


def small_circle_paths(pole: Vec3, distance: float) -> tuple[str, str]:
    """SVG path data (front, back) for a small circle."""
    front, back = split_segments(small_circle_points(pole, distance))
    return _segments_data(front), _segments_data(back)


def arc_paths(p1: Vec3, p2: Vec3) -> tuple[str, str]:
    """SVG path data (front, back) for the arc between two points; empty when unused."""
    front, back = split_by_side(arc_points(p1, p2))
    return (
        "M " + _join(front) if front else "",
        "M " + _join(back) if back else "",
    )


def coordinate_grid_lines(rotation: Quaternion) -> tuple[list[list[Vec3]], list[list[Vec3]]]:
    """Rotated (latitude lines, longitude lines); the equator is the last latitude line."""
    lon_lines = []
    for i in range(12):
        phi = i * math.tau / 12.0
        line = []
        for j in range(61):
            theta = j * math.pi / 60.0 - math.pi / 2.0
            vec = (math.cos(phi) * math.cos(theta), math.sin(phi) * math.cos(theta), math.sin(theta))
            line.append(rotation.rotate_active(vec))
        lon_lines.append(line)

    lat_lines = []
    for i in range(-5, 6):
        if i == 0:
            continue
        theta = i * math.pi / 6.0
        line = []
        for j in range(61):
            phi = j * math.tau / 60.0
            vec = (math.cos(phi) * math.cos(theta), math.sin(phi) * math.cos(theta), math.sin(theta))
            line.append(rotation.rotate_active(vec))
        lat_lines.append(line)

    equator = []
    for j in range(61):
        phi = j * math.tau / 60.0
        equator.append(rotation.rotate_active((math.cos(phi), math.sin(phi), 0.0)))
    lat_lines.append(equator)
    return lat_lines, lon_lines


def coordinate_grid_paths(
    rotation: Quaternion,
) -> tuple[list[tuple[str, str]], list[tuple[str, str]]]:
    """SVG path data (front, back) for every latitude and longitude line."""
    lat_lines, lon_lines = coordinate_grid_lines(rotation)

    def paths(line: list[Vec3]) -> tuple[str, str]:
        front, back = split_segments(line)
        return _segments_data(front), _segments_data(back)

    return [paths(line) for line in lat_lines], [paths(line) for line in lon_lines]


def great_circle_label_position(pole: Vec3) -> SvgPoint:
    """SVG anchor for a great circle's label, on its rim crossing."""
    px, py, _ = pole
    r2 = math.hypot(px, py)
    if r2 < 1e-5:
        return (75.0, 50.0)
    return _svg(py / r2, -px / r2)


def small_circle_label_position(pole: Vec3) -> tuple[float, float, float]:
    """SVG anchor and opacity for a small circle's label, at its pole."""
    x, y, z = pole
    svg_x, svg_y = _svg(x, y)
    return svg_x, svg_y, 1.0 if z > 0.0 else 0.4


def snap_to_great_circle(
    point: Vec3,
    great_circles: Iterable[GreatCircle],
    points: Sequence[Point],
    threshold: float,
) -> Vec3:
    """Project ``point`` onto the nearest great circle closer than ``threshold``."""
    closest = threshold
    snapped = point
    for gc in great_circles:
        pole = points[gc.pole].rotated
        dot = point[0] * pole[0] + point[1] * pole[1] + point[2] * pole[2]
        distance = abs(dot)
        if distance < closest:
            projected = tuple(point[k] - dot * pole[k] for k in range(3))
            mag = math.sqrt(sum(c * c for c in projected))
            if mag > 1e-10:
                snapped = tuple(c / mag for c in projected)
                closest = distance
    return snapped