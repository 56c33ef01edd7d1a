"""Interactive scene state: points, arcs, circles, selection and view rotation."""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from skysphere.circles import GreatCircle, SmallCircle, snap_to_great_circle
from skysphere.geometry import Point, Quaternion, Vec3

PICK_RADIUS_SQ = 0.002
SNAP_THRESHOLD = 0.05
ROTATION_SENSITIVITY = 0.005
MIN_ZOOM = 0.5
MAX_ZOOM = 2.0


def _dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _scaled(vec: Vec3, factor: float) -> Vec3:
    return (vec[0] * factor, vec[1] * factor, vec[2] * factor)


def _flip_case(text: str) -> str:
    upper = text.upper()
    return text.lower() if upper == text else upper


@dataclass
class Selection:
    """Ordered list of selected point indices."""

    ids: list[int] = field(default_factory=list)

    def __iter__(self) -> Iterator[int]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, id: object) -> bool:
        return id in self.ids

    def __getitem__(self, index: int) -> int:
        return self.ids[index]

    def clear(self) -> None:
        self.ids.clear()

    def pop(self) -> int | None:
        """Remove and return the most recently selected index, if any."""
        return self.ids.pop() if self.ids else None

    def toggle(self, multi: bool, id: int) -> bool:
        """Toggle ``id``; returns True when it ends up selected."""
        if multi:
            if id in self.ids:
                self.ids = [x for x in self.ids if x != id]
                return False
            self.ids.append(id)
            return True
        if self.ids == [id]:
            self.ids.clear()
            return False
        self.ids = [id]
        return True

    def select(self, id: int) -> bool:
        """Add ``id`` if absent; returns True when it was added."""
        if id in self.ids:
            return False
        self.ids.append(id)
        return True


@dataclass
class View:
    """Zoom factor, Euler angles in degrees and the view rotation."""

    zoom: float = 1.0
    euler: Vec3 = (0.0, 0.0, 0.0)
    rotation: Quaternion = field(default_factory=Quaternion.identity)


def select_point(
    pos: Vec3 | None, points: Sequence[Point], rotation: Quaternion
) -> int | Point | None:
    """Pick a visible point near ``pos``.

    ``pos`` is a position on the sphere in the rotated frame, or None when the
    pointer is off the disc. Returns the index of an existing point, a new
    unsaved point at ``pos``, or None.
    """
    if pos is None:
        return None
    px, py, _ = pos
    for point in points:
        x, y, z = point.rotated
        if z < 0.0:
            continue
        if (px - x) ** 2 + (py - y) ** 2 <= PICK_RADIUS_SQ:
            return point.id
    return Point.from_rotated(len(points), pos, rotation)


@dataclass
class Scene:
    """Everything drawn on the sphere, plus the state of pointer interactions."""

    points: list[Point] = field(default_factory=list)
    arcs: list[tuple[int, int]] = field(default_factory=list)
    great_circles: list[GreatCircle] = field(default_factory=list)
    small_circles: list[SmallCircle] = field(default_factory=list)
    selection: Selection = field(default_factory=Selection)
    view: View = field(default_factory=View)
    dragged: int | None = None
    rotating: bool = False
    last_pos: tuple[float, float] = (0.0, 0.0)

    # pointer handling

    def primary_click(self, pos: Vec3 | None, shift: bool = False) -> None:
        """Select or create a point; shift adds to the selection and snaps new points."""
        rotation = self.view.rotation
        picked = select_point(pos, self.points, rotation)
        if picked is None:
            return
        if isinstance(picked, Point):
            point = picked
            if shift:
                snapped = snap_to_great_circle(
                    point.rotated, self.great_circles, self.points, SNAP_THRESHOLD
                )
                point = Point.from_rotated(len(self.points), snapped, rotation)
            self.points.append(point)
            self.selection.toggle(shift, len(self.points) - 1)
            return
        if self.selection.toggle(shift, picked) and self.points[picked].movable:
            self.dragged = picked

    def secondary_click(self, pos: Vec3 | None) -> None:
        """Toggle arcs between every selected point and the clicked point."""
        if not self.selection:
            return
        picked = select_point(pos, self.points, Quaternion.identity())
        if not isinstance(picked, int):
            return
        for selected in list(self.selection):
            if selected == picked:
                continue
            if (selected, picked) in self.arcs:
                self.arcs = [a for a in self.arcs if a != (selected, picked)]
            elif (picked, selected) in self.arcs:
                self.arcs = [a for a in self.arcs if a != (picked, selected)]
            else:
                self.arcs.append((selected, picked))

    def middle_click(self, x: float, y: float) -> None:
        """Start rotating the view from screen position (x, y)."""
        self.rotating = True
        self.last_pos = (x, y)

    def scroll(self, delta: float) -> None:
        """Zoom by a wheel delta, clamped to the allowed range."""
        zoom = self.view.zoom * (1.0 - delta * 0.001)
        self.view.zoom = min(MAX_ZOOM, max(MIN_ZOOM, zoom))

    def mouse_move(
        self, x: float, y: float, pos: Vec3 | None = None, shift: bool = False
    ) -> None:
        """Drag the held point to ``pos`` and/or rotate the view by the screen motion."""
        if self.dragged is not None:
            if pos is None:
                return
            target = pos
            if shift:
                target = snap_to_great_circle(
                    pos, self.great_circles, self.points, SNAP_THRESHOLD
                )
            self.points[self.dragged].move_to(target, self.view.rotation)
            self.selection.select(self.dragged)
        if self.rotating:
            last_x, last_y = self.last_pos
            delta_x = (x - last_x) * ROTATION_SENSITIVITY
            delta_y = -(y - last_y) * ROTATION_SENSITIVITY
            about_x = Quaternion.from_axis_angle((1.0, 0.0, 0.0), delta_y)
            about_y = Quaternion.from_axis_angle((0.0, 1.0, 0.0), delta_x)
            rotation = about_x * about_y * self.view.rotation
            self.view.rotation = rotation
            self.view.euler = rotation.to_euler_deg()
            self.last_pos = (x, y)
            for point in self.points:
                point.rotate(rotation)

    def mouse_up(self) -> None:
        """End any drag or rotation."""
        self.dragged = None
        self.rotating = False

    # sliders and file handling

    def set_euler(self, euler: Vec3) -> None:
        """Set the view rotation from (yaw, pitch, roll) in degrees."""
        self.view.euler = tuple(euler)
        rotation = Quaternion.from_euler_deg(self.view.euler)
        self.view.rotation = rotation
        for point in self.points:
            point.rotate(rotation)

    def set_zoom(self, zoom: float) -> None:
        self.view.zoom = zoom

    def reset(self) -> None:
        """Clear the scene and restore the default view."""
        self.points.clear()
        self.arcs.clear()
        self.great_circles.clear()
        self.small_circles.clear()
        self.view = View()
        self.selection.clear()

    # keyboard handling

    def key(self, key: str, shift: bool = False) -> None:
        """Handle a key press applied to the current selection.

        ``key`` is a named key ("Delete", "Escape", "Backspace", ...) or the
        typed character.
        """
        for i in reversed(list(self.selection)):
            if key == "Delete":
                if not self._delete(i):
                    return
            elif key == "Escape":
                self.selection.clear()
                break
            elif key == "Backspace":
                gc = self._great_circle(i)
                if gc is not None and shift:
                    gc.name = gc.name[:-1]
                    continue
                self.points[i].name = self.points[i].name[:-1]
            elif len(key) != 1:
                continue
            elif key == ".":
                if self._great_circle(i) is None:
                    self.great_circles.append(GreatCircle(i))
                else:
                    self.great_circles = [g for g in self.great_circles if g.pole != i]
            elif key == ">" and shift:
                self._toggle_great_circle_through_pair()
                break
            elif key == ",":
                self._toggle_small_circle_through_three()
                break
            elif key == "<":
                self._toggle_small_circle_around_pole()
                break
            elif key == "/":
                self.points.append(self.points[i].inverted(len(self.points)))
            else:
                self._type_character(i, key, shift)

    def _great_circle(self, pole: int) -> GreatCircle | None:
        return next((g for g in self.great_circles if g.pole == pole), None)

    def _small_circle(self, pole: int) -> SmallCircle | None:
        return next((s for s in self.small_circles if s.pole == pole), None)

    def _type_character(self, i: int, char: str, shift: bool) -> None:
        gc = self._great_circle(i)
        if gc is not None:
            if shift:
                gc.name += _flip_case(char)
                return
        else:
            sc = self._small_circle(i)
            if sc is not None and shift:
                sc.name += _flip_case(char)
                return
        self.points[i].name += char

    def _delete(self, i: int) -> bool:
        """Swap-remove point ``i``; returns False if the point may not be removed."""
        if not self.points[i].removable:
            return False
        last = self.points.pop()
        if i < len(self.points):
            self.points[i] = last
            last.id = i
        self.arcs = [(a, b) for a, b in self.arcs if a != i and b != i]
        self.great_circles = [g for g in self.great_circles if g.pole != i]
        self.small_circles = [s for s in self.small_circles if s.pole != i]
        moved = len(self.points)
        self.arcs = [
            (i if a == moved else a, i if b == moved else b) for a, b in self.arcs
        ]
        for gc in self.great_circles:
            if gc.pole == moved:
                gc.pole = i
        for sc in self.small_circles:
            if sc.pole == moved:
                sc.pole = i
        self.selection.pop()
        return True

    def _parallel_pole(self, normal: Vec3, poles: set[int]) -> int | None:
        for idx, point in enumerate(self.points):
            if idx in poles and abs(abs(_dot(normal, point.absolute)) - 1.0) < 1e-6:
                return idx
        return None

    def _toggle_great_circle_through_pair(self) -> None:
        if len(self.selection) != 2:
            return
        p1 = self.points[self.selection[0]].absolute
        p2 = self.points[self.selection[1]].absolute
        cross = _cross(p1, p2)
        mag2 = _dot(cross, cross)
        if mag2 < 1e-10:
            ax, ay, az = abs(p1[0]), abs(p1[1]), abs(p1[2])
            if ax < ay and ax < az:
                perp = (0.0, -p1[2], p1[1])
            elif ay < az:
                perp = (p1[2], 0.0, -p1[0])
            else:
                perp = (-p1[1], p1[0], 0.0)
            normal = _scaled(perp, 1.0 / math.sqrt(_dot(perp, perp)))
        else:
            normal = _scaled(cross, 1.0 / math.sqrt(mag2))
        existing = self._parallel_pole(normal, {g.pole for g in self.great_circles})
        if existing is not None:
            self.great_circles = [g for g in self.great_circles if g.pole != existing]
            return
        self.points.append(
            Point.from_absolute(len(self.points), normal, self.view.rotation)
        )
        self.great_circles.append(GreatCircle(len(self.points) - 1))

    def _toggle_small_circle_through_three(self) -> None:
        if len(self.selection) != 3:
            return
        p1, p2, p3 = (self.points[idx].absolute for idx in self.selection.ids[:3])
        v1 = (p2[0] - p1[0], p2[1] - p1[1], p2[2] - p1[2])
        v2 = (p3[0] - p1[0], p3[1] - p1[1], p3[2] - p1[2])
        normal = _cross(v1, v2)
        mag2 = _dot(normal, normal)
        if mag2 < 1e-10:
            return
        n = _scaled(normal, 1.0 / math.sqrt(mag2))
        if sum(1 for p in (p1, p2, p3) if _dot(n, p) < 0.0) >= 2:
            n = _scaled(n, -1.0)
        existing = self._parallel_pole(n, {s.pole for s in self.small_circles})
        if existing is not None:
            self.small_circles = [s for s in self.small_circles if s.pole != existing]
            return
        plane_distance = _dot(p1, n)
        pole_idx = len(self.points)
        self.points.append(Point.from_absolute(pole_idx, n, self.view.rotation))
        self.small_circles.append(SmallCircle(pole_idx, plane_distance))

    def _toggle_small_circle_around_pole(self) -> None:
        if len(self.selection) != 2:
            return
        pole_idx, point_idx = self.selection[0], self.selection[1]
        if self._small_circle(pole_idx) is not None:
            self.small_circles = [s for s in self.small_circles if s.pole != pole_idx]
            return
        plane_distance = _dot(
            self.points[pole_idx].absolute, self.points[point_idx].absolute
        )
        self.small_circles.append(SmallCircle(pole_idx, plane_distance))