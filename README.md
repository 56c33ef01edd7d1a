# skysphere

A small toolkit for working on the celestial sphere: place points on a unit
sphere, join them with great-circle arcs, draw great and small circles, solve
spherical triangles, save and load scenes as JSON, and render a scene as SVG.

It needs nothing beyond the Python standard library (Python 3.10 or later).

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `skysphere.geometry`: `Quaternion`, `Point`, and the functions
  `viewport_to_sphere`, `arc_distance`, `triangle_angles` and `vec3_to_polar`.
- `skysphere.circles`: `GreatCircle`, `SmallCircle`, sampling of circles and
  arcs, SVG path data, the coordinate grid and `snap_to_great_circle`.
- `skysphere.scene`: `Scene`, `Selection`, `View` and `select_point`.
- `skysphere.storage`: JSON saving and loading.
- `skysphere.render`: information for the current selection, SVG output and
  the `skysphere` command.

## Concepts

- **Point**: a position on the unit sphere. Each point keeps its `absolute`
  coordinates and its `rotated` (viewing frame) coordinates, polar angles for
  both (`abs_polar`, `rot_polar`), a `name`, and `movable` / `removable` flags.
  `Point.inverted` gives the antipodal point.
- **Quaternion**: the view rotation. Build one with `Quaternion.identity()`,
  `Quaternion.from_euler_deg((yaw, pitch, roll))` or
  `Quaternion.from_axis_angle(axis, angle)`, combine with `multiply` (or `*`),
  and apply it with `rotate_active` (q p q*) or `rotate_passive` (q* p q).
  `to_euler_deg` returns angles folded into [0, 360).
- **GreatCircle**: a great circle, given by the index of its pole point.
- **SmallCircle**: a small circle, given by a pole point index and the
  distance of its plane from the centre of the sphere.
- **Scene**: the points, arcs, circles, selection and view, with methods for
  pointer and keyboard interaction (`primary_click`, `secondary_click`,
  `middle_click`, `scroll`, `mouse_move`, `mouse_up`, `key`) and the view
  controls `set_euler`, `set_zoom` and `reset`.

## Spherical geometry

```python
from skysphere.geometry import arc_distance, triangle_angles, vec3_to_polar

a = (1.0, 0.0, 0.0)
b = (0.0, 1.0, 0.0)
c = (0.0, 0.0, 1.0)

side_a = arc_distance(b, c)
side_b = arc_distance(a, c)
side_c = arc_distance(a, b)
angles = triangle_angles(side_a, side_b, side_c)   # radians

theta, phi = vec3_to_polar(c)                      # degrees
```

`viewport_to_sphere(x, y, left, top, width, height)` maps a screen position to
a point on the visible hemisphere of a disc drawn in the given bounding box,
or returns `None` outside the disc.

## Building a scene

Scene methods take positions that are already on the sphere, in the rotated
frame (for example from `viewport_to_sphere`), or `None` for a position off
the disc.

```python
from skysphere.scene import Scene

scene = Scene()
scene.primary_click((0.0, 0.0, 1.0))              # new point 0, selected
scene.primary_click((0.6, 0.0, 0.8), shift=True)  # new point 1, added to the selection
scene.key(">", shift=True)                        # great circle through points 0 and 1
```

- `primary_click(pos, shift)`: selects the visible point near `pos` or creates
  a new one there. With shift the selection is extended instead of replaced,
  and a new point is snapped onto a nearby great circle. Clicking a movable
  point that ends up selected starts dragging it.
- `secondary_click(pos)`: toggles an arc between every selected point and the
  clicked point.
- `middle_click(x, y)` then `mouse_move(x, y)`: rotates the view by the screen
  motion; `mouse_move(x, y, pos, shift)` also moves a dragged point to `pos`
  (snapped with shift). `mouse_up()` ends both.
- `scroll(delta)`: zooms, clamped between 0.5 and 2.0.

## Keyboard actions

`Scene.key(key, shift)` acts on the selected points, latest selected first:

| Key | Action |
| --- | --- |
| `Delete` | remove the selected points; stops at the first one marked non-removable |
| `Escape` | clear the selection |
| `.` | toggle a great circle with the selected point as pole |
| `>` (with shift) | with two points selected, add the pole point and great circle through them, or remove an existing one |
| `,` | with three points selected, add the pole point and small circle through them, or remove an existing one |
| `<` | with two points selected, toggle a small circle around the first, passing through the second |
| `/` | add the antipode of the selected point |
| `Backspace` | delete the last character of the point's name; with shift, of its great circle's name |
| any other character | append it to the point's name; with shift and a circle on that pole, append it with its case flipped to the circle's name |

## Circles, arcs and snapping

`skysphere.circles` samples great circles, small circles and arcs
(`great_circle_points`, `small_circle_points`, `arc_points`), sorts or cuts
them into the parts in front of and behind the sphere (`split_by_side`,
`split_segments`), and turns them into SVG path data (`great_circle_paths`,
`small_circle_paths`, `arc_paths`, `coordinate_grid_paths`).
`great_circle_label_position` and `small_circle_label_position` give label
anchors. `snap_to_great_circle(point, great_circles, points, threshold)` pulls
a point onto the nearest great circle closer than the threshold.

## Saving and loading

```python
from skysphere import storage

storage.save(scene, "celestial_data.json")
scene = storage.load("celestial_data.json")
```

`storage.dumps` and `storage.loads` do the same with JSON text, `storage.to_dict`
gives the saved form as plain data, and `storage.load_into` replaces the
contents of an existing scene. A saved file holds points, arcs and circles;
the view and selection are not saved and are reset on loading. Malformed
documents raise `ValueError`.

## Rendering

`skysphere.render.render_svg(scene, show_grid)` produces an SVG document of
the scene. For the current selection, `triangle_info(scene)` gives the sides,
angles and spherical excess (in degrees) when three points are selected,
`circle_info(scene)` describes the circles around a single selected point, and
`point_info(point)` gives a point's coordinates as text.

From the command line, a saved scene is rendered to SVG:

```
skysphere celestial_data.json -o sphere.svg --grid --euler 30 0 0 --zoom 1.5
```

Without `-o` the SVG is written to standard output. Run `skysphere --help`
for the options.

## What it does not do

There is no interactive window: the package keeps the scene state and reacts
to the pointer and key events it is handed, but it does not open a screen or
read a mouse or keyboard itself. Output is SVG text and JSON files.