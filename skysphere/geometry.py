"""Vectors, rotations and points on the unit celestial sphere."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

Vec3 = tuple[float, float, float]
Polar = tuple[float, float]


def _asin_deg(value: float) -> float:
    """Arcsine in degrees, NaN outside the domain instead of raising."""
    if -1.0 <= value <= 1.0:
        return math.degrees(math.asin(value))
    return math.nan


def _neg(vec: Vec3) -> Vec3:
    return (-vec[0], -vec[1], -vec[2])


@dataclass(frozen=True)
class Quaternion:
    """A rotation quaternion w + xi + yj + zk."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def identity(cls) -> Quaternion:
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_euler_deg(cls, euler: Vec3) -> Quaternion:
        """Build from (yaw, pitch, roll) given in degrees."""
        yaw, pitch, roll = (math.radians(a) for a in euler)
        cr, sr = math.cos(roll / 2.0), math.sin(roll / 2.0)
        cp, sp = math.cos(pitch / 2.0), math.sin(pitch / 2.0)
        cy, sy = math.cos(yaw / 2.0), math.sin(yaw / 2.0)
        return cls(
            w=cr * cp * cy + sr * sp * sy,
            x=sr * cp * cy - cr * sp * sy,
            y=cr * sp * cy + sr * cp * sy,
            z=cr * cp * sy - sr * sp * cy,
        )

    @classmethod
    def from_axis_angle(cls, axis: Vec3, angle: float) -> Quaternion:
        """Rotation by ``angle`` radians about ``axis``; a null axis gives identity."""
        norm = math.sqrt(sum(c * c for c in axis))
        if norm < 1e-10:
            return cls.identity()
        half = angle * 0.5
        s = math.sin(half)
        return cls(math.cos(half), axis[0] / norm * s, axis[1] / norm * s, axis[2] / norm * s)

    def multiply(self, other: Quaternion) -> Quaternion:
        """Hamilton product ``self * other``."""
        return Quaternion(
            w=self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
            x=self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            y=self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            z=self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
        )

    def __mul__(self, other: Quaternion) -> Quaternion:
        return self.multiply(other)

    def conjugate(self) -> Quaternion:
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def rotate_active(self, point: Vec3) -> Vec3:
        """Rotate a point by this quaternion (q p q*)."""
        r = self.multiply(Quaternion(0.0, *point)).multiply(self.conjugate())
        return (r.x, r.y, r.z)

    def rotate_passive(self, point: Vec3) -> Vec3:
        """Apply the inverse rotation (q* p q)."""
        r = self.conjugate().multiply(Quaternion(0.0, *point)).multiply(self)
        return (r.x, r.y, r.z)

    def to_euler_deg(self) -> Vec3:
        """Return (yaw, pitch, roll) in degrees, each in [0, 360)."""
        w, x, y, z = self.w, self.x, self.y, self.z
        yaw = math.degrees(math.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z)))
        pitch = _asin_deg(2.0 * (w * y - z * x))
        roll = math.degrees(math.atan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y)))
        return (
            math.fmod(yaw + 360.0, 360.0),
            math.fmod(pitch + 360.0, 360.0),
            math.fmod(roll + 360.0, 360.0),
        )


def vec3_to_polar(vec: Vec3) -> Polar:
    """Return (theta, phi) in degrees; phi is folded into [0, 360)."""
    x, y, z = vec
    theta = _asin_deg(y)
    phi = math.degrees(math.atan2(x, z))
    if phi < 0.0:
        phi += 360.0
    return (theta, phi)


@dataclass
class Point:
    """A named point on the sphere, kept in both the fixed and the rotated frame."""

    id: int
    absolute: Vec3
    rotated: Vec3
    name: str = ""
    movable: bool = True
    removable: bool = True
    abs_polar: Polar = field(init=False)
    rot_polar: Polar = field(init=False)

    def __post_init__(self) -> None:
        self.absolute = tuple(self.absolute)
        self.rotated = tuple(self.rotated)
        self.abs_polar = vec3_to_polar(self.absolute)
        self.rot_polar = vec3_to_polar(self.rotated)

    @classmethod
    def from_vec3(cls, id: int, vec: Vec3) -> Point:
        """A point whose absolute and rotated positions coincide."""
        return cls(id, vec, vec)

    @classmethod
    def from_absolute(cls, id: int, vec: Vec3, q: Quaternion) -> Point:
        """A point given in the fixed frame, viewed through rotation ``q``."""
        return cls(id, vec, q.rotate_active(vec))

    @classmethod
    def from_rotated(cls, id: int, vec: Vec3, q: Quaternion) -> Point:
        """A point given in the rotated frame of rotation ``q``."""
        return cls(id, q.rotate_passive(vec), vec)

    def move_to(self, vec: Vec3, q: Quaternion) -> None:
        """Move to a rotated-frame position; immovable points stay put."""
        if not self.movable:
            return
        self.absolute = q.rotate_passive(vec)
        self.abs_polar = vec3_to_polar(self.absolute)
        self.rotated = tuple(vec)
        self.rot_polar = vec3_to_polar(self.rotated)

    def rotate(self, q: Quaternion) -> None:
        """Recompute the rotated position for view rotation ``q``."""
        self.rotated = q.rotate_active(self.absolute)
        self.rot_polar = vec3_to_polar(self.rotated)

    def inverted(self, id: int) -> Point:
        """The antipodal point, unnamed and with default flags."""
        return replace(
            self,
            id=id,
            absolute=_neg(self.absolute),
            rotated=_neg(self.rotated),
            name="",
            movable=True,
            removable=True,
        )


def viewport_to_sphere(
    x: float, y: float, left: float, top: float, width: float, height: float
) -> Vec3 | None:
    """Map a screen position onto the visible hemisphere of the drawn disc.

    ``left``, ``top``, ``width`` and ``height`` describe the disc's bounding box.
    Returns None when the position lies outside the disc.
    """
    cx = (x - left - width / 2.0) / width * 2.0
    cy = (y - top - height / 2.0) / height * 2.0
    r2 = cx * cx + cy * cy
    if r2 <= 1.0:
        return (cx, cy, math.sqrt(1.0 - r2))
    return None


def arc_distance(a: Vec3, b: Vec3) -> float:
    """Great-circle distance in radians between two unit vectors."""
    dot = a[0] * b[0] + a[1] * b[1] + a[2] * b[2]
    return math.acos(min(1.0, max(-1.0, dot)))


def triangle_angles(a: float, b: float, c: float) -> tuple[float, float, float]:
    """Angles (A, B, C) of a spherical triangle with sides a, b, c (radians)."""
    cos_a, cos_b, cos_c = math.cos(a), math.cos(b), math.cos(c)
    sin_a, sin_b, sin_c = math.sin(a), math.sin(b), math.sin(c)
    eps = 1e-10

    def angle(cos_opp: float, cos1: float, cos2: float, sin1: float, sin2: float) -> float:
        if abs(sin1) < eps or abs(sin2) < eps:
            value = 1.0
        else:
            value = (cos_opp - cos1 * cos2) / (sin1 * sin2)
        return math.acos(min(1.0, max(-1.0, value)))

    return (
        angle(cos_a, cos_b, cos_c, sin_b, sin_c),
        angle(cos_b, cos_a, cos_c, sin_a, sin_c),
        angle(cos_c, cos_a, cos_b, sin_a, sin_b),
    )