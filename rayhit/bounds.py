"""
Bounding volumes a ray can be tested against.

These are plain values: the ray reads their fields, they hold no reference
back to the ray.
"""

from __future__ import annotations
from dataclasses import dataclass

from .vec3 import Vec3, Point3


@dataclass(frozen=True)
class Box3:
    """Axis-aligned box given by its minimum corner and its extents.

    Attributes:
        position: Corner with smallest x, y, z values
        size: Non-negative extents along each axis
    """
    position: Point3
    size: Vec3

    def __post_init__(self):
        if min(self.size) < 0:
            raise ValueError(f"Box3 size must be non-negative, got {self.size}")

    @classmethod
    def from_corners(cls, p0: Point3, p1: Point3) -> Box3:
        """Create a box from any two opposite corners."""
        small = Vec3.minimum(p0, p1)
        big = Vec3.maximum(p0, p1)
        return cls(small, big - small)

    @property
    def minimum(self) -> Point3:
        return self.position

    @property
    def maximum(self) -> Point3:
        return self.position + self.size

    @property
    def center(self) -> Point3:
        return self.position + self.size * 0.5

    def contains(self, point: Point3) -> bool:
        """True if the point is inside the box or on its boundary."""
        lo, hi = self.minimum, self.maximum
        return all(lo[i] <= point[i] <= hi[i] for i in range(3))

    def union(self, other: Box3) -> Box3:
        """Return the box that contains both boxes."""
        return Box3.from_corners(
            Vec3.minimum(self.minimum, other.minimum),
            Vec3.maximum(self.maximum, other.maximum)
        )

    def __str__(self) -> str:
        return f"{{Position:{self.position} Size:{self.size}}}"


@dataclass(frozen=True)
class Sphere:
    """A sphere defined by center and radius."""
    center: Point3
    radius: float

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError(f"Sphere radius must be non-negative, got {self.radius}")

    def bounding_box(self) -> Box3:
        """Return the Box3 containing this sphere."""
        r_vec = Vec3(self.radius, self.radius, self.radius)
        return Box3(self.center - r_vec, r_vec * 2)

    def contains(self, point: Point3) -> bool:
        return (point - self.center).length_squared() <= self.radius * self.radius

    def __str__(self) -> str:
        return f"{{Center:{self.center} Radius:{self.radius:g}}}"


@dataclass(frozen=True)
class Plane:
    """An infinite plane satisfying dot(normal, p) + d = 0.

    The normal is assumed to be unit length; `from_point_normal` and
    `from_points` take care of that.
    """
    normal: Vec3
    d: float

    @classmethod
    def from_point_normal(cls, point: Point3, normal: Vec3) -> Plane:
        """Create the plane through `point` with the given normal."""
        n = normal.normalize()
        return cls(n, -n.dot(point))

    @classmethod
    def from_points(cls, a: Point3, b: Point3, c: Point3) -> Plane:
        """Create the plane through three points.

        Counter-clockwise winding (seen from the front) gives the normal.
        """
        normal = (b - a).cross(c - a)
        if normal.near_zero():
            raise ValueError("Points are collinear, they do not define a plane")
        return cls.from_point_normal(a, normal)

    def distance_to(self, point: Point3) -> float:
        """Signed distance, positive on the side the normal points to."""
        return self.normal.dot(point) + self.d

    def __str__(self) -> str:
        return f"{{Normal:{self.normal} D:{self.d:g}}}"
