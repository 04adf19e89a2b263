"""
Ray class and its closed-form intersection tests.

A ray is defined by an origin point and a direction vector.
Ray(t) = position + t * direction

Every test answers with an optional parametric distance t: None when the
ray misses, 0.0 when the origin is already inside or touching the shape,
otherwise the distance to the nearest hit in front of the origin.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Iterator, Optional, Sequence, Tuple, Union
import math

import numpy as np

from .vec3 import Vec3, Point3
from .bounds import Box3, Sphere, Plane
from .frustum import FrustumLike
from .mesh import TriangleMesh
from .transforms import Quaternion, transform_point

# Direction components below this are treated as parallel to a box slab
BOX_EPSILON = 1e-6
# |dot(direction, normal)| below this is treated as parallel to a plane
PLANE_EPSILON = 1e-5
# |determinant| below this is treated as parallel to a triangle: the smallest
# positive float64, so only an exactly zero determinant is skipped
TRIANGLE_EPSILON = float(np.nextafter(0.0, 1.0))


@dataclass(frozen=True)
class Ray:
    """A ray with a start position and a direction.

    The parametric form is: P(t) = position + t * direction
    where t >= 0 represents points along the ray.

    Rays are immutable values. Two rays are equal when both fields are
    exactly equal, no tolerance is applied.
    """
    position: Point3
    direction: Vec3

    def at(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (distance if direction is normalized)

        Returns:
            The point at position + t * direction
        """
        return self.position + self.direction * t

    def with_position(self, position: Point3) -> Ray:
        return replace(self, position=position)

    def with_direction(self, direction: Vec3) -> Ray:
        return replace(self, direction=direction)

    def normalized(self) -> Ray:
        """Return the same ray with a unit-length direction."""
        return replace(self, direction=self.direction.normalize())

    def deconstruct(self) -> Tuple[Point3, Vec3]:
        return self.position, self.direction

    def __iter__(self) -> Iterator[Vec3]:
        return iter(self.deconstruct())

    def equals(self, other: Ray) -> bool:
        return isinstance(other, Ray) and self == other

    def not_equals(self, other: Ray) -> bool:
        return not self.equals(other)

    def __str__(self) -> str:
        return f"{{Position:{self.position} Direction:{self.direction}}}"

    def transform(self, transform: Union[Quaternion, np.ndarray]) -> Ray:
        """Transform this ray by a rotation quaternion or a 4x4 affine matrix.

        Both the origin and the point one direction-length ahead of it are
        transformed; the new direction is the normalized difference. Scale
        and shear in the matrix therefore need no separate handling, and
        the result always has a unit direction.
        """
        if isinstance(transform, Quaternion):
            a = transform.rotate(self.position)
            b = transform.rotate(self.position + self.direction)
        else:
            a = transform_point(transform, self.position)
            b = transform_point(transform, self.position + self.direction)
        return Ray(a, (b - a).normalize())

    def intersects_box(self, box: Box3) -> Optional[float]:
        """Test this ray against an axis-aligned box using the slab method.

        Returns:
            Distance to the box, 0.0 if the origin is inside, None on a miss
            or when the box is entirely behind the origin.
        """
        lo, hi = box.minimum, box.maximum
        t_min: Optional[float] = None
        t_max: Optional[float] = None

        for axis in range(3):
            p = self.position[axis]
            d = self.direction[axis]

            if abs(d) < BOX_EPSILON:
                # Parallel to this slab: the origin has to lie between its planes
                if p < lo[axis] or p > hi[axis]:
                    return None
                continue

            t0 = (lo[axis] - p) / d
            t1 = (hi[axis] - p) / d
            if t0 > t1:
                t0, t1 = t1, t0

            if (t_min is not None and t_min > t1) or (t_max is not None and t0 > t_max):
                return None

            if t_min is None or t0 > t_min:
                t_min = t0
            if t_max is None or t1 < t_max:
                t_max = t1

        if t_min is None:
            # Parallel to every slab and inside all of them
            return 0.0

        if t_min < 0 < t_max:
            return 0.0

        if t_min < 0:
            return None

        return t_min

    def intersects_sphere(self, sphere: Sphere) -> Optional[float]:
        """Test this ray against a sphere.

        The direction is assumed to be unit length and is NOT normalized
        here. With a longer or shorter direction the returned distance is
        not a valid t; normalize the ray first (see `normalized`).
        """
        difference = sphere.center - self.position
        difference_length_squared = difference.length_squared()
        radius_squared = sphere.radius * sphere.radius

        if difference_length_squared < radius_squared:
            return 0.0

        distance_along_ray = self.direction.dot(difference)
        if distance_along_ray < 0:
            return None

        # radius^2 + along^2 - separation^2 is the squared half chord
        dist = radius_squared + distance_along_ray * distance_along_ray - difference_length_squared
        if dist < 0:
            return None
        return distance_along_ray - math.sqrt(dist)

    def intersects_plane(self, plane: Plane) -> Optional[float]:
        """Test this ray against an infinite plane.

        Hits a hair behind the origin (within PLANE_EPSILON) are reported
        as touching, 0.0.
        """
        denominator = self.direction.dot(plane.normal)
        if abs(denominator) < PLANE_EPSILON:
            return None

        t = (-plane.d - plane.normal.dot(self.position)) / denominator
        if t < 0.0:
            if t < -PLANE_EPSILON:
                return None
            return 0.0
        return t

    def intersects_frustum(self, frustum: FrustumLike) -> Optional[float]:
        """Forward to the frustum's own ray test."""
        if frustum is None:
            raise ValueError("frustum must not be None")
        return frustum.intersects(self)

    def intersections(
        self,
        indices: Sequence[int],
        vertices: Sequence[Point3]
    ) -> Iterator[Tuple[int, float]]:
        """Yield (triangle_index, t) for every triangle this ray hits.

        Möller-Trumbore test per triangle, in index buffer order. Work is
        done lazily as the caller advances, so stopping early skips the
        remaining triangles. Triangles behind the origin and triangles
        parallel to the ray are left out. Trailing indices that do not
        make a full triangle are ignored; an index outside the vertex
        buffer (negative included) raises IndexError when its triangle is
        reached.

        Args:
            indices: Vertex indices, three per triangle
            vertices: Vertex positions (Vec3 or length-3 sequences)
        """
        vertex_count = len(vertices)
        face_count = len(indices) // 3
        for i in range(face_count):
            corners = []
            for index in indices[i * 3:i * 3 + 3]:
                # Negative indices would silently wrap to the end of the buffer
                if not 0 <= index < vertex_count:
                    raise IndexError(f"Vertex index {index} out of range for {vertex_count} vertices")
                corners.append(Vec3.coerce(vertices[index]))
            a, b, c = corners

            edge1 = b - a
            edge2 = c - a

            h = self.direction.cross(edge2)
            determinant = edge1.dot(h)
            if -TRIANGLE_EPSILON < determinant < TRIANGLE_EPSILON:
                continue

            inverse_determinant = 1.0 / determinant
            s = self.position - a
            u = s.dot(h) * inverse_determinant
            if u < 0.0 or u > 1.0:
                continue

            q = s.cross(edge1)
            v = self.direction.dot(q) * inverse_determinant
            if v < 0.0 or u + v > 1.0:
                continue

            t = edge2.dot(q) * inverse_determinant
            if t >= 0:
                yield i, t

    def first_intersection(
        self,
        indices: Sequence[int],
        vertices: Sequence[Point3]
    ) -> Optional[float]:
        """Distance to the first triangle hit in buffer order (not the closest)."""
        for _, t in self.intersections(indices, vertices):
            return t
        return None

    def hits_triangles(self, indices: Sequence[int], vertices: Sequence[Point3]) -> bool:
        """True if any triangle is hit."""
        return self.first_intersection(indices, vertices) is not None

    def intersects(self, target) -> Optional[float]:
        """Dispatch to the test matching the target's type."""
        if isinstance(target, Box3):
            return self.intersects_box(target)
        if isinstance(target, Sphere):
            return self.intersects_sphere(target)
        if isinstance(target, Plane):
            return self.intersects_plane(target)
        if isinstance(target, TriangleMesh):
            return self.first_intersection(target.indices, target.vertices)
        if target is None:
            raise ValueError("target must not be None")
        if not isinstance(target, Ray) and isinstance(target, FrustumLike):
            return self.intersects_frustum(target)
        raise TypeError(f"Cannot intersect a ray with {type(target).__name__}")
