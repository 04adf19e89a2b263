"""
View frustum: a convex volume bounded by six outward-facing planes.

The frustum owns its own ray test; `Ray.intersects_frustum` forwards to
anything with an `intersects(ray)` method.
"""

from __future__ import annotations
from typing import Optional, Protocol, Sequence, TYPE_CHECKING, runtime_checkable

import numpy as np

from .vec3 import Vec3, Point3
from .bounds import Plane

if TYPE_CHECKING:
    from .ray import Ray

PARALLEL_EPSILON = 1e-9


@runtime_checkable
class FrustumLike(Protocol):
    """Anything that can answer a ray test with an optional distance."""

    def intersects(self, ray: Ray) -> Optional[float]:
        ...


class Frustum:
    """A convex volume given by planes whose normals point outward.

    Plane order is near, far, left, right, top, bottom.
    """

    PLANE_NAMES = ('near', 'far', 'left', 'right', 'top', 'bottom')

    def __init__(self, planes: Sequence[Plane]):
        planes = tuple(planes)
        if len(planes) != 6:
            raise ValueError(f"Frustum needs 6 planes, got {len(planes)}")
        self.planes = planes

    @classmethod
    def from_matrix(cls, view_projection) -> Frustum:
        """Extract the frustum of a 4x4 view-projection matrix.

        Gribb/Hartmann plane extraction for the column-vector convention
        and an OpenGL clip volume (-w <= x, y, z <= w). The row combinations
        give inward planes; they are negated so the normals point out.
        """
        m = np.asarray(view_projection, dtype=np.float64)
        if m.shape != (4, 4):
            raise ValueError(f"Expected a 4x4 matrix, got shape {m.shape}")
        rows = [
            m[3] + m[2],  # near
            m[3] - m[2],  # far
            m[3] + m[0],  # left
            m[3] - m[0],  # right
            m[3] - m[1],  # top
            m[3] + m[1],  # bottom
        ]
        planes = []
        for row in rows:
            normal = Vec3.from_array(-row[:3])
            length = normal.length()
            if length == 0:
                raise ValueError("Degenerate view-projection matrix")
            planes.append(Plane(normal / length, float(-row[3]) / length))
        return cls(planes)

    def plane(self, name: str) -> Plane:
        return self.planes[self.PLANE_NAMES.index(name)]

    def contains(self, point: Point3) -> bool:
        """True if the point is inside the frustum or on its boundary."""
        return all(plane.distance_to(point) <= 0 for plane in self.planes)

    def intersects(self, ray: Ray) -> Optional[float]:
        """Clip the ray against every plane.

        Returns:
            0.0 if the ray starts inside, the distance to the entry point if
            it enters the volume ahead of its origin, None otherwise.
        """
        t_near = float('-inf')
        t_far = float('inf')

        for plane in self.planes:
            dist = plane.distance_to(ray.position)
            denom = plane.normal.dot(ray.direction)

            if abs(denom) < PARALLEL_EPSILON:
                # Parallel: the whole ray is on one side of this plane
                if dist > 0:
                    return None
                continue

            t = -dist / denom
            if denom < 0:
                t_near = max(t_near, t)
            else:
                t_far = min(t_far, t)

            if t_near > t_far:
                return None

        if t_far < 0:
            return None
        return max(t_near, 0.0)

    def __repr__(self) -> str:
        return f"Frustum(planes={list(self.planes)})"
