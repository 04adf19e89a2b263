"""
Rotations and affine transforms.

Matrices are 4x4 homogeneous numpy arrays using the column-vector
convention: a point p maps to M @ [p.x, p.y, p.z, 1]. Transforms are
affine, the w component of the result is not divided out.
"""

from __future__ import annotations
from dataclasses import dataclass
import math

import numpy as np

from .vec3 import Vec3, Point3


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
    def from_axis_angle(cls, axis: Vec3, angle: float) -> Quaternion:
        """Rotation of `angle` radians about `axis` (normalized here)."""
        n = axis.normalize()
        s = math.sin(angle / 2)
        return cls(math.cos(angle / 2), n.x * s, n.y * s, n.z * s)

    def length(self) -> float:
        return math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> Quaternion:
        length = self.length()
        if length == 0:
            return Quaternion.identity()
        return Quaternion(self.w / length, self.x / length, self.y / length, self.z / length)

    def conjugate(self) -> Quaternion:
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def __mul__(self, other: Quaternion) -> Quaternion:
        """Hamilton product; (a * b).rotate(v) == a.rotate(b.rotate(v))."""
        if not isinstance(other, Quaternion):
            return NotImplemented
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def rotate(self, v: Vec3) -> Vec3:
        """Rotate a vector. The quaternion is assumed to be unit length.

        Uses v' = v + 2w(q x v) + 2 q x (q x v) with q the vector part.
        """
        q = Vec3(self.x, self.y, self.z)
        t = q.cross(v) * 2.0
        return v + t * self.w + q.cross(t)

    def to_matrix(self) -> np.ndarray:
        """Return the equivalent 4x4 homogeneous rotation matrix."""
        w, x, y, z = self.w, self.x, self.y, self.z
        return np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w), 0.0],
            [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w), 0.0],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y), 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ], dtype=np.float64)


def _as_matrix(m) -> np.ndarray:
    matrix = np.asarray(m, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"Expected a 4x4 matrix, got shape {matrix.shape}")
    return matrix


def identity_matrix() -> np.ndarray:
    return np.eye(4, dtype=np.float64)


def translation_matrix(offset: Vec3) -> np.ndarray:
    m = np.eye(4, dtype=np.float64)
    m[:3, 3] = offset.to_array()
    return m


def scale_matrix(sx: float, sy: float = None, sz: float = None) -> np.ndarray:
    """Scale matrix; a single factor scales uniformly."""
    sy = sx if sy is None else sy
    sz = sx if sz is None else sz
    return np.diag([sx, sy, sz, 1.0]).astype(np.float64)


def rotation_matrix(q: Quaternion) -> np.ndarray:
    return q.to_matrix()


def compose(*matrices) -> np.ndarray:
    """Multiply matrices left to right, so the last one is applied first."""
    result = np.eye(4, dtype=np.float64)
    for m in matrices:
        result = result @ _as_matrix(m)
    return result


def transform_point(m, p: Point3) -> Point3:
    """Apply an affine 4x4 matrix to a point."""
    matrix = _as_matrix(m)
    return Vec3.from_array(matrix[:3, :3] @ p.to_array() + matrix[:3, 3])
