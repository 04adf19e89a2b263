"""
Vector3 class for 3D math operations.

The vector algebra the ray intersection tests are written against:
- Points in 3D space (ray origins, box corners, mesh vertices)
- Direction vectors
- Plane normals
"""

from __future__ import annotations
from typing import Iterator, Union
import numpy as np


class Vec3:
    """A 3D vector value supporting common vector operations.

    Uses numpy internally for the arithmetic. Instances are treated as
    immutable values: every operation returns a new vector.
    """

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> Vec3:
        """Create Vec3 from a numpy array or any length-3 sequence."""
        data = np.array(arr, dtype=np.float64).reshape(-1)
        if data.shape != (3,):
            raise ValueError(f"Vec3 needs 3 components, got {data.shape[0]}")
        v = cls.__new__(cls)
        v._data = data
        return v

    @classmethod
    def coerce(cls, value) -> Vec3:
        """Return value unchanged if it is a Vec3, otherwise convert it."""
        if isinstance(value, Vec3):
            return value
        return cls.from_array(value)

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __str__(self) -> str:
        return f"<{self.x:g}, {self.y:g}, {self.z:g}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        # NaN components compare equal to NaN so equality stays reflexive
        return bool(np.array_equal(self._data, other._data, equal_nan=True))

    def __hash__(self) -> int:
        # +0.0 so that -0.0 and 0.0, which compare equal, hash the same;
        # NaN floats hash by identity, so every NaN maps to one key
        return hash(tuple("nan" if np.isnan(c) else float(c) + 0.0 for c in self._data))

    def isclose(self, other: Vec3, tol: float = 1e-9) -> bool:
        """Approximate comparison, component-wise within an absolute tolerance."""
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=tol))

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data + other._data)
        return Vec3.from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return Vec3.from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data - other._data)
        return Vec3.from_array(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return Vec3.from_array(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data / other._data)
        return Vec3.from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self) -> Iterator[float]:
        return (float(c) for c in self._data)

    def __len__(self) -> int:
        return 3

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return float(np.linalg.norm(self._data))

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction."""
        length = self.length()
        if length == 0:
            return Vec3(0, 0, 0)
        return Vec3.from_array(self._data / length)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3.from_array(np.cross(self._data, other._data))

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return all(abs(c) < epsilon for c in self._data)

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    @staticmethod
    def minimum(a: Vec3, b: Vec3) -> Vec3:
        """Component-wise minimum of two vectors."""
        return Vec3.from_array(np.minimum(a._data, b._data))

    @staticmethod
    def maximum(a: Vec3, b: Vec3) -> Vec3:
        """Component-wise maximum of two vectors."""
        return Vec3.from_array(np.maximum(a._data, b._data))


# Convenience type alias
Point3 = Vec3
