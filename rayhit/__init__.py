"""
rayhit - Ray casting against bounding volumes and triangle meshes

Closed-form intersection tests for picking and selection:
- Axis-aligned boxes (slab method)
- Spheres
- Infinite planes
- Triangle index/vertex buffers (Möller-Trumbore)
- View frustums
"""

__version__ = "0.1.0"
__author__ = "rayhit Team"

from .vec3 import Vec3, Point3
from .transforms import (
    Quaternion, identity_matrix, translation_matrix, scale_matrix,
    rotation_matrix, compose, transform_point
)
from .bounds import Box3, Sphere, Plane
from .frustum import Frustum, FrustumLike
from .mesh import TriangleMesh, OBJLoader, load_obj
from .ray import Ray, BOX_EPSILON, PLANE_EPSILON, TRIANGLE_EPSILON
