"""
Triangle mesh buffers and a Wavefront OBJ reader that fills them.

A mesh is an index buffer (one triple per triangle) over a vertex buffer.
Supported OBJ records:
- Vertices (v)
- Faces (f) in v, v/vt, v/vt/vn and v//vn forms, fan-triangulated
Every other record (vt, vn, usemtl, mtllib, o, g, s, ...) is ignored.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple, Union

from .vec3 import Vec3, Point3
from .bounds import Box3
from .transforms import Quaternion, transform_point

LOGGER = logging.getLogger(__name__)


class TriangleMesh:
    """Read-only index and vertex buffers."""

    __slots__ = ('indices', 'vertices')

    def __init__(self, indices: Sequence[int], vertices: Sequence[Point3]):
        """Create a mesh.

        Args:
            indices: Vertex indices, three per triangle
            vertices: Vertex positions (Vec3 or length-3 sequences)

        Raises:
            ValueError: If the index count is not a multiple of three or an
                index does not address a vertex
        """
        indices = tuple(int(i) for i in indices)
        vertices = tuple(Vec3.coerce(v) for v in vertices)

        if len(indices) % 3 != 0:
            raise ValueError(f"Index count must be a multiple of 3, got {len(indices)}")
        for i in indices:
            if not 0 <= i < len(vertices):
                raise ValueError(f"Index {i} out of range for {len(vertices)} vertices")

        self.indices: Tuple[int, ...] = indices
        self.vertices: Tuple[Point3, ...] = vertices

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def __len__(self) -> int:
        return self.triangle_count

    def triangle(self, index: int) -> Tuple[Point3, Point3, Point3]:
        """Return the three corners of a triangle."""
        if not 0 <= index < self.triangle_count:
            raise IndexError(f"Triangle {index} out of range")
        i = index * 3
        return (
            self.vertices[self.indices[i]],
            self.vertices[self.indices[i + 1]],
            self.vertices[self.indices[i + 2]],
        )

    def bounds(self) -> Box3:
        """Return the box around every vertex."""
        if not self.vertices:
            raise ValueError("Empty mesh has no bounds")
        small = big = self.vertices[0]
        for v in self.vertices[1:]:
            small = Vec3.minimum(small, v)
            big = Vec3.maximum(big, v)
        return Box3.from_corners(small, big)

    def transformed(self, transform: Union[Quaternion, Any]) -> TriangleMesh:
        """Return a new mesh with every vertex transformed.

        Args:
            transform: A Quaternion or a 4x4 affine matrix
        """
        if isinstance(transform, Quaternion):
            vertices = [transform.rotate(v) for v in self.vertices]
        else:
            vertices = [transform_point(transform, v) for v in self.vertices]
        return TriangleMesh(self.indices, vertices)

    def stats(self) -> Dict[str, Any]:
        """Get statistics about the mesh.

        Returns:
            Dictionary with mesh statistics
        """
        if self.vertices:
            box = self.bounds()
            min_pt, max_pt = box.minimum, box.maximum
        else:
            min_pt = max_pt = Point3(0, 0, 0)
        size = max_pt - min_pt

        return {
            'triangle_count': self.triangle_count,
            'vertex_count': len(self.vertices),
            'bounds_min': (min_pt.x, min_pt.y, min_pt.z),
            'bounds_max': (max_pt.x, max_pt.y, max_pt.z),
            'size': (size.x, size.y, size.z),
        }

    def __repr__(self) -> str:
        return f"TriangleMesh(triangles={self.triangle_count}, vertices={len(self.vertices)})"


class OBJLoader:
    """Loader for Wavefront OBJ files."""

    def __init__(self):
        self.vertices: List[Point3] = []
        self.indices: List[int] = []

    def load(self, filename: Union[str, Path], scale: float = 1.0, center: bool = False) -> TriangleMesh:
        """Load an OBJ file into index and vertex buffers.

        Args:
            filename: Path to the OBJ file
            scale: Scale factor to apply to the mesh
            center: If True, center the mesh at origin

        Returns:
            TriangleMesh holding every triangulated face
        """
        path = Path(filename)
        if not path.exists():
            raise FileNotFoundError(f"OBJ file not found: {filename}")

        self.vertices = []
        self.indices = []
        skipped = 0

        with open(path, 'r') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()

                # Skip empty lines and comments
                if not line or line.startswith('#'):
                    continue

                parts = line.split()
                cmd = parts[0]

                try:
                    if cmd == 'v':
                        x, y, z = float(parts[1]), float(parts[2]), float(parts[3])
                        self.vertices.append(Point3(x * scale, y * scale, z * scale))
                    elif cmd == 'f':
                        face = self._parse_face(parts[1:])
                        self.indices.extend(self._triangulate_face(face))
                except (ValueError, IndexError):
                    LOGGER.warning("Skipping malformed line %s in %s: %s", line_num, path.name, line)
                    skipped += 1

        vertices = self.vertices
        if center and vertices:
            mid = TriangleMesh((), vertices).bounds().center
            vertices = [v - mid for v in vertices]

        mesh = TriangleMesh(self.indices, vertices)
        LOGGER.info(
            "Loaded %s: %s triangles, %s vertices (%s lines skipped)",
            path.name, mesh.triangle_count, len(mesh.vertices), skipped
        )
        return mesh

    def _parse_face(self, face_parts: List[str]) -> List[int]:
        """Parse position indices of a face, converting to 0-indexed."""
        positions = []

        for part in face_parts:
            pos_idx = int(part.split('/')[0])
            if pos_idx < 0:
                pos_idx = len(self.vertices) + pos_idx + 1
            pos_idx -= 1
            if not 0 <= pos_idx < len(self.vertices):
                raise IndexError(f"Vertex {pos_idx + 1} not defined")
            positions.append(pos_idx)

        return positions

    def _triangulate_face(self, face: List[int]) -> List[int]:
        """Fan triangulation for convex polygons: v0 v1 v2, v0 v2 v3, ..."""
        indices: List[int] = []
        for i in range(1, len(face) - 1):
            indices.extend((face[0], face[i], face[i + 1]))
        return indices


def load_obj(filename: Union[str, Path], scale: float = 1.0, center: bool = False) -> TriangleMesh:
    """Convenience function to load an OBJ file.

    Args:
        filename: Path to the OBJ file
        scale: Scale factor for the mesh
        center: Center the mesh at origin

    Returns:
        TriangleMesh with the file's triangles
    """
    loader = OBJLoader()
    return loader.load(filename, scale, center)
