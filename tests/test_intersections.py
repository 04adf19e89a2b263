"""Tests for ray against box, sphere, plane and frustum."""

import pytest
import math

from rayhit.vec3 import Vec3, Point3
from rayhit.ray import Ray
from rayhit.bounds import Box3, Sphere, Plane
from rayhit.frustum import Frustum
from rayhit.mesh import TriangleMesh


@pytest.fixture
def unit_box():
    """Box from (-1, -1, -1) to (1, 1, 1)."""
    return Box3(Point3(-1, -1, -1), Vec3(2, 2, 2))


class TestBoxIntersection:
    """Test Ray.intersects_box() slab method."""

    def test_hit_from_outside(self, unit_box):
        ray = Ray(Point3(-2, 0, 0), Vec3(1, 0, 0))
        assert ray.intersects_box(unit_box) == 1.0

    def test_hit_from_negative_direction(self, unit_box):
        ray = Ray(Point3(5, 0, 0), Vec3(-1, 0, 0))
        assert ray.intersects_box(unit_box) == 4.0

    def test_diagonal_hit(self, unit_box):
        ray = Ray(Point3(-3, -3, -3), Vec3(1, 1, 1).normalize())
        t = ray.intersects_box(unit_box)
        assert t is not None
        assert abs(t - 2 * math.sqrt(3)) < 1e-9

    def test_origin_inside_returns_zero(self, unit_box):
        for direction in (Vec3(1, 0, 0), Vec3(-1, 2, 0.5), Vec3(0, 0, -1)):
            ray = Ray(Point3(0.2, -0.3, 0.5), direction)
            assert ray.intersects_box(unit_box) == 0.0

    def test_origin_inside_zero_direction(self, unit_box):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 0))
        assert ray.intersects_box(unit_box) == 0.0

    def test_box_behind_ray(self, unit_box):
        ray = Ray(Point3(-2, 0, 0), Vec3(-1, 0, 0))
        assert ray.intersects_box(unit_box) is None

    def test_parallel_outside_slab(self, unit_box):
        # Moving along x but above the box in y
        ray = Ray(Point3(-5, 2, 0), Vec3(1, 0, 0))
        assert ray.intersects_box(unit_box) is None

    def test_parallel_inside_slab(self, unit_box):
        ray = Ray(Point3(-5, 0.5, 0.5), Vec3(1, 0, 0))
        assert ray.intersects_box(unit_box) == 4.0

    def test_tiny_component_treated_as_parallel(self, unit_box):
        ray = Ray(Point3(-5, 2, 0), Vec3(1, -1e-7, 0))
        assert ray.intersects_box(unit_box) is None

    def test_miss_disjoint_intervals(self, unit_box):
        ray = Ray(Point3(-3, 0, 0), Vec3(1, 1, 0).normalize())
        assert ray.intersects_box(unit_box) is None

    def test_grazing_edge(self, unit_box):
        ray = Ray(Point3(-2, 1, 0), Vec3(1, 0, 0))
        assert ray.intersects_box(unit_box) == 1.0

    def test_origin_on_face_pointing_in(self, unit_box):
        ray = Ray(Point3(-1, 0, 0), Vec3(1, 0, 0))
        assert ray.intersects_box(unit_box) == 0.0

    def test_offset_box(self):
        box = Box3(Point3(10, 0, 0), Vec3(1, 1, 1))
        ray = Ray(Point3(0, 0.5, 0.5), Vec3(1, 0, 0))
        assert ray.intersects_box(box) == 10.0

    def test_unnormalized_direction_gives_parametric_t(self, unit_box):
        ray = Ray(Point3(-3, 0, 0), Vec3(2, 0, 0))
        assert ray.intersects_box(unit_box) == 1.0


class TestSphereIntersection:
    """Test Ray.intersects_sphere()."""

    def test_hit_through_center(self):
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert ray.intersects_sphere(Sphere(Point3(0, 0, 0), 1.0)) == 4.0

    def test_off_center_hit(self):
        ray = Ray(Point3(0, 0.6, -5), Vec3(0, 0, 1))
        t = ray.intersects_sphere(Sphere(Point3(0, 0, 0), 1.0))
        assert t is not None
        assert abs(t - 4.2) < 1e-9

    def test_origin_inside_returns_zero(self):
        sphere = Sphere(Point3(0, 0, 0), 2.0)
        for direction in (Vec3(1, 0, 0), Vec3(0, -1, 0), Vec3(0, 0, 1)):
            ray = Ray(Point3(0.5, 0.5, 0.5), direction)
            assert ray.intersects_sphere(sphere) == 0.0

    def test_pointing_away(self):
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, -1))
        assert ray.intersects_sphere(Sphere(Point3(0, 0, 0), 1.0)) is None

    def test_miss(self):
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))  # passes above the sphere
        assert ray.intersects_sphere(Sphere(Point3(0, 0, 0), 1.0)) is None

    def test_tangent(self):
        ray = Ray(Point3(0, 1, -5), Vec3(0, 0, 1))
        assert ray.intersects_sphere(Sphere(Point3(0, 0, 0), 1.0)) == 5.0

    def test_origin_on_surface(self):
        ray = Ray(Point3(0, 0, -1), Vec3(0, 0, 1))
        assert ray.intersects_sphere(Sphere(Point3(0, 0, 0), 1.0)) == 0.0

    def test_direction_is_not_renormalized(self):
        # With a length-2 direction the result is not a valid t
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        long_ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 2))
        assert long_ray.intersects_sphere(sphere) != 2.0
        assert long_ray.normalized().intersects_sphere(sphere) == 4.0


class TestPlaneIntersection:
    """Test Ray.intersects_plane()."""

    def test_hit(self):
        plane = Plane(Vec3(0, 1, 0), 0.0)
        ray = Ray(Point3(0, 5, 0), Vec3(0, -1, 0))
        assert ray.intersects_plane(plane) == 5.0

    def test_hit_from_back_side(self):
        plane = Plane(Vec3(0, 1, 0), 0.0)
        ray = Ray(Point3(0, -3, 0), Vec3(0, 1, 0))
        assert ray.intersects_plane(plane) == 3.0

    def test_offset_plane(self):
        plane = Plane.from_point_normal(Point3(0, 0, 2), Vec3(0, 0, 1))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert ray.intersects_plane(plane) == 2.0

    def test_parallel_returns_none(self):
        plane = Plane(Vec3(0, 1, 0), 0.0)
        for origin in (Point3(0, 5, 0), Point3(0, 0, 0), Point3(3, -2, 1)):
            ray = Ray(origin, Vec3(1, 0, 0))
            assert ray.intersects_plane(plane) is None

    def test_nearly_parallel_returns_none(self):
        plane = Plane(Vec3(0, 1, 0), 0.0)
        ray = Ray(Point3(0, 1, 0), Vec3(1, -1e-6, 0))
        assert ray.intersects_plane(plane) is None

    def test_behind_returns_none(self):
        plane = Plane(Vec3(0, 1, 0), 0.0)
        ray = Ray(Point3(0, 5, 0), Vec3(0, 1, 0))
        assert ray.intersects_plane(plane) is None

    def test_slightly_behind_clamps_to_zero(self):
        plane = Plane(Vec3(0, 1, 0), 0.0)
        ray = Ray(Point3(0, -1e-6, 0), Vec3(0, -1, 0))
        assert ray.intersects_plane(plane) == 0.0

    def test_origin_on_plane(self):
        plane = Plane(Vec3(0, 1, 0), 0.0)
        ray = Ray(Point3(2, 0, 2), Vec3(0, 1, 0))
        assert ray.intersects_plane(plane) == 0.0


class RecordingFrustum:
    """Stand-in frustum that records the ray it was asked about."""

    def __init__(self, result):
        self.result = result
        self.rays = []

    def intersects(self, ray):
        self.rays.append(ray)
        return self.result


class TestFrustumDelegation:
    """Test Ray.intersects_frustum()."""

    def test_forwards_to_frustum(self):
        frustum = RecordingFrustum(3.5)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert ray.intersects_frustum(frustum) == 3.5
        assert frustum.rays == [ray]

    def test_surfaces_miss(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert ray.intersects_frustum(RecordingFrustum(None)) is None

    def test_none_frustum_raises(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        with pytest.raises(ValueError):
            ray.intersects_frustum(None)


class TestDispatch:
    """Test Ray.intersects() type dispatch."""

    def test_box(self, unit_box):
        ray = Ray(Point3(-2, 0, 0), Vec3(1, 0, 0))
        assert ray.intersects(unit_box) == 1.0

    def test_sphere(self):
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert ray.intersects(Sphere(Point3(0, 0, 0), 1.0)) == 4.0

    def test_plane(self):
        ray = Ray(Point3(0, 5, 0), Vec3(0, -1, 0))
        assert ray.intersects(Plane(Vec3(0, 1, 0), 0.0)) == 5.0

    def test_mesh(self):
        mesh = TriangleMesh([0, 1, 2], [Point3(0, 0, 0), Point3(1, 0, 0), Point3(0, 1, 0)])
        ray = Ray(Point3(0.25, 0.25, -1), Vec3(0, 0, 1))
        assert ray.intersects(mesh) == 1.0

    def test_frustum(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert ray.intersects(RecordingFrustum(2.0)) == 2.0

    def test_real_frustum(self):
        planes = [
            Plane(Vec3(0, 0, -1), 1.0),   # near, z = 1
            Plane(Vec3(0, 0, 1), -10.0),  # far, z = 10
            Plane(Vec3(-1, 0, 0), -1.0),  # left, x = -1
            Plane(Vec3(1, 0, 0), -1.0),   # right, x = 1
            Plane(Vec3(0, 1, 0), -1.0),   # top, y = 1
            Plane(Vec3(0, -1, 0), -1.0),  # bottom, y = -1
        ]
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert ray.intersects(Frustum(planes)) == 1.0

    def test_none_raises(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        with pytest.raises(ValueError):
            ray.intersects(None)

    def test_unsupported_type(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        with pytest.raises(TypeError):
            ray.intersects("sphere")

    def test_ray_is_not_a_target(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        with pytest.raises(TypeError):
            ray.intersects(ray)
