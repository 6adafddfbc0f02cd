import math

import pytest

from shapes import Ray, Sphere, Disk
from vecmath import sub, length, norm


# --- Ray ---

def test_ray_normalizes_direction():
    ray = Ray((1.0, 2.0, 3.0), (0.0, 0.0, -5.0))
    assert ray.direction == pytest.approx((0.0, 0.0, -1.0))
    assert ray.get_point(2.5) == pytest.approx((1.0, 2.0, 0.5))

def test_ray_rejects_zero_direction():
    with pytest.raises(ValueError):
        Ray((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

def test_ray_rejects_nan_direction():
    with pytest.raises(ValueError):
        Ray((0.0, 0.0, 0.0), (math.nan, 0.0, 1.0))


# --- Sphere ---

@pytest.mark.parametrize("origin", [
    (0.0, 0.0, 0.0),
    (10.0, 3.0, -2.0),
    (-7.0, -7.0, 5.0),
    (0.0, 0.0, -40.0),
    (3.0, -20.0, -20.0),
])
def test_sphere_hit_distance_towards_centre(origin):
    """A ray aimed at the centre from outside hits at |origin - centre| - radius."""
    center = (0.0, 0.0, -20.0)
    sphere = Sphere(center, 4.0)
    ray = Ray(origin, sub(center, origin))
    expected = length(sub(center, origin)) - 4.0
    assert sphere.intersect(ray) == pytest.approx(expected, abs=1e-9)

def test_sphere_miss():
    sphere = Sphere((0.0, 0.0, -20.0), 4.0)
    assert sphere.intersect(Ray((0.0, 10.0, 0.0), (0.0, 0.0, -1.0))) is None

def test_sphere_behind_ray_is_rejected():
    sphere = Sphere((0.0, 0.0, -20.0), 4.0)
    assert sphere.intersect(Ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))) is None

def test_sphere_grazing_ray_hits_tangent_point():
    sphere = Sphere((0.0, 0.0, -20.0), 4.0)
    t = sphere.intersect(Ray((4.0, 0.0, 0.0), (0.0, 0.0, -1.0)))
    assert t == pytest.approx(20.0)

def test_sphere_origin_inside_facing_centre_gives_negative_distance():
    sphere = Sphere((0.0, 0.0, -20.0), 4.0)
    t = sphere.intersect(Ray((0.0, 0.0, -18.0), (0.0, 0.0, -1.0)))
    assert t == pytest.approx(-2.0)

def test_sphere_origin_inside_facing_away_misses():
    sphere = Sphere((0.0, 0.0, -20.0), 4.0)
    assert sphere.intersect(Ray((0.0, 0.0, -18.0), (0.0, 0.0, 1.0))) is None

def test_sphere_normal_points_outwards():
    sphere = Sphere((1.0, 1.0, 1.0), 2.0)
    assert sphere.get_normal((1.0, 3.0, 1.0)) == pytest.approx((0.0, 1.0, 0.0))
    n = sphere.get_normal((2.0, 2.0, 1.0 + math.sqrt(2.0)))
    assert length(n) == pytest.approx(1.0)

@pytest.mark.parametrize("radius", [0.0, -1.0, math.inf, math.nan])
def test_sphere_rejects_degenerate_radius(radius):
    with pytest.raises(ValueError):
        Sphere((0.0, 0.0, 0.0), radius)

def test_shape_rejects_reflectivity_out_of_range():
    with pytest.raises(ValueError):
        Sphere((0.0, 0.0, 0.0), 1.0, reflectivity=1.5)


# --- Disk ---

@pytest.fixture
def floor_disk():
    return Disk((0.0, 0.0, 0.0), 40.0, normal=(0.0, 1.0, 0.0))

def test_disk_hit_from_above(floor_disk):
    assert floor_disk.intersect(Ray((0.0, 10.0, 0.0), (0.0, -1.0, 0.0))) == pytest.approx(10.0)

def test_disk_back_face_is_invisible(floor_disk):
    assert floor_disk.intersect(Ray((0.0, -3.0, 0.0), (0.0, 1.0, 0.0))) is None

def test_disk_blocks_light_from_both_sides(floor_disk):
    assert floor_disk.occludes(Ray((0.0, -3.0, 0.0), (0.0, 1.0, 0.0))) == pytest.approx(3.0)
    assert floor_disk.occludes(Ray((0.0, 3.0, 0.0), (0.0, -1.0, 0.0))) == pytest.approx(3.0)
    assert floor_disk.occludes(Ray((0.0, 3.0, 0.0), (1.0, 0.0, 0.0))) is None

def test_sphere_occludes_like_it_intersects():
    sphere = Sphere((0.0, 0.0, -20.0), 4.0)
    ray = Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    assert sphere.occludes(ray) == sphere.intersect(ray)

@pytest.mark.parametrize("origin", [
    (0.0, 10.0, 0.0),
    (0.0, 0.0, 0.0),
    (-100.0, 0.5, 30.0),
    (5.0, -2.0, -5.0),
])
@pytest.mark.parametrize("direction", [
    (1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0),
    (-1.0, 0.0, 1.0),
])
def test_disk_parallel_ray_never_hits(floor_disk, origin, direction):
    assert floor_disk.intersect(Ray(origin, direction)) is None

def test_disk_plane_behind_ray(floor_disk):
    assert floor_disk.intersect(Ray((0.0, 10.0, 0.0), (0.0, 1.0, 0.0))) is None

def test_disk_outside_radius(floor_disk):
    assert floor_disk.intersect(Ray((50.0, 10.0, 0.0), (0.0, -1.0, 0.0))) is None

def test_disk_hit_on_rim(floor_disk):
    assert floor_disk.intersect(Ray((40.0, 1.0, 0.0), (0.0, -1.0, 0.0))) == pytest.approx(1.0)

def test_disk_normal_is_stored_normal():
    disk = Disk((0.0, -5.0, -30.0), 40.0, normal=(0.0, 3.0, 0.0))
    assert disk.normal == pytest.approx((0.0, 1.0, 0.0))
    assert disk.get_normal((12.0, -5.0, -20.0)) == pytest.approx((0.0, 1.0, 0.0))
    assert disk.get_normal((0.0, -5.0, 0.0)) == disk.get_normal((3.0, -5.0, -1.0))

def test_disk_rejects_zero_normal():
    with pytest.raises(ValueError):
        Disk((0.0, 0.0, 0.0), 1.0, normal=(0.0, 0.0, 0.0))

def test_disk_rejects_non_positive_radius():
    with pytest.raises(ValueError):
        Disk((0.0, 0.0, 0.0), 0.0)

def test_tilted_disk_hit():
    normal = norm((0.0, 1.0, 1.0))
    disk = Disk((0.0, 0.0, -10.0), 2.0, normal=normal)
    assert disk.intersect(Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))) == pytest.approx(10.0)
