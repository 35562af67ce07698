import math

import numpy as np
import pytest

from rasengan_core.camera import Camera3D, InputState, OrbitCameraController, auto_orbit
from rasengan_core.constants import MAX_ELEVATION, MIN_ELEVATION
from rasengan_core.vector_utils import cartesian_to_spherical, vec_len, vec_sub


def spherical(camera):
    return cartesian_to_spherical(vec_sub(camera.position, camera.target))


def test_target_projects_to_viewport_center():
    cam = Camera3D()
    assert cam.world_to_screen(cam.target) == pytest.approx((400.0, 300.0))


def test_point_behind_camera_is_not_projected():
    cam = Camera3D(position=(0.0, 0.0, 5.0), target=(0.0, 0.0, 0.0))
    assert cam.world_to_screen((0.0, 0.0, 10.0)) is None
    assert cam.project_radius((0.0, 0.0, 10.0), 1.0) is None


def test_segment_is_clipped_at_near_plane():
    cam = Camera3D(position=(0.0, 0.0, 5.0), target=(0.0, 0.0, 0.0))
    assert cam.project_segment((0.0, 0.0, 6.0), (1.0, 0.0, 7.0)) is None
    seg = cam.project_segment((0.0, 0.0, 0.0), (0.0, 0.0, 10.0))
    assert seg is not None
    assert seg[0] == pytest.approx((400.0, 300.0))


def test_projected_radius_shrinks_with_distance():
    near = Camera3D(position=(0.0, 0.0, 2.0), target=(0.0, 0.0, 0.0))
    far = Camera3D(position=(0.0, 0.0, 8.0), target=(0.0, 0.0, 0.0))
    assert near.project_radius((0.0, 0.0, 0.0), 1.0) == pytest.approx(
        4 * far.project_radius((0.0, 0.0, 0.0), 1.0))


def test_no_input_leaves_camera_in_place():
    cam = Camera3D()
    before = cam.position
    OrbitCameraController().update(cam, InputState())
    assert cam.position == pytest.approx(before)


def test_left_drag_orbits_without_changing_distance():
    cam = Camera3D()
    r0, az0, el0 = spherical(cam)
    OrbitCameraController().update(cam, InputState(left_down=True, mouse_delta=(10, 4)))
    r1, az1, el1 = spherical(cam)
    assert r1 == pytest.approx(r0)
    assert az1 == pytest.approx(az0 - 0.05)
    assert el1 == pytest.approx(el0 - 0.02)


@pytest.mark.parametrize("dy, expected", [(-100000, MAX_ELEVATION), (100000, MIN_ELEVATION)])
def test_elevation_stays_off_the_poles(dy, expected):
    cam = Camera3D()
    OrbitCameraController().update(cam, InputState(left_down=True, mouse_delta=(0, dy)))
    assert spherical(cam)[2] == pytest.approx(expected)


@pytest.mark.parametrize("wheel, expected", [(1, 5.0), (-2, 8.0), (1000, 0.5), (-1000, 100.0)])
def test_wheel_zoom_is_clamped(wheel, expected):
    cam = Camera3D(position=(0.0, 1.0 + 6.0 * math.cos(0.5), 6.0 * math.sin(0.5)),
                   target=(0.0, 1.0, 0.0))
    assert spherical(cam)[0] == pytest.approx(6.0)
    OrbitCameraController().update(cam, InputState(wheel=wheel))
    assert spherical(cam)[0] == pytest.approx(expected)


def test_right_drag_pans_position_and_target_together():
    cam = Camera3D()
    offset0 = vec_sub(cam.position, cam.target)
    target0 = cam.target
    _, _, forward = cam.basis()
    OrbitCameraController().update(cam, InputState(right_down=True, mouse_delta=(20, -10)))
    assert vec_sub(cam.position, cam.target) == pytest.approx(offset0)
    moved = vec_sub(cam.target, target0)
    assert vec_len(moved) == pytest.approx(0.005 * math.hypot(20, 10))
    assert sum(m * f for m, f in zip(moved, forward)) == pytest.approx(0.0, abs=1e-12)


def test_auto_orbit_rotates_about_vertical_axis():
    cam = Camera3D()
    r0, az0, el0 = spherical(cam)
    y0 = cam.position[1]
    auto_orbit(cam, 0.5, 0.5)
    r1, az1, el1 = spherical(cam)
    assert r1 == pytest.approx(r0)
    assert el1 == pytest.approx(el0)
    assert cam.position[1] == pytest.approx(y0)
    assert abs(az1 - az0) == pytest.approx(0.25)


def test_batched_projection_matches_single_points():
    cam = Camera3D()
    points = [(0.0, 1.0, 0.0), (1.5, 0.2, -0.7), (-2.0, 3.0, 1.0), (10.0, 6.0, 10.0)]
    screen, visible = cam.projector().project_points(points)
    for point, row, seen in zip(points, screen, visible):
        single = cam.world_to_screen(point)
        if single is None:
            assert not seen
            assert np.isnan(row).all()
        else:
            assert seen
            assert tuple(row) == pytest.approx(single)
    assert visible.tolist() == [True, True, True, False]


def test_batched_segments_match_single_segments():
    cam = Camera3D(position=(0.0, 0.0, 5.0), target=(0.0, 0.0, 0.0))
    a = [(0.0, 0.0, 0.0), (0.0, 0.0, 6.0), (1.0, 1.0, 0.0)]
    b = [(0.0, 0.0, 10.0), (1.0, 0.0, 7.0), (-1.0, 0.5, 2.0)]
    sa, sb, keep = cam.projector().project_segments(a, b)
    assert keep.tolist() == [True, False, True]
    assert np.isnan(sa[1]).all() and np.isnan(sb[1]).all()
    for i in (0, 2):
        single = cam.project_segment(a[i], b[i])
        assert tuple(sa[i]) == pytest.approx(single[0])
        assert tuple(sb[i]) == pytest.approx(single[1])
