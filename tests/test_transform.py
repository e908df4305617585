import math

import numpy as np
import pytest

from deerengine.transform import (
    Transform,
    compose_matrix,
    identity_quat,
    perspective,
    quat_from_euler,
    quat_to_euler,
    quat_to_matrix,
    scale_matrix,
    translation_matrix,
)


def test_identity_quat_gives_identity_matrix():
    assert np.allclose(quat_to_matrix(identity_quat()), np.identity(4))


def test_zero_euler_is_identity():
    assert np.allclose(quat_from_euler([0.0, 0.0, 0.0]), identity_quat())


@pytest.mark.parametrize(
    "angles",
    [(0.3, -0.4, 0.5), (-1.0, 0.2, 2.5), (0.0, 1.2, 0.0), (2.0, -0.7, -3.0)],
)
def test_euler_round_trip(angles):
    assert np.allclose(quat_to_euler(quat_from_euler(angles)), angles)


@pytest.mark.parametrize("angles", [(0.3, -0.4, 0.5), (1.1, 0.9, -2.2)])
def test_rotation_matrix_is_orthonormal(angles):
    rotation = quat_to_matrix(quat_from_euler(angles))[:3, :3]
    assert np.allclose(rotation @ rotation.T, np.identity(3))
    assert math.isclose(np.linalg.det(rotation), 1.0)


def test_quarter_turn_about_z_maps_x_to_y():
    matrix = quat_to_matrix(quat_from_euler([0.0, 0.0, math.pi / 2]))
    assert np.allclose((matrix @ [1.0, 0.0, 0.0, 1.0])[:3], [0.0, 1.0, 0.0])


def test_translation_moves_points():
    offset = np.array([1.5, -2.0, 3.0])
    point = np.array([4.0, 5.0, 6.0])
    moved = translation_matrix(offset) @ [*point, 1.0]
    assert np.allclose(moved[:3], point + offset)


def test_scale_matrix_diagonal():
    factors = [2.0, 3.0, 4.0]
    assert np.allclose(np.diag(scale_matrix(factors)), [*factors, 1.0])


def test_compose_places_origin_at_position():
    position = [1.0, 2.0, 3.0]
    matrix = compose_matrix(position, quat_from_euler([0.4, 0.1, -0.3]), [2.0, 2.0, 2.0])
    assert np.allclose((matrix @ [0.0, 0.0, 0.0, 1.0])[:3], position)


def test_compose_scales_before_rotating():
    position = np.array([1.0, 0.0, 0.0])
    rotation = quat_from_euler([0.0, 0.0, math.pi / 2])
    scale = np.array([2.0, 1.0, 1.0])
    point = np.array([1.0, 0.0, 0.0])
    result = (compose_matrix(position, rotation, scale) @ [*point, 1.0])[:3]
    expected = (quat_to_matrix(rotation) @ [*(point * scale), 1.0])[:3] + position
    assert np.allclose(result, expected)


def test_perspective_maps_near_and_far_to_depth_range():
    near, far = 0.1, 500.0
    matrix = perspective(math.radians(60), 16 / 9, near, far)
    near_clip = matrix @ [0.0, 0.0, -near, 1.0]
    far_clip = matrix @ [0.0, 0.0, -far, 1.0]
    assert math.isclose(near_clip[2] / near_clip[3], -1.0)
    assert math.isclose(far_clip[2] / far_clip[3], 1.0)
    assert math.isclose(near_clip[3], near)


def test_perspective_rejects_degenerate_input():
    with pytest.raises(ValueError):
        perspective(1.0, 0.0, 0.1, 100.0)
    with pytest.raises(ValueError):
        perspective(1.0, 1.0, 5.0, 5.0)
    with pytest.raises(ValueError):
        perspective(0.0, 1.0, 0.1, 100.0)


def test_bad_shapes_are_rejected():
    with pytest.raises(ValueError):
        translation_matrix([1.0, 2.0])
    with pytest.raises(ValueError):
        quat_to_matrix([1.0, 0.0, 0.0])


def test_default_transform_world_matrix_is_identity():
    assert np.allclose(Transform().world_matrix(), np.identity(4))


def test_transform_euler_property_round_trip():
    transform = Transform()
    transform.euler_angles = [0.2, -0.3, 0.4]
    assert np.allclose(transform.euler_angles, [0.2, -0.3, 0.4])
    assert np.allclose(transform.rotation, quat_from_euler([0.2, -0.3, 0.4]))


def test_transform_world_matrix_carries_position():
    transform = Transform(position=[5.0, 6.0, 7.0], scale=[2.0, 2.0, 2.0])
    assert np.allclose(transform.world_matrix()[:3, 3], [5.0, 6.0, 7.0])