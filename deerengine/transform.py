"""Quaternions, 4x4 matrices and the position/rotation/scale transform.

Quaternions are numpy arrays ordered (w, x, y, z). Matrices act on column
vectors: ``matrix @ [x, y, z, 1]``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

_EPSILON = 1e-7


def _as_vec3(value) -> np.ndarray:
    array = np.array(value, dtype=float)
    if array.shape != (3,):
        raise ValueError(f"expected three components, got shape {array.shape}")
    return array


def _as_quat(value) -> np.ndarray:
    array = np.array(value, dtype=float)
    if array.shape != (4,):
        raise ValueError(f"expected a (w, x, y, z) quaternion, got shape {array.shape}")
    return array


def identity_quat() -> np.ndarray:
    """The quaternion of no rotation."""
    return np.array([1.0, 0.0, 0.0, 0.0])


def quat_from_euler(angles) -> np.ndarray:
    """Quaternion from (pitch, yaw, roll) angles in radians."""
    half = _as_vec3(angles) * 0.5
    cx, cy, cz = np.cos(half)
    sx, sy, sz = np.sin(half)
    return np.array(
        [
            cx * cy * cz + sx * sy * sz,
            sx * cy * cz - cx * sy * sz,
            cx * sy * cz + sx * cy * sz,
            cx * cy * sz - sx * sy * cz,
        ]
    )


def quat_to_euler(quat) -> np.ndarray:
    """(pitch, yaw, roll) angles in radians of a quaternion."""
    w, x, y, z = _as_quat(quat)
    roll = math.atan2(2.0 * (x * y + w * z), w * w + x * x - y * y - z * z)
    pitch_y = 2.0 * (y * z + w * x)
    pitch_x = w * w - x * x - y * y + z * z
    if abs(pitch_x) < _EPSILON and abs(pitch_y) < _EPSILON:
        pitch = 2.0 * math.atan2(x, w)
    else:
        pitch = math.atan2(pitch_y, pitch_x)
    yaw = math.asin(min(1.0, max(-1.0, -2.0 * (x * z - w * y))))
    return np.array([pitch, yaw, roll])


def quat_to_matrix(quat) -> np.ndarray:
    """4x4 rotation matrix of a unit quaternion."""
    w, x, y, z = _as_quat(quat)
    matrix = np.identity(4)
    matrix[:3, :3] = [
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ]
    return matrix


def translation_matrix(offset) -> np.ndarray:
    """4x4 matrix moving points by offset."""
    matrix = np.identity(4)
    matrix[:3, 3] = _as_vec3(offset)
    return matrix


def scale_matrix(factors) -> np.ndarray:
    """4x4 matrix scaling each axis by its factor."""
    return np.diag([*_as_vec3(factors), 1.0])


def perspective(fov: float, aspect: float, near_z: float, far_z: float) -> np.ndarray:
    """Right-handed perspective projection to a -1..1 depth range.

    fov is the vertical field of view in radians.
    """
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    if near_z == far_z:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fov / 2.0)
    if tan_half == 0:
        raise ValueError("field of view must not be zero")
    matrix = np.zeros((4, 4))
    matrix[0, 0] = 1.0 / (aspect * tan_half)
    matrix[1, 1] = 1.0 / tan_half
    matrix[2, 2] = -(far_z + near_z) / (far_z - near_z)
    matrix[3, 2] = -1.0
    matrix[2, 3] = -(2.0 * far_z * near_z) / (far_z - near_z)
    return matrix


def compose_matrix(position, rotation, scale) -> np.ndarray:
    """Matrix that scales, then rotates, then translates."""
    return translation_matrix(position) @ quat_to_matrix(rotation) @ scale_matrix(scale)


@dataclass(eq=False)
class Transform:
    """Position, scale and rotation of an object; angles in radians."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    rotation: np.ndarray = field(default_factory=identity_quat)

    def __post_init__(self) -> None:
        self.position = _as_vec3(self.position)
        self.scale = _as_vec3(self.scale)
        self.rotation = _as_quat(self.rotation)

    @property
    def euler_angles(self) -> np.ndarray:
        return quat_to_euler(self.rotation)

    @euler_angles.setter
    def euler_angles(self, angles) -> None:
        self.rotation = quat_from_euler(angles)

    def world_matrix(self) -> np.ndarray:
        """Matrix placing the object in the world."""
        return compose_matrix(self.position, self.rotation, self.scale)