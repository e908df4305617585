"""A free camera with a position, rotation and perspective lens."""

from __future__ import annotations

import math

import numpy as np

from .transform import identity_quat, perspective, quat_to_matrix, scale_matrix, translation_matrix


class Camera:
    """Perspective camera; matrices are refreshed by recalculate_matrices.

    ``view_matrix`` holds the lens projection and ``projection_matrix`` the
    world-to-camera transform, with the camera looking along +z.
    """

    def __init__(
        self,
        aspect: float,
        fov: float = 60.0,
        near_z: float = 0.1,
        far_z: float = 500.0,
    ) -> None:
        self.aspect = aspect
        self.fov = fov
        self.near_z = near_z
        self.far_z = far_z
        self.position = np.zeros(3)
        self.rotation = identity_quat()
        self.view_matrix = np.identity(4)
        self.projection_matrix = np.identity(4)
        self.recalculate_matrices()

    def recalculate_matrices(self) -> None:
        """Rebuild both matrices from the current settings (fov in degrees)."""
        self.view_matrix = perspective(
            math.radians(self.fov), self.aspect, self.near_z, self.far_z
        )
        placement = translation_matrix(self.position) @ quat_to_matrix(self.rotation)
        invert_z = scale_matrix([1.0, 1.0, -1.0])
        self.projection_matrix = invert_z @ np.linalg.inv(placement)