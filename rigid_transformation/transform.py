"""
Rigid transform application and synthetic random rotations.

Positions are mapped through the full 4x4 homogeneous matrix and divided
by the homogeneous w. Normals are mapped through the linear 3x3 block only
and then re-normalized to unit length.
"""

import logging
from typing import Optional

import numpy as np
from scipy.spatial.transform import Rotation

from .errors import ShapeMismatch
from .point_cloud import PointCloud

logger = logging.getLogger(__name__)


def make_rigid_transform(rotation, translation=None, dtype=np.float64) -> np.ndarray:
    """Assemble a 4x4 homogeneous matrix [[R, t], [0, 1]].

    Args:
        rotation: 3x3 rotation matrix.
        translation: Translation 3-vector, zero if omitted.
        dtype: Scalar type of the returned matrix.

    Returns:
        4x4 homogeneous matrix.
    """
    rotation = np.asarray(rotation, dtype=dtype)
    if rotation.shape != (3, 3):
        raise ShapeMismatch(f"rotation must be 3x3, got {rotation.shape}")

    transform = np.eye(4, dtype=dtype)
    transform[:3, :3] = rotation
    if translation is not None:
        translation = np.asarray(translation, dtype=dtype)
        if translation.shape != (3,):
            raise ShapeMismatch(f"translation must be a 3-vector, got {translation.shape}")
        transform[:3, 3] = translation
    return transform


def invert_rigid_transform(transform: np.ndarray) -> np.ndarray:
    """Invert a rigid transform using R^T instead of a general inverse."""
    transform = _check_transform(transform)
    rotation_t = transform[:3, :3].T
    return make_rigid_transform(
        rotation_t, -rotation_t @ transform[:3, 3], dtype=transform.dtype
    )


def normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """Scale every row to unit length; exact zero rows stay zero."""
    norms = np.linalg.norm(vectors, axis=1, keepdims=True)
    safe = np.where(norms > 0, norms, 1)
    return vectors / safe


def _check_transform(transform) -> np.ndarray:
    transform = np.asarray(transform)
    if transform.shape != (4, 4):
        raise ShapeMismatch(f"transform must be 4x4, got {transform.shape}")
    return transform


def apply_transform(cloud: PointCloud, transform) -> PointCloud:
    """Map a cloud through a 4x4 homogeneous transform.

    Args:
        cloud: Input positions and normals; left untouched.
        transform: 4x4 homogeneous matrix (rigid or affine).

    Returns:
        New PointCloud in the cloud's precision.

    Raises:
        ShapeMismatch: If the transform is not 4x4.
    """
    transform = _check_transform(transform).astype(cloud.dtype, copy=False)

    homogeneous = np.hstack([cloud.positions, np.ones((len(cloud), 1), dtype=cloud.dtype)])
    mapped = homogeneous @ transform.T
    positions = mapped[:, :3] / mapped[:, 3:]

    normals = normalize_rows(cloud.normals @ transform[:3, :3].T)

    return PointCloud(positions=positions, normals=normals)


class RandomRotationGenerator:
    """Rotates clouds about the origin by a fixed angle around a random axis."""

    def __init__(self, angle_degrees: float = 90.0, seed: Optional[int] = None):
        self.angle_degrees = angle_degrees
        self.rng = np.random.default_rng(seed)

    def random_axis(self) -> np.ndarray:
        """Draw a unit axis uniformly distributed on the sphere."""
        while True:
            axis = self.rng.standard_normal(3)
            norm = np.linalg.norm(axis)
            if norm > 1e-12:
                return axis / norm

    def random_transform(self, dtype=np.float64) -> np.ndarray:
        """Draw a rotation-only 4x4 transform (zero translation)."""
        rotvec = self.random_axis() * np.deg2rad(self.angle_degrees)
        rotation = Rotation.from_rotvec(rotvec).as_matrix()
        return make_rigid_transform(rotation, dtype=dtype)

    def apply(self, cloud: PointCloud):
        """Rotate a cloud by a freshly drawn rotation.

        Returns:
            Tuple of (rotated cloud, 4x4 transform that was applied).
        """
        transform = self.random_transform(dtype=cloud.dtype)
        logger.debug("Random rotation of %.1f deg:\n%s", self.angle_degrees, transform)
        return apply_transform(cloud, transform), transform
