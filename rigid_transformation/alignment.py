"""
AlignmentModule component for estimating the rigid transform between two
corresponding point clouds (Kabsch / orthogonal Procrustes).
"""

from dataclasses import dataclass
import json
import logging
from typing import Optional

import numpy as np

from .errors import ShapeMismatch
from .point_cloud import PointCloud
from .transform import apply_transform, make_rigid_transform

logger = logging.getLogger(__name__)


@dataclass
class AlignmentResult:
    """Result of rigid transform estimation."""
    transformation: np.ndarray    # 4x4 homogeneous matrix
    centroid_source: np.ndarray   # (3,)
    centroid_target: np.ndarray   # (3,)
    singular_values: np.ndarray   # (3,) of the cross-covariance, descending
    rank: int                     # numerical rank of the cross-covariance
    rms_error: float              # residual after alignment

    def __post_init__(self):
        for name in ("transformation", "centroid_source", "centroid_target", "singular_values"):
            array = np.array(getattr(self, name))
            array.setflags(write=False)
            setattr(self, name, array)

    @property
    def rotation(self) -> np.ndarray:
        return self.transformation[:3, :3]

    @property
    def translation(self) -> np.ndarray:
        return self.transformation[:3, 3]

    @property
    def degenerate(self) -> bool:
        """True when the rotation is not uniquely determined by the data.

        Fewer than two independent directions (coincident or collinear
        source points) leave the rotation about the degenerate axis free.
        """
        return self.rank < 2


class AlignmentModule:
    """Handles rigid alignment between corresponding source and target clouds."""

    @staticmethod
    def compute_rigid_transformation(
        source: PointCloud,
        target: PointCloud,
        rank_tolerance: Optional[float] = None,
    ) -> AlignmentResult:
        """Compute the rigid transform mapping source onto target.

        Minimizes sum_i |R @ source[i] + t - target[i]|^2 over proper
        rotations R and translations t. Only positions are used;
        target[i] is the image of source[i].

        Args:
            source: Source cloud of N points.
            target: Target cloud of the same N points after the unknown
                transform.
            rank_tolerance: Singular values of the cross-covariance below
                rank_tolerance * largest count as zero. Defaults to
                the square root of machine epsilon of the cloud precision.

        Returns:
            AlignmentResult whose transformation has det(R) = +1.

        Raises:
            ShapeMismatch: If the clouds differ in length or are empty.
        """
        if len(source) != len(target):
            raise ShapeMismatch(
                f"source and target differ in length: {len(source)} != {len(target)}"
            )
        if len(source) == 0:
            raise ShapeMismatch("cannot align empty point clouds")

        dtype = np.result_type(source.dtype, target.dtype)
        source_points = source.positions.astype(dtype, copy=False)
        target_points = target.positions.astype(dtype, copy=False)

        centroid_source = source_points.mean(axis=0)
        centroid_target = target_points.mean(axis=0)

        # Cross-covariance: source rows times target columns
        H = (source_points - centroid_source).T @ (target_points - centroid_target)

        U, S, Vt = np.linalg.svd(H)
        R = Vt.T @ U.T

        # Improper rotation; flip the axis of the smallest singular value
        if np.linalg.det(R) < 0:
            Vt[-1, :] *= -1
            R = Vt.T @ U.T

        t = centroid_target - R @ centroid_source
        transformation = make_rigid_transform(R, t, dtype=dtype)

        if rank_tolerance is None:
            rank_tolerance = float(np.sqrt(np.finfo(dtype).eps))
        rank = int(np.sum(S > rank_tolerance * S[0])) if S[0] > 0 else 0

        residuals = source_points @ R.T + t - target_points
        rms_error = float(np.sqrt(np.mean(np.sum(residuals ** 2, axis=1))))

        result = AlignmentResult(
            transformation=transformation,
            centroid_source=centroid_source,
            centroid_target=centroid_target,
            singular_values=S,
            rank=rank,
            rms_error=rms_error,
        )

        if result.degenerate:
            logger.warning(
                "Degenerate correspondence: %d points span rank %d; "
                "rotation about the degenerate axis is not unique",
                len(source), rank,
            )
        logger.info("Aligned %d points, RMS residual %.6g", len(source), rms_error)

        return result

    @staticmethod
    def apply_transformation(cloud: PointCloud, result: AlignmentResult) -> PointCloud:
        """Apply an estimated transformation to a cloud."""
        return apply_transform(cloud, result.transformation)

    @staticmethod
    def to_json(result: AlignmentResult) -> str:
        """Serialize alignment result to JSON.

        Args:
            result: AlignmentResult to serialize.

        Returns:
            JSON string representation.
        """
        return json.dumps({
            "dtype": result.transformation.dtype.name,
            "transformation": result.transformation.tolist(),
            "centroid_source": result.centroid_source.tolist(),
            "centroid_target": result.centroid_target.tolist(),
            "singular_values": result.singular_values.tolist(),
            "rank": result.rank,
            "rms_error": result.rms_error,
        })

    @staticmethod
    def from_json(json_str: str) -> AlignmentResult:
        """Deserialize alignment result from JSON.

        Args:
            json_str: JSON string to deserialize.

        Returns:
            AlignmentResult object.

        Raises:
            ValueError: If the document is missing fields or malformed.
        """
        try:
            data = json.loads(json_str)
            dtype = np.dtype(data["dtype"])
            result = AlignmentResult(
                transformation=np.asarray(data["transformation"], dtype=dtype),
                centroid_source=np.asarray(data["centroid_source"], dtype=dtype),
                centroid_target=np.asarray(data["centroid_target"], dtype=dtype),
                singular_values=np.asarray(data["singular_values"], dtype=dtype),
                rank=int(data["rank"]),
                rms_error=float(data["rms_error"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid alignment result JSON: {e}") from e

        if result.transformation.shape != (4, 4):
            raise ValueError(
                f"Invalid alignment result JSON: transformation shape {result.transformation.shape}"
            )
        return result
