"""
MeshLoader component for reading models and moving vertex data between a
trimesh mesh and a PointCloud.
"""

import logging
import os

import numpy as np
import trimesh

from .errors import InputUnreadable, ShapeMismatch
from .point_cloud import PointCloud, resolve_dtype

logger = logging.getLogger(__name__)


class MeshLoader:
    """Handles loading model files and extracting/injecting vertex data."""

    @staticmethod
    def validate_path(path: str) -> None:
        """Raise InputUnreadable with descriptive message if invalid.

        Args:
            path: Path to validate.

        Raises:
            InputUnreadable: If the path does not exist.
        """
        if not os.path.isfile(path):
            raise InputUnreadable(f"Could not read file: {path}")

    @staticmethod
    def load(path: str) -> trimesh.Trimesh:
        """Load a model file and return its first triangle mesh.

        Multi-mesh scenes are not merged; only the first mesh is used.

        Args:
            path: Path to any model format trimesh can import.

        Returns:
            The first trimesh.Trimesh of the model.

        Raises:
            InputUnreadable: If the file is missing, corrupt, unsupported,
                or contains no triangle mesh.
        """
        MeshLoader.validate_path(path)

        try:
            loaded = trimesh.load(path)
        except Exception as e:
            raise InputUnreadable(f"Could not read file: {path}") from e

        if isinstance(loaded, trimesh.Scene):
            meshes = [g for g in loaded.geometry.values() if isinstance(g, trimesh.Trimesh)]
            if len(meshes) > 1:
                logger.info("%s holds %d meshes, using the first", path, len(meshes))
            loaded = meshes[0] if meshes else None

        if not isinstance(loaded, trimesh.Trimesh):
            raise InputUnreadable(f"No triangle mesh in file: {path}")
        if len(loaded.vertices) == 0:
            raise InputUnreadable(f"Empty mesh in file: {path}")

        logger.debug("Loaded %s: %d vertices, %d faces", path, len(loaded.vertices), len(loaded.faces))
        return loaded

    @staticmethod
    def extract(mesh: trimesh.Trimesh, precision="float64") -> PointCloud:
        """Read per-vertex positions and normals in vertex-index order.

        Normals stored in the file are used as-is; otherwise trimesh derives
        them from the faces.

        Args:
            mesh: Source mesh.
            precision: Scalar type of the returned cloud.

        Returns:
            PointCloud with one entry per mesh vertex.

        Raises:
            InputUnreadable: If the mesh has no vertices or no normals.
        """
        if len(mesh.vertices) == 0:
            raise InputUnreadable("Mesh has no vertices")
        if len(mesh.faces) == 0:
            raise InputUnreadable("Mesh has no faces to derive vertex normals from")

        dtype = resolve_dtype(precision)
        return PointCloud(
            positions=np.asarray(mesh.vertices, dtype=dtype),
            normals=np.asarray(mesh.vertex_normals, dtype=dtype),
        )

    @staticmethod
    def inject(cloud: PointCloud, mesh: trimesh.Trimesh) -> None:
        """Overwrite the mesh's vertex positions and normals in place.

        Args:
            cloud: Cloud with exactly one entry per mesh vertex.
            mesh: Mesh to mutate.

        Raises:
            ShapeMismatch: If the cloud length differs from the vertex count.
        """
        if len(cloud) != len(mesh.vertices):
            raise ShapeMismatch(
                f"cloud has {len(cloud)} points but mesh has {len(mesh.vertices)} vertices"
            )

        # Assigning vertices clears the cache, so normals go in afterwards
        mesh.vertices = np.asarray(cloud.positions, dtype=np.float64)
        mesh.vertex_normals = np.asarray(cloud.normals, dtype=np.float64)
