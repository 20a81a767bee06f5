"""
Rigid Transformation Module

This module estimates the rigid transform (rotation + translation) that
aligns two corresponding 3D point clouds, and applies rigid transforms
to vertex positions and normals of meshes.
"""

from .errors import (
    RigidTransformationError,
    InputUnreadable,
    ShapeMismatch,
    ExportFailed,
)
from .point_cloud import PointCloud, resolve_dtype
from .transform import (
    RandomRotationGenerator,
    apply_transform,
    invert_rigid_transform,
    make_rigid_transform,
)
from .alignment import AlignmentModule, AlignmentResult
from .mesh_loader import MeshLoader
from .exporter import Exporter, ExportResult
from .config import PipelineConfig
from .pipeline import PipelineReport, run

__all__ = [
    "RigidTransformationError",
    "InputUnreadable",
    "ShapeMismatch",
    "ExportFailed",
    "PointCloud",
    "resolve_dtype",
    "RandomRotationGenerator",
    "apply_transform",
    "invert_rigid_transform",
    "make_rigid_transform",
    "AlignmentModule",
    "AlignmentResult",
    "MeshLoader",
    "Exporter",
    "ExportResult",
    "PipelineConfig",
    "PipelineReport",
    "run",
]
