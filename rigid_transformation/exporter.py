"""
Exporter component for saving transformed meshes.
"""

from dataclasses import dataclass
import logging
import os
from typing import Optional

import trimesh

from .errors import ExportFailed

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of a single export; failures are reported, not raised."""
    path: str
    error: Optional[ExportFailed] = None

    @property
    def success(self) -> bool:
        return self.error is None


class Exporter:
    """Handles exporting meshes and naming derived output files."""

    @staticmethod
    def derive_output_path(input_path: str, suffix: str, file_format: str) -> str:
        """Build a sibling file name, e.g. teddy.obj -> teddy_<suffix>.ply.

        Args:
            input_path: Path of the source model.
            suffix: Tag appended to the file stem.
            file_format: Extension of the derived file, without the dot.

        Returns:
            Path in the same directory as the input.
        """
        directory, filename = os.path.split(input_path)
        stem, _ = os.path.splitext(filename)
        return os.path.join(directory, f"{stem}_{suffix}.{file_format}")

    @staticmethod
    def export(mesh: trimesh.Trimesh, file_format: str, path: str) -> ExportResult:
        """Export mesh in the given format.

        Args:
            mesh: Mesh to persist.
            file_format: trimesh export type, e.g. 'obj', 'ply', 'stl'.
            path: Output file path.

        Returns:
            ExportResult; its error is set whenever the writer fails
            (unsupported format, missing optional dependency, unwritable
            path). No partial output file is left behind.
        """
        existed = os.path.exists(path)
        try:
            mesh.export(path, file_type=file_format)
        except Exception as e:
            logger.debug("Export of %s as %r failed", path, file_format, exc_info=True)
            # Drop whatever the failed writer left behind, never a prior file
            if not existed and os.path.exists(path):
                os.remove(path)
            return ExportResult(path=path, error=ExportFailed(path, str(e) or type(e).__name__))

        logger.info("Exported %s", path)
        return ExportResult(path=path)
