"""
Run configuration for the rigid transformation pipeline.
"""

from dataclasses import dataclass
import logging
import os
from typing import Optional

import numpy as np

from .point_cloud import resolve_dtype


DEFAULT_INPUT_PATH = os.path.join(os.path.dirname(__file__), "data", "cube.obj")


@dataclass
class PipelineConfig:
    """Pipeline configuration."""
    # Input / output
    input_path: str = DEFAULT_INPUT_PATH
    output_format: Optional[str] = None  # defaults to the input extension

    # Numerics
    precision: str = "float64"
    rank_tolerance: Optional[float] = None

    # Perturbation
    rotation_angle: float = 90.0
    seed: Optional[int] = None

    # Diagnostics
    log_level: int = logging.WARNING

    @property
    def dtype(self) -> np.dtype:
        return resolve_dtype(self.precision)

    @property
    def resolved_output_format(self) -> str:
        if self.output_format:
            return self.output_format
        return os.path.splitext(self.input_path)[1].lstrip(".").lower()
