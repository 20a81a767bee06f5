"""
PointCloud container and scalar precision handling.
"""

from dataclasses import dataclass
import numpy as np

from .errors import ShapeMismatch


_PRECISIONS = {
    "float": np.float32,
    "float32": np.float32,
    "single": np.float32,
    "double": np.float64,
    "float64": np.float64,
}


def resolve_dtype(precision) -> np.dtype:
    """Map a precision name (or numpy float type) to a numpy dtype.

    Args:
        precision: One of 'float', 'float32', 'single', 'double', 'float64',
            or a numpy floating dtype.

    Returns:
        The corresponding numpy dtype.

    Raises:
        ValueError: If the precision is not a supported real scalar type.
    """
    if isinstance(precision, str):
        try:
            return np.dtype(_PRECISIONS[precision.lower()])
        except KeyError:
            raise ValueError(f"Unsupported precision: {precision!r}") from None

    dtype = np.dtype(precision)
    if dtype not in (np.dtype(np.float32), np.dtype(np.float64)):
        raise ValueError(f"Unsupported precision: {dtype}")
    return dtype


def _as_vectors(values, name: str, dtype) -> np.ndarray:
    array = np.array(values, dtype=dtype, copy=True)
    if array.ndim != 2 or array.shape[1] != 3:
        raise ShapeMismatch(f"{name} must have shape (N, 3), got {array.shape}")
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class PointCloud:
    """Vertex positions paired index-for-index with vertex normals.

    Both arrays are copied on construction and stored read-only, so a
    cloud never changes once built. Correspondence between two clouds is
    purely by index.
    """
    positions: np.ndarray  # (N, 3)
    normals: np.ndarray    # (N, 3)

    def __post_init__(self):
        positions = np.asarray(self.positions)
        dtype = positions.dtype if positions.dtype in (np.float32, np.float64) else np.float64

        object.__setattr__(self, "positions", _as_vectors(positions, "positions", dtype))
        object.__setattr__(self, "normals", _as_vectors(self.normals, "normals", dtype))

        if len(self.positions) != len(self.normals):
            raise ShapeMismatch(
                f"positions and normals differ in length: "
                f"{len(self.positions)} != {len(self.normals)}"
            )

    def __len__(self):
        return len(self.positions)

    @property
    def dtype(self) -> np.dtype:
        return self.positions.dtype

    def astype(self, precision) -> "PointCloud":
        """Return a copy of the cloud in another scalar precision."""
        dtype = resolve_dtype(precision)
        return PointCloud(
            positions=self.positions.astype(dtype),
            normals=self.normals.astype(dtype),
        )
