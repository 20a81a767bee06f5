"""
Error kinds raised by the rigid transformation pipeline.
"""


class RigidTransformationError(Exception):
    """Base class for all errors raised by this package."""


class InputUnreadable(RigidTransformationError, OSError):
    """Source model is missing, corrupt, unsupported or has no usable mesh."""


class ShapeMismatch(RigidTransformationError, ValueError):
    """Arrays that must correspond index-for-index have incompatible shapes."""


class ExportFailed(RigidTransformationError):
    """A transformed mesh could not be persisted.

    Never raised by the exporter itself; it is returned inside an
    ExportResult so the caller can report it and carry on.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"{reason} - {path}")
        self.path = path
        self.reason = reason
