"""Core types, enums and errors for camsnap."""

from .enums import (
    FacingMode,
    FilterKind,
)

from .errors import (
    CamsnapError,
    InvalidDimensions,
    InvalidRatio,
    InvalidFrame,
    UnknownFilter,
    CaptureError,
    ExportError,
)

from .types import (
    # Raster
    Frame,
    # Geometry
    AspectRatio,
    CropRect,
    RatioLike,
)

__all__ = [
    # Enums
    "FacingMode",
    "FilterKind",
    # Errors
    "CamsnapError",
    "InvalidDimensions",
    "InvalidRatio",
    "InvalidFrame",
    "UnknownFilter",
    "CaptureError",
    "ExportError",
    # Types
    "Frame",
    "AspectRatio",
    "CropRect",
    "RatioLike",
]
