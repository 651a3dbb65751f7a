"""
Hyperspectral image container.

This module provides:
- HyperspectralImage: in-memory cube with lookup, band and normalization helpers
- Pseudo-RGB composites from automatically selected bands
- Mode enumerations and error types
"""

from .errors import (
    HyperspectralError,
    ShapeError,
    InvalidModeError,
    ParameterError,
    NumericalError,
)

from .modes import (
    LayoutMode,
    PreprocessMode,
    NoiseMethod,
)

from .image import HyperspectralImage

__all__ = [
    # Image
    "HyperspectralImage",
    # Modes
    "LayoutMode",
    "PreprocessMode",
    "NoiseMethod",
    # Errors
    "HyperspectralError",
    "ShapeError",
    "InvalidModeError",
    "ParameterError",
    "NumericalError",
]
