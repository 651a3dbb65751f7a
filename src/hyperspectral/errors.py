"""
Exception types raised by the hyperspectral image container.

The input-validation errors also derive from ValueError so callers that
already catch ValueError for bad arguments keep working.
"""


class HyperspectralError(Exception):
    """Base class for all hyperspectral image errors."""


class ShapeError(HyperspectralError, ValueError):
    """Array dimensions, lengths or indices do not fit the cube."""


class InvalidModeError(HyperspectralError, ValueError):
    """An unrecognized mode string was passed."""


class ParameterError(HyperspectralError, ValueError):
    """A numeric parameter is outside its accepted range."""


class NumericalError(HyperspectralError, ArithmeticError):
    """A matrix decomposition or inversion failed."""
