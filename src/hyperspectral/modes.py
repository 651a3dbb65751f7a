"""
Mode enumerations for layout and preprocessing selection.
"""

from enum import Enum
from typing import Type, TypeVar, Union

from .errors import InvalidModeError

M = TypeVar("M", bound=Enum)


class LayoutMode(str, Enum):
    """Output layout for point lookup and band selection."""

    ONE_D = "1D"  # flattened (pixels, bands)
    TWO_D = "2D"  # spatial (rows, cols, bands)


class PreprocessMode(str, Enum):
    """Per-band preprocessing transform."""

    NORM = "norm"  # min-max scaling to [0, 1]
    STD = "std"    # z-score standardization


class NoiseMethod(str, Enum):
    """Noise covariance estimation method."""

    REGRESSION = "regression"
    SHIFT_DIFFERENCE = "shift_difference"


def parse_mode(value: Union[str, Enum], enum_cls: Type[M], name: str = "mode") -> M:
    """
    Convert a mode given as enum member or string into `enum_cls`.

    Raises:
        InvalidModeError: If the value is not one of the enum's values
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        accepted = ", ".join(repr(m.value) for m in enum_cls)
        raise InvalidModeError(
            f"Parameter '{name}' should be one of {accepted}, got {value!r}"
        ) from None
