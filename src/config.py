"""
Configuration for hyperspectral image processing.

This module defines the tunable parameters for:
- Per-band preprocessing (normalization mode, standard deviation convention)
- Noise/signal covariance estimation
- Pseudo-RGB composite generation
"""

from dataclasses import dataclass, field


# =============================================================================
# Preprocessing Configuration
# =============================================================================
@dataclass
class PreprocessingConfig:
    """Configuration for in-place per-band preprocessing."""

    # Preprocessing mode: "norm" (min-max to [0, 1]) or "std" (z-score)
    mode: str = "norm"

    # Delta degrees of freedom for the "std" mode.
    # 1 = sample standard deviation, 0 = population standard deviation
    std_ddof: int = 1


# =============================================================================
# Noise Estimation Configuration
# =============================================================================
@dataclass
class NoiseEstimationConfig:
    """Configuration for noise/signal covariance estimation."""

    # Estimation method: "regression" or "shift_difference"
    method: str = "regression"

    # Ridge added to the band correlation matrix before inversion,
    # relative to its mean diagonal so results do not depend on data scale
    regularization: float = 1e-6


# =============================================================================
# RGB Composite Configuration
# =============================================================================
@dataclass
class RGBConfig:
    """Configuration for band-selection based pseudo-RGB composites."""

    # Fraction of bands kept in the noise-adjusted basis (1/bands < degree <= 1)
    degree: float = 0.5

    # Number of bands picked for display
    n_rgb_bands: int = 3

    # Eigenvector column order after decomposition.
    # "ascending" keeps the solver's native order, "descending" reverses it
    component_order: str = "ascending"


# =============================================================================
# Master Configuration
# =============================================================================
@dataclass
class Config:
    """Master configuration combining all sub-configs."""

    preprocessing: PreprocessingConfig = field(default_factory=PreprocessingConfig)
    noise: NoiseEstimationConfig = field(default_factory=NoiseEstimationConfig)
    rgb: RGBConfig = field(default_factory=RGBConfig)


# Default configuration instance
default_config = Config()


def get_config() -> Config:
    """Get the default configuration."""
    return default_config
