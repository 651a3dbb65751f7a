"""
Preprocessing module for hyperspectral cubes.

This module provides functions for:
- Band removal and selection
- Per-band normalization
- Noise/signal covariance estimation
- Noise-adjusted principal component reconstruction
- Greedy volume-gradient band selection and RGB composites
"""

from .normalization import (
    check_band_indices,
    remove_bands,
    normalize_minmax,
    normalize_standard,
    to_uint8,
)

from .band_selection import (
    select_bands,
    volume_gradients,
    volume_gradient_band_selection,
    create_rgb_composite,
)

from .noise_estimation import (
    covariance,
    estimate_noise_signal,
    NoiseSignalEstimator,
)

from .noise_adjusted import (
    whitening_matrix,
    noise_adjusted_components,
    noise_adjusted_reconstruction,
)

__all__ = [
    # Normalization
    "check_band_indices",
    "remove_bands",
    "normalize_minmax",
    "normalize_standard",
    "to_uint8",
    # Band selection
    "select_bands",
    "volume_gradients",
    "volume_gradient_band_selection",
    "create_rgb_composite",
    # Noise estimation
    "covariance",
    "estimate_noise_signal",
    "NoiseSignalEstimator",
    # Noise-adjusted reconstruction
    "whitening_matrix",
    "noise_adjusted_components",
    "noise_adjusted_reconstruction",
]
