"""
Normalization module for hyperspectral cubes.

Provides functions for:
- Band removal
- Per-band min-max normalization
- Per-band standard normalization (z-score)
- Data type conversion for display
"""

import numpy as np
from typing import Optional, Sequence, Tuple
import logging

from ..errors import ShapeError

logger = logging.getLogger(__name__)


def check_band_indices(band_indices: Sequence[int], n_bands: int) -> np.ndarray:
    """
    Validate band indices against the band count.

    Args:
        band_indices: 0-based band indices
        n_bands: Number of bands in the cube

    Returns:
        Indices as an integer array

    Raises:
        ShapeError: If an index is not an integer in [0, n_bands)
    """
    indices = np.asarray(band_indices)
    if indices.size == 0:
        return np.zeros(0, dtype=np.intp)
    if indices.ndim != 1 or not np.issubdtype(indices.dtype, np.integer):
        raise ShapeError(f"Band indices should be a 1D integer list, got {indices!r}")

    bad = indices[(indices < 0) | (indices >= n_bands)]
    if bad.size > 0:
        raise ShapeError(
            f"Band indices {bad.tolist()} out of range for {n_bands} bands"
        )
    return indices.astype(np.intp)


def remove_bands(
    data: np.ndarray,
    band_indices: Sequence[int],
    wavelengths: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Remove bands from hyperspectral data.

    The kept bands are the ascending set difference of all band indices
    and `band_indices`; duplicates in `band_indices` are ignored.

    Args:
        data: Hyperspectral data, shape (H, W, B)
        band_indices: List of band indices to remove
        wavelengths: Optional wavelength array

    Returns:
        Tuple of (cleaned_data, cleaned_wavelengths)

    Raises:
        ShapeError: If any index is out of range
    """
    n_bands = data.shape[-1]
    indices = check_band_indices(band_indices, n_bands)

    keep_mask = np.ones(n_bands, dtype=bool)
    keep_mask[indices] = False

    cleaned_data = data[:, :, keep_mask]

    cleaned_wavelengths = None
    if wavelengths is not None:
        cleaned_wavelengths = wavelengths[keep_mask]

    removed_count = n_bands - int(np.sum(keep_mask))
    logger.info(f"Removed {removed_count} bands, {cleaned_data.shape[-1]} bands remaining")

    return cleaned_data, cleaned_wavelengths


def normalize_minmax(data: np.ndarray) -> np.ndarray:
    """
    Apply per-band min-max normalization to scale data to [0, 1].

    Statistics are computed over the spatial axes of an (H, W, B) cube.
    A constant band has no range and is mapped to 0.

    Args:
        data: Hyperspectral data, shape (H, W, B)

    Returns:
        New float64 array in range [0, 1]
    """
    data = np.asarray(data, dtype=np.float64)

    vmin = data.min(axis=(0, 1), keepdims=True)
    vmax = data.max(axis=(0, 1), keepdims=True)
    span = vmax - vmin

    flat = span[0, 0] <= 0
    if np.any(flat):
        logger.warning(
            f"Bands {np.flatnonzero(flat).tolist()} are constant, normalized to 0"
        )

    safe_span = np.where(span > 0, span, 1.0)
    result = (data - vmin) / safe_span
    result[:, :, flat] = 0.0

    return result


def normalize_standard(data: np.ndarray, ddof: int = 1) -> np.ndarray:
    """
    Apply per-band standard (z-score) normalization.

    Args:
        data: Hyperspectral data, shape (H, W, B)
        ddof: Delta degrees of freedom of the standard deviation
            (1 for sample, 0 for population)

    Returns:
        Standardized data (mean=0, std=1 per band); constant bands become 0
    """
    data = np.asarray(data, dtype=np.float64)

    mean = data.mean(axis=(0, 1), keepdims=True)
    n_pixels = data.shape[0] * data.shape[1]
    if n_pixels - ddof > 0:
        std = data.std(axis=(0, 1), ddof=ddof, keepdims=True)
    else:
        std = np.zeros_like(mean)

    flat = std[0, 0] <= 0
    if np.any(flat):
        logger.warning(
            f"Bands {np.flatnonzero(flat).tolist()} have zero deviation, standardized to 0"
        )

    safe_std = np.where(std > 0, std, 1.0)
    result = (data - mean) / safe_std
    result[:, :, flat] = 0.0

    return result


def to_uint8(
    data: np.ndarray,
    input_range: Tuple[float, float] = (0.0, 1.0)
) -> np.ndarray:
    """
    Convert normalized data to uint8 (0-255).

    Args:
        data: Normalized data array
        input_range: Expected input value range

    Returns:
        uint8 data array
    """
    vmin, vmax = input_range

    if vmax > vmin:
        scaled = (np.asarray(data, dtype=np.float64) - vmin) / (vmax - vmin) * 255.0
    else:
        scaled = np.zeros_like(data, dtype=np.float64)

    scaled = np.clip(np.round(scaled), 0, 255)

    return scaled.astype(np.uint8)
