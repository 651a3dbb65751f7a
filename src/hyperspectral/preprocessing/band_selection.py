"""
Band selection module for hyperspectral data.

Provides functions to:
- Select specific bands
- Pick maximally distinct bands by greedy volume-gradient elimination
- Create RGB composites from selected bands
"""

import numpy as np
from scipy import linalg
from typing import List, Optional, Sequence
import logging

from ..errors import NumericalError, ParameterError, ShapeError
from .normalization import check_band_indices, normalize_minmax

logger = logging.getLogger(__name__)

# Eigenvalues of the band Gram matrix below this fraction of the largest
# are treated as zero (rank-deficient band sets)
GRAM_RTOL = 1e-10


def select_bands(
    data: np.ndarray,
    band_indices: Sequence[int],
    axis: int = -1
) -> np.ndarray:
    """
    Select specific bands from hyperspectral data.

    Order follows `band_indices` and repeats are allowed.

    Args:
        data: Hyperspectral data array
        band_indices: List of band indices to select
        axis: Axis along which bands are stored

    Returns:
        New array with selected bands only

    Raises:
        ShapeError: If any index is out of range
    """
    indices = check_band_indices(band_indices, data.shape[axis])
    return np.take(data, indices, axis=axis)


def _centered_gram(gram: np.ndarray, subset: Sequence[int]) -> np.ndarray:
    """Gram matrix of the band vectors in `subset` after removing their centroid."""
    g = gram[np.ix_(subset, subset)]
    row_mean = g.mean(axis=1, keepdims=True)
    return g - row_mean - row_mean.T + g.mean()


def volume_gradients(gram: np.ndarray, subset: Sequence[int]) -> np.ndarray:
    """
    Volume gradient magnitude for each band in `subset`.

    Each band is a vertex (its vector of pixel values) of a simplex. The
    gradient of the simplex volume with respect to a vertex is inversely
    proportional to that vertex's height above the affine hull of the
    others, and the squared inverse height is the diagonal of the
    pseudo-inverse of the centered Gram matrix.

    Args:
        gram: Gram matrix of all band vectors, shape (B, B)
        subset: Band indices forming the simplex

    Returns:
        Gradient scores, one per entry of `subset`
    """
    centered = _centered_gram(gram, subset)
    m = len(subset)
    scale = np.trace(centered) / m
    if scale <= 0:
        # All band vectors coincide
        return np.zeros(m)

    # Centering leaves the all-ones direction empty; filling it only adds
    # the same constant to every diagonal entry.
    filled = centered + scale * np.full((m, m), 1.0 / m)
    try:
        inverse = linalg.pinvh(filled, rtol=GRAM_RTOL)
    except linalg.LinAlgError as e:
        raise NumericalError(f"Pseudo-inverse of band Gram matrix failed: {e}") from e
    return np.diag(inverse)


def volume_gradient_band_selection(
    data: np.ndarray,
    excluded: Optional[Sequence[int]] = None,
    n_select: int = 3
) -> List[int]:
    """
    Greedy volume-gradient band selection.

    Starting from every band not in `excluded`, repeatedly drop the band
    with the largest volume gradient (the one closest to the hull of the
    others, i.e. the most redundant) until `n_select` bands remain. Ties go
    to the lowest band index, so the result is deterministic.

    Args:
        data: Hyperspectral data, shape (H, W, B)
        excluded: Band indices that are never selected
        n_select: Number of bands to keep

    Returns:
        Selected band indices in ascending order

    Raises:
        ShapeError: If data is not 3D or an excluded index is out of range
        ParameterError: If n_select is not in [1, number of candidates]
    """
    data = np.asarray(data, dtype=np.float64)
    if data.ndim != 3:
        raise ShapeError(f"Expected 3D cube (H, W, B), got shape {data.shape}")

    n_bands = data.shape[-1]
    skip = set(check_band_indices(excluded if excluded is not None else [], n_bands).tolist())
    remaining = [b for b in range(n_bands) if b not in skip]

    if n_select < 1 or n_select > len(remaining):
        raise ParameterError(
            f"Cannot select {n_select} bands from {len(remaining)} candidates"
        )

    # Heights are translation invariant; shifting by the candidates' centroid
    # keeps the Gram entries small
    vectors = data.reshape(-1, n_bands)
    vectors = vectors - vectors[:, remaining].mean(axis=1, keepdims=True)
    gram = vectors.T @ vectors
    if not np.all(np.isfinite(gram)):
        raise NumericalError("Band Gram matrix contains non-finite values")

    while len(remaining) > n_select:
        gradients = volume_gradients(gram, remaining)
        drop = int(np.argmax(gradients))
        logger.debug(f"Dropping band {remaining[drop]} (gradient={gradients[drop]:.4g})")
        del remaining[drop]

    logger.info(f"Volume-gradient selection kept bands {remaining}")
    return remaining


def create_rgb_composite(
    data: np.ndarray,
    band_indices: Sequence[int]
) -> np.ndarray:
    """
    Create a composite from selected bands, each scaled to [0, 1].

    Args:
        data: Hyperspectral data, shape (H, W, B)
        band_indices: Band indices for the output channels, in channel order

    Returns:
        Composite image, shape (H, W, len(band_indices)), values 0-1
    """
    composite = select_bands(data, band_indices)
    return normalize_minmax(composite)
