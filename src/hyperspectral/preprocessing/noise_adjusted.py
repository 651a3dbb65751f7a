"""
Noise-adjusted principal component reconstruction.

The cube is projected onto the eigenvectors of the noise-whitened signal
covariance, truncated to a number of components and projected back into
band space.
"""

import numpy as np
from scipy import linalg
import logging
import warnings

from ..errors import NumericalError, ParameterError, ShapeError

logger = logging.getLogger(__name__)


def whitening_matrix(rn: np.ndarray) -> np.ndarray:
    """
    Inverse square root of a noise covariance matrix.

    Uses a pseudo-inverse of the matrix square root so a near-singular
    Rn does not fail outright.
    """
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            root = linalg.sqrtm(rn)
        for w in caught:
            logger.debug(f"sqrtm of noise covariance: {w.message}")
        whiten = np.linalg.pinv(np.real(root))
    except (np.linalg.LinAlgError, linalg.LinAlgError, ValueError) as e:
        raise NumericalError(f"Whitening of noise covariance failed: {e}") from e

    if not np.all(np.isfinite(whiten)):
        raise NumericalError("Whitening matrix contains non-finite values")
    return whiten


def noise_adjusted_components(
    rn: np.ndarray,
    rs: np.ndarray,
    component_order: str = "ascending"
) -> np.ndarray:
    """
    Eigenvectors of the noise-whitened signal covariance.

    Args:
        rn: Noise covariance, shape (B, B)
        rs: Signal covariance, shape (B, B)
        component_order: "ascending" keeps the eigenvalue order returned by
            the symmetric solver, "descending" reverses it

    Returns:
        Real eigenvector matrix V, shape (B, B), one component per column
    """
    if component_order not in ("ascending", "descending"):
        raise ParameterError(
            f"component_order should be 'ascending' or 'descending', got {component_order!r}"
        )

    whiten = whitening_matrix(rn)
    m = whiten @ rs @ whiten
    m = (m + m.T) / 2.0

    try:
        eigenvalues, vectors = linalg.eigh(m)
    except linalg.LinAlgError as e:
        raise NumericalError(f"Eigen-decomposition did not converge: {e}") from e

    logger.debug(f"Noise-adjusted eigenvalues: {np.array2string(eigenvalues, precision=4)}")

    if component_order == "descending":
        vectors = vectors[:, ::-1]
    return vectors


def noise_adjusted_reconstruction(
    cube: np.ndarray,
    n_components: int,
    rn: np.ndarray,
    rs: np.ndarray,
    component_order: str = "ascending"
) -> np.ndarray:
    """
    Reconstruct a cube from its first `n_components` noise-adjusted components.

    Args:
        cube: Hyperspectral data, shape (H, W, B)
        n_components: Number of components kept
        rn: Noise covariance, shape (B, B)
        rs: Signal covariance, shape (B, B)
        component_order: Column order of the eigenvectors

    Returns:
        Reconstructed cube, shape (H, W, B)
    """
    cube = np.asarray(cube, dtype=np.float64)
    if cube.ndim != 3:
        raise ShapeError(f"Expected 3D cube (H, W, B), got shape {cube.shape}")

    height, width, n_bands = cube.shape
    if rn.shape != (n_bands, n_bands) or rs.shape != (n_bands, n_bands):
        raise ShapeError(
            f"Covariance matrices should be ({n_bands}, {n_bands}), "
            f"got {rn.shape} and {rs.shape}"
        )
    if not 1 <= n_components <= n_bands:
        raise ParameterError(f"n_components should be in [1, {n_bands}], got {n_components}")

    v = noise_adjusted_components(rn, rs, component_order)

    x = cube.reshape(-1, n_bands)
    y = x @ v
    y_ = y[:, :n_components]
    v_ = v[:, :n_components]
    x_ = y_ @ v_.T

    if not np.all(np.isfinite(x_)):
        raise NumericalError("Noise-adjusted reconstruction produced non-finite values")

    logger.debug(f"Reconstructed cube from {n_components}/{n_bands} components")
    return x_.reshape(height, width, n_bands)
