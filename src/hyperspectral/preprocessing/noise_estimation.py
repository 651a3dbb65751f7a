"""
Noise and signal covariance estimation for hyperspectral cubes.

Supports two methods:
- 'regression': each band is predicted from all other bands by least
  squares; the residual is taken as that band's noise
- 'shift_difference': noise from differences of horizontally adjacent pixels
"""

import numpy as np
from typing import Optional, Tuple, Union
import logging

from config import NoiseEstimationConfig, default_config
from ..errors import NumericalError, ShapeError
from ..modes import NoiseMethod, parse_mode

logger = logging.getLogger(__name__)


def covariance(samples: np.ndarray) -> np.ndarray:
    """
    Empirical covariance of row samples.

    Args:
        samples: Array of shape (n_samples, n_features)

    Returns:
        Covariance matrix of shape (n_features, n_features), normalized by n_samples
    """
    centered = samples - samples.mean(axis=0, keepdims=True)
    return (centered.T @ centered) / samples.shape[0]


def _symmetrize(matrix: np.ndarray) -> np.ndarray:
    return (matrix + matrix.T) / 2.0


class NoiseSignalEstimator:
    """
    Estimate noise and signal covariance matrices from a cube.
    """

    def __init__(
        self,
        method: Union[str, NoiseMethod] = NoiseMethod.REGRESSION,
        regularization: float = 1e-6
    ):
        """
        Initialize the estimator.

        Args:
            method: Estimation method ('regression' or 'shift_difference')
            regularization: Ridge, as a fraction of the mean diagonal of the
                band correlation matrix, added before inversion ('regression' only)

        Raises:
            InvalidModeError: If the method is unknown
        """
        self.method = parse_mode(method, NoiseMethod, name="method")
        self.regularization = regularization

    def __call__(self, cube: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute (Rn, Rs).

        Args:
            cube: Hyperspectral data, shape (H, W, B)

        Returns:
            Tuple of noise covariance and signal covariance, both (B, B)
        """
        cube = np.asarray(cube, dtype=np.float64)
        if cube.ndim != 3:
            raise ShapeError(f"Expected 3D cube (H, W, B), got shape {cube.shape}")

        if self.method is NoiseMethod.SHIFT_DIFFERENCE:
            rn, rs = self._shift_difference(cube)
        else:
            rn, rs = self._regression(cube)

        if not (np.all(np.isfinite(rn)) and np.all(np.isfinite(rs))):
            raise NumericalError(f"Noise estimation ({self.method.value}) produced non-finite values")

        logger.debug(
            f"Estimated noise/signal covariance ({self.method.value}): "
            f"trace(Rn)={np.trace(rn):.4g}, trace(Rs)={np.trace(rs):.4g}"
        )
        return _symmetrize(rn), _symmetrize(rs)

    def _regression(self, cube: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        n_bands = cube.shape[-1]
        y = cube.reshape(-1, n_bands).T  # (B, N)

        rr = y @ y.T
        ridge = self.regularization * np.trace(rr) / n_bands
        try:
            rri = np.linalg.inv(rr + ridge * np.eye(n_bands))
        except np.linalg.LinAlgError as e:
            raise NumericalError(f"Band correlation matrix is singular: {e}") from e

        noise = np.zeros_like(y)
        for i in range(n_bands):
            # Inverse of the correlation matrix with band i left out
            xx = rri - np.outer(rri[:, i], rri[i, :]) / rri[i, i]
            rra = rr[:, i].copy()
            rra[i] = 0.0
            beta = xx @ rra
            beta[i] = 0.0
            noise[i] = y[i] - beta @ y

        n_pixels = y.shape[1]
        rn = np.diag(np.diag(noise @ noise.T) / n_pixels)
        rs = covariance((y - noise).T)
        return rn, rs

    def _shift_difference(self, cube: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        if cube.shape[1] < 2:
            raise ShapeError("Shift-difference noise estimation needs at least 2 columns")

        n_bands = cube.shape[-1]
        diff = (cube[:, 1:, :] - cube[:, :-1, :]).reshape(-1, n_bands)
        rn = covariance(diff) / 2.0
        rs = covariance(cube.reshape(-1, n_bands)) - rn
        return rn, rs


def estimate_noise_signal(
    cube: np.ndarray,
    config: Optional[NoiseEstimationConfig] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Estimate noise covariance Rn and signal covariance Rs of a cube.

    Args:
        cube: Hyperspectral data, shape (H, W, B)
        config: Noise estimation configuration (uses default if None)

    Returns:
        Tuple (Rn, Rs), both symmetric (B, B) matrices
    """
    if config is None:
        config = default_config.noise

    estimator = NoiseSignalEstimator(
        method=config.method,
        regularization=config.regularization
    )
    return estimator(cube)
