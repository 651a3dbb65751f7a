"""
In-memory hyperspectral image container.

Usage:
    h = HyperspectralImage(cube)          # cube shape: (rows, cols, bands)

    X = h.flatten()                       # (rows * cols, bands)
    d = h.locate([[x, y]])                # spectra at column x, row y
    im = h.reshape_result(scores)         # per-pixel result back to (rows, cols)

    h.remove_bands([0, 1, 2])
    h.preprocess("norm")
    rgb = h.compute_rgb(0.5)              # (rows, cols, 3), values 0-1

All indices are 0-based. Pixels are flattened in row-major order, so
pixel (row, col) is row `row * cols + col` of `flatten()`.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union
import logging

from config import NoiseEstimationConfig, PreprocessingConfig, RGBConfig, default_config
from .errors import ParameterError, ShapeError
from .modes import LayoutMode, PreprocessMode, parse_mode
from .preprocessing.band_selection import (
    create_rgb_composite,
    select_bands,
    volume_gradient_band_selection,
)
from .preprocessing.noise_adjusted import noise_adjusted_reconstruction
from .preprocessing.noise_estimation import estimate_noise_signal
from .preprocessing.normalization import normalize_minmax, normalize_standard, remove_bands

logger = logging.getLogger(__name__)


def _index_array(values, name: str) -> np.ndarray:
    """Convert location values to an integer array."""
    arr = np.asarray(values)
    if arr.size == 0:
        return arr.astype(np.intp)
    if not np.issubdtype(arr.dtype, np.integer):
        raise ShapeError(f"{name} should contain integers, got dtype {arr.dtype}")
    return arr.astype(np.intp)


@dataclass(eq=False)
class HyperspectralImage:
    """Hyperspectral image cube with indexing and transform helpers.

    The cube is copied to float64 on construction; in-place methods
    (`remove_bands`, `preprocess`) only ever touch that copy.
    """

    cube: np.ndarray  # Shape: (rows, cols, bands)
    wavelengths: Optional[np.ndarray] = None  # Wavelength for each band (nm)

    def __post_init__(self):
        """Validate and take ownership of the cube."""
        cube = np.asarray(self.cube)
        if np.iscomplexobj(cube):
            raise ParameterError("Cube values must be real")
        if cube.ndim != 3:
            raise ShapeError(f"Expected 3D array (rows, cols, bands), got shape {cube.shape}")
        if min(cube.shape) < 1:
            raise ShapeError(f"Cube dimensions must all be at least 1, got {cube.shape}")
        self.cube = np.array(cube, dtype=np.float64, copy=True)

        if self.wavelengths is not None:
            wavelengths = np.array(self.wavelengths, dtype=np.float64, copy=True).ravel()
            if wavelengths.shape[0] != self.n_bands:
                raise ShapeError(
                    f"Got {wavelengths.shape[0]} wavelengths for {self.n_bands} bands"
                )
            self.wavelengths = wavelengths

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Return cube shape (rows, cols, bands)."""
        return self.cube.shape

    @property
    def height(self) -> int:
        """Return image height (rows)."""
        return self.cube.shape[0]

    @property
    def width(self) -> int:
        """Return image width (columns)."""
        return self.cube.shape[1]

    @property
    def n_bands(self) -> int:
        """Return number of bands."""
        return self.cube.shape[2]

    @property
    def n_pixels(self) -> int:
        """Return number of pixels (rows * cols)."""
        return self.height * self.width

    def flatten(self) -> np.ndarray:
        """Return a 2D array: (rows * cols, bands)."""
        return self.cube.reshape(self.n_pixels, self.n_bands).copy()

    def locate(
        self,
        locations,
        mode: Union[str, LayoutMode] = LayoutMode.TWO_D
    ) -> np.ndarray:
        """
        Return the spectra at the given locations.

        Args:
            locations: In '2D' mode, an (num, 2) array of (x, y) pairs where
                x is the column and y the row. In '1D' mode, a list of flat
                pixel indices into `flatten()`.
            mode: '2D' (default) or '1D'

        Returns:
            Spectra array, shape (num, bands)

        Raises:
            ShapeError: If locations are malformed or out of range
            InvalidModeError: If mode is not '1D' or '2D'
        """
        mode = parse_mode(mode, LayoutMode)

        if mode is LayoutMode.ONE_D:
            indices = _index_array(locations, "Index list").ravel()
            bad = indices[(indices < 0) | (indices >= self.n_pixels)]
            if bad.size > 0:
                raise ShapeError(
                    f"Pixel indices {bad.tolist()} out of range for {self.n_pixels} pixels"
                )
            return self.flatten()[indices]

        loc = _index_array(locations, "Location list")
        if loc.ndim != 2 or loc.shape[1] != 2:
            raise ShapeError(f"Location list should be a (num, 2) array, got shape {loc.shape}")

        xs, ys = loc[:, 0], loc[:, 1]
        outside = (xs < 0) | (xs >= self.width) | (ys < 0) | (ys >= self.height)
        if np.any(outside):
            raise ShapeError(
                f"Locations {loc[outside].tolist()} outside image of "
                f"{self.width} columns x {self.height} rows"
            )
        return self.cube[ys, xs, :].copy()

    def reshape_result(self, y) -> np.ndarray:
        """
        Reshape a per-pixel result of length rows * cols into an image (rows, cols).

        Useful when a detector returns one score per row of `flatten()`.
        """
        y = np.asarray(y)
        if y.size != self.n_pixels:
            raise ShapeError(
                f"Result has {y.size} values, expected {self.n_pixels} "
                f"({self.height} x {self.width})"
            )
        return y.reshape(self.height, self.width)

    def remove_bands(self, band_indices: Sequence[int]) -> None:
        """
        Remove bands in place.

        Raises:
            ShapeError: If any index is out of range; the cube is left unchanged
        """
        cube, wavelengths = remove_bands(self.cube, band_indices, self.wavelengths)
        if cube.shape[-1] == 0:
            logger.warning("All bands removed, cube has no bands left")

        self.cube = cube
        self.wavelengths = wavelengths

    def preprocess(
        self,
        mode: Union[str, PreprocessMode, None] = None,
        config: Optional[PreprocessingConfig] = None
    ) -> None:
        """
        Normalize each band in place using statistics over all pixels.

        Args:
            mode: 'norm' (min-max to [0, 1], default) or 'std' (z-score)
            config: Preprocessing configuration (uses default if None)

        Raises:
            InvalidModeError: If mode is not 'norm' or 'std'
        """
        if config is None:
            config = default_config.preprocessing
        mode = parse_mode(mode if mode is not None else config.mode, PreprocessMode)

        if mode is PreprocessMode.NORM:
            self.cube = normalize_minmax(self.cube)
        else:
            self.cube = normalize_standard(self.cube, ddof=config.std_ddof)

        logger.info(f"Preprocessed cube {self.shape} with mode '{mode.value}'")

    def select_bands(
        self,
        band_indices: Sequence[int],
        mode: Union[str, LayoutMode] = LayoutMode.TWO_D
    ) -> np.ndarray:
        """
        Return a new array with only the given bands, in the given order.

        Args:
            band_indices: Band indices; repeats are allowed
            mode: '2D' returns (rows, cols, k), '1D' returns (rows * cols, k)
        """
        mode = parse_mode(mode, LayoutMode)
        selected = select_bands(self.cube, band_indices)

        if mode is LayoutMode.ONE_D:
            return selected.reshape(self.n_pixels, selected.shape[-1])
        return selected

    def rgb_band_indices(
        self,
        degree: Optional[float] = None,
        rgb_config: Optional[RGBConfig] = None,
        noise_config: Optional[NoiseEstimationConfig] = None
    ) -> List[int]:
        """
        Pick the bands shown by `compute_rgb`.

        The cube is reconstructed from its leading noise-adjusted components
        (a `degree` fraction of the band count), and the most distinct bands
        of that reconstruction are chosen by volume-gradient selection.

        Args:
            degree: Fraction of components kept, 1/bands < degree <= 1
            rgb_config: RGB configuration (uses default if None)
            noise_config: Noise estimation configuration (uses default if None)

        Returns:
            Selected band indices, ascending

        Raises:
            ParameterError: If degree is out of range
            NumericalError: If a decomposition fails
        """
        if rgb_config is None:
            rgb_config = default_config.rgb
        if degree is None:
            degree = rgb_config.degree

        n_bands = self.n_bands
        if n_bands == 0 or not (1.0 / n_bands < degree <= 1.0):
            raise ParameterError(
                f"Parameter degree should be between 1/bands ({n_bands} bands) and 1, got {degree}"
            )
        if rgb_config.n_rgb_bands > n_bands:
            raise ParameterError(
                f"Need at least {rgb_config.n_rgb_bands} bands for a composite, cube has {n_bands}"
            )

        # Half rounds away from zero
        n_components = int(np.floor(n_bands * degree + 0.5))

        rn, rs = estimate_noise_signal(self.cube, noise_config)
        reconstructed = noise_adjusted_reconstruction(
            self.cube, n_components, rn, rs,
            component_order=rgb_config.component_order
        )
        indices = volume_gradient_band_selection(
            reconstructed, excluded=[], n_select=rgb_config.n_rgb_bands
        )

        logger.info(f"RGB bands {indices} chosen with {n_components}/{n_bands} components")
        return indices

    def compute_rgb(
        self,
        degree: Optional[float] = None,
        rgb_config: Optional[RGBConfig] = None,
        noise_config: Optional[NoiseEstimationConfig] = None
    ) -> np.ndarray:
        """
        Create a pseudo-RGB composite from automatically selected bands.

        Args:
            degree: Fraction of components kept, 1/bands < degree <= 1 (default 0.5)
            rgb_config: RGB configuration (uses default if None)
            noise_config: Noise estimation configuration (uses default if None)

        Returns:
            Composite image, shape (rows, cols, 3), each channel scaled to [0, 1]
        """
        indices = self.rgb_band_indices(degree, rgb_config, noise_config)
        return create_rgb_composite(self.cube, indices)
