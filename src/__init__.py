"""
HSI-Cube: in-memory hyperspectral image handling

This package provides tools for:
- Hyperspectral cube indexing and point lookup
- Band removal and selection
- Per-band normalization
- Noise-adjusted band selection and pseudo-RGB composites
"""

__version__ = "0.1.0"
