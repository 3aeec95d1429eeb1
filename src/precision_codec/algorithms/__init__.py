"""Numerical analysis module.

This module contains:
- Round-trip quantization error measurement per format
- Reproducible sampling of binary32 test values
"""

from precision_codec.algorithms.round_trip import (
    DEFAULT_SEED,
    RoundTripStats,
    measure_round_trip,
    sample_values,
)

__all__ = [
    "DEFAULT_SEED",
    "RoundTripStats",
    "measure_round_trip",
    "sample_values",
]
