"""Round-trip quantization error analysis.

Encodes binary32 samples into a reduced format, decodes them back and
summarizes what was lost: rounding error, values pushed to Infinity and values
flushed to zero.

Key Features:
- Reproducible log-uniform sampling with seed control
- Per-format error summary suitable for JSON serialization
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from precision_codec.codec.bits import encode_f32
from precision_codec.codec.flex import get_codec
from precision_codec.data.precision_types import PrecisionFormat, parse_format

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


DEFAULT_SEED: int = 42
"""Default random seed for reproducible sweeps."""


@dataclass(frozen=True, slots=True)
class RoundTripStats:
    """Summary of encode-then-decode error over a set of samples."""

    format: PrecisionFormat
    """Format the samples were round-tripped through."""

    samples: int
    """Number of input values."""

    max_abs_error: float
    """Largest |decoded - input| over finite, non-overflowing inputs."""

    max_rel_error: float
    """Largest relative error over finite, non-zero, non-overflowing inputs."""

    mean_rel_error: float
    """Mean relative error over the same inputs as max_rel_error."""

    overflow_count: int
    """Finite inputs that decoded to Infinity."""

    underflow_count: int
    """Non-zero inputs that decoded to zero."""

    exact_count: int
    """Inputs whose round trip is bit-identical."""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "format": self.format.value,
            "samples": self.samples,
            "max_abs_error": self.max_abs_error,
            "max_rel_error": self.max_rel_error,
            "mean_rel_error": self.mean_rel_error,
            "overflow_count": self.overflow_count,
            "underflow_count": self.underflow_count,
            "exact_count": self.exact_count,
        }


def sample_values(
    n: int,
    *,
    seed: int | None = DEFAULT_SEED,
    low: float = 2.0**-12,
    high: float = 2.0**12,
) -> NDArray[np.float32]:
    """Draw signed binary32 values with log-uniform magnitudes.

    Magnitudes are spread evenly over binades in [low, high), so every
    exponent in the range gets roughly the same number of samples.

    Args:
        n: Number of samples.
        low: Smallest magnitude (must be positive).
        high: Upper magnitude bound (must exceed low).
        seed: Random seed for reproducibility.

    Returns:
        Array of n float32 values.

    Raises:
        ValueError: If n is negative or the bounds are invalid.

    Example:
        >>> values = sample_values(1000, seed=42)
        >>> values.dtype
        dtype('float32')
    """
    if n < 0:
        raise ValueError(f"Sample count must be non-negative, got {n}")
    if not 0 < low < high:
        raise ValueError(f"Expected 0 < low < high, got low={low}, high={high}")

    rng = np.random.default_rng(seed)

    exponents = rng.uniform(np.log2(low), np.log2(high), n)
    signs = rng.choice(np.array([-1.0, 1.0]), n)
    return (signs * np.exp2(exponents)).astype(np.float32)


def measure_round_trip(
    fmt: PrecisionFormat | str,
    values: ArrayLike,
) -> RoundTripStats:
    """Round-trip values through a format and summarize the error.

    Errors are computed in float64 against the binary32 inputs. NaN inputs
    count toward ``samples`` only.

    Args:
        fmt: Format to round-trip through.
        values: Input values (converted to binary32, any shape).

    Returns:
        RoundTripStats for the given values.

    Example:
        >>> stats = measure_round_trip("f16", sample_values(10_000))
        >>> stats.max_rel_error <= 2.0**-11
        True
    """
    fmt = parse_format(fmt)
    codec = get_codec(fmt)

    inputs = np.asarray(values, dtype=np.float32).ravel()
    decoded = codec.decode(codec.encode(inputs))

    finite = np.isfinite(inputs)
    overflow = finite & np.isinf(decoded)
    underflow = finite & (inputs != 0) & (decoded == 0)
    exact = encode_f32(inputs) == encode_f32(decoded)

    kept = finite & ~overflow
    abs_error = np.abs(decoded[kept].astype(np.float64) - inputs[kept].astype(np.float64))

    nonzero = inputs[kept] != 0
    rel_error = abs_error[nonzero] / np.abs(inputs[kept][nonzero].astype(np.float64))

    return RoundTripStats(
        format=fmt,
        samples=int(inputs.size),
        max_abs_error=float(abs_error.max()) if abs_error.size else 0.0,
        max_rel_error=float(rel_error.max()) if rel_error.size else 0.0,
        mean_rel_error=float(rel_error.mean()) if rel_error.size else 0.0,
        overflow_count=int(overflow.sum()),
        underflow_count=int(underflow.sum()),
        exact_count=int(exact.sum()),
    )


__all__ = [
    "DEFAULT_SEED",
    "RoundTripStats",
    "measure_round_trip",
    "sample_values",
]
