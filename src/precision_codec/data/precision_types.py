"""
Precision Format Definitions - Single Source of Truth

This module defines the floating-point formats handled by the codec: their bit
layouts, exponent bias, derived range limits and the numpy dtypes used to
store their bit patterns or to cross-check conversions.

References:
    - IEEE 754-2019 Standard for Floating-Point Arithmetic
    - Google Brain bfloat16 (TPU numerics documentation)
    - Micikevicius et al., "FP8 Formats for Deep Learning" (arXiv:2209.05433)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, cast

import numpy as np
from numpy.typing import DTypeLike

# Try to import ml_dtypes for bfloat16 / float8 reference dtypes
try:
    import ml_dtypes

    HAS_ML_DTYPES = True
except ImportError:
    ml_dtypes = None  # type: ignore[assignment,unused-ignore]
    HAS_ML_DTYPES = False


class PrecisionFormat(Enum):
    """Supported floating-point formats."""

    F32 = "f32"  # IEEE-754 binary32
    F16 = "f16"  # IEEE-754 binary16
    BF16 = "bf16"  # Google Brain bfloat16
    F8 = "f8"  # Extended 8-bit (E4M3, bias 7, IEEE-style Inf/NaN)


@dataclass(frozen=True, slots=True)
class PrecisionSpec:
    """Bit layout and range limits of a floating-point format."""

    format: PrecisionFormat
    bits: int
    exponent_bits: int
    mantissa_bits: int
    exponent_bias: int
    quiet_nan: int  # Canonical quiet NaN bit pattern produced by the encoder
    sign_bits: int = 1

    @property
    def bytes(self) -> int:
        """Number of bytes for this format."""
        return self.bits // 8

    @property
    def precision(self) -> int:
        """Significand digits p, including the implicit bit."""
        return self.mantissa_bits + 1

    @property
    def e_max(self) -> int:
        """Largest unbiased exponent of a finite value."""
        return (1 << self.exponent_bits) - 2 - self.exponent_bias

    @property
    def e_min(self) -> int:
        """Smallest unbiased exponent of a normal value."""
        return 1 - self.exponent_bias

    @property
    def machine_epsilon(self) -> float:
        """Gap between 1.0 and the next representable value."""
        return 2.0**-self.mantissa_bits

    @property
    def max_finite(self) -> float:
        """Largest finite magnitude."""
        return (2.0 - 2.0**-self.mantissa_bits) * 2.0**self.e_max

    @property
    def min_normal(self) -> float:
        """Smallest positive normal magnitude."""
        return 2.0**self.e_min

    @property
    def min_subnormal(self) -> float:
        """Smallest positive subnormal magnitude."""
        return 2.0 ** (self.e_min - self.mantissa_bits)

    @property
    def sign_mask(self) -> int:
        """Bit pattern of the sign field."""
        return 1 << (self.bits - 1)

    @property
    def exponent_mask(self) -> int:
        """Bit pattern of the exponent field."""
        return ((1 << self.exponent_bits) - 1) << self.mantissa_bits

    @property
    def mantissa_mask(self) -> int:
        """Bit pattern of the mantissa field."""
        return (1 << self.mantissa_bits) - 1

    @property
    def inf(self) -> int:
        """Bit pattern of +Infinity (upper bound)."""
        return self.exponent_mask

    @property
    def zero(self) -> int:
        """Bit pattern of +0 (lower bound)."""
        return 0


# =============================================================================
# FORMAT SPECIFICATIONS
# =============================================================================
# Every format reserves exponent all-ones for Infinity/NaN and exponent zero
# for zero/subnormals; quiet NaN has the top mantissa bit set.

_PRECISION_SPECS: dict[PrecisionFormat, PrecisionSpec] = {
    PrecisionFormat.F32: PrecisionSpec(
        format=PrecisionFormat.F32,
        bits=32,
        exponent_bits=8,
        mantissa_bits=23,
        exponent_bias=127,
        quiet_nan=0x7FC00000,
    ),
    PrecisionFormat.F16: PrecisionSpec(
        format=PrecisionFormat.F16,
        bits=16,
        exponent_bits=5,
        mantissa_bits=10,
        exponent_bias=15,
        quiet_nan=0x7E00,
    ),
    PrecisionFormat.BF16: PrecisionSpec(
        format=PrecisionFormat.BF16,
        bits=16,
        exponent_bits=8,
        mantissa_bits=7,
        exponent_bias=127,  # Shares the binary32 exponent range
        quiet_nan=0x7FC0,
    ),
    PrecisionFormat.F8: PrecisionSpec(
        format=PrecisionFormat.F8,
        bits=8,
        exponent_bits=4,
        mantissa_bits=3,
        exponent_bias=7,
        quiet_nan=0x7C,
    ),
}

# Accepted spellings besides the enum values
_ALIASES: dict[str, PrecisionFormat] = {
    "fp32": PrecisionFormat.F32,
    "float32": PrecisionFormat.F32,
    "fp16": PrecisionFormat.F16,
    "float16": PrecisionFormat.F16,
    "half": PrecisionFormat.F16,
    "bfloat16": PrecisionFormat.BF16,
    "fp8": PrecisionFormat.F8,
    "float8": PrecisionFormat.F8,
    "e4m3": PrecisionFormat.F8,
}


# =============================================================================
# PUBLIC API
# =============================================================================


def get_spec(fmt: PrecisionFormat | str) -> PrecisionSpec:
    """
    Get the full specification for a precision format.

    Args:
        fmt: Precision format (enum or string like 'f16', 'BF16', 'float8')

    Returns:
        PrecisionSpec with all format properties

    Raises:
        ValueError: If format is unknown

    Example:
        >>> spec = get_spec("f16")
        >>> spec.max_finite
        65504.0
    """
    return _PRECISION_SPECS[parse_format(fmt)]


def get_dtype(fmt: PrecisionFormat | str) -> DTypeLike:
    """
    Get the unsigned numpy dtype that stores a format's bit pattern.

    Args:
        fmt: Precision format

    Returns:
        ``np.uint32``, ``np.uint16`` or ``np.uint8``

    Example:
        >>> get_dtype("bf16")
        <class 'numpy.uint16'>
    """
    dtype_map: dict[int, Any] = {32: np.uint32, 16: np.uint16, 8: np.uint8}
    return cast("DTypeLike", dtype_map[get_spec(fmt).bits])


def get_reference_dtype(fmt: PrecisionFormat | str) -> DTypeLike:
    """
    Get the numpy float dtype with the same semantics as a format.

    Used to cross-check the codec against an independent implementation.

    Args:
        fmt: Precision format

    Returns:
        Numpy dtype object

    Raises:
        ValueError: If format is unknown
        ImportError: If bf16/f8 requested but ml_dtypes not installed

    Example:
        >>> get_reference_dtype("f16")
        <class 'numpy.float16'>
    """
    fmt = parse_format(fmt)

    dtype_map: dict[PrecisionFormat, Any] = {
        PrecisionFormat.F32: np.float32,
        PrecisionFormat.F16: np.float16,
    }

    if fmt in dtype_map:
        return cast("DTypeLike", dtype_map[fmt])

    if not HAS_ML_DTYPES:
        raise ImportError(
            f"Reference dtype for '{fmt.value}' requires ml_dtypes package. "
            "Install with: pip install ml-dtypes"
        )

    ml_map: dict[PrecisionFormat, Any] = {
        PrecisionFormat.BF16: ml_dtypes.bfloat16,
        PrecisionFormat.F8: ml_dtypes.float8_e4m3,
    }
    return cast("DTypeLike", ml_map[fmt])


def get_eps(fmt: PrecisionFormat | str) -> float:
    """
    Get machine epsilon for a precision format.

    Machine epsilon is the smallest positive number ε such that 1.0 + ε ≠ 1.0
    in the given floating-point representation.

    Example:
        >>> get_eps("f8")
        0.125
    """
    return get_spec(fmt).machine_epsilon


def get_precision_hierarchy() -> list[PrecisionFormat]:
    """
    Get formats in order from fewest to most significand bits.

    Example:
        >>> get_precision_hierarchy()
        [<PrecisionFormat.F8: 'f8'>, ..., <PrecisionFormat.F32: 'f32'>]
    """
    return [
        PrecisionFormat.F8,
        PrecisionFormat.BF16,
        PrecisionFormat.F16,
        PrecisionFormat.F32,
    ]


def list_formats() -> list[PrecisionFormat]:
    """List every format the codec can encode and decode."""
    return list(PrecisionFormat)


def parse_format(fmt: PrecisionFormat | str) -> PrecisionFormat:
    """
    Parse a string into a PrecisionFormat enum.

    Raises:
        ValueError: If the name matches no format or alias
    """
    if isinstance(fmt, PrecisionFormat):
        return fmt

    normalized = fmt.lower().replace("-", "_").replace(" ", "_")

    for candidate in PrecisionFormat:
        if candidate.value == normalized:
            return candidate

    if normalized in _ALIASES:
        return _ALIASES[normalized]

    valid = [f.value for f in PrecisionFormat]
    raise ValueError(f"Unknown precision format: '{fmt}'. Valid: {valid}")
