"""Binary32 bit reinterpretation primitive.

Every reduced-precision codec in this package routes through the two functions
defined here. They reinterpret the same 32 bits as either an IEEE-754 binary32
value or an unsigned integer; no numeric conversion takes place.

Scalars and arrays are both accepted. A scalar input yields a scalar output
(``int`` for bit patterns, ``numpy.float32`` for values), an array-like input
yields an ``ndarray`` of the same shape.

References:
    - IEEE 754-2019 Standard for Floating-Point Arithmetic, §3.4
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, DTypeLike, NDArray


# =============================================================================
# BINARY32 LAYOUT
# =============================================================================

F32_SIGN_MASK: int = 0x80000000
F32_EXPONENT_MASK: int = 0x7F800000
F32_MANTISSA_MASK: int = 0x007FFFFF
F32_QUIET_BIT: int = 0x00400000
F32_EXPONENT_SHIFT: int = 23
F32_EXPONENT_BIAS: int = 127


# =============================================================================
# PUBLIC API
# =============================================================================


def encode_f32(value: ArrayLike) -> Any:
    """
    Reinterpret a binary32 value as its 32-bit pattern.

    Args:
        value: Float or array-like of floats (converted to binary32 first)

    Returns:
        ``int`` for scalar input, ``uint32`` array otherwise

    Example:
        >>> hex(encode_f32(1.0))
        '0x3f800000'
    """
    values = as_float32(value)
    return bits_out(values.view(np.uint32), np.uint32, np.ndim(value) == 0)


def decode_f32(bits: ArrayLike) -> Any:
    """
    Reinterpret a 32-bit pattern as a binary32 value.

    Bits above bit 31 are discarded. NaN payloads, signed zeros and
    subnormals survive unchanged.

    Args:
        bits: Integer or array-like of integers

    Returns:
        ``numpy.float32`` for scalar input, ``float32`` array otherwise

    Example:
        >>> decode_f32(0x3F800000)
        np.float32(1.0)
    """
    words = as_bits(bits, 0xFFFFFFFF, np.uint32)
    return float_out(words.view(np.float32), np.ndim(bits) == 0)


# =============================================================================
# SHARED HELPERS
# =============================================================================
# Used by the reduced-format codecs; all work on 1-d arrays so that scalar and
# array inputs share one code path.


def as_float32(value: ArrayLike) -> NDArray[np.float32]:
    """Copy input into an at-least-1-d binary32 array."""
    return np.array(value, dtype=np.float32, ndmin=1)


def as_bits(bits: ArrayLike, mask: int, dtype: DTypeLike) -> NDArray[Any]:
    """Copy input into an at-least-1-d unsigned array, keeping ``mask`` bits."""
    words = np.array(bits, ndmin=1).astype(np.int64) & mask
    return words.astype(dtype)


def to_float32(words: NDArray[np.uint32]) -> NDArray[np.float32]:
    """View a uint32 array as binary32 (no copy)."""
    return np.ascontiguousarray(words, dtype=np.uint32).view(np.float32)


def to_uint32(values: NDArray[np.float32]) -> NDArray[np.uint32]:
    """View a binary32 array as uint32 (no copy)."""
    return np.ascontiguousarray(values, dtype=np.float32).view(np.uint32)


def bits_out(words: NDArray[Any], dtype: DTypeLike, scalar: bool) -> Any:
    """Return a bit pattern as ``int`` or as an array of ``dtype``."""
    result = words.astype(dtype)
    if scalar:
        return int(result[0])
    return result


def float_out(values: NDArray[np.float32], scalar: bool) -> Any:
    """Return binary32 values as a ``numpy.float32`` scalar or array."""
    if scalar:
        return values[0]
    return values


__all__ = [
    "F32_EXPONENT_BIAS",
    "F32_EXPONENT_MASK",
    "F32_EXPONENT_SHIFT",
    "F32_MANTISSA_MASK",
    "F32_QUIET_BIT",
    "F32_SIGN_MASK",
    "as_bits",
    "as_float32",
    "bits_out",
    "decode_f32",
    "encode_f32",
    "float_out",
    "to_float32",
    "to_uint32",
]
