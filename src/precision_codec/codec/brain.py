"""Brain floating point (bfloat16) codec.

bfloat16 is the upper half of a binary32 pattern: same sign and 8-bit
exponent, mantissa truncated to 7 bits. Encoding rounds the dropped 16 bits
to nearest, ties to even; subnormals are not produced in either direction.

Layout: sign:1, exponent:8, mantissa:7, bias 127.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from precision_codec.codec.bits import (
    F32_EXPONENT_MASK,
    F32_MANTISSA_MASK,
    F32_QUIET_BIT,
    F32_SIGN_MASK,
    as_bits,
    as_float32,
    bits_out,
    float_out,
    to_float32,
    to_uint32,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


BF16_SIGN_MASK = 0x8000
BF16_EXPONENT_MASK = 0x7F80
BF16_MANTISSA_MASK = 0x007F
BF16_QUIET_BIT = 0x0040

# Discarded low half of the binary32 pattern; exactly this value is a tie.
HALFWAY = 0x8000
LOW_MASK = 0xFFFF


def encode_bf16(value: ArrayLike) -> Any:
    """
    Convert binary32 value(s) to bfloat16 bit patterns.

    - NaN keeps its sign and upper payload, with the quiet bit forced.
    - Zero exponent (zero or binary32 subnormal) flushes to signed zero.
    - Everything else rounds to nearest, ties to even; rounding past the
      largest finite value gives signed Infinity.

    Args:
        value: Float or array-like of floats

    Returns:
        ``int`` for scalar input, ``uint16`` array otherwise

    Example:
        >>> hex(encode_bf16(1.0))
        '0x3f80'
    """
    w = to_uint32(as_float32(value))

    exponent = w & np.uint32(F32_EXPONENT_MASK)
    mantissa = w & np.uint32(F32_MANTISSA_MASK)
    upper = w >> 16
    lower = w & np.uint32(LOW_MASK)

    is_nan = (exponent == np.uint32(F32_EXPONENT_MASK)) & (mantissa != 0)
    is_zero = exponent == 0

    round_up = (lower > np.uint32(HALFWAY)) | (
        (lower == np.uint32(HALFWAY)) & ((upper & np.uint32(1)) == 1)
    )
    rounded = upper + round_up.astype(np.uint32)

    result = np.where(
        is_nan,
        upper | np.uint32(BF16_QUIET_BIT),
        np.where(is_zero, upper & np.uint32(BF16_SIGN_MASK), rounded),
    )
    return bits_out(result, np.uint16, np.ndim(value) == 0)


def decode_bf16(bits: ArrayLike) -> Any:
    """
    Convert bfloat16 bit pattern(s) to binary32 value(s).

    Exponent all-ones decodes to signed Infinity or a quiet NaN (payload
    kept), exponent zero decodes to signed zero, anything else is the
    pattern shifted into the upper half of a binary32.

    Args:
        bits: Integer or array-like of integers (low 16 bits used)

    Returns:
        ``numpy.float32`` for scalar input, ``float32`` array otherwise

    Example:
        >>> decode_bf16(0x3F80)
        np.float32(1.0)
    """
    w = as_bits(bits, LOW_MASK, np.uint32) << 16

    exponent = w & np.uint32(F32_EXPONENT_MASK)
    mantissa = w & np.uint32(F32_MANTISSA_MASK)
    sign = w & np.uint32(F32_SIGN_MASK)

    is_special = exponent == np.uint32(F32_EXPONENT_MASK)
    is_nan = is_special & (mantissa != 0)

    result = np.where(
        is_nan,
        w | np.uint32(F32_QUIET_BIT),
        np.where(is_special, sign | np.uint32(F32_EXPONENT_MASK), w),
    )
    result = np.where(exponent == 0, sign, result)
    return float_out(to_float32(result), np.ndim(bits) == 0)


__all__ = [
    "decode_bf16",
    "encode_bf16",
]
