"""Extended 8-bit floating point (E4M3) codec.

Layout: sign:1, exponent:4, mantissa:3, bias 7, with IEEE-style specials:
exponent 15 is Infinity (mantissa 0) or NaN, exponent 0 is zero or a
subnormal. That gives:

    ======================  ========  =============
    Quantity                Pattern   Value
    ======================  ========  =============
    largest finite          0x77      240
    smallest normal         0x08      2^-6
    smallest subnormal      0x01      2^-9
    Infinity                0x78      inf
    canonical quiet NaN     0x7C      nan
    ======================  ========  =============

Unlike the half codec there is no binary32 arithmetic trick here; rounding is
done on integers so every shift is explicit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from precision_codec.codec.bits import (
    F32_EXPONENT_BIAS,
    F32_EXPONENT_SHIFT,
    F32_MANTISSA_MASK,
    F32_QUIET_BIT,
    as_bits,
    as_float32,
    bits_out,
    float_out,
    to_float32,
    to_uint32,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


F8_EXPONENT_BITS = 4
F8_MANTISSA_BITS = 3
F8_EXPONENT_BIAS = 7

F8_SIGN_MASK = 0x80
F8_EXPONENT_MAX = (1 << F8_EXPONENT_BITS) - 1  # 15, reserved for Inf/NaN
F8_MANTISSA_MASK = (1 << F8_MANTISSA_BITS) - 1
F8_IMPLICIT_BIT = 1 << F8_MANTISSA_BITS
F8_INFINITY = F8_EXPONENT_MAX << F8_MANTISSA_BITS  # 0x78
F8_QUIET_NAN = F8_INFINITY | (1 << (F8_MANTISSA_BITS - 1))  # 0x7C

# Binary32 significand bits dropped when narrowing a normal value.
MANTISSA_SHIFT = F32_EXPONENT_SHIFT - F8_MANTISSA_BITS  # 20

# Significand with implicit bit is < 2^24; shifting by 25 leaves zero with a
# remainder below the halfway point, which is the flush-to-zero case.
MAX_SHIFT = F32_EXPONENT_SHIFT + 2

# Exponent rebias from f8 to binary32.
REBIAS = F32_EXPONENT_BIAS - F8_EXPONENT_BIAS  # 120


def encode_f8(value: ArrayLike) -> Any:
    """
    Convert binary32 value(s) to E4M3 bit patterns.

    Rounds to nearest, ties to even, in both the normal and subnormal
    ranges. Magnitudes of 248 and above (the midpoint past 240) saturate to
    signed Infinity, magnitudes of 2^-10 and below flush to signed zero, and
    NaN becomes ``0x7C`` with its sign kept.

    Args:
        value: Float or array-like of floats

    Returns:
        ``int`` for scalar input, ``uint8`` array otherwise

    Example:
        >>> hex(encode_f8(1.0))
        '0x38'
    """
    w = to_uint32(as_float32(value)).astype(np.int64)

    sign = (w >> 24) & F8_SIGN_MASK
    exponent = (w >> F32_EXPONENT_SHIFT) & 0xFF
    mantissa = w & F32_MANTISSA_MASK

    is_special = exponent == 0xFF
    is_nan = is_special & (mantissa != 0)

    # Rebiased exponent; <= 0 means the value lands in the subnormal range
    # and the significand is shifted right by the deficit as well.
    target = exponent - F32_EXPONENT_BIAS + F8_EXPONENT_BIAS
    significand = mantissa | (1 << F32_EXPONENT_SHIFT)
    shift = np.minimum(MANTISSA_SHIFT + np.maximum(1 - target, 0), MAX_SHIFT)

    kept = significand >> shift
    remainder = significand & ((np.int64(1) << shift) - 1)
    halfway = np.int64(1) << (shift - 1)
    round_up = (remainder > halfway) | ((remainder == halfway) & ((kept & 1) == 1))
    kept = kept + round_up

    # Normal: kept carries the implicit bit (8..16) so (target - 1) << 3
    # plus kept lands on target << 3 | fraction, and a rounding carry moves
    # into the exponent. Subnormal: kept is the fraction itself; 8 after
    # rounding is exactly the smallest normal.
    magnitude = np.where(
        target >= 1,
        ((target - 1) << F8_MANTISSA_BITS) + kept,
        kept,
    )
    magnitude = np.minimum(magnitude, F8_INFINITY)
    magnitude = np.where(is_nan, F8_QUIET_NAN, magnitude)
    magnitude = np.where(is_special & ~is_nan, F8_INFINITY, magnitude)

    return bits_out(sign | magnitude, np.uint8, np.ndim(value) == 0)


def decode_f8(bits: ArrayLike) -> Any:
    """
    Convert E4M3 bit pattern(s) to binary32 value(s).

    Every finite E4M3 value is exactly representable in binary32.
    Subnormals are normalized by shifting the mantissa left until the
    implicit bit appears, at most three steps.

    Args:
        bits: Integer or array-like of integers (low 8 bits used)

    Returns:
        ``numpy.float32`` for scalar input, ``float32`` array otherwise

    Example:
        >>> decode_f8(0x38)
        np.float32(1.0)
    """
    b = as_bits(bits, 0xFF, np.int64)

    sign = (b & F8_SIGN_MASK) << 24
    exponent = (b >> F8_MANTISSA_BITS) & F8_EXPONENT_MAX
    mantissa = b & F8_MANTISSA_MASK

    is_subnormal = (exponent == 0) & (mantissa != 0)
    working = np.where(is_subnormal, 1, exponent)
    for _ in range(F8_MANTISSA_BITS):
        step = is_subnormal & ((mantissa & F8_IMPLICIT_BIT) == 0)
        mantissa = np.where(step, mantissa << 1, mantissa)
        working = np.where(step, working - 1, working)
    mantissa = mantissa & F8_MANTISSA_MASK

    finite = (
        sign
        | ((working + REBIAS) << F32_EXPONENT_SHIFT)
        | (mantissa << MANTISSA_SHIFT)
    )

    b_mantissa = b & F8_MANTISSA_MASK
    special = (
        sign
        | (0xFF << F32_EXPONENT_SHIFT)
        | np.where(b_mantissa != 0, F32_QUIET_BIT | (b_mantissa << MANTISSA_SHIFT), 0)
    )

    result = np.where(exponent == F8_EXPONENT_MAX, special, finite)
    result = np.where((exponent == 0) & (b_mantissa == 0), sign, result)
    return float_out(to_float32(result.astype(np.uint32)), np.ndim(bits) == 0)


__all__ = [
    "decode_f8",
    "encode_f8",
]
