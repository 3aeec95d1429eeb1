"""IEEE-754 half precision (binary16) codec.

Conversions use binary32 arithmetic to do the heavy lifting: the FPU's own
round-to-nearest-even performs the half precision rounding, and two scale
constants push out-of-range magnitudes into Infinity or the subnormal range
without explicit branches.

Layout: sign:1, exponent:5, mantissa:10, bias 15.

References:
    - IEEE 754-2019, §3.6 (binary16)
    - M. Dukhan, "FP16" conversion library (branch-free algorithms)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from precision_codec.codec.bits import (
    F32_SIGN_MASK,
    as_bits,
    as_float32,
    bits_out,
    decode_f32,
    float_out,
    to_float32,
    to_uint32,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


# =============================================================================
# ENCODE CONSTANTS
# =============================================================================
# |x| * 2^112 overflows binary32 once |x| reaches 2^16, above every value that
# rounds to a finite half, so the product carries Infinity through. The net
# factor after scaling back is 4, which the rounding bias below accounts for.

SCALE_TO_INF = decode_f32(0x77800000)  # 2^112
SCALE_TO_ZERO = decode_f32(0x08800000)  # 2^-110

# Exponent field doubled (shl1) for 2^-14, the smallest half normal. Inputs
# below it are rounded as if they had this exponent, which yields subnormals.
MIN_NORMAL_SHL1 = 0x71000000

# Added to (bias >> 1), i.e. 2^e for x in [2^e, 2^(e+1)): 2^(e+15) + 4|x| has a
# binary32 ulp of 4 * 2^(e-10), the half ulp at exponent e, and leaves the
# leading bit of x at bit 10 where it carries into the exponent field.
ROUNDING_BIAS_OFFSET = 0x07800000

# Doubled pattern above this is a binary32 NaN.
NAN_SHL1_THRESHOLD = 0xFF000000

F16_QUIET_NAN = 0x7E00
F16_EXPONENT_MASK = 0x7C00
F16_MANTISSA_KEEP = 0x0FFF


# =============================================================================
# DECODE CONSTANTS
# =============================================================================
# Normal path: exponent/mantissa moved into binary32 position with exponent
# +224 (so 31 maps to 255, keeping Infinity/NaN), then scaled by 2^-112 to
# undo the excess over the true rebias of +112.

EXP_OFFSET = 0xE0 << 23
EXP_SCALE = decode_f32(0x07800000)  # 2^-112

# Subnormal path: the 10 mantissa bits are OR-ed into 0.5 (exponent 126),
# whose ulp is 2^-24, the half subnormal step. Subtracting 0.5 leaves m * 2^-24.
MAGIC_MASK = 126 << 23
MAGIC_BIAS = np.float32(0.5)

# Doubled patterns below 1 << 27 have a zero exponent field.
DENORMALIZED_CUTOFF = 1 << 27


# =============================================================================
# PUBLIC API
# =============================================================================


def encode_f16(value: ArrayLike) -> Any:
    """
    Convert binary32 value(s) to half precision bit patterns.

    Rounds to nearest, ties to even. Magnitudes above the half range
    saturate to signed Infinity, tiny magnitudes become subnormals or
    signed zero, and any NaN becomes the quiet pattern ``0x7E00``
    (sign preserved).

    Args:
        value: Float or array-like of floats

    Returns:
        ``int`` for scalar input, ``uint16`` array otherwise

    Example:
        >>> hex(encode_f16(1.0))
        '0x3c00'
        >>> hex(encode_f16(-2.0))
        '0xc000'
    """
    values = as_float32(value)

    with np.errstate(over="ignore", under="ignore", invalid="ignore"):
        base = (np.abs(values) * SCALE_TO_INF) * SCALE_TO_ZERO

        w = to_uint32(values)
        shl1_w = w + w
        sign = w & np.uint32(F32_SIGN_MASK)
        bias = np.maximum(shl1_w & np.uint32(0xFF000000), np.uint32(MIN_NORMAL_SHL1))

        base = to_float32((bias >> 1) + np.uint32(ROUNDING_BIAS_OFFSET)) + base

    bits = to_uint32(base)
    exp_bits = (bits >> 13) & np.uint32(F16_EXPONENT_MASK)
    mantissa_bits = bits & np.uint32(F16_MANTISSA_KEEP)
    nonsign = exp_bits + mantissa_bits

    result = (sign >> 16) | np.where(
        shl1_w > np.uint32(NAN_SHL1_THRESHOLD),
        np.uint32(F16_QUIET_NAN),
        nonsign,
    )
    return bits_out(result, np.uint16, np.ndim(value) == 0)


def decode_f16(bits: ArrayLike) -> Any:
    """
    Convert half precision bit pattern(s) to binary32 value(s).

    Exact for every input: half values are a subset of binary32. NaN
    patterns decode to NaN (quiet), never to a large finite number.

    Args:
        bits: Integer or array-like of integers (low 16 bits used)

    Returns:
        ``numpy.float32`` for scalar input, ``float32`` array otherwise

    Example:
        >>> decode_f16(0x3C00)
        np.float32(1.0)
    """
    half = as_bits(bits, 0xFFFF, np.uint32)

    w = half << 16
    sign = w & np.uint32(F32_SIGN_MASK)
    two_w = w + w

    with np.errstate(over="ignore", under="ignore", invalid="ignore"):
        normalized = to_float32((two_w >> 4) + np.uint32(EXP_OFFSET)) * EXP_SCALE
        denormalized = to_float32((two_w >> 17) | np.uint32(MAGIC_MASK)) - MAGIC_BIAS

    result = sign | np.where(
        two_w < np.uint32(DENORMALIZED_CUTOFF),
        to_uint32(denormalized),
        to_uint32(normalized),
    )
    return float_out(to_float32(result), np.ndim(bits) == 0)


__all__ = [
    "decode_f16",
    "encode_f16",
]
