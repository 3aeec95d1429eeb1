"""Codec module for binary32 and reduced-precision bit patterns.

This module contains:
- Binary32 bit reinterpretation (the primitive every other codec uses)
- IEEE half precision (f16), bfloat16 (bf16) and E4M3 8-bit (f8) codecs
- Tolerance-based approximate equality
- Format-tagged values with generic encode/decode dispatch
"""

from precision_codec.codec.bits import decode_f32, encode_f32
from precision_codec.codec.brain import decode_bf16, encode_bf16
from precision_codec.codec.extended import decode_f8, encode_f8
from precision_codec.codec.flex import (
    Codec,
    FlexFloat,
    decode_float,
    encode_float,
    get_codec,
)
from precision_codec.codec.half import decode_f16, encode_f16
from precision_codec.codec.tolerance import (
    DEFAULT_ABSOLUTE_TOLERANCE,
    DEFAULT_RELATIVE_TOLERANCE,
    Tolerance,
    float_is_close,
)

__all__ = [
    # Bit reinterpretation
    "decode_f32",
    "encode_f32",
    # Reduced formats
    "decode_bf16",
    "decode_f16",
    "decode_f8",
    "encode_bf16",
    "encode_f16",
    "encode_f8",
    # Tolerance comparison
    "DEFAULT_ABSOLUTE_TOLERANCE",
    "DEFAULT_RELATIVE_TOLERANCE",
    "Tolerance",
    "float_is_close",
    # Generic dispatch
    "Codec",
    "FlexFloat",
    "decode_float",
    "encode_float",
    "get_codec",
]
