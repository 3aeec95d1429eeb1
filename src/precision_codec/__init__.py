"""Precision Codec: bit-exact conversions between binary32 and reduced-precision formats."""

__version__ = "0.1.0"

from precision_codec.codec import (
    FlexFloat,
    Tolerance,
    decode_bf16,
    decode_f8,
    decode_f16,
    decode_f32,
    decode_float,
    encode_bf16,
    encode_f8,
    encode_f16,
    encode_f32,
    encode_float,
    float_is_close,
)
from precision_codec.data.precision_types import (
    PrecisionFormat,
    get_eps,
    get_spec,
)

__all__ = [
    "__version__",
    "FlexFloat",
    "PrecisionFormat",
    "Tolerance",
    "decode_bf16",
    "decode_f8",
    "decode_f16",
    "decode_f32",
    "decode_float",
    "encode_bf16",
    "encode_f8",
    "encode_f16",
    "encode_f32",
    "encode_float",
    "float_is_close",
    "get_eps",
    "get_spec",
]
