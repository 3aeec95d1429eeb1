"""Format-tagged bit patterns and generic encode/decode dispatch.

A :class:`FlexFloat` carries a bit pattern together with the format it is
encoded in, so code that handles several precisions can pass values around
without tracking the format separately.

Example:
    >>> flex = encode_float(0.1, "f16")
    >>> flex.to_binary()
    '0|01011|1001100110'
    >>> float(flex.value)
    0.0999755859375
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

import numpy as np

from precision_codec.codec.bits import decode_f32, encode_f32
from precision_codec.codec.brain import decode_bf16, encode_bf16
from precision_codec.codec.extended import decode_f8, encode_f8
from precision_codec.codec.half import decode_f16, encode_f16
from precision_codec.data.precision_types import (
    PrecisionFormat,
    get_spec,
    parse_format,
)

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


class Codec(NamedTuple):
    """Encode/decode function pair for one format."""

    encode: Callable[[ArrayLike], Any]
    decode: Callable[[ArrayLike], Any]


_CODECS: dict[PrecisionFormat, Codec] = {
    PrecisionFormat.F32: Codec(encode_f32, decode_f32),
    PrecisionFormat.F16: Codec(encode_f16, decode_f16),
    PrecisionFormat.BF16: Codec(encode_bf16, decode_bf16),
    PrecisionFormat.F8: Codec(encode_f8, decode_f8),
}


def get_codec(fmt: PrecisionFormat | str) -> Codec:
    """Get the encode/decode pair for a format."""
    return _CODECS[parse_format(fmt)]


@dataclass(frozen=True, slots=True)
class FlexFloat:
    """Bit pattern tagged with its floating-point format."""

    bits: int
    """Raw bit pattern, unsigned."""

    format: PrecisionFormat
    """Format the pattern is encoded in."""

    def __post_init__(self) -> None:
        width = get_spec(self.format).bits
        if not 0 <= self.bits < (1 << width):
            raise ValueError(
                f"Bit pattern {self.bits:#x} does not fit in {width}-bit "
                f"format '{self.format.value}'"
            )

    @property
    def value(self) -> np.float32:
        """Decoded binary32 value."""
        return decode_float(self)

    @property
    def fields(self) -> tuple[int, int, int]:
        """(sign, exponent, mantissa) fields as unsigned integers."""
        spec = get_spec(self.format)
        sign = self.bits >> (spec.bits - 1)
        exponent = (self.bits & spec.exponent_mask) >> spec.mantissa_bits
        mantissa = self.bits & spec.mantissa_mask
        return sign, exponent, mantissa

    def to_binary(self) -> str:
        """Bit string grouped as ``sign|exponent|mantissa``."""
        spec = get_spec(self.format)
        sign, exponent, mantissa = self.fields
        return (
            f"{sign:01b}"
            f"|{exponent:0{spec.exponent_bits}b}"
            f"|{mantissa:0{spec.mantissa_bits}b}"
        )

    def to_hex(self) -> str:
        """Zero-padded hexadecimal pattern, e.g. ``0x3c00``."""
        return f"{self.bits:#0{get_spec(self.format).bits // 4 + 2}x}"

    def convert(self, fmt: PrecisionFormat | str) -> FlexFloat:
        """Re-encode into another format through binary32."""
        return encode_float(self.value, fmt)


def encode_float(value: float, fmt: PrecisionFormat | str) -> FlexFloat:
    """
    Encode a value in the given format.

    Args:
        value: Float (converted to binary32 first)
        fmt: Target format

    Returns:
        FlexFloat holding the encoded pattern

    Raises:
        ValueError: If format is unknown
    """
    fmt = parse_format(fmt)
    return FlexFloat(bits=int(_CODECS[fmt].encode(value)), format=fmt)


def decode_float(flex: FlexFloat) -> np.float32:
    """Decode a FlexFloat to its binary32 value."""
    return _CODECS[flex.format].decode(flex.bits)


__all__ = [
    "Codec",
    "FlexFloat",
    "decode_float",
    "encode_float",
    "get_codec",
]
