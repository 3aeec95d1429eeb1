"""Tests for the extended 8-bit (E4M3) codec."""

import math

import numpy as np
import pytest

from precision_codec.codec.bits import decode_f32, encode_f32
from precision_codec.codec.extended import decode_f8, encode_f8
from precision_codec.data.precision_types import HAS_ML_DTYPES

ALL_PATTERNS = np.arange(256, dtype=np.uint8)


class TestEncodeF8:
    """Tests for encode_f8 function."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1.0, 0x38),
            (-1.0, 0xB8),
            (1.125, 0x39),
            (240.0, 0x77),  # largest finite
            (2.0**-6, 0x08),  # smallest normal
            (2.0**-9, 0x01),  # smallest subnormal
            (7 * 2.0**-9, 0x07),  # largest subnormal
            (0.0, 0x00),
            (-0.0, 0x80),
            (float("inf"), 0x78),
            (float("-inf"), 0xF8),
        ],
    )
    def test_known_patterns(self, value: float, expected: int) -> None:
        """Known E4M3 encodings."""
        assert encode_f8(value) == expected

    def test_overflow_saturates_to_infinity(self) -> None:
        """Magnitudes at or past the 240/256 midpoint become Infinity."""
        assert encode_f8(247.9) == 0x77
        assert encode_f8(248.0) == 0x78
        assert encode_f8(1.0e10) == 0x78
        assert encode_f8(-1.0e10) == 0xF8
        assert encode_f8(3.4e38) == 0x78

    def test_flush_to_zero(self) -> None:
        """Magnitudes at or below half the smallest subnormal flush to zero."""
        assert encode_f8(2.0**-10) == 0x00
        assert encode_f8(2.0**-11) == 0x00
        assert encode_f8(-1.0e-6) == 0x80
        assert encode_f8(decode_f32(0x00000001)) == 0x00

    def test_subnormal_rounding(self) -> None:
        """Subnormal construction rounds to nearest even."""
        assert encode_f8(2.0**-10 * 1.01) == 0x01
        assert encode_f8(1.5 * 2.0**-9) == 0x02  # tie between 1 and 2
        assert encode_f8(2.5 * 2.0**-9) == 0x02  # tie between 2 and 3
        assert encode_f8(3 * 2.0**-9) == 0x03

    def test_largest_subnormal_rounds_up_to_normal(self) -> None:
        """Rounding up out of the subnormal range lands on the smallest normal."""
        assert encode_f8(7.5 * 2.0**-9) == 0x08

    def test_mantissa_carry_into_exponent(self) -> None:
        """1.9375 is the midpoint of 1.875 and 2.0 and rounds to even (2.0)."""
        assert encode_f8(1.9375) == 0x40

    def test_ties_to_even(self) -> None:
        """Midpoints round toward an even mantissa."""
        assert encode_f8(1.0625) == 0x38  # between 1.0 and 1.125
        assert encode_f8(1.1875) == 0x3A  # between 1.125 and 1.25
        assert encode_f8(1.07) == 0x39

    def test_nan_maps_to_quiet_pattern(self) -> None:
        """NaN becomes 0x7C with its sign."""
        assert encode_f8(float("nan")) == 0x7C
        assert encode_f8(decode_f32(0xFFC00000)) == 0xFC

    def test_array_shape_and_dtype(self) -> None:
        """Array input should give uint8 array of same shape."""
        result = encode_f8(np.full((3, 3), 1.0, dtype=np.float32))
        assert result.dtype == np.uint8
        assert result.shape == (3, 3)
        assert np.all(result == 0x38)

    @pytest.mark.skipif(not HAS_ML_DTYPES, reason="ml_dtypes not installed")
    def test_matches_ml_dtypes_near_range(self) -> None:
        """Encoding should agree with ml_dtypes.float8_e4m3 across the range."""
        import ml_dtypes

        rng = np.random.default_rng(42)
        exponents = rng.uniform(-12, 9, size=100_000)
        signs = rng.choice(np.array([-1.0, 1.0]), size=exponents.size)
        values = (signs * np.exp2(exponents)).astype(np.float32)

        expected = values.astype(ml_dtypes.float8_e4m3).view(np.uint8)
        assert np.array_equal(encode_f8(values), expected)


class TestDecodeF8:
    """Tests for decode_f8 function."""

    def test_one(self) -> None:
        """0x38 is 1.0."""
        assert decode_f8(0x38) == 1.0

    def test_returns_float32(self) -> None:
        """Scalar input should give a numpy float32."""
        assert isinstance(decode_f8(0x38), np.float32)

    @pytest.mark.parametrize(
        "bits,expected",
        [
            (0x77, 240.0),
            (0xF7, -240.0),
            (0x08, 2.0**-6),
            (0x01, 2.0**-9),
            (0x02, 2.0**-8),
            (0x03, 3 * 2.0**-9),
            (0x04, 2.0**-7),
            (0x05, 5 * 2.0**-9),
            (0x07, 7 * 2.0**-9),
            (0x78, float("inf")),
            (0xF8, float("-inf")),
        ],
    )
    def test_known_values(self, bits: int, expected: float) -> None:
        """Known E4M3 values, including every subnormal shift count."""
        assert float(decode_f8(bits)) == expected

    def test_signed_zero(self) -> None:
        """0x80 decodes to -0.0."""
        value = float(decode_f8(0x80))
        assert value == 0.0
        assert math.copysign(1.0, value) == -1.0

    @pytest.mark.parametrize("bits", [0x79, 0x7C, 0x7F, 0xF9, 0xFF])
    def test_nan_patterns_decode_to_quiet_nan(self, bits: int) -> None:
        """Every exponent-15, non-zero-mantissa pattern is a quiet NaN."""
        value = decode_f8(bits)
        assert np.isnan(value)
        word = encode_f32(value)
        assert word & 0x00400000
        assert word >> 31 == bits >> 7

    def test_exhaustive_round_trip(self) -> None:
        """Every non-NaN pattern survives decode then encode."""
        decoded = decode_f8(ALL_PATTERNS)
        not_nan = ~np.isnan(decoded)
        assert np.array_equal(encode_f8(decoded[not_nan]), ALL_PATTERNS[not_nan])

    def test_values_are_monotonic(self) -> None:
        """Positive finite patterns decode to strictly increasing values."""
        decoded = decode_f8(np.arange(0x78, dtype=np.uint8))
        assert np.all(np.diff(decoded) > 0)

    @pytest.mark.skipif(not HAS_ML_DTYPES, reason="ml_dtypes not installed")
    def test_exhaustive_against_ml_dtypes(self) -> None:
        """Every pattern decodes like ml_dtypes.float8_e4m3."""
        import ml_dtypes

        expected = ALL_PATTERNS.view(ml_dtypes.float8_e4m3).astype(np.float32)
        actual = decode_f8(ALL_PATTERNS)

        nan = np.isnan(expected)
        assert np.array_equal(np.isnan(actual), nan)
        assert np.array_equal(encode_f32(actual[~nan]), encode_f32(expected[~nan]))

    def test_nan_round_trip(self) -> None:
        """NaN survives encode then decode."""
        assert np.isnan(decode_f8(encode_f8(float("nan"))))
