"""Tests for the binary32 bit reinterpretation primitive."""

import math

import numpy as np
import pytest

from precision_codec.codec.bits import decode_f32, encode_f32


class TestEncodeF32:
    """Tests for encode_f32 function."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (1.0, 0x3F800000),
            (-2.0, 0xC0000000),
            (0.0, 0x00000000),
            (-0.0, 0x80000000),
            (float("inf"), 0x7F800000),
            (float("-inf"), 0xFF800000),
            (3.4028234663852886e38, 0x7F7FFFFF),
            (2.0**-149, 0x00000001),
            (0.1, 0x3DCCCCCD),
        ],
    )
    def test_known_patterns(self, value: float, expected: int) -> None:
        """Known binary32 encodings."""
        assert encode_f32(value) == expected

    def test_scalar_returns_int(self) -> None:
        """Scalar input should give a plain int."""
        assert type(encode_f32(1.0)) is int

    def test_array_returns_uint32(self) -> None:
        """Array input should give a uint32 array of the same shape."""
        result = encode_f32(np.ones((2, 3), dtype=np.float32))
        assert result.dtype == np.uint32
        assert result.shape == (2, 3)
        assert np.all(result == 0x3F800000)

    def test_nan_is_nan_pattern(self) -> None:
        """NaN should have all-ones exponent and non-zero mantissa."""
        bits = encode_f32(float("nan"))
        assert bits & 0x7F800000 == 0x7F800000
        assert bits & 0x007FFFFF != 0


class TestDecodeF32:
    """Tests for decode_f32 function."""

    def test_one(self) -> None:
        """0x3F800000 is 1.0."""
        assert decode_f32(0x3F800000) == 1.0

    def test_returns_float32(self) -> None:
        """Scalar input should give a numpy float32."""
        assert isinstance(decode_f32(0x3F800000), np.float32)

    def test_negative_zero(self) -> None:
        """Sign bit alone is -0.0."""
        value = decode_f32(0x80000000)
        assert value == 0.0
        assert math.copysign(1.0, float(value)) == -1.0

    def test_smallest_subnormal(self) -> None:
        """Pattern 1 is 2^-149."""
        assert float(decode_f32(1)) == 2.0**-149

    def test_high_bits_discarded(self) -> None:
        """Bits above 31 should be masked off."""
        assert decode_f32(0x1_3F800000) == 1.0

    def test_nan_pattern(self) -> None:
        """NaN patterns decode to NaN."""
        assert np.isnan(decode_f32(0x7FC00000))
        assert np.isnan(decode_f32(0x7F800001))


class TestRoundTrip:
    """encode_f32 and decode_f32 are exact inverses."""

    @pytest.mark.parametrize(
        "bits",
        [
            0x00000000,
            0x80000000,
            0x00000001,
            0x807FFFFF,
            0x7F800000,
            0xFF800000,
            0x7FC00000,
            0x7FC00123,  # quiet NaN with payload
            0xFFFFFFFF,
            0x3F800000,
        ],
    )
    def test_bits_round_trip(self, bits: int) -> None:
        """Every pattern survives decode then encode."""
        assert encode_f32(decode_f32(bits)) == bits

    def test_random_patterns_round_trip(self) -> None:
        """Random 32-bit patterns survive decode then encode as arrays."""
        rng = np.random.default_rng(42)
        bits = rng.integers(0, 2**32, size=10_000, dtype=np.uint64).astype(np.uint32)
        assert np.array_equal(encode_f32(decode_f32(bits)), bits)

    def test_values_round_trip(self) -> None:
        """Finite values survive encode then decode bit-for-bit."""
        values = np.array([1.5, -3.25, 1e-40, -1e38, 0.0, -0.0], dtype=np.float32)
        decoded = decode_f32(encode_f32(values))
        assert np.array_equal(decoded.view(np.uint32), values.view(np.uint32))
