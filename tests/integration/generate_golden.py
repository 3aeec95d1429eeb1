#!/usr/bin/env python
"""Generate golden bit tables for integration testing.

The table is derived from the E4M3 definition alone (no codec code), so it
stays an independent reference for decode_f8 / encode_f8.
Usage: python tests/integration/generate_golden.py
"""

import json
import math
from pathlib import Path

# Format parameters - MUST match test_reference_tables.py
EXPONENT_BITS = 4
MANTISSA_BITS = 3
EXPONENT_BIAS = 7

GOLDEN_DIR = Path(__file__).parent / "golden"


def f8_value(sign: int, exponent: int, mantissa: int) -> float | str:
    """Value of one E4M3 pattern; Infinity/NaN as JSON-safe strings."""
    if exponent == (1 << EXPONENT_BITS) - 1:
        if mantissa:
            return "nan"
        return "-inf" if sign else "inf"

    fraction = mantissa / (1 << MANTISSA_BITS)
    if exponent == 0:
        magnitude = math.ldexp(fraction, 1 - EXPONENT_BIAS)
    else:
        magnitude = math.ldexp(1.0 + fraction, exponent - EXPONENT_BIAS)
    return -magnitude if sign else magnitude


def generate_f8_table() -> list[dict]:
    """Generate one entry per 8-bit pattern."""
    table = []
    for bits in range(256):
        sign = bits >> 7
        exponent = (bits >> MANTISSA_BITS) & ((1 << EXPONENT_BITS) - 1)
        mantissa = bits & ((1 << MANTISSA_BITS) - 1)
        table.append({
            "bits": bits,
            "hex": f"{bits:#04x}",
            "sign": sign,
            "exponent": exponent,
            "mantissa": mantissa,
            "value": f8_value(sign, exponent, mantissa),
        })
    return table


def save_golden(data: dict | list, filename: str) -> None:
    """Save golden data to JSON file, one table entry per line."""
    filepath = GOLDEN_DIR / filename
    with open(filepath, "w") as f:
        f.write("[\n")
        f.write(",\n".join(f"  {json.dumps(entry)}" for entry in data))
        f.write("\n]\n")
    print(f"✓ Generated {filepath}")


def main() -> None:
    """Generate all golden files."""
    GOLDEN_DIR.mkdir(parents=True, exist_ok=True)

    print("Generating golden bit tables...")
    save_golden(generate_f8_table(), "f8_table.json")

    print()
    print("Done! Golden files generated in:", GOLDEN_DIR)


if __name__ == "__main__":
    main()
