"""Data module for precision format definitions."""

from precision_codec.data.precision_types import (
    HAS_ML_DTYPES,
    PrecisionFormat,
    PrecisionSpec,
    get_dtype,
    get_eps,
    get_precision_hierarchy,
    get_reference_dtype,
    get_spec,
    list_formats,
    parse_format,
)

__all__ = [
    "HAS_ML_DTYPES",
    "PrecisionFormat",
    "PrecisionSpec",
    "get_dtype",
    "get_eps",
    "get_precision_hierarchy",
    "get_reference_dtype",
    "get_spec",
    "list_formats",
    "parse_format",
]
