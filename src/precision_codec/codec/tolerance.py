"""Approximate equality for binary32 values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from precision_codec.codec.bits import as_float32

if TYPE_CHECKING:
    from numpy.typing import ArrayLike


DEFAULT_RELATIVE_TOLERANCE: float = 1e-3
"""Relative tolerance used when none is given."""

DEFAULT_ABSOLUTE_TOLERANCE: float = 0.0
"""Absolute tolerance used when none is given."""


@dataclass(frozen=True, slots=True)
class Tolerance:
    """Relative and absolute tolerance pair for :func:`float_is_close`."""

    relative: float = DEFAULT_RELATIVE_TOLERANCE
    """Allowed deviation as a fraction of the larger magnitude."""

    absolute: float = DEFAULT_ABSOLUTE_TOLERANCE
    """Allowed deviation floor, independent of magnitude."""

    def __post_init__(self) -> None:
        # NaN fails every comparison, so "not >= 0" also rejects it.
        if not (self.relative >= 0 and self.absolute >= 0) or np.isinf(self.relative):
            raise ValueError(
                f"Tolerances must be non-negative (relative finite), got "
                f"relative={self.relative}, absolute={self.absolute}"
            )

    @classmethod
    def from_digits(cls, digits: int, absolute: float = 0.0) -> Tolerance:
        """
        Build a tolerance that requires ``digits`` matching significant digits.

        Args:
            digits: Number of significant decimal digits (relative ``10**-digits``)
            absolute: Absolute tolerance floor

        Raises:
            ValueError: If digits is negative

        Example:
            >>> Tolerance.from_digits(3).relative
            0.001
        """
        if digits < 0:
            raise ValueError(f"Significant digits must be non-negative, got {digits}")
        return cls(relative=10.0**-digits, absolute=absolute)

    def is_close(self, a: ArrayLike, b: ArrayLike) -> Any:
        """Compare ``a`` and ``b`` under this tolerance."""
        return float_is_close(a, b, tolerance=self)


def float_is_close(
    a: ArrayLike,
    b: ArrayLike,
    relative: float | None = None,
    absolute: float | None = None,
    *,
    tolerance: Tolerance | None = None,
) -> Any:
    """
    Check whether two binary32 values are equal within tolerance.

    Passes when ``|a - b| <= max(relative * max(|a|, |b|), absolute)``,
    evaluated in binary32. Exactly equal values always pass (including
    matching Infinities and ``+0 == -0``). NaN never passes, nor do
    opposite Infinities. An Infinity against a finite value goes through the
    inequality like any other pair, so it passes whenever ``relative > 0``.
    The test is symmetric in ``a`` and ``b``.

    Args:
        a: First value (or array)
        b: Second value (or array, broadcast against ``a``)
        relative: Relative tolerance (default 1e-3)
        absolute: Absolute tolerance (default 0.0)
        tolerance: Tolerance pair, instead of ``relative`` and ``absolute``

    Returns:
        ``bool`` for scalar inputs, boolean array otherwise

    Raises:
        ValueError: If a tolerance is negative or NaN, or if ``tolerance`` is
            combined with ``relative`` or ``absolute``

    Example:
        >>> float_is_close(1.0, 1.0001, relative=1e-3, absolute=0.0)
        True
        >>> float_is_close(1.0, 1.1, relative=1e-3, absolute=0.0)
        False
    """
    if tolerance is None:
        tolerance = Tolerance(
            relative=DEFAULT_RELATIVE_TOLERANCE if relative is None else relative,
            absolute=DEFAULT_ABSOLUTE_TOLERANCE if absolute is None else absolute,
        )
    elif relative is not None or absolute is not None:
        raise ValueError("Pass either tolerance= or relative/absolute, not both")

    x = as_float32(a)
    y = as_float32(b)
    rel = np.float32(tolerance.relative)
    abs_tol = np.float32(tolerance.absolute)

    with np.errstate(over="ignore", invalid="ignore"):
        magnitude = np.maximum(np.abs(x), np.abs(y))
        # fmax: 0 * inf is NaN and must not hide the absolute floor.
        allowed = np.fmax(rel * magnitude, abs_tol)
        within = np.abs(x - y) <= allowed

    nan = np.isnan(x) | np.isnan(y)
    opposite_inf = np.isinf(x) & np.isinf(y) & (x != y)
    result = (x == y) | (within & ~nan & ~opposite_inf)

    if np.ndim(a) == 0 and np.ndim(b) == 0:
        return bool(result[0])
    return result


__all__ = [
    "DEFAULT_ABSOLUTE_TOLERANCE",
    "DEFAULT_RELATIVE_TOLERANCE",
    "Tolerance",
    "float_is_close",
]
