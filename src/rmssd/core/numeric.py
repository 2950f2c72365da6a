"""Numeric kinds: width-specific arithmetic, registry and parsing.

A :class:`NumericKind` bundles every operation the RMSSD pipeline needs for
one floating-point width.  All operations take and return numpy scalars of
exactly that width; mixing widths raises :class:`TypeError` instead of
silently promoting to the wider type.  Three kinds are registered:

``narrow``
    :class:`numpy.float32` (IEEE binary32).
``standard``
    :class:`numpy.float64` (IEEE binary64).
``extended``
    :class:`numpy.longdouble`.  This is the C ``long double`` of the
    platform numpy was built for: x87 80-bit extended precision on x86-64
    Linux (64-bit significand, padded to 128 bits of storage), IEEE binary128
    on aarch64 Linux and plain binary64 on Windows and Apple silicon.  Use
    :attr:`NumericKind.precision_bits` to find out which one you have.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Dict, List
import math
import re

import numpy as np

from ..types import Representation

# Bits per decimal digit, used to skip exact checks far outside a width's range.
LOG2_10 = math.log2(10)

# Plain decimal literal: optional sign, digits with optional fraction, optional exponent.
DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)


def as_fraction(value: np.floating) -> Fraction:
    """Return the exact rational value of a finite numpy float."""

    return Fraction(*value.as_integer_ratio())


@dataclass(frozen=True)
class NumericKind:
    """Arithmetic for a single floating-point width.

    Parameters
    ----------
    representation:
        The :class:`~rmssd.types.Representation` this kind implements.
    dtype:
        numpy scalar type used for every value of this kind.
    """

    representation: Representation
    dtype: type

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def label(self) -> str:
        return self.representation.label

    @property
    def storage_bits(self) -> int:
        """Storage size in bits, i.e. ``sizeof(T) * 8``."""

        return np.dtype(self.dtype).itemsize * 8

    @property
    def precision_bits(self) -> int:
        """Significand precision in bits, including the implicit bit."""

        return int(np.finfo(self.dtype).nmant) + 1

    @property
    def eps(self) -> np.floating:
        return np.finfo(self.dtype).eps

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    @property
    def zero(self) -> np.floating:
        return self.dtype(0)

    def _check(self, *values: object) -> None:
        for value in values:
            if type(value) is not self.dtype:
                raise TypeError(
                    f"{self.label} arithmetic received {type(value).__name__}; "
                    f"expected {self.dtype.__name__}"
                )

    def add(self, a: np.floating, b: np.floating) -> np.floating:
        self._check(a, b)
        return a + b

    def subtract(self, a: np.floating, b: np.floating) -> np.floating:
        self._check(a, b)
        return a - b

    def multiply(self, a: np.floating, b: np.floating) -> np.floating:
        self._check(a, b)
        return a * b

    def divide(self, a: np.floating, b: np.floating) -> np.floating:
        self._check(a, b)
        return a / b

    def sqrt(self, value: np.floating) -> np.floating:
        """Square root computed by the width's own ``sqrt`` loop.

        numpy dispatches ``np.sqrt`` on a scalar to ``sqrtf``, ``sqrt`` or
        ``sqrtl`` according to its type; the result keeps that type.
        """

        self._check(value)
        return np.sqrt(value)

    def from_count(self, count: int) -> np.floating:
        """Convert a non-negative element count to this width."""

        if count < 0:
            raise ValueError("count must be non-negative")
        return self.dtype(count)

    # ------------------------------------------------------------------
    # Parsing and rounding
    # ------------------------------------------------------------------

    def parse(self, text: str) -> np.floating:
        """Parse a decimal literal directly into this width.

        The result is the value of this width nearest to the exact decimal,
        ties to even.  The numpy conversion is only used as a first guess;
        it is compared against its neighbours with exact rational arithmetic
        so that no rounding through a wider intermediate can leak through.

        Raises
        ------
        ValueError
            ``text`` is not a plain decimal literal.  ``inf``, ``nan`` and
            hexadecimal floats are rejected.
        OverflowError
            The literal is outside the finite range of the width, or is
            non-zero but rounds to zero.
        """

        token = text.strip()
        if not DECIMAL_RE.match(token):
            raise ValueError(f"not a decimal number: {text!r}")

        with np.errstate(over="ignore", under="ignore"):
            candidate = self.dtype(token)

        if not np.isfinite(candidate) or candidate == 0:
            value = Decimal(token)
            if candidate == 0 and value == 0:
                return candidate
            return self._nearest_outside(token, value, overflowed=candidate != 0)

        return self._nearest(candidate, Fraction(Decimal(token)))

    def _nearest_outside(self, token: str, value: Decimal, *, overflowed: bool) -> np.floating:
        # The first guess rounds through double, so a literal just inside the
        # largest finite value or just above half the smallest subnormal can
        # land on the wrong side of the boundary.  Decide it exactly here.
        info = np.finfo(self.dtype)
        binary_exponent = value.adjusted() * LOG2_10
        sign = self.dtype(-1 if value.is_signed() else 1)
        if overflowed:
            largest = info.max
            if binary_exponent <= info.maxexp + 1:
                gap = as_fraction(largest) - as_fraction(np.nextafter(largest, self.dtype(0)))
                limit = as_fraction(largest) + gap / 2
                exact = abs(Fraction(value))
                if exact < limit:
                    return self._nearest(np.copysign(largest, sign), Fraction(value))
            raise OverflowError(f"{token} is out of range for {self.label}")

        tiny = info.smallest_subnormal
        if binary_exponent + LOG2_10 >= info.minexp - info.nmant - 2:
            exact = abs(Fraction(value))
            if exact > as_fraction(tiny) / 2:
                return self._nearest(np.copysign(tiny, sign), Fraction(value))
        raise OverflowError(f"{token} underflows {self.label}")

    def _nearest(self, candidate: np.floating, exact: Fraction) -> np.floating:
        best = candidate
        best_err = abs(as_fraction(candidate) - exact)
        for target in (np.inf, -np.inf):
            neighbour = np.nextafter(candidate, self.dtype(target))
            if not np.isfinite(neighbour):
                continue
            err = abs(as_fraction(neighbour) - exact)
            if err < best_err or (err == best_err and self._is_even(neighbour)):
                best, best_err = neighbour, err
        return best

    def _is_even(self, value: np.floating) -> bool:
        # Measured against the gap below ``value`` so the largest finite
        # value works too; ``np.spacing`` of it is infinite.
        if value == 0:
            return True
        magnitude = np.abs(value)
        gap = as_fraction(magnitude) - as_fraction(np.nextafter(magnitude, self.dtype(0)))
        units = as_fraction(magnitude) / gap
        return units.numerator % 2 == 0

    def power_of_ten(self, places: int) -> np.floating:
        """Return ``10**places`` by repeated multiplication in this width."""

        if places < 0:
            raise ValueError("places must be non-negative")
        ten = self.dtype(10)
        result = self.dtype(1)
        with np.errstate(over="ignore"):
            for _ in range(places):
                result = self.multiply(result, ten)
                if not np.isfinite(result):
                    break
        return result

    def round_half_away(self, value: np.floating) -> np.floating:
        """Round to the nearest integer, halves away from zero (C ``round``)."""

        self._check(value)
        magnitude = np.abs(value)
        whole = np.floor(magnitude)
        if magnitude - whole >= self.dtype(0.5):
            whole = whole + self.dtype(1)
        return np.copysign(whole, value)

    def round_to(self, value: np.floating, places: int) -> np.floating:
        """Round ``value`` to ``places`` decimal places.

        Computes ``round(value * 10**places) / 10**places`` with every
        intermediate in this width.  The result may be non-finite when the
        scaled value overflows; callers decide how to report that.
        """

        self._check(value)
        multiplier = self.power_of_ten(places)
        with np.errstate(over="ignore", invalid="ignore"):
            scaled = self.multiply(value, multiplier)
            return self.divide(self.round_half_away(scaled), multiplier)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_registry: Dict[Representation, NumericKind] = {}


def register_kind(kind: NumericKind) -> None:
    """Register ``kind`` for its representation."""

    if not isinstance(kind, NumericKind):
        raise TypeError("kind must be a NumericKind")
    _registry[kind.representation] = kind


def get_kind(representation: Representation | str) -> NumericKind:
    """Retrieve the kind registered for ``representation``."""

    return _registry[Representation.parse(representation)]


def available_kinds() -> List[NumericKind]:
    """Return registered kinds from narrowest to widest."""

    return [_registry[rep] for rep in Representation if rep in _registry]


FLOAT32 = NumericKind(Representation.NARROW, np.float32)
FLOAT64 = NumericKind(Representation.STANDARD, np.float64)
LONGDOUBLE = NumericKind(Representation.EXTENDED, np.longdouble)

for _kind in (FLOAT32, FLOAT64, LONGDOUBLE):
    register_kind(_kind)


__all__ = [
    "NumericKind",
    "register_kind",
    "get_kind",
    "available_kinds",
    "as_fraction",
    "FLOAT32",
    "FLOAT64",
    "LONGDOUBLE",
]
