"""Common type helpers for rmssd.

This module defines the small value objects exchanged between the loader,
the calculator and the driver.  The structures are intentionally minimal but
add clarity around which floating-point width and rounding rule a given
result belongs to.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import numpy as np

from .errors import RMSSDError

RoundingPolicy = Optional[int]

_LABELS = {
    "narrow": "float",
    "standard": "double",
    "extended": "long double",
}

_ALIASES = {
    "float": "narrow",
    "float32": "narrow",
    "single": "narrow",
    "double": "standard",
    "float64": "standard",
    "long double": "extended",
    "longdouble": "extended",
    "long_double": "extended",
}


class Representation(str, Enum):
    """Floating-point width used end-to-end by one calculation."""

    NARROW = "narrow"
    STANDARD = "standard"
    EXTENDED = "extended"

    @property
    def label(self) -> str:
        """Return the C type name used in reports."""

        return _LABELS[self.value]

    @classmethod
    def parse(cls, value: Any) -> "Representation":
        """Accept an enum member, its value, its label or a dtype name."""

        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown representation {value!r}; choose from {choices}") from None


def parse_rounding(value: Any) -> RoundingPolicy:
    """Return a rounding policy from ``value``.

    ``None`` and the strings ``"none"``, ``"null"`` and ``""`` disable
    rounding.  Anything else must be a non-negative integer.
    """

    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"", "none", "null"}:
            return None
        try:
            value = int(text)
        except ValueError:
            raise ValueError(f"invalid rounding policy {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"invalid rounding policy {value!r}")
    if value < 0:
        raise ValueError("decimal places must be non-negative")
    return value


@dataclass(frozen=True)
class Combination:
    """One (representation, rounding policy) pair evaluated by the driver."""

    representation: Representation
    rounding: RoundingPolicy = None

    @property
    def rounding_label(self) -> Optional[str]:
        if self.rounding is None:
            return None
        unit = "place" if self.rounding == 1 else "places"
        return f"rounded to {self.rounding} decimal {unit}"

    @property
    def label(self) -> str:
        """Return e.g. ``"double (rounded to 3 decimal places)"``."""

        suffix = self.rounding_label
        if suffix is None:
            return self.representation.label
        return f"{self.representation.label} ({suffix})"


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating a single :class:`Combination`.

    Exactly one of ``value`` and ``error`` is set.  ``bits`` records the
    storage width of the representation that produced the outcome.
    """

    combination: Combination
    bits: int
    value: Optional[np.floating] = None
    error: Optional[RMSSDError] = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("an outcome holds either a value or an error")

    @property
    def ok(self) -> bool:
        return self.error is None
