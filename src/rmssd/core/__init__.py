"""Core algorithms and data structures for rmssd."""

from .numeric import (
    FLOAT32,
    FLOAT64,
    LONGDOUBLE,
    NumericKind,
    available_kinds,
    get_kind,
    register_kind,
)
from .rmssd import calculate_rmssd, rmssd_from_source, successive_differences, sum_sequential
from .driver import build_combinations, default_combinations, evaluate, iter_outcomes

__all__ = [
    "FLOAT32",
    "FLOAT64",
    "LONGDOUBLE",
    "NumericKind",
    "available_kinds",
    "get_kind",
    "register_kind",
    "calculate_rmssd",
    "rmssd_from_source",
    "successive_differences",
    "sum_sequential",
    "build_combinations",
    "default_combinations",
    "evaluate",
    "iter_outcomes",
]
