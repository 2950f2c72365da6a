"""RMSSD of RR-interval series across floating-point precisions."""

from .errors import ErrorKind, InsufficientSamples, MalformedSample, RMSSDError, SourceUnavailable
from .types import Combination, Outcome, Representation, RoundingPolicy, parse_rounding
from .core import (
    NumericKind,
    available_kinds,
    build_combinations,
    calculate_rmssd,
    default_combinations,
    evaluate,
    get_kind,
    iter_outcomes,
    rmssd_from_source,
)
from .ingest import load_samples

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "RMSSDError",
    "SourceUnavailable",
    "MalformedSample",
    "InsufficientSamples",
    "Combination",
    "Outcome",
    "Representation",
    "RoundingPolicy",
    "parse_rounding",
    "NumericKind",
    "available_kinds",
    "get_kind",
    "calculate_rmssd",
    "rmssd_from_source",
    "build_combinations",
    "default_combinations",
    "evaluate",
    "iter_outcomes",
    "load_samples",
]
