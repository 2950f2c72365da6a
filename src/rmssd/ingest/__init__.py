"""Utility modules for ingesting RR-interval samples."""

from .samples import SampleSource, iter_lines, load_samples, parse_sample, source_name

__all__ = [
    "SampleSource",
    "iter_lines",
    "load_samples",
    "parse_sample",
    "source_name",
]
