"""Root mean square of successive differences.

RMSSD is computed in four steps:

1. the difference between successive samples,
2. the square of each difference,
3. the mean of the squares,
4. the square root of the mean.

Floating-point addition is not associative, and the least significant bits
of the result are exactly what this package reports on.  The steps are
therefore carried out in a fixed order and in a single width: the samples'
dtype, via the operations of a :class:`~rmssd.core.numeric.NumericKind`.
In particular the sum is accumulated strictly left to right, never through
numpy's pairwise summation or a wider accumulator.
"""

from __future__ import annotations

import logging

import numpy as np

from ..errors import InsufficientSamples
from ..ingest import SampleSource, load_samples
from ..types import RoundingPolicy
from .numeric import NumericKind

logger = logging.getLogger(__name__)


def successive_differences(samples: np.ndarray) -> np.ndarray:
    """Return ``samples[i + 1] - samples[i]`` as a new array of the same dtype."""

    return np.subtract(samples[1:], samples[:-1], dtype=samples.dtype)


def sum_sequential(values: np.ndarray, kind: NumericKind) -> np.floating:
    """Sum ``values`` left to right starting from ``kind.zero``."""

    total = kind.zero
    for value in values:
        total = kind.add(total, value)
    return total


def calculate_rmssd(samples: np.ndarray, kind: NumericKind) -> np.floating:
    """Compute the RMSSD of ``samples`` using only the arithmetic of ``kind``.

    Parameters
    ----------
    samples:
        One-dimensional array of RR intervals whose dtype is ``kind.dtype``.
    kind:
        Numeric kind used for every step of the calculation.

    Returns
    -------
    numpy.floating
        Scalar of type ``kind.dtype``; never negative.

    Raises
    ------
    InsufficientSamples
        Fewer than two samples were supplied.
    TypeError
        ``samples`` is not stored in ``kind``'s width.
    """

    samples = np.asarray(samples)
    if samples.ndim != 1:
        raise ValueError("samples must be one-dimensional")
    if samples.size < 2:
        raise InsufficientSamples(int(samples.size))
    if samples.dtype != np.dtype(kind.dtype):
        raise TypeError(f"samples have dtype {samples.dtype}; expected {np.dtype(kind.dtype)}")

    logger.info("%d-bit float", kind.storage_bits)

    diffs = successive_differences(samples)
    np.multiply(diffs, diffs, out=diffs)

    total = sum_sequential(diffs, kind)
    mean = kind.divide(total, kind.from_count(diffs.size))
    return kind.sqrt(mean)


def rmssd_from_source(
    source: SampleSource,
    kind: NumericKind,
    rounding: RoundingPolicy = None,
    *,
    skip_blank: bool = False,
    encoding: str = "utf8",
) -> np.floating:
    """Load samples from ``source`` and compute their RMSSD in ``kind``."""

    samples = load_samples(source, kind, rounding, skip_blank=skip_blank, encoding=encoding)
    return calculate_rmssd(samples, kind)
