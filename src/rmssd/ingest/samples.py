# src/rmssd/ingest/samples.py
"""Reader for RR-interval sample files.

The format is one decimal literal per line, no header::

    812
    798.5
    1.0205e3

Each line is converted straight into the requested floating-point width
(see :mod:`rmssd.core.numeric`) and optionally rounded to a fixed number of
decimal places in that same width.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, TextIO, Union
import pathlib

import numpy as np

from ..core.numeric import NumericKind
from ..errors import MalformedSample, SourceUnavailable
from ..types import RoundingPolicy

SampleSource = Union[str, pathlib.Path, TextIO, Iterable[str]]


def source_name(source: SampleSource) -> str:
    """Return a printable name for ``source`` used in error messages."""

    if isinstance(source, (str, pathlib.Path)):
        return str(source)
    return str(getattr(source, "name", "<stream>"))


def iter_lines(lines: Iterable[str], *, name: str) -> Iterator[str]:
    """Yield ``lines`` converting read failures into :class:`SourceUnavailable`."""

    iterator = iter(lines)
    while True:
        try:
            raw = next(iterator)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailable(f"could not read data from {name}: {exc}", source=name) from exc
        yield raw


def parse_sample(
    token: str,
    kind: NumericKind,
    rounding: RoundingPolicy = None,
    *,
    name: str = "<stream>",
    line: int = 1,
) -> np.floating:
    """Parse a single stripped line into ``kind``, rounding if requested."""

    try:
        value = kind.parse(token)
    except OverflowError as exc:
        raise MalformedSample(
            f"value {token!r} is out of range for {kind.label}", source=name, line=line, text=token
        ) from exc
    except ValueError as exc:
        raise MalformedSample(
            f"could not parse {token!r} as a decimal number", source=name, line=line, text=token
        ) from exc

    if rounding is not None:
        value = kind.round_to(value, rounding)
        if not np.isfinite(value):
            raise MalformedSample(
                f"value {token!r} is out of range for {kind.label} "
                f"when rounded to {rounding} decimal places",
                source=name,
                line=line,
                text=token,
            )
    return value


def _read_samples(
    lines: Iterable[str],
    kind: NumericKind,
    rounding: RoundingPolicy,
    *,
    skip_blank: bool,
    name: str,
) -> List[np.floating]:
    values: List[np.floating] = []
    for lineno, raw in enumerate(iter_lines(lines, name=name), start=1):
        token = raw.strip()
        if not token:
            if skip_blank:
                continue
            raise MalformedSample("blank line", source=name, line=lineno, text=raw)
        values.append(parse_sample(token, kind, rounding, name=name, line=lineno))
    return values


def load_samples(
    source: SampleSource,
    kind: NumericKind,
    rounding: RoundingPolicy = None,
    *,
    skip_blank: bool = False,
    encoding: str = "utf8",
) -> np.ndarray:
    """Load a sample sequence from ``source`` in the width of ``kind``.

    Parameters
    ----------
    source:
        Path to a text file, an open text stream or any iterable of lines.
        Paths are opened here and closed again before returning, on success
        and on failure alike.
    kind:
        Numeric kind every value is parsed into.
    rounding:
        Number of decimal places to round each value to, or ``None``.
    skip_blank:
        Drop blank lines instead of reporting them as malformed.
    encoding:
        Text encoding used when ``source`` is a path.

    Returns
    -------
    numpy.ndarray
        Read-only one-dimensional array of dtype ``kind.dtype`` in line order.
    """

    if rounding is not None and rounding < 0:
        raise ValueError("rounding must be a non-negative number of decimal places")

    name = source_name(source)
    if isinstance(source, (str, pathlib.Path)):
        try:
            fh = open(source, "r", encoding=encoding)
        except OSError as exc:
            reason = exc.strerror or str(exc)
            raise SourceUnavailable(f"could not open data file {name}: {reason}", source=name) from exc
        with fh:
            values = _read_samples(fh, kind, rounding, skip_blank=skip_blank, name=name)
    else:
        values = _read_samples(source, kind, rounding, skip_blank=skip_blank, name=name)

    samples = np.array(values, dtype=kind.dtype)
    samples.setflags(write=False)
    return samples
