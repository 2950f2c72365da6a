"""Evaluate RMSSD over several (representation, rounding) combinations.

Every combination is an independent calculation: the source is loaded
afresh in the combination's width, and a failure is recorded in that
combination's :class:`~rmssd.types.Outcome` without affecting the others.
Combinations are evaluated one after another in the order given, and
:func:`iter_outcomes` yields each outcome before the next one is started
so that callers can report results as they arrive.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence
import logging
import pathlib

from ..errors import RMSSDError
from ..ingest import SampleSource, iter_lines, source_name
from ..types import Combination, Outcome, Representation, RoundingPolicy
from .numeric import get_kind
from .rmssd import rmssd_from_source

logger = logging.getLogger(__name__)

DEFAULT_ROUNDINGS: tuple[RoundingPolicy, ...] = (None, 3)


def build_combinations(
    representations: Iterable[Representation | str],
    roundings: Iterable[RoundingPolicy],
) -> List[Combination]:
    """Return every combination, grouped by rounding policy.

    ``representations`` and ``roundings`` keep the order in which they are
    given; the representation varies fastest.
    """

    reps = [Representation.parse(rep) for rep in representations]
    return [Combination(rep, rounding) for rounding in roundings for rep in reps]


def default_combinations() -> List[Combination]:
    """float, double and long double; unrounded, then rounded to 3 places."""

    return build_combinations(list(Representation), DEFAULT_ROUNDINGS)


def _replayable(source: SampleSource) -> SampleSource:
    # A stream can only be read once; later combinations need the same lines.
    if isinstance(source, (str, pathlib.Path, Sequence)):
        return source
    return tuple(iter_lines(source, name=source_name(source)))


def iter_outcomes(
    source: SampleSource,
    combinations: Iterable[Combination],
    *,
    skip_blank: bool = False,
    encoding: str = "utf8",
) -> Iterator[Outcome]:
    """Yield one :class:`Outcome` per combination, in order.

    Parameters
    ----------
    source:
        Path, text stream or iterable of lines.  Paths are reopened for each
        combination; streams are read once up front and replayed.
    combinations:
        The (representation, rounding) pairs to evaluate.
    skip_blank, encoding:
        Forwarded to :func:`~rmssd.ingest.load_samples`.
    """

    combinations = list(combinations)
    try:
        source = _replayable(source)
    except RMSSDError as exc:
        logger.info("could not read %s: %s", source_name(source), exc)
        for combo in combinations:
            yield Outcome(combo, bits=get_kind(combo.representation).storage_bits, error=exc)
        return

    for combo in combinations:
        kind = get_kind(combo.representation)
        logger.debug("evaluating %s", combo.label)
        try:
            value = rmssd_from_source(
                source, kind, combo.rounding, skip_blank=skip_blank, encoding=encoding
            )
        except RMSSDError as exc:
            logger.info("%s failed: %s: %s", combo.label, exc.kind.value, exc)
            yield Outcome(combo, bits=kind.storage_bits, error=exc)
            continue
        yield Outcome(combo, bits=kind.storage_bits, value=value)


def evaluate(
    source: SampleSource,
    combinations: Iterable[Combination] | None = None,
    *,
    skip_blank: bool = False,
    encoding: str = "utf8",
) -> List[Outcome]:
    """Evaluate ``combinations`` (default: :func:`default_combinations`)."""

    if combinations is None:
        combinations = default_combinations()
    return list(iter_outcomes(source, combinations, skip_blank=skip_blank, encoding=encoding))
