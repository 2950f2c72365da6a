"""Rendering of RMSSD outcomes.

Values are printed in fixed notation with a requested number of fractional
digits.  The digits are exact: numpy's Dragon4 formatter works on the binary
value of each width (including ``long double``) instead of converting it to
a Python ``float`` first.
"""

from __future__ import annotations

from decimal import Decimal, localcontext
from fractions import Fraction
from typing import Dict, Iterable, List, Optional

import numpy as np

from .core.numeric import as_fraction
from .types import Outcome, Representation, RoundingPolicy

DEFAULT_DIGITS = 80


def format_value(value: np.floating, digits: int = DEFAULT_DIGITS) -> str:
    """Return ``value`` with exactly ``digits`` fractional digits."""

    return np.format_float_positional(
        value, precision=digits, unique=False, fractional=True, trim="k"
    )


def shortest_repr(value: np.floating) -> str:
    """Return the shortest string that round-trips in ``value``'s own width."""

    return np.format_float_positional(value, unique=True, trim="-")


def header(outcome: Outcome) -> str:
    """Return e.g. ``"long double (128-bit, rounded to 3 decimal places)"``."""

    combo = outcome.combination
    details = f"{outcome.bits}-bit"
    if combo.rounding_label is not None:
        details = f"{details}, {combo.rounding_label}"
    return f"{combo.representation.label} ({details})"


def format_outcome(outcome: Outcome, digits: int = DEFAULT_DIGITS) -> List[str]:
    """Return the lines reporting ``outcome``.

    A success renders as the header, the value and a blank separator line.
    A failure renders as a single ``ERROR:`` line meant for stderr.
    """

    if outcome.error is not None:
        return [f"ERROR: {header(outcome)}: {outcome.error.kind.value}: {outcome.error}"]
    return [header(outcome), format_value(outcome.value, digits), ""]


def divergence(
    outcomes: Iterable[Outcome],
    reference: Representation = Representation.EXTENDED,
) -> Dict[RoundingPolicy, Dict[Representation, Fraction]]:
    """Exact difference of each result from the ``reference`` result.

    Outcomes are grouped by rounding policy.  Groups whose reference
    calculation failed are omitted, as are failed outcomes.
    """

    groups: Dict[RoundingPolicy, Dict[Representation, Fraction]] = {}
    for outcome in outcomes:
        if not outcome.ok:
            continue
        combo = outcome.combination
        groups.setdefault(combo.rounding, {})[combo.representation] = as_fraction(outcome.value)

    result: Dict[RoundingPolicy, Dict[Representation, Fraction]] = {}
    for rounding, values in groups.items():
        ref = values.get(reference)
        if ref is None:
            continue
        result[rounding] = {rep: value - ref for rep, value in values.items()}
    return result


def format_fraction(value: Fraction, digits: int = 6) -> str:
    """Render an exact rational in scientific notation."""

    if value == 0:
        return f"{0.0:.{digits}e}"
    with localcontext() as ctx:
        ctx.prec = digits + 10
        decimal = Decimal(value.numerator) / Decimal(value.denominator)
    return f"{decimal:.{digits}e}"


def format_divergence(
    table: Dict[RoundingPolicy, Dict[Representation, Fraction]],
    reference: Representation = Representation.EXTENDED,
) -> List[str]:
    lines: List[str] = []
    for rounding, diffs in table.items():
        title = "unrounded" if rounding is None else f"rounded to {rounding} decimal places"
        lines.append(f"difference from {reference.label} ({title})")
        for rep in Representation:
            if rep in diffs and rep is not reference:
                lines.append(f"  {rep.label:<12} {format_fraction(diffs[rep])}")
        lines.append("")
    return lines


def outcome_to_record(outcome: Outcome, digits: int = DEFAULT_DIGITS) -> Dict[str, Optional[object]]:
    combo = outcome.combination
    record: Dict[str, Optional[object]] = {
        "representation": combo.representation.value,
        "label": combo.label,
        "bits": outcome.bits,
        "rounding": combo.rounding,
        "value": None,
        "shortest": None,
        "error_kind": None,
        "error": None,
    }
    if outcome.error is not None:
        record["error_kind"] = outcome.error.kind.value
        record["error"] = str(outcome.error)
    else:
        record["value"] = format_value(outcome.value, digits)
        record["shortest"] = shortest_repr(outcome.value)
    return record


def outcomes_to_records(outcomes: Iterable[Outcome], digits: int = DEFAULT_DIGITS) -> List[Dict[str, Optional[object]]]:
    """Return JSON-ready dictionaries for ``outcomes``."""

    return [outcome_to_record(outcome, digits) for outcome in outcomes]
