import io

import numpy as np
import pytest

from rmssd.core import build_combinations, default_combinations, evaluate, iter_outcomes
from rmssd.errors import ErrorKind
from rmssd.types import Combination, Outcome, Representation

SCENARIO = ["1000", "1020", "1000", "1050"]
DTYPES = {
    Representation.NARROW: np.float32,
    Representation.STANDARD: np.float64,
    Representation.EXTENDED: np.longdouble,
}


def test_default_combinations_are_rounding_major():
    labels = [combo.label for combo in default_combinations()]
    assert labels == [
        "float",
        "double",
        "long double",
        "float (rounded to 3 decimal places)",
        "double (rounded to 3 decimal places)",
        "long double (rounded to 3 decimal places)",
    ]


def test_build_combinations_is_rounding_major():
    combos = build_combinations(["double", "narrow"], [None, 1])
    assert combos == [
        Combination(Representation.STANDARD, None),
        Combination(Representation.NARROW, None),
        Combination(Representation.STANDARD, 1),
        Combination(Representation.NARROW, 1),
    ]
    assert combos[2].label == "double (rounded to 1 decimal place)"


def test_evaluate_scenario_all_combinations():
    outcomes = evaluate(SCENARIO)
    assert [o.combination for o in outcomes] == default_combinations()
    for outcome in outcomes:
        assert outcome.ok
        dtype = DTYPES[outcome.combination.representation]
        assert type(outcome.value) is dtype
        assert outcome.value == np.sqrt(dtype(1100))


def test_failure_in_one_width_does_not_stop_the_others():
    # 1e39 only overflows float.
    outcomes = evaluate(["1", "1e39", "2"])
    by_label = {o.combination.label: o for o in outcomes}
    assert len(outcomes) == 6
    assert by_label["float"].error.kind is ErrorKind.MALFORMED_SAMPLE
    assert by_label["float (rounded to 3 decimal places)"].error.kind is ErrorKind.MALFORMED_SAMPLE
    assert by_label["double"].ok
    assert by_label["long double"].ok


def test_malformed_line_is_reported_per_combination():
    outcomes = evaluate(["1000", "abc", "1050"])
    assert len(outcomes) == 6
    for outcome in outcomes:
        assert not outcome.ok
        assert outcome.error.kind is ErrorKind.MALFORMED_SAMPLE
        assert outcome.error.line == 2


def test_empty_source_is_insufficient_everywhere(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")
    outcomes = evaluate(path)
    assert len(outcomes) == 6
    assert all(o.error.kind is ErrorKind.INSUFFICIENT_SAMPLES for o in outcomes)


def test_missing_file_is_unavailable_everywhere(tmp_path):
    outcomes = evaluate(tmp_path / "missing.txt")
    assert all(o.error.kind is ErrorKind.SOURCE_UNAVAILABLE for o in outcomes)


def test_stream_source_is_replayed_for_every_combination():
    stream = io.StringIO("\n".join(SCENARIO) + "\n")
    outcomes = evaluate(stream)
    assert all(o.ok for o in outcomes)


def test_outcomes_are_yielded_one_at_a_time(tmp_path):
    path = tmp_path / "rr.txt"
    path.write_text("\n".join(SCENARIO) + "\n")
    gen = iter_outcomes(path, default_combinations())
    first = next(gen)
    assert first.combination.label == "float"
    path.write_text("1\n")
    rest = list(gen)
    assert len(rest) == 5
    assert all(o.error.kind is ErrorKind.INSUFFICIENT_SAMPLES for o in rest)


def test_unexpected_errors_propagate():
    with pytest.raises(ValueError):
        evaluate(SCENARIO, [Combination(Representation.STANDARD, -1)])


def test_outcome_requires_exactly_one_of_value_and_error():
    combo = Combination(Representation.STANDARD)
    with pytest.raises(ValueError):
        Outcome(combo, bits=64)
