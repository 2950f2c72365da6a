import io

import numpy as np
import pytest

from rmssd.core import FLOAT32, FLOAT64, LONGDOUBLE
from rmssd.errors import ErrorKind, MalformedSample, SourceUnavailable
from rmssd.ingest import load_samples
import rmssd.ingest.samples as samples_module


def test_load_samples_from_path_keeps_order_and_dtype(tmp_path):
    path = tmp_path / "rr.txt"
    path.write_text("1000\n1020\n1000\n1050\n")
    samples = load_samples(path, FLOAT32)
    assert samples.dtype == np.float32
    np.testing.assert_array_equal(samples, np.array([1000, 1020, 1000, 1050], dtype=np.float32))


def test_samples_are_read_only(tmp_path):
    path = tmp_path / "rr.txt"
    path.write_text("1\n2\n")
    samples = load_samples(path, FLOAT64)
    assert not samples.flags.writeable
    with pytest.raises(ValueError):
        samples[0] = 5


def test_load_samples_from_lines_and_stream():
    lines = ["812\n", "798.5\n"]
    from_list = load_samples(lines, LONGDOUBLE)
    from_stream = load_samples(io.StringIO("".join(lines)), LONGDOUBLE)
    assert from_list.dtype == np.longdouble
    np.testing.assert_array_equal(from_list, from_stream)


def test_windows_line_endings_and_padding():
    samples = load_samples(["  812\r\n", "798\t\r\n"], FLOAT64)
    np.testing.assert_array_equal(samples, [812.0, 798.0])


def test_trailing_newline_is_not_a_blank_line(tmp_path):
    path = tmp_path / "rr.txt"
    path.write_text("1\n2\n")
    assert load_samples(path, FLOAT64).size == 2


def test_blank_line_is_malformed_by_default():
    with pytest.raises(MalformedSample) as excinfo:
        load_samples(["1", "", "2"], FLOAT64)
    assert excinfo.value.line == 2
    assert excinfo.value.kind is ErrorKind.MALFORMED_SAMPLE


def test_blank_lines_can_be_skipped():
    samples = load_samples(["1", "", "   ", "2"], FLOAT64, skip_blank=True)
    np.testing.assert_array_equal(samples, [1.0, 2.0])


def test_malformed_line_reports_location(tmp_path):
    path = tmp_path / "rr.txt"
    path.write_text("1000\nabc\n1050\n")
    with pytest.raises(MalformedSample) as excinfo:
        load_samples(path, FLOAT64)
    err = excinfo.value
    assert err.source == str(path)
    assert err.line == 2
    assert err.text == "abc"
    assert f"{path}:2:" in str(err)
    assert isinstance(err.__cause__, ValueError)


def test_file_closed_after_malformed_line(tmp_path, monkeypatch):
    path = tmp_path / "rr.txt"
    path.write_text("1000\nabc\n1050\n")
    handles = []

    def tracking_open(*args, **kwargs):
        fh = open(*args, **kwargs)
        handles.append(fh)
        return fh

    monkeypatch.setattr(samples_module, "open", tracking_open, raising=False)
    with pytest.raises(MalformedSample):
        load_samples(path, FLOAT64)
    assert len(handles) == 1
    assert handles[0].closed


def test_out_of_range_depends_on_width():
    with pytest.raises(MalformedSample) as excinfo:
        load_samples(["1", "1e39"], FLOAT32)
    assert "out of range" in str(excinfo.value)
    assert load_samples(["1", "1e39"], FLOAT64).size == 2


def test_rounding_overflow_is_malformed():
    with pytest.raises(MalformedSample):
        load_samples(["3e38"], FLOAT32, rounding=3)


def test_missing_file_is_source_unavailable(tmp_path):
    missing = tmp_path / "nope.txt"
    with pytest.raises(SourceUnavailable) as excinfo:
        load_samples(missing, FLOAT64)
    assert excinfo.value.kind is ErrorKind.SOURCE_UNAVAILABLE
    assert str(missing) in str(excinfo.value)


def test_undecodable_file_is_source_unavailable(tmp_path):
    path = tmp_path / "rr.txt"
    path.write_bytes(b"1000\n\xff\xfe\n")
    with pytest.raises(SourceUnavailable):
        load_samples(path, FLOAT64)


@pytest.mark.parametrize("kind", [FLOAT32, FLOAT64, LONGDOUBLE])
def test_rounding_applies_to_every_sample(kind):
    samples = load_samples(["1.23456", "-0.0005", "2"], kind, rounding=3)
    expected = [kind.round_to(kind.parse(t), 3) for t in ("1.23456", "-0.0005", "2")]
    np.testing.assert_array_equal(samples, np.array(expected, dtype=kind.dtype))


@pytest.mark.parametrize("kind", [FLOAT32, FLOAT64, LONGDOUBLE])
def test_rounding_is_idempotent(kind):
    lines = ["812.34567", "798.00049", "1020.9995", "0.1"]
    once = load_samples(lines, kind, rounding=3)
    twice = np.array([kind.round_to(v, 3) for v in once], dtype=kind.dtype)
    np.testing.assert_array_equal(once, twice)


def test_negative_rounding_rejected():
    with pytest.raises(ValueError):
        load_samples(["1"], FLOAT64, rounding=-1)


def test_empty_source_gives_empty_array():
    samples = load_samples([], FLOAT32)
    assert samples.shape == (0,)
    assert samples.dtype == np.float32
