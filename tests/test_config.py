import json

import pytest
from pydantic import ValidationError

from rmssd.config import Settings, load_settings
from rmssd.types import Representation


def test_defaults_cover_both_roundings():
    s = Settings()
    assert s.source.path == "test/RRIntervals_P7D1_Baseline.txt"
    assert s.source.skip_blank is False
    assert s.run.representations == [
        Representation.NARROW,
        Representation.STANDARD,
        Representation.EXTENDED,
    ]
    assert s.run.roundings == [None, 3]
    assert s.report.digits == 80


def test_from_env(monkeypatch):
    monkeypatch.setenv("RMSSD_REPORT__DIGITS", "12")
    monkeypatch.setenv("RMSSD_SOURCE__SKIP_BLANK", "true")
    s = Settings()
    assert s.report.digits == 12
    assert s.source.skip_blank is True


def test_from_env_comma_separated_lists(monkeypatch):
    monkeypatch.setenv("RMSSD_RUN__REPRESENTATIONS", "double,long double")
    monkeypatch.setenv("RMSSD_RUN__ROUNDINGS", "none,2")
    s = Settings()
    assert s.run.representations == [Representation.STANDARD, Representation.EXTENDED]
    assert s.run.roundings == [None, 2]


def test_invalid_values_rejected():
    with pytest.raises(ValidationError):
        Settings.model_validate({"run": {"roundings": [-1]}})
    with pytest.raises(ValidationError):
        Settings.model_validate({"run": {"representations": ["quad"]}})
    with pytest.raises(ValidationError):
        Settings.model_validate({"report": {"digits": -5}})


def test_load_settings_json(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"run": {"roundings": [None]}, "report": {"digits": 20}}))
    s = load_settings(p)
    assert s.run.roundings == [None]
    assert s.report.digits == 20


def test_load_settings_yaml(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("source:\n  path: data/rr.txt\nrun:\n  representations: [float32, float64]\n  roundings: [null, 3]\n")
    s = load_settings(p)
    assert s.source.path == "data/rr.txt"
    assert s.run.representations == [Representation.NARROW, Representation.STANDARD]
    assert s.run.roundings == [None, 3]


def test_load_settings_requires_mapping(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text("[1, 2]")
    with pytest.raises(TypeError):
        load_settings(p)
