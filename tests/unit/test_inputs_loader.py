# tests/unit/test_inputs_loader.py

from __future__ import annotations

import json

import pytest

from bridging.inputs.inputs import AppInputs, InputsLoader, load_inputs
from tests.utils import camel_payload, make_standard_inputs, write_json


def test_legacy_camel_case_payload(tmp_path):
    inputs = make_standard_inputs()
    p = write_json(tmp_path / "inputs.json", camel_payload(inputs))

    cfg = load_inputs(p)

    assert isinstance(cfg, AppInputs)
    assert cfg.inputs == inputs
    assert cfg.run.out == "bridging_report.md"
    assert cfg.run.trace is True
    assert cfg.config.solver.max_iterations == 100


def test_structured_payload_with_config_and_run(tmp_path):
    payload = {
        "inputs": make_standard_inputs().model_dump(),
        "config": {"solver": {"maxIterations": 25, "convergence_tolerance": 0.5}},
        "run": {"out": "x.md", "trace": False, "strategy": "all", "strict": True},
    }
    cfg = InputsLoader().load(write_json(tmp_path / "app.json", payload))

    assert cfg.config.solver.max_iterations == 25
    assert cfg.config.solver.convergence_tolerance == 0.5
    assert cfg.run.out == "x.md"
    assert cfg.run.trace is False
    assert cfg.run.strategy == "all"
    assert cfg.run.strict is True


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("BRIDGING_OUT", "env.md")
    monkeypatch.setenv("BRIDGING_TRACE", "off")
    monkeypatch.setenv("BRIDGING_LOG_LEVEL", "debug")
    monkeypatch.setenv("BRIDGING_MAX_ITERATIONS", "7")
    monkeypatch.setenv("BRIDGING_TOLERANCE", "0.001")

    cfg = InputsLoader().load_json(json.dumps(make_standard_inputs().model_dump()))

    assert cfg.run.out == "env.md"
    assert cfg.run.trace is False
    assert cfg.run.log_level == "DEBUG"
    assert cfg.config.solver.max_iterations == 7
    assert cfg.config.solver.convergence_tolerance == pytest.approx(0.001)


@pytest.mark.parametrize("name, value", [("BRIDGING_MAX_ITERATIONS", "0"), ("BRIDGING_MAX_ITERATIONS", "lots"), ("BRIDGING_TOLERANCE", "-1")])
def test_bad_solver_env_values_are_ignored(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    cfg = InputsLoader().load_json(json.dumps(make_standard_inputs().model_dump()))
    assert cfg.config.solver.max_iterations == 100
    assert cfg.config.solver.convergence_tolerance == 0.01


def test_bad_trace_env_value_is_ignored(monkeypatch):
    monkeypatch.setenv("BRIDGING_TRACE", "maybe")
    cfg = InputsLoader().load_json(json.dumps(make_standard_inputs().model_dump()))
    assert cfg.run.trace is True


def test_with_overrides_is_non_destructive():
    loader = InputsLoader()
    cfg = loader.load_json(json.dumps(make_standard_inputs().model_dump()))
    new = loader.with_overrides(cfg, out="other.md", strategy="KB")

    assert new.run.out == "other.md"
    assert new.run.strategy == "KB"
    assert cfg.run.out == "bridging_report.md"
    assert loader.with_overrides(cfg) is cfg


def test_validation_errors_become_value_errors():
    with pytest.raises(ValueError, match="Inputs validation failed"):
        InputsLoader().load_json(json.dumps({"existingPropertyValue": 1_000_000}))


def test_invalid_json_rejected():
    with pytest.raises(ValueError, match="Invalid JSON"):
        InputsLoader().load_json("{not json")


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_inputs(tmp_path / "nope.json")


def test_non_json_suffix_rejected(tmp_path):
    p = tmp_path / "inputs.yaml"
    p.write_text("a: 1", encoding="utf-8")
    with pytest.raises(ValueError, match="only .json"):
        load_inputs(p)


def test_default_search_path(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    write_json(tmp_path / "config.json", camel_payload(make_standard_inputs()))
    assert load_inputs().inputs.new_property_value == 1_500_000.0
