# tests/test_main_cli.py

from __future__ import annotations

import logging

import main
from bridging.logging_config import LOG_FORMAT, configure_logging
from tests.utils import camel_payload, make_bridging_inputs, make_standard_inputs, write_json


def test_sample_run_writes_report(tmp_path, capsys):
    out = tmp_path / "report.md"
    assert main.main(["--out", str(out)]) == 0

    md = out.read_text(encoding="utf-8")
    assert "## Calculation Trace" in md
    assert "Report written to" in capsys.readouterr().out


def test_config_run_with_strategies_and_no_trace(tmp_path):
    cfg = write_json(tmp_path / "inputs.json", camel_payload(make_standard_inputs()))
    out = tmp_path / "r.md"

    assert main.main(["--config", str(cfg), "--out", str(out), "--no-trace", "--strategy", "all"]) == 0

    md = out.read_text(encoding="utf-8")
    assert "## Calculation Trace" not in md
    assert "## Move Strategies" in md


def test_strict_mode_exit_code(tmp_path):
    cfg = write_json(tmp_path / "bad.json", camel_payload(make_bridging_inputs(new_property_value=0.0)))
    out = tmp_path / "r.md"

    assert main.main(["--config", str(cfg), "--out", str(out), "--strict"]) == 2
    assert not out.exists()


def test_invalid_config_exit_code(tmp_path):
    cfg = write_json(tmp_path / "bad.json", {"existingPropertyValue": "lots"})
    assert main.main(["--config", str(cfg), "--out", str(tmp_path / "r.md")]) == 2


def test_non_convergence_reported(tmp_path, capsys):
    cfg = write_json(tmp_path / "osc.json", camel_payload(make_bridging_inputs(new_property_value=800_001.0)))
    assert main.main(["--config", str(cfg), "--out", str(tmp_path / "r.md")]) == 0
    assert "did not converge" in capsys.readouterr().out


def test_configure_logging_is_idempotent():
    root = logging.getLogger()
    for h in [h for h in root.handlers if getattr(h, "_bridging_handler", False)]:
        root.removeHandler(h)
    before = list(root.handlers)
    level = root.level
    try:
        configure_logging("debug")
        configure_logging("WARNING")
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert added[0].formatter._fmt == LOG_FORMAT
        assert root.level == logging.WARNING
    finally:
        root.setLevel(level)
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
