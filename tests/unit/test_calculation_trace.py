# tests/unit/test_calculation_trace.py

from __future__ import annotations

import json
import logging

import pytest

from bridging.core.finance import BridgingCalculationEngine, CalculationTrace
from bridging.core.finance.trace import fmt_currency, fmt_pct, fmt_ratio
from tests.utils import make_bridging_inputs, make_fees_capitalised_inputs


@pytest.mark.parametrize(
    "value, expected",
    [(123456.789, "$123,456.79"), (-2000, "-$2,000.00"), (0, "$0.00")],
)
def test_fmt_currency(value, expected):
    assert fmt_currency(value) == expected


def test_fmt_percentages():
    assert fmt_pct(7.5) == "7.50%"
    assert fmt_ratio(0.5429) == "54.29%"


def test_render_groups_by_stage_and_iteration():
    t = CalculationTrace()
    t.add("basic", "Shaded valuation", 950_000.0)
    t.add("iterative", "Bridge debt", 950_000.0, iteration=1)
    t.add("iterative", "Bridge debt", 851_500.0, iteration=2)
    t.add("final", "Contract", True)

    text = t.render_text()
    assert text.splitlines()[0] == "=== BASIC CALCULATIONS ==="
    assert "Shaded valuation: $950,000.00" in text
    assert "--- Iteration 1 ---" in text
    assert "--- Iteration 2 ---" in text
    assert "=== FINAL METRICS CALCULATION ===" in text
    assert "Contract: Yes" in text


def test_detail_takes_precedence_over_value():
    t = CalculationTrace()
    t.add("basic", "LVR to use", 80.0, detail="80.00%")
    assert t.render_text().strip().endswith("LVR to use: 80.00%")


def test_disabled_trace_records_nothing():
    t = CalculationTrace(enabled=False)
    t.add("basic", "anything", 1.0)
    assert t.steps == []
    assert t.render_text() == ""


def test_as_dicts_is_json_ready():
    t = CalculationTrace()
    t.add("iterative", "Bridge debt", 1.5, detail="x", iteration=3)
    dumped = json.dumps(t.as_dicts())
    assert json.loads(dumped) == [
        {"stage": "iterative", "label": "Bridge debt", "value": 1.5, "detail": "x", "iteration": 3}
    ]


def test_engine_trace_covers_all_stages(engine):
    r = engine.calculate(make_fees_capitalised_inputs())
    stages = {s.stage for s in r.trace}
    assert stages == {"basic", "iterative", "final"}
    assert "--- Iteration 2 ---" in r.iteration_log
    assert "Converged: after 2 iterations" in r.iteration_log


def test_non_convergence_noted_in_trace(engine):
    r = engine.calculate(make_bridging_inputs(new_property_value=800_001.0))
    assert "WARNING: did not converge after 100 iterations" in r.iteration_log


def test_disabled_trace_leaves_numbers_unchanged(engine, quiet_engine):
    inputs = make_fees_capitalised_inputs()
    loud = engine.calculate(inputs)
    quiet = quiet_engine.calculate(inputs)

    assert quiet.trace == []
    assert quiet.iteration_log == ""
    assert quiet.model_dump(exclude={"trace", "iteration_log"}) == loud.model_dump(exclude={"trace", "iteration_log"})


def test_trace_steps_logged_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="bridging.core.finance.trace"):
        BridgingCalculationEngine().calculate(make_bridging_inputs())
    assert any("Shaded valuation" in rec.getMessage() for rec in caplog.records)


def test_unexpected_error_is_traced_logged_and_reraised(engine, monkeypatch, caplog):
    from bridging.core.finance import engine as engine_mod

    def _boom(*args, **kwargs):
        raise ZeroDivisionError("boom")

    monkeypatch.setattr(engine_mod, "calculate_final_metrics", _boom)
    with caplog.at_level(logging.ERROR, logger="bridging.core.finance.engine"):
        with pytest.raises(ZeroDivisionError, match="boom"):
            engine.calculate(make_bridging_inputs())

    messages = [rec.getMessage() for rec in caplog.records]
    assert any("=== ERROR ===" in m and "ZeroDivisionError: boom" in m for m in messages)


def test_steps_not_rendered_when_debug_is_off(monkeypatch, caplog):
    def fail(step):
        raise AssertionError("rendered while DEBUG is off")

    monkeypatch.setattr(CalculationTrace, "_render_step", staticmethod(fail))
    with caplog.at_level(logging.INFO, logger="bridging.core.finance.trace"):
        t = CalculationTrace()
        t.add("basic", "Shaded valuation", 950_000.0)
        t.add("basic", "LVR to use", 80.0)
    assert len(t.steps) == 2
