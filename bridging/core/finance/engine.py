# bridging/core/finance/engine.py
"""
Bridging calculation engine.

Pure function of (inputs, config) -> (results, diagnostic trace), organised in
three ordered stages:
  A) basic, non-iterative values          (basic.py)
  B) fixed-point solve for bridge/end debt (solver.py)
  C) final ratios and shortfall            (metrics.py)

No I/O, no randomness. The trace is created per call and returned with the
results, so one engine instance can be shared across threads.
"""

from __future__ import annotations

import logging

from bridging.config.defaults import DEFAULT_CONFIG
from bridging.schemas.models import BridgingInputs, BridgingResults, CalculationConfig

from .basic import calculate_basic_values
from .metrics import calculate_final_metrics
from .solver import solve_bridge_and_end_debt
from .trace import CalculationTrace

logger = logging.getLogger(__name__)


class BridgingCalculationEngine:
    """Computes a mutually consistent bridge debt, FCAP, ICAP and end debt."""

    def __init__(self, config: CalculationConfig = DEFAULT_CONFIG, *, trace_enabled: bool = True) -> None:
        self.config = config
        self.trace_enabled = trace_enabled

    def calculate(self, inputs: BridgingInputs) -> BridgingResults:
        """
        Run all three stages for one set of inputs.

        Inputs are not range-checked; out-of-range values give arithmetically
        consistent (possibly meaningless) results. Non-convergence is reported
        through `converged=False`, never raised. Any unexpected exception is
        noted in the trace, logged, and re-raised unchanged.
        """
        trace = CalculationTrace(enabled=self.trace_enabled)
        try:
            basic = calculate_basic_values(inputs, trace)
            iterative = solve_bridge_and_end_debt(inputs, basic, self.config, trace)
            final = calculate_final_metrics(inputs, basic, iterative, trace)
        except Exception as e:
            trace.add("error", "Error", f"{type(e).__name__}: {e}")
            logger.exception("bridging calculation failed; trace so far:\n%s", trace.render_text())
            raise

        if not iterative.converged:
            logger.warning(
                "bridging solver did not converge after %d iterations (end debt %.2f, bridge debt %.2f)",
                iterative.iterations,
                iterative.end_debt,
                iterative.bridge_debt,
            )

        return BridgingResults(
            **basic.model_dump(),
            **iterative.model_dump(exclude={"history"}),
            **final.model_dump(),
            history=iterative.history,
            trace=trace.steps,
            iteration_log=trace.render_text(),
        )


def calculate_bridging(inputs: BridgingInputs, config: CalculationConfig | None = None) -> BridgingResults:
    """Convenience wrapper for one-shot callers."""
    return BridgingCalculationEngine(config or DEFAULT_CONFIG).calculate(inputs)
