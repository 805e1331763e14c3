# bridging/core/finance/trace.py
"""
Diagnostic trace for a single bridging calculation.

The engine records each calculation step as a structured TraceStep
(stage, label, value, formatted working). Consumers choose how to use it:
render it as text for the UI debug panel, dump it as JSON, or disable it
entirely. Numeric logic never depends on the trace.
"""

from __future__ import annotations

import logging
from typing import Any

from bridging.schemas.models import TraceStep, TraceValue

logger = logging.getLogger(__name__)

_STAGE_HEADINGS = {
    "basic": "=== BASIC CALCULATIONS ===",
    "iterative": "=== ITERATIVE CALCULATION ===",
    "final": "=== FINAL METRICS CALCULATION ===",
    "error": "=== ERROR ===",
}


def fmt_currency(x: float) -> str:
    """
    Format a float as AUD-style currency with thousands separators.

    Example:
        123456.789 -> $123,456.79
        -2000 -> -$2,000.00
    """
    sign = "-" if x < 0 else ""
    return f"{sign}${abs(x):,.2f}"


def fmt_pct(x: float, digits: int = 2) -> str:
    """Format a whole-number percentage (7.5 -> '7.50%')."""
    return f"{x:.{digits}f}%"


def fmt_ratio(x: float) -> str:
    """Format a fraction as a percentage (0.5429 -> '54.29%')."""
    return f"{x * 100:.2f}%"


def yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _fmt_value(value: TraceValue) -> str:
    if isinstance(value, bool):
        return yes_no(value)
    if isinstance(value, int | float):
        return fmt_currency(float(value))
    return "" if value is None else str(value)


class CalculationTrace:
    """Per-call accumulator of TraceStep records."""

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._steps: list[TraceStep] = []

    def add(
        self,
        stage: str,
        label: str,
        value: TraceValue = None,
        *,
        detail: str | None = None,
        iteration: int | None = None,
    ) -> None:
        if not self.enabled:
            return
        step = TraceStep(stage=stage, label=label, value=value, detail=detail, iteration=iteration)
        self._steps.append(step)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s | %s", stage, self._render_step(step))

    @property
    def steps(self) -> list[TraceStep]:
        return list(self._steps)

    def as_dicts(self) -> list[dict[str, Any]]:
        """JSON-ready step records."""
        return [s.model_dump() for s in self._steps]

    def render_text(self) -> str:
        """Render the trace as a readable multi-line log, grouped by stage and iteration."""
        lines: list[str] = []
        stage: str | None = None
        iteration: int | None = None
        for step in self._steps:
            if step.stage != stage:
                stage = step.stage
                iteration = None
                if lines:
                    lines.append("")
                lines.append(_STAGE_HEADINGS.get(stage, f"=== {stage.upper()} ==="))
            if step.iteration is not None and step.iteration != iteration:
                iteration = step.iteration
                lines.append("")
                lines.append(f"--- Iteration {iteration} ---")
            lines.append(self._render_step(step))
        return "\n".join(lines) + ("\n" if lines else "")

    @staticmethod
    def _render_step(step: TraceStep) -> str:
        shown = step.detail if step.detail is not None else _fmt_value(step.value)
        return f"{step.label}: {shown}" if shown else step.label
