# bridging/reports/generator.py
from __future__ import annotations

import math

from bridging.core.finance.trace import fmt_currency, fmt_pct, yes_no
from bridging.schemas.models import BridgingInputs, BridgingResults, StrategyOutcome

_STRATEGY_NAMES = {
    "BBYS": "Buy before you sell",
    "SBYB": "Sell before you buy",
    "KB": "Keep both",
    "SS": "Settle same day",
}


def _fmt_currency(x: float) -> str:
    return fmt_currency(x) if math.isfinite(x) else "N/A"


def _fmt_ratio(x: float) -> str:
    """
    Format a fraction as a percentage with two decimals; nan/inf render as N/A.

    Example:
        0.6735 -> 67.35%
    """
    return f"{x * 100:.2f}%" if math.isfinite(x) else "N/A"


def _section(title: str) -> str:
    return f"\n## {title}\n"


def _render_header(inputs: BridgingInputs, title: str | None) -> str:
    lines = [
        f"# {title or 'Bridging Finance Calculation'}",
        "",
        f"- **Existing property value:** {_fmt_currency(inputs.existing_property_value)}",
        f"- **Existing debt:** {_fmt_currency(inputs.existing_debt)}",
        f"- **New property value:** {_fmt_currency(inputs.new_property_value)}",
        f"- **Savings:** {_fmt_currency(inputs.savings)}",
        f"- **Additional borrowings:** {_fmt_currency(inputs.additional_borrowings)}",
        f"- **Bridging term:** {inputs.bridging_term_months} months",
        f"- **Repayment type:** {inputs.bridging_repayment_type}",
        f"- **Interest rate:** {fmt_pct(inputs.bridging_interest_rate)}",
        f"- **Contract of sale provided:** {yes_no(inputs.contract_of_sale_provided)}",
        f"- **Fees capitalised:** {yes_no(inputs.bridging_fees_capitalised)}",
    ]
    return "\n".join(lines) + "\n"


def _render_summary(r: BridgingResults) -> str:
    lines = [
        _section("Summary"),
        f"- **Bridge debt:** {_fmt_currency(r.bridge_debt)}",
        f"- **End debt:** {_fmt_currency(r.end_debt)}",
        f"- **Peak debt (incl. ICAP):** {_fmt_currency(r.peak_debt_including_icap)}",
        f"- **Shortfall:** {_fmt_currency(r.shortfall)}",
        f"- **Additional cash required:** {_fmt_currency(r.additional_cash_required)}",
    ]
    return "\n".join(lines) + "\n"


def _render_basic(r: BridgingResults) -> str:
    rows = [
        ("Selling costs", r.selling_costs_amount),
        ("Existing property equity", r.existing_property_equity),
        ("Shaded valuation", r.shaded_valuation),
        ("Shaded net sales proceeds", r.shaded_net_sales_proceeds),
        ("Purchase costs", r.purchase_costs_amount),
        ("Additional funds required", r.additional_funds_required),
        ("Peak debt (before cap)", r.peak_debt_before_cap),
        ("Peak shaded valuation", r.peak_shaded_valuation),
        ("Max peak debt", r.max_peak_debt_before_cap),
    ]
    lines = [_section("Basic Calculations"), "| Item | Amount |", "| --- | ---: |"]
    lines += [f"| {label} | {_fmt_currency(v)} |" for label, v in rows]
    lines.append(f"| LVR applied | {fmt_pct(r.lvr_to_use)} |")
    return "\n".join(lines) + "\n"


def _render_solver(r: BridgingResults) -> str:
    lines = [
        _section("Bridge & End Debt"),
        f"- **Bridge debt:** {_fmt_currency(r.bridge_debt)}",
        f"- **Bridge debt excl. FCAP:** {_fmt_currency(r.bridge_debt_excluding_fcap)}",
        f"- **Capitalised fees (FCAP):** {_fmt_currency(r.fcap)}",
        f"- **Assessed capitalised interest (ICAP):** {_fmt_currency(r.assessed_icap)}",
        f"- **End debt:** {_fmt_currency(r.end_debt)}",
        f"- **Iterations:** {r.iterations} ({'converged' if r.converged else 'not converged'})",
    ]
    if not r.converged:
        lines += [
            "",
            f"> **Warning:** the solver did not converge after {r.iterations} iterations. "
            "Figures are the last estimate and may not balance.",
        ]
    return "\n".join(lines) + "\n"


def _render_metrics(r: BridgingResults) -> str:
    lines = [
        _section("Final Metrics"),
        f"- **Peak debt LVR (excl. ICAP):** {_fmt_ratio(r.peak_debt_lvr_excl_icap)}",
        f"- **Peak debt LVR (incl. ICAP):** {_fmt_ratio(r.peak_debt_lvr_incl_icap)}",
        f"- **End debt LVR:** {_fmt_ratio(r.end_debt_lvr)}",
        f"- **Check value:** {r.check_value:.6f}",
    ]
    return "\n".join(lines) + "\n"


def _render_strategies(outcomes: list[StrategyOutcome]) -> str:
    if not outcomes:
        return ""
    lines = [
        _section("Move Strategies"),
        "| Strategy | End Debt | Monthly Repayment | Bridging Loan | Loan Required |",
        "| --- | ---: | ---: | ---: | :---: |",
    ]
    for o in outcomes:
        lines.append(
            f"| {_STRATEGY_NAMES.get(o.strategy, o.strategy)} "
            f"| {_fmt_currency(o.end_debt)} "
            f"| {_fmt_currency(o.monthly_repayment)} "
            f"| {_fmt_currency(o.bridging_loan_amount)} "
            f"| {yes_no(not o.no_loan_required)} |"
        )
    return "\n".join(lines) + "\n"


def _render_trace(r: BridgingResults) -> str:
    if not r.iteration_log:
        return ""
    return "\n".join([_section("Calculation Trace"), "```text", r.iteration_log.rstrip(), "```"]) + "\n"


def generate_report(
    inputs: BridgingInputs,
    results: BridgingResults,
    *,
    include_trace: bool = True,
    strategies: list[StrategyOutcome] | None = None,
    title: str | None = None,
) -> str:
    """
    Markdown report of one bridging calculation.

    Sections:
      - Header: key inputs
      - Summary
      - Basic Calculations
      - Bridge & End Debt (with a warning when the solver did not converge)
      - Final Metrics
      - Move Strategies (when outcomes are passed)
      - Calculation Trace (optional)
    """
    parts = [
        _render_header(inputs, title),
        _render_summary(results),
        _render_basic(results),
        _render_solver(results),
        _render_metrics(results),
        _render_strategies(strategies or []),
        _render_trace(results) if include_trace else "",
    ]
    return "\n".join(part for part in parts if part).strip() + "\n"


def write_report(
    path: str,
    inputs: BridgingInputs,
    results: BridgingResults,
    *,
    include_trace: bool = True,
    strategies: list[StrategyOutcome] | None = None,
) -> None:
    """Convenience helper to write the generated report to disk."""
    md = generate_report(inputs, results, include_trace=include_trace, strategies=strategies)
    with open(path, "w", encoding="utf-8") as f:
        f.write(md)
