# main.py
"""
Entry Point: Bridging Finance Calculator

Purpose
-------
Run one bridging calculation end-to-end and emit a Markdown report:
  1) Load inputs (sample scenario or --config JSON, legacy or structured shape).
  2) Validate at the form level (warn, or refuse with --strict).
  3) Run the bridging engine (three stages + fixed-point solver).
  4) Optionally compare move strategies (--strategy BBYS|SBYB|KB|SS|all).
  5) Write the report, with the calculation trace unless --no-trace.

Exit codes: 0 success, 2 invalid inputs.

Usage
-----
    python main.py
    python main.py --config data/sample/bridging_inputs.json --out report.md --strategy all --strict
"""

from __future__ import annotations

import argparse
import logging

from bridging.agents.bridging_calculator import InputValidationError, run_bridging_calculation
from bridging.config.defaults import DEFAULT_CONFIG, default_bridging_inputs
from bridging.core.strategy.scenarios import calculate_scenario, compare_scenarios, strategy_inputs_from
from bridging.inputs.inputs import AppInputs, InputsLoader, RunOptions
from bridging.logging_config import configure_logging
from bridging.reports.generator import write_report
from bridging.schemas.models import BridgingInputs, StrategyOutcome

logger = logging.getLogger("bridging.cli")


def build_sample_inputs() -> BridgingInputs:
    """Baseline scenario: $1M home with $400k debt, buying at $1.5M with ICAP over 12 months."""
    return default_bridging_inputs(
        existing_property_value=1_000_000.0,
        existing_debt=400_000.0,
        selling_costs_percent=0.0,
        new_property_value=1_500_000.0,
        purchase_costs_percent=0.0,
        additional_borrowings=50_000.0,
        savings=300_000.0,
        bridging_term_months=12,
        bridging_interest_rate=7.0,
        pg_fee_amount=7_500.0,
        pg_fee_capitalised=True,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Bridging Finance Calculator")
    p.add_argument("--config", type=str, default=None, help="Path to JSON inputs (BridgingInputs or AppInputs).")
    p.add_argument("--out", type=str, default=None, help="Output Markdown path (overrides config).")
    p.add_argument(
        "--trace",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include the calculation trace in the report (overrides config).",
    )
    p.add_argument(
        "--strategy",
        type=str,
        default=None,
        choices=["BBYS", "SBYB", "KB", "SS", "all"],
        help="Also compare move strategies.",
    )
    p.add_argument("--strict", action="store_true", default=None, help="Refuse to calculate invalid inputs.")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG shows every trace step).")
    return p.parse_args(argv)


def _strategies(cfg: AppInputs) -> list[StrategyOutcome]:
    choice = cfg.run.strategy
    if choice is None:
        return []
    si = strategy_inputs_from(cfg.inputs)
    if choice == "all":
        return compare_scenarios(si)
    return [calculate_scenario(choice, si)]


def main(argv: list[str] | None = None) -> int:
    """Run a calculation and write bridging_report.md (or the chosen output)."""
    args = parse_args(argv)
    loader = InputsLoader()

    try:
        if args.config:
            cfg = loader.load(args.config)
        else:
            cfg = AppInputs(inputs=build_sample_inputs(), config=DEFAULT_CONFIG, run=RunOptions())
    except (FileNotFoundError, ValueError) as e:
        configure_logging(args.log_level or "INFO")
        logger.error("could not load inputs: %s", e)
        return 2

    cfg = loader.with_overrides(
        cfg,
        out=args.out,
        trace=args.trace,
        strategy=args.strategy,
        strict=args.strict,
        log_level=args.log_level,
    )
    configure_logging(cfg.run.log_level)
    print("Running Bridging Finance Calculator...")

    try:
        results = run_bridging_calculation(cfg.inputs, cfg.config, strict=cfg.run.strict, trace=cfg.run.trace)
    except InputValidationError as e:
        logger.error("%s", e)
        return 2

    write_report(cfg.run.out, cfg.inputs, results, include_trace=cfg.run.trace, strategies=_strategies(cfg))

    print(f"Report written to {cfg.run.out}")
    print(f"Bridge debt: ${results.bridge_debt:,.2f}  End debt: ${results.end_debt:,.2f}")
    if not results.converged:
        print(f"WARNING: solver did not converge after {results.iterations} iterations")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
