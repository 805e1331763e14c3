# bridging/agents/bridging_calculator.py
"""
Bridging Calculator Agent

Purpose
-------
Thin wrapper around the bridging engine for callers (CLI, forms). It applies
form-level validation, then invokes the engine and returns BridgingResults.

Design
------
- The engine is permissive: it calculates whatever it is given. Range checks
  live here so the engine's arithmetic stays unchanged.
- strict=False (default): problems are logged as warnings and the calculation
  still runs.
- strict=True: problems raise InputValidationError before the engine runs.

Public API
----------
validate_inputs(inputs, config) -> list[str]
run_bridging_calculation(inputs, config=None, *, strict=False, trace=True) -> BridgingResults
"""

from __future__ import annotations

import logging

from bridging.config.defaults import DEFAULT_CONFIG
from bridging.core.finance.engine import BridgingCalculationEngine
from bridging.schemas.models import BridgingInputs, BridgingResults, CalculationConfig

logger = logging.getLogger(__name__)

_MONEY_FIELDS = (
    "existing_property_value",
    "existing_debt",
    "sales_proceeds_to_retain",
    "pg_fee_amount",
    "new_property_value",
    "additional_borrowings",
    "savings",
    "bridging_fees_end_debt_amount",
    "minimum_loan_amount",
    "maximum_loan_amount",
)

_PERCENT_FIELDS = (
    "selling_costs_percent",
    "purchase_costs_percent",
    "bridging_interest_rate",
    "bridging_fees_no_end_debt_percent",
    "peak_debt_max_lvr_with_cos",
    "peak_debt_max_lvr_without_cos",
    "existing_property_valuation_shading",
    "new_property_max_lvr",
    "bridge_debt_servicing_buffer",
)


class InputValidationError(ValueError):
    """Form-level validation failed in strict mode."""

    def __init__(self, issues: list[str]) -> None:
        self.issues = issues
        super().__init__("Invalid bridging inputs:\n" + "\n".join(f"- {i}" for i in issues))


def validate_inputs(inputs: BridgingInputs, config: CalculationConfig = DEFAULT_CONFIG) -> list[str]:
    """Return human-readable problems with the inputs; empty when they look sane."""
    issues: list[str] = []
    bounds = config.validation

    term = inputs.bridging_term_months
    if not bounds.bridging_term_min <= term <= bounds.bridging_term_max:
        issues.append(
            f"bridging_term_months must be between {bounds.bridging_term_min} and "
            f"{bounds.bridging_term_max} (got {term})"
        )

    for name in _MONEY_FIELDS:
        value = getattr(inputs, name)
        if value < 0:
            issues.append(f"{name} must not be negative (got {value})")

    for name in _PERCENT_FIELDS:
        value = getattr(inputs, name)
        if value < 0:
            issues.append(f"{name} must not be negative (got {value})")

    # A zero purchase price leaves end_debt_lvr undefined (nan/inf)
    if inputs.new_property_value <= 0:
        issues.append("new_property_value must be greater than 0")

    if inputs.minimum_loan_amount > inputs.maximum_loan_amount:
        issues.append("minimum_loan_amount must not exceed maximum_loan_amount")

    labels = {config.repayment_types.interest_only, config.repayment_types.icap}
    if inputs.bridging_repayment_type not in labels:
        issues.append(f"unknown bridging_repayment_type {inputs.bridging_repayment_type!r}")

    return issues


def run_bridging_calculation(
    inputs: BridgingInputs,
    config: CalculationConfig | None = None,
    *,
    strict: bool = False,
    trace: bool = True,
) -> BridgingResults:
    """
    Validate, then calculate.

    Raises:
        InputValidationError: strict mode only, when validate_inputs() reports problems.
    """
    cfg = config or DEFAULT_CONFIG
    issues = validate_inputs(inputs, cfg)
    if issues:
        if strict:
            raise InputValidationError(issues)
        for issue in issues:
            logger.warning("input check: %s", issue)

    return BridgingCalculationEngine(cfg, trace_enabled=trace).calculate(inputs)
