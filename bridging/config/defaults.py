# bridging/config/defaults.py
"""
Default configuration for the bridging calculator.

These values are used when no user input is provided, or when a form is reset.
Callers may override any field per calculation through BridgingInputs.
"""

from __future__ import annotations

from typing import Any

from bridging.schemas.models import BridgingInputs, CalculationConfig

DEFAULT_CONFIG = CalculationConfig()

DEFAULT_TERM_MONTHS = 6

# Timeline option -> approximate months until it happens
_TIMELINE_MONTHS: dict[str, int] = {
    "already_sold": 0,
    "already_bought": 0,
    "next_1_month": 1,
    "next_3_months": 3,
    "next_6_months": 6,
    "next_9_months": 9,
    "next_12_months": 12,
    "not_sure": 6,
}


def default_bridging_inputs(config: CalculationConfig = DEFAULT_CONFIG, **overrides: Any) -> BridgingInputs:
    """
    Baseline inputs with every assumption taken from config.

    Property values, debts, borrowings and savings start at zero; they are
    populated from collected data (see bridging.inputs.mapper).
    """
    d = config.defaults
    data: dict[str, Any] = {
        "existing_property_value": 0.0,
        "existing_debt": 0.0,
        "new_property_value": 0.0,
        "additional_borrowings": 0.0,
        "savings": 0.0,
        "selling_costs_percent": d.selling_costs_percent,
        "contract_of_sale_provided": False,
        "sales_proceeds_to_retain": 0.0,
        "pg_included": False,
        "pg_fee_amount": 0.0,
        "pg_fee_capitalised": False,
        "purchase_costs_percent": d.purchase_costs_percent,
        "purchase_costs_capitalised": True,
        "bridging_term_months": DEFAULT_TERM_MONTHS,
        "bridging_repayment_type": config.repayment_types.icap,
        "bridging_interest_rate": d.bridging_interest_rate,
        "bridging_fees_no_end_debt_percent": d.bridging_fees_no_end_debt_percent,
        "bridging_fees_end_debt_amount": d.bridging_fees_end_debt_amount,
        "bridging_fees_capitalised": True,
        "peak_debt_max_lvr_with_cos": d.peak_debt_max_lvr_with_cos,
        "peak_debt_max_lvr_without_cos": d.peak_debt_max_lvr_without_cos,
        "existing_property_valuation_shading": d.existing_property_valuation_shading,
        "new_property_max_lvr": d.new_property_max_lvr,
        "bridge_debt_servicing_buffer": d.bridge_debt_servicing_buffer,
        "minimum_loan_amount": d.minimum_loan_amount,
        "maximum_loan_amount": d.maximum_loan_amount,
    }
    data.update(overrides)
    return BridgingInputs.model_validate(data)


def estimate_bridging_term(
    preferred_time_to_sell: str | None = None,
    preferred_time_to_buy: str | None = None,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> int:
    """
    Estimate the bridging term (months) from the borrower's sell/buy timelines.

    Rules:
      - Both already settled → 1 month.
      - Already sold → buy timeline + 1 month settlement buffer.
      - Already bought → sell timeline + 1 month settlement buffer.
      - Otherwise → gap between the two timelines + 2 months buffer.
    The result is clamped to the configured term bounds.
    """
    # Unknown options and zero-month options both fall back to the default term
    sell_months = _TIMELINE_MONTHS.get(preferred_time_to_sell or "not_sure") or DEFAULT_TERM_MONTHS
    buy_months = _TIMELINE_MONTHS.get(preferred_time_to_buy or "not_sure") or DEFAULT_TERM_MONTHS

    if preferred_time_to_sell == "already_sold" and preferred_time_to_buy == "already_bought":
        term = 1
    elif preferred_time_to_sell == "already_sold":
        term = max(1, buy_months + 1)
    elif preferred_time_to_buy == "already_bought":
        term = max(1, sell_months + 1)
    else:
        term = max(1, abs(buy_months - sell_months) + 2)

    bounds = config.validation
    return min(bounds.bridging_term_max, max(bounds.bridging_term_min, term))
