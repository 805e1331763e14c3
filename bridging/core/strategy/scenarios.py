# bridging/core/strategy/scenarios.py
"""
Move strategies compared side by side.

  BBYS  buy before you sell   - bridge the gap with a bridging loan (uses the engine)
  SBYB  sell before you buy   - sale proceeds fund the purchase, no bridging
  KB    keep both             - borrow the whole purchase, keep the existing debt
  SS    settle same day       - same cash position as SBYB

Monthly repayments are positive amounts on the ongoing loan (0 when no loan).
"""

from __future__ import annotations

from collections.abc import Callable

from bridging.core.finance.engine import BridgingCalculationEngine
from bridging.core.finance.interest import monthly_payment
from bridging.schemas.models import BridgingInputs, StrategyCode, StrategyInputs, StrategyOutcome

# Bridging product presets used when modelling buy-before-you-sell
BBYS_PRESETS: dict[str, float | bool | str] = {
    "bridging_repayment_type": "Interest Only",
    "bridging_fees_capitalised": True,
    "bridging_fees_no_end_debt_percent": 0.8,
    "bridging_fees_end_debt_amount": 5000.0,
    "purchase_costs_capitalised": True,
    "existing_property_valuation_shading": 10.0,
    "peak_debt_max_lvr_with_cos": 80.0,
    "peak_debt_max_lvr_without_cos": 70.0,
    "new_property_max_lvr": 80.0,
    "maximum_loan_amount": 5_000_000.0,
    "minimum_loan_amount": 50_000.0,
    "bridge_debt_servicing_buffer": 2.0,
}


def _net_sale_proceeds(si: StrategyInputs) -> float:
    selling_costs = si.current_property_value * si.selling_costs_percent / 100
    return si.current_property_value - selling_costs - si.existing_debt


def _repayment(si: StrategyInputs, end_debt: float) -> float:
    return monthly_payment(end_debt, si.end_loan_rate, si.loan_term) if end_debt > 0 else 0.0


def strategy_inputs_from(inputs: BridgingInputs, **overrides: float | int) -> StrategyInputs:
    """Strategy inputs sharing the property values, costs and term of a bridging calculation."""
    data: dict[str, float | int] = {
        "current_property_value": inputs.existing_property_value,
        "new_property_value": inputs.new_property_value,
        "existing_debt": inputs.existing_debt,
        "savings": inputs.savings,
        "time_between": inputs.bridging_term_months,
        "selling_costs_percent": inputs.selling_costs_percent,
        "purchase_costs_percent": inputs.purchase_costs_percent,
        "bridging_interest_rate": inputs.bridging_interest_rate,
    }
    data.update(overrides)
    return StrategyInputs.model_validate(data)


def bbys_bridging_inputs(si: StrategyInputs) -> BridgingInputs:
    """Engine inputs for buy-before-you-sell from the simplified strategy inputs."""
    return BridgingInputs.model_validate(
        {
            "existing_property_value": si.current_property_value,
            "existing_debt": si.existing_debt,
            "selling_costs_percent": si.selling_costs_percent,
            "new_property_value": si.new_property_value,
            "purchase_costs_percent": si.purchase_costs_percent,
            "additional_borrowings": 0.0,
            "savings": si.savings,
            "contract_of_sale_provided": False,
            "bridging_term_months": si.time_between,
            "bridging_interest_rate": si.bridging_interest_rate,
            "pg_included": False,
            "pg_fee_capitalised": False,
            "pg_fee_amount": 0.0,
            "sales_proceeds_to_retain": 0.0,
            **BBYS_PRESETS,
        }
    )


def calculate_bbys(si: StrategyInputs, engine: BridgingCalculationEngine | None = None) -> StrategyOutcome:
    results = (engine or BridgingCalculationEngine(trace_enabled=False)).calculate(bbys_bridging_inputs(si))
    end_debt = max(0.0, results.bridge_debt + results.fcap - _net_sale_proceeds(si))
    return StrategyOutcome(
        strategy="BBYS",
        end_debt=end_debt,
        monthly_repayment=_repayment(si, end_debt),
        bridging_loan_amount=results.bridge_debt,
        bridging_loan_costs=results.fcap,
        no_loan_required=end_debt <= 0,
    )


def calculate_sbyb(si: StrategyInputs) -> StrategyOutcome:
    purchase_costs = si.new_property_value * si.purchase_costs_percent / 100
    end_debt = max(0.0, si.new_property_value + purchase_costs - _net_sale_proceeds(si) - si.savings)
    return StrategyOutcome(
        strategy="SBYB",
        end_debt=end_debt,
        monthly_repayment=_repayment(si, end_debt),
        no_loan_required=end_debt <= 0,
    )


def calculate_kb(si: StrategyInputs) -> StrategyOutcome:
    purchase_costs = si.new_property_value * si.purchase_costs_percent / 100
    end_debt = si.existing_debt + si.new_property_value + purchase_costs - si.savings
    return StrategyOutcome(
        strategy="KB",
        end_debt=end_debt,
        monthly_repayment=_repayment(si, end_debt),
        no_loan_required=False,
    )


def calculate_ss(si: StrategyInputs) -> StrategyOutcome:
    return calculate_sbyb(si).model_copy(update={"strategy": "SS"})


_CALCULATORS: dict[str, Callable[[StrategyInputs], StrategyOutcome]] = {
    "BBYS": calculate_bbys,
    "SBYB": calculate_sbyb,
    "KB": calculate_kb,
    "SS": calculate_ss,
}


def calculate_scenario(strategy: StrategyCode | str, si: StrategyInputs) -> StrategyOutcome:
    """Route to the calculator for a strategy code; unknown codes raise ValueError."""
    try:
        fn = _CALCULATORS[strategy]
    except KeyError:
        raise ValueError(f"Unknown strategy: {strategy!r}") from None
    return fn(si)


def compare_scenarios(si: StrategyInputs) -> list[StrategyOutcome]:
    """All four strategies for the same inputs, in BBYS, SBYB, KB, SS order."""
    return [fn(si) for fn in _CALCULATORS.values()]
