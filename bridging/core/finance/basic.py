# bridging/core/finance/basic.py

from __future__ import annotations

from bridging.schemas.models import BasicCalculations, BridgingInputs

from .trace import CalculationTrace, fmt_currency as _c, fmt_pct as _p, yes_no

STAGE = "basic"


def calculate_basic_values(inputs: BridgingInputs, trace: CalculationTrace | None = None) -> BasicCalculations:
    """
    Non-iterative values derived once per calculation.

    Order only matters for the trace; every formula depends on inputs alone
    (or on values computed above it).
    """
    t = trace or CalculationTrace(enabled=False)
    i = inputs

    # Existing property
    selling_costs_amount = i.existing_property_value * i.selling_costs_percent / 100
    t.add(
        STAGE,
        "Selling costs amount",
        selling_costs_amount,
        detail=f"{_p(i.selling_costs_percent)} × {_c(i.existing_property_value)} = {_c(selling_costs_amount)}",
    )

    existing_property_equity = i.existing_property_value * i.peak_debt_max_lvr_with_cos / 100 - i.existing_debt
    t.add(
        STAGE,
        "Existing property equity",
        existing_property_equity,
        detail=(
            f"{_c(i.existing_property_value)} × {_p(i.peak_debt_max_lvr_with_cos)} - {_c(i.existing_debt)}"
            f" = {_c(existing_property_equity)}"
        ),
    )

    shaded_valuation = i.existing_property_value * (1 - i.existing_property_valuation_shading / 100)
    t.add(
        STAGE,
        "Shaded valuation",
        shaded_valuation,
        detail=(
            f"{_c(i.existing_property_value)} × (1 - {_p(i.existing_property_valuation_shading)})"
            f" = {_c(shaded_valuation)}"
        ),
    )

    shaded_net_sales_proceeds = shaded_valuation - selling_costs_amount - i.sales_proceeds_to_retain
    t.add(
        STAGE,
        "Shaded net sales proceeds",
        shaded_net_sales_proceeds,
        detail=(
            f"{_c(shaded_valuation)} - {_c(selling_costs_amount)} - {_c(i.sales_proceeds_to_retain)}"
            f" = {_c(shaded_net_sales_proceeds)}"
        ),
    )

    # New property
    purchase_costs_amount = i.new_property_value * i.purchase_costs_percent / 100
    t.add(
        STAGE,
        "Purchase costs amount",
        purchase_costs_amount,
        detail=f"{_p(i.purchase_costs_percent)} × {_c(i.new_property_value)} = {_c(purchase_costs_amount)}",
    )
    t.add(STAGE, "Purchase costs capitalised", i.purchase_costs_capitalised)

    capitalised_purchase_costs = purchase_costs_amount if i.purchase_costs_capitalised else 0.0
    capitalised_pg_fee = i.pg_fee_amount if (i.pg_included and i.pg_fee_capitalised) else 0.0
    additional_funds_required = (
        i.new_property_value + capitalised_purchase_costs + i.additional_borrowings - i.savings + capitalised_pg_fee
    )
    t.add(
        STAGE,
        "Additional funds required",
        additional_funds_required,
        detail=(
            f"{_c(i.new_property_value)} + {_c(capitalised_purchase_costs)} (purchase costs)"
            f" + {_c(i.additional_borrowings)} (borrowings) - {_c(i.savings)} (savings)"
            f" + {_c(capitalised_pg_fee)} (PG fee) = {_c(additional_funds_required)}"
        ),
    )

    peak_debt_before_cap = additional_funds_required + i.existing_debt
    t.add(
        STAGE,
        "Peak debt (before cap)",
        peak_debt_before_cap,
        detail=f"{_c(additional_funds_required)} + {_c(i.existing_debt)} = {_c(peak_debt_before_cap)}",
    )

    peak_shaded_valuation = i.new_property_value + shaded_valuation
    t.add(
        STAGE,
        "Peak shaded valuation",
        peak_shaded_valuation,
        detail=f"{_c(i.new_property_value)} + {_c(shaded_valuation)} = {_c(peak_shaded_valuation)}",
    )

    # Max peak debt: LVR depends on whether the existing property is under contract
    lvr_to_use = i.peak_debt_max_lvr_with_cos if i.contract_of_sale_provided else i.peak_debt_max_lvr_without_cos
    t.add(STAGE, "Contract of sale provided", yes_no(i.contract_of_sale_provided))
    t.add(STAGE, "LVR to use", lvr_to_use, detail=_p(lvr_to_use))

    lvr_limit = peak_shaded_valuation * lvr_to_use / 100
    max_peak_debt_before_cap = min(lvr_limit, i.maximum_loan_amount)
    t.add(
        STAGE,
        "Max peak debt (before cap)",
        max_peak_debt_before_cap,
        detail=f"min({_c(lvr_limit)}, {_c(i.maximum_loan_amount)}) = {_c(max_peak_debt_before_cap)}",
    )

    return BasicCalculations(
        selling_costs_amount=selling_costs_amount,
        existing_property_equity=existing_property_equity,
        shaded_valuation=shaded_valuation,
        shaded_net_sales_proceeds=shaded_net_sales_proceeds,
        purchase_costs_amount=purchase_costs_amount,
        additional_funds_required=additional_funds_required,
        peak_debt_before_cap=peak_debt_before_cap,
        peak_shaded_valuation=peak_shaded_valuation,
        lvr_to_use=lvr_to_use,
        max_peak_debt_before_cap=max_peak_debt_before_cap,
    )
