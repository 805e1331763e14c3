# bridging/core/finance/metrics.py

from __future__ import annotations

import math

from bridging.schemas.models import BasicCalculations, BridgingInputs, FinalMetrics, IterativeCalculations

from .trace import CalculationTrace, fmt_currency as _c, fmt_ratio as _r

STAGE = "final"


def _ratio(n: float, d: float) -> float:
    """Plain float division that yields inf/nan for a zero denominator instead of raising."""
    if d == 0:
        if n == 0 or math.isnan(n):
            return math.nan
        return math.copysign(math.inf, n)
    return n / d


def calculate_final_metrics(
    inputs: BridgingInputs,
    basic: BasicCalculations,
    it: IterativeCalculations,
    trace: CalculationTrace | None = None,
) -> FinalMetrics:
    """Shortfall, cash required, LVRs and the balance check from the solver state."""
    t = trace or CalculationTrace(enabled=False)

    # > 0 means the required peak debt exceeds what the caps allow
    shortfall = basic.peak_debt_before_cap + it.fcap + it.assessed_icap - it.peak_debt_including_icap
    t.add(
        STAGE,
        "Shortfall",
        shortfall,
        detail=(
            f"{_c(basic.peak_debt_before_cap)} + {_c(it.fcap)} (FCAP) + {_c(it.assessed_icap)} (ICAP)"
            f" - {_c(it.peak_debt_including_icap)} = {_c(shortfall)}"
        ),
    )

    # Upfront cash for anything not capitalised. The two bridging-fee terms are
    # mutually exclusive by the sign of end debt.
    cash_items: list[tuple[str, float]] = []
    if inputs.pg_included and not inputs.pg_fee_capitalised:
        cash_items.append(("PG fee (not capitalised)", inputs.pg_fee_amount))
    if not inputs.purchase_costs_capitalised:
        cash_items.append(("Purchase costs (not capitalised)", basic.purchase_costs_amount))
    if it.end_debt == 0 and not inputs.bridging_fees_capitalised:
        cash_items.append(
            ("Bridging fees (no end debt, not capitalised)", inputs.bridging_fees_no_end_debt_percent / 100 * it.bridge_debt)
        )
    if it.end_debt > 0 and not inputs.bridging_fees_capitalised:
        cash_items.append(("Bridging fees (with end debt, not capitalised)", inputs.bridging_fees_end_debt_amount))

    for label, amount in cash_items:
        t.add(STAGE, label, amount)
    additional_cash_required = sum((amount for _, amount in cash_items), 0.0)
    t.add(STAGE, "Additional cash required", additional_cash_required)

    peak_debt_lvr_excl_icap = _ratio(it.bridge_debt + it.end_debt, basic.peak_shaded_valuation)
    t.add(
        STAGE,
        "Peak debt LVR (excl. ICAP)",
        peak_debt_lvr_excl_icap,
        detail=(
            f"({_c(it.bridge_debt)} + {_c(it.end_debt)}) / {_c(basic.peak_shaded_valuation)}"
            f" = {_r(peak_debt_lvr_excl_icap)}"
        ),
    )

    peak_debt_lvr_incl_icap = _ratio(it.peak_debt_including_icap, basic.peak_shaded_valuation)
    t.add(
        STAGE,
        "Peak debt LVR (incl. ICAP)",
        peak_debt_lvr_incl_icap,
        detail=(
            f"{_c(it.peak_debt_including_icap)} / {_c(basic.peak_shaded_valuation)} = {_r(peak_debt_lvr_incl_icap)}"
        ),
    )

    # new_property_value == 0 is not guarded: the ratio degrades to nan/inf
    end_debt_lvr = _ratio(it.end_debt, inputs.new_property_value)
    t.add(
        STAGE,
        "End debt LVR",
        end_debt_lvr,
        detail=f"{_c(it.end_debt)} / {_c(inputs.new_property_value)} = {_r(end_debt_lvr)}",
    )

    check_value = it.end_debt + it.bridge_debt_excluding_fcap - basic.peak_debt_before_cap + shortfall
    t.add(STAGE, "Check value", check_value, detail=f"{check_value:.6f} (should be ≈ 0)")

    return FinalMetrics(
        shortfall=shortfall,
        additional_cash_required=additional_cash_required,
        peak_debt_lvr_excl_icap=peak_debt_lvr_excl_icap,
        peak_debt_lvr_incl_icap=peak_debt_lvr_incl_icap,
        end_debt_lvr=end_debt_lvr,
        check_value=check_value,
    )
