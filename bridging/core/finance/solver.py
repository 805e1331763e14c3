# bridging/core/finance/solver.py
"""
Fixed-point solver for bridge debt and end debt.

Bridge debt depends on whether end debt is zero (which fee formula applies,
and whether the minimum-loan guard kicks in), while end debt depends on the
bridge debt's fee and capitalised-interest components. The solver starts from
end_debt = 0 and re-estimates until both the end-debt delta and the balance
check fall within tolerance, or the iteration cap is hit.

Each iteration is a pure function of (inputs, basic values, end debt in);
solve_iteration() returns a typed IterationState so any single step can be
reproduced and tested in isolation.
"""

from __future__ import annotations

from bridging.schemas.models import (
    BasicCalculations,
    BridgeDebtCandidates,
    BridgeDebtComponents,
    BridgingInputs,
    CalculationConfig,
    IterationState,
    IterativeCalculations,
)

from .interest import capitalised_interest, compound_factor, monthly_rate
from .trace import CalculationTrace, fmt_currency as _c, fmt_pct as _p

STAGE = "iterative"


def bridge_debt_candidates(
    inputs: BridgingInputs,
    basic: BasicCalculations,
    end_debt: float,
    config: CalculationConfig,
) -> BridgeDebtCandidates:
    """
    The three expressions whose minimum is the bridge debt.

      part1: capped peak debt, plus the percentage fee on it when fees are capitalised.
      part2: shaded net sale proceeds.
      part3: minimum-loan guard. Active only when part1 exceeds the sale proceeds
             and the current end debt is a sliver in (0, minimum_loan_amount];
             it pulls the bridge debt down so the resulting end debt either
             clears the minimum loan or disappears. Otherwise the infinity proxy.
    """
    capped = min(basic.peak_debt_before_cap, basic.max_peak_debt_before_cap)
    pct_fee = capped * inputs.bridging_fees_no_end_debt_percent / 100 if inputs.bridging_fees_capitalised else 0.0
    part1 = capped + pct_fee
    part2 = basic.shaded_net_sales_proceeds

    part3_active = part1 > basic.shaded_net_sales_proceeds and 0 < end_debt <= inputs.minimum_loan_amount
    if part3_active:
        fixed_fee = inputs.bridging_fees_end_debt_amount if inputs.bridging_fees_capitalised else 0.0
        part3 = (
            min(basic.shaded_net_sales_proceeds, basic.peak_debt_before_cap, basic.max_peak_debt_before_cap)
            + fixed_fee
            - inputs.minimum_loan_amount
        )
    else:
        part3 = config.solver.infinity_proxy

    return BridgeDebtCandidates(part1=part1, part2=part2, part3=part3, part3_active=part3_active)


def bridge_debt_components(
    inputs: BridgingInputs,
    bridge_debt: float,
    end_debt: float,
    config: CalculationConfig,
) -> BridgeDebtComponents:
    """
    Split bridge debt into its capitalised-fee part (FCAP) and compute assessed ICAP.

    Fee rules (fees capitalised):
      - end debt > 0: fixed end-debt fee.
      - end debt == 0: percentage fee embedded in the bridge debt itself,
        excl = bridge / (1 + pct/100).
    Otherwise nothing is capitalised.
    """
    if end_debt > 0 and inputs.bridging_fees_capitalised:
        fcap = inputs.bridging_fees_end_debt_amount
        excl = bridge_debt - fcap
    elif end_debt == 0 and inputs.bridging_fees_capitalised:
        excl = bridge_debt / (1 + inputs.bridging_fees_no_end_debt_percent / 100)
        fcap = bridge_debt - excl
    else:
        excl = bridge_debt
        fcap = 0.0

    if inputs.bridging_repayment_type == config.repayment_types.icap:
        icap = capitalised_interest(
            bridge_debt,
            inputs.bridging_interest_rate,
            inputs.bridge_debt_servicing_buffer,
            inputs.bridging_term_months,
        )
    else:
        icap = 0.0

    return BridgeDebtComponents(bridge_debt_excluding_fcap=excl, fcap=fcap, assessed_icap=icap)


def solve_iteration(
    inputs: BridgingInputs,
    basic: BasicCalculations,
    end_debt: float,
    config: CalculationConfig,
    iteration: int = 1,
) -> IterationState:
    """Run one solver step from the given end debt and report everything it produced."""
    tol = config.solver.convergence_tolerance

    candidates = bridge_debt_candidates(inputs, basic, end_debt, config)
    bridge_debt = candidates.bridge_debt
    components = bridge_debt_components(inputs, bridge_debt, end_debt, config)
    fcap = components.fcap
    icap = components.assessed_icap

    uncapped_peak = basic.peak_debt_before_cap + fcap + icap
    peak_incl_icap = min(inputs.maximum_loan_amount, uncapped_peak, basic.max_peak_debt_before_cap)

    # At or below tolerance counts as no end debt; a near-zero remainder must
    # not be inflated up to the minimum loan amount.
    end_debt_calc = peak_incl_icap - bridge_debt - icap
    if end_debt_calc > tol:
        end_debt_new = min(
            inputs.new_property_value * inputs.new_property_max_lvr / 100,
            inputs.maximum_loan_amount,
            max(end_debt_calc, inputs.minimum_loan_amount),
        )
    else:
        end_debt_new = 0.0

    check_value = (
        end_debt_new
        + components.bridge_debt_excluding_fcap
        - basic.peak_debt_before_cap
        + (uncapped_peak - peak_incl_icap)
    )
    converged = abs(end_debt_new - end_debt) < tol and abs(check_value) < tol

    return IterationState(
        iteration=iteration,
        end_debt=end_debt,
        candidates=candidates,
        bridge_debt=bridge_debt,
        components=components,
        peak_debt_including_icap=peak_incl_icap,
        end_debt_calc=end_debt_calc,
        end_debt_new=end_debt_new,
        check_value=check_value,
        converged=converged,
    )


def _trace_iteration(t: CalculationTrace, inputs: BridgingInputs, state: IterationState, config: CalculationConfig) -> None:
    n = state.iteration
    cand = state.candidates
    comp = state.components
    t.add(STAGE, "Starting end debt", state.end_debt, iteration=n)
    t.add(STAGE, "Bridge debt part 1", cand.part1, iteration=n)
    t.add(STAGE, "Bridge debt part 2", cand.part2, iteration=n)
    t.add(STAGE, "Bridge debt part 3 condition", cand.part3_active, iteration=n)
    t.add(STAGE, "Bridge debt part 3", cand.part3, iteration=n)
    t.add(STAGE, "Bridge debt", state.bridge_debt, iteration=n)

    if state.end_debt > 0 and inputs.bridging_fees_capitalised:
        fee_note = f"fixed amount (end debt exists): {_c(state.bridge_debt)} - {_c(comp.fcap)}"
    elif state.end_debt == 0 and inputs.bridging_fees_capitalised:
        fee_note = (
            f"percentage (no end debt): {_c(state.bridge_debt)} / "
            f"(1 + {_p(inputs.bridging_fees_no_end_debt_percent)})"
        )
    else:
        fee_note = "no fees capitalised"
    t.add(
        STAGE,
        "Bridge debt excl. FCAP",
        comp.bridge_debt_excluding_fcap,
        detail=f"{_c(comp.bridge_debt_excluding_fcap)} ({fee_note})",
        iteration=n,
    )
    t.add(STAGE, "FCAP", comp.fcap, iteration=n)

    if inputs.bridging_repayment_type == config.repayment_types.icap:
        rate = monthly_rate(inputs.bridging_interest_rate, inputs.bridge_debt_servicing_buffer)
        factor = compound_factor(rate, inputs.bridging_term_months)
        t.add(
            STAGE,
            "Assessed ICAP",
            comp.assessed_icap,
            detail=(
                f"{_c(state.bridge_debt)} × {factor:.6f} - {_c(state.bridge_debt)} = {_c(comp.assessed_icap)}"
                f" (monthly rate {rate * 100:.4f}%, {inputs.bridging_term_months} months)"
            ),
            iteration=n,
        )
    else:
        t.add(STAGE, "Assessed ICAP", 0.0, detail="not applicable (Interest Only)", iteration=n)

    t.add(STAGE, "Peak debt incl. ICAP", state.peak_debt_including_icap, iteration=n)
    t.add(STAGE, "End debt calc", state.end_debt_calc, detail=f"{_c(state.end_debt_calc)} (raw: {state.end_debt_calc!r})", iteration=n)
    t.add(STAGE, "End debt new", state.end_debt_new, iteration=n)
    t.add(STAGE, "Check value", state.check_value, detail=f"{state.check_value:.6f}", iteration=n)


def solve_bridge_and_end_debt(
    inputs: BridgingInputs,
    basic: BasicCalculations,
    config: CalculationConfig,
    trace: CalculationTrace | None = None,
) -> IterativeCalculations:
    """
    Iterate solve_iteration() from end_debt = 0 until converged or max_iterations.

    Non-convergence is not an error: the last iterate is returned with
    converged=False and the iteration count.
    """
    t = trace or CalculationTrace(enabled=False)
    solver = config.solver

    t.add(STAGE, "Peak debt (before cap)", basic.peak_debt_before_cap)
    t.add(STAGE, "Max peak debt", basic.max_peak_debt_before_cap)
    t.add(STAGE, "Shaded net sales proceeds", basic.shaded_net_sales_proceeds)
    t.add(STAGE, "Bridging term", f"{inputs.bridging_term_months} months")
    t.add(STAGE, "Repayment type", inputs.bridging_repayment_type)
    t.add(STAGE, "Interest rate", inputs.bridging_interest_rate, detail=_p(inputs.bridging_interest_rate))
    t.add(STAGE, "Convergence tolerance", solver.convergence_tolerance)

    end_debt = 0.0
    history: list[IterationState] = []
    state: IterationState | None = None

    for n in range(1, solver.max_iterations + 1):
        state = solve_iteration(inputs, basic, end_debt, config, iteration=n)
        history.append(state)
        _trace_iteration(t, inputs, state, config)
        end_debt = state.end_debt_new
        if state.converged:
            break

    if state is None:  # pragma: no cover - max_iterations >= 1 is enforced by SolverSettings
        raise RuntimeError("solver ran zero iterations")

    if state.converged:
        t.add(STAGE, "Converged", f"after {state.iteration} iterations")
    else:
        t.add(STAGE, "WARNING", f"did not converge after {solver.max_iterations} iterations")

    return IterativeCalculations(
        bridge_debt=state.bridge_debt,
        bridge_debt_excluding_fcap=state.components.bridge_debt_excluding_fcap,
        fcap=state.components.fcap,
        assessed_icap=state.components.assessed_icap,
        peak_debt_including_icap=state.peak_debt_including_icap,
        end_debt=end_debt,
        iterations=state.iteration,
        converged=state.converged,
        history=history,
    )
