# bridging/core/finance/interest.py

from __future__ import annotations


def monthly_rate(annual_rate_pct: float, buffer_pct: float = 0.0) -> float:
    """Monthly rate as a fraction from an annual percentage plus a servicing buffer (both in percent)."""
    return (annual_rate_pct / 100.0 + buffer_pct / 100.0) / 12.0


def compound_factor(rate: float, months: int) -> float:
    """(1 + rate)^months, monthly compounding."""
    return (1.0 + rate) ** months


def capitalised_interest(principal: float, annual_rate_pct: float, buffer_pct: float, months: int) -> float:
    """
    Interest capitalised onto a balance over a term with monthly compounding.

        ICAP = P * (1 + r)^n - P,   r = (rate% + buffer%) / 100 / 12

    Args:
        principal: Balance the interest accrues on.
        annual_rate_pct: Annual interest rate in percent (7.5 == 7.5%).
        buffer_pct: Assessment buffer added to the rate, in percent.
        months: Term in months.

    Returns:
        Accrued interest over the term. No sign checks: a negative principal
        yields a negative amount.
    """
    return principal * compound_factor(monthly_rate(annual_rate_pct, buffer_pct), months) - principal


def monthly_payment(principal: float, annual_rate_pct: float, years: int) -> float:
    """
    Constant monthly payment for a fully amortising loan.

    Formula (standard annuity):
        PMT = [ P * r * (1 + r)^n ] / [ (1 + r)^n - 1 ]

    Where r is the monthly rate (annual_rate_pct / 100 / 12) and n = years * 12.
    Returns the payment as a positive amount; 0.0 for a non-positive principal.
    """
    if principal <= 0:
        return 0.0
    if years <= 0:
        raise ValueError("Loan term must be > 0 years for a fully-amortising payment.")

    r = monthly_rate(annual_rate_pct)
    n = years * 12

    if r == 0:
        return principal / n

    growth = compound_factor(r, n)
    return principal * r * growth / (growth - 1)
