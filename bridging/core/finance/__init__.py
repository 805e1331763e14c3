# bridging/core/finance/__init__.py

from .basic import calculate_basic_values
from .engine import BridgingCalculationEngine, calculate_bridging
from .interest import capitalised_interest, monthly_payment, monthly_rate
from .metrics import calculate_final_metrics
from .solver import bridge_debt_candidates, bridge_debt_components, solve_bridge_and_end_debt, solve_iteration
from .trace import CalculationTrace

__all__ = [
    "BridgingCalculationEngine",
    "calculate_bridging",
    "calculate_basic_values",
    "solve_bridge_and_end_debt",
    "solve_iteration",
    "bridge_debt_candidates",
    "bridge_debt_components",
    "calculate_final_metrics",
    "capitalised_interest",
    "monthly_payment",
    "monthly_rate",
    "CalculationTrace",
]
