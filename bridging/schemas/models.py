# bridging/schemas/models.py

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RepaymentType = Literal["Interest Only", "ICAP"]
StrategyCode = Literal["BBYS", "SBYB", "KB", "SS"]
TraceValue = float | str | bool | None


class _Record(BaseModel):
    """
    Immutable base for every calculator record.

    Field names are snake_case; camelCase aliases are accepted on input and
    available on output (model_dump(by_alias=True)) so payloads produced by
    the web form load unchanged.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# =========================
# Calculation config
# =========================


class SolverSettings(_Record):
    """Fixed-point solver knobs."""

    convergence_tolerance: float = Field(0.01, gt=0, description="Absolute tolerance in currency units.")
    max_iterations: int = Field(100, ge=1, description="Hard cap on solver iterations.")
    infinity_proxy: float = Field(
        999_999_999.0, description="Large finite value standing in for 'no limit' in the bridge-debt minimum."
    )


class PolicyDefaults(_Record):
    """Default costs, fees and lending-policy assumptions (percentages are whole numbers, 7.5 == 7.5%)."""

    selling_costs_percent: float = Field(2.5, description="Agent fees and other selling costs.")
    purchase_costs_percent: float = Field(5.5, description="Stamp duty, legal fees and other purchase costs.")
    bridging_interest_rate: float = Field(7.5, description="Annual bridge loan interest rate.")
    bridging_fees_no_end_debt_percent: float = Field(0.75, description="Fee percentage when no end debt remains.")
    bridging_fees_end_debt_amount: float = Field(1500.0, description="Fixed fee when end debt remains.")
    peak_debt_max_lvr_with_cos: float = Field(85.0, description="Max peak-debt LVR with a contract of sale.")
    peak_debt_max_lvr_without_cos: float = Field(80.0, description="Max peak-debt LVR without a contract of sale.")
    existing_property_valuation_shading: float = Field(5.0, description="Conservative discount on the existing valuation.")
    new_property_max_lvr: float = Field(85.0, description="Max LVR for end debt on the new property.")
    bridge_debt_servicing_buffer: float = Field(1.0, description="Rate buffer added when assessing ICAP.")
    minimum_loan_amount: float = Field(100_000.0, description="Minimum allowable loan size.")
    maximum_loan_amount: float = Field(3_000_000.0, description="Maximum allowable loan size.")


class ValidationBounds(_Record):
    """Form-level validation bounds. The engine itself does not enforce these."""

    bridging_term_min: int = Field(1, description="Minimum bridging term in months.")
    bridging_term_max: int = Field(12, description="Maximum bridging term in months.")
    currency_tolerance: float = Field(0.01, description="Tolerance for currency comparisons.")
    percentage_tolerance: float = Field(0.0001, description="Tolerance for ratio comparisons (0.01%).")


class RepaymentTypeLabels(_Record):
    interest_only: Literal["Interest Only"] = "Interest Only"
    icap: Literal["ICAP"] = "ICAP"


class CalculationConfig(_Record):
    """Process-wide configuration supplied at engine construction."""

    solver: SolverSettings = Field(default_factory=SolverSettings)
    defaults: PolicyDefaults = Field(default_factory=PolicyDefaults)
    validation: ValidationBounds = Field(default_factory=ValidationBounds)
    repayment_types: RepaymentTypeLabels = Field(default_factory=RepaymentTypeLabels)


# =========================
# Inputs
# =========================


class BridgingInputs(_Record):
    """
    Loan and property parameters for one calculation.

    No range validation happens here: negative or out-of-range values are
    accepted and flow through the arithmetic. Callers validate at the form
    level (see bridging.agents.bridging_calculator.validate_inputs).
    """

    # Existing property
    existing_property_value: float = Field(..., description="Current value of the property being sold.")
    existing_debt: float = Field(0.0, description="Debt currently secured against the existing property.")
    selling_costs_percent: float = Field(2.5, description="Selling costs as a percentage of the existing value.")
    contract_of_sale_provided: bool = Field(False, description="Whether an exchanged contract of sale exists.")
    sales_proceeds_to_retain: float = Field(0.0, description="Sale proceeds the borrower keeps rather than applying to debt.")

    # Price guarantee
    pg_included: bool = Field(False, description="Whether a price guarantee is included.")
    pg_fee_amount: float = Field(0.0, description="Price guarantee fee.")
    pg_fee_capitalised: bool = Field(False, description="Whether the price guarantee fee is added to the loan.")

    # New property
    new_property_value: float = Field(..., description="Purchase price of the new property.")
    purchase_costs_percent: float = Field(5.5, description="Purchase costs as a percentage of the new value.")
    purchase_costs_capitalised: bool = Field(True, description="Whether purchase costs are added to the loan.")
    additional_borrowings: float = Field(0.0, description="Extra cash borrowed on top of the purchase.")
    savings: float = Field(0.0, description="Borrower savings contributed to the purchase.")

    # Bridging product
    bridging_term_months: int = Field(6, description="Bridging term in months (form-validated 1-12).")
    bridging_repayment_type: RepaymentType = Field("ICAP", description='"ICAP" or "Interest Only".')
    bridging_interest_rate: float = Field(7.5, description="Annual bridge interest rate (percent).")
    bridging_fees_no_end_debt_percent: float = Field(0.75, description="Fee percent when no end debt remains.")
    bridging_fees_end_debt_amount: float = Field(1500.0, description="Fixed fee when end debt remains.")
    bridging_fees_capitalised: bool = Field(True, description="Whether bridging fees are added to the loan.")

    # Policy assumptions
    peak_debt_max_lvr_with_cos: float = Field(85.0, description="Max peak-debt LVR with a contract of sale.")
    peak_debt_max_lvr_without_cos: float = Field(80.0, description="Max peak-debt LVR without a contract of sale.")
    existing_property_valuation_shading: float = Field(5.0, description="Shading applied to the existing valuation.")
    new_property_max_lvr: float = Field(85.0, description="Max end-debt LVR on the new property.")
    bridge_debt_servicing_buffer: float = Field(1.0, description="Rate buffer used in the ICAP assessment.")
    minimum_loan_amount: float = Field(100_000.0, description="Minimum loan size.")
    maximum_loan_amount: float = Field(3_000_000.0, description="Maximum loan size.")


# =========================
# Stage outputs
# =========================


class BasicCalculations(_Record):
    """Stage A: values derived once per call, before the solver runs."""

    selling_costs_amount: float
    existing_property_equity: float
    shaded_valuation: float
    shaded_net_sales_proceeds: float
    purchase_costs_amount: float
    additional_funds_required: float
    peak_debt_before_cap: float
    peak_shaded_valuation: float
    lvr_to_use: float
    max_peak_debt_before_cap: float


class BridgeDebtCandidates(_Record):
    """The three expressions whose minimum is the bridge debt for one iteration."""

    part1: float = Field(..., description="Capped peak debt plus the capitalised percentage fee.")
    part2: float = Field(..., description="Shaded net sale proceeds.")
    part3: float = Field(..., description="Minimum-loan guard, or the infinity proxy when inactive.")
    part3_active: bool = Field(..., description="Whether the minimum-loan guard applied this iteration.")

    @property
    def bridge_debt(self) -> float:
        return min(self.part1, self.part2, self.part3)


class BridgeDebtComponents(_Record):
    bridge_debt_excluding_fcap: float
    fcap: float
    assessed_icap: float


class IterationState(_Record):
    """Inputs and outputs of a single solver iteration."""

    iteration: int
    end_debt: float = Field(..., description="End debt carried into this iteration.")
    candidates: BridgeDebtCandidates
    bridge_debt: float
    components: BridgeDebtComponents
    peak_debt_including_icap: float
    end_debt_calc: float = Field(..., description="Unclamped end-debt estimate.")
    end_debt_new: float = Field(..., description="Clamped end-debt estimate fed to the next iteration.")
    check_value: float = Field(..., description="Balance check; tends to zero as the system balances.")
    converged: bool


class IterativeCalculations(_Record):
    """Stage B: the fixed point (or last iterate) found by the solver."""

    bridge_debt: float
    bridge_debt_excluding_fcap: float
    fcap: float
    assessed_icap: float
    peak_debt_including_icap: float
    end_debt: float
    iterations: int
    converged: bool
    history: list[IterationState] = Field(default_factory=list, description="One record per iteration, in order.")


class FinalMetrics(_Record):
    """Stage C: ratios and shortfall derived from the solver state."""

    shortfall: float
    additional_cash_required: float
    peak_debt_lvr_excl_icap: float
    peak_debt_lvr_incl_icap: float
    end_debt_lvr: float
    check_value: float


class TraceStep(_Record):
    """One diagnostic step recorded while calculating."""

    stage: str = Field(..., description='"basic", "iterative", "final" or "error".')
    label: str
    value: TraceValue = None
    detail: str | None = Field(None, description="Formatted working, e.g. '$1,000.00 × 85% - $400,000.00'.")
    iteration: int | None = None


class BridgingResults(_Record):
    """Everything a calculation produces: basic values, solver state, final metrics and the trace."""

    # Basic calculations
    selling_costs_amount: float
    existing_property_equity: float
    shaded_valuation: float
    shaded_net_sales_proceeds: float
    purchase_costs_amount: float
    additional_funds_required: float
    peak_debt_before_cap: float
    peak_shaded_valuation: float
    lvr_to_use: float
    max_peak_debt_before_cap: float

    # Iterative results
    bridge_debt: float
    bridge_debt_excluding_fcap: float
    fcap: float
    assessed_icap: float
    peak_debt_including_icap: float
    end_debt: float

    # Final metrics
    shortfall: float
    additional_cash_required: float
    peak_debt_lvr_excl_icap: float
    peak_debt_lvr_incl_icap: float
    end_debt_lvr: float
    check_value: float

    # Meta
    iterations: int
    converged: bool
    history: list[IterationState] = Field(default_factory=list)
    trace: list[TraceStep] = Field(default_factory=list)
    iteration_log: str = Field("", description="Human-readable rendering of the trace.")


# =========================
# Property data (external collaborator)
# =========================


class PropertyAddress(_Record):
    full_address: str
    suburb: str | None = None
    state: str | None = None
    postcode: str | None = None


class PropertyAttributes(_Record):
    property_type: str | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    car_spaces: int | None = None
    land_size: float | None = Field(None, description="Square metres.")
    floor_plan_size: float | None = Field(None, description="Square metres (living area).")


class PropertySummary(_Record):
    property_id: str
    address: PropertyAddress
    attributes: PropertyAttributes = Field(default_factory=PropertyAttributes)
    market_status: str = Field("Off market", description='"For Sale" or "Off market".')
    image_urls: list[str] = Field(default_factory=list)


class PropertyValuation(_Record):
    property_id: str
    estimated_value: float
    lower_range_value: float | None = None
    upper_range_value: float | None = None
    confidence_level: str | None = None
    valuation_date: str | None = None


class AccessToken(_Record):
    value: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


# =========================
# Move strategies
# =========================


class StrategyInputs(_Record):
    """Simplified inputs used to compare move strategies side by side."""

    current_property_value: float
    new_property_value: float
    existing_debt: float = 0.0
    savings: float = 0.0
    time_between: int = Field(6, description="Months between purchase and sale (bridging term for BBYS).")
    selling_costs_percent: float = 2.5
    purchase_costs_percent: float = 5.5
    bridging_interest_rate: float = 7.5
    end_loan_rate: float = Field(5.5, description="Annual rate on the ongoing loan (percent).")
    loan_term: int = Field(30, ge=1, description="Ongoing loan term in years.")


class StrategyOutcome(_Record):
    strategy: StrategyCode
    end_debt: float
    monthly_repayment: float
    bridging_loan_amount: float = 0.0
    bridging_loan_costs: float | None = None
    no_loan_required: bool
