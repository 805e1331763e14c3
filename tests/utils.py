# tests/utils.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from bridging.config.defaults import default_bridging_inputs
from bridging.schemas.models import BridgingInputs, StrategyInputs

# ---------------------------------------------------------------------
# Bridging inputs
# ---------------------------------------------------------------------

# Shared base of the reference scenarios: $1M home, $400k debt, 12-month ICAP
# bridge at 7% (+1% buffer), no selling or purchase costs.
BASE_SCENARIO: dict[str, Any] = {
    "existing_property_value": 1_000_000.0,
    "existing_debt": 400_000.0,
    "selling_costs_percent": 0.0,
    "new_property_value": 800_000.0,
    "purchase_costs_percent": 0.0,
    "additional_borrowings": 50_000.0,
    "savings": 300_000.0,
    "bridging_term_months": 12,
    "bridging_repayment_type": "ICAP",
    "bridging_interest_rate": 7.0,
    "bridging_fees_capitalised": False,
    "peak_debt_max_lvr_with_cos": 85.0,
    "peak_debt_max_lvr_without_cos": 80.0,
    "existing_property_valuation_shading": 5.0,
    "new_property_max_lvr": 85.0,
    "bridge_debt_servicing_buffer": 1.0,
    "minimum_loan_amount": 100_000.0,
    "maximum_loan_amount": 3_000_000.0,
    "contract_of_sale_provided": False,
    "sales_proceeds_to_retain": 0.0,
    "pg_included": False,
    "pg_fee_amount": 7_500.0,
    "pg_fee_capitalised": True,
    "purchase_costs_capitalised": True,
    "bridging_fees_no_end_debt_percent": 0.75,
    "bridging_fees_end_debt_amount": 1_500.0,
}

# (1 + (7% + 1%) / 12) ** 12 - 1
ICAP_RATE_12M = (1 + 0.08 / 12) ** 12 - 1


def make_bridging_inputs(**overrides: Any) -> BridgingInputs:
    """Base reference scenario with field overrides (snake_case names)."""
    return BridgingInputs.model_validate({**BASE_SCENARIO, **overrides})


def make_no_end_debt_inputs(**overrides: Any) -> BridgingInputs:
    """Sale proceeds cover the whole bridge; no ongoing loan."""
    return make_bridging_inputs(**overrides)


def make_fees_capitalised_inputs(**overrides: Any) -> BridgingInputs:
    """Same as the no-end-debt scenario but fees are capitalised, leaving a minimum-sized end loan."""
    return make_bridging_inputs(bridging_fees_capitalised=True, **overrides)


def make_standard_inputs(**overrides: Any) -> BridgingInputs:
    """$1.5M purchase with capitalised fees; converges to a sizeable end debt."""
    return make_bridging_inputs(new_property_value=1_500_000.0, bridging_fees_capitalised=True, **overrides)


def make_over_max_peak_inputs(**overrides: Any) -> BridgingInputs:
    """Peak debt well above both the LVR cap and the maximum loan amount."""
    return make_bridging_inputs(
        existing_property_value=1_500_000.0,
        new_property_value=5_500_000.0,
        purchase_costs_percent=5.0,
        bridging_fees_capitalised=True,
        **overrides,
    )


def make_default_inputs(**overrides: Any) -> BridgingInputs:
    """Config-default inputs (property values zero unless overridden)."""
    return default_bridging_inputs(**overrides)


def camel_payload(inputs: BridgingInputs) -> dict[str, Any]:
    """The inputs as the web form serialises them (camelCase keys)."""
    return inputs.model_dump(by_alias=True)


def write_json(path: Path, payload: dict[str, Any]) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


# ---------------------------------------------------------------------
# Strategy inputs
# ---------------------------------------------------------------------


def make_strategy_inputs(**overrides: Any) -> StrategyInputs:
    data: dict[str, Any] = {
        "current_property_value": 1_000_000.0,
        "new_property_value": 1_500_000.0,
        "existing_debt": 400_000.0,
        "savings": 300_000.0,
        "time_between": 6,
    }
    data.update(overrides)
    return StrategyInputs.model_validate(data)


# ---------------------------------------------------------------------
# Property-data payloads
# ---------------------------------------------------------------------


def property_summary_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "propertyId": 12345,
        "address": {
            "fullAddress": "1 Example St, Richmond VIC 3121",
            "suburb": "Richmond",
            "state": "VIC",
            "postcode": "3121",
        },
        "attributes": {
            "propertyType": {"value": "house", "sourceDate": "2024-01-01"},
            "bedrooms": {"value": 3, "sourceDate": "2024-01-01"},
            "bathrooms": {"value": 2, "sourceDate": "2024-01-01"},
            "carSpaces": {"value": 1, "sourceDate": "2024-01-01"},
            "landArea": {"value": 350.5, "sourceDate": "2024-01-01"},
            "livingArea": {"value": 180, "sourceDate": "2024-01-01"},
        },
        "image": {"id": "img1", "extension": "jpg", "type": "photo", "sha": "abc123"},
        "activeListings": [],
        "marketStatus": [],
    }
    payload.update(overrides)
    return payload


def valuation_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "propertyId": 12345,
        "valuationId": "v-1",
        "effectiveDate": "2024-06-01",
        "valuationDate": "2024-06-01",
        "estimatedValue": 1_250_000,
        "confidenceLevel": "HIGH",
        "lowerRangeValue": 1_150_000,
        "upperRangeValue": 1_350_000,
    }
    payload.update(overrides)
    return payload


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None, reason: str = "OK") -> None:
        self.status_code = status_code
        self._payload = payload
        self.reason = reason

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Records calls and replays queued responses (or raises queued exceptions)."""

    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def _next(self, method: str, url: str, kwargs: dict[str, Any]) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next("POST", url, kwargs)
