# bridging/inputs/mapper.py
"""
Pre-fill calculator inputs from data collected earlier in the journey.

Three loose dict shapes come in (camelCase keys, as the web form stores them):

  current_property  {"propertyValue", "loanBalance"}
  target_property   {"expectedPurchasePrice", "savingsForPurchase", "additionalCashToBorrow"}
  about_you         {"preferredTimeToSell", "preferredTimeToBuy", ...}

map_existing_data_to_inputs() turns them into a partial snake_case input dict;
merge_input_sources() layers every source into a validated BridgingInputs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from bridging.config.defaults import DEFAULT_CONFIG, DEFAULT_TERM_MONTHS, estimate_bridging_term
from bridging.schemas.models import BridgingInputs, CalculationConfig


def _num(src: Mapping[str, Any] | None, key: str) -> float:
    # missing, None and 0 all map to 0.0
    if not src:
        return 0.0
    return float(src.get(key) or 0.0)


def map_existing_data_to_inputs(
    current_property: Mapping[str, Any],
    target_property: Mapping[str, Any] | None = None,
    about_you: Mapping[str, Any] | None = None,
    config: CalculationConfig = DEFAULT_CONFIG,
) -> dict[str, Any]:
    """
    Map collected data onto BridgingInputs field names.

    A contract of sale is assumed only when the borrower has already sold.
    The bridging term is estimated from the sell/buy timelines when known.
    """
    if about_you:
        term = estimate_bridging_term(about_you.get("preferredTimeToSell"), about_you.get("preferredTimeToBuy"), config)
    else:
        term = DEFAULT_TERM_MONTHS

    return {
        "existing_property_value": _num(current_property, "propertyValue"),
        "existing_debt": _num(current_property, "loanBalance"),
        "new_property_value": _num(target_property, "expectedPurchasePrice"),
        "savings": _num(target_property, "savingsForPurchase"),
        "additional_borrowings": _num(target_property, "additionalCashToBorrow"),
        "contract_of_sale_provided": bool(about_you) and about_you.get("preferredTimeToSell") == "already_sold",
        "bridging_term_months": term,
    }


def _as_field_dict(source: BridgingInputs | Mapping[str, Any] | None) -> dict[str, Any]:
    """Normalise a source to snake_case field names; camelCase keys are accepted."""
    if source is None:
        return {}
    if isinstance(source, BridgingInputs):
        return source.model_dump()
    fields = BridgingInputs.model_fields
    by_alias = {to_camel(name): name for name in fields}
    out: dict[str, Any] = {}
    for key, value in source.items():
        name = key if key in fields else by_alias.get(key)
        if name is None:
            raise ValueError(f"Unknown input field: {key!r}")
        out[name] = value
    return out


def merge_input_sources(
    defaults: BridgingInputs,
    mapped: Mapping[str, Any],
    saved: BridgingInputs | Mapping[str, Any] | None = None,
    user: Mapping[str, Any] | None = None,
) -> BridgingInputs:
    """
    Layer input sources, later sources winning field by field.

    Priority: user modifications > saved inputs > mapped data > defaults.
    """
    merged = _as_field_dict(defaults)
    for source in (mapped, saved, user):
        merged.update(_as_field_dict(source))
    try:
        return BridgingInputs.model_validate(merged)
    except ValidationError as e:
        raise ValueError(f"Merged inputs failed validation:\n{e}") from e
