# tests/conftest.py
from __future__ import annotations

from datetime import UTC, datetime

import pytest

from bridging.config.defaults import DEFAULT_CONFIG
from bridging.core.finance import BridgingCalculationEngine
from tests.utils import make_bridging_inputs, make_strategy_inputs

_ENV_VARS = (
    "BRIDGING_OUT",
    "BRIDGING_TRACE",
    "BRIDGING_MAX_ITERATIONS",
    "BRIDGING_TOLERANCE",
    "BRIDGING_LOG_LEVEL",
)


# -------- Isolation from the developer's shell --------
@pytest.fixture(autouse=True)
def _clean_bridging_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


# -------- Engine fixtures --------
@pytest.fixture
def engine():
    return BridgingCalculationEngine(DEFAULT_CONFIG)


@pytest.fixture
def quiet_engine():
    return BridgingCalculationEngine(DEFAULT_CONFIG, trace_enabled=False)


@pytest.fixture
def bridging_inputs():
    """Factory for the base reference scenario (overridable)."""

    def _factory(**overrides):
        return make_bridging_inputs(**overrides)

    return _factory


@pytest.fixture
def strategy_inputs():
    def _factory(**overrides):
        return make_strategy_inputs(**overrides)

    return _factory


# -------- Clock for token expiry --------
class _Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return _Clock(datetime(2024, 6, 1, 12, 0, tzinfo=UTC))
