# tests/__init__.py
"""
Expose the input factories so tests can import directly:
    from tests import make_bridging_inputs, make_strategy_inputs
"""

from .utils import make_bridging_inputs, make_default_inputs, make_standard_inputs, make_strategy_inputs

__all__ = ["make_bridging_inputs", "make_default_inputs", "make_standard_inputs", "make_strategy_inputs"]
