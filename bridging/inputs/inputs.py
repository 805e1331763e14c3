# bridging/inputs/inputs.py
"""
Inputs loader for the bridging calculator.

Goals
-----
- File-first inputs validated via Pydantic.
- Accepts a bare BridgingInputs payload (what the web form saves) as well as
  a structured shape that also carries calculation config and run options.
- Light environment-variable overrides for CI/CLI convenience.

Supported JSON shapes
---------------------
1) Legacy (root = BridgingInputs, snake_case or camelCase keys)
   {
     "existingPropertyValue": 1000000,
     "newPropertyValue": 1500000,
     ...
   }

2) Structured (root = AppInputs)
   {
     "inputs": { ... BridgingInputs ... },
     "config": { "solver": {"max_iterations": 100}, ... },
     "run": { "out": "bridging_report.md", "trace": true, "strategy": null }
   }

Environment overrides (optional)
--------------------------------
- BRIDGING_OUT             -> run.out
- BRIDGING_TRACE           -> run.trace ("1"/"true"/"yes"/"on" or "0"/"false"/"no"/"off")
- BRIDGING_LOG_LEVEL       -> run.log_level
- BRIDGING_MAX_ITERATIONS  -> config.solver.max_iterations (int >= 1)
- BRIDGING_TOLERANCE       -> config.solver.convergence_tolerance (float > 0)

Bad override values are ignored with a warning; the validated file value stays.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, cast

from pydantic import BaseModel, Field, ValidationError

from bridging.schemas.models import BridgingInputs, CalculationConfig, SolverSettings

logger = logging.getLogger(__name__)

StrategySelection = Literal["BBYS", "SBYB", "KB", "SS", "all"]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class RunOptions(BaseModel):
    """Runtime (non-financial) options controlling a CLI run."""

    out: str = Field("bridging_report.md", description="Path to write the Markdown report.")
    trace: bool = Field(True, description="Include the calculation trace in the report.")
    strategy: StrategySelection | None = Field(None, description='Also compare move strategies: one code or "all".')
    strict: bool = Field(False, description="Refuse to calculate when form-level validation fails.")
    log_level: str = Field("INFO", description="Root log level for the CLI.")


class AppInputs(BaseModel):
    """
    Full input payload.

    Attributes:
        inputs: Validated BridgingInputs for the engine.
        config: Calculation config (solver, policy defaults, validation bounds).
        run:    Non-financial options for the current execution.
    """

    inputs: BridgingInputs
    config: CalculationConfig = Field(default_factory=CalculationConfig)
    run: RunOptions = Field(default_factory=RunOptions)


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first inputs loader with light env overrides.

    Default search (when path=None):
        1) ./data/sample/bridging_inputs.json
        2) ./config.json
    """

    env_prefix: str = "BRIDGING_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> AppInputs:
        p = self._resolve_path(path)
        raw = self._read_json_file(p)
        cfg = self._parse_root(self._maybe_translate_legacy(raw))
        return self._apply_env_overrides(cfg)

    def load_json(self, text: str) -> AppInputs:
        """Load inputs from a JSON string (either shape)."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError("Inputs payload must be a JSON object.")
        cfg = self._parse_root(self._maybe_translate_legacy(raw))
        return self._apply_env_overrides(cfg)

    def with_overrides(
        self,
        cfg: AppInputs,
        *,
        out: str | None = None,
        trace: bool | None = None,
        strategy: str | None = None,
        strict: bool | None = None,
        log_level: str | None = None,
    ) -> AppInputs:
        """Return a new AppInputs with the non-null run overrides applied."""
        updates: dict[str, Any] = {
            k: v
            for k, v in (("out", out), ("trace", trace), ("strategy", strategy), ("strict", strict), ("log_level", log_level))
            if v is not None
        }
        if not updates:
            return cfg
        return cfg.model_copy(update={"run": cfg.run.model_copy(update=updates)})

    # ---------- Internals ----------

    def _resolve_path(self, path: str | Path | None) -> Path:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Inputs file not found: {p}")
            return p

        for candidate in (Path("data/sample/bridging_inputs.json"), Path("config.json")):
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            "No inputs path provided and no default inputs found. "
            "Looked for ./data/sample/bridging_inputs.json and ./config.json."
        )

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported inputs format for {p.name}; only .json is supported.")
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Inputs in {p} must be a JSON object.")
        return cast(dict[str, Any], data)

    def _maybe_translate_legacy(self, raw: dict[str, Any]) -> dict[str, Any]:
        if "inputs" in raw:
            return raw
        return {"inputs": raw}

    def _parse_root(self, data: dict[str, Any]) -> AppInputs:
        try:
            return AppInputs.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Inputs validation failed:\n{e}") from e

    def _apply_env_overrides(self, cfg: AppInputs) -> AppInputs:
        prefix = self.env_prefix
        run_updates: dict[str, Any] = {}
        solver_updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            run_updates["out"] = out

        trace = os.getenv(f"{prefix}TRACE")
        if trace:
            flag = trace.strip().lower()
            if flag in _TRUE:
                run_updates["trace"] = True
            elif flag in _FALSE:
                run_updates["trace"] = False
            else:
                logger.warning("ignoring %sTRACE=%r (expected a boolean)", prefix, trace)

        level = os.getenv(f"{prefix}LOG_LEVEL")
        if level:
            run_updates["log_level"] = level.strip().upper()

        max_iter = os.getenv(f"{prefix}MAX_ITERATIONS")
        if max_iter:
            solver_updates["max_iterations"] = max_iter

        tol = os.getenv(f"{prefix}TOLERANCE")
        if tol:
            solver_updates["convergence_tolerance"] = tol

        updates: dict[str, Any] = {}
        if run_updates:
            updates["run"] = cfg.run.model_copy(update=run_updates)
        if solver_updates:
            solver = self._override_solver(cfg.config.solver, solver_updates)
            if solver is not None:
                updates["config"] = cfg.config.model_copy(update={"solver": solver})

        return cfg.model_copy(update=updates) if updates else cfg

    def _override_solver(self, solver: SolverSettings, updates: dict[str, Any]) -> SolverSettings | None:
        try:
            return SolverSettings.model_validate({**solver.model_dump(), **updates})
        except ValidationError as e:
            logger.warning("ignoring invalid solver overrides %s: %s", updates, e)
            return None


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path | None = None) -> AppInputs:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)
