"""
Configuration Schemas
---------------------
Dataclasses describing the generator, strategy and reporting parameters,
plus the YAML loader. Every section validates itself so a bad config
aborts before any observation is processed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math
from typing import Any
from pathlib import Path
import yaml

from .validator import validate_keys


class ConfigError(ValueError):
    """Raised when a configuration cannot produce a valid run."""


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _is_real(v: Any) -> bool:
    """Finite int or float; bools and strings are rejected."""
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _require_real(section: str, obj: Any, *names: str) -> None:
    for name in names:
        v = getattr(obj, name)
        if not _is_real(v):
            raise ConfigError(
                f"Configuration Error: {section}.{name} must be a finite number, got {v!r}"
            )


@dataclass
class GeneratorCfg:
    """Synthetic cointegrated pair parameters."""

    n_obs: int = 4000
    beta: float = 1.25
    x0: float = 100.0
    step_sigma: float = 0.2
    noise_sigma_low: float = 0.5
    noise_sigma_high: float = 1.5
    break_frac: float = 0.5
    seed: int = 42

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not _is_int(self.n_obs) or self.n_obs <= 0:
            raise ConfigError(
                f"Configuration Error: generator.n_obs must be a positive int, got {self.n_obs!r}"
            )
        if not _is_int(self.seed):
            raise ConfigError(
                f"Configuration Error: generator.seed must be an int, got {self.seed!r}"
            )
        _require_real(
            "generator",
            self,
            "beta",
            "x0",
            "step_sigma",
            "noise_sigma_low",
            "noise_sigma_high",
            "break_frac",
        )
        for name in ("step_sigma", "noise_sigma_low", "noise_sigma_high"):
            if getattr(self, name) < 0.0:
                raise ConfigError(f"Configuration Error: generator.{name} must be >= 0")
        if not 0.0 <= self.break_frac <= 1.0:
            raise ConfigError(
                "Configuration Error: generator.break_frac must be within [0, 1]"
            )

    @property
    def break_at(self) -> int:
        return int(self.n_obs * float(self.break_frac))


@dataclass
class StrategyCfg:
    """Rolling OLS / z-score pairs strategy parameters."""

    beta_window: int = 200
    z_window: int = 200
    z_entry: float = 2.0
    z_exit: float = 0.5
    max_hold: int = 400

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in ("beta_window", "z_window"):
            v = getattr(self, name)
            if not _is_int(v) or v <= 1:
                raise ConfigError(
                    f"Configuration Error: strategy.{name} must be an int > 1, got {v!r}"
                )
        if not _is_int(self.max_hold) or self.max_hold <= 0:
            raise ConfigError(
                f"Configuration Error: strategy.max_hold must be an int > 0, got {self.max_hold!r}"
            )
        _require_real("strategy", self, "z_entry", "z_exit")
        if self.z_entry <= 0.0:
            raise ConfigError("Configuration Error: strategy.z_entry must be > 0")
        if not 0.0 <= self.z_exit < self.z_entry:
            raise ConfigError(
                "Configuration Error: strategy.z_exit must satisfy 0 <= z_exit < z_entry "
                f"(got z_exit={self.z_exit}, z_entry={self.z_entry})"
            )

    @property
    def warmup(self) -> int:
        """First step index at which a trading decision can be made."""
        return self.beta_window + self.z_window - 1


@dataclass
class ReportCfg:
    """Console reporting options."""

    last_n: int = 5

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not _is_int(self.last_n) or self.last_n < 0:
            raise ConfigError(
                f"Configuration Error: report.last_n must be an int >= 0, got {self.last_n!r}"
            )


@dataclass
class Config:
    """Root configuration object."""

    name: str = "pairs"
    generator: GeneratorCfg = field(default_factory=GeneratorCfg)
    strategy: StrategyCfg = field(default_factory=StrategyCfg)
    report: ReportCfg = field(default_factory=ReportCfg)

    def validate(self) -> None:
        self.generator.validate()
        self.strategy.validate()
        self.report.validate()
        if self.generator.n_obs <= self.strategy.warmup:
            raise ConfigError(
                "Configuration Error: generator.n_obs must exceed "
                f"beta_window + z_window - 1 = {self.strategy.warmup}"
            )


def _merge_dc(obj: Any, patch: dict[str, Any]) -> Any:
    """Recursively merges a dictionary into a dataclass."""
    if not isinstance(patch, dict):
        return obj
    for k, v in patch.items():
        if not hasattr(obj, k):
            continue
        cur = getattr(obj, k)

        if hasattr(cur, "__dataclass_fields__") and isinstance(v, dict):
            _merge_dc(cur, v)
        else:
            setattr(obj, k, v)
    return obj


def load_config(path: str | Path) -> Config:
    """
    Loads configuration from a YAML file.
    Unknown keys are rejected, then the merged result is validated as a whole.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(p, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    validate_keys(data, Config)

    cfg = Config()
    _merge_dc(cfg, data)
    cfg.validate()

    return cfg
