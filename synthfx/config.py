"""
Engine configuration.

Values mirror the deployed contracts (150% vault minimum, 100x leverage cap,
2% liquidity ratio tolerance). Load overrides from YAML with `load_config`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Runtime config for the engine helpers in `synthfx.core.engine`."""

    hub_symbol: str = "pUSD"
    min_collateral_ratio_pct: int = 150
    warning_buffer_pct: int = 20
    max_leverage: int = 100
    maintenance_margin_bps: int = 500
    max_liquidity_ratio_deviation_pct: int = 2
    min_liquidity_lock: int = 0
    max_oracle_staleness_seconds: int = 300
    default_slippage_bps: int = 50

    def __post_init__(self) -> None:
        if not isinstance(self.hub_symbol, str) or not self.hub_symbol:
            raise TypeError("hub_symbol must be a non-empty string")
        for f in fields(self):
            if f.name == "hub_symbol":
                continue
            v = getattr(self, f.name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{f.name} must be an int")
            if v < 0:
                raise ValueError(f"{f.name} must be non-negative: {v}")
        if self.min_collateral_ratio_pct <= 100:
            raise ValueError(f"min_collateral_ratio_pct must exceed 100: {self.min_collateral_ratio_pct}")
        if self.max_leverage < 1:
            raise ValueError(f"max_leverage must be >= 1: {self.max_leverage}")
        if self.maintenance_margin_bps > 10_000:
            raise ValueError(f"maintenance_margin_bps must be in [0, 10000]: {self.maintenance_margin_bps}")
        if self.default_slippage_bps > 10_000:
            raise ValueError(f"default_slippage_bps must be in [0, 10000]: {self.default_slippage_bps}")
        if self.max_oracle_staleness_seconds == 0:
            raise ValueError("max_oracle_staleness_seconds must be positive")


_FIELD_NAMES = frozenset(f.name for f in fields(EngineConfig))


def config_from_mapping(data: Mapping[str, Any]) -> EngineConfig:
    """Build a config from a mapping; unknown keys are rejected."""
    if not isinstance(data, Mapping):
        raise TypeError("config must be a mapping")
    extra = set(data) - _FIELD_NAMES
    if extra:
        raise ValueError(f"unknown config keys: {sorted(extra)}")
    return EngineConfig(**dict(data))


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Load an `EngineConfig` from a YAML file. An empty file yields the defaults."""
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if data is None:
        return EngineConfig()
    return config_from_mapping(data)
