from __future__ import annotations

import pytest

from synthfx.config import EngineConfig, config_from_mapping, load_config


def test_defaults():
    config = EngineConfig()
    assert config.hub_symbol == "pUSD"
    assert config.min_collateral_ratio_pct == 150
    assert config.max_leverage == 100
    assert config.max_liquidity_ratio_deviation_pct == 2
    assert config.default_slippage_bps == 50


def test_load_yaml(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("hub_symbol: pEUR\nmax_leverage: 20\nwarning_buffer_pct: 10\n", encoding="utf-8")
    config = load_config(path)
    assert config.hub_symbol == "pEUR"
    assert config.max_leverage == 20
    assert config.warning_buffer_pct == 10
    assert config.min_collateral_ratio_pct == 150


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == EngineConfig()


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="unknown config keys"):
        config_from_mapping({"max_leverge": 10})


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(path)


@pytest.mark.parametrize(
    "overrides, exc",
    [
        ({"min_collateral_ratio_pct": 100}, ValueError),
        ({"max_leverage": 0}, ValueError),
        ({"maintenance_margin_bps": 10_001}, ValueError),
        ({"max_oracle_staleness_seconds": 0}, ValueError),
        ({"warning_buffer_pct": -1}, ValueError),
        ({"max_leverage": "10"}, TypeError),
        ({"hub_symbol": ""}, TypeError),
    ],
)
def test_invalid_values(overrides, exc):
    with pytest.raises(exc):
        EngineConfig(**overrides)
