from __future__ import annotations

import pytest

from synthfx.state.pools import Pool, PoolIndex, pair_key


def _pool(token_a: str = "pUSD", token_b: str = "pEUR", **overrides) -> Pool:
    fields = dict(
        real_reserve_a=1000,
        real_reserve_b=200,
        virtual_reserve_a=5000,
        virtual_reserve_b=1000,
        fee_bps=30,
    )
    fields.update(overrides)
    return Pool(token_a=token_a, token_b=token_b, **fields)


class TestPool:
    def test_pair_and_orientation(self):
        pool = _pool()
        assert pool.pair == pair_key("pUSD", "pEUR") == "pUSD/pEUR"
        assert pool.oriented("pUSD") == (5000, 1000, 1000, 200)
        assert pool.oriented("pEUR") == (1000, 5000, 200, 1000)
        assert pool.virtual_k == 5_000_000

    def test_other(self):
        pool = _pool()
        assert pool.other("pUSD") == "pEUR"
        assert pool.other("pEUR") == "pUSD"
        with pytest.raises(ValueError):
            pool.other("pGBP")
        assert pool.has_token("pEUR")
        assert not pool.has_token("pGBP")

    def test_same_token_rejected(self):
        with pytest.raises(ValueError):
            _pool("pUSD", "pUSD")

    def test_negative_reserve_rejected(self):
        with pytest.raises(ValueError):
            _pool(real_reserve_a=-1)

    def test_bool_reserve_rejected(self):
        with pytest.raises(TypeError):
            _pool(real_reserve_a=True)

    def test_fee_out_of_range(self):
        with pytest.raises(ValueError):
            _pool(fee_bps=10_001)

    def test_paused_must_be_bool(self):
        with pytest.raises(TypeError):
            _pool(paused=1)

    def test_frozen(self):
        pool = _pool()
        with pytest.raises(AttributeError):
            pool.fee_bps = 0  # type: ignore[misc]


class TestPoolIndex:
    def test_lookup_is_order_insensitive(self):
        eur = _pool()
        index = PoolIndex.from_pools([eur])
        assert index.get("pUSD", "pEUR") is eur
        assert index.get("pEUR", "pUSD") is eur
        assert index.has_pair("pEUR", "pUSD")
        assert index.get("pUSD", "pGBP") is None

    def test_duplicate_pair_rejected(self):
        with pytest.raises(ValueError):
            PoolIndex.from_pools([_pool(), _pool("pEUR", "pUSD")])

    def test_symbols_and_iteration_are_sorted(self):
        index = PoolIndex.from_pools([_pool("pUSD", "pGBP"), _pool()])
        assert index.symbols() == ("pEUR", "pGBP", "pUSD")
        assert [p.pair for p in index] == ["pUSD/pEUR", "pUSD/pGBP"]
        assert len(index) == 2

    def test_empty(self):
        index = PoolIndex.from_pools([])
        assert len(index) == 0
        assert index.symbols() == ()
