from __future__ import annotations

import pytest

from synthfx.core.oracle import is_fresh


def test_within_window():
    assert is_fresh(1000, 1000, 300)
    assert is_fresh(1000, 1300, 300)


def test_outside_window():
    assert not is_fresh(1000, 1301, 300)


def test_future_snapshot_is_not_fresh():
    assert not is_fresh(1001, 1000, 300)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        is_fresh(0, -1, 300)
    with pytest.raises(ValueError):
        is_fresh(0, 0, 0)
