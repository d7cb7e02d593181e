"""Unit tests for diff classification."""
from __future__ import annotations

import pytest

from conftest import make_position
from defi_compare.models import DiffType, PositionType
from defi_compare.reconcile.classifier import (
    calc_value_diff_percent,
    classify_pair,
    classify_pairs,
    is_unchanged,
)


class TestCalcValueDiffPercent:
    def test_basic(self) -> None:
        assert calc_value_diff_percent(100.0, 20.0) == pytest.approx(20.0)

    def test_zero_base_is_none(self) -> None:
        assert calc_value_diff_percent(0.0, 50.0) is None

    def test_negative_base_is_none(self) -> None:
        assert calc_value_diff_percent(-10.0, 5.0) is None


class TestIsUnchanged:
    def test_exact_zero(self) -> None:
        assert is_unchanged(0.0)

    def test_sub_cent_noise(self) -> None:
        assert is_unchanged(0.004)
        assert is_unchanged(-0.004)

    def test_one_cent_is_a_change(self) -> None:
        assert not is_unchanged(0.01)

    def test_custom_precision(self) -> None:
        assert is_unchanged(0.4, usd_precision=0)
        assert not is_unchanged(0.0001, usd_precision=6)


class TestClassifyPair:
    def test_only_a_is_removed(self) -> None:
        a = make_position("aave-v3", "ethereum", PositionType.LENDING, name="Aave V3")
        diff = classify_pair(a, None)
        assert diff.diff_type is DiffType.REMOVED
        assert diff.protocol == "Aave V3"
        assert diff.chain == "ethereum"
        assert diff.type is PositionType.LENDING
        assert diff.position_a is a
        assert diff.position_b is None
        assert diff.value_diff_usd is None
        assert diff.value_diff_percent is None

    def test_only_b_is_added(self) -> None:
        b = make_position("lido", "polygon", PositionType.STAKING, 50.0)
        diff = classify_pair(None, b)
        assert diff.diff_type is DiffType.ADDED
        assert diff.chain == "polygon"
        assert diff.type is PositionType.STAKING
        assert diff.position_a is None
        assert diff.value_diff_usd is None

    def test_value_increase_is_changed(self) -> None:
        diff = classify_pair(make_position(value=100.0), make_position(value=120.0))
        assert diff.diff_type is DiffType.CHANGED
        assert diff.value_diff_usd == pytest.approx(20.0)
        assert diff.value_diff_percent == pytest.approx(20.0)

    def test_value_decrease(self) -> None:
        diff = classify_pair(make_position(value=200.0), make_position(value=150.0))
        assert diff.value_diff_usd == pytest.approx(-50.0)
        assert diff.value_diff_percent == pytest.approx(-25.0)

    def test_equal_values_unchanged(self) -> None:
        diff = classify_pair(make_position(value=100.0), make_position(value=100.0))
        assert diff.diff_type is DiffType.UNCHANGED
        assert diff.value_diff_usd == 0.0
        assert diff.value_diff_percent == 0.0

    def test_zero_base_omits_percent(self) -> None:
        diff = classify_pair(make_position(value=0.0), make_position(value=30.0))
        assert diff.diff_type is DiffType.CHANGED
        assert diff.value_diff_usd == pytest.approx(30.0)
        assert diff.value_diff_percent is None

    def test_display_fields_from_a_when_both(self) -> None:
        a = make_position("aave-v3", "Ethereum", name="Aave V3")
        b = make_position("AAVE-V3", "ethereum", name="aave")
        diff = classify_pair(a, b)
        assert diff.protocol == "Aave V3"
        assert diff.chain == "Ethereum"

    def test_empty_pair_rejected(self) -> None:
        with pytest.raises(ValueError):
            classify_pair(None, None)


class TestClassifyPairs:
    def test_preserves_order(self) -> None:
        a = make_position("aave-v3")
        b = make_position("lido", type=PositionType.STAKING)
        diffs = classify_pairs([(a, None), (None, b), (a, a)])
        assert [d.diff_type for d in diffs] == [
            DiffType.REMOVED,
            DiffType.ADDED,
            DiffType.UNCHANGED,
        ]
