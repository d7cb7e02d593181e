"""Unit tests for data models."""
from __future__ import annotations

from dataclasses import replace

import pytest

from conftest import make_position
from defi_compare.models import (
    ApiResponse,
    CompareSummary,
    DiffType,
    PositionDiff,
    PositionType,
    Protocol,
)


class TestProtocol:
    def test_optional_fields_default_none(self) -> None:
        p = Protocol(id="aave-v3", name="Aave V3", chain="ethereum")
        assert p.logo is None
        assert p.url is None

    def test_frozen(self) -> None:
        p = Protocol(id="aave-v3", name="Aave V3", chain="ethereum")
        with pytest.raises(AttributeError):
            p.chain = "polygon"  # type: ignore[misc]


class TestPosition:
    def test_chain_property(self) -> None:
        assert make_position(chain="base").chain == "base"

    def test_frozen(self) -> None:
        position = make_position()
        with pytest.raises(AttributeError):
            position.total_value_usd = 1.0  # type: ignore[misc]

    def test_equality(self) -> None:
        assert make_position(value=5.0) == make_position(value=5.0)

    def test_type_is_str_enum(self) -> None:
        assert PositionType("staking") is PositionType.STAKING
        assert PositionType.STAKING == "staking"

    def test_metadata_is_read_only(self) -> None:
        position = replace(make_position(), metadata={"pool": "main"})
        with pytest.raises(TypeError):
            position.metadata["pool"] = "other"  # type: ignore[index]
        assert position.metadata == {"pool": "main"}


class TestPositionDiff:
    def test_removed_rejects_position_b(self) -> None:
        with pytest.raises(ValueError, match="removed"):
            PositionDiff(
                protocol="Aave",
                chain="ethereum",
                type=PositionType.LENDING,
                diff_type=DiffType.REMOVED,
                position_a=make_position(),
                position_b=make_position(),
            )

    def test_added_rejects_position_a(self) -> None:
        with pytest.raises(ValueError, match="added"):
            PositionDiff(
                protocol="Aave",
                chain="ethereum",
                type=PositionType.LENDING,
                diff_type=DiffType.ADDED,
                position_a=make_position(),
            )

    def test_changed_needs_both_sides(self) -> None:
        with pytest.raises(ValueError, match="both sources"):
            PositionDiff(
                protocol="Aave",
                chain="ethereum",
                type=PositionType.LENDING,
                diff_type=DiffType.CHANGED,
                position_a=make_position(),
            )

    def test_unchanged_with_both_sides(self) -> None:
        diff = PositionDiff(
            protocol="Aave",
            chain="ethereum",
            type=PositionType.LENDING,
            diff_type=DiffType.UNCHANGED,
            position_a=make_position(),
            position_b=make_position(),
            value_diff_usd=0.0,
            value_diff_percent=0.0,
        )
        assert diff.value_diff_usd == 0.0


class TestCompareSummary:
    def test_defaults(self) -> None:
        s = CompareSummary()
        assert s.total_value_diff_usd == 0.0
        assert s.positions_only_in_a == 0
        assert s.common_positions == 0


class TestApiResponse:
    def test_failure(self) -> None:
        r = ApiResponse.failure("boom")
        assert r.success is False
        assert r.error == "boom"
        assert r.data is None
