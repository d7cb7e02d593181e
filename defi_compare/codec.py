"""JSON <-> model conversion for the camelCase interchange format."""
from __future__ import annotations

import math
from typing import Any

from .models import (
    AddressDefiData,
    ApiResponse,
    CompareSummary,
    DataSourceCompareResult,
    DiffType,
    InvalidPositionError,
    Position,
    PositionDiff,
    PositionType,
    Protocol,
    Token,
    TokenBalance,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_dict(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise InvalidPositionError(f"{what} must be a JSON object, got {type(raw).__name__}")
    return raw


def _float(value: Any, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidPositionError(f"{what} must be a number, got {value!r}") from e


def _optional_float(value: Any, what: str) -> float | None:
    if value is None:
        return None
    return _float(value, what)


def _finite_number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPositionError(f"{what} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidPositionError(f"{what} must be finite, got {value!r}")
    return number


def _position_type(value: Any, what: str) -> PositionType:
    if value is None:
        raise InvalidPositionError(f"{what} has no type")
    try:
        return PositionType(value)
    except ValueError as e:
        raise InvalidPositionError(f"{what} has unknown type {value!r}") from e


def _drop_none(raw: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in raw.items() if v is not None}


# ---------------------------------------------------------------------------
# JSON → model
# ---------------------------------------------------------------------------


def protocol_from_dict(raw: dict[str, Any]) -> Protocol:
    return Protocol(
        id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        chain=raw.get("chain") or "",
        logo=raw.get("logo"),
        url=raw.get("url"),
    )


def token_balance_from_dict(raw: Any, what: str = "Token balance") -> TokenBalance:
    raw = _require_dict(raw, what)
    token = _require_dict(raw.get("token", {}), f"{what} token")
    return TokenBalance(
        token=Token(
            symbol=token.get("symbol", ""),
            name=token.get("name", ""),
            address=token.get("address", ""),
            decimals=int(_float(token.get("decimals", 0), f"{what} decimals")),
            price=_optional_float(token.get("price"), f"{what} price"),
            logo=token.get("logo"),
        ),
        balance=str(raw.get("balance", "0")),
        balance_formatted=_float(raw.get("balanceFormatted", 0.0), f"{what} balanceFormatted"),
        balance_usd=_float(raw.get("balanceUSD", 0.0), f"{what} balanceUSD"),
    )


def position_from_dict(raw: Any) -> Position:
    """Parse one position, rejecting it when a reconciliation field is missing.

    Raises:
        InvalidPositionError: ``protocol``, ``protocol.chain``, ``type`` or
            ``totalValueUSD`` is absent or unusable, or any numeric field
            does not parse.
    """
    raw = _require_dict(raw, "Position")
    position_id = raw.get("id", "")
    what = f"Position '{position_id}'"

    protocol_raw = raw.get("protocol")
    if not isinstance(protocol_raw, dict):
        raise InvalidPositionError(f"{what} has no protocol")
    if not protocol_raw.get("chain"):
        raise InvalidPositionError(f"{what} has no protocol chain")
    if "totalValueUSD" not in raw:
        raise InvalidPositionError(f"{what} has no totalValueUSD")

    return Position(
        id=str(position_id),
        protocol=protocol_from_dict(protocol_raw),
        type=_position_type(raw.get("type"), what),
        tokens=tuple(
            token_balance_from_dict(t, f"{what} token balance")
            for t in raw.get("tokens") or []
        ),
        total_value_usd=_finite_number(raw["totalValueUSD"], f"{what} totalValueUSD"),
        apy=_optional_float(raw.get("apy"), f"{what} apy"),
        health_factor=_optional_float(raw.get("healthFactor"), f"{what} healthFactor"),
        metadata=_require_dict(raw.get("metadata") or {}, f"{what} metadata"),
    )


def address_data_from_dict(raw: Any) -> AddressDefiData:
    """Parse one source's snapshot.

    Raises:
        InvalidPositionError: The payload is not an object, its total is not
            a finite number, or one of its positions is malformed.
    """
    raw = _require_dict(raw, "Snapshot")
    positions = tuple(position_from_dict(p) for p in raw.get("positions") or [])
    return AddressDefiData(
        address=raw.get("address", ""),
        total_value_usd=_finite_number(
            raw.get("totalValueUSD", 0.0), "Snapshot totalValueUSD"
        ),
        positions=positions,
        chains=tuple(raw.get("chains") or []),
        last_updated=raw.get("lastUpdated", ""),
        source=raw.get("source", ""),
    )


def position_diff_from_dict(raw: Any) -> PositionDiff:
    raw = _require_dict(raw, "Position diff")
    what = f"Diff for '{raw.get('protocol', '')}'"
    try:
        diff_type = DiffType(raw.get("diffType"))
    except ValueError as e:
        raise InvalidPositionError(
            f"{what} has unknown diffType {raw.get('diffType')!r}"
        ) from e
    position_a = raw.get("positionA")
    position_b = raw.get("positionB")
    return PositionDiff(
        protocol=raw.get("protocol", ""),
        chain=raw.get("chain", ""),
        type=_position_type(raw.get("type"), what),
        diff_type=diff_type,
        position_a=position_from_dict(position_a) if position_a else None,
        position_b=position_from_dict(position_b) if position_b else None,
        value_diff_usd=_optional_float(raw.get("valueDiffUSD"), f"{what} valueDiffUSD"),
        value_diff_percent=_optional_float(
            raw.get("valueDiffPercent"), f"{what} valueDiffPercent"
        ),
    )


def summary_from_dict(raw: Any) -> CompareSummary:
    raw = _require_dict(raw, "Summary")
    return CompareSummary(
        total_value_diff_usd=_float(raw.get("totalValueDiffUSD", 0.0), "Summary totalValueDiffUSD"),
        total_value_diff_percent=_float(
            raw.get("totalValueDiffPercent", 0.0), "Summary totalValueDiffPercent"
        ),
        positions_only_in_a=int(_float(raw.get("positionsOnlyInA", 0), "Summary positionsOnlyInA")),
        positions_only_in_b=int(_float(raw.get("positionsOnlyInB", 0), "Summary positionsOnlyInB")),
        common_positions=int(_float(raw.get("commonPositions", 0), "Summary commonPositions")),
        changed_positions=int(_float(raw.get("changedPositions", 0), "Summary changedPositions")),
    )


def compare_result_from_dict(raw: Any) -> DataSourceCompareResult:
    raw = _require_dict(raw, "Compare result")
    return DataSourceCompareResult(
        address_a=address_data_from_dict(raw.get("addressA", {})),
        address_b=address_data_from_dict(raw.get("addressB", {})),
        summary=summary_from_dict(raw.get("summary", {})),
        position_diffs=tuple(
            position_diff_from_dict(d) for d in raw.get("positionDiffs") or []
        ),
    )


def api_response_from_dict(raw: dict[str, Any], parse_data=None) -> ApiResponse:
    """Parse a response envelope; ``parse_data`` converts its ``data`` field."""
    data = raw.get("data")
    if data is not None and parse_data is not None:
        data = parse_data(data)
    return ApiResponse(
        success=bool(raw.get("success", False)),
        data=data,
        error=raw.get("error"),
        message=raw.get("message"),
        timestamp=raw.get("timestamp"),
    )


# ---------------------------------------------------------------------------
# Model → JSON
# ---------------------------------------------------------------------------


def _protocol_to_dict(protocol: Protocol) -> dict[str, Any]:
    return _drop_none(
        {
            "id": protocol.id,
            "name": protocol.name,
            "logo": protocol.logo,
            "chain": protocol.chain,
            "url": protocol.url,
        }
    )


def _token_balance_to_dict(tb: TokenBalance) -> dict[str, Any]:
    return {
        "token": _drop_none(
            {
                "symbol": tb.token.symbol,
                "name": tb.token.name,
                "address": tb.token.address,
                "decimals": tb.token.decimals,
                "price": tb.token.price,
                "logo": tb.token.logo,
            }
        ),
        "balance": tb.balance,
        "balanceFormatted": tb.balance_formatted,
        "balanceUSD": tb.balance_usd,
    }


def _position_to_dict(position: Position) -> dict[str, Any]:
    raw = {
        "id": position.id,
        "protocol": _protocol_to_dict(position.protocol),
        "type": position.type.value,
        "tokens": [_token_balance_to_dict(t) for t in position.tokens],
        "totalValueUSD": position.total_value_usd,
        "apy": position.apy,
        "healthFactor": position.health_factor,
    }
    if position.metadata:
        raw["metadata"] = dict(position.metadata)
    return _drop_none(raw)


def _address_data_to_dict(data: AddressDefiData) -> dict[str, Any]:
    return {
        "address": data.address,
        "totalValueUSD": data.total_value_usd,
        "positions": [_position_to_dict(p) for p in data.positions],
        "chains": list(data.chains),
        "lastUpdated": data.last_updated,
        "source": data.source,
    }


def _diff_to_dict(diff: PositionDiff) -> dict[str, Any]:
    return _drop_none(
        {
            "protocol": diff.protocol,
            "chain": diff.chain,
            "type": diff.type.value,
            "diffType": diff.diff_type.value,
            "positionA": _position_to_dict(diff.position_a) if diff.position_a else None,
            "positionB": _position_to_dict(diff.position_b) if diff.position_b else None,
            "valueDiffUSD": diff.value_diff_usd,
            "valueDiffPercent": diff.value_diff_percent,
        }
    )


def _summary_to_dict(summary: CompareSummary) -> dict[str, Any]:
    return {
        "totalValueDiffUSD": summary.total_value_diff_usd,
        "totalValueDiffPercent": summary.total_value_diff_percent,
        "positionsOnlyInA": summary.positions_only_in_a,
        "positionsOnlyInB": summary.positions_only_in_b,
        "commonPositions": summary.common_positions,
        "changedPositions": summary.changed_positions,
    }


def to_dict(model: Any) -> dict[str, Any]:
    """Serialise a model into its camelCase JSON shape."""
    if isinstance(model, DataSourceCompareResult):
        return {
            "addressA": _address_data_to_dict(model.address_a),
            "addressB": _address_data_to_dict(model.address_b),
            "summary": _summary_to_dict(model.summary),
            "positionDiffs": [_diff_to_dict(d) for d in model.position_diffs],
        }
    if isinstance(model, AddressDefiData):
        return _address_data_to_dict(model)
    if isinstance(model, Position):
        return _position_to_dict(model)
    if isinstance(model, PositionDiff):
        return _diff_to_dict(model)
    if isinstance(model, CompareSummary):
        return _summary_to_dict(model)
    if isinstance(model, ApiResponse):
        data = model.data
        if data is not None and not isinstance(data, (dict, list, str, int, float)):
            data = to_dict(data)
        return _drop_none(
            {
                "success": model.success,
                "data": data,
                "error": model.error,
                "message": model.message,
                "timestamp": model.timestamp,
            }
        )
    raise TypeError(f"Cannot serialise {type(model).__name__}")
