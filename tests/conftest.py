"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from defi_compare.config import (
    ApiConfig,
    AppConfig,
    ReconcileConfig,
    SourceConfig,
    SourcesConfig,
    StorageConfig,
)
from defi_compare.models import (
    AddressDefiData,
    Position,
    PositionType,
    Protocol,
    Token,
    TokenBalance,
)

WALLET = "0x1234567890abcdef1234567890abcdef12345678"


def make_position(
    protocol_id: str = "aave-v3",
    chain: str = "ethereum",
    type: PositionType = PositionType.LENDING,
    value: float = 100.0,
    id: str | None = None,
    name: str | None = None,
    symbol: str = "USDC",
) -> Position:
    """Build a single-token position."""
    return Position(
        id=id or f"{protocol_id}-{chain}-{type.value}",
        protocol=Protocol(id=protocol_id, name=name or protocol_id.title(), chain=chain),
        type=type,
        tokens=(
            TokenBalance(
                token=Token(symbol=symbol, name=symbol, address="0xtoken", decimals=6),
                balance=str(int(value * 10**6)),
                balance_formatted=value,
                balance_usd=value,
            ),
        ),
        total_value_usd=value,
    )


def make_snapshot(
    positions: tuple[Position, ...] | list[Position],
    source: str = "zerion",
    total: float | None = None,
) -> AddressDefiData:
    """Build a snapshot whose total defaults to the sum of its positions."""
    positions = tuple(positions)
    chains: list[str] = []
    for p in positions:
        if p.protocol.chain not in chains:
            chains.append(p.protocol.chain)
    return AddressDefiData(
        address=WALLET,
        total_value_usd=sum(p.total_value_usd for p in positions) if total is None else total,
        positions=positions,
        chains=tuple(chains),
        last_updated="2026-10-19T00:00:00Z",
        source=source,
    )


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        api=ApiConfig(
            base_url="https://api1.example.com/api",
            fallback_urls=("https://api2.example.com/api",),
            timeout=10,
        ),
        sources=SourcesConfig(
            a=SourceConfig(name="zerion", label="Zerion"),
            b=SourceConfig(name="onekey", label="OneKey"),
        ),
        reconcile=ReconcileConfig(usd_precision=2),
        storage=StorageConfig(data_dir=str(tmp_path / "data"), max_history=50),
    )


SAMPLE_YAML = textwrap.dedent("""\
    api:
      base_url: "https://api.example.com/api/"
      fallback_urls: ["https://backup.example.com/api"]
      timeout: 15
    sources:
      a: {name: zerion, label: Zerion}
      b: {name: onekey}
    reconcile:
      usd_precision: 2
    storage:
      data_dir: "/tmp/defi-compare-test"
      max_history: 20
    chains:
      Ethereum: "Ethereum Mainnet"
      mantle: Mantle
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def two_chain_snapshots() -> tuple[AddressDefiData, AddressDefiData]:
    """A and B across ethereum and polygon with one of each diff type."""
    a = make_snapshot(
        [
            make_position("aave-v3", "ethereum", PositionType.LENDING, 100.0),
            make_position("lido", "ethereum", PositionType.STAKING, 500.0),
            make_position("uniswap-v3", "polygon", PositionType.LIQUIDITY, 80.0),
        ],
        source="zerion",
    )
    b = make_snapshot(
        [
            make_position("aave-v3", "ethereum", PositionType.LENDING, 120.0),
            make_position("lido", "ethereum", PositionType.STAKING, 500.0),
            make_position("quickswap", "polygon", PositionType.FARMING, 40.0),
        ],
        source="onekey",
    )
    return a, b


# ---------------------------------------------------------------------------
# Sample API payloads
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_position_json() -> dict:
    return {
        "id": "zerion-1",
        "protocol": {
            "id": "aave-v3",
            "name": "Aave V3",
            "chain": "ethereum",
            "logo": "https://example.com/aave.png",
        },
        "type": "lending",
        "tokens": [
            {
                "token": {
                    "symbol": "USDC",
                    "name": "USD Coin",
                    "address": "0xa0b8",
                    "decimals": 6,
                    "price": 1.0,
                },
                "balance": "100000000",
                "balanceFormatted": 100.0,
                "balanceUSD": 100.0,
            }
        ],
        "totalValueUSD": 100.0,
        "apy": 3.2,
        "healthFactor": 1.8,
        "metadata": {"pool": "main", "tags": ["stable"]},
    }


@pytest.fixture()
def sample_snapshot_json(sample_position_json: dict) -> dict:
    return {
        "address": WALLET,
        "totalValueUSD": 100.0,
        "positions": [sample_position_json],
        "chains": ["ethereum"],
        "lastUpdated": "2026-10-19T00:00:00Z",
        "source": "Zerion",
    }
