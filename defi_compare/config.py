"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CHAIN_NAMES: dict[str, str] = {
    "ethereum": "Ethereum",
    "polygon": "Polygon",
    "arbitrum": "Arbitrum",
    "optimism": "Optimism",
    "binance-smart-chain": "BSC",
    "bsc": "BSC",
    "avalanche": "Avalanche",
    "base": "Base",
    "zksync-era": "zkSync",
    "linea": "Linea",
    "scroll": "Scroll",
    "fantom": "Fantom",
}

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = "http://localhost:8787/api"
    fallback_urls: tuple[str, ...] = ()
    timeout: int = 60


@dataclass(frozen=True)
class SourceConfig:
    name: str = ""
    label: str = ""


@dataclass(frozen=True)
class SourcesConfig:
    a: SourceConfig = field(default_factory=lambda: SourceConfig("zerion", "Zerion"))
    b: SourceConfig = field(default_factory=lambda: SourceConfig("onekey", "OneKey"))


@dataclass(frozen=True)
class ReconcileConfig:
    usd_precision: int = 2


@dataclass(frozen=True)
class StorageConfig:
    data_dir: str = "~/.defi-compare"
    max_history: int = 50

    @property
    def path(self) -> Path:
        return Path(self.data_dir).expanduser()


@dataclass(frozen=True)
class AppConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    reconcile: ReconcileConfig = field(default_factory=ReconcileConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    chains: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CHAIN_NAMES))

    def chain_name(self, chain_id: str) -> str:
        """Display name for a chain id, falling back to the id itself."""
        return self.chains.get(chain_id.lower(), chain_id)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_api(raw: dict[str, Any]) -> ApiConfig:
    return ApiConfig(
        base_url=str(raw.get("base_url", ApiConfig.base_url)).rstrip("/"),
        fallback_urls=tuple(u.rstrip("/") for u in raw.get("fallback_urls", [])),
        timeout=int(raw.get("timeout", 60)),
    )


def _build_source(raw: dict[str, Any], default: SourceConfig) -> SourceConfig:
    name = raw.get("name", default.name)
    return SourceConfig(name=name, label=raw.get("label", name))


def _build_sources(raw: dict[str, Any]) -> SourcesConfig:
    defaults = SourcesConfig()
    return SourcesConfig(
        a=_build_source(raw.get("a", {}), defaults.a),
        b=_build_source(raw.get("b", {}), defaults.b),
    )


def _build_reconcile(raw: dict[str, Any]) -> ReconcileConfig:
    return ReconcileConfig(usd_precision=int(raw.get("usd_precision", 2)))


def _build_storage(raw: dict[str, Any]) -> StorageConfig:
    return StorageConfig(
        data_dir=raw.get("data_dir", StorageConfig.data_dir),
        max_history=int(raw.get("max_history", 50)),
    )


def _build_chains(raw: dict[str, Any]) -> dict[str, str]:
    chains = dict(DEFAULT_CHAIN_NAMES)
    chains.update({str(k).lower(): str(v) for k, v in raw.items()})
    return chains


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        api=_build_api(raw.get("api", {})),
        sources=_build_sources(raw.get("sources", {})),
        reconcile=_build_reconcile(raw.get("reconcile", {})),
        storage=_build_storage(raw.get("storage", {})),
        chains=_build_chains(raw.get("chains", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.api.base_url:
        raise ValueError("api.base_url must be set")
    if cfg.api.timeout <= 0:
        raise ValueError(f"api.timeout must be positive, got {cfg.api.timeout}")

    if not cfg.sources.a.name or not cfg.sources.b.name:
        raise ValueError("Both sources must have a name")
    if cfg.sources.a.name == cfg.sources.b.name:
        raise ValueError(
            f"Sources A and B must differ, both are '{cfg.sources.a.name}'"
        )

    if cfg.reconcile.usd_precision < 0:
        raise ValueError("reconcile.usd_precision cannot be negative")
    if cfg.storage.max_history < 1:
        raise ValueError("storage.max_history must be at least 1")
