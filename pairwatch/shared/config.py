from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv


load_dotenv()


DEFAULT_RPC_ENDPOINTS = [
    "https://rpc.plasma.to",
    "https://plasma-rpc.chainstack.com",
]


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str, default):
    value = _env(name)
    if not value:
        return default
    return json.loads(value)


def _bool(name: str, default: str) -> bool:
    return (_env(name, default) or "").strip().lower() in {"1", "true", "yes", "on"}


def _optional_int(name: str) -> int | None:
    value = _env(name)
    if value is None or not value.strip():
        return None
    return int(value)


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    app_description: str
    rpc_endpoints: tuple[str, ...]
    chain_id: int
    chain_name: str
    factory_address: str
    router_address: str
    wrapped_native_address: str
    poll_interval_ms: int
    max_pairs: int
    max_chart_points: int
    chart_interval_seconds: int
    search_debounce_ms: int
    retry_count: int
    retry_base_delay_ms: int
    progressive_render: bool
    progress_every: int
    rpc_timeout_seconds: float
    synthetic_seed: int | None
    real_time_updates: bool
    price_charts: bool
    log_level: str


def get_settings() -> Settings:
    settings = Settings(
        app_name=_env("APP_NAME", "CozyScanner"),
        app_version=_env("APP_VERSION", "1.0.0"),
        app_description=_env("APP_DESCRIPTION", "Real-time DEX Analytics on Plasma Network"),
        rpc_endpoints=tuple(_json("RPC_ENDPOINTS", DEFAULT_RPC_ENDPOINTS)),
        chain_id=int(_env("CHAIN_ID", "9745")),
        chain_name=_env("CHAIN_NAME", "Plasma Network"),
        factory_address=_env("FACTORY_ADDRESS", "0xa252e44D3478CeBb1a3D59C9146CD860cb09Ec93"),
        router_address=_env("ROUTER_ADDRESS", "0x89E695B38610e78a77Fb310458Dfd855505AD239"),
        wrapped_native_address=_env(
            "WRAPPED_NATIVE_ADDRESS", "0x6100E367285b01F48D07953803A2d8dCA5D19873"
        ),
        poll_interval_ms=int(_env("POLL_INTERVAL_MS", "15000")),
        max_pairs=int(_env("MAX_PAIRS", "25")),
        max_chart_points=int(_env("MAX_CHART_POINTS", "50")),
        chart_interval_seconds=int(_env("CHART_INTERVAL_SECONDS", "60")),
        search_debounce_ms=int(_env("SEARCH_DEBOUNCE_MS", "300")),
        retry_count=int(_env("RETRY_COUNT", "3")),
        retry_base_delay_ms=int(_env("RETRY_BASE_DELAY_MS", "2000")),
        progressive_render=_bool("PROGRESSIVE_RENDER", "true"),
        progress_every=int(_env("PROGRESS_EVERY", "5")),
        rpc_timeout_seconds=float(_env("RPC_TIMEOUT_SECONDS", "10")),
        synthetic_seed=_optional_int("SYNTHETIC_SEED"),
        real_time_updates=_bool("REAL_TIME_UPDATES", "true"),
        price_charts=_bool("PRICE_CHARTS", "true"),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
    if _bool("SIMPLE_MODE", "false"):
        return simple_settings(settings)
    return settings


def simple_settings(settings: Settings, *, max_pairs: int = 10) -> Settings:
    """Minimal variant: fixed pair count, one connection attempt, no progress updates."""
    return replace(
        settings,
        max_pairs=max_pairs,
        retry_count=1,
        progressive_render=False,
    )
