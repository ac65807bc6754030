from __future__ import annotations

from pydantic import BaseModel


class BannerResponse(BaseModel):
    level: str
    message: str


class StatusResponse(BaseModel):
    status: str
    status_label: str
    banner: BannerResponse | None
    loading_text: str | None
    block_height: int | None
    total_pairs: int | None
    monitored_pairs: int
    last_update_text: str | None
    rpc_url: str
    selected_pair: str | None
    polling: bool


class FeatureFlagsResponse(BaseModel):
    real_time_updates: bool
    price_charts: bool
    progressive_render: bool


class ConfigResponse(BaseModel):
    app_name: str
    app_version: str
    description: str
    chain_id: int
    chain_name: str
    factory_address: str
    router_address: str
    wrapped_native_address: str
    poll_interval_ms: int
    max_pairs: int
    max_chart_points: int
    search_debounce_ms: int
    features: FeatureFlagsResponse
