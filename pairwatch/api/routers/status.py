from __future__ import annotations

from fastapi import APIRouter, Depends

from pairwatch.api.deps import get_app_settings, get_status_use_case
from pairwatch.api.schemas.status import (
    BannerResponse,
    ConfigResponse,
    FeatureFlagsResponse,
    StatusResponse,
)
from pairwatch.application.use_cases.get_status import GetStatusUseCase
from pairwatch.shared.config import Settings

router = APIRouter()


@router.get("/")
def root(settings: Settings = Depends(get_app_settings)):
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "chain": settings.chain_name,
    }


@router.get("/v1/status", response_model=StatusResponse)
def get_status(use_case: GetStatusUseCase = Depends(get_status_use_case)):
    result = use_case.execute()
    banner = None
    if result.banner is not None:
        banner = BannerResponse(level=result.banner.level.value, message=result.banner.message)
    return StatusResponse(
        status=result.status.value,
        status_label=result.status_label,
        banner=banner,
        loading_text=result.loading_text,
        block_height=result.block_height,
        total_pairs=result.total_pairs,
        monitored_pairs=result.monitored_pairs,
        last_update_text=result.last_update_text,
        rpc_url=result.rpc_url,
        selected_pair=result.selected_pair,
        polling=result.polling,
    )


@router.get("/v1/config", response_model=ConfigResponse)
def get_config(settings: Settings = Depends(get_app_settings)):
    return ConfigResponse(
        app_name=settings.app_name,
        app_version=settings.app_version,
        description=settings.app_description,
        chain_id=settings.chain_id,
        chain_name=settings.chain_name,
        factory_address=settings.factory_address,
        router_address=settings.router_address,
        wrapped_native_address=settings.wrapped_native_address,
        poll_interval_ms=settings.poll_interval_ms,
        max_pairs=settings.max_pairs,
        max_chart_points=settings.max_chart_points,
        search_debounce_ms=settings.search_debounce_ms,
        features=FeatureFlagsResponse(
            real_time_updates=settings.real_time_updates,
            price_charts=settings.price_charts,
            progressive_render=settings.progressive_render,
        ),
    )
