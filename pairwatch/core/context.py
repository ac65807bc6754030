from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
import time
from typing import Callable

from pairwatch.application.ports.analytics_port import AnalyticsPort
from pairwatch.application.ports.chain_reader_port import ChainReaderPort
from pairwatch.application.state import DashboardState, Selection
from pairwatch.application.use_cases.chart_presenter import ChartPresenter, ChartSettings
from pairwatch.application.use_cases.scanner import PairScanner, ScannerSettings
from pairwatch.infrastructure.clients.evm_chain_reader import EvmChainReader
from pairwatch.infrastructure.clients.synthetic_analytics import SyntheticAnalytics
from pairwatch.shared.config import Settings


@dataclass
class AppContext:
    settings: Settings
    state: DashboardState
    selection: Selection
    chain_reader: ChainReaderPort
    analytics: AnalyticsPort
    chart: ChartPresenter
    scanner: PairScanner


def scanner_settings(settings: Settings) -> ScannerSettings:
    return ScannerSettings(
        rpc_endpoints=settings.rpc_endpoints,
        chain_id=settings.chain_id,
        chain_name=settings.chain_name,
        factory_address=settings.factory_address,
        max_pairs=settings.max_pairs,
        retry_count=settings.retry_count,
        retry_base_delay_ms=settings.retry_base_delay_ms,
        poll_interval_ms=settings.poll_interval_ms,
        progressive_render=settings.progressive_render,
        progress_every=settings.progress_every,
        real_time_updates=settings.real_time_updates,
    )


def build_context(
    settings: Settings,
    *,
    chain_reader: ChainReaderPort | None = None,
    analytics: AnalyticsPort | None = None,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AppContext:
    state = DashboardState()
    selection = Selection()
    reader = chain_reader or EvmChainReader(timeout_seconds=settings.rpc_timeout_seconds)
    synthetic = analytics or SyntheticAnalytics(seed=settings.synthetic_seed)
    chart = ChartPresenter(
        analytics=synthetic,
        selection=selection,
        settings=ChartSettings(
            max_points=settings.max_chart_points,
            interval_seconds=settings.chart_interval_seconds,
        ),
        clock=clock,
    )
    scanner = PairScanner(
        chain_reader=reader,
        analytics=synthetic,
        chart=chart,
        selection=selection,
        state=state,
        settings=scanner_settings(settings),
        clock=clock,
        sleep=sleep,
    )
    return AppContext(
        settings=settings,
        state=state,
        selection=selection,
        chain_reader=reader,
        analytics=synthetic,
        chart=chart,
        scanner=scanner,
    )
