from __future__ import annotations

from fastapi import Depends, Request

from pairwatch.application.use_cases.get_pair import GetPairUseCase
from pairwatch.application.use_cases.get_status import GetStatusUseCase
from pairwatch.application.use_cases.list_pairs import ListPairsUseCase
from pairwatch.application.use_cases.pair_chart import (
    ChangeTimeframeUseCase,
    GetChartUseCase,
    SelectPairUseCase,
)
from pairwatch.core.context import AppContext
from pairwatch.shared.config import Settings


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_app_settings(context: AppContext = Depends(get_context)) -> Settings:
    return context.settings


def get_status_use_case(context: AppContext = Depends(get_context)) -> GetStatusUseCase:
    return GetStatusUseCase(
        scanner=context.scanner,
        state=context.state,
        selection=context.selection,
    )


def get_list_pairs_use_case(context: AppContext = Depends(get_context)) -> ListPairsUseCase:
    return ListPairsUseCase(scanner=context.scanner, state=context.state)


def get_pair_use_case(context: AppContext = Depends(get_context)) -> GetPairUseCase:
    return GetPairUseCase(scanner=context.scanner, selection=context.selection)


def get_select_pair_use_case(context: AppContext = Depends(get_context)) -> SelectPairUseCase:
    return SelectPairUseCase(
        scanner=context.scanner,
        chart=context.chart,
        selection=context.selection,
        charts_enabled=context.settings.price_charts,
    )


def get_chart_use_case(context: AppContext = Depends(get_context)) -> GetChartUseCase:
    return GetChartUseCase(
        chart=context.chart,
        selection=context.selection,
        charts_enabled=context.settings.price_charts,
    )


def get_change_timeframe_use_case(
    context: AppContext = Depends(get_context),
) -> ChangeTimeframeUseCase:
    return ChangeTimeframeUseCase(
        chart=context.chart,
        selection=context.selection,
        charts_enabled=context.settings.price_charts,
    )
