from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from pairwatch.api.deps import get_change_timeframe_use_case, get_chart_use_case
from pairwatch.api.schemas.chart import (
    ChartErrorResponse,
    ChartPointResponse,
    ChartResponse,
    ChartStyleResponse,
    ChartViewResponse,
    TimeframeRequest,
)
from pairwatch.application.dto.chart import ChangeTimeframeInput, ChartOutput
from pairwatch.application.use_cases.pair_chart import ChangeTimeframeUseCase, GetChartUseCase
from pairwatch.domain.exceptions import ChartNotAvailableError, InvalidTimeframeError
from pairwatch.domain.services.formatting import format_axis_price

router = APIRouter()


def chart_response(result: ChartOutput) -> ChartResponse:
    view = None
    if result.view is not None:
        view = ChartViewResponse(
            pair_address=result.view.pair_address,
            label=result.view.label,
            title=result.view.title,
            is_positive=result.view.is_positive,
            price_change_pct=result.view.price_change_pct,
            style=ChartStyleResponse(
                border_color=result.view.style.border_color,
                background_color=result.view.style.background_color,
                point_color=result.view.style.point_color,
            ),
            points=[
                ChartPointResponse(
                    time_ms=point.time_ms,
                    price=point.price,
                    price_label=format_axis_price(point.price),
                    volume=point.volume,
                )
                for point in result.view.points
            ],
        )
    error = None
    if result.error is not None:
        error = ChartErrorResponse(
            pair_address=result.error.pair_address,
            message=result.error.message,
        )
    return ChartResponse(
        timeframe=result.timeframe,
        selected_pair=result.selected_pair,
        chart=view,
        error=error,
    )


@router.get("/v1/chart", response_model=ChartResponse)
def get_chart(use_case: GetChartUseCase = Depends(get_chart_use_case)):
    try:
        result = use_case.execute()
    except ChartNotAvailableError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return chart_response(result)


@router.post("/v1/chart/timeframe", response_model=ChartResponse)
def change_timeframe(
    req: TimeframeRequest,
    use_case: ChangeTimeframeUseCase = Depends(get_change_timeframe_use_case),
):
    try:
        result = use_case.execute(ChangeTimeframeInput(timeframe=req.timeframe))
    except InvalidTimeframeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ChartNotAvailableError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return chart_response(result)
