from __future__ import annotations

from pydantic import BaseModel, Field


class TimeframeRequest(BaseModel):
    timeframe: str = Field(..., description="One of 1h, 4h, 1d, 1w.")


class ChartPointResponse(BaseModel):
    time_ms: int
    price: float
    price_label: str
    volume: float


class ChartStyleResponse(BaseModel):
    border_color: str
    background_color: str
    point_color: str


class ChartViewResponse(BaseModel):
    pair_address: str
    label: str
    title: str
    is_positive: bool
    price_change_pct: float
    style: ChartStyleResponse
    points: list[ChartPointResponse]


class ChartErrorResponse(BaseModel):
    pair_address: str
    message: str


class ChartResponse(BaseModel):
    timeframe: str
    selected_pair: str | None
    chart: ChartViewResponse | None
    error: ChartErrorResponse | None
