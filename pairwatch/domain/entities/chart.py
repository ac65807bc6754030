from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChartPoint:
    time_ms: int
    price: float
    volume: float


@dataclass(frozen=True)
class ChartStyle:
    border_color: str
    background_color: str
    point_color: str


@dataclass(frozen=True)
class ChartView:
    pair_address: str
    label: str
    timeframe: str
    points: list[ChartPoint]
    is_positive: bool
    price_change_pct: float
    style: ChartStyle
    title: str


@dataclass(frozen=True)
class ChartError:
    pair_address: str
    message: str
