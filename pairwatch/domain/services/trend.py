from __future__ import annotations

from collections.abc import Sequence

from pairwatch.domain.entities.chart import ChartStyle


UP_COLOR = "#00ff88"
DOWN_COLOR = "#ff4444"
UP_FILL = "rgba(0, 255, 136, 0.1)"
DOWN_FILL = "rgba(255, 68, 68, 0.1)"

UP_ARROW = "↗"
DOWN_ARROW = "↘"


def series_change_pct(prices: Sequence[float]) -> float:
    if not prices:
        raise ValueError("series must not be empty.")
    first = prices[0]
    if first <= 0:
        raise ValueError("series must start with a positive price.")
    return (prices[-1] - first) / first * 100


def is_uptrend(prices: Sequence[float]) -> bool:
    if not prices:
        raise ValueError("series must not be empty.")
    return prices[-1] >= prices[0]


def trend_style(is_positive: bool) -> ChartStyle:
    if is_positive:
        return ChartStyle(border_color=UP_COLOR, background_color=UP_FILL, point_color=UP_COLOR)
    return ChartStyle(border_color=DOWN_COLOR, background_color=DOWN_FILL, point_color=DOWN_COLOR)


def trend_arrow(is_positive: bool) -> str:
    return UP_ARROW if is_positive else DOWN_ARROW
