from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
import time
from typing import Callable

from pairwatch.application.ports.analytics_port import AnalyticsPort
from pairwatch.application.state import Selection
from pairwatch.domain.entities.chart import ChartError, ChartPoint, ChartView
from pairwatch.domain.exceptions import ChartRenderError, InvalidTimeframeError
from pairwatch.domain.services.formatting import chart_title
from pairwatch.domain.services.trend import is_uptrend, series_change_pct, trend_style


logger = logging.getLogger(__name__)


DEFAULT_TIMEFRAME = "1h"
TIMEFRAME_MULTIPLIERS = {
    "1h": 1,
    "4h": 4,
    "1d": 24,
    "1w": 168,
}
CHART_ERROR_MESSAGE = "Failed to load chart data"


@dataclass(frozen=True)
class ChartSettings:
    max_points: int
    interval_seconds: int = 60


class ChartPresenter:
    """Owns the rolling price series per pair and the single active chart view."""

    def __init__(
        self,
        *,
        analytics: AnalyticsPort,
        selection: Selection,
        settings: ChartSettings,
        clock: Callable[[], float] = time.time,
    ):
        if settings.max_points < 2:
            raise ValueError("max_points must be at least 2.")
        self._analytics = analytics
        self._selection = selection
        self._settings = settings
        self._clock = clock
        self._series: dict[str, deque[ChartPoint]] = {}
        self._current_pair: str | None = None
        self._label: str = ""
        self._current_price: float = 0.0
        self._timeframe = DEFAULT_TIMEFRAME
        self._view: ChartView | None = None
        self._error: ChartError | None = None

    @property
    def timeframe(self) -> str:
        return self._timeframe

    def is_active(self) -> bool:
        return self._view is not None

    def current(self) -> ChartView | ChartError | None:
        return self._error or self._view

    def series_for(self, pair_address: str) -> list[ChartPoint]:
        return list(self._series.get(pair_address, ()))

    def load(self, *, pair_address: str, current_price: float, label: str) -> ChartView | ChartError:
        logger.info("chart_presenter: load pair=%s price=%s", pair_address, current_price)
        self._current_pair = pair_address
        self._label = label
        self._current_price = current_price
        self._view = None
        self._error = None

        series = self._series.get(pair_address)
        if series is None:
            series = self._generate(pair_address=pair_address, base_price=current_price)
            self._series[pair_address] = series
        return self._render(pair_address, series)

    def update(self, *, pair_address: str, new_price: float) -> ChartView | ChartError | None:
        if pair_address != self._current_pair or not self._selection.is_selected(pair_address):
            return None
        series = self._series.get(pair_address)
        if series is None or self._view is None:
            return None

        series.append(
            ChartPoint(
                time_ms=int(self._clock() * 1000),
                price=new_price,
                volume=self._analytics.point_volume(pair_address=pair_address),
            )
        )
        self._current_price = new_price
        return self._render(pair_address, series)

    def change_timeframe(self, timeframe: str) -> ChartView | ChartError | None:
        if timeframe not in TIMEFRAME_MULTIPLIERS:
            raise InvalidTimeframeError(
                f"timeframe must be one of: {', '.join(TIMEFRAME_MULTIPLIERS)}."
            )
        self._timeframe = timeframe
        logger.info("chart_presenter: timeframe=%s pair=%s", timeframe, self._current_pair)

        if self._current_pair is None:
            return None
        series = self._generate(pair_address=self._current_pair, base_price=self._current_price)
        self._series[self._current_pair] = series
        self._error = None
        return self._render(self._current_pair, series)

    def _generate(self, *, pair_address: str, base_price: float) -> deque[ChartPoint]:
        interval = self._settings.interval_seconds * TIMEFRAME_MULTIPLIERS[self._timeframe]
        points = self._analytics.price_series(
            pair_address=pair_address,
            base_price=base_price,
            points=self._settings.max_points,
            interval_seconds=interval,
            now_ms=int(self._clock() * 1000),
        )
        return deque(points, maxlen=self._settings.max_points)

    def _render(self, pair_address: str, series: deque[ChartPoint]) -> ChartView | ChartError:
        try:
            view = self._build_view(pair_address, list(series))
        except ChartRenderError as exc:
            logger.error("chart_presenter: render_failed pair=%s error=%s", pair_address, exc)
            self._view = None
            self._error = ChartError(pair_address=pair_address, message=CHART_ERROR_MESSAGE)
            return self._error

        self._view = view
        self._error = None
        return view

    def _build_view(self, pair_address: str, points: list[ChartPoint]) -> ChartView:
        prices = [point.price for point in points]
        try:
            change_pct = series_change_pct(prices)
            positive = is_uptrend(prices)
        except ValueError as exc:
            raise ChartRenderError(str(exc)) from exc

        return ChartView(
            pair_address=pair_address,
            label=self._label,
            timeframe=self._timeframe,
            points=points,
            is_positive=positive,
            price_change_pct=change_pct,
            style=trend_style(positive),
            title=chart_title(
                symbol_pair=self._label,
                price=self._current_price,
                change_pct=change_pct,
                is_positive=positive,
            ),
        )
