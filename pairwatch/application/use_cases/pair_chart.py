from __future__ import annotations

import logging

from pairwatch.application.dto.chart import ChangeTimeframeInput, ChartOutput, SelectPairInput
from pairwatch.application.state import Selection
from pairwatch.application.use_cases.chart_presenter import ChartPresenter
from pairwatch.application.use_cases.scanner import PairScanner
from pairwatch.domain.entities.chart import ChartError, ChartView
from pairwatch.domain.exceptions import ChartNotAvailableError


logger = logging.getLogger(__name__)


def _chart_output(
    chart: ChartPresenter,
    selection: Selection,
    result: ChartView | ChartError | None,
) -> ChartOutput:
    return ChartOutput(
        timeframe=chart.timeframe,
        selected_pair=selection.pair_address,
        view=result if isinstance(result, ChartView) else None,
        error=result if isinstance(result, ChartError) else None,
    )


class SelectPairUseCase:
    def __init__(
        self,
        *,
        scanner: PairScanner,
        chart: ChartPresenter,
        selection: Selection,
        charts_enabled: bool = True,
    ):
        self._scanner = scanner
        self._chart = chart
        self._selection = selection
        self._charts_enabled = charts_enabled

    def execute(self, command: SelectPairInput) -> ChartOutput:
        if not self._charts_enabled:
            raise ChartNotAvailableError("Price charts are disabled.")
        pair = self._scanner.get_pair(command.pair_address)
        self._selection.select(pair.address)
        logger.info("select_pair: pair=%s symbol=%s", pair.address, pair.symbol_pair)
        result = self._chart.load(
            pair_address=pair.address,
            current_price=pair.price,
            label=pair.symbol_pair,
        )
        return _chart_output(self._chart, self._selection, result)


class GetChartUseCase:
    def __init__(self, *, chart: ChartPresenter, selection: Selection, charts_enabled: bool = True):
        self._chart = chart
        self._selection = selection
        self._charts_enabled = charts_enabled

    def execute(self) -> ChartOutput:
        if not self._charts_enabled:
            raise ChartNotAvailableError("Price charts are disabled.")
        result = self._chart.current()
        if result is None:
            raise ChartNotAvailableError("No pair selected.")
        return _chart_output(self._chart, self._selection, result)


class ChangeTimeframeUseCase:
    def __init__(self, *, chart: ChartPresenter, selection: Selection, charts_enabled: bool = True):
        self._chart = chart
        self._selection = selection
        self._charts_enabled = charts_enabled

    def execute(self, command: ChangeTimeframeInput) -> ChartOutput:
        if not self._charts_enabled:
            raise ChartNotAvailableError("Price charts are disabled.")
        result = self._chart.change_timeframe(command.timeframe.strip().lower())
        return _chart_output(self._chart, self._selection, result)
