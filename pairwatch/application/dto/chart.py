from __future__ import annotations

from dataclasses import dataclass

from pairwatch.domain.entities.chart import ChartError, ChartView


@dataclass(frozen=True)
class SelectPairInput:
    pair_address: str


@dataclass(frozen=True)
class ChangeTimeframeInput:
    timeframe: str


@dataclass(frozen=True)
class ChartOutput:
    timeframe: str
    selected_pair: str | None
    view: ChartView | None
    error: ChartError | None
