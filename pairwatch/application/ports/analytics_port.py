from __future__ import annotations

from typing import Protocol

from pairwatch.domain.entities.chart import ChartPoint


class AnalyticsPort(Protocol):
    def volume_24h(self, *, pair_address: str) -> float:
        ...

    def price_change_pct(self, *, pair_address: str) -> float:
        ...

    def created_at(self, *, pair_address: str, now: float) -> float:
        ...

    def price_series(
        self,
        *,
        pair_address: str,
        base_price: float,
        points: int,
        interval_seconds: int,
        now_ms: int,
    ) -> list[ChartPoint]:
        ...

    def point_volume(self, *, pair_address: str) -> float:
        ...
