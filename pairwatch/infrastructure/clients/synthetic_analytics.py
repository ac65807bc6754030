from __future__ import annotations

import random

from pairwatch.domain.entities.chart import ChartPoint


WEEK_SECONDS = 604800
WALK_VOLATILITY = 0.008
MIN_PRICE = 0.000001


class SyntheticAnalytics:
    """Demonstration figures standing in for swap-event analytics.

    Nothing here is derived from the chain: volumes, price changes, creation
    times and chart history are random samples.
    """

    def __init__(self, *, seed: int | None = None, rng: random.Random | None = None):
        self._rng = rng or random.Random(seed)

    def volume_24h(self, *, pair_address: str) -> float:
        _ = pair_address
        return self._rng.random() * 1_000_000 + 10_000

    def price_change_pct(self, *, pair_address: str) -> float:
        _ = pair_address
        return (self._rng.random() - 0.5) * 20

    def created_at(self, *, pair_address: str, now: float) -> float:
        _ = pair_address
        return now - self._rng.random() * WEEK_SECONDS

    def point_volume(self, *, pair_address: str) -> float:
        _ = pair_address
        return self._rng.random() * 10_000 + 1000

    def price_series(
        self,
        *,
        pair_address: str,
        base_price: float,
        points: int,
        interval_seconds: int,
        now_ms: int,
    ) -> list[ChartPoint]:
        series: list[ChartPoint] = []
        price = base_price
        for step in range(points - 1, -1, -1):
            change = (self._rng.random() - 0.5) * WALK_VOLATILITY
            price = price * (1 + change)
            series.append(
                ChartPoint(
                    time_ms=now_ms - step * interval_seconds * 1000,
                    price=max(price, MIN_PRICE),
                    volume=self.point_volume(pair_address=pair_address),
                )
            )
        return series
