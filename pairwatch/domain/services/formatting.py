from __future__ import annotations

from datetime import datetime

from pairwatch.domain.entities.pair import Pair
from pairwatch.domain.entities.status import PairRow
from pairwatch.domain.services.trend import trend_arrow


NEW_PAIR_WINDOW_SECONDS = 86400


def format_volume(volume: float) -> str:
    if volume >= 1_000_000:
        return f"${volume / 1_000_000:.1f}M"
    if volume >= 1000:
        return f"${round(volume / 1000)}K"
    return f"${round(volume)}"


def format_price(price: float) -> str:
    return f"{price:.6f}"


def format_axis_price(value: float) -> str:
    if value < 0.001:
        return f"{value:.8f}"
    if value < 1:
        return f"{value:.6f}"
    return f"{value:.4f}"


def format_change(change_pct: float) -> str:
    return f"{abs(change_pct):.2f}%"


def is_new_pair(pair: Pair, *, now: float) -> bool:
    return (now - pair.created_at) < NEW_PAIR_WINDOW_SECONDS


def build_pair_row(pair: Pair, *, rank: int, now: float, with_badges: bool = True) -> PairRow:
    is_positive = pair.price_change_pct >= 0
    return PairRow(
        rank=rank,
        address=pair.address,
        symbol_pair=pair.symbol_pair,
        volume_badge=format_volume(pair.volume_24h) if with_badges else None,
        is_new=is_new_pair(pair, now=now) if with_badges else False,
        price=format_price(pair.price),
        change_symbol=trend_arrow(is_positive),
        change_pct=format_change(pair.price_change_pct),
        is_positive=is_positive,
    )


def chart_title(*, symbol_pair: str, price: float, change_pct: float, is_positive: bool) -> str:
    return (
        f"{symbol_pair} {format_price(price)} • "
        f"{trend_arrow(is_positive)} {format_change(change_pct)}"
    )


def last_update_line(*, now: datetime, monitored: int) -> str:
    return f"Last update: {now.strftime('%H:%M:%S')} • Monitoring {monitored} pairs"
