from __future__ import annotations

from dataclasses import dataclass

from pairwatch.domain.entities.status import PairRow


@dataclass(frozen=True)
class ListPairsInput:
    search: str | None = None


@dataclass(frozen=True)
class ListPairsOutput:
    search: str | None
    total: int
    rows: list[PairRow]
    message: str | None


@dataclass(frozen=True)
class TokenOutput:
    address: str
    symbol: str
    name: str | None
    decimals: int


@dataclass(frozen=True)
class PairDetailOutput:
    address: str
    symbol_pair: str
    token0: TokenOutput
    token1: TokenOutput
    reserve0: int
    reserve1: int
    block_timestamp_last: int
    price: float
    volume_24h: float
    price_change_pct: float
    last_update: float
    created_at: float
    is_new: bool
    is_selected: bool
