from __future__ import annotations

from pydantic import BaseModel, Field


class PairRowResponse(BaseModel):
    rank: int
    address: str
    symbol_pair: str
    volume_badge: str | None = Field(None, description="Synthetic 24h volume, e.g. $1.2M.")
    is_new: bool = Field(False, description="Pair created within the last 24h.")
    price: str = Field(..., description="Spot price token1 per token0, 6 decimals.")
    change_symbol: str
    change_pct: str
    is_positive: bool


class PairListResponse(BaseModel):
    search: str | None
    total: int
    message: str | None
    data: list[PairRowResponse]


class TokenResponse(BaseModel):
    address: str
    symbol: str
    name: str | None
    decimals: int


class PairDetailResponse(BaseModel):
    address: str
    symbol_pair: str
    token0: TokenResponse
    token1: TokenResponse
    reserve0: str
    reserve1: str
    block_timestamp_last: int
    price: float
    volume_24h: float
    price_change_pct: float
    last_update: float
    created_at: float
    is_new: bool
    is_selected: bool
