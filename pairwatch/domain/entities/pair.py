from __future__ import annotations

from dataclasses import dataclass


UNKNOWN_TOKEN_NAME = "Unknown Token"
UNKNOWN_TOKEN_SYMBOL = "UNKNOWN"
DEFAULT_TOKEN_DECIMALS = 18


@dataclass(frozen=True)
class Token:
    address: str
    symbol: str
    decimals: int
    name: str | None = None


@dataclass(frozen=True)
class Reserves:
    reserve0: int
    reserve1: int
    block_timestamp_last: int

    def has_liquidity(self) -> bool:
        return self.reserve0 > 0 and self.reserve1 > 0


@dataclass
class Pair:
    """Pair record kept in the scanner cache.

    Tokens are shared by reference with the token cache. Reserves, price and
    last_update are rewritten in place on every polling tick; the synthetic
    fields are sampled once at discovery.
    """

    address: str
    token0: Token
    token1: Token
    reserves: Reserves
    price: float
    volume_24h: float
    price_change_pct: float
    last_update: float
    created_at: float

    @property
    def symbol_pair(self) -> str:
        return f"{self.token0.symbol}/{self.token1.symbol}"
