from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConnectionStatus(str, Enum):
    OFFLINE = "offline"
    CONNECTING = "connecting"
    ONLINE = "online"
    FAILED = "failed"


class BannerLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Banner:
    level: BannerLevel
    message: str


@dataclass(frozen=True)
class PairRow:
    rank: int
    address: str
    symbol_pair: str
    volume_badge: str | None
    is_new: bool
    price: str
    change_symbol: str
    change_pct: str
    is_positive: bool
