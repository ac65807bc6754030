from __future__ import annotations

from dataclasses import dataclass, field

from pairwatch.domain.entities.status import Banner, BannerLevel, ConnectionStatus, PairRow


@dataclass
class Selection:
    """Pair currently shown in the chart, shared by scanner and chart presenter."""

    pair_address: str | None = None

    def select(self, pair_address: str) -> None:
        self.pair_address = pair_address

    def is_selected(self, pair_address: str) -> bool:
        return self.pair_address is not None and self.pair_address == pair_address


@dataclass
class DashboardState:
    status: ConnectionStatus = ConnectionStatus.OFFLINE
    status_label: str = "OFFLINE"
    banner: Banner | None = None
    loading_text: str | None = None
    block_height: int | None = None
    total_pairs: int | None = None
    last_update_text: str | None = None
    rows: list[PairRow] = field(default_factory=list)
    empty_message: str | None = None
    initialized: bool = False

    def set_status(self, status: ConnectionStatus, label: str) -> None:
        self.status = status
        self.status_label = label

    def show_success(self, message: str) -> None:
        self.banner = Banner(level=BannerLevel.SUCCESS, message=message)

    def show_error(self, message: str) -> None:
        self.banner = Banner(level=BannerLevel.ERROR, message=message)
