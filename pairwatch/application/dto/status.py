from __future__ import annotations

from dataclasses import dataclass

from pairwatch.domain.entities.status import Banner, ConnectionStatus


@dataclass(frozen=True)
class StatusOutput:
    status: ConnectionStatus
    status_label: str
    banner: Banner | None
    loading_text: str | None
    block_height: int | None
    total_pairs: int | None
    monitored_pairs: int
    last_update_text: str | None
    rpc_url: str
    selected_pair: str | None
    polling: bool
