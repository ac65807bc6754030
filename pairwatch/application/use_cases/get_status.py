from __future__ import annotations

from pairwatch.application.dto.status import StatusOutput
from pairwatch.application.state import DashboardState, Selection
from pairwatch.application.use_cases.scanner import PairScanner


class GetStatusUseCase:
    def __init__(self, *, scanner: PairScanner, state: DashboardState, selection: Selection):
        self._scanner = scanner
        self._state = state
        self._selection = selection

    def execute(self) -> StatusOutput:
        return StatusOutput(
            status=self._state.status,
            status_label=self._state.status_label,
            banner=self._state.banner,
            loading_text=self._state.loading_text,
            block_height=self._state.block_height,
            total_pairs=self._state.total_pairs,
            monitored_pairs=len(self._scanner.pairs),
            last_update_text=self._state.last_update_text,
            rpc_url=self._scanner.current_rpc_url,
            selected_pair=self._selection.pair_address,
            polling=self._scanner.is_running,
        )
