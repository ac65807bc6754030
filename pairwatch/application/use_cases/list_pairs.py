from __future__ import annotations

from pairwatch.application.dto.pairs import ListPairsInput, ListPairsOutput
from pairwatch.application.state import DashboardState
from pairwatch.application.use_cases.scanner import PairScanner
from pairwatch.domain.entities.status import ConnectionStatus
from pairwatch.domain.exceptions import RpcConnectionError


NO_MATCH_MESSAGE = "No pairs match your search"


class ListPairsUseCase:
    def __init__(self, *, scanner: PairScanner, state: DashboardState):
        self._scanner = scanner
        self._state = state

    def execute(self, command: ListPairsInput) -> ListPairsOutput:
        if self._state.status == ConnectionStatus.FAILED:
            message = self._state.banner.message if self._state.banner else "Connection failed."
            raise RpcConnectionError(message)

        search = command.search.strip() if command.search else None
        if not search:
            return ListPairsOutput(
                search=None,
                total=len(self._state.rows),
                rows=list(self._state.rows),
                message=self._state.empty_message or self._state.loading_text,
            )

        rows = self._scanner.filter_pairs(search)
        return ListPairsOutput(
            search=search,
            total=len(rows),
            rows=rows,
            message=None if rows else NO_MATCH_MESSAGE,
        )
