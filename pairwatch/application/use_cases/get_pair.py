from __future__ import annotations

import time
from typing import Callable

from pairwatch.application.dto.pairs import PairDetailOutput, TokenOutput
from pairwatch.application.state import Selection
from pairwatch.application.use_cases.scanner import PairScanner
from pairwatch.domain.entities.pair import Token
from pairwatch.domain.services.formatting import is_new_pair


def _token_output(token: Token) -> TokenOutput:
    return TokenOutput(
        address=token.address,
        symbol=token.symbol,
        name=token.name,
        decimals=token.decimals,
    )


class GetPairUseCase:
    def __init__(
        self,
        *,
        scanner: PairScanner,
        selection: Selection,
        clock: Callable[[], float] = time.time,
    ):
        self._scanner = scanner
        self._selection = selection
        self._clock = clock

    def execute(self, *, pair_address: str) -> PairDetailOutput:
        pair = self._scanner.get_pair(pair_address)
        return PairDetailOutput(
            address=pair.address,
            symbol_pair=pair.symbol_pair,
            token0=_token_output(pair.token0),
            token1=_token_output(pair.token1),
            reserve0=pair.reserves.reserve0,
            reserve1=pair.reserves.reserve1,
            block_timestamp_last=pair.reserves.block_timestamp_last,
            price=pair.price,
            volume_24h=pair.volume_24h,
            price_change_pct=pair.price_change_pct,
            last_update=pair.last_update,
            created_at=pair.created_at,
            is_new=is_new_pair(pair, now=self._clock()),
            is_selected=self._selection.is_selected(pair.address),
        )
