from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable
from dataclasses import dataclass
from datetime import datetime
import logging
import time
from typing import Callable, TypeVar

from pairwatch.application.ports.analytics_port import AnalyticsPort
from pairwatch.application.ports.chain_reader_port import ChainReaderPort
from pairwatch.application.state import DashboardState, Selection
from pairwatch.application.use_cases.chart_presenter import ChartPresenter
from pairwatch.domain.entities.pair import (
    DEFAULT_TOKEN_DECIMALS,
    UNKNOWN_TOKEN_NAME,
    UNKNOWN_TOKEN_SYMBOL,
    Pair,
    Token,
)
from pairwatch.domain.entities.status import ConnectionStatus, PairRow
from pairwatch.domain.exceptions import ContractCallError, DomainError, PairNotFoundError
from pairwatch.domain.services.formatting import build_pair_row, last_update_line
from pairwatch.domain.services.pair_search import filter_pairs, sort_by_volume
from pairwatch.domain.services.spot_price import calculate_spot_price


logger = logging.getLogger(__name__)

T = TypeVar("T")

FATAL_CONNECTION_MESSAGE = (
    "Failed to connect to blockchain after multiple attempts. Please refresh the page."
)
NO_PAIRS_MESSAGE = "No active trading pairs found"


@dataclass(frozen=True)
class ScannerSettings:
    rpc_endpoints: tuple[str, ...]
    chain_id: int
    chain_name: str
    factory_address: str
    max_pairs: int
    retry_count: int
    retry_base_delay_ms: int
    poll_interval_ms: int
    progressive_render: bool = True
    progress_every: int = 5
    real_time_updates: bool = True


class PairScanner:
    """Loads DEX pairs from the factory and keeps their reserves fresh.

    ## Lifecycle
    `initialize()` connects (rotating endpoints, retrying with a linear
    backoff of `retry_base_delay_ms * attempt`), enumerates up to
    `max_pairs` pairs and starts the polling loop. `stop()` cancels it.

    ## Polling
    The loop ticks every `poll_interval_ms`. A tick that fires while the
    previous refresh is still running is skipped. Inside a tick every pair
    is refreshed concurrently and failures stay local to the pair.
    """

    def __init__(
        self,
        *,
        chain_reader: ChainReaderPort,
        analytics: AnalyticsPort,
        chart: ChartPresenter,
        selection: Selection,
        state: DashboardState,
        settings: ScannerSettings,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if not settings.rpc_endpoints:
            raise ValueError("At least one RPC endpoint is required.")
        self._chain = chain_reader
        self._analytics = analytics
        self._chart = chart
        self._selection = selection
        self._state = state
        self._settings = settings
        self._clock = clock
        self._sleep = sleep

        self.pairs: dict[str, Pair] = {}
        self.tokens: dict[str, Token] = {}

        self._rpc_index = 0
        self._running = False
        self._poll_task: asyncio.Task[None] | None = None
        self._refresh_task: asyncio.Task[int] | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def current_rpc_url(self) -> str:
        return self._settings.rpc_endpoints[self._rpc_index]

    async def initialize(self) -> bool:
        attempts = max(1, self._settings.retry_count)
        for attempt in range(1, attempts + 1):
            try:
                await self._initialize_once()
                return True
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "scanner: initialize_failed attempt=%s/%s rpc=%s error=%s",
                    attempt,
                    attempts,
                    self.current_rpc_url,
                    exc,
                )
                if attempt == attempts:
                    break
                self._state.show_error(f"Connection issue: {exc}. Retrying...")
                self._rpc_index = (self._rpc_index + 1) % len(self._settings.rpc_endpoints)
                await self._sleep(self._settings.retry_base_delay_ms * attempt / 1000)

        logger.error("scanner: connection_failed attempts=%s", attempts)
        self._state.show_error(FATAL_CONNECTION_MESSAGE)
        self._state.set_status(ConnectionStatus.FAILED, "CONNECTION FAILED")
        return False

    async def _initialize_once(self) -> None:
        self._state.set_status(ConnectionStatus.CONNECTING, "CONNECTING...")

        rpc_url = self.current_rpc_url
        block_number = await self._chain.connect(rpc_url=rpc_url, chain_id=self._settings.chain_id)
        logger.info(
            "scanner: connected rpc=%s chain=%s block=%s",
            rpc_url,
            self._settings.chain_name,
            block_number,
        )
        self._state.block_height = block_number

        await self._load_trading_pairs()

        self._running = True
        self._state.initialized = True
        if self._settings.real_time_updates:
            self.start_real_time_updates()

        self._state.show_success(f"Live monitoring {len(self.pairs)} trading pairs")
        self._state.set_status(
            ConnectionStatus.ONLINE,
            f"LIVE - {self._settings.chain_name.upper()}",
        )

    async def _load_trading_pairs(self) -> None:
        self._state.loading_text = "Scanning blockchain for trading pairs..."
        factory = self._settings.factory_address

        try:
            pair_count = await self._chain.all_pairs_length(factory_address=factory)
        except DomainError as exc:
            raise ContractCallError(f"Failed to load trading pairs: {exc}") from exc
        self._state.total_pairs = pair_count

        load_count = min(pair_count, self._settings.max_pairs)
        loaded = 0
        for index in range(load_count):
            try:
                pair_address = await self._chain.all_pairs(factory_address=factory, index=index)
            except Exception as exc:  # noqa: BLE001
                logger.warning("scanner: pair_index_skipped index=%s error=%s", index, exc)
                continue

            if not await self.load_pair(pair_address):
                continue
            loaded += 1
            if self._settings.progressive_render and loaded % self._settings.progress_every == 0:
                self._state.loading_text = f"Loading pairs... ({loaded}/{load_count})"
                self.render_pairs_list()

        self._state.loading_text = None
        self.render_pairs_list()
        logger.info(
            "scanner: pairs_loaded loaded=%s requested=%s total=%s",
            loaded,
            load_count,
            pair_count,
        )

    async def load_pair(self, pair_address: str) -> bool:
        try:
            reserves, token0_address, token1_address = await asyncio.gather(
                self._chain.get_reserves(pair_address=pair_address),
                self._chain.token0(pair_address=pair_address),
                self._chain.token1(pair_address=pair_address),
            )
            token0, token1 = await asyncio.gather(
                self.load_token_metadata(token0_address),
                self.load_token_metadata(token1_address),
            )
        except DomainError as exc:
            logger.warning("scanner: pair_load_failed pair=%s error=%s", pair_address, exc)
            return False
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "scanner: pair_load_failed pair=%s error=%s", pair_address, exc, exc_info=True
            )
            return False

        price = calculate_spot_price(
            reserves,
            decimals0=token0.decimals,
            decimals1=token1.decimals,
        )
        if price == 0:
            logger.info("scanner: pair_skipped_no_liquidity pair=%s", pair_address)
            return False

        now = self._clock()
        self.pairs[pair_address] = Pair(
            address=pair_address,
            token0=token0,
            token1=token1,
            reserves=reserves,
            price=price,
            volume_24h=self._analytics.volume_24h(pair_address=pair_address),
            price_change_pct=self._analytics.price_change_pct(pair_address=pair_address),
            last_update=now,
            created_at=self._analytics.created_at(pair_address=pair_address, now=now),
        )
        return True

    async def load_token_metadata(self, token_address: str) -> Token:
        cached = self.tokens.get(token_address)
        if cached is not None:
            return cached

        name, symbol, decimals = await asyncio.gather(
            self._read_or_default(
                self._chain.token_name(token_address=token_address),
                UNKNOWN_TOKEN_NAME,
                field_name="name",
                token_address=token_address,
            ),
            self._read_or_default(
                self._chain.token_symbol(token_address=token_address),
                UNKNOWN_TOKEN_SYMBOL,
                field_name="symbol",
                token_address=token_address,
            ),
            self._read_or_default(
                self._chain.token_decimals(token_address=token_address),
                DEFAULT_TOKEN_DECIMALS,
                field_name="decimals",
                token_address=token_address,
            ),
        )
        # Another pair may have cached this token while the reads were in flight.
        token = self.tokens.setdefault(
            token_address,
            Token(address=token_address, symbol=symbol, decimals=decimals, name=name),
        )
        return token

    async def _read_or_default(
        self,
        call: Awaitable[T],
        default: T,
        *,
        field_name: str,
        token_address: str,
    ) -> T:
        try:
            return await call
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "scanner: token_field_fallback token=%s field=%s error=%s",
                token_address,
                field_name,
                exc,
            )
            return default

    def get_pair(self, pair_address: str) -> Pair:
        pair = self.pairs.get(pair_address)
        if pair is None:
            lowered = pair_address.lower()
            pair = next((p for a, p in self.pairs.items() if a.lower() == lowered), None)
        if pair is None:
            raise PairNotFoundError(f"Pair {pair_address} is not monitored.")
        return pair

    def render_pairs_list(self) -> list[PairRow]:
        if not self.pairs:
            self._state.rows = []
            self._state.empty_message = NO_PAIRS_MESSAGE
            return []

        now = self._clock()
        rows = [
            build_pair_row(pair, rank=rank, now=now)
            for rank, pair in enumerate(sort_by_volume(self.pairs.values()), start=1)
        ]
        self._state.rows = rows
        self._state.empty_message = None
        return rows

    def filter_pairs(self, search_term: str | None) -> list[PairRow]:
        if not search_term:
            return self.render_pairs_list()

        now = self._clock()
        return [
            build_pair_row(pair, rank=rank, now=now, with_badges=False)
            for rank, pair in enumerate(filter_pairs(self.pairs.values(), search_term), start=1)
        ]

    def start_real_time_updates(self) -> None:
        if self._poll_task is not None and not self._poll_task.done():
            return
        self._running = True
        self._poll_task = asyncio.create_task(self._poll_loop())
        logger.info(
            "scanner: polling_started interval_ms=%s pairs=%s",
            self._settings.poll_interval_ms,
            len(self.pairs),
        )

    async def _poll_loop(self) -> None:
        interval = self._settings.poll_interval_ms / 1000
        while self._running:
            await self._sleep(interval)
            if not self._running:
                break
            if self._refresh_task is not None and not self._refresh_task.done():
                logger.warning("scanner: tick_skipped reason=refresh_in_flight")
                continue
            self._refresh_task = asyncio.create_task(self.refresh_pairs())
            self._refresh_task.add_done_callback(_log_refresh_result)

    async def refresh_pairs(self) -> int:
        pairs = list(self.pairs.values())
        results = await asyncio.gather(*(self._refresh_pair(pair) for pair in pairs))
        refreshed = {pair.address for pair, ok in zip(pairs, results) if ok}

        self.render_pairs_list()
        self._state.last_update_text = last_update_line(
            now=datetime.fromtimestamp(self._clock()),
            monitored=len(self.pairs),
        )

        selected = self._selection.pair_address
        if selected is not None and selected in refreshed and self._chart.is_active():
            self._chart.update(pair_address=selected, new_price=self.pairs[selected].price)

        logger.debug("scanner: tick refreshed=%s total=%s", len(refreshed), len(pairs))
        return len(refreshed)

    async def _refresh_pair(self, pair: Pair) -> bool:
        try:
            reserves = await self._chain.get_reserves(pair_address=pair.address)
        except DomainError as exc:
            logger.warning("scanner: pair_refresh_failed pair=%s error=%s", pair.address, exc)
            return False
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "scanner: pair_refresh_failed pair=%s error=%s", pair.address, exc, exc_info=True
            )
            return False

        price = calculate_spot_price(
            reserves,
            decimals0=pair.token0.decimals,
            decimals1=pair.token1.decimals,
        )
        if price == 0:
            logger.warning("scanner: pair_refresh_no_liquidity pair=%s", pair.address)
            return False

        pair.reserves = reserves
        pair.price = price
        pair.last_update = self._clock()
        return True

    async def stop(self) -> None:
        self._running = False
        for task in (self._poll_task, self._refresh_task):
            if task is None or task.done():
                continue
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._poll_task = None
        self._refresh_task = None
        await self._chain.close()
        logger.info("scanner: stopped")


def _log_refresh_result(task: asyncio.Task[int]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("scanner: refresh_cycle_failed error=%s", exc, exc_info=exc)
