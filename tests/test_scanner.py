from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from pairwatch.application.state import DashboardState, Selection
from pairwatch.application.use_cases.chart_presenter import ChartPresenter, ChartSettings
from pairwatch.application.use_cases.scanner import (
    FATAL_CONNECTION_MESSAGE,
    NO_PAIRS_MESSAGE,
    PairScanner,
    ScannerSettings,
)
from pairwatch.domain.entities.chart import ChartPoint
from pairwatch.domain.entities.pair import Reserves
from pairwatch.domain.entities.status import BannerLevel, ConnectionStatus
from pairwatch.domain.exceptions import ContractCallError, PairNotFoundError, RpcConnectionError

NOW = 1_700_000_000.0
ENDPOINTS = ("https://rpc-a.example", "https://rpc-b.example")


def _reserves(reserve0: int = 10**18, reserve1: int = 2 * 10**18) -> Reserves:
    return Reserves(reserve0=reserve0, reserve1=reserve1, block_timestamp_last=1)


class FakeChainReader:
    def __init__(self, pairs: dict[str, tuple[str, str]], *, connect_failures: int = 0):
        self.pair_order = list(pairs)
        self.pair_tokens = dict(pairs)
        self.reserves = {address: _reserves() for address in pairs}
        self.symbols: dict[str, str] = {}
        self.decimals: dict[str, int] = {}
        self.failing_reserves: set[str] = set()
        self.failing_tokens: set[str] = set()
        self.crashing_reserves: set[str] = set()
        self.connect_exception: Exception | None = None
        self.reserves_gate: asyncio.Event | None = None
        self.reserve_calls: list[str] = []
        self.fail_pair_count = False
        self.connect_failures = connect_failures
        self.connect_calls: list[str] = []
        self.metadata_calls: list[str] = []
        self.closed = 0
        self.on_all_pairs: Callable[[int], None] | None = None

    async def connect(self, *, rpc_url: str, chain_id: int) -> int:
        _ = chain_id
        self.connect_calls.append(rpc_url)
        if self.connect_exception is not None:
            raise self.connect_exception
        if self.connect_failures > 0:
            self.connect_failures -= 1
            raise RpcConnectionError(f"{rpc_url} unreachable")
        return 123456

    async def close(self) -> None:
        self.closed += 1

    async def get_block_number(self) -> int:
        return 123457

    async def all_pairs_length(self, *, factory_address: str) -> int:
        _ = factory_address
        if self.fail_pair_count:
            raise ContractCallError("execution reverted")
        return len(self.pair_order)

    async def all_pairs(self, *, factory_address: str, index: int) -> str:
        _ = factory_address
        if self.on_all_pairs is not None:
            self.on_all_pairs(index)
        return self.pair_order[index]

    async def get_pair(self, *, factory_address: str, token_a: str, token_b: str) -> str:
        _ = factory_address
        for address, tokens in self.pair_tokens.items():
            if set(tokens) == {token_a, token_b}:
                return address
        return "0x0000000000000000000000000000000000000000"

    async def get_reserves(self, *, pair_address: str) -> Reserves:
        self.reserve_calls.append(pair_address)
        if self.reserves_gate is not None:
            await self.reserves_gate.wait()
        if pair_address in self.crashing_reserves:
            raise KeyError("reserve0")
        if pair_address in self.failing_reserves:
            raise ContractCallError("getReserves reverted")
        return self.reserves[pair_address]

    async def token0(self, *, pair_address: str) -> str:
        return self.pair_tokens[pair_address][0]

    async def token1(self, *, pair_address: str) -> str:
        return self.pair_tokens[pair_address][1]

    async def total_supply(self, *, contract_address: str) -> int:
        _ = contract_address
        return 10**18

    async def token_name(self, *, token_address: str) -> str:
        self._check_token(token_address)
        return f"{self.symbols.get(token_address, token_address)} Token"

    async def token_symbol(self, *, token_address: str) -> str:
        self.metadata_calls.append(token_address)
        self._check_token(token_address)
        return self.symbols.get(token_address, token_address.upper())

    async def token_decimals(self, *, token_address: str) -> int:
        self._check_token(token_address)
        return self.decimals.get(token_address, 18)

    def _check_token(self, token_address: str) -> None:
        if token_address in self.failing_tokens:
            raise ContractCallError("call reverted")


class FakeAnalytics:
    def __init__(self, volumes: dict[str, float] | None = None):
        self.volumes = volumes or {}

    def volume_24h(self, *, pair_address: str) -> float:
        return self.volumes.get(pair_address, 50_000.0)

    def price_change_pct(self, *, pair_address: str) -> float:
        _ = pair_address
        return 1.5

    def created_at(self, *, pair_address: str, now: float) -> float:
        _ = pair_address
        return now - 7200

    def point_volume(self, *, pair_address: str) -> float:
        _ = pair_address
        return 1000.0

    def price_series(
        self,
        *,
        pair_address: str,
        base_price: float,
        points: int,
        interval_seconds: int,
        now_ms: int,
    ) -> list[ChartPoint]:
        _ = (pair_address, interval_seconds)
        return [ChartPoint(time_ms=now_ms - i, price=base_price, volume=1.0) for i in range(points)]


class Harness:
    def __init__(self, chain: FakeChainReader, **overrides):
        self.chain = chain
        self.analytics = overrides.pop("analytics", FakeAnalytics())
        self.state = DashboardState()
        self.selection = Selection()
        self.sleeps: list[float] = []
        self.chart = ChartPresenter(
            analytics=self.analytics,
            selection=self.selection,
            settings=ChartSettings(max_points=5),
            clock=lambda: NOW,
        )
        settings = {
            "rpc_endpoints": ENDPOINTS,
            "chain_id": 9745,
            "chain_name": "Plasma Network",
            "factory_address": "0xfactory",
            "max_pairs": 25,
            "retry_count": 3,
            "retry_base_delay_ms": 2000,
            "poll_interval_ms": 15000,
            "progressive_render": True,
            "progress_every": 5,
            "real_time_updates": False,
        }
        settings.update(overrides)
        self.scanner = PairScanner(
            chain_reader=chain,
            analytics=self.analytics,
            chart=self.chart,
            selection=self.selection,
            state=self.state,
            settings=ScannerSettings(**settings),
            clock=lambda: NOW,
            sleep=self._sleep,
        )

    async def _sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        await asyncio.sleep(0)

    def initialize(self) -> bool:
        return asyncio.run(self.scanner.initialize())


def _three_pairs() -> FakeChainReader:
    return FakeChainReader(
        {
            "0xP1": ("0xwxpl", "0xusdt"),
            "0xP2": ("0xweth", "0xusdt"),
            "0xP3": ("0xwxpl", "0xweth"),
        }
    )


def test_scanner_requires_an_endpoint():
    with pytest.raises(ValueError):
        Harness(_three_pairs(), rpc_endpoints=())


def test_initialize_loads_all_pairs_and_goes_live():
    chain = _three_pairs()
    h = Harness(chain, analytics=FakeAnalytics({"0xP1": 10.0, "0xP2": 30.0, "0xP3": 20.0}))

    assert h.initialize() is True

    assert set(h.scanner.pairs) == {"0xP1", "0xP2", "0xP3"}
    assert h.scanner.pairs["0xP1"].price == pytest.approx(2.0)
    assert h.scanner.pairs["0xP1"].last_update == NOW
    assert h.state.status == ConnectionStatus.ONLINE
    assert h.state.status_label == "LIVE - PLASMA NETWORK"
    assert h.state.banner.level == BannerLevel.SUCCESS
    assert h.state.banner.message == "Live monitoring 3 trading pairs"
    assert h.state.block_height == 123456
    assert h.state.total_pairs == 3
    assert h.state.loading_text is None
    assert h.state.initialized is True
    assert [row.address for row in h.state.rows] == ["0xP2", "0xP3", "0xP1"]
    assert [row.rank for row in h.state.rows] == [1, 2, 3]
    assert chain.connect_calls == [ENDPOINTS[0]]


def test_token_metadata_is_fetched_once_per_token():
    chain = _three_pairs()
    h = Harness(chain)

    h.initialize()

    assert sorted(chain.metadata_calls) == ["0xusdt", "0xweth", "0xwxpl"]
    assert h.scanner.pairs["0xP1"].token0 is h.scanner.pairs["0xP3"].token0


def test_failing_reserves_skip_only_that_pair():
    chain = _three_pairs()
    chain.failing_reserves.add("0xP2")
    h = Harness(chain)

    assert h.initialize() is True

    assert set(h.scanner.pairs) == {"0xP1", "0xP3"}
    assert h.state.banner.message == "Live monitoring 2 trading pairs"


def test_token_metadata_failure_falls_back_to_unknown():
    chain = _three_pairs()
    chain.failing_tokens.add("0xusdt")
    h = Harness(chain)

    h.initialize()

    token = h.scanner.pairs["0xP1"].token1
    assert token.symbol == "UNKNOWN"
    assert token.name == "Unknown Token"
    assert token.decimals == 18
    assert h.scanner.pairs["0xP1"].symbol_pair == "0XWXPL/UNKNOWN"


def test_pairs_without_liquidity_are_excluded():
    chain = _three_pairs()
    chain.reserves["0xP3"] = _reserves(reserve0=0)
    h = Harness(chain)

    h.initialize()

    assert "0xP3" not in h.scanner.pairs
    assert len(h.state.rows) == 2


def test_loading_is_capped_at_max_pairs():
    chain = _three_pairs()
    h = Harness(chain, max_pairs=2)

    h.initialize()

    assert set(h.scanner.pairs) == {"0xP1", "0xP2"}
    assert h.state.total_pairs == 3


def test_empty_factory_shows_empty_message():
    h = Harness(FakeChainReader({}))

    assert h.initialize() is True

    assert h.state.rows == []
    assert h.state.empty_message == NO_PAIRS_MESSAGE


def test_progressive_render_reports_progress():
    pairs = {f"0xP{i}": (f"0xa{i}", f"0xb{i}") for i in range(10)}
    chain = FakeChainReader(pairs)
    h = Harness(chain, progress_every=5)
    snapshots: dict[int, tuple[str | None, int]] = {}
    chain.on_all_pairs = lambda index: snapshots.setdefault(
        index, (h.state.loading_text, len(h.state.rows))
    )

    h.initialize()

    assert snapshots[0] == ("Scanning blockchain for trading pairs...", 0)
    assert snapshots[5] == ("Loading pairs... (5/10)", 5)
    assert snapshots[9] == ("Loading pairs... (5/10)", 5)
    assert h.state.loading_text is None
    assert len(h.state.rows) == 10


def test_progressive_render_disabled_renders_once():
    pairs = {f"0xP{i}": (f"0xa{i}", f"0xb{i}") for i in range(6)}
    chain = FakeChainReader(pairs)
    h = Harness(chain, progressive_render=False)
    seen_rows: list[int] = []
    chain.on_all_pairs = lambda _index: seen_rows.append(len(h.state.rows))

    h.initialize()

    assert seen_rows == [0] * 6
    assert len(h.state.rows) == 6


def test_three_connection_failures_end_in_failed_state():
    chain = _three_pairs()
    chain.connect_failures = 10
    h = Harness(chain)

    assert h.initialize() is False

    assert chain.connect_calls == [ENDPOINTS[0], ENDPOINTS[1], ENDPOINTS[0]]
    assert h.sleeps == [2.0, 4.0]
    assert h.state.status == ConnectionStatus.FAILED
    assert h.state.status_label == "CONNECTION FAILED"
    assert h.state.banner.level == BannerLevel.ERROR
    assert h.state.banner.message == FATAL_CONNECTION_MESSAGE
    assert h.scanner.pairs == {}


def test_connection_recovers_on_next_endpoint():
    chain = _three_pairs()
    chain.connect_failures = 1
    h = Harness(chain)

    assert h.initialize() is True

    assert chain.connect_calls == [ENDPOINTS[0], ENDPOINTS[1]]
    assert h.sleeps == [2.0]
    assert h.scanner.current_rpc_url == ENDPOINTS[1]
    assert h.state.status == ConnectionStatus.ONLINE


def test_pair_count_failure_counts_as_failed_attempt():
    chain = _three_pairs()
    chain.fail_pair_count = True
    h = Harness(chain, retry_count=1)

    assert h.initialize() is False

    assert chain.connect_calls == [ENDPOINTS[0]]
    assert h.sleeps == []
    assert h.state.status == ConnectionStatus.FAILED


def test_refresh_updates_pairs_in_place_and_feeds_selected_chart():
    chain = _three_pairs()
    h = Harness(chain)

    async def scenario() -> int:
        await h.scanner.initialize()
        h.selection.select("0xP1")
        h.chart.load(pair_address="0xP1", current_price=2.0, label="A/B")
        chain.reserves["0xP1"] = _reserves(reserve1=3 * 10**18)
        return await h.scanner.refresh_pairs()

    refreshed = asyncio.run(scenario())

    assert refreshed == 3
    assert h.scanner.pairs["0xP1"].price == pytest.approx(3.0)
    assert h.chart.series_for("0xP1")[-1].price == pytest.approx(3.0)
    assert h.state.last_update_text.endswith("• Monitoring 3 pairs")


def test_failed_refresh_keeps_last_values_and_skips_chart():
    chain = _three_pairs()
    h = Harness(chain)

    async def scenario() -> int:
        await h.scanner.initialize()
        h.selection.select("0xP1")
        h.chart.load(pair_address="0xP1", current_price=2.0, label="A/B")
        chain.failing_reserves.add("0xP1")
        chain.reserves["0xP2"] = _reserves(reserve0=0)
        return await h.scanner.refresh_pairs()

    refreshed = asyncio.run(scenario())
    series = h.chart.series_for("0xP1")

    assert refreshed == 1
    assert h.scanner.pairs["0xP1"].price == pytest.approx(2.0)
    assert h.scanner.pairs["0xP2"].price == pytest.approx(2.0)
    assert set(h.scanner.pairs) == {"0xP1", "0xP2", "0xP3"}
    assert len(series) == 5
    assert all(point.price == pytest.approx(2.0) for point in series)


def test_filter_pairs_returns_rows_without_badges():
    h = Harness(_three_pairs())
    h.initialize()

    rows = h.scanner.filter_pairs("0xweth")

    assert [row.address for row in rows] == ["0xP2", "0xP3"]
    assert all(row.volume_badge is None and row.is_new is False for row in rows)


def test_get_pair_matches_address_case_insensitively():
    h = Harness(_three_pairs())
    h.initialize()

    assert h.scanner.get_pair("0xp1").address == "0xP1"
    with pytest.raises(PairNotFoundError):
        h.scanner.get_pair("0xmissing")


def test_polling_runs_until_stopped():
    chain = _three_pairs()
    h = Harness(chain, real_time_updates=True)

    async def scenario() -> tuple[bool, bool]:
        await h.scanner.initialize()
        running = h.scanner.is_running
        for _ in range(10):
            await asyncio.sleep(0)
        await h.scanner.stop()
        return running, h.scanner.is_running

    running, still_running = asyncio.run(scenario())

    assert running is True
    assert still_running is False
    assert 15.0 in h.sleeps
    assert chain.closed == 1


def test_unexpected_error_on_one_pair_does_not_abort_loading():
    chain = _three_pairs()
    chain.crashing_reserves.add("0xP2")
    h = Harness(chain)

    assert h.initialize() is True

    assert set(h.scanner.pairs) == {"0xP1", "0xP3"}
    assert h.state.status == ConnectionStatus.ONLINE
    assert h.state.banner.message == "Live monitoring 2 trading pairs"


def test_unexpected_error_on_one_pair_does_not_abort_refresh():
    chain = _three_pairs()
    h = Harness(chain)

    async def scenario() -> int:
        await h.scanner.initialize()
        chain.crashing_reserves.add("0xP1")
        chain.reserves["0xP2"] = _reserves(reserve1=4 * 10**18)
        return await h.scanner.refresh_pairs()

    refreshed = asyncio.run(scenario())

    assert refreshed == 2
    assert h.scanner.pairs["0xP1"].price == pytest.approx(2.0)
    assert h.scanner.pairs["0xP2"].price == pytest.approx(4.0)
    assert len(h.state.rows) == 3
    assert h.state.last_update_text.endswith("• Monitoring 3 pairs")


def test_unexpected_connect_error_counts_as_failed_attempt():
    chain = _three_pairs()
    chain.connect_exception = ValueError("invalid URL")
    h = Harness(chain)

    assert h.initialize() is False

    assert chain.connect_calls == [ENDPOINTS[0], ENDPOINTS[1], ENDPOINTS[0]]
    assert h.sleeps == [2.0, 4.0]
    assert h.state.status == ConnectionStatus.FAILED
    assert h.state.banner.message == FATAL_CONNECTION_MESSAGE


def test_tick_is_skipped_while_previous_refresh_is_running():
    chain = _three_pairs()
    h = Harness(chain, real_time_updates=True, poll_interval_ms=1)

    async def scenario() -> tuple[list[str], int, int]:
        await h.scanner.initialize()
        chain.reserves_gate = asyncio.Event()
        chain.reserve_calls.clear()
        for _ in range(50):
            await asyncio.sleep(0)
        blocked_calls = list(chain.reserve_calls)
        ticks_while_blocked = h.sleeps.count(0.001)

        chain.reserves_gate.set()
        for _ in range(50):
            await asyncio.sleep(0)
        released_calls = len(chain.reserve_calls)
        await h.scanner.stop()
        return blocked_calls, ticks_while_blocked, released_calls

    blocked_calls, ticks_while_blocked, released_calls = asyncio.run(scenario())

    assert sorted(blocked_calls) == ["0xP1", "0xP2", "0xP3"]
    assert ticks_while_blocked > 1
    assert released_calls > 3
