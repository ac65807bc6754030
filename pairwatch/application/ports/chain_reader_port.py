from __future__ import annotations

from typing import Protocol

from pairwatch.domain.entities.pair import Reserves


class ChainReaderPort(Protocol):
    async def connect(self, *, rpc_url: str, chain_id: int) -> int:
        ...

    async def close(self) -> None:
        ...

    async def get_block_number(self) -> int:
        ...

    async def all_pairs_length(self, *, factory_address: str) -> int:
        ...

    async def all_pairs(self, *, factory_address: str, index: int) -> str:
        ...

    async def get_pair(self, *, factory_address: str, token_a: str, token_b: str) -> str:
        ...

    async def get_reserves(self, *, pair_address: str) -> Reserves:
        ...

    async def token0(self, *, pair_address: str) -> str:
        ...

    async def token1(self, *, pair_address: str) -> str:
        ...

    async def total_supply(self, *, contract_address: str) -> int:
        ...

    async def token_name(self, *, token_address: str) -> str:
        ...

    async def token_symbol(self, *, token_address: str) -> str:
        ...

    async def token_decimals(self, *, token_address: str) -> int:
        ...
