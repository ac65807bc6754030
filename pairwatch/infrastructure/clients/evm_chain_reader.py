from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

import httpx
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from pairwatch.domain.entities.pair import Reserves
from pairwatch.domain.exceptions import ContractCallError, RpcConnectionError
from pairwatch.infrastructure.clients.json_rpc_client import JsonRpcClient, JsonRpcClientSettings


logger = logging.getLogger(__name__)


# Factory
ALL_PAIRS = "allPairs(uint256)"
ALL_PAIRS_LENGTH = "allPairsLength()"
GET_PAIR = "getPair(address,address)"
# Pair
GET_RESERVES = "getReserves()"
TOKEN0 = "token0()"
TOKEN1 = "token1()"
TOTAL_SUPPLY = "totalSupply()"
# ERC20
NAME = "name()"
SYMBOL = "symbol()"
DECIMALS = "decimals()"


def encode_call(signature: str, arg_types: Sequence[str] = (), args: Sequence[Any] = ()) -> str:
    selector = function_signature_to_4byte_selector(signature)
    return "0x" + (selector + encode(list(arg_types), list(args))).hex()


def _result_bytes(signature: str, result: str) -> bytes:
    try:
        return bytes.fromhex(result[2:] if result.startswith("0x") else result)
    except ValueError as exc:
        raise ContractCallError(f"{signature} returned invalid hex: {exc}") from exc


def decode_result(signature: str, output_types: Sequence[str], result: str) -> tuple:
    raw = _result_bytes(signature, result)
    if not raw:
        raise ContractCallError(f"{signature} returned no data.")
    try:
        return decode(list(output_types), raw)
    except (DecodingError, OverflowError, ValueError) as exc:
        raise ContractCallError(f"{signature} returned undecodable data: {exc}") from exc


def decode_text(signature: str, result: str) -> str:
    """Decode a string return value, accepting legacy bytes32 tokens as well."""
    raw = _result_bytes(signature, result)
    if len(raw) == 32:
        return raw.rstrip(b"\x00").decode("utf-8", errors="replace")
    (value,) = decode_result(signature, ["string"], result)
    return value


class EvmChainReader:
    """Read-only contract access over JSON-RPC for a Uniswap v2 style DEX."""

    def __init__(
        self,
        *,
        timeout_seconds: float,
        max_retries: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._transport = transport
        self._client: JsonRpcClient | None = None

    async def connect(self, *, rpc_url: str, chain_id: int) -> int:
        await self.close()
        client = JsonRpcClient(
            JsonRpcClientSettings(
                rpc_url=rpc_url,
                timeout_seconds=self._timeout_seconds,
                max_retries=self._max_retries,
            ),
            transport=self._transport,
        )
        try:
            remote_chain_id = await client.chain_id()
            if remote_chain_id != chain_id:
                raise RpcConnectionError(
                    f"Wrong network at {rpc_url}: expected chain id {chain_id}, got {remote_chain_id}."
                )
            block_number = await client.block_number()
        except ContractCallError as exc:
            await client.aclose()
            raise RpcConnectionError(str(exc)) from exc
        except RpcConnectionError:
            await client.aclose()
            raise

        self._client = client
        logger.info(
            "evm_chain_reader: connected rpc=%s chain_id=%s block=%s",
            rpc_url,
            chain_id,
            block_number,
        )
        return block_number

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_block_number(self) -> int:
        return await self._require_client().block_number()

    async def all_pairs_length(self, *, factory_address: str) -> int:
        (length,) = await self._call(factory_address, ALL_PAIRS_LENGTH, output_types=["uint256"])
        return int(length)

    async def all_pairs(self, *, factory_address: str, index: int) -> str:
        (pair,) = await self._call(
            factory_address,
            ALL_PAIRS,
            arg_types=["uint256"],
            args=[index],
            output_types=["address"],
        )
        return to_checksum_address(pair)

    async def get_pair(self, *, factory_address: str, token_a: str, token_b: str) -> str:
        (pair,) = await self._call(
            factory_address,
            GET_PAIR,
            arg_types=["address", "address"],
            args=[to_checksum_address(token_a), to_checksum_address(token_b)],
            output_types=["address"],
        )
        return to_checksum_address(pair)

    async def get_reserves(self, *, pair_address: str) -> Reserves:
        reserve0, reserve1, block_timestamp_last = await self._call(
            pair_address,
            GET_RESERVES,
            output_types=["uint112", "uint112", "uint32"],
        )
        return Reserves(
            reserve0=int(reserve0),
            reserve1=int(reserve1),
            block_timestamp_last=int(block_timestamp_last),
        )

    async def token0(self, *, pair_address: str) -> str:
        (token,) = await self._call(pair_address, TOKEN0, output_types=["address"])
        return to_checksum_address(token)

    async def token1(self, *, pair_address: str) -> str:
        (token,) = await self._call(pair_address, TOKEN1, output_types=["address"])
        return to_checksum_address(token)

    async def total_supply(self, *, contract_address: str) -> int:
        (supply,) = await self._call(contract_address, TOTAL_SUPPLY, output_types=["uint256"])
        return int(supply)

    async def token_name(self, *, token_address: str) -> str:
        result = await self._raw_call(token_address, NAME)
        return decode_text(NAME, result)

    async def token_symbol(self, *, token_address: str) -> str:
        result = await self._raw_call(token_address, SYMBOL)
        return decode_text(SYMBOL, result)

    async def token_decimals(self, *, token_address: str) -> int:
        (decimals,) = await self._call(token_address, DECIMALS, output_types=["uint8"])
        return int(decimals)

    async def _call(
        self,
        address: str,
        signature: str,
        *,
        arg_types: Sequence[str] = (),
        args: Sequence[Any] = (),
        output_types: Sequence[str],
    ) -> tuple:
        result = await self._raw_call(address, signature, arg_types=arg_types, args=args)
        return decode_result(signature, output_types, result)

    async def _raw_call(
        self,
        address: str,
        signature: str,
        *,
        arg_types: Sequence[str] = (),
        args: Sequence[Any] = (),
    ) -> str:
        client = self._require_client()
        return await client.eth_call(
            to=to_checksum_address(address),
            data=encode_call(signature, arg_types, args),
        )

    def _require_client(self) -> JsonRpcClient:
        if self._client is None:
            raise RpcConnectionError("Not connected to an RPC endpoint.")
        return self._client
