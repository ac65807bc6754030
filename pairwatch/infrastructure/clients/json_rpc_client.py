from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Any

import httpx

from pairwatch.domain.exceptions import ContractCallError, RpcConnectionError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JsonRpcClientSettings:
    rpc_url: str
    timeout_seconds: float
    max_retries: int = 1


class JsonRpcClient:
    def __init__(
        self,
        settings: JsonRpcClientSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._client = httpx.AsyncClient(timeout=settings.timeout_seconds, transport=transport)
        self._request_id = 0

    @property
    def rpc_url(self) -> str:
        return self._settings.rpc_url

    async def chain_id(self) -> int:
        return _hex_to_int(await self.request("eth_chainId", []))

    async def block_number(self) -> int:
        return _hex_to_int(await self.request("eth_blockNumber", []))

    async def eth_call(self, *, to: str, data: str, block: str = "latest") -> str:
        result = await self.request("eth_call", [{"to": to, "data": data}, block])
        if not isinstance(result, str):
            raise ContractCallError(f"eth_call returned non-hex result for {to}.")
        return result

    async def request(self, method: str, params: list) -> Any:
        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            self._request_id += 1
            try:
                response = await self._client.post(
                    self._settings.rpc_url,
                    json={
                        "jsonrpc": "2.0",
                        "id": self._request_id,
                        "method": method,
                        "params": params,
                    },
                )
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "json_rpc_client: retry attempt=%s/%s method=%s rpc=%s error=%s",
                    attempt,
                    attempts,
                    method,
                    self._settings.rpc_url,
                    exc,
                )
                await asyncio.sleep(delay)
                delay *= 2
                continue

            error = payload.get("error") if isinstance(payload, dict) else None
            if error:
                message = error.get("message", error) if isinstance(error, dict) else error
                raise ContractCallError(f"{method} failed: {message}")
            if not isinstance(payload, dict) or "result" not in payload:
                raise RpcConnectionError(f"{method} returned a malformed response.")
            return payload["result"]

        raise RpcConnectionError(
            f"RPC {self._settings.rpc_url} unreachable for {method}: {last_exc}"
        ) from last_exc

    async def aclose(self) -> None:
        await self._client.aclose()


def _hex_to_int(value: Any) -> int:
    if not isinstance(value, str):
        raise RpcConnectionError(f"Expected hex quantity, got {value!r}.")
    try:
        return int(value, 16)
    except ValueError as exc:
        raise RpcConnectionError(f"Invalid hex quantity {value!r}.") from exc
