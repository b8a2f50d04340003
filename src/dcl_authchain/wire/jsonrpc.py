"""JSON-RPC transport to an Ethereum node.

:class:`JSONRPCProvider` implements
:class:`~dcl_authchain.core.interfaces.ChainProvider` over HTTP using
``httpx``.  It performs no retries; a failed request raises
:class:`~dcl_authchain.core.errors.RPCError` immediately.
"""
from __future__ import annotations

import itertools
import json
import logging
from typing import TYPE_CHECKING, Any

import httpx
from eth_utils import to_bytes

from dcl_authchain.core.errors import RPCError
from dcl_authchain.wire.blocks import BlockDater

if TYPE_CHECKING:
    from dcl_authchain.core.config import AuthChainConfig

logger = logging.getLogger(__name__)


class JSONRPCProvider:
    """HTTP JSON-RPC client for the calls the validation engine needs.

    Parameters
    ----------
    url:
        The node endpoint (e.g. ``https://rpc.example.com``).
    timeout:
        Request timeout in seconds (default: 30).
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)
        self._dater = BlockDater(self)

    @classmethod
    def from_config(
        cls,
        config: AuthChainConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> JSONRPCProvider:
        """Build a provider from ``config.rpc_url`` and ``config.rpc_timeout_seconds``."""
        if config.rpc_url is None:
            raise ValueError("AuthChainConfig.rpc_url is not set")
        return cls(
            config.rpc_url,
            timeout=config.rpc_timeout_seconds,
            transport=transport,
        )

    async def request(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result``.

        Raises
        ------
        RPCError
            On HTTP failure, a non-JSON body, or a JSON-RPC error object.
        """
        body = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        logger.debug("JSON-RPC %s %s", method, params)
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self._url, json=body)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RPCError(
                f"JSON-RPC {method} failed: {exc}",
                details={"method": method},
            ) from exc

        try:
            data: dict[str, Any] = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise RPCError(
                f"Invalid JSON in JSON-RPC response: {exc}",
                details={"method": method, "status_code": response.status_code},
            ) from exc

        if data.get("error") is not None:
            error = data["error"]
            raise RPCError(
                f"JSON-RPC {method} error: {error.get('message', error)}",
                details={"method": method, "error": error},
            )
        return data.get("result")

    async def call(self, to: str, data: bytes, block: int | None = None) -> bytes:
        block_tag = hex(block) if block is not None else "latest"
        result = await self.request(
            "eth_call", [{"to": to, "data": "0x" + data.hex()}, block_tag]
        )
        return to_bytes(hexstr=result or "0x")

    async def get_block_number(self) -> int:
        return int(await self.request("eth_blockNumber", []), 16)

    async def get_block_timestamp(self, number: int) -> int:
        block = await self.request("eth_getBlockByNumber", [hex(number), False])
        if block is None:
            raise RPCError(
                f"Block {number} not found",
                details={"block": number},
            )
        return int(block["timestamp"], 16)

    async def get_block_at(self, timestamp_millis: int) -> int:
        return await self._dater.get_block_at(timestamp_millis)
