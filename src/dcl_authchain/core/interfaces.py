"""AuthChain abstract interfaces and in-memory implementations.

The validation engine needs exactly two capabilities from a blockchain
node, captured by the :class:`ChainProvider` protocol:

* a read-only contract call (``eth_call``), optionally pinned to a
  historical block height, and
* a timestamp to block-height resolver.

:class:`~dcl_authchain.wire.jsonrpc.JSONRPCProvider` implements the
protocol over HTTP.  :class:`InMemoryChainProvider` is a scriptable
implementation suitable for testing and local development.  It is
**not** thread-safe.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from dcl_authchain.core.errors import BlockLookupFailed, RPCError

# ===================================================================
# Protocol (interface) definitions
# ===================================================================

@runtime_checkable
class ChainProvider(Protocol):
    """Chain-node access consumed by the on-chain signature verifier."""

    async def call(self, to: str, data: bytes, block: int | None = None) -> bytes:
        """Execute a read-only call against *to*.

        ``block=None`` targets the latest state; an integer pins the
        call to that block height.
        """
        ...

    async def get_block_at(self, timestamp_millis: int) -> int:
        """Return the last block height mined at or before *timestamp_millis*."""
        ...


# ===================================================================
# In-memory implementation
# ===================================================================

_EMPTY_WORD = bytes(32)


class InMemoryChainProvider:
    """Scriptable :class:`ChainProvider` backed by dictionaries.

    Call results are registered per ``(contract, calldata, block)``; a
    registration with ``block=None`` answers calls at the latest state
    only.  Unregistered calls return a zero word, which is what a
    contract returns for a rejected signature.

    Every call is appended to :attr:`calls` so that tests can assert on
    the order in which states were queried.
    """

    def __init__(self) -> None:
        self._results: dict[tuple[str, bytes, int | None], bytes] = {}
        self._failing_blocks: set[int | None] = set()
        self._blocks: list[tuple[int, int]] = []
        self.calls: list[tuple[str, bytes, int | None]] = []

    def register_call(
        self,
        to: str,
        data: bytes,
        result: bytes,
        *,
        block: int | None = None,
    ) -> None:
        """Make ``call(to, data, block)`` return *result*."""
        self._results[(to.lower(), bytes(data), block)] = bytes(result)

    def fail_calls(self, *, block: int | None = None) -> None:
        """Make every call at *block* raise :class:`RPCError`."""
        self._failing_blocks.add(block)

    def add_block(self, number: int, timestamp_millis: int) -> None:
        """Add a block to the timeline used by :meth:`get_block_at`."""
        self._blocks.append((number, timestamp_millis))
        self._blocks.sort()

    async def call(self, to: str, data: bytes, block: int | None = None) -> bytes:
        self.calls.append((to, bytes(data), block))
        if block in self._failing_blocks:
            raise RPCError(
                f"Simulated node failure at block {block if block is not None else 'latest'}",
                details={"to": to, "block": block},
            )
        return self._results.get((to.lower(), bytes(data), block), _EMPTY_WORD)

    async def get_block_at(self, timestamp_millis: int) -> int:
        candidates = [
            number for number, mined_at in self._blocks if mined_at <= timestamp_millis
        ]
        if not candidates:
            raise BlockLookupFailed(
                f"No block mined at or before {timestamp_millis}",
                details={"timestamp_millis": timestamp_millis},
            )
        return candidates[-1]
