"""Timestamp to block-height resolution.

:class:`BlockDater` finds the last block mined at or before a given time
by binary search over block timestamps, caching every timestamp it reads.
"""
from __future__ import annotations

import logging
from typing import Protocol

from dcl_authchain.core.errors import BlockLookupFailed

logger = logging.getLogger(__name__)


class BlockSource(Protocol):
    """Minimal node access needed by :class:`BlockDater`."""

    async def get_block_number(self) -> int: ...

    async def get_block_timestamp(self, number: int) -> int:
        """Return the block's timestamp in seconds."""
        ...


class BlockDater:
    """Resolve epoch-millisecond timestamps to block heights.

    Parameters
    ----------
    source:
        Node access used to read the chain head and block timestamps.
    """

    def __init__(self, source: BlockSource) -> None:
        self._source = source
        self._timestamps: dict[int, int] = {}

    async def _timestamp(self, number: int) -> int:
        if number not in self._timestamps:
            self._timestamps[number] = await self._source.get_block_timestamp(number)
        return self._timestamps[number]

    async def get_block_at(self, timestamp_millis: int) -> int:
        """Return the last block whose timestamp is ``<= timestamp_millis``.

        Raises
        ------
        BlockLookupFailed
            If *timestamp_millis* predates the genesis block.
        """
        target = timestamp_millis // 1000
        latest = await self._source.get_block_number()
        if await self._timestamp(latest) <= target:
            return latest
        if await self._timestamp(0) > target:
            raise BlockLookupFailed(
                f"Timestamp {timestamp_millis} predates the genesis block",
                details={"timestamp_millis": timestamp_millis},
            )

        # Invariant: timestamp(low) <= target < timestamp(high)
        low, high = 0, latest
        while high - low > 1:
            middle = (low + high) // 2
            if await self._timestamp(middle) <= target:
                low = middle
            else:
                high = middle
        logger.debug("Resolved timestamp %d to block %d", timestamp_millis, low)
        return low
