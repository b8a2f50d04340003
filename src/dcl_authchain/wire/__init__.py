"""Wire format and node transport.

* **Codec** -- JSON encoding of chains (:mod:`~dcl_authchain.wire.codec`).
* **JSON-RPC** -- ``httpx`` provider for contract calls
  (:mod:`~dcl_authchain.wire.jsonrpc`).
* **Blocks** -- timestamp to block-height search
  (:mod:`~dcl_authchain.wire.blocks`).
"""
from __future__ import annotations

from dcl_authchain.wire.blocks import BlockDater, BlockSource
from dcl_authchain.wire.codec import (
    auth_chain_to_list,
    parse_auth_chain,
    serialize_auth_chain,
)
from dcl_authchain.wire.jsonrpc import JSONRPCProvider

__all__ = [
    "BlockDater",
    "BlockSource",
    "JSONRPCProvider",
    "auth_chain_to_list",
    "parse_auth_chain",
    "serialize_auth_chain",
]
