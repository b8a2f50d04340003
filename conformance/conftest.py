"""Shared fixtures for AuthChain conformance tests.

Provides identities, a contract-wallet node, and a signing helper.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import pytest
from eth_utils import to_bytes

from dcl_authchain.core.interfaces import InMemoryChainProvider
from dcl_authchain.core.types import Identity
from dcl_authchain.crypto.ecdsa import create_eip1271_message_hash
from dcl_authchain.crypto.identity import create_identity
from dcl_authchain.validation.onchain import (
    ERC1654_MAGIC_VALUE,
    encode_is_valid_signature_call,
)

CONTRACT_WALLET = "0x" + "5a" * 20
CONTRACT_SIGNATURE = "0x" + "c0ffee" * 30
SIGNED_AT_MS = 1_650_000_000_000
BLOCK_AT_SIGNING = 14_600_000
MAGIC_WORD = bytes.fromhex(ERC1654_MAGIC_VALUE) + bytes(28)


@dataclass(frozen=True)
class ContractWallet:
    """A contract account, the signature it accepts, and when it was made."""

    address: str = CONTRACT_WALLET
    signature: str = CONTRACT_SIGNATURE
    signed_at_ms: int = SIGNED_AT_MS
    block_at_signing: int = BLOCK_AT_SIGNING


@pytest.fixture()
def wallet() -> ContractWallet:
    return ContractWallet()


@pytest.fixture()
def owner() -> Identity:
    return create_identity()


@pytest.fixture()
def ephemeral() -> Identity:
    return create_identity()


@pytest.fixture()
def entity_id() -> str:
    return "QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"


@pytest.fixture()
def node() -> InMemoryChainProvider:
    provider = InMemoryChainProvider()
    provider.add_block(BLOCK_AT_SIGNING - 1, SIGNED_AT_MS - 13_000)
    provider.add_block(BLOCK_AT_SIGNING, SIGNED_AT_MS - 2_000)
    provider.add_block(BLOCK_AT_SIGNING + 1, SIGNED_AT_MS + 10_000)
    return provider


@pytest.fixture()
def approve(node: InMemoryChainProvider) -> Callable[..., None]:
    """Make the contract wallet accept CONTRACT_SIGNATURE over a message."""

    def _approve(message: str, *, block: int | None = None) -> None:
        data = encode_is_valid_signature_call(
            create_eip1271_message_hash(message), to_bytes(hexstr=CONTRACT_SIGNATURE)
        )
        node.register_call(CONTRACT_WALLET, data, MAGIC_WORD, block=block)

    return _approve
