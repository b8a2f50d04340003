"""Cryptographic adapters.

Thin wrappers over ``eth-account``/``eth-utils`` (personal-sign, address
recovery, message hashing) and ``cryptography`` (secp256k1 key
generation).  Nothing here implements elliptic-curve arithmetic.
"""
from __future__ import annotations

from dcl_authchain.crypto.ecdsa import (
    PERSONAL_SIGNATURE_LENGTH,
    create_eip1271_message_hash,
    create_ethereum_message_hash,
    eth_sign,
    recover_address_from_eth_signature,
)
from dcl_authchain.crypto.identity import create_identity, identity_from_private_key

__all__ = [
    "PERSONAL_SIGNATURE_LENGTH",
    "create_eip1271_message_hash",
    "create_ethereum_message_hash",
    "create_identity",
    "eth_sign",
    "identity_from_private_key",
    "recover_address_from_eth_signature",
]
