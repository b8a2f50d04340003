"""AuthChain -- delegated-authority signature chains.

Proves that a signed entity was authorised, directly or through an
ephemeral key, by a root Ethereum address, including addresses that are
smart-contract wallets (EIP-1271/1654).

Sub-packages
------------
1. Core types, errors, config, interfaces (:mod:`dcl_authchain.core`)
2. Cryptographic adapters (:mod:`dcl_authchain.crypto`)
3. Chain construction (:mod:`dcl_authchain.chain`)
4. Chain validation (:mod:`dcl_authchain.validation`)
5. Wire format and node transport (:mod:`dcl_authchain.wire`)
"""
from __future__ import annotations

__version__ = "1.0.0a1"

from dcl_authchain.authenticator import Authenticator
from dcl_authchain.chain import (
    INVALID_OWNER_ADDRESS,
    create_auth_chain,
    create_signature,
    create_simple_auth_chain,
    get_ephemeral_message,
    get_ephemeral_signature_type,
    get_signed_identity_signature_type,
    initialize_auth_chain,
    owner_address,
    parse_ephemeral_payload,
    sign_payload,
)
from dcl_authchain.core.config import AuthChainConfig
from dcl_authchain.core.errors import (
    AuthChainError,
    AuthorityMismatch,
    BlockLookupFailed,
    ChainStructureError,
    EphemeralKeyExpired,
    InvalidSignerAddress,
    LinkValidationError,
    MalformedChain,
    MalformedEphemeralPayload,
    MalformedMessage,
    MissingProvider,
    OnChainError,
    OnChainValidationFailed,
    RPCError,
    TransportError,
    UnknownLinkType,
)
from dcl_authchain.core.interfaces import ChainProvider, InMemoryChainProvider
from dcl_authchain.core.types import (
    AuthChain,
    AuthIdentity,
    AuthLink,
    AuthLinkType,
    EphemeralPayload,
    EthAddress,
    Identity,
    Signature,
    ValidationOptions,
    ValidationResult,
)
from dcl_authchain.crypto import (
    create_eip1271_message_hash,
    create_ethereum_message_hash,
    create_identity,
    identity_from_private_key,
    recover_address_from_eth_signature,
)
from dcl_authchain.validation import (
    ERC1654_MAGIC_VALUE,
    get_validator_by_type,
    is_valid_auth_chain,
    is_valid_eip1654_message,
    validate_signature,
)
from dcl_authchain.wire import (
    BlockDater,
    JSONRPCProvider,
    parse_auth_chain,
    serialize_auth_chain,
)

__all__ = [
    "ERC1654_MAGIC_VALUE",
    "INVALID_OWNER_ADDRESS",
    "AuthChain",
    "AuthChainConfig",
    "AuthChainError",
    "AuthIdentity",
    "AuthLink",
    "AuthLinkType",
    "Authenticator",
    "AuthorityMismatch",
    "BlockDater",
    "BlockLookupFailed",
    "ChainProvider",
    "ChainStructureError",
    "EphemeralKeyExpired",
    "EphemeralPayload",
    "EthAddress",
    "Identity",
    "InMemoryChainProvider",
    "InvalidSignerAddress",
    "JSONRPCProvider",
    "LinkValidationError",
    "MalformedChain",
    "MalformedEphemeralPayload",
    "MalformedMessage",
    "MissingProvider",
    "OnChainError",
    "OnChainValidationFailed",
    "RPCError",
    "Signature",
    "TransportError",
    "UnknownLinkType",
    "ValidationOptions",
    "ValidationResult",
    "create_auth_chain",
    "create_eip1271_message_hash",
    "create_ethereum_message_hash",
    "create_identity",
    "create_signature",
    "create_simple_auth_chain",
    "get_ephemeral_message",
    "get_ephemeral_signature_type",
    "get_signed_identity_signature_type",
    "get_validator_by_type",
    "identity_from_private_key",
    "initialize_auth_chain",
    "is_valid_auth_chain",
    "is_valid_eip1654_message",
    "owner_address",
    "parse_auth_chain",
    "parse_ephemeral_payload",
    "recover_address_from_eth_signature",
    "serialize_auth_chain",
    "sign_payload",
    "validate_signature",
]
