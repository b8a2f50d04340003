"""Chain construction and the ephemeral delegation payload format.

Public API
----------
- :func:`create_simple_auth_chain` -- owner signs the entity directly.
- :func:`create_auth_chain` -- owner -> ephemeral key -> entity, raw keys.
- :func:`initialize_auth_chain` -- delegation signed by an external signer.
- :func:`sign_payload` -- complete an :class:`AuthIdentity` with an entity.
- :func:`get_ephemeral_message` / :func:`parse_ephemeral_payload`.
"""
from __future__ import annotations

from dcl_authchain.chain.builder import (
    INVALID_OWNER_ADDRESS,
    MessageSigner,
    create_auth_chain,
    create_signature,
    create_simple_auth_chain,
    initialize_auth_chain,
    move_minutes,
    owner_address,
    sign_payload,
)
from dcl_authchain.chain.ephemeral import (
    DEFAULT_EPHEMERAL_TITLE,
    get_ephemeral_message,
    get_ephemeral_signature_type,
    get_signed_identity_signature_type,
    parse_ephemeral_payload,
    to_iso_string,
)

__all__ = [
    "DEFAULT_EPHEMERAL_TITLE",
    "INVALID_OWNER_ADDRESS",
    "MessageSigner",
    "create_auth_chain",
    "create_signature",
    "create_simple_auth_chain",
    "get_ephemeral_message",
    "get_ephemeral_signature_type",
    "get_signed_identity_signature_type",
    "initialize_auth_chain",
    "move_minutes",
    "owner_address",
    "parse_ephemeral_payload",
    "sign_payload",
    "to_iso_string",
]
