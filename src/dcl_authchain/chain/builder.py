"""Client-side chain construction.

Builds chains that satisfy the engine's structural rules: one leading
SIGNER link, an optional ephemeral delegation, and a final entity
signature.  The delegation and the entity signature may be produced in
separate sessions: :func:`initialize_auth_chain` returns an
:class:`~dcl_authchain.core.types.AuthIdentity` that is later completed
with :func:`sign_payload`.

Nothing here is defensively wrapped; an invalid private key raises
straight to the caller.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta

from dcl_authchain.chain.ephemeral import (
    DEFAULT_EPHEMERAL_TITLE,
    get_ephemeral_message,
    get_ephemeral_signature_type,
    get_signed_identity_signature_type,
)
from dcl_authchain.core.types import (
    AuthChain,
    AuthIdentity,
    AuthLink,
    AuthLinkType,
    EthAddress,
    Identity,
    Signature,
)
from dcl_authchain.crypto.ecdsa import eth_sign

INVALID_OWNER_ADDRESS = "Invalid-Owner-Address"

MessageSigner = Callable[[str], Awaitable[str]]
"""Async callback that signs a message with a key held elsewhere."""


def move_minutes(minutes: int, *, now: datetime | None = None) -> datetime:
    """Return the UTC moment *minutes* from *now* (default: the current time)."""
    start = now if now is not None else datetime.now(UTC)
    return start + timedelta(minutes=minutes)


def create_signature(identity: Identity, message: str | bytes) -> str:
    """Personal-sign *message* with the identity's private key."""
    return eth_sign(identity.private_key, message)


def create_simple_auth_chain(
    final_payload: str,
    owner_address: EthAddress,
    signature: Signature,
) -> AuthChain:
    """Two-link chain: the owner signs *final_payload* directly.

    The entity link type is inferred from the signature length, so a
    contract wallet's signature yields an EIP-1654 link.
    """
    return [
        AuthLink(type=AuthLinkType.SIGNER, payload=owner_address, signature=""),
        AuthLink(
            type=get_signed_identity_signature_type(signature),
            payload=final_payload,
            signature=signature,
        ),
    ]


def create_auth_chain(
    owner_identity: Identity,
    ephemeral_identity: Identity,
    ephemeral_minutes_duration: int,
    entity_id: str,
    *,
    title: str = DEFAULT_EPHEMERAL_TITLE,
) -> AuthChain:
    """Three-link chain signed with raw private keys.

    The owner delegates to *ephemeral_identity* until
    ``ephemeral_minutes_duration`` minutes from now, and the ephemeral key
    signs *entity_id*.
    """
    expiration = move_minutes(ephemeral_minutes_duration)
    ephemeral_message = get_ephemeral_message(
        ephemeral_identity.address, expiration, title
    )
    first_signature = create_signature(owner_identity, ephemeral_message)
    second_signature = create_signature(ephemeral_identity, entity_id)

    return [
        AuthLink(
            type=AuthLinkType.SIGNER,
            payload=owner_identity.address,
            signature="",
        ),
        AuthLink(
            type=AuthLinkType.ECDSA_PERSONAL_EPHEMERAL,
            payload=ephemeral_message,
            signature=first_signature,
        ),
        AuthLink(
            type=AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY,
            payload=entity_id,
            signature=second_signature,
        ),
    ]


async def initialize_auth_chain(
    eth_address: EthAddress,
    ephemeral_identity: Identity,
    ephemeral_minutes_duration: int,
    signer: MessageSigner,
    *,
    title: str = DEFAULT_EPHEMERAL_TITLE,
) -> AuthIdentity:
    """Delegate to *ephemeral_identity* using an external signer.

    *signer* is awaited once with the delegation message; a hardware or
    remote wallet typically sits behind it.  The ephemeral link type is
    inferred from the returned signature's length.
    """
    expiration = move_minutes(ephemeral_minutes_duration)
    ephemeral_message = get_ephemeral_message(
        ephemeral_identity.address, expiration, title
    )
    first_signature = await signer(ephemeral_message)

    auth_chain: AuthChain = [
        AuthLink(type=AuthLinkType.SIGNER, payload=eth_address, signature=""),
        AuthLink(
            type=get_ephemeral_signature_type(first_signature),
            payload=ephemeral_message,
            signature=first_signature,
        ),
    ]
    return AuthIdentity(
        ephemeral_identity=ephemeral_identity,
        expiration=expiration,
        auth_chain=auth_chain,
    )


def sign_payload(auth_identity: AuthIdentity, entity_id: str) -> AuthChain:
    """Return the identity's chain extended with a signature over *entity_id*.

    The stored chain is not modified.
    """
    second_signature = create_signature(auth_identity.ephemeral_identity, entity_id)
    return [
        *auth_identity.auth_chain,
        AuthLink(
            type=AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY,
            payload=entity_id,
            signature=second_signature,
        ),
    ]


def owner_address(auth_chain: AuthChain) -> str:
    """Payload of the leading SIGNER link, or :data:`INVALID_OWNER_ADDRESS`."""
    if auth_chain and auth_chain[0].type == AuthLinkType.SIGNER:
        return auth_chain[0].payload
    return INVALID_OWNER_ADDRESS
