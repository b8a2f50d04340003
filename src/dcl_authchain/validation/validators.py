"""Per-link-type validation rules.

Every validator has the same shape::

    async def validator(authority, link, options) -> next_authority

It receives the authority established by the previous link and either
returns the authority the next link must prove, or raises a
:class:`~dcl_authchain.core.errors.AuthChainError`.  Validators hold no
state and can be exercised in isolation.

Dispatch is a closed ``match`` over :class:`AuthLinkType`; any other tag
resolves to :func:`error_validator`, which always fails.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable

from dcl_authchain.chain.ephemeral import parse_ephemeral_payload
from dcl_authchain.core.errors import (
    EphemeralKeyExpired,
    InvalidSignerAddress,
    UnknownLinkType,
)
from dcl_authchain.core.types import AuthLink, AuthLinkType, ValidationOptions
from dcl_authchain.crypto.ecdsa import recover_address_from_eth_signature
from dcl_authchain.validation.onchain import is_valid_eip1654_message

Validator = Callable[[str, AuthLink, ValidationOptions], Awaitable[str | None]]


def _check_signer(authority: str, signature: str, message: str) -> None:
    """Raise unless *signature* over *message* recovers to *authority*."""
    signer_address = recover_address_from_eth_signature(signature, message)
    expected_signed_address = authority.lower()
    actual_signed_address = signer_address.lower()
    if expected_signed_address != actual_signed_address:
        raise InvalidSignerAddress(
            f"Invalid signer address. Expected: {expected_signed_address}. "
            f"Actual: {actual_signed_address}",
            details={
                "expected": expected_signed_address,
                "actual": actual_signed_address,
            },
        )


def _check_not_expired(expiration: int, reference_millis: int) -> None:
    # Strict: a delegation expiring exactly at the reference time is expired.
    if expiration <= reference_millis:
        raise EphemeralKeyExpired(
            f"Ephemeral key expired. Expiration: {expiration}. Test: {reference_millis}",
            details={"expiration": expiration, "reference": reference_millis},
        )


async def signer_validator(
    authority: str, link: AuthLink, options: ValidationOptions
) -> str | None:
    """SIGNER: the payload is taken as the root address without proof."""
    return link.payload


async def ecdsa_signed_entity_validator(
    authority: str, link: AuthLink, options: ValidationOptions
) -> str | None:
    """ECDSA_PERSONAL_SIGNED_ENTITY: the authority personal-signed the entity."""
    _check_signer(authority, link.signature, link.payload)
    return link.payload


async def ecdsa_personal_ephemeral_validator(
    authority: str, link: AuthLink, options: ValidationOptions
) -> str | None:
    """ECDSA_PERSONAL_EPHEMERAL: the authority personal-signed a live delegation."""
    ephemeral = parse_ephemeral_payload(link.payload)
    _check_not_expired(ephemeral.expiration, options.date_to_validate_expiration_in_millis)
    _check_signer(authority, link.signature, ephemeral.message)
    return ephemeral.ephemeral_address


async def ecdsa_eip1654_ephemeral_validator(
    authority: str, link: AuthLink, options: ValidationOptions
) -> str | None:
    """ECDSA_EIP_1654_EPHEMERAL: the authority contract accepts a live delegation."""
    ephemeral = parse_ephemeral_payload(link.payload)
    _check_not_expired(ephemeral.expiration, options.date_to_validate_expiration_in_millis)
    await is_valid_eip1654_message(
        options.provider,
        authority,
        ephemeral.message,
        link.signature,
        options.date_to_validate_expiration_in_millis,
    )
    return ephemeral.ephemeral_address


async def eip1654_signed_entity_validator(
    authority: str, link: AuthLink, options: ValidationOptions
) -> str | None:
    """ECDSA_EIP_1654_SIGNED_ENTITY: the authority contract accepts the entity signature."""
    await is_valid_eip1654_message(
        options.provider,
        authority,
        link.payload,
        link.signature,
        options.date_to_validate_expiration_in_millis,
    )
    return link.payload


async def error_validator(
    authority: str, link: AuthLink, options: ValidationOptions
) -> str | None:
    """Fallback for unrecognised link types."""
    raise UnknownLinkType(
        f"Error Validator. Unknown link type: {link.type}",
        details={"type": link.type},
    )


def get_validator_by_type(link_type: str) -> Validator:
    """Return the validator for *link_type*, or :func:`error_validator`."""
    match link_type:
        case AuthLinkType.SIGNER:
            return signer_validator
        case AuthLinkType.ECDSA_PERSONAL_EPHEMERAL:
            return ecdsa_personal_ephemeral_validator
        case AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY:
            return ecdsa_signed_entity_validator
        case AuthLinkType.ECDSA_EIP_1654_EPHEMERAL:
            return ecdsa_eip1654_ephemeral_validator
        case AuthLinkType.ECDSA_EIP_1654_SIGNED_ENTITY:
            return eip1654_signed_entity_validator
        case _:
            return error_validator
