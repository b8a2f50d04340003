"""Ephemeral delegation payload format and signature-type inference.

Payload structure (line order significant)::

    <human-readable message>
    Ephemeral address: <0x-prefixed address>
    Expiration: <ISO-8601 timestamp>

Example::

    Decentraland Login
    Ephemeral address: 0x84452bbFA4ca14B7828e2F3BBd106A2bD495CD34
    Expiration: 2020-01-20T22:57:11.334Z
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from dcl_authchain.core.errors import MalformedEphemeralPayload
from dcl_authchain.core.types import AuthLinkType, EphemeralPayload
from dcl_authchain.crypto.ecdsa import PERSONAL_SIGNATURE_LENGTH

DEFAULT_EPHEMERAL_TITLE = "Decentraland Login"
EPHEMERAL_ADDRESS_PREFIX = "Ephemeral address: "
EXPIRATION_PREFIX = "Expiration: "

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_iso_string(moment: datetime) -> str:
    """Render *moment* as ``YYYY-MM-DDTHH:MM:SS.sssZ`` in UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def to_millis(moment: datetime) -> int:
    """Epoch milliseconds of *moment*; naive datetimes are read as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def get_ephemeral_message(
    ephemeral_address: str,
    expiration: datetime,
    title: str = DEFAULT_EPHEMERAL_TITLE,
) -> str:
    """Build the payload that delegates authority to *ephemeral_address*."""
    return (
        f"{title}\n"
        f"{EPHEMERAL_ADDRESS_PREFIX}{ephemeral_address}\n"
        f"{EXPIRATION_PREFIX}{to_iso_string(expiration)}"
    )


def parse_ephemeral_payload(payload: str) -> EphemeralPayload:
    """Split an ephemeral payload into message, address and expiration.

    Carriage returns are stripped first; the returned ``message`` is the
    stripped payload, which is what the delegating authority signed.

    Raises
    ------
    MalformedEphemeralPayload
        If the payload has fewer than three lines or the expiration is
        not an ISO-8601 timestamp.
    """
    message = payload.replace("\r", "")
    parts = message.split("\n")
    if len(parts) < 3:
        raise MalformedEphemeralPayload(
            f"Malformed ephemeral payload. Expected 3 lines, got {len(parts)}",
            details={"lines": len(parts)},
        )

    ephemeral_address = parts[1][len(EPHEMERAL_ADDRESS_PREFIX):]
    expiration_string = parts[2][len(EXPIRATION_PREFIX):]
    try:
        expiration = datetime.fromisoformat(expiration_string)
    except ValueError as exc:
        raise MalformedEphemeralPayload(
            f"Malformed ephemeral payload. Invalid expiration: {expiration_string!r}",
            details={"expiration": expiration_string},
        ) from exc

    return EphemeralPayload(
        message=message,
        ephemeral_address=ephemeral_address,
        expiration=to_millis(expiration),
    )


def get_ephemeral_signature_type(signature: str) -> AuthLinkType:
    """Classify an ephemeral delegation signature by its length."""
    if len(signature) == PERSONAL_SIGNATURE_LENGTH:
        return AuthLinkType.ECDSA_PERSONAL_EPHEMERAL
    return AuthLinkType.ECDSA_EIP_1654_EPHEMERAL


def get_signed_identity_signature_type(signature: str) -> AuthLinkType:
    """Classify an entity signature by its length."""
    if len(signature) == PERSONAL_SIGNATURE_LENGTH:
        return AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY
    return AuthLinkType.ECDSA_EIP_1654_SIGNED_ENTITY
