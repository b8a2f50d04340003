"""AuthChain shared domain types.

Key design decisions:
* ``AuthLink.type`` is declared as ``str`` rather than :class:`AuthLinkType`
  so that chains carrying an unknown tag survive decoding and reach the
  engine, whose error validator rejects them.  :class:`AuthLinkType` is a
  ``StrEnum``, so members compare equal to their wire tags.
* ``EthAddress`` and ``Signature`` are ``NewType`` wrappers around ``str``
  for static type-safety while remaining JSON-serialisable.
* Pydantic models are used for data that crosses the wire; plain
  dataclasses for engine-internal results.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, NewType

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from dcl_authchain.core.interfaces import ChainProvider

# ---------------------------------------------------------------------------
# Value types (NewType wrappers)
# ---------------------------------------------------------------------------

EthAddress = NewType("EthAddress", str)
"""``0x``-prefixed, 20-byte hex address.  Case varies by source."""

Signature = NewType("Signature", str)
"""``0x``-prefixed hex signature blob."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class AuthLinkType(enum.StrEnum):
    """Closed set of link type tags.

    * **SIGNER** -- root address; always the first link.
    * **ECDSA_PERSONAL_EPHEMERAL** -- key-held authority delegates to an
      ephemeral key (personal-sign signature).
    * **ECDSA_PERSONAL_SIGNED_ENTITY** -- key-held authority signs the entity.
    * **ECDSA_EIP_1654_EPHEMERAL** -- contract authority delegates to an
      ephemeral key (signature checked on-chain).
    * **ECDSA_EIP_1654_SIGNED_ENTITY** -- contract authority signs the entity.
    """

    SIGNER = "SIGNER"
    ECDSA_PERSONAL_EPHEMERAL = "ECDSA_PERSONAL_EPHEMERAL"
    ECDSA_PERSONAL_SIGNED_ENTITY = "ECDSA_PERSONAL_SIGNED_ENTITY"
    ECDSA_EIP_1654_EPHEMERAL = "ECDSA_EIP_1654_EPHEMERAL"
    ECDSA_EIP_1654_SIGNED_ENTITY = "ECDSA_EIP_1654_SIGNED_ENTITY"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class AuthLink(BaseModel):
    """One step in an :data:`AuthChain`.

    ``payload`` is an address for SIGNER, the three-line delegation message
    for ephemeral links, and the entity identifier for signed-entity links.
    ``signature`` is empty for SIGNER.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    payload: str
    signature: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def _plain_tag(cls, value: object) -> object:
        if isinstance(value, AuthLinkType):
            return value.value
        return value


AuthChain = list[AuthLink]
"""Ordered, non-empty sequence of links.  Order is significant."""


class Identity(BaseModel):
    """An address together with the secp256k1 key that controls it."""

    model_config = ConfigDict(frozen=True)

    address: EthAddress
    private_key: str = Field(
        repr=False,
        description="Hex-encoded 32-byte private key.",
    )
    public_key: str = Field(
        default="",
        description="Hex-encoded uncompressed public key (``0x04...``).",
    )


class AuthIdentity(BaseModel):
    """A delegation built ahead of time, ready for :func:`sign_payload`."""

    model_config = ConfigDict(frozen=True)

    ephemeral_identity: Identity
    expiration: datetime
    auth_chain: list[AuthLink]


# ---------------------------------------------------------------------------
# Engine results
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ValidationResult:
    """Verdict of :func:`~dcl_authchain.validation.engine.validate_signature`.

    Attributes
    ----------
    ok:
        ``True`` only when every link validated and the final authority
        equals the expected one.
    message:
        Diagnostic message when ``ok`` is ``False``.
    code:
        Error code of the failure, when ``ok`` is ``False``.
    """

    ok: bool
    message: str | None = None
    code: str | None = None


@dataclass(slots=True, frozen=True)
class ValidationOptions:
    """Per-run context handed to every link validator."""

    date_to_validate_expiration_in_millis: int
    provider: ChainProvider | None = None


@dataclass(slots=True, frozen=True)
class EphemeralPayload:
    """Parsed form of an ephemeral delegation payload."""

    message: str
    ephemeral_address: str
    expiration: int
