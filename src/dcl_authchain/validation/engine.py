"""Chain validation engine.

Walks an :data:`~dcl_authchain.core.types.AuthChain` left to right,
threading the *authority* through each link's validator:

1. **Structure** -- the chain is non-empty, starts with SIGNER, and has
   no other SIGNER.  Otherwise nothing else is evaluated.
2. **Links** -- each validator receives the previous link's authority and
   produces the next one.  The first failure ends the walk.
3. **Final authority** -- the last authority must equal the expected
   one (exact, case-sensitive).

:func:`validate_signature` never raises; every failure is reported in
the returned :class:`~dcl_authchain.core.types.ValidationResult`.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from dcl_authchain.core.errors import (
    AuthChainError,
    AuthorityMismatch,
    LinkValidationError,
    MalformedChain,
    MalformedMessage,
)
from dcl_authchain.core.types import (
    AuthLink,
    AuthLinkType,
    ValidationOptions,
    ValidationResult,
)
from dcl_authchain.validation.validators import get_validator_by_type
from dcl_authchain.wire.codec import parse_auth_chain

if TYPE_CHECKING:
    from dcl_authchain.core.interfaces import ChainProvider

logger = logging.getLogger(__name__)


class LinkFailure(Exception):
    """A link's validator rejected it; wraps the underlying error."""

    def __init__(self, index: int, link: AuthLink, cause: Exception) -> None:
        self.index = index
        self.link = link
        self.cause = cause
        self.code = cause.code if isinstance(cause, AuthChainError) else LinkValidationError.code
        detail = cause.message if isinstance(cause, AuthChainError) else str(cause)
        super().__init__(
            f"ERROR. Link type: {link.type}. Link index: {index}. {detail}."
        )


def is_valid_auth_chain(auth_chain: Sequence[AuthLink]) -> bool:
    """Return ``True`` if the chain satisfies the structural rules.

    * The chain is not empty.
    * SIGNER is the first link.
    * SIGNER appears exactly once.
    """
    if not auth_chain:
        return False
    for index, auth_link in enumerate(auth_chain):
        if index == 0 and auth_link.type != AuthLinkType.SIGNER:
            return False
        if index != 0 and auth_link.type == AuthLinkType.SIGNER:
            return False
    return True


async def resolve_authority(
    auth_chain: Sequence[AuthLink],
    options: ValidationOptions,
) -> str:
    """Fold the chain into its final authority.

    Raises
    ------
    LinkFailure
        For the first link whose validator fails; later links are never
        evaluated.
    """
    authority = ""
    for index, auth_link in enumerate(auth_chain):
        validator = get_validator_by_type(auth_link.type)
        try:
            next_authority = await validator(authority, auth_link, options)
        except Exception as exc:
            raise LinkFailure(index, auth_link, exc) from exc
        logger.debug("Link %d (%s) validated", index, auth_link.type)
        authority = next_authority or ""
    return authority


async def validate_signature(
    expected_final_authority: str,
    auth_chain: Sequence[AuthLink | Mapping[str, Any]],
    provider: ChainProvider | None = None,
    date_to_validate_expiration_in_millis: int | None = None,
) -> ValidationResult:
    """Validate that *auth_chain* ends in *expected_final_authority*.

    Parameters
    ----------
    expected_final_authority:
        The value the chain must resolve to, usually the signed entity id.
    auth_chain:
        The chain to validate, as :class:`AuthLink` objects or as plain
        ``{type, payload, signature}`` records.  Not modified.
    provider:
        Chain-node access, required only for EIP-1654 links.
    date_to_validate_expiration_in_millis:
        Reference time for ephemeral expiration and for the historical
        contract check.  Defaults to now.

    Returns
    -------
    ValidationResult
        ``ok=True`` on success, otherwise ``ok=False`` with a diagnostic
        message and error code.
    """
    if not all(isinstance(link, AuthLink) for link in auth_chain):
        # Plain {type, payload, signature} records, e.g. straight from JSON.
        try:
            auth_chain = parse_auth_chain(list(auth_chain))
        except MalformedMessage as exc:
            logger.debug("Rejected undecodable chain: %s", exc)
            return ValidationResult(
                ok=False, message=MalformedChain.message, code=MalformedChain.code
            )

    if not is_valid_auth_chain(auth_chain):
        logger.debug("Rejected malformed chain of %d links", len(auth_chain))
        return ValidationResult(
            ok=False, message=MalformedChain.message, code=MalformedChain.code
        )

    if date_to_validate_expiration_in_millis is None:
        date_to_validate_expiration_in_millis = int(time.time() * 1000)
    options = ValidationOptions(
        date_to_validate_expiration_in_millis=date_to_validate_expiration_in_millis,
        provider=provider,
    )

    try:
        current_authority = await resolve_authority(auth_chain, options)
    except LinkFailure as failure:
        logger.debug("Chain rejected: %s", failure)
        return ValidationResult(ok=False, message=str(failure), code=failure.code)

    if current_authority != expected_final_authority:
        return ValidationResult(
            ok=False,
            message=(
                f"ERROR: Invalid final authority. Expected: {expected_final_authority}. "
                f"Current {current_authority}."
            ),
            code=AuthorityMismatch.code,
        )
    return ValidationResult(ok=True)
