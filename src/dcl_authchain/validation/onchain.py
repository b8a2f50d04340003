"""Contract signature verification (EIP-1271 / EIP-1654).

Contract accounts hold no private key, so their signatures are checked by
calling ``isValidSignature(bytes32 hash, bytes signature) -> bytes4`` on
the contract itself.  A return value of :data:`ERC1654_MAGIC_VALUE` means
the contract accepts the signature.

Verification runs in two phases:

1. **Live** -- call the contract at the latest state.  A magic-value
   answer succeeds immediately.
2. **Historical** -- otherwise resolve the reference time to a block
   height and repeat the call pinned to that height.  This accepts
   signatures made by a signer that the contract has since rotated out.

The live phase always runs first.  Only a non-magic *answer* goes to the
historical phase; a live call that raises fails verification at once,
with no retry.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_bytes

from dcl_authchain.core.errors import MissingProvider, OnChainValidationFailed
from dcl_authchain.crypto.ecdsa import create_eip1271_message_hash

if TYPE_CHECKING:
    from dcl_authchain.core.interfaces import ChainProvider

logger = logging.getLogger(__name__)

# bytes4(keccak256("isValidSignature(bytes32,bytes)"))
ERC1654_MAGIC_VALUE = "1626ba7e"

IS_VALID_SIGNATURE_SELECTOR = function_signature_to_4byte_selector(
    "isValidSignature(bytes32,bytes)"
)


def encode_is_valid_signature_call(message_hash: bytes, signature: bytes) -> bytes:
    """ABI-encode the calldata of ``isValidSignature(bytes32,bytes)``."""
    return IS_VALID_SIGNATURE_SELECTOR + encode(
        ["bytes32", "bytes"], [message_hash, signature]
    )


def decode_magic_value(raw: bytes) -> str:
    """Return the ``bytes4`` result of the call as bare lowercase hex.

    ``bytes4`` is left-aligned in its 32-byte word.  An empty answer
    (no code at the address) decodes to ``""``.
    """
    return raw[:4].hex()


def _error_text(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


class SignatureValidator:
    """Binding of the ``isValidSignature`` method to one contract.

    Parameters
    ----------
    provider:
        Chain-node access used to issue the calls.
    contract_address:
        Address of the contract account.
    """

    def __init__(self, provider: ChainProvider, contract_address: str) -> None:
        self._provider = provider
        self._contract_address = contract_address

    @property
    def contract_address(self) -> str:
        return self._contract_address

    async def is_valid_signature(
        self,
        message_hash: bytes,
        signature: bytes,
        block: int | None = None,
    ) -> str:
        """Call the contract and return its ``bytes4`` answer as hex."""
        data = encode_is_valid_signature_call(message_hash, signature)
        raw = await self._provider.call(self._contract_address, data, block)
        return decode_magic_value(raw)


async def is_valid_eip1654_message(
    provider: ChainProvider | None,
    contract_address: str,
    message: str,
    signature: str,
    date_to_validate_expiration_in_millis: int,
) -> bool:
    """Check that *contract_address* accepts *signature* over *message*.

    Returns
    -------
    bool
        ``True`` when either the live or the historical call answers the
        magic value.  Never returns ``False``; rejection raises.

    Raises
    ------
    MissingProvider
        If *provider* is ``None``.
    OnChainValidationFailed
        If a call or the historical lookup fails, or both phases answer
        something other than the magic value.
    """
    if provider is None:
        raise MissingProvider()

    signature_validator = SignatureValidator(provider, contract_address)
    hashed_message = create_eip1271_message_hash(message)
    signature_bytes = to_bytes(hexstr=signature)

    try:
        result = await signature_validator.is_valid_signature(
            hashed_message, signature_bytes
        )
    except Exception as exc:
        logger.warning(
            "Live isValidSignature call on %s failed: %s", contract_address, exc
        )
        raise OnChainValidationFailed(
            f"Invalid validation. Error: {_error_text(exc)}",
            details={"contract_address": contract_address},
        ) from exc

    if result == ERC1654_MAGIC_VALUE:
        return True

    logger.info(
        "Contract %s rejected signature at latest state (result=%s); "
        "checking state at %d",
        contract_address,
        result,
        date_to_validate_expiration_in_millis,
    )
    try:
        block = await provider.get_block_at(date_to_validate_expiration_in_millis)
        result = await signature_validator.is_valid_signature(
            hashed_message, signature_bytes, block
        )
    except Exception as exc:
        raise OnChainValidationFailed(
            f"Invalid validation. Error: {_error_text(exc)}",
            details={"contract_address": contract_address},
        ) from exc

    if result == ERC1654_MAGIC_VALUE:
        logger.debug("Contract %s accepted signature at block %d", contract_address, block)
        return True

    raise OnChainValidationFailed(
        f"Invalid validation. Expected: {ERC1654_MAGIC_VALUE}. Actual: {result}",
        details={
            "contract_address": contract_address,
            "expected": ERC1654_MAGIC_VALUE,
            "actual": result,
            "block": block,
        },
    )
