"""Personal-sign (EIP-191) signatures and contract message hashes.

A personal-sign signature is ``r || s || v`` (65 bytes) rendered as
``0x``-prefixed hex, i.e. exactly :data:`PERSONAL_SIGNATURE_LENGTH`
characters.  Anything else is treated as a contract signature by the
chain builder.
"""
from __future__ import annotations

from eth_account import Account
from eth_account.messages import SignableMessage, encode_defunct
from eth_utils import keccak, to_bytes

PERSONAL_SIGNATURE_LENGTH = 132
"""Length of ``0x`` + 130 hex characters (65-byte ``r || s || v``)."""


def _signable(message: str | bytes) -> SignableMessage:
    if isinstance(message, bytes):
        return encode_defunct(primitive=message)
    return encode_defunct(text=message)


def eth_sign(private_key: str | bytes, message: str | bytes) -> str:
    """Sign *message* with the EIP-191 personal-message prefix.

    Parameters
    ----------
    private_key:
        32-byte key, raw or hex-encoded (with or without ``0x``).
    message:
        Text (UTF-8 encoded before signing) or raw bytes.

    Returns
    -------
    str
        ``0x``-prefixed 65-byte signature.
    """
    signed = Account.sign_message(_signable(message), private_key=private_key)
    return "0x" + bytes(signed.signature).hex()


def recover_address_from_eth_signature(signature: str, message: str | bytes) -> str:
    """Recover the checksummed address that produced *signature* over *message*.

    Raises whatever ``eth-account`` raises for malformed signatures; the
    validation engine converts those into a failed result.
    """
    return Account.recover_message(
        _signable(message),
        signature=to_bytes(hexstr=signature),
    )


def create_ethereum_message_hash(message: str | bytes) -> bytes:
    """Return the 32-byte EIP-191 hash that :func:`eth_sign` signs."""
    signable = _signable(message)
    return keccak(b"\x19" + signable.version + signable.header + signable.body)


def create_eip1271_message_hash(message: str) -> bytes:
    """Return ``keccak256(utf8(message))``, the hash handed to ``isValidSignature``."""
    return keccak(text=message)
