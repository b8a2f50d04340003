"""JSON wire format of an AuthChain.

A chain is an ordered JSON array of link records::

    [
      {"type": "SIGNER", "payload": "0x...", "signature": ""},
      {"type": "ECDSA_PERSONAL_EPHEMERAL", "payload": "...", "signature": "0x..."},
      {"type": "ECDSA_PERSONAL_SIGNED_ENTITY", "payload": "Qm...", "signature": "0x..."}
    ]

Decoding checks the record shape only; unknown type tags are kept so the
engine can reject them with a link-level error.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError

from dcl_authchain.core.errors import MalformedMessage
from dcl_authchain.core.types import AuthChain, AuthLink

_AUTH_CHAIN_ADAPTER: TypeAdapter[list[AuthLink]] = TypeAdapter(list[AuthLink])


def serialize_auth_chain(auth_chain: Sequence[AuthLink]) -> str:
    """Encode *auth_chain* as a compact JSON array."""
    return _AUTH_CHAIN_ADAPTER.dump_json(list(auth_chain)).decode("utf-8")


def auth_chain_to_list(auth_chain: Sequence[AuthLink]) -> list[dict[str, Any]]:
    """Return the chain as a list of plain ``dict`` records."""
    return _AUTH_CHAIN_ADAPTER.dump_python(list(auth_chain), mode="json")


def parse_auth_chain(data: str | bytes | list[Any]) -> AuthChain:
    """Decode a chain from JSON text or from already-parsed records.

    Raises
    ------
    MalformedMessage
        If *data* is not an array of ``{type, payload, signature}`` records.
    """
    try:
        if isinstance(data, (str, bytes)):
            return _AUTH_CHAIN_ADAPTER.validate_json(data)
        return _AUTH_CHAIN_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise MalformedMessage(
            f"Invalid AuthChain: {exc.error_count()} validation error(s)",
            details={"errors": exc.errors(include_url=False, include_input=False)},
        ) from exc
