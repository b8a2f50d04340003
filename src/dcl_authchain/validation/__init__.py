"""Chain validation: engine, link validators, and contract signature checks.

Public API
----------
- :func:`validate_signature` -- validate a whole chain against an expected authority.
- :func:`is_valid_auth_chain` -- structural check only.
- :func:`get_validator_by_type` -- the per-link-type dispatch table.
- :func:`is_valid_eip1654_message` -- live-then-historical contract check.
"""
from __future__ import annotations

from dcl_authchain.validation.engine import (
    LinkFailure,
    is_valid_auth_chain,
    resolve_authority,
    validate_signature,
)
from dcl_authchain.validation.onchain import (
    ERC1654_MAGIC_VALUE,
    SignatureValidator,
    encode_is_valid_signature_call,
    is_valid_eip1654_message,
)
from dcl_authchain.validation.validators import (
    Validator,
    get_validator_by_type,
)

__all__ = [
    "ERC1654_MAGIC_VALUE",
    "LinkFailure",
    "SignatureValidator",
    "Validator",
    "encode_is_valid_signature_call",
    "get_validator_by_type",
    "is_valid_auth_chain",
    "is_valid_eip1654_message",
    "resolve_authority",
    "validate_signature",
]
