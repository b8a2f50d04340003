"""AuthChain error-code hierarchy.

Every failure the validation engine can report is represented as a
concrete exception class carrying a stable error code.

Hierarchy
---------
::

    AuthChainError
    +-- ChainStructureError   (DCL-E1xx)
    +-- LinkValidationError   (DCL-E2xx)
    +-- OnChainError          (DCL-E3xx)
    +-- TransportError        (DCL-E4xx)

Usage
-----
Raise concrete subclasses directly::

    raise InvalidSignerAddress(
        f"Invalid signer address. Expected: {expected}. Actual: {actual}"
    )

Catch by category::

    try:
        ...
    except LinkValidationError:
        # handles InvalidSignerAddress, EphemeralKeyExpired, etc.
        ...

The top-level :func:`~dcl_authchain.validation.engine.validate_signature`
never lets these escape; it converts them into a
:class:`~dcl_authchain.core.types.ValidationResult`.  Chain construction
propagates them unchanged.
"""
from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class AuthChainError(Exception):
    """Base exception for all AuthChain errors.

    Attributes
    ----------
    code : str
        Error code, e.g. ``"DCL-E100"``.
    message : str
        Human-readable description (MUST NOT contain private keys).
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    resolution : str
        Suggested action for the caller.
    """

    code: str = "DCL-E000"
    message: str = "Unknown AuthChain error"
    resolution: str = ""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        resolution: str | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        if resolution is not None:
            self.resolution = resolution
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error to a JSON-friendly error object."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["detail"] = self.details
        if self.resolution:
            payload["resolution"] = self.resolution
        return {"error": payload}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ===================================================================
# Category base classes
# ===================================================================

class ChainStructureError(AuthChainError):
    """DCL-E1xx -- The chain as a whole is not acceptable."""

    code = "DCL-E1XX"


class LinkValidationError(AuthChainError):
    """DCL-E2xx -- A single link was rejected by its validator."""

    code = "DCL-E2XX"


class OnChainError(AuthChainError):
    """DCL-E3xx -- Contract-based (EIP-1271/1654) signature checks."""

    code = "DCL-E3XX"


class TransportError(AuthChainError):
    """DCL-E4xx -- JSON-RPC transport, block lookup, and wire decoding."""

    code = "DCL-E4XX"


# ===================================================================
# DCL-E1xx  Chain structure
# ===================================================================

class MalformedChain(ChainStructureError):
    """DCL-E100 -- The chain is empty, does not start with SIGNER, or repeats SIGNER."""

    code = "DCL-E100"
    message = "ERROR: Malformed authChain"
    resolution = (
        "Build the chain with a single leading SIGNER link followed by "
        "delegation and entity links."
    )


class AuthorityMismatch(ChainStructureError):
    """DCL-E101 -- Every link validated but the final authority is not the expected one."""

    code = "DCL-E101"
    message = "Final authority does not match the expected authority"


# ===================================================================
# DCL-E2xx  Link validation
# ===================================================================

class UnknownLinkType(LinkValidationError):
    """DCL-E200 -- The link carries a type tag with no registered validator."""

    code = "DCL-E200"
    message = "Error Validator"


class InvalidSignerAddress(LinkValidationError):
    """DCL-E201 -- The recovered signer is not the current authority."""

    code = "DCL-E201"
    message = "Invalid signer address"


class EphemeralKeyExpired(LinkValidationError):
    """DCL-E202 -- The ephemeral delegation expired at or before the reference time."""

    code = "DCL-E202"
    message = "Ephemeral key expired"
    resolution = "Create a new ephemeral delegation and sign again."


class MalformedEphemeralPayload(LinkValidationError):
    """DCL-E203 -- The ephemeral payload is not the three-line delegation message."""

    code = "DCL-E203"
    message = "Malformed ephemeral payload"


# ===================================================================
# DCL-E3xx  On-chain verification
# ===================================================================

class OnChainValidationFailed(OnChainError):
    """DCL-E300 -- The contract did not return the magic value, live or historically."""

    code = "DCL-E300"
    message = "Invalid validation"


class MissingProvider(OnChainError):
    """DCL-E301 -- A contract signature was found but no provider was configured."""

    code = "DCL-E301"
    message = "Missing provider"
    resolution = "Pass a ChainProvider when validating EIP-1654 links."


# ===================================================================
# DCL-E4xx  Transport
# ===================================================================

class RPCError(TransportError):
    """DCL-E400 -- The JSON-RPC node failed or answered with an error object."""

    code = "DCL-E400"
    message = "JSON-RPC request failed"


class BlockLookupFailed(TransportError):
    """DCL-E401 -- No block height could be resolved for the reference time."""

    code = "DCL-E401"
    message = "Block lookup failed"


class MalformedMessage(TransportError):
    """DCL-E402 -- A serialised chain could not be decoded."""

    code = "DCL-E402"
    message = "Malformed AuthChain message"
