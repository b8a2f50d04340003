"""AuthChain configuration.

Defines the validated configuration model shared by the chain builder
facade and the JSON-RPC provider.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AuthChainConfig(BaseModel):
    """Configuration for an :class:`~dcl_authchain.authenticator.Authenticator`.

    All fields carry defaults, so ``AuthChainConfig()`` is sufficient for
    building and validating chains that only contain personal signatures.
    Validating contract (EIP-1654) links additionally needs ``rpc_url`` or
    an explicitly supplied provider.
    """

    model_config = ConfigDict(strict=True)

    ephemeral_message_title: str = Field(
        default="Decentraland Login",
        min_length=1,
        description=(
            "Human-readable first line of the ephemeral delegation payload."
        ),
    )
    ephemeral_minutes: int = Field(
        default=60,
        ge=1,
        description="Default lifetime of an ephemeral delegation in minutes.",
    )
    rpc_url: str | None = Field(
        default=None,
        description="JSON-RPC endpoint of the blockchain node.",
    )
    rpc_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for a single JSON-RPC request.",
    )
