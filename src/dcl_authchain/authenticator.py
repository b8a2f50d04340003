"""Authenticator -- the main entry point.

:class:`Authenticator` binds an :class:`~dcl_authchain.core.config.AuthChainConfig`
and an optional :class:`~dcl_authchain.core.interfaces.ChainProvider` to the
chain builder and the validation engine, so callers configure the
delegation title, default lifetime and node access once.

Usage
-----
::

    from dcl_authchain import Authenticator, AuthChainConfig, create_identity

    authenticator = Authenticator(AuthChainConfig(rpc_url="https://rpc.example.com"))
    owner, ephemeral = create_identity(), create_identity()

    chain = authenticator.create_auth_chain(owner, ephemeral, "QmEntity")
    result = await authenticator.validate_signature("QmEntity", chain)
    assert result.ok
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from dcl_authchain.chain import builder
from dcl_authchain.core.config import AuthChainConfig
from dcl_authchain.validation.engine import validate_signature
from dcl_authchain.wire.jsonrpc import JSONRPCProvider

if TYPE_CHECKING:
    from dcl_authchain.chain.builder import MessageSigner
    from dcl_authchain.core.interfaces import ChainProvider
    from dcl_authchain.core.types import (
        AuthChain,
        AuthIdentity,
        AuthLink,
        EthAddress,
        Identity,
        ValidationResult,
    )


class Authenticator:
    """Builds and validates chains with shared configuration.

    Parameters
    ----------
    config:
        Shared configuration.  Defaults to ``AuthChainConfig()``.
    provider:
        Node access for EIP-1654 links.  When omitted and ``config.rpc_url``
        is set, a :class:`JSONRPCProvider` is created from the config.
    """

    def __init__(
        self,
        config: AuthChainConfig | None = None,
        provider: ChainProvider | None = None,
    ) -> None:
        self._config = config or AuthChainConfig()
        if provider is None and self._config.rpc_url is not None:
            provider = JSONRPCProvider.from_config(self._config)
        self._provider = provider

    @property
    def config(self) -> AuthChainConfig:
        return self._config

    @property
    def provider(self) -> ChainProvider | None:
        return self._provider

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    async def validate_signature(
        self,
        expected_final_authority: str,
        auth_chain: Sequence[AuthLink | Mapping[str, Any]],
        date_to_validate_expiration_in_millis: int | None = None,
    ) -> ValidationResult:
        """Validate *auth_chain* with this authenticator's provider."""
        return await validate_signature(
            expected_final_authority,
            auth_chain,
            self._provider,
            date_to_validate_expiration_in_millis,
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def create_auth_chain(
        self,
        owner_identity: Identity,
        ephemeral_identity: Identity,
        entity_id: str,
        ephemeral_minutes_duration: int | None = None,
    ) -> AuthChain:
        minutes = ephemeral_minutes_duration
        if minutes is None:
            minutes = self._config.ephemeral_minutes
        return builder.create_auth_chain(
            owner_identity,
            ephemeral_identity,
            minutes,
            entity_id,
            title=self._config.ephemeral_message_title,
        )

    async def initialize_auth_chain(
        self,
        eth_address: EthAddress,
        ephemeral_identity: Identity,
        signer: MessageSigner,
        ephemeral_minutes_duration: int | None = None,
    ) -> AuthIdentity:
        minutes = ephemeral_minutes_duration
        if minutes is None:
            minutes = self._config.ephemeral_minutes
        return await builder.initialize_auth_chain(
            eth_address,
            ephemeral_identity,
            minutes,
            signer,
            title=self._config.ephemeral_message_title,
        )

    def sign_payload(self, auth_identity: AuthIdentity, entity_id: str) -> AuthChain:
        return builder.sign_payload(auth_identity, entity_id)

    def owner_address(self, auth_chain: AuthChain) -> str:
        return builder.owner_address(auth_chain)
