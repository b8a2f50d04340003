"""Tests for chain construction and the ephemeral payload format.

Covers:

1. **Ephemeral payload** -- formatting, parsing, carriage returns, malformed input.
2. **Signature-type inference** -- the 132-character rule.
3. **Builders** -- simple chain, full chain, external signer, sign_payload.
4. **Owner address** -- leading SIGNER extraction.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from dcl_authchain.chain.builder import (
    INVALID_OWNER_ADDRESS,
    create_auth_chain,
    create_signature,
    create_simple_auth_chain,
    initialize_auth_chain,
    move_minutes,
    owner_address,
    sign_payload,
)
from dcl_authchain.chain.ephemeral import (
    get_ephemeral_message,
    get_ephemeral_signature_type,
    get_signed_identity_signature_type,
    parse_ephemeral_payload,
    to_iso_string,
    to_millis,
)
from dcl_authchain.core.errors import MalformedEphemeralPayload
from dcl_authchain.core.types import AuthLink, AuthLinkType, EthAddress, Signature
from dcl_authchain.crypto.ecdsa import recover_address_from_eth_signature
from dcl_authchain.crypto.identity import identity_from_private_key

# ---------------------------------------------------------------------------
# Constants & helpers
# ---------------------------------------------------------------------------

OWNER = identity_from_private_key("0x" + "11" * 32)
EPHEMERAL = identity_from_private_key("0x" + "22" * 32)
ENTITY_ID = "QmUsqJaHc5HQaBrojhBdjF4fr5MQc6CqhwZjqwhVRftNAo"
EXPIRATION = datetime(2020, 1, 20, 22, 57, 11, 334000, tzinfo=UTC)
PERSONAL_SIGNATURE = "0x" + "ab" * 65
CONTRACT_SIGNATURE = "0x" + "cd" * 100


# ===================================================================
# Ephemeral payload
# ===================================================================

class TestEphemeralMessage:
    """Three-line delegation payload."""

    def test_format(self) -> None:
        message = get_ephemeral_message("0xAbC", EXPIRATION)
        assert message == (
            "Decentraland Login\n"
            "Ephemeral address: 0xAbC\n"
            "Expiration: 2020-01-20T22:57:11.334Z"
        )

    def test_custom_title(self) -> None:
        message = get_ephemeral_message("0xAbC", EXPIRATION, "My App")
        assert message.splitlines()[0] == "My App"

    def test_iso_string_converts_to_utc(self) -> None:
        offset = datetime(2020, 1, 21, 0, 57, 11, 334999, tzinfo=UTC).astimezone(
            tz=None
        )
        assert to_iso_string(offset) == "2020-01-21T00:57:11.334Z"

    def test_naive_datetime_read_as_utc(self) -> None:
        assert to_iso_string(EXPIRATION.replace(tzinfo=None)) == "2020-01-20T22:57:11.334Z"

    def test_parse_round_trips(self) -> None:
        parsed = parse_ephemeral_payload(get_ephemeral_message("0xAbC", EXPIRATION))
        assert parsed.ephemeral_address == "0xAbC"
        assert parsed.expiration == to_millis(EXPIRATION)
        assert parsed.expiration == 1579561031334

    def test_parse_strips_carriage_returns(self) -> None:
        payload = "Decentraland Login\r\nEphemeral address: 0xAbC\r\nExpiration: 2020-01-20T22:57:11.334Z"
        parsed = parse_ephemeral_payload(payload)
        assert "\r" not in parsed.message
        assert parsed.message == get_ephemeral_message("0xAbC", EXPIRATION)
        assert parsed.ephemeral_address == "0xAbC"

    def test_parse_offset_timestamp(self) -> None:
        payload = "T\nEphemeral address: 0x1\nExpiration: 2020-01-20T23:57:11.334+01:00"
        assert parse_ephemeral_payload(payload).expiration == 1579561031334

    def test_parse_too_few_lines(self) -> None:
        with pytest.raises(MalformedEphemeralPayload, match="Expected 3 lines"):
            parse_ephemeral_payload("Decentraland Login\nEphemeral address: 0x1")

    def test_parse_invalid_expiration(self) -> None:
        with pytest.raises(MalformedEphemeralPayload, match="Invalid expiration"):
            parse_ephemeral_payload("T\nEphemeral address: 0x1\nExpiration: tomorrow")


# ===================================================================
# Signature-type inference
# ===================================================================

class TestSignatureTypeInference:
    """Exactly 132 characters means personal sign; anything else, EIP-1654."""

    def test_personal_length(self) -> None:
        assert len(PERSONAL_SIGNATURE) == 132
        assert get_ephemeral_signature_type(PERSONAL_SIGNATURE) == AuthLinkType.ECDSA_PERSONAL_EPHEMERAL
        assert (
            get_signed_identity_signature_type(PERSONAL_SIGNATURE)
            == AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY
        )

    @pytest.mark.parametrize("length", [0, 2, 130, 131, 133, 134, 202])
    def test_other_lengths(self, length: int) -> None:
        signature = ("0x" + "a" * 300)[:length]
        assert get_ephemeral_signature_type(signature) == AuthLinkType.ECDSA_EIP_1654_EPHEMERAL
        assert (
            get_signed_identity_signature_type(signature)
            == AuthLinkType.ECDSA_EIP_1654_SIGNED_ENTITY
        )


# ===================================================================
# Builders
# ===================================================================

class TestCreateSimpleAuthChain:
    """Owner signs the entity directly."""

    def test_personal_signature(self) -> None:
        chain = create_simple_auth_chain(ENTITY_ID, OWNER.address, Signature(PERSONAL_SIGNATURE))
        assert chain == [
            AuthLink(type=AuthLinkType.SIGNER, payload=OWNER.address, signature=""),
            AuthLink(
                type=AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY,
                payload=ENTITY_ID,
                signature=PERSONAL_SIGNATURE,
            ),
        ]

    def test_contract_signature(self) -> None:
        chain = create_simple_auth_chain(ENTITY_ID, OWNER.address, Signature(CONTRACT_SIGNATURE))
        assert chain[1].type == AuthLinkType.ECDSA_EIP_1654_SIGNED_ENTITY

    def test_type_is_plain_wire_tag(self) -> None:
        chain = create_simple_auth_chain(ENTITY_ID, OWNER.address, Signature(PERSONAL_SIGNATURE))
        assert type(chain[0].type) is str
        assert chain[0].type == "SIGNER"


class TestCreateAuthChain:
    """Owner -> ephemeral -> entity, signed with raw keys."""

    def test_structure(self) -> None:
        chain = create_auth_chain(OWNER, EPHEMERAL, 10, ENTITY_ID)
        assert [link.type for link in chain] == [
            AuthLinkType.SIGNER,
            AuthLinkType.ECDSA_PERSONAL_EPHEMERAL,
            AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY,
        ]
        assert chain[0].payload == OWNER.address
        assert chain[0].signature == ""
        assert chain[2].payload == ENTITY_ID

    def test_owner_signed_delegation(self) -> None:
        chain = create_auth_chain(OWNER, EPHEMERAL, 10, ENTITY_ID)
        recovered = recover_address_from_eth_signature(chain[1].signature, chain[1].payload)
        assert recovered == OWNER.address

    def test_ephemeral_signed_entity(self) -> None:
        chain = create_auth_chain(OWNER, EPHEMERAL, 10, ENTITY_ID)
        recovered = recover_address_from_eth_signature(chain[2].signature, ENTITY_ID)
        assert recovered == EPHEMERAL.address

    def test_delegation_expires_after_duration(self) -> None:
        before = datetime.now(UTC)
        chain = create_auth_chain(OWNER, EPHEMERAL, 10, ENTITY_ID)
        parsed = parse_ephemeral_payload(chain[1].payload)
        assert parsed.ephemeral_address == EPHEMERAL.address
        lower = to_millis(before + timedelta(minutes=10)) - 1
        upper = to_millis(datetime.now(UTC) + timedelta(minutes=10))
        assert lower <= parsed.expiration <= upper

    def test_invalid_owner_key_propagates(self) -> None:
        bad_owner = OWNER.model_copy(update={"private_key": "0x1234"})
        with pytest.raises(ValueError):
            create_auth_chain(bad_owner, EPHEMERAL, 10, ENTITY_ID)


class TestInitializeAuthChain:
    """Delegation signed by an external async signer."""

    @pytest.mark.asyncio
    async def test_personal_signer(self) -> None:
        calls: list[str] = []

        async def signer(message: str) -> str:
            calls.append(message)
            return create_signature(OWNER, message)

        auth_identity = await initialize_auth_chain(OWNER.address, EPHEMERAL, 5, signer)

        assert len(calls) == 1
        assert auth_identity.ephemeral_identity == EPHEMERAL
        assert len(auth_identity.auth_chain) == 2
        assert auth_identity.auth_chain[1].type == AuthLinkType.ECDSA_PERSONAL_EPHEMERAL
        assert auth_identity.auth_chain[1].payload == calls[0]
        parsed = parse_ephemeral_payload(calls[0])
        assert parsed.expiration == to_millis(auth_identity.expiration)

    @pytest.mark.asyncio
    async def test_contract_signer(self) -> None:
        async def signer(message: str) -> str:
            return CONTRACT_SIGNATURE

        auth_identity = await initialize_auth_chain(
            EthAddress("0x" + "ef" * 20), EPHEMERAL, 5, signer
        )
        assert auth_identity.auth_chain[1].type == AuthLinkType.ECDSA_EIP_1654_EPHEMERAL

    @pytest.mark.asyncio
    async def test_signer_failure_propagates(self) -> None:
        async def signer(message: str) -> str:
            raise RuntimeError("user rejected")

        with pytest.raises(RuntimeError, match="user rejected"):
            await initialize_auth_chain(OWNER.address, EPHEMERAL, 5, signer)


class TestSignPayload:
    """Completing a prepared AuthIdentity."""

    @pytest.mark.asyncio
    async def test_appends_entity_link(self) -> None:
        async def signer(message: str) -> str:
            return create_signature(OWNER, message)

        auth_identity = await initialize_auth_chain(OWNER.address, EPHEMERAL, 5, signer)
        chain = sign_payload(auth_identity, ENTITY_ID)

        assert chain[:2] == auth_identity.auth_chain
        assert chain[2].type == AuthLinkType.ECDSA_PERSONAL_SIGNED_ENTITY
        assert recover_address_from_eth_signature(chain[2].signature, ENTITY_ID) == EPHEMERAL.address
        # The stored delegation is reusable.
        assert len(auth_identity.auth_chain) == 2
        assert sign_payload(auth_identity, "other")[2].payload == "other"


class TestOwnerAddress:
    def test_leading_signer(self) -> None:
        chain = create_auth_chain(OWNER, EPHEMERAL, 10, ENTITY_ID)
        assert owner_address(chain) == OWNER.address

    def test_empty_chain(self) -> None:
        assert owner_address([]) == INVALID_OWNER_ADDRESS

    def test_no_leading_signer(self) -> None:
        chain = create_auth_chain(OWNER, EPHEMERAL, 10, ENTITY_ID)[1:]
        assert owner_address(chain) == INVALID_OWNER_ADDRESS


def test_move_minutes() -> None:
    start = datetime(2024, 1, 1, tzinfo=UTC)
    assert move_minutes(90, now=start) == datetime(2024, 1, 1, 1, 30, tzinfo=UTC)
