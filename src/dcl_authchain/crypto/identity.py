"""secp256k1 identities.

Keys are generated with ``cryptography``; addresses follow Ethereum's
rule (last 20 bytes of ``keccak256(X || Y)``) in EIP-55 checksum form.
"""
from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from eth_utils import keccak, to_bytes, to_checksum_address

from dcl_authchain.core.types import EthAddress, Identity


def _identity_from_key(key: ec.EllipticCurvePrivateKey) -> Identity:
    private_value = key.private_numbers().private_value
    public_bytes = key.public_key().public_bytes(
        Encoding.X962, PublicFormat.UncompressedPoint
    )
    address = to_checksum_address(keccak(public_bytes[1:])[-20:])
    return Identity(
        address=EthAddress(address),
        private_key="0x" + private_value.to_bytes(32, "big").hex(),
        public_key="0x" + public_bytes.hex(),
    )


def create_identity() -> Identity:
    """Generate a fresh secp256k1 identity, e.g. for an ephemeral key."""
    return _identity_from_key(ec.generate_private_key(ec.SECP256K1()))


def identity_from_private_key(private_key: str) -> Identity:
    """Derive the :class:`Identity` controlled by a hex-encoded private key.

    Raises
    ------
    ValueError
        If *private_key* is not valid hex or is outside the curve order.
    """
    raw = to_bytes(hexstr=private_key)
    if len(raw) != 32:
        raise ValueError(f"Expected a 32-byte private key, got {len(raw)} bytes")
    key = ec.derive_private_key(int.from_bytes(raw, "big"), ec.SECP256K1())
    return _identity_from_key(key)
