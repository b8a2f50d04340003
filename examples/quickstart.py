#!/usr/bin/env python3
"""AuthChain quickstart -- Hello World example.

Demonstrates the core workflow of AuthChain delegation:

1. Create an owner identity and a short-lived ephemeral identity.
2. Build a chain in which the owner delegates to the ephemeral key and
   the ephemeral key signs an entity id.
3. Serialise the chain for transport and decode it again.
4. Validate the decoded chain against the entity id.
5. Validate it again after the delegation has expired.

Run:
    python examples/quickstart.py
"""
from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

from dcl_authchain import (
    AuthChainConfig,
    Authenticator,
    create_identity,
    parse_auth_chain,
    serialize_auth_chain,
)
from dcl_authchain.chain.ephemeral import to_millis


async def main() -> None:
    # -- Step 1: Identities ---------------------------------------------------
    owner = create_identity()
    ephemeral = create_identity()
    print(f"[1] Owner:     {owner.address}")
    print(f"    Ephemeral: {ephemeral.address}")

    # -- Step 2: Build the chain ---------------------------------------------
    # No rpc_url: personal-sign chains never touch the network.
    authenticator = Authenticator(AuthChainConfig(ephemeral_minutes=10))
    entity_id = "QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"
    chain = authenticator.create_auth_chain(owner, ephemeral, entity_id)
    for index, link in enumerate(chain):
        print(f"[2] Link {index}: {link.type}")

    # -- Step 3: Wire round-trip ---------------------------------------------
    wire = serialize_auth_chain(chain)
    decoded = parse_auth_chain(wire)
    print(f"[3] Serialised chain: {len(wire)} bytes")

    # -- Step 4: Validate ----------------------------------------------------
    result = await authenticator.validate_signature(entity_id, decoded)
    print(f"[4] Valid now: {result.ok}")
    print(f"    Owner:     {authenticator.owner_address(decoded)}")

    # -- Step 5: Validate after expiry ---------------------------------------
    later = to_millis(datetime.now(UTC) + timedelta(hours=1))
    expired = await authenticator.validate_signature(entity_id, decoded, later)
    print(f"[5] Valid in an hour: {expired.ok}")
    print(f"    [{expired.code}] {expired.message}")


if __name__ == "__main__":
    asyncio.run(main())
