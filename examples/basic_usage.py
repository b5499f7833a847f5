#!/usr/bin/env python3
"""
Basic usage example for Vault Link Python SDK
"""

import asyncio
import os

from vault_link_sdk import (
    AppRoleCredential,
    ClientConfig,
    ForbiddenError,
    VaultLinkClient,
    path_combine,
)


async def main():
    # Configure client
    config = ClientConfig(
        base_url=os.environ.get("VAULT_ADDR", "http://127.0.0.1:8200"),
        timeout=30,
        log_requests=True,
    )

    async with VaultLinkClient(config) as client:
        # Log in with AppRole
        credential = AppRoleCredential(
            role_id=os.environ["VAULT_ROLE_ID"],
            secret_id=os.environ.get("VAULT_SECRET_ID", ""),
        )
        if not await client.login(credential, "AppRole login"):
            print("Login refused")
            return
        print(f"Logged in, policies: {sorted(client.token.policies)}")

        # List and read KV v2 secrets
        for key in await client.transport.list("secret/metadata/app"):
            if key.endswith("/"):
                continue
            envelope = await client.transport.get(path_combine("secret/data/app", key))
            print(f"{key}: {sorted(envelope.get_data_field('data') or {})}")

        # Renew, then revoke when done
        token = await client.renew_token("1h")
        print(f"Token renewed, ttl={token.ttl}s")

        try:
            await client.revoke_token()
        except ForbiddenError as e:
            print(f"Could not revoke token: {e}")


if __name__ == "__main__":
    asyncio.run(main())
