#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import base64
import hashlib
import hmac
import os

from cognito_srp.crypto.EphemeralKeyPair import EphemeralKeyPair, RandomSource
from cognito_srp.crypto.SrpErrors import MissingClientSecret
from cognito_srp.crypto.SrpGroup import DEFAULT_GROUP, SrpGroup


class SessionContext:
    """
    State of one login attempt against a user pool.

    Holds the app client identity, the pool id and the ephemeral key pair.
    Use a new context for every attempt; the private exponent must not be
    shared between unrelated logins.
    """

    def __init__(
        self,
        client_id: str,
        pool_id: str,
        client_secret: str | None = None,
        group: SrpGroup = DEFAULT_GROUP,
        random_source: RandomSource = os.urandom,
    ) -> None:
        self.client_id = client_id
        self.pool_id = pool_id
        self._client_secret = client_secret or None
        self.group = group

        self.key_pair = EphemeralKeyPair(group, random_source)

    @classmethod
    def from_config(cls, cfg: dict, **kwargs) -> "SessionContext":
        """Build a context from the `cognito` section of the configuration."""
        section = cfg.get("cognito") or {}
        client_id = section.get("client_id")
        pool_id = section.get("pool_id")
        if not client_id or not pool_id:
            raise RuntimeError("Configuration needs cognito.client_id and cognito.pool_id")
        return cls(
            client_id=str(client_id),
            pool_id=str(pool_id),
            client_secret=section.get("client_secret"),
            **kwargs,
        )

    # ------------------------------------------------------------------
    @property
    def has_client_secret(self) -> bool:
        return self._client_secret is not None

    @property
    def pool_id_suffix(self) -> str:
        """Part of `<region>_<id>` after the underscore; empty when there is none."""
        parts = self.pool_id.split("_")
        return parts[1] if len(parts) > 1 else ""

    def small_a(self) -> int:
        return self.key_pair.small_a()

    def large_a(self) -> int:
        return self.key_pair.large_a()

    def srp_a(self) -> str:
        return self.key_pair.srp_a()

    # ------------------------------------------------------------------
    def secret_hash(self, username: str) -> str:
        """
        SECRET_HASH = base64(HMAC-SHA256(client_secret, username + client_id)).

        Raises:
            MissingClientSecret: The context was created without a secret.
        """
        if self._client_secret is None:
            raise MissingClientSecret()

        message = (username + self.client_id).encode("utf-8")
        digest = hmac.new(self._client_secret.encode("utf-8"), message, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")
