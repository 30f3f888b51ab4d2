#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
KeyDerivation - client side of the SRP-6a key agreement.

Given the server's B and the user's salt this derives:

    u = H(pad(A) | pad(B))
    x = H(pad(salt) | H(poolSuffix | username | ":" | password))
    S = (B - k * g^x) ^ (a + u * x) mod N
    K = HKDF-SHA256(ikm=pad(S), salt=pad(u), info="Caldera Derived Key", 16 bytes)

The derived key K is only returned to the caller; it is never logged.
"""

import re
from dataclasses import dataclass

from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import HKDF

from cognito_srp.crypto.SessionContext import SessionContext
from cognito_srp.crypto.SrpErrors import MalformedChallenge, ZeroScramblingParameter
from cognito_srp.crypto.SrpMath import hash_str, hex_hash, non_negative_mod, pad_hex
from cognito_srp.utils.Logger import Logger


HKDF_INFO = b"Caldera Derived Key"
SESSION_KEY_LENGTH = 16

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")


def _require_hex(field_name: str, value) -> str:
    """Plain hex digits only: no sign, 0x prefix, separators or whitespace."""
    if not isinstance(value, str) or _HEX_DIGITS.fullmatch(value) is None:
        raise MalformedChallenge(f"{field_name} is not valid hex: {value!r}")
    return value


@dataclass(frozen=True)
class DerivedValues:
    """Intermediate SRP values, kept together for inspection in tests."""

    u: int
    x: int
    S: int
    session_key: bytes

    def __repr__(self) -> str:
        return "DerivedValues(<redacted>)"


class KeyDerivation:
    def __init__(self, context: SessionContext) -> None:
        self.context = context
        self.group = context.group

    # ------------------------------------------------------------------
    def compute_u(self, A: int, B: int) -> int:
        """
        Scrambling parameter u = H(pad(A) | pad(B)).

        Raises:
            ZeroScramblingParameter: u == 0.
        """
        u_value = int(hex_hash(pad_hex(A) + pad_hex(B)), 16)
        if u_value == 0:
            raise ZeroScramblingParameter("U cannot be zero.")
        return u_value

    def compute_x(self, username: str, password: str, salt_hex: str) -> int:
        """Password exponent x = H(pad(salt) | H(poolSuffix | username:password))."""
        username_password_hash = hash_str(
            f"{self.context.pool_id_suffix}{username}:{password}"
        )
        salt_hex = _require_hex("SALT", salt_hex)
        return int(hex_hash(pad_hex(salt_hex) + username_password_hash), 16)

    def compute_S(self, B: int, x: int, u: int) -> int:
        """Shared secret S = (B - k * g^x mod N) ^ (a + u * x) mod N."""
        N = self.group.N
        g_mod_pow_x = pow(self.group.g, x, N)
        base = non_negative_mod(B - self.group.k * g_mod_pow_x, N)
        exponent = self.context.small_a() + u * x
        return pow(base, exponent, N)

    @staticmethod
    def compute_hkdf(ikm: bytes, salt: bytes) -> bytes:
        """RFC 5869 HKDF-SHA256 with the fixed protocol info string."""
        return HKDF(ikm, SESSION_KEY_LENGTH, salt, SHA256, context=HKDF_INFO)

    # ------------------------------------------------------------------
    def derive(self, username: str, password: str, server_b_hex: str, salt_hex: str) -> DerivedValues:
        """
        Runs the full derivation and returns every intermediate value.

        Raises:
            MalformedChallenge: SRP_B or SALT are not hex.
            ZeroScramblingParameter: u == 0.
            InvalidPublicValue, RandomSourceFailure: from the key pair.
        """
        server_b = int(_require_hex("SRP_B", server_b_hex), 16)

        Logger.debug(f"Deriving password authentication key for {username}")

        u_value = self.compute_u(self.context.large_a(), server_b)
        x_value = self.compute_x(username, password, salt_hex)
        s_value = self.compute_S(server_b, x_value, u_value)

        session_key = self.compute_hkdf(
            bytes.fromhex(pad_hex(s_value)),
            bytes.fromhex(pad_hex(u_value)),
        )
        return DerivedValues(u=u_value, x=x_value, S=s_value, session_key=session_key)

    def derive_password_authentication_key(
        self,
        username: str,
        password: str,
        server_b_hex: str,
        salt_hex: str,
    ) -> bytes:
        """16-byte session key used to sign the PASSWORD_VERIFIER claim."""
        return self.derive(username, password, server_b_hex, salt_hex).session_key
