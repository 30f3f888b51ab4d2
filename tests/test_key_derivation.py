#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Unit tests for KeyDerivation."""

from __future__ import annotations

import hashlib
import hmac
import os
import unittest
from unittest.mock import patch

from cognito_srp.crypto import KeyDerivation as key_derivation_module
from cognito_srp.crypto.KeyDerivation import HKDF_INFO, SESSION_KEY_LENGTH, KeyDerivation
from cognito_srp.crypto.SessionContext import SessionContext
from cognito_srp.crypto.SrpErrors import MalformedChallenge, SrpErrorKind, ZeroScramblingParameter
from cognito_srp.crypto.SrpGroup import DEFAULT_GROUP
from cognito_srp.crypto.SrpMath import hash_str, pad_hex


SALT = "3b9cadfa7530456cc432931b15bf9951"


def rfc5869_hkdf(ikm: bytes, salt: bytes, info: bytes, length: int) -> bytes:
    """Reference HKDF-SHA256 for a single output block."""
    prk = hmac.new(salt, ikm, hashlib.sha256).digest()
    return hmac.new(prk, info + b"\x01", hashlib.sha256).digest()[:length]


class SrpServer:
    """Minimal server side of the exchange, used to check the client math."""

    def __init__(self, x: int) -> None:
        group = DEFAULT_GROUP
        self.verifier = pow(group.g, x, group.N)
        self.b = int.from_bytes(os.urandom(32), "big")
        self.B = (group.k * self.verifier + pow(group.g, self.b, group.N)) % group.N

    def shared_secret(self, A: int, u: int) -> int:
        N = DEFAULT_GROUP.N
        return pow(A * pow(self.verifier, u, N) % N, self.b, N)


class KeyDerivationTest(unittest.TestCase):
    """Tests for u, x, S and the session key."""

    def setUp(self) -> None:
        self.context = SessionContext("dummy-client-id", "us-east-1_Pool42", "dummy-client-secret")
        self.derivation = KeyDerivation(self.context)

    # -------------------------------------------------------------
    # Individual values
    # -------------------------------------------------------------

    def test_compute_x(self) -> None:
        """x = H(pad(salt) | H(pool suffix + username:password))."""
        inner = hash_str("Pool42alice:secret")
        expected = int(hashlib.sha256(bytes.fromhex(pad_hex(SALT) + inner)).hexdigest(), 16)
        self.assertEqual(self.derivation.compute_x("alice", "secret", SALT), expected)

    def test_compute_x_salt_with_high_bit(self) -> None:
        """A salt starting at 8 or above is hashed with a leading zero byte."""
        salt = "ab" + SALT[2:]
        inner = hash_str("Pool42alice:secret")
        expected = int(hashlib.sha256(bytes.fromhex("00" + salt + inner)).hexdigest(), 16)
        self.assertEqual(self.derivation.compute_x("alice", "secret", salt), expected)

    def test_compute_u(self) -> None:
        """u = H(pad(A) | pad(B))."""
        A, B = 0x1234, 0x89
        expected = int(hashlib.sha256(bytes.fromhex("1234" + "0089")).hexdigest(), 16)
        self.assertEqual(self.derivation.compute_u(A, B), expected)

    def test_zero_u_rejected(self) -> None:
        """A zero scrambling parameter aborts the derivation."""
        with patch.object(key_derivation_module, "hex_hash", return_value="0" * 64):
            with self.assertRaises(ZeroScramblingParameter) as ctx:
                self.derivation.derive("alice", "secret", "1234", SALT)
        self.assertEqual(ctx.exception.kind, SrpErrorKind.ZERO_SCRAMBLING_PARAMETER)
        self.assertFalse(ctx.exception.retryable)

    def test_hkdf_matches_rfc5869(self) -> None:
        """The session key is HKDF-SHA256 with the fixed info string."""
        ikm, salt = b"\x01\x02\x03", b"\x00\x99"
        key = KeyDerivation.compute_hkdf(ikm, salt)

        self.assertEqual(len(key), SESSION_KEY_LENGTH)
        self.assertEqual(key, rfc5869_hkdf(ikm, salt, HKDF_INFO, SESSION_KEY_LENGTH))

    # -------------------------------------------------------------
    # Full exchange
    # -------------------------------------------------------------

    def test_shared_secret_matches_server(self) -> None:
        """Client and server arrive at the same S and session key."""
        x = self.derivation.compute_x("alice", "secret", SALT)
        server = SrpServer(x)

        values = self.derivation.derive("alice", "secret", format(server.B, "x"), SALT)
        server_S = server.shared_secret(self.context.large_a(), values.u)

        self.assertEqual(values.x, x)
        self.assertEqual(values.S, server_S)
        self.assertEqual(
            values.session_key,
            rfc5869_hkdf(
                bytes.fromhex(pad_hex(server_S)),
                bytes.fromhex(pad_hex(values.u)),
                HKDF_INFO,
                SESSION_KEY_LENGTH,
            ),
        )

    def test_wrong_password_gives_other_key(self) -> None:
        """A different password cannot reproduce the server's S."""
        x = self.derivation.compute_x("alice", "secret", SALT)
        server = SrpServer(x)

        values = self.derivation.derive("alice", "wrong", format(server.B, "X"), SALT)
        self.assertNotEqual(values.S, server.shared_secret(self.context.large_a(), values.u))

    def test_zero_server_value_is_normalised(self) -> None:
        """B = 0 makes the base negative; it is reduced into [0, N)."""
        values = self.derivation.derive("alice", "secret", "0", SALT)

        self.assertGreaterEqual(values.S, 0)
        self.assertLess(values.S, DEFAULT_GROUP.N)
        g_x = pow(DEFAULT_GROUP.g, values.x, DEFAULT_GROUP.N)
        base = (-DEFAULT_GROUP.k * g_x) % DEFAULT_GROUP.N
        exponent = self.context.small_a() + values.u * values.x
        self.assertEqual(values.S, pow(base, exponent, DEFAULT_GROUP.N))

    def test_derivation_is_deterministic_per_context(self) -> None:
        """Same inputs on the same context give the same key."""
        first = self.derivation.derive_password_authentication_key("alice", "secret", "abcdef", SALT)
        second = self.derivation.derive_password_authentication_key("alice", "secret", "abcdef", SALT)
        self.assertEqual(first, second)
        self.assertEqual(len(first), SESSION_KEY_LENGTH)

    def test_repr_hides_secrets(self) -> None:
        """Derived values never show up in reprs."""
        values = self.derivation.derive("alice", "secret", "abcdef", SALT)
        self.assertNotIn(str(values.S), repr(values))
        self.assertEqual(repr(values), "DerivedValues(<redacted>)")

    # -------------------------------------------------------------
    # Malformed inputs
    # -------------------------------------------------------------

    def test_non_hex_server_value(self) -> None:
        """SRP_B must be hex."""
        for bad in ("zz", "-5", ""):
            with self.assertRaises(MalformedChallenge):
                self.derivation.derive("alice", "secret", bad, SALT)

    def test_non_hex_salt(self) -> None:
        """SALT must be hex."""
        with self.assertRaises(MalformedChallenge):
            self.derivation.derive("alice", "secret", "abcdef", "not-hex")

    def test_hex_literal_syntax_rejected(self) -> None:
        """Prefixes, separators, whitespace and non-ASCII digits are not hex."""
        for bad in ("0xabcdef", "ab_cd", " abcdef", "abcdef\n", "\u0661\u0662"):
            with self.assertRaises(MalformedChallenge):
                self.derivation.derive("alice", "secret", bad, SALT)
            with self.assertRaises(MalformedChallenge):
                self.derivation.derive("alice", "secret", "abcdef", bad)

    def test_mixed_case_hex_accepted(self) -> None:
        """Upper and lower case digits parse to the same values."""
        lower = self.derivation.derive("alice", "secret", "abcdef", SALT.lower())
        upper = self.derivation.derive("alice", "secret", "ABCDEF", SALT.upper())
        self.assertEqual(lower.session_key, upper.session_key)


if __name__ == "__main__":
    unittest.main()
