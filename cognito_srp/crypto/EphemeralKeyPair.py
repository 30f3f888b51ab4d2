#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import threading
from typing import Callable

from cognito_srp.crypto.SrpErrors import InvalidPublicValue, RandomSourceFailure, SrpError
from cognito_srp.crypto.SrpGroup import DEFAULT_GROUP, SrpGroup
from cognito_srp.crypto.SrpMath import int_to_hex, non_negative_mod
from cognito_srp.utils.Logger import Logger


RANDOM_BYTES = 128

RandomSource = Callable[[int], bytes]


class EphemeralKeyPair:
    """
    Client ephemeral SRP values (a, A) for one authentication attempt.

    Both values are created on first access under a lock and then never
    change. A failed generation (random source error or degenerate
    exponent) is remembered: the pair stays unusable and the caller must
    start over with a new SessionContext.
    """

    def __init__(
        self,
        group: SrpGroup = DEFAULT_GROUP,
        random_source: RandomSource = os.urandom,
    ) -> None:
        self.group = group
        self._random_source = random_source
        self._lock = threading.Lock()

        self._a: int | None = None
        self._A: int | None = None
        self._failure: SrpError | None = None

    # ------------------------------------------------------------------
    def small_a(self) -> int:
        """
        Private exponent a = random(128 bytes) mod N.

        Raises:
            RandomSourceFailure: The random source failed (now or earlier).
        """
        with self._lock:
            return self._ensure_small_a()

    def large_a(self) -> int:
        """
        Public value A = g^a mod N.

        Raises:
            InvalidPublicValue: a mod N == 0.
            RandomSourceFailure: The random source failed.
        """
        with self._lock:
            if self._A is None:
                a_value = self._ensure_small_a()
                self._A = self._calculate_A(a_value)
                Logger.debug("Ephemeral public value A computed")
            return self._A

    def srp_a(self) -> str:
        """A as hex, ready for the SRP_A auth parameter."""
        return int_to_hex(self.large_a())

    # ------------------------------------------------------------------
    def _ensure_small_a(self) -> int:
        # caller holds self._lock
        if self._failure is not None:
            raise self._failure
        if self._a is None:
            self._a = self._generate_small_a()
        return self._a

    def _generate_small_a(self) -> int:
        try:
            raw = self._random_source(RANDOM_BYTES)
        except (OSError, NotImplementedError) as e:
            self._failure = RandomSourceFailure(f"Random source unavailable: {e}")
            raise self._failure from e

        if not isinstance(raw, (bytes, bytearray)):
            self._failure = RandomSourceFailure(
                f"Random source returned {type(raw).__name__}, expected bytes"
            )
            raise self._failure
        if len(raw) != RANDOM_BYTES:
            self._failure = RandomSourceFailure(
                f"Random source returned {len(raw)} bytes, expected {RANDOM_BYTES}"
            )
            raise self._failure

        Logger.debug("Ephemeral private exponent generated")
        return non_negative_mod(int.from_bytes(raw, "big"), self.group.N)

    def _calculate_A(self, a_value: int) -> int:
        if non_negative_mod(a_value, self.group.N) == 0:
            self._failure = InvalidPublicValue("Public key failed A mod N == 0 check.")
            raise self._failure
        return pow(self.group.g, a_value, self.group.N)
