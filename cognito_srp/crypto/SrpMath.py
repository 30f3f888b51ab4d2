#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
SrpMath - serialization and hashing primitives for SRP-6a.

Every value that enters a hash goes through pad_hex() first, so the
client and the identity provider hash exactly the same bytes:

    * even number of hex digits
    * one extra 0x00 byte when the top bit of the first byte is set

Hashes are SHA-256 rendered as 64 lowercase hex digits.
"""

import hashlib


HASH_HEX_LENGTH = 64
_HIGH_NIBBLES = "89ABCDEFabcdef"


def int_to_hex(value: int) -> str:
    """Big-endian hex of a non-negative integer, even length, no padding byte."""
    if value < 0:
        raise ValueError("int_to_hex(): value must be non-negative")
    hex_str = format(value, "x")
    if len(hex_str) % 2 == 1:
        hex_str = "0" + hex_str
    return hex_str


def pad_hex(value: int | str) -> str:
    """
    Converts an integer (or an already hex-encoded string) to the padded
    hex form used for hashing.

    Args:
        value (int | str): Non-negative integer or hex digits.

    Returns:
        str: Even-length hex whose first digit is below 8.
    """
    if isinstance(value, int):
        if value < 0:
            raise ValueError("pad_hex(): value must be non-negative")
        hex_str = format(value, "x")
    else:
        hex_str = value

    if len(hex_str) % 2 == 1:
        return "0" + hex_str
    if not hex_str or hex_str[0] in _HIGH_NIBBLES:
        return "00" + hex_str
    return hex_str


def hash_bytes(data: bytes) -> str:
    """SHA-256 of raw bytes as a 64 digit hex string."""
    digest = hashlib.sha256(data).hexdigest()
    return digest.rjust(HASH_HEX_LENGTH, "0")


def hash_str(text: str) -> str:
    """SHA-256 of the UTF-8 encoding of text."""
    return hash_bytes(text.encode("utf-8"))


def hex_hash(hex_str: str) -> str:
    """Decodes hex digits to bytes and hashes them."""
    return hash_bytes(bytes.fromhex(hex_str))


def non_negative_mod(value: int, modulus: int) -> int:
    """
    Reduces value into [0, modulus).

    Equivalent to value^1 mod modulus; the base of the shared secret
    exponentiation can be negative before this step.
    """
    if modulus <= 0:
        raise ValueError("non_negative_mod(): modulus must be positive")
    return value % modulus
