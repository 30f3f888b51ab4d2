#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from enum import Enum


class SrpErrorKind(Enum):
    UNSUPPORTED_CHALLENGE = "UnsupportedChallenge"
    INVALID_PUBLIC_VALUE = "InvalidPublicValue"
    ZERO_SCRAMBLING_PARAMETER = "ZeroScramblingParameter"
    MISSING_CLIENT_SECRET = "MissingClientSecret"
    RANDOM_SOURCE_FAILURE = "RandomSourceFailure"
    MALFORMED_CHALLENGE = "MalformedChallenge"


class SrpError(Exception):
    """
    Base class for every failure raised by the SRP client.

    Each subclass is tagged with a fixed SrpErrorKind so callers can
    dispatch on `err.kind` instead of the class. `retryable` tells whether
    a new attempt with a fresh SessionContext may succeed.
    """

    kind: SrpErrorKind
    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnsupportedChallenge(SrpError):
    kind = SrpErrorKind.UNSUPPORTED_CHALLENGE

    def __init__(self, challenge_name: str | None) -> None:
        super().__init__(f"ChallengeName `{challenge_name}` is not supported.")
        self.challenge_name = challenge_name


class InvalidPublicValue(SrpError):
    kind = SrpErrorKind.INVALID_PUBLIC_VALUE


class ZeroScramblingParameter(SrpError):
    kind = SrpErrorKind.ZERO_SCRAMBLING_PARAMETER


class MissingClientSecret(SrpError):
    kind = SrpErrorKind.MISSING_CLIENT_SECRET

    def __init__(self) -> None:
        super().__init__(
            "If the user pool has a client secret set, you must pass "
            "the `client_secret` argument to the constructor"
        )


class RandomSourceFailure(SrpError):
    kind = SrpErrorKind.RANDOM_SOURCE_FAILURE
    retryable = True


class MalformedChallenge(SrpError):
    kind = SrpErrorKind.MALFORMED_CHALLENGE
