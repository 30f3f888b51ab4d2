#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import base64
import hashlib
import hmac
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Mapping

from cognito_srp.crypto.KeyDerivation import KeyDerivation
from cognito_srp.crypto.SessionContext import SessionContext
from cognito_srp.crypto.SrpErrors import MalformedChallenge, UnsupportedChallenge
from cognito_srp.utils.Logger import Logger


PASSWORD_VERIFIER = "PASSWORD_VERIFIER"

# Fixed English names; strftime("%a"/"%b") follows the process locale.
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

Clock = Callable[[], datetime]

_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """
    Formats a moment the way the identity provider expects, e.g.
    "Wed Oct 2 00:00:00 UTC 2024" (day of month without leading zero).
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return (
        f"{WEEKDAYS[moment.weekday()]} {MONTHS[moment.month - 1]} {moment.day} "
        f"{moment:%H:%M:%S} UTC {moment.year}"
    )


@dataclass(frozen=True)
class ChallengeParameters:
    """Read-only view of the fields of a PASSWORD_VERIFIER challenge."""

    salt: str
    srp_b: str
    secret_block: str
    user_id_for_srp: str
    username: str | None = None

    REQUIRED_KEYS = ("SALT", "SRP_B", "SECRET_BLOCK", "USER_ID_FOR_SRP")

    @classmethod
    def from_mapping(cls, params: Mapping[str, str] | None) -> "ChallengeParameters":
        if params is None:
            raise MalformedChallenge("ChallengeParameters are missing")

        missing = [key for key in cls.REQUIRED_KEYS if params.get(key) is None]
        if missing:
            raise MalformedChallenge(f"ChallengeParameters missing: {', '.join(missing)}")

        return cls(
            salt=str(params["SALT"]),
            srp_b=str(params["SRP_B"]),
            secret_block=str(params["SECRET_BLOCK"]),
            user_id_for_srp=str(params["USER_ID_FOR_SRP"]),
            username=params.get("USERNAME"),
        )

    def raw_secret_block(self) -> bytes:
        """
        Lenient base64 decode of SECRET_BLOCK.

        Characters outside the alphabet are skipped and a trailing group
        too short to hold a byte is dropped, so "0" decodes to b"".
        """
        cleaned = _NON_BASE64.sub("", self.secret_block)
        remainder = len(cleaned) % 4
        if remainder == 1:
            cleaned = cleaned[:-1]
        elif remainder:
            cleaned += "=" * (4 - remainder)
        return base64.b64decode(cleaned)


class ChallengeResponder:
    """
    Answers the PASSWORD_VERIFIER challenge of a SessionContext.

    The responder signs
        poolSuffix | USER_ID_FOR_SRP | secretBlock | timestamp
    with HMAC-SHA256 under the SRP session key and returns the
    ChallengeResponses mapping expected by RespondToAuthChallenge.
    """

    def __init__(self, context: SessionContext, clock: Clock = utc_now) -> None:
        self.context = context
        self.clock = clock
        self.derivation = KeyDerivation(context)

    # ------------------------------------------------------------------
    def challenge_responses(self, result: Mapping, password: str) -> dict[str, str]:
        """Accepts the whole auth result (ChallengeName + ChallengeParameters)."""
        return self.build_response(
            result.get("ChallengeName"),
            result.get("ChallengeParameters"),
            password,
        )

    def build_response(
        self,
        challenge_name: str | None,
        challenge_parameters: Mapping[str, str] | None,
        password: str,
    ) -> dict[str, str]:
        """
        Raises:
            UnsupportedChallenge: challenge_name is not PASSWORD_VERIFIER.
            MalformedChallenge: a required parameter is missing or undecodable.
            ZeroScramblingParameter, InvalidPublicValue, RandomSourceFailure
        """
        if challenge_name != PASSWORD_VERIFIER:
            Logger.warning(f"Refusing unsupported challenge {challenge_name}")
            raise UnsupportedChallenge(challenge_name)

        params = ChallengeParameters.from_mapping(challenge_parameters)
        secret_block = params.raw_secret_block()
        user_id = params.user_id_for_srp
        timestamp = format_timestamp(self.clock())

        session_key = self.derivation.derive_password_authentication_key(
            user_id,
            password,
            params.srp_b,
            params.salt,
        )

        message = (
            self.context.pool_id_suffix.encode("utf-8")
            + user_id.encode("utf-8")
            + secret_block
            + timestamp.encode("utf-8")
        )
        signature = hmac.new(session_key, message, hashlib.sha256).digest()

        response = {
            "TIMESTAMP": timestamp,
            "USERNAME": user_id,
            "PASSWORD_CLAIM_SECRET_BLOCK": params.secret_block,
            "PASSWORD_CLAIM_SIGNATURE": base64.b64encode(signature).decode("ascii"),
        }
        if self.context.has_client_secret:
            response["SECRET_HASH"] = self.context.secret_hash(user_id)

        Logger.debug(f"PASSWORD_VERIFIER response built for {user_id}")
        return response
