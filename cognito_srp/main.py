#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import getpass
import json
import sys

from cognito_srp.crypto.ChallengeResponder import ChallengeResponder
from cognito_srp.crypto.SessionContext import SessionContext
from cognito_srp.crypto.SrpErrors import SrpError
from cognito_srp.utils.CliArgs import parse_args
from cognito_srp.utils.ConfigLoader import ConfigLoader
from cognito_srp.utils.Logger import Logger


def _apply_overrides(cfg: dict, args) -> dict:
    section = dict(cfg.get("cognito") or {})
    if args.client_id:
        section["client_id"] = args.client_id
    if args.pool_id:
        section["pool_id"] = args.pool_id
    if args.client_secret:
        section["client_secret"] = args.client_secret
    return {**cfg, "cognito": section}


def respond(context: SessionContext, password: str | None) -> int:
    """
    Runs one PASSWORD_VERIFIER exchange in this process.

    SRP_A is written to stdout first; the challenge the provider returns
    for that SRP_A is then read from stdin (JSON, until EOF). The same
    context answers it, so the claim is signed with the matching a.
    """
    print(context.srp_a(), flush=True)
    Logger.info("SRP_A written, waiting for the challenge JSON on stdin (end with EOF)")

    result = json.load(sys.stdin)
    if password is None:
        password = getpass.getpass("Password: ")

    responses = ChallengeResponder(context).challenge_responses(result, password)
    print(json.dumps(responses, indent=2))
    Logger.success(f"Challenge response ready for {responses['USERNAME']}")
    return 0


def run(args) -> int:
    cfg = _apply_overrides(ConfigLoader.reload_config(args.config), args)
    Logger.reset_log()
    Logger.info(f"{cfg.get('tool_name', 'cognito-srp')} - {args.command}")

    context = SessionContext.from_config(cfg)

    if args.command == "secret-hash":
        print(context.secret_hash(args.username))
        return 0

    if args.command == "respond":
        return respond(context, args.password)

    Logger.error(f"Unknown command: {args.command}")
    return 1


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.verbose:
        Logger.set_level("All")
    elif args.silent:
        Logger.set_level("None")

    try:
        return run(args)
    except SrpError as e:
        Logger.error(f"{e.kind.value}: {e}")
        return 1
    except (RuntimeError, OSError, ValueError) as e:
        Logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
