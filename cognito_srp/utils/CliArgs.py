#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import argparse

import argcomplete


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cognito-srp",
        description="SRP-6a client for the PASSWORD_VERIFIER challenge",
    )
    parser.add_argument("-c", "--config", type=str, help="YAML file merged over the packaged defaults")
    parser.add_argument("--client-id", type=str, help="App client id (overrides config)")
    parser.add_argument("--pool-id", type=str, help="User pool id, <region>_<id> (overrides config)")
    parser.add_argument("--client-secret", type=str, help="App client secret (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging output")
    parser.add_argument("-s", "--silent", action="store_true", help="Run silently (no logs)")

    commands = parser.add_subparsers(dest="command", required=True)

    secret_hash = commands.add_parser("secret-hash", help="Print the SECRET_HASH for a username")
    secret_hash.add_argument("-U", "--username", type=str, required=True, help="Username or USER_ID_FOR_SRP")

    respond = commands.add_parser(
        "respond",
        help="Print SRP_A, then answer the PASSWORD_VERIFIER challenge read from stdin",
    )
    respond.add_argument("-P", "--password", type=str, help="Password (prompted when omitted)")

    return parser


def parse_args(argv=None):
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
