# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Command line entry point: print the flattened secrets under some prefixes."""

import argparse
import json
import sys

from .exceptions import SecretStoreError
from .factory import create_vault_client
from .logger import StdoutLogger


def _parse_option(value: str) -> tuple[str, str]:
    key, sep, option = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got '{value}'")
    return key, option


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copilot_vault",
        description="Fetch and flatten secrets from Vault key-value mounts",
    )
    parser.add_argument(
        "prefixes",
        nargs="+",
        metavar="PREFIX",
        help="Key prefix to fetch, e.g. /secret/app/*",
    )
    parser.add_argument(
        "--address",
        help="Vault server URL (default: VAULT_ADDR)",
    )
    parser.add_argument(
        "--auth-type",
        help="Auth method (default: VAULT_AUTH_TYPE)",
    )
    parser.add_argument(
        "-o", "--option",
        dest="options",
        action="append",
        type=_parse_option,
        default=[],
        metavar="KEY=VALUE",
        help="Auth or TLS option, e.g. role-id=my-role (repeatable)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for messages written to stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    logger = StdoutLogger(level=args.log_level, name="copilot_vault", stream=sys.stderr)

    try:
        client = create_vault_client(
            address=args.address,
            auth_type=args.auth_type,
            options=dict(args.options),
            logger=logger,
        )
    except SecretStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with client:
        values = client.fetch(args.prefixes)

    print(json.dumps(values, indent=2, sort_keys=True))
    return 0
