"""CLI for browsing OTX pulses."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta, timezone
from typing import Optional

import keyring.errors

from .clients.exchange import DEFAULT_EXCHANGE, DEFAULT_PAGE_LIMIT, ExchangeClient
from .errors import APIError
from .keymanager import ENV_VAR, delete_api_key, get_api_key, key_source, store_api_key
from .models import Threat

logger = logging.getLogger(__name__)

DEFAULT_SINCE_DAYS = 7


def _build_client(args: argparse.Namespace) -> Optional[ExchangeClient]:
    key = get_api_key()
    if not key:
        print(f"Error: {ENV_VAR} is not set. Export it or run 'otx-exchange keys set'.")
        return None
    return ExchangeClient().set_api_key(key).set_base_url(args.url)


def _print_threat(threat: Threat) -> None:
    print(f"{threat.id}: {threat.name}")
    print(f"Author:   {threat.author_name}")
    print(f"Modified: {threat.modified} (revision {threat.revision:g})")
    if threat.tags:
        print(f"Tags:     {', '.join(threat.tags)}")
    if threat.description:
        print(f"\nDescription:\n{threat.description[:500]}")
    if threat.references:
        print("\nReferences:")
        for ref in threat.references:
            print(f"  {ref}")
    print(f"\nIndicators ({len(threat.indicators)}):")
    for ind in threat.indicators:
        print(f"  {str(ind.indicator_type) or '?':18s} {ind.indicator}")


def cmd_threats(args: argparse.Namespace) -> int:
    """Walk subscribed pulses modified within the last N days."""
    client = _build_client(args)
    if client is None:
        return 1

    since = datetime.now(timezone.utc) - timedelta(days=args.since_days)
    client = client.set_page_limit(args.limit).set_since(since)

    remaining = args.max

    def visit(threat: Threat) -> bool:
        nonlocal remaining
        if remaining is not None:
            remaining -= 1
        if args.format == "json":
            print(json.dumps(threat.to_dict()))
        else:
            print(f"{threat.id}: {threat.name}")
        return remaining is None or remaining > 0

    try:
        visited = client.for_each(visit)
    except APIError as e:
        print(f"Error: {e}")
        return 1

    logger.info(f"Listed {visited} pulses")
    return 0


def cmd_threat(args: argparse.Namespace) -> int:
    """Show a single pulse."""
    client = _build_client(args)
    if client is None:
        return 1

    try:
        threat = client.fetch_threat(args.threat_id)
    except APIError as e:
        print(f"Error: {e}")
        return 1

    if args.format == "json":
        print(json.dumps(threat.to_dict(), indent=2))
    else:
        _print_threat(threat)
    return 0


def cmd_keys(args: argparse.Namespace) -> int:
    """Show, store or remove the OTX API key."""
    try:
        if args.keys_action == "status":
            source = key_source()
            if source:
                print(f"✓ {ENV_VAR}: configured ({source})")
            else:
                print(f"✗ {ENV_VAR}: not configured")
            return 0

        if args.keys_action == "set":
            import getpass
            store_api_key(getpass.getpass(f"Enter value for {ENV_VAR}: "))
            return 0

        if delete_api_key():
            return 0
        print("No API key stored in the keychain")
        return 1

    except (ValueError, keyring.errors.KeyringError) as e:
        print(f"Error: {e}")
        return 1


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="otx-exchange",
        description="Browse AlienVault OTX threat pulses",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Subscribed pulses
    threats_parser = subparsers.add_parser("threats", help="List subscribed pulses")
    threats_parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_PAGE_LIMIT,
        help="Pulses per page",
    )
    threats_parser.add_argument(
        "--since-days",
        type=int,
        default=DEFAULT_SINCE_DAYS,
        help="Only pulses modified within this many days",
    )
    threats_parser.add_argument("--max", type=_positive_int, help="Stop after this many pulses")
    threats_parser.add_argument("--url", default=DEFAULT_EXCHANGE, help="Exchange base URL")
    threats_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )
    threats_parser.set_defaults(func=cmd_threats)

    # Single pulse
    threat_parser = subparsers.add_parser("threat", help="Show a single pulse")
    threat_parser.add_argument("threat_id", help="Pulse ID")
    threat_parser.add_argument("--url", default=DEFAULT_EXCHANGE, help="Exchange base URL")
    threat_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )
    threat_parser.set_defaults(func=cmd_threat)

    # Keys management
    keys_parser = subparsers.add_parser("keys", help="Manage the stored API key")
    keys_parser.add_argument(
        "keys_action",
        choices=["status", "set", "delete"],
        help="Key action",
    )
    keys_parser.set_defaults(func=cmd_keys)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
