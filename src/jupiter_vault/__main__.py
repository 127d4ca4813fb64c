# Main Entry Point - Command Line Interface
#
# Configuration comes from JUPITER_* environment variables (or a .env file).
# Every command prints JSON to stdout; failures go to stderr with exit code 1.

import argparse
import asyncio
import getpass
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .core import ClientConfig, JupiterVaultError
from .ledger import LedgerClient
from .vault.record_store import RecordStore


def _parse_fields(pairs: List[str]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {pair!r}")
        fields[key] = value
    return fields


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jupiter-vault",
        description="Jupiter Vault - password records stored on the Jupiter ledger",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Load configuration from this .env file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Jupiter Vault v{__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    balance = sub.add_parser("balance", help="Show an account balance in JUP")
    balance.add_argument("address", nargs="?", default=None)

    txs = sub.add_parser("transactions", help="List pending + confirmed transactions")
    txs.add_argument("--no-message", action="store_true", help="Include transactions without messages")
    txs.add_argument("--type", type=int, default=1, help="Transaction type filter (default: 1)")

    sub.add_parser("records", help="List stored password records")

    store = sub.add_parser("store", help="Store a record given as KEY=VALUE pairs")
    store.add_argument("fields", nargs="+", metavar="KEY=VALUE")

    fund = sub.add_parser("fund", help="Send the minimum funding amount to an address")
    fund.add_argument("recipient")

    sub.add_parser("new-account", help="Derive an account from a passphrase")

    return parser


async def run(args: argparse.Namespace, config: ClientConfig) -> Any:
    async with LedgerClient(config) as client:
        if args.command == "balance":
            address = args.address or config.address
            return {"address": address, "balance": await client.get_balance(address)}

        if args.command == "transactions":
            transactions = await client.list_transactions(
                with_message=not args.no_message, type=args.type,
            )
            return [tx.raw for tx in transactions]

        if args.command == "records":
            records = await RecordStore(client).list_records()
            return [record.to_dict() for record in records]

        if args.command == "store":
            receipt = await RecordStore(client).save(_parse_fields(args.fields))
            return receipt.raw

        if args.command == "fund":
            receipt = await client.transfer(args.recipient)
            return receipt.raw

        if args.command == "new-account":
            passphrase = getpass.getpass("Passphrase: ")
            account = await client.create_account(passphrase)
            return {
                "address": account.address,
                "publicKey": account.public_key,
                "account": account.account_id,
            }

    raise ValueError(f"unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the jupiter-vault CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ClientConfig.from_env(args.env_file)
        result = asyncio.run(run(args, config))
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except JupiterVaultError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    json.dump(result, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
