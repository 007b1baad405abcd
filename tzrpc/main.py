"""Command line entry point for the network RPC client."""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

import httpx
from pydantic import BaseModel

from tzrpc.config import settings
from tzrpc.core.network import NetworkRPC
from tzrpc.exceptions import LogStreamTimeout, NetworkRPCError

logger = logging.getLogger(__name__)


def _print_json(value):
    """Print a record, a list of records or a plain JSON value."""
    print(json.dumps(_dump(value), indent=2))


def _dump(value):
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tzrpc",
        description="Query the network RPCs of a node"
    )
    parser.add_argument("--url", default=settings.rpc_url, help=f"node RPC URL (default: {settings.rpc_url})")
    parser.add_argument("--timeout", type=float, default=settings.request_timeout, help="request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", default=settings.debug, help="debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("connections", help="list active connections")

    connection = commands.add_parser("connection", help="show one connection")
    connection.add_argument("peer_id")

    remove = commands.add_parser("remove", help="close connections to peers")
    remove.add_argument("peer_ids", nargs="+")
    remove.add_argument("--wait", action="store_true", help="wait until each connection is closed")

    commands.add_parser("clear-greylist", help="clear the greylist")

    log = commands.add_parser("log", help="follow the network log")
    log.add_argument("--duration", type=float, default=settings.log_duration, help="seconds to follow the log")

    commands.add_parser("peers", help="list known peers")

    peer = commands.add_parser("peer", help="show one known peer")
    peer.add_argument("peer_id")

    return parser


async def run_command(args: argparse.Namespace) -> int:
    """Run the parsed command. Returns the process exit status."""
    async with NetworkRPC(url=args.url, timeout=args.timeout) as rpc:
        try:
            if args.command == "connections":
                _print_json(await rpc.list_connections())
            elif args.command == "connection":
                _print_json(await rpc.get_connection(args.peer_id))
            elif args.command == "remove":
                removed = await rpc.remove_peers([(peer_id, args.wait) for peer_id in args.peer_ids])
                _print_json(removed)
            elif args.command == "clear-greylist":
                await rpc.clear_greylist()
            elif args.command == "log":
                try:
                    await rpc.stream_network_log(args.duration, sink=_print_json)
                except LogStreamTimeout as e:
                    logger.info(str(e))
            elif args.command == "peers":
                _print_json(await rpc.list_peers())
            elif args.command == "peer":
                _print_json(await rpc.get_peer(args.peer_id))
        except httpx.HTTPError as e:
            logger.error(f"Node unreachable at {args.url}: {e}")
            return 1
        except NetworkRPCError as e:
            logger.error(f"{args.command} failed: {e}")
            return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        return asyncio.run(run_command(args))
    except KeyboardInterrupt:
        return 130


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
