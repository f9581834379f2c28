"""
Operator CLI for the booking back-office.

Talks to the configured API and falls back to the local mirror exactly as
the site does, so it works with the server down.

Usage:
    python main.py health
    python main.py list bookings
    python main.py approve 1718000000000
    python main.py delete messages 1718000000000
    python main.py stats --verbose
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

from kingplay.admin import load_dashboard
from kingplay.api.accessor import DataApi
from kingplay.repositories import Repositories

logger = logging.getLogger(__name__)

RESOURCES = ("plans", "bookings", "messages", "offers", "settings")
DELETABLE = ("plans", "bookings", "messages", "offers")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect and manage bookings, plans, offers and messages."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Check whether the API server is reachable.")
    sub.add_parser("stats", help="Print dashboard statistics.")

    list_cmd = sub.add_parser("list", help="Print a resource as JSON.")
    list_cmd.add_argument("resource", choices=RESOURCES)

    for name in ("approve", "reject"):
        cmd = sub.add_parser(name, help=f"{name.capitalize()} a pending booking.")
        cmd.add_argument("booking_id")

    delete_cmd = sub.add_parser("delete", help="Delete a record.")
    delete_cmd.add_argument("resource", choices=DELETABLE)
    delete_cmd.add_argument("record_id")

    toggle_cmd = sub.add_parser("toggle-offer", help="Flip an offer's active flag.")
    toggle_cmd.add_argument("offer_id")
    return parser


async def run(args: argparse.Namespace, api: DataApi) -> int:
    """Execute one parsed command. Returns the process exit code."""
    repos = Repositories(api)

    if args.command == "health":
        ok = await api.check_health()
        sys.stdout.write(("online" if ok else "offline") + "\n")
        return 0 if ok else 1

    if args.command == "list":
        result = await api.fetch(f"/{args.resource}", [])
        logger.info("Listing %s from %s", args.resource, result.source.value)
        sys.stdout.write(json.dumps(result.value, indent=2, ensure_ascii=False) + "\n")
        return 0

    if args.command == "stats":
        snapshot = await load_dashboard(repos)
        stats = snapshot.stats
        sys.stdout.write(
            f"Total bookings: {stats.total_bookings}\n"
            f"Pending:        {stats.pending_bookings}\n"
            f"Messages:       {stats.messages}\n"
            f"Active plans:   {stats.active_plans}\n"
            f"Live data:      {'yes' if snapshot.is_live else 'no'}\n"
        )
        return 0

    if args.command in ("approve", "reject"):
        if args.command == "approve":
            await repos.bookings.approve(args.booking_id)
        else:
            await repos.bookings.reject(args.booking_id)
        sys.stdout.write(f"Booking {args.booking_id}: {args.command}d\n")
        return 0

    if args.command == "delete":
        await api.delete(f"/{args.resource}/{args.record_id}")
        sys.stdout.write(f"Deleted {args.resource}/{args.record_id}\n")
        return 0

    if args.command == "toggle-offer":
        offer = await repos.offers.get(args.offer_id)
        if offer is None:
            logger.error("Offer not found: %s", args.offer_id)
            return 1
        await repos.offers.toggle(offer)
        sys.stdout.write(f"Offer {args.offer_id} active: {not offer.is_active}\n")
        return 0

    logger.error("Unknown command: %s", args.command)
    return 2


async def _main_async(args: argparse.Namespace) -> int:
    async with DataApi.from_settings() as api:
        return await run(args, api)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    sys.exit(asyncio.run(_main_async(args)))


if __name__ == "__main__":
    main()
