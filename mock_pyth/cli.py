"""Command-line interface for the mock price oracle."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .clock import ManualClock
from .codec import create_price_feed_update_data
from .config import load_config
from .events import EventLog
from .fees import FeeCalculator
from .logging_setup import configure_logging
from .notifications import WebhookEventRelay
from .oracle import MockPyth
from .payments import InMemoryLedger
from .scenario import load_scenario, run_scenario


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="mock-pyth",
        description="In-memory mock price oracle",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    replay_parser = sub.add_parser("replay", help="Replay a scenario file")
    replay_parser.add_argument("scenario", help="Path to scenario YAML")

    encode_parser = sub.add_parser("encode", help="Print hex update data for one feed")
    encode_parser.add_argument("id", help="Price id as hex, e.g. 0xaa")
    encode_parser.add_argument("price", type=int)
    encode_parser.add_argument("publish_time", type=int)
    encode_parser.add_argument("--conf", type=int, default=0)
    encode_parser.add_argument("--expo", type=int, default=0)
    encode_parser.add_argument("--ema-price", type=int, default=None)
    encode_parser.add_argument("--ema-conf", type=int, default=None)

    fee_parser = sub.add_parser("fee", help="Required fee for a batch size")
    fee_parser.add_argument("batch_size", type=int)

    return parser


def _encode(args: argparse.Namespace) -> int:
    data = create_price_feed_update_data(
        args.id,
        args.price,
        args.conf,
        args.expo,
        args.price if args.ema_price is None else args.ema_price,
        args.conf if args.ema_conf is None else args.ema_conf,
        args.publish_time,
    )
    print("0x" + data.hex())
    return 0


async def _replay(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    scenario = load_scenario(args.scenario)

    clock = ManualClock(scenario.now)
    event_log = EventLog()
    oracle = MockPyth(
        config.oracle, payments=InMemoryLedger(), sinks=[event_log], clock=clock
    )
    results = run_scenario(oracle, clock, scenario)

    for result in results:
        mark = "ok  " if result.ok else "FAIL"
        print(f"[{mark}] {result.index:3d} {result.action:<8} {result.detail}")

    if config.webhook.enabled:
        await WebhookEventRelay(config.webhook).publish(event_log.events)

    failed = sum(1 for r in results if not r.ok)
    print(f"{len(results) - failed}/{len(results)} steps passed")
    return 1 if failed else 0


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)

    if args.command == "replay":
        return await _replay(args)
    if args.command == "encode":
        return _encode(args)
    if args.command == "fee":
        config = load_config(args.config)
        fees = FeeCalculator(config.oracle.single_update_fee_in_wei)
        print(fees.compute_fee(args.batch_size))
        return 0

    build_parser().print_help()
    return 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
