#!/usr/bin/env python3
"""
CLI Runner for the Sentinel triage console

Loads the seed alerts, applies queue filters, selects an alert (explicitly or
by priority auto-dispatch), runs its investigation analysis and prints the
result, optionally followed by the SAR draft and a burst of simulated feed
traffic.
"""

import argparse
import asyncio
import json
import random
import sys

from dotenv import load_dotenv

# Load environment variables from .env file FIRST
load_dotenv()

from loguru import logger

from .analysis.client import AnalysisClient, AnalysisResponse
from .analysis.errors import ServiceError
from .config.config import ConfigValidationError, SentinelConfig
from .console import TriageConsole
from .session.investigation import SessionState
from .tracking.mlflow_tracker import build_tracker
from .triage.queue import ALL


class OfflineAnalysisService:
    """Stand-in used when no API key is configured; every request fails"""

    async def request_analysis(self, alert) -> AnalysisResponse:
        failure = ServiceError("LLM analysis unavailable - API key not configured")
        return AnalysisResponse(alert_id=alert.alert_id, error=failure.to_error())


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Triage fraud alerts and run investigation analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Auto-dispatch the highest-risk open alert
  python -m sentinel.runner

  # Investigate a specific alert and print the SAR draft
  python -m sentinel.runner --alert ALT-8822 --draft

  # List the queue filtered to critical collusive trading
  python -m sentinel.runner --list --min-risk 81 --category COLLUSIVE_TRADING

  # Simulate 50 feed transactions and print the risk distribution
  python -m sentinel.runner --simulate 50 --seed 7
"""
    )

    parser.add_argument("--alert", "-a", type=str, default=None, help="Alert id to investigate")
    parser.add_argument("--search", "-s", type=str, default="", help="Queue search text")
    parser.add_argument("--min-risk", type=float, default=0, help="Minimum risk score (default: 0)")
    parser.add_argument("--category", "-c", type=str, default=ALL, help="Category filter (default: ALL)")
    parser.add_argument("--status", type=str, default=ALL, help="Status filter (default: ALL)")
    parser.add_argument("--list", action="store_true", help="Print the filtered queue and exit")
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Do not run the synthetic fallback when live analysis fails",
    )
    parser.add_argument("--draft", action="store_true", help="Print the SAR draft after analysis")
    parser.add_argument("--simulate", type=int, default=0, help="Number of feed transactions to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def build_analysis_service(config: SentinelConfig):
    try:
        return AnalysisClient(config.analysis, tracker=build_tracker(config.tracking))
    except ValueError as e:
        logger.warning(f"{e} Falling back to offline mode.")
        return OfflineAnalysisService()


def print_queue(console: TriageConsole) -> None:
    alerts = console.visible_alerts()
    print(f"\nQueue ({len(alerts)} of {len(console.repository)} alerts, {console.critical_count()} critical):")
    for alert in alerts:
        print(
            f"  {alert.alert_id}  {alert.risk_score:>5}  {alert.risk_level.value:<8}  "
            f"{alert.status.value:<20}  {alert.category.value}  ({alert.username})"
        )


async def run_investigation(args, console: TriageConsole) -> int:
    task = console.select_alert(args.alert) if args.alert else console.auto_dispatch()
    if task is None:
        print("No open alerts to investigate")
        return 1
    await task

    session = console.session
    print(f"\nInvestigating {session.alert.alert_id} ({session.alert.username})")

    if session.state == SessionState.ERROR:
        print(f"  {session.error.user_message}")
        if args.no_fallback:
            return 1
        print("  Running synthetic fallback...")
        await session.synthetic_fallback()

    print(json.dumps(session.result.to_wire(), indent=2))

    if args.draft:
        report = console.confirm_and_draft()
        print("\n" + report.to_text())
    return 0


async def run_simulation(args, console: TriageConsole) -> None:
    await console.feed.run(limit=args.simulate, delay_seconds=0)
    print(f"\nSimulated {console.feed.total_emitted} transactions ({console.feed.total_flagged} flagged)")
    print("Risk distribution:")
    for bucket in console.metrics.state.distribution():
        print(f"  {bucket['bucket']:>7}: {bucket['count']}")
    print("Throughput: " + ", ".join(f"{v:.0f}" for v in console.metrics.state.throughput))


async def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = SentinelConfig.from_env()
    except (ConfigValidationError, ValueError) as e:
        print(f"Invalid configuration: {e}")
        return 1

    rng = random.Random(args.seed) if args.seed is not None else None
    console = TriageConsole(build_analysis_service(config), config=config, rng=rng)

    try:
        console.set_filters(
            search_text=args.search,
            min_risk=args.min_risk,
            category=args.category,
            status=args.status,
        )
        if args.list:
            print_queue(console)
            return 0
        if args.simulate:
            await run_simulation(args, console)
            return 0
        return await run_investigation(args, console)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
    except Exception as e:
        print(f"\nError: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1
    finally:
        await console.stop()

    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
