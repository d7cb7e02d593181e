"""Command-line interface for the DeFi source comparer."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .codec import address_data_from_dict, to_dict
from .config import AppConfig, load_config
from .logging_setup import configure_logging
from .models import DataSourceCompareResult
from .reconcile import filter_by_chain, reconcile
from .report import build_summary_report
from .services import CompareService


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="defi-compare",
        description="Compare one wallet's DeFi positions across two data sources",
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

    compare_parser = sub.add_parser("compare", help="Compare both sources for an address")
    compare_parser.add_argument("address", help="Wallet address")
    compare_parser.add_argument("--chain", default=None, help="Only show this chain")
    compare_parser.add_argument(
        "--local",
        action="store_true",
        help="Fetch both snapshots and reconcile locally",
    )
    compare_parser.add_argument("--json", action="store_true", help="Print JSON")

    diff_parser = sub.add_parser("diff", help="Reconcile two snapshot JSON files")
    diff_parser.add_argument("file_a", type=Path, help="Snapshot from source A")
    diff_parser.add_argument("file_b", type=Path, help="Snapshot from source B")
    diff_parser.add_argument("--chain", default=None, help="Only show this chain")
    diff_parser.add_argument("--json", action="store_true", help="Print JSON")

    history_parser = sub.add_parser("history", help="Show or edit address history")
    history_sub = history_parser.add_subparsers(dest="action")
    history_sub.add_parser("list", help="List addresses (default)")
    history_remove = history_sub.add_parser("remove", help="Remove an address")
    history_remove.add_argument("address")
    history_sub.add_parser("clear", help="Clear history")

    fav_parser = sub.add_parser("favorites", help="Show or edit favorite addresses")
    fav_sub = fav_parser.add_subparsers(dest="action")
    fav_sub.add_parser("list", help="List favorites (default)")
    fav_add = fav_sub.add_parser("add", help="Add a favorite")
    fav_add.add_argument("address")
    fav_add.add_argument("--label", default=None)
    fav_remove = fav_sub.add_parser("remove", help="Remove a favorite")
    fav_remove.add_argument("address")
    fav_label = fav_sub.add_parser("label", help="Set or clear a favorite's label")
    fav_label.add_argument("address")
    fav_label.add_argument("label")
    fav_sub.add_parser("clear", help="Clear favorites")

    sub.add_parser("health", help="Check the compare API")

    return parser


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _print_result(
    result: DataSourceCompareResult,
    config: AppConfig,
    chain: str | None,
    as_json: bool,
) -> None:
    scoped = filter_by_chain(result, chain)
    if as_json:
        print(json.dumps(to_dict(scoped), indent=2, ensure_ascii=False))
    else:
        print(build_summary_report(scoped, config.chain_name, chain))


def _load_snapshot(path: Path):
    with open(path) as f:
        return address_data_from_dict(json.load(f))


def _run_diff(args: argparse.Namespace, config: AppConfig) -> None:
    try:
        snapshot_a = _load_snapshot(args.file_a)
        snapshot_b = _load_snapshot(args.file_b)
        result = reconcile(
            snapshot_a, snapshot_b, usd_precision=config.reconcile.usd_precision
        )
    except (OSError, ValueError) as e:
        _fail(str(e))
        return
    _print_result(result, config, args.chain, args.json)


def _run_history(args: argparse.Namespace, service: CompareService) -> None:
    if args.action == "remove":
        service.history.remove(args.address)
    elif args.action == "clear":
        service.history.clear()
    else:
        for address in service.history.items:
            star = "★ " if service.favorites.is_favorite(address) else "  "
            print(f"{star}{address}")


def _run_favorites(args: argparse.Namespace, service: CompareService) -> None:
    favorites = service.favorites
    if args.action == "add":
        favorites.add(args.address, args.label)
    elif args.action == "remove":
        favorites.remove(args.address)
    elif args.action == "label":
        favorites.update_label(args.address, args.label)
    elif args.action == "clear":
        favorites.clear()
    else:
        for item in favorites.items:
            label = f"  [{item.label}]" if item.label else ""
            print(f"{item.address}{label}")


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    if args.command == "diff":
        _run_diff(args, config)
        return

    service = CompareService(config)

    if args.command == "compare":
        response = await service.compare(args.address, local=args.local)
        if not response.success or response.data is None:
            _fail(response.error or "Comparison failed")
            return
        _print_result(response.data, config, args.chain, args.json)
    elif args.command == "history":
        _run_history(args, service)
    elif args.command == "favorites":
        _run_favorites(args, service)
    elif args.command == "health":
        response = await service.health_check()
        if not response.success:
            _fail(response.error or "Health check failed")
            return
        print(json.dumps(response.data, indent=2))
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    asyncio.run(_run(args))
