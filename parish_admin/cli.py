from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List, Optional

from .aggregator import COLLECTION_NAMES, AdminAggregator
from .client import ParishApiClient
from .config import settings
from .reporting import AnalyticsExporter, Delivery, ExportError, ExportFormat, FileDelivery, ReportExporter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parish-admin",
        description="Refresh parish admin data and export reports.",
    )
    parser.add_argument("--role", default=None, help="acting role (default: PARISH_ACTOR_ROLE)")
    parser.add_argument("--api-base", default=None, help="parish API base URL (default: PARISH_API_BASE)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("refresh", help="fetch every collection and print its size")

    export = sub.add_parser("export", help="export one collection as a report")
    export.add_argument("collection", choices=list(COLLECTION_NAMES))
    export.add_argument(
        "--format",
        dest="fmt",
        default=ExportFormat.CSV.value,
        choices=[f.value for f in ExportFormat],
    )
    export.add_argument("--title", default=None)
    export.add_argument("--out", default=None, help="export directory (default: EXPORT_DIR)")
    return parser


def _export(aggregator: AdminAggregator, args: argparse.Namespace, sink: Delivery) -> int:
    exporter = AnalyticsExporter(ReportExporter(sink))
    try:
        result = exporter.export_collection(aggregator, args.collection, args.fmt, title=args.title)
    except ExportError as e:
        print(f"\n❌ {e}")
        return 1

    print(f"\nSaved {result.format.value} report: {result.path}")
    if result.notice:
        print(result.notice)
    return 0


async def _run(
    args: argparse.Namespace,
    api: Optional[ParishApiClient],
    delivery: Optional[Delivery],
) -> int:
    client = api or ParishApiClient(args.api_base)
    try:
        aggregator = AdminAggregator(client, role=args.role or settings.actor_role)
        if not aggregator.can_access:
            print(f"Role '{aggregator.role}' cannot access admin data.")
            return 1

        refreshed = await aggregator.refresh()
        for name, count in aggregator.counts().items():
            marker = "" if name in refreshed else "  (stale)"
            print(f"{name:18s} {count}{marker}")

        if args.command == "refresh":
            return 0

        if delivery is not None:
            return _export(aggregator, args, delivery)

        # The browser reads printables after we exit, so they go next to the downloads
        out = args.out or settings.export_path
        with FileDelivery(out, print_dir=out) as sink:
            return _export(aggregator, args, sink)
    finally:
        if api is None:
            await client.aclose()


def main(
    argv: Optional[List[str]] = None,
    *,
    api: Optional[ParishApiClient] = None,
    delivery: Optional[Delivery] = None,
) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    return asyncio.run(_run(args, api, delivery))
