"""Site ledger command line interface.

Operational tools for a local ledger database:
- Schema creation
- Site creation
- Worker balance queries
- Report export

Usage:
    python -m site_ledger.cli init-db
    python -m site_ledger.cli create-site --name "Site A" --generate-code
    python -m site_ledger.cli totals --site-id X --worker-id Y
    python -m site_ledger.cli export-report --site-id X --kind payments --format html
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Awaitable
from typing import Any, Callable
from uuid import UUID

from site_ledger.config import configure_logging, get_settings
from site_ledger.database import build_engine, build_session_factory, create_schema
from site_ledger.errors import NoDataError, SiteLedgerError
from site_ledger.reports import Labels, ReportFormat, ReportGenerator, ReportKind
from site_ledger.reports.formatting import format_amount
from site_ledger.services import DirectoryExportSink, LedgerService, RecordStore


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


class SiteLedgerCli:
    """Site ledger command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m site_ledger.cli",
            description="Site ledger tools",
        )
        parser.add_argument(
            "--database-url",
            help="Database URL (default: DATABASE_URL from the environment)",
        )
        parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL)")
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser("init-db", help="Create database tables")

        create_site = subparsers.add_parser("create-site", help="Create a site")
        create_site.add_argument("--name", required=True, help="Site name")
        create_site.add_argument("--location", default="", help="Site location")
        create_site.add_argument("--type", dest="site_type", default="", help="Kind of site")
        create_site.add_argument("--owner-name", default="", help="Site owner")
        create_site.add_argument("--contact", default="", help="Owner contact number")
        create_site.add_argument(
            "--generate-code",
            action="store_true",
            help="Assign a random 6-character site code",
        )

        totals = subparsers.add_parser("totals", help="Show a worker's ledger totals")
        totals.add_argument("--site-id", type=parse_uuid, required=True)
        totals.add_argument("--worker-id", type=parse_uuid, required=True)

        export = subparsers.add_parser("export-report", help="Render a report to a file")
        export.add_argument("--site-id", type=parse_uuid, required=True)
        export.add_argument(
            "--kind",
            choices=[k.value for k in ReportKind],
            required=True,
            help="Report type",
        )
        export.add_argument(
            "--format",
            dest="fmt",
            choices=[f.value for f in ReportFormat],
            default=ReportFormat.CSV.value,
            help="Output format (default: csv)",
        )
        export.add_argument(
            "--output-dir",
            help="Directory to write into (default: EXPORT_DIR)",
        )
        export.add_argument("--lang", help="Label language (default: REPORT_LANGUAGE)")
        export.add_argument(
            "--fail-on-empty",
            action="store_true",
            help="Exit with an error instead of writing an empty report",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        settings = get_settings()
        configure_logging(parsed.log_level or settings.log_level)
        parsed.database_url = parsed.database_url or settings.database_url

        # Dispatch to command handler
        handlers: dict[str, Callable[[argparse.Namespace], Awaitable[int]]] = {
            "init-db": self._cmd_init_db,
            "create-site": self._cmd_create_site,
            "totals": self._cmd_totals,
            "export-report": self._cmd_export_report,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return asyncio.run(handler(parsed))
        except NoDataError as e:
            print(f"No data: {e}", file=sys.stderr)
            return 2
        except SiteLedgerError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    async def _with_store(
        self, database_url: str, action: Callable[[RecordStore], Awaitable[Any]]
    ) -> Any:
        engine = build_engine(database_url)
        try:
            async with build_session_factory(engine)() as session:
                return await action(RecordStore(session))
        finally:
            await engine.dispose()

    async def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create all tables."""
        engine = build_engine(args.database_url)
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()
        print("Database schema ready.")
        return 0

    async def _cmd_create_site(self, args: argparse.Namespace) -> int:
        async def create(store: RecordStore) -> Any:
            code = await store.generate_site_code() if args.generate_code else None
            return await store.create_site(
                name=args.name,
                location=args.location,
                site_code=code,
                site_type=args.site_type,
                owner_name=args.owner_name,
                contact=args.contact,
            )

        site = await self._with_store(args.database_url, create)
        print(f"Created site {site.name}")
        print(f"  Site ID:   {site.site_id}")
        if site.site_code:
            print(f"  Site code: {site.site_code}")
        return 0

    async def _cmd_totals(self, args: argparse.Namespace) -> int:
        """Print one worker's ledger."""
        totals = await self._with_store(
            args.database_url,
            lambda store: LedgerService(store).compute_worker_totals(args.site_id, args.worker_id),
        )
        print(f"Ledger for worker: {args.worker_id}")
        print(f"  Site: {args.site_id}")
        print(f"\n  Total hajari:  {format_amount(totals.total_hajari):>15}")
        print(f"  Total expense: {format_amount(totals.total_expense):>15}")
        print(f"  Total paid:    {format_amount(totals.total_paid):>15}")
        print(f"  Remaining:     {format_amount(totals.remaining):>15}")
        return 0

    async def _cmd_export_report(self, args: argparse.Namespace) -> int:
        """Render a report and write it to the export directory."""
        settings = get_settings()
        labels = Labels.for_language(args.lang or settings.report_language)

        document = await self._with_store(
            args.database_url,
            lambda store: ReportGenerator(store, labels=labels).generate(
                args.site_id, args.kind, args.fmt
            ),
        )
        if args.fail_on_empty:
            document.ensure_data()

        sink = DirectoryExportSink(args.output_dir or settings.export_dir)
        path = sink.deliver(document.filename, document.payload, document.media_type)
        print(f"Wrote {path}")
        if document.empty:
            print("  (report has no rows)")
        return 0


def main() -> int:
    """CLI entry point."""
    cli = SiteLedgerCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
