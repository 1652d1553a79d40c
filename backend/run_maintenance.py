#!/usr/bin/env python
"""
Maintenance CLI for user storage.

Runs the admin service directly against the configured data root and
account store, without going through the API.

Usage:
    python run_maintenance.py scan --days 90 --require-unused
    python run_maintenance.py delete --days 90 --require-unused --token <token> --count 3
    python run_maintenance.py storage alice bob
    python run_maintenance.py audit alice

Activity is tracked in the API process only, so the CLI measures inactivity
from account creation time.
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from api.dependencies import get_container
from modules.admin.interfaces import IUserAdminService
from modules.admin.models import DeletionReport, ScanCriteria, ScanReport
from shared.config import get_settings
from shared.exceptions import TavernError
from shared.logging import configure_logging

console = Console()


def format_size(size: int) -> str:
    """Format a byte count as megabytes."""
    return f"{size / 1024 / 1024:.2f} MB"


def criteria_from_args(args: argparse.Namespace) -> ScanCriteria:
    return ScanCriteria(
        inactive_days=args.days,
        require_unused=args.require_unused,
        max_storage_mb=args.max_storage_mb,
        exclude_active_subscriptions=not args.include_subscribed,
    )


def print_scan(report: ScanReport) -> None:
    table = Table(title=f"Inactive users ({report.criteria.inactive_days}+ days)")
    table.add_column("Handle", style="cyan")
    table.add_column("Name")
    table.add_column("Last activity")
    table.add_column("Days", justify="right")
    table.add_column("Storage", justify="right")
    table.add_column("Email")

    for candidate in report.candidates:
        table.add_row(
            candidate.handle,
            candidate.name,
            candidate.last_activity.strftime("%Y-%m-%d %H:%M"),
            str(candidate.days_since_last_activity),
            format_size(candidate.storage_size),
            "yes" if candidate.has_email else "no",
        )

    console.print(table)
    console.print(f"[bold]Candidates:[/bold] {report.total_users} ({format_size(report.total_size)})")
    console.print(f"[bold]Token:[/bold] {report.confirmation_token}")
    if report.total_users:
        console.print(
            f"[dim]Confirm with: delete --token {report.confirmation_token} "
            f"--count {report.total_users} and the same criteria[/dim]"
        )


def print_deletion(report: DeletionReport) -> None:
    if report.deleted_users:
        table = Table(title="Deleted users")
        table.add_column("Handle", style="cyan")
        table.add_column("Freed", justify="right")
        table.add_column("Notified")
        for outcome in report.deleted_users:
            notified = "yes" if outcome.email_notified else (outcome.email_error or "no")
            table.add_row(outcome.handle, format_size(outcome.deleted_size), notified)
        console.print(table)

    if report.failed_users:
        table = Table(title="Failed deletions", style="red")
        table.add_column("Handle", style="cyan")
        table.add_column("Code")
        table.add_column("Error")
        for outcome in report.failed_users:
            table.add_row(outcome.handle, outcome.error_code or "", outcome.error or "")
        console.print(table)

    console.print(
        f"[green]{report.total_deleted} deleted[/green], "
        f"[red]{report.total_failed} failed[/red], "
        f"{format_size(report.total_deleted_size)} freed"
    )


async def run(args: argparse.Namespace, service: IUserAdminService) -> None:
    if args.command == "scan":
        print_scan(await service.scan_inactive_users(criteria_from_args(args), args.acting_handle))

    elif args.command == "delete":
        report = await service.confirm_delete_inactive_users(
            criteria_from_args(args),
            args.acting_handle,
            args.token,
            args.count,
        )
        print_deletion(report)

    elif args.command == "storage":
        table = Table(title="Storage usage")
        table.add_column("Handle", style="cyan")
        table.add_column("Storage", justify="right")
        for handle, result in (await service.get_storage_sizes(args.handles)).items():
            if result.error:
                table.add_row(handle, f"[red]{result.error}[/red]")
            else:
                table.add_row(handle, format_size(result.storage_size or 0))
        console.print(table)

    elif args.command == "audit":
        result = await service.audit_user_usage(args.handle)
        table = Table(title=f"Audit of {args.handle}")
        table.add_column("Category", style="cyan")
        table.add_column("Extra content")
        table.add_column("Example")
        for category, audit in result.details.items():
            table.add_row(category, "yes" if audit.has_extra else "no", audit.example or "")
        console.print(table)
        verdict = "[green]unused[/green]" if result.is_unused else "[yellow]in use[/yellow]"
        console.print(f"[bold]Verdict:[/bold] {verdict}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tavern user storage maintenance")
    parser.add_argument("--log-level", help="Override the configured log level")
    commands = parser.add_subparsers(dest="command", required=True)

    def add_criteria(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--days", type=int, default=60, help="Minimum days without activity (default: 60)")
        sub.add_argument("--require-unused", action="store_true", help="Only users matching the default template")
        sub.add_argument("--max-storage-mb", type=float, help="Skip users storing more than this")
        sub.add_argument("--include-subscribed", action="store_true", help="Also consider users with active subscriptions")
        sub.add_argument("--acting-handle", help="Handle to protect as the acting administrator")

    add_criteria(commands.add_parser("scan", help="Preview inactive users"))

    delete = commands.add_parser("delete", help="Delete previewed inactive users")
    add_criteria(delete)
    delete.add_argument("--token", required=True, help="Confirmation token printed by scan")
    delete.add_argument("--count", type=int, required=True, help="Number of users scan reported")

    storage = commands.add_parser("storage", help="Show storage usage")
    storage.add_argument("handles", nargs="+")

    audit = commands.add_parser("audit", help="Compare a user's content to the default template")
    audit.add_argument("handle")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or get_settings().log_level)

    try:
        asyncio.run(run(args, get_container().user_admin))
    except TavernError as e:
        console.print(f"[red]Error:[/red] {e.message} ({e.code})")
        return 1
    except ValueError as e:
        console.print(f"[red]Invalid criteria:[/red] {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
