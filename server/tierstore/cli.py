"""
Tiered Version Store administration tool

Usage:
    tierstore migrate                          # Upgrade legacy catalogs to versioned records
    tierstore pricing                          # Show the storage-class price table
    tierstore costs --user ID                  # Cost breakdown for one user
    tierstore versions --user ID --file ID     # Version history of one file
    tierstore optimize --user ID [--file ID]   # Move old versions to a cheaper class
    tierstore cleanup --user ID [--tier TIER]  # Apply version retention
"""

import argparse
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tierstore.core import get_settings, setup_logging
from tierstore.errors import TierStoreError
from tierstore.pricing import pricing_table


console = Console()


def cmd_migrate(args):
    """Run the legacy migration over every user."""
    from tierstore.dependencies import migration_tool

    console.print("\n[bold blue]═══ Tiered Version Store - Legacy Migration ═══[/bold blue]\n")
    report = migration_tool.run()

    table = Table(title="Migration Results")
    table.add_column("User", style="cyan")
    table.add_column("Migrated", style="green", justify="right")
    table.add_column("Already current", justify="right")
    table.add_column("Error", style="red")
    for user in report.users:
        table.add_row(user.user_id, str(user.migrated), str(user.already_current), user.error or "")
    console.print(table)

    console.print(
        f"\nMigrated [green]{report.total_migrated}[/green] records, "
        f"{report.total_already_current} already current, "
        f"{report.users_processed} users processed."
    )
    return 1 if any(user.error for user in report.users) else 0


def cmd_pricing(args):
    """Print the effective price of every storage class."""
    table = Table(title="Storage Class Pricing (per GB-month)")
    table.add_column("Class", style="cyan")
    table.add_column("Base", justify="right")
    table.add_column("Margin", justify="right")
    table.add_column("Effective", style="green", justify="right")
    table.add_column("Retrieval")
    table.add_column("Min days", justify="right")

    for row in pricing_table():
        table.add_row(
            row.storage_class.value,
            f"${row.base_unit_cost:.5f}",
            f"{row.margin_percent:.0f}%",
            f"${row.effective_unit_cost:.5f}",
            row.retrieval_latency.value,
            str(row.minimum_retention_days),
        )
    console.print(table)
    return 0


def cmd_costs(args):
    """Monthly cost of everything a user stores, grouped by storage class."""
    from tierstore.dependencies import version_catalog

    breakdown = version_catalog.aggregate_cost_by_storage_class(args.user)

    table = Table(title=f"Storage Costs for {args.user}")
    table.add_column("Class", style="cyan")
    table.add_column("Versions", justify="right")
    table.add_column("Bytes", justify="right")
    table.add_column("Monthly cost", style="green", justify="right")
    for storage_class, entry in breakdown.breakdown.items():
        table.add_row(storage_class.value, str(entry.count), f"{entry.total_bytes:,}", f"${entry.total_cost:.4f}")
    console.print(table)

    console.print(
        Panel(
            f"[bold green]${breakdown.total_monthly_cost:.4f}[/bold green] / month\n"
            f"{breakdown.file_count} files, {breakdown.total_bytes:,} bytes",
            title="Total",
            border_style="green",
        )
    )
    return 0


def cmd_versions(args):
    """Version history of one file."""
    from tierstore.dependencies import version_catalog

    history = version_catalog.list_versions(args.user, args.file)

    table = Table(title=f"{history.original_name} ({history.total_versions} versions)")
    table.add_column("#", justify="right")
    table.add_column("Version id", style="dim")
    table.add_column("Class", style="cyan")
    table.add_column("Bytes", justify="right")
    table.add_column("Monthly cost", style="green", justify="right")
    table.add_column("Created")
    table.add_column("Comment")
    for version in history.versions:
        marker = "[bold green]*[/bold green]" if version.is_active else ""
        table.add_row(
            f"{version.version_number}{marker}",
            version.version_id,
            version.storage_class.value,
            f"{version.size_bytes:,}",
            f"${version.monthly_cost:.4f}",
            version.created_at.isoformat(timespec="seconds"),
            version.comment,
        )
    console.print(table)
    console.print(f"\nTotal: [green]${history.total_monthly_cost:.4f}[/green] / month")
    return 0


def cmd_optimize(args):
    """Move old inactive versions into a cheaper storage class."""
    from tierstore.dependencies import optimization_engine

    if args.file:
        result = optimization_engine.optimize_versions(args.user, args.file, args.days, args.target)
    else:
        result = optimization_engine.optimize_user(args.user, args.days, args.target)

    if not args.quiet:
        table = Table(title=f"Optimization to {result.target_storage_class.value}")
        table.add_column("File", style="dim")
        table.add_column("#", justify="right")
        table.add_column("From", style="cyan")
        table.add_column("Savings", style="green", justify="right")
        table.add_column("Result")
        for item in result.results:
            outcome = "[green]moved[/green]" if item.success else f"[red]{item.error}[/red]"
            table.add_row(
                item.file_id,
                str(item.version_number),
                item.old_storage_class.value,
                f"${item.monthly_savings:.4f}",
                outcome,
            )
        console.print(table)

    console.print(
        f"\nOptimized [green]{result.optimized_count}[/green], skipped {result.skipped_count}, "
        f"failed [red]{result.failed_count}[/red]. "
        f"Saving [bold green]${result.total_monthly_savings:.4f}[/bold green] / month."
    )
    return 1 if result.failed_count else 0


def cmd_cleanup(args):
    """Remove versions the retention tier no longer keeps."""
    from tierstore.dependencies import retention_manager

    result = retention_manager.cleanup(args.user, args.tier)
    limit = "unlimited" if result.max_versions is None else str(result.max_versions)

    if not args.quiet and result.results:
        table = Table(title=f"Retention cleanup ({result.tier.value})")
        table.add_column("File")
        table.add_column("#", justify="right")
        table.add_column("Reason", style="cyan")
        table.add_column("Freed", justify="right")
        table.add_column("Result")
        for item in result.results:
            outcome = "[green]removed[/green]" if item.success else f"[red]{item.error}[/red]"
            table.add_row(item.file_name, str(item.version_number), item.reason, f"{item.freed_bytes:,} B", outcome)
        console.print(table)

    console.print(Panel(
        f"Tier: [bold]{result.tier.value}[/bold] (max versions {limit}, "
        f"delete after {result.auto_delete_after_days} days)\n"
        f"Removed: [green]{result.cleaned_count}[/green]  Failed: [red]{result.failed_count}[/red]\n"
        f"Freed: {result.freed_bytes:,} bytes  Saving: [bold green]${result.saved_cost:.4f}[/bold green] / month",
        title="Retention",
    ))
    return 1 if result.failed_count else 0


def main(argv=None):
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Tiered Version Store administration tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  migrate   Upgrade legacy catalog records to the versioned schema
  pricing   Show storage-class pricing
  costs     Show a user's cost breakdown by storage class
  versions  Show the version history of a file
  optimize  Move old versions to a cheaper storage class
  cleanup   Remove versions past the retention tier limits

Examples:
  tierstore migrate
  tierstore costs --user alice
  tierstore optimize --user alice --days 60 --target GLACIER_INSTANT
  tierstore cleanup --user alice --tier PRO
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("migrate", help="Run the legacy migration")
    subparsers.add_parser("pricing", help="Show pricing")

    costs_parser = subparsers.add_parser("costs", help="Cost breakdown")
    costs_parser.add_argument("--user", required=True, help="User id")

    versions_parser = subparsers.add_parser("versions", help="Version history")
    versions_parser.add_argument("--user", required=True, help="User id")
    versions_parser.add_argument("--file", required=True, help="File id")

    optimize_parser = subparsers.add_parser("optimize", help="Optimize old versions")
    optimize_parser.add_argument("--user", required=True, help="User id")
    optimize_parser.add_argument("--file", help="Limit to one file id")
    optimize_parser.add_argument(
        "--days",
        type=int,
        default=settings.optimize_days_threshold,
        help="Minimum version age in days",
    )
    optimize_parser.add_argument(
        "--target",
        default=settings.optimize_target_class,
        help="Target storage class",
    )
    optimize_parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Minimal output"
    )

    cleanup_parser = subparsers.add_parser("cleanup", help="Apply version retention")
    cleanup_parser.add_argument("--user", required=True, help="User id")
    cleanup_parser.add_argument(
        "--tier",
        default=settings.retention_default_tier,
        help="Retention tier (FREE, PRO, BUSINESS)",
    )
    cleanup_parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Minimal output"
    )

    args = parser.parse_args(argv)
    setup_logging(settings.log_level)

    commands = {
        "migrate": cmd_migrate,
        "pricing": cmd_pricing,
        "costs": cmd_costs,
        "versions": cmd_versions,
        "optimize": cmd_optimize,
        "cleanup": cmd_cleanup,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    try:
        return command(args)
    except TierStoreError as exc:
        console.print(f"[red]{exc.kind.value}: {exc.message}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
