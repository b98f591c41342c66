"""shop-reports CLI — inspect report definition files during development."""

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shop_reports import __version__
from shop_reports.config import default_config_path, load_into
from shop_reports.exceptions import Failure, ValidationError
from shop_reports.utils.debug import configure_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (defaults to SHOP_REPORTS_LOG_LEVEL or WARNING)",
)
def main(log_level: str | None):
    """shop-reports — report and endpoint definition tooling.

    Every command takes a YAML definitions file. When omitted, the file
    named by SHOP_REPORTS_CONFIG is used.
    """
    configure_logging(log_level)


def _load(definitions: str | None):
    path = definitions or default_config_path()
    if path is None:
        raise click.UsageError("No definitions file given and SHOP_REPORTS_CONFIG is not set.")
    try:
        return load_into(path)
    except (OSError, ValidationError) as e:
        raise click.ClickException(str(e)) from e


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("definitions", required=False)
def validate(definitions: str | None):
    """Register every definition in DEFINITIONS and report any issues."""
    console.print(f"\n[bold blue]shop-reports[/] — Validating: {definitions or default_config_path()}\n")

    container, issues = _load(definitions)

    if issues:
        console.print("[red]Validation FAILED:[/]")
        for issue in issues:
            console.print(f"  [red]x[/] {escape(issue)}")
        raise SystemExit(1)

    console.print(
        f"  [green]v[/] {len(container.reports)} report(s), "
        f"{len(container.endpoints)} endpoint(s) registered"
    )
    console.print("\n[green]Valid![/]")


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.argument("definitions", required=False)
@click.option("--sort", "-s", default="priority", type=click.Choice(["priority", "id"]))
def list_reports(definitions: str | None, sort: str):
    """List the reports defined in DEFINITIONS."""
    container, issues = _load(definitions)
    reports = container.reports.list_reports(sort)

    for issue in issues:
        console.print(f"  [yellow]![/] {escape(issue)}")

    if not reports:
        console.print("[yellow]No reports registered.[/]")
        return

    table = Table(title=f"Reports ({len(reports)} registered)")
    table.add_column("ID", style="cyan")
    table.add_column("Label")
    table.add_column("Priority", justify="right")
    table.add_column("Filters")
    table.add_column("Endpoints", justify="right")

    for report in reports:
        table.add_row(
            report["id"],
            report["label"],
            str(report["priority"]),
            ", ".join(report["filters"]),
            str(sum(len(refs) for refs in report["endpoints"].values())),
        )

    console.print(table)


# ── Show ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("report_id")
@click.argument("definitions", required=False)
def show(report_id: str, definitions: str | None):
    """Build REPORT_ID from DEFINITIONS and show its endpoints."""
    container, _ = _load(definitions)
    report = container.reports.build_report(report_id)

    if isinstance(report, Failure):
        console.print(f"[red]x[/] {escape(f'[{report.code}] {report.message}')}")
        raise SystemExit(1)

    console.print(
        Panel(
            f"Priority: {report.priority}\n"
            f"Capability: {report.capability}\n"
            f"Filters: {', '.join(report.get_filters())}",
            title=f"{report.label} ({report.id})",
        )
    )

    for view_group, endpoints in report.get_endpoints().items():
        console.print(f"\n[bold]{view_group}[/]")
        for endpoint in endpoints:
            console.print(f"  [green]v[/] {endpoint.id} — {endpoint.label}")

    if report.has_errors():
        console.print("\n[red]Build Errors:[/]")
        for error in report.get_errors():
            console.print(f"  [red]x[/] {escape(f'[{error.code}] {error.message}')}")
        raise SystemExit(1)
