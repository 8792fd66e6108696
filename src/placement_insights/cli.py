"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from placement_insights.cache.dashboard_store import DashboardStore
from placement_insights.clients.llm_client import LLMClient
from placement_insights.config import load_config
from placement_insights.export.csv_exporter import (
    DEFAULT_FILENAME,
    LIST_SEPARATOR,
    export_market_report_to_csv,
    format_cities,
    format_salary,
)
from placement_insights.insights import average_salary_by_role, city_demand
from placement_insights.logging.models import UsageLog
from placement_insights.logging.usage_store import UsageStore
from placement_insights.models.filters import (
    ALL_ROLES,
    ALL_SECTORS,
    ALL_TIERS,
    JOB_ROLES,
    LOCATIONS,
    QUALIFICATIONS,
    SECTORS,
    Filters,
)
from placement_insights.models.report import MarketReport
from placement_insights.pipeline.errors import ReportError
from placement_insights.pipeline.orchestrator import ReportOrchestrator

app = typer.Typer(
    name="placement-insights",
    help="AI job-market reports by city tier for placement offices",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _render_report(report: MarketReport) -> None:
    console.print(Panel(report.overall_analysis, title="Overall Analysis"))

    if not report.has_results:
        console.print(
            "[yellow]No Results Found. The AI could not find a significant number of "
            "results for the selected filters. Please try a different combination.[/yellow]"
        )
        return

    cities = city_demand(report)
    if cities:
        console.print(
            "[bold]Job Demand by City:[/bold] "
            + ", ".join(f"{name} ({value:g})" for name, value in cities)
        )
    salaries = average_salary_by_role(report)
    if salaries:
        console.print(
            "[bold]Average Monthly Salary by Role:[/bold] "
            + ", ".join(f"{name} (₹{value:,})" for name, value in salaries)
        )

    for tier in report.tier_analyses:
        table = Table(title=tier.tier, caption=tier.summary, show_lines=True)
        table.add_column("Role", style="bold")
        table.add_column("Top Cities & Openings")
        table.add_column("Salary Range (INR)")
        table.add_column("Hiring Companies")
        table.add_column("Platforms")
        for role in tier.common_roles:
            table.add_row(
                role.role_name,
                format_cities(role.city_openings),
                format_salary(role.salary_range),
                LIST_SEPARATOR.join(role.hiring_companies),
                "\n".join(f"{p.platform_name}: {p.search_link}" for p in role.platforms),
            )
        console.print(table)


@app.command()
def analyze(
    qualification: str = typer.Option("BSC", "--qualification", "-q", help="Graduate qualification"),
    sector: str = typer.Option(ALL_SECTORS, "--sector", "-s", help="Sector focus"),
    location: str = typer.Option(ALL_TIERS, "--location", "-l", help="Location tier"),
    job_role: str = typer.Option(ALL_ROLES, "--role", "-r", help="Specific job role"),
    csv_out: Path = typer.Option(None, "--csv", help="Also export the report to this CSV file"),
    json_out: Path = typer.Option(None, "--json", help="Also save the raw report as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Analyze the job market for the given filters."""
    _setup_logging(verbose)
    try:
        filters = Filters(
            qualification=qualification, sector=sector, location=location, job_role=job_role
        )
    except ValidationError:
        console.print(f"[red]Unknown location tier: {location}. Choose one of: {', '.join(LOCATIONS)}[/red]")
        raise typer.Exit(1)

    config = load_config()
    store = DashboardStore(config.store.resolved_db_path)
    usage = UsageStore(config.store.resolved_usage_db_path)
    store.save_filters(filters)
    store.save_has_searched(True)
    store.save_report(None)

    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    orchestrator = ReportOrchestrator(
        llm,
        extraction_model=config.llm.extraction_model,
        narrative_model=config.llm.narrative_model,
        extraction_temperature=config.report.extraction_temperature,
        synthesis_temperature=config.report.synthesis_temperature,
        max_tokens=config.report.max_tokens,
    )

    start = time.monotonic()
    with console.status("Analyzing Live Job Market...") as status:

        def on_phase(phase: str, detail: str) -> None:
            status.update(detail)

        try:
            result = asyncio.run(orchestrator.run(filters, on_phase=on_phase))
        except ReportError as exc:
            usage.save_log(
                UsageLog.for_run(
                    filters,
                    llm.get_token_summary(),
                    elapsed_seconds=time.monotonic() - start,
                    error=exc,
                )
            )
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(1)

    usage.save_log(
        UsageLog.for_run(
            filters,
            llm.get_token_summary(),
            report=result.report,
            elapsed_seconds=result.elapsed_seconds,
        )
    )
    store.save_report(result.report)

    if verbose and result.failed_tiers:
        console.print(f"[dim]Tiers skipped after failure: {', '.join(result.failed_tiers)}[/dim]")
    _render_report(result.report)

    if csv_out is not None:
        written = export_market_report_to_csv(result.report.tier_analyses, csv_out)
        if written:
            console.print(f"[green]CSV saved: {written}[/green]")
    if json_out is not None:
        json_out.parent.mkdir(parents=True, exist_ok=True)
        json_out.write_text(
            json.dumps(result.report.to_wire(), ensure_ascii=False, indent=2), encoding="utf-8"
        )
        console.print(f"[green]JSON saved: {json_out}[/green]")


@app.command()
def export(
    output: Path = typer.Option(Path(DEFAULT_FILENAME), "--output", "-o", help="CSV file path"),
) -> None:
    """Export the last stored report to CSV."""
    config = load_config()
    report = DashboardStore(config.store.resolved_db_path).load_report()
    if report is None or not report.tier_analyses:
        console.print("[yellow]No market report data to export. Run `analyze` first.[/yellow]")
        raise typer.Exit(1)
    written = export_market_report_to_csv(report.tier_analyses, output)
    if written is None:
        raise typer.Exit(1)
    console.print(f"[green]CSV saved: {written}[/green]")


@app.command()
def show() -> None:
    """Show the last stored report."""
    config = load_config()
    store = DashboardStore(config.store.resolved_db_path)
    report = store.load_report()
    if report is None:
        if store.load_has_searched():
            console.print("[yellow]The last search produced no report.[/yellow]")
        else:
            console.print("Welcome! Run `placement-insights analyze` to generate a report.")
        return
    filters = store.load_filters()
    console.print(
        f"[dim]{filters.qualification} | {filters.sector} | {filters.location} | {filters.job_role}[/dim]"
    )
    _render_report(report)


@app.command()
def options() -> None:
    """List the available filter values."""
    console.print(f"[bold]Qualifications:[/bold] {', '.join(QUALIFICATIONS)}")
    console.print(f"[bold]Sectors:[/bold] {', '.join(SECTORS)}")
    console.print(f"[bold]Location tiers:[/bold] {', '.join(LOCATIONS)}")
    console.print("[bold]Job roles:[/bold]")
    for role in [ALL_ROLES, *sorted(JOB_ROLES)]:
        console.print(f"  {role}")


@app.command()
def clear() -> None:
    """Reset stored filters, report and search state."""
    config = load_config()
    count = DashboardStore(config.store.resolved_db_path).clear()
    console.print(f"[green]Cleared {count} stored entries.[/green]")


@app.command()
def usage() -> None:
    """Show this month's usage statistics."""
    config = load_config()
    stats = UsageStore(config.store.resolved_usage_db_path).get_monthly_stats()
    console.print(
        Panel(
            f"Runs: {stats['total_runs']} | Success: {stats['success_rate']:.0f}% | "
            f"Tier success: {stats['tier_success_rate']:.0f}%\n"
            f"Tokens: {stats['total_input_tokens']:,} in / {stats['total_output_tokens']:,} out\n"
            f"Estimated cost: ${stats['total_cost_usd']:.4f}",
            title=f"Usage {stats['month']}",
        )
    )


if __name__ == "__main__":
    app()
