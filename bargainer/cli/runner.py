# bargainer/cli/runner.py

"""Headless CLI runner: search, top deals, details, tools, health."""

import json
import logging
import sys
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from bargainer.models.deal import Deal
from bargainer.models.search_params import SearchParams
from bargainer.services.aggregator import AggregateResult, DealAggregator
from bargainer.services.provider_loader import build_aggregator
from bargainer.tools.deal_tools import DealTools

logger = logging.getLogger("bargainer.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_sources(
    aggregator: DealAggregator,
    source_csv: str | None,
) -> list[str] | None:
    """Map a comma-separated list of provider names to a list.

    Returns None (all providers) when *source_csv* is ``None``.
    Raises ``SystemExit`` on unknown names.
    """
    if source_csv is None:
        return None

    available = aggregator.get_providers()
    requested = [
        s.strip() for s in source_csv.split(",") if s.strip()
    ]
    unknown = [r for r in requested if r not in available]
    if unknown:
        _err.print(
            f"[red]Unknown source(s): {', '.join(unknown)}[/red]"
        )
        _err.print(f"[dim]Available: {', '.join(available)}[/dim]")
        raise SystemExit(1)
    return requested


def _format_price(value: float | None) -> str:
    return f"${value:,.2f}" if value is not None else "N/A"


def _print_table(deals: list[Deal], title: str) -> None:
    """Render a Rich table of deals to stdout, in the given order."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Was", justify="right", style="dim")
    table.add_column("Off", justify="right")
    table.add_column("Rating", justify="center")
    table.add_column("Store")
    table.add_column("Source", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, d in enumerate(deals, 1):
        table.add_row(
            str(idx),
            d.title[:60],
            _format_price(d.price),
            _format_price(d.original_price)
            if d.original_price is not None
            else "",
            f"{d.discount_percentage:.0f}%"
            if d.discount_percentage is not None
            else "",
            f"{d.rating:.1f}" if d.rating is not None else "—",
            d.store,
            d.source,
            d.url,
        )

    Console().print(table)


def _emit(deals: list[Deal], output_format: str, title: str) -> None:
    if output_format == "table":
        _print_table(deals, title)
        return
    json.dump(
        [d.to_dict() for d in deals],
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    sys.stdout.write("\n")


def _report_failures(result: AggregateResult) -> None:
    for report in result.reports:
        if report.status != "ok":
            _err.print(
                f"[red]{report.source}: {report.status}"
                f" ({report.message})[/red]"
            )


async def cli_search(
    query: str,
    source_csv: str | None,
    output_format: str,
    filters: dict[str, Any],
) -> int:
    """Run a headless search and return an exit code (0=ok, 1=none)."""
    aggregator = build_aggregator()
    try:
        return await _search(
            aggregator, query, source_csv, output_format, filters
        )
    finally:
        aggregator.close()


async def _search(
    aggregator: DealAggregator,
    query: str,
    source_csv: str | None,
    output_format: str,
    filters: dict[str, Any],
) -> int:
    sources = resolve_sources(aggregator, source_csv)
    try:
        params = SearchParams.model_validate(
            {"query": query, "sources": sources, **filters}
        )
    except ValidationError as exc:
        _err.print(f"[red]Invalid search options: {exc}[/red]")
        return 1

    names = ", ".join(sources or aggregator.get_providers())
    _err.print(
        f"[bold]Searching:[/bold] {query}  [dim]sources={names}[/dim]"
    )

    result = await aggregator.collect_search(params)
    _report_failures(result)

    if not result.deals:
        _err.print("[yellow]No deals found.[/yellow]")
        return 1

    parts: list[str] = []
    if result.excluded_count:
        parts.append(f"{result.excluded_count} filtered")
    if result.invalid_count:
        parts.append(f"{result.invalid_count} invalid")
    detail = f" ({', '.join(parts)})" if parts else ""
    _err.print(f"[green]✓ {len(result.deals)} deals{detail}[/green]")

    _emit(result.deals, output_format, f"Deals for '{query}'")
    return 0


async def cli_top_deals(
    limit: int,
    source_csv: str | None,
    output_format: str,
) -> int:
    """Print the current top deals."""
    aggregator = build_aggregator()
    try:
        sources = resolve_sources(aggregator, source_csv)
        result = await aggregator.collect_top_deals(limit, sources)
    finally:
        aggregator.close()
    _report_failures(result)

    if not result.deals:
        _err.print("[yellow]No deals found.[/yellow]")
        return 1
    _emit(result.deals, output_format, "Top Deals")
    return 0


async def cli_deal_details(
    deal_id: str,
    source: str | None,
    output_format: str,
) -> int:
    """Print one deal."""
    aggregator = build_aggregator()
    try:
        deal = await aggregator.get_deal_details(deal_id, source)
    finally:
        aggregator.close()
    if deal is None:
        _err.print(f"[yellow]Deal {deal_id} not found.[/yellow]")
        return 1
    _emit([deal], output_format, f"Deal {deal_id}")
    return 0


def run_list_sources() -> int:
    """Print registered provider names, one per line."""
    aggregator = build_aggregator()
    names = aggregator.get_providers()
    aggregator.close()
    if not names:
        _err.print("[yellow]No providers configured.[/yellow]")
        return 1
    for name in names:
        sys.stdout.write(f"{name}\n")
    return 0


async def run_tool(name: str, arguments_json: str | None) -> int:
    """Call one tool with JSON arguments and print its text result."""
    try:
        arguments: Any = json.loads(arguments_json) if arguments_json else {}
    except json.JSONDecodeError as exc:
        _err.print(f"[red]Invalid --arguments JSON: {exc}[/red]")
        return 1

    aggregator = build_aggregator()
    try:
        result = await DealTools(aggregator).call_tool(name, arguments)
    finally:
        aggregator.close()
    for block in result["content"]:
        sys.stdout.write(f"{block['text']}\n")
    return 1 if result.get("isError") else 0


async def run_health_check() -> int:
    """Run connectivity health check on all registered providers."""
    from bargainer.services.health_checker import HealthChecker
    from bargainer.services.provider_loader import build_providers

    _err.print("[bold]Running provider health check...[/bold]")
    checker = HealthChecker(build_providers())
    results = await checker.check_all()

    table = Table(
        title="Provider Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(r.source_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
