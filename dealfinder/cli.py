"""CLI interface for DealFinder."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from dealfinder.config import load_config
from dealfinder.models import (
    AlertPreference,
    FilterCriteria,
    FinancingAssumptions,
    PropertyInput,
    PropertyRecord,
    PropertyType,
    SavedSearch,
    SortKey,
)

app = typer.Typer(
    name="dealfinder",
    help="Real-estate deal finder - analyze, filter and rank investment properties.",
    no_args_is_help=True,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _read_json(path: Path):
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"Cannot read {path}: {e}") from e


def _load_records(path: Path) -> list[PropertyRecord]:
    from dealfinder.candidates.base import unwrap_listings

    try:
        return [PropertyRecord.model_validate(item) for item in unwrap_listings(_read_json(path))]
    except (ValidationError, ValueError) as e:
        raise typer.BadParameter(f"Invalid property data in {path}: {e}") from e


def _score_str(score: int | None) -> str:
    from dealfinder.analysis.scoring import score_band

    band = score_band(score)
    if band == "strong":
        return f"[bold green]{score}[/bold green]"
    if band == "fair":
        return f"[bold yellow]{score}[/bold yellow]"
    return f"{score or '-'}"


def _money(value: float | None) -> str:
    return f"${value:,.0f}" if value is not None else "-"


def _pct(value: float | None) -> str:
    return f"{value:.1f}%" if value is not None else "-"


@app.command()
def calc(
    price: float = typer.Option(..., "--price", "-p", help="Purchase price"),
    rent: float = typer.Option(0, "--rent", "-r", help="Total monthly rent"),
    taxes: float = typer.Option(0, "--taxes", help="Annual property taxes"),
    insurance: float = typer.Option(None, "--insurance", help="Annual insurance"),
    hoa: float = typer.Option(0, "--hoa", help="Monthly HOA"),
    vacancy: float = typer.Option(None, "--vacancy", help="Vacancy rate (%)"),
    units: int = typer.Option(None, "--units", help="Number of units"),
    down: float = typer.Option(None, "--down", help="Down payment (%)"),
    rate: float = typer.Option(None, "--rate", help="Interest rate (%)"),
    term: int = typer.Option(None, "--term", help="Loan term (years)"),
    closing: float = typer.Option(None, "--closing", help="Closing costs (%)"),
    maintenance: float = typer.Option(None, "--maintenance", help="Maintenance (% of income)"),
    management: float = typer.Option(None, "--management", help="Management (% of income)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to config TOML file"),
):
    """Run the investment calculator for one set of assumptions."""
    from dealfinder.analysis.metrics import compute_metrics
    from dealfinder.analysis.scoring import score_band, score_investment

    cfg = load_config(config_path).financing

    property_input = PropertyInput(
        purchase_price=price,
        monthly_rent=rent,
        annual_taxes=taxes,
        annual_insurance=cfg.default_insurance_annual if insurance is None else insurance,
        monthly_hoa=hoa,
        vacancy_rate_percent=cfg.default_vacancy_rate if vacancy is None else vacancy,
        units=units,
    )
    overrides = {
        "down_payment_percent": down,
        "interest_rate_percent": rate,
        "loan_term_years": term,
        "closing_costs_percent": closing,
        "maintenance_percent": maintenance,
        "management_percent": management,
    }
    financing = FinancingAssumptions(
        **{**cfg.assumptions().model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
    )

    m = compute_metrics(property_input, financing)
    score = score_investment(m, units)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Down Payment", _money(m.down_payment))
    table.add_row("Loan Amount", _money(m.loan_amount))
    table.add_row("Closing Costs", _money(m.closing_costs))
    table.add_row("Total Cash Needed", _money(m.total_cash_needed))
    table.add_row("Monthly Mortgage (P&I)", f"${m.monthly_mortgage:,.2f}")
    table.add_row("Gross Annual Rent", _money(m.gross_annual_rent))
    table.add_row("Effective Gross Income", _money(m.effective_gross_income))
    table.add_row("Operating Expenses", f"-{_money(m.total_operating_expenses)}")
    table.add_row("NOI", _money(m.noi))
    table.add_row("Annual Debt Service", f"-{_money(m.annual_debt_service)}")
    table.add_row("Monthly Cash Flow", _money(m.monthly_cash_flow))
    table.add_row("Cap Rate", f"{m.cap_rate_percent:.2f}%")
    table.add_row("Cash on Cash", f"{m.cash_on_cash_return_percent:.2f}%")
    table.add_row("DSCR", f"{m.dscr:.2f}")
    table.add_row("GRM", f"{m.grm:.2f}")
    table.add_row("5-Year ROI", f"{m.roi_5_year_percent:.1f}%")

    title = f"Investment Calculator - Score: {score} ({score_band(score)})"
    console.print(Panel(table, title=title))


@app.command("list")
def list_properties(
    properties_file: Path = typer.Argument(..., help="JSON file of property records"),
    search: str = typer.Option(None, "--search", "-q", help="Quick filter on address/city/state/zip"),
    location: str = typer.Option(None, "--location", help="City, state or zip"),
    min_price: float = typer.Option(None, "--min-price"),
    max_price: float = typer.Option(None, "--max-price"),
    property_types: list[PropertyType] = typer.Option(None, "--type", help="Property type (repeatable)"),
    min_units: int = typer.Option(None, "--min-units"),
    max_units: int = typer.Option(None, "--max-units"),
    min_cap_rate: float = typer.Option(None, "--min-cap-rate"),
    min_roi: float = typer.Option(None, "--min-roi"),
    min_cash_flow: float = typer.Option(None, "--min-cash-flow"),
    sort: SortKey = typer.Option(None, "--sort", "-s", help="Sort order"),
    limit: int = typer.Option(20, "--limit", "-l", help="Max properties to show"),
    save_search: Path = typer.Option(None, "--save-search", help="Write these filters to a JSON file"),
    search_name: str = typer.Option("", "--search-name", help="Name for the saved search"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Filter, sort and display property records."""
    from dealfinder.analysis.filters import filter_and_sort
    from dealfinder.analysis.summary import summarize

    setup_logging(verbose)
    cfg = load_config(config_path)

    records = _load_records(properties_file)
    criteria = FilterCriteria(
        location=location,
        min_price=min_price,
        max_price=max_price,
        property_types=property_types or [],
        min_units=min_units,
        max_units=max_units,
        min_cap_rate=min_cap_rate,
        min_roi=min_roi,
        min_cash_flow=min_cash_flow,
    )
    results = filter_and_sort(records, criteria, sort or cfg.filters.default_sort, quick_search=search)

    summary = summarize(
        results,
        top_deal_min_score=cfg.summary.top_deal_min_score,
        top_deal_limit=cfg.summary.top_deal_limit,
    )
    console.print(
        f"\n[bold]{summary.total_properties} properties found[/bold] | "
        f"Avg Cap Rate: {summary.avg_cap_rate:.1f}% | "
        f"Avg Cash Flow: {_money(summary.avg_cash_flow)}/mo | "
        f"Avg Score: {summary.avg_score:.0f}\n"
    )

    if results:
        _display_properties_table(results[:limit])

    if save_search:
        saved = SavedSearch(search_name=search_name, filters=criteria, results_count=len(results))
        save_search.write_text(saved.model_dump_json(indent=2), encoding="utf-8")
        console.print(f"[green]Search saved to {save_search}[/green]")


def _display_properties_table(records: list[PropertyRecord], title: str = "Properties") -> None:
    table = Table(title=title, show_lines=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("Score", style="bold")
    table.add_column("Address", style="white")
    table.add_column("Location", style="white")
    table.add_column("Type", style="cyan")
    table.add_column("Units", justify="right")
    table.add_column("Price", style="green", justify="right")
    table.add_column("Cap Rate", style="yellow", justify="right")
    table.add_column("Cash Flow", justify="right")
    table.add_column("ROI", justify="right")

    for i, r in enumerate(records, 1):
        table.add_row(
            str(i),
            _score_str(r.investment_score),
            r.address[:35],
            f"{r.city}, {r.state} {r.zip_code}".strip(),
            r.property_type.value.replace("_", " ") if r.property_type else "-",
            str(r.units) if r.units else "-",
            _money(r.price),
            _pct(r.cap_rate),
            f"{_money(r.cash_flow_monthly)}/mo",
            _pct(r.roi),
        )

    console.print(table)


@app.command()
def search(
    query: str = typer.Argument(..., help='e.g. "multi-family properties in Austin TX"'),
    source: str = typer.Option(None, "--source", "-s", help="Candidate source (file, feed)"),
    file_path: Path = typer.Option(None, "--file", help="Candidates JSON for the file source"),
    output: Path = typer.Option(None, "--output", "-o", help="Write enriched properties to JSON"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Fetch candidate listings, compute their metrics and score them."""
    setup_logging(verbose)
    cfg = load_config(config_path)
    if file_path:
        cfg.sources.file_path = str(file_path)

    source_name = source or cfg.sources.default
    try:
        records = asyncio.run(_run_search(cfg, query, source_name))
    except (ValueError, OSError, httpx.HTTPError) as e:
        console.print(f"[red]{source_name}: Error - {e}[/red]")
        raise typer.Exit(code=1)

    if not records:
        console.print("[yellow]No properties found. Try a different search.[/yellow]")
        raise typer.Exit(code=1)

    _display_properties_table(records, title=f"Results for {query!r}")

    if output:
        payload = [r.model_dump(mode="json", exclude_none=True) for r in records]
        output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        console.print(f"[green]Saved {len(records)} properties to {output}[/green]")


async def _run_search(cfg, query: str, source_name: str) -> list[PropertyRecord]:
    from dealfinder.analysis.engine import DealAnalyzer
    from dealfinder.candidates import get_source

    source_cls = get_source(source_name)
    source = source_cls(cfg.sources)
    try:
        raw = await source.search(query)
    finally:
        await source.close()

    analyzer = DealAnalyzer(cfg.financing, cfg.enrichment)
    return analyzer.enrich_raw(raw)


@app.command()
def alerts(
    properties_file: Path = typer.Argument(..., help="JSON file of property records"),
    alerts_file: Path = typer.Argument(..., help="JSON file of alert preferences"),
    no_send: bool = typer.Option(False, "--no-send", help="Only list matches"),
    config_path: Path = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Check alert preferences against property records and send matches."""
    from dealfinder.alerts.checker import AlertChecker
    from dealfinder.alerts.dispatcher import AlertDispatcher

    setup_logging(verbose)
    cfg = load_config(config_path)

    records = _load_records(properties_file)
    raw_prefs = _read_json(alerts_file)
    if not isinstance(raw_prefs, list):
        raise typer.BadParameter(f"{alerts_file} must contain a list of alert preferences")
    try:
        prefs = [AlertPreference.model_validate(p) for p in raw_prefs]
    except ValidationError as e:
        raise typer.BadParameter(f"Invalid alert preferences in {alerts_file}: {e}") from e

    matches = AlertChecker().check(prefs, records)
    if not matches:
        console.print("[yellow]No properties match your alerts.[/yellow]")
        return

    console.print(f"[bold green]{len(matches)} alert match(es)[/bold green]")
    if no_send:
        for match in matches:
            console.print(f"  {match.preference.name}: {match.record.full_address}")
        return

    sent = AlertDispatcher(cfg.alerts).dispatch_sync(matches)
    delivered = sum(1 for m in sent if m.channels_sent)
    console.print(f"\n[bold]Sent {delivered} alert(s)[/bold]")


@app.command()
def config_show(
    config_path: Path = typer.Option(None, "--config", "-c"),
):
    """Display current configuration."""
    cfg = load_config(config_path)
    console.print_json(json.dumps(cfg.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    app()
