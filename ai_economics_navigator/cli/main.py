"""
CLI interface for AI Economics Navigator.

Provides command-line access to the cost engines, CSV export and narrative
commentary.
"""

import logging
import sys
from dataclasses import replace
from enum import Enum
from typing import List, Optional

import typer
import yaml
from openai import OpenAIError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ai_economics_navigator.config.loader import ScenarioConfig, load_scenario_config
from ai_economics_navigator.core.catalog import EMBEDDING_MODELS, INFERENCE_MODELS, TRANSLATION_MODELS
from ai_economics_navigator.core.projection import ProjectionPoint
from ai_economics_navigator.core.rag import compute_rag_costs
from ai_economics_navigator.core.roi import active_ai_monthly_cost, compute_roi, format_roi_ratio
from ai_economics_navigator.core.translation import compute_translation_costs
from ai_economics_navigator.export.csv_export import write_translation_csv
from ai_economics_navigator.narrative.client import NarrativeClient
from ai_economics_navigator.narrative.formatting import insight_or_placeholder, split_insight
from ai_economics_navigator.narrative.prompts import ScenarioKind
from ai_economics_navigator.narrative.task import NarrativeScheduler

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


class AiCostSource(str, Enum):
    """Where the ROI command takes the monthly AI cost from."""
    PILLARS = "pillars"
    TRANSLATION = "translation"
    RAG = "rag"


ConfigOption = typer.Option(None, "--config", "-c", help="YAML scenario file")


def _load_config(path: Optional[str]) -> ScenarioConfig:
    """Load the scenario file, or defaults when no file is given."""
    if path is None:
        return ScenarioConfig()
    try:
        return load_scenario_config(path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Configuration error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


def _overrides(**values) -> dict:
    return {key: value for key, value in values.items() if value is not None}


def _format_currency(amount: float) -> str:
    """Format currency with proper symbols and formatting."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _breakdown_table(title: str, components: dict) -> Table:
    table = Table(title=title)
    table.add_column("Component")
    table.add_column("Cost", justify="right")
    for name, amount in components.items():
        table.add_row(name.replace("_", " ").title(), _format_currency(amount))
    table.add_row("[bold]Total[/bold]", f"[bold]{_format_currency(sum(components.values()))}[/bold]")
    return table


def _projection_table(points: List[ProjectionPoint], with_value: bool) -> Table:
    table = Table(title="12-Month Cumulative Projection")
    table.add_column("Period")
    table.add_column("Cost", justify="right")
    if with_value:
        table.add_column("Value", justify="right")
        table.add_column("Net Gain", justify="right")
    for point in points:
        row = [point.period_label, _format_currency(point.cumulative_cost)]
        if with_value:
            row += [_format_currency(point.cumulative_value), _format_currency(point.cumulative_net_gain)]
        table.add_row(*row)
    return table


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """AI Economics Navigator CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    if ctx.invoked_subcommand is None:
        console.print("AI Economics Navigator - Use --help to see available commands")


@app.command()
def models():
    """List catalog models and their rates."""
    table = Table(title="Translation Models (per 1M characters)")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Provider")
    table.add_column("Rate", justify="right")
    for model_id in TRANSLATION_MODELS.ids():
        model = TRANSLATION_MODELS.get(model_id)
        table.add_row(model.id, model.display_name, model.provider, _format_currency(model.cost_per_million_chars))
    console.print(table)

    table = Table(title="Inference Models (per 1M tokens)")
    for column in ("ID", "Name", "Provider", "Input", "Output"):
        table.add_column(column)
    for model_id in INFERENCE_MODELS.ids():
        model = INFERENCE_MODELS.get(model_id)
        table.add_row(
            model.id, model.display_name, model.provider,
            _format_currency(model.input_rate), _format_currency(model.output_rate),
        )
    console.print(table)

    table = Table(title="Embedding Models (per 1M tokens)")
    for column in ("ID", "Rate", "Dimension"):
        table.add_column(column)
    for model_id in EMBEDDING_MODELS.ids():
        model = EMBEDDING_MODELS.get(model_id)
        table.add_row(model.id, _format_currency(model.cost_per_million_tokens), str(model.embedding_dimension))
    console.print(table)


@app.command()
def translation(
    config: Optional[str] = ConfigOption,
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Translation model ID"),
    documents: Optional[float] = typer.Option(None, "--documents", "-d", help="Number of documents"),
    chars: Optional[float] = typer.Option(None, "--chars", help="Characters per document"),
    growth: Optional[float] = typer.Option(None, "--growth", "-g", help="Monthly growth %"),
    languages: Optional[int] = typer.Option(None, "--languages", "-l", help="Language multiplier (1, 3, 10, 20)"),
    tier: Optional[str] = typer.Option(None, "--tier", "-t", help="Quality tier: none, basic, full"),
):
    """Estimate translation migration and recurring cost."""
    params = replace(
        _load_config(config).translation,
        **_overrides(
            model_id=model,
            document_count=documents,
            characters_per_document=chars,
            monthly_growth_percent=growth,
            language_multiplier=languages,
            quality_tier=tier,
        ),
    )
    try:
        result = compute_translation_costs(params)
    except ValueError as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    console.print("\n[bold]AI Translation Estimate[/bold]")
    console.print("-" * 40)
    console.print(f"Language scope: {result.language_multiplier} language(s)")
    console.print(f"Quality tier: {result.quality_tier.value}")
    console.print(f"Total initial characters: {result.total_initial_characters:,.0f}")
    console.print(_breakdown_table("Initial Setup", result.initial.to_dict()))
    console.print(_breakdown_table("Monthly Recurring", result.monthly.to_dict()))
    console.print(_projection_table(result.projection, with_value=False))
    console.print(f"Year-1 cumulative spend: {_format_currency(result.total_year1)}")


@app.command()
def rag(
    config: Optional[str] = ConfigOption,
    documents: Optional[float] = typer.Option(None, "--documents", "-d", help="Number of documents"),
    queries: Optional[float] = typer.Option(None, "--queries", "-q", help="Queries per month"),
    cache_hit_rate: Optional[float] = typer.Option(None, "--cache-hit-rate", help="Cache hit rate %"),
    reranker: Optional[bool] = typer.Option(None, "--reranker/--no-reranker", help="Enable reranking"),
):
    """Estimate RAG build, run and governance cost."""
    params = replace(
        _load_config(config).rag,
        **_overrides(
            document_count=documents,
            queries_per_month=queries,
            cache_hit_rate_percent=cache_hit_rate,
            reranker_enabled=reranker,
        ),
    )
    result = compute_rag_costs(params)

    console.print("\n[bold]RAG Lifecycle Estimate[/bold]")
    console.print("-" * 40)
    console.print(f"Chunks: {result.build.total_chunks:,}")
    console.print(f"Vector storage: {result.build.storage_size_gb:,.3f} GB")
    console.print(_breakdown_table("1. Build & Ingest (one-time)", result.build.costs.to_dict()))
    console.print(_breakdown_table("2. Run (monthly)", result.run.costs.to_dict()))
    console.print(_breakdown_table("3. Govern & Improve (monthly)", result.govern.costs.to_dict()))
    console.print(f"Unit cost per interaction: ${result.unit_cost_per_interaction:,.3f}")
    console.print(f"Annualized total: {_format_currency(result.annualized_total)}")
    console.print(_projection_table(result.projection, with_value=False))


@app.command()
def roi(
    config: Optional[str] = ConfigOption,
    users: Optional[float] = typer.Option(None, "--users", "-u", help="Number of users"),
    time_saved: Optional[float] = typer.Option(None, "--time-saved", help="Minutes saved per request"),
    ai_cost_from: AiCostSource = typer.Option(
        AiCostSource.PILLARS, "--ai-cost-from", help="Source of the monthly AI cost"
    ),
):
    """Simulate productivity ROI against AI operating cost."""
    scenario_config = _load_config(config)
    params = replace(
        scenario_config.roi,
        **_overrides(user_count=users, time_saved_per_request_minutes=time_saved),
    )

    ai_monthly_cost = None
    if ai_cost_from == AiCostSource.TRANSLATION:
        ai_monthly_cost = active_ai_monthly_cost(compute_translation_costs(scenario_config.translation))
    elif ai_cost_from == AiCostSource.RAG:
        ai_monthly_cost = active_ai_monthly_cost(compute_rag_costs(scenario_config.rag))

    result = compute_roi(params, ai_monthly_cost=ai_monthly_cost)

    console.print("\n[bold]Business ROI Simulation[/bold]")
    console.print("-" * 40)
    console.print(_breakdown_table("AI Cost Pillars (monthly)", result.pillars.to_dict()))
    console.print(f"Total AI monthly cost: {_format_currency(result.total_ai_monthly_cost)}")
    console.print(f"Monthly productivity value: {_format_currency(result.monthly_productivity_value)}")
    console.print(f"Net monthly gain: {_format_currency(result.net_monthly_gain)}")
    console.print(f"ROI ratio: {format_roi_ratio(result.roi_ratio)}")

    table = Table(title="Scenarios")
    table.add_column("Scenario")
    table.add_column("Net Monthly Gain", justify="right")
    table.add_column("Assumption")
    for variant in result.scenarios:
        table.add_row(variant.name, _format_currency(variant.net_monthly_gain), variant.description)
    console.print(table)

    sensitivity = result.sensitivity
    console.print(f"Break-even time saved: {sensitivity.break_even_minutes:,.2f} min/request")
    console.print(
        f"At {sensitivity.target_review_rate:.0f}% review rate, AI cost rises to "
        f"{_format_currency(sensitivity.total_cost_at_target_review)}"
    )
    console.print(
        f"At 60% adoption ({sensitivity.users_at_60_percent} users), net gain is "
        f"{_format_currency(sensitivity.net_gain_at_60_percent)}"
    )
    console.print(_projection_table(result.projection, with_value=True))


@app.command("export-csv")
def export_csv(
    output: str = typer.Argument(..., help="Destination CSV file"),
    config: Optional[str] = ConfigOption,
):
    """Export the translation estimate as CSV."""
    params = _load_config(config).translation
    try:
        path = write_translation_csv(output, params, compute_translation_costs(params))
    except (OSError, ValueError) as e:
        console.print(f"[red]Error exporting CSV:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    console.print(f"[green]✓[/] Translation estimate written to {path}")


@app.command()
def narrate(
    scenario: ScenarioKind = typer.Argument(..., help="translation, rag or roi"),
    config: Optional[str] = ConfigOption,
    monthly: bool = typer.Option(False, "--monthly", help="Also narrate the ROI projection month by month"),
):
    """Generate narrative commentary for a scenario."""
    scenario_config = _load_config(config)
    narrative_config = scenario_config.narrative

    if scenario == ScenarioKind.TRANSLATION:
        snapshot = compute_translation_costs(scenario_config.translation).to_snapshot()
    elif scenario == ScenarioKind.RAG:
        snapshot = compute_rag_costs(scenario_config.rag).to_snapshot()
    else:
        roi_result = compute_roi(scenario_config.roi)
        snapshot = [point.to_dict() for point in roi_result.projection]

    try:
        client = NarrativeClient(
            model=narrative_config.model,
            retries=narrative_config.retries,
            retry_delay=narrative_config.retry_delay_seconds,
        )
    except (OpenAIError, ValueError) as e:
        console.print(f"[red]Narrative client unavailable:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    scheduler = NarrativeScheduler(client.generate_commentary, debounce_seconds=narrative_config.debounce_seconds)
    text = scheduler.submit(scenario, snapshot).result() or ""
    console.print("\n[bold]AI Insight[/bold]")
    # Labelled lines are only split out for the translation brief
    for label, body in split_insight(text, parse_labels=scenario == ScenarioKind.TRANSLATION):
        if label:
            console.print(f"[bold]{escape(label)}[/bold]: {escape(body)}")
        else:
            console.print(escape(body))

    if scenario == ScenarioKind.ROI:
        console.print("\n[bold]Graph Insight[/bold]")
        console.print(escape(insight_or_placeholder(client.graph_insight(snapshot))))
        if monthly:
            console.print("\n[bold]Month by Month[/bold]")
            console.print(escape(insight_or_placeholder(client.monthly_narrative(snapshot))))


if __name__ == "__main__":
    app()
