"""Prioritization and recommendation CLI commands.

Commands:
    insightflow recommend prioritize insights.json --purpose daily-review --json
    insightflow recommend generate insights.json --domain wellness --max-recommendations 5

Insight files hold either a JSON list of insight records or an object with
an ``insights`` list. Records may use snake_case or camelCase keys.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from insightflow.configuration.settings import Settings, load_settings
from insightflow.errors import InsightflowError, InvalidConfigError
from insightflow.errors.user_messages import format_error_for_cli
from insightflow.insights.prioritization import (
    InsightPrioritizationEngine,
    PrioritizationEngineFactory,
    PrioritizationResult,
)
from insightflow.models.context import PrioritizationContext
from insightflow.models.enums import Audience, Purpose
from insightflow.models.insight import Insight
from insightflow.models.recommendation import RecommendationGenerationResult
from insightflow.recommendations.factory import DOMAIN_BUILDERS, RecommendationGeneratorFactory
from insightflow.recommendations.generator import RecommendationGenerator

logger = logging.getLogger(__name__)

recommend_app = typer.Typer(help="Insight prioritization and recommendation commands")
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_insights(path: Path) -> List[Insight]:
    """Read insight records from a JSON file."""
    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(
            f"Insights file is not valid JSON: {exc.msg}", details={"path": str(path)}
        ) from exc

    records = payload.get("insights") if isinstance(payload, dict) else payload
    if not isinstance(records, list):
        raise InvalidConfigError(
            "Insights file must contain a list of insights", details={"path": str(path)}
        )
    try:
        return [Insight.from_dict(record) for record in records]
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidConfigError(
            f"Invalid insight record: {exc}", details={"path": str(path)}
        ) from exc


def _load_settings(config_path: Optional[Path]) -> Optional[Settings]:
    return load_settings(config_path) if config_path is not None else None


def _error_exit(error: Exception, output_json: bool) -> typer.Exit:
    """Report ``error`` and return the exit to raise."""
    logger.debug(f"Command failed: {error}", exc_info=True)
    if output_json:
        code = getattr(error, "code", "ERROR")
        print(json.dumps({"error": str(error), "code": code}))
    else:
        console.print(f"[red]{format_error_for_cli(error)}[/red]")
    return typer.Exit(1)


def _print_prioritization(result: PrioritizationResult) -> None:
    table = Table(title=f"Selected insights ({len(result.selected_insights)} of {result.total_insights_analyzed})")
    table.add_column("Rank", justify="right")
    table.add_column("Insight")
    table.add_column("Category")
    table.add_column("Type")
    table.add_column("Score", justify="right")

    scores = {score.insight_id: score for score in result.all_scores}
    for insight in result.selected_insights:
        score = scores[insight.id]
        table.add_row(
            str(score.rank),
            insight.title or insight.id,
            insight.category.value,
            insight.type.value,
            f"{score.total_score:.3f}",
        )
    console.print(table)
    console.print(
        f"Average score: {result.average_score:.3f}  "
        f"Diversity: {result.diversity_index:.3f}  "
        f"Time: {result.processing_time:.1f}ms"
    )
    _print_warnings(result.warnings)


def _print_recommendations(result: RecommendationGenerationResult) -> None:
    table = Table(title=f"Recommendations ({result.recommendations_generated})")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Urgency")
    table.add_column("Confidence", justify="right")
    table.add_column("Method")

    quick_wins = set(result.quick_wins)
    for index, rec in enumerate(result.recommendations, 1):
        title = f"{rec.title} [green](quick win)[/green]" if rec.id in quick_wins else rec.title
        table.add_row(
            str(index),
            title,
            rec.type.value,
            rec.urgency.value,
            f"{rec.confidence:.2f}",
            rec.generation_method.value,
        )
    console.print(table)

    for cluster in result.clusters:
        console.print(f"[bold]{cluster.theme}[/bold]: {len(cluster.recommendations)} related")
    console.print(
        f"Opportunities: {result.opportunities_processed}/{result.total_opportunities}  "
        f"Diversity: {result.diversity_score:.2f}  "
        f"Time: {result.generation_time:.1f}ms"
    )
    _print_warnings(result.warnings)


def _print_warnings(warnings: List[str]) -> None:
    for warning in warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")


@recommend_app.command("prioritize")
def prioritize(
    insights_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Insights JSON file"),
    purpose: Purpose = typer.Option(Purpose.WEEKLY_SUMMARY, "--purpose", "-p", help="Review purpose"),
    audience: Audience = typer.Option(Audience.SELF, "--audience", "-a", help="Intended audience"),
    max_insights: Optional[int] = typer.Option(None, "--max-insights", "-n", help="Selection size"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Settings JSON file"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Rank insights and select the most valuable subset."""
    _configure_logging(verbose)
    try:
        insights = _load_insights(insights_file)
        settings = _load_settings(config_path)
        if settings is not None:
            engine = InsightPrioritizationEngine(settings.prioritization)
        else:
            engine = PrioritizationEngineFactory.create_for_purpose(purpose)

        options: Dict[str, Any] = {}
        if max_insights is not None:
            options["max_insights"] = max_insights

        result = engine.prioritize_insights(
            insights,
            PrioritizationContext(purpose=purpose, audience=audience),
            options or None,
        )
    except (InsightflowError, OSError) as exc:
        raise _error_exit(exc, output_json) from exc

    if output_json:
        print(json.dumps(result.to_dict()))
    else:
        _print_prioritization(result)


@recommend_app.command("generate")
def generate(
    insights_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Insights JSON file"),
    domain: Optional[str] = typer.Option(
        None, "--domain", "-d", help=f"Preset domain: {', '.join(sorted(DOMAIN_BUILDERS))}"
    ),
    max_recommendations: Optional[int] = typer.Option(
        None, "--max-recommendations", "-n", help="Maximum recommendations"
    ),
    prioritize_first: bool = typer.Option(
        True, "--prioritize/--no-prioritize", help="Prioritize insights before generating"
    ),
    purpose: Purpose = typer.Option(Purpose.WEEKLY_SUMMARY, "--purpose", "-p", help="Review purpose"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Settings JSON file"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Generate ranked recommendations from insights."""
    _configure_logging(verbose)
    if domain is not None and domain not in DOMAIN_BUILDERS:
        raise typer.BadParameter(
            f"Unknown domain '{domain}'. Expected one of: {', '.join(sorted(DOMAIN_BUILDERS))}",
            param_hint="--domain",
        )
    try:
        insights = _load_insights(insights_file)
        settings = _load_settings(config_path)

        if prioritize_first:
            engine = (
                InsightPrioritizationEngine(settings.prioritization)
                if settings is not None
                else PrioritizationEngineFactory.create_for_purpose(purpose)
            )
            selection = engine.prioritize_insights(insights, PrioritizationContext(purpose=purpose))
            insights = selection.selected_insights

        if domain is not None:
            generator = RecommendationGeneratorFactory.create_for_domain(domain)
        elif settings is not None:
            generator = RecommendationGenerator(settings.generation)
        else:
            generator = RecommendationGenerator()

        overrides: Dict[str, Any] = {}
        if max_recommendations is not None:
            overrides["max_recommendations"] = max_recommendations

        result = asyncio.run(
            generator.generate_recommendations(insights, config=overrides or None)
        )
    except (InsightflowError, OSError) as exc:
        raise _error_exit(exc, output_json) from exc

    if output_json:
        print(json.dumps(result.to_dict()))
    else:
        _print_recommendations(result)
