"""CLI commands for listing, searching and evaluating indicators."""

import argparse
import logging
from datetime import date
from pathlib import Path

import pandas as pd
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.config.parameters import ServiceSettings, load_settings_file
from src.evaluation.context import EvaluationContext
from src.evaluation.parameter import Mapped
from src.indicators.service import IndicatorService
from src.models.exceptions import APIError, HandlerResolutionError
from src.models.indicators import Indicator

logger = logging.getLogger(__name__)
console = Console()


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the options every indicator command accepts."""
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML settings file (optional)",
    )


def configure_list_parser(parser: argparse.ArgumentParser) -> None:
    """Configure the 'list' subcommand."""
    add_common_arguments(parser)
    parser.add_argument(
        "--include-retired",
        action="store_true",
        help="Include retired indicators",
    )


def configure_search_parser(parser: argparse.ArgumentParser) -> None:
    """Configure the 'search' subcommand."""
    add_common_arguments(parser)
    parser.add_argument("name", help="Name or name fragment to search for")
    parser.add_argument(
        "--exact",
        action="store_true",
        help="Only return exact (case-sensitive) name matches",
    )


def configure_evaluate_parser(parser: argparse.ArgumentParser) -> None:
    """Configure the 'evaluate' subcommand."""
    add_common_arguments(parser)
    parser.add_argument("name", help="Exact name of the indicator to evaluate")
    parser.add_argument(
        "--population",
        type=Path,
        required=True,
        help="CSV file with one row per patient",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        metavar="YYYY-MM-DD",
        help="Evaluation date, available to queries as @evaluation_date",
    )
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Parameter binding for the indicator (repeatable)",
    )


def parse_param_args(values: list[str]) -> dict[str, str]:
    """
    Parse KEY=VALUE command-line bindings.

    Args:
        values: Raw ``--param`` values.

    Returns:
        Dict of parameter name to string value.

    Raises:
        ValueError: If a value has no '=' or an empty key.

    Examples:
        >>> parse_param_args(["month=Feb", "min_age=18"])
        {'month': 'Feb', 'min_age': '18'}
    """
    bindings: dict[str, str] = {}
    for value in values:
        key, sep, raw = value.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid parameter binding '{value}', expected KEY=VALUE")
        bindings[key.strip()] = raw.strip()
    return bindings


def coerce_bindings(indicator: Indicator, bindings: dict[str, str]) -> dict:
    """Convert string bindings to the declared parameter types where possible."""
    coerced: dict = {}
    for name, raw in bindings.items():
        parameter = indicator.get_parameter(name)
        if parameter is not None and parameter.type in (int, float):
            try:
                coerced[name] = parameter.type(raw)
                continue
            except ValueError:
                logger.warning("Could not convert %s=%s to %s", name, raw, parameter.type.__name__)
        coerced[name] = raw
    return coerced


def build_service(config: Path | None) -> IndicatorService:
    """Create an indicator service from an optional settings file."""
    settings = load_settings_file(config) if config else ServiceSettings()
    return IndicatorService(settings)


def _indicator_table(title: str, indicators: list[Indicator]) -> Table:
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Type")
    table.add_column("Parameters")
    table.add_column("UUID", style="dim")
    for indicator in indicators:
        table.add_row(
            indicator.name,
            indicator.description,
            indicator.definition_type.name,
            ", ".join(indicator.parameter_names) or "-",
            indicator.uuid or "-",
        )
    return table


def run_list_command(args: argparse.Namespace) -> int:
    """Print every registered indicator."""
    try:
        service = build_service(args.config)
    except (OSError, ValueError, ValidationError) as e:
        console.print(f"[red]Error: Could not load settings: {escape(str(e))}[/red]")
        return 1

    indicators = service.get_all_indicators(args.include_retired)
    console.print(_indicator_table("Indicators", indicators))
    return 0


def run_search_command(args: argparse.Namespace) -> int:
    """Print indicators matching a name."""
    try:
        service = build_service(args.config)
    except (OSError, ValueError, ValidationError) as e:
        console.print(f"[red]Error: Could not load settings: {escape(str(e))}[/red]")
        return 1

    indicators = service.get_indicators(args.name, args.exact)
    if not indicators:
        console.print(f"[yellow]No indicators match '{args.name}'[/yellow]")
        return 0
    console.print(_indicator_table(f"Indicators matching '{args.name}'", indicators))
    return 0


def run_evaluate_command(args: argparse.Namespace) -> int:
    """Evaluate one indicator over a population CSV."""
    try:
        service = build_service(args.config)
        bindings = parse_param_args(args.param)
    except (OSError, ValueError, ValidationError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    matches = service.get_indicators(args.name, exact_match_only=True)
    if not matches:
        console.print(f"[red]Error: Unknown indicator '{args.name}'[/red]")
        return 1
    indicator = matches[0]

    if not args.population.exists():
        console.print(f"[red]Error: Population file does not exist: {args.population}[/red]")
        return 1
    try:
        population = pd.read_csv(args.population)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: Could not read population: {escape(str(e))}[/red]")
        return 1

    context = EvaluationContext.root(
        service.settings.default_parameters,
        base_population=population,
        evaluation_date=args.date,
    )
    target = Mapped(indicator, coerce_bindings(indicator, bindings)) if bindings else indicator

    try:
        result = service.evaluate(target, context)
    except (APIError, HandlerResolutionError) as e:
        console.print(f"[red]✗ Evaluation failed: {escape(str(e))}[/red]")
        logger.error("Evaluation of '%s' failed", indicator.name, exc_info=True)
        return 1

    table = Table(title=f"Indicator: {indicator.name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Description", indicator.description)
    table.add_row("Population", str(len(population)))
    if args.date is not None:
        table.add_row("As of", args.date.isoformat())
    for name, value in result.context.effective_parameters().items():
        table.add_row(f"param: {name}", str(value))
    table.add_row("Result", str(result.value))
    console.print(table)
    return 0
