import argparse
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from src.config.parameters import load_settings_file

from .indicators import (
    configure_evaluate_parser,
    configure_list_parser,
    configure_search_parser,
    run_evaluate_command,
    run_list_command,
    run_search_command,
)
from .logging_setup import setup_logging

DEFAULT_LOG_LEVEL = "WARNING"


def resolve_log_level(cli_level: Optional[str], config: Optional[Path]) -> str:
    """
    Pick the logging level for a CLI run.

    An explicit ``--log-level`` wins. Otherwise a ``log_level`` set in the
    settings file is used, and WARNING when neither is given. A settings
    file that cannot be loaded is left for the command to report.
    """
    if cli_level:
        return cli_level
    if config is not None:
        try:
            settings = load_settings_file(config)
        except (OSError, ValueError, ValidationError):
            return DEFAULT_LOG_LEVEL
        if "log_level" in settings.model_fields_set:
            return settings.log_level
    return DEFAULT_LOG_LEVEL


def main(args: Optional[list[str]] = None) -> int:
    """
    Main entry point for the 'indicators' CLI.
    """
    parser = argparse.ArgumentParser(
        description="Clinical indicator registry and evaluation"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: log_level from --config, else WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Append log records to this file",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Write the log file as one JSON object per line",
    )
    subparsers = parser.add_subparsers(
        dest="command", required=True, help="Subcommands"
    )

    # -------------------------------------------------------------------------
    # Subcommand: list
    # -------------------------------------------------------------------------
    list_parser = subparsers.add_parser(
        "list",
        help="List registered indicators",
        description="List every indicator in the registry.",
    )
    configure_list_parser(list_parser)

    # -------------------------------------------------------------------------
    # Subcommand: search
    # -------------------------------------------------------------------------
    search_parser = subparsers.add_parser(
        "search",
        help="Search indicators by name",
        description="Find indicators whose name equals or contains a string.",
    )
    configure_search_parser(search_parser)

    # -------------------------------------------------------------------------
    # Subcommand: evaluate
    # -------------------------------------------------------------------------
    evaluate_parser = subparsers.add_parser(
        "evaluate",
        help="Evaluate an indicator over a population",
        description="Evaluate one indicator over a patient CSV with optional parameter bindings.",
    )
    configure_evaluate_parser(evaluate_parser)

    # -------------------------------------------------------------------------
    # Parse & Execute
    # -------------------------------------------------------------------------
    parsed_args = parser.parse_args(args)
    setup_logging(
        resolve_log_level(parsed_args.log_level, parsed_args.config),
        log_file=parsed_args.log_file,
        use_json=parsed_args.json_logs,
    )

    if parsed_args.command == "list":
        return run_list_command(parsed_args)
    if parsed_args.command == "search":
        return run_search_command(parsed_args)
    if parsed_args.command == "evaluate":
        return run_evaluate_command(parsed_args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
