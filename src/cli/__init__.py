"""Command-line interface modules.

This package provides CLI commands for inspecting and evaluating indicators.

Available Commands:
-------------------

main.py
    Entry point with subcommands

    Usage:
        python -m src.cli.main [--log-level LEVEL] <command> [options]

    Commands:
        list [--include-retired]: Show all registered indicators
        search NAME [--exact]: Show indicators whose name contains NAME
        evaluate NAME --population CSV [--param KEY=VALUE ...]:
            Evaluate one indicator over a patient CSV

    Common options:
        --config PATH: YAML settings file
"""
