"""Integration tests for the indicator CLI."""

import pytest

from src.cli import main as cli_main
from src.cli.indicators import coerce_bindings, parse_param_args
from src.models.definitions import Parameter
from src.models.indicators import CohortIndicator


pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch):
    """Record logging setup instead of replacing the root logging handlers."""
    calls = []

    def record(level, log_file=None, use_json=False):
        calls.append({"level": level, "log_file": log_file, "use_json": use_json})

    monkeypatch.setattr(cli_main, "setup_logging", record)
    return calls


@pytest.fixture()
def population_csv(tmp_path, sample_population):
    """Write the sample population to CSV."""
    path = tmp_path / "population.csv"
    sample_population.to_csv(path, index=False)
    return path


def test_list_command(capsys):
    """Test listing the default indicators."""
    assert cli_main.main(["list"]) == 0
    output = capsys.readouterr().out
    assert "DQI1" in output
    assert "DQI4" in output


def test_search_command_no_match(capsys):
    """Test searching for an unknown name."""
    assert cli_main.main(["search", "zzz"]) == 0
    assert "No indicators match" in capsys.readouterr().out


def test_evaluate_command(capsys, population_csv):
    """Test evaluating a mapped default indicator."""
    code = cli_main.main(
        ["evaluate", "DQI2", "--population", str(population_csv), "--param", "month=Feb"]
    )

    assert code == 0
    output = capsys.readouterr().out
    assert "Result" in output
    assert "4" in output


def test_evaluate_unknown_indicator(capsys, population_csv):
    """Test evaluating a name that is not registered."""
    assert cli_main.main(["evaluate", "nope", "--population", str(population_csv)]) == 1
    assert "Unknown indicator" in capsys.readouterr().out


def test_evaluate_missing_population(capsys, tmp_path):
    """Test evaluating against a missing CSV file."""
    missing = tmp_path / "missing.csv"
    assert cli_main.main(["evaluate", "DQI1", "--population", str(missing)]) == 1
    assert "does not exist" in capsys.readouterr().out


def test_evaluate_with_config(capsys, tmp_path, population_csv):
    """Test settings from YAML reach the service."""
    config = tmp_path / "settings.yaml"
    config.write_text("strict_parameter_mapping: true\n", encoding="utf-8")

    code = cli_main.main(
        [
            "evaluate", "DQI1",
            "--population", str(population_csv),
            "--param", "month=Feb",
            "--config", str(config),
        ]
    )

    assert code == 1
    assert "Evaluation failed" in capsys.readouterr().out


def test_parse_param_args():
    """Test KEY=VALUE parsing."""
    assert parse_param_args(["month=Feb", " min_age = 18 "]) == {"month": "Feb", "min_age": "18"}

    with pytest.raises(ValueError, match="expected KEY=VALUE"):
        parse_param_args(["month"])


def test_coerce_bindings_uses_declared_types():
    """Test numeric parameters are converted, others kept as strings."""
    indicator = CohortIndicator(
        name="x",
        parameters=[Parameter("min_age", "Min age", int, 15), Parameter("month", "Month", str)],
    )

    assert coerce_bindings(indicator, {"min_age": "18", "month": "Feb"}) == {
        "min_age": 18,
        "month": "Feb",
    }
    assert coerce_bindings(indicator, {"min_age": "old"}) == {"min_age": "old"}


def test_evaluate_empty_population(capsys, tmp_path):
    """Test an empty CSV is reported instead of raising."""
    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")

    assert cli_main.main(["evaluate", "DQI1", "--population", str(empty)]) == 1
    assert "Could not read population" in capsys.readouterr().out


def test_evaluate_with_date(capsys, tmp_path):
    """Test --date sets the evaluation date shown with the result."""
    population = tmp_path / "enrolled.csv"
    population.write_text(
        "program,enrolled_on\nHIV,2024-01-05\nHIV,2024-02-10\nTB,2024-01-20\n",
        encoding="utf-8",
    )

    code = cli_main.main(
        [
            "evaluate", "DQI1",
            "--population", str(population),
            "--date", "2024-01-31",
        ]
    )

    assert code == 0
    output = capsys.readouterr().out
    assert "As of" in output
    assert "2024-01-31" in output


def test_evaluate_rejects_malformed_date(population_csv):
    """Test --date must be an ISO date."""
    with pytest.raises(SystemExit):
        cli_main.main(["evaluate", "DQI1", "--population", str(population_csv), "--date", "31/01/2024"])


def test_log_level_defaults_to_warning(logging_calls):
    """Test runs without --log-level or a config log at WARNING."""
    assert cli_main.main(["list"]) == 0
    assert logging_calls == [{"level": "WARNING", "log_file": None, "use_json": False}]


def test_log_level_from_config(logging_calls, tmp_path):
    """Test log_level in the settings file applies when --log-level is absent."""
    config = tmp_path / "settings.yaml"
    config.write_text("log_level: debug\n", encoding="utf-8")

    assert cli_main.main(["list", "--config", str(config)]) == 0
    assert logging_calls[0]["level"] == "DEBUG"


def test_log_level_option_overrides_config(logging_calls, tmp_path):
    """Test an explicit --log-level wins over the settings file."""
    config = tmp_path / "settings.yaml"
    config.write_text("log_level: DEBUG\n", encoding="utf-8")

    assert cli_main.main(["--log-level", "ERROR", "list", "--config", str(config)]) == 0
    assert logging_calls[0]["level"] == "ERROR"


def test_config_without_log_level_keeps_warning(logging_calls, tmp_path):
    """Test a settings file that leaves log_level unset does not change the level."""
    config = tmp_path / "settings.yaml"
    config.write_text("strict_parameter_mapping: true\n", encoding="utf-8")

    assert cli_main.main(["list", "--config", str(config)]) == 0
    assert logging_calls[0]["level"] == "WARNING"


def test_log_file_options_reach_logging_setup(logging_calls, tmp_path):
    """Test --log-file and --json-logs are passed to logging setup."""
    log_file = tmp_path / "logs" / "indicators.jsonl"

    assert cli_main.main(["--log-file", str(log_file), "--json-logs", "list"]) == 0
    assert logging_calls == [{"level": "WARNING", "log_file": log_file, "use_json": True}]
